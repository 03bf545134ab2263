"""Shared helper functions (kept out of the declarative config modules)."""

from .env import env_flag, parse_list, parse_patterns, parse_persona_presets

__all__ = ["env_flag", "parse_list", "parse_patterns", "parse_persona_presets"]
