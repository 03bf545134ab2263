"""Environment helper utilities.

Provides the parsing functions used by the declarative ``relay.config``
modules: boolean flags, comma-separated id lists, regex block lists and the
JSON persona preset override.
"""

from __future__ import annotations

import os
import re
import json
import logging

logger = logging.getLogger(__name__)


def env_flag(name: str, default: bool) -> bool:
    """Return True/False for typical truthy env encodings."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_list(raw: str | None) -> list[str]:
    """Split a comma-separated value into trimmed, non-empty items."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_patterns(raw: str | None) -> list[re.Pattern[str]]:
    """Compile comma-separated case-insensitive patterns, skipping bad ones."""
    patterns: list[re.Pattern[str]] = []
    for item in parse_list(raw):
        try:
            patterns.append(re.compile(item, re.IGNORECASE))
        except re.error as exc:
            logger.warning("Ignoring invalid blocked pattern %r: %s", item, exc)
    return patterns


def parse_persona_presets(raw: str | None, defaults: dict[str, str]) -> dict[str, str]:
    """Merge a JSON object of persona presets over the built-in ones.

    Invalid JSON (or a non-object) logs a warning and keeps the defaults.
    """
    presets = dict(defaults)
    if not raw:
        return presets
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("PERSONA_PRESETS is not valid JSON, using defaults: %s", exc)
        return presets
    if not isinstance(parsed, dict):
        logger.warning("PERSONA_PRESETS must be a JSON object, using defaults")
        return presets
    presets.update({str(name): str(text) for name, text in parsed.items()})
    return presets


__all__ = ["env_flag", "parse_list", "parse_patterns", "parse_persona_presets"]
