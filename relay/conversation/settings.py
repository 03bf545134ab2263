"""Tunable conversation engine settings."""

from __future__ import annotations

from dataclasses import field, dataclass

from ..config import (
    LOG_PROMPTS,
    LOG_RESPONSES,
    SYSTEM_PROMPT,
    DEEPSEEK_MODEL,
    DEFAULT_PERSONA,
    SUMMARY_PREFIX,
    SUMMARY_TRIGGER,
    PERSONA_PRESETS,
    DEEP_THINK_PROMPT,
    PLAIN_TEXT_PROMPT,
    SUMMARY_INSTRUCTION,
    SUMMARY_TEMPERATURE,
    DEEPSEEK_MAX_TOKENS,
    DEEPSEEK_TEMPERATURE,
    MAX_CONTEXT_MESSAGES,
    DEEP_TEMPERATURE_DROP,
    DEEPSEEK_REASONER_MODEL,
    DEEPSEEK_SUMMARY_TOKENS,
    DEEPSEEK_FORCE_PLAIN_TEXT,
)


@dataclass(slots=True)
class ConversationSettings:
    """Context bounds, sampling parameters and prompt texts.

    Defaults come from ``relay.config``; tests override fields directly.
    """

    max_context_messages: int = MAX_CONTEXT_MESSAGES
    summary_trigger: int = SUMMARY_TRIGGER
    system_prompt: str = SYSTEM_PROMPT
    model: str = DEEPSEEK_MODEL
    reasoner_model: str = DEEPSEEK_REASONER_MODEL
    temperature: float = DEEPSEEK_TEMPERATURE
    max_tokens: int = DEEPSEEK_MAX_TOKENS
    summary_max_tokens: int = DEEPSEEK_SUMMARY_TOKENS
    summary_temperature: float = SUMMARY_TEMPERATURE
    deep_temperature_drop: float = DEEP_TEMPERATURE_DROP
    force_plain_text: bool = DEEPSEEK_FORCE_PLAIN_TEXT
    summary_instruction: str = SUMMARY_INSTRUCTION
    summary_prefix: str = SUMMARY_PREFIX
    plain_text_prompt: str = PLAIN_TEXT_PROMPT
    deep_think_prompt: str = DEEP_THINK_PROMPT
    persona_presets: dict[str, str] = field(default_factory=lambda: dict(PERSONA_PRESETS))
    default_persona: str | None = DEFAULT_PERSONA
    log_prompts: bool = LOG_PROMPTS
    log_responses: bool = LOG_RESPONSES


__all__ = ["ConversationSettings"]
