"""Conversation behaviour: context bounds, summarization, personas, prompts."""

from __future__ import annotations

import os

from ..helpers.env import env_flag, parse_persona_presets


# History bounds (turns, not tokens)
MAX_CONTEXT_MESSAGES = int(os.getenv("MAX_CONTEXT_MESSAGES", "12"))
SUMMARY_TRIGGER = int(os.getenv("SUMMARY_TRIGGER", "10"))
SUMMARY_TEMPERATURE = float(os.getenv("SUMMARY_TEMPERATURE", "0.2"))
DEEP_TEMPERATURE_DROP = float(os.getenv("DEEP_TEMPERATURE_DROP", "0.3"))

LOG_PROMPTS = env_flag("LOG_PROMPTS", False)
LOG_RESPONSES = env_flag("LOG_RESPONSES", False)

SUMMARY_INSTRUCTION = (
    "Summarize the following conversation. Keep key facts, instructions and "
    "context. Stay under 200 words."
)
SUMMARY_PREFIX = "Conversation summary: "
PLAIN_TEXT_PROMPT = (
    "Answer in plain text only. Do not use Markdown, code fences, tables or "
    "headings; use short paragraphs and simple numbered lines instead."
)
DEEP_THINK_PROMPT = (
    "Think the question through step by step before answering: restate the "
    "problem, weigh the alternatives, check for mistakes, then give a clear "
    "final answer. Only output the final reasoning summary and the answer."
)

DEFAULT_PERSONAS: dict[str, str] = {
    "default": (
        "You are a chat assistant backed by a DeepSeek model. Answer accurately "
        "and concisely and give short steps when needed."
    ),
    "friendly": "Answer in a relaxed, warm tone suited to casual chat. Stay positive and polite.",
    "expert": (
        "Answer as a technical consultant: give causes, steps and risks in a "
        "structured way and avoid unsupported claims."
    ),
    "concise": "Keep answers extremely short. One sentence when possible, a list when necessary.",
}

PERSONA_PRESETS = parse_persona_presets(os.getenv("PERSONA_PRESETS"), DEFAULT_PERSONAS)
DEFAULT_PERSONA = os.getenv("DEFAULT_PERSONA") or None


__all__ = [
    "MAX_CONTEXT_MESSAGES",
    "SUMMARY_TRIGGER",
    "SUMMARY_TEMPERATURE",
    "DEEP_TEMPERATURE_DROP",
    "LOG_PROMPTS",
    "LOG_RESPONSES",
    "SUMMARY_INSTRUCTION",
    "SUMMARY_PREFIX",
    "PLAIN_TEXT_PROMPT",
    "DEEP_THINK_PROMPT",
    "DEFAULT_PERSONAS",
    "PERSONA_PRESETS",
    "DEFAULT_PERSONA",
]
