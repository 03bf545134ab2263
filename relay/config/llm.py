"""Chat-completions backend configuration."""

import os

from ..helpers.env import env_flag


DEEPSEEK_API_KEY = os.getenv("DEEPSEEK_API_KEY", "")
DEEPSEEK_BASE_URL = (os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com") or "").rstrip("/")
DEEPSEEK_MODEL = os.getenv("DEEPSEEK_MODEL", "deepseek-chat")
# Alternate model for /deep requests; empty falls back to DEEPSEEK_MODEL
DEEPSEEK_REASONER_MODEL = os.getenv("DEEPSEEK_REASONER_MODEL", "")

DEEPSEEK_TEMPERATURE = float(os.getenv("DEEPSEEK_TEMPERATURE", "0.8"))
DEEPSEEK_MAX_TOKENS = int(os.getenv("DEEPSEEK_MAX_TOKENS", "2048"))
DEEPSEEK_SUMMARY_TOKENS = int(os.getenv("DEEPSEEK_SUMMARY_TOKENS", "512"))
DEEPSEEK_TIMEOUT_MS = int(os.getenv("DEEPSEEK_TIMEOUT_MS", "30000"))

# Ask the model to answer without markdown (chat clients render it verbatim)
DEEPSEEK_FORCE_PLAIN_TEXT = env_flag("DEEPSEEK_FORCE_PLAIN_TEXT", True)

SYSTEM_PROMPT = os.getenv(
    "SYSTEM_PROMPT",
    "You are the assistant of a group chat. Stay polite and concise, refuse "
    "illegal or harmful requests, and point out risks when relevant.",
)


__all__ = [
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_BASE_URL",
    "DEEPSEEK_MODEL",
    "DEEPSEEK_REASONER_MODEL",
    "DEEPSEEK_TEMPERATURE",
    "DEEPSEEK_MAX_TOKENS",
    "DEEPSEEK_SUMMARY_TOKENS",
    "DEEPSEEK_TIMEOUT_MS",
    "DEEPSEEK_FORCE_PLAIN_TEXT",
    "SYSTEM_PROMPT",
]
