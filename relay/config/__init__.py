"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- onebot: websocket endpoint, identity, reconnect and action timeouts
- llm: chat-completions backend settings
- chat: context bounds, summarization, personas and prompt texts
- limits: fixed-window admission limits
- access: admins, allow/deny seeds, filtering policy
- storage: data directory and persistence toggles
- server: HTTP health/status endpoint binding

Parsing functions live in relay/helpers/.
"""

from .onebot import (
    ONEBOT_WS_URL,
    ONEBOT_ACCESS_TOKEN,
    BOT_SELF_ID,
    ONEBOT_RECONNECT_MS,
    ONEBOT_ACTION_TIMEOUT_MS,
    ONEBOT_MESSAGE_CHUNK_CHARS,
)
from .llm import (
    DEEPSEEK_API_KEY,
    DEEPSEEK_BASE_URL,
    DEEPSEEK_MODEL,
    DEEPSEEK_REASONER_MODEL,
    DEEPSEEK_TEMPERATURE,
    DEEPSEEK_MAX_TOKENS,
    DEEPSEEK_SUMMARY_TOKENS,
    DEEPSEEK_TIMEOUT_MS,
    DEEPSEEK_FORCE_PLAIN_TEXT,
    SYSTEM_PROMPT,
)
from .chat import (
    MAX_CONTEXT_MESSAGES,
    SUMMARY_TRIGGER,
    SUMMARY_TEMPERATURE,
    DEEP_TEMPERATURE_DROP,
    LOG_PROMPTS,
    LOG_RESPONSES,
    SUMMARY_INSTRUCTION,
    SUMMARY_PREFIX,
    PLAIN_TEXT_PROMPT,
    DEEP_THINK_PROMPT,
    PERSONA_PRESETS,
    DEFAULT_PERSONA,
)
from .limits import (
    USER_RATE_LIMIT,
    GROUP_RATE_LIMIT,
    GLOBAL_RATE_LIMIT,
    RATE_LIMIT_WINDOW_SECONDS,
    GLOBAL_RATE_KEY,
)
from .access import (
    BOT_NAME,
    BOT_PREFIX,
    ADMIN_IDS,
    ALLOWLIST_SEED,
    DENYLIST_SEED,
    WHITELIST_MODE,
    ALLOW_GROUP_PLAIN,
    BLOCKED_PATTERNS,
)
from .storage import (
    DATA_DIR,
    STATE_FILE,
    DATABASE_FILE,
    PERSIST_SESSIONS,
    LOG_CHAT_HISTORY,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MAX_LIMIT,
)
from .server import HOST, PORT, SHUTDOWN_GRACE_S

__all__ = [
    # onebot
    "ONEBOT_WS_URL",
    "ONEBOT_ACCESS_TOKEN",
    "BOT_SELF_ID",
    "ONEBOT_RECONNECT_MS",
    "ONEBOT_ACTION_TIMEOUT_MS",
    "ONEBOT_MESSAGE_CHUNK_CHARS",
    # llm
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
    # chat
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
    "PERSONA_PRESETS",
    "DEFAULT_PERSONA",
    # limits
    "USER_RATE_LIMIT",
    "GROUP_RATE_LIMIT",
    "GLOBAL_RATE_LIMIT",
    "RATE_LIMIT_WINDOW_SECONDS",
    "GLOBAL_RATE_KEY",
    # access
    "BOT_NAME",
    "BOT_PREFIX",
    "ADMIN_IDS",
    "ALLOWLIST_SEED",
    "DENYLIST_SEED",
    "WHITELIST_MODE",
    "ALLOW_GROUP_PLAIN",
    "BLOCKED_PATTERNS",
    # storage
    "DATA_DIR",
    "STATE_FILE",
    "DATABASE_FILE",
    "PERSIST_SESSIONS",
    "LOG_CHAT_HISTORY",
    "SEARCH_DEFAULT_LIMIT",
    "SEARCH_MAX_LIMIT",
    # server
    "HOST",
    "PORT",
    "SHUTDOWN_GRACE_S",
]
