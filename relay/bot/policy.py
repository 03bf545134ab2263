"""Access and filtering policy applied to inbound messages."""

from __future__ import annotations

import re
from dataclasses import field, dataclass

from ..config import (
    ADMIN_IDS,
    BOT_NAME,
    BOT_PREFIX,
    DEEPSEEK_MODEL,
    ONEBOT_WS_URL,
    SUMMARY_TRIGGER,
    WHITELIST_MODE,
    BLOCKED_PATTERNS,
    LOG_CHAT_HISTORY,
    ALLOW_GROUP_PLAIN,
    SEARCH_MAX_LIMIT,
    MAX_CONTEXT_MESSAGES,
    SEARCH_DEFAULT_LIMIT,
    ONEBOT_MESSAGE_CHUNK_CHARS,
)


@dataclass(slots=True)
class BotPolicy:
    """Identity, access rules and reply formatting of the bot."""

    bot_name: str = BOT_NAME
    prefix: str = BOT_PREFIX
    admins: frozenset[str] = ADMIN_IDS
    whitelist_mode: bool = WHITELIST_MODE
    allow_group_plain: bool = ALLOW_GROUP_PLAIN
    blocked_patterns: tuple[re.Pattern[str], ...] = field(default_factory=lambda: BLOCKED_PATTERNS)
    log_chat_history: bool = LOG_CHAT_HISTORY
    chunk_chars: int = ONEBOT_MESSAGE_CHUNK_CHARS
    search_default_limit: int = SEARCH_DEFAULT_LIMIT
    search_max_limit: int = SEARCH_MAX_LIMIT
    # shown by the config command
    endpoint: str = ONEBOT_WS_URL
    model: str = DEEPSEEK_MODEL
    max_context_messages: int = MAX_CONTEXT_MESSAGES
    summary_trigger: int = SUMMARY_TRIGGER

    def is_admin(self, user_id: str) -> bool:
        return user_id in self.admins

    def blocked_pattern(self, text: str) -> re.Pattern[str] | None:
        """Return the first blocked pattern found in ``text``."""
        for pattern in self.blocked_patterns:
            if pattern.search(text):
                return pattern
        return None


__all__ = ["BotPolicy"]
