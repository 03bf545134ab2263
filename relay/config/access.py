"""Access control and inbound filtering configuration."""

import os

from ..helpers.env import env_flag, parse_list, parse_patterns


BOT_NAME = os.getenv("BOT_NAME", "DeepSeek Bot")
BOT_PREFIX = os.getenv("BOT_PREFIX", "/") or "/"

ADMIN_IDS = frozenset(parse_list(os.getenv("ADMIN_IDS")))
ALLOWLIST_SEED = frozenset(parse_list(os.getenv("ALLOWLIST")))
DENYLIST_SEED = frozenset(parse_list(os.getenv("DENYLIST")))

# Only allowlisted users (and admins) may talk to the bot
WHITELIST_MODE = env_flag("WHITELIST_MODE", False)

# Answer group messages that do not mention the bot
ALLOW_GROUP_PLAIN = env_flag("ALLOW_GROUP_PLAIN", False)

BLOCKED_PATTERNS = tuple(parse_patterns(os.getenv("BLOCKED_PATTERNS")))


__all__ = [
    "BOT_NAME",
    "BOT_PREFIX",
    "ADMIN_IDS",
    "ALLOWLIST_SEED",
    "DENYLIST_SEED",
    "WHITELIST_MODE",
    "ALLOW_GROUP_PLAIN",
    "BLOCKED_PATTERNS",
]
