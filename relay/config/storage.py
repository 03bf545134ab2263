"""Persistence configuration values."""

import os
from pathlib import Path

from ..helpers.env import env_flag


DATA_DIR = Path(os.getenv("DATA_DIR", "data")).resolve()
STATE_FILE = DATA_DIR / "state.json"
DATABASE_FILE = Path(os.getenv("DATABASE_FILE", str(DATA_DIR / "relay.sqlite3")))

# Persist per-channel persona/summary across restarts
PERSIST_SESSIONS = env_flag("PERSIST_SESSIONS", True)
# Archive inbound chat lines for /search
LOG_CHAT_HISTORY = env_flag("LOG_CHAT_HISTORY", False)

SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", "10"))
SEARCH_MAX_LIMIT = int(os.getenv("SEARCH_MAX_LIMIT", "50"))


__all__ = [
    "DATA_DIR",
    "STATE_FILE",
    "DATABASE_FILE",
    "PERSIST_SESSIONS",
    "LOG_CHAT_HISTORY",
    "SEARCH_DEFAULT_LIMIT",
    "SEARCH_MAX_LIMIT",
]
