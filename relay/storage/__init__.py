"""Persistence collaborators: JSON state, SQLite sessions and message archive."""

from .database import open_database
from .state_store import UsageStore, JsonStateStore
from .sqlite_message_store import SqliteMessageStore
from .sqlite_session_store import SqliteSessionStore
from .session_store import SessionMeta, SessionStore, NullSessionStore
from .message_store import MessageStore, SearchResult, MessageLogEntry, NullMessageStore

__all__ = [
    "JsonStateStore",
    "MessageLogEntry",
    "MessageStore",
    "NullMessageStore",
    "NullSessionStore",
    "SearchResult",
    "SessionMeta",
    "SessionStore",
    "SqliteMessageStore",
    "SqliteSessionStore",
    "UsageStore",
    "open_database",
]
