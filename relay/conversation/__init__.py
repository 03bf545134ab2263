"""Conversation engine: per-channel memory, summarization, personas."""

from .manager import ConversationManager
from .settings import ConversationSettings
from .prompt import build_reply_turns, build_summary_turns, serialize_history

__all__ = [
    "ConversationManager",
    "ConversationSettings",
    "build_reply_turns",
    "build_summary_turns",
    "serialize_history",
]
