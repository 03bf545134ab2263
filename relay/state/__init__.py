"""Plain dataclasses shared across the relay."""

from .usage import Usage
from .connection import ConnectionState
from .message import MessageSegment, ParsedMessage
from .conversation import ChatTurn, ConversationState
from .events import MessageEvent, ReadyEvent, TransportEvent

__all__ = [
    "ChatTurn",
    "ConnectionState",
    "ConversationState",
    "MessageEvent",
    "MessageSegment",
    "ParsedMessage",
    "ReadyEvent",
    "TransportEvent",
    "Usage",
]
