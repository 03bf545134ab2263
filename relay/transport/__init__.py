"""OneBot websocket transport: connection, action correlation, parsing."""

from .client import OneBotClient
from .pending import PendingAction, PendingActions
from .segments import coerce_id, build_text_message
from .parser import decode_frame, is_action_ok, parse_message_event

__all__ = [
    "OneBotClient",
    "PendingAction",
    "PendingActions",
    "build_text_message",
    "coerce_id",
    "decode_frame",
    "is_action_ok",
    "parse_message_event",
]
