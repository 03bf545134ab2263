"""Channel keys, command detection and reply chunking."""

from __future__ import annotations

from ..config import ONEBOT_MESSAGE_CHUNK_CHARS
from ..state import ParsedMessage


def build_channel_key(message: ParsedMessage) -> str:
    """``onebot:group:<gid>`` for group chats, ``onebot:dm:<uid>`` otherwise."""
    if message.group_id:
        return f"{message.platform}:group:{message.group_id}"
    return f"{message.platform}:dm:{message.user_id}"


def group_rate_key(message: ParsedMessage) -> str:
    """Per-group admission key; direct chats count per user."""
    return message.group_id or message.user_id


def chunk_message(text: str, size: int = ONEBOT_MESSAGE_CHUNK_CHARS) -> list[str]:
    """Split ``text`` into consecutive pieces of at most ``size`` characters."""
    if not text:
        return []
    if size <= 0:
        return [text]
    return [text[start:start + size] for start in range(0, len(text), size)]


def is_command(text: str, prefix: str) -> bool:
    return bool(prefix) and text.strip().startswith(prefix)


def strip_command_prefix(text: str, prefix: str) -> str:
    return text.strip()[len(prefix):].strip()


def parse_command(text: str, prefix: str) -> tuple[str, list[str]] | None:
    """Split a command line into a lowercased name and its arguments."""
    if not is_command(text, prefix):
        return None
    parts = strip_command_prefix(text, prefix).split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


def clean_user_input(message: ParsedMessage, prefix: str) -> str:
    """Text to send to the model: text segments only, command prefix removed."""
    if message.segments:
        text = "".join(str(seg.data.get("text") or "") for seg in message.segments if seg.type == "text")
    else:
        text = message.raw_text
    text = text.strip()
    if prefix and text.startswith(prefix):
        return strip_command_prefix(text, prefix)
    return text


__all__ = [
    "build_channel_key",
    "chunk_message",
    "clean_user_input",
    "group_rate_key",
    "is_command",
    "parse_command",
    "strip_command_prefix",
]
