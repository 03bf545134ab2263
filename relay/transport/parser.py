"""OneBot frame decoding and inbound message normalization.

Inbound frames are JSON objects of two relevant shapes:

    Chat event:   {"post_type": "message", "message_type": "group"|"private",
                   "user_id", "group_id"?, "message_id",
                   "message": [segments] | str, "raw_message", "self_id", "time"}
    Action reply: {"echo": <token>, "status": "ok"|..., "retcode"?, "message"?}

Normalization rules:
    - No resolvable sender id, or sender == own id: no ParsedMessage
    - plain_text: concatenated ``text`` segments, else ``raw_message``
    - mentioned: any ``at`` segment whose ``qq``/``id`` equals own id
"""

from __future__ import annotations

import json
from typing import Any
from collections.abc import Sequence

from ..state.message import MessageSegment, ParsedMessage

PLATFORM = "onebot"


def decode_frame(raw: str | bytes) -> dict[str, Any]:
    """Decode a raw websocket frame into a JSON object.

    Raises:
        ValueError: If the frame is not UTF-8 JSON, nests too deeply to
            decode, or is not an object.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Frame must be valid JSON: {raw[:120]!r}") from exc
    except RecursionError as exc:
        raise ValueError("Frame nests too deeply to decode.") from exc
    if not isinstance(data, dict):
        raise ValueError("Frame must be a JSON object.")
    return data


def id_text(value: Any) -> str:
    """Render a numeric-or-string platform id as a trimmed string."""
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def parse_segments(message: Any) -> tuple[MessageSegment, ...]:
    """Parse a OneBot message array; string (CQ code) messages yield none."""
    if not isinstance(message, list):
        return ()
    segments: list[MessageSegment] = []
    for item in message:
        if not isinstance(item, dict):
            continue
        seg_type = item.get("type")
        if not isinstance(seg_type, str):
            continue
        data = item.get("data")
        segments.append(MessageSegment(type=seg_type, data=data if isinstance(data, dict) else {}))
    return tuple(segments)


def extract_plain_text(segments: Sequence[MessageSegment], fallback: str) -> str:
    """Join ``text`` segments, falling back to the raw text."""
    if not segments:
        return fallback or ""
    joined = "".join(str(seg.data.get("text") or "") for seg in segments if seg.type == "text")
    return joined or fallback or ""


def detect_mention(segments: Sequence[MessageSegment], self_id: str) -> bool:
    """Return True if any ``at`` segment targets ``self_id``."""
    if not self_id:
        return False
    for seg in segments:
        if seg.type != "at":
            continue
        if self_id in (id_text(seg.data.get("qq")), id_text(seg.data.get("id"))):
            return True
    return False


def parse_message_event(
    event: dict[str, Any],
    configured_self_id: str | None = None,
) -> ParsedMessage | None:
    """Normalize a ``post_type == "message"`` event.

    Args:
        event: Decoded chat event.
        configured_self_id: Own id from configuration; the event's
            ``self_id`` is used when unset.

    Returns:
        The ParsedMessage, or None when the event must be discarded.
    """
    self_id = id_text(configured_self_id) or id_text(event.get("self_id"))
    user_id = id_text(event.get("user_id"))
    if not user_id:
        return None
    if self_id and user_id == self_id:
        return None

    message_type = "group" if event.get("message_type") == "group" else "private"
    segments = parse_segments(event.get("message"))
    raw_message = event.get("raw_message")
    raw_fallback = raw_message if isinstance(raw_message, str) else ""
    plain_text = extract_plain_text(segments, raw_fallback)
    group_id = id_text(event.get("group_id")) if message_type == "group" else ""

    return ParsedMessage(
        platform=PLATFORM,
        self_id=self_id,
        user_id=user_id,
        group_id=group_id or None,
        message_id=id_text(event.get("message_id")) or None,
        message_type=message_type,
        raw_text=raw_message if isinstance(raw_message, str) else plain_text,
        plain_text=plain_text,
        segments=segments,
        mentioned=detect_mention(segments, self_id),
    )


def is_action_ok(reply: dict[str, Any]) -> bool:
    """Return True when an action reply reports success."""
    return reply.get("status") == "ok" or reply.get("retcode") == 0


def action_failure_reason(reply: dict[str, Any]) -> str:
    """Pick the remote-provided failure text of an action reply."""
    for field_name in ("message", "msg", "wording"):
        value = reply.get(field_name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    status = reply.get("status")
    retcode = reply.get("retcode")
    if status is None and retcode is None:
        return "unknown"
    return f"status={status} retcode={retcode}"


__all__ = [
    "PLATFORM",
    "action_failure_reason",
    "decode_frame",
    "detect_mention",
    "extract_plain_text",
    "id_text",
    "is_action_ok",
    "parse_message_event",
    "parse_segments",
]
