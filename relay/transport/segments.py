"""Outbound OneBot message segment builders."""

from __future__ import annotations

from typing import Any


def coerce_id(value: str | int) -> str | int:
    """Send numeric ids as integers; OneBot implementations expect numbers."""
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


def text_segment(text: str) -> dict[str, Any]:
    return {"type": "text", "data": {"text": text}}


def reply_segment(message_id: str | int) -> dict[str, Any]:
    return {"type": "reply", "data": {"id": str(message_id)}}


def build_text_message(text: str, *, reply_to: str | int | None = None) -> list[dict[str, Any]]:
    """Build a message array, optionally quoting ``reply_to``."""
    segments: list[dict[str, Any]] = []
    if reply_to is not None and str(reply_to):
        segments.append(reply_segment(reply_to))
    segments.append(text_segment(text))
    return segments


__all__ = ["build_text_message", "coerce_id", "reply_segment", "text_segment"]
