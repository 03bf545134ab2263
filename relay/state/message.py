"""Normalized inbound chat message dataclasses.

MessageSegment:
    One element of a OneBot message array, ``{"type": ..., "data": {...}}``.
    ``text`` segments carry ``{"text": str}``; ``at`` segments carry the
    mentioned account in ``qq`` (or ``id`` on some implementations).

ParsedMessage:
    Platform-neutral view of an inbound chat event, derived once by the
    transport and immutable afterwards.
"""

from __future__ import annotations

from typing import Any
from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class MessageSegment:
    """A typed content segment of a chat message."""

    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": dict(self.data)}


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    """Normalized inbound chat event.

    Attributes:
        platform: Source platform label (always ``onebot`` here).
        self_id: Own account id used for self-loop and mention checks.
        user_id: Sender id (never empty).
        group_id: Group id for group messages, else None.
        message_id: Platform message id, used for quoting and reactions.
        message_type: ``group`` or ``private``.
        raw_text: The event's raw text field.
        plain_text: Concatenated ``text`` segments, falling back to raw_text.
        segments: Structured content segments.
        mentioned: True if any segment targets self_id.
    """

    platform: str
    self_id: str
    user_id: str
    group_id: str | None
    message_id: str | None
    message_type: str
    raw_text: str
    plain_text: str
    segments: tuple[MessageSegment, ...] = ()
    mentioned: bool = False

    @property
    def is_group(self) -> bool:
        return self.message_type == "group"

    @property
    def is_private(self) -> bool:
        return self.message_type == "private"


__all__ = ["MessageSegment", "ParsedMessage"]
