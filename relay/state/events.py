"""Transport events delivered to the orchestrator in socket-receive order."""

from __future__ import annotations

from dataclasses import dataclass

from .message import ParsedMessage


@dataclass(frozen=True, slots=True)
class ReadyEvent:
    """Raised each time the websocket connection is established."""

    endpoint: str


@dataclass(frozen=True, slots=True)
class MessageEvent:
    """Raised once per valid inbound chat message."""

    message: ParsedMessage


TransportEvent = ReadyEvent | MessageEvent


__all__ = ["MessageEvent", "ReadyEvent", "TransportEvent"]
