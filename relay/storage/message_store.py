"""Abstract interface for the chat message archive."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MessageLogEntry:
    """One archived chat line."""

    channel_key: str
    user_id: str
    plain_text: str
    group_id: str | None = None
    message_id: str | None = None
    ts: int | None = None
    is_bot: bool = False


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A matching archived line, newest first in result lists."""

    text: str
    user_id: str
    channel_key: str
    ts: int


class MessageStore(ABC):
    """Append-only archive of chat lines with keyword search."""

    @abstractmethod
    async def log(self, entry: MessageLogEntry) -> None:
        """Archive a line. Failures are logged, never raised."""
        ...

    @abstractmethod
    async def search(
        self,
        keyword: str,
        *,
        limit: int = 20,
        channel_key: str | None = None,
        days: int | None = None,
    ) -> list[SearchResult]:
        """Find archived lines containing ``keyword``, newest first.

        Args:
            keyword: Search term.
            limit: Result cap, clamped to 1..100.
            channel_key: Restrict to one channel.
            days: Restrict to the last N days.
        """
        ...


class NullMessageStore(MessageStore):
    """Archive that stores nothing and finds nothing."""

    async def log(self, entry: MessageLogEntry) -> None:
        return None

    async def search(
        self,
        keyword: str,
        *,
        limit: int = 20,
        channel_key: str | None = None,
        days: int | None = None,
    ) -> list[SearchResult]:
        return []


__all__ = ["MessageLogEntry", "MessageStore", "NullMessageStore", "SearchResult"]
