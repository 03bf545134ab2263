"""Abstract interface for per-channel session persistence.

A session record keeps what must survive a restart of the bot: the active
persona and the latest rolling summary. Turn history is never persisted.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionMeta:
    """Persisted session fields of one channel."""

    summary: str | None = None
    summary_updated_at: int | None = None
    persona: str | None = None


class SessionStore(ABC):
    """Persistence for channel personas and summaries.

    Implementations report read and write failures as StorageError.
    """

    @abstractmethod
    async def get(self, session_key: str) -> SessionMeta | None:
        """Return the stored record for a channel, or None if absent."""
        ...

    @abstractmethod
    async def save_summary(self, session_key: str, summary: str) -> None:
        """Store the channel's latest summary and append it to its summary log."""
        ...

    @abstractmethod
    async def save_persona(self, session_key: str, persona: str | None) -> None:
        """Store (or clear, with None) the channel's persona."""
        ...

    @abstractmethod
    async def clear(self, session_key: str) -> None:
        """Forget everything stored for the channel."""
        ...


class NullSessionStore(SessionStore):
    """Session store that persists nothing."""

    async def get(self, session_key: str) -> SessionMeta | None:
        return None

    async def save_summary(self, session_key: str, summary: str) -> None:
        return None

    async def save_persona(self, session_key: str, persona: str | None) -> None:
        return None

    async def clear(self, session_key: str) -> None:
        return None


__all__ = ["NullSessionStore", "SessionMeta", "SessionStore"]
