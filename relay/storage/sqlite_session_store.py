"""SQLite implementation of SessionStore."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import Any
from pathlib import Path
from contextlib import closing
from collections.abc import Callable

from ..errors import StorageError
from .database import connect, now_ms
from .session_store import SessionMeta, SessionStore


class SqliteSessionStore(SessionStore):
    """Session records in ``mem_sessions`` with a ``mem_session_summaries`` log.

    Each call opens its own connection on a worker thread. SQLite failures,
    such as a locked or unmigrated database, surface as StorageError.

    Attributes:
        db_path: Path to a database prepared by open_database().
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    async def get(self, session_key: str) -> SessionMeta | None:
        return await self._run("get", self._get, session_key)

    async def save_summary(self, session_key: str, summary: str) -> None:
        await self._run("save_summary", self._save_summary, session_key, summary)

    async def save_persona(self, session_key: str, persona: str | None) -> None:
        await self._run("save_persona", self._save_persona, session_key, persona)

    async def clear(self, session_key: str) -> None:
        await self._run("clear", self._clear, session_key)

    async def _run(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except sqlite3.Error as exc:
            raise StorageError(f"Session store {operation} failed: {exc}", operation=operation) from exc

    def _get(self, session_key: str) -> SessionMeta | None:
        with closing(connect(self.db_path)) as conn:
            row = conn.execute(
                """
                SELECT summary, summary_updated_at, persona
                FROM mem_sessions
                WHERE session_key = ?
                """,
                (session_key,),
            ).fetchone()
        if row is None:
            return None
        return SessionMeta(summary=row[0], summary_updated_at=row[1], persona=row[2])

    def _save_summary(self, session_key: str, summary: str) -> None:
        now = now_ms()
        with closing(connect(self.db_path)) as conn, conn:
            conn.execute(
                """
                INSERT INTO mem_sessions (session_key, summary, summary_updated_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(session_key) DO UPDATE SET
                    summary = excluded.summary,
                    summary_updated_at = excluded.summary_updated_at,
                    updated_at = excluded.updated_at
                """,
                (session_key, summary, now, now),
            )
            conn.execute(
                "INSERT INTO mem_session_summaries (session_key, created_at, summary) VALUES (?, ?, ?)",
                (session_key, now, summary),
            )

    def _save_persona(self, session_key: str, persona: str | None) -> None:
        with closing(connect(self.db_path)) as conn, conn:
            conn.execute(
                """
                INSERT INTO mem_sessions (session_key, persona, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(session_key) DO UPDATE SET
                    persona = excluded.persona,
                    updated_at = excluded.updated_at
                """,
                (session_key, persona, now_ms()),
            )

    def _clear(self, session_key: str) -> None:
        with closing(connect(self.db_path)) as conn, conn:
            conn.execute("DELETE FROM mem_sessions WHERE session_key = ?", (session_key,))
            conn.execute("DELETE FROM mem_session_summaries WHERE session_key = ?", (session_key,))


__all__ = ["SqliteSessionStore"]
