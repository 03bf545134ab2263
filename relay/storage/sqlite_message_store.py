"""SQLite implementation of MessageStore.

Search tries the FTS5 index first and falls back to an escaped ``LIKE``
scan when the index is missing, the query is not valid FTS syntax, or it
finds nothing (FTS5's default tokenizer does not segment CJK text).
"""

from __future__ import annotations

import asyncio
import sqlite3
import logging
from typing import Any
from pathlib import Path
from contextlib import closing

from .database import connect, now_ms
from .message_store import MessageStore, SearchResult, MessageLogEntry

logger = logging.getLogger(__name__)

MAX_SEARCH_LIMIT = 100
DAY_MS = 24 * 60 * 60 * 1000


def escape_like(keyword: str) -> str:
    """Escape LIKE wildcards with a backslash."""
    return keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteMessageStore(MessageStore):
    """Message archive in ``msg_messages`` indexed by ``msg_messages_fts``."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path)

    async def log(self, entry: MessageLogEntry) -> None:
        try:
            await asyncio.to_thread(self._log, entry)
        except sqlite3.Error as exc:
            logger.warning("Failed to archive message: %s", exc)

    async def search(
        self,
        keyword: str,
        *,
        limit: int = 20,
        channel_key: str | None = None,
        days: int | None = None,
    ) -> list[SearchResult]:
        return await asyncio.to_thread(self._search, keyword, limit, channel_key, days)

    def _log(self, entry: MessageLogEntry) -> None:
        ts = entry.ts if entry.ts is not None else now_ms()
        with closing(connect(self.db_path)) as conn, conn:
            cursor = conn.execute(
                """
                INSERT INTO msg_messages
                    (platform, channel_key, user_id, group_id, message_id, ts, plain_text, is_bot)
                VALUES ('onebot', ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.channel_key,
                    entry.user_id,
                    entry.group_id,
                    entry.message_id,
                    ts,
                    entry.plain_text,
                    1 if entry.is_bot else 0,
                ),
            )
            try:
                conn.execute(
                    "INSERT INTO msg_messages_fts (rowid, plain_text, user_id, channel_key) VALUES (?, ?, ?, ?)",
                    (cursor.lastrowid, entry.plain_text, entry.user_id, entry.channel_key),
                )
            except sqlite3.OperationalError as exc:
                logger.debug("Full-text index unavailable: %s", exc)

    def _search(
        self,
        keyword: str,
        limit: int,
        channel_key: str | None,
        days: int | None,
    ) -> list[SearchResult]:
        limit = min(max(int(limit), 1), MAX_SEARCH_LIMIT)
        conditions: list[str] = []
        params: list[Any] = []
        if channel_key:
            conditions.append("m.channel_key = ?")
            params.append(channel_key)
        if days and days > 0:
            conditions.append("m.ts >= ?")
            params.append(now_ms() - days * DAY_MS)

        with closing(connect(self.db_path)) as conn:
            fts_where = " AND ".join([*conditions, "msg_messages_fts MATCH ?"])
            try:
                rows = conn.execute(
                    f"""
                    SELECT m.plain_text, m.user_id, m.channel_key, m.ts
                    FROM msg_messages_fts
                    JOIN msg_messages m ON m.id = msg_messages_fts.rowid
                    WHERE {fts_where}
                    ORDER BY m.ts DESC, m.id DESC
                    LIMIT ?
                    """,
                    (*params, keyword, limit),
                ).fetchall()
            except sqlite3.OperationalError as exc:
                logger.info("Full-text search failed, falling back to LIKE: %s", exc)
                rows = []

            if not rows:
                like_where = " AND ".join([*conditions, "m.plain_text LIKE ? ESCAPE '\\'"])
                rows = conn.execute(
                    f"""
                    SELECT m.plain_text, m.user_id, m.channel_key, m.ts
                    FROM msg_messages m
                    WHERE {like_where}
                    ORDER BY m.ts DESC, m.id DESC
                    LIMIT ?
                    """,
                    (*params, f"%{escape_like(keyword)}%", limit),
                ).fetchall()

        return [SearchResult(text=row[0], user_id=row[1], channel_key=row[2], ts=row[3]) for row in rows]


__all__ = ["SqliteMessageStore", "escape_like"]
