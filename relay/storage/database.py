"""SQLite database bootstrap and schema migrations.

Migrations are applied once each, in order, and recorded in
``meta_migrations``. A migration marked optional (the full-text index needs
an SQLite build with FTS5) logs a warning on failure instead of aborting
startup, and is retried on the next start.
"""

from __future__ import annotations

import time
import sqlite3
import logging
from pathlib import Path
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Migration:
    id: str
    statements: tuple[str, ...]
    optional: bool = False


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        id="001_sessions",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS mem_sessions (
                session_key TEXT PRIMARY KEY,
                persona TEXT,
                summary TEXT,
                summary_updated_at INTEGER,
                updated_at INTEGER NOT NULL
            )
            """,
            """
            CREATE TABLE IF NOT EXISTS mem_session_summaries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_key TEXT NOT NULL,
                created_at INTEGER NOT NULL,
                summary TEXT NOT NULL
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_mem_summary_session_time "
            "ON mem_session_summaries(session_key, created_at)",
        ),
    ),
    Migration(
        id="002_messages",
        statements=(
            """
            CREATE TABLE IF NOT EXISTS msg_messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                platform TEXT NOT NULL DEFAULT 'onebot',
                channel_key TEXT NOT NULL,
                user_id TEXT NOT NULL,
                group_id TEXT,
                message_id TEXT,
                ts INTEGER NOT NULL,
                plain_text TEXT NOT NULL,
                is_bot INTEGER NOT NULL DEFAULT 0
            )
            """,
            "CREATE INDEX IF NOT EXISTS idx_msg_channel_ts ON msg_messages(channel_key, ts)",
            "CREATE INDEX IF NOT EXISTS idx_msg_user_ts ON msg_messages(user_id, ts)",
        ),
    ),
    Migration(
        id="003_messages_fts",
        statements=(
            """
            CREATE VIRTUAL TABLE IF NOT EXISTS msg_messages_fts USING fts5(
                plain_text,
                user_id,
                channel_key,
                content='msg_messages',
                content_rowid='id'
            )
            """,
        ),
        optional=True,
    ),
)


def now_ms() -> int:
    return int(time.time() * 1000)


def connect(path: Path) -> sqlite3.Connection:
    """Open a connection to the database file."""
    return sqlite3.connect(path)


def apply_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending migrations and return the ids applied now."""
    conn.execute(
        "CREATE TABLE IF NOT EXISTS meta_migrations (id TEXT PRIMARY KEY, applied_at INTEGER NOT NULL)"
    )
    conn.commit()
    applied = {row[0] for row in conn.execute("SELECT id FROM meta_migrations")}

    newly_applied: list[str] = []
    for migration in MIGRATIONS:
        if migration.id in applied:
            continue
        try:
            with conn:
                for statement in migration.statements:
                    conn.execute(statement)
                conn.execute(
                    "INSERT INTO meta_migrations (id, applied_at) VALUES (?, ?)",
                    (migration.id, now_ms()),
                )
        except sqlite3.OperationalError as exc:
            if not migration.optional:
                raise
            logger.warning("Skipping optional migration %s: %s", migration.id, exc)
            continue
        logger.info("Applied database migration %s", migration.id)
        newly_applied.append(migration.id)
    return newly_applied


def open_database(path: Path) -> Path:
    """Create the database file if needed and bring its schema up to date.

    Returns:
        The database path, for the stores to open their own connections.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = connect(path)
    try:
        apply_migrations(conn)
    finally:
        conn.close()
    return path


__all__ = ["MIGRATIONS", "Migration", "apply_migrations", "connect", "now_ms", "open_database"]
