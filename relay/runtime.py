"""Process wiring of the relay components.

RelayRuntime constructs every long-lived component once and owns its
lifecycle:

    start(): load state.json, migrate the database, connect to OneBot,
             start consuming events
    stop():  stop consuming, drain in-flight handlers, close the
             connection, close the HTTP client

Components are plain attributes so the HTTP status endpoint can read them.
"""

from __future__ import annotations

import time
import asyncio
import logging
import contextlib
from typing import Any

from .admission import ChannelLock, RateLimiters
from .bot import BotPolicy, MessageOrchestrator
from .config import (
    BOT_NAME,
    STATE_FILE,
    DATABASE_FILE,
    DENYLIST_SEED,
    ALLOWLIST_SEED,
    LOG_CHAT_HISTORY,
    PERSIST_SESSIONS,
    SHUTDOWN_GRACE_S,
)
from .conversation import ConversationManager
from .llm import DeepSeekClient
from .storage import (
    JsonStateStore,
    NullMessageStore,
    NullSessionStore,
    SqliteMessageStore,
    SqliteSessionStore,
    open_database,
)
from .transport import OneBotClient

logger = logging.getLogger(__name__)


class RelayRuntime:
    """All long-lived relay components and their start/stop sequence."""

    def __init__(self) -> None:
        self.started_at: float | None = None
        self.state_store = JsonStateStore(STATE_FILE, allow_seed=ALLOWLIST_SEED, deny_seed=DENYLIST_SEED)
        self.session_store = SqliteSessionStore(DATABASE_FILE) if PERSIST_SESSIONS else NullSessionStore()
        self.message_store = SqliteMessageStore(DATABASE_FILE) if LOG_CHAT_HISTORY else NullMessageStore()
        self._use_database = PERSIST_SESSIONS or LOG_CHAT_HISTORY
        self.llm = DeepSeekClient()
        self.conversations = ConversationManager(
            self.llm,
            usage_store=self.state_store,
            session_store=self.session_store,
        )
        self.transport = OneBotClient()
        self.locks = ChannelLock()
        self.limiters = RateLimiters.from_config()
        self.orchestrator = MessageOrchestrator(
            self.transport,
            self.conversations,
            state_store=self.state_store,
            message_store=self.message_store,
            limiters=self.limiters,
            locks=self.locks,
            policy=BotPolicy(),
        )
        self._consumer: asyncio.Task[None] | None = None

    async def start(self) -> None:
        self.state_store.load()
        if self._use_database:
            await asyncio.to_thread(open_database, DATABASE_FILE)
        self.transport.start()
        self._consumer = asyncio.create_task(self.orchestrator.run(), name="relay-orchestrator")
        self.started_at = time.time()
        logger.info("%s started", BOT_NAME)

    async def stop(self) -> None:
        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await consumer
        await self.orchestrator.drain(SHUTDOWN_GRACE_S)
        await self.transport.stop()
        await self.llm.aclose()
        logger.info("%s stopped", BOT_NAME)

    def status(self) -> dict[str, Any]:
        uptime = time.time() - self.started_at if self.started_at is not None else 0.0
        return {
            "bot": BOT_NAME,
            "connection": self.transport.state.value,
            "pending_actions": self.transport.pending_count,
            "active_sessions": self.conversations.active_sessions,
            "locked_channels": len(self.locks),
            "in_flight": self.orchestrator.in_flight,
            "usage": self.state_store.usage.as_dict(),
            "uptime_s": round(uptime, 1),
        }


__all__ = ["RelayRuntime"]
