"""Inbound message orchestration.

MessageOrchestrator consumes transport events and turns each chat message
into at most one action: ignore it, answer a command, send a notice, or run
a conversation reply under the channel lock.

Admission Order:
    1. Empty text            -> ignored
    2. Muted channel         -> ignored
    3. Group w/o mention     -> ignored unless allow_group_plain
    4. Not allowed / denied  -> permission notice
    5. Blocked pattern       -> blocked notice
    6. Command prefix        -> command registry
    7. Rate limits           -> user, then group, then global
    8. Reply                 -> ChannelLock.run(channel_key, reply), chunked

Every message is handled in its own task. handle() does not suspend before
reaching the channel lock on the reply path, so tasks started in receive
order queue on the lock in receive order.
"""

from __future__ import annotations

import math
import asyncio
import logging
from typing import Any, Protocol

from ..admission import ChannelLock, RateLimiters
from ..conversation import ConversationManager
from ..errors import TransportError, RateLimitError, classify_error
from ..logging import log_context
from ..state import MessageEvent, ReadyEvent, ParsedMessage, TransportEvent
from ..storage import MessageStore, JsonStateStore, MessageLogEntry, NullMessageStore
from .channels import (
    chunk_message,
    parse_command,
    group_rate_key,
    clean_user_input,
    build_channel_key,
)
from .commands import CommandContext, CommandRegistry, build_default_registry
from .policy import BotPolicy

logger = logging.getLogger(__name__)

NOT_ALLOWED_TEXT = "You are not allowed to use this bot. Please contact an admin."
DENIED_TEXT = "You have been banned from using this bot."
BLOCKED_TEXT = "Your message contains blocked content."
USER_RATE_TEXT = "Too many requests, please retry in {wait} seconds."
GROUP_RATE_TEXT = "This chat is sending too many requests, please retry later."
GLOBAL_RATE_TEXT = "The bot is busy, please retry later."
FAILURE_TEXT = "The AI call failed. Please retry later or contact an admin."


class ChatTransport(Protocol):
    """Transport surface the orchestrator needs."""

    async def next_event(self) -> TransportEvent: ...

    async def send_text(self, target: ParsedMessage, text: str, *, quote: bool = False) -> Any: ...


class MessageOrchestrator:
    """Dispatch inbound messages to commands and the conversation engine."""

    def __init__(
        self,
        transport: ChatTransport,
        conversations: ConversationManager,
        *,
        state_store: JsonStateStore,
        message_store: MessageStore | None = None,
        limiters: RateLimiters | None = None,
        locks: ChannelLock | None = None,
        commands: CommandRegistry | None = None,
        policy: BotPolicy | None = None,
    ) -> None:
        self._transport = transport
        self.conversations = conversations
        self.state_store = state_store
        self.message_store = message_store or NullMessageStore()
        self.limiters = limiters or RateLimiters.from_config()
        self.locks = locks or ChannelLock()
        self.commands = commands or build_default_registry()
        self.policy = policy or BotPolicy()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    # ============================================================================
    # Event loop
    # ============================================================================
    async def run(self) -> None:
        """Consume transport events until cancelled."""
        while True:
            event = await self._transport.next_event()
            if isinstance(event, ReadyEvent):
                logger.info("OneBot ready at %s, listening for messages", event.endpoint)
                continue
            if isinstance(event, MessageEvent):
                self.dispatch(event.message)

    def dispatch(self, message: ParsedMessage) -> asyncio.Task[None]:
        """Handle ``message`` in its own task."""
        task = asyncio.create_task(self._handle_safely(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self, timeout_s: float) -> None:
        """Wait for in-flight handlers, cancelling them after ``timeout_s``."""
        tasks = set(self._tasks)
        if not tasks:
            return
        _, pending = await asyncio.wait(tasks, timeout=timeout_s)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("Cancelled %d unfinished message handler(s)", len(pending))

    async def _handle_safely(self, message: ParsedMessage) -> None:
        try:
            await self.handle(message)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Unhandled error while handling message from %s", message.user_id)

    # ============================================================================
    # Admission
    # ============================================================================
    async def handle(self, message: ParsedMessage) -> None:
        text = message.plain_text.strip()
        if not text:
            return

        channel_key = build_channel_key(message)
        with log_context(channel_key=channel_key, user_id=message.user_id):
            policy = self.policy
            if self.state_store.is_muted(channel_key):
                logger.info("Channel is muted, ignoring message")
                return

            if message.is_group and not message.mentioned and not policy.allow_group_plain:
                return

            if not self.state_store.is_allowed(message.user_id, policy.admins, policy.whitelist_mode):
                denied = self.state_store.is_denied(message.user_id)
                await self._notify(message, DENIED_TEXT if denied else NOT_ALLOWED_TEXT)
                return

            pattern = policy.blocked_pattern(text)
            if pattern is not None:
                logger.info("Blocked message matching %s", pattern.pattern)
                await self._notify(message, BLOCKED_TEXT)
                return

            command = parse_command(text, policy.prefix)
            if command is not None:
                await self._run_command(message, channel_key, *command)
                return
            if text.startswith(policy.prefix):
                # bare prefix
                return

            refusal = self._check_rate_limits(message)
            if refusal is not None:
                await self._notify(message, refusal)
                return

            cleaned = clean_user_input(message, policy.prefix)
            if not cleaned:
                return

            await self._reply(message, channel_key, cleaned)

    def _check_rate_limits(self, message: ParsedMessage) -> str | None:
        """Return the refusal text of the first saturated limiter, if any."""
        limiters = self.limiters
        try:
            limiters.user.consume(message.user_id)
        except RateLimitError as exc:
            return USER_RATE_TEXT.format(wait=max(1, math.ceil(exc.retry_in)))
        if not limiters.group.allow(group_rate_key(message)):
            return GROUP_RATE_TEXT
        if not limiters.global_.allow(limiters.global_key):
            return GLOBAL_RATE_TEXT
        return None

    # ============================================================================
    # Actions
    # ============================================================================
    async def _run_command(self, message: ParsedMessage, channel_key: str, name: str, args: list[str]) -> None:
        ctx = CommandContext(
            message=message,
            channel_key=channel_key,
            policy=self.policy,
            conversations=self.conversations,
            locks=self.locks,
            state_store=self.state_store,
            message_store=self.message_store,
            registry=self.commands,
        )
        try:
            result = await self.commands.execute(name, ctx, args)
        except Exception as exc:
            logger.warning("Command %s failed (%s): %s", name, classify_error(exc), exc)
            await self._send_chunks(message, FAILURE_TEXT)
            return
        if result:
            await self._send_chunks(message, result)

    async def _reply(self, message: ParsedMessage, channel_key: str, text: str) -> None:
        async def _locked_reply() -> str:
            if self.policy.log_chat_history:
                await self.message_store.log(
                    MessageLogEntry(
                        channel_key=channel_key,
                        user_id=message.user_id,
                        plain_text=text,
                        group_id=message.group_id,
                        message_id=message.message_id,
                    )
                )
            return await self.conversations.reply(channel_key, text)

        try:
            reply = await self.locks.run(channel_key, _locked_reply)
        except Exception as exc:
            logger.warning("Reply failed (%s): %s", classify_error(exc), exc)
            await self._notify(message, FAILURE_TEXT)
            return
        await self._send_chunks(message, reply)

    async def _send_chunks(self, message: ParsedMessage, text: str) -> None:
        for part in chunk_message(text, self.policy.chunk_chars):
            if not await self._notify(message, part):
                return

    async def _notify(self, message: ParsedMessage, text: str) -> bool:
        """Send a quoted reply; transport failures are logged."""
        try:
            await self._transport.send_text(message, text, quote=True)
        except TransportError as exc:
            logger.warning("Failed to send reply (%s): %s", classify_error(exc), exc)
            return False
        return True


__all__ = ["ChatTransport", "MessageOrchestrator"]
