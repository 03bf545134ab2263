"""OneBot v11 websocket client.

OneBotClient owns the single persistent connection to the OneBot endpoint.
One runner task drives the lifecycle:

    connect -> read frames until close/error -> reject pending actions
        -> wait ONEBOT_RECONNECT_MS (cut short by stop()) -> connect ...

Because only the runner ever schedules a reconnect, at most one reconnect
wait is outstanding at any time.

Inbound chat messages and connection notices are pushed onto an
asyncio.Queue in socket-receive order; consumers poll next_event(). Action
replies are matched to pending actions by their ``echo`` token and never
surface as events.
"""

from __future__ import annotations

import json
import uuid
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Awaitable

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config import (
    BOT_SELF_ID,
    ONEBOT_WS_URL,
    ONEBOT_ACCESS_TOKEN,
    ONEBOT_RECONNECT_MS,
    ONEBOT_ACTION_TIMEOUT_MS,
)
from ..errors import TransportError, ConnectionLostError
from ..logging import log_context
from ..state import MessageEvent, ReadyEvent, ParsedMessage, TransportEvent, ConnectionState
from .parser import decode_frame, parse_message_event
from .pending import PendingActions
from .segments import coerce_id, build_text_message

logger = logging.getLogger(__name__)

# Signature of websockets' connect(); tests inject an async fake.
ConnectFn = Callable[..., Awaitable[Any]]


def new_echo() -> str:
    return f"action-{uuid.uuid4().hex}"


class OneBotClient:
    """Reconnecting OneBot websocket client with echo-correlated actions."""

    def __init__(
        self,
        endpoint: str | None = None,
        *,
        self_id: str | None = None,
        access_token: str | None = None,
        reconnect_interval_s: float | None = None,
        action_timeout_s: float | None = None,
        connect_fn: ConnectFn | None = None,
    ) -> None:
        self.endpoint = endpoint or ONEBOT_WS_URL
        self.self_id = self_id if self_id is not None else BOT_SELF_ID
        self._access_token = access_token if access_token is not None else ONEBOT_ACCESS_TOKEN
        self._reconnect_interval_s = (
            ONEBOT_RECONNECT_MS / 1000.0 if reconnect_interval_s is None else reconnect_interval_s
        )
        self._action_timeout_s = (
            ONEBOT_ACTION_TIMEOUT_MS / 1000.0 if action_timeout_s is None else action_timeout_s
        )
        self._connect_fn: ConnectFn = connect_fn or connect
        self._socket: Any | None = None
        self._pending = PendingActions()
        self._events: asyncio.Queue[TransportEvent] = asyncio.Queue()
        self._state = ConnectionState.DISCONNECTED
        self._stopped = True
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._socket is not None and self._state is ConnectionState.CONNECTED

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def events(self) -> asyncio.Queue[TransportEvent]:
        return self._events

    async def next_event(self) -> TransportEvent:
        """Wait for the next transport event."""
        return await self._events.get()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> asyncio.Task[None]:
        """Schedule the connection runner. Idempotent while running."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stopped = False
        self._stop_event = asyncio.Event()
        self._state = ConnectionState.DISCONNECTED
        self._task = asyncio.create_task(self._run(), name="onebot-connection")
        return self._task

    async def stop(self) -> None:
        """Close the connection, fail pending actions and end the runner."""
        self._stopped = True
        if self._stop_event is not None:
            self._stop_event.set()
        socket = self._socket
        if socket is not None:
            with contextlib.suppress(WebSocketException, OSError):
                await socket.close()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._socket = None
        rejected = self._pending.reject_all("OneBot client stopped")
        if rejected:
            logger.info("Rejected %d pending OneBot action(s) on stop", rejected)
        self._state = ConnectionState.STOPPED

    async def _run(self) -> None:
        try:
            while not self._stopped:
                self._state = ConnectionState.CONNECTING
                logger.info("Connecting to OneBot endpoint %s", self.endpoint)
                try:
                    socket = await self._connect_fn(self.endpoint, additional_headers=self._headers())
                except (OSError, WebSocketException, asyncio.TimeoutError) as exc:
                    self._state = ConnectionState.ERRORED
                    logger.warning("OneBot connection failed: %s", exc)
                except Exception:
                    self._state = ConnectionState.ERRORED
                    logger.exception("Unexpected error while connecting to OneBot")
                else:
                    try:
                        await self._serve(socket)
                    except Exception:
                        self._state = ConnectionState.ERRORED
                        logger.exception("OneBot connection failed while reading frames")
                if self._stopped:
                    break
                self._state = ConnectionState.RECONNECTING
                logger.info("Reconnecting to OneBot in %.1fs", self._reconnect_interval_s)
                await self._wait_reconnect()
        finally:
            if self._stopped:
                self._state = ConnectionState.STOPPED

    async def _wait_reconnect(self) -> None:
        if self._stop_event is None:
            return
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._stop_event.wait(), timeout=self._reconnect_interval_s)

    async def _serve(self, socket: Any) -> None:
        """Read frames from one connection until it closes."""
        if self._stopped:
            with contextlib.suppress(WebSocketException, OSError):
                await socket.close()
            return
        self._socket = socket
        self._state = ConnectionState.CONNECTED
        logger.info("OneBot connected: %s", self.endpoint)
        self._events.put_nowait(ReadyEvent(endpoint=self.endpoint))
        try:
            async for raw in socket:
                self._handle_frame(raw)
            self._state = ConnectionState.CLOSING
            logger.warning("OneBot connection closed")
        except ConnectionClosed as exc:
            self._state = ConnectionState.ERRORED
            logger.warning("OneBot connection lost: %s", exc)
        finally:
            self._socket = None
            with contextlib.suppress(WebSocketException, OSError):
                await socket.close()
            rejected = self._pending.reject_all("OneBot connection lost")
            if rejected:
                logger.warning("Rejected %d pending OneBot action(s) after disconnect", rejected)

    def _headers(self) -> dict[str, str] | None:
        if not self._access_token:
            return None
        return {"Authorization": f"Bearer {self._access_token}"}

    # ------------------------------------------------------------------ #
    # Inbound
    # ------------------------------------------------------------------ #

    def _handle_frame(self, raw: str | bytes) -> None:
        try:
            frame = decode_frame(raw)
        except ValueError as exc:
            logger.warning("Dropping malformed OneBot frame: %s", exc)
            return

        if frame.get("post_type") == "message":
            message = parse_message_event(frame, self.self_id)
            if message is not None:
                self._events.put_nowait(MessageEvent(message=message))
            return

        echo = frame.get("echo")
        if echo is not None and self._pending.resolve(str(echo), frame):
            return
        logger.debug("Ignoring OneBot frame post_type=%s", frame.get("post_type"))

    # ------------------------------------------------------------------ #
    # Outbound
    # ------------------------------------------------------------------ #

    async def send_action(
        self,
        action: str,
        params: dict[str, Any],
        *,
        timeout_s: float | None = None,
    ) -> dict[str, Any]:
        """Send an action and wait for its echo-correlated reply.

        Args:
            action: OneBot action name, e.g. ``send_group_msg``.
            params: Action parameters.
            timeout_s: Deadline override; defaults to ONEBOT_ACTION_TIMEOUT_MS.

        Returns:
            The reply envelope.

        Raises:
            ConnectionLostError: No open socket, write failure, or the socket
                closed before the reply.
            ActionTimeoutError: The deadline fired first.
            ActionRejectedError: The remote reported a non-OK status.
        """
        socket = self._socket
        if socket is None or self._state is not ConnectionState.CONNECTED:
            raise ConnectionLostError("OneBot is not connected", action=action)

        echo = new_echo()
        timeout = self._action_timeout_s if timeout_s is None else timeout_s
        entry = self._pending.register(echo, action, timeout)
        envelope = json.dumps({"action": action, "params": params, "echo": echo}, ensure_ascii=False)
        with log_context(echo=echo):
            try:
                await socket.send(envelope)
            except (WebSocketException, OSError) as exc:
                logger.warning("OneBot write failed for %s: %s", action, exc)
                self._pending.reject(
                    echo,
                    ConnectionLostError(f"OneBot write failed: {exc}", action=action),
                )
            try:
                return await entry.future
            finally:
                self._pending.discard(echo)

    async def send_text(self, target: ParsedMessage, text: str, *, quote: bool = False) -> dict[str, Any]:
        """Reply in the channel ``target`` came from, optionally quoting it."""
        reply_to = target.message_id if quote else None
        message = build_text_message(text, reply_to=reply_to)
        if target.is_group and target.group_id:
            params = {"group_id": coerce_id(target.group_id), "message": message}
            return await self.send_action("send_group_msg", params)
        params = {"user_id": coerce_id(target.user_id), "message": message}
        return await self.send_action("send_private_msg", params)

    async def send_text_to_user(self, user_id: str | int, text: str) -> dict[str, Any]:
        params = {"user_id": coerce_id(user_id), "message": build_text_message(text)}
        return await self.send_action("send_private_msg", params)

    async def send_text_to_group(self, group_id: str | int, text: str) -> dict[str, Any]:
        params = {"group_id": coerce_id(group_id), "message": build_text_message(text)}
        return await self.send_action("send_group_msg", params)

    async def react_to_message(self, target: ParsedMessage, emoji_id: str | int) -> bool:
        """Attach an emoji reaction; failures are logged, never raised."""
        if not target.message_id:
            return False
        params = {"message_id": coerce_id(target.message_id), "emoji_id": str(emoji_id)}
        try:
            await self.send_action("set_msg_emoji_like", params)
        except TransportError as exc:
            logger.warning("Reaction failed: %s", exc)
            return False
        return True


__all__ = ["ConnectFn", "OneBotClient", "new_echo"]
