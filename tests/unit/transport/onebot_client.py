"""Unit tests for the OneBot websocket client using an in-memory socket."""

from __future__ import annotations

import json
import asyncio
from typing import Any
from collections.abc import Callable

import pytest

from relay.errors import ActionTimeoutError, ConnectionLostError, ActionRejectedError
from relay.state import MessageEvent, ReadyEvent, ConnectionState
from relay.transport import OneBotClient

_CLOSE = object()


class FakeSocket:
    """Minimal stand-in for a websockets client connection."""

    def __init__(self, *, fail_send: bool = False) -> None:
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self.fail_send = fail_send
        self._incoming: asyncio.Queue[object] = asyncio.Queue()

    async def send(self, data: str) -> None:
        if self.fail_send:
            raise OSError("broken pipe")
        self.sent.append(json.loads(data))

    def feed(self, frame: dict[str, Any] | str) -> None:
        self._incoming.put_nowait(frame if isinstance(frame, str) else json.dumps(frame))

    def drop(self) -> None:
        self._incoming.put_nowait(_CLOSE)

    async def close(self) -> None:
        self.closed = True
        self._incoming.put_nowait(_CLOSE)

    def __aiter__(self) -> FakeSocket:
        return self

    async def __anext__(self) -> str:
        item = await self._incoming.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        return item  # type: ignore[return-value]


class FakeConnector:
    def __init__(self, sockets: list[FakeSocket]) -> None:
        self.sockets = list(sockets)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, url: str, **kwargs: Any) -> FakeSocket:
        self.calls.append((url, kwargs))
        if not self.sockets:
            raise OSError("connection refused")
        return self.sockets.pop(0)


async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout=timeout)


def _client(connector: FakeConnector, **kwargs: Any) -> OneBotClient:
    options: dict[str, Any] = {
        "self_id": "999",
        "access_token": "",
        "reconnect_interval_s": 0.01,
        "action_timeout_s": 5.0,
    }
    options.update(kwargs)
    return OneBotClient("ws://onebot.test", connect_fn=connector, **options)


def _group_frame(user_id: int, text: str) -> dict[str, Any]:
    return {
        "post_type": "message",
        "message_type": "group",
        "self_id": 999,
        "user_id": user_id,
        "group_id": 456,
        "message_id": 1,
        "message": [{"type": "text", "data": {"text": text}}],
        "raw_message": text,
    }


def test_connect_raises_ready_event_and_sends_token() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        connector = FakeConnector([socket])
        client = _client(connector, access_token="secret")
        client.start()
        event = await asyncio.wait_for(client.next_event(), timeout=1.0)
        assert isinstance(event, ReadyEvent)
        assert event.endpoint == "ws://onebot.test"
        assert client.state is ConnectionState.CONNECTED
        assert connector.calls[0][1]["additional_headers"] == {"Authorization": "Bearer secret"}
        await client.stop()
        assert client.state is ConnectionState.STOPPED
        assert socket.closed

    asyncio.run(_run())


def test_send_action_resolves_with_reply() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]))
        client.start()
        await _wait_until(lambda: client.connected)

        task = asyncio.create_task(client.send_action("get_login_info", {}))
        await _wait_until(lambda: bool(socket.sent))
        envelope = socket.sent[0]
        assert envelope["action"] == "get_login_info"
        assert envelope["params"] == {}
        assert envelope["echo"]

        socket.feed({"echo": envelope["echo"], "status": "ok", "retcode": 0, "data": {"user_id": 999}})
        reply = await asyncio.wait_for(task, timeout=1.0)
        assert reply["data"] == {"user_id": 999}
        assert client.pending_count == 0
        await client.stop()

    asyncio.run(_run())


def test_send_action_rejected_reply_raises() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]))
        client.start()
        await _wait_until(lambda: client.connected)

        task = asyncio.create_task(client.send_action("send_group_msg", {"group_id": 1}))
        await _wait_until(lambda: bool(socket.sent))
        socket.feed({"echo": socket.sent[0]["echo"], "status": "failed", "retcode": 100, "message": "no such group"})
        with pytest.raises(ActionRejectedError, match="no such group"):
            await asyncio.wait_for(task, timeout=1.0)
        await client.stop()

    asyncio.run(_run())


def test_send_action_without_socket_fails_immediately() -> None:
    async def _run() -> None:
        client = _client(FakeConnector([]))
        with pytest.raises(ConnectionLostError):
            await client.send_action("send_group_msg", {})
        assert client.pending_count == 0

    asyncio.run(_run())


def test_send_action_times_out_and_forgets_token() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]), action_timeout_s=0.02)
        client.start()
        await _wait_until(lambda: client.connected)
        with pytest.raises(ActionTimeoutError):
            await client.send_action("send_group_msg", {})
        assert client.pending_count == 0
        # a late reply is ignored
        socket.feed({"echo": socket.sent[0]["echo"], "status": "ok"})
        await asyncio.sleep(0.01)
        assert client.connected
        await client.stop()

    asyncio.run(_run())


def test_write_failure_rejects_immediately() -> None:
    async def _run() -> None:
        socket = FakeSocket(fail_send=True)
        client = _client(FakeConnector([socket]))
        client.start()
        await _wait_until(lambda: client.connected)
        with pytest.raises(ConnectionLostError, match="write failed"):
            await asyncio.wait_for(client.send_action("send_group_msg", {}), timeout=1.0)
        assert client.pending_count == 0
        await client.stop()

    asyncio.run(_run())


def test_close_rejects_all_pending_without_waiting_for_deadlines() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]), action_timeout_s=30.0)
        client.start()
        await _wait_until(lambda: client.connected)

        first = asyncio.create_task(client.send_action("send_group_msg", {"group_id": 1}))
        second = asyncio.create_task(client.send_action("send_private_msg", {"user_id": 2}))
        await _wait_until(lambda: len(socket.sent) == 2)
        assert client.pending_count == 2

        socket.drop()
        results = await asyncio.wait_for(asyncio.gather(first, second, return_exceptions=True), timeout=1.0)
        assert all(isinstance(result, ConnectionLostError) for result in results)
        assert client.pending_count == 0
        await client.stop()

    asyncio.run(_run())


def test_reconnects_after_close() -> None:
    async def _run() -> None:
        first, second = FakeSocket(), FakeSocket()
        connector = FakeConnector([first, second])
        client = _client(connector)
        client.start()
        assert isinstance(await asyncio.wait_for(client.next_event(), timeout=1.0), ReadyEvent)
        first.drop()
        assert isinstance(await asyncio.wait_for(client.next_event(), timeout=1.0), ReadyEvent)
        assert len(connector.calls) == 2
        await client.stop()

    asyncio.run(_run())


def test_failed_connect_retries_until_stopped() -> None:
    async def _run() -> None:
        connector = FakeConnector([])
        client = _client(connector)
        client.start()
        await _wait_until(lambda: len(connector.calls) >= 2)
        await client.stop()
        attempts = len(connector.calls)
        await asyncio.sleep(0.05)
        assert len(connector.calls) == attempts
        assert client.state is ConnectionState.STOPPED

    asyncio.run(_run())


def test_messages_delivered_in_order_and_bad_frames_dropped() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]))
        client.start()
        assert isinstance(await asyncio.wait_for(client.next_event(), timeout=1.0), ReadyEvent)

        socket.feed(_group_frame(1, "first"))
        socket.feed("{not json")
        socket.feed(_group_frame(999, "from myself"))
        socket.feed({"post_type": "meta_event", "meta_event_type": "heartbeat"})
        socket.feed(_group_frame(2, "second"))

        events = [await asyncio.wait_for(client.next_event(), timeout=1.0) for _ in range(2)]
        assert all(isinstance(event, MessageEvent) for event in events)
        assert [event.message.plain_text for event in events] == ["first", "second"]  # type: ignore[union-attr]
        assert client.connected
        await client.stop()

    asyncio.run(_run())


def test_deeply_nested_frame_is_dropped_and_connection_survives() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]))
        client.start()
        assert isinstance(await asyncio.wait_for(client.next_event(), timeout=1.0), ReadyEvent)

        socket.feed("[" * 100000)
        socket.feed(_group_frame(1, "after"))

        event = await asyncio.wait_for(client.next_event(), timeout=1.0)
        assert isinstance(event, MessageEvent)
        assert event.message.plain_text == "after"
        assert client.connected
        await client.stop()

    asyncio.run(_run())


class BrokenSocket(FakeSocket):
    """Connection whose reader fails with an unexpected error."""

    async def __anext__(self) -> str:
        raise RuntimeError("reader exploded")


def test_unexpected_reader_error_schedules_reconnect() -> None:
    async def _run() -> None:
        broken, healthy = BrokenSocket(), FakeSocket()
        connector = FakeConnector([broken, healthy])
        client = _client(connector)
        client.start()

        assert isinstance(await asyncio.wait_for(client.next_event(), timeout=1.0), ReadyEvent)
        assert isinstance(await asyncio.wait_for(client.next_event(), timeout=1.0), ReadyEvent)
        assert len(connector.calls) == 2
        assert broken.closed
        assert client.connected

        healthy.feed(_group_frame(1, "still here"))
        event = await asyncio.wait_for(client.next_event(), timeout=1.0)
        assert isinstance(event, MessageEvent)
        await client.stop()

    asyncio.run(_run())


def test_send_text_quotes_in_group() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]))
        client.start()
        await _wait_until(lambda: client.connected)
        socket.feed(_group_frame(1, "hi"))
        await client.next_event()
        event = await asyncio.wait_for(client.next_event(), timeout=1.0)
        assert isinstance(event, MessageEvent)

        task = asyncio.create_task(client.send_text(event.message, "hello", quote=True))
        await _wait_until(lambda: bool(socket.sent))
        envelope = socket.sent[0]
        assert envelope["action"] == "send_group_msg"
        assert envelope["params"] == {
            "group_id": 456,
            "message": [
                {"type": "reply", "data": {"id": "1"}},
                {"type": "text", "data": {"text": "hello"}},
            ],
        }
        socket.feed({"echo": envelope["echo"], "status": "ok"})
        await asyncio.wait_for(task, timeout=1.0)
        await client.stop()

    asyncio.run(_run())


def test_react_to_message_swallows_failures() -> None:
    async def _run() -> None:
        socket = FakeSocket()
        client = _client(FakeConnector([socket]), action_timeout_s=0.02)
        client.start()
        await _wait_until(lambda: client.connected)
        socket.feed(_group_frame(1, "hi"))
        await client.next_event()
        event = await asyncio.wait_for(client.next_event(), timeout=1.0)
        assert isinstance(event, MessageEvent)
        assert await client.react_to_message(event.message, 66) is False
        assert socket.sent[0]["action"] == "set_msg_emoji_like"
        assert socket.sent[0]["params"] == {"message_id": 1, "emoji_id": "66"}
        await client.stop()

    asyncio.run(_run())
