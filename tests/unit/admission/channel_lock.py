"""Unit tests for the keyed FIFO channel lock."""

from __future__ import annotations

import asyncio

import pytest

from relay.admission import ChannelLock


def test_same_key_runs_in_submission_order_without_overlap() -> None:
    async def _run() -> list[str]:
        lock = ChannelLock()
        events: list[str] = []
        active = {"count": 0, "max": 0}

        async def job(name: str, delay: float) -> str:
            active["count"] += 1
            active["max"] = max(active["max"], active["count"])
            events.append(f"start:{name}")
            await asyncio.sleep(delay)
            events.append(f"end:{name}")
            active["count"] -= 1
            return name

        results = await asyncio.gather(
            lock.run("c1", lambda: job("a", 0.03)),
            lock.run("c1", lambda: job("b", 0.0)),
            lock.run("c1", lambda: job("c", 0.01)),
        )
        assert results == ["a", "b", "c"]
        assert active["max"] == 1
        return events

    events = asyncio.run(_run())
    assert events == ["start:a", "end:a", "start:b", "end:b", "start:c", "end:c"]


def test_distinct_keys_overlap() -> None:
    async def _run() -> None:
        lock = ChannelLock()
        both_started = asyncio.Event()
        started: set[str] = set()

        async def job(name: str) -> None:
            started.add(name)
            if len(started) == 2:
                both_started.set()
            await asyncio.wait_for(both_started.wait(), timeout=1.0)

        await asyncio.gather(lock.run("c1", lambda: job("x")), lock.run("c2", lambda: job("y")))
        assert started == {"x", "y"}

    asyncio.run(_run())


def test_exception_propagates_without_poisoning_queue() -> None:
    async def _run() -> None:
        lock = ChannelLock()

        async def boom() -> None:
            await asyncio.sleep(0)
            raise RuntimeError("boom")

        async def ok() -> str:
            return "ok"

        first = asyncio.ensure_future(lock.run("c1", boom))
        second = asyncio.ensure_future(lock.run("c1", ok))
        with pytest.raises(RuntimeError, match="boom"):
            await first
        assert await second == "ok"
        assert not lock.is_locked("c1")

    asyncio.run(_run())


def test_idle_key_is_removed() -> None:
    async def _run() -> None:
        lock = ChannelLock()

        async def job() -> int:
            assert lock.is_locked("c1")
            return 1

        assert await lock.run("c1", job) == 1
        assert not lock.is_locked("c1")
        assert len(lock) == 0

    asyncio.run(_run())


def test_cancelled_waiter_keeps_successor_behind_predecessor() -> None:
    async def _run() -> list[str]:
        lock = ChannelLock()
        events: list[str] = []
        release = asyncio.Event()

        async def first() -> None:
            events.append("first:start")
            await release.wait()
            events.append("first:end")

        async def second() -> None:
            events.append("second")

        async def third() -> None:
            events.append("third")

        t1 = asyncio.ensure_future(lock.run("c1", first))
        await asyncio.sleep(0)
        t2 = asyncio.ensure_future(lock.run("c1", second))
        await asyncio.sleep(0)
        t3 = asyncio.ensure_future(lock.run("c1", third))
        await asyncio.sleep(0)

        t2.cancel()
        with pytest.raises(asyncio.CancelledError):
            await t2
        await asyncio.sleep(0.01)
        # third must still wait for first
        assert events == ["first:start"]

        release.set()
        await asyncio.gather(t1, t3)
        assert not lock.is_locked("c1")
        return events

    assert asyncio.run(_run()) == ["first:start", "first:end", "third"]


def test_back_to_back_reply_sequences_do_not_interleave() -> None:
    async def _run() -> list[str]:
        lock = ChannelLock()
        history: list[str] = []

        async def reply(text: str) -> None:
            history.append(f"user:{text}")
            await asyncio.sleep(0.01)
            history.append(f"assistant:{text}")

        await asyncio.gather(
            lock.run("c1", lambda: reply("one")),
            lock.run("c1", lambda: reply("two")),
        )
        return history

    assert asyncio.run(_run()) == ["user:one", "assistant:one", "user:two", "assistant:two"]
