"""Keyed FIFO serialization lock.

ChannelLock runs critical sections one at a time per key, in arrival order,
while different keys proceed independently. It is the guard around every
mutation of a channel's conversation state.

Queue Model:
    Each key maps to the tail future of its queue. A caller of run():
    1. Reads the current tail (its predecessor) and installs its own future
       as the new tail, before any suspension point
    2. Waits for the predecessor to finish
    3. Executes its task
    4. Releases its own future and, if it is still the tail, removes the key

Exceptions raised by a task propagate to that task's caller only; the next
queued caller still runs. A caller cancelled while queued releases its slot
only once its predecessor finishes, so later callers never overlap with an
earlier one.

Example:
    locks = ChannelLock()
    reply = await locks.run(channel_key, lambda: conversations.reply(channel_key, text))
"""

from __future__ import annotations

import asyncio
from typing import TypeVar
from collections.abc import Callable, Awaitable

T = TypeVar("T")


class ChannelLock:
    """Per-key FIFO mutex for async critical sections."""

    def __init__(self) -> None:
        self._tails: dict[str, asyncio.Future[None]] = {}

    async def run(self, key: str, task: Callable[[], Awaitable[T]]) -> T:
        """Run ``task`` once every earlier caller for ``key`` has finished.

        Args:
            key: Serialization key (a channel key).
            task: Zero-argument callable returning an awaitable.

        Returns:
            Whatever the task's awaitable returns.
        """
        previous = self._tails.get(key)
        current: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._tails[key] = current
        try:
            if previous is not None:
                # shield: a cancelled waiter must not cancel its predecessor's slot
                await asyncio.shield(previous)
            return await task()
        finally:
            if previous is not None and not previous.done():
                previous.add_done_callback(lambda _: self._finish(key, current))
            else:
                self._finish(key, current)

    def _finish(self, key: str, current: asyncio.Future[None]) -> None:
        """Release a slot and drop the key once its queue is empty."""
        if not current.done():
            current.set_result(None)
        if self._tails.get(key) is current:
            del self._tails[key]

    def is_locked(self, key: str) -> bool:
        """Return True while any caller holds or waits for ``key``."""
        return key in self._tails

    def __len__(self) -> int:
        return len(self._tails)


__all__ = ["ChannelLock"]
