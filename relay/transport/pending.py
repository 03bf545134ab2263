"""Pending outbound action table.

Each outbound action is tracked by its correlation token (``echo``) until it
settles. Settlement paths are:

1. Reply: an inbound frame carries the same echo (ok or rejected)
2. Deadline: the per-action timer fires
3. Connection loss: every entry is rejected at once
4. Write failure: the send itself raised
5. Caller gone: the awaiting coroutine was cancelled

Every path first pops the entry from the table, so only the first one to run
finds it; the per-action ``resolved`` guard additionally makes settle() a
no-op when called twice. The loser of a reply/deadline race therefore does
nothing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from dataclasses import dataclass

from ..errors import ActionRejectedError, ActionTimeoutError, ConnectionLostError
from .parser import is_action_ok, action_failure_reason

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PendingAction:
    """One in-flight outbound request.

    Attributes:
        echo: Unique correlation token.
        action: Action name, for error messages.
        timeout_s: Deadline length in seconds.
        future: Resolved with the reply envelope or failed with an error.
        timer: Deadline timer handle, cancelled on settlement.
        resolved: Set by the first settlement; later ones are no-ops.
    """

    echo: str
    action: str
    timeout_s: float
    future: asyncio.Future[dict[str, Any]]
    timer: asyncio.TimerHandle | None = None
    resolved: bool = False

    def settle(
        self,
        *,
        result: dict[str, Any] | None = None,
        error: BaseException | None = None,
    ) -> bool:
        """Resolve the action exactly once. Returns False if already resolved."""
        if self.resolved:
            return False
        self.resolved = True
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        if self.future.done():
            return True
        if error is not None:
            self.future.set_exception(error)
        else:
            self.future.set_result(result if result is not None else {})
        return True


class PendingActions:
    """Owned table of in-flight actions keyed by echo token."""

    def __init__(self) -> None:
        self._entries: dict[str, PendingAction] = {}

    def register(self, echo: str, action: str, timeout_s: float) -> PendingAction:
        """Track a new action and arm its deadline timer.

        Raises:
            ValueError: If the echo token is already in flight.
        """
        if echo in self._entries:
            raise ValueError(f"Duplicate echo token: {echo}")
        loop = asyncio.get_running_loop()
        entry = PendingAction(
            echo=echo,
            action=action,
            timeout_s=timeout_s,
            future=loop.create_future(),
        )
        if timeout_s > 0:
            entry.timer = loop.call_later(timeout_s, self.expire, echo)
        self._entries[echo] = entry
        return entry

    def resolve(self, echo: str, reply: dict[str, Any]) -> bool:
        """Settle an action from its reply envelope. False if unknown echo."""
        entry = self._entries.pop(echo, None)
        if entry is None:
            return False
        if is_action_ok(reply):
            return entry.settle(result=reply)
        retcode = reply.get("retcode")
        error = ActionRejectedError(
            entry.action,
            action_failure_reason(reply),
            retcode if isinstance(retcode, int) else None,
        )
        return entry.settle(error=error)

    def expire(self, echo: str) -> bool:
        """Fail an action whose deadline fired. False if already settled."""
        entry = self._entries.pop(echo, None)
        if entry is None:
            return False
        logger.warning("OneBot action %s timed out after %.1fs", entry.action, entry.timeout_s)
        return entry.settle(error=ActionTimeoutError(entry.action, entry.timeout_s))

    def reject(self, echo: str, error: BaseException) -> bool:
        """Fail a single action with ``error``."""
        entry = self._entries.pop(echo, None)
        if entry is None:
            return False
        return entry.settle(error=error)

    def reject_all(self, reason: str) -> int:
        """Fail every pending action with ConnectionLostError and clear the table."""
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            entry.settle(error=ConnectionLostError(reason, action=entry.action))
        return len(entries)

    def discard(self, echo: str) -> None:
        """Forget an action whose caller stopped waiting."""
        entry = self._entries.pop(echo, None)
        if entry is None:
            return
        entry.resolved = True
        if entry.timer is not None:
            entry.timer.cancel()
            entry.timer = None
        entry.future.cancel()

    def __contains__(self, echo: object) -> bool:
        return echo in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["PendingAction", "PendingActions"]
