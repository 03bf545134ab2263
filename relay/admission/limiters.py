"""Admission limiter bundle used by the message orchestrator.

Three fixed-window limiters are checked in order for every non-command
message: the sender, the group (or the sender again for direct chats) and a
single global key shared by all traffic.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config import (
    USER_RATE_LIMIT,
    GROUP_RATE_LIMIT,
    GLOBAL_RATE_LIMIT,
    GLOBAL_RATE_KEY,
    RATE_LIMIT_WINDOW_SECONDS,
)
from .rate_limit import FixedWindowRateLimiter, TimeFn


@dataclass(slots=True)
class RateLimiters:
    """Per-user, per-group and global limiters."""

    user: FixedWindowRateLimiter
    group: FixedWindowRateLimiter
    global_: FixedWindowRateLimiter
    global_key: str = GLOBAL_RATE_KEY

    @classmethod
    def from_config(
        cls,
        *,
        user_limit: int = USER_RATE_LIMIT,
        group_limit: int = GROUP_RATE_LIMIT,
        global_limit: int = GLOBAL_RATE_LIMIT,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        now_fn: TimeFn | None = None,
    ) -> RateLimiters:
        return cls(
            user=FixedWindowRateLimiter(limit=user_limit, window_seconds=window_seconds, now_fn=now_fn),
            group=FixedWindowRateLimiter(limit=group_limit, window_seconds=window_seconds, now_fn=now_fn),
            global_=FixedWindowRateLimiter(limit=global_limit, window_seconds=window_seconds, now_fn=now_fn),
        )


__all__ = ["RateLimiters"]
