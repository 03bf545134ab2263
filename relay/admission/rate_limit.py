"""Keyed fixed-window rate limiter.

This module provides a per-key rate limiter using fixed windows. It is used
to throttle expensive processing of inbound messages:

- Messages per user per window
- Messages per group (or direct chat) per window
- Messages across the whole bot per window (a single fixed key)

Fixed Window Algorithm:
    Each key owns a bucket of (count, reset_at). On access:
    1. Fetch or lazily create the bucket (reset_at = now + window)
    2. If now has passed reset_at, zero the count and set reset_at = now + window
    3. If count has reached the limit, refuse without incrementing
    4. Otherwise increment and allow

Buckets are never swept; the key space is bounded by active users and groups.

Example:
    limiter = FixedWindowRateLimiter(limit=8, window_seconds=60)

    if not limiter.allow(user_id):
        wait_s = math.ceil(limiter.remaining_ms(user_id) / 1000)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from collections.abc import Callable

from ..errors import RateLimitError

# Type alias for injectable time functions (used in testing)
TimeFn = Callable[[], float]


@dataclass(slots=True)
class RateBucket:
    """Counter state of one admission key.

    Attributes:
        count: Admitted events in the current window.
        reset_at: Clock value (seconds) at which the window ends.
    """

    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Count admitted events per key over fixed windows.

    The limiter is disabled when limit <= 0 (or window_seconds <= 0), in
    which case allow() always returns True.

    Attributes:
        limit: Maximum events allowed per key per window.
        window_seconds: Duration of each window.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        now_fn: TimeFn | None = None,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            limit: Maximum events per key per window. 0 or less disables.
            window_seconds: Window duration in seconds.
            now_fn: Optional time function for testing. Defaults to time.monotonic.
        """
        self.limit = int(limit)
        self.window_seconds = max(0.0, float(window_seconds))
        self._now = now_fn or time.monotonic
        self._buckets: dict[str, RateBucket] = {}
        self._enabled = self.limit > 0 and self.window_seconds > 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def allow(self, key: str) -> bool:
        """Admit one event for ``key`` if its window still has room."""
        if not self._enabled:
            return True

        now = self._now()
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = RateBucket(count=0, reset_at=now + self.window_seconds)
            self._buckets[key] = bucket
        elif now > bucket.reset_at:
            bucket.count = 0
            bucket.reset_at = now + self.window_seconds

        if bucket.count >= self.limit:
            return False
        bucket.count += 1
        return True

    def remaining_ms(self, key: str) -> int:
        """Milliseconds until ``key``'s window resets (0 if no bucket)."""
        bucket = self._buckets.get(key)
        if bucket is None:
            return 0
        return max(0, int((bucket.reset_at - self._now()) * 1000))

    def consume(self, key: str) -> None:
        """Admit one event or raise RateLimitError carrying the retry delay.

        Raises:
            RateLimitError: If the key's window is saturated.
        """
        if self.allow(key):
            return
        raise RateLimitError(
            key=key,
            retry_in=self.remaining_ms(key) / 1000.0,
            limit=self.limit,
            window_seconds=self.window_seconds,
        )

    def __len__(self) -> int:
        return len(self._buckets)


__all__ = ["FixedWindowRateLimiter", "RateBucket", "RateLimitError"]
