"""Rate limiting exception with retry metadata.

This module provides the RateLimitError exception that carries information
about when a caller can retry after being throttled.
"""


class RateLimitError(Exception):
    """Raised when a rate limiter rejects an admission key.

    Attributes:
        key: The admission key that was refused (user, group or global).
        retry_in: Seconds until the key's window resets.
        limit: The maximum allowed events per window.
        window_seconds: The duration of the rate limit window.
    """

    def __init__(
        self,
        *,
        key: str,
        retry_in: float,
        limit: int,
        window_seconds: float,
        message: str | None = None,
    ) -> None:
        super().__init__(message or f"rate limit exceeded for {key}")
        self.key = key
        self.retry_in = max(0.0, float(retry_in))
        self.limit = max(0, int(limit))
        self.window_seconds = max(0.0, float(window_seconds))


__all__ = ["RateLimitError"]
