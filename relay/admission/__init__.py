"""Admission primitives: keyed rate limiting and per-channel serialization."""

from .lock import ChannelLock
from .limiters import RateLimiters
from .rate_limit import RateBucket, FixedWindowRateLimiter

__all__ = ["ChannelLock", "FixedWindowRateLimiter", "RateBucket", "RateLimiters"]
