"""Exception classification helpers for log labels."""

from __future__ import annotations

from .limits import RateLimitError
from .storage import StorageError
from .backend import BackendError, SummarizationError
from .transport import ActionRejectedError, ActionTimeoutError, ConnectionLostError

ERROR_CATEGORIES: tuple[tuple[type[BaseException], str], ...] = (
    (RateLimitError, "rate_limit"),
    (ConnectionLostError, "connection_lost"),
    (ActionTimeoutError, "action_timeout"),
    (ActionRejectedError, "action_rejected"),
    (SummarizationError, "summarization"),
    (BackendError, "backend"),
    (StorageError, "storage"),
    (TimeoutError, "timeout"),
    (ConnectionError, "connection"),
)


def classify_error(exc: BaseException) -> str:
    """Map an exception to a log-friendly category label."""

    for cls, label in ERROR_CATEGORIES:
        if isinstance(exc, cls):
            return label
    return "unknown"


__all__ = ["ERROR_CATEGORIES", "classify_error"]
