"""Unit tests for exception classification labels."""

from __future__ import annotations

import pytest

from relay.errors import (
    BackendError,
    StorageError,
    RateLimitError,
    SummarizationError,
    ActionTimeoutError,
    ConnectionLostError,
    ActionRejectedError,
    classify_error,
)


@pytest.mark.parametrize(
    ("exc", "label"),
    [
        (RateLimitError(key="u1", retry_in=3.0, limit=2, window_seconds=60.0), "rate_limit"),
        (ConnectionLostError("gone", action="send_group_msg"), "connection_lost"),
        (ActionTimeoutError("send_group_msg", 10.0), "action_timeout"),
        (ActionRejectedError("send_group_msg", "muted", 1200), "action_rejected"),
        (SummarizationError("no summary"), "summarization"),
        (BackendError("down", status_code=502), "backend"),
        (StorageError("database is locked", operation="save_summary"), "storage"),
        (TimeoutError(), "timeout"),
        (ConnectionResetError(), "connection"),
        (RuntimeError("other"), "unknown"),
    ],
)
def test_classify_error(exc: BaseException, label: str) -> None:
    assert classify_error(exc) == label


def test_transport_errors_keep_action() -> None:
    err = ActionTimeoutError("send_private_msg", 2.5)
    assert err.action == "send_private_msg"
    assert "2.5s" in str(err)
    assert isinstance(err, TimeoutError)
    assert isinstance(ConnectionLostError("x"), ConnectionError)


def test_rate_limit_error_clamps_metadata() -> None:
    err = RateLimitError(key="g1", retry_in=-5, limit=-1, window_seconds=-2)
    assert err.retry_in == 0.0
    assert err.limit == 0
    assert err.window_seconds == 0.0
    assert str(err) == "rate limit exceeded for g1"
