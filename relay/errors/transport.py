"""Protocol transport exceptions.

Every outbound action settles with either its reply or one of these errors:

- ConnectionLostError: the socket closed, errored or was never open. Pending
  actions are rejected with it immediately, without waiting for deadlines.
- ActionTimeoutError: no echo-correlated reply arrived before the deadline.
- ActionRejectedError: the remote replied with a non-OK status.
"""


class TransportError(Exception):
    """Base class for failures of an outbound OneBot action.

    Attributes:
        action: The action name (e.g. ``send_group_msg``), when known.
    """

    def __init__(self, message: str, *, action: str | None = None) -> None:
        super().__init__(message)
        self.action = action


class ConnectionLostError(TransportError, ConnectionError):
    """Raised when the websocket is unavailable or drops mid-action."""


class ActionTimeoutError(TransportError, TimeoutError):
    """Raised when an action's deadline fires before its reply arrives."""

    def __init__(self, action: str, timeout_s: float) -> None:
        super().__init__(f"OneBot action timed out after {timeout_s:.1f}s: {action}", action=action)
        self.timeout_s = timeout_s


class ActionRejectedError(TransportError):
    """Raised when the remote reports a non-OK status for an action.

    Attributes:
        reason: Remote-provided failure text.
        retcode: Remote return code, when present.
    """

    def __init__(self, action: str, reason: str, retcode: int | None = None) -> None:
        super().__init__(f"OneBot action {action} failed: {reason}", action=action)
        self.reason = reason
        self.retcode = retcode


__all__ = [
    "TransportError",
    "ConnectionLostError",
    "ActionTimeoutError",
    "ActionRejectedError",
]
