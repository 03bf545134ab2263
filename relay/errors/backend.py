"""Chat backend exceptions.

BackendError propagates out of ConversationManager.reply; the caller turns it
into a user-facing apology. SummarizationError never leaves the engine.
"""


class BackendError(Exception):
    """Raised when a chat-completions call fails.

    Covers a missing API key, non-2xx status, timeouts, transport errors,
    malformed bodies and empty completions.

    Attributes:
        status_code: HTTP status when the backend answered, else None.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SummarizationError(Exception):
    """Raised when a rolling summary could not be produced or stored.

    Always recovered inside the conversation engine.
    """


__all__ = ["BackendError", "SummarizationError"]
