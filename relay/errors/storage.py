"""Persistence exceptions."""


class StorageError(Exception):
    """Raised when a session store cannot read or write its database.

    Attributes:
        operation: Store operation that failed, e.g. ``save_summary``.
    """

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


__all__ = ["StorageError"]
