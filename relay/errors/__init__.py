"""Centralized exception classes for the relay.

This module re-exports all domain-specific exceptions from their respective
modules, providing a single import point for error handling.

Organization:
    - transport.py: OneBot action failures (connection lost, timeout, rejected)
    - backend.py: Chat backend and summarization failures
    - limits.py: Rate limiting errors with retry info
    - storage.py: Session store read and write failures
    - classify.py: Exception-to-label mapping for logs
"""

from .limits import RateLimitError
from .storage import StorageError
from .classify import classify_error
from .backend import BackendError, SummarizationError
from .transport import (
    TransportError,
    ConnectionLostError,
    ActionTimeoutError,
    ActionRejectedError,
)

__all__ = [
    # Transport
    "TransportError",
    "ConnectionLostError",
    "ActionTimeoutError",
    "ActionRejectedError",
    # Backend
    "BackendError",
    "SummarizationError",
    # Rate limiting
    "RateLimitError",
    # Storage
    "StorageError",
    # Classification
    "classify_error",
]
