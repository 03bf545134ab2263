"""Logging setup and per-task log fields."""

from .configure import configure_logging
from .context import UNSET, log_context, current_log_context, install_log_context

__all__ = [
    "UNSET",
    "configure_logging",
    "current_log_context",
    "install_log_context",
    "log_context",
]
