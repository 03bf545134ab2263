"""Per-task log fields for the relay.

Three fields ride along on every LogRecord once install_log_context() has
run, each defaulting to ``-``:

    channel_key  conversation a record belongs to (``onebot:group:<id>`` or
                 ``onebot:dm:<id>``), set by the orchestrator and by
                 ConversationManager.reply
    user_id      sender of the message being handled
    echo         correlation token of the OneBot action in flight

The default APP_LOG_FORMAT prints ``[%(channel_key)s]``; the other two are
available to custom formats. Values live in context variables, so each
message task spawned by the orchestrator carries its own copy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

UNSET = "-"

_FIELDS: dict[str, ContextVar[str]] = {
    name: ContextVar(name, default=UNSET) for name in ("channel_key", "user_id", "echo")
}


def current_log_context() -> dict[str, str]:
    """Snapshot of the fields visible to the running task."""
    return {name: var.get() for name, var in _FIELDS.items()}


@contextmanager
def log_context(**fields: str | None) -> Iterator[None]:
    """Bind log fields for the duration of a block.

    None values leave the outer binding in place, so nested blocks only
    override what they know (e.g. the transport adds ``echo`` inside a
    channel already bound by the orchestrator).

    Raises:
        TypeError: If a field name is not one of the known fields.
    """
    unknown = set(fields) - set(_FIELDS)
    if unknown:
        raise TypeError(f"Unknown log field(s): {', '.join(sorted(unknown))}")
    tokens = [
        (_FIELDS[name], _FIELDS[name].set(value))
        for name, value in fields.items()
        if value is not None
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def install_log_context() -> None:
    """Install a LogRecord factory that stamps the context fields.

    The fields are reserved afterwards: passing them through ``extra=``
    makes logging raise KeyError. Calling this more than once is a no-op.
    """
    if getattr(install_log_context, "_installed", False):
        return

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        for name, value in current_log_context().items():
            setattr(record, name, value)
        return record

    logging.setLogRecordFactory(record_factory)
    install_log_context._installed = True  # type: ignore[attr-defined]


__all__ = [
    "UNSET",
    "current_log_context",
    "install_log_context",
    "log_context",
]
