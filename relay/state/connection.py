"""Connection lifecycle states of the protocol transport.

Transitions::

    DISCONNECTED -> CONNECTING -> CONNECTED -> CLOSING | ERRORED
        -> RECONNECTING (fixed delay) -> CONNECTING ...

STOPPED is terminal until start() is called again.
"""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSING = "closing"
    ERRORED = "errored"
    RECONNECTING = "reconnecting"
    STOPPED = "stopped"


__all__ = ["ConnectionState"]
