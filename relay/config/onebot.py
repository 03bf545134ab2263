"""OneBot websocket transport configuration values.

Timeouts:
    ONEBOT_RECONNECT_MS: Fixed delay before reconnecting after the socket
        closes or errors. Only one reconnect wait is ever outstanding.

    ONEBOT_ACTION_TIMEOUT_MS: Deadline for an outbound action to receive its
        echo-correlated reply before it is failed with a timeout.

Identity:
    BOT_SELF_ID: Own account id. When unset, the ``self_id`` carried by each
        inbound event is used for self-loop suppression and mention detection.

Environment Variables:
    All values can be overridden. ONEBOT_ACCESS_TOKEN is sent as a bearer
    token on the websocket handshake when present.
"""

from __future__ import annotations

import os

ONEBOT_WS_URL = os.getenv("ONEBOT_WS_URL", "ws://napcat:3001")
ONEBOT_ACCESS_TOKEN = os.getenv("ONEBOT_ACCESS_TOKEN") or None
BOT_SELF_ID = os.getenv("BOT_SELF_ID") or None

ONEBOT_RECONNECT_MS = int(os.getenv("ONEBOT_RECONNECT_MS", "5000"))
ONEBOT_ACTION_TIMEOUT_MS = int(os.getenv("ONEBOT_ACTION_TIMEOUT_MS", "10000"))

# Replies longer than this are split into several messages
ONEBOT_MESSAGE_CHUNK_CHARS = int(os.getenv("ONEBOT_MESSAGE_CHUNK_CHARS", "900"))

__all__ = [
    "ONEBOT_WS_URL",
    "ONEBOT_ACCESS_TOKEN",
    "BOT_SELF_ID",
    "ONEBOT_RECONNECT_MS",
    "ONEBOT_ACTION_TIMEOUT_MS",
    "ONEBOT_MESSAGE_CHUNK_CHARS",
]
