"""HTTP server configuration (health and status endpoints)."""

import os


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5140"))

# Seconds to wait for in-flight work when the process shuts down
SHUTDOWN_GRACE_S = float(os.getenv("SHUTDOWN_GRACE_S", "5"))


__all__ = ["HOST", "PORT", "SHUTDOWN_GRACE_S"]
