"""Admission limits configuration (fixed windows)."""

import os


# Requests per window; 0 or less disables a limiter
USER_RATE_LIMIT = int(os.getenv("USER_RATE_LIMIT", "8"))
GROUP_RATE_LIMIT = int(os.getenv("GROUP_RATE_LIMIT", "40"))
GLOBAL_RATE_LIMIT = int(os.getenv("GLOBAL_RATE_LIMIT", "120"))
RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

GLOBAL_RATE_KEY = "global"


__all__ = [
    "USER_RATE_LIMIT",
    "GROUP_RATE_LIMIT",
    "GLOBAL_RATE_LIMIT",
    "RATE_LIMIT_WINDOW_SECONDS",
    "GLOBAL_RATE_KEY",
]
