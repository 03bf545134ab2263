"""FastAPI application for the OneBot relay.

The relay's real work happens on the OneBot websocket; this HTTP surface
only hosts the process lifecycle and two read-only endpoints:

- /healthz: liveness probe
- /status: connection state, session counts and cumulative usage

Server Lifecycle:
    1. On startup: load state, migrate the database, connect to OneBot
    2. Consume inbound messages until shutdown
    3. On shutdown: drain in-flight replies, close the connection

Example:
    Run directly with uvicorn:
        $ uvicorn relay.server:app --host 0.0.0.0 --port 5140

    Or:
        $ python -m relay
"""

from __future__ import annotations

import logging
from typing import Any, Protocol
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from .logging import configure_logging
from .runtime import RelayRuntime

logger = logging.getLogger(__name__)


class Runtime(Protocol):
    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    def status(self) -> dict[str, Any]: ...


def create_app(runtime: Runtime | None = None) -> FastAPI:
    """Build the application around ``runtime`` (a RelayRuntime by default)."""
    relay = runtime if runtime is not None else RelayRuntime()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await relay.start()
        try:
            yield
        finally:
            await relay.stop()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=lifespan)
    app.state.runtime = relay

    @app.get("/healthz")
    async def healthz():
        """Health check endpoint (no authentication required)."""
        return {"status": "ok"}

    @app.get("/status")
    async def status():
        return relay.status()

    @app.get("/favicon.ico", status_code=204)
    async def favicon():
        """Suppress favicon requests from browsers/probes."""
        return None

    return app


configure_logging()
app = create_app()


__all__ = ["app", "create_app"]
