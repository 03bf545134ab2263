"""Unit tests for the FastAPI health and status endpoints."""

from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from relay.server import create_app


class FakeRuntime:
    def __init__(self) -> None:
        self.events: list[str] = []

    async def start(self) -> None:
        self.events.append("start")

    async def stop(self) -> None:
        self.events.append("stop")

    def status(self) -> dict[str, Any]:
        return {"connection": "connected", "active_sessions": 2, "usage": {"messages": 5}}


def test_lifespan_starts_and_stops_runtime() -> None:
    runtime = FakeRuntime()
    app = create_app(runtime)
    with TestClient(app) as client:
        assert runtime.events == ["start"]
        assert client.get("/healthz").json() == {"status": "ok"}
    assert runtime.events == ["start", "stop"]


def test_status_reports_runtime_counters() -> None:
    runtime = FakeRuntime()
    with TestClient(create_app(runtime)) as client:
        response = client.get("/status")
    assert response.status_code == 200
    assert response.json() == {"connection": "connected", "active_sessions": 2, "usage": {"messages": 5}}


def test_favicon_is_empty() -> None:
    with TestClient(create_app(FakeRuntime())) as client:
        response = client.get("/favicon.ico")
    assert response.status_code == 204
    assert response.content == b""


def test_app_state_exposes_runtime() -> None:
    runtime = FakeRuntime()
    app = create_app(runtime)
    assert app.state.runtime is runtime
