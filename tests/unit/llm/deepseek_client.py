"""Unit tests for the DeepSeek chat-completions client."""

from __future__ import annotations

import json
import asyncio
from typing import Any
from collections.abc import Callable

import httpx
import pytest

from relay.errors import BackendError
from relay.llm import DeepSeekClient
from relay.state import ChatTurn

TURNS = [ChatTurn("system", "be brief"), ChatTurn("user", "hi")]


def _client(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> DeepSeekClient:
    options: dict[str, Any] = {
        "api_key": "sk-test",
        "base_url": "https://llm.test/",
        "model": "deepseek-chat",
        "temperature": 0.8,
        "max_tokens": 256,
        "timeout_s": 1.0,
    }
    options.update(kwargs)
    return DeepSeekClient(transport=httpx.MockTransport(handler), **options)


def _completion(content: str, usage: dict[str, int] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    if usage is not None:
        body["usage"] = usage
    return body


def _chat(client: DeepSeekClient, **kwargs: Any):
    async def _run():
        try:
            return await client.chat(TURNS, **kwargs)
        finally:
            await client.aclose()

    return asyncio.run(_run())


def test_successful_completion_returns_text_and_usage() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("  hello there ", {"prompt_tokens": 12, "completion_tokens": 3}))

    result = _chat(_client(handler))

    assert result.text == "hello there"
    assert result.usage.messages == 1
    assert result.usage.prompt_tokens == 12
    assert result.usage.completion_tokens == 3
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"] == {
        "model": "deepseek-chat",
        "messages": [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}],
        "temperature": 0.8,
        "max_tokens": 256,
        "stream": False,
    }


def test_call_options_override_defaults() -> None:
    seen: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json=_completion("ok"))

    result = _chat(_client(handler), max_tokens=64, temperature=0.0, model="deepseek-reasoner")

    assert result.usage.messages == 1
    assert result.usage.prompt_tokens == 0
    assert seen["max_tokens"] == 64
    assert seen["temperature"] == 0.0
    assert seen["model"] == "deepseek-reasoner"


def test_missing_api_key_fails_without_request() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_completion("never"))

    with pytest.raises(BackendError, match="DEEPSEEK_API_KEY"):
        _chat(_client(handler, api_key=""))
    assert calls == []


def test_non_2xx_status_raises_with_status_code() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="invalid api key")

    with pytest.raises(BackendError) as exc_info:
        _chat(_client(handler))
    assert exc_info.value.status_code == 401
    assert "invalid api key" in str(exc_info.value)


@pytest.mark.parametrize(
    "body",
    [
        _completion(""),
        _completion("   "),
        {"choices": []},
        {"choices": [{"message": {"content": None}}]},
        {"error": "nothing"},
    ],
)
def test_empty_completion_raises(body: dict[str, Any]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(BackendError, match="empty completion"):
        _chat(_client(handler))


def test_non_json_body_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(BackendError, match="non-JSON"):
        _chat(_client(handler))


def test_non_object_body_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "an", "object"])

    with pytest.raises(BackendError, match="unexpected body"):
        _chat(_client(handler))


def test_timeout_raises_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(BackendError, match="timed out"):
        _chat(_client(handler))


def test_transport_error_raises_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError, match="request failed"):
        _chat(_client(handler))
