"""DeepSeek chat-completions client over httpx.

Request shape (OpenAI compatible, non-streaming):

    POST {base_url}/v1/chat/completions
    Authorization: Bearer <api key>
    {"model", "messages": [{"role", "content"}], "temperature",
     "max_tokens", "stream": false}

Every failure (missing key, non-2xx, timeout, transport error, malformed
body, empty completion) surfaces as BackendError.
"""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Sequence

import httpx

from ..config import (
    DEEPSEEK_MODEL,
    DEEPSEEK_API_KEY,
    DEEPSEEK_BASE_URL,
    DEEPSEEK_MAX_TOKENS,
    DEEPSEEK_TEMPERATURE,
    DEEPSEEK_TIMEOUT_MS,
)
from ..errors import BackendError
from ..state import ChatTurn, Usage
from .base import ChatResult

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "/v1/chat/completions"


def _usage_from_body(body: dict[str, Any]) -> Usage:
    usage = body.get("usage")
    if not isinstance(usage, dict):
        return Usage(messages=1)
    return Usage(
        messages=1,
        prompt_tokens=int(usage.get("prompt_tokens") or 0),
        completion_tokens=int(usage.get("completion_tokens") or 0),
    )


def _content_from_body(body: dict[str, Any]) -> str:
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content.strip() if isinstance(content, str) else ""


class DeepSeekClient:
    """Async chat-completions client.

    Args:
        api_key: Bearer token; defaults to DEEPSEEK_API_KEY.
        base_url: API root without trailing slash.
        model: Default model name.
        temperature: Default sampling temperature.
        max_tokens: Default completion cap.
        timeout_s: Whole-request timeout.
        transport: Optional httpx transport (tests pass MockTransport).
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = DEEPSEEK_API_KEY if api_key is None else api_key
        self.base_url = (base_url or DEEPSEEK_BASE_URL).rstrip("/")
        self.model = model or DEEPSEEK_MODEL
        self.temperature = DEEPSEEK_TEMPERATURE if temperature is None else temperature
        self.max_tokens = DEEPSEEK_MAX_TOKENS if max_tokens is None else max_tokens
        self.timeout_s = DEEPSEEK_TIMEOUT_MS / 1000.0 if timeout_s is None else timeout_s
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout_s),
            transport=transport,
        )

    async def chat(
        self,
        turns: Sequence[ChatTurn],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        model: str | None = None,
    ) -> ChatResult:
        if not self.api_key:
            raise BackendError("DEEPSEEK_API_KEY is not set")

        payload = {
            "model": model or self.model,
            "messages": [turn.as_dict() for turn in turns],
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
            "stream": False,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            response = await self._http.post(COMPLETIONS_PATH, json=payload, headers=headers)
        except httpx.TimeoutException as exc:
            raise BackendError(f"DeepSeek request timed out after {self.timeout_s:.1f}s") from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"DeepSeek request failed: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            detail = response.text[:300]
            logger.warning("DeepSeek returned HTTP %s: %s", response.status_code, detail)
            raise BackendError(
                f"DeepSeek API error {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise BackendError("DeepSeek returned a non-JSON body", status_code=response.status_code) from exc
        if not isinstance(body, dict):
            raise BackendError("DeepSeek returned an unexpected body", status_code=response.status_code)

        text = _content_from_body(body)
        if not text:
            raise BackendError("DeepSeek returned an empty completion", status_code=response.status_code)
        return ChatResult(text=text, usage=_usage_from_body(body))

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["COMPLETIONS_PATH", "DeepSeekClient"]
