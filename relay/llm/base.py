"""Chat backend interface consumed by the conversation engine."""

from __future__ import annotations

from typing import Protocol
from dataclasses import field, dataclass
from collections.abc import Sequence

from ..state import ChatTurn, Usage


@dataclass(slots=True)
class ChatResult:
    """Completion text plus the usage it cost."""

    text: str
    usage: Usage = field(default_factory=Usage)


class LLMClient(Protocol):
    """Opaque ``chat(turns, options) -> {text, usage}`` backend.

    Implementations raise BackendError on any failure.
    """

    async def chat(
        self,
        turns: Sequence[ChatTurn],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
        model: str | None = None,
    ) -> ChatResult: ...


__all__ = ["ChatResult", "LLMClient"]
