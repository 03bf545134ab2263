"""Token usage counters reported by the chat backend."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Usage:
    """Usage counters for one or more completions.

    Attributes:
        messages: Number of completions counted.
        prompt_tokens: Prompt tokens consumed.
        completion_tokens: Completion tokens generated.
    """

    messages: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0

    def add(self, other: Usage) -> None:
        self.messages += other.messages
        self.prompt_tokens += other.prompt_tokens
        self.completion_tokens += other.completion_tokens

    def as_dict(self) -> dict[str, int]:
        return {
            "messages": self.messages,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
        }


__all__ = ["Usage"]
