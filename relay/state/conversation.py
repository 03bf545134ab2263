"""Per-channel conversation state dataclasses.

ChatTurn:
    One role-tagged entry of the dialogue (``system``, ``user`` or
    ``assistant``). The engine only stores user and assistant turns; system
    turns are composed per request.

ConversationState:
    Mutable per-channel container for the turn history, the rolling summary
    and the active persona. Mutated only while the channel's lock is held.
"""

from __future__ import annotations

from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class ChatTurn:
    """A role-tagged dialogue entry."""

    role: str
    content: str

    def as_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ConversationState:
    """Container for one channel's dialogue memory.

    Attributes:
        history: Chronologically ordered user/assistant turns.
        summary: Rolling summary of older turns, if one was produced.
        persona: Active persona preset name, if any.
    """

    history: list[ChatTurn] = field(default_factory=list)
    summary: str | None = None
    persona: str | None = None


__all__ = ["ChatTurn", "ConversationState"]
