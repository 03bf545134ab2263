"""Turn-list composition for the main reply and the summary calls."""

from __future__ import annotations

from collections.abc import Sequence

from ..state import ChatTurn, ConversationState
from .settings import ConversationSettings


def recent_turns(history: Sequence[ChatTurn], count: int) -> list[ChatTurn]:
    """Return the last ``count`` turns (none when count <= 0)."""
    if count <= 0:
        return []
    return list(history[-count:])


def build_reply_turns(
    state: ConversationState,
    settings: ConversationSettings,
    *,
    deep: bool = False,
) -> list[ChatTurn]:
    """Compose the main call's turns.

    Order: system prompt, persona text, summary, plain-text directive, deep
    directive, then the most recent ``max_context_messages`` history turns.
    """
    turns = [ChatTurn("system", settings.system_prompt)]
    persona_text = settings.persona_presets.get(state.persona) if state.persona else None
    if persona_text:
        turns.append(ChatTurn("system", persona_text))
    if state.summary:
        turns.append(ChatTurn("system", f"{settings.summary_prefix}{state.summary}"))
    if settings.force_plain_text:
        turns.append(ChatTurn("system", settings.plain_text_prompt))
    if deep:
        turns.append(ChatTurn("system", settings.deep_think_prompt))
    turns.extend(recent_turns(state.history, settings.max_context_messages))
    return turns


def serialize_history(history: Sequence[ChatTurn]) -> str:
    """Render turns as ``role: content`` lines."""
    return "\n".join(f"{turn.role}: {turn.content}" for turn in history)


def build_summary_turns(state: ConversationState, settings: ConversationSettings) -> list[ChatTurn]:
    """Compose the summary call's turns from the last ``summary_trigger`` turns."""
    turns = [ChatTurn("system", settings.summary_instruction)]
    if settings.force_plain_text:
        turns.append(ChatTurn("system", settings.plain_text_prompt))
    serialized = serialize_history(recent_turns(state.history, settings.summary_trigger))
    turns.append(ChatTurn("user", serialized))
    return turns


__all__ = ["build_reply_turns", "build_summary_turns", "recent_turns", "serialize_history"]
