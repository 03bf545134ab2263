"""Unit tests for reply and summary prompt composition."""

from __future__ import annotations

from relay.state import ChatTurn, ConversationState
from relay.conversation import ConversationSettings, build_reply_turns, build_summary_turns, serialize_history
from relay.conversation.prompt import recent_turns


def _settings(**overrides: object) -> ConversationSettings:
    settings = ConversationSettings(
        max_context_messages=2,
        summary_trigger=3,
        system_prompt="SYSTEM",
        force_plain_text=True,
        plain_text_prompt="PLAIN",
        deep_think_prompt="DEEP",
        summary_instruction="SUMMARIZE",
        summary_prefix="Summary: ",
        persona_presets={"pirate": "ARR"},
    )
    for name, value in overrides.items():
        setattr(settings, name, value)
    return settings


def _history(count: int) -> list[ChatTurn]:
    return [ChatTurn("user" if index % 2 == 0 else "assistant", f"t{index}") for index in range(count)]


def test_recent_turns_bounds() -> None:
    history = _history(5)
    assert recent_turns(history, 2) == history[-2:]
    assert recent_turns(history, 10) == history
    assert recent_turns(history, 0) == []
    assert recent_turns(history, -1) == []


def test_reply_turn_order_with_everything_enabled() -> None:
    state = ConversationState(history=_history(4), summary="old stuff", persona="pirate")
    turns = build_reply_turns(state, _settings(), deep=True)
    assert [turn.content for turn in turns] == ["SYSTEM", "ARR", "Summary: old stuff", "PLAIN", "DEEP", "t2", "t3"]
    assert all(turn.role == "system" for turn in turns[:5])


def test_reply_turns_skip_unset_parts() -> None:
    state = ConversationState(history=_history(1), persona="unknown")
    turns = build_reply_turns(state, _settings(force_plain_text=False))
    assert turns == [ChatTurn("system", "SYSTEM"), ChatTurn("user", "t0")]


def test_serialize_history_lines() -> None:
    assert serialize_history(_history(2)) == "user: t0\nassistant: t1"
    assert serialize_history([]) == ""


def test_summary_turns_cover_last_trigger_turns() -> None:
    state = ConversationState(history=_history(5))
    turns = build_summary_turns(state, _settings())
    assert turns[0] == ChatTurn("system", "SUMMARIZE")
    assert turns[1] == ChatTurn("system", "PLAIN")
    assert turns[2] == ChatTurn("user", "user: t2\nassistant: t3\nuser: t4")
