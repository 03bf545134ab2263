"""Unit tests for per-task log fields."""

from __future__ import annotations

import asyncio
import logging

import pytest

from relay.logging import UNSET, log_context, current_log_context, install_log_context


def test_nested_blocks_override_only_given_fields() -> None:
    with log_context(channel_key="onebot:group:1", user_id="42"):
        with log_context(echo="action-1", user_id=None):
            assert current_log_context() == {
                "channel_key": "onebot:group:1",
                "user_id": "42",
                "echo": "action-1",
            }
        assert current_log_context()["echo"] == UNSET
    assert current_log_context() == {"channel_key": UNSET, "user_id": UNSET, "echo": UNSET}


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(TypeError, match="session_id"):
        with log_context(session_id="s1"):
            pass


def test_tasks_keep_their_own_fields() -> None:
    async def _handle(channel_key: str, seen: dict[str, str]) -> None:
        with log_context(channel_key=channel_key):
            await asyncio.sleep(0)
            seen[channel_key] = current_log_context()["channel_key"]

    async def _run() -> dict[str, str]:
        seen: dict[str, str] = {}
        await asyncio.gather(_handle("onebot:dm:1", seen), _handle("onebot:dm:2", seen))
        return seen

    assert asyncio.run(_run()) == {"onebot:dm:1": "onebot:dm:1", "onebot:dm:2": "onebot:dm:2"}


def test_records_carry_fields(caplog: pytest.LogCaptureFixture) -> None:
    install_log_context()
    logger = logging.getLogger("relay.test")
    with caplog.at_level(logging.INFO, logger="relay.test"):
        with log_context(channel_key="onebot:group:9", echo="action-9"):
            logger.info("inside")
        logger.info("outside")

    inside, outside = caplog.records
    assert (inside.channel_key, inside.user_id, inside.echo) == ("onebot:group:9", UNSET, "action-9")
    assert outside.channel_key == UNSET
