"""Unit tests for the JSON moderation and usage store."""

from __future__ import annotations

import json
import asyncio
from pathlib import Path

from relay.state import Usage
from relay.storage import JsonStateStore


def test_load_creates_file_from_seeds(tmp_path: Path) -> None:
    path = tmp_path / "data" / "state.json"
    store = JsonStateStore(path, allow_seed=["1", "1", "2"], deny_seed=["3"])
    store.load()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["allowlist"] == ["1", "2"]
    assert data["denylist"] == ["3"]
    assert data["muted_channels"] == []
    assert data["usage"] == {"messages": 0, "prompt_tokens": 0, "completion_tokens": 0}


def test_load_reads_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps(
            {
                "allowlist": [10],
                "denylist": ["20"],
                "muted_channels": ["onebot:group:1"],
                "usage": {"messages": 3, "prompt_tokens": 30, "completion_tokens": 9},
            }
        ),
        encoding="utf-8",
    )
    store = JsonStateStore(path, allow_seed=["ignored"])
    store.load()
    assert store.list_allowed() == ["10"]
    assert store.is_denied("20")
    assert store.is_muted("onebot:group:1")
    assert store.usage.messages == 3


def test_unreadable_file_keeps_defaults(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{broken", encoding="utf-8")
    store = JsonStateStore(path, deny_seed=["9"])
    store.load()
    assert store.list_denied() == ["9"]


def test_mutations_are_persisted(tmp_path: Path) -> None:
    async def _run() -> None:
        path = tmp_path / "state.json"
        store = JsonStateStore(path)
        store.load()
        await store.mute("onebot:group:1")
        await store.allow("100")
        await store.deny("200")
        await store.record_usage(Usage(messages=1, prompt_tokens=7, completion_tokens=2))
        await store.record_usage(Usage(messages=1, prompt_tokens=3, completion_tokens=1))

        reloaded = JsonStateStore(path)
        reloaded.load()
        assert reloaded.is_muted("onebot:group:1")
        assert reloaded.list_allowed() == ["100"]
        assert reloaded.list_denied() == ["200"]
        assert reloaded.usage.as_dict() == {"messages": 2, "prompt_tokens": 10, "completion_tokens": 3}

        await store.unmute("onebot:group:1")
        reloaded.load()
        assert not reloaded.is_muted("onebot:group:1")

    asyncio.run(_run())


def test_allow_and_deny_are_exclusive(tmp_path: Path) -> None:
    async def _run() -> None:
        store = JsonStateStore(tmp_path / "state.json")
        await store.deny("1")
        await store.allow("1")
        assert store.list_allowed() == ["1"]
        assert store.list_denied() == []
        await store.deny("1")
        assert store.list_allowed() == []
        assert store.list_denied() == ["1"]

    asyncio.run(_run())


def test_access_rules() -> None:
    store = JsonStateStore(Path("unused.json"), allow_seed=["ok"], deny_seed=["bad", "admin"])
    admins = ["admin"]
    assert store.is_allowed("admin", admins, whitelist_mode=True)
    assert not store.is_allowed("bad", admins, whitelist_mode=False)
    assert store.is_allowed("anyone", admins, whitelist_mode=False)
    assert not store.is_allowed("anyone", admins, whitelist_mode=True)
    assert store.is_allowed("ok", admins, whitelist_mode=True)
    assert not store.is_allowed("", admins, whitelist_mode=False)
    assert store.is_denied(None)


def test_usage_property_is_a_copy(tmp_path: Path) -> None:
    store = JsonStateStore(tmp_path / "state.json")
    snapshot = store.usage
    snapshot.messages = 99
    assert store.usage.messages == 0
