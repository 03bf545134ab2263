"""JSON-file store for moderation state and cumulative usage.

Layout of ``state.json``::

    {
        "allowlist": ["10001", ...],
        "denylist": ["10002", ...],
        "muted_channels": ["onebot:group:123", ...],
        "usage": {"messages": 0, "prompt_tokens": 0, "completion_tokens": 0}
    }

Reads are served from memory; every mutation rewrites the file on a worker
thread (write to a temp file, then atomic replace). An unreadable file logs
a warning and the store starts from the configured seeds.
"""

from __future__ import annotations

import json
import asyncio
import logging
from typing import Any, Protocol
from pathlib import Path
from collections.abc import Iterable

from ..state import Usage

logger = logging.getLogger(__name__)


class UsageStore(Protocol):
    """Sink for per-completion usage counters."""

    async def record_usage(self, usage: Usage) -> None: ...


class JsonStateStore:
    """Allow/deny lists, muted channels and usage totals in one JSON file."""

    def __init__(
        self,
        path: Path,
        *,
        allow_seed: Iterable[str] = (),
        deny_seed: Iterable[str] = (),
    ) -> None:
        self.path = Path(path)
        self._allowed: list[str] = list(dict.fromkeys(allow_seed))
        self._denied: list[str] = list(dict.fromkeys(deny_seed))
        self._muted: list[str] = []
        self._usage = Usage()
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------ #
    # Loading / saving
    # ------------------------------------------------------------------ #

    def load(self) -> None:
        """Read the file if present, otherwise create it from the seeds."""
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write(self._snapshot())
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s, starting from defaults: %s", self.path, exc)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: top level is not an object", self.path)
            return
        self._allowed = [str(item) for item in data.get("allowlist") or []]
        self._denied = [str(item) for item in data.get("denylist") or []]
        self._muted = [str(item) for item in data.get("muted_channels") or []]
        usage = data.get("usage") or {}
        self._usage = Usage(
            messages=int(usage.get("messages") or 0),
            prompt_tokens=int(usage.get("prompt_tokens") or 0),
            completion_tokens=int(usage.get("completion_tokens") or 0),
        )

    def _snapshot(self) -> dict[str, Any]:
        return {
            "allowlist": list(self._allowed),
            "denylist": list(self._denied),
            "muted_channels": list(self._muted),
            "usage": self._usage.as_dict(),
        }

    def _write(self, snapshot: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(snapshot, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    async def _save(self) -> None:
        snapshot = self._snapshot()
        async with self._write_lock:
            await asyncio.to_thread(self._write, snapshot)

    # ------------------------------------------------------------------ #
    # Usage
    # ------------------------------------------------------------------ #

    @property
    def usage(self) -> Usage:
        return Usage(
            messages=self._usage.messages,
            prompt_tokens=self._usage.prompt_tokens,
            completion_tokens=self._usage.completion_tokens,
        )

    async def record_usage(self, usage: Usage) -> None:
        self._usage.add(usage)
        await self._save()

    # ------------------------------------------------------------------ #
    # Muting
    # ------------------------------------------------------------------ #

    def is_muted(self, channel_key: str) -> bool:
        return channel_key in self._muted

    async def mute(self, channel_key: str) -> None:
        if channel_key in self._muted:
            return
        self._muted.append(channel_key)
        await self._save()

    async def unmute(self, channel_key: str) -> None:
        if channel_key not in self._muted:
            return
        self._muted.remove(channel_key)
        await self._save()

    # ------------------------------------------------------------------ #
    # Access lists
    # ------------------------------------------------------------------ #

    async def allow(self, user_id: str) -> None:
        """Add to the allowlist, removing any deny entry."""
        if user_id in self._allowed and user_id not in self._denied:
            return
        if user_id not in self._allowed:
            self._allowed.append(user_id)
        if user_id in self._denied:
            self._denied.remove(user_id)
        await self._save()

    async def deny(self, user_id: str) -> None:
        """Add to the denylist, removing any allow entry."""
        if user_id in self._denied and user_id not in self._allowed:
            return
        if user_id not in self._denied:
            self._denied.append(user_id)
        if user_id in self._allowed:
            self._allowed.remove(user_id)
        await self._save()

    def is_denied(self, user_id: str | None) -> bool:
        if not user_id:
            return True
        return user_id in self._denied

    def is_allowed(self, user_id: str | None, admins: Iterable[str], whitelist_mode: bool) -> bool:
        """Admins always pass; denied users never do; whitelist mode needs the allowlist."""
        if not user_id:
            return False
        if user_id in set(admins):
            return True
        if user_id in self._denied:
            return False
        if not whitelist_mode:
            return True
        return user_id in self._allowed

    def list_allowed(self) -> list[str]:
        return list(self._allowed)

    def list_denied(self) -> list[str]:
        return list(self._denied)

    def list_muted(self) -> list[str]:
        return list(self._muted)


__all__ = ["JsonStateStore", "UsageStore"]
