"""Per-channel conversation engine.

ConversationManager keeps one ConversationState per channel key and exposes
a single reply() entry point. It is responsible for:

1. State Lifecycle:
   - Creating state lazily, hydrated from the session store
   - Applying the default persona when nothing was persisted
   - Dropping state (and its persisted record) on reset()

2. Memory Management:
   - Rolling summarization once history passes ``summary_trigger``
   - Truncating history to half the context after a summary
   - Trimming history to ``max_context_messages`` once it doubles

3. Prompt Composition:
   - System prompt, persona, summary and directives, then recent turns
   - Deep mode: lower temperature and the reasoner model

4. Accounting:
   - Forwarding usage of every completion to the usage store

Callers serialize reply() per channel with ChannelLock; the manager itself
does no locking. BackendError from the main call propagates to the caller,
as does StorageError from hydrating a channel. Summarization failures,
including a summary the session store could not save, are logged and the
reply proceeds.
"""

from __future__ import annotations

import json
import logging

from ..errors import BackendError, StorageError, SummarizationError
from ..llm import ChatResult, LLMClient
from ..logging import log_context
from ..state import ChatTurn, ConversationState
from ..storage import SessionStore, UsageStore, NullSessionStore
from .prompt import recent_turns, build_reply_turns, build_summary_turns
from .settings import ConversationSettings

logger = logging.getLogger(__name__)


class ConversationManager:
    """Owns the channel-key -> ConversationState map."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        usage_store: UsageStore | None = None,
        session_store: SessionStore | None = None,
        settings: ConversationSettings | None = None,
    ) -> None:
        self._llm = llm
        self._usage_store = usage_store
        self._session_store = session_store or NullSessionStore()
        self.settings = settings or ConversationSettings()
        self._sessions: dict[str, ConversationState] = {}

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def get_state(self, channel_key: str) -> ConversationState | None:
        """Return in-memory state without creating it."""
        return self._sessions.get(channel_key)

    # ============================================================================
    # State lifecycle
    # ============================================================================
    async def _ensure_state(self, channel_key: str) -> ConversationState:
        state = self._sessions.get(channel_key)
        if state is not None:
            return state

        meta = await self._session_store.get(channel_key)
        # another caller may have created it while the store was queried
        state = self._sessions.get(channel_key)
        if state is not None:
            return state

        state = ConversationState()
        if meta is not None and meta.summary:
            state.summary = meta.summary
        if meta is not None and meta.persona:
            state.persona = meta.persona
        elif self.settings.default_persona in self.settings.persona_presets:
            state.persona = self.settings.default_persona
        self._sessions[channel_key] = state
        return state

    async def reset(self, channel_key: str) -> None:
        """Forget the channel's memory, in process and in the session store."""
        self._sessions.pop(channel_key, None)
        await self._session_store.clear(channel_key)

    async def set_persona(self, channel_key: str, persona: str | None) -> None:
        """Switch (or clear, with None) the persona; history is kept."""
        state = await self._ensure_state(channel_key)
        state.persona = persona
        await self._session_store.save_persona(channel_key, persona)

    def get_persona(self, channel_key: str) -> str | None:
        state = self._sessions.get(channel_key)
        return state.persona if state is not None else None

    # ============================================================================
    # Reply
    # ============================================================================
    async def reply(self, channel_key: str, text: str, *, deep: bool = False) -> str:
        """Answer ``text`` in the channel's conversation.

        Raises:
            BackendError: If the main completion call fails.
            StorageError: If the channel's stored session could not be read.
        """
        with log_context(channel_key=channel_key):
            settings = self.settings
            state = await self._ensure_state(channel_key)
            state.history.append(ChatTurn("user", text))

            if len(state.history) > settings.summary_trigger:
                try:
                    await self._summarize(channel_key, state)
                except SummarizationError as exc:
                    logger.warning("Skipping summary for %s: %s", channel_key, exc)

            turns = build_reply_turns(state, settings, deep=deep)
            if deep:
                result = await self._call(
                    turns,
                    label=f"reply:deep:{channel_key}",
                    max_tokens=settings.max_tokens,
                    temperature=max(settings.temperature - settings.deep_temperature_drop, 0.0),
                    model=settings.reasoner_model or settings.model,
                )
            else:
                result = await self._call(turns, label=f"reply:{channel_key}")

            state.history.append(ChatTurn("assistant", result.text))
            if len(state.history) > settings.max_context_messages * 2:
                state.history = recent_turns(state.history, settings.max_context_messages)

            await self._record_usage(result)
            return result.text

    async def _summarize(self, channel_key: str, state: ConversationState) -> None:
        """Replace the rolling summary and truncate history.

        Raises:
            SummarizationError: If the call or the persistence failed; state
                is left untouched in that case.
        """
        settings = self.settings
        turns = build_summary_turns(state, settings)
        try:
            result = await self._call(
                turns,
                label=f"summary:{channel_key}",
                max_tokens=settings.summary_max_tokens,
                temperature=settings.summary_temperature,
            )
            await self._session_store.save_summary(channel_key, result.text)
        except (BackendError, StorageError, OSError, ValueError) as exc:
            raise SummarizationError(str(exc)) from exc

        state.summary = result.text
        state.history = recent_turns(state.history, settings.max_context_messages // 2)
        logger.info("Summarized %s, kept %d turns", channel_key, len(state.history))
        await self._record_usage(result)

    async def _call(
        self,
        turns: list[ChatTurn],
        *,
        label: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        model: str | None = None,
    ) -> ChatResult:
        if self.settings.log_prompts:
            logger.info(
                "LLM prompt[%s]: %s",
                label,
                json.dumps([turn.as_dict() for turn in turns], ensure_ascii=False),
            )
        result = await self._llm.chat(turns, max_tokens=max_tokens, temperature=temperature, model=model)
        if self.settings.log_responses:
            logger.info("LLM response[%s]: %s", label, result.text)
        return result

    async def _record_usage(self, result: ChatResult) -> None:
        if self._usage_store is None or result.usage.messages <= 0:
            return
        try:
            await self._usage_store.record_usage(result.usage)
        except OSError as exc:
            logger.warning("Failed to record usage: %s", exc)


__all__ = ["ConversationManager"]
