"""Prefix commands.

Built-in commands:

    help                 list commands
    reset                forget this channel's conversation
    deep <question>      answer with the reasoner settings
    persona [name]       list presets or switch this channel's persona
    usage                cumulative completion usage

Admin only:

    mute-on / mute-off   silence the bot in this channel
    allow <id>           add to the allowlist
    deny <id>            add to the denylist
    config               show the running configuration
    status               show runtime counters
    search <kw> [limit]  search the message archive

Commands that touch conversation state run under the channel lock so they
never interleave with a reply in progress.
"""

from __future__ import annotations

import logging
from datetime import datetime
from dataclasses import dataclass
from collections.abc import Callable, Awaitable

from ..admission import ChannelLock
from ..conversation import ConversationManager
from ..state import ParsedMessage
from ..storage import MessageStore, JsonStateStore
from .policy import BotPolicy

logger = logging.getLogger(__name__)

ADMIN_ONLY_TEXT = "This command is for admins only."


@dataclass(slots=True)
class CommandContext:
    """Everything a command handler may read or change."""

    message: ParsedMessage
    channel_key: str
    policy: BotPolicy
    conversations: ConversationManager
    locks: ChannelLock
    state_store: JsonStateStore
    message_store: MessageStore
    registry: CommandRegistry

    @property
    def is_admin(self) -> bool:
        return self.policy.is_admin(self.message.user_id)


CommandHandler = Callable[[CommandContext, list[str]], Awaitable[str | None]]


@dataclass(frozen=True, slots=True)
class Command:
    name: str
    handler: CommandHandler
    usage: str = ""
    admin_only: bool = False


class CommandRegistry:
    """Case-insensitive name -> handler table."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        *,
        usage: str = "",
        admin_only: bool = False,
    ) -> None:
        key = name.lower()
        self._commands[key] = Command(name=key, handler=handler, usage=usage, admin_only=admin_only)

    def get(self, name: str) -> Command | None:
        return self._commands.get(name.lower())

    def names(self) -> list[str]:
        return list(self._commands)

    def commands(self) -> list[Command]:
        return list(self._commands.values())

    async def execute(self, name: str, ctx: CommandContext, args: list[str]) -> str | None:
        """Run a command. Unknown names return None."""
        command = self.get(name)
        if command is None:
            return None
        if command.admin_only and not ctx.is_admin:
            return ADMIN_ONLY_TEXT
        logger.info("Running command %s", command.name)
        return await command.handler(ctx, args)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._commands

    def __len__(self) -> int:
        return len(self._commands)


# ============================================================================
# Built-in handlers
# ============================================================================
async def _help(ctx: CommandContext, args: list[str]) -> str:
    prefix = ctx.policy.prefix
    lines = [f"{ctx.policy.bot_name} commands:"]
    admin: list[str] = []
    for command in ctx.registry.commands():
        if command.admin_only:
            admin.append(f"{prefix}{command.name}")
            continue
        lines.append(f"{prefix}{command.usage or command.name}")
    if admin:
        lines.append("Admin: " + " ".join(admin))
    return "\n".join(lines)


async def _reset(ctx: CommandContext, args: list[str]) -> str:
    await ctx.locks.run(ctx.channel_key, lambda: ctx.conversations.reset(ctx.channel_key))
    return "Conversation context has been reset."


async def _deep(ctx: CommandContext, args: list[str]) -> str:
    question = " ".join(args).strip()
    if not question:
        return f"Usage: {ctx.policy.prefix}deep <question>"
    return await ctx.locks.run(
        ctx.channel_key,
        lambda: ctx.conversations.reply(ctx.channel_key, question, deep=True),
    )


async def _persona(ctx: CommandContext, args: list[str]) -> str:
    presets = ctx.conversations.settings.persona_presets
    available = ", ".join(presets)
    if not args:
        current = ctx.conversations.get_persona(ctx.channel_key) or "none"
        return (
            f"Current persona: {current}. Available: {available}. "
            f"Use {ctx.policy.prefix}persona <name> to switch."
        )
    name = args[0]
    if name not in presets:
        return f"Unknown persona {name}. Available: {available}"
    await ctx.locks.run(ctx.channel_key, lambda: ctx.conversations.set_persona(ctx.channel_key, name))
    return f"Persona switched to {name}."


async def _usage(ctx: CommandContext, args: list[str]) -> str:
    usage = ctx.state_store.usage
    return (
        f"Completions: {usage.messages}, prompt tokens: {usage.prompt_tokens}, "
        f"completion tokens: {usage.completion_tokens}"
    )


async def _mute_on(ctx: CommandContext, args: list[str]) -> str:
    await ctx.state_store.mute(ctx.channel_key)
    return "The bot is now muted in this channel."


async def _mute_off(ctx: CommandContext, args: list[str]) -> str:
    await ctx.state_store.unmute(ctx.channel_key)
    return "The bot is no longer muted in this channel."


async def _allow(ctx: CommandContext, args: list[str]) -> str:
    if not args:
        return f"Usage: {ctx.policy.prefix}allow <user id>"
    await ctx.state_store.allow(args[0])
    return f"Added to allowlist: {args[0]}"


async def _deny(ctx: CommandContext, args: list[str]) -> str:
    if not args:
        return f"Usage: {ctx.policy.prefix}deny <user id>"
    await ctx.state_store.deny(args[0])
    return f"Added to denylist: {args[0]}"


async def _config(ctx: CommandContext, args: list[str]) -> str:
    policy = ctx.policy
    return "\n".join(
        [
            f"Bot: {policy.bot_name}",
            f"OneBot: {policy.endpoint}",
            f"Model: {policy.model}",
            f"Context turns: {policy.max_context_messages}",
            f"Summary trigger: {policy.summary_trigger}",
            f"Whitelist mode: {policy.whitelist_mode}",
        ]
    )


async def _status(ctx: CommandContext, args: list[str]) -> str:
    usage = ctx.state_store.usage
    return "\n".join(
        [
            f"Active sessions: {ctx.conversations.active_sessions}",
            f"Completions: {usage.messages}",
            f"Allowlist: {len(ctx.state_store.list_allowed())}",
            f"Denylist: {len(ctx.state_store.list_denied())}",
            f"Muted channels: {len(ctx.state_store.list_muted())}",
        ]
    )


async def _search(ctx: CommandContext, args: list[str]) -> str:
    policy = ctx.policy
    usage_text = f"Usage: {policy.prefix}search <keyword> [limit]"
    if not policy.log_chat_history:
        return "Message archiving is disabled."
    if not args:
        return usage_text
    limit = policy.search_default_limit
    if len(args) > 1 and args[-1].isdigit():
        limit = min(max(int(args[-1]), 1), policy.search_max_limit)
        args = args[:-1]
    keyword = " ".join(args).strip()
    if not keyword:
        return usage_text
    results = await ctx.message_store.search(keyword, limit=limit)
    if not results:
        return "No matching messages."
    return "\n".join(
        f"{datetime.fromtimestamp(row.ts / 1000):%Y-%m-%d %H:%M} [{row.channel_key}] {row.user_id}: {row.text}"
        for row in results
    )


def register_builtin_commands(registry: CommandRegistry) -> CommandRegistry:
    registry.register("help", _help, usage="help")
    registry.register("reset", _reset, usage="reset")
    registry.register("deep", _deep, usage="deep <question>")
    registry.register("persona", _persona, usage="persona [name]")
    registry.register("usage", _usage, usage="usage")
    registry.register("mute-on", _mute_on, admin_only=True)
    registry.register("mute-off", _mute_off, admin_only=True)
    registry.register("allow", _allow, usage="allow <user id>", admin_only=True)
    registry.register("deny", _deny, usage="deny <user id>", admin_only=True)
    registry.register("config", _config, admin_only=True)
    registry.register("status", _status, admin_only=True)
    registry.register("search", _search, usage="search <keyword> [limit]", admin_only=True)
    return registry


def build_default_registry() -> CommandRegistry:
    return register_builtin_commands(CommandRegistry())


__all__ = [
    "ADMIN_ONLY_TEXT",
    "Command",
    "CommandContext",
    "CommandHandler",
    "CommandRegistry",
    "build_default_registry",
    "register_builtin_commands",
]
