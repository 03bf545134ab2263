"""Chat bot glue: channel helpers, commands and the message orchestrator."""

from .policy import BotPolicy
from .orchestrator import MessageOrchestrator
from .channels import chunk_message, clean_user_input, build_channel_key
from .commands import CommandContext, CommandRegistry, build_default_registry

__all__ = [
    "BotPolicy",
    "CommandContext",
    "CommandRegistry",
    "MessageOrchestrator",
    "build_channel_key",
    "build_default_registry",
    "chunk_message",
    "clean_user_input",
]
