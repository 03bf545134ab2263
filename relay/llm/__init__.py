"""Chat-completions backend clients."""

from .client import DeepSeekClient
from .base import ChatResult, LLMClient

__all__ = ["ChatResult", "DeepSeekClient", "LLMClient"]
