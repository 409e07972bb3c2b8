"""
Chat client implementations.

This module provides one client per backend protocol (DeepSeek, Ollama)
behind a common ChatClient contract, plus the factory that picks the
active one from configuration.
"""

from .base import (
    ChatClient,
    ChatMessage,
    ChatOptions,
    MessageRole,
    RETRY_DELAY_SECONDS,
)
from .deepseek import DeepSeekClient
from .ollama import OllamaClient
from .factory import SUPPORTED_PLATFORMS, get_chat_client, get_default_model

__all__ = [
    # Base
    "ChatClient",
    "ChatMessage",
    "ChatOptions",
    "MessageRole",
    "RETRY_DELAY_SECONDS",
    # Clients
    "DeepSeekClient",
    "OllamaClient",
    # Factory
    "SUPPORTED_PLATFORMS",
    "get_chat_client",
    "get_default_model",
]
