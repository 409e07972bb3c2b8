"""
LLM Integration Module for StoryFold.

This module provides a small, backend-agnostic chat layer:
- One client per backend protocol (DeepSeek hosted API, local Ollama)
- Shared retry logic with a fixed pause between attempts
- A factory that returns None instead of raising when unconfigured
- Helpers for pulling JSON arrays out of free-form model text

Usage:
    from storyfold.llm import LLMConfig, ChatMessage, get_chat_client

    client = get_chat_client(LLMConfig.from_env())
    if client is not None:
        async with client:
            text = await client.chat([ChatMessage.user("Hello, world!")])
"""

from .config import (
    DEFAULT_BASE_URLS,
    DEFAULT_MODELS,
    LLMConfig,
    PlatformType,
)
from .parser import (
    ParseError,
    extract_json_array,
    parse_json_array,
)
from .providers import (
    SUPPORTED_PLATFORMS,
    ChatClient,
    ChatMessage,
    ChatOptions,
    DeepSeekClient,
    MessageRole,
    OllamaClient,
    get_chat_client,
    get_default_model,
)

__all__ = [
    # Config
    "LLMConfig",
    "PlatformType",
    "DEFAULT_MODELS",
    "DEFAULT_BASE_URLS",
    # Clients
    "ChatClient",
    "ChatMessage",
    "ChatOptions",
    "MessageRole",
    "DeepSeekClient",
    "OllamaClient",
    "SUPPORTED_PLATFORMS",
    "get_chat_client",
    "get_default_model",
    # Parser
    "ParseError",
    "extract_json_array",
    "parse_json_array",
]
