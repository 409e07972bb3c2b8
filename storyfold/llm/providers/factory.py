"""Factory for creating chat clients."""

import logging
from typing import Any, Awaitable, Callable, Optional

from ..config import DEFAULT_MODELS, LLMConfig, PlatformType
from .base import ChatClient

logger = logging.getLogger(__name__)


SUPPORTED_PLATFORMS = [p.value for p in PlatformType]


def get_chat_client(
    config: Optional[LLMConfig] = None,
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
) -> Optional[ChatClient]:
    """
    Create the chat client for the configured platform.

    Availability is a configuration check only: nothing is sent over the
    network here, and no exception escapes.

    Args:
        config: LLM configuration (defaults apply when omitted)
        sleep: Optional sleep coroutine used between retry attempts

    Returns:
        A ChatClient, or None when the platform is unknown or its
        configuration is incomplete

    Example:
        client = get_chat_client(LLMConfig.from_env())
        if client is None:
            print("LLM not configured")
    """
    config = config or LLMConfig()
    platform = (config.platform or "").strip().lower()

    if platform == PlatformType.DEEPSEEK.value:
        api_key = config.get_api_key(platform)
        if not api_key.strip():
            logger.debug("DeepSeek selected but no API key configured")
            return None

        from .deepseek import DeepSeekClient

        return DeepSeekClient(
            api_key=api_key,
            model=config.get_model(platform),
            config=config,
            sleep=sleep,
        )

    if platform == PlatformType.OLLAMA.value:
        base_url = config.get_base_url(platform)
        model = config.get_model(platform)
        if not base_url or not model:
            logger.debug("Ollama selected but base URL or model is empty")
            return None

        from .ollama import OllamaClient

        return OllamaClient(
            base_url=base_url,
            model=model,
            config=config,
            sleep=sleep,
        )

    logger.debug(
        f"Unsupported platform: {config.platform!r}. "
        f"Supported platforms: {SUPPORTED_PLATFORMS}"
    )
    return None


def get_default_model(platform: PlatformType | str) -> str:
    """
    Get the default model for a platform.

    Args:
        platform: The platform type

    Returns:
        Default model name for the platform
    """
    if isinstance(platform, str):
        platform = PlatformType(platform.lower())

    return DEFAULT_MODELS[platform.value]
