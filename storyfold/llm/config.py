"""Configuration models for LLM integration."""

import os
from enum import Enum
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr


class PlatformType(str, Enum):
    """Supported chat platforms."""

    DEEPSEEK = "deepseek"  # Hosted, key-authenticated, OpenAI-compatible
    OLLAMA = "ollama"  # Local, keyless


# Fallbacks used when a platform has no model / base URL configured
DEFAULT_MODELS = {
    PlatformType.DEEPSEEK.value: "deepseek-chat",
    PlatformType.OLLAMA.value: "llama2",
}

DEFAULT_BASE_URLS = {
    PlatformType.OLLAMA.value: "http://localhost:11434",
}

# Environment variables read by LLMConfig.from_env()
ENV_PLATFORM = "STORYFOLD_LLM_PLATFORM"
ENV_TIMEOUT = "STORYFOLD_LLM_TIMEOUT"
ENV_RETRY_ATTEMPTS = "STORYFOLD_LLM_RETRY_ATTEMPTS"
ENV_TEMPERATURE = "STORYFOLD_LLM_TEMPERATURE"
ENV_API_KEYS = {
    PlatformType.DEEPSEEK.value: "DEEPSEEK_API_KEY",
}
ENV_MODELS = {
    PlatformType.DEEPSEEK.value: "STORYFOLD_DEEPSEEK_MODEL",
    PlatformType.OLLAMA.value: "STORYFOLD_OLLAMA_MODEL",
}
ENV_BASE_URLS = {
    PlatformType.OLLAMA.value: "OLLAMA_BASE_URL",
}


class LLMConfig(BaseModel):
    """Main configuration for the chat layer."""

    # Platform selection; kept as a plain string so unknown values
    # survive and resolve to "unavailable" in the factory.
    platform: str = Field(
        default=PlatformType.DEEPSEEK.value,
        description="Active chat platform (deepseek or ollama)",
    )

    # Per-platform settings
    api_keys: dict[str, SecretStr] = Field(
        default_factory=dict,
        description="API keys keyed by platform",
    )
    models: dict[str, str] = Field(
        default_factory=dict,
        description="Model identifiers keyed by platform",
    )
    base_urls: dict[str, str] = Field(
        default_factory=dict,
        description="Base URLs keyed by platform (local backends only)",
    )

    # Request behavior
    timeout_seconds: float = Field(default=60.0, gt=0.0)
    retry_attempts: int = Field(default=2, ge=1, le=10)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    def get_api_key(self, platform: Optional[str] = None) -> str:
        """Get the API key for a platform as a plain string ("" if unset)."""
        secret = self.api_keys.get(platform or self.platform)
        if secret is None:
            return ""
        return secret.get_secret_value()

    def get_model(self, platform: Optional[str] = None) -> str:
        """Get the model for a platform, falling back to the built-in default."""
        key = platform or self.platform
        if key in self.models:
            return self.models[key]
        return DEFAULT_MODELS.get(key, "")

    def get_base_url(self, platform: Optional[str] = None) -> str:
        """Get the base URL for a platform, falling back to the built-in default."""
        key = platform or self.platform
        if key in self.base_urls:
            return self.base_urls[key]
        return DEFAULT_BASE_URLS.get(key, "")

    def masked_summary(self) -> dict[str, Any]:
        """Get a printable view of the configuration with keys masked."""
        key = self.get_api_key()
        return {
            "platform": self.platform,
            "model": self.get_model(),
            "base_url": self.get_base_url() or None,
            "api_key": f"{key[:4]}…" if key else None,
            "timeout_seconds": self.timeout_seconds,
            "retry_attempts": self.retry_attempts,
            "temperature": self.temperature,
        }

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **overrides: Any) -> "LLMConfig":
        """
        Build a configuration from environment variables.

        Values in a ``.env`` file are loaded first (without overriding the
        real environment). Explicit keyword overrides win over both.
        """
        load_dotenv(env_file)

        data: dict[str, Any] = {}

        platform = os.environ.get(ENV_PLATFORM)
        if platform:
            data["platform"] = platform.strip().lower()

        api_keys = {
            name: value
            for name, var in ENV_API_KEYS.items()
            if (value := os.environ.get(var)) is not None
        }
        models = {
            name: value
            for name, var in ENV_MODELS.items()
            if (value := os.environ.get(var)) is not None
        }
        base_urls = {
            name: value
            for name, var in ENV_BASE_URLS.items()
            if (value := os.environ.get(var)) is not None
        }
        if api_keys:
            data["api_keys"] = api_keys
        if models:
            data["models"] = models
        if base_urls:
            data["base_urls"] = base_urls

        if os.environ.get(ENV_TIMEOUT):
            data["timeout_seconds"] = os.environ[ENV_TIMEOUT]
        if os.environ.get(ENV_RETRY_ATTEMPTS):
            data["retry_attempts"] = os.environ[ENV_RETRY_ATTEMPTS]
        if os.environ.get(ENV_TEMPERATURE):
            data["temperature"] = os.environ[ENV_TEMPERATURE]

        data.update(overrides)
        return cls.model_validate(data)
