"""Tests for the chat client factory."""

import pytest

from storyfold.llm.config import LLMConfig, PlatformType
from storyfold.llm.providers import (
    SUPPORTED_PLATFORMS,
    DeepSeekClient,
    OllamaClient,
    get_chat_client,
    get_default_model,
)


class TestGetChatClient:
    """Tests for get_chat_client()."""

    def test_deepseek_with_key(self):
        """Test DeepSeek client creation."""
        config = LLMConfig(api_keys={"deepseek": "sk-test"}, models={"deepseek": "deepseek-coder"})
        client = get_chat_client(config)
        assert isinstance(client, DeepSeekClient)
        assert client.model == "deepseek-coder"

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_deepseek_without_key(self, key):
        """Test that a missing or blank key means unavailable."""
        api_keys = {} if key is None else {"deepseek": key}
        assert get_chat_client(LLMConfig(api_keys=api_keys)) is None

    def test_ollama_defaults(self):
        """Test Ollama works without any key."""
        client = get_chat_client(LLMConfig(platform="ollama"))
        assert isinstance(client, OllamaClient)
        assert client.endpoint == "http://localhost:11434/api/chat"
        assert client.model == "llama2"

    def test_ollama_empty_model(self):
        """Test that an explicitly empty Ollama model means unavailable."""
        config = LLMConfig(platform="ollama", models={"ollama": ""})
        assert get_chat_client(config) is None

    def test_ollama_empty_base_url(self):
        """Test that an explicitly empty base URL means unavailable."""
        config = LLMConfig(platform="ollama", base_urls={"ollama": ""})
        assert get_chat_client(config) is None

    @pytest.mark.parametrize("platform", ["openai", "", "gemini"])
    def test_unknown_platform(self, platform):
        """Test that unknown platforms are unavailable, not errors."""
        assert get_chat_client(LLMConfig(platform=platform)) is None

    def test_client_inherits_request_settings(self):
        """Test that timeout, retries and temperature come from config."""
        config = LLMConfig(
            platform="ollama", timeout_seconds=5, retry_attempts=3, temperature=0.1
        )
        client = get_chat_client(config)
        assert client.timeout_seconds == 5
        assert client.retry_attempts == 3
        assert client.default_temperature == 0.1

    def test_defaults_when_no_config(self):
        """Test that no config means the unkeyed DeepSeek default."""
        assert get_chat_client() is None


class TestGetDefaultModel:
    """Tests for get_default_model()."""

    def test_by_enum_and_string(self):
        """Test lookup by enum and by name."""
        assert get_default_model(PlatformType.DEEPSEEK) == "deepseek-chat"
        assert get_default_model("OLLAMA") == "llama2"

    def test_supported_platforms(self):
        """Test the supported platform list."""
        assert SUPPORTED_PLATFORMS == ["deepseek", "ollama"]
