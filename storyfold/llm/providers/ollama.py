"""Ollama (local, keyless) chat client."""

from typing import Any, Awaitable, Callable, Optional

from ..config import LLMConfig, PlatformType
from .base import ChatClient, ChatMessage


OLLAMA_CHAT_PATH = "/api/chat"


class OllamaClient(ChatClient):
    """
    Local Ollama client.

    Request: ``{model, messages, stream: false, options: {temperature}}``.
    Response: completion at ``message.content``. Streaming is always off
    so one POST yields the whole completion.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama2",
        config: Optional[LLMConfig] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        super().__init__(model=model, config=config, sleep=sleep)
        self.base_url = base_url.rstrip("/")

    @property
    def platform(self) -> PlatformType:
        return PlatformType.OLLAMA

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{OLLAMA_CHAT_PATH}"

    def build_payload(
        self, messages: list[ChatMessage], temperature: float
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_wire() for m in messages],
            "stream": False,
            "options": {"temperature": temperature},
        }

    def extract_content(self, data: Any) -> Any:
        if not isinstance(data, dict):
            return None
        message = data.get("message")
        if not isinstance(message, dict):
            return None
        return message.get("content")
