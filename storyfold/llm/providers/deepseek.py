"""DeepSeek (hosted, OpenAI-compatible) chat client."""

from typing import Any, Awaitable, Callable, Optional

from ..config import LLMConfig, PlatformType
from .base import ChatClient, ChatMessage

DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEEPSEEK_CHAT_PATH = "/chat/completions"


class DeepSeekClient(ChatClient):
    """
    DeepSeek open-platform client.

    Request: ``{model, messages, temperature}`` with a bearer token.
    Response: completion at ``choices[0].message.content``.

    Usage:
        client = DeepSeekClient(api_key="...", model="deepseek-chat")
        async with client:
            text = await client.chat([ChatMessage.user("Hello!")])
    """

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        config: Optional[LLMConfig] = None,
        base_url: str = DEEPSEEK_BASE_URL,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        super().__init__(model=model, config=config, sleep=sleep)
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def platform(self) -> PlatformType:
        return PlatformType.DEEPSEEK

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{DEEPSEEK_CHAT_PATH}"

    def build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(
        self, messages: list[ChatMessage], temperature: float
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_wire() for m in messages],
            "temperature": temperature,
        }

    def extract_content(self, data: Any) -> Any:
        if not isinstance(data, dict):
            return None
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            return None
        return message.get("content")
