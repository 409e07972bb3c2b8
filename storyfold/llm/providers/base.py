"""Base chat client interface and common types."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import aiohttp
from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from ..config import LLMConfig, PlatformType

logger = logging.getLogger(__name__)


# Fixed pause between attempts (seconds). Not exponential.
RETRY_DELAY_SECONDS = 1.0

# Failures that are worth another attempt
TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


class MessageRole(str, Enum):
    """Roles a chat message can carry."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """One role-tagged message in a conversation."""

    role: MessageRole
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role=MessageRole.ASSISTANT, content=content)

    def to_wire(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ChatOptions:
    """Per-call overrides; unset values fall back to configuration."""

    temperature: Optional[float] = None


class ChatClient(ABC):
    """
    Abstract base class for chat backends.

    Subclasses describe their wire format (endpoint, headers, request
    envelope, where the completion lives in the response). The retry
    algorithm is shared:

    - a string completion is returned stripped, immediately;
    - a response without a string completion is logged and ``None`` is
      returned without further attempts;
    - transport failures are retried up to ``retry_attempts`` times with a
      fixed one-second pause, then ``None`` is returned.

    Usage:
        client = get_chat_client(config)
        if client is not None:
            async with client:
                text = await client.chat([ChatMessage.user("Hello!")])
    """

    def __init__(
        self,
        model: str,
        config: Optional[LLMConfig] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        config = config or LLMConfig()
        self.model = model
        self.timeout_seconds = config.timeout_seconds
        self.retry_attempts = config.retry_attempts
        self.default_temperature = config.temperature
        self._sleep = sleep or asyncio.sleep
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    @abstractmethod
    def platform(self) -> PlatformType:
        """Return the platform this client talks to."""
        ...

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Full URL the chat request is POSTed to."""
        ...

    @abstractmethod
    def build_payload(
        self, messages: list[ChatMessage], temperature: float
    ) -> dict[str, Any]:
        """Build the JSON request body for this backend."""
        ...

    @abstractmethod
    def extract_content(self, data: Any) -> Any:
        """Pull the completion out of a decoded response (``None`` if absent)."""
        ...

    def build_headers(self) -> dict[str, str]:
        """HTTP headers sent with every request."""
        return {"Content-Type": "application/json"}

    async def __aenter__(self) -> "ChatClient":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.stop()

    async def start(self) -> None:
        """Open a session reused by every request until stop()."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            logger.debug(f"{self.platform.value} client session opened")

    async def stop(self) -> None:
        """Close the shared session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug(f"{self.platform.value} client session closed")

    async def chat(
        self,
        messages: list[ChatMessage],
        options: Optional[ChatOptions] = None,
    ) -> Optional[str]:
        """
        Send a conversation and return the completion text.

        Args:
            messages: Ordered role-tagged messages
            options: Optional per-call overrides

        Returns:
            The stripped completion, or None when no usable result was
            obtained (transport failures exhausted or malformed response)
        """
        temperature = self.default_temperature
        if options is not None and options.temperature is not None:
            temperature = options.temperature

        payload = self.build_payload(messages, temperature)

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_fixed(RETRY_DELAY_SECONDS),
                retry=retry_if_exception_type(TRANSPORT_ERRORS),
                sleep=self._sleep,
                reraise=True,
            ):
                with attempt:
                    data = await self._attempt(
                        payload, attempt.retry_state.attempt_number
                    )
        except TRANSPORT_ERRORS:
            logger.error(
                f"{self.platform.value} request gave up after "
                f"{self.retry_attempts} attempt(s)"
            )
            return None

        content = self.extract_content(data)
        if isinstance(content, str):
            return content.strip()

        logger.error(
            f"{self.platform.value} returned a malformed response: {str(data)[:200]}"
        )
        return None

    async def _attempt(self, payload: dict[str, Any], attempt_number: int) -> Any:
        """Issue one request, logging a transport failure with its attempt number."""
        try:
            return await self._post(self.endpoint, payload, self.build_headers())
        except TRANSPORT_ERRORS as e:
            logger.warning(
                f"{self.platform.value} request failed "
                f"(attempt {attempt_number}/{self.retry_attempts}): {e!r}"
            )
            raise

    async def _post(
        self, url: str, payload: dict[str, Any], headers: dict[str, str]
    ) -> Any:
        """POST a JSON body and return the decoded JSON (``None`` if not JSON)."""
        if self._session is not None:
            return await self._send(self._session, url, payload, headers)

        async with aiohttp.ClientSession() as session:
            return await self._send(session, url, payload, headers)

    async def _send(
        self,
        session: aiohttp.ClientSession,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str],
    ) -> Any:
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with session.post(
            url, json=payload, headers=headers, timeout=timeout
        ) as response:
            response.raise_for_status()
            try:
                return await response.json(content_type=None)
            except (ValueError, RecursionError):
                # Undecodable body: shape problem, not a transport one
                return None
