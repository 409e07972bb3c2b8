"""Revise step: apply accepted suggestions and write the result back."""

import logging
from typing import Callable, Optional, Union

from storyfold.llm import ChatClient, ChatMessage, ChatOptions, LLMConfig, get_chat_client
from storyfold.notify import Notifier
from storyfold.storage import ContentStore

from .models import REFINABLE_PHASES, RefinementPhase, RefinementSuggestion
from .prompts import get_revise_prompt

logger = logging.getLogger(__name__)


EMPTY_CONTENT_PLACEHOLDER = "(empty)"


def render_suggestions(suggestions: list[RefinementSuggestion]) -> str:
    """Render suggestions as the bulleted instruction block sent to the model."""
    return "\n".join(s.to_instruction() for s in suggestions)


class ReviseStage:
    """
    Rewrites one phase's content according to accepted suggestions.

    Never fails the caller: on an unknown phase, a missing client or any
    error the original content is returned. On success the new text is
    also written to the phase's content document.

    Usage:
        stage = ReviseStage(content_store, config, notifier)
        text = await stage.revise("final", text, accepted)
    """

    def __init__(
        self,
        content_store: ContentStore,
        config: Optional[LLMConfig] = None,
        notifier: Optional[Notifier] = None,
        client_factory: Callable[[LLMConfig], Optional[ChatClient]] = get_chat_client,
    ):
        self.content_store = content_store
        self.config = config or LLMConfig()
        self.notifier = notifier or Notifier()
        self._client_factory = client_factory

    def build_messages(
        self,
        phase: RefinementPhase,
        content: str,
        suggestions: list[RefinementSuggestion],
    ) -> list[ChatMessage]:
        """Build the system + user messages for a revision."""
        prompt = get_revise_prompt(phase)
        if prompt is None:
            raise ValueError(f"No revise prompt for phase '{phase.value}'")

        text = prompt.user_prompt_template.format(
            content=content or EMPTY_CONTENT_PLACEHOLDER,
            suggestions=render_suggestions(suggestions),
        )
        return [ChatMessage.system(prompt.system_prompt), ChatMessage.user(text)]

    async def revise(
        self,
        phase: Union[RefinementPhase, str],
        content: str,
        suggestions: list[RefinementSuggestion],
    ) -> str:
        """
        Run one revision.

        Args:
            phase: Phase the content belongs to
            content: Current content text
            suggestions: Suggestions the writer accepted

        Returns:
            The revised content, or the original content if revision was
            not possible
        """
        try:
            phase = RefinementPhase(phase)
        except ValueError:
            logger.info(f"Revise: unknown phase {phase!r}, content unchanged")
            return content

        if phase not in REFINABLE_PHASES:
            logger.info(f"Revise: phase '{phase.value}' is not refinable, content unchanged")
            return content

        client = self._client_factory(self.config)
        if client is None:
            self.notifier.info("LLM is not configured; cannot revise.")
            return content

        prompt = get_revise_prompt(phase)
        messages = self.build_messages(phase, content, suggestions)

        try:
            async with client:
                result = await client.chat(
                    messages, ChatOptions(temperature=prompt.temperature)
                )
            revised = result.strip() if result and result.strip() else content

            self.content_store.write_phase(phase, revised)
            logger.info(f"Revise: '{phase.value}' content updated")
            return revised
        except Exception as e:
            logger.error(f"Revision of '{phase.value}' failed: {e}")
            self.notifier.error("Revision failed; see the log for details.")
            return content
