"""Assess step: ask the model for improvement suggestions."""

import logging
from typing import Callable, Optional, Union

from storyfold.llm import ChatClient, ChatMessage, ChatOptions, LLMConfig, get_chat_client
from storyfold.notify import Notifier

from .models import REFINABLE_PHASES, RefinementPhase, RefinementSuggestion
from .parser import parse_suggestions
from .prompts import REVIEW_CONTEXT_TEMPLATE, get_assess_prompt

logger = logging.getLogger(__name__)


# Characters of review text passed along as grounding
REVIEW_CONTEXT_LIMIT = 2000

EMPTY_CONTENT_PLACEHOLDER = "(no text yet)"


class AssessStage:
    """
    Produces a suggestion list for one phase's content.

    Degrades to an empty list when the phase has no assess prompt, no
    chat client is configured, or the call or parse fails. An empty list
    is also a normal "nothing to improve" result.

    Usage:
        stage = AssessStage(config, notifier)
        suggestions = await stage.assess("final", text, review_context=review)
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        notifier: Optional[Notifier] = None,
        client_factory: Callable[[LLMConfig], Optional[ChatClient]] = get_chat_client,
    ):
        self.config = config or LLMConfig()
        self.notifier = notifier or Notifier()
        self._client_factory = client_factory

    def build_messages(
        self,
        phase: RefinementPhase,
        content: str,
        review_context: Optional[str] = None,
    ) -> list[ChatMessage]:
        """Build the system + user messages for an assessment."""
        prompt = get_assess_prompt(phase)
        if prompt is None:
            raise ValueError(f"No assess prompt for phase '{phase.value}'")

        text = prompt.user_prompt_template.format(
            content=content or EMPTY_CONTENT_PLACEHOLDER
        )
        if phase == RefinementPhase.FINAL and review_context and review_context.strip():
            text += REVIEW_CONTEXT_TEMPLATE.format(
                review_context=review_context[:REVIEW_CONTEXT_LIMIT]
            )

        return [ChatMessage.system(prompt.system_prompt), ChatMessage.user(text)]

    async def assess(
        self,
        phase: Union[RefinementPhase, str],
        content: str,
        review_context: Optional[str] = None,
    ) -> list[RefinementSuggestion]:
        """
        Run one assessment.

        Args:
            phase: Phase the content belongs to
            content: Current content text
            review_context: Optional review notes (used for the final phase)

        Returns:
            Parsed suggestions, possibly empty
        """
        try:
            phase = RefinementPhase(phase)
        except ValueError:
            logger.info(f"Assess: unknown phase {phase!r}, no suggestions")
            return []

        if phase not in REFINABLE_PHASES:
            logger.info(f"Assess: phase '{phase.value}' is not refinable, no suggestions")
            return []

        client = self._client_factory(self.config)
        if client is None:
            self.notifier.info("LLM is not configured; cannot assess improvements.")
            return []

        prompt = get_assess_prompt(phase)
        messages = self.build_messages(phase, content, review_context)

        try:
            async with client:
                result = await client.chat(
                    messages, ChatOptions(temperature=prompt.temperature)
                )
        except Exception as e:
            logger.error(f"Assessment of '{phase.value}' failed: {e}")
            return []

        if not result or not result.strip():
            logger.info(f"Assess: empty response for '{phase.value}'")
            return []

        suggestions = parse_suggestions(result)
        logger.info(f"Assess: {len(suggestions)} suggestion(s) for '{phase.value}'")
        return suggestions
