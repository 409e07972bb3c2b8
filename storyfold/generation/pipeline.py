"""Linear generation stages: requirements -> brief -> outline -> sample -> final."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from storyfold.llm import ChatClient, ChatMessage, ChatOptions, LLMConfig, get_chat_client
from storyfold.notify import Notifier
from storyfold.storage import ContentDocument, ContentStore

from .prompts import (
    AGE_CHECK_PROMPT,
    AGE_CHECK_SYSTEM,
    BRIEF_PROMPT,
    BRIEF_SYSTEM,
    FINAL_PROMPT,
    FINAL_SAMPLES_SECTION,
    FINAL_SYSTEM,
    MISSING_TEXT,
    OUTLINE_PROMPT,
    OUTLINE_SYSTEM,
    REVIEW_PROMPT,
    REVIEW_SYSTEM,
    SAMPLE_PROMPT,
    SAMPLE_SYSTEM,
)

logger = logging.getLogger(__name__)


NO_REQUIREMENTS_TEXT = "(no requirements provided yet)"


@dataclass
class GenerationStage:
    """One prompt/response step and where its result is stored."""

    name: str
    document: ContentDocument
    system_prompt: str
    temperature: float
    label: str
    heading: Optional[str] = None


STAGES: dict[str, GenerationStage] = {
    "requirements": GenerationStage(
        name="requirements",
        document=ContentDocument.BRIEF,
        system_prompt=BRIEF_SYSTEM,
        temperature=0.7,
        label="brief",
        heading="## Writing Brief",
    ),
    "outline": GenerationStage(
        name="outline",
        document=ContentDocument.OUTLINE,
        system_prompt=OUTLINE_SYSTEM,
        temperature=0.6,
        label="outline",
    ),
    "sample": GenerationStage(
        name="sample",
        document=ContentDocument.SAMPLES,
        system_prompt=SAMPLE_SYSTEM,
        temperature=0.7,
        label="sample passage",
    ),
    "final": GenerationStage(
        name="final",
        document=ContentDocument.FINAL,
        system_prompt=FINAL_SYSTEM,
        temperature=0.7,
        label="final piece",
        heading="## Final Piece",
    ),
    "review": GenerationStage(
        name="review",
        document=ContentDocument.REVIEW,
        system_prompt=REVIEW_SYSTEM,
        temperature=0.3,
        label="review",
    ),
    "age_check": GenerationStage(
        name="age_check",
        document=ContentDocument.AGE_CHECK,
        system_prompt=AGE_CHECK_SYSTEM,
        temperature=0.2,
        label="age check",
    ),
}


def _or_missing(text: str) -> str:
    return text.strip() or MISSING_TEXT


class GenerationPipeline:
    """
    Runs the content-generation stages against one project.

    Every stage reads its inputs from the content store, makes a single
    chat call and writes its result back. When no backend is configured
    or the model returns nothing, a placeholder text is written instead,
    so later stages always have something to read.

    Usage:
        pipeline = GenerationPipeline(ContentStore(layout), LLMConfig.from_env())
        brief = await pipeline.requirements("a bedtime story about a brave snail")
        outline = await pipeline.outline()
        final = await pipeline.final()
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

    async def _complete(
        self, stage: GenerationStage, user_content: str
    ) -> Optional[str]:
        """Ask the model for a stage's text; None when unavailable or empty."""
        client = self._client_factory(self.config)
        if client is None:
            self.notifier.info(
                f"LLM is not configured; a placeholder {stage.label} was used."
            )
            return None

        logger.info(f"Generating {stage.label} with {client.platform}")
        messages = [ChatMessage.system(stage.system_prompt), ChatMessage.user(user_content)]
        async with client:
            result = await client.chat(
                messages, ChatOptions(temperature=stage.temperature)
            )

        if not result:
            logger.info(f"LLM returned no {stage.label}, using placeholder")
            return None
        return result

    def _store(self, stage: GenerationStage, text: str) -> str:
        self.content_store.write_text(stage.document, text)
        return text

    async def requirements(self, raw_text: str) -> str:
        """Turn rough requirements into the writing brief."""
        stage = STAGES["requirements"]
        trimmed = raw_text.strip()
        if not trimmed:
            return self._store(stage, NO_REQUIREMENTS_TEXT)

        result = await self._complete(stage, BRIEF_PROMPT.format(raw_text=trimmed))
        if result:
            return self._store(stage, f"{stage.heading}\n\n{result}")
        return self._store(stage, f"{stage.heading} (placeholder draft)\n\n{trimmed}")

    async def outline(self) -> str:
        """Produce the annotated outline from the brief."""
        stage = STAGES["outline"]
        brief = _or_missing(self.content_store.read_text(ContentDocument.BRIEF))

        result = await self._complete(stage, OUTLINE_PROMPT.format(brief=brief))
        if result:
            return self._store(stage, result.strip())
        return self._store(
            stage,
            "## Annotated Outline (placeholder draft)\n\n"
            f"- Based on the brief:\n{brief}\n\n"
            "- Configure an LLM and run this step again for scene notes.",
        )

    async def sample(self) -> str:
        """Draft a sample passage from the brief and outline."""
        stage = STAGES["sample"]
        brief = _or_missing(self.content_store.read_text(ContentDocument.BRIEF))
        outline = _or_missing(self.content_store.read_text(ContentDocument.OUTLINE))

        result = await self._complete(
            stage, SAMPLE_PROMPT.format(brief=brief, outline=outline)
        )
        if result:
            return self._store(stage, result.strip())
        return self._store(
            stage,
            "## Sample Passage (placeholder draft)\n\n"
            "(Configure an LLM to draft a sample from the outline.)",
        )

    async def final(self) -> str:
        """Write the finished piece; the sample passage is optional input."""
        stage = STAGES["final"]
        brief = _or_missing(self.content_store.read_text(ContentDocument.BRIEF))
        outline = _or_missing(self.content_store.read_text(ContentDocument.OUTLINE))
        samples = self.content_store.read_text(ContentDocument.SAMPLES).strip()

        user_content = FINAL_PROMPT.format(brief=brief, outline=outline)
        if samples:
            user_content += FINAL_SAMPLES_SECTION.format(samples=samples)

        result = await self._complete(stage, user_content)
        if result:
            return self._store(stage, f"{stage.heading}\n\n{result}")

        fallback = (
            f"{stage.heading} (placeholder draft)\n\n"
            "(Configure an LLM to write the full piece from the outline.)\n"
            f"\n=== Writing brief (reference) ===\n{brief}"
            f"\n\n=== Annotated outline (reference) ===\n{outline}"
        )
        if samples:
            fallback += f"\n\n=== Sample passage (reference) ===\n{samples}"
        return self._store(stage, fallback)

    async def review(self) -> str:
        """Multi-perspective review of the final piece."""
        stage = STAGES["review"]
        final = _or_missing(self.content_store.read_text(ContentDocument.FINAL))

        result = await self._complete(stage, REVIEW_PROMPT.format(final=final))
        if result:
            return self._store(stage, result.strip())
        return self._store(
            stage, "## Review (placeholder)\n\n(Configure an LLM to review the final piece.)"
        )

    async def age_check(self) -> str:
        """Age-appropriateness and safety check of the final piece."""
        stage = STAGES["age_check"]
        final = _or_missing(self.content_store.read_text(ContentDocument.FINAL))

        result = await self._complete(stage, AGE_CHECK_PROMPT.format(final=final))
        if result:
            return self._store(stage, result.strip())
        return self._store(
            stage,
            "## Age Check (placeholder)\n\n(Configure an LLM to check the final piece.)",
        )
