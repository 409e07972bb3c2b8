"""Refinement session: drives assess/revise against persisted state."""

import logging
from typing import Optional, Union

from storyfold.notify import Notifier
from storyfold.storage import ContentDocument, ContentStore

from .assess import AssessStage
from .models import (
    REFINABLE_PHASES,
    RefinementPhase,
    RefinementStateFile,
    UserDecision,
)
from .revise import ReviseStage
from .state import RefinementStateStore

logger = logging.getLogger(__name__)


class RefinementSession:
    """
    Orchestrates the writer-supervised improvement loop for one project.

    Assess and revise stages only return results; this class reads the
    phase content, feeds those results into the state store and keeps the
    open round and the content in step.

    Usage:
        session = RefinementSession(store, content_store, assess, revise)
        data = await session.start("final")
        revised = await session.apply("final", accepted_ids=["1", "3"])
    """

    def __init__(
        self,
        store: RefinementStateStore,
        content_store: ContentStore,
        assess_stage: AssessStage,
        revise_stage: ReviseStage,
        notifier: Optional[Notifier] = None,
    ):
        self.store = store
        self.content_store = content_store
        self.assess_stage = assess_stage
        self.revise_stage = revise_stage
        self.notifier = notifier or Notifier()

    @staticmethod
    def _refinable(phase: Union[RefinementPhase, str]) -> Optional[RefinementPhase]:
        try:
            phase = RefinementPhase(phase)
        except ValueError:
            return None
        return phase if phase in REFINABLE_PHASES else None

    def status(self) -> Optional[RefinementStateFile]:
        """Get the persisted state, if any."""
        return self.store.read()

    async def start(
        self, phase: Union[RefinementPhase, str]
    ) -> Optional[RefinementStateFile]:
        """
        Run one assessment round for a phase.

        Returns:
            The state after the round was recorded, or None if the phase
            cannot be refined or has no content yet
        """
        phase = self._refinable(phase)
        if phase is None:
            logger.info("Refinement is only available for the brief and final phases")
            return None

        content = self.content_store.read_phase(phase)
        if not content.strip():
            if phase == RefinementPhase.BRIEF:
                self.notifier.warning("Write or edit the brief before refining it.")
            else:
                self.notifier.warning("Generate the final piece before refining it.")
            return None

        review_context = None
        if phase == RefinementPhase.FINAL:
            review_context = self.content_store.read_text(ContentDocument.REVIEW) or None

        suggestions = await self.assess_stage.assess(
            phase, content, review_context=review_context
        )
        return self.store.update_after_assess(phase, suggestions)

    async def apply(
        self,
        phase: Union[RefinementPhase, str],
        accepted_ids: Optional[list[str]] = None,
    ) -> Optional[str]:
        """
        Revise the phase content with the open round's suggestions.

        Args:
            phase: Phase to revise
            accepted_ids: Ids to apply; None applies every suggestion

        Returns:
            The revised content, or None if there was nothing to apply
        """
        phase = self._refinable(phase)
        if phase is None:
            return None

        data = self.store.read()
        if (
            data is None
            or data.state.phase != phase
            or data.current_round is None
            or not data.current_round.suggestions
        ):
            self.notifier.info("There are no suggestions to apply.")
            return None

        selected = data.current_round.select(accepted_ids)
        if not selected:
            self.notifier.info("None of the selected suggestions are in the current round.")
            return None

        if accepted_ids is None:
            self.store.record_decision(phase, UserDecision.ACCEPT_ALL)
        else:
            self.store.record_decision(
                phase, UserDecision.ACCEPT_SELECTED, [s.id for s in selected]
            )

        content = self.content_store.read_phase(phase)
        revised = await self.revise_stage.revise(phase, content, selected)
        self.store.update_after_revise(phase)
        return revised

    def reject(self, phase: Union[RefinementPhase, str]) -> Optional[RefinementStateFile]:
        """Discard the open round's suggestions, recording a rejection."""
        phase = self._refinable(phase)
        if phase is None:
            return None
        self.store.record_decision(phase, UserDecision.REJECT)
        return self.store.end_refinement(phase)

    def end(self, phase: Union[RefinementPhase, str]) -> Optional[RefinementStateFile]:
        """Stop refining: the open round is closed without revising."""
        phase = self._refinable(phase)
        if phase is None:
            return None
        return self.store.end_refinement(phase)
