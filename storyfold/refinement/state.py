"""Persisted refinement state with per-phase round tracking."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from pydantic import ValidationError

from storyfold.exceptions import StateWriteError
from storyfold.storage import ProjectLayout

from .models import (
    RefinementPhase,
    RefinementRound,
    RefinementState,
    RefinementStateFile,
    RefinementSuggestion,
    UserDecision,
    utc_now,
)

logger = logging.getLogger(__name__)


DEFAULT_MAX_ROUNDS = 3
DEFAULT_MAX_HISTORY = 20


class RefinementStateStore:
    """
    Reads and writes the single refinement state file of a project.

    The file holds one phase at a time. Addressing a different phase
    starts that phase afresh (round 0, no open round, empty history).

    States per phase:
    - uninitialized: no file, a corrupt file, or a file for another phase
    - idle: file for this phase without ``currentRound``
    - open: file for this phase with ``currentRound``

    Only update_after_assess() increments the round counter.
    update_after_revise() and end_refinement() close the open round and
    append it to ``history``.

    Usage:
        store = RefinementStateStore.for_project(layout)
        store.get_or_init("final")
        data = store.update_after_assess("final", suggestions)
        store.update_after_revise("final")
    """

    def __init__(
        self,
        path: Union[str, Path],
        clock: Callable[[], datetime] = utc_now,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        max_history: int = DEFAULT_MAX_HISTORY,
    ):
        self.path = Path(path)
        self._clock = clock
        self.max_rounds = max_rounds
        self.max_history = max_history

    @classmethod
    def for_project(cls, layout: ProjectLayout, **kwargs) -> "RefinementStateStore":
        """Create a store at the layout's refinement state path."""
        return cls(layout.refinement_state_path, **kwargs)

    def read(self) -> Optional[RefinementStateFile]:
        """
        Load the state file.

        Returns:
            The parsed document, or None if it is missing or unusable
        """
        if not self.path.exists():
            logger.debug(f"No refinement state at {self.path}")
            return None

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            return RefinementStateFile.model_validate(data)
        # ValueError covers undecodable bytes and oversized numbers
        except (OSError, ValueError, RecursionError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable refinement state at {self.path}: {e}")
            return None

    def write(self, data: RefinementStateFile) -> Path:
        """
        Save the state file.

        Raises:
            StateWriteError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(
                    data.model_dump(mode="json", by_alias=True, exclude_none=True),
                    f,
                    indent=2,
                    ensure_ascii=False,
                )
        except OSError as e:
            logger.error(f"Failed to write refinement state to {self.path}: {e}")
            raise StateWriteError(
                f"Could not save refinement state: {e}", path=self.path
            ) from e

        logger.debug(f"Saved refinement state to {self.path}")
        return self.path

    def _load_for(self, phase: RefinementPhase) -> Optional[RefinementStateFile]:
        data = self.read()
        if data is None or data.state.phase != phase:
            return None
        return data

    def get_or_init(self, phase: Union[RefinementPhase, str]) -> RefinementStateFile:
        """
        Get the state for a phase, creating fresh state if needed.

        Existing state for the same phase is returned untouched.
        """
        phase = RefinementPhase(phase)
        existing = self._load_for(phase)
        if existing is not None:
            return existing

        data = RefinementStateFile(
            state=RefinementState(phase=phase, round=0, max_rounds=self.max_rounds)
        )
        self.write(data)
        logger.info(f"Initialized refinement state for phase '{phase.value}'")
        return data

    def update_after_assess(
        self,
        phase: Union[RefinementPhase, str],
        suggestions: list[RefinementSuggestion],
    ) -> RefinementStateFile:
        """
        Record a completed assessment.

        Increments the round counter and stores the suggestions as the
        open round, replacing any round still pending.
        """
        phase = RefinementPhase(phase)
        data = self.get_or_init(phase)

        now = self._clock()
        next_round = data.state.round + 1
        data.state.round = next_round
        data.state.last_assessed_at = now
        data.current_round = RefinementRound(
            round=next_round,
            assessed_at=now,
            suggestions=list(suggestions),
        )

        self.write(data)
        logger.info(
            f"Refinement round {next_round} for '{phase.value}': "
            f"{len(suggestions)} suggestion(s)"
        )
        return data

    def update_after_revise(self, phase: Union[RefinementPhase, str]) -> RefinementStateFile:
        """
        Record a completed revision.

        Closes the open round without touching the round counter. When
        there is no state for this phase, fresh state is created instead.
        """
        phase = RefinementPhase(phase)
        data = self._load_for(phase)
        if data is None:
            return self.get_or_init(phase)

        data.state.last_revised_at = self._clock()
        self._close_round(data, UserDecision.ACCEPT_ALL)
        self.write(data)
        return data

    def end_refinement(
        self, phase: Union[RefinementPhase, str]
    ) -> Optional[RefinementStateFile]:
        """
        Drop the open round without revising.

        Returns:
            The updated state, or None if there is no state for this phase
        """
        phase = RefinementPhase(phase)
        data = self._load_for(phase)
        if data is None:
            return None

        if data.current_round is not None:
            self._close_round(data, UserDecision.DONE)
            self.write(data)
            logger.info(f"Ended refinement round {data.state.round} for '{phase.value}'")
        return data

    def record_decision(
        self,
        phase: Union[RefinementPhase, str],
        decision: UserDecision,
        accepted_ids: Optional[list[str]] = None,
    ) -> Optional[RefinementStateFile]:
        """
        Stamp the writer's decision on the open round.

        Returns:
            The updated state, or None if no round is open for this phase
        """
        phase = RefinementPhase(phase)
        data = self._load_for(phase)
        if data is None or data.current_round is None:
            return None

        data.current_round.user_decision = UserDecision(decision)
        data.current_round.accepted_ids = (
            list(accepted_ids) if accepted_ids is not None else None
        )
        self.write(data)
        return data

    def _close_round(self, data: RefinementStateFile, default: UserDecision) -> None:
        closed = data.current_round
        if closed is None:
            return
        if closed.user_decision is None:
            closed.user_decision = default
        data.history = (data.history + [closed])[-self.max_history:]
        data.current_round = None
