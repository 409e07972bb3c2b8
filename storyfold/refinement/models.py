"""Data models for the refinement loop."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class RefinementPhase(str, Enum):
    """Lifecycle stages the refinement loop can be scoped to."""

    BRIEF = "brief"
    OUTLINE = "outline"  # Valid tag, no assess/revise behavior
    SAMPLE = "sample"  # Valid tag, no assess/revise behavior
    FINAL = "final"


# Phases with assess/revise prompts wired
REFINABLE_PHASES = frozenset({RefinementPhase.BRIEF, RefinementPhase.FINAL})


class SuggestionType(str, Enum):
    """Kinds of improvement suggestion."""

    CONSISTENCY = "consistency"
    COMPLETENESS = "completeness"
    STYLE = "style"
    SAFETY = "safety"
    LOGIC = "logic"
    OTHER = "other"


class Severity(str, Enum):
    """How strongly a suggestion should be acted on."""

    INFO = "info"
    SUGGESTION = "suggestion"
    SHOULD_FIX = "should_fix"


class UserDecision(str, Enum):
    """What the writer did with a round of suggestions."""

    ACCEPT_ALL = "accept_all"
    ACCEPT_SELECTED = "accept_selected"
    REJECT = "reject"
    EDIT_THEN_RETRY = "edit_then_retry"
    DONE = "done"


class RefinementMode(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


class RefinementScope(str, Enum):
    FULL = "full"
    SECTION = "section"


class _PersistedModel(BaseModel):
    """Base for documents stored as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RefinementSuggestion(_PersistedModel):
    """A single piece of feedback produced by an assessment."""

    id: str
    type: SuggestionType = SuggestionType.OTHER
    summary: str
    detail: Optional[str] = None
    anchor: Optional[str] = None  # Locates the suggestion in the content
    severity: Optional[Severity] = None

    def to_instruction(self) -> str:
        """Render as one bullet of a revision instruction block."""
        line = f"- [{self.type.value}] {self.summary}"
        if self.detail:
            line += f"\n  {self.detail}"
        return line


class RefinementRound(_PersistedModel):
    """One assess-then-decide cycle."""

    round: int = Field(ge=1)
    assessed_at: datetime = Field(default_factory=utc_now)
    suggestions: list[RefinementSuggestion] = Field(default_factory=list)
    user_decision: Optional[UserDecision] = None
    accepted_ids: Optional[list[str]] = None

    def select(self, accepted_ids: Optional[list[str]] = None) -> list[RefinementSuggestion]:
        """Get the suggestions matching ``accepted_ids`` (all when None), in round order."""
        if accepted_ids is None:
            return list(self.suggestions)
        wanted = set(accepted_ids)
        return [s for s in self.suggestions if s.id in wanted]


class RefinementState(_PersistedModel):
    """Per-phase refinement counters and settings."""

    phase: RefinementPhase
    round: int = Field(default=0, ge=0)  # Completed assessments
    max_rounds: Optional[int] = Field(default=None, ge=1)  # Advisory only
    mode: RefinementMode = RefinementMode.MANUAL
    last_assessed_at: Optional[datetime] = None
    last_revised_at: Optional[datetime] = None
    focus: Optional[str] = None
    scope: Optional[RefinementScope] = None


class RefinementStateFile(_PersistedModel):
    """The persisted refinement document."""

    state: RefinementState
    current_round: Optional[RefinementRound] = None
    history: list[RefinementRound] = Field(default_factory=list)

    @property
    def is_open(self) -> bool:
        """True while a round's suggestions await a decision."""
        return self.current_round is not None

    def pending_suggestions(self) -> list[RefinementSuggestion]:
        if self.current_round is None:
            return []
        return list(self.current_round.suggestions)
