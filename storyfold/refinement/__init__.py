"""
Refinement loop for iterative, writer-supervised improvement.

This module turns model feedback into typed suggestions and tracks
rounds in a persisted state file:
- Assess: ask the model for a JSON list of suggestions
- Revise: apply the accepted suggestions and write the content back
- State store: round counter, open round and decided-round history
- Session: ties the three together for one project

Usage:
    from storyfold.refinement import RefinementSession

    data = await session.start("final")
    for suggestion in data.pending_suggestions():
        print(suggestion.summary)
    await session.apply("final", accepted_ids=["1"])
"""

from .models import (
    REFINABLE_PHASES,
    RefinementMode,
    RefinementPhase,
    RefinementRound,
    RefinementScope,
    RefinementState,
    RefinementStateFile,
    RefinementSuggestion,
    Severity,
    SuggestionType,
    UserDecision,
)
from .parser import parse_suggestions
from .state import DEFAULT_MAX_ROUNDS, RefinementStateStore
from .assess import AssessStage
from .revise import ReviseStage, render_suggestions
from .session import RefinementSession

__all__ = [
    # Models
    "RefinementPhase",
    "RefinementSuggestion",
    "RefinementRound",
    "RefinementState",
    "RefinementStateFile",
    "RefinementMode",
    "RefinementScope",
    "Severity",
    "SuggestionType",
    "UserDecision",
    "REFINABLE_PHASES",
    # Parser
    "parse_suggestions",
    # State
    "RefinementStateStore",
    "DEFAULT_MAX_ROUNDS",
    # Stages
    "AssessStage",
    "ReviseStage",
    "render_suggestions",
    "RefinementSession",
]
