"""Tests for refinement data models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from storyfold.refinement.models import (
    REFINABLE_PHASES,
    RefinementPhase,
    RefinementRound,
    RefinementState,
    RefinementStateFile,
    RefinementSuggestion,
    SuggestionType,
    UserDecision,
)


def make_round(*ids: str) -> RefinementRound:
    return RefinementRound(
        round=1,
        suggestions=[RefinementSuggestion(id=i, summary=f"fix {i}") for i in ids],
    )


class TestRefinementSuggestion:
    """Tests for RefinementSuggestion."""

    def test_defaults(self):
        """Test default type and optional fields."""
        suggestion = RefinementSuggestion(id="1", summary="Shorten the opening")
        assert suggestion.type == SuggestionType.OTHER
        assert suggestion.severity is None

    def test_instruction_without_detail(self):
        """Test rendering a one-line instruction."""
        suggestion = RefinementSuggestion(id="1", type="style", summary="Vary sentences")
        assert suggestion.to_instruction() == "- [style] Vary sentences"

    def test_instruction_with_detail(self):
        """Test that detail goes on an indented second line."""
        suggestion = RefinementSuggestion(
            id="1", type="logic", summary="Fix timeline", detail="Day 2 happens before day 1"
        )
        assert suggestion.to_instruction() == (
            "- [logic] Fix timeline\n  Day 2 happens before day 1"
        )


class TestRefinementRound:
    """Tests for RefinementRound."""

    def test_round_must_be_positive(self):
        """Test that round numbers start at 1."""
        with pytest.raises(ValidationError):
            RefinementRound(round=0)

    def test_select_all(self):
        """Test that None selects every suggestion."""
        assert [s.id for s in make_round("1", "2").select()] == ["1", "2"]

    def test_select_keeps_round_order(self):
        """Test that selection follows round order and ignores unknown ids."""
        selected = make_round("1", "2", "3").select(["3", "1", "9"])
        assert [s.id for s in selected] == ["1", "3"]


class TestRefinementStateFile:
    """Tests for the persisted document."""

    def test_refinable_phases(self):
        """Test that only brief and final have assess/revise behavior."""
        assert REFINABLE_PHASES == {RefinementPhase.BRIEF, RefinementPhase.FINAL}

    def test_camel_case_dump(self):
        """Test the on-disk key style."""
        data = RefinementStateFile(
            state=RefinementState(
                phase="final",
                round=1,
                max_rounds=3,
                last_assessed_at=datetime(2026, 1, 2, tzinfo=timezone.utc),
            ),
            current_round=make_round("1"),
        )
        dumped = data.model_dump(mode="json", by_alias=True, exclude_none=True)

        assert dumped["state"]["maxRounds"] == 3
        assert dumped["state"]["lastAssessedAt"].startswith("2026-01-02T00:00:00")
        assert "lastRevisedAt" not in dumped["state"]
        assert dumped["currentRound"]["suggestions"][0]["summary"] == "fix 1"
        assert "assessedAt" in dumped["currentRound"]

    def test_load_camel_case(self):
        """Test validation of a camelCase document."""
        data = RefinementStateFile.model_validate(
            {
                "state": {"phase": "brief", "round": 2, "mode": "manual"},
                "currentRound": {
                    "round": 2,
                    "assessedAt": "2026-01-02T00:00:00Z",
                    "suggestions": [{"id": "1", "type": "safety", "summary": "s"}],
                    "userDecision": "accept_selected",
                    "acceptedIds": ["1"],
                },
            }
        )
        assert data.state.phase == RefinementPhase.BRIEF
        assert data.current_round.user_decision == UserDecision.ACCEPT_SELECTED
        assert data.current_round.accepted_ids == ["1"]
        assert data.is_open
        assert [s.id for s in data.pending_suggestions()] == ["1"]

    def test_unknown_phase_rejected(self):
        """Test that a phase outside the lifecycle fails validation."""
        with pytest.raises(ValidationError):
            RefinementStateFile.model_validate({"state": {"phase": "epilogue"}})

    def test_idle_has_no_pending(self):
        """Test an idle document."""
        data = RefinementStateFile(state=RefinementState(phase="final"))
        assert not data.is_open
        assert data.pending_suggestions() == []
        assert data.history == []
