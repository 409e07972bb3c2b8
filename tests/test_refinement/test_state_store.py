"""Tests for the refinement state store."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from storyfold.exceptions import StateWriteError, StoryFoldError
from storyfold.refinement.models import (
    RefinementPhase,
    RefinementSuggestion,
    UserDecision,
)
from storyfold.refinement.state import DEFAULT_MAX_ROUNDS, RefinementStateStore
from storyfold.storage import ProjectLayout


class FakeClock:
    """Clock that advances one minute per reading."""

    def __init__(self):
        self.now = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


def suggestions(*ids: str) -> list[RefinementSuggestion]:
    return [RefinementSuggestion(id=i, summary=f"fix {i}") for i in ids]


@pytest.fixture
def store(tmp_path):
    return RefinementStateStore.for_project(ProjectLayout(tmp_path), clock=FakeClock())


class TestReadWrite:
    """Tests for loading and saving the state file."""

    def test_missing_file(self, store):
        """Test that a missing file reads as None."""
        assert store.read() is None

    def test_path_under_project(self, tmp_path, store):
        """Test the state file location."""
        assert store.path == tmp_path / ".storyfold" / "refinementState.json"

    def test_corrupt_file(self, store):
        """Test that invalid JSON reads as None."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")
        assert store.read() is None

    def test_invalid_document(self, store):
        """Test that a schema violation reads as None."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"state": {"phase": "final", "round": -1}}))
        assert store.read() is None

    @pytest.mark.parametrize(
        "body",
        [
            b'{"state": {"phase": "final", "round": 1}} \xff\xfe',
            b'{"state": {"phase": "final", "round": ' + b"1" * 5000 + b"}}",
        ],
    )
    def test_undecodable_file(self, store, body):
        """Test that invalid UTF-8 or an oversized number reads as None."""
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(body)
        assert store.read() is None

    def test_undecodable_file_reinitialized(self, store):
        """Test that a non-UTF-8 file is replaced by fresh state."""
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b"\xff\xfe\x00")
        data = store.get_or_init("brief")
        assert data.state.round == 0
        assert store.read().state.phase == RefinementPhase.BRIEF

    def test_corrupt_file_reinitialized(self, store):
        """Test that a corrupt file is replaced by fresh state."""
        store.path.parent.mkdir(parents=True)
        store.path.write_text("garbage")
        data = store.get_or_init("final")
        assert data.state.round == 0
        assert store.read() is not None

    def test_written_json_uses_camel_case(self, store):
        """Test the on-disk format."""
        store.update_after_assess("final", suggestions("1"))
        raw = json.loads(store.path.read_text(encoding="utf-8"))

        assert raw["state"]["phase"] == "final"
        assert raw["state"]["round"] == 1
        assert raw["state"]["maxRounds"] == DEFAULT_MAX_ROUNDS
        assert "lastAssessedAt" in raw["state"]
        assert raw["currentRound"]["round"] == 1
        assert raw["currentRound"]["suggestions"] == [
            {"id": "1", "type": "other", "summary": "fix 1"}
        ]

    def test_write_failure_raises(self, store):
        """Test that an unwritable file raises StateWriteError."""
        with patch("builtins.open", side_effect=PermissionError("read-only")):
            with pytest.raises(StateWriteError) as exc_info:
                store.get_or_init("final")

        assert isinstance(exc_info.value, StoryFoldError)
        assert exc_info.value.path == store.path


class TestGetOrInit:
    """Tests for get_or_init."""

    def test_fresh_state(self, store):
        """Test initialization values."""
        data = store.get_or_init("brief")

        assert data.state.phase == RefinementPhase.BRIEF
        assert data.state.round == 0
        assert data.state.max_rounds == 3
        assert data.current_round is None
        assert store.read().model_dump() == data.model_dump()

    def test_idempotent(self, store):
        """Test that calling twice leaves the state unchanged."""
        first = store.get_or_init("final")
        second = store.get_or_init("final")
        assert first.model_dump() == second.model_dump()

    def test_existing_state_untouched(self, store):
        """Test that existing state for the phase is returned as is."""
        store.update_after_assess("final", suggestions("1"))
        data = store.get_or_init("final")
        assert data.state.round == 1
        assert data.is_open

    def test_phase_switch_resets(self, store):
        """Test that a different phase starts afresh."""
        store.update_after_assess("final", suggestions("1"))
        data = store.get_or_init("brief")

        assert data.state.phase == RefinementPhase.BRIEF
        assert data.state.round == 0
        assert data.current_round is None
        assert data.history == []

    def test_invalid_phase(self, store):
        """Test that unknown phases are rejected."""
        with pytest.raises(ValueError):
            store.get_or_init("epilogue")


class TestRoundLifecycle:
    """Tests for the assess / revise / end transitions."""

    def test_round_counts_assessments(self, store):
        """Test that the round equals the number of assessments."""
        for expected in range(1, 5):
            data = store.update_after_assess("final", suggestions(str(expected)))
            assert data.state.round == expected
            assert data.current_round.round == expected

    def test_rounds_beyond_max_are_recorded(self, store):
        """Test that maxRounds does not block further rounds."""
        for _ in range(DEFAULT_MAX_ROUNDS + 2):
            data = store.update_after_assess("final", [])
        assert data.state.round == DEFAULT_MAX_ROUNDS + 2

    def test_reassess_replaces_open_round(self, store):
        """Test that a new assessment replaces a pending round."""
        store.update_after_assess("final", suggestions("1", "2"))
        data = store.update_after_assess("final", suggestions("3"))

        assert data.state.round == 2
        assert [s.id for s in data.pending_suggestions()] == ["3"]

    def test_empty_assessment_opens_round(self, store):
        """Test that 'nothing to improve' still counts as a round."""
        data = store.update_after_assess("brief", [])
        assert data.state.round == 1
        assert data.is_open
        assert data.pending_suggestions() == []

    def test_revise_closes_round(self, store):
        """Test that revise clears the round but keeps the counter."""
        store.update_after_assess("final", suggestions("1"))
        data = store.update_after_revise("final")

        assert data.state.round == 1
        assert data.current_round is None
        assert data.state.last_revised_at is not None
        assert data.state.last_revised_at > data.state.last_assessed_at
        assert store.read().current_round is None

    def test_revise_without_state_initializes(self, store):
        """Test revise on an uninitialized phase."""
        data = store.update_after_revise("brief")
        assert data.state.phase == RefinementPhase.BRIEF
        assert data.state.round == 0
        assert data.state.last_revised_at is None

    def test_revise_without_open_round(self, store):
        """Test revise when idle only stamps the time."""
        store.get_or_init("final")
        data = store.update_after_revise("final")
        assert data.current_round is None
        assert data.history == []
        assert data.state.last_revised_at is not None

    def test_end_closes_round(self, store):
        """Test end_refinement on an open round."""
        store.update_after_assess("final", suggestions("1"))
        data = store.end_refinement("final")

        assert data.current_round is None
        assert data.state.round == 1
        assert store.read().current_round is None

    def test_end_without_state(self, store):
        """Test end_refinement with no state for the phase."""
        assert store.end_refinement("final") is None
        store.update_after_assess("brief", suggestions("1"))
        assert store.end_refinement("final") is None
        assert store.read().is_open

    def test_end_when_idle_is_noop(self, store):
        """Test end_refinement when no round is open."""
        store.get_or_init("final")
        before = store.path.read_text()
        data = store.end_refinement("final")
        assert data is not None
        assert store.path.read_text() == before


class TestHistory:
    """Tests for decided-round history."""

    def test_revise_archives_accept_all(self, store):
        """Test the default decision on revise."""
        store.update_after_assess("final", suggestions("1"))
        data = store.update_after_revise("final")

        assert len(data.history) == 1
        assert data.history[0].user_decision == UserDecision.ACCEPT_ALL

    def test_end_archives_done(self, store):
        """Test the default decision on end."""
        store.update_after_assess("final", suggestions("1"))
        data = store.end_refinement("final")
        assert data.history[0].user_decision == UserDecision.DONE

    def test_recorded_decision_kept(self, store):
        """Test that an explicit decision survives closing the round."""
        store.update_after_assess("final", suggestions("1", "2"))
        store.record_decision("final", UserDecision.ACCEPT_SELECTED, ["2"])
        data = store.update_after_revise("final")

        archived = data.history[0]
        assert archived.user_decision == UserDecision.ACCEPT_SELECTED
        assert archived.accepted_ids == ["2"]

    def test_record_decision_needs_open_round(self, store):
        """Test record_decision when nothing is pending."""
        assert store.record_decision("final", UserDecision.REJECT) is None
        store.get_or_init("final")
        assert store.record_decision("final", UserDecision.REJECT) is None

    def test_history_is_capped(self, tmp_path):
        """Test that only the most recent rounds are kept."""
        store = RefinementStateStore(tmp_path / "state.json", max_history=2)
        for _ in range(4):
            store.update_after_assess("final", [])
            data = store.update_after_revise("final")

        assert [r.round for r in data.history] == [3, 4]
