"""Tests for the command-line interface."""

import pytest
from typer.testing import CliRunner

from storyfold.main import app
from storyfold.refinement import RefinementStateStore, RefinementSuggestion
from storyfold.storage import ContentDocument, ContentStore, ProjectLayout

runner = CliRunner()


@pytest.fixture
def no_backend(monkeypatch):
    """Make sure no real backend is reachable from the environment."""
    monkeypatch.setenv("STORYFOLD_LLM_PLATFORM", "none")


class TestGenerationCommands:
    """Tests for the generation commands without a backend."""

    def test_requirements_writes_placeholder(self, tmp_path, no_backend):
        """Test that the brief is written even without a backend."""
        result = runner.invoke(app, ["requirements", "snail story", "-p", str(tmp_path)])

        assert result.exit_code == 0
        brief = ContentStore(ProjectLayout(tmp_path)).read_text(ContentDocument.BRIEF)
        assert brief.endswith("snail story")

    def test_outline(self, tmp_path, no_backend):
        """Test the outline command."""
        result = runner.invoke(app, ["outline", "--project", str(tmp_path)])
        assert result.exit_code == 0
        assert ProjectLayout(tmp_path).document_path(ContentDocument.OUTLINE).exists()


class TestRefineCommands:
    """Tests for the refine sub-commands."""

    def test_status_without_state(self, tmp_path):
        """Test status on a fresh project."""
        result = runner.invoke(app, ["refine", "status", "-p", str(tmp_path)])
        assert result.exit_code == 0
        assert "No refinement in progress" in result.output

    def test_status_lists_suggestions(self, tmp_path):
        """Test that pending suggestions are shown."""
        store = RefinementStateStore.for_project(ProjectLayout(tmp_path))
        store.update_after_assess(
            "final", [RefinementSuggestion(id="1", summary="Soften the storm [scene]")]
        )

        result = runner.invoke(app, ["refine", "status", "-p", str(tmp_path)])

        assert result.exit_code == 0
        assert "Soften the storm [scene]" in result.output

    def test_end(self, tmp_path):
        """Test ending an open round."""
        store = RefinementStateStore.for_project(ProjectLayout(tmp_path))
        store.update_after_assess("final", [])

        result = runner.invoke(app, ["refine", "end", "final", "-p", str(tmp_path)])

        assert result.exit_code == 0
        assert store.read().current_round is None

    def test_assess_without_content(self, tmp_path, no_backend):
        """Test that assess does nothing on an empty project."""
        result = runner.invoke(app, ["refine", "assess", "final", "-p", str(tmp_path)])
        assert result.exit_code == 0
        assert RefinementStateStore.for_project(ProjectLayout(tmp_path)).read() is None


class TestConfigCommand:
    """Tests for the config command."""

    def test_masks_key(self, monkeypatch):
        """Test that the API key never appears in full."""
        monkeypatch.setenv("STORYFOLD_LLM_PLATFORM", "deepseek")
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-verysecretvalue")

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "verysecretvalue" not in result.output
