"""Project layout and JSON content documents."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Union

from storyfold.exceptions import ContentWriteError

logger = logging.getLogger(__name__)


PROJECT_DIR_NAME = ".storyfold"
REFINEMENT_STATE_FILE = "refinementState.json"


class ContentDocument(str, Enum):
    """Content documents kept in a project, by file stem."""

    BRIEF = "brief"
    OUTLINE = "outline"
    SAMPLES = "samples"
    FINAL = "final"
    REVIEW = "review"
    AGE_CHECK = "ageCheck"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"


# Keyed by refinement phase value
PHASE_DOCUMENTS = {
    "brief": ContentDocument.BRIEF,
    "outline": ContentDocument.OUTLINE,
    "sample": ContentDocument.SAMPLES,
    "final": ContentDocument.FINAL,
}


def phase_document(phase: str) -> ContentDocument:
    """Get the document that owns a phase's content."""
    return PHASE_DOCUMENTS[getattr(phase, "value", phase)]


class ProjectLayout:
    """
    Where a project's data lives.

    Everything is kept under ``<root>/.storyfold/``, one JSON file per
    document plus the refinement state file.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    @property
    def data_dir(self) -> Path:
        return self.root / PROJECT_DIR_NAME

    def ensure_data_dir(self) -> Path:
        """Create the data directory if needed and return it."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    def document_path(self, document: ContentDocument) -> Path:
        return self.data_dir / ContentDocument(document).filename

    @property
    def refinement_state_path(self) -> Path:
        return self.data_dir / REFINEMENT_STATE_FILE


class ContentStore:
    """Read and write the ``text`` field of a project's content documents."""

    def __init__(self, layout: ProjectLayout):
        self.layout = layout

    def read_text(self, document: ContentDocument) -> str:
        """
        Read a document's text.

        Returns:
            The ``text`` field, or "" if the document is missing, corrupt
            or has no string text
        """
        path = self.layout.document_path(document)
        if not path.exists():
            return ""

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as e:
            logger.warning(f"Failed to read {path}: {e}")
            return ""

        text = data.get("text") if isinstance(data, dict) else None
        return text if isinstance(text, str) else ""

    def write_text(self, document: ContentDocument, text: str) -> Path:
        """
        Write a document's text.

        Raises:
            ContentWriteError: If the file cannot be written
        """
        path = self.layout.document_path(document)
        try:
            self.layout.ensure_data_dir()
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"text": text}, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise ContentWriteError(f"Could not write {path.name}: {e}", path=path) from e

        logger.info(f"{path.name} written at {path}")
        return path

    def read_phase(self, phase: str) -> str:
        return self.read_text(phase_document(phase))

    def write_phase(self, phase: str, text: str) -> Path:
        return self.write_text(phase_document(phase), text)
