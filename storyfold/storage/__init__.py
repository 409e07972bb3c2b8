"""Project layout and content document storage."""

from .project import (
    PHASE_DOCUMENTS,
    PROJECT_DIR_NAME,
    REFINEMENT_STATE_FILE,
    ContentDocument,
    ContentStore,
    ProjectLayout,
    phase_document,
)

__all__ = [
    "ContentDocument",
    "ContentStore",
    "ProjectLayout",
    "phase_document",
    "PHASE_DOCUMENTS",
    "PROJECT_DIR_NAME",
    "REFINEMENT_STATE_FILE",
]
