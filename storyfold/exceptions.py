"""Exceptions raised by StoryFold."""

from pathlib import Path
from typing import Optional


class StoryFoldError(Exception):
    """Base class for StoryFold errors."""


class StateWriteError(StoryFoldError):
    """The refinement state file could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ContentWriteError(StoryFoldError):
    """A content document could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path
