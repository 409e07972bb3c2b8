"""User-facing advisory notices."""

import logging
from typing import Optional

from rich.console import Console

logger = logging.getLogger(__name__)


class Notifier:
    """
    Channel for advisory messages meant for the writer.

    Notices never interrupt an operation; they only tell the user why a
    result is empty or unchanged. The base class just logs them.
    """

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)


class ConsoleNotifier(Notifier):
    """Prints notices to a rich console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        self.console.print(message, style="cyan", markup=False)

    def warning(self, message: str) -> None:
        self.console.print(message, style="yellow", markup=False)

    def error(self, message: str) -> None:
        self.console.print(message, style="bold red", markup=False)
