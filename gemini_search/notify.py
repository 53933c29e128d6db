"""Notification sinks.

ConsoleNotifier prints with Rich markup for CLI use; LoggingNotifier
forwards to the logging module for headless hosts.
"""

import logging
from typing import Optional

from rich.console import Console

logger = logging.getLogger(__name__)

NOTIFICATION_ID = "gemini-ai-search"


class ConsoleNotifier:
    """Print notifications to a rich.Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def notify(self, level: str, message: str) -> None:
        if level == "success":
            self.console.print(f"[green]✓[/] {message}")
        elif level == "error":
            self.console.print(f"[red]✗[/] {message}")
        else:
            self.console.print(f"[cyan]{message}[/]")


class LoggingNotifier:
    """Send notifications to the logger."""

    def notify(self, level: str, message: str) -> None:
        if level == "error":
            logger.error(f"[{NOTIFICATION_ID}] {message}")
        else:
            logger.info(f"[{NOTIFICATION_ID}] {message}")
