from __future__ import annotations

import logging
import random
from typing import Optional, Protocol

from rich.console import Console

logger = logging.getLogger("sasr.progress")

PALETTE = ("cyan", "green", "magenta", "yellow", "blue", "bright_cyan", "bright_green", "bright_magenta")


def format_elapsed(elapsed_seconds: float) -> str:
    total = int(elapsed_seconds)
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class ProgressReporter(Protocol):
    def report(self, elapsed_seconds: float) -> None: ...


class ConsoleProgressReporter:
    """Prints one elapsed-time line per tick, in a color picked once per run."""

    def __init__(self, console: Optional[Console] = None, color: Optional[str] = None):
        self.console = console or Console()
        self.color = color or random.choice(PALETTE)

    def report(self, elapsed_seconds: float) -> None:
        self.console.print(f"[{self.color}]Elapsed: {format_elapsed(elapsed_seconds)}[/{self.color}]")


class LoggingProgressReporter:
    def report(self, elapsed_seconds: float) -> None:
        logger.info(
            f"Job still running, elapsed {format_elapsed(elapsed_seconds)}",
            extra={"elapsed_s": elapsed_seconds},
        )

