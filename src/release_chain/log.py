"""Step logging and log configuration.

StepLogger is passed explicitly to every stage that reports progress;
nothing in the package logs steps through a module-level singleton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TypeVar

from rich.console import Console
from rich.logging import RichHandler

T = TypeVar("T")

STEP_LOGGER_NAME = "release_chain.steps"


@dataclass(frozen=True)
class StepLog:
    """A completed pipeline stage."""

    step: str
    message: str


@dataclass
class StepLogger:
    """Records completed steps and forwards values unchanged.

    Attributes:
        logger: Destination for structured log records
        entries: Steps recorded so far, in completion order
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(STEP_LOGGER_NAME))
    entries: list[StepLog] = field(default_factory=list)

    def record(self, step: str, message: str, value: T = None) -> T:  # type: ignore[assignment]
        """Record a successful step and return ``value`` as-is."""
        entry = StepLog(step=step, message=message)
        self.entries.append(entry)
        self.logger.info(message, extra={"step": step})
        return value

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    @property
    def steps(self) -> list[str]:
        return [entry.step for entry in self.entries]


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route package logs through rich.

    Args:
        verbose: Emit DEBUG records (including every spawned command)
        console: Console to render to, defaults to stderr
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("release_chain")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False
