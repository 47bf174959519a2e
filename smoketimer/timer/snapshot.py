"""Immutable state projection emitted by the timer engine."""

from __future__ import annotations

from dataclasses import dataclass


STATUS_PAUSED = "Paused"
STATUS_RUNNING = "Running..."
STATUS_OVERTIME = "Overtime..."
STATUS_FINISHED = "Finished!"


@dataclass(frozen=True)
class Snapshot:
    """What an observer needs to draw the timer.

    ``displayed_ms`` is the countdown remainder, or the accumulated
    overtime once ``is_overtime`` is set.
    """

    displayed_ms: int
    is_overtime: bool
    running: bool
    status_label: str
