"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    TICK_MS,
    DEFAULT_DURATION_MS,
)
from .snapshot import (
    Snapshot,
    STATUS_PAUSED,
    STATUS_RUNNING,
    STATUS_OVERTIME,
    STATUS_FINISHED,
)

__all__ = [
    "TimerEngine",
    "TimerState",
    "TICK_MS",
    "DEFAULT_DURATION_MS",
    "Snapshot",
    "STATUS_PAUSED",
    "STATUS_RUNNING",
    "STATUS_OVERTIME",
    "STATUS_FINISHED",
]
