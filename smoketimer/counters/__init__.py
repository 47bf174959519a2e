"""Counters package."""

from .daily_reset import should_reset, DEFAULT_RESET_HOUR
from .tracker import CounterTracker, CounterKind, count_key, last_reset_key

__all__ = [
    "should_reset",
    "DEFAULT_RESET_HOUR",
    "CounterTracker",
    "CounterKind",
    "count_key",
    "last_reset_key",
]
