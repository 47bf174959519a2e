"""UI package."""

from .timer_widget import TimerWidget
from .entry_history import EntryHistoryWidget
from .styles import build_stylesheet, DEFAULT_PALETTE

__all__ = [
    "TimerWidget",
    "EntryHistoryWidget",
    "build_stylesheet",
    "DEFAULT_PALETTE",
]
