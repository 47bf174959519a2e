"""Process-scoped owner of the timer and everything hanging off it.

The host lives as long as the process.  Windows come and go; they attach
to the broadcast channel and ask the engine for a snapshot, and the timer
keeps running in the tray when they close.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, QTimer
from sqlalchemy.exc import SQLAlchemyError

from .counters.tracker import CounterKind, CounterTracker
from .notifications.bridge import NotificationBridge, NotificationRenderer
from .notifications.broadcast import BroadcastChannel
from .notifications.tray import dispatch_command
from .settings import Settings
from .timer.engine import TimerEngine

logger = logging.getLogger(__name__)

RESET_CHECK_INTERVAL_MS = 60 * 1000


class TimerHost(QObject):
    """Builds and wires the engine, bridge, counters and reset check.

    ``renderer_factory`` receives a dispatch callable (command -> engine
    call) and returns the notification renderer; tests pass a recorder.
    """

    def __init__(
        self,
        settings: Settings,
        renderer_factory: Callable[[Callable[[str], None]], NotificationRenderer],
        parent: QObject | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self.engine = TimerEngine(
            self, duration_ms=settings.countdown_seconds * 1000,
        )
        self.channel = BroadcastChannel()
        self.renderer = renderer_factory(
            lambda command: dispatch_command(self.engine, command)
        )
        self.bridge = NotificationBridge(self.engine, self.renderer, self.channel, self)
        self.counters = CounterTracker(
            self, reset_hour=settings.daily_reset_hour, clock=clock,
        )
        self.counters.increment_recorded.connect(self._on_increment)

        # ── daily reset check ─────────────────────────────────────────
        self._reset_timer = QTimer(self)
        self._reset_timer.setInterval(RESET_CHECK_INTERVAL_MS)
        self._reset_timer.timeout.connect(self.check_daily_reset)

    def begin(self) -> None:
        """Run the first reset check and start the periodic one."""
        self.check_daily_reset()
        self._reset_timer.start()
        logger.info(
            "Timer host ready (%d s countdown, reset at %02d:00)",
            self.engine.duration_ms // 1000, self._settings.daily_reset_hour,
        )

    def check_daily_reset(self) -> list[CounterKind]:
        try:
            return self.counters.check_daily_reset()
        except SQLAlchemyError:
            # retried on the next interval
            logger.exception("Daily counter reset check failed")
            return []

    def shutdown(self) -> None:
        self._reset_timer.stop()
        self.bridge.detach()
        self.engine.shutdown()
        logger.info("Timer host stopped")

    def _on_increment(self, kind: CounterKind) -> None:
        logger.debug("%s recorded, restarting timer", kind.value)
        self.engine.restart()
