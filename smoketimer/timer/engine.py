"""Countdown / overtime state machine for SmokeTimer.

States
------
STOPPED            Countdown frozen, remembers what was left.
RUNNING_COUNTDOWN  Counting down towards zero.
RUNNING_OVERTIME   Zero has passed, counting up with no ceiling.
PAUSED_OVERTIME    Overtime frozen.

Transitions
-----------
STOPPED → RUNNING_COUNTDOWN                 (start)
PAUSED_OVERTIME → RUNNING_OVERTIME          (start)
RUNNING_COUNTDOWN → STOPPED                 (pause)
RUNNING_OVERTIME → PAUSED_OVERTIME          (pause)
RUNNING_COUNTDOWN → RUNNING_OVERTIME        (tick reaches zero)
Any → RUNNING_COUNTDOWN, full duration      (restart)

Running and phase live in one enum, so there is no way to be "paused"
and "counting" at once, or "overtime" with time still left.

Every control call and every tick produces exactly one ``Snapshot`` on
``snapshot_changed``.  Observers are called synchronously on the engine's
thread; the Qt timer and the control slots share one event loop, so a
tick never runs in the middle of ``pause()`` or ``restart()``.

A tick that arrives late enough to cross zero still reports the
"Finished!" snapshot; the seconds past zero are carried into the next
overtime tick, or into overtime straight away if the timer is paused.

Pausing on the "Finished!" tick reports ``(0, True, False, "Paused")``,
shown as "-00:00:00": paused overtime always carries the minus sign.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QElapsedTimer, QObject, QTimer, pyqtSignal, pyqtSlot

from .snapshot import (
    Snapshot,
    STATUS_FINISHED,
    STATUS_OVERTIME,
    STATUS_PAUSED,
    STATUS_RUNNING,
)

logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    STOPPED = "stopped"
    RUNNING_COUNTDOWN = "running_countdown"
    RUNNING_OVERTIME = "running_overtime"
    PAUSED_OVERTIME = "paused_overtime"


# ── constants ─────────────────────────────────────────────────────────────

TICK_MS = 1000
DEFAULT_DURATION_MS = (60 + 15) * 60 * 1000  # 1h15m

_RUNNING_STATES = (TimerState.RUNNING_COUNTDOWN, TimerState.RUNNING_OVERTIME)
_OVERTIME_STATES = (TimerState.RUNNING_OVERTIME, TimerState.PAUSED_OVERTIME)


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-based countdown that rolls over into an unbounded overtime count.

    Signals
    -------
    snapshot_changed(snapshot: Snapshot)
        Emitted once per tick and once per ``start``/``pause``/``restart``.
    state_changed(new_state: TimerState)
        Emitted on every state transition.
    """

    snapshot_changed = pyqtSignal(object)
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        duration_ms: int = DEFAULT_DURATION_MS,
        clock: Callable[[], int] | None = None,
    ) -> None:
        super().__init__(parent)
        if duration_ms <= 0:
            raise ValueError(f"duration_ms must be positive, got {duration_ms}")

        # ── configuration ─────────────────────────────────────────────
        self._duration_ms: int = duration_ms

        # ── timer state ───────────────────────────────────────────────
        self._state: TimerState = TimerState.STOPPED
        self._remaining_ms: int = duration_ms
        self._overtime_ms: int = 0
        self._overtime_carry_ms: int = 0

        # ── monotonic clock for drift correction ──────────────────────
        if clock is None:
            self._elapsed = QElapsedTimer()
            self._elapsed.start()
            clock = self._elapsed.elapsed
        self._clock: Callable[[], int] = clock
        self._tick_anchor_ms: int = 0

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def duration_ms(self) -> int:
        """The countdown length restored by ``restart()``."""
        return self._duration_ms

    @property
    def remaining_ms(self) -> int:
        return self._remaining_ms

    @property
    def overtime_ms(self) -> int:
        return self._overtime_ms

    @property
    def is_running(self) -> bool:
        return self._state in _RUNNING_STATES

    @property
    def is_overtime(self) -> bool:
        return self._state in _OVERTIME_STATES

    @property
    def is_ticking(self) -> bool:
        """True while the periodic Qt timer is armed."""
        return self._qt_timer.isActive()

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    @pyqtSlot()
    def start(self) -> None:
        """Resume counting.  Harmless when already running."""
        self._start()
        self._emit_snapshot()

    @pyqtSlot()
    def pause(self) -> None:
        """Freeze the current phase.  Harmless when already stopped."""
        self._pause()
        self._emit_snapshot()

    @pyqtSlot()
    def restart(self) -> None:
        """Back to a full countdown, whatever the engine was doing."""
        self._pause()
        self._remaining_ms = self._duration_ms
        self._overtime_ms = 0
        self._overtime_carry_ms = 0
        self._set_state(TimerState.STOPPED)
        self._start()
        self._emit_snapshot()

    @pyqtSlot()
    def shutdown(self) -> None:
        """Cancel the pending tick.  Called on process teardown."""
        self._qt_timer.stop()

    def get_snapshot(self) -> Snapshot:
        """Current state, for observers that have just attached."""
        if self._state == TimerState.RUNNING_COUNTDOWN:
            return Snapshot(self._remaining_ms, False, True, STATUS_RUNNING)
        if self._state == TimerState.RUNNING_OVERTIME:
            if self._overtime_ms == 0:
                # the tick that crossed zero, overtime starts on the next one
                return Snapshot(0, False, True, STATUS_FINISHED)
            return Snapshot(self._overtime_ms, True, True, STATUS_OVERTIME)
        if self._state == TimerState.PAUSED_OVERTIME:
            return Snapshot(self._overtime_ms, True, False, STATUS_PAUSED)
        return Snapshot(self._remaining_ms, False, False, STATUS_PAUSED)

    def subscribe(self, observer: Callable[[Snapshot], None]):
        """Register *observer* for every future snapshot.

        Returns a handle for ``unsubscribe``.  Nothing is replayed; call
        ``get_snapshot()`` for the current state.  An observer that raises
        is logged and skipped; the tick and the other observers carry on.
        """
        def deliver(snapshot: Snapshot) -> None:
            try:
                observer(snapshot)
            except Exception:
                logger.exception("Snapshot observer %r failed", observer)

        return self.snapshot_changed.connect(deliver)

    def unsubscribe(self, handle) -> None:
        try:
            self.snapshot_changed.disconnect(handle)
        except (TypeError, RuntimeError):
            logger.debug("Snapshot subscription %r already removed", handle)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _start(self) -> None:
        if self._state == TimerState.STOPPED:
            if self._remaining_ms <= 0:
                self._remaining_ms = self._duration_ms
            self._set_state(TimerState.RUNNING_COUNTDOWN)
        elif self._state == TimerState.PAUSED_OVERTIME:
            self._set_state(TimerState.RUNNING_OVERTIME)
        else:
            return
        self._tick_anchor_ms = self._clock()
        self._qt_timer.start()

    def _pause(self) -> None:
        if self._state == TimerState.RUNNING_COUNTDOWN:
            self._qt_timer.stop()
            self._set_state(TimerState.STOPPED)
        elif self._state == TimerState.RUNNING_OVERTIME:
            self._qt_timer.stop()
            self._overtime_ms += self._overtime_carry_ms
            self._overtime_carry_ms = 0
            self._set_state(TimerState.PAUSED_OVERTIME)

    def _on_tick(self) -> None:
        # A timeout already queued when pause() ran.
        if not self.is_running:
            return

        delta_ms = self._elapsed_seconds() * TICK_MS
        if self._state == TimerState.RUNNING_COUNTDOWN:
            self._remaining_ms -= delta_ms
            if self._remaining_ms <= 0:
                self._overtime_carry_ms = -self._remaining_ms
                self._remaining_ms = 0
                self._overtime_ms = 0
                self._set_state(TimerState.RUNNING_OVERTIME)
        else:
            self._overtime_ms += self._overtime_carry_ms + delta_ms
            self._overtime_carry_ms = 0

        self._emit_snapshot()

    def _elapsed_seconds(self) -> int:
        """Whole seconds since the previous tick, never less than one.

        A late timeout catches up instead of drifting behind wall time.
        """
        elapsed = self._clock() - self._tick_anchor_ms
        seconds = max(1, (elapsed + TICK_MS // 2) // TICK_MS)
        self._tick_anchor_ms += seconds * TICK_MS
        return seconds

    def _set_state(self, new_state: TimerState) -> None:
        if new_state == self._state:
            return
        logger.debug("Timer %s -> %s", self._state.value, new_state.value)
        self._state = new_state
        self.state_changed.emit(new_state)

    def _emit_snapshot(self) -> None:
        self.snapshot_changed.emit(self.get_snapshot())
