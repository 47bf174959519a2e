"""Main application window for SmokeTimer."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QStatusBar,
)
from sqlalchemy.exc import SQLAlchemyError

from .counters.tracker import CounterKind
from .host import TimerHost
from .notifications.tray import TrayNotificationRenderer
from .settings import Settings, save_settings
from .timer.engine import TimerState
from .ui.entry_history import EntryHistoryWidget
from .ui.styles import DEFAULT_PALETTE, build_stylesheet
from .ui.timer_widget import COUNTER_LABELS, TimerWidget

logger = logging.getLogger(__name__)


STATE_MESSAGES: dict[TimerState, str] = {
    TimerState.STOPPED:           "Paused",
    TimerState.RUNNING_COUNTDOWN: "Counting down",
    TimerState.RUNNING_OVERTIME:  "Time's up, counting overtime",
    TimerState.PAUSED_OVERTIME:   "Overtime paused",
}


class SmokeTimerWindow(QMainWindow):
    """Foreground window.  Closing it leaves the timer running in the tray."""

    def __init__(
        self,
        host: TimerHost,
        settings: Settings,
        tray: TrayNotificationRenderer | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("SmokeTimer")
        self.setMinimumSize(320, 480)

        self._host = host
        self._settings = settings
        self._tray = tray

        # ── geometry save timer ───────────────────────────────────────
        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        # ── central layout ────────────────────────────────────────────
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 8)
        layout.setSpacing(12)

        self._timer_widget = TimerWidget(
            host.engine, host.channel, host.counters, central,
        )
        self._history = EntryHistoryWidget(host.counters, central)
        layout.addWidget(self._timer_widget)
        layout.addWidget(self._history)
        layout.addStretch(1)
        self.setCentralWidget(central)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage(STATE_MESSAGES[host.engine.state])

        self.setStyleSheet(build_stylesheet(DEFAULT_PALETTE))
        self._timer_widget.apply_palette(DEFAULT_PALETTE)
        self._history.apply_palette(DEFAULT_PALETTE)
        self._history.refresh()

        # ── wire signals ──────────────────────────────────────────────
        self._timer_widget.counter_clicked.connect(self._on_counter_clicked)
        host.engine.state_changed.connect(self._on_state_changed)
        if tray is not None:
            tray.show_requested.connect(self.show_window)
            tray.quit_requested.connect(self.quit_app)

        self._restore_geometry()

    # ══════════════════════════════════════════════════════════════════
    #  COUNTERS
    # ══════════════════════════════════════════════════════════════════

    def _on_counter_clicked(self, kind: CounterKind) -> None:
        try:
            count = self._host.counters.increment(kind)
        except SQLAlchemyError:
            logger.exception("Could not record %s", kind.value)
            self._status_bar.showMessage(
                f"Could not save {COUNTER_LABELS[kind].lower()}, try again"
            )
            return
        self._status_bar.showMessage(
            f"{COUNTER_LABELS[kind]} #{count} logged, timer restarted"
        )

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: TimerState) -> None:
        self._status_bar.showMessage(STATE_MESSAGES.get(state, ""))
        if state == TimerState.RUNNING_OVERTIME and self._host.engine.overtime_ms == 0:
            self._send_notification("Time's up!", "The countdown has finished.")

    def _send_notification(self, title: str, body: str) -> None:
        if self._tray is None or not self._settings.notifications_enabled:
            return
        self._tray.notify(title, body)

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE
    # ══════════════════════════════════════════════════════════════════

    def show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    def quit_app(self) -> None:
        """Actually quit (don't just minimize)."""
        self._save_geometry()
        if self._tray is not None:
            self._tray.set_visible(False)
        QApplication.instance().quit()

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        """Persist current window geometry to settings."""
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        try:
            save_settings(self._settings)
        except OSError:
            logger.exception("Could not save window geometry")

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Hide to the tray instead of quitting (if enabled)."""
        self._save_geometry()
        if (
            self._settings.minimize_to_tray
            and self._tray is not None
            and self._tray.is_visible
        ):
            event.ignore()
            self.hide()
        else:
            event.accept()
            self.quit_app()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._geometry_save_timer.start()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._geometry_save_timer.start()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles pause/resume."""
        if event.key() == Qt.Key.Key_Space and not event.modifiers():
            if self._host.engine.is_running:
                self._host.engine.pause()
            else:
                self._host.engine.start()
            event.accept()
            return
        super().keyPressEvent(event)
