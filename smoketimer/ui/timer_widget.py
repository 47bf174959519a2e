"""Main timer card.

Layout (top → bottom):
    - Time display (HH:MM:SS, ``-`` prefix in overtime)
    - Status label
    - Pause/Resume + Restart
    - One button per counter, showing today's count

The widget is an observer that may come and go while the engine keeps
running: it listens on the broadcast topic only while visible and pulls
the engine's current snapshot whenever it attaches, since the channel
never replays.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
)

from ..counters.tracker import CounterKind, CounterTracker
from ..notifications.bridge import format_display
from ..notifications.broadcast import (
    BroadcastChannel, BroadcastMessage, Subscription, TIMER_TOPIC,
)
from ..timer.engine import TimerEngine
from ..timer.snapshot import Snapshot
from .styles import color_for


COUNTER_LABELS: dict[CounterKind, str] = {
    CounterKind.CIGARETTE: "Cigarette",
    CounterKind.WEED:      "Weed",
}


class TimerWidget(QWidget):
    """The timer card shown in the main window."""

    counter_clicked = pyqtSignal(object)  # CounterKind

    def __init__(
        self,
        engine: TimerEngine,
        channel: BroadcastChannel,
        counters: CounterTracker,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._channel = channel
        self._counters = counters
        self._subscription: Subscription | None = None
        self._palette: dict[str, str] = {}
        self._snapshot: Snapshot | None = None
        self._counter_buttons: dict[CounterKind, QPushButton] = {}
        self._build_ui()
        self._connect_signals()
        for kind in CounterKind:
            self._set_count(kind, counters.count(kind))

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._time_label = QLabel("00:00:00", card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._status_label = QLabel("", card)
        self._status_label.setObjectName("statusLabel")
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._status_label)

        # ── timer controls ───────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._toggle_btn = QPushButton("Resume", card)
        self._toggle_btn.setObjectName("primaryButton")

        self._restart_btn = QPushButton("Restart", card)
        self._restart_btn.setObjectName("secondaryButton")

        btn_row.addWidget(self._toggle_btn)
        btn_row.addWidget(self._restart_btn)
        layout.addLayout(btn_row)

        # ── counters ─────────────────────────────────────────────────
        counter_row = QHBoxLayout()
        counter_row.setSpacing(12)
        for kind in CounterKind:
            btn = QPushButton(card)
            btn.setObjectName("counterButton")
            btn.setToolTip(f"Log a {COUNTER_LABELS[kind].lower()} and restart the timer")
            counter_row.addWidget(btn)
            self._counter_buttons[kind] = btn
        layout.addLayout(counter_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._toggle_btn.clicked.connect(self._on_toggle)
        self._restart_btn.clicked.connect(self._engine.restart)
        for kind, btn in self._counter_buttons.items():
            btn.clicked.connect(lambda _checked=False, k=kind: self.counter_clicked.emit(k))
        self._counters.counter_changed.connect(self._set_count)

    # ── attachment ────────────────────────────────────────────────────────

    @property
    def is_attached(self) -> bool:
        return self._subscription is not None

    def attach(self) -> None:
        """Start listening and catch up with the engine's current state."""
        if self._subscription is None:
            self._subscription = self._channel.subscribe(TIMER_TOPIC, self._on_broadcast)
        self._apply_snapshot(self._engine.get_snapshot())

    def detach(self) -> None:
        if self._subscription is not None:
            self._channel.unsubscribe(self._subscription)
            self._subscription = None

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.attach()

    def hideEvent(self, event) -> None:
        self.detach()
        super().hideEvent(event)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_toggle(self) -> None:
        if self._engine.is_running:
            self._engine.pause()
        else:
            self._engine.start()

    def _on_broadcast(self, message: BroadcastMessage) -> None:
        self._apply_snapshot(message.snapshot, message.formatted)

    def _apply_snapshot(self, snapshot: Snapshot, formatted: str | None = None) -> None:
        if formatted is None:
            formatted = format_display(snapshot.displayed_ms, snapshot.is_overtime)
        self._snapshot = snapshot
        self._time_label.setText(formatted)
        self._time_label.setStyleSheet(f"color: {color_for(snapshot, self._palette or None)};")
        self._status_label.setText(snapshot.status_label)
        self._toggle_btn.setText("Pause" if snapshot.running else "Resume")

    def _set_count(self, kind: CounterKind, count: int) -> None:
        self._counter_buttons[kind].setText(f"{COUNTER_LABELS[kind]}\n{count}")

    # ── theming ───────────────────────────────────────────────────────────

    def apply_palette(self, palette: dict[str, str]) -> None:
        self._palette = palette
        if self._snapshot is not None:
            self._apply_snapshot(self._snapshot)
