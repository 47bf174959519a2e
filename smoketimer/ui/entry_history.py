"""Entry history widget: the most recent presses since the last reset."""

from __future__ import annotations

from datetime import datetime

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QSizePolicy,
)

from ..counters.tracker import CounterKind, CounterTracker

MAX_ROWS = 10


class EntryHistoryWidget(QWidget):
    """Lists recent counter entries for both counters, newest first."""

    def __init__(self, counters: CounterTracker, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._counters = counters
        self._palette: dict[str, str] = {}
        self._build_ui()
        counters.counter_changed.connect(lambda _kind, _count: self.refresh())

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(6)

        header = QLabel("Today")
        header.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(header)
        self._header = header

        self._rows_container = QVBoxLayout()
        self._rows_container.setSpacing(4)
        layout.addLayout(self._rows_container)

        self._empty_label = QLabel("Nothing logged since the last reset")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._empty_label)

        self._row_widgets: list[QWidget] = []

        self._apply_styles()

    # ── refresh ───────────────────────────────────────────────────────

    def recent_entries(self) -> list[tuple[CounterKind, datetime]]:
        entries = [
            (kind, stamp)
            for kind in CounterKind
            for stamp in self._counters.entries(kind)
        ]
        entries.sort(key=lambda e: e[1], reverse=True)
        return entries[:MAX_ROWS]

    def refresh(self) -> None:
        """Reload entries from the database."""
        for w in self._row_widgets:
            w.setParent(None)
            w.deleteLater()
        self._row_widgets.clear()

        entries = self.recent_entries()
        self._empty_label.setVisible(not entries)

        for kind, stamp in entries:
            row = self._make_row(kind, stamp)
            self._rows_container.addWidget(row)
            self._row_widgets.append(row)

    @property
    def row_count(self) -> int:
        return len(self._row_widgets)

    # ── row builder ───────────────────────────────────────────────────

    def _make_row(self, kind: CounterKind, stamp: datetime) -> QWidget:
        text_color = self._palette.get("text", "#E2E2F0")
        text_muted = self._palette.get("text_muted", "#7A7A9A")

        frame = QFrame(self)
        row = QHBoxLayout(frame)
        row.setContentsMargins(8, 2, 8, 2)
        row.setSpacing(8)

        kind_lbl = QLabel(kind.value.capitalize())
        kind_lbl.setStyleSheet(f"font-size: 12px; color: {text_color};")
        kind_lbl.setSizePolicy(
            QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred,
        )

        time_lbl = QLabel(stamp.strftime("%H:%M"))
        time_lbl.setStyleSheet(f"font-size: 12px; color: {text_muted};")
        time_lbl.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)

        row.addWidget(kind_lbl)
        row.addWidget(time_lbl)
        return frame

    # ── theming ───────────────────────────────────────────────────────

    def _apply_styles(self) -> None:
        text_muted = self._palette.get("text_muted", "#7A7A9A")
        border_color = self._palette.get("border", "#313154")

        self._header.setStyleSheet(
            f"font-size: 13px; font-weight: 600; color: {text_muted};"
        )
        self._empty_label.setStyleSheet(
            f"font-size: 12px; color: {border_color};"
        )

    def apply_palette(self, palette: dict[str, str]) -> None:
        self._palette = palette
        self._apply_styles()
        if self._row_widgets:
            self.refresh()
