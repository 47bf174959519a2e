"""System-tray rendering of the persistent timer notification.

The tray icon is the desktop counterpart of an ongoing notification:
its tooltip carries the title and body, and its context menu carries the
action buttons.
"""

from __future__ import annotations

import logging
from typing import Callable

from PyQt6.QtCore import QObject, Qt, pyqtSignal
from PyQt6.QtGui import QAction, QColor, QIcon, QImage, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import QMenu, QSystemTrayIcon

from ..timer.engine import TimerEngine
from .bridge import (
    COMMAND_PAUSE,
    COMMAND_RESTART,
    COMMAND_START,
    RenderRequest,
)

logger = logging.getLogger(__name__)


# ── command dispatch ──────────────────────────────────────────────────────


def dispatch_command(engine: TimerEngine, command: str) -> None:
    """Route a notification action back into the engine's control API."""
    handlers = {
        COMMAND_START: engine.start,
        COMMAND_PAUSE: engine.pause,
        COMMAND_RESTART: engine.restart,
    }
    handler = handlers.get(command)
    if handler is None:
        logger.warning("Ignoring unknown notification command %r", command)
        return
    handler()


# ── tray‑icon image generation ────────────────────────────────────────────

ICON_RUNNING = "running"
ICON_OVERTIME = "overtime"
ICON_PAUSED = "paused"


def _make_tray_icon(kind: str) -> QIcon:
    """32×32 monochrome template icon.

    - running:   filled circle
    - overtime:  circle outline with a centre dot
    - paused:    two vertical pause bars
    """
    size = 64  # draw at 2× for Retina
    img = QImage(size, size, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(Qt.GlobalColor.transparent)
    p = QPainter(img)
    p.setRenderHint(QPainter.RenderHint.Antialiasing)
    colour = QColor(0, 0, 0, 220)
    p.setPen(Qt.PenStyle.NoPen)
    p.setBrush(colour)

    cx, cy, r = size // 2, size // 2, size // 2 - 4

    if kind == ICON_RUNNING:
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
    elif kind == ICON_OVERTIME:
        p.setPen(QPen(colour, 4))
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawEllipse(cx - r, cy - r, r * 2, r * 2)
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(colour)
        dot_r = 6
        p.drawEllipse(cx - dot_r, cy - dot_r, dot_r * 2, dot_r * 2)
    else:
        bar_w, bar_h = 8, 28
        gap = 6
        y = cy - bar_h // 2
        p.drawRoundedRect(cx - gap - bar_w, y, bar_w, bar_h, 3, 3)
        p.drawRoundedRect(cx + gap, y, bar_w, bar_h, 3, 3)

    p.end()

    img.setDevicePixelRatio(2.0)
    return QIcon(QPixmap.fromImage(img))


def icon_kind_for(request: RenderRequest) -> str:
    running = any(a.command == COMMAND_PAUSE for a in request.actions)
    if not running:
        return ICON_PAUSED
    if request.body.startswith("-"):
        return ICON_OVERTIME
    return ICON_RUNNING


# ── renderer ──────────────────────────────────────────────────────────────


class TrayNotificationRenderer(QObject):
    """Keeps a single tray icon in sync with the latest ``RenderRequest``.

    Signals
    -------
    show_requested()
        "Show Window" picked from the menu or the icon clicked.
    quit_requested()
        "Quit" picked from the menu.
    """

    show_requested = pyqtSignal()
    quit_requested = pyqtSignal()

    def __init__(
        self,
        dispatch: Callable[[str], None],
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._dispatch = dispatch
        self._notification_id: int | None = None
        self._action_labels: tuple[str, ...] = ()
        self._action_items: list[QAction] = []
        self._icon_kind: str | None = None

        self._menu = QMenu()
        self._separator = self._menu.addSeparator()
        show_action = self._menu.addAction("Show Window")
        show_action.triggered.connect(self.show_requested.emit)
        quit_action = self._menu.addAction("Quit")
        quit_action.triggered.connect(self.quit_requested.emit)

        self._tray_icon = QSystemTrayIcon(self)
        self._tray_icon.setContextMenu(self._menu)
        self._tray_icon.activated.connect(self._on_activated)

    # ── public API ────────────────────────────────────────────────────

    @property
    def tooltip(self) -> str:
        return self._tray_icon.toolTip()

    @property
    def action_items(self) -> list[QAction]:
        return list(self._action_items)

    @property
    def is_visible(self) -> bool:
        return self._tray_icon.isVisible()

    def set_visible(self, visible: bool) -> None:
        self._tray_icon.setVisible(visible)

    def render(self, request: RenderRequest) -> None:
        if self._notification_id not in (None, request.notification_id):
            logger.warning(
                "Replacing notification %s with %s",
                self._notification_id, request.notification_id,
            )
        self._notification_id = request.notification_id

        self._tray_icon.setToolTip(f"{request.title}: {request.body}")

        kind = icon_kind_for(request)
        if kind != self._icon_kind:
            self._tray_icon.setIcon(_make_tray_icon(kind))
            self._icon_kind = kind

        labels = tuple(a.label for a in request.actions)
        if labels != self._action_labels:
            self._rebuild_actions(request)

    def notify(self, title: str, body: str) -> None:
        """Transient balloon message alongside the persistent icon."""
        self._tray_icon.showMessage(title, body)

    # ── internal ──────────────────────────────────────────────────────

    def _rebuild_actions(self, request: RenderRequest) -> None:
        for item in self._action_items:
            self._menu.removeAction(item)
            item.deleteLater()
        self._action_items.clear()

        for action in request.actions:
            item = QAction(action.label, self._menu)
            item.triggered.connect(
                lambda _checked=False, c=action.command: self._dispatch(c)
            )
            self._menu.insertAction(self._separator, item)
            self._action_items.append(item)
        self._action_labels = tuple(a.label for a in request.actions)

    def _on_activated(self, reason: QSystemTrayIcon.ActivationReason) -> None:
        if reason == QSystemTrayIcon.ActivationReason.Trigger:
            self.show_requested.emit()
