"""Forwards engine snapshots to the persistent notification and the
broadcast topic.

Nothing here can fail on its own: formatting is pure and the broadcast
is fire-and-forget.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PyQt6.QtCore import QObject

from ..timer.engine import TimerEngine
from ..timer.snapshot import Snapshot
from .broadcast import BroadcastChannel, BroadcastMessage, TIMER_TOPIC


NOTIFICATION_ID = 101
NOTIFICATION_TITLE = "Smoke Timer"

COMMAND_START = "start"
COMMAND_PAUSE = "pause"
COMMAND_RESTART = "restart"


# ── formatting ────────────────────────────────────────────────────────────


def format_display(displayed_ms: int, is_overtime: bool) -> str:
    """``HH:MM:SS`` with a leading ``-`` in overtime.

    Hours are not wrapped at 24; overtime can run for days.
    """
    total_seconds = displayed_ms // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    sign = "-" if is_overtime else ""
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"


# ── render requests ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class NotificationAction:
    label: str
    command: str


@dataclass(frozen=True)
class RenderRequest:
    notification_id: int
    title: str
    body: str
    actions: tuple[NotificationAction, ...]
    ongoing: bool = True


class NotificationRenderer(Protocol):
    def render(self, request: RenderRequest) -> None: ...


def build_render_request(snapshot: Snapshot, formatted: str) -> RenderRequest:
    if snapshot.running:
        toggle = NotificationAction("Pause", COMMAND_PAUSE)
    else:
        toggle = NotificationAction("Resume", COMMAND_START)
    return RenderRequest(
        notification_id=NOTIFICATION_ID,
        title=NOTIFICATION_TITLE,
        body=f"{formatted} | {snapshot.status_label}",
        actions=(toggle, NotificationAction("Restart", COMMAND_RESTART)),
    )


# ── bridge ────────────────────────────────────────────────────────────────


class NotificationBridge(QObject):
    """Subscribes to a ``TimerEngine`` and re-publishes every snapshot."""

    def __init__(
        self,
        engine: TimerEngine,
        renderer: NotificationRenderer,
        channel: BroadcastChannel,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._renderer = renderer
        self._channel = channel
        self._last_formatted: str = ""

        # Initial render so the notification exists before the first tick.
        snapshot = engine.get_snapshot()
        self._last_formatted = format_display(
            snapshot.displayed_ms, snapshot.is_overtime,
        )
        self._renderer.render(build_render_request(snapshot, self._last_formatted))

        self._handle = engine.subscribe(self._on_snapshot)

    @property
    def last_formatted(self) -> str:
        return self._last_formatted

    def detach(self) -> None:
        if self._handle is not None:
            self._engine.unsubscribe(self._handle)
            self._handle = None

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        formatted = format_display(snapshot.displayed_ms, snapshot.is_overtime)
        self._last_formatted = formatted
        self._renderer.render(build_render_request(snapshot, formatted))
        self._channel.publish(
            TIMER_TOPIC,
            BroadcastMessage(TIMER_TOPIC, snapshot, formatted),
        )
