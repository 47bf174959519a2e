"""Cigarette and weed counters with timestamped entries.

Counts and last-reset stamps live in the key/value table under the same
keys the watch app used; every press also gets a ``CounterEntry`` row.
Persistence errors propagate to the caller after the session rolls back.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from ..database.db import get_session
from ..database.kv import get_value, put_value
from ..database.models import CounterEntry, KeyValue
from .daily_reset import DEFAULT_RESET_HOUR, should_reset

logger = logging.getLogger(__name__)


class CounterKind(Enum):
    CIGARETTE = "cigarette"
    WEED = "weed"


_KEY_PREFIX: dict[CounterKind, str] = {
    CounterKind.CIGARETTE: "cig",
    CounterKind.WEED: "weed",
}


def count_key(kind: CounterKind) -> str:
    return f"{_KEY_PREFIX[kind]}_smoked_count"


def last_reset_key(kind: CounterKind) -> str:
    return f"{_KEY_PREFIX[kind]}_last_reset_time"


def _to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _from_epoch_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


class CounterTracker(QObject):
    """Persistent counters plus the daily reset rule.

    Signals
    -------
    counter_changed(kind: CounterKind, count: int)
        After an increment or a reset.
    increment_recorded(kind: CounterKind)
        After an increment only; the host restarts the timer on this.
    """

    counter_changed = pyqtSignal(object, int)
    increment_recorded = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        reset_hour: int = DEFAULT_RESET_HOUR,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)
        if not 0 <= reset_hour <= 23:
            raise ValueError(f"reset_hour must be 0-23, got {reset_hour}")
        self._reset_hour = reset_hour
        self._clock = clock

    @property
    def reset_hour(self) -> int:
        return self._reset_hour

    # ── queries ───────────────────────────────────────────────────────

    def count(self, kind: CounterKind) -> int:
        return int(get_value(count_key(kind), "0"))

    def last_reset(self, kind: CounterKind) -> datetime | None:
        raw = get_value(last_reset_key(kind))
        return _from_epoch_ms(int(raw)) if raw is not None else None

    def entries(self, kind: CounterKind) -> list[datetime]:
        """Timestamps recorded since the last reset, oldest first."""
        since = self.last_reset(kind)
        with get_session() as db:
            query = db.query(CounterEntry).filter(
                CounterEntry.counter == kind.value,
            )
            if since is not None:
                query = query.filter(CounterEntry.timestamp >= since)
            return [e.timestamp for e in query.order_by(CounterEntry.id).all()]

    # ── mutations ─────────────────────────────────────────────────────

    def increment(self, kind: CounterKind, now: datetime | None = None) -> int:
        """Record one press and return the new count."""
        now = now or self._clock()
        with get_session() as db:
            row = db.get(KeyValue, count_key(kind))
            current = int(row.value) if row is not None else 0
            db.add(CounterEntry(counter=kind.value, timestamp=now))
            put_value(db, count_key(kind), current + 1)
        new_count = current + 1
        logger.debug("%s count -> %d", kind.value, new_count)

        self.counter_changed.emit(kind, new_count)
        self.increment_recorded.emit(kind)
        return new_count

    def reset(self, kind: CounterKind, now: datetime | None = None) -> None:
        now = now or self._clock()
        with get_session() as db:
            put_value(db, count_key(kind), 0)
            put_value(db, last_reset_key(kind), _to_epoch_ms(now))
        logger.info("Reset %s counter at %s", kind.value, now.isoformat(timespec="seconds"))
        self.counter_changed.emit(kind, 0)

    def check_daily_reset(self, now: datetime | None = None) -> list[CounterKind]:
        """Apply the daily rule to both counters; return the ones reset.

        A counter that has never been reset only gets its stamp set.
        """
        now = now or self._clock()
        reset: list[CounterKind] = []
        for kind in CounterKind:
            last = self.last_reset(kind)
            if last is None:
                with get_session() as db:
                    put_value(db, last_reset_key(kind), _to_epoch_ms(now))
            elif should_reset(last, now, self._reset_hour):
                self.reset(kind, now)
                reset.append(kind)
        return reset
