"""Shared test helpers for SmokeTimer."""

from smoketimer.notifications.bridge import RenderRequest
from smoketimer.timer.engine import TimerEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Monotonic millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = 0):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class RecordingRenderer:
    """Notification renderer that keeps every request."""

    def __init__(self):
        self.requests: list[RenderRequest] = []

    def render(self, request: RenderRequest) -> None:
        self.requests.append(request)

    @property
    def last(self) -> RenderRequest | None:
        return self.requests[-1] if self.requests else None


def advance(engine: TimerEngine, clock: FakeClock, seconds: int) -> None:
    """Let *seconds* one-second ticks elapse, firing the tick each time."""
    for _ in range(seconds):
        clock.advance(1000)
        engine._on_tick()
