"""Shared test helpers for Habito."""

from habito.timer.base import ClockedEngine

T0 = 1_700_000_000_000  # 2023-11-14T22:13:20Z
MINUTE = 60_000


class FakeClock:
    """Manually advanced wall clock in epoch milliseconds."""

    def __init__(self, start: int = T0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


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


class CallRecorder:
    """Callable collaborator that records its arguments, optionally raising."""

    def __init__(self, error: Exception | None = None):
        self.calls: list[tuple] = []
        self.error = error

    def __call__(self, *args):
        self.calls.append(args)
        if self.error is not None:
            raise self.error

    def __len__(self):
        return len(self.calls)

    @property
    def last(self):
        return self.calls[-1] if self.calls else None


def tick_after(engine: ClockedEngine, clock: FakeClock, ms: int) -> None:
    """Let *ms* of wall-clock time pass, then deliver one tick."""
    clock.advance(ms)
    engine._on_tick()
