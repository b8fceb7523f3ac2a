"""Time sources for the timer engines.

Engines never count ticks.  They read a wall clock (epoch milliseconds) on
every tick and every user action, and the ticker only decides *when* they
look.  Tests swap the clock for a fake one and call the tick handler
directly.
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, Qt, QTimer


Clock = Callable[[], int]

FRAME_INTERVAL_MS = 16  # ~60 Hz, one display refresh


def system_clock() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_datetime(epoch_ms: int) -> datetime:
    """Local naive datetime for an epoch-ms instant."""
    return datetime.fromtimestamp(epoch_ms / 1000)


class FrameTicker(QObject):
    """A cancellable repeating tick source driven by the Qt event loop.

    ``start()`` and ``stop()`` are both idempotent.  Once ``stop()`` has
    returned no further callback is delivered.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        parent: QObject | None = None,
        *,
        interval_ms: int = FRAME_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._callback = callback
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._fire)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def start(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()

    def _fire(self) -> None:
        self._callback()
