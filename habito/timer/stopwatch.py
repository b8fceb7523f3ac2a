"""Open-ended stopwatch for manual work sessions.

States
------
IDLE      Nothing on the clock.
RUNNING   Time accrues from ``reference_instant``.
PAUSED    Time frozen in ``accumulated_ms``.

Transitions
-----------
IDLE → RUNNING        (start)
RUNNING → PAUSED      (pause)
PAUSED → RUNNING      (resume)
RUNNING|PAUSED → IDLE (stop; logs the session if it reached one minute)
Any → IDLE            (reset; never logs)
"""

from __future__ import annotations

from PyQt6.QtCore import QObject

from ..storage import PersistenceAdapter
from .base import ClockedEngine, SegmentCallback
from .clock import Clock
from .display import split_hms, stopwatch_progress
from .snapshot import StopwatchSnapshot, TimerStatus


class StopwatchEngine(ClockedEngine):
    """Stopwatch whose elapsed time survives restarts."""

    def __init__(
        self,
        store: PersistenceAdapter,
        storage_key: str = "manual-timer",
        *,
        clock: Clock | None = None,
        on_work_segment_complete: SegmentCallback | None = None,
        strict: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(
            store,
            storage_key,
            defaults=StopwatchSnapshot(),
            clock=clock,
            on_work_segment_complete=on_work_segment_complete,
            strict=strict,
            parent=parent,
        )

    # ── display ───────────────────────────────────────────────────────────

    @property
    def hours(self) -> int:
        return split_hms(self.elapsed_ms)[0]

    @property
    def minutes(self) -> int:
        return split_hms(self.elapsed_ms)[1]

    @property
    def seconds(self) -> int:
        return split_hms(self.elapsed_ms)[2]

    @property
    def progress(self) -> float:
        """Percent of the four-hour ring; cosmetic only."""
        return stopwatch_progress(self.elapsed_ms)

    # ── controls ──────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin a fresh session.  Only valid from IDLE."""
        if self._snap.status != TimerStatus.IDLE:
            self._reject("start")
            return
        now = self._clock()
        self._transition(StopwatchSnapshot(
            status=TimerStatus.RUNNING,
            reference_instant=now,
            accumulated_ms=0,
            work_started_at=now,
        ))

    # ── internal ──────────────────────────────────────────────────────────

    def _advance(self, now: int) -> None:
        self._snap.accumulated_ms = self._snap.elapsed_at(now)
        self._snap.reference_instant = now
