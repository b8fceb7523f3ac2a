"""Drift-correcting machinery shared by the stopwatch and interval engines.

Elapsed time is never a tick count.  Each engine keeps a snapshot with a
``reference_instant`` (the last wall-clock moment it synchronised) and the
``accumulated_ms`` banked before it.  Every tick, pause, stop and reload
folds ``now - reference_instant`` into the bank and re-anchors, so a late
tick, a sleeping laptop or a closed window only ever shows up as one larger
delta on the next look at the clock.

Persistence
-----------
The snapshot is saved on every status or phase transition and cleared on
stop/reset.  Ordinary ticks are not written: a stored RUNNING snapshot
plus the wall clock at load time already yields the right elapsed value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from ..errors import InvalidStateError, SnapshotError, StorageError
from ..storage import PersistenceAdapter
from .clock import Clock, FrameTicker, system_clock, to_datetime
from .snapshot import MS_PER_MINUTE, StopwatchSnapshot, TimerStatus

logger = logging.getLogger(__name__)

MIN_LOGGED_MS = MS_PER_MINUTE  # shorter work segments are discarded

SegmentCallback = Callable[[int, datetime, datetime], object]


@dataclass(frozen=True)
class SegmentRecord:
    """A finished work segment as reported to the segment logger."""

    duration_minutes: int
    start_time: datetime
    end_time: datetime


class ClockedEngine(QObject):
    """Base class for a persisted, wall-clock driven timer.

    Signals
    -------
    tick(elapsed_ms: int)
        Emitted after every scheduling tick while running.
    status_changed(new_status: TimerStatus)
        Emitted whenever ``status`` changes.
    work_segment_completed(record: SegmentRecord)
        Emitted once per work segment, after the callback has stored it.
    segment_log_failed(error: Exception)
        Emitted when ``on_work_segment_complete`` raised.
    """

    tick = pyqtSignal(int)
    status_changed = pyqtSignal(object)
    work_segment_completed = pyqtSignal(object)
    segment_log_failed = pyqtSignal(object)

    def __init__(
        self,
        store: PersistenceAdapter,
        storage_key: str,
        *,
        defaults: StopwatchSnapshot | None = None,
        clock: Clock | None = None,
        on_work_segment_complete: SegmentCallback | None = None,
        strict: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._key = storage_key
        self._defaults: StopwatchSnapshot = defaults or StopwatchSnapshot()
        self._clock: Clock = clock or system_clock
        self._on_work_segment_complete = on_work_segment_complete
        self._strict = strict
        self._closed = False
        self._stored = False  # whether the key currently holds a snapshot

        self._ticker = FrameTicker(self._on_tick, self)

        self._snap = self._load()
        if self._snap.status == TimerStatus.RUNNING:
            self._persist()
        self._sync_ticker()

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def status(self) -> TimerStatus:
        return self._snap.status

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def snapshot(self) -> StopwatchSnapshot:
        """A copy of the current snapshot; mutating it has no effect."""
        return self._snap.copy()

    @property
    def elapsed_ms(self) -> int:
        """Elapsed ms as of the last synchronisation."""
        return self._snap.accumulated_ms

    @property
    def work_started_at(self) -> datetime | None:
        if self._snap.work_started_at is None:
            return None
        return to_datetime(self._snap.work_started_at)

    @property
    def is_running(self) -> bool:
        return self._snap.status == TimerStatus.RUNNING

    @property
    def is_ticking(self) -> bool:
        return self._ticker.is_active

    @property
    def on_work_segment_complete(self) -> SegmentCallback | None:
        return self._on_work_segment_complete

    @on_work_segment_complete.setter
    def on_work_segment_complete(self, callback: SegmentCallback | None) -> None:
        self._on_work_segment_complete = callback

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def pause(self) -> None:
        """Freeze elapsed time.  Only valid while RUNNING."""
        if self._snap.status != TimerStatus.RUNNING:
            self._reject("pause")
            return
        now = self._clock()
        snap = self._snap.copy()
        snap.accumulated_ms = snap.elapsed_at(now)
        snap.reference_instant = now
        snap.status = TimerStatus.PAUSED
        self._transition(snap)

    def resume(self) -> None:
        """Continue from PAUSED, re-anchoring at the current instant."""
        if self._snap.status != TimerStatus.PAUSED:
            self._reject("resume")
            return
        snap = self._snap.copy()
        snap.reference_instant = self._clock()
        snap.status = TimerStatus.RUNNING
        self._transition(snap)

    def stop(self) -> None:
        """End the session, logging it when it qualifies.

        A no-op while IDLE, in strict mode too, so repeated stops never
        log twice.
        """
        if self._snap.status == TimerStatus.IDLE:
            logger.debug("stop() on idle timer %r ignored", self._key)
            return
        now = self._clock()
        ending = self._snap
        elapsed = ending.elapsed_at(now)
        self._transition(self._stopped_snapshot(), persist=False)
        if self._logs_on_stop(ending) and elapsed >= MIN_LOGGED_MS:
            self._report_segment(ending, elapsed, now)
        else:
            logger.debug("discarded %d ms segment on %r", elapsed, self._key)

    def reset(self) -> None:
        """Return to IDLE and forget the stored state without logging."""
        self._transition(self._stopped_snapshot(), persist=False)

    def close(self) -> None:
        """Cancel the ticker.  Idempotent; later ticks are ignored."""
        self._closed = True
        self._ticker.stop()

    # ══════════════════════════════════════════════════════════════════
    #  SUBCLASS HOOKS
    # ══════════════════════════════════════════════════════════════════

    def _advance(self, now: int) -> None:
        """Apply one tick at wall-clock *now*.  Status is RUNNING."""
        raise NotImplementedError

    def _stopped_snapshot(self) -> StopwatchSnapshot:
        return self._defaults.copy()

    def _logs_on_stop(self, ending: StopwatchSnapshot) -> bool:
        return True

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — ticking
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if self._closed or self._snap.status != TimerStatus.RUNNING:
            return
        self._advance(self._clock())
        self.tick.emit(self._snap.accumulated_ms)

    def _sync_ticker(self) -> None:
        if not self._closed and self._snap.status == TimerStatus.RUNNING:
            self._ticker.start()
        else:
            self._ticker.stop()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — transitions
    # ══════════════════════════════════════════════════════════════════

    def _transition(self, snap: StopwatchSnapshot, *, persist: bool = True) -> None:
        previous = self._snap.status
        self._snap = snap
        if persist:
            self._persist()
        else:
            self._store.clear(self._key)
            self._stored = False
        self._sync_ticker()
        if snap.status != previous:
            logger.debug("%s %r: %s -> %s", type(self).__name__, self._key,
                         previous.value, snap.status.value)
            self.status_changed.emit(snap.status)

    def _reject(self, operation: str) -> None:
        if self._strict:
            raise InvalidStateError(operation, self._snap.status.value)
        logger.debug("%s() ignored while %s", operation, self._snap.status.value)

    def _report_segment(self, ending: StopwatchSnapshot, elapsed: int, now: int) -> None:
        start = ending.work_started_at
        if start is None:
            start = now - elapsed
        record = SegmentRecord(
            duration_minutes=elapsed // MS_PER_MINUTE,
            start_time=to_datetime(start),
            end_time=to_datetime(now),
        )
        if self._on_work_segment_complete is not None:
            try:
                self._on_work_segment_complete(
                    record.duration_minutes, record.start_time, record.end_time,
                )
            except Exception as exc:
                logger.exception("segment logger failed for %r", self._key)
                self.segment_log_failed.emit(exc)
                return
        self.work_segment_completed.emit(record)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — persistence
    # ══════════════════════════════════════════════════════════════════

    def _load(self) -> StopwatchSnapshot:
        try:
            data = self._store.load(self._key)
        except StorageError as exc:
            logger.warning("discarding unreadable timer state %r: %s", self._key, exc)
            self._store.clear(self._key)
            return self._defaults.copy()
        if data is None:
            return self._defaults.copy()

        try:
            snap = type(self._defaults).from_dict(data, defaults=self._defaults)
        except SnapshotError as exc:
            logger.warning("discarding corrupt timer state %r: %s", self._key, exc)
            self._store.clear(self._key)
            return self._defaults.copy()

        if snap.status == TimerStatus.RUNNING:
            now = self._clock()
            gap = max(0, now - snap.reference_instant)
            snap.accumulated_ms += gap
            snap.reference_instant = now
            logger.info("recovered running timer %r (+%d ms while away)", self._key, gap)
        self._stored = True
        return snap

    def _persist(self) -> None:
        self._store.save(self._key, self._snap.to_dict())
        self._stored = True
