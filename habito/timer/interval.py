"""Work/break interval timer (Pomodoro and ultradian sprints).

States
------
IDLE      Waiting for ``start()``; ``is_break`` is always False here.
RUNNING   Counting toward the active phase target.  ``is_break`` says
          which phase: work or (short/long) break.
PAUSED    Frozen in whichever phase was active.

Transitions
-----------
IDLE → RUNNING(work)                 (start)
RUNNING ⇄ PAUSED                     (pause / resume, phase kept)
RUNNING(work) → RUNNING(break)       (work target reached on a tick;
                                      segment logged, cycle counted)
RUNNING(break) → IDLE                (break target reached on a tick)
RUNNING(break) → IDLE                (skip_break; cycles kept)
RUNNING|PAUSED → IDLE                (stop; cycles reset)
Any → IDLE                           (reset)

The long break replaces the short one after every
``cycles_before_long_break``-th completed work phase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from PyQt6.QtCore import QObject, pyqtSignal

from ..storage import PersistenceAdapter
from .base import ClockedEngine, SegmentCallback
from .clock import Clock
from .display import countdown_progress, split_ms
from .snapshot import MS_PER_MINUTE, IntervalSnapshot, StopwatchSnapshot, TimerStatus

if TYPE_CHECKING:
    from ..settings import Settings

logger = logging.getLogger(__name__)


# ── configuration ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class IntervalConfig:
    """Phase lengths in minutes plus the long-break cadence."""

    work_minutes: int
    break_minutes: int
    long_break_minutes: int = 15
    cycles_before_long_break: int = 4
    session_type: str = "pomodoro_work"

    def __post_init__(self) -> None:
        for name in ("work_minutes", "break_minutes", "long_break_minutes",
                     "cycles_before_long_break"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @property
    def work_ms(self) -> int:
        return self.work_minutes * MS_PER_MINUTE

    @property
    def break_ms(self) -> int:
        return self.break_minutes * MS_PER_MINUTE

    @property
    def long_break_ms(self) -> int:
        return self.long_break_minutes * MS_PER_MINUTE

    def break_ms_after(self, cycles_completed: int) -> int:
        """Break length that follows the *cycles_completed*-th work phase."""
        if cycles_completed % self.cycles_before_long_break == 0:
            return self.long_break_ms
        return self.break_ms

    @classmethod
    def pomodoro(cls, settings: Settings) -> IntervalConfig:
        return cls(
            work_minutes=settings.pomodoro_work_min,
            break_minutes=settings.pomodoro_break_min,
            long_break_minutes=settings.pomodoro_long_break_min,
            cycles_before_long_break=settings.pomodoro_cycles_before_long,
            session_type="pomodoro_work",
        )

    @classmethod
    def ultradian(cls, settings: Settings) -> IntervalConfig:
        # Ultradian sprints have one break length; the "long" break is the same.
        return cls(
            work_minutes=settings.ultradian_work_min,
            break_minutes=settings.ultradian_break_min,
            long_break_minutes=settings.ultradian_break_min,
            session_type="ultradian_work",
        )


POMODORO = IntervalConfig(25, 5, 15, 4, "pomodoro_work")
ULTRADIAN = IntervalConfig(90, 20, 20, 4, "ultradian_work")


def _idle_snapshot(config: IntervalConfig, cycles_completed: int = 0) -> IntervalSnapshot:
    return IntervalSnapshot(
        work_duration_ms=config.work_ms,
        break_duration_ms=config.break_ms,
        cycles_completed=cycles_completed,
    )


# ── engine ────────────────────────────────────────────────────────────────


class IntervalTimerEngine(ClockedEngine):
    """Countdown engine cycling between work and break phases.

    Signals (in addition to :class:`ClockedEngine`'s)
    -------------------------------------------------
    phase_changed(is_break: bool)
        Emitted when the active phase flips between work and break.
    break_completed()
        Emitted when a break runs to its end (not on skip or stop).
    """

    phase_changed = pyqtSignal(bool)
    break_completed = pyqtSignal()

    def __init__(
        self,
        store: PersistenceAdapter,
        storage_key: str = "pomodoro-timer",
        config: IntervalConfig = POMODORO,
        *,
        clock: Clock | None = None,
        on_work_segment_complete: SegmentCallback | None = None,
        on_break_complete: Callable[[], object] | None = None,
        strict: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(
            store,
            storage_key,
            defaults=_idle_snapshot(config),
            clock=clock,
            on_work_segment_complete=on_work_segment_complete,
            strict=strict,
            parent=parent,
        )
        self._config = config
        self._on_break_complete = on_break_complete

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def config(self) -> IntervalConfig:
        return self._config

    @config.setter
    def config(self, config: IntervalConfig) -> None:
        """Applies from the next ``start()``; the running phase keeps its length."""
        self._config = config
        self._defaults = _idle_snapshot(config)
        if self._snap.status == TimerStatus.IDLE:
            self._snap.work_duration_ms = config.work_ms
            self._snap.break_duration_ms = config.break_ms
            if self._stored:
                self._persist()

    @property
    def is_break(self) -> bool:
        return self._snap.is_break

    @property
    def cycles_completed(self) -> int:
        return self._snap.cycles_completed

    @property
    def work_duration_ms(self) -> int:
        return self._snap.work_duration_ms

    @property
    def break_duration_ms(self) -> int:
        return self._snap.break_duration_ms

    @property
    def target_ms(self) -> int:
        return self._snap.target_ms

    @property
    def remaining_ms(self) -> int:
        return max(0, self._snap.target_ms - self._snap.accumulated_ms)

    @property
    def minutes(self) -> int:
        return split_ms(self.remaining_ms)[0]

    @property
    def seconds(self) -> int:
        return split_ms(self.remaining_ms)[1]

    @property
    def progress(self) -> float:
        """0 → 100 through the active phase."""
        return countdown_progress(self._snap.accumulated_ms, self._snap.target_ms)

    @property
    def on_break_complete(self) -> Callable[[], object] | None:
        return self._on_break_complete

    @on_break_complete.setter
    def on_break_complete(self, callback: Callable[[], object] | None) -> None:
        self._on_break_complete = callback

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin a work phase with the current config.  Only valid from IDLE."""
        if self._snap.status != TimerStatus.IDLE:
            self._reject("start")
            return
        now = self._clock()
        self._transition(IntervalSnapshot(
            status=TimerStatus.RUNNING,
            reference_instant=now,
            accumulated_ms=0,
            work_started_at=now,
            work_duration_ms=self._config.work_ms,
            break_duration_ms=self._config.break_ms,
            cycles_completed=self._snap.cycles_completed,
            is_break=False,
        ))

    def skip_break(self) -> None:
        """End a running break early.  No callbacks; cycle count kept."""
        if self._snap.status != TimerStatus.RUNNING or not self._snap.is_break:
            self._reject("skip_break")
            return
        self._transition(self._idle_keeping_cycles())

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — phase completion
    # ══════════════════════════════════════════════════════════════════

    def _advance(self, now: int) -> None:
        snap = self._snap
        candidate = snap.elapsed_at(now)
        if candidate < snap.target_ms:
            snap.accumulated_ms = candidate
            snap.reference_instant = now
        elif snap.is_break:
            self._finish_break()
        else:
            self._finish_work(candidate, now)

    def _finish_work(self, elapsed: int, now: int) -> None:
        ending = self._snap
        cycles = ending.cycles_completed + 1
        break_ms = self._config.break_ms_after(cycles)
        logger.debug("%r: work phase %d done, %d ms break", self._key, cycles, break_ms)
        self._transition(IntervalSnapshot(
            status=TimerStatus.RUNNING,
            reference_instant=now,
            accumulated_ms=0,
            work_started_at=None,
            work_duration_ms=ending.work_duration_ms,
            break_duration_ms=break_ms,
            cycles_completed=cycles,
            is_break=True,
        ))
        self._report_segment(ending, elapsed, now)

    def _finish_break(self) -> None:
        self._transition(self._idle_keeping_cycles())
        self.break_completed.emit()
        if self._on_break_complete is None:
            return
        try:
            self._on_break_complete()
        except Exception:
            logger.exception("break-complete observer failed for %r", self._key)

    def _idle_keeping_cycles(self) -> IntervalSnapshot:
        snap = _idle_snapshot(self._config, self._snap.cycles_completed)
        snap.work_duration_ms = self._snap.work_duration_ms
        snap.break_duration_ms = self._snap.break_duration_ms
        return snap

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — hooks
    # ══════════════════════════════════════════════════════════════════

    def _stopped_snapshot(self) -> IntervalSnapshot:
        return _idle_snapshot(self._config)

    def _logs_on_stop(self, ending: StopwatchSnapshot) -> bool:
        # break time is never work, paused-in-break included
        return not ending.is_break

    def _transition(self, snap: StopwatchSnapshot, *, persist: bool = True) -> None:
        was_break = self._snap.is_break
        super()._transition(snap, persist=persist)
        if snap.is_break != was_break:
            self.phase_changed.emit(snap.is_break)
