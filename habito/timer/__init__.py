"""Timer package."""

from .base import ClockedEngine, SegmentRecord, MIN_LOGGED_MS
from .clock import FrameTicker, system_clock, to_datetime
from .interval import IntervalConfig, IntervalTimerEngine, POMODORO, ULTRADIAN
from .snapshot import IntervalSnapshot, StopwatchSnapshot, TimerStatus
from .stopwatch import StopwatchEngine

__all__ = [
    "ClockedEngine",
    "SegmentRecord",
    "MIN_LOGGED_MS",
    "FrameTicker",
    "system_clock",
    "to_datetime",
    "IntervalConfig",
    "IntervalTimerEngine",
    "POMODORO",
    "ULTRADIAN",
    "IntervalSnapshot",
    "StopwatchSnapshot",
    "TimerStatus",
    "StopwatchEngine",
]
