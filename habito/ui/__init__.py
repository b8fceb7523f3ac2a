"""UI package."""

from .progress_ring import ProgressRing
from .timer_panel import TimerPanel

__all__ = ["ProgressRing", "TimerPanel"]
