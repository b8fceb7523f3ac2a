"""Display derivations shared by the timer panels and the tray tooltip."""

from __future__ import annotations

STOPWATCH_CAP_MINUTES = 240  # ring is full after four hours


def split_hms(ms: int) -> tuple[int, int, int]:
    """Floor-split *ms* into (hours, minutes, seconds)."""
    total_seconds = max(0, ms) // 1000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def split_ms(ms: int) -> tuple[int, int]:
    """Floor-split *ms* into (minutes, seconds); minutes are not wrapped."""
    minutes, seconds = divmod(max(0, ms) // 1000, 60)
    return minutes, seconds


def stopwatch_progress(elapsed_ms: int, cap_minutes: int = STOPWATCH_CAP_MINUTES) -> float:
    """Percent of the cosmetic cap reached, clamped to 100."""
    elapsed_minutes = elapsed_ms / 60_000
    return min(elapsed_minutes / cap_minutes * 100, 100.0)


def countdown_progress(elapsed_ms: int, target_ms: int) -> float:
    """Percent of the active phase already elapsed."""
    if target_ms <= 0:
        return 0.0
    return elapsed_ms / target_ms * 100


def format_clock(ms: int, *, with_hours: bool = False) -> str:
    """``MM:SS`` (or ``H:MM:SS``) text for *ms*."""
    if with_hours:
        h, m, s = split_hms(ms)
        return f"{h}:{m:02d}:{s:02d}"
    m, s = split_ms(ms)
    return f"{m:02d}:{s:02d}"
