"""Work-session log: the segment logger the timers report to, plus the
daily totals shown in the status bar.

Usage::

    engine = IntervalTimerEngine(
        store, "pomodoro-timer", POMODORO,
        on_work_segment_complete=SegmentLogger("pomodoro_work"),
    )
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from sqlalchemy import func

from .database.db import get_session
from .database.models import SESSION_TYPES, WorkSession

logger = logging.getLogger(__name__)

STREAK_LOOKBACK_DAYS = 365


class SegmentLogger:
    """Callable that records each reported work segment as a ``WorkSession``.

    ``category`` and ``note`` are copied onto every row; the timer panel
    updates ``note`` from its task field.
    """

    def __init__(
        self, session_type: str, category: str | None = None, note: str | None = None,
    ) -> None:
        if session_type not in SESSION_TYPES:
            raise ValueError(f"unknown session type {session_type!r}")
        self.session_type = session_type
        self.category = category
        self.note = note

    def __call__(
        self, duration_minutes: int, start_time: datetime, end_time: datetime,
    ) -> WorkSession:
        return add_work_session(
            start_time, end_time, duration_minutes,
            self.session_type, category=self.category, note=self.note,
        )

    def __repr__(self) -> str:
        return f"SegmentLogger({self.session_type!r}, category={self.category!r})"


# ── writes ────────────────────────────────────────────────────────────────


def add_work_session(
    start_time: datetime,
    end_time: datetime,
    duration_minutes: int,
    session_type: str,
    category: str | None = None,
    note: str | None = None,
) -> WorkSession:
    """Insert one work session and return the stored row."""
    if session_type not in SESSION_TYPES:
        raise ValueError(f"unknown session type {session_type!r}")
    if duration_minutes < 1:
        raise ValueError("duration_minutes must be at least 1")
    if end_time < start_time:
        raise ValueError("end_time is before start_time")

    with get_session() as db:
        record = WorkSession(
            date=start_time.date(),
            start_time=start_time,
            end_time=end_time,
            duration_minutes=int(duration_minutes),
            session_type=session_type,
            category=category,
            note=note,
        )
        db.add(record)
        db.flush()
        logger.info("logged %d min %s session (id=%s)",
                    record.duration_minutes, session_type, record.id)
        return record


def delete_work_session(session_id: int) -> bool:
    """Delete a session by id.  Returns False if it did not exist."""
    with get_session() as db:
        record = db.get(WorkSession, session_id)
        if record is None:
            return False
        db.delete(record)
        return True


# ── reads ─────────────────────────────────────────────────────────────────


def list_work_sessions(day: date | None = None) -> list[WorkSession]:
    """All sessions (or those on *day*), oldest first."""
    with get_session() as db:
        query = db.query(WorkSession)
        if day is not None:
            query = query.filter(WorkSession.date == day)
        return query.order_by(WorkSession.start_time).all()


def minutes_today(session_type: str | None = None, today: date | None = None) -> int:
    """Logged minutes for *today*, optionally for one session type."""
    today = today or date.today()
    with get_session() as db:
        query = db.query(func.coalesce(func.sum(WorkSession.duration_minutes), 0))
        query = query.filter(WorkSession.date == today)
        if session_type is not None:
            query = query.filter(WorkSession.session_type == session_type)
        return int(query.scalar())


def work_hours_today(today: date | None = None) -> float:
    return minutes_today(today=today) / 60


def logging_streak(today: date | None = None) -> int:
    """Consecutive days with at least one session.

    Today not having a session yet does not break the streak; the count
    then starts from yesterday.
    """
    today = today or date.today()
    earliest = today - timedelta(days=STREAK_LOOKBACK_DAYS - 1)
    with get_session() as db:
        rows = (
            db.query(WorkSession.date)
            .filter(WorkSession.date >= earliest, WorkSession.date <= today)
            .distinct()
            .all()
        )
    logged = {row[0] for row in rows}

    streak = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        day = today - timedelta(days=offset)
        if day in logged:
            streak += 1
        elif offset > 0:
            break
    return streak
