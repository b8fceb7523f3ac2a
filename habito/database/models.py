"""SQLAlchemy ORM models for Habito."""

from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Text
)
from sqlalchemy.orm import DeclarativeBase


SESSION_TYPES = ("pomodoro_work", "ultradian_work", "manual_work")


class Base(DeclarativeBase):
    pass


class WorkSession(Base):
    """One logged work segment (from a timer or entered by hand)."""

    __tablename__ = "work_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    session_type = Column(String(20), nullable=False)  # pomodoro_work | ultradian_work | manual_work
    category = Column(String(64), nullable=True)
    note = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<WorkSession id={self.id} type={self.session_type} "
            f"minutes={self.duration_minutes}>"
        )


class TimerStateRow(Base):
    """Persisted timer snapshot, one row per storage key."""

    __tablename__ = "timer_state"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)  # JSON-encoded snapshot
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<TimerStateRow key={self.key} updated={self.updated_at}>"
