"""Database package."""

from .db import get_session, init_db
from .models import WorkSession, TimerStateRow

__all__ = ["get_session", "init_db", "WorkSession", "TimerStateRow"]
