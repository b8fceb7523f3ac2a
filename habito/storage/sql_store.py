"""Store backed by the ``timer_state`` table of the Habito database."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from ..database.db import get_session
from ..database.models import TimerStateRow
from .adapter import decode, encode


class SqlStore:
    """One row per key; the value column holds the JSON object."""

    def load(self, key: str) -> dict[str, Any] | None:
        with get_session() as db:
            row = db.get(TimerStateRow, key)
            if row is None:
                return None
            text = row.value
        return decode(key, text)

    def save(self, key: str, data: dict[str, Any]) -> None:
        with get_session() as db:
            row = db.get(TimerStateRow, key)
            if row is None:
                db.add(TimerStateRow(key=key, value=encode(data), updated_at=datetime.now()))
            else:
                row.value = encode(data)
                row.updated_at = datetime.now()

    def clear(self, key: str) -> None:
        with get_session() as db:
            row = db.get(TimerStateRow, key)
            if row is not None:
                db.delete(row)
