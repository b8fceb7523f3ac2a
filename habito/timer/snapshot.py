"""Serializable state records for the timer engines.

A snapshot is everything an engine needs to pick up where it left off
after the app is closed and reopened.  It is stored as a flat JSON object
with camelCase keys::

    {"status": "running", "referenceInstant": 1718000000000,
     "accumulatedMs": 120000, "workStartedAt": 1717999880000}

The interval engine adds ``isBreak``, ``workDurationMs``,
``breakDurationMs`` and ``cyclesCompleted``.

All instants are wall-clock epoch milliseconds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Mapping, TypeVar

from ..errors import SnapshotError


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


MS_PER_MINUTE = 60_000

# exact-integer range of a JSON number
MAX_STORED_MS = 2 ** 53

_S = TypeVar("_S", bound="StopwatchSnapshot")


# ── field decoding ────────────────────────────────────────────────────────


def _decode_ms(key: str, value: Any, *, nullable: bool = False) -> int | None:
    if value is None:
        if nullable:
            return None
        raise SnapshotError(f"{key} must not be null")
    # bool is an int subclass; a stored true/false here is corruption
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SnapshotError(f"{key} must be a number, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise SnapshotError(f"{key} must be a whole number, got {value!r}")
        value = int(value)
    if not 0 <= value <= MAX_STORED_MS:
        raise SnapshotError(f"{key} out of range: {value!r}")
    return value


def _decode_status(value: Any) -> TimerStatus:
    try:
        return TimerStatus(value)
    except ValueError:
        raise SnapshotError(f"unknown timer status {value!r}") from None


def _decode_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise SnapshotError(f"{key} must be a boolean, got {value!r}")
    return value


# ── snapshots ─────────────────────────────────────────────────────────────


@dataclass
class StopwatchSnapshot:
    """State of an open-ended stopwatch."""

    status: TimerStatus = TimerStatus.IDLE
    reference_instant: int | None = None
    accumulated_ms: int = 0
    work_started_at: int | None = None

    _KEYS = {
        "status": "status",
        "reference_instant": "referenceInstant",
        "accumulated_ms": "accumulatedMs",
        "work_started_at": "workStartedAt",
    }

    def elapsed_at(self, now: int) -> int:
        """Elapsed ms as of *now*, folding in the running delta."""
        if self.status == TimerStatus.RUNNING and self.reference_instant is not None:
            return self.accumulated_ms + max(0, now - self.reference_instant)
        return self.accumulated_ms

    def copy(self: _S) -> _S:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, TimerStatus):
                value = value.value
            data[self._KEYS[f.name]] = value
        return data

    @classmethod
    def from_dict(
        cls: type[_S],
        data: Mapping[str, Any],
        *,
        defaults: _S | None = None,
    ) -> _S:
        """Decode a stored snapshot.

        Keys missing from *data* fall back to *defaults* (or the class
        defaults).  Raises :class:`SnapshotError` on anything malformed.
        """
        if not isinstance(data, Mapping):
            raise SnapshotError(f"snapshot must be an object, got {type(data).__name__}")
        if "status" not in data:
            raise SnapshotError("snapshot has no status")

        base = defaults.copy() if defaults is not None else cls()
        values = {f.name: getattr(base, f.name) for f in fields(base)}
        for name, key in cls._KEYS.items():
            if key in data:
                values[name] = cls._decode_field(name, key, data[key])

        snap = cls(**values)
        snap._check_invariants()
        return snap

    @classmethod
    def _decode_field(cls, name: str, key: str, value: Any) -> Any:
        if name == "status":
            return _decode_status(value)
        if name in ("reference_instant", "work_started_at"):
            return _decode_ms(key, value, nullable=True)
        return _decode_ms(key, value)

    def _check_invariants(self) -> None:
        if self.status == TimerStatus.RUNNING and self.reference_instant is None:
            raise SnapshotError("running snapshot has no reference instant")
        if self.status == TimerStatus.IDLE:
            # an idle record never carries time; drop any stray fields
            self.reference_instant = None
            self.accumulated_ms = 0
            self.work_started_at = None


@dataclass
class IntervalSnapshot(StopwatchSnapshot):
    """State of a work/break interval timer."""

    work_duration_ms: int = 25 * MS_PER_MINUTE
    break_duration_ms: int = 5 * MS_PER_MINUTE
    cycles_completed: int = 0
    is_break: bool = False

    _KEYS = {
        **StopwatchSnapshot._KEYS,
        "work_duration_ms": "workDurationMs",
        "break_duration_ms": "breakDurationMs",
        "cycles_completed": "cyclesCompleted",
        "is_break": "isBreak",
    }

    @property
    def target_ms(self) -> int:
        """Length of the phase currently active."""
        return self.break_duration_ms if self.is_break else self.work_duration_ms

    @classmethod
    def _decode_field(cls, name: str, key: str, value: Any) -> Any:
        if name == "is_break":
            return _decode_bool(key, value)
        if name in ("work_duration_ms", "break_duration_ms"):
            ms = _decode_ms(key, value)
            if not ms:
                raise SnapshotError(f"{key} must be positive")
            return ms
        return super()._decode_field(name, key, value)

    def _check_invariants(self) -> None:
        super()._check_invariants()
        if self.status == TimerStatus.IDLE:
            self.is_break = False
