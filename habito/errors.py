"""Exception hierarchy for Habito."""

from __future__ import annotations


class HabitoError(Exception):
    """Base class for every error raised by Habito itself."""


class InvalidStateError(HabitoError):
    """A timer operation was requested from a status that does not allow it.

    Only raised by engines constructed with ``strict=True``; by default an
    invalid transition is a silent no-op.
    """

    def __init__(self, operation: str, status: object) -> None:
        super().__init__(f"cannot {operation}() while {status}")
        self.operation = operation
        self.status = status


class SnapshotError(HabitoError, ValueError):
    """A persisted timer snapshot could not be decoded."""


class StorageError(HabitoError):
    """A persistence adapter could not read or parse a stored value."""
