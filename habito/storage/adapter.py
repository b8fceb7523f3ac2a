"""The persistence contract the timer engines depend on.

An adapter stores one opaque JSON object per key.  Engines read it once at
construction and write it on every transition; the adapter never changes
a value on its own.
"""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

from ..errors import StorageError


@runtime_checkable
class PersistenceAdapter(Protocol):
    def load(self, key: str) -> dict[str, Any] | None:
        """Stored object for *key*, ``None`` if absent.

        Raises :class:`StorageError` when a value exists but cannot be
        parsed.
        """

    def save(self, key: str, data: dict[str, Any]) -> None:
        ...

    def clear(self, key: str) -> None:
        """Forget *key*.  Clearing an absent key is not an error."""


def decode(key: str, text: str) -> dict[str, Any]:
    """Parse a stored JSON object, raising :class:`StorageError` if it is not one."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise StorageError(f"stored value for {key!r} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise StorageError(f"stored value for {key!r} is not a JSON object")
    return data


def encode(data: dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), sort_keys=True)


class MemoryStore:
    """In-process store.  Values are kept serialised, like on disk."""

    def __init__(self) -> None:
        self.raw: dict[str, str] = {}

    def load(self, key: str) -> dict[str, Any] | None:
        text = self.raw.get(key)
        if text is None:
            return None
        return decode(key, text)

    def save(self, key: str, data: dict[str, Any]) -> None:
        self.raw[key] = encode(data)

    def clear(self, key: str) -> None:
        self.raw.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self.raw
