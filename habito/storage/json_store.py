"""File-backed store: one ``<key>.json`` per key in a directory.

This is the per-device local storage the desktop app uses by default::

    store = JsonFileStore(APP_SUPPORT_DIR / "timers")
    store.save("pomodoro-timer", {"status": "idle", ...})
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from ..errors import StorageError
from .adapter import decode, encode


_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileStore:
    def __init__(self, directory: Path | str) -> None:
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key) or key.startswith("."):
            raise ValueError(f"invalid storage key {key!r}")
        return self._dir / f"{key}.json"

    def load(self, key: str) -> dict[str, Any] | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc
        return decode(key, text)

    def save(self, key: str, data: dict[str, Any]) -> None:
        path = self.path_for(key)
        self._dir.mkdir(parents=True, exist_ok=True)
        # write-then-rename
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(encode(data) + "\n", encoding="utf-8")
        os.replace(tmp, path)

    def clear(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
