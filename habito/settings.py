"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Habito/settings.json

Usage::

    settings = load_settings()
    settings.pomodoro_work_min = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

# Same app-support directory as db.py
APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "Habito"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"
TIMER_STATE_DIR = APP_SUPPORT_DIR / "timers"

STORAGE_BACKENDS = ("json", "sql")

# Minute/count fields that feed IntervalConfig; each must be a positive int.
PRESET_FIELDS = (
    "pomodoro_work_min",
    "pomodoro_break_min",
    "pomodoro_long_break_min",
    "pomodoro_cycles_before_long",
    "ultradian_work_min",
    "ultradian_break_min",
)


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── pomodoro ──────────────────────────────────────────────────────
    pomodoro_work_min: int = 25
    pomodoro_break_min: int = 5
    pomodoro_long_break_min: int = 15
    pomodoro_cycles_before_long: int = 4

    # ── ultradian sprint ──────────────────────────────────────────────
    ultradian_work_min: int = 90
    ultradian_break_min: int = 20

    # ── persistence ───────────────────────────────────────────────────
    storage_backend: str = "json"          # json | sql

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 480
    window_height: int = 620


def _repair_presets(settings: Settings) -> None:
    defaults = Settings()
    for name in PRESET_FIELDS:
        value = getattr(settings, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            logger.warning("invalid %s=%r in settings, using %r",
                           name, value, getattr(defaults, name))
            setattr(settings, name, getattr(defaults, name))


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            settings = Settings(**filtered)
            if settings.storage_backend not in STORAGE_BACKENDS:
                settings.storage_backend = "json"
            _repair_presets(settings)
            return settings
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return Settings()


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
