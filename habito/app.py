"""Main application window for Habito."""

from __future__ import annotations

import logging

from PyQt6.QtGui import QColor, QIcon, QPixmap
from PyQt6.QtWidgets import (
    QMainWindow, QTabWidget, QStatusBar, QSystemTrayIcon,
)
from sqlalchemy.exc import SQLAlchemyError

from .logbook import SegmentLogger, logging_streak, minutes_today
from .settings import Settings, TIMER_STATE_DIR, load_settings, save_settings
from .storage import JsonFileStore, PersistenceAdapter, SqlStore
from .timer.base import ClockedEngine, SegmentRecord
from .timer.clock import Clock
from .timer.interval import IntervalConfig, IntervalTimerEngine
from .timer.stopwatch import StopwatchEngine
from .ui.styles import build_stylesheet
from .ui.timer_panel import TimerPanel

logger = logging.getLogger(__name__)


def make_store(settings: Settings) -> PersistenceAdapter:
    """Persistence adapter selected by ``settings.storage_backend``."""
    if settings.storage_backend == "sql":
        return SqlStore()
    return JsonFileStore(TIMER_STATE_DIR)


def _make_tray_icon() -> QIcon:
    pixmap = QPixmap(32, 32)
    pixmap.fill(QColor("#F38BA8"))
    return QIcon(pixmap)


class HabitoApp(QMainWindow):
    """Main window: Pomodoro, Ultradian and Manual timer tabs."""

    def __init__(
        self,
        settings: Settings | None = None,
        store: PersistenceAdapter | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Habito")
        self.setMinimumSize(420, 560)
        self.setStyleSheet(build_stylesheet())

        # ── settings & storage ─────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self._store = store or make_store(self._settings)
        self.resize(self._settings.window_width, self._settings.window_height)

        # ── engines ───────────────────────────────────────────────────
        pomodoro = IntervalConfig.pomodoro(self._settings)
        ultradian = IntervalConfig.ultradian(self._settings)
        self._loggers: dict[str, SegmentLogger] = {
            "pomodoro": SegmentLogger(pomodoro.session_type),
            "ultradian": SegmentLogger(ultradian.session_type),
            "manual": SegmentLogger("manual_work"),
        }

        self._pomodoro = IntervalTimerEngine(
            self._store, "pomodoro-timer", pomodoro,
            clock=clock,
            on_work_segment_complete=self._loggers["pomodoro"],
            parent=self,
        )
        self._ultradian = IntervalTimerEngine(
            self._store, "ultradian-timer", ultradian,
            clock=clock,
            on_work_segment_complete=self._loggers["ultradian"],
            parent=self,
        )
        self._manual = StopwatchEngine(
            self._store, "manual-timer",
            clock=clock,
            on_work_segment_complete=self._loggers["manual"],
            parent=self,
        )

        # ── tabs ──────────────────────────────────────────────────────
        self._tabs = QTabWidget(self)
        self._panels: dict[str, TimerPanel] = {
            "pomodoro": TimerPanel(
                self._pomodoro, "Pomodoro",
                f"{pomodoro.work_minutes}/{pomodoro.break_minutes} min",
                segment_logger=self._loggers["pomodoro"],
            ),
            "ultradian": TimerPanel(
                self._ultradian, "Ultradian Sprint",
                f"{ultradian.work_minutes}/{ultradian.break_minutes} min deep work cycle",
                segment_logger=self._loggers["ultradian"],
            ),
            "manual": TimerPanel(
                self._manual, "Manual Timer", "Track open-ended work",
                segment_logger=self._loggers["manual"],
            ),
        }
        self._tabs.addTab(self._panels["pomodoro"], "Pomodoro")
        self._tabs.addTab(self._panels["ultradian"], "Ultradian")
        self._tabs.addTab(self._panels["manual"], "Manual")
        self.setCentralWidget(self._tabs)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)

        # ── tray (notifications) ──────────────────────────────────────
        self._tray_icon = QSystemTrayIcon(_make_tray_icon(), self)
        self._tray_icon.setToolTip("Habito")
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon.show()

        self._connect_signals()
        self._refresh_status_bar()

    # ── accessors ─────────────────────────────────────────────────────────

    @property
    def engines(self) -> dict[str, ClockedEngine]:
        return {
            "pomodoro": self._pomodoro,
            "ultradian": self._ultradian,
            "manual": self._manual,
        }

    @property
    def panels(self) -> dict[str, TimerPanel]:
        return dict(self._panels)

    @property
    def status_message(self) -> str:
        return self._status_bar.currentMessage()

    # ── wiring ────────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        for engine in self.engines.values():
            engine.work_segment_completed.connect(self._on_segment_completed)
            engine.segment_log_failed.connect(self._on_segment_log_failed)
        self._pomodoro.break_completed.connect(
            lambda: self._notify("Break over!", "Ready for the next pomodoro?"))
        self._ultradian.break_completed.connect(
            lambda: self._notify("Break over!", "Ready for another sprint?"))
        self._pomodoro.phase_changed.connect(self._on_pomodoro_phase)
        self._ultradian.phase_changed.connect(self._on_ultradian_phase)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_segment_completed(self, record: SegmentRecord) -> None:
        self._refresh_status_bar(f"Logged {record.duration_minutes} min of work.")

    def _on_segment_log_failed(self, error: Exception) -> None:
        self._status_bar.showMessage(f"Failed to save session: {error}")

    def _on_pomodoro_phase(self, is_break: bool) -> None:
        if is_break:
            minutes = self._pomodoro.break_duration_ms // 60_000
            self._notify("Pomodoro complete!", f"Take a {minutes}-minute break.")

    def _on_ultradian_phase(self, is_break: bool) -> None:
        if is_break:
            minutes = self._ultradian.break_duration_ms // 60_000
            self._notify("Ultradian sprint complete!", f"Take a {minutes}-minute break.")

    def _notify(self, title: str, body: str) -> None:
        """Fire-and-forget tray notification."""
        if not self._settings.notifications_enabled:
            return
        if self._tray_icon.isVisible():
            self._tray_icon.showMessage(title, body)

    def _refresh_status_bar(self, prefix: str = "") -> None:
        try:
            total = minutes_today()
            streak = logging_streak()
        except SQLAlchemyError:
            logger.exception("could not read today's totals")
            self._status_bar.showMessage(prefix)
            return
        summary = f"Today: {total} min  •  Streak: {streak} d"
        self._status_bar.showMessage(f"{prefix}  {summary}" if prefix else summary)

    # ── window events ─────────────────────────────────────────────────────

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Stop ticking; running timers stay persisted and resume on relaunch."""
        for engine in self.engines.values():
            engine.close()
        self._settings.window_width = self.width()
        self._settings.window_height = self.height()
        try:
            save_settings(self._settings)
        except OSError:
            logger.exception("could not save window geometry")
        self._tray_icon.hide()
        event.accept()
