"""Timer card shown in each tab.

Layout (top → bottom):
    - Title and subtitle (preset summary)
    - Optional task field, saved as the note of each logged segment
    - ProgressRing (centred)
    - Action buttons, only the ones valid for the current status

The engines quietly ignore out-of-order calls, so the panel is the
place that decides what the user may press.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QPushButton, QFrame,
)

from ..logbook import SegmentLogger
from ..timer.base import ClockedEngine
from ..timer.display import format_clock
from ..timer.interval import IntervalTimerEngine
from ..timer.snapshot import TimerStatus
from .progress_ring import ProgressRing


class TimerPanel(QWidget):
    """Card driving one stopwatch or interval engine."""

    def __init__(
        self,
        engine: ClockedEngine,
        title: str,
        subtitle: str = "",
        parent: QWidget | None = None,
        *,
        segment_logger: SegmentLogger | None = None,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._segment_logger = segment_logger
        self._is_interval = isinstance(engine, IntervalTimerEngine)
        self._build_ui(title, subtitle)
        self._connect_signals()
        self.refresh()

    @property
    def engine(self) -> ClockedEngine:
        return self._engine

    @property
    def ring(self) -> ProgressRing:
        return self._ring

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self, title: str, subtitle: str) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 24)
        layout.setSpacing(12)

        self._title = QLabel(title, card)
        self._title.setObjectName("panelTitle")
        layout.addWidget(self._title)

        self._subtitle = QLabel(subtitle, card)
        self._subtitle.setObjectName("panelSubtitle")
        layout.addWidget(self._subtitle)

        self._task_input = QLineEdit(card)
        self._task_input.setPlaceholderText("What are you working on? (optional)")
        self._task_input.setMaxLength(100)
        self._task_input.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._task_input.setVisible(self._segment_logger is not None)
        layout.addWidget(self._task_input)

        ring_row = QHBoxLayout()
        ring_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._ring = ProgressRing(card)
        self._ring.setFixedSize(260, 260)
        ring_row.addWidget(self._ring)
        layout.addLayout(ring_row)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._stop_btn = QPushButton("Stop", card)
        self._stop_btn.setObjectName("dangerButton")

        self._primary_btn = QPushButton("Start", card)
        self._primary_btn.setObjectName("primaryButton")

        self._skip_btn = QPushButton("Skip break", card)
        self._skip_btn.setObjectName("secondaryButton")

        btn_row.addWidget(self._stop_btn)
        btn_row.addWidget(self._primary_btn)
        btn_row.addWidget(self._skip_btn)
        layout.addLayout(btn_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._primary_btn.clicked.connect(self._on_primary)
        self._stop_btn.clicked.connect(self._engine.stop)
        self._task_input.textChanged.connect(self._on_task_changed)
        if self._is_interval:
            self._skip_btn.clicked.connect(self._engine.skip_break)
            self._engine.phase_changed.connect(lambda _is_break: self.refresh())

        self._engine.tick.connect(lambda _elapsed: self._refresh_time())
        self._engine.status_changed.connect(lambda _status: self.refresh())

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_primary(self) -> None:
        status = self._engine.status
        if status == TimerStatus.RUNNING:
            self._engine.pause()
        elif status == TimerStatus.PAUSED:
            self._engine.resume()
        else:
            self._engine.start()

    def _on_task_changed(self, text: str) -> None:
        if self._segment_logger is not None:
            self._segment_logger.note = text.strip() or None

    # ── display ───────────────────────────────────────────────────────────

    def refresh(self) -> None:
        status = self._engine.status
        is_break = self._is_interval and self._engine.is_break

        self._primary_btn.setText({
            TimerStatus.IDLE: "Start",
            TimerStatus.RUNNING: "Pause",
            TimerStatus.PAUSED: "Resume",
        }[status])
        self._stop_btn.setVisible(status != TimerStatus.IDLE)
        self._skip_btn.setVisible(status == TimerStatus.RUNNING and is_break)

        if status == TimerStatus.PAUSED:
            self._ring.set_mode("paused")
            self._ring.set_state_label("PAUSED")
        elif status == TimerStatus.IDLE:
            self._ring.set_mode("idle")
            self._ring.set_state_label("READY")
        elif is_break:
            self._ring.set_mode("break")
            self._ring.set_state_label("BREAK")
        else:
            self._ring.set_mode("focus")
            self._ring.set_state_label("FOCUS")

        if self._is_interval:
            self._ring.set_caption(f"Cycle {self._engine.cycles_completed + 1}")
        self._refresh_time()

    def _refresh_time(self) -> None:
        engine = self._engine
        if self._is_interval:
            text = f"{engine.minutes:02d}:{engine.seconds:02d}"
        else:
            text = format_clock(engine.elapsed_ms, with_hours=True)
        self._ring.set_time_text(text)
        self._ring.set_percent(engine.progress / 100)
