"""Circular progress ring widget rendered with QPainter.

- Fills clockwise as the phase (or stopwatch hour cap) progresses.
- Colour-coded by phase: focus, break, paused, idle.
- Shows the time text in bold at the centre plus a state label and a
  caption line underneath.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QColor, QFont, QPainter, QPen
from PyQt6.QtWidgets import QWidget


# (arc colour, track colour) per ring mode
RING_COLORS: dict[str, tuple[str, str]] = {
    "idle":   ("#7A7A9A", "#2E2E42"),
    "focus":  ("#F38BA8", "#3A2A36"),
    "break":  ("#94E2D5", "#243A38"),
    "paused": ("#F9E2AF", "#3A3628"),
}

TEXT_COLOR = "#E2E2F0"
MUTED_COLOR = "#7A7A9A"


class ProgressRing(QWidget):
    """Custom-painted circular timer ring."""

    RING_THICKNESS = 12

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(220, 220)

        self._percent: float = 0.0           # 0..1 arc fill
        self._time_text: str = "00:00"
        self._state_label: str = "READY"
        self._caption: str = ""
        self._mode: str = "idle"

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC API
    # ══════════════════════════════════════════════════════════════════

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def time_text(self) -> str:
        return self._time_text

    @property
    def state_label(self) -> str:
        return self._state_label

    @property
    def caption(self) -> str:
        return self._caption

    @property
    def mode(self) -> str:
        return self._mode

    def set_percent(self, pct: float) -> None:
        """Update the arc fill (clamped to 0..1)."""
        self._percent = max(0.0, min(1.0, pct))
        self.update()

    def set_time_text(self, text: str) -> None:
        self._time_text = text
        self.update()

    def set_state_label(self, text: str) -> None:
        self._state_label = text
        self.update()

    def set_caption(self, text: str) -> None:
        self._caption = text
        self.update()

    def set_mode(self, mode: str) -> None:
        if mode not in RING_COLORS:
            raise ValueError(f"unknown ring mode {mode!r}")
        self._mode = mode
        self.update()

    # ══════════════════════════════════════════════════════════════════
    #  PAINTING
    # ══════════════════════════════════════════════════════════════════

    def paintEvent(self, event) -> None:  # type: ignore[override]
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)

        side = min(self.width(), self.height()) - self.RING_THICKNESS * 2
        rect = QRectF(
            (self.width() - side) / 2,
            (self.height() - side) / 2,
            side, side,
        )
        arc_hex, track_hex = RING_COLORS[self._mode]

        # ── track ────────────────────────────────────────────────────
        pen = QPen(QColor(track_hex), self.RING_THICKNESS)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        p.setPen(pen)
        p.drawArc(rect, 0, 360 * 16)

        # ── arc (clockwise from 12 o'clock) ──────────────────────────
        if self._percent > 0:
            pen.setColor(QColor(arc_hex))
            p.setPen(pen)
            p.drawArc(rect, 90 * 16, int(-self._percent * 360 * 16))

        # ── text ─────────────────────────────────────────────────────
        time_font = QFont()
        time_font.setPointSize(max(12, int(side / 6)))
        time_font.setBold(True)
        p.setFont(time_font)
        p.setPen(QColor(TEXT_COLOR))
        p.drawText(rect, Qt.AlignmentFlag.AlignCenter, self._time_text)

        label_font = QFont()
        label_font.setPointSize(max(8, int(side / 20)))
        p.setFont(label_font)
        p.setPen(QColor(MUTED_COLOR))
        upper = QRectF(rect.left(), rect.top() + side * 0.22, side, side * 0.15)
        p.drawText(upper, Qt.AlignmentFlag.AlignCenter, self._state_label)
        lower = QRectF(rect.left(), rect.top() + side * 0.63, side, side * 0.15)
        p.drawText(lower, Qt.AlignmentFlag.AlignCenter, self._caption)

        p.end()
