"""QSS stylesheet for the Habito window."""

from __future__ import annotations

PALETTE: dict[str, str] = {
    "bg":           "#1E1E2E",
    "card":         "#26263A",
    "accent":       "#F38BA8",
    "accent_hover": "#F5A3BA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#EBA0AC",
    "border":       "#34344E",
}


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    QFrame#card {{
        background-color: {p['card']};
        border: 1px solid {p['border']};
        border-radius: 16px;
    }}

    QLabel#panelTitle {{
        background: transparent;
        font-size: 20px;
        font-weight: 700;
    }}

    QLabel#panelSubtitle {{
        background: transparent;
        color: {p['text_muted']};
        font-size: 13px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        border-radius: 10px;
        padding: 10px 24px;
        font-weight: 600;
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 16px;
        padding: 12px 36px;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent_hover']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        border: 1px solid {p['border']};
    }}

    QPushButton#secondaryButton:hover {{
        color: {p['text']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
    }}

    /* ── tabs ────────────────────────────────────── */
    QTabWidget::pane {{
        border: none;
    }}

    QTabBar::tab {{
        background-color: transparent;
        color: {p['text_muted']};
        padding: 10px 20px;
        border: none;
        border-bottom: 2px solid transparent;
        font-weight: 600;
    }}

    QTabBar::tab:selected {{
        color: {p['accent']};
        border-bottom-color: {p['accent']};
    }}

    QStatusBar {{
        color: {p['text_muted']};
        font-size: 12px;
    }}
    """
