"""QSS stylesheet and display colours for SmokeTimer."""

from __future__ import annotations

from ..timer.snapshot import (
    Snapshot,
    STATUS_FINISHED,
    STATUS_OVERTIME,
    STATUS_PAUSED,
    STATUS_RUNNING,
)

# ── default palette ─────────────────────────────────────────────────────

DEFAULT_PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "accent2":      "#89B4FA",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "success":      "#A6E3A1",
    "warning":      "#F9E2AF",
    "danger":       "#F38BA8",
    "border":       "#313154",
}

# ── time display colour per status label ────────────────────────────────

STATUS_COLOR_KEYS: dict[str, str] = {
    STATUS_RUNNING:  "success",
    STATUS_FINISHED: "warning",
    STATUS_OVERTIME: "danger",
    STATUS_PAUSED:   "text_muted",
}


def color_for(snapshot: Snapshot, palette: dict[str, str] | None = None) -> str:
    p = palette or DEFAULT_PALETTE
    return p[STATUS_COLOR_KEYS.get(snapshot.status_label, "text")]


def build_stylesheet(palette: dict[str, str]) -> str:
    p = palette
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 16px;
    }}

    QLabel#timeLabel {{
        font-size: 48px;
        font-weight: 700;
        background: transparent;
    }}

    QLabel#statusLabel {{
        font-size: 15px;
        color: {p['text_muted']};
        background: transparent;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 10px 24px;
        font-size: 14px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 14px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#counterButton {{
        font-size: 16px;
        padding: 16px 20px;
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QStatusBar {{
        color: {p['text_muted']};
        font-size: 12px;
    }}
    """
