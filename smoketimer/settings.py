"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/SmokeTimer/settings.json

Usage::

    settings = load_settings()
    settings.daily_reset_hour = 8
    save_settings(settings)

``SMOKETIMER_LOG_LEVEL`` in the environment overrides ``log_level``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "SmokeTimer"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"

LOG_LEVEL_ENV = "SMOKETIMER_LOG_LEVEL"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    countdown_seconds: int = 75 * 60       # read once at startup

    # ── counters ──────────────────────────────────────────────────────
    daily_reset_hour: int = 9              # 0-23, local time

    # ── notifications ─────────────────────────────────────────────────
    notifications_enabled: bool = True

    # ── window ────────────────────────────────────────────────────────
    minimize_to_tray: bool = True
    window_x: int | None = None
    window_y: int | None = None
    window_width: int = 360
    window_height: int = 560

    # ── diagnostics ───────────────────────────────────────────────────
    log_level: str = "INFO"


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_optional_int(value) -> bool:
    return value is None or _is_int(value)


# Field name -> predicate the loaded value must satisfy.
_VALIDATORS = {
    "countdown_seconds":     lambda v: _is_int(v) and v > 0,
    "daily_reset_hour":      lambda v: _is_int(v) and 0 <= v <= 23,
    "notifications_enabled": lambda v: isinstance(v, bool),
    "minimize_to_tray":      lambda v: isinstance(v, bool),
    "window_x":              _is_optional_int,
    "window_y":              _is_optional_int,
    "window_width":          lambda v: _is_int(v) and v > 0,
    "window_height":         lambda v: _is_int(v) and v > 0,
    "log_level":             lambda v: isinstance(v, str),
}


def _sanitise(settings: Settings) -> Settings:
    """Reset every out-of-range or mistyped field to its default."""
    defaults = Settings()
    for name, valid in _VALIDATORS.items():
        value = getattr(settings, name)
        if not valid(value):
            default = getattr(defaults, name)
            logger.warning(
                "Invalid setting %s=%r, using default %r", name, value, default,
            )
            setattr(settings, name, default)
    return settings


def load_settings() -> Settings:
    """Load settings from disk, falling back to defaults."""
    settings = Settings()
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            settings = _sanitise(Settings(**filtered))
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        settings.log_level = env_level.upper()
    return settings


def save_settings(settings: Settings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )
