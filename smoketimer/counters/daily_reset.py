"""Daily counter reset policy.

Counters start over once per calendar day, but not before the reset hour,
so a late night still counts towards the day it started on.  Uses local
wall-clock time, so the exact moment moves with the timezone.
"""

from __future__ import annotations

from datetime import datetime

DEFAULT_RESET_HOUR = 9


def should_reset(
    last_reset: datetime,
    now: datetime,
    reset_hour: int = DEFAULT_RESET_HOUR,
) -> bool:
    """True when *now* is on a different day than *last_reset* and at or
    past *reset_hour*."""
    last_day = (last_reset.year, last_reset.timetuple().tm_yday)
    today = (now.year, now.timetuple().tm_yday)
    return last_day != today and now.hour >= reset_hour
