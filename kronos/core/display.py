# kronos/core/display.py
"""Small formatting helpers shared by hour lists and reminder text."""
from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

__all__ = ["format_hour_time", "format_duration"]


def format_hour_time(dt: datetime, tz: Optional[tzinfo] = None) -> str:
    """12-hour clock label, e.g. '3:45 PM', '12:05 AM'. Converts to `tz` first if given."""
    if tz is not None:
        dt = dt.astimezone(tz)
    hours = dt.hour % 12 or 12
    ampm = "PM" if dt.hour >= 12 else "AM"
    return f"{hours}:{dt.minute:02d} {ampm}"


def format_duration(minutes: int) -> str:
    """'1h 5m' or '45m'."""
    minutes = int(minutes)
    if minutes < 0:
        raise ValueError("minutes must be >= 0")
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"
