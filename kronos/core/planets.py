# kronos/core/planets.py
# -*- coding: utf-8 -*-
"""
Classical planets & rotation tables

Purpose
-------
Single source of truth for:
- the seven classical planets (stable lowercase ids used as lookup keys)
- the Chaldean order used to rotate hour rulers
- the weekday → day-ruler table (0 = Sunday)

Notes
-----
- DAY_RULERS is a literal table. It is NOT derived from CHALDEAN_ORDER by
  arithmetic; the historical weekday sequence only falls out of the 24-hour
  rotation, so both tables are written out in full.
- Colors, metals, incense and ritual text keyed by planet live with the
  consumers; only the display name and glyph are kept here.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple, Union

__all__ = [
    "Planet",
    "CHALDEAN_ORDER",
    "DAY_RULERS",
    "PLANET_SYMBOLS",
    "coerce_planet",
]


class Planet(str, Enum):
    SATURN = "saturn"
    JUPITER = "jupiter"
    MARS = "mars"
    SUN = "sun"
    VENUS = "venus"
    MERCURY = "mercury"
    MOON = "moon"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def symbol(self) -> str:
        return PLANET_SYMBOLS[self]

    def __str__(self) -> str:
        return self.value


# ── rotation tables ──────────────────────────────────────────────────────────
# Slowest to fastest. Reordering breaks every hour assignment downstream.
CHALDEAN_ORDER: Tuple[Planet, ...] = (
    Planet.SATURN,
    Planet.JUPITER,
    Planet.MARS,
    Planet.SUN,
    Planet.VENUS,
    Planet.MERCURY,
    Planet.MOON,
)

# Index 0 = Sunday … 6 = Saturday
DAY_RULERS: Tuple[Planet, ...] = (
    Planet.SUN,      # Sunday
    Planet.MOON,     # Monday
    Planet.MARS,     # Tuesday
    Planet.MERCURY,  # Wednesday
    Planet.JUPITER,  # Thursday
    Planet.VENUS,    # Friday
    Planet.SATURN,   # Saturday
)

PLANET_SYMBOLS: Dict[Planet, str] = {
    Planet.SATURN: "♄",
    Planet.JUPITER: "♃",
    Planet.MARS: "♂",
    Planet.SUN: "☉",
    Planet.VENUS: "♀",
    Planet.MERCURY: "☿",
    Planet.MOON: "☽",
}


def coerce_planet(value: Union[Planet, str]) -> Planet:
    """Accept a Planet or a case-insensitive id/name ('sun', 'Sun'). Raises ValueError."""
    if isinstance(value, Planet):
        return value
    key = str(value or "").strip().lower()
    try:
        return Planet(key)
    except ValueError:
        raise ValueError(f"Unknown planet '{value}'") from None
