# kronos/core/dignity.py
"""
Essential dignity lookup (pure tables, no computation).

    get_planetary_dignity(planet, sign) -> 'rulership' | 'exaltation' | 'detriment' | 'fall' | None
    describe_dignity(planet, sign)      -> DignityResult(status, description) | None

Checks run in the order rulership → exaltation → detriment → fall, so a sign
listed twice for one planet (Mercury/Virgo, Mercury/Pisces) reports the first.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from kronos.core.planets import Planet, coerce_planet

__all__ = [
    "ZODIAC_SIGNS",
    "RULERSHIPS",
    "EXALTATIONS",
    "DETRIMENTS",
    "FALLS",
    "DignityResult",
    "get_planetary_dignity",
    "describe_dignity",
]

log = logging.getLogger(__name__)

ZODIAC_SIGNS: Tuple[str, ...] = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

RULERSHIPS: Dict[Planet, Tuple[str, ...]] = {
    Planet.SUN: ("Leo",),
    Planet.MOON: ("Cancer",),
    Planet.MERCURY: ("Gemini", "Virgo"),
    Planet.VENUS: ("Taurus", "Libra"),
    Planet.MARS: ("Aries", "Scorpio"),
    Planet.JUPITER: ("Sagittarius", "Pisces"),
    Planet.SATURN: ("Capricorn", "Aquarius"),
}

EXALTATIONS: Dict[Planet, str] = {
    Planet.SUN: "Aries",
    Planet.MOON: "Taurus",
    Planet.MERCURY: "Virgo",
    Planet.VENUS: "Pisces",
    Planet.MARS: "Capricorn",
    Planet.JUPITER: "Cancer",
    Planet.SATURN: "Libra",
}

# opposite of rulerships
DETRIMENTS: Dict[Planet, Tuple[str, ...]] = {
    Planet.SUN: ("Aquarius",),
    Planet.MOON: ("Capricorn",),
    Planet.MERCURY: ("Sagittarius", "Pisces"),
    Planet.VENUS: ("Aries", "Scorpio"),
    Planet.MARS: ("Libra", "Taurus"),
    Planet.JUPITER: ("Gemini", "Virgo"),
    Planet.SATURN: ("Cancer", "Leo"),
}

# opposite of exaltations
FALLS: Dict[Planet, str] = {
    Planet.SUN: "Libra",
    Planet.MOON: "Scorpio",
    Planet.MERCURY: "Pisces",
    Planet.VENUS: "Virgo",
    Planet.MARS: "Cancer",
    Planet.JUPITER: "Capricorn",
    Planet.SATURN: "Aries",
}

_STATUS_LABELS = {
    "rulership": "Domicile",
    "exaltation": "Exaltation",
    "detriment": "Detriment",
    "fall": "Fall",
}


@dataclass(frozen=True)
class DignityResult:
    status: str         # Domicile | Exaltation | Detriment | Fall | Peregrine
    description: str


def _canon_sign(sign: str) -> str:
    return str(sign or "").strip().capitalize()


def get_planetary_dignity(planet: Union[Planet, str], zodiac_sign: str) -> Optional[str]:
    try:
        p = coerce_planet(planet)
    except ValueError:
        log.debug("No dignity table for planet %r", planet)
        return None
    sign = _canon_sign(zodiac_sign)

    if sign in RULERSHIPS[p]:
        return "rulership"
    if EXALTATIONS[p] == sign:
        return "exaltation"
    if sign in DETRIMENTS[p]:
        return "detriment"
    if FALLS[p] == sign:
        return "fall"
    return None


def describe_dignity(planet: Union[Planet, str], zodiac_sign: str) -> Optional[DignityResult]:
    """Status label plus a one-line description for display cards. None for an unknown planet."""
    try:
        name = coerce_planet(planet).value
    except ValueError:
        log.debug("No dignity card for planet %r", planet)
        return None
    sign = _canon_sign(zodiac_sign)
    kind = get_planetary_dignity(planet, sign)

    if kind == "rulership":
        text = f"{name} is in its own sign of {sign}"
    elif kind == "exaltation":
        text = f"{name} is exalted in {sign}"
    elif kind == "detriment":
        text = f"{name} is in detriment in {sign}"
    elif kind == "fall":
        text = f"{name} is in fall in {sign}"
    else:
        return DignityResult(status="Peregrine", description=f"{name} is peregrine in {sign}")
    return DignityResult(status=_STATUS_LABELS[kind], description=text)
