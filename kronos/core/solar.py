# kronos/core/solar.py
# -----------------------------------------------------------------------------
# Approximate sunrise / sunset model
#
# Public API:
#   calculate_solar_events(latitude, longitude, day, tz=None) -> SolarEvents
#
# Model (engineering approximation, NOT ephemeris-grade):
#   • variation = 3h · (|lat| / 90) · sin(2π · day_of_year / 365) · hemisphere
#   • sunrise   = 12 − 6 − variation / 2   (local wall-clock hours)
#   • sunset    = 12 + 6 + variation / 2
#   • fractional hours → whole hours + minutes rounded half-up, seconds zero
#   • longitude does not enter the model
#
# Guarantees:
#   • Pure function of inputs; no I/O.
#   • Never raises for computation faults: a non-finite or failing model
#     returns 06:00 / 18:00 local on the given date with fallback=True.
#   • Unknown zone names and finite out-of-range coordinates are caller
#     errors (ValidationError on "timezone" / "latitude" / "longitude").
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Dict, Optional, Tuple, Union

from kronos.core.validators import (
    is_finite_number,
    parse_date,
    parse_latitude,
    parse_longitude,
    parse_tz,
)
from kronos.utils.config import get_config

__all__ = [
    "SolarEvents",
    "calculate_solar_events",
    "solar_hours",
    "FALLBACK_SUNRISE_HOUR",
    "FALLBACK_SUNSET_HOUR",
]

log = logging.getLogger(__name__)

FALLBACK_SUNRISE_HOUR = 6
FALLBACK_SUNSET_HOUR = 18

_BASE_HOURS = 12.0
_HALF_DAY_HOURS = 6.0
_MAX_VARIATION_HOURS = 3.0
_YEAR_DAYS = 365.0

# ───────────────────────────── Dataclass ─────────────────────────────

@dataclass(frozen=True)
class SolarEvents:
    sunrise: datetime
    sunset: datetime
    fallback: bool = False     # True when the 06:00/18:00 substitute was used

    @property
    def day_length(self) -> timedelta:
        return self.sunset.astimezone(timezone.utc) - self.sunrise.astimezone(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sunrise": self.sunrise.isoformat(),
            "sunset": self.sunset.isoformat(),
            "fallback": self.fallback,
        }

# ───────────────────────────── Model ─────────────────────────────

def _day_of_year(day: date) -> int:
    return day.timetuple().tm_yday

def solar_hours(latitude: float, day: date) -> Tuple[float, float]:
    """Local (sunrise_hour, sunset_hour) as fractional hours. May be non-finite."""
    latitude_adjustment = abs(latitude) / 90.0
    seasonal_factor = math.sin(2.0 * math.pi * _day_of_year(day) / _YEAR_DAYS)
    hemisphere = 1.0 if latitude >= 0 else -1.0
    variation = _MAX_VARIATION_HOURS * latitude_adjustment * seasonal_factor * hemisphere

    sunrise_hour = _BASE_HOURS - _HALF_DAY_HOURS - variation / 2.0
    sunset_hour = _BASE_HOURS + _HALF_DAY_HOURS + variation / 2.0
    return sunrise_hour, sunset_hour

def _wall_time(day: date, hour: float, zone: tzinfo) -> datetime:
    """Fractional local hour → aware datetime on `day`. 60 rounded minutes roll over."""
    whole = math.floor(hour)
    minutes = math.floor((hour - whole) * 60.0 + 0.5)
    naive = datetime.combine(day, time()) + timedelta(hours=whole, minutes=minutes)
    return naive.replace(tzinfo=zone)

def _fallback(day: date, zone: tzinfo) -> SolarEvents:
    return SolarEvents(
        sunrise=datetime.combine(day, time(FALLBACK_SUNRISE_HOUR), tzinfo=zone),
        sunset=datetime.combine(day, time(FALLBACK_SUNSET_HOUR), tzinfo=zone),
        fallback=True,
    )

# ───────────────────────────── Public API ─────────────────────────────

def calculate_solar_events(
    latitude: float,
    longitude: float,
    day: Union[date, datetime, str],
    tz: Optional[Union[str, tzinfo]] = None,
) -> SolarEvents:
    """Sunrise and sunset for `day` in zone `tz` (config default when None)."""
    d = parse_date(day)
    zone = parse_tz(tz if tz is not None else get_config().default_timezone)
    # finite coordinates must be in range; non-finite ones reach the fallback below
    if is_finite_number(latitude):
        latitude = parse_latitude(latitude)
    if is_finite_number(longitude):
        longitude = parse_longitude(longitude)

    try:
        sunrise_hour, sunset_hour = solar_hours(latitude, d)
        if not (math.isfinite(sunrise_hour) and math.isfinite(sunset_hour)):
            raise ValueError(f"non-finite solar hours ({sunrise_hour}, {sunset_hour})")
        sunrise = _wall_time(d, sunrise_hour, zone)
        sunset = _wall_time(d, sunset_hour, zone)
    except (ArithmeticError, ValueError, TypeError) as e:
        log.warning(
            "Solar model failed for lat=%r lon=%r date=%s (%s); using %02d:00/%02d:00 fallback",
            latitude, longitude, d.isoformat(), e, FALLBACK_SUNRISE_HOUR, FALLBACK_SUNSET_HOUR,
        )
        return _fallback(d, zone)

    log.debug("Solar events lat=%s date=%s: %s / %s", latitude, d, sunrise, sunset)
    return SolarEvents(sunrise=sunrise, sunset=sunset)
