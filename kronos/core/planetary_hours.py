# kronos/core/planetary_hours.py
# -*- coding: utf-8 -*-
"""
Planetary hours: 12 unequal day hours + 12 unequal night hours per solar day.

Public API:
    get_ruling_planet_for_weekday(index) -> Planet
    get_day_ruling_planet(day) -> Planet
    resolve_location(latitude, longitude) -> (lat, lon, defaulted)
    partition_hours(day, events) -> list[PlanetaryHour]
    calculate_planetary_hours(day, latitude=None, longitude=None, tz=None) -> list[PlanetaryHour]
    get_current_planetary_hour(hours, now=None, clock=None) -> PlanetaryHour | None
    upcoming_planetary_hours(hours, now) -> list[PlanetaryHour]
    planetary_days(start, count=7) -> list[PlanetaryDay]
    PlanetaryHoursCache

Rules:
- Hour i (0-based) is ruled by CHALDEAN_ORDER[(index(day_ruler) + i) % 7], so the
  first hour after sunrise always belongs to the ruler of the day.
- Day hours split sunrise→sunset into twelve; night hours split
  sunset→(sunrise + 24h) into twelve. The next sunrise is NOT recomputed for
  the following date; the error of that shortcut grows at high latitudes near
  the solstices and is kept so results match the historical tables.
- Interval arithmetic runs on UTC instants; results are expressed in the
  requested zone. "Current" is always a query against a supplied instant.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from kronos.core.planets import CHALDEAN_ORDER, DAY_RULERS, Planet
from kronos.core.solar import SolarEvents, calculate_solar_events
from kronos.core.validators import (
    parse_count,
    parse_date,
    parse_instant,
    parse_latitude,
    parse_longitude,
)
from kronos.utils.cache import LRUCache
from kronos.utils.config import get_config

__all__ = [
    "HOURS_PER_HALF",
    "PlanetaryHour",
    "PlanetaryDay",
    "weekday_index",
    "get_ruling_planet_for_weekday",
    "get_day_ruling_planet",
    "resolve_location",
    "partition_hours",
    "calculate_planetary_hours",
    "get_current_planetary_hour",
    "upcoming_planetary_hours",
    "planetary_days",
    "PlanetaryHoursCache",
]

log = logging.getLogger(__name__)

HOURS_PER_HALF = 12
_NIGHT_SPAN = timedelta(hours=24)

DayLike = Union[date, datetime, str]


def _utc(dt: datetime) -> datetime:
    return dt.astimezone(timezone.utc)

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ───────────────────────────── Records ─────────────────────────────

@dataclass(frozen=True)
class PlanetaryHour:
    index: int              # 1..24, chronological from sunrise
    hour_number: int        # 1..12 within its half
    planet: Planet
    is_day: bool
    start: datetime
    end: datetime

    @property
    def period(self) -> str:
        return "day" if self.is_day else "night"

    @property
    def duration(self) -> timedelta:
        return _utc(self.end) - _utc(self.start)

    def contains(self, instant: datetime) -> bool:
        """start <= instant < end, compared as absolute instants."""
        u = _utc(parse_instant(instant))
        return _utc(self.start) <= u < _utc(self.end)

    def is_current(self, now: datetime) -> bool:
        return self.contains(now)

    def to_dict(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "index": self.index,
            "hour_number": self.hour_number,
            "planet": self.planet.value,
            "planet_name": self.planet.display_name,
            "symbol": self.planet.symbol,
            "period": self.period,
            "is_day": self.is_day,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "duration_seconds": round(self.duration.total_seconds(), 6),
        }
        if now is not None:
            out["is_current_hour"] = self.contains(now)
        return out


@dataclass(frozen=True)
class PlanetaryDay:
    date: date
    planet: Planet

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "planet": self.planet.value,
            "planet_name": self.planet.display_name,
            "symbol": self.planet.symbol,
        }


# ───────────────────────────── Day rulers ─────────────────────────────

def weekday_index(day: DayLike) -> int:
    """0 = Sunday … 6 = Saturday."""
    return (parse_date(day).weekday() + 1) % 7

def get_ruling_planet_for_weekday(index: int) -> Planet:
    return DAY_RULERS[int(index) % 7]

def get_day_ruling_planet(day: DayLike) -> Planet:
    return DAY_RULERS[weekday_index(day)]


# ───────────────────────────── Partition ─────────────────────────────

def resolve_location(
    latitude: Optional[float],
    longitude: Optional[float],
) -> Tuple[float, float, bool]:
    """
    Explicit coordinates are validated (ValidationError on bad values).
    A missing coordinate means no location fix: the configured default
    location (0°, 0° unless overridden) is used and the third item is True.
    """
    if latitude is None or longitude is None:
        loc = get_config().default_location
        log.info(
            "No location supplied (lat=%r, lon=%r); using default %s, %s",
            latitude, longitude, loc.latitude, loc.longitude,
        )
        return float(loc.latitude), float(loc.longitude), True
    return parse_latitude(latitude), parse_longitude(longitude), False

def partition_hours(day: DayLike, events: SolarEvents) -> List[PlanetaryHour]:
    """Split the span sunrise → sunrise + 24h into 24 ruled hours."""
    d = parse_date(day)
    zone = events.sunrise.tzinfo

    sunrise = _utc(events.sunrise)
    sunset = _utc(events.sunset)
    next_sunrise = sunrise + _NIGHT_SPAN
    day_length = sunset - sunrise
    night_length = next_sunrise - sunset

    start_index = CHALDEAN_ORDER.index(get_day_ruling_planet(d))
    hours: List[PlanetaryHour] = []
    for i in range(2 * HOURS_PER_HALF):
        planet = CHALDEAN_ORDER[(start_index + i) % len(CHALDEAN_ORDER)]
        if i < HOURS_PER_HALF:
            # length * k / 12 keeps hour 12 ending exactly at sunset
            start = sunrise + day_length * i / HOURS_PER_HALF
            end = sunrise + day_length * (i + 1) / HOURS_PER_HALF
            number = i + 1
        else:
            j = i - HOURS_PER_HALF
            start = sunset + night_length * j / HOURS_PER_HALF
            end = sunset + night_length * (j + 1) / HOURS_PER_HALF
            number = j + 1
        hours.append(PlanetaryHour(
            index=i + 1,
            hour_number=number,
            planet=planet,
            is_day=i < HOURS_PER_HALF,
            start=start.astimezone(zone),
            end=end.astimezone(zone),
        ))
    return hours

def calculate_planetary_hours(
    day: DayLike,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    tz: Optional[Union[str, tzinfo]] = None,
) -> List[PlanetaryHour]:
    """The 24 planetary hours of `day` at (latitude, longitude) in zone `tz`."""
    d = parse_date(day)
    lat, lon, _defaulted = resolve_location(latitude, longitude)
    events = calculate_solar_events(lat, lon, d, tz)
    return partition_hours(d, events)


# ───────────────────────────── Queries ─────────────────────────────

def get_current_planetary_hour(
    hours: Sequence[PlanetaryHour],
    now: Optional[datetime] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Optional[PlanetaryHour]:
    """
    The hour with start <= now < end, or None when `now` is outside the
    sequence. Adjacent days are never searched.
    """
    if now is None:
        now = (clock or _utc_now)()
    instant = parse_instant(now)
    for hour in hours:
        if hour.contains(instant):
            return hour
    return None

def upcoming_planetary_hours(hours: Sequence[PlanetaryHour], now: datetime) -> List[PlanetaryHour]:
    """Hours that have not started yet at `now` (reminders skip past hours)."""
    u = _utc(parse_instant(now))
    return [h for h in hours if _utc(h.start) >= u]

def planetary_days(start: DayLike, count: int = 7) -> List[PlanetaryDay]:
    d0 = parse_date(start, "start")
    n = parse_count(count, "days", 1, 366)
    return [
        PlanetaryDay(date=d, planet=get_day_ruling_planet(d))
        for d in (d0 + timedelta(days=k) for k in range(n))
    ]


# ───────────────────────────── Memoization ─────────────────────────────

class PlanetaryHoursCache:
    """
    Memoizes calculate_planetary_hours by (date, latitude, longitude, zone).
    Records are immutable; each call hands back a new list.
    """

    def __init__(self, capacity: Optional[int] = None):
        self._lru = LRUCache(int(capacity or get_config().cache.capacity))

    def get(
        self,
        day: DayLike,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        tz: Optional[Union[str, tzinfo]] = None,
    ) -> List[PlanetaryHour]:
        d = parse_date(day)
        lat, lon, _ = resolve_location(latitude, longitude)
        zone_key = str(tz) if tz is not None else str(get_config().default_timezone)
        key = (d.isoformat(), lat, lon, zone_key)
        hours = self._lru.get_or_compute(
            key, lambda: tuple(calculate_planetary_hours(d, lat, lon, tz))
        )
        return list(hours)

    @property
    def stats(self) -> Dict[str, int]:
        return {"size": len(self._lru), "hits": self._lru.hits, "misses": self._lru.misses}

    def clear(self) -> None:
        self._lru.clear()
