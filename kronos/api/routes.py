# kronos/api/routes.py
"""
Kronos: JSON API over the planetary hours engine
- Solar events (approximate sunrise/sunset model)
- Planetary hours for a date + current hour lookup
- Upcoming planetary days, day ruler
- Dignity lookup
- Ops: /api/health

Notes:
- All inputs are query-string parameters; instants are ISO-8601 with offset.
- Missing latitude/longitude falls back to the configured default location
  and is reported as location.defaulted = true.
- /api/planetary-hours/current looks at the previous date's sequence when
  `now` is before the local sunrise; the core lookup itself never does.
  After a DST fall-back night the previous sequence (sunrise + 24h) ends
  before today's sunrise. In that gap the previous date's last night hour is
  reported with extended = true and `next` is today's first hour.
- /api/day-ruler and /api/planetary-days read only tz/now; no location.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from flask import Blueprint, jsonify, request
from prometheus_client import Counter

from kronos.version import VERSION
from kronos.utils.config import get_config
from kronos.core.display import format_duration, format_hour_time
from kronos.core.dignity import ZODIAC_SIGNS, describe_dignity, get_planetary_dignity
from kronos.core.planets import coerce_planet
from kronos.core.planetary_hours import (
    PlanetaryHour,
    PlanetaryHoursCache,
    get_current_planetary_hour,
    get_day_ruling_planet,
    planetary_days,
    resolve_location,
    upcoming_planetary_hours,
    weekday_index,
)
from kronos.core.solar import calculate_solar_events
from kronos.core.validators import ValidationError, parse_date, parse_instant, parse_tz

log = logging.getLogger(__name__)
api = Blueprint("api", __name__)

MET_SOLAR_FALLBACKS = Counter("kronos_solar_fallback_total", "Solar model fallbacks to 06:00/18:00")
MET_DEFAULT_LOCATION = Counter("kronos_default_location_total", "Requests served with the default location")

_hours_cache: Optional[PlanetaryHoursCache] = None


# ───────────────────────── helpers ─────────────────────────
def _json_error(code: str, details: Any = None, http: int = 400):
    out: Dict[str, Any] = {"ok": False, "error": code}
    if details is not None:
        out["details"] = details
    return jsonify(out), http


def _cache() -> PlanetaryHoursCache:
    global _hours_cache
    if _hours_cache is None:
        _hours_cache = PlanetaryHoursCache()
    return _hours_cache


def reset_cache() -> None:
    global _hours_cache
    _hours_cache = None


def _arg(*names: str) -> Optional[str]:
    for n in names:
        v = request.args.get(n)
        if v is not None and v.strip() != "":
            return v.strip()
    return None


def _zone_now() -> Dict[str, Any]:
    """Zone and `now` from the query (server clock when `now` is absent)."""
    tz_name = _arg("tz", "timezone") or str(get_config().default_timezone)
    zone = parse_tz(tz_name, "tz")
    now_raw = _arg("now")
    now = parse_instant(now_raw) if now_raw else datetime.now(timezone.utc)
    return {"tz_name": tz_name, "zone": zone, "now": now}


def _context() -> Dict[str, Any]:
    """_zone_now() plus the resolved location, for endpoints that compute hours."""
    ctx = _zone_now()
    lat, lon, defaulted = resolve_location(_arg("latitude", "lat"), _arg("longitude", "lon"))
    if defaulted:
        MET_DEFAULT_LOCATION.inc()
    ctx.update(latitude=lat, longitude=lon, defaulted=defaulted)
    return ctx


def _hour_payload(hour: PlanetaryHour, ctx: Dict[str, Any]) -> Dict[str, Any]:
    out = hour.to_dict(now=ctx["now"])
    out["start_label"] = format_hour_time(hour.start)
    out["end_label"] = format_hour_time(hour.end)
    out["duration_label"] = format_duration(round(hour.duration.total_seconds() / 60.0))
    return out


def _location_payload(ctx: Dict[str, Any]) -> Dict[str, Any]:
    return {"latitude": ctx["latitude"], "longitude": ctx["longitude"], "defaulted": ctx["defaulted"]}


def _hours_for(day, ctx: Dict[str, Any]) -> List[PlanetaryHour]:
    return _cache().get(day, ctx["latitude"], ctx["longitude"], ctx["tz_name"])


# ───────────────────────── health ─────────────────────────
@api.get("/api/health")
def health():
    return jsonify({"ok": True, "status": "up", "version": VERSION}), 200


# ───────────────────────── endpoints ─────────────────────────
@api.get("/api/solar-events")
def solar_events():
    try:
        ctx = _context()
        day = parse_date(_arg("date") or ctx["now"].astimezone(ctx["zone"]).date())
        events = calculate_solar_events(ctx["latitude"], ctx["longitude"], day, ctx["zone"])
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    if events.fallback:
        MET_SOLAR_FALLBACKS.inc()
    return jsonify({
        "ok": True,
        "date": day.isoformat(),
        "timezone": ctx["tz_name"],
        "location": _location_payload(ctx),
        **events.to_dict(),
        "day_length_minutes": round(events.day_length.total_seconds() / 60.0, 3),
    }), 200


@api.get("/api/planetary-hours")
def planetary_hours():
    try:
        ctx = _context()
        day = parse_date(_arg("date") or ctx["now"].astimezone(ctx["zone"]).date())
        events = calculate_solar_events(ctx["latitude"], ctx["longitude"], day, ctx["zone"])
        hours = _hours_for(day, ctx)
        current = get_current_planetary_hour(hours, ctx["now"])
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    if events.fallback:
        MET_SOLAR_FALLBACKS.inc()
    ruler = get_day_ruling_planet(day)
    return jsonify({
        "ok": True,
        "date": day.isoformat(),
        "timezone": ctx["tz_name"],
        "location": _location_payload(ctx),
        "day_ruler": {"planet": ruler.value, "planet_name": ruler.display_name, "symbol": ruler.symbol},
        "solar": events.to_dict(),
        "now": ctx["now"].isoformat(),
        "current": current.index if current else None,
        "hours": [_hour_payload(h, ctx) for h in hours],
    }), 200


@api.get("/api/planetary-hours/current")
def current_planetary_hour():
    try:
        ctx = _context()
        now = ctx["now"]
        day = now.astimezone(ctx["zone"]).date()
        hours = _hours_for(day, ctx)
        extended = False
        u = now.astimezone(timezone.utc)
        if u < hours[0].start.astimezone(timezone.utc):
            # before local sunrise: still inside the previous date's night hours
            prev = _hours_for(day - timedelta(days=1), ctx)
            if u < prev[-1].end.astimezone(timezone.utc):
                day, hours = day - timedelta(days=1), prev
                current = get_current_planetary_hour(hours, now)
                upcoming = upcoming_planetary_hours(hours, now)
            else:
                # clocks fell back overnight: previous night ended before today's sunrise
                day, current, upcoming, extended = day - timedelta(days=1), prev[-1], hours[:1], True
        else:
            current = get_current_planetary_hour(hours, now)
            upcoming = upcoming_planetary_hours(hours, now)
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)

    return jsonify({
        "ok": True,
        "date": day.isoformat(),
        "timezone": ctx["tz_name"],
        "location": _location_payload(ctx),
        "now": now.isoformat(),
        "hour": _hour_payload(current, ctx) if current else None,
        "extended": extended,
        "next": _hour_payload(upcoming[0], ctx) if upcoming else None,
    }), 200


@api.get("/api/planetary-days")
def upcoming_days():
    try:
        ctx = _zone_now()
        start = _arg("start") or ctx["now"].astimezone(ctx["zone"]).date()
        days = planetary_days(start, _arg("days") or 7)
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)
    return jsonify({"ok": True, "days": [d.to_dict() for d in days]}), 200


@api.get("/api/day-ruler")
def day_ruler():
    try:
        ctx = _zone_now()
        day = parse_date(_arg("date") or ctx["now"].astimezone(ctx["zone"]).date())
    except ValidationError as e:
        return _json_error("validation_error", e.errors(), 400)
    ruler = get_day_ruling_planet(day)
    return jsonify({
        "ok": True,
        "date": day.isoformat(),
        "weekday_index": weekday_index(day),
        "planet": ruler.value,
        "planet_name": ruler.display_name,
        "symbol": ruler.symbol,
    }), 200


@api.get("/api/dignity")
def dignity():
    planet_raw = _arg("planet")
    sign_raw = _arg("sign")
    errs: List[Dict[str, Any]] = []
    try:
        planet = coerce_planet(planet_raw or "")
    except ValueError as e:
        errs.append({"loc": ["planet"], "msg": str(e), "type": "value_error.planet"})
    if (sign_raw or "").capitalize() not in ZODIAC_SIGNS:
        errs.append({"loc": ["sign"], "msg": f"unknown zodiac sign {sign_raw!r}", "type": "value_error.sign"})
    if errs:
        return _json_error("validation_error", errs, 400)

    result = describe_dignity(planet, sign_raw)
    return jsonify({
        "ok": True,
        "planet": planet.value,
        "sign": sign_raw.capitalize(),
        "dignity": get_planetary_dignity(planet, sign_raw),
        "status": result.status,
        "description": result.description,
    }), 200
