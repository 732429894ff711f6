# kronos/core/validators.py
from __future__ import annotations

import math
from datetime import datetime, date, tzinfo
from typing import Any, Dict, List, Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# ───────────────────────── errors ─────────────────────────

class ValidationError(ValueError):
    """Caller-input error with structured details (has .errors())."""
    def __init__(self, details: Union[str, Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(details, str):
            self._details = [{"loc": [], "msg": details, "type": "value_error"}]
            super().__init__(details)
        elif isinstance(details, dict):
            self._details = [details]
            super().__init__(details.get("msg", "validation_error"))
        elif isinstance(details, list):
            self._details = details
            super().__init__(self._details[0]["msg"] if self._details else "validation_error")
        else:
            self._details = [{"loc": [], "msg": "validation_error", "type": "value_error"}]
            super().__init__("validation_error")

    def errors(self) -> List[Dict[str, Any]]:
        return list(self._details)

    @property
    def fields(self) -> List[str]:
        """Flat list of the offending field names."""
        out: List[str] = []
        for d in self._details:
            out.extend(str(x) for x in d.get("loc", []))
        return out


# ───────────────────────── helpers ─────────────────────────

def _err(loc: List[str] | str, msg: str, typ: str = "value_error") -> Dict[str, Any]:
    return {"loc": [loc] if isinstance(loc, str) else loc, "msg": msg, "type": typ}

def _as_float(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    try:
        if v is None:
            return None
        x = float(v)
        if not math.isfinite(x):
            return None
        return x
    except (TypeError, ValueError):
        return None

def is_finite_number(v: Any) -> bool:
    return _as_float(v) is not None


# ───────────────────────── atomic parsers ─────────────────────────

def parse_date(value: Any, field: str = "date") -> date:
    """Accept date, datetime (its calendar date) or 'YYYY-MM-DD'."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            pass
    raise ValidationError(_err(field, f"{field} must be 'YYYY-MM-DD' (got {value!r})", "value_error.date"))

def parse_latitude(value: Any, field: str = "latitude") -> float:
    f = _as_float(value)
    if f is None:
        raise ValidationError(_err(field, f"{field} must be a finite number", "type_error.float"))
    if not -90.0 <= f <= 90.0:
        raise ValidationError(_err(field, f"{field} must be between -90 and 90", "value_error.range"))
    return f

def parse_longitude(value: Any, field: str = "longitude") -> float:
    f = _as_float(value)
    if f is None:
        raise ValidationError(_err(field, f"{field} must be a finite number", "type_error.float"))
    if not -180.0 <= f <= 180.0:
        raise ValidationError(_err(field, f"{field} must be between -180 and 180", "value_error.range"))
    return f

def parse_latlon(lat: Any, lon: Any) -> Tuple[float, float]:
    return parse_latitude(lat), parse_longitude(lon)

def parse_tz(value: Union[str, tzinfo], field: str = "timezone") -> tzinfo:
    """Resolve an IANA zone name; tzinfo instances pass through."""
    if isinstance(value, tzinfo):
        return value
    name = str(value or "").strip()
    if not name:
        raise ValidationError(_err(field, f"{field} must be a valid IANA zone like 'America/Denver'", "value_error.timezone"))
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(_err(field, f"unknown IANA time zone '{name}'", "value_error.timezone"))

def parse_instant(value: Any, field: str = "now") -> datetime:
    """Aware datetime or ISO-8601 string with an offset. Naive values are rejected."""
    if isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(s)
        except ValueError:
            raise ValidationError(_err(field, f"{field} must be an ISO-8601 instant", "value_error.datetime"))
    if not isinstance(value, datetime):
        raise ValidationError(_err(field, f"{field} must be a datetime", "type_error.datetime"))
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError(_err(field, f"{field} must be timezone-aware", "value_error.naive_datetime"))
    return value

def parse_count(value: Any, field: str, lo: int, hi: int) -> int:
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(_err(field, f"{field} must be an integer", "type_error.integer"))
    if not lo <= n <= hi:
        raise ValidationError(_err(field, f"{field} must be between {lo} and {hi}", "value_error.range"))
    return n
