# kronos/utils/config.py
from __future__ import annotations

import copy
import logging
import os
from functools import lru_cache
from typing import Any, Dict

import yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/defaults.yaml"

_DEFAULTS: Dict[str, Any] = {
    # Substituted when the caller has no location (permission denied, no fix).
    "default_location": {"latitude": 0.0, "longitude": 0.0},
    "default_timezone": "UTC",
    "cache": {"capacity": 256},
}


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.default_timezone and cfg['default_timezone'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in (over or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def _env_float(name: str, current: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return current
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not a number", name, raw)
        return current

def load_config(path: str | None = None):
    """
    Load YAML config from `path` over the built-in defaults.
    A missing file is not an error: defaults apply.
    Optional env overrides:
      - KRONOS_DEFAULT_LAT / KRONOS_DEFAULT_LON
      - KRONOS_DEFAULT_TZ
      - KRONOS_CACHE_CAPACITY
    Returns an AttrDict for convenient access.
    """
    path = path or os.getenv("KRONOS_CONFIG", DEFAULT_CONFIG_PATH)
    data: Dict[str, Any] = copy.deepcopy(_DEFAULTS)
    if path and os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            data = _merge(data, yaml.safe_load(f) or {})
    else:
        log.debug("Config file %s not found; using defaults", path)

    loc = data["default_location"]
    loc["latitude"] = _env_float("KRONOS_DEFAULT_LAT", float(loc.get("latitude", 0.0)))
    loc["longitude"] = _env_float("KRONOS_DEFAULT_LON", float(loc.get("longitude", 0.0)))

    tz = os.getenv("KRONOS_DEFAULT_TZ")
    if tz:
        data["default_timezone"] = tz.strip()

    cap = os.getenv("KRONOS_CACHE_CAPACITY")
    if cap:
        try:
            data["cache"]["capacity"] = int(cap)
        except ValueError:
            log.warning("Ignoring KRONOS_CACHE_CAPACITY=%r: not an integer", cap)

    return _to_attr(data)

@lru_cache(maxsize=1)
def get_config():
    """Process-wide config, read once. Tests call get_config.cache_clear()."""
    return load_config()
