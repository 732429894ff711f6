# tests/conftest.py
from __future__ import annotations

"""
Pytest configuration for the Kronos planetary hours suite.

- Registers Hypothesis profiles for local dev and CI.
- Freezes the process TZ to UTC (we always pass IANA zones explicitly).
- Resets the process-wide config and the API hours cache around each test.
- Provides a Flask test client.
"""

import os
import pytest
from hypothesis import settings, HealthCheck


# ──────────────────────────────────────────────────────────────────────────────
# Hypothesis profiles
# ──────────────────────────────────────────────────────────────────────────────
settings.register_profile(
    "dev",
    settings(
        deadline=None,
        max_examples=60,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)
settings.register_profile(
    "ci",
    settings(
        deadline=None,
        max_examples=200,
        suppress_health_check=[HealthCheck.too_slow],
    ),
)

_profile = (
    "ci"
    if (os.getenv("CI") or os.getenv("GITHUB_ACTIONS"))
    else os.getenv("HYPOTHESIS_PROFILE", "dev")
)
settings.load_profile(_profile)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: mark test as slow")


def pytest_report_header(config: pytest.Config) -> str:
    return f"Hypothesis profile: '{_profile}'"


# ──────────────────────────────────────────────────────────────────────────────
# Global fixtures
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def freeze_tz_env():
    prev = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    try:
        yield
    finally:
        if prev is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = prev


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Each test sees config built from the repo defaults plus its own env."""
    from kronos.utils.config import get_config
    from kronos.api import routes

    for name in ("KRONOS_CONFIG", "KRONOS_DEFAULT_LAT", "KRONOS_DEFAULT_LON", "KRONOS_DEFAULT_TZ", "KRONOS_CACHE_CAPACITY"):
        monkeypatch.delenv(name, raising=False)
    get_config.cache_clear()
    routes.reset_cache()
    yield
    get_config.cache_clear()
    routes.reset_cache()


@pytest.fixture
def client():
    from kronos.main import create_app
    app = create_app()
    app.testing = True
    return app.test_client()


@pytest.fixture(scope="session")
def ensure_tzdata():
    from zoneinfo import ZoneInfo
    for name in ("UTC", "America/Denver", "Europe/London", "Australia/Sydney"):
        ZoneInfo(name)
