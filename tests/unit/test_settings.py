"""Test that tunables are read from Settings and not duplicated."""

import pytest

from nestmap.app.config import Settings, get_settings
from nestmap.app.export.calendar import DEFAULT_DURATION_MIN, DEFAULT_PRODID
from nestmap.app.scheduling.scheduler import SchedulePolicy


def test_settings_accessible() -> None:
    """Test that Settings can be imported and accessed."""
    settings = get_settings()
    assert settings is not None
    assert get_settings() is settings


def test_policy_defaults_match_settings() -> None:
    """Test that scheduling defaults agree with the settings defaults."""
    settings = Settings()
    assert SchedulePolicy.from_settings(settings) == SchedulePolicy()


def test_calendar_defaults_match_settings() -> None:
    """Test that calendar defaults agree with the settings defaults."""
    settings = Settings()
    assert settings.calendar_event_duration_min == DEFAULT_DURATION_MIN
    assert settings.calendar_prodid == DEFAULT_PRODID


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test environment overrides."""
    monkeypatch.setenv("TRAVEL_CONFLICT_THRESHOLD_MIN", "45")
    monkeypatch.setenv("TIE_BREAK_BY_ORDER", "true")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")

    settings = Settings()

    assert settings.travel_conflict_threshold_min == 45
    assert settings.tie_break_by_order is True
    assert settings.redis_url == "redis://cache:6379/0"


def test_trip_store_url_from_test_environment() -> None:
    """Test that the suite never points at a real trip store."""
    assert Settings().trip_store_url == "http://trip-store.test"
