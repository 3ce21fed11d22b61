"""Environment-driven settings tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from travel_planner.config.settings import ProviderConfig, load_settings


def test_defaults(monkeypatch):
    for name in ("WEATHER_TIMEOUT_SECONDS", "PLACES_TIMEOUT_SECONDS", "GEOCODING_TIMEOUT_SECONDS",
                 "TRAVEL_PLANNER_DB", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.weather.base_url == "https://api.openweathermap.org/data/2.5"
    assert settings.weather.timeout_seconds == 10.0
    assert settings.places.timeout_seconds == 15.0
    assert settings.geocoding.timeout_seconds == 10.0
    assert settings.places.base_url == "https://api.geoapify.com"
    assert settings.weather.api_key == ""
    assert settings.db_path == Path("data") / "travel_planner.sqlite3"
    assert settings.cors_origins == ["*"]


def test_overrides_and_invalid_values(monkeypatch):
    monkeypatch.setenv("GEOAPIFY_API_KEY", " geo-key ")
    monkeypatch.setenv("PLACES_TIMEOUT_SECONDS", "3.5")
    monkeypatch.setenv("WEATHER_TIMEOUT_SECONDS", "-1")
    monkeypatch.setenv("GEOCODING_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    settings = load_settings()
    assert settings.places.api_key == "geo-key"
    assert settings.geocoding.api_key == "geo-key"
    assert settings.places.timeout_seconds == 3.5
    assert settings.weather.timeout_seconds == 10.0
    assert settings.geocoding.timeout_seconds == 10.0
    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_provider_config_url_joining_and_validation():
    config = ProviderConfig(base_url="https://api.geoapify.com/", timeout_seconds=1)
    assert config.url("/v2/places") == "https://api.geoapify.com/v2/places"
    with pytest.raises(ValidationError):
        ProviderConfig(base_url="https://x.test", timeout_seconds=0)
