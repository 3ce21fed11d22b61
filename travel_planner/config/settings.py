"""Provider and storage settings resolved from the environment."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

_DEFAULT_DB_PATH = Path("data") / "travel_planner.sqlite3"


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip() or default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


class ProviderConfig(BaseModel):
    base_url: str
    api_key: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


class AppSettings(BaseModel):
    weather: ProviderConfig
    places: ProviderConfig
    geocoding: ProviderConfig
    db_path: Path = Field(default=_DEFAULT_DB_PATH)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


def load_settings() -> AppSettings:
    geoapify_base = _env_str("GEOAPIFY_BASE_URL", "https://api.geoapify.com")
    geoapify_key = _env_str("GEOAPIFY_API_KEY")
    return AppSettings(
        weather=ProviderConfig(
            base_url=_env_str("WEATHER_API_BASE_URL", "https://api.openweathermap.org/data/2.5"),
            api_key=_env_str("WEATHER_API_KEY"),
            timeout_seconds=_env_float("WEATHER_TIMEOUT_SECONDS", 10.0),
        ),
        places=ProviderConfig(
            base_url=geoapify_base,
            api_key=geoapify_key,
            timeout_seconds=_env_float("PLACES_TIMEOUT_SECONDS", 15.0),
        ),
        geocoding=ProviderConfig(
            base_url=geoapify_base,
            api_key=geoapify_key,
            timeout_seconds=_env_float("GEOCODING_TIMEOUT_SECONDS", 10.0),
        ),
        db_path=Path(_env_str("TRAVEL_PLANNER_DB", str(_DEFAULT_DB_PATH))),
        cors_origins=[item.strip() for item in _env_str("CORS_ORIGINS", "*").split(",") if item.strip()],
    )


__all__ = ["AppSettings", "ProviderConfig", "load_settings"]
