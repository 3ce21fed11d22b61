"""Provider protocols and I/O schemas."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from travel_planner.domain.models import CitySearchResult, ExternalPoi, WeatherSnapshot
from travel_planner.shared.exceptions import ExternalServiceUnavailable


class Coordinates(BaseModel):
    latitude: float
    longitude: float
    label: str = Field(default="", description="Human-readable place name, used for logging and synthetic data")


class PlacesQuery(BaseModel):
    center: Coordinates
    categories: list[str] = Field(default_factory=list)
    radius_meters: int = Field(default=10000, gt=0)
    limit: int = Field(default=50, gt=0)


class GeocodingQuery(BaseModel):
    text: str = Field(min_length=1)
    limit: int = Field(default=10, gt=0)


@runtime_checkable
class WeatherProvider(Protocol):
    def current_weather(self, location: Coordinates) -> WeatherSnapshot: ...


@runtime_checkable
class PlacesProvider(Protocol):
    def search_places(self, query: PlacesQuery) -> list[ExternalPoi]: ...


@runtime_checkable
class GeocodingProvider(Protocol):
    def search_cities(self, query: GeocodingQuery) -> list[CitySearchResult]: ...


__all__ = [
    "Coordinates",
    "ExternalServiceUnavailable",
    "GeocodingProvider",
    "GeocodingQuery",
    "PlacesProvider",
    "PlacesQuery",
    "WeatherProvider",
]
