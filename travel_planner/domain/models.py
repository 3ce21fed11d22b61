"""Pydantic domain models."""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class Country(BaseModel):
    id: int
    name: str


class Region(BaseModel):
    id: int
    name: str
    country_id: int
    country_name: str = ""


class Tag(BaseModel):
    id: int
    name: str


class City(BaseModel):
    id: int
    name: str
    latitude: float
    longitude: float
    region_id: int
    region_name: str = ""
    country_name: str = ""
    tags: list[str] = Field(default_factory=list)


class TripStop(BaseModel):
    id: int
    trip_id: int
    city_id: int
    city_name: str = ""
    region_name: str = ""
    stop_name: str
    stop_date: dt.date
    notes: Optional[str] = None
    poi_ids: list[int] = Field(default_factory=list)


class Trip(BaseModel):
    id: int
    owner_id: int
    name: str
    start_date: dt.date
    end_date: dt.date
    stops: list[TripStop] = Field(default_factory=list)

    def contains(self, day: dt.date) -> bool:
        return self.start_date <= day <= self.end_date


class Poi(BaseModel):
    id: int
    owner_id: int
    name: str
    external_id: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    raw: dict[str, Any] = Field(default_factory=dict)
    created_at: dt.datetime


class ExternalPoi(BaseModel):
    place_id: str
    name: str
    categories: list[str] = Field(default_factory=list)
    lat: Optional[float] = None
    lon: Optional[float] = None
    address: Optional[str] = None
    description: Optional[str] = None
    is_synthetic: bool = False


class WeatherSnapshot(BaseModel):
    city_name: str
    temperature: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[int] = None
    description: str = ""
    icon: str = ""
    wind_speed: Optional[float] = None
    pressure: Optional[int] = None


class CitySearchResult(BaseModel):
    place_id: Optional[str] = None
    name: str
    region: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    local_city_id: Optional[int] = None
    tags: list[str] = Field(default_factory=list)
    source: Literal["local", "geoapify"]

    @model_validator(mode="after")
    def _external_results_carry_no_local_data(self) -> "CitySearchResult":
        if self.source == "geoapify":
            self.local_city_id = None
            self.tags = []
        return self


class SearchHistoryEntry(BaseModel):
    id: int
    user_id: int
    query: str
    city_id: Optional[int] = None
    city_name: Optional[str] = None
    searched_at: dt.datetime


class UserProfile(BaseModel):
    """Optional profile data for the caller named by ``X-User-Id``."""

    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    preferred_units: Optional[Literal["metric", "imperial"]] = None
    updated_at: Optional[dt.datetime] = None


class ErrorResponse(BaseModel):
    error: bool = True
    code: str = "UNKNOWN"
    message: str = ""
    details: list[str] = Field(default_factory=list)
