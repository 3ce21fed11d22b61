"""Persistence-layer write records.

Reads come back as domain models; writes go through these records so the
stores never receive half-built domain objects.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class TripRecord(BaseModel):
    owner_id: int
    name: str = Field(min_length=1, max_length=150)
    start_date: dt.date
    end_date: dt.date


class StopRecord(BaseModel):
    trip_id: int
    city_id: int
    stop_name: str
    stop_date: dt.date
    notes: Optional[str] = None


class PoiRecord(BaseModel):
    owner_id: int
    name: str = Field(min_length=1)
    external_id: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    raw: dict[str, Any] = Field(default_factory=dict)
    created_at: dt.datetime


class SearchRecord(BaseModel):
    user_id: int
    query: str
    city_id: Optional[int] = None
    searched_at: dt.datetime


class ProfileRecord(BaseModel):
    user_id: int
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    preferred_units: Optional[Literal["metric", "imperial"]] = None
    updated_at: dt.datetime


__all__ = ["PoiRecord", "ProfileRecord", "SearchRecord", "StopRecord", "TripRecord"]
