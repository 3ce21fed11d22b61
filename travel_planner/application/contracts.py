"""Application request contracts for trips and stops."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class TripCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    start_date: dt.date
    end_date: dt.date


class TripUpdate(BaseModel):
    """Partial update; ``None`` leaves the field unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=150)
    start_date: dt.date | None = None
    end_date: dt.date | None = None


class StopCreate(BaseModel):
    city_name: str = Field(min_length=1, max_length=100)
    region_name: str | None = Field(default=None, max_length=100)
    stop_date: dt.date
    notes: str | None = Field(default=None, max_length=2000)


class StopUpdate(BaseModel):
    stop_date: dt.date | None = None
    notes: str | None = Field(default=None, max_length=2000)


__all__ = ["StopCreate", "StopUpdate", "TripCreate", "TripUpdate"]
