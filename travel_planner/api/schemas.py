"""API request/response models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    storage: str = Field(default="sqlite")


class PoiCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200, description="POI name, unique per user")
    description: Optional[str] = Field(default=None, max_length=2000)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class ExternalPoiSaveRequest(BaseModel):
    place_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=200)
    categories: list[str] = Field(default_factory=list)
    lat: Optional[float] = None
    lon: Optional[float] = None
    address: Optional[str] = None
    description: Optional[str] = None
    is_synthetic: bool = False


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    preferred_units: Optional[str] = Field(default=None, pattern=r"^(metric|imperial)$")


__all__ = [
    "ExternalPoiSaveRequest",
    "HealthResponse",
    "PoiCreateRequest",
    "ProfileUpdateRequest",
]
