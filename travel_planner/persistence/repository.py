"""Store protocols and the default SQLite factory."""

from __future__ import annotations

import datetime as dt
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Protocol

from travel_planner.domain.models import (
    City,
    Country,
    Poi,
    Region,
    SearchHistoryEntry,
    Tag,
    Trip,
    TripStop,
    UserProfile,
)
from travel_planner.persistence.models import PoiRecord, ProfileRecord, SearchRecord, StopRecord, TripRecord
from travel_planner.persistence.sqlite_repository import SQLiteTravelRepository

_DEFAULT_DB_PATH = Path("data") / "travel_planner.sqlite3"


class GeographyStore(Protocol):
    def add_country(self, name: str) -> Country: ...

    def add_region(self, name: str, country_id: int) -> Region: ...

    def add_tag(self, name: str) -> Tag: ...

    def add_city(
        self,
        name: str,
        region_id: int,
        latitude: float,
        longitude: float,
        tags: Iterable[str] = (),
    ) -> City: ...

    def find_city_by_id(self, city_id: int) -> Optional[City]: ...

    def find_cities_by_name(self, name: str) -> list[City]: ...

    def find_city_by_name_and_region(self, name: str, region_name: str) -> Optional[City]: ...

    def find_cities_by_tags(self, tags: list[str]) -> list[City]: ...

    def search_cities_by_name(self, fragment: str) -> list[City]: ...

    def list_cities(self) -> list[City]: ...

    def list_cities_by_region_name(self, region_name: str) -> list[City]: ...

    def list_countries(self) -> list[Country]: ...

    def find_country_by_name(self, name: str) -> Optional[Country]: ...

    def list_regions(self) -> list[Region]: ...

    def list_regions_by_country_name(self, country_name: str) -> list[Region]: ...

    def find_regions_by_name(self, name: str) -> list[Region]: ...

    def find_region_by_name_and_country(self, name: str, country_name: str) -> Optional[Region]: ...

    def list_tags(self) -> list[Tag]: ...


class TripStore(Protocol):
    def create_trip(self, record: TripRecord) -> Trip: ...

    def update_trip(self, trip_id: int, record: TripRecord) -> Trip: ...

    def delete_trip(self, trip_id: int) -> None: ...

    def find_trip_by_name_and_owner(self, name: str, owner_id: int) -> Optional[Trip]: ...

    def list_trips_by_owner(self, owner_id: int) -> list[Trip]: ...

    def find_stop_by_name_and_trip(self, stop_name: str, trip_id: int) -> Optional[TripStop]: ...

    def find_stop(self, stop_name: str, trip_name: str, owner_id: int) -> Optional[TripStop]: ...

    def add_stop(self, record: StopRecord) -> TripStop: ...

    def update_stop(self, stop_id: int, stop_name: str, stop_date: dt.date, notes: Optional[str]) -> TripStop: ...

    def delete_stop(self, stop_id: int) -> None: ...

    def attach_poi(self, stop_id: int, poi_id: int) -> None: ...

    def detach_poi(self, stop_id: int, poi_id: int) -> None: ...


class SearchHistoryStore(Protocol):
    def append_search(self, record: SearchRecord) -> SearchHistoryEntry: ...

    def list_searches_by_user(self, user_id: int, limit: int = 100) -> list[SearchHistoryEntry]: ...

    def clear_searches_by_user(self, user_id: int) -> None: ...


class PoiStore(Protocol):
    def create_poi(self, record: PoiRecord) -> Poi: ...

    def find_poi_by_id(self, poi_id: int) -> Optional[Poi]: ...

    def find_poi_by_owner_and_name(self, owner_id: int, name: str) -> Optional[Poi]: ...

    def list_pois_by_owner(self, owner_id: int) -> list[Poi]: ...

    def delete_poi(self, poi_id: int) -> None: ...

    def delete_pois_by_owner(self, owner_id: int) -> None: ...


class ProfileStore(Protocol):
    def find_profile(self, user_id: int) -> Optional[UserProfile]: ...

    def save_profile(self, record: ProfileRecord) -> UserProfile: ...


def _db_path() -> Path:
    raw = os.getenv("TRAVEL_PLANNER_DB", "").strip()
    return Path(raw) if raw else _DEFAULT_DB_PATH


def get_travel_repository(db_path: str | Path | None = None) -> SQLiteTravelRepository:
    """One SQLite file backs every store."""
    return SQLiteTravelRepository(db_path if db_path is not None else _db_path())


__all__ = [
    "GeographyStore",
    "PoiStore",
    "ProfileStore",
    "SearchHistoryStore",
    "TripStore",
    "get_travel_repository",
]
