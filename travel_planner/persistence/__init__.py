"""Persistence layer: store protocols, write records and the SQLite backend."""

from travel_planner.persistence.models import PoiRecord, ProfileRecord, SearchRecord, StopRecord, TripRecord
from travel_planner.persistence.repository import (
    GeographyStore,
    PoiStore,
    ProfileStore,
    SearchHistoryStore,
    TripStore,
    get_travel_repository,
)
from travel_planner.persistence.sqlite_repository import SQLiteTravelRepository

__all__ = [
    "GeographyStore",
    "PoiRecord",
    "PoiStore",
    "ProfileRecord",
    "ProfileStore",
    "SQLiteTravelRepository",
    "SearchHistoryStore",
    "SearchRecord",
    "StopRecord",
    "TripRecord",
    "TripStore",
    "get_travel_repository",
]
