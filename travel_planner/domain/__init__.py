"""Domain package exports."""

from travel_planner.domain.exceptions import BadRequestError, ConflictError, DomainError, NotFoundError
from travel_planner.domain.models import (
    City,
    CitySearchResult,
    Country,
    ErrorResponse,
    ExternalPoi,
    Poi,
    Region,
    SearchHistoryEntry,
    Tag,
    Trip,
    TripStop,
    WeatherSnapshot,
)
from travel_planner.domain.naming import derive_stop_name

__all__ = [
    "BadRequestError",
    "City",
    "CitySearchResult",
    "ConflictError",
    "Country",
    "DomainError",
    "ErrorResponse",
    "ExternalPoi",
    "NotFoundError",
    "Poi",
    "Region",
    "SearchHistoryEntry",
    "Tag",
    "Trip",
    "TripStop",
    "WeatherSnapshot",
    "derive_stop_name",
]
