"""Weather, POI and geocoding lookups behind injected providers.

POI lookups never fail: the provider is tried once and synthetic data is
used when it errors or comes back empty. Weather and geocoding have no
fallback and surface ``ExternalServiceUnavailable``.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field

from travel_planner.adapters.places.synthetic import synthetic_pois
from travel_planner.application.city_resolver import CityResolver
from travel_planner.domain.models import City, CitySearchResult, ExternalPoi, WeatherSnapshot
from travel_planner.infrastructure.logging import StructuredLogger, get_logger
from travel_planner.security.redact import redact_sensitive
from travel_planner.tools.interfaces import (
    Coordinates,
    GeocodingProvider,
    GeocodingQuery,
    PlacesProvider,
    PlacesQuery,
    WeatherProvider,
)

_logger = logging.getLogger("travel-planner.aggregator")

POI_CATEGORIES = (
    "tourism.sights",
    "tourism.attraction",
    "entertainment.museum",
    "entertainment.culture",
    "catering.restaurant",
    "commercial.shopping_mall",
    "leisure.park",
    "building.historic",
)
POI_RADIUS_METERS = 10000
POI_LIMIT = 50
EXTERNAL_SEARCH_LIMIT = 10


class PoiLookup(BaseModel):
    pois: list[ExternalPoi] = Field(default_factory=list)
    source: Literal["provider", "synthetic"]
    fallback_reason: Optional[Literal["provider_failed", "provider_empty"]] = None


def _coordinates(city: City) -> Coordinates:
    return Coordinates(latitude=city.latitude, longitude=city.longitude, label=city.name)


class ExternalAggregator:
    def __init__(
        self,
        weather: WeatherProvider,
        places: PlacesProvider,
        geocoding: GeocodingProvider,
        resolver: CityResolver,
        events: Optional[StructuredLogger] = None,
    ):
        self._weather = weather
        self._places = places
        self._geocoding = geocoding
        self._resolver = resolver
        self._events = events or get_logger()

    def get_weather(self, city: City) -> WeatherSnapshot:
        self._events.provider_call("weather", city=city.name)
        return self._weather.current_weather(_coordinates(city))

    def lookup_pois(self, city: City) -> PoiLookup:
        query = PlacesQuery(
            center=_coordinates(city),
            categories=list(POI_CATEGORIES),
            radius_meters=POI_RADIUS_METERS,
            limit=POI_LIMIT,
        )
        self._events.provider_call("places", city=city.name)
        try:
            found = self._places.search_places(query)
        except Exception as exc:
            reason = redact_sensitive(str(exc))
            _logger.warning("places lookup for %s failed, using synthetic POIs: %s", city.name, reason)
            self._events.fallback("places", "synthetic", "provider_failed", city=city.name, error=reason)
            return PoiLookup(
                pois=synthetic_pois(city.name, city.latitude, city.longitude),
                source="synthetic",
                fallback_reason="provider_failed",
            )

        if not found:
            _logger.info("no places returned for %s, using synthetic POIs", city.name)
            self._events.fallback("places", "synthetic", "provider_empty", city=city.name)
            return PoiLookup(
                pois=synthetic_pois(city.name, city.latitude, city.longitude),
                source="synthetic",
                fallback_reason="provider_empty",
            )
        return PoiLookup(pois=found, source="provider")

    def get_pois(self, city: City) -> list[ExternalPoi]:
        return self.lookup_pois(city).pois

    def search_cities_external(self, query: str, limit: int = EXTERNAL_SEARCH_LIMIT) -> list[CitySearchResult]:
        self._events.provider_call("geocoding", query=query, limit=limit)
        return self._geocoding.search_cities(GeocodingQuery(text=query, limit=limit))

    def get_weather_for_city(self, city_name: str, region_name: Optional[str] = None) -> WeatherSnapshot:
        return self.get_weather(self._resolver.resolve_or_raise(city_name, region_name))

    def get_pois_for_city(self, city_name: str, region_name: Optional[str] = None) -> list[ExternalPoi]:
        return self.get_pois(self._resolver.resolve_or_raise(city_name, region_name))


__all__ = ["ExternalAggregator", "POI_CATEGORIES", "PoiLookup"]
