"""Application context for dependency injection."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from travel_planner.adapters.places import GeoapifyGeocodingProvider, GeoapifyPlacesProvider
from travel_planner.adapters.weather import OpenWeatherProvider
from travel_planner.application.city_resolver import CityResolver
from travel_planner.application.city_search import CitySearchOrchestrator
from travel_planner.application.external_aggregator import ExternalAggregator
from travel_planner.application.trip_itinerary import TripItineraryEngine
from travel_planner.config.settings import AppSettings, load_settings
from travel_planner.infrastructure.logging import StructuredLogger, get_logger
from travel_planner.persistence.repository import (
    GeographyStore,
    PoiStore,
    ProfileStore,
    SearchHistoryStore,
    TripStore,
    get_travel_repository,
)
from travel_planner.tools.interfaces import GeocodingProvider, PlacesProvider, WeatherProvider


@dataclass
class AppContext:
    geography: GeographyStore
    trips: TripStore
    history: SearchHistoryStore
    pois: PoiStore
    profiles: ProfileStore
    weather_provider: WeatherProvider
    places_provider: PlacesProvider
    geocoding_provider: GeocodingProvider
    settings: Optional[AppSettings] = None
    logger: Any = None
    _components: dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def _component(self, name: str, build) -> Any:
        if name not in self._components:
            with self._lock:
                if name not in self._components:
                    self._components[name] = build()
        return self._components[name]

    def events(self) -> StructuredLogger:
        return self.logger or get_logger()

    def resolver(self) -> CityResolver:
        return self._component("resolver", lambda: CityResolver(self.geography))

    def engine(self) -> TripItineraryEngine:
        return self._component("engine", lambda: TripItineraryEngine(self.trips, self.resolver(), self.pois))

    def aggregator(self) -> ExternalAggregator:
        return self._component(
            "aggregator",
            lambda: ExternalAggregator(
                self.weather_provider,
                self.places_provider,
                self.geocoding_provider,
                self.resolver(),
                events=self.events(),
            ),
        )

    def city_search(self) -> CitySearchOrchestrator:
        return self._component(
            "city_search",
            lambda: CitySearchOrchestrator(self.geography, self.aggregator(), self.history, events=self.events()),
        )


def make_app_context(settings: Optional[AppSettings] = None) -> AppContext:
    settings = settings or load_settings()
    repo = get_travel_repository(settings.db_path)
    return AppContext(
        geography=repo,
        trips=repo,
        history=repo,
        pois=repo,
        profiles=repo,
        weather_provider=OpenWeatherProvider(settings.weather),
        places_provider=GeoapifyPlacesProvider(settings.places),
        geocoding_provider=GeoapifyGeocodingProvider(settings.geocoding),
        settings=settings,
        logger=get_logger(),
    )


__all__ = ["AppContext", "make_app_context"]
