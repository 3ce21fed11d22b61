"""City search: local substring match first, external geocoding second."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Literal, Optional

from pydantic import BaseModel, Field

from travel_planner.application.external_aggregator import EXTERNAL_SEARCH_LIMIT, ExternalAggregator
from travel_planner.domain.models import City, CitySearchResult
from travel_planner.infrastructure.logging import StructuredLogger, get_logger
from travel_planner.persistence.models import SearchRecord
from travel_planner.persistence.repository import GeographyStore, SearchHistoryStore
from travel_planner.security.redact import redact_sensitive

_logger = logging.getLogger("travel-planner.city-search")


class CitySearchOutcome(BaseModel):
    results: list[CitySearchResult] = Field(default_factory=list)
    strategy: Literal["local", "external", "external_failed"]


def _local_result(city: City) -> CitySearchResult:
    return CitySearchResult(
        place_id=f"local_{city.id}",
        name=city.name,
        region=city.region_name,
        country=city.country_name,
        latitude=city.latitude,
        longitude=city.longitude,
        local_city_id=city.id,
        tags=list(city.tags),
        source="local",
    )


class CitySearchOrchestrator:
    def __init__(
        self,
        geography: GeographyStore,
        aggregator: ExternalAggregator,
        history: SearchHistoryStore,
        events: Optional[StructuredLogger] = None,
    ):
        self._geography = geography
        self._aggregator = aggregator
        self._history = history
        self._events = events or get_logger()

    def search_with_outcome(self, query: str, user_id: Optional[int] = None) -> CitySearchOutcome:
        local = self._geography.search_cities_by_name(query)
        if local:
            outcome = CitySearchOutcome(results=[_local_result(city) for city in local], strategy="local")
        else:
            try:
                external = self._aggregator.search_cities_external(query, EXTERNAL_SEARCH_LIMIT)
                outcome = CitySearchOutcome(results=external, strategy="external")
            except Exception as exc:
                reason = redact_sensitive(str(exc))
                _logger.warning("external city search for %r failed: %s", query, reason)
                self._events.fallback("city_search", "empty", "external_failed", query=query, error=reason)
                outcome = CitySearchOutcome(results=[], strategy="external_failed")

        if user_id is not None:
            self._history.append_search(
                SearchRecord(
                    user_id=user_id,
                    query=query,
                    city_id=local[0].id if local else None,
                    searched_at=dt.datetime.now(dt.timezone.utc),
                )
            )
        return outcome

    def search(self, query: str, user_id: Optional[int] = None) -> list[CitySearchResult]:
        return self.search_with_outcome(query, user_id).results


__all__ = ["CitySearchOrchestrator", "CitySearchOutcome"]
