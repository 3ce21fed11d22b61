"""Resolve a city from a (name, optional region) pair.

The result is a tagged value: callers branch on ``Resolved`` /
``Ambiguous`` / ``NotFound`` instead of catching exceptions. Use
``resolve_or_raise`` where the HTTP error taxonomy is wanted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from travel_planner.domain.exceptions import BadRequestError, NotFoundError
from travel_planner.domain.models import City
from travel_planner.persistence.repository import GeographyStore

_logger = logging.getLogger("travel-planner.city-resolver")


@dataclass(frozen=True)
class Resolved:
    city: City


@dataclass(frozen=True)
class Ambiguous:
    name: str
    candidates: list[City] = field(default_factory=list)


@dataclass(frozen=True)
class NotFound:
    name: str
    region_name: Optional[str] = None


Resolution = Union[Resolved, Ambiguous, NotFound]


class CityResolver:
    def __init__(self, geography: GeographyStore):
        self._geography = geography

    def resolve(self, city_name: str, region_name: Optional[str] = None) -> Resolution:
        if region_name is not None and region_name.strip():
            city = self._geography.find_city_by_name_and_region(city_name, region_name)
            if city is None:
                return NotFound(name=city_name, region_name=region_name)
            return Resolved(city=city)

        matches = self._geography.find_cities_by_name(city_name)
        if not matches:
            return NotFound(name=city_name)
        if len(matches) > 1:
            _logger.debug("city name %r matches %d cities", city_name, len(matches))
            return Ambiguous(name=city_name, candidates=matches)
        return Resolved(city=matches[0])

    def resolve_or_raise(self, city_name: str, region_name: Optional[str] = None) -> City:
        result = self.resolve(city_name, region_name)
        if isinstance(result, Resolved):
            return result.city
        if isinstance(result, Ambiguous):
            raise BadRequestError(
                f"Multiple cities found with name '{city_name}'. Please specify the region."
            )
        if result.region_name:
            raise NotFoundError("City", f"{city_name} ({result.region_name})")
        raise NotFoundError("City", city_name)


__all__ = ["Ambiguous", "CityResolver", "NotFound", "Resolution", "Resolved"]
