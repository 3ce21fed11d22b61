"""GeoAPIfy adapters: Places API (POIs) and Geocoding API (city search).

Docs: https://apidocs.geoapify.com/docs/places/ and
https://apidocs.geoapify.com/docs/geocoding/forward-geocoding/
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from travel_planner.config.settings import ProviderConfig
from travel_planner.domain.models import CitySearchResult, ExternalPoi
from travel_planner.security.http_client import SecureHttpClient
from travel_planner.tools.interfaces import ExternalServiceUnavailable, GeocodingQuery, PlacesQuery

_PLACES_SERVICE = "geoapify_places"
_GEOCODING_SERVICE = "geoapify_geocoding"
_logger = logging.getLogger("travel-planner.geoapify")


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _feature_to_poi(feature: Any) -> Optional[ExternalPoi]:
    """Map one GeoJSON feature; features without a usable name are skipped."""
    if not isinstance(feature, dict):
        return None
    props = feature.get("properties")
    if not isinstance(props, dict) or _blank(props.get("name")):
        return None
    categories = props.get("categories")
    return ExternalPoi(
        place_id=str(props.get("place_id") or ""),
        name=str(props["name"]),
        categories=[str(item) for item in categories] if isinstance(categories, list) else [],
        lat=_optional_float(props.get("lat")),
        lon=_optional_float(props.get("lon")),
        address=props.get("formatted"),
        description=None,
        is_synthetic=False,
    )


class GeoapifyPlacesProvider:
    def __init__(self, config: ProviderConfig, http: Optional[SecureHttpClient] = None):
        self._config = config
        self._http = http or SecureHttpClient(timeout=config.timeout_seconds, service_name=_PLACES_SERVICE)

    def search_places(self, query: PlacesQuery) -> list[ExternalPoi]:
        lat = query.center.latitude
        lon = query.center.longitude
        params = {
            "categories": ",".join(query.categories),
            "filter": f"circle:{lon:f},{lat:f},{query.radius_meters}",
            "bias": f"proximity:{lon:f},{lat:f}",
            "limit": query.limit,
            "apiKey": self._config.api_key,
        }
        _logger.info("Calling GeoAPIfy Places API for lat=%s, lon=%s, city=%s", lat, lon, query.center.label)
        data = self._http.get_json(self._config.url("/v2/places"), params=params)

        if not isinstance(data, dict):
            raise ExternalServiceUnavailable(_PLACES_SERVICE, "malformed places payload")
        features = data.get("features")
        if features is None:
            return []
        if not isinstance(features, list):
            raise ExternalServiceUnavailable(_PLACES_SERVICE, "malformed places payload")

        results: list[ExternalPoi] = []
        for feature in features:
            poi = _feature_to_poi(feature)
            if poi is not None:
                results.append(poi)
            if len(results) >= query.limit:
                break
        return results


def _result_to_city(raw: Any) -> Optional[CitySearchResult]:
    if not isinstance(raw, dict):
        return None
    name = raw.get("city") if raw.get("city") is not None else raw.get("name")
    if name is None:
        return None
    region = raw.get("state") if raw.get("state") is not None else raw.get("county")
    return CitySearchResult(
        place_id=raw.get("place_id"),
        name=str(name),
        region=region,
        country=raw.get("country"),
        latitude=_optional_float(raw.get("lat")),
        longitude=_optional_float(raw.get("lon")),
        local_city_id=None,
        tags=[],
        source="geoapify",
    )


class GeoapifyGeocodingProvider:
    def __init__(self, config: ProviderConfig, http: Optional[SecureHttpClient] = None):
        self._config = config
        self._http = http or SecureHttpClient(timeout=config.timeout_seconds, service_name=_GEOCODING_SERVICE)

    def search_cities(self, query: GeocodingQuery) -> list[CitySearchResult]:
        params = {
            "text": query.text,
            "type": "city",
            "limit": query.limit,
            "format": "json",
            "apiKey": self._config.api_key,
        }
        data = self._http.get_json(self._config.url("/v1/geocode/search"), params=params)

        if data is None:
            return []
        if not isinstance(data, dict):
            raise ExternalServiceUnavailable(_GEOCODING_SERVICE, "malformed geocoding payload")
        raw_results = data.get("results")
        if raw_results is None:
            return []
        if not isinstance(raw_results, list):
            raise ExternalServiceUnavailable(_GEOCODING_SERVICE, "malformed geocoding payload")

        results: list[CitySearchResult] = []
        for raw in raw_results:
            city = _result_to_city(raw)
            if city is not None:
                results.append(city)
        return results


__all__ = ["GeoapifyGeocodingProvider", "GeoapifyPlacesProvider"]
