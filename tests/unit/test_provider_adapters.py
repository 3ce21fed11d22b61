"""Weather/places/geocoding adapter tests against httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from travel_planner.adapters.places.geoapify import GeoapifyGeocodingProvider, GeoapifyPlacesProvider
from travel_planner.adapters.weather.openweather import OpenWeatherProvider
from travel_planner.config.settings import ProviderConfig
from travel_planner.security.http_client import SecureHttpClient
from travel_planner.shared.exceptions import ExternalServiceUnavailable
from travel_planner.tools.interfaces import Coordinates, GeocodingQuery, PlacesQuery

_ROMA = Coordinates(latitude=41.9, longitude=12.5, label="Roma")


def _http(handler, service: str = "test") -> SecureHttpClient:
    return SecureHttpClient(
        timeout=5.0,
        service_name=service,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _config(key: str = "secret-key") -> ProviderConfig:
    return ProviderConfig(base_url="https://provider.test/base/", api_key=key, timeout_seconds=5.0)


# ── weather ───────────────────────────────────────────

def test_weather_sends_coordinates_and_metric_units():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "main": {"temp": 24.3, "feels_like": 25.0, "humidity": 40, "pressure": 1013},
                "wind": {"speed": 3.2},
                "weather": [{"description": "clear sky", "icon": "01d"}],
            },
        )

    snapshot = OpenWeatherProvider(_config(), _http(handler)).current_weather(_ROMA)

    assert snapshot.city_name == "Roma"
    assert snapshot.temperature == 24.3
    assert snapshot.humidity == 40
    assert snapshot.description == "clear sky"
    assert snapshot.wind_speed == 3.2
    params = seen[0].url.params
    assert seen[0].url.path == "/base/weather"
    assert params["lat"] == "41.9"
    assert params["lon"] == "12.5"
    assert params["appid"] == "secret-key"
    assert params["units"] == "metric"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"message": "boom"}),
        httpx.Response(200, content=b""),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json={}),
    ],
)
def test_weather_failures_become_service_unavailable(response):
    provider = OpenWeatherProvider(_config(), _http(lambda request: response, "weather"))
    with pytest.raises(ExternalServiceUnavailable):
        provider.current_weather(_ROMA)


def test_weather_timeout_becomes_service_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ExternalServiceUnavailable, match="timed out"):
        OpenWeatherProvider(_config(), _http(handler, "weather")).current_weather(_ROMA)


def test_service_unavailable_message_does_not_leak_key():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "bad key"})

    with pytest.raises(ExternalServiceUnavailable) as excinfo:
        OpenWeatherProvider(_config("very-secret"), _http(handler, "weather")).current_weather(_ROMA)
    assert "very-secret" not in str(excinfo.value)
    assert "HTTP 401" in str(excinfo.value)


# ── places ────────────────────────────────────────────

def _places_query() -> PlacesQuery:
    return PlacesQuery(center=_ROMA, categories=["tourism.sights", "leisure.park"], radius_meters=10000, limit=50)


def test_places_request_shape_and_named_features_only():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "features": [
                    {"properties": {"place_id": "p1", "name": "Colosseo", "lat": 41.89, "lon": 12.49,
                                    "formatted": "Piazza del Colosseo", "categories": ["tourism.sights"]}},
                    {"properties": {"place_id": "p2", "name": "   "}},
                    {"properties": {"place_id": "p3"}},
                ]
            },
        )

    pois = GeoapifyPlacesProvider(_config(), _http(handler)).search_places(_places_query())

    assert [poi.place_id for poi in pois] == ["p1"]
    assert pois[0].address == "Piazza del Colosseo"
    assert pois[0].is_synthetic is False
    params = seen[0].url.params
    assert seen[0].url.path == "/base/v2/places"
    assert params["categories"] == "tourism.sights,leisure.park"
    assert params["filter"].startswith("circle:12.5")
    assert params["filter"].endswith(",10000")
    assert params["bias"].startswith("proximity:12.5")
    assert params["limit"] == "50"
    assert params["apiKey"] == "secret-key"


def test_places_missing_features_is_empty():
    provider = GeoapifyPlacesProvider(_config(), _http(lambda request: httpx.Response(200, json={})))
    assert provider.search_places(_places_query()) == []


def test_places_http_error_raises():
    provider = GeoapifyPlacesProvider(_config(), _http(lambda request: httpx.Response(500)))
    with pytest.raises(ExternalServiceUnavailable):
        provider.search_places(_places_query())


# ── geocoding ─────────────────────────────────────────

def test_geocoding_maps_results_and_region_fallback():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "results": [
                    {"place_id": "g1", "city": "Xyzzyplex", "state": "Nowhere", "country": "Atlantis",
                     "lat": 1.0, "lon": 2.0},
                    {"place_id": "g2", "name": "Plexville", "county": "Some County", "country": "Atlantis"},
                    {"place_id": "g3", "country": "Atlantis"},
                ]
            },
        )

    results = GeoapifyGeocodingProvider(_config(), _http(handler)).search_cities(
        GeocodingQuery(text="Xyzzyplex", limit=10)
    )

    assert [item.name for item in results] == ["Xyzzyplex", "Plexville"]
    assert results[0].region == "Nowhere"
    assert results[1].region == "Some County"
    assert all(item.source == "geoapify" for item in results)
    assert all(item.local_city_id is None and item.tags == [] for item in results)
    params = seen[0].url.params
    assert seen[0].url.path == "/base/v1/geocode/search"
    assert params["text"] == "Xyzzyplex"
    assert params["type"] == "city"
    assert params["limit"] == "10"


def test_geocoding_missing_results_is_empty():
    provider = GeoapifyGeocodingProvider(_config(), _http(lambda request: httpx.Response(200, json={})))
    assert provider.search_cities(GeocodingQuery(text="anything")) == []


def test_geocoding_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    provider = GeoapifyGeocodingProvider(_config(), _http(handler))
    with pytest.raises(ExternalServiceUnavailable, match="network request failed"):
        provider.search_cities(GeocodingQuery(text="anything"))
