"""pytest global fixtures: isolated storage and no real provider calls."""

from __future__ import annotations

import io
from dataclasses import dataclass

import pytest

from travel_planner.application.context import AppContext
from travel_planner.domain.models import City, CitySearchResult, ExternalPoi, WeatherSnapshot
from travel_planner.infrastructure.logging import StructuredLogger
from travel_planner.persistence.sqlite_repository import SQLiteTravelRepository
from travel_planner.shared.exceptions import ExternalServiceUnavailable


@pytest.fixture(autouse=True)
def no_real_apis(monkeypatch):
    """Provider keys are never taken from the developer's environment."""
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)
    monkeypatch.delenv("GEOAPIFY_API_KEY", raising=False)
    monkeypatch.delenv("WEATHER_API_BASE_URL", raising=False)
    monkeypatch.delenv("GEOAPIFY_BASE_URL", raising=False)
    yield


@dataclass
class Seed:
    roma: City
    milano: City
    springfield_il: City
    springfield_oh: City


@pytest.fixture
def repo(tmp_path) -> SQLiteTravelRepository:
    return SQLiteTravelRepository(tmp_path / "travel.sqlite3")


@pytest.fixture
def seed(repo) -> Seed:
    italy = repo.add_country("Italy")
    usa = repo.add_country("United States")
    lazio = repo.add_region("Lazio", italy.id)
    lombardia = repo.add_region("Lombardia", italy.id)
    illinois = repo.add_region("Illinois", usa.id)
    ohio = repo.add_region("Ohio", usa.id)
    return Seed(
        roma=repo.add_city("Roma", lazio.id, 41.9028, 12.4964, tags=["history", "art"]),
        milano=repo.add_city("Milano", lombardia.id, 45.4642, 9.19, tags=["fashion"]),
        springfield_il=repo.add_city("Springfield", illinois.id, 39.7817, -89.6501),
        springfield_oh=repo.add_city("Springfield", ohio.id, 39.9242, -83.8088),
    )


class FakeWeather:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls = []

    def current_weather(self, location):
        self.calls.append(location)
        if self.error is not None:
            raise self.error
        return WeatherSnapshot(city_name=location.label, temperature=21.5, description="clear sky")


class FakePlaces:
    def __init__(self, pois: list[ExternalPoi] | None = None, error: Exception | None = None):
        self.pois = pois or []
        self.error = error
        self.calls = []

    def search_places(self, query):
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return list(self.pois)


class FakeGeocoding:
    def __init__(self, results: list[CitySearchResult] | None = None, error: Exception | None = None):
        self.results = results or []
        self.error = error
        self.calls = []

    def search_cities(self, query):
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


@pytest.fixture
def fake_weather() -> FakeWeather:
    return FakeWeather()


@pytest.fixture
def fake_places() -> FakePlaces:
    return FakePlaces(error=ExternalServiceUnavailable("geoapify_places", "HTTP 500"))


@pytest.fixture
def fake_geocoding() -> FakeGeocoding:
    return FakeGeocoding(
        results=[
            CitySearchResult(
                place_id="abc123",
                name="Xyzzyplex",
                region="Nowhere",
                country="Atlantis",
                latitude=1.0,
                longitude=2.0,
                source="geoapify",
            )
        ]
    )


@pytest.fixture
def events() -> StructuredLogger:
    return StructuredLogger(trace_id="test", output=io.StringIO())


@pytest.fixture
def ctx(repo, seed, fake_weather, fake_places, fake_geocoding, events) -> AppContext:
    return AppContext(
        geography=repo,
        trips=repo,
        history=repo,
        pois=repo,
        profiles=repo,
        weather_provider=fake_weather,
        places_provider=fake_places,
        geocoding_provider=fake_geocoding,
        logger=events,
    )
