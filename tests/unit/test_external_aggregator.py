"""POI fallback, weather and geocoding aggregation tests."""

from __future__ import annotations

import pytest

from travel_planner.adapters.places.synthetic import SYNTHETIC_KINDS, synthetic_pois
from travel_planner.application.external_aggregator import POI_CATEGORIES
from travel_planner.domain.exceptions import BadRequestError
from travel_planner.domain.models import City, ExternalPoi
from travel_planner.shared.exceptions import ExternalServiceUnavailable

_NOWHERE = City(id=99, name="Nowhereville", latitude=0.0, longitude=0.0, region_id=1)


def test_synthetic_pois_are_deterministic_and_ordered():
    first = synthetic_pois("Nowhereville", 0.0, 0.0)
    assert first == synthetic_pois("Nowhereville", 0.0, 0.0)
    assert [poi.place_id for poi in first] == [f"synthetic_{kind}_nowhereville" for kind in SYNTHETIC_KINDS]
    assert SYNTHETIC_KINDS == ("museum", "park", "cathedral", "theater", "piazza", "market")
    assert all(poi.is_synthetic for poi in first)


def test_synthetic_offsets_and_slug():
    pois = {poi.place_id: poi for poi in synthetic_pois("San Marino", 10.0, 20.0)}
    park = pois["synthetic_park_san_marino"]
    assert park.lat == pytest.approx(10.002)
    assert park.lon == pytest.approx(19.999)
    piazza = pois["synthetic_piazza_san_marino"]
    assert (piazza.lat, piazza.lon) == (10.0, 20.0)
    assert pois["synthetic_cathedral_san_marino"].categories == ["building.historic", "tourism.sights"]


def test_provider_failure_falls_back_to_synthetic(ctx, fake_places):
    lookup = ctx.aggregator().lookup_pois(_NOWHERE)
    assert lookup.source == "synthetic"
    assert lookup.fallback_reason == "provider_failed"
    assert len(lookup.pois) == 6
    assert lookup.pois[0].place_id == "synthetic_museum_nowhereville"

    query = fake_places.calls[0]
    assert query.categories == list(POI_CATEGORIES)
    assert query.radius_meters == 10000
    assert query.limit == 50


def test_provider_empty_falls_back_to_synthetic(ctx, fake_places):
    fake_places.error = None
    lookup = ctx.aggregator().lookup_pois(_NOWHERE)
    assert lookup.source == "synthetic"
    assert lookup.fallback_reason == "provider_empty"


def test_provider_results_pass_through(ctx, fake_places):
    fake_places.error = None
    fake_places.pois = [ExternalPoi(place_id="p1", name="Colosseo")]
    lookup = ctx.aggregator().lookup_pois(_NOWHERE)
    assert lookup.source == "provider"
    assert lookup.fallback_reason is None
    assert ctx.aggregator().get_pois(_NOWHERE) == fake_places.pois


def test_weather_errors_propagate(ctx, fake_weather):
    fake_weather.error = ExternalServiceUnavailable("weather", "HTTP 500")
    with pytest.raises(ExternalServiceUnavailable):
        ctx.aggregator().get_weather(_NOWHERE)


def test_weather_for_city_resolves_first(ctx, seed, fake_weather):
    snapshot = ctx.aggregator().get_weather_for_city("roma")
    assert snapshot.city_name == "Roma"
    assert fake_weather.calls[0].latitude == seed.roma.latitude
    with pytest.raises(BadRequestError):
        ctx.aggregator().get_weather_for_city("Springfield")


def test_pois_for_city_uses_resolved_coordinates(ctx, fake_places, seed):
    pois = ctx.aggregator().get_pois_for_city("Springfield", "Ohio")
    assert pois[0].place_id == "synthetic_museum_springfield"
    assert fake_places.calls[0].center.longitude == seed.springfield_oh.longitude


def test_direct_geocoding_errors_propagate(ctx, fake_geocoding):
    fake_geocoding.error = ExternalServiceUnavailable("geoapify_geocoding", "HTTP 503")
    with pytest.raises(ExternalServiceUnavailable):
        ctx.aggregator().search_cities_external("Xyzzyplex")
