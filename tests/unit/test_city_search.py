"""Local-then-external city search tests."""

from __future__ import annotations

from travel_planner.shared.exceptions import ExternalServiceUnavailable


def test_local_hits_skip_external(ctx, seed, fake_geocoding):
    outcome = ctx.city_search().search_with_outcome("rom")
    assert outcome.strategy == "local"
    assert [item.name for item in outcome.results] == ["Roma"]
    hit = outcome.results[0]
    assert hit.source == "local"
    assert hit.place_id == f"local_{seed.roma.id}"
    assert hit.local_city_id == seed.roma.id
    assert hit.tags == ["art", "history"]
    assert hit.region == "Lazio"
    assert hit.country == "Italy"
    assert fake_geocoding.calls == []


def test_no_local_hits_fall_through_to_geocoding(ctx, fake_geocoding):
    results = ctx.city_search().search("Xyzzyplex")
    assert [item.source for item in results] == ["geoapify"]
    assert results[0].local_city_id is None
    assert fake_geocoding.calls[0].limit == 10


def test_geocoding_failure_is_swallowed(ctx, fake_geocoding):
    fake_geocoding.error = ExternalServiceUnavailable("geoapify_geocoding", "HTTP 503")
    outcome = ctx.city_search().search_with_outcome("Xyzzyplex")
    assert outcome.strategy == "external_failed"
    assert outcome.results == []


def test_history_records_query_and_first_local_city(ctx, repo, seed, fake_geocoding):
    search = ctx.city_search()
    search.search("spring", user_id=5)
    fake_geocoding.error = ExternalServiceUnavailable("geoapify_geocoding", "HTTP 503")
    search.search("Xyzzyplex", user_id=5)
    search.search("roma")

    entries = repo.list_searches_by_user(5)
    assert [entry.query for entry in entries] == ["Xyzzyplex", "spring"]
    assert entries[0].city_id is None
    assert entries[1].city_id == seed.springfield_il.id
    assert entries[1].city_name == "Springfield"
