"""Geography, POI, search-history and profile service tests."""

from __future__ import annotations

import pytest

from travel_planner.domain.exceptions import BadRequestError, ConflictError, NotFoundError
from travel_planner.domain.models import ExternalPoi
from travel_planner.services import geography_service, history_service, poi_service, user_service


def test_country_and_region_lookups(ctx):
    assert geography_service.get_country(ctx=ctx, name="ITALY").name == "Italy"
    with pytest.raises(NotFoundError):
        geography_service.get_country(ctx=ctx, name="Narnia")

    assert len(geography_service.list_regions(ctx=ctx)) == 4
    assert [r.name for r in geography_service.list_regions(ctx=ctx, country_name="United States")] == [
        "Illinois",
        "Ohio",
    ]
    with pytest.raises(NotFoundError):
        geography_service.list_regions(ctx=ctx, country_name="Narnia")


def test_region_without_country_takes_first_match(ctx, repo):
    narnia = repo.add_country("Narnia")
    repo.add_region("Lazio", narnia.id)
    assert geography_service.get_region(ctx=ctx, name="lazio").country_name == "Italy"
    assert geography_service.get_region(ctx=ctx, name="Lazio", country_name="Narnia").country_id == narnia.id
    with pytest.raises(NotFoundError):
        geography_service.get_region(ctx=ctx, name="Ohio", country_name="Italy")


def test_list_cities_filters(ctx):
    assert len(geography_service.list_cities(ctx=ctx)) == 4
    assert [c.name for c in geography_service.list_cities(ctx=ctx, region_name="Ohio")] == ["Springfield"]
    assert [c.name for c in geography_service.list_cities(ctx=ctx, tags=["fashion"])] == ["Milano"]
    assert [t.name for t in geography_service.list_tags(ctx=ctx)] == ["art", "fashion", "history"]


def test_city_lookups_record_history_for_known_user(ctx, seed):
    geography_service.get_city(ctx=ctx, city_id=seed.milano.id, user_id=7)
    geography_service.get_city_by_name(ctx=ctx, name="roma", user_id=7)
    geography_service.get_city_by_name(ctx=ctx, name="Roma")

    entries = history_service.list_search_history(ctx=ctx, user_id=7)
    assert {entry.city_id for entry in entries} == {seed.milano.id, seed.roma.id}

    with pytest.raises(NotFoundError):
        geography_service.get_city(ctx=ctx, city_id=9999)
    with pytest.raises(BadRequestError):
        geography_service.get_city_by_name(ctx=ctx, name="Springfield")

    history_service.clear_search_history(ctx=ctx, user_id=7)
    assert history_service.list_search_history(ctx=ctx, user_id=7) == []


def test_poi_crud_with_ownership(ctx):
    poi = poi_service.create_poi(ctx=ctx, owner_id=1, name="Trevi", latitude=41.9, longitude=12.48)
    with pytest.raises(ConflictError):
        poi_service.create_poi(ctx=ctx, owner_id=1, name="trevi")

    assert poi_service.get_poi(ctx=ctx, owner_id=1, poi_id=poi.id).name == "Trevi"
    with pytest.raises(NotFoundError):
        poi_service.get_poi(ctx=ctx, owner_id=2, poi_id=poi.id)
    with pytest.raises(NotFoundError):
        poi_service.delete_poi(ctx=ctx, owner_id=2, poi_id=poi.id)

    poi_service.delete_poi(ctx=ctx, owner_id=1, poi_id=poi.id)
    assert poi_service.list_pois(ctx=ctx, owner_id=1) == []


def test_save_external_poi_keeps_provider_payload(ctx):
    external = ExternalPoi(
        place_id="synthetic_museum_roma",
        name="Museo Civico di Roma",
        categories=["entertainment.museum"],
        lat=41.9,
        lon=12.5,
        address="Centro Storico, Roma",
        is_synthetic=True,
    )
    saved = poi_service.save_external_poi(ctx=ctx, owner_id=1, poi=external)
    assert saved.external_id == "synthetic_museum_roma"
    assert saved.description == "Centro Storico, Roma"
    assert saved.raw["categories"] == ["entertainment.museum"]

    poi_service.delete_all_pois(ctx=ctx, owner_id=1)
    assert poi_service.list_pois(ctx=ctx, owner_id=1) == []


def test_profile_is_empty_until_first_update(ctx):
    profile = user_service.get_current_user(ctx=ctx, user_id=7)
    assert profile.user_id == 7
    assert profile.first_name is None
    assert profile.updated_at is None

    saved = user_service.update_profile(ctx=ctx, user_id=7, first_name="Ada", preferred_units="imperial")
    assert saved.first_name == "Ada"
    assert saved.updated_at is not None
    assert user_service.get_current_user(ctx=ctx, user_id=7).preferred_units == "imperial"
    assert user_service.get_current_user(ctx=ctx, user_id=8).first_name is None


def test_profile_update_keeps_fields_not_given(ctx):
    user_service.update_profile(ctx=ctx, user_id=7, first_name="Ada", last_name="Lovelace")
    updated = user_service.update_profile(ctx=ctx, user_id=7, preferred_units="metric")
    assert (updated.first_name, updated.last_name, updated.preferred_units) == ("Ada", "Lovelace", "metric")
    assert user_service.get_current_user(ctx=ctx, user_id=7).last_name == "Lovelace"
