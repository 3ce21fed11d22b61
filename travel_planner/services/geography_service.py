"""Geography browsing: countries, regions, tags and cities."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from travel_planner.application.context import AppContext
from travel_planner.domain.exceptions import NotFoundError
from travel_planner.domain.models import City, Country, Region, Tag
from travel_planner.persistence.models import SearchRecord


def _record_lookup(ctx: AppContext, user_id: Optional[int], city: City) -> None:
    if user_id is None:
        return
    ctx.history.append_search(
        SearchRecord(
            user_id=user_id,
            query=city.name,
            city_id=city.id,
            searched_at=dt.datetime.now(dt.timezone.utc),
        )
    )


def list_countries(*, ctx: AppContext) -> list[Country]:
    return ctx.geography.list_countries()


def get_country(*, ctx: AppContext, name: str) -> Country:
    country = ctx.geography.find_country_by_name(name)
    if country is None:
        raise NotFoundError("Country", name)
    return country


def list_regions(*, ctx: AppContext, country_name: Optional[str] = None) -> list[Region]:
    if country_name is None or not country_name.strip():
        return ctx.geography.list_regions()
    get_country(ctx=ctx, name=country_name)
    return ctx.geography.list_regions_by_country_name(country_name)


def get_region(*, ctx: AppContext, name: str, country_name: Optional[str] = None) -> Region:
    """Without a country the first region carrying ``name`` wins."""
    if country_name is not None and country_name.strip():
        region = ctx.geography.find_region_by_name_and_country(name, country_name)
        if region is None:
            raise NotFoundError("Region", f"{name} ({country_name})")
        return region
    regions = ctx.geography.find_regions_by_name(name)
    if not regions:
        raise NotFoundError("Region", name)
    return regions[0]


def list_tags(*, ctx: AppContext) -> list[Tag]:
    return ctx.geography.list_tags()


def list_cities(
    *,
    ctx: AppContext,
    region_name: Optional[str] = None,
    tags: Optional[list[str]] = None,
) -> list[City]:
    if tags:
        return ctx.geography.find_cities_by_tags(tags)
    if region_name is not None and region_name.strip():
        return ctx.geography.list_cities_by_region_name(region_name)
    return ctx.geography.list_cities()


def get_city(*, ctx: AppContext, city_id: int, user_id: Optional[int] = None) -> City:
    city = ctx.geography.find_city_by_id(city_id)
    if city is None:
        raise NotFoundError("City", city_id)
    _record_lookup(ctx, user_id, city)
    return city


def get_city_by_name(
    *,
    ctx: AppContext,
    name: str,
    region_name: Optional[str] = None,
    user_id: Optional[int] = None,
) -> City:
    city = ctx.resolver().resolve_or_raise(name, region_name)
    _record_lookup(ctx, user_id, city)
    return city


__all__ = [
    "get_city",
    "get_city_by_name",
    "get_country",
    "get_region",
    "list_cities",
    "list_countries",
    "list_regions",
    "list_tags",
]
