"""User-owned POIs.

Ownership failures read as ``NotFoundError`` so one user's POI ids never
leak to another.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from travel_planner.application.context import AppContext
from travel_planner.domain.exceptions import ConflictError, NotFoundError
from travel_planner.domain.models import ExternalPoi, Poi
from travel_planner.persistence.models import PoiRecord

_logger = logging.getLogger("travel-planner.pois")


def create_poi(
    *,
    ctx: AppContext,
    owner_id: int,
    name: str,
    description: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    external_id: Optional[str] = None,
    raw: Optional[dict] = None,
) -> Poi:
    if ctx.pois.find_poi_by_owner_and_name(owner_id, name) is not None:
        raise ConflictError(f"POI with name '{name}' already exists for this user")
    poi = ctx.pois.create_poi(
        PoiRecord(
            owner_id=owner_id,
            name=name,
            external_id=external_id,
            description=description,
            latitude=latitude,
            longitude=longitude,
            raw=raw or {},
            created_at=dt.datetime.now(dt.timezone.utc),
        )
    )
    _logger.info("created poi id=%s owner=%s", poi.id, owner_id)
    return poi


def save_external_poi(*, ctx: AppContext, owner_id: int, poi: ExternalPoi) -> Poi:
    return create_poi(
        ctx=ctx,
        owner_id=owner_id,
        name=poi.name,
        description=poi.description or poi.address,
        latitude=poi.lat,
        longitude=poi.lon,
        external_id=poi.place_id,
        raw=poi.model_dump(),
    )


def list_pois(*, ctx: AppContext, owner_id: int) -> list[Poi]:
    return ctx.pois.list_pois_by_owner(owner_id)


def get_poi(*, ctx: AppContext, owner_id: int, poi_id: int) -> Poi:
    poi = ctx.pois.find_poi_by_id(poi_id)
    if poi is None or poi.owner_id != owner_id:
        raise NotFoundError("POI", poi_id)
    return poi


def delete_poi(*, ctx: AppContext, owner_id: int, poi_id: int) -> None:
    poi = get_poi(ctx=ctx, owner_id=owner_id, poi_id=poi_id)
    ctx.pois.delete_poi(poi.id)


def delete_all_pois(*, ctx: AppContext, owner_id: int) -> None:
    ctx.pois.delete_pois_by_owner(owner_id)


__all__ = [
    "create_poi",
    "delete_all_pois",
    "delete_poi",
    "get_poi",
    "list_pois",
    "save_external_poi",
]
