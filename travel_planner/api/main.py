"""FastAPI application: geography, city search, trips, POIs and search history."""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from travel_planner.api.schemas import ExternalPoiSaveRequest, HealthResponse, PoiCreateRequest, ProfileUpdateRequest
from travel_planner.application.context import AppContext, make_app_context
from travel_planner.application.contracts import StopCreate, StopUpdate, TripCreate, TripUpdate
from travel_planner.domain.exceptions import BadRequestError, ConflictError, DomainError, NotFoundError
from travel_planner.domain.models import (
    City,
    CitySearchResult,
    Country,
    ErrorResponse,
    ExternalPoi,
    Poi,
    Region,
    SearchHistoryEntry,
    Tag,
    Trip,
    TripStop,
    UserProfile,
    WeatherSnapshot,
)
from travel_planner.infrastructure.logging import StructuredLogger, get_logger
from travel_planner.security.redact import redact_sensitive
from travel_planner.services import geography_service, history_service, poi_service, user_service
from travel_planner.services.export_formatter import content_disposition, csv_filename
from travel_planner.shared.exceptions import ExternalServiceUnavailable

_api_logger = logging.getLogger("travel-planner.api")

load_dotenv()

app = FastAPI(
    title="travel-planner",
    version="1.0.0",
    docs_url="/docs" if os.getenv("ENABLE_DOCS", "false").lower() == "true" else None,
    redoc_url=None,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[item.strip() for item in os.getenv("CORS_ORIGINS", "*").split(",") if item.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

_app_ctx: Optional[AppContext] = None


def get_ctx() -> AppContext:
    global _app_ctx
    if _app_ctx is None:
        _app_ctx = make_app_context()
    return _app_ctx


def current_user(x_user_id: Optional[int] = Header(default=None, alias="X-User-Id")) -> int:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")
    return x_user_id


def optional_user(x_user_id: Optional[int] = Header(default=None, alias="X-User-Id")) -> Optional[int]:
    return x_user_id


# ── error mapping ─────────────────────────────────────

def _events() -> StructuredLogger:
    return _app_ctx.events() if _app_ctx is not None else get_logger()


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(code=code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _rejected(request: Request, status_code: int, exc: DomainError) -> JSONResponse:
    _api_logger.warning("%s %s: %s", request.method, request.url.path, exc)
    _events().warning(
        "api",
        str(exc),
        method=request.method,
        path=request.url.path,
        status=status_code,
        code=exc.code,
    )
    return _error_response(status_code, exc.code, str(exc))


@app.exception_handler(NotFoundError)
async def _not_found(request: Request, exc: NotFoundError):
    return _rejected(request, 404, exc)


@app.exception_handler(BadRequestError)
async def _bad_request(request: Request, exc: BadRequestError):
    return _rejected(request, 400, exc)


@app.exception_handler(ConflictError)
async def _conflict(request: Request, exc: ConflictError):
    return _rejected(request, 409, exc)


@app.exception_handler(DomainError)
async def _domain_error(request: Request, exc: DomainError):
    return _rejected(request, 400, exc)


@app.exception_handler(ExternalServiceUnavailable)
async def _service_unavailable(request: Request, exc: ExternalServiceUnavailable):
    safe_msg = redact_sensitive(str(exc))
    _api_logger.error("%s %s: %s", request.method, request.url.path, safe_msg)
    _events().error("api", safe_msg, path=request.url.path, status=503, service=exc.service)
    return _error_response(503, exc.code, safe_msg)


@app.exception_handler(Exception)
async def _unexpected(request: Request, exc: Exception):
    _api_logger.error(
        "unhandled error on %s %s: %s",
        request.method,
        request.url.path,
        redact_sensitive(str(exc)),
        exc_info=exc,
    )
    _events().error("api", type(exc).__name__, path=request.url.path, status=500)
    return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")


# ── health ────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok")


# ── geography ─────────────────────────────────────────

@app.get("/api/countries", response_model=list[Country])
def all_countries(ctx: AppContext = Depends(get_ctx)):
    return geography_service.list_countries(ctx=ctx)


@app.get("/api/countries/{name}", response_model=Country)
def country_by_name(name: str, ctx: AppContext = Depends(get_ctx)):
    return geography_service.get_country(ctx=ctx, name=name)


@app.get("/api/regions", response_model=list[Region])
def all_regions(countryName: Optional[str] = Query(default=None), ctx: AppContext = Depends(get_ctx)):
    return geography_service.list_regions(ctx=ctx, country_name=countryName)


@app.get("/api/regions/{region_name}", response_model=Region)
def region_by_name(
    region_name: str,
    country: Optional[str] = Query(default=None),
    ctx: AppContext = Depends(get_ctx),
):
    return geography_service.get_region(ctx=ctx, name=region_name, country_name=country)


@app.get("/api/tags", response_model=list[Tag])
def all_tags(ctx: AppContext = Depends(get_ctx)):
    return geography_service.list_tags(ctx=ctx)


@app.get("/api/cities", response_model=list[City])
def all_cities(
    regionName: Optional[str] = Query(default=None),
    tags: Optional[list[str]] = Query(default=None),
    ctx: AppContext = Depends(get_ctx),
):
    return geography_service.list_cities(ctx=ctx, region_name=regionName, tags=tags)


@app.get("/api/cities/search", response_model=list[CitySearchResult])
def search_cities(
    query: str = Query(min_length=1, max_length=100),
    user_id: Optional[int] = Depends(optional_user),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.city_search().search(query, user_id)


@app.get("/api/cities/filter", response_model=list[City])
def filter_cities(tags: list[str] = Query(), ctx: AppContext = Depends(get_ctx)):
    return geography_service.list_cities(ctx=ctx, tags=tags)


@app.get("/api/cities/id/{city_id}", response_model=City)
def city_by_id(
    city_id: int,
    user_id: Optional[int] = Depends(optional_user),
    ctx: AppContext = Depends(get_ctx),
):
    return geography_service.get_city(ctx=ctx, city_id=city_id, user_id=user_id)


@app.get("/api/cities/{city_name}", response_model=City)
def city_by_name(
    city_name: str,
    region: Optional[str] = Query(default=None),
    user_id: Optional[int] = Depends(optional_user),
    ctx: AppContext = Depends(get_ctx),
):
    return geography_service.get_city_by_name(ctx=ctx, name=city_name, region_name=region, user_id=user_id)


@app.get("/api/cities/{city_name}/weather", response_model=WeatherSnapshot)
def city_weather(city_name: str, region: Optional[str] = Query(default=None), ctx: AppContext = Depends(get_ctx)):
    return ctx.aggregator().get_weather_for_city(city_name, region)


@app.get("/api/cities/{city_name}/pois", response_model=list[ExternalPoi])
def city_pois(
    city_name: str,
    response: Response,
    region: Optional[str] = Query(default=None),
    ctx: AppContext = Depends(get_ctx),
):
    city = ctx.resolver().resolve_or_raise(city_name, region)
    lookup = ctx.aggregator().lookup_pois(city)
    response.headers["X-Poi-Source"] = lookup.source
    return lookup.pois


# ── trips ─────────────────────────────────────────────

@app.get("/api/trips", response_model=list[Trip])
def list_trips(user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return ctx.engine().list_trips(user_id)


@app.post("/api/trips", response_model=Trip, status_code=201)
def create_trip(req: TripCreate, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return ctx.engine().create_trip(req, user_id)


@app.get("/api/trips/{trip_name}", response_model=Trip)
def get_trip(trip_name: str, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return ctx.engine().get_trip(trip_name, user_id)


@app.put("/api/trips/{trip_name}", response_model=Trip)
def update_trip(
    trip_name: str,
    req: TripUpdate,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.engine().update_trip(trip_name, req, user_id)


@app.delete("/api/trips/{trip_name}", status_code=204)
def delete_trip(trip_name: str, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    ctx.engine().delete_trip(trip_name, user_id)
    return Response(status_code=204)


@app.get("/api/trips/{trip_name}/export")
def export_trip(trip_name: str, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    engine = ctx.engine()
    filename = csv_filename(engine.get_trip(trip_name, user_id))
    return Response(
        content=engine.export_trip_csv(trip_name, user_id),
        media_type="text/csv",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@app.post("/api/trips/{trip_name}/stops", response_model=TripStop, status_code=201)
def add_stop(
    trip_name: str,
    req: StopCreate,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.engine().add_stop(trip_name, req, user_id)


@app.put("/api/trips/{trip_name}/stops/{stop_name}", response_model=TripStop)
def update_stop(
    trip_name: str,
    stop_name: str,
    req: StopUpdate,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.engine().update_stop(trip_name, stop_name, req, user_id)


@app.delete("/api/trips/{trip_name}/stops/{stop_name}", status_code=204)
def delete_stop(
    trip_name: str,
    stop_name: str,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    ctx.engine().delete_stop(trip_name, stop_name, user_id)
    return Response(status_code=204)


@app.post("/api/trips/{trip_name}/stops/{stop_name}/pois/{poi_id}", response_model=TripStop)
def attach_stop_poi(
    trip_name: str,
    stop_name: str,
    poi_id: int,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.engine().attach_poi(trip_name, stop_name, poi_id, user_id)


@app.delete("/api/trips/{trip_name}/stops/{stop_name}/pois/{poi_id}", response_model=TripStop)
def detach_stop_poi(
    trip_name: str,
    stop_name: str,
    poi_id: int,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.engine().detach_poi(trip_name, stop_name, poi_id, user_id)


# ── user POIs ─────────────────────────────────────────

@app.post("/api/pois", response_model=Poi, status_code=201)
def create_poi(req: PoiCreateRequest, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return poi_service.create_poi(
        ctx=ctx,
        owner_id=user_id,
        name=req.name,
        description=req.description,
        latitude=req.latitude,
        longitude=req.longitude,
    )


@app.post("/api/pois/external", response_model=Poi, status_code=201)
def save_external_poi(
    req: ExternalPoiSaveRequest,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return poi_service.save_external_poi(ctx=ctx, owner_id=user_id, poi=ExternalPoi(**req.model_dump()))


@app.get("/api/pois", response_model=list[Poi])
def list_pois(user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return poi_service.list_pois(ctx=ctx, owner_id=user_id)


@app.get("/api/pois/{poi_id}", response_model=Poi)
def get_poi(poi_id: int, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return poi_service.get_poi(ctx=ctx, owner_id=user_id, poi_id=poi_id)


@app.delete("/api/pois/{poi_id}", status_code=204)
def delete_poi(poi_id: int, user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    poi_service.delete_poi(ctx=ctx, owner_id=user_id, poi_id=poi_id)
    return Response(status_code=204)


@app.delete("/api/pois", status_code=204)
def delete_all_pois(user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    poi_service.delete_all_pois(ctx=ctx, owner_id=user_id)
    return Response(status_code=204)


# ── search history ────────────────────────────────────

@app.get("/api/search-history", response_model=list[SearchHistoryEntry])
def search_history(user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return history_service.list_search_history(ctx=ctx, user_id=user_id)


@app.delete("/api/search-history", status_code=204)
def clear_search_history(user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    history_service.clear_search_history(ctx=ctx, user_id=user_id)
    return Response(status_code=204)


# ── users ─────────────────────────────────────────────

@app.get("/api/users/me", response_model=UserProfile)
def current_profile(user_id: int = Depends(current_user), ctx: AppContext = Depends(get_ctx)):
    return user_service.get_current_user(ctx=ctx, user_id=user_id)


@app.put("/api/users/me/profile", response_model=UserProfile)
def update_profile(
    payload: ProfileUpdateRequest,
    user_id: int = Depends(current_user),
    ctx: AppContext = Depends(get_ctx),
):
    return user_service.update_profile(ctx=ctx, user_id=user_id, **payload.model_dump())
