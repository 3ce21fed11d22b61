"""Trip itinerary rules: trips, dated stops and stop-POI links.

Every lookup is scoped by owner. A trip, stop or POI owned by someone else
is indistinguishable from a missing one and raises ``NotFoundError``.
"""

from __future__ import annotations

import datetime as dt
import logging
from travel_planner.application.city_resolver import CityResolver
from travel_planner.application.contracts import StopCreate, StopUpdate, TripCreate, TripUpdate
from travel_planner.domain.exceptions import BadRequestError, ConflictError, NotFoundError
from travel_planner.domain.models import Trip, TripStop
from travel_planner.domain.naming import derive_stop_name, name_key
from travel_planner.persistence.models import StopRecord, TripRecord
from travel_planner.persistence.repository import PoiStore, TripStore
from travel_planner.services.export_formatter import export_trip_to_csv

_logger = logging.getLogger("travel-planner.itinerary")


def _check_range(start_date: dt.date, end_date: dt.date) -> None:
    if start_date > end_date:
        raise BadRequestError("Start date must be before or equal to end date")


def _check_stop_in_trip(trip: Trip, stop_date: dt.date) -> None:
    if not trip.contains(stop_date):
        raise BadRequestError(
            f"Stop date {stop_date.isoformat()} must be within trip dates "
            f"({trip.start_date.isoformat()} to {trip.end_date.isoformat()})"
        )


class TripItineraryEngine:
    def __init__(self, trips: TripStore, resolver: CityResolver, pois: PoiStore):
        self._trips = trips
        self._resolver = resolver
        self._pois = pois

    # ── lookups ───────────────────────────────────────────

    def list_trips(self, owner_id: int) -> list[Trip]:
        return self._trips.list_trips_by_owner(owner_id)

    def get_trip(self, trip_name: str, owner_id: int) -> Trip:
        trip = self._trips.find_trip_by_name_and_owner(trip_name, owner_id)
        if trip is None:
            raise NotFoundError("Trip", trip_name)
        return trip

    def _locate_stop(self, trip_name: str, stop_name: str, owner_id: int) -> TripStop:
        stop = self._trips.find_stop(stop_name, trip_name, owner_id)
        if stop is None:
            # Report the missing trip before the missing stop.
            self.get_trip(trip_name, owner_id)
            raise NotFoundError("Stop", stop_name)
        return stop

    # ── trips ─────────────────────────────────────────────

    def create_trip(self, payload: TripCreate, owner_id: int) -> Trip:
        _check_range(payload.start_date, payload.end_date)
        if self._trips.find_trip_by_name_and_owner(payload.name, owner_id) is not None:
            raise ConflictError(f"Trip with name '{payload.name}' already exists")
        trip = self._trips.create_trip(
            TripRecord(
                owner_id=owner_id,
                name=payload.name,
                start_date=payload.start_date,
                end_date=payload.end_date,
            )
        )
        _logger.info("created trip id=%s owner=%s", trip.id, owner_id)
        return trip

    def update_trip(self, trip_name: str, patch: TripUpdate, owner_id: int) -> Trip:
        """Apply ``patch`` only if the resulting trip keeps every stop in range."""
        trip = self.get_trip(trip_name, owner_id)
        new_name = patch.name if patch.name is not None else trip.name
        new_start = patch.start_date if patch.start_date is not None else trip.start_date
        new_end = patch.end_date if patch.end_date is not None else trip.end_date

        _check_range(new_start, new_end)
        for stop in trip.stops:
            if not new_start <= stop.stop_date <= new_end:
                raise BadRequestError(
                    f"Stop '{stop.stop_name}' on {stop.stop_date.isoformat()} would fall outside "
                    f"the new trip dates ({new_start.isoformat()} to {new_end.isoformat()})"
                )

        if name_key(new_name) != name_key(trip.name):
            clash = self._trips.find_trip_by_name_and_owner(new_name, owner_id)
            if clash is not None and clash.id != trip.id:
                raise ConflictError(f"Trip with name '{new_name}' already exists")

        updated = self._trips.update_trip(
            trip.id,
            TripRecord(owner_id=owner_id, name=new_name, start_date=new_start, end_date=new_end),
        )
        _logger.info("updated trip id=%s owner=%s", trip.id, owner_id)
        return updated

    def delete_trip(self, trip_name: str, owner_id: int) -> None:
        trip = self.get_trip(trip_name, owner_id)
        self._trips.delete_trip(trip.id)
        _logger.info("deleted trip id=%s owner=%s", trip.id, owner_id)

    # ── stops ─────────────────────────────────────────────

    def add_stop(self, trip_name: str, payload: StopCreate, owner_id: int) -> TripStop:
        trip = self.get_trip(trip_name, owner_id)
        _check_stop_in_trip(trip, payload.stop_date)
        city = self._resolver.resolve_or_raise(payload.city_name, payload.region_name)

        stop_name = derive_stop_name(city.name, payload.stop_date)
        if self._trips.find_stop_by_name_and_trip(stop_name, trip.id) is not None:
            raise ConflictError(f"Stop '{stop_name}' already exists in this trip")

        stop = self._trips.add_stop(
            StopRecord(
                trip_id=trip.id,
                city_id=city.id,
                stop_name=stop_name,
                stop_date=payload.stop_date,
                notes=payload.notes,
            )
        )
        _logger.info("added stop %s to trip id=%s", stop_name, trip.id)
        return stop

    def update_stop(self, trip_name: str, stop_name: str, patch: StopUpdate, owner_id: int) -> TripStop:
        stop = self._locate_stop(trip_name, stop_name, owner_id)
        trip = self.get_trip(trip_name, owner_id)

        new_name = stop.stop_name
        new_date = stop.stop_date
        if patch.stop_date is not None:
            _check_stop_in_trip(trip, patch.stop_date)
            new_date = patch.stop_date
            new_name = derive_stop_name(stop.city_name, new_date)
            clash = self._trips.find_stop_by_name_and_trip(new_name, trip.id)
            if clash is not None and clash.id != stop.id:
                raise ConflictError(f"Stop '{new_name}' already exists in this trip")

        notes = patch.notes if patch.notes is not None else stop.notes
        return self._trips.update_stop(stop.id, new_name, new_date, notes)

    def delete_stop(self, trip_name: str, stop_name: str, owner_id: int) -> None:
        stop = self._locate_stop(trip_name, stop_name, owner_id)
        self._trips.delete_stop(stop.id)
        _logger.info("deleted stop %s from trip id=%s", stop.stop_name, stop.trip_id)

    # ── stop POIs ─────────────────────────────────────────

    def _owned_poi_id(self, poi_id: int, owner_id: int) -> int:
        poi = self._pois.find_poi_by_id(poi_id)
        if poi is None or poi.owner_id != owner_id:
            raise NotFoundError("POI", poi_id)
        return poi.id

    def attach_poi(self, trip_name: str, stop_name: str, poi_id: int, owner_id: int) -> TripStop:
        stop = self._locate_stop(trip_name, stop_name, owner_id)
        self._trips.attach_poi(stop.id, self._owned_poi_id(poi_id, owner_id))
        return self._locate_stop(trip_name, stop.stop_name, owner_id)

    def detach_poi(self, trip_name: str, stop_name: str, poi_id: int, owner_id: int) -> TripStop:
        stop = self._locate_stop(trip_name, stop_name, owner_id)
        self._trips.detach_poi(stop.id, self._owned_poi_id(poi_id, owner_id))
        return self._locate_stop(trip_name, stop.stop_name, owner_id)

    # ── export ────────────────────────────────────────────

    def export_trip_csv(self, trip_name: str, owner_id: int) -> str:
        return export_trip_to_csv(self.get_trip(trip_name, owner_id))


__all__ = ["TripItineraryEngine"]
