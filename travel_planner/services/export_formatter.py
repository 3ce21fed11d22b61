"""Trip export renderers."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

from travel_planner.domain.models import Trip

CSV_HEADER = ("Trip Name", "Start Date", "End Date", "Stop Name", "Stop Date", "City", "Region", "Notes")

_UNSAFE_FALLBACK_CHARS = re.compile(r"[^\x20-\x7e]")


def _quote(value: Any) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def _csv_line(fields: tuple[Any, ...]) -> str:
    return ",".join(_quote(field) for field in fields) + "\n"


def export_trip_to_csv(trip: Trip) -> str:
    """One header line, then one row per stop in stored (date) order.

    Every data field is double-quoted; the header is left bare.
    """
    lines = [",".join(CSV_HEADER) + "\n"]
    for stop in trip.stops:
        lines.append(
            _csv_line(
                (
                    trip.name,
                    trip.start_date.isoformat(),
                    trip.end_date.isoformat(),
                    stop.stop_name,
                    stop.stop_date.isoformat(),
                    stop.city_name,
                    stop.region_name,
                    stop.notes,
                )
            )
        )
    return "".join(lines)


def csv_filename(trip: Trip) -> str:
    return f"trip_{trip.name}.csv"


def content_disposition(filename: str) -> str:
    """Attachment header safe for Latin-1 transport, with the exact name in ``filename*``."""
    fallback = _UNSAFE_FALLBACK_CHARS.sub("_", filename).replace('"', "").replace("\\", "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


__all__ = ["CSV_HEADER", "content_disposition", "csv_filename", "export_trip_to_csv"]
