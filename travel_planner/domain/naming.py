"""Derived stop names."""

from __future__ import annotations

import datetime as dt
import re

_WHITESPACE_RUN = re.compile(r"\s+")


def derive_stop_name(city_name: str, stop_date: dt.date) -> str:
    """Return the stop identity for a city visited on a given day.

    ``derive_stop_name("San Marino", date(2024, 6, 5)) == "san_marino_2024-06-05"``
    """
    slug = _WHITESPACE_RUN.sub("_", city_name.lower())
    return f"{slug}_{stop_date.isoformat()}"


def name_key(value: str) -> str:
    """Case-insensitive comparison key for user-facing names."""
    return value.lower()
