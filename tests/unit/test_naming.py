"""Stop-name derivation tests."""

from __future__ import annotations

import datetime as dt

from travel_planner.domain.naming import derive_stop_name, name_key


def test_derive_stop_name_lowercases_and_appends_iso_date():
    assert derive_stop_name("Roma", dt.date(2024, 6, 5)) == "roma_2024-06-05"


def test_derive_stop_name_collapses_whitespace_runs():
    assert derive_stop_name("New   York\tCity", dt.date(2024, 1, 2)) == "new_york_city_2024-01-02"


def test_derive_stop_name_is_pure():
    day = dt.date(2025, 12, 31)
    assert derive_stop_name("San Marino", day) == derive_stop_name("San Marino", day)


def test_name_key_is_case_insensitive():
    assert name_key("Italy 2024") == name_key("ITALY 2024")
