"""SQLite implementation of the geography, trip, POI, search-history and profile stores."""

from __future__ import annotations

import datetime as dt
import json
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Optional

from travel_planner.domain.exceptions import BadRequestError, ConflictError, NotFoundError
from travel_planner.domain.models import (
    City,
    Country,
    Poi,
    Region,
    SearchHistoryEntry,
    Tag,
    Trip,
    TripStop,
    UserProfile,
)
from travel_planner.domain.naming import name_key
from travel_planner.persistence.models import PoiRecord, ProfileRecord, SearchRecord, StopRecord, TripRecord


def _to_json(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)


def _from_json(raw: str | None, default: Any) -> Any:
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return default


def _placeholders(count: int) -> str:
    return ",".join("?" for _ in range(count))


_CITY_SELECT = """
    SELECT c.id, c.name, c.latitude, c.longitude, r.id, r.name, co.name
    FROM cities c
    JOIN regions r ON r.id = c.region_id
    JOIN countries co ON co.id = r.country_id
"""

_STOP_SELECT = """
    SELECT s.id, s.trip_id, s.city_id, c.name, r.name, s.stop_name, s.stop_date, s.notes
    FROM trip_stops s
    JOIN cities c ON c.id = s.city_id
    JOIN regions r ON r.id = c.region_id
"""


class SQLiteTravelRepository:
    backend = "sqlite"

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=5.0)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA foreign_keys=ON;")
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        """One serialized transaction; commits on success, rolls back on error."""
        with self._lock:
            conn = self._connect()
            try:
                with conn:
                    yield conn
            finally:
                conn.close()

    def _init_schema(self) -> None:
        with self._session() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS countries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL UNIQUE
                );

                CREATE TABLE IF NOT EXISTS regions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    country_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL,
                    UNIQUE(country_id, name_key),
                    FOREIGN KEY(country_id) REFERENCES countries(id)
                );

                CREATE TABLE IF NOT EXISTS tags (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL UNIQUE
                );

                CREATE TABLE IF NOT EXISTS cities (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    region_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL,
                    latitude REAL NOT NULL,
                    longitude REAL NOT NULL,
                    FOREIGN KEY(region_id) REFERENCES regions(id)
                );

                CREATE TABLE IF NOT EXISTS city_tags (
                    city_id INTEGER NOT NULL,
                    tag_id INTEGER NOT NULL,
                    PRIMARY KEY(city_id, tag_id),
                    FOREIGN KEY(city_id) REFERENCES cities(id) ON DELETE CASCADE,
                    FOREIGN KEY(tag_id) REFERENCES tags(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS trips (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    end_date TEXT NOT NULL,
                    UNIQUE(owner_id, name_key)
                );

                CREATE TABLE IF NOT EXISTS trip_stops (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    trip_id INTEGER NOT NULL,
                    city_id INTEGER NOT NULL,
                    stop_name TEXT NOT NULL,
                    stop_key TEXT NOT NULL,
                    stop_date TEXT NOT NULL,
                    notes TEXT,
                    UNIQUE(trip_id, stop_key),
                    FOREIGN KEY(trip_id) REFERENCES trips(id) ON DELETE CASCADE,
                    FOREIGN KEY(city_id) REFERENCES cities(id)
                );

                CREATE TABLE IF NOT EXISTS pois (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER NOT NULL,
                    external_id TEXT,
                    name TEXT NOT NULL,
                    name_key TEXT NOT NULL,
                    description TEXT,
                    latitude REAL,
                    longitude REAL,
                    raw_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    UNIQUE(owner_id, name_key)
                );

                CREATE TABLE IF NOT EXISTS stop_pois (
                    stop_id INTEGER NOT NULL,
                    poi_id INTEGER NOT NULL,
                    PRIMARY KEY(stop_id, poi_id),
                    FOREIGN KEY(stop_id) REFERENCES trip_stops(id) ON DELETE CASCADE,
                    FOREIGN KEY(poi_id) REFERENCES pois(id) ON DELETE CASCADE
                );

                CREATE TABLE IF NOT EXISTS search_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    query TEXT NOT NULL,
                    city_id INTEGER,
                    searched_at TEXT NOT NULL,
                    FOREIGN KEY(city_id) REFERENCES cities(id) ON DELETE SET NULL
                );

                CREATE TABLE IF NOT EXISTS user_profiles (
                    user_id INTEGER PRIMARY KEY,
                    first_name TEXT,
                    last_name TEXT,
                    preferred_units TEXT CHECK (preferred_units IN ('metric', 'imperial')),
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_cities_name_key ON cities(name_key);
                CREATE INDEX IF NOT EXISTS idx_cities_region_id ON cities(region_id);
                CREATE INDEX IF NOT EXISTS idx_trip_stops_trip_id ON trip_stops(trip_id);
                CREATE INDEX IF NOT EXISTS idx_search_history_user_id ON search_history(user_id);
                """
            )

    # ── geography: seeding ────────────────────────────────

    def add_country(self, name: str) -> Country:
        with self._session() as conn:
            cur = conn.execute(
                "INSERT INTO countries (name, name_key) VALUES (?, ?)",
                (name, name_key(name)),
            )
            return Country(id=int(cur.lastrowid), name=name)

    def add_region(self, name: str, country_id: int) -> Region:
        with self._session() as conn:
            cur = conn.execute(
                "INSERT INTO regions (country_id, name, name_key) VALUES (?, ?, ?)",
                (country_id, name, name_key(name)),
            )
            country = conn.execute("SELECT name FROM countries WHERE id = ?", (country_id,)).fetchone()
            return Region(
                id=int(cur.lastrowid),
                name=name,
                country_id=country_id,
                country_name=country[0] if country else "",
            )

    def add_tag(self, name: str) -> Tag:
        with self._session() as conn:
            return Tag(id=self._ensure_tag(conn, name), name=name)

    def add_city(
        self,
        name: str,
        region_id: int,
        latitude: float,
        longitude: float,
        tags: Iterable[str] = (),
    ) -> City:
        with self._session() as conn:
            cur = conn.execute(
                "INSERT INTO cities (region_id, name, name_key, latitude, longitude) VALUES (?, ?, ?, ?, ?)",
                (region_id, name, name_key(name), latitude, longitude),
            )
            city_id = int(cur.lastrowid)
            for tag in tags:
                tag_id = self._ensure_tag(conn, tag)
                conn.execute(
                    "INSERT OR IGNORE INTO city_tags (city_id, tag_id) VALUES (?, ?)",
                    (city_id, tag_id),
                )
            return self._load_cities(conn, "WHERE c.id = ?", (city_id,))[0]

    @staticmethod
    def _ensure_tag(conn: sqlite3.Connection, name: str) -> int:
        row = conn.execute("SELECT id FROM tags WHERE name_key = ?", (name_key(name),)).fetchone()
        if row is not None:
            return int(row[0])
        cur = conn.execute("INSERT INTO tags (name, name_key) VALUES (?, ?)", (name, name_key(name)))
        return int(cur.lastrowid)

    # ── geography: lookups ────────────────────────────────

    def _load_cities(
        self,
        conn: sqlite3.Connection,
        where: str = "",
        params: tuple[Any, ...] = (),
    ) -> list[City]:
        rows = conn.execute(f"{_CITY_SELECT} {where} ORDER BY c.id ASC", params).fetchall()
        if not rows:
            return []
        ids = [row[0] for row in rows]
        tag_rows = conn.execute(
            f"""
            SELECT ct.city_id, t.name
            FROM city_tags ct
            JOIN tags t ON t.id = ct.tag_id
            WHERE ct.city_id IN ({_placeholders(len(ids))})
            ORDER BY t.name ASC
            """,
            ids,
        ).fetchall()
        tags_by_city: dict[int, list[str]] = {}
        for city_id, tag_name in tag_rows:
            tags_by_city.setdefault(city_id, []).append(tag_name)
        return [
            City(
                id=row[0],
                name=row[1],
                latitude=row[2],
                longitude=row[3],
                region_id=row[4],
                region_name=row[5],
                country_name=row[6],
                tags=tags_by_city.get(row[0], []),
            )
            for row in rows
        ]

    def find_city_by_id(self, city_id: int) -> Optional[City]:
        with self._session() as conn:
            cities = self._load_cities(conn, "WHERE c.id = ?", (city_id,))
        return cities[0] if cities else None

    def find_cities_by_name(self, name: str) -> list[City]:
        with self._session() as conn:
            return self._load_cities(conn, "WHERE c.name_key = ?", (name_key(name),))

    def find_city_by_name_and_region(self, name: str, region_name: str) -> Optional[City]:
        with self._session() as conn:
            cities = self._load_cities(
                conn,
                "WHERE c.name_key = ? AND r.name_key = ?",
                (name_key(name), name_key(region_name)),
            )
        return cities[0] if cities else None

    def find_cities_by_tags(self, tags: list[str]) -> list[City]:
        keys = [name_key(tag) for tag in tags if tag.strip()]
        if not keys:
            return []
        with self._session() as conn:
            return self._load_cities(
                conn,
                f"""
                WHERE c.id IN (
                    SELECT ct.city_id FROM city_tags ct
                    JOIN tags t ON t.id = ct.tag_id
                    WHERE t.name_key IN ({_placeholders(len(keys))})
                )
                """,
                tuple(keys),
            )

    def search_cities_by_name(self, fragment: str) -> list[City]:
        with self._session() as conn:
            return self._load_cities(conn, "WHERE instr(c.name_key, ?) > 0", (name_key(fragment),))

    def list_cities(self) -> list[City]:
        with self._session() as conn:
            return self._load_cities(conn)

    def list_cities_by_region_name(self, region_name: str) -> list[City]:
        with self._session() as conn:
            return self._load_cities(conn, "WHERE r.name_key = ?", (name_key(region_name),))

    def list_countries(self) -> list[Country]:
        with self._session() as conn:
            rows = conn.execute("SELECT id, name FROM countries ORDER BY name ASC").fetchall()
        return [Country(id=row[0], name=row[1]) for row in rows]

    def find_country_by_name(self, name: str) -> Optional[Country]:
        with self._session() as conn:
            row = conn.execute(
                "SELECT id, name FROM countries WHERE name_key = ?",
                (name_key(name),),
            ).fetchone()
        return Country(id=row[0], name=row[1]) if row else None

    def _load_regions(self, where: str = "", params: tuple[Any, ...] = ()) -> list[Region]:
        with self._session() as conn:
            rows = conn.execute(
                f"""
                SELECT r.id, r.name, co.id, co.name
                FROM regions r
                JOIN countries co ON co.id = r.country_id
                {where}
                ORDER BY r.id ASC
                """,
                params,
            ).fetchall()
        return [Region(id=row[0], name=row[1], country_id=row[2], country_name=row[3]) for row in rows]

    def list_regions(self) -> list[Region]:
        return self._load_regions()

    def list_regions_by_country_name(self, country_name: str) -> list[Region]:
        return self._load_regions("WHERE co.name_key = ?", (name_key(country_name),))

    def find_regions_by_name(self, name: str) -> list[Region]:
        return self._load_regions("WHERE r.name_key = ?", (name_key(name),))

    def find_region_by_name_and_country(self, name: str, country_name: str) -> Optional[Region]:
        regions = self._load_regions(
            "WHERE r.name_key = ? AND co.name_key = ?",
            (name_key(name), name_key(country_name)),
        )
        return regions[0] if regions else None

    def list_tags(self) -> list[Tag]:
        with self._session() as conn:
            rows = conn.execute("SELECT id, name FROM tags ORDER BY name ASC").fetchall()
        return [Tag(id=row[0], name=row[1]) for row in rows]

    # ── trips ─────────────────────────────────────────────

    def _load_stops(self, conn: sqlite3.Connection, where: str, params: tuple[Any, ...]) -> list[TripStop]:
        rows = conn.execute(
            f"{_STOP_SELECT} {where} ORDER BY s.stop_date ASC, s.id ASC",
            params,
        ).fetchall()
        if not rows:
            return []
        ids = [row[0] for row in rows]
        link_rows = conn.execute(
            f"""
            SELECT stop_id, poi_id FROM stop_pois
            WHERE stop_id IN ({_placeholders(len(ids))})
            ORDER BY poi_id ASC
            """,
            ids,
        ).fetchall()
        pois_by_stop: dict[int, list[int]] = {}
        for stop_id, poi_id in link_rows:
            pois_by_stop.setdefault(stop_id, []).append(poi_id)
        return [
            TripStop(
                id=row[0],
                trip_id=row[1],
                city_id=row[2],
                city_name=row[3],
                region_name=row[4],
                stop_name=row[5],
                stop_date=dt.date.fromisoformat(row[6]),
                notes=row[7],
                poi_ids=pois_by_stop.get(row[0], []),
            )
            for row in rows
        ]

    def _load_trips(self, conn: sqlite3.Connection, where: str, params: tuple[Any, ...]) -> list[Trip]:
        rows = conn.execute(
            f"""
            SELECT id, owner_id, name, start_date, end_date
            FROM trips
            {where}
            ORDER BY start_date DESC, id DESC
            """,
            params,
        ).fetchall()
        return [
            Trip(
                id=row[0],
                owner_id=row[1],
                name=row[2],
                start_date=dt.date.fromisoformat(row[3]),
                end_date=dt.date.fromisoformat(row[4]),
                stops=self._load_stops(conn, "WHERE s.trip_id = ?", (row[0],)),
            )
            for row in rows
        ]

    def create_trip(self, record: TripRecord) -> Trip:
        try:
            with self._session() as conn:
                cur = conn.execute(
                    """
                    INSERT INTO trips (owner_id, name, name_key, start_date, end_date)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        record.owner_id,
                        record.name,
                        name_key(record.name),
                        record.start_date.isoformat(),
                        record.end_date.isoformat(),
                    ),
                )
                return self._load_trips(conn, "WHERE id = ?", (int(cur.lastrowid),))[0]
        except sqlite3.IntegrityError:
            raise ConflictError(f"Trip '{record.name}' already exists") from None

    @staticmethod
    def _require_trip(conn: sqlite3.Connection, trip_id: int) -> None:
        if conn.execute("SELECT 1 FROM trips WHERE id = ?", (trip_id,)).fetchone() is None:
            raise NotFoundError("Trip", trip_id)

    def update_trip(self, trip_id: int, record: TripRecord) -> Trip:
        """Rejected with ``BadRequestError`` if any stored stop falls outside the new range."""
        start = record.start_date.isoformat()
        end = record.end_date.isoformat()
        try:
            with self._session() as conn:
                cur = conn.execute(
                    """
                    UPDATE trips SET name = ?, name_key = ?, start_date = ?, end_date = ?
                    WHERE id = ? AND owner_id = ? AND ? <= ? AND NOT EXISTS (
                        SELECT 1 FROM trip_stops
                        WHERE trip_id = ? AND (stop_date < ? OR stop_date > ?)
                    )
                    """,
                    (
                        record.name,
                        name_key(record.name),
                        start,
                        end,
                        trip_id,
                        record.owner_id,
                        start,
                        end,
                        trip_id,
                        start,
                        end,
                    ),
                )
                if cur.rowcount == 0:
                    self._require_trip(conn, trip_id)
                    raise BadRequestError(
                        f"Trip dates {start} to {end} would leave a stop outside the trip range"
                    )
                return self._load_trips(conn, "WHERE id = ?", (trip_id,))[0]
        except sqlite3.IntegrityError:
            raise ConflictError(f"Trip '{record.name}' already exists") from None

    def delete_trip(self, trip_id: int) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM trips WHERE id = ?", (trip_id,))

    def find_trip_by_name_and_owner(self, name: str, owner_id: int) -> Optional[Trip]:
        with self._session() as conn:
            trips = self._load_trips(conn, "WHERE name_key = ? AND owner_id = ?", (name_key(name), owner_id))
        return trips[0] if trips else None

    def list_trips_by_owner(self, owner_id: int) -> list[Trip]:
        with self._session() as conn:
            return self._load_trips(conn, "WHERE owner_id = ?", (owner_id,))

    def find_stop_by_name_and_trip(self, stop_name: str, trip_id: int) -> Optional[TripStop]:
        with self._session() as conn:
            stops = self._load_stops(
                conn,
                "WHERE s.stop_key = ? AND s.trip_id = ?",
                (name_key(stop_name), trip_id),
            )
        return stops[0] if stops else None

    def find_stop(self, stop_name: str, trip_name: str, owner_id: int) -> Optional[TripStop]:
        with self._session() as conn:
            stops = self._load_stops(
                conn,
                """
                WHERE s.stop_key = ? AND s.trip_id IN (
                    SELECT id FROM trips WHERE name_key = ? AND owner_id = ?
                )
                """,
                (name_key(stop_name), name_key(trip_name), owner_id),
            )
        return stops[0] if stops else None

    def add_stop(self, record: StopRecord) -> TripStop:
        """Insert only while the stop date lies inside the stored trip range."""
        stop_date = record.stop_date.isoformat()
        try:
            with self._session() as conn:
                cur = conn.execute(
                    """
                    INSERT INTO trip_stops (trip_id, city_id, stop_name, stop_key, stop_date, notes)
                    SELECT id, ?, ?, ?, ?, ? FROM trips
                    WHERE id = ? AND ? BETWEEN start_date AND end_date
                    """,
                    (
                        record.city_id,
                        record.stop_name,
                        name_key(record.stop_name),
                        stop_date,
                        record.notes,
                        record.trip_id,
                        stop_date,
                    ),
                )
                if cur.rowcount == 0:
                    self._require_trip(conn, record.trip_id)
                    raise BadRequestError(f"Stop date {stop_date} must be within trip dates")
                return self._load_stops(conn, "WHERE s.id = ?", (int(cur.lastrowid),))[0]
        except sqlite3.IntegrityError:
            raise ConflictError(f"Stop '{record.stop_name}' already exists in this trip") from None

    def update_stop(self, stop_id: int, stop_name: str, stop_date: dt.date, notes: Optional[str]) -> TripStop:
        day = stop_date.isoformat()
        try:
            with self._session() as conn:
                cur = conn.execute(
                    """
                    UPDATE trip_stops SET stop_name = ?, stop_key = ?, stop_date = ?, notes = ?
                    WHERE id = ? AND EXISTS (
                        SELECT 1 FROM trips t
                        WHERE t.id = trip_stops.trip_id AND ? BETWEEN t.start_date AND t.end_date
                    )
                    """,
                    (stop_name, name_key(stop_name), day, notes, stop_id, day),
                )
                if cur.rowcount == 0:
                    if conn.execute("SELECT 1 FROM trip_stops WHERE id = ?", (stop_id,)).fetchone() is None:
                        raise NotFoundError("Stop", stop_id)
                    raise BadRequestError(f"Stop date {day} must be within trip dates")
                return self._load_stops(conn, "WHERE s.id = ?", (stop_id,))[0]
        except sqlite3.IntegrityError:
            raise ConflictError(f"Stop '{stop_name}' already exists in this trip") from None

    def delete_stop(self, stop_id: int) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM trip_stops WHERE id = ?", (stop_id,))

    def attach_poi(self, stop_id: int, poi_id: int) -> None:
        with self._session() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO stop_pois (stop_id, poi_id) VALUES (?, ?)",
                (stop_id, poi_id),
            )

    def detach_poi(self, stop_id: int, poi_id: int) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM stop_pois WHERE stop_id = ? AND poi_id = ?", (stop_id, poi_id))

    # ── user POIs ─────────────────────────────────────────

    @staticmethod
    def _row_to_poi(row: tuple[Any, ...]) -> Poi:
        return Poi(
            id=row[0],
            owner_id=row[1],
            external_id=row[2],
            name=row[3],
            description=row[4],
            latitude=row[5],
            longitude=row[6],
            raw=_from_json(row[7], {}),
            created_at=dt.datetime.fromisoformat(row[8]),
        )

    def _load_pois(self, where: str, params: tuple[Any, ...]) -> list[Poi]:
        with self._session() as conn:
            rows = conn.execute(
                f"""
                SELECT id, owner_id, external_id, name, description, latitude, longitude, raw_json, created_at
                FROM pois
                {where}
                ORDER BY created_at DESC, id DESC
                """,
                params,
            ).fetchall()
        return [self._row_to_poi(row) for row in rows]

    def create_poi(self, record: PoiRecord) -> Poi:
        try:
            with self._session() as conn:
                cur = conn.execute(
                    """
                    INSERT INTO pois (
                        owner_id, external_id, name, name_key, description,
                        latitude, longitude, raw_json, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.owner_id,
                        record.external_id,
                        record.name,
                        name_key(record.name),
                        record.description,
                        record.latitude,
                        record.longitude,
                        _to_json(record.raw),
                        record.created_at.isoformat(),
                    ),
                )
                poi_id = int(cur.lastrowid)
        except sqlite3.IntegrityError:
            raise ConflictError(f"POI with name '{record.name}' already exists for this user") from None
        return self._load_pois("WHERE id = ?", (poi_id,))[0]

    def find_poi_by_id(self, poi_id: int) -> Optional[Poi]:
        pois = self._load_pois("WHERE id = ?", (poi_id,))
        return pois[0] if pois else None

    def find_poi_by_owner_and_name(self, owner_id: int, name: str) -> Optional[Poi]:
        pois = self._load_pois("WHERE owner_id = ? AND name_key = ?", (owner_id, name_key(name)))
        return pois[0] if pois else None

    def list_pois_by_owner(self, owner_id: int) -> list[Poi]:
        return self._load_pois("WHERE owner_id = ?", (owner_id,))

    def delete_poi(self, poi_id: int) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM pois WHERE id = ?", (poi_id,))

    def delete_pois_by_owner(self, owner_id: int) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM pois WHERE owner_id = ?", (owner_id,))

    # ── search history ────────────────────────────────────

    def append_search(self, record: SearchRecord) -> SearchHistoryEntry:
        with self._session() as conn:
            cur = conn.execute(
                "INSERT INTO search_history (user_id, query, city_id, searched_at) VALUES (?, ?, ?, ?)",
                (record.user_id, record.query, record.city_id, record.searched_at.isoformat()),
            )
            entry_id = int(cur.lastrowid)
        return SearchHistoryEntry(
            id=entry_id,
            user_id=record.user_id,
            query=record.query,
            city_id=record.city_id,
            searched_at=record.searched_at,
        )

    def list_searches_by_user(self, user_id: int, limit: int = 100) -> list[SearchHistoryEntry]:
        safe_limit = max(1, min(limit, 500))
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT h.id, h.user_id, h.query, h.city_id, c.name, h.searched_at
                FROM search_history h
                LEFT JOIN cities c ON c.id = h.city_id
                WHERE h.user_id = ?
                ORDER BY h.searched_at DESC, h.id DESC
                LIMIT ?
                """,
                (user_id, safe_limit),
            ).fetchall()
        return [
            SearchHistoryEntry(
                id=row[0],
                user_id=row[1],
                query=row[2],
                city_id=row[3],
                city_name=row[4],
                searched_at=dt.datetime.fromisoformat(row[5]),
            )
            for row in rows
        ]

    def clear_searches_by_user(self, user_id: int) -> None:
        with self._session() as conn:
            conn.execute("DELETE FROM search_history WHERE user_id = ?", (user_id,))


    # ── user profiles ─────────────────────────────────────

    def find_profile(self, user_id: int) -> Optional[UserProfile]:
        with self._session() as conn:
            row = conn.execute(
                """
                SELECT user_id, first_name, last_name, preferred_units, updated_at
                FROM user_profiles WHERE user_id = ?
                """,
                (user_id,),
            ).fetchone()
        if row is None:
            return None
        return UserProfile(
            user_id=row[0],
            first_name=row[1],
            last_name=row[2],
            preferred_units=row[3],
            updated_at=dt.datetime.fromisoformat(row[4]),
        )

    def save_profile(self, record: ProfileRecord) -> UserProfile:
        """Insert or replace the whole profile row for ``record.user_id``."""
        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO user_profiles (user_id, first_name, last_name, preferred_units, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    first_name = excluded.first_name,
                    last_name = excluded.last_name,
                    preferred_units = excluded.preferred_units,
                    updated_at = excluded.updated_at
                """,
                (
                    record.user_id,
                    record.first_name,
                    record.last_name,
                    record.preferred_units,
                    record.updated_at.isoformat(),
                ),
            )
        return UserProfile(**record.model_dump())


__all__ = ["SQLiteTravelRepository"]
