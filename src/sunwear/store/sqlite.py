"""SQLite-backed weather store.

One row per ``(location_query, date)``; dates are stored as ISO strings.
"""

from __future__ import annotations

import datetime as dt
import logging
import sqlite3
import threading
from contextlib import closing
from typing import Any

from pydantic import ValidationError

from sunwear.exceptions import SunwearStoreError
from sunwear.models.weather import WeatherRecord

_logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS weather (
    location_query TEXT NOT NULL,
    date TEXT NOT NULL,
    weather_id INTEGER NOT NULL,
    max_temp REAL NOT NULL,
    min_temp REAL NOT NULL,
    PRIMARY KEY (location_query, date)
)
"""


class SqliteWeatherStore:
    """Weather store on a SQLite file (``":memory:"`` works too).

    Usage::

        with SqliteWeatherStore("weather.db") as store:
            record = store.query("94043", datetime.date.today())
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = threading.Lock()
        try:
            # Queries run on executor threads; _lock serializes use of the shared connection.
            self._conn = sqlite3.connect(path, check_same_thread=False)
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as exc:
            raise SunwearStoreError(f"Cannot open weather store {path!r}: {exc}") from exc

    def __enter__(self) -> SqliteWeatherStore:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def upsert(self, record: WeatherRecord) -> None:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT OR REPLACE INTO weather (location_query, date, weather_id, max_temp, min_temp) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        record.location_query,
                        record.date.isoformat(),
                        record.condition_id,
                        record.max_temp,
                        record.min_temp,
                    ),
                )
        except sqlite3.Error as exc:
            raise SunwearStoreError(f"Cannot write weather row: {exc}") from exc

    def query(self, location_query: str, date: dt.date) -> WeatherRecord | None:
        try:
            with self._lock, closing(self._conn.cursor()) as cursor:
                cursor.execute(
                    "SELECT weather_id, max_temp, min_temp FROM weather WHERE location_query = ? AND date = ?",
                    (location_query.strip(), date.isoformat()),
                )
                row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise SunwearStoreError(f"Weather query failed: {exc}") from exc

        if row is None:
            return None
        try:
            return WeatherRecord(
                location_query=location_query,
                date=date,
                condition_id=row[0],
                max_temp=row[1],
                min_temp=row[2],
            )
        except ValidationError:
            _logger.debug("Discarding malformed weather row %r", row, exc_info=True)
            return None
