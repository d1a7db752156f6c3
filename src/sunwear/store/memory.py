"""Dictionary-backed weather store."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

from sunwear.models.weather import WeatherRecord


class MemoryWeatherStore:
    def __init__(self, records: Iterable[WeatherRecord] = ()) -> None:
        self._records: dict[tuple[str, dt.date], WeatherRecord] = {}
        self.query_count = 0
        for record in records:
            self.upsert(record)

    def upsert(self, record: WeatherRecord) -> None:
        self._records[(record.location_query, record.date)] = record

    def query(self, location_query: str, date: dt.date) -> WeatherRecord | None:
        self.query_count += 1
        return self._records.get((location_query.strip(), date))
