"""Local weather store contract."""

from __future__ import annotations

import datetime as dt
from typing import Protocol

from sunwear.models.weather import WeatherRecord


class WeatherStore(Protocol):
    """Queryable cache of daily weather keyed by location and date."""

    def query(self, location_query: str, date: dt.date) -> WeatherRecord | None:
        """Return the record for *location_query* on *date*, or ``None``."""
        ...
