from __future__ import annotations

import datetime as dt

import pytest

from sunwear.models.weather import WeatherRecord


@pytest.fixture
def today() -> dt.date:
    return dt.date(2026, 10, 18)


@pytest.fixture
def record(today: dt.date) -> WeatherRecord:
    return WeatherRecord(location_query="94043", date=today, condition_id=800, max_temp=21.0, min_temp=12.0)
