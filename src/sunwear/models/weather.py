"""Rows of the local weather store."""

from __future__ import annotations

import datetime as dt

from pydantic import field_validator

from sunwear.models._base import SunwearBaseModel


class WeatherRecord(SunwearBaseModel):
    """One day of cached weather for a location.

    Temperatures are raw Celsius values; formatting happens at publish time.
    """

    location_query: str
    date: dt.date
    condition_id: int
    max_temp: float
    min_temp: float

    @field_validator("location_query")
    @classmethod
    def _strip_location(cls, value: str) -> str:
        location = value.strip()
        if not location:
            raise ValueError("location_query must be non-empty")
        return location
