"""Data models for digests, sync envelopes and stored weather."""

from sunwear.models._base import SunwearBaseModel, UtcTimestamp, parse_timestamp
from sunwear.models.digest import WeatherDigest
from sunwear.models.sync import ChangeEvent, FieldValue, PutResult, SyncItem
from sunwear.models.weather import WeatherRecord

__all__ = [
    "ChangeEvent",
    "FieldValue",
    "PutResult",
    "SunwearBaseModel",
    "SyncItem",
    "UtcTimestamp",
    "WeatherDigest",
    "WeatherRecord",
    "parse_timestamp",
]
