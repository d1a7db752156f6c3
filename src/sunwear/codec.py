"""Digest encoding and decoding.

The digest travels as a :class:`~sunwear.models.SyncItem` at
``/weather`` with exactly three fields::

    KEY_WEATHER_ID -> int
    KEY_MAX_TEMP   -> str (pre-formatted)
    KEY_MIN_TEMP   -> str (pre-formatted)

The encoder always writes all three. The decoder tolerates any subset and
ignores keys it does not know, including the ``DATA`` bootstrap marker.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

from sunwear._constants import KEY_BOOTSTRAP, KEY_MAX_TEMP, KEY_MIN_TEMP, KEY_WEATHER_ID, WEATHER_PATH
from sunwear._normalize import safe_int, safe_str
from sunwear.formatting import format_temperature
from sunwear.models.digest import WeatherDigest
from sunwear.models.sync import SyncItem
from sunwear.models.weather import WeatherRecord

_logger = logging.getLogger(__name__)


def encode(condition_id: int, high_temp: str, low_temp: str) -> SyncItem:
    """Build the digest item for ``/weather``."""
    return SyncItem(
        path=WEATHER_PATH,
        fields={
            KEY_WEATHER_ID: int(condition_id),
            KEY_MAX_TEMP: high_temp,
            KEY_MIN_TEMP: low_temp,
        },
    )


def encode_record(record: WeatherRecord, *, metric: bool = True) -> SyncItem:
    """Format a store record's temperatures and encode it."""
    return encode(
        record.condition_id,
        format_temperature(record.max_temp, metric=metric),
        format_temperature(record.min_temp, metric=metric),
    )


def decode(fields: Mapping[str, Any]) -> WeatherDigest:
    """Decode whichever digest keys are present in *fields*.

    A key whose value has the wrong type is treated as absent.
    """
    condition_id: int | None = None
    high_temp: str | None = None
    low_temp: str | None = None

    if KEY_WEATHER_ID in fields:
        condition_id = safe_int(fields[KEY_WEATHER_ID])
        if condition_id is None:
            _logger.debug("Ignoring malformed %s=%r", KEY_WEATHER_ID, fields[KEY_WEATHER_ID])
    if KEY_MAX_TEMP in fields:
        high_temp = safe_str(fields[KEY_MAX_TEMP])
        if high_temp is None:
            _logger.debug("Ignoring malformed %s=%r", KEY_MAX_TEMP, fields[KEY_MAX_TEMP])
    if KEY_MIN_TEMP in fields:
        low_temp = safe_str(fields[KEY_MIN_TEMP])
        if low_temp is None:
            _logger.debug("Ignoring malformed %s=%r", KEY_MIN_TEMP, fields[KEY_MIN_TEMP])

    return WeatherDigest(condition_id=condition_id, high_temp=high_temp, low_temp=low_temp)


def build_bootstrap_item(token: str | None = None) -> SyncItem:
    """Build the disposable marker item published by the watch after connecting."""
    return SyncItem(path=WEATHER_PATH, fields={KEY_BOOTSTRAP: token or str(uuid.uuid4())})
