from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from sunwear._constants import WEATHER_PATH
from sunwear.models._base import parse_timestamp
from sunwear.models.sync import ChangeEvent, SyncItem


@pytest.mark.parametrize(
    "value",
    [
        "2026-10-18T09:30:00",
        datetime(2026, 10, 18, 9, 30),
        1_792_315_800,
        1_792_315_800_000,
    ],
)
def test_parse_timestamp_yields_utc(value: object) -> None:
    parsed = parse_timestamp(value)

    assert parsed == datetime(2026, 10, 18, 9, 30, tzinfo=UTC)
    assert parsed.tzinfo is not None


def test_parse_timestamp_keeps_explicit_offset() -> None:
    parsed = parse_timestamp("2026-10-18T11:30:00+02:00")

    assert parsed is not None
    assert parsed.utcoffset() == timedelta(hours=2)
    assert parsed == datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def test_change_event_observed_at_from_naive_iso_string_is_aware() -> None:
    event = ChangeEvent(path=WEATHER_PATH, observed_at="2026-10-18T09:30:00")

    assert event.observed_at.tzinfo is not None


def test_sync_item_normalizes_trailing_slash() -> None:
    assert SyncItem(path="/weather/").path == WEATHER_PATH


@pytest.mark.parametrize("path", ["weather", "/", ""])
def test_sync_item_rejects_relative_or_root_path(path: str) -> None:
    with pytest.raises(ValueError):
        SyncItem(path=path)
