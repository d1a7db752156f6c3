"""Base model for sunwear value objects.

Every wire or store model inherits from :class:`SunwearBaseModel`, which is
frozen and ignores unknown keys so peers running a newer version can add
fields without breaking older ones.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Coerce an epoch number (seconds **or** milliseconds) to a UTC datetime.

    Naive datetimes and ISO strings without an offset are assumed to be UTC.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value)
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    ts = float(value)
    if ts >= _MS_THRESHOLD:
        ts /= 1000.0
    return datetime.fromtimestamp(ts, tz=UTC)


UtcTimestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
"""Annotated type that always yields a timezone-aware UTC datetime."""


class SunwearBaseModel(BaseModel):
    """Frozen base for wire and store models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
