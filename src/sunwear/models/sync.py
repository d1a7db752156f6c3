"""Sync channel envelopes: items, change events and put results."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from sunwear.models._base import SunwearBaseModel, UtcTimestamp, utcnow

FieldValue = int | str


def _normalize_path(value: str) -> str:
    path = value.strip()
    if not path.startswith("/") or path == "/":
        raise ValueError(f"path must be absolute and non-root, got {value!r}")
    return path.rstrip("/")


class SyncItem(SunwearBaseModel):
    """A path-addressed item. Each put replaces the item stored at ``path``."""

    path: str
    fields: dict[str, FieldValue] = Field(default_factory=dict)

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        return _normalize_path(value)


class ChangeEvent(SunwearBaseModel):
    """Delivered to listeners when the item at ``path`` has been replaced."""

    path: str
    fields: dict[str, FieldValue] = Field(default_factory=dict)
    origin: str | None = Field(default=None, description="Node id of the writer, when known")
    observed_at: UtcTimestamp = Field(default_factory=utcnow)

    @field_validator("path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        return _normalize_path(value)

    @classmethod
    def from_item(
        cls, item: SyncItem, *, origin: str | None = None, observed_at: datetime | None = None
    ) -> ChangeEvent:
        return cls(
            path=item.path,
            fields=dict(item.fields),
            origin=origin,
            observed_at=observed_at or utcnow(),
        )


class PutResult(SunwearBaseModel):
    """Outcome of one asynchronous ``put``."""

    success: bool
    path: str
    error: str | None = None

    @classmethod
    def ok(cls, path: str) -> PutResult:
        return cls(success=True, path=path)

    @classmethod
    def failed(cls, path: str, error: str) -> PutResult:
        return cls(success=False, path=path, error=error)
