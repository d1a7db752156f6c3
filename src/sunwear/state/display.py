"""Watch-side display state.

Holds the most recently received digest values. Each field is merged
independently: a change event that omits a key leaves the previous value in
place (stale but not cleared). Only :meth:`DisplayState.apply` mutates it.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from sunwear.models._base import utcnow
from sunwear.models.digest import WeatherDigest


class DisplayState(BaseModel):
    model_config = ConfigDict(extra="forbid")

    condition_id: int | None = None
    high_temp: str | None = None
    low_temp: str | None = None
    updated_at: datetime | None = None

    @property
    def has_weather(self) -> bool:
        """Whether all three values are known (the face only draws weather then)."""
        return self.condition_id is not None and self.high_temp is not None and self.low_temp is not None

    def apply(self, digest: WeatherDigest, *, observed_at: datetime | None = None) -> list[str]:
        """Merge the fields present in *digest*; return the names assigned."""
        assigned: list[str] = []
        if digest.condition_id is not None:
            self.condition_id = digest.condition_id
            assigned.append("condition_id")
        if digest.high_temp is not None:
            self.high_temp = digest.high_temp
            assigned.append("high_temp")
        if digest.low_temp is not None:
            self.low_temp = digest.low_temp
            assigned.append("low_temp")
        if assigned:
            self.updated_at = observed_at or utcnow()
        return assigned

    def snapshot(self) -> WeatherDigest:
        return WeatherDigest(condition_id=self.condition_id, high_temp=self.high_temp, low_temp=self.low_temp)
