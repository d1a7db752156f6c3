"""The weather digest replicated from the phone to the watch."""

from __future__ import annotations

from sunwear.models._base import SunwearBaseModel


class WeatherDigest(SunwearBaseModel):
    """Compact three-field weather summary.

    Any field may be ``None`` on the receiving side: the decoder only fills
    the fields whose keys were present in a change event.
    """

    condition_id: int | None = None
    """Weather condition id, maps to an icon category."""

    high_temp: str | None = None
    """Pre-formatted maximum temperature (unit aware)."""

    low_temp: str | None = None
    """Pre-formatted minimum temperature (unit aware)."""

    @property
    def is_complete(self) -> bool:
        return self.condition_id is not None and self.high_temp is not None and self.low_temp is not None

    @property
    def is_empty(self) -> bool:
        return self.condition_id is None and self.high_temp is None and self.low_temp is None

    def as_tuple(self) -> tuple[int | None, str | None, str | None]:
        return self.condition_id, self.high_temp, self.low_temp
