"""Local weather store implementations."""

from sunwear.store.base import WeatherStore
from sunwear.store.memory import MemoryWeatherStore
from sunwear.store.sqlite import SqliteWeatherStore

__all__ = ["MemoryWeatherStore", "SqliteWeatherStore", "WeatherStore"]
