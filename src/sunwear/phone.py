"""Phone-side service: turns host commands into digest publishes."""

from __future__ import annotations

import logging
from typing import Any

from sunwear._constants import ACTION_UPDATE_WATCH_FACE
from sunwear.channel.base import SyncChannel
from sunwear.channel.mqtt import MqttChannel
from sunwear.config import SunwearConfig
from sunwear.publisher import PublishOutcome, WeatherPublisher
from sunwear.store.base import WeatherStore
from sunwear.store.sqlite import SqliteWeatherStore

_logger = logging.getLogger(__name__)


class PhoneSyncService:
    """Owns the phone's channel connection and publishes on command.

    Usage::

        async with PhoneSyncService.from_config(config) as service:
            await service.on_start_command(ACTION_UPDATE_WATCH_FACE)
    """

    def __init__(self, channel: SyncChannel, store: WeatherStore, config: SunwearConfig) -> None:
        self._channel = channel
        self._store = store
        self._publisher = WeatherPublisher(channel, store, config)

    @classmethod
    def from_config(cls, config: SunwearConfig) -> PhoneSyncService:
        return cls(MqttChannel(config), SqliteWeatherStore(config.store_path), config)

    @property
    def channel(self) -> SyncChannel:
        return self._channel

    @property
    def publisher(self) -> WeatherPublisher:
        return self._publisher

    async def __aenter__(self) -> PhoneSyncService:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def on_start_command(self, action: str | None) -> PublishOutcome | None:
        """Handle a host command. Only ``ACTION_UPDATE_WATCH_FACE`` publishes."""
        if action != ACTION_UPDATE_WATCH_FACE:
            _logger.debug("Ignoring command action=%s", action)
            return None

        if not await self._channel.connect():
            _logger.warning("Cannot update watch face: sync channel did not connect")
            return PublishOutcome.FAILURE
        _logger.debug("Updating the watch face")
        return await self._publisher.publish()

    async def close(self) -> None:
        await self._channel.disconnect()
        close = getattr(self._store, "close", None)
        if callable(close):
            close()
