"""Phone-side digest publisher."""

from __future__ import annotations

import asyncio
import datetime as dt
import logging
from collections.abc import Callable
from enum import StrEnum

from sunwear.channel.base import SyncChannel
from sunwear.codec import encode_record
from sunwear.config import SunwearConfig
from sunwear.exceptions import SunwearStoreError
from sunwear.models.sync import PutResult, SyncItem
from sunwear.store.base import WeatherStore

_logger = logging.getLogger(__name__)


class PublishOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


class WeatherPublisher:
    """Read today's weather from the store and put it on the channel.

    Publishing is best-effort: failures are logged and reported through the
    returned :class:`PublishOutcome`, never raised. With the default
    ``publish_retries=0`` exactly one put is attempted per call.
    """

    def __init__(
        self,
        channel: SyncChannel,
        store: WeatherStore,
        config: SunwearConfig,
        *,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self._channel = channel
        self._store = store
        self._config = config
        self._today = today

    async def publish(self) -> PublishOutcome:
        loop = asyncio.get_running_loop()
        location = self._config.location
        date = self._today()
        try:
            record = await loop.run_in_executor(None, self._store.query, location, date)
        except SunwearStoreError:
            _logger.warning("Weather store query failed location=%s date=%s", location, date, exc_info=True)
            return PublishOutcome.FAILURE

        if record is None:
            _logger.debug("No weather for location=%s date=%s; nothing to publish", location, date)
            return PublishOutcome.SKIPPED

        item = encode_record(record, metric=self._config.metric)
        _logger.debug("Publishing digest path=%s fields=%s", item.path, item.fields)
        return await self._put_with_retries(item)

    async def _put_with_retries(self, item: SyncItem) -> PublishOutcome:
        attempts = 1 + self._config.publish_retries
        for attempt in range(1, attempts + 1):
            try:
                result = await self._channel.put(item.path, item.fields)
            except Exception as exc:
                _logger.debug("Channel put raised path=%s", item.path, exc_info=True)
                result = PutResult.failed(item.path, str(exc))

            if result.success:
                _logger.debug("Digest published path=%s attempt=%d", item.path, attempt)
                return PublishOutcome.SUCCESS

            _logger.warning(
                "Digest publish failed path=%s attempt=%d/%d: %s", item.path, attempt, attempts, result.error
            )
            if attempt < attempts and self._config.publish_retry_delay > 0:
                await asyncio.sleep(self._config.publish_retry_delay)
        return PublishOutcome.FAILURE
