"""Watch-side digest subscriber.

Listens for change events on ``/weather``, decodes the digest keys that are
present and merges them into the :class:`~sunwear.state.DisplayState` it
owns. Events for other paths and keys it does not know (such as the
``DATA`` bootstrap marker) are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sunwear._constants import WEATHER_PATH
from sunwear.channel.base import SyncChannel
from sunwear.codec import build_bootstrap_item, decode
from sunwear.models.sync import ChangeEvent, PutResult
from sunwear.state.display import DisplayState

_logger = logging.getLogger(__name__)


class DigestSubscriber:
    def __init__(
        self,
        channel: SyncChannel,
        *,
        state: DisplayState | None = None,
        on_redraw: Callable[[], None] | None = None,
    ) -> None:
        self._channel = channel
        self._state = state if state is not None else DisplayState()
        self._on_redraw = on_redraw
        self._attached = False

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def is_attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        """Start listening for change events on the channel."""
        self._channel.subscribe(self.on_change)
        self._attached = True

    def detach(self) -> None:
        self._channel.unsubscribe(self.on_change)
        self._attached = False

    def on_change(self, event: ChangeEvent) -> None:
        if event.path != WEATHER_PATH:
            _logger.debug("Ignoring change event for path=%s", event.path)
            return

        digest = decode(event.fields)
        assigned = self._state.apply(digest, observed_at=event.observed_at)
        if assigned:
            _logger.debug(
                "Display state updated fields=%s high=%s low=%s id=%s",
                assigned,
                self._state.high_temp,
                self._state.low_temp,
                self._state.condition_id,
            )
        else:
            _logger.debug("No digest keys in change event keys=%s", list(event.fields))
        if self._on_redraw is not None:
            self._on_redraw()

    async def trigger(self) -> PutResult:
        """Publish a disposable marker item to provoke channel activity."""
        item = build_bootstrap_item()
        result = await self._channel.put(item.path, item.fields)
        if result.success:
            _logger.debug("Trigger success for weather data")
        else:
            _logger.debug("Trigger failed for weather data: %s", result.error)
        return result
