"""In-process sync channel.

Channels created from the same :class:`MemoryHub` share one item store and
see each other's puts, which makes the hub a drop-in stand-in for a real
broker in tests and single-process demos.
"""

from __future__ import annotations

import asyncio
import logging
import secrets

from sunwear.channel.base import BaseSyncChannel
from sunwear.exceptions import SyncError, SyncPublishError
from sunwear.models.sync import ChangeEvent, SyncItem

_logger = logging.getLogger(__name__)


class MemoryHub:
    """Shared item store. Each put replaces the item at its path.

    ``refuse_connections`` and ``reject_puts`` simulate a broken link.
    """

    def __init__(self) -> None:
        self._items: dict[str, tuple[SyncItem, str]] = {}
        self._channels: list[MemoryChannel] = []
        self.refuse_connections = False
        self.reject_puts = False
        self.put_count = 0

    def channel(self, node_id: str | None = None) -> MemoryChannel:
        return MemoryChannel(self, node_id=node_id)

    def get_item(self, path: str) -> SyncItem | None:
        entry = self._items.get(path)
        return entry[0] if entry is not None else None

    @property
    def paths(self) -> list[str]:
        return list(self._items)

    def _attach(self, channel: MemoryChannel) -> None:
        if self.refuse_connections:
            raise SyncError("Hub refused connection")
        if channel not in self._channels:
            self._channels.append(channel)

    def _detach(self, channel: MemoryChannel) -> None:
        if channel in self._channels:
            self._channels.remove(channel)

    def _replace(self, item: SyncItem, origin: str) -> None:
        if self.reject_puts:
            raise SyncPublishError(f"Hub rejected put to {item.path}", path=item.path)
        self.put_count += 1
        self._items[item.path] = (item, origin)
        loop = asyncio.get_running_loop()
        for channel in list(self._channels):
            event = ChangeEvent.from_item(item, origin=origin)
            loop.call_soon(channel._deliver, event)


class MemoryChannel(BaseSyncChannel):
    """Channel attached to a :class:`MemoryHub`.

    Delivery is scheduled with ``loop.call_soon`` so listeners always run
    after ``put`` has returned, in put order.
    """

    def __init__(self, hub: MemoryHub, *, node_id: str | None = None, logger: logging.Logger | None = None) -> None:
        super().__init__(node_id=node_id or f"mem-{secrets.token_hex(4)}", logger=logger or _logger)
        self._hub = hub

    @property
    def hub(self) -> MemoryHub:
        return self._hub

    async def _open(self) -> None:
        self._hub._attach(self)

    async def _close(self) -> None:
        self._hub._detach(self)

    async def _put(self, item: SyncItem) -> None:
        self._hub._replace(item, self._node_id)

    def _on_connected(self) -> None:
        # Replay current items, like retained messages on a broker subscribe.
        loop = asyncio.get_running_loop()
        for path in self._hub.paths:
            entry = self._hub._items[path]
            loop.call_soon(self._deliver, ChangeEvent.from_item(entry[0], origin=entry[1]))
