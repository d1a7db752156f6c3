"""Sync channel contract and shared lifecycle/listener plumbing.

A channel replicates path-addressed items between paired devices:

* ``put(path, fields)`` replaces the item at *path* and returns before the
  item has reached other devices;
* listeners registered with ``subscribe`` receive a
  :class:`~sunwear.models.ChangeEvent` each time a put (from any peer,
  this device included) reaches this device, in order per path;
* nothing is delivered unless the channel is connected.

The connection is an explicit state machine owned by whoever created the
channel::

    DISCONNECTED --connect()--> CONNECTING --ok--> CONNECTED
         ^                           |                 |
         +-------- failure ----------+--- disconnect()-+
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Protocol

from pydantic import ValidationError

from sunwear.exceptions import SyncError, SyncNotConnectedError
from sunwear.models.sync import ChangeEvent, FieldValue, PutResult, SyncItem

_logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeEvent], None]


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class SyncChannel(Protocol):
    """Structural channel interface used by the publisher and subscriber.

    Having a protocol here makes it easy to pass test doubles while keeping
    the concrete channels in :mod:`sunwear.channel.memory` and
    :mod:`sunwear.channel.mqtt`.
    """

    @property
    def state(self) -> ConnectionState: ...

    @property
    def is_connected(self) -> bool: ...

    async def connect(self) -> bool: ...

    async def disconnect(self) -> None: ...

    async def put(self, path: str, fields: Mapping[str, FieldValue]) -> PutResult: ...

    def subscribe(self, listener: ChangeListener) -> None: ...

    def unsubscribe(self, listener: ChangeListener) -> None: ...


class BaseSyncChannel(abc.ABC):
    """Lifecycle state machine and listener dispatch shared by channels.

    Subclasses implement the transport in :meth:`_open`, :meth:`_close` and
    :meth:`_put`, and hand received items to :meth:`_deliver`.
    """

    def __init__(self, *, node_id: str, logger: logging.Logger | None = None) -> None:
        self._node_id = node_id
        self._logger = logger or _logger
        self._state = ConnectionState.DISCONNECTED
        self._listeners: list[ChangeListener] = []

    @property
    def node_id(self) -> str:
        return self._node_id

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """Run the connect handshake.

        Returns ``True`` once connected. A failed handshake is logged and
        leaves the channel disconnected; it is never raised.
        """
        if self._state == ConnectionState.CONNECTED:
            return True
        if self._state == ConnectionState.CONNECTING:
            self._logger.debug("Connect already in progress node=%s", self._node_id)
            return False

        self._state = ConnectionState.CONNECTING
        try:
            await self._open()
        except Exception:
            self._state = ConnectionState.DISCONNECTED
            self._logger.warning("Sync channel connect failed node=%s", self._node_id, exc_info=True)
            return False
        if self._state != ConnectionState.CONNECTING:
            # disconnect() ran while the handshake was in flight
            self._logger.debug("Connect superseded by disconnect node=%s", self._node_id)
            return False
        self._state = ConnectionState.CONNECTED
        self._logger.debug("Sync channel connected node=%s", self._node_id)
        self._on_connected()
        return True

    async def disconnect(self) -> None:
        """Tear down delivery. In-flight puts are dropped."""
        if self._state == ConnectionState.DISCONNECTED:
            return
        self._state = ConnectionState.DISCONNECTED
        try:
            await self._close()
        except Exception:
            self._logger.debug("Sync channel close failed node=%s", self._node_id, exc_info=True)
        self._logger.debug("Sync channel disconnected node=%s", self._node_id)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def put(self, path: str, fields: Mapping[str, FieldValue]) -> PutResult:
        """Replace the item at *path*.

        Failures (including calling while disconnected) resolve to an
        unsuccessful :class:`PutResult` instead of raising.
        """
        try:
            item = SyncItem(path=path, fields=dict(fields))
        except ValidationError as exc:
            self._logger.debug("Put rejected path=%s: %s", path, exc)
            return PutResult.failed(path, f"Invalid item: {exc.error_count()} validation error(s)")
        try:
            if not self.is_connected:
                raise SyncNotConnectedError(f"Cannot put {item.path}: channel is {self._state}", path=item.path)
            await self._put(item)
        except SyncError as exc:
            self._logger.debug("Put failed path=%s: %s", item.path, exc)
            return PutResult.failed(item.path, str(exc))
        return PutResult.ok(item.path)

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _deliver(self, event: ChangeEvent) -> None:
        """Dispatch a received event to every listener (loop thread only)."""
        if not self.is_connected:
            self._logger.debug("Dropping change event path=%s: channel %s", event.path, self._state)
            return
        self._logger.debug("Change event path=%s origin=%s keys=%s", event.path, event.origin, list(event.fields))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                self._logger.debug("Change listener failed path=%s", event.path, exc_info=True)

    # ------------------------------------------------------------------
    # Transport hooks
    # ------------------------------------------------------------------

    def _on_connected(self) -> None:  # noqa: B027
        """Called on the loop right after the state became CONNECTED."""

    @abc.abstractmethod
    async def _open(self) -> None: ...

    @abc.abstractmethod
    async def _close(self) -> None: ...

    @abc.abstractmethod
    async def _put(self, item: SyncItem) -> None:
        """Submit *item*; raise :class:`SyncError` on failure."""
