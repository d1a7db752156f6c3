"""Periodic redraw timer.

The timer never holds the renderer it drives. It keeps a renderer *id* and
looks it up in a :class:`RendererRegistry` on every tick, so a renderer that
has been unregistered simply stops being ticked. Teardown is explicit:
:meth:`RedrawTimer.cancel`.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections.abc import Callable

_logger = logging.getLogger(__name__)

Redraw = Callable[[], None]


class RendererRegistry:
    """Active renderers by id."""

    def __init__(self) -> None:
        self._renderers: dict[int, Redraw] = {}
        self._ids = itertools.count(1)

    def register(self, redraw: Redraw) -> int:
        renderer_id = next(self._ids)
        self._renderers[renderer_id] = redraw
        return renderer_id

    def unregister(self, renderer_id: int) -> None:
        self._renderers.pop(renderer_id, None)

    def get(self, renderer_id: int) -> Redraw | None:
        return self._renderers.get(renderer_id)

    def __contains__(self, renderer_id: object) -> bool:
        return renderer_id in self._renderers

    def __len__(self) -> int:
        return len(self._renderers)


class RedrawTimer:
    """Redraw a registered renderer on every whole *interval* of wall-clock time."""

    def __init__(
        self,
        registry: RendererRegistry,
        renderer_id: int,
        *,
        interval: float = 1.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._registry = registry
        self._renderer_id = renderer_id
        self._interval = interval
        self._clock = clock
        self._handle: asyncio.Handle | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """(Re)start ticking; the first redraw happens on the next loop iteration."""
        self.cancel()
        self._running = True
        self._handle = asyncio.get_running_loop().call_soon(self._tick)

    def cancel(self) -> None:
        self._running = False
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()

    def next_delay(self) -> float:
        """Seconds until the next whole interval boundary."""
        return self._interval - (self._clock() % self._interval)

    def _tick(self) -> None:
        self._handle = None
        redraw = self._registry.get(self._renderer_id)
        if redraw is None:
            _logger.debug("Renderer %s no longer registered; redraw timer stopped", self._renderer_id)
            self._running = False
            return
        try:
            redraw()
        except Exception:
            _logger.debug("Redraw failed renderer=%s", self._renderer_id, exc_info=True)
        # The redraw itself may have cancelled the timer.
        if not self._running:
            return
        self._handle = asyncio.get_running_loop().call_later(self.next_delay(), self._tick)
