"""Watch-side engine: host lifecycle signals, sync wiring and frame composition.

The engine owns the watch's channel connection. Becoming visible connects
and starts the redraw timer; becoming hidden tears both down. Ambient mode
only changes how frames are composed and stops the per-second timer (the
host delivers a minute tick instead).
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Any

from sunwear.channel.base import SyncChannel
from sunwear.channel.mqtt import MqttChannel
from sunwear.config import SunwearConfig
from sunwear.formatting import IconCategory, icon_category
from sunwear.state.display import DisplayState
from sunwear.subscriber import DigestSubscriber
from sunwear.ticker import RedrawTimer, RendererRegistry

_logger = logging.getLogger(__name__)

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclasses.dataclass(frozen=True)
class WatchFaceFrame:
    """Text content of one watch face frame."""

    time_text: str
    secondary_text: str
    """Seconds when interactive, AM/PM in ambient 12-hour mode, else empty."""
    date_text: str
    high_text: str | None = None
    low_text: str | None = None
    icon: IconCategory | None = None
    ambient: bool = False

    @property
    def shows_weather(self) -> bool:
        return self.high_text is not None and self.low_text is not None


def compose_frame(now: datetime, state: DisplayState, *, ambient: bool, is_24_hour: bool = True) -> WatchFaceFrame:
    if is_24_hour:
        time_text = f"{now.hour:02d}:{now.minute:02d}"
    else:
        hour = now.hour % 12 or 12
        time_text = f"{hour}:{now.minute:02d}"

    if not ambient:
        secondary = f"{now.second:02d}"
    elif not is_24_hour:
        secondary = "AM" if now.hour < 12 else "PM"
    else:
        secondary = ""

    date_text = f"{_DAYS[now.weekday()]}, {_MONTHS[now.month - 1]} {now.day} {now.year}"

    if not state.has_weather:
        return WatchFaceFrame(time_text=time_text, secondary_text=secondary, date_text=date_text, ambient=ambient)

    assert state.condition_id is not None  # noqa: S101
    return WatchFaceFrame(
        time_text=time_text,
        secondary_text=secondary,
        date_text=date_text,
        high_text=state.high_temp,
        low_text=state.low_temp,
        # No icon in ambient mode.
        icon=None if ambient else icon_category(state.condition_id),
        ambient=ambient,
    )


class WatchFaceEngine:
    """Drives one watch face instance.

    Usage::

        engine = WatchFaceEngine(channel, on_frame=print)
        await engine.on_visibility_changed(True)
        ...
        await engine.close()
    """

    def __init__(
        self,
        channel: SyncChannel,
        *,
        config: SunwearConfig | None = None,
        registry: RendererRegistry | None = None,
        tz: tzinfo | None = None,
        is_24_hour: bool = True,
        clock: Callable[[tzinfo | None], datetime] = datetime.now,
        on_frame: Callable[[WatchFaceFrame], None] | None = None,
    ) -> None:
        config = config or SunwearConfig()
        self._channel = channel
        self._registry = registry or RendererRegistry()
        self._fixed_tz = tz
        # None means the host local zone, resolved by the clock on every frame.
        self._tz = tz
        self._is_24_hour = is_24_hour
        self._clock = clock
        self._on_frame = on_frame
        self._visible = False
        self._ambient = False
        self._last_frame: WatchFaceFrame | None = None
        self.draw_count = 0

        self._subscriber = DigestSubscriber(channel, on_redraw=self.invalidate)
        self._renderer_id = self._registry.register(self.invalidate)
        self._timer = RedrawTimer(self._registry, self._renderer_id, interval=config.interactive_update_rate)

    @classmethod
    def from_config(cls, config: SunwearConfig, **kwargs: Any) -> WatchFaceEngine:
        """Build an engine that syncs over the MQTT broker named in *config*."""
        return cls(MqttChannel(config), config=config, **kwargs)

    @property
    def state(self) -> DisplayState:
        return self._subscriber.state

    @property
    def subscriber(self) -> DigestSubscriber:
        return self._subscriber

    @property
    def timer(self) -> RedrawTimer:
        return self._timer

    @property
    def is_visible(self) -> bool:
        return self._visible

    @property
    def is_ambient(self) -> bool:
        return self._ambient

    @property
    def last_frame(self) -> WatchFaceFrame | None:
        return self._last_frame

    # ------------------------------------------------------------------
    # Host signals
    # ------------------------------------------------------------------

    async def on_visibility_changed(self, visible: bool) -> None:
        self._visible = visible
        if visible:
            self._subscriber.attach()
            if await self._channel.connect():
                await self._subscriber.trigger()
            else:
                _logger.warning("Watch face sync inactive: channel did not connect")
            self._tz = self._fixed_tz
        else:
            self._subscriber.detach()
            await self._channel.disconnect()
        self._update_timer()

    def on_ambient_mode_changed(self, ambient: bool) -> None:
        if self._ambient != ambient:
            self._ambient = ambient
            self.invalidate()
        self._update_timer()

    def on_timezone_changed(self, tz: tzinfo | None = None) -> None:
        self._tz = tz
        _logger.debug("Time zone changed to %s", self._tz or "local")

    def on_time_tick(self) -> None:
        self.invalidate()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        """Compose a frame from the wall clock and the current display state."""
        frame = compose_frame(self._clock(self._tz), self.state, ambient=self._ambient, is_24_hour=self._is_24_hour)
        self._last_frame = frame
        self.draw_count += 1
        if self._on_frame is not None:
            self._on_frame(frame)

    def _should_timer_run(self) -> bool:
        return self._visible and not self._ambient

    def _update_timer(self) -> None:
        self._timer.cancel()
        if self._should_timer_run():
            self._timer.start()

    async def close(self) -> None:
        self._timer.cancel()
        self._registry.unregister(self._renderer_id)
        self._subscriber.detach()
        await self._channel.disconnect()
