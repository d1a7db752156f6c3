from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from sunwear.channel.memory import MemoryHub
from sunwear.codec import encode
from sunwear.formatting import IconCategory
from sunwear.state.display import DisplayState
from sunwear.ticker import RendererRegistry
from sunwear.watchface import WatchFaceEngine, WatchFaceFrame, compose_frame

_NOW = datetime(2026, 10, 18, 21, 5, 7, tzinfo=UTC)


async def _drain() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def _weather() -> DisplayState:
    return DisplayState(condition_id=800, high_temp="21°", low_temp="12°")


class TestComposeFrame:
    def test_interactive_24_hour(self) -> None:
        frame = compose_frame(_NOW, _weather(), ambient=False)

        assert frame.time_text == "21:05"
        assert frame.secondary_text == "07"
        assert frame.date_text == "Sun, Oct 18 2026"
        assert (frame.high_text, frame.low_text) == ("21°", "12°")
        assert frame.icon is IconCategory.CLEAR
        assert frame.shows_weather

    def test_ambient_12_hour(self) -> None:
        frame = compose_frame(_NOW, _weather(), ambient=True, is_24_hour=False)

        assert frame.time_text == "9:05"
        assert frame.secondary_text == "PM"
        assert frame.icon is None
        assert frame.shows_weather

    def test_ambient_24_hour_has_no_secondary_text(self) -> None:
        frame = compose_frame(_NOW, _weather(), ambient=True)

        assert frame.secondary_text == ""

    def test_midnight_in_12_hour_mode(self) -> None:
        frame = compose_frame(_NOW.replace(hour=0), DisplayState(), ambient=True, is_24_hour=False)

        assert frame.time_text == "12:05"
        assert frame.secondary_text == "AM"

    def test_incomplete_state_draws_no_weather(self) -> None:
        frame = compose_frame(_NOW, DisplayState(high_temp="21°"), ambient=False)

        assert not frame.shows_weather
        assert frame.icon is None


def _engine(hub: MemoryHub, **kwargs: object) -> tuple[WatchFaceEngine, list[WatchFaceFrame]]:
    frames: list[WatchFaceFrame] = []
    engine = WatchFaceEngine(
        hub.channel("watch"),
        tz=UTC,
        clock=lambda tz: _NOW.astimezone(tz),
        on_frame=frames.append,
        **kwargs,  # type: ignore[arg-type]
    )
    return engine, frames


async def _publish_from_phone(hub: MemoryHub, condition_id: int, high: str, low: str) -> None:
    phone = hub.channel("phone")
    assert await phone.connect()
    item = encode(condition_id, high, low)
    assert (await phone.put(item.path, item.fields)).success
    await phone.disconnect()


@pytest.mark.asyncio
async def test_visible_engine_picks_up_published_weather() -> None:
    hub = MemoryHub()
    await _publish_from_phone(hub, 800, "21°", "12°")
    engine, frames = _engine(hub)

    await engine.on_visibility_changed(True)
    await _drain()

    assert engine.state.snapshot().as_tuple() == (800, "21°", "12°")
    assert engine.last_frame is not None
    assert engine.last_frame.shows_weather
    assert engine.timer.is_running
    assert frames
    await engine.close()


@pytest.mark.asyncio
async def test_becoming_visible_triggers_bootstrap_put() -> None:
    hub = MemoryHub()
    engine, _ = _engine(hub)

    await engine.on_visibility_changed(True)
    await _drain()

    item = hub.get_item("/weather")
    assert item is not None
    assert list(item.fields) == ["DATA"]
    assert not engine.state.has_weather
    await engine.close()


@pytest.mark.asyncio
async def test_live_update_while_visible() -> None:
    hub = MemoryHub()
    engine, _ = _engine(hub)
    await engine.on_visibility_changed(True)
    await _drain()

    phone = hub.channel("phone")
    await phone.connect()
    item = encode(501, "9°", "4°")
    await phone.put(item.path, item.fields)
    await _drain()

    assert engine.last_frame is not None
    assert engine.last_frame.icon is IconCategory.RAIN
    assert engine.last_frame.high_text == "9°"
    await engine.close()


@pytest.mark.asyncio
async def test_hidden_engine_disconnects_and_stops_timer() -> None:
    hub = MemoryHub()
    engine, _ = _engine(hub)
    await engine.on_visibility_changed(True)
    await _drain()

    await engine.on_visibility_changed(False)
    await _publish_from_phone(hub, 800, "21°", "12°")
    await _drain()

    assert not engine.timer.is_running
    assert not engine.subscriber.is_attached
    assert not engine.state.has_weather
    await engine.close()


@pytest.mark.asyncio
async def test_ambient_mode_stops_timer_and_hides_icon() -> None:
    hub = MemoryHub()
    await _publish_from_phone(hub, 800, "21°", "12°")
    engine, _ = _engine(hub)
    await engine.on_visibility_changed(True)
    await _drain()

    engine.on_ambient_mode_changed(True)

    assert engine.is_ambient
    assert not engine.timer.is_running
    assert engine.last_frame is not None
    assert engine.last_frame.ambient
    assert engine.last_frame.icon is None

    engine.on_ambient_mode_changed(False)
    assert engine.timer.is_running
    await engine.close()


def test_time_tick_redraws() -> None:
    engine, _ = _engine(MemoryHub())

    engine.on_time_tick()

    assert engine.draw_count == 1
    assert engine.last_frame is not None
    assert engine.last_frame.time_text == "21:05"


def test_timezone_change_applies_to_next_frame() -> None:
    seen: list[tzinfo | None] = []
    engine = WatchFaceEngine(MemoryHub().channel(), tz=UTC, clock=lambda tz: seen.append(tz) or _NOW.astimezone(tz))
    plus_two = timezone(timedelta(hours=2))

    engine.on_timezone_changed(plus_two)
    engine.invalidate()

    assert seen == [plus_two]
    assert engine.last_frame is not None
    assert engine.last_frame.time_text == "23:05"


@pytest.mark.asyncio
async def test_connect_failure_keeps_drawing_without_weather() -> None:
    hub = MemoryHub()
    hub.refuse_connections = True
    engine, frames = _engine(hub)

    await engine.on_visibility_changed(True)
    await _drain()

    assert engine.subscriber.is_attached
    assert hub.put_count == 0
    assert frames
    assert not frames[-1].shows_weather
    await engine.close()


@pytest.mark.asyncio
async def test_close_unregisters_renderer() -> None:
    hub = MemoryHub()
    registry = RendererRegistry()
    engine, _ = _engine(hub, registry=registry)
    await engine.on_visibility_changed(True)
    assert len(registry) == 1

    await engine.close()

    assert len(registry) == 0
    assert not engine.timer.is_running
    assert not engine.subscriber.is_attached


def test_local_zone_is_resolved_by_clock_on_every_frame() -> None:
    seen: list[tzinfo | None] = []
    engine = WatchFaceEngine(MemoryHub().channel(), clock=lambda tz: seen.append(tz) or _NOW)

    engine.invalidate()
    engine.on_timezone_changed()
    engine.invalidate()

    assert seen == [None, None]


def test_named_zone_follows_daylight_saving_change() -> None:
    try:
        berlin = ZoneInfo("Europe/Berlin")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    # Summer time ends in Berlin at 2026-10-25 01:00 UTC.
    instants = iter([datetime(2026, 10, 25, 0, 30, tzinfo=UTC), datetime(2026, 10, 25, 2, 30, tzinfo=UTC)])
    engine = WatchFaceEngine(MemoryHub().channel(), tz=berlin, clock=lambda tz: next(instants).astimezone(tz))

    engine.invalidate()
    assert engine.last_frame is not None
    assert engine.last_frame.time_text == "02:30"

    engine.invalidate()
    assert engine.last_frame.time_text == "03:30"
