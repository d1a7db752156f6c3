from __future__ import annotations

import asyncio

import pytest

from sunwear.ticker import RedrawTimer, RendererRegistry


async def _drain() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def test_registry_assigns_distinct_ids() -> None:
    registry = RendererRegistry()
    first = registry.register(lambda: None)
    second = registry.register(lambda: None)

    assert first != second
    assert len(registry) == 2

    registry.unregister(first)
    assert first not in registry
    assert second in registry
    assert registry.get(first) is None
    registry.unregister(first)


def test_timer_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        RedrawTimer(RendererRegistry(), 1, interval=0)


def test_next_delay_aligns_to_interval() -> None:
    timer = RedrawTimer(RendererRegistry(), 1, interval=1.0, clock=lambda: 100.25)

    assert timer.next_delay() == pytest.approx(0.75)


@pytest.mark.asyncio
async def test_timer_redraws_immediately_then_periodically() -> None:
    registry = RendererRegistry()
    calls: list[int] = []
    renderer_id = registry.register(lambda: calls.append(1))
    timer = RedrawTimer(registry, renderer_id, interval=0.01)

    timer.start()
    await _drain()
    assert len(calls) == 1

    await asyncio.sleep(0.05)
    timer.cancel()
    assert len(calls) >= 2
    assert not timer.is_running


@pytest.mark.asyncio
async def test_cancel_before_first_tick() -> None:
    registry = RendererRegistry()
    calls: list[int] = []
    timer = RedrawTimer(registry, registry.register(lambda: calls.append(1)))

    timer.start()
    timer.cancel()
    await _drain()

    assert calls == []


@pytest.mark.asyncio
async def test_unregistered_renderer_stops_timer() -> None:
    registry = RendererRegistry()
    calls: list[int] = []
    renderer_id = registry.register(lambda: calls.append(1))
    timer = RedrawTimer(registry, renderer_id)

    registry.unregister(renderer_id)
    timer.start()
    await _drain()

    assert calls == []
    assert not timer.is_running


@pytest.mark.asyncio
async def test_failing_redraw_keeps_timer_running() -> None:
    registry = RendererRegistry()

    def broken() -> None:
        raise RuntimeError("boom")

    timer = RedrawTimer(registry, registry.register(broken))
    timer.start()
    await _drain()

    assert timer.is_running
    timer.cancel()
