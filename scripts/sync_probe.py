#!/usr/bin/env python3
"""Probe the weather digest channel on an MQTT broker.

Connects with the ``SUNWEAR_*`` configuration and either:
1) watches ``/weather`` and prints every decoded change event (default), or
2) publishes one digest (``--publish ID HIGH LOW``) and exits.

Use this to check that a phone and a watch share the same namespace and
pairing key.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
import time
from dataclasses import dataclass
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from sunwear import ChangeEvent, DigestSubscriber, MqttChannel, SunwearConfig, encode  # noqa: E402


@dataclass
class ProbeStats:
    started_at: float
    total_events: int = 0
    digest_events: int = 0
    last_event_at: float | None = None


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch or publish the weather digest item.")
    parser.add_argument(
        "--publish",
        nargs=3,
        metavar=("ID", "HIGH", "LOW"),
        help="Publish one digest (condition id, high text, low text) and exit.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum watch time in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--trigger",
        action="store_true",
        help="Publish the bootstrap marker after connecting, like the watch does.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Pretty-print event fields.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_config(config: SunwearConfig, channel: MqttChannel) -> None:
    print("[probe] Sync channel")
    print(f"[probe]   broker    : {config.broker_host}:{config.broker_port} tls={config.broker_tls}")
    print(f"[probe]   topics    : {', '.join(channel.topics)}")
    print(f"[probe]   node      : {channel.node_id}")
    print(f"[probe]   sealed    : {config.pairing_key is not None}")


async def _publish(channel: MqttChannel, condition_id: str, high: str, low: str) -> int:
    item = encode(int(condition_id), high, low)
    result = await channel.put(item.path, item.fields)
    if not result.success:
        print(f"[probe] Publish failed: {result.error}", file=sys.stderr)
        return 1
    print(f"[probe] Published {item.fields}")
    return 0


async def _watch(channel: MqttChannel, args: argparse.Namespace) -> int:
    stats = ProbeStats(started_at=time.time())
    stop = asyncio.Event()

    def on_redraw() -> None:
        stats.digest_events += 1
        state = subscriber.state
        print(f"[probe] display id={state.condition_id} high={state.high_temp} low={state.low_temp}")

    def on_event(event: ChangeEvent) -> None:
        stats.total_events += 1
        stats.last_event_at = time.time()
        ts_text = event.observed_at.strftime("%Y-%m-%d %H:%M:%S")
        print(f"[probe] event#{stats.total_events} at {ts_text} path={event.path} origin={event.origin}")
        print(json.dumps(event.fields, indent=2 if args.json else None, ensure_ascii=False, sort_keys=True))

    subscriber = DigestSubscriber(channel, on_redraw=on_redraw)
    channel.subscribe(on_event)
    subscriber.attach()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop.set)

    if args.trigger:
        await subscriber.trigger()

    try:
        if args.duration > 0:
            await asyncio.wait_for(stop.wait(), args.duration)
        else:
            await stop.wait()
    except TimeoutError:
        print(f"[probe] Reached --duration={args.duration}s, stopping.")

    print("[probe] Summary")
    print(f"[probe]   runtime_s     : {time.time() - stats.started_at:.1f}")
    print(f"[probe]   total_events  : {stats.total_events}")
    print(f"[probe]   digest_events : {stats.digest_events}")
    return 0


async def _run(args: argparse.Namespace) -> int:
    config = SunwearConfig.from_env()
    channel = MqttChannel(config)
    _print_config(config, channel)

    print("[probe] Connecting...")
    if not await channel.connect():
        print("[probe] Connect failed", file=sys.stderr)
        return 2
    try:
        if args.publish:
            return await _publish(channel, *args.publish)
        return await _watch(channel, args)
    finally:
        await channel.disconnect()


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(_main())
