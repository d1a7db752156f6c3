"""Sync channels: the replication primitive between phone and watch."""

from sunwear.channel.base import BaseSyncChannel, ChangeListener, ConnectionState, SyncChannel
from sunwear.channel.memory import MemoryChannel, MemoryHub
from sunwear.channel.mqtt import MqttChannel

__all__ = [
    "BaseSyncChannel",
    "ChangeListener",
    "ConnectionState",
    "MemoryChannel",
    "MemoryHub",
    "MqttChannel",
    "SyncChannel",
]
