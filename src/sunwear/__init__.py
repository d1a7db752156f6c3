"""sunwear - phone-to-watch weather digest synchronization."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sunwear")
except PackageNotFoundError:
    __version__ = "0+local"
from sunwear._constants import (
    ACTION_UPDATE_WATCH_FACE,
    KEY_BOOTSTRAP,
    KEY_MAX_TEMP,
    KEY_MIN_TEMP,
    KEY_WEATHER_ID,
    WEATHER_PATH,
)
from sunwear.channel import ConnectionState, MemoryChannel, MemoryHub, MqttChannel, SyncChannel
from sunwear.codec import build_bootstrap_item, decode, encode, encode_record
from sunwear.config import SunwearConfig
from sunwear.exceptions import (
    SunwearConfigError,
    SunwearCryptoError,
    SunwearError,
    SunwearStoreError,
    SyncError,
    SyncNotConnectedError,
    SyncPublishError,
)
from sunwear.models import ChangeEvent, PutResult, SyncItem, WeatherDigest, WeatherRecord
from sunwear.phone import PhoneSyncService
from sunwear.publisher import PublishOutcome, WeatherPublisher
from sunwear.state import DisplayState
from sunwear.store import MemoryWeatherStore, SqliteWeatherStore, WeatherStore
from sunwear.subscriber import DigestSubscriber
from sunwear.ticker import RedrawTimer, RendererRegistry
from sunwear.watchface import WatchFaceEngine, WatchFaceFrame, compose_frame

__all__ = [
    "__version__",
    "ACTION_UPDATE_WATCH_FACE",
    "ChangeEvent",
    "ConnectionState",
    "DigestSubscriber",
    "DisplayState",
    "KEY_BOOTSTRAP",
    "KEY_MAX_TEMP",
    "KEY_MIN_TEMP",
    "KEY_WEATHER_ID",
    "MemoryChannel",
    "MemoryHub",
    "MemoryWeatherStore",
    "MqttChannel",
    "PhoneSyncService",
    "PublishOutcome",
    "PutResult",
    "RedrawTimer",
    "RendererRegistry",
    "SqliteWeatherStore",
    "SunwearConfig",
    "SunwearConfigError",
    "SunwearCryptoError",
    "SunwearError",
    "SunwearStoreError",
    "SyncChannel",
    "SyncError",
    "SyncItem",
    "SyncNotConnectedError",
    "SyncPublishError",
    "WEATHER_PATH",
    "WatchFaceEngine",
    "WatchFaceFrame",
    "WeatherDigest",
    "WeatherPublisher",
    "WeatherRecord",
    "WeatherStore",
    "build_bootstrap_item",
    "compose_frame",
    "decode",
    "encode",
    "encode_record",
]
