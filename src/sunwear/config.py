"""Configuration for sunwear."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from sunwear._constants import DEFAULT_NAMESPACE, INTERACTIVE_UPDATE_RATE_S
from sunwear._crypto.hashing import derive_pairing_key
from sunwear.exceptions import SunwearConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SunwearConfig:
    """Configuration shared by the phone and watch sides.

    Parameters
    ----------
    location : str
        Preferred location query used to look up today's weather row.
    metric : bool
        Format temperatures in Celsius when ``True``, Fahrenheit otherwise.
    store_path : str
        Path of the SQLite weather store (phone side).
    broker_host : str
        MQTT broker both devices connect to.
    broker_port : int
        MQTT broker port.
    broker_tls : bool
        Wrap the broker connection in TLS.
    broker_username : str or None
        Optional broker username.
    broker_password : str or None
        Optional broker password.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    namespace : str
        Topic prefix that binds one phone and one watch together. Item paths
        are appended to it (``"sunwear/default" + "/weather"``).
    pairing_key : str or None
        Hex AES key (16, 24 or 32 bytes) shared by paired devices. When set,
        item bodies are sealed before they reach the broker. ``from_env``
        derives it from ``SUNWEAR_PAIRING_PASSPHRASE`` when no key is given.
    node_id : str or None
        Identifier of this device on the channel. Random when omitted.
    put_timeout : float
        Seconds to wait for the broker to acknowledge a put before it is
        reported as failed.
    publish_retries : int
        Extra put attempts after a failed publish. ``0`` keeps publishing
        strictly best-effort (one attempt).
    publish_retry_delay : float
        Seconds between publish attempts.
    interactive_update_rate : float
        Redraw period of the watch face while interactive.
    """

    location: str = "94043"
    metric: bool = True
    store_path: str = "weather.db"
    broker_host: str = "localhost"
    broker_port: int = 1883
    broker_tls: bool = False
    broker_username: str | None = None
    broker_password: str | None = None
    mqtt_keepalive: int = 60
    namespace: str = DEFAULT_NAMESPACE
    pairing_key: str | None = None
    node_id: str | None = None
    put_timeout: float = 10.0
    publish_retries: int = 0
    publish_retry_delay: float = 2.0
    interactive_update_rate: float = INTERACTIVE_UPDATE_RATE_S

    def __post_init__(self) -> None:
        if self.publish_retries < 0:
            raise SunwearConfigError(f"publish_retries must be >= 0, got {self.publish_retries}")
        if self.interactive_update_rate <= 0:
            raise SunwearConfigError(
                f"interactive_update_rate must be positive, got {self.interactive_update_rate}"
            )
        if not self.namespace.strip("/"):
            raise SunwearConfigError("namespace must not be empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> SunwearConfig:
        """Create configuration from ``SUNWEAR_*`` environment variables.

        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SunwearConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SUNWEAR_LOCATION": "location",
            "SUNWEAR_STORE_PATH": "store_path",
            "SUNWEAR_BROKER_HOST": "broker_host",
            "SUNWEAR_BROKER_USERNAME": "broker_username",
            "SUNWEAR_BROKER_PASSWORD": "broker_password",
            "SUNWEAR_NAMESPACE": "namespace",
            "SUNWEAR_PAIRING_KEY": "pairing_key",
            "SUNWEAR_NODE_ID": "node_id",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "SUNWEAR_BROKER_PORT": ("broker_port", int),
            "SUNWEAR_MQTT_KEEPALIVE": ("mqtt_keepalive", int),
            "SUNWEAR_PUT_TIMEOUT": ("put_timeout", float),
            "SUNWEAR_PUBLISH_RETRIES": ("publish_retries", int),
            "SUNWEAR_PUBLISH_RETRY_DELAY": ("publish_retry_delay", float),
            "SUNWEAR_UPDATE_RATE": ("interactive_update_rate", float),
        }
        for env_key, (field_name, kind) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = kind(val)
            except ValueError as exc:
                raise SunwearConfigError(f"{env_key} is not a valid {kind.__name__}: {val!r}") from exc

        if "metric" not in overrides:
            config_kwargs["metric"] = _env_bool(env.get("SUNWEAR_METRIC"), True)
        if "broker_tls" not in overrides:
            config_kwargs["broker_tls"] = _env_bool(env.get("SUNWEAR_BROKER_TLS"), False)

        passphrase = env.get("SUNWEAR_PAIRING_PASSPHRASE")
        if passphrase and "pairing_key" not in config_kwargs and "pairing_key" not in overrides:
            config_kwargs["pairing_key"] = derive_pairing_key(passphrase)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
