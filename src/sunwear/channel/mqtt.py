"""MQTT-backed sync channel.

Both paired devices connect to the same broker. Every item path maps to one
retained topic under the pairing namespace, so the broker keeps exactly the
latest item per path and replays it to a device when it (re)subscribes.

Wire body (UTF-8 JSON, optionally sealed with the pairing key)::

    {"origin": "<node id>", "fields": {"KEY_WEATHER_ID": 800, ...}}

paho-mqtt runs its network loop on a background thread; every callback is
marshalled onto the owning asyncio loop with ``call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import secrets
from collections.abc import Callable, Iterable
from typing import Any, cast

import paho.mqtt.client as mqtt
from pydantic import Field, ValidationError

from sunwear._constants import WEATHER_PATH
from sunwear._crypto.aes import open_sealed, seal, validate_key
from sunwear._redact import redact_for_log
from sunwear.channel.base import BaseSyncChannel
from sunwear.config import SunwearConfig
from sunwear.exceptions import SunwearCryptoError, SyncError, SyncPublishError
from sunwear.models._base import SunwearBaseModel
from sunwear.models.sync import ChangeEvent, FieldValue, SyncItem

_logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], Any]


class WireEnvelope(SunwearBaseModel):
    """JSON body carried by each retained message."""

    origin: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    """Raw JSON values; see :func:`replicable_fields`."""


def topic_for(namespace: str, path: str) -> str:
    return f"{namespace.strip('/')}{path}"


def path_for(namespace: str, topic: str) -> str | None:
    """Inverse of :func:`topic_for`; ``None`` for topics outside the namespace."""
    prefix = namespace.strip("/")
    if not topic.startswith(prefix + "/"):
        return None
    return topic[len(prefix) :]


def replicable_fields(fields: dict[str, Any]) -> dict[str, FieldValue]:
    """Keep the keys whose values are ints or strings; drop the rest individually."""
    kept: dict[str, FieldValue] = {}
    for key, value in fields.items():
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            kept[key] = value
        else:
            _logger.debug("Dropping field %s with unsupported value %r", key, value)
    return kept


def encode_wire_payload(item: SyncItem, *, origin: str, pairing_key: str | None = None) -> bytes:
    """Serialize (and optionally seal) an item body."""
    body = WireEnvelope(origin=origin, fields=item.fields).model_dump_json()
    if pairing_key:
        return seal(body, pairing_key).encode("ascii")
    return body.encode("utf-8")


def decode_wire_payload(payload: bytes, *, pairing_key: str | None = None) -> WireEnvelope:
    """Parse a message body into a :class:`WireEnvelope`.

    Raises
    ------
    SunwearCryptoError
        If a sealed body cannot be opened with *pairing_key*.
    SyncError
        If the body is not a valid envelope.
    """
    if pairing_key:
        text = open_sealed(payload.decode("ascii", errors="replace").strip(), pairing_key)
    else:
        text = payload.decode("utf-8", errors="replace")
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SyncError(f"Item body is not JSON: {text[:64]!r}") from exc
    if not isinstance(parsed, dict):
        raise SyncError("Item body decoded to non-object JSON")
    try:
        return WireEnvelope.model_validate(parsed)
    except ValidationError as exc:
        raise SyncError(f"Item body is not a valid envelope: {exc}") from exc


def _default_client_factory(client_id: str) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=client_id,
        protocol=mqtt.MQTTv5,
    )


def _is_failure(reason_code: Any) -> bool:
    flag = getattr(reason_code, "is_failure", None)
    if flag is not None:
        return bool(flag)
    return int(reason_code) != 0


class MqttChannel(BaseSyncChannel):
    """Sync channel over a shared MQTT broker with retained items."""

    def __init__(
        self,
        config: SunwearConfig,
        *,
        paths: Iterable[str] = (WEATHER_PATH,),
        client_factory: ClientFactory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(node_id=config.node_id or f"sunwear-{secrets.token_hex(4)}", logger=logger or _logger)
        if config.pairing_key:
            validate_key(config.pairing_key)
        self._config = config
        self._paths = tuple(SyncItem(path=p).path for p in paths)
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._connack: asyncio.Future[Any] | None = None
        self._pending: dict[int, asyncio.Future[bool]] = {}

    @property
    def topics(self) -> list[str]:
        return [topic_for(self._config.namespace, p) for p in self._paths]

    # ------------------------------------------------------------------
    # Transport hooks
    # ------------------------------------------------------------------

    async def _open(self) -> None:
        config = self._config
        loop = asyncio.get_running_loop()
        self._loop = loop
        self._logger.debug(
            "MQTT connect requested node=%s config=%s topics=%s",
            self._node_id,
            redact_for_log(dataclasses.asdict(config)),
            self.topics,
        )

        client = self._client_factory(self._node_id)
        client.enable_logger(self._logger)
        if config.broker_username:
            client.username_pw_set(config.broker_username, config.broker_password)
        if config.broker_tls:
            client.tls_set()

        client.on_connect = self._on_connect
        client.on_message = self._on_message
        client.on_publish = self._on_publish
        client.on_disconnect = self._on_disconnect

        self._connack = loop.create_future()
        self._client = client
        try:
            await loop.run_in_executor(
                None, client.connect, config.broker_host, config.broker_port, config.mqtt_keepalive
            )
            if self._client is not client:
                # disconnect() ran during the handshake; this client is no longer owned.
                client.disconnect()
                client.loop_stop()
                raise SyncError("MQTT connect superseded by disconnect")
            client.loop_start()
            reason_code = await asyncio.wait_for(self._connack, config.put_timeout)
        except TimeoutError as exc:
            self._teardown_client()
            raise SyncError(f"MQTT connect to {config.broker_host}:{config.broker_port} timed out") from exc
        except Exception:
            self._teardown_client()
            raise
        finally:
            self._connack = None

        if _is_failure(reason_code):
            self._teardown_client()
            raise SyncError(f"MQTT connect refused: {reason_code}")

    def _on_connected(self) -> None:
        self._subscribe_all()

    async def _close(self) -> None:
        pending = list(self._pending.values())
        self._pending.clear()
        for fut in pending:
            if not fut.done():
                fut.set_result(False)
        client = self._client
        if client is None:
            return
        loop = self._loop or asyncio.get_running_loop()
        await loop.run_in_executor(None, self._teardown_client)

    async def _put(self, item: SyncItem) -> None:
        client = self._client
        loop = self._loop
        if client is None or loop is None:
            raise SyncError("MQTT client not started", path=item.path)

        try:
            body = encode_wire_payload(item, origin=self._node_id, pairing_key=self._config.pairing_key)
        except SunwearCryptoError as exc:
            raise SyncPublishError(f"Could not seal item: {exc}", path=item.path) from exc

        topic = topic_for(self._config.namespace, item.path)
        info = client.publish(topic, body, qos=1, retain=True)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise SyncPublishError(f"MQTT publish to {topic} failed rc={info.rc}", path=item.path)

        fut: asyncio.Future[bool] = loop.create_future()
        self._pending[info.mid] = fut
        try:
            acked = await asyncio.wait_for(fut, self._config.put_timeout)
        except TimeoutError as exc:
            raise SyncPublishError(f"MQTT publish to {topic} not acknowledged", path=item.path) from exc
        finally:
            self._pending.pop(info.mid, None)
        if not acked:
            raise SyncPublishError(f"MQTT publish to {topic} was dropped", path=item.path)
        self._logger.debug("MQTT publish acknowledged topic=%s mid=%s", topic, info.mid)

    # ------------------------------------------------------------------
    # Helpers (loop thread)
    # ------------------------------------------------------------------

    def _subscribe_all(self) -> None:
        client = self._client
        if client is None:
            return
        for topic in self.topics:
            self._logger.debug("MQTT subscribing topic=%s", topic)
            client.subscribe(topic, qos=1)

    def _teardown_client(self) -> None:
        client = self._client
        self._client = None
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def _handle_connack(self, reason_code: Any) -> None:
        connack = self._connack
        if connack is not None and not connack.done():
            connack.set_result(reason_code)
            return
        # Automatic reconnect by paho: subscriptions must be renewed.
        if self.is_connected and not _is_failure(reason_code):
            self._logger.debug("MQTT reconnected node=%s", self._node_id)
            self._subscribe_all()

    def _handle_puback(self, mid: int, ok: bool) -> None:
        fut = self._pending.get(mid)
        if fut is not None and not fut.done():
            fut.set_result(ok)

    # ------------------------------------------------------------------
    # paho callbacks (network thread)
    # ------------------------------------------------------------------

    def _post(self, callback: Callable[..., None], *args: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(callback, *args)

    def _on_connect(self, _client: Any, _userdata: Any, _flags: Any, reason_code: Any, _properties: Any) -> None:
        if _is_failure(reason_code):
            self._logger.warning("MQTT connect failed: %s", reason_code)
        else:
            self._logger.debug("MQTT connected reason=%s", reason_code)
        self._post(self._handle_connack, reason_code)

    def _on_publish(self, _client: Any, _userdata: Any, mid: int, reason_code: Any, _properties: Any) -> None:
        self._post(self._handle_puback, mid, not _is_failure(reason_code))

    def _on_message(self, _client: Any, _userdata: Any, msg: Any) -> None:
        try:
            path = path_for(self._config.namespace, msg.topic)
            if path is None:
                self._logger.debug("Ignoring message outside namespace topic=%s", msg.topic)
                return
            if not msg.payload:
                # Empty retained message: the item was cleared, nothing to replicate.
                return
            envelope = decode_wire_payload(msg.payload, pairing_key=self._config.pairing_key)
            event = ChangeEvent(path=path, fields=replicable_fields(envelope.fields), origin=envelope.origin)
            self._post(self._deliver, event)
        except Exception:
            self._logger.debug("MQTT payload parse failure topic=%s", msg.topic, exc_info=True)

    def _on_disconnect(
        self,
        _client: Any,
        _userdata: Any,
        _disconnect_flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if self.is_connected:
            self._logger.warning("MQTT connection lost: %s", reason_code)
