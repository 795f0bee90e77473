"""Internal MQTT runtime: per-topic handler table, parsing and publishing."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, cast

import paho.mqtt.client as mqtt

from lightpanel.exceptions import PanelMqttError

InboundHandler = Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class InboundMessage:
    """Decoded inbound notification."""

    topic: str
    payload: dict[str, Any]


def decode_payload(payload: bytes) -> dict[str, Any]:
    """Parse MQTT payload bytes into a JSON object."""
    parsed = json.loads(payload.decode("utf-8"))
    if not isinstance(parsed, dict):
        raise PanelMqttError("MQTT payload is not a JSON object")
    return parsed


def encode_payload(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"))


class PanelMqttRuntime:
    """Threaded paho-mqtt runtime that dispatches messages onto an asyncio loop.

    Handlers are kept in a topic → handler table. The table is frozen once
    :meth:`start` runs, so every topic is subscribed on connect and no
    message arrives for a topic without a handler.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        host: str,
        port: int = 1883,
        keepalive: int = 60,
        connect_timeout: float = 5.0,
        client_id: str = "",
        username: str | None = None,
        password: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._host = host
        self._port = port
        self._keepalive = keepalive
        self._connect_timeout = connect_timeout
        self._client_id = client_id
        self._username = username
        self._password = password
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: dict[str, InboundHandler] = {}
        self._client: mqtt.Client | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the MQTT runtime is actively running."""
        return self._running

    @property
    def handlers(self) -> Mapping[str, InboundHandler]:
        return MappingProxyType(self._handlers)

    def register(self, topic: str, handler: InboundHandler) -> None:
        """Register the inbound handler for a topic. Must precede :meth:`start`."""
        if self._running:
            raise PanelMqttError(f"Cannot register {topic} after the runtime started")
        self._handlers[topic] = handler

    def start(self) -> None:
        """Connect, start the network loop and wait for the broker's CONNACK.

        Raises :class:`PanelMqttError` if the broker cannot be reached,
        refuses the connection, or does not answer within
        ``connect_timeout`` seconds.
        """
        self.stop()
        self._logger.debug(
            "MQTT runtime start requested host=%s port=%s topics=%d",
            self._host,
            self._port,
            len(self._handlers),
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
        )
        client.enable_logger(self._logger)
        if self._username:
            client.username_pw_set(self._username, self._password)

        connack = threading.Event()
        refusals: list[Any] = []

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                if not connack.is_set():
                    refusals.append(reason_code)
                connack.set()
                return
            self._logger.debug("MQTT connected successfully reason=%s", reason_code)
            for topic in self._handlers:
                c.subscribe(topic, qos=0)
            connack.set()

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self.handle_raw(msg.topic, msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(self._host, self._port, keepalive=self._keepalive)
        except (OSError, ValueError) as exc:
            raise PanelMqttError(f"MQTT connect to {self._host}:{self._port} failed: {exc}") from exc
        client.loop_start()

        if not connack.wait(self._connect_timeout) or refusals:
            client.disconnect()
            client.loop_stop()
            if refusals:
                raise PanelMqttError(f"MQTT broker {self._host}:{self._port} refused the connection: {refusals[0]}")
            raise PanelMqttError(
                f"MQTT broker {self._host}:{self._port} did not acknowledge within {self._connect_timeout}s"
            )

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def handle_raw(self, topic: str, payload: bytes) -> None:
        """Decode a message on the network thread and hand it to the loop."""
        try:
            parsed = decode_payload(payload)
        except (UnicodeDecodeError, ValueError, PanelMqttError):
            self._logger.debug("MQTT payload parse failure topic=%s", topic, exc_info=True)
            return
        self._logger.debug("Received PUBLISH topic=%s parsed=%s", topic, parsed)
        self._loop.call_soon_threadsafe(self._dispatch, InboundMessage(topic=topic, payload=parsed))

    def _dispatch(self, message: InboundMessage) -> None:
        handler = self._handlers.get(message.topic)
        if handler is None:
            self._logger.debug("No handler for topic=%s", message.topic)
            return
        try:
            handler(message.payload)
        except Exception:
            self._logger.debug("Inbound handler failed topic=%s", message.topic, exc_info=True)

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        """Publish a JSON payload without waiting for delivery."""
        client = self._client
        if client is None or not self._running:
            raise PanelMqttError("MQTT runtime is not running")
        self._logger.debug("MQTT publish topic=%s payload=%s", topic, payload)
        client.publish(topic, encode_payload(payload), qos=0)

    def stop(self) -> None:
        """Stop and disconnect current MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
