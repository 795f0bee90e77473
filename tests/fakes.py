from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from lightpanel._mqtt import InboundHandler
from lightpanel.config import PanelConfig
from lightpanel.exceptions import PanelMqttError, PanelTransportError


@dataclass
class FakeRuntime:
    fail_start: bool = False
    handlers: dict[str, InboundHandler] = field(default_factory=dict)
    published: list[tuple[str, dict[str, Any]]] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)
    running: bool = False

    @property
    def is_running(self) -> bool:
        return self.running

    def register(self, topic: str, handler: InboundHandler) -> None:
        self.calls.append(f"register:{topic}")
        self.handlers[topic] = handler

    def start(self) -> None:
        self.calls.append("start")
        if self.fail_start:
            raise PanelMqttError("connection refused")
        self.running = True

    def stop(self) -> None:
        self.calls.append("stop")
        self.running = False

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None:
        self.published.append((topic, dict(payload)))

    def deliver(self, topic: str, payload: dict[str, Any]) -> None:
        self.handlers[topic](payload)


@dataclass
class FakeRuntimeFactory:
    runtime: FakeRuntime = field(default_factory=FakeRuntime)
    created: int = 0

    def __call__(self, _config: PanelConfig, _loop: asyncio.AbstractEventLoop) -> FakeRuntime:
        self.created += 1
        return self.runtime


@dataclass
class FakeFallback:
    fail: bool = False
    pulls: int = 0
    sends: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    async def pull(self) -> None:
        self.pulls += 1
        if self.fail:
            raise PanelTransportError("HTTP 502 from /cgi-bin/fallback.cgi", status_code=502)

    async def send(self, topic: str, payload: Mapping[str, Any]) -> None:
        if self.fail:
            raise PanelTransportError("HTTP 502 from /cgi-bin/fallback.cgi", status_code=502)
        self.sends.append((topic, dict(payload)))


@dataclass
class SlowFallback(FakeFallback):
    delay: float = 0.0
    completed: int = 0

    async def pull(self) -> None:
        self.pulls += 1
        await asyncio.sleep(self.delay)
        self.completed += 1


@dataclass(frozen=True)
class FakeReasonCode:
    value: int

    def __str__(self) -> str:
        return "Success" if self.value == 0 else f"Refused({self.value})"


@dataclass
class FakePahoClient:
    """Stands in for ``paho.mqtt.client.Client``.

    ``connack`` is the reason code the broker answers CONNECT with;
    ``None`` means the broker never answers.
    """

    connack: int | None = 0
    subscribed: list[str] = field(default_factory=list)
    published: list[tuple[str, str]] = field(default_factory=list)
    loop_running: bool = False
    disconnected: bool = False
    on_connect: Any = None
    on_message: Any = None
    on_disconnect: Any = None

    def __call__(self, **_kwargs: Any) -> FakePahoClient:
        return self

    def enable_logger(self, _logger: Any = None) -> None:
        return None

    def username_pw_set(self, _username: str, _password: str | None = None) -> None:
        return None

    def connect(self, _host: str, _port: int = 1883, keepalive: int = 60) -> None:
        return None

    def loop_start(self) -> None:
        self.loop_running = True
        if self.connack is not None:
            self.on_connect(self, None, None, FakeReasonCode(self.connack), None)

    def loop_stop(self) -> None:
        self.loop_running = False

    def disconnect(self) -> None:
        self.disconnected = True

    def subscribe(self, topic: str, qos: int = 0) -> None:
        self.subscribed.append(topic)

    def publish(self, topic: str, payload: str, qos: int = 0) -> None:
        self.published.append((topic, payload))
