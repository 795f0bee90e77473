"""Transport selection: realtime MQTT push, or periodic HTTP pull.

The mode is decided once at startup. Push needs MQTT enabled and a
broker that acknowledges the connection within ``mqtt_connect_timeout``;
otherwise the panel pulls the fallback endpoint immediately and then
every ``poll_interval`` seconds until the session ends. Pulls are
fire-and-forget: each tick starts a request without waiting for the
previous one. A failed pull is logged and the next tick tries again.
"""

from __future__ import annotations

import asyncio
import enum
import functools
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from lightpanel._mqtt import InboundHandler, PanelMqttRuntime
from lightpanel._transport import PullTransport
from lightpanel.config import PanelConfig
from lightpanel.exceptions import PanelError

_logger = logging.getLogger(__name__)


class TransportMode(enum.StrEnum):
    PUSH = "push"
    POLL = "poll"


class PushRuntime(Protocol):
    """The parts of :class:`PanelMqttRuntime` the selector relies on."""

    @property
    def is_running(self) -> bool: ...

    def register(self, topic: str, handler: InboundHandler) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def publish(self, topic: str, payload: Mapping[str, Any]) -> None: ...


def _default_runtime_factory(config: PanelConfig, loop: asyncio.AbstractEventLoop) -> PushRuntime:
    return PanelMqttRuntime(
        loop=loop,
        host=config.broker_host,
        port=config.broker_port,
        keepalive=config.mqtt_keepalive,
        connect_timeout=config.mqtt_connect_timeout,
        client_id=config.client_id,
        username=config.username,
        password=config.password,
        logger=logging.getLogger("lightpanel._mqtt"),
    )


class TransportSelector:
    """Chooses and owns the panel's transport for one session."""

    def __init__(
        self,
        config: PanelConfig,
        *,
        fallback: PullTransport,
        loop: asyncio.AbstractEventLoop | None = None,
        runtime_factory: Callable[[PanelConfig, asyncio.AbstractEventLoop], PushRuntime] | None = None,
    ) -> None:
        self._config = config
        self._fallback = fallback
        self._loop = loop
        self._runtime_factory = runtime_factory or _default_runtime_factory
        self._mode: TransportMode | None = None
        self._runtime: PushRuntime | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def mode(self) -> TransportMode | None:
        return self._mode

    async def select(self, handlers: Mapping[str, InboundHandler]) -> TransportMode:
        """Pick push or poll. Later calls return the first decision unchanged."""
        if self._mode is not None:
            return self._mode

        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop

        if self._config.mqtt_enabled:
            runtime = self._runtime_factory(self._config, loop)
            try:
                for topic, handler in handlers.items():
                    runtime.register(topic, handler)
                await loop.run_in_executor(None, runtime.start)
            except Exception:
                _logger.debug("MQTT push channel unavailable, falling back to polling", exc_info=True)
            else:
                self._runtime = runtime
                self._mode = TransportMode.PUSH
                _logger.debug("Transport selected mode=push topics=%d", len(handlers))
                return self._mode

        self._mode = TransportMode.POLL
        self._poll_task = loop.create_task(self._poll_forever())
        _logger.debug("Transport selected mode=poll interval=%ss", self._config.poll_interval)
        return self._mode

    async def _poll_forever(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            self._track(loop.create_task(self._fallback.pull()), "pull")
            await asyncio.sleep(self._config.poll_interval)

    def _track(self, task: asyncio.Task[None], what: str) -> None:
        self._pending.add(task)
        task.add_done_callback(functools.partial(self._request_done, what))

    def _request_done(self, what: str, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.debug("Fallback %s failed", what, exc_info=exc)

    def send(self, topic: str, payload: Mapping[str, Any]) -> None:
        """Send over the chosen channel without waiting for delivery."""
        if self._mode is None:
            raise PanelError("Transport not selected yet")

        if self._mode == TransportMode.PUSH:
            runtime = self._runtime
            if runtime is None:
                raise PanelError("Push transport has been stopped")
            try:
                runtime.publish(topic, payload)
            except Exception:
                _logger.debug("MQTT publish failed topic=%s", topic, exc_info=True)
            return

        loop = self._loop or asyncio.get_running_loop()
        self._track(loop.create_task(self._fallback.send(topic, payload)), "send")

    async def stop(self) -> None:
        """End the session: cancel polling and in-flight requests, or stop the MQTT runtime."""
        poll_task = self._poll_task
        self._poll_task = None
        if poll_task is not None:
            poll_task.cancel()
            await asyncio.gather(poll_task, return_exceptions=True)

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()

        runtime = self._runtime
        self._runtime = None
        if runtime is not None:
            loop = self._loop or asyncio.get_running_loop()
            try:
                await loop.run_in_executor(None, runtime.stop)
            except Exception:
                _logger.debug("MQTT runtime stop failed", exc_info=True)
