"""High-level async facade for the lighting panel."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any

import aiohttp

from lightpanel._colormath import ColorMath
from lightpanel._constants import fancy_topic, light_topic
from lightpanel._mqtt import InboundHandler
from lightpanel._transport import FallbackTransport, PullTransport
from lightpanel.config import PanelConfig
from lightpanel.exceptions import PanelError
from lightpanel.ingestion.normalize import is_asserted, participants_from_targets
from lightpanel.models.commands import LightAction, LightCommand, OutboundCommand
from lightpanel.render import RenderProjector, RenderUpdate
from lightpanel.selector import PushRuntime, TransportMode, TransportSelector
from lightpanel.state.fancy import FancyLightCache
from lightpanel.state.scene import SceneReconciler
from lightpanel.state.store import DeviceStateStore

_logger = logging.getLogger(__name__)

RenderCallback = Callable[[RenderUpdate], None]


class LightPanel:
    """Client-side control layer of the lighting panel.

    Usage::

        async with LightPanel(config, on_render=paint) as panel:
            panel.toggle("basiclight3")

    All gestures are fire-and-forget: they send a command and return.
    State changes only when the bridge echoes a notification back, at
    which point ``on_render`` receives a full repaint.
    """

    def __init__(
        self,
        config: PanelConfig,
        *,
        on_render: RenderCallback | None = None,
        session: aiohttp.ClientSession | None = None,
        fallback: PullTransport | None = None,
        runtime_factory: Callable[[PanelConfig, asyncio.AbstractEventLoop], PushRuntime] | None = None,
        color_math: ColorMath | None = None,
    ) -> None:
        self._config = config
        self._on_render = on_render
        self._external_session = session is not None
        self._http_session = session
        self._fallback = fallback
        self._runtime_factory = runtime_factory

        topic_for = functools.partial(light_topic, prefix=config.light_topic_prefix)
        self._store = DeviceStateStore(config.light_ids, topic_for=topic_for)
        self._scenes = SceneReconciler(
            canonical_participants=config.scene_participants,
            multi_scene=config.multi_scene,
            topic=config.scene_topic,
        )
        self._fancy = FancyLightCache(color_math)
        self._projector = RenderProjector(
            config.light_ids,
            scene_targets=config.scene_participants,
        )
        self._selector: TransportSelector | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> LightPanel:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def start(self) -> TransportMode:
        """Select the transport and wire inbound handlers."""
        if self._selector is not None and self._selector.mode is not None:
            return self._selector.mode

        fallback = self._fallback
        if fallback is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            fallback = FallbackTransport(self._config, self._http_session)

        self._selector = TransportSelector(
            self._config,
            fallback=fallback,
            runtime_factory=self._runtime_factory,
        )
        mode = await self._selector.select(self.handler_table())
        _logger.info("Light panel started in %s mode", mode)
        return mode

    async def close(self) -> None:
        selector = self._selector
        self._selector = None
        if selector is not None:
            await selector.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def mode(self) -> TransportMode | None:
        return self._selector.mode if self._selector is not None else None

    @property
    def store(self) -> DeviceStateStore:
        return self._store

    @property
    def scenes(self) -> SceneReconciler:
        return self._scenes

    @property
    def fancy(self) -> FancyLightCache:
        return self._fancy

    def handler_table(self) -> dict[str, InboundHandler]:
        """Topic → handler registrations, one entry per addressable thing.

        The id each handler serves is bound as data, not captured from
        the loop variable.
        """
        table: dict[str, InboundHandler] = {}
        for device_id in self._store.device_ids:
            table[light_topic(device_id, self._config.light_topic_prefix)] = functools.partial(
                self._on_light_message, device_id
            )
        table[self._config.scene_topic] = self._on_scene_message
        for fancy_id in self._config.fancy_ids:
            table[fancy_topic(fancy_id, self._config.fancy_topic_template)] = functools.partial(
                self._on_fancy_message, fancy_id
            )
        return table

    def render(self) -> RenderUpdate:
        """Full repaint of the current state."""
        return self._projector.project_all(
            self._store.snapshot(),
            scene=self._scenes.current,
            fancy=self._fancy.states(),
        )

    # ------------------------------------------------------------------
    # Inbound handlers
    # ------------------------------------------------------------------

    def _on_light_message(self, device_id: str, payload: dict[str, Any]) -> None:
        if self._store.merge(device_id, is_asserted(payload)):
            self._repaint()

    def _on_scene_message(self, payload: dict[str, Any]) -> None:
        self._scenes.reconcile_activation(payload)
        self._repaint()

    def _on_fancy_message(self, fancy_id: str, payload: dict[str, Any]) -> None:
        try:
            self._fancy.update_from_external(fancy_id, payload)
        except Exception:
            _logger.debug("Could not derive color for fancy light %s", fancy_id, exc_info=True)
            return
        self._repaint()

    def _repaint(self) -> None:
        if self._on_render is None:
            return
        update = self.render()
        try:
            self._on_render(update)
        except Exception:
            _logger.debug("on_render callback failed", exc_info=True)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def _require_selector(self) -> TransportSelector:
        if self._selector is None or self._selector.mode is None:
            raise PanelError("Panel not started. Use 'async with LightPanel(...) as panel:'")
        return self._selector

    def _dispatch(self, command: OutboundCommand | None) -> bool:
        if command is None:
            return False
        self._require_selector().send(command.topic, command.payload)
        return True

    def toggle(self, device_id: str) -> bool:
        """Ask for the opposite of the light's believed state.

        Returns ``False`` (and sends nothing) for unknown lights.
        """
        return self._dispatch(self._store.toggle_local(device_id))

    def switch(self, device_id: str, on: bool) -> bool:
        return self._dispatch(self._store.switch_local(device_id, on))

    def press_rfir(self, switch_name: str, rel_x: float, rel_y: float) -> None:
        """Click on a diagonally split RF/IR button.

        The upper-left triangle (``rel_x + rel_y < 1``) switches on, the
        lower-right one off. Any switch name known to the bridge works,
        it does not need to be a tracked light.
        """
        action = LightAction.from_bool(rel_x + rel_y < 1)
        topic = light_topic(switch_name, self._config.light_topic_prefix)
        self._require_selector().send(topic, LightCommand(action=action).to_payload())

    def activate_scene(self, participants: Iterable[Hashable]) -> None:
        self._dispatch(self._scenes.activate_local(participants))

    def activate_scene_from_targets(self, targets: Iterable[Any]) -> None:
        """Activate from checked scene-picker targets (``"A"`` is skipped)."""
        self.activate_scene(participants_from_targets(targets))

    def set_fancy(self, fancy_id: str, setting: Mapping[str, Any]) -> None:
        """Send a color preset or setting to a fancy light."""
        topic = fancy_topic(fancy_id, self._config.fancy_topic_template)
        self._require_selector().send(topic, dict(setting))

    def send_raw(self, topic: str, payload: Mapping[str, Any]) -> None:
        self._require_selector().send(topic, dict(payload))
