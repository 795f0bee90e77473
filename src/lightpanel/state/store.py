"""Topic-keyed state store for binary lights.

This is the only component allowed to hold the panel's belief about
which lights are on.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from lightpanel._constants import light_topic
from lightpanel.models.commands import LightAction, LightCommand, OutboundCommand

_logger = logging.getLogger(__name__)


class DeviceStateStore:
    """Last-known on/off state of every configured binary light.

    The key space is fixed at construction. Inbound merges for ids outside
    it are dropped, never inserted.

    Merges for the same light are last-write-wins in arrival order. There
    is no sequencing, so a late echo of an older state can overwrite a
    newer one; local toggles do not write at all and only become visible
    once the bridge echoes them back.
    """

    def __init__(
        self,
        device_ids: Iterable[str],
        *,
        topic_for: Callable[[str], str] = light_topic,
    ) -> None:
        self._states: dict[str, bool] = {device_id: False for device_id in device_ids}
        self._topic_for = topic_for

    @property
    def device_ids(self) -> tuple[str, ...]:
        return tuple(self._states)

    def is_known(self, device_id: str) -> bool:
        return device_id in self._states

    def merge(self, device_id: str, observed_on: bool) -> bool:
        """Apply an observed state. Returns ``False`` for unknown ids."""
        if device_id not in self._states:
            _logger.debug("Ignoring state for unknown light %s", device_id)
            return False
        self._states[device_id] = bool(observed_on)
        return True

    def toggle_local(self, device_id: str) -> OutboundCommand | None:
        """Build the command that inverts the light's current state.

        The store itself is left untouched.
        """
        current = self._states.get(device_id)
        if current is None:
            return None
        return self._command(device_id, not current)

    def switch_local(self, device_id: str, on: bool) -> OutboundCommand | None:
        """Build an explicit on/off command for a known light."""
        if device_id not in self._states:
            return None
        return self._command(device_id, on)

    def snapshot(self) -> dict[str, bool]:
        return dict(self._states)

    def _command(self, device_id: str, on: bool) -> OutboundCommand:
        payload = LightCommand(action=LightAction.from_bool(on)).to_payload()
        return OutboundCommand(topic=self._topic_for(device_id), payload=payload)
