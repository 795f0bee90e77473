"""Per fancy-light cache of the last external color payload."""

from __future__ import annotations

import copy
import logging
from typing import Any

from lightpanel._colormath import ColorMath, DefaultColorMath
from lightpanel.models.fancy import CompoundColorState

_logger = logging.getLogger(__name__)


class FancyLightCache:
    """Keeps the last color of each fancy light for later pre-seeding.

    Updates overwrite; nothing is merged. Payloads are not validated here,
    so a malformed payload fails inside the color-math collaborator.
    """

    def __init__(self, color_math: ColorMath | None = None) -> None:
        self._color_math: ColorMath = color_math or DefaultColorMath()
        self._payloads: dict[str, Any] = {}
        self._states: dict[str, CompoundColorState] = {}

    def update_from_external(self, fancy_id: str, payload: Any) -> CompoundColorState:
        self._payloads[fancy_id] = copy.deepcopy(payload)
        self._states.pop(fancy_id, None)

        compound = self._color_math.compound_rgb(payload)
        levels = self._color_math.day_level(payload)
        state = CompoundColorState(
            fancy_id=fancy_id,
            payload=self._payloads[fancy_id],
            compound_rgb=compound,
            levels=levels,
        )
        self._states[fancy_id] = state
        _logger.debug(
            "Fancy light %s cached rgb=%s intensity=%.3f balance=%.3f",
            fancy_id,
            compound,
            levels.intensity,
            levels.balance,
        )
        return state

    def get(self, fancy_id: str) -> CompoundColorState | None:
        return self._states.get(fancy_id)

    def payload(self, fancy_id: str) -> Any | None:
        """Raw payload as last received, even if derivation failed."""
        if fancy_id not in self._payloads:
            return None
        return copy.deepcopy(self._payloads[fancy_id])

    def states(self) -> tuple[CompoundColorState, ...]:
        return tuple(self._states.values())
