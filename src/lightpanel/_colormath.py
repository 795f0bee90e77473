"""Color-math collaborator used by the fancy light cache.

The cache only relies on the :class:`ColorMath` protocol. The default
implementation is a plain linear mix, good enough to tint a swatch and
position two sliders; hosts with calibrated lights inject their own.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from lightpanel.models.fancy import ColorLevels, FancyColor

# Approximate sRGB tint of each white channel, per mille.
_WARM_WHITE = (1.0, 0.58, 0.16)
_COLD_WHITE = (0.79, 0.89, 1.0)

_CHANNEL_MAX = 1000


class ColorMath(Protocol):
    """Derivations the fancy light cache needs from a color payload."""

    def compound_rgb(self, payload: Mapping[str, Any]) -> tuple[int, int, int]:
        ...

    def day_level(self, payload: Mapping[str, Any]) -> ColorLevels:
        ...


def _to_byte(value: float) -> int:
    clamped = min(max(value, 0.0), float(_CHANNEL_MAX))
    return round(clamped * 255 / _CHANNEL_MAX)


class DefaultColorMath:
    """Linear RGB + warm/cold white mix.

    Raises :class:`pydantic.ValidationError` for payloads that are not
    channel mappings.
    """

    def compound_rgb(self, payload: Mapping[str, Any]) -> tuple[int, int, int]:
        color = FancyColor.model_validate(payload)
        channels = (color.r, color.g, color.b)
        mixed = [
            base + color.ww * warm + color.cw * cold
            for base, warm, cold in zip(channels, _WARM_WHITE, _COLD_WHITE, strict=True)
        ]
        return (_to_byte(mixed[0]), _to_byte(mixed[1]), _to_byte(mixed[2]))

    def day_level(self, payload: Mapping[str, Any]) -> ColorLevels:
        color = FancyColor.model_validate(payload)
        total = color.cw + color.ww
        intensity = max(color.cw, color.ww) / _CHANNEL_MAX
        balance = (color.cw - color.ww) / total if total else 0.0
        return ColorLevels(intensity=intensity, balance=balance)
