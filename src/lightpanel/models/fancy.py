"""Compound-color light models."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field

from lightpanel.models._base import PanelBaseModel


class FancyColor(PanelBaseModel):
    """Channel levels of a fancy light, each in ``[0, 1000]``.

    Missing channels are off. Extra keys (fade/flash settings) are kept.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    r: int = Field(default=0, ge=0, le=1000)
    g: int = Field(default=0, ge=0, le=1000)
    b: int = Field(default=0, ge=0, le=1000)
    cw: int = Field(default=0, ge=0, le=1000)
    ww: int = Field(default=0, ge=0, le=1000)


class ColorLevels(PanelBaseModel):
    """White-channel summary of a color payload."""

    intensity: float = Field(ge=0.0, le=1.0)
    balance: float = Field(ge=-1.0, le=1.0)


class CompoundColorState(PanelBaseModel):
    """Last known color of one fancy light."""

    fancy_id: str
    payload: dict[str, Any]
    compound_rgb: tuple[int, int, int]
    levels: ColorLevels

    @property
    def intensity(self) -> float:
        return self.levels.intensity

    @property
    def balance(self) -> float:
        return self.levels.balance
