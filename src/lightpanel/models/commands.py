"""Outbound command payloads."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any

from pydantic import Field

from lightpanel.models._base import PanelBaseModel


class LightAction(enum.StrEnum):
    """``Action`` values sent to binary lights."""

    ON = "on"
    OFF = "off"

    @classmethod
    def from_bool(cls, on: bool) -> LightAction:
        return cls.ON if on else cls.OFF


@dataclasses.dataclass(frozen=True)
class OutboundCommand:
    """A fire-and-forget message for the bridge."""

    topic: str
    payload: dict[str, Any]


class LightCommand(PanelBaseModel):
    """``{"Action": "on"|"off"}`` payload for a binary light."""

    action: LightAction = Field(alias="Action")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ScriptActivation(PanelBaseModel):
    """Scene activation payload.

    ``participating`` is only sent for the multi-participant scene; the
    ``off`` script carries no participant list.
    """

    script: str
    participating: list[int] | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
