"""Scene (script) models."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from lightpanel.models._base import PanelBaseModel


class Scene(PanelBaseModel):
    """The active scene as believed by the panel."""

    name: str = ""
    participants: frozenset[Hashable] = Field(default_factory=frozenset)


class ActivationPayload(PanelBaseModel):
    """Inbound scene activation as delivered by the bridge.

    The participant list is optional; ``None`` means the sender did not
    name a subset.
    """

    script: str = ""
    participating: list[Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("participating", "participants"),
    )

    @field_validator("script", mode="before")
    @classmethod
    def _coerce_script(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("participating", mode="before")
    @classmethod
    def _drop_non_sequence(cls, value: Any) -> Any:
        # A scalar where a list belongs is treated like an absent field.
        if isinstance(value, (list, tuple)):
            return list(value)
        return None
