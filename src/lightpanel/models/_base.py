"""Base model for lightpanel wire payloads.

Every payload model inherits from :class:`PanelBaseModel` which is
frozen and ignores unknown keys, so extra fields sent by the bridge
never break parsing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PanelBaseModel(BaseModel):
    """Base for payloads exchanged with the MQTT bridge."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
