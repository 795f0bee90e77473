"""Payload models for lightpanel."""

from lightpanel.models.commands import LightAction, LightCommand, OutboundCommand, ScriptActivation
from lightpanel.models.fancy import ColorLevels, CompoundColorState, FancyColor
from lightpanel.models.scene import ActivationPayload, Scene

__all__ = [
    "ActivationPayload",
    "ColorLevels",
    "CompoundColorState",
    "FancyColor",
    "LightAction",
    "LightCommand",
    "OutboundCommand",
    "Scene",
    "ScriptActivation",
]
