"""lightpanel - Async client-side control layer for an MQTT lighting panel."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("lightpanel")
except PackageNotFoundError:
    __version__ = "0+local"
from lightpanel.config import PanelConfig
from lightpanel.exceptions import (
    PanelConfigError,
    PanelError,
    PanelMqttError,
    PanelTransportError,
)
from lightpanel.models import (
    ActivationPayload,
    ColorLevels,
    CompoundColorState,
    FancyColor,
    LightAction,
    LightCommand,
    OutboundCommand,
    Scene,
    ScriptActivation,
)
from lightpanel.panel import LightPanel
from lightpanel.render import FancySwatch, Indicator, RenderProjector, RenderUpdate, SceneView
from lightpanel.selector import TransportMode, TransportSelector
from lightpanel.state import DeviceStateStore, FancyLightCache, SceneReconciler

__all__ = [
    "__version__",
    "ActivationPayload",
    "ColorLevels",
    "CompoundColorState",
    "DeviceStateStore",
    "FancyColor",
    "FancyLightCache",
    "FancySwatch",
    "Indicator",
    "LightAction",
    "LightCommand",
    "LightPanel",
    "OutboundCommand",
    "PanelConfig",
    "PanelConfigError",
    "PanelError",
    "PanelMqttError",
    "PanelTransportError",
    "RenderProjector",
    "RenderUpdate",
    "Scene",
    "SceneReconciler",
    "SceneView",
    "ScriptActivation",
    "TransportMode",
    "TransportSelector",
]
