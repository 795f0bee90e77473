"""State layer.

Owns the panel's belief about light states, the active scene and the
last fancy-light colors. Only these objects merge inbound data.
"""

from lightpanel.state.fancy import FancyLightCache
from lightpanel.state.scene import SceneReconciler
from lightpanel.state.store import DeviceStateStore

__all__ = ["DeviceStateStore", "FancyLightCache", "SceneReconciler"]
