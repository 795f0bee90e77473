"""Custom exception hierarchy for lightpanel."""

from __future__ import annotations


class PanelError(Exception):
    """Base exception for all lightpanel errors."""


class PanelConfigError(PanelError):
    """Invalid or missing configuration."""


class PanelTransportError(PanelError):
    """HTTP-level failure on the pull fallback (network, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class PanelMqttError(PanelError):
    """MQTT runtime could not connect or publish."""
