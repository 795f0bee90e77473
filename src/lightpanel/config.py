"""Panel configuration for lightpanel."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from lightpanel._constants import (
    DEFAULT_FANCY_IDS,
    DEFAULT_LIGHT_IDS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SCENE_PARTICIPANTS,
    FALLBACK_PATH,
    FANCY_TOPIC_TEMPLATE,
    LIGHT_TOPIC_PREFIX,
    MULTI_PARTICIPANT_SCENE,
    SCENE_TOPIC,
)
from lightpanel.exceptions import PanelConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclasses.dataclass(frozen=True)
class PanelConfig:
    """Panel configuration.

    The device id set and topic names are fixed for the lifetime of a
    panel; nothing here is discovered at runtime.

    Parameters
    ----------
    broker_host : str
        MQTT broker host name.
    broker_port : int
        MQTT broker port.
    mqtt_enabled : bool
        Try the realtime push channel at startup. When disabled (or when the
        broker cannot be reached) the panel falls back to HTTP polling.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_connect_timeout : float
        Seconds to wait for the broker to acknowledge the connection before
        falling back to HTTP polling.
    client_id : str
        MQTT client id. Empty lets the broker assign one.
    username : str or None
        Optional MQTT username.
    password : str or None
        Optional MQTT password.
    base_url : str
        Base URL of the panel web server, used by the pull fallback.
    fallback_path : str
        CGI endpoint of the pull fallback.
    poll_interval : float
        Seconds between fallback pulls.
    light_ids : tuple of str
        Addressable binary lights.
    fancy_ids : tuple of str
        Compound-color lights.
    scene_participants : tuple of int
        Canonical participant ids of the multi-participant scene, one per
        entry of ``light_ids``.
    multi_scene : str
        Name of the multi-participant scene.
    light_topic_prefix : str
        Prefix for binary light topics.
    scene_topic : str
        Scene activation topic.
    fancy_topic_template : str
        Format string for fancy light topics (``{fancy_id}`` placeholder).
    """

    broker_host: str = "localhost"
    broker_port: int = 1883
    mqtt_enabled: bool = True
    mqtt_keepalive: int = 60
    mqtt_connect_timeout: float = 5.0
    client_id: str = ""
    username: str | None = None
    password: str | None = None
    base_url: str = "http://localhost"
    fallback_path: str = FALLBACK_PATH
    poll_interval: float = DEFAULT_POLL_INTERVAL
    light_ids: tuple[str, ...] = DEFAULT_LIGHT_IDS
    fancy_ids: tuple[str, ...] = DEFAULT_FANCY_IDS
    scene_participants: tuple[int, ...] = DEFAULT_SCENE_PARTICIPANTS
    multi_scene: str = MULTI_PARTICIPANT_SCENE
    light_topic_prefix: str = LIGHT_TOPIC_PREFIX
    scene_topic: str = SCENE_TOPIC
    fancy_topic_template: str = FANCY_TOPIC_TEMPLATE

    def __post_init__(self) -> None:
        if not self.light_ids:
            raise PanelConfigError("light_ids must not be empty")
        if len(set(self.light_ids)) != len(self.light_ids):
            raise PanelConfigError("light_ids must be unique")
        if len(self.scene_participants) != len(self.light_ids):
            raise PanelConfigError(
                f"scene_participants has {len(self.scene_participants)} entries "
                f"but there are {len(self.light_ids)} lights"
            )
        if self.poll_interval <= 0:
            raise PanelConfigError("poll_interval must be positive")
        if self.mqtt_connect_timeout <= 0:
            raise PanelConfigError("mqtt_connect_timeout must be positive")
        if "{fancy_id}" not in self.fancy_topic_template:
            raise PanelConfigError("fancy_topic_template needs a {fancy_id} placeholder")

    @property
    def fallback_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.fallback_path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> PanelConfig:
        """Create configuration from environment variables.

        Reads optional ``LIGHTPANEL_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        PanelConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "LIGHTPANEL_BROKER_HOST": "broker_host",
            "LIGHTPANEL_CLIENT_ID": "client_id",
            "LIGHTPANEL_USERNAME": "username",
            "LIGHTPANEL_PASSWORD": "password",
            "LIGHTPANEL_BASE_URL": "base_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port_env = env.get("LIGHTPANEL_BROKER_PORT")
        if port_env is not None and "broker_port" not in overrides:
            config_kwargs["broker_port"] = int(port_env)

        keepalive_env = env.get("LIGHTPANEL_MQTT_KEEPALIVE")
        if keepalive_env is not None and "mqtt_keepalive" not in overrides:
            config_kwargs["mqtt_keepalive"] = int(keepalive_env)

        timeout_env = env.get("LIGHTPANEL_MQTT_CONNECT_TIMEOUT")
        if timeout_env is not None and "mqtt_connect_timeout" not in overrides:
            config_kwargs["mqtt_connect_timeout"] = float(timeout_env)

        if "mqtt_enabled" not in overrides:
            config_kwargs["mqtt_enabled"] = _env_bool(env.get("LIGHTPANEL_MQTT_ENABLED"), True)

        interval_env = env.get("LIGHTPANEL_POLL_INTERVAL")
        if interval_env is not None and "poll_interval" not in overrides:
            config_kwargs["poll_interval"] = float(interval_env)

        lights_env = env.get("LIGHTPANEL_LIGHT_IDS")
        if lights_env is not None and "light_ids" not in overrides:
            config_kwargs["light_ids"] = _env_list(lights_env)

        participants_env = env.get("LIGHTPANEL_SCENE_PARTICIPANTS")
        if participants_env is not None and "scene_participants" not in overrides:
            try:
                config_kwargs["scene_participants"] = tuple(int(item) for item in _env_list(participants_env))
            except ValueError as exc:
                raise PanelConfigError(f"LIGHTPANEL_SCENE_PARTICIPANTS must be integers: {exc}") from exc

        fancy_env = env.get("LIGHTPANEL_FANCY_IDS")
        if fancy_env is not None and "fancy_ids" not in overrides:
            config_kwargs["fancy_ids"] = _env_list(fancy_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
