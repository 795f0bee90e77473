"""Fixed topic names and defaults of the lighting panel."""

from __future__ import annotations

#: Topic prefix for binary lights; the device id is appended.
LIGHT_TOPIC_PREFIX = "action/GoLightCtrl/"

#: Well-known topic carrying scene (script) activations in both directions.
SCENE_TOPIC = "action/ceilingscripts/activatescript"

#: Fancy light topics are ``action/<fancy_id>/light``.
FANCY_TOPIC_TEMPLATE = "action/{fancy_id}/light"

#: Scene that carries an explicit participant set.
MULTI_PARTICIPANT_SCENE = "redshift"

#: Scene name meaning "everything off".
SCENE_OFF = "off"

#: Checkbox target that stands for "all ceiling lights" in the scene picker.
ALL_TARGET = "A"

DEFAULT_LIGHT_IDS: tuple[str, ...] = tuple(f"basiclight{n}" for n in range(1, 7))
DEFAULT_FANCY_IDS: tuple[str, ...] = ("fancy1", "fancy2", "fancy3")
DEFAULT_SCENE_PARTICIPANTS: tuple[int, ...] = (1, 2, 3, 4, 5, 6)

DEFAULT_POLL_INTERVAL: float = 30.0
FALLBACK_PATH = "/cgi-bin/fallback.cgi"

#: Inbound ``Action`` values that mean the light is on.
ASSERTED_ACTIONS = frozenset({"1", "on", "send"})

USER_AGENT = "lightpanel"


def light_topic(device_id: str, prefix: str = LIGHT_TOPIC_PREFIX) -> str:
    """Topic for a binary light, derived from its id."""
    return f"{prefix}{device_id}"


def fancy_topic(fancy_id: str, template: str = FANCY_TOPIC_TEMPLATE) -> str:
    """Topic for a compound-color light."""
    return template.format(fancy_id=fancy_id)
