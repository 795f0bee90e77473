"""Scene reconciliation.

Turns possibly partial activation payloads into a complete
:class:`~lightpanel.models.scene.Scene` and builds outbound activations.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Mapping
from typing import Any, cast

from lightpanel._constants import (
    DEFAULT_SCENE_PARTICIPANTS,
    MULTI_PARTICIPANT_SCENE,
    SCENE_OFF,
    SCENE_TOPIC,
)
from lightpanel.ingestion.normalize import coerce_participant
from lightpanel.models.commands import OutboundCommand, ScriptActivation
from lightpanel.models.scene import ActivationPayload, Scene

_logger = logging.getLogger(__name__)


def _is_wire_id(value: Hashable) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _sort_key(value: Hashable) -> tuple[int, int, str]:
    if _is_wire_id(value):
        return (0, cast(int, value), "")
    return (1, 0, str(value))


class SceneReconciler:
    """Owns the active scene.

    The scene is replaced wholesale by every reconciliation; nothing
    mutates it in place.
    """

    def __init__(
        self,
        *,
        canonical_participants: Iterable[int] = DEFAULT_SCENE_PARTICIPANTS,
        multi_scene: str = MULTI_PARTICIPANT_SCENE,
        topic: str = SCENE_TOPIC,
    ) -> None:
        self._canonical: tuple[int, ...] = tuple(canonical_participants)
        self._multi_scene = multi_scene
        self._topic = topic
        self._scene = Scene()

    @property
    def current(self) -> Scene:
        return self._scene

    @property
    def canonical_participants(self) -> tuple[int, ...]:
        return self._canonical

    @property
    def multi_scene(self) -> str:
        return self._multi_scene

    def reconcile_activation(self, payload: Mapping[str, Any]) -> Scene:
        """Derive the active scene from an inbound activation payload.

        For the multi-participant scene, an absent participant list and a
        list as long as the canonical one (one entry per light) both mean
        "everyone". Shorter lists are taken verbatim, with ids coerced to
        ``int`` where they parse. Any other scene has no participants.
        """
        activation = ActivationPayload.model_validate(dict(payload))

        participants: frozenset[Hashable] = frozenset()
        if activation.script == self._multi_scene:
            listed = activation.participating
            if listed is None or len(listed) == len(self._canonical):
                participants = frozenset(self._canonical)
            else:
                participants = frozenset(coerce_participant(item) for item in listed)

        self._scene = Scene(name=activation.script, participants=participants)
        _logger.debug(
            "Scene reconciled name=%s participants=%s",
            self._scene.name,
            sorted(self._scene.participants, key=_sort_key),
        )
        return self._scene

    def activate_local(self, participants: Iterable[Hashable]) -> OutboundCommand:
        """Build the activation command for a locally chosen participant set.

        An empty set sends the ``off`` script rather than an activation
        with nobody in it. That switches off every ceiling light, even
        ones that were never part of the scene. A non-empty set always
        activates the multi-participant scene; ids that are not integers
        cannot travel on the wire and are left out of ``participating``,
        which may leave it empty.
        """
        chosen = {coerce_participant(item) for item in participants}
        if not chosen:
            activation = ScriptActivation(script=SCENE_OFF)
        else:
            numeric = sorted(item for item in chosen if isinstance(item, int) and not isinstance(item, bool))
            dropped = chosen.difference(numeric)
            if dropped:
                _logger.debug("Dropping non-numeric scene participants %s", sorted(map(str, dropped)))
            activation = ScriptActivation(script=self._multi_scene, participating=numeric)
        return OutboundCommand(topic=self._topic, payload=activation.to_payload())
