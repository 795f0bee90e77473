"""Normalization helpers for inbound bridge payloads."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from typing import Any

from lightpanel._constants import ALL_TARGET, ASSERTED_ACTIONS


def is_asserted(payload: Mapping[str, Any]) -> bool:
    """Whether a binary light payload reports the light as on.

    Only ``Action`` values of ``"1"``, ``"on"`` and ``"send"`` count;
    a missing field or anything else means off.
    """
    action = payload.get("Action")
    if action is None:
        return False
    if isinstance(action, bool):
        return action
    return str(action) in ASSERTED_ACTIONS


def coerce_participant(value: Any) -> Hashable:
    """Coerce a participant id to ``int`` where possible.

    Ids that do not parse are kept as they arrived (``"A"`` stays
    ``"A"``, ``None`` stays ``None``), so mixed id typing survives
    reconciliation. Only unhashable values fall back to ``str``.
    """
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    if isinstance(value, Hashable):
        return value
    return str(value)


def participants_from_targets(targets: Iterable[Any]) -> set[Hashable]:
    """Build a participant set from checked scene-picker targets.

    The ``"A"`` target stands for the whole ceiling and is never a
    participant on its own.
    """
    participants: set[Hashable] = set()
    for target in targets:
        if str(target).strip() == ALL_TARGET:
            continue
        participants.add(coerce_participant(target))
    return participants
