from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest
from pydantic import ValidationError

from lightpanel._colormath import DefaultColorMath
from lightpanel.models.fancy import ColorLevels
from lightpanel.state.fancy import FancyLightCache


@dataclass
class RecordingColorMath:
    calls: list[Mapping[str, Any]] = field(default_factory=list)

    def compound_rgb(self, payload: Mapping[str, Any]) -> tuple[int, int, int]:
        self.calls.append(payload)
        return (payload["level"], payload["level"], payload["level"])

    def day_level(self, payload: Mapping[str, Any]) -> ColorLevels:
        return ColorLevels(intensity=payload["level"] / 255, balance=0.0)


def test_update_stores_payload_and_derived_values() -> None:
    math = RecordingColorMath()
    cache = FancyLightCache(math)

    state = cache.update_from_external("fancy1", {"level": 51, "fade": {"duration": 3}})

    assert state.payload == {"level": 51, "fade": {"duration": 3}}
    assert state.compound_rgb == (51, 51, 51)
    assert state.intensity == pytest.approx(0.2)
    assert cache.get("fancy1") == state
    assert math.calls == [{"level": 51, "fade": {"duration": 3}}]


def test_second_update_overwrites_first() -> None:
    cache = FancyLightCache(RecordingColorMath())

    cache.update_from_external("fancy2", {"level": 255, "extra": True})
    cache.update_from_external("fancy2", {"level": 0})

    state = cache.get("fancy2")
    assert state is not None
    assert state.intensity == 0.0
    assert state.payload == {"level": 0}
    assert cache.payload("fancy2") == {"level": 0}


def test_entries_are_independent_per_light() -> None:
    cache = FancyLightCache(RecordingColorMath())

    cache.update_from_external("fancy1", {"level": 255})
    cache.update_from_external("fancy3", {"level": 0})

    assert [state.fancy_id for state in cache.states()] == ["fancy1", "fancy3"]
    assert cache.get("fancy2") is None
    assert cache.payload("fancy2") is None


def test_malformed_payload_fails_in_collaborator() -> None:
    cache = FancyLightCache(DefaultColorMath())
    cache.update_from_external("fancy1", {"r": 1000})

    with pytest.raises(ValidationError):
        cache.update_from_external("fancy1", {"r": "bright"})

    # Raw payload is still cached, derived state is gone.
    assert cache.payload("fancy1") == {"r": "bright"}
    assert cache.get("fancy1") is None


def test_default_color_math_pure_red() -> None:
    math = DefaultColorMath()

    assert math.compound_rgb({"r": 1000}) == (255, 0, 0)
    assert math.day_level({"r": 1000}) == ColorLevels(intensity=0.0, balance=0.0)


def test_default_color_math_white_balance() -> None:
    math = DefaultColorMath()

    cold = math.day_level({"cw": 1000})
    warm = math.day_level({"ww": 500})
    mixed = math.day_level({"cw": 250, "ww": 750})

    assert cold.intensity == 1.0
    assert cold.balance == 1.0
    assert warm.intensity == 0.5
    assert warm.balance == -1.0
    assert mixed.intensity == 0.75
    assert mixed.balance == pytest.approx(-0.5)


def test_default_color_math_clamps_channels() -> None:
    rgb = DefaultColorMath().compound_rgb({"r": 1000, "g": 1000, "b": 1000, "cw": 1000, "ww": 1000})

    assert rgb == (255, 255, 255)
