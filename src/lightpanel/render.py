"""Render projection.

Maps current state onto UI affordances. Every function here is pure: the
same input always yields an equal update, and nothing is painted. The
host's render callback does the painting.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from lightpanel.ingestion.normalize import coerce_participant
from lightpanel.models.fancy import CompoundColorState
from lightpanel.models.scene import Scene

_SLIDER_MAX = 1000


class Indicator(enum.StrEnum):
    ASSERTED = "asserted"
    DEASSERTED = "deasserted"


class _View(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SceneView(_View):
    """Scene picker state: selected script and checkbox marks."""

    selected: str
    checked: dict[str, bool] = Field(default_factory=dict)


class FancySwatch(_View):
    """Swatch color and slider positions for one fancy light."""

    fancy_id: str
    background: str
    intensity_slider: int
    balance_slider: int


class RenderUpdate(_View):
    """A full repaint of the panel."""

    indicators: dict[str, Indicator] = Field(default_factory=dict)
    scene: SceneView | None = None
    fancy: dict[str, FancySwatch] = Field(default_factory=dict)


def _clamp_slider(value: float) -> int:
    return min(max(math.floor(value), 0), _SLIDER_MAX)


class RenderProjector:
    """Projects store snapshots onto a fixed set of UI affordances.

    ``affordances`` are the ids the UI has buttons for and
    ``scene_targets`` the checkbox targets of the scene picker. Both may
    name ids the store does not know; those are left untouched.
    """

    def __init__(self, affordances: Iterable[str], scene_targets: Iterable[str | int] = ()) -> None:
        self._affordances: tuple[str, ...] = tuple(affordances)
        self._scene_targets: tuple[str, ...] = tuple(str(target) for target in scene_targets)

    def project(self, snapshot: Mapping[str, bool]) -> RenderUpdate:
        indicators = {
            affordance: Indicator.ASSERTED if snapshot[affordance] else Indicator.DEASSERTED
            for affordance in self._affordances
            if affordance in snapshot
        }
        return RenderUpdate(indicators=indicators)

    def project_scene(self, scene: Scene) -> SceneView:
        checked = {
            target: coerce_participant(target) in scene.participants for target in self._scene_targets
        }
        return SceneView(selected=scene.name, checked=checked)

    def project_fancy(self, state: CompoundColorState) -> FancySwatch:
        r, g, b = state.compound_rgb
        return FancySwatch(
            fancy_id=state.fancy_id,
            background=f"rgb({r},{g},{b})",
            intensity_slider=_clamp_slider(state.intensity * _SLIDER_MAX),
            balance_slider=_clamp_slider((_SLIDER_MAX - state.balance * _SLIDER_MAX) / 2),
        )

    def project_all(
        self,
        snapshot: Mapping[str, bool],
        scene: Scene | None = None,
        fancy: Iterable[CompoundColorState] = (),
    ) -> RenderUpdate:
        """Full repaint: lights, scene picker and fancy swatches."""
        base = self.project(snapshot)
        return RenderUpdate(
            indicators=base.indicators,
            scene=self.project_scene(scene) if scene is not None else None,
            fancy={state.fancy_id: self.project_fancy(state) for state in fancy},
        )
