from __future__ import annotations

from lightpanel.models.fancy import ColorLevels, CompoundColorState
from lightpanel.models.scene import Scene
from lightpanel.render import Indicator, RenderProjector, RenderUpdate


def _state(intensity: float, balance: float) -> CompoundColorState:
    return CompoundColorState(
        fancy_id="fancy1",
        payload={},
        compound_rgb=(12, 34, 56),
        levels=ColorLevels(intensity=intensity, balance=balance),
    )


def test_project_maps_booleans_to_indicators() -> None:
    projector = RenderProjector(["basiclight1", "basiclight2"])

    update = projector.project({"basiclight1": True, "basiclight2": False})

    assert update.indicators == {
        "basiclight1": Indicator.ASSERTED,
        "basiclight2": Indicator.DEASSERTED,
    }


def test_project_leaves_unknown_affordances_untouched() -> None:
    projector = RenderProjector(["basiclight1", "doorbell"])

    update = projector.project({"basiclight1": True, "basiclight9": True})

    assert update.indicators == {"basiclight1": Indicator.ASSERTED}


def test_project_is_idempotent() -> None:
    projector = RenderProjector(["basiclight1", "basiclight2"])
    snapshot = {"basiclight1": True, "basiclight2": False}

    first = projector.project(snapshot)
    second = projector.project(snapshot)

    assert first == second
    assert snapshot == {"basiclight1": True, "basiclight2": False}


def test_project_scene_marks_checkboxes() -> None:
    projector = RenderProjector([], scene_targets=[1, 2, 3])

    view = projector.project_scene(Scene(name="redshift", participants=frozenset({1, 3})))

    assert view.selected == "redshift"
    assert view.checked == {"1": True, "2": False, "3": True}


def test_project_scene_without_participants_clears_all() -> None:
    projector = RenderProjector([], scene_targets=[1, 2])

    view = projector.project_scene(Scene(name="off"))

    assert view.checked == {"1": False, "2": False}


def test_project_fancy_swatch_and_sliders() -> None:
    projector = RenderProjector([])

    swatch = projector.project_fancy(_state(intensity=0.4567, balance=0.5))

    assert swatch.background == "rgb(12,34,56)"
    assert swatch.intensity_slider == 456
    assert swatch.balance_slider == 250


def test_project_fancy_slider_bounds() -> None:
    projector = RenderProjector([])

    warm = projector.project_fancy(_state(intensity=1.0, balance=-1.0))
    cold = projector.project_fancy(_state(intensity=0.0, balance=1.0))

    assert (warm.intensity_slider, warm.balance_slider) == (1000, 1000)
    assert (cold.intensity_slider, cold.balance_slider) == (0, 0)


def test_project_all_combines_sections() -> None:
    projector = RenderProjector(["basiclight1"], scene_targets=[1])

    update = projector.project_all(
        {"basiclight1": False},
        scene=Scene(name="redshift", participants=frozenset({1})),
        fancy=[_state(intensity=0.0, balance=0.0)],
    )

    assert isinstance(update, RenderUpdate)
    assert update.indicators == {"basiclight1": Indicator.DEASSERTED}
    assert update.scene is not None and update.scene.checked == {"1": True}
    assert update.fancy["fancy1"].balance_slider == 500
