#!/usr/bin/env python3
"""Watch the lighting panel and print every repaint.

Starts a :class:`lightpanel.LightPanel` from ``LIGHTPANEL_*`` environment
variables, prints which transport was selected, and then one line per
render update. Optional gestures can be sent on startup.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from lightpanel import LightPanel, PanelConfig, RenderUpdate  # noqa: E402

_LOG = logging.getLogger("panel_watch")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print lighting panel state as it changes.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--toggle",
        action="append",
        default=[],
        metavar="LIGHT_ID",
        help="Toggle a light once the transport is up (repeatable).",
    )
    parser.add_argument(
        "--redshift",
        nargs="*",
        type=int,
        metavar="N",
        help="Activate the redshift scene for the given ceiling lights (none = all off).",
    )
    parser.add_argument(
        "--no-mqtt",
        action="store_true",
        help="Skip MQTT and use the HTTP pull fallback.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_update(update: RenderUpdate) -> None:
    lights = " ".join(f"{light_id}={state.value}" for light_id, state in sorted(update.indicators.items()))
    print(f"[panel] lights : {lights}")
    if update.scene is not None:
        checked = ",".join(target for target, on in update.scene.checked.items() if on) or "-"
        print(f"[panel] scene  : {update.scene.selected or '-'} participants={checked}")
    for fancy_id, swatch in sorted(update.fancy.items()):
        print(
            f"[panel] {fancy_id:<7}: {swatch.background} "
            f"intensity={swatch.intensity_slider} balance={swatch.balance_slider}"
        )


async def _run(args: argparse.Namespace) -> None:
    overrides = {"mqtt_enabled": False} if args.no_mqtt else {}
    config = PanelConfig.from_env(**overrides)

    async with LightPanel(config, on_render=_print_update) as panel:
        print(f"[panel] transport: {panel.mode}")
        for light_id in args.toggle:
            if not panel.toggle(light_id):
                _LOG.warning("Unknown light %s", light_id)
        if args.redshift is not None:
            panel.activate_scene(args.redshift)

        if args.duration > 0:
            await asyncio.sleep(args.duration)
        else:
            await asyncio.Event().wait()


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
