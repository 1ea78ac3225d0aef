"""Headless entry point: replay a pointer-event script and print the final grid."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from gridkit.runtime.json_codec import dumps_text, loads
from gridkit.runtime.logging import shutdown_logging
from gridkit.ui_runtime.geometry import Point
from polysandbox.app.controller import GridEditorController
from polysandbox.app.events import PointerEvent, PointerKind
from polysandbox.app.services.state_projection import snapshot_to_payload
from polysandbox.infra.app_data import ensure_app_data_dirs
from polysandbox.infra.config import load_default_env_files, load_sandbox_config
from polysandbox.infra.logging import setup_logging

logger = logging.getLogger(__name__)


def apply_script_step(controller: GridEditorController, step: dict[str, object]) -> None:
    """Apply one scripted step to the controller."""
    kind = str(step.get("kind", "")).strip().lower()
    if kind == "edit_mode":
        controller.set_edit_mode(bool(step.get("on", True)))
        return
    if kind == "grid_size":
        controller.select_grid_size(int(str(step.get("size", 0))))
        return
    if kind == "clear_grid":
        controller.clear_grid()
        return
    if kind == "clear_walls":
        controller.clear_walls()
        return
    pointer_kind = PointerKind(kind)
    raw_origin = step.get("source_origin")
    source_origin = None
    if isinstance(raw_origin, list) and len(raw_origin) == 2:
        source_origin = Point(float(raw_origin[0]), float(raw_origin[1]))
    target = step.get("target")
    controller.handle_pointer(
        PointerEvent(
            kind=pointer_kind,
            x=float(str(step.get("x", 0.0))),
            y=float(str(step.get("y", 0.0))),
            target=None if target is None else str(target),
            source_origin=source_origin,
        )
    )


def replay(controller: GridEditorController, lines: Iterable[str]) -> int:
    """Replay JSON-lines steps; returns the number of applied steps."""
    applied = 0
    for line_no, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        step = loads(line)
        if not isinstance(step, dict):
            raise ValueError(f"line {line_no}: step must be an object")
        try:
            apply_script_step(controller, step)
        except ValueError as exc:
            raise ValueError(f"line {line_no}: {exc}") from exc
        applied += 1
    return applied


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="polysandbox", description=__doc__)
    parser.add_argument("script", nargs="?", help="JSON-lines event script (default: stdin)")
    parser.add_argument("--pretty", action="store_true", help="indent the snapshot output")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the headless replay."""
    args = build_parser().parse_args(argv)
    load_default_env_files()
    paths = ensure_app_data_dirs()
    setup_logging()
    logger.info("app_data_paths root=%s logs=%s", paths["root"], paths["logs"])

    controller = GridEditorController(load_sandbox_config())
    try:
        if args.script:
            with Path(args.script).open("r", encoding="utf-8") as handle:
                applied = replay(controller, handle)
        else:
            applied = replay(controller, sys.stdin)
        logger.info("replay_done steps=%d revision=%d", applied, controller.store.revision())
        print(dumps_text(snapshot_to_payload(controller.snapshot()), pretty=args.pretty))
        return 0
    except (OSError, ValueError) as exc:
        logger.error("replay_failed error=%s", exc)
        return 2
    finally:
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(main())
