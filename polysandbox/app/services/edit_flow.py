"""Edit-mode wall and mark toggling from pointer input."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from polysandbox.app.events import TargetKind, TargetRef
from polysandbox.core.grid_state import GridStateStore
from polysandbox.core.models import cell_id
from polysandbox.ui.grid_geometry import GridGeometry

logger = logging.getLogger(__name__)

EditTarget = Literal["wall", "mark"]


@dataclass(frozen=True, slots=True)
class EditActionResult:
    """Outcome of an edit-mode click."""

    handled: bool
    target: EditTarget | None = None
    target_id: str | None = None


class EditFlowService:
    """Edit-mode click routing as stateless helpers."""

    @staticmethod
    def on_pointer_down(
        *,
        store: GridStateStore,
        geometry: GridGeometry,
        x: float,
        y: float,
        target: TargetRef | None,
        wall_tolerance: float,
    ) -> EditActionResult:
        if target is not None and target.kind is TargetKind.WALL:
            return EditFlowService._toggle_wall(store, target.value)
        if target is not None and target.kind is TargetKind.CELL:
            return EditFlowService._toggle_mark(store, target.value)

        segment = geometry.wall_at_point(x, y, wall_tolerance)
        if segment is not None:
            return EditFlowService._toggle_wall(store, segment.id)
        cell = geometry.screen_to_cell(x, y)
        if cell is not None:
            return EditFlowService._toggle_mark(store, cell_id(cell))
        return EditActionResult(handled=False)

    @staticmethod
    def _toggle_wall(store: GridStateStore, wall_id: str) -> EditActionResult:
        if not store.toggle_wall(wall_id):
            return EditActionResult(handled=False)
        logger.debug("wall_toggled id=%s on=%s", wall_id, store.has_wall(wall_id))
        return EditActionResult(handled=True, target="wall", target_id=wall_id)

    @staticmethod
    def _toggle_mark(store: GridStateStore, mark_id: str) -> EditActionResult:
        if not store.toggle_mark(mark_id):
            return EditActionResult(handled=False)
        logger.debug("mark_toggled id=%s on=%s", mark_id, store.is_marked(mark_id))
        return EditActionResult(handled=True, target="mark", target_id=mark_id)
