"""Grid editor controller: routes pointer and layout events to core services."""

from __future__ import annotations

import logging

from gridkit.runtime.events import EventBus
from gridkit.runtime.interaction_modes import InteractionModeMachine
from polysandbox.app.events import PointerEvent, PointerKind, TargetKind, TargetRef, parse_target
from polysandbox.app.services.drag_session import DragOutcome, DragSessionController, HoverPreview
from polysandbox.app.services.edit_flow import EditActionResult, EditFlowService
from polysandbox.app.services.state_projection import GridSnapshot, build_snapshot
from polysandbox.core.grid_state import GridStateStore
from polysandbox.core.models import GRID_SIZES
from polysandbox.infra.config import SandboxConfig
from polysandbox.palette.catalog import PaletteCatalog
from polysandbox.ui.grid_geometry import GeometryContext, GridGeometry

logger = logging.getLogger(__name__)

EDIT_MODE = "edit"
DEFAULT_MODE = "default"


class GridEditorController:
    """Single entry point for pointer, resize and toolbar actions on one grid."""

    def __init__(
        self,
        config: SandboxConfig | None = None,
        *,
        catalog: PaletteCatalog | None = None,
        event_bus: EventBus | None = None,
        geometry: GridGeometry | None = None,
    ) -> None:
        self._config = config if config is not None else SandboxConfig()
        self._catalog = catalog if catalog is not None else PaletteCatalog.default()
        self._events = event_bus if event_bus is not None else EventBus()
        self._modes = InteractionModeMachine()
        self._store = self._new_store(self._config.grid_size)
        self._geometry = GeometryContext(
            geometry
            if geometry is not None
            else GridGeometry(
                cell_size=self._config.cell_size,
                padding=self._config.padding,
                grid_size=self._config.grid_size,
                cell_gap=self._config.cell_gap,
            )
        )
        self._drag = DragSessionController(
            self._store, self._geometry, click_slop=self._config.click_slop
        )

    @property
    def store(self) -> GridStateStore:
        return self._store

    @property
    def catalog(self) -> PaletteCatalog:
        return self._catalog

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def geometry(self) -> GridGeometry:
        return self._geometry.geometry

    @property
    def drag(self) -> DragSessionController:
        return self._drag

    @property
    def edit_mode(self) -> bool:
        return self._modes.current_mode == EDIT_MODE

    def set_edit_mode(self, enabled: bool) -> None:
        """Switch between piece dragging and wall/mark toggling."""
        if enabled == self.edit_mode:
            return
        self._drag.cancel()
        self._modes.set_mode(EDIT_MODE if enabled else DEFAULT_MODE)
        logger.info("edit_mode=%s", enabled)

    def select_grid_size(self, size: int) -> bool:
        """Replace the grid with an empty one of a different size."""
        if size not in GRID_SIZES or size == self._store.size:
            return False
        self._store = self._new_store(size)
        self._drag.attach(self._store)
        geometry = self._geometry.geometry
        self._geometry.update(
            GridGeometry(
                origin_x=geometry.origin_x,
                origin_y=geometry.origin_y,
                cell_size=geometry.cell_size,
                padding=geometry.padding,
                grid_size=size,
                cell_gap=geometry.cell_gap,
                wall_thickness=geometry.wall_thickness,
            )
        )
        logger.info("grid_size=%d", size)
        return True

    def on_resize(self, geometry: GridGeometry) -> None:
        """Refresh cached pixel geometry; grid contents are untouched."""
        if geometry.grid_size != self._store.size:
            logger.warning(
                "resize_ignored geometry_size=%d grid_size=%d", geometry.grid_size, self._store.size
            )
            return
        if self._geometry.update(geometry):
            logger.debug(
                "geometry_updated origin=(%.1f,%.1f) cell=%.1f",
                geometry.origin_x,
                geometry.origin_y,
                geometry.cell_size,
            )

    def handle_pointer(self, event: PointerEvent) -> DragOutcome | EditActionResult:
        """Dispatch one pointer event in arrival order."""
        if not self._modes.allows_pointer():
            return DragOutcome(handled=False)
        if event.kind is PointerKind.DOWN:
            return self._on_pointer_down(event)
        if event.kind is PointerKind.MOVE:
            return self._drag.move(event.x, event.y)
        return self._on_pointer_up(event)

    def clear_grid(self) -> None:
        self._store.clear_pieces()

    def clear_walls(self) -> None:
        self._store.clear_walls()

    def hover_preview(self) -> HoverPreview | None:
        if self.edit_mode:
            return None
        return self._drag.hover_preview()

    def snapshot(self) -> GridSnapshot:
        return build_snapshot(self._store, edit_mode=self.edit_mode, drag=self._drag)

    def _on_pointer_down(self, event: PointerEvent) -> DragOutcome | EditActionResult:
        target = parse_target(event.target)
        if self._modes.allows_toggle():
            return EditFlowService.on_pointer_down(
                store=self._store,
                geometry=self._geometry.geometry,
                x=event.x,
                y=event.y,
                target=target,
                wall_tolerance=self._config.wall_hit_tolerance,
            )
        if not self._modes.allows_drag():
            return DragOutcome(handled=False)
        if target is not None and target.kind is TargetKind.PALETTE:
            template = self._catalog.get(target.value)
            if template is None:
                return DragOutcome(handled=False)
            return self._drag.begin_template_drag(template, event.position, event.source_origin)
        piece_id = self._resolve_piece_id(event, target)
        if piece_id is None:
            return DragOutcome(handled=False)
        return self._drag.begin_piece_drag(piece_id, event.position)

    def _on_pointer_up(self, event: PointerEvent) -> DragOutcome:
        outcome = self._drag.release(event.x, event.y)
        if outcome.action != "clicked":
            return outcome
        if outcome.piece_id is not None:
            self._store.rotate(outcome.piece_id)
        elif outcome.kind is not None and self._catalog.get(outcome.kind) is not None:
            self._catalog.rotate(outcome.kind)
        return outcome

    def _resolve_piece_id(self, event: PointerEvent, target: TargetRef | None) -> str | None:
        if target is not None and target.kind is TargetKind.PIECE:
            return target.value if self._store.get(target.value) is not None else None
        cell = self._geometry.geometry.screen_to_cell(event.x, event.y)
        if cell is None:
            return None
        occupant = self._store.occupant(cell.row, cell.col)
        return None if occupant is None else occupant.id

    def _new_store(self, size: int) -> GridStateStore:
        return GridStateStore(
            size,
            event_bus=self._events,
            rotation_policy=self._config.rotation_policy,
        )
