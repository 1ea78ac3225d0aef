"""Drag session controller for moving, placing and discarding pieces."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Literal

from gridkit.ui_runtime.geometry import CellCoord, Point
from polysandbox.app.flows.placement_math import (
    anchor_from_pointer,
    floating_origin,
    grab_offset_from_origin,
)
from polysandbox.app.state_machine import DragPhase
from polysandbox.core.grid_state import GridStateStore
from polysandbox.core.models import PieceTemplate, cells_for_pattern
from polysandbox.core.pattern import Pattern
from polysandbox.core.placement import validate
from polysandbox.ui.grid_geometry import GeometryContext

logger = logging.getLogger(__name__)

DragAction = Literal[
    "none",
    "started",
    "moved",
    "placed",
    "relocated",
    "rejected",
    "removed",
    "discarded",
    "clicked",
]


@dataclass(frozen=True, slots=True)
class DragSession:
    """Active drag; ``piece_id`` is None for shapes taken from the palette."""

    piece_id: str | None
    kind: str
    pattern: Pattern
    color: str
    grab_offset: Point
    press_point: Point
    pointer: Point
    moved: bool = False

    @property
    def from_palette(self) -> bool:
        return self.piece_id is None


@dataclass(frozen=True, slots=True)
class HoverPreview:
    """Grid-aligned cells the dragged pattern would occupy if dropped now."""

    anchor: CellCoord
    cells: frozenset[CellCoord]
    valid: bool


@dataclass(frozen=True, slots=True)
class DragOutcome:
    """Outcome of one drag interaction step."""

    handled: bool
    action: DragAction = "none"
    piece_id: str | None = None
    kind: str | None = None
    status: str | None = None


class DragSessionController:
    """Idle -> Dragging -> (Committing | Cancelling) -> Idle."""

    def __init__(
        self,
        store: GridStateStore,
        geometry: GeometryContext,
        *,
        click_slop: float = 3.0,
    ) -> None:
        self._store = store
        self._geometry = geometry
        self._click_slop = click_slop
        self._session: DragSession | None = None
        self._phase = DragPhase.IDLE

    @property
    def phase(self) -> DragPhase:
        return self._phase

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def attach(self, store: GridStateStore) -> None:
        """Point the controller at a new grid; any active drag is dropped."""
        self.cancel()
        self._store = store

    def begin_piece_drag(self, piece_id: str, pointer: Point) -> DragOutcome:
        """Start dragging a placed piece, grabbing it where the pointer is."""
        piece = self._store.get(piece_id)
        if piece is None or self._session is not None:
            return DragOutcome(handled=False)
        rect = self._geometry.geometry.piece_rect(piece)
        grab_offset = grab_offset_from_origin(pointer, Point(rect.x, rect.y))
        self._start(
            DragSession(
                piece_id=piece.id,
                kind=piece.kind,
                pattern=piece.current_pattern,
                color=piece.color,
                grab_offset=grab_offset,
                press_point=pointer,
                pointer=pointer,
            )
        )
        return DragOutcome(handled=True, action="started", piece_id=piece.id, kind=piece.kind)

    def begin_template_drag(
        self,
        template: PieceTemplate,
        pointer: Point,
        source_origin: Point | None,
    ) -> DragOutcome:
        """Start dragging a fresh shape from the palette."""
        if self._session is not None:
            return DragOutcome(handled=False)
        self._start(
            DragSession(
                piece_id=None,
                kind=template.kind,
                pattern=template.pattern,
                color=template.color,
                grab_offset=grab_offset_from_origin(pointer, source_origin),
                press_point=pointer,
                pointer=pointer,
            )
        )
        return DragOutcome(handled=True, action="started", kind=template.kind)

    def move(self, x: float, y: float) -> DragOutcome:
        """Track the pointer; the store is never mutated while dragging."""
        session = self._session
        if session is None:
            return DragOutcome(handled=False)
        pointer = Point(x, y)
        moved = session.moved or pointer.distance_to(session.press_point) > self._click_slop
        self._session = replace(session, pointer=pointer, moved=moved)
        return DragOutcome(handled=True, action="moved", piece_id=session.piece_id, kind=session.kind)

    def release(self, x: float, y: float) -> DragOutcome:
        """Finish the drag: commit over the grid, remove/discard outside it."""
        session = self._session
        if session is None:
            return DragOutcome(handled=False)
        pointer = Point(x, y)
        try:
            if not session.moved and pointer.distance_to(session.press_point) <= self._click_slop:
                return DragOutcome(
                    handled=True, action="clicked", piece_id=session.piece_id, kind=session.kind
                )
            geometry = self._geometry.geometry
            if geometry.contains(x, y):
                self._phase = DragPhase.COMMITTING
                return self._commit(session, pointer)
            self._phase = DragPhase.CANCELLING
            return self._cancel_outside(session)
        finally:
            self._session = None
            self._phase = DragPhase.IDLE

    def cancel(self) -> DragOutcome:
        """Abandon the active drag without touching grid state."""
        session = self._session
        self._session = None
        self._phase = DragPhase.IDLE
        if session is None:
            return DragOutcome(handled=False)
        logger.debug("drag_abandoned piece=%s kind=%s", session.piece_id, session.kind)
        return DragOutcome(handled=True, action="discarded", piece_id=session.piece_id, kind=session.kind)

    def hover_preview(self) -> HoverPreview | None:
        """Cells under the snapped drop position while the pointer is over the grid."""
        session = self._session
        if session is None:
            return None
        geometry = self._geometry.geometry
        if not geometry.contains(session.pointer.x, session.pointer.y):
            return None
        anchor = anchor_from_pointer(
            geometry, session.pointer.x, session.pointer.y, session.pattern, session.grab_offset
        )
        size = self._store.size
        cells = frozenset(
            cell
            for cell in cells_for_pattern(session.pattern, anchor.row, anchor.col)
            if 0 <= cell.row < size and 0 <= cell.col < size
        )
        return HoverPreview(
            anchor=anchor,
            cells=cells,
            valid=validate(session.pattern, anchor.row, anchor.col, size),
        )

    def floating_image_origin(self) -> Point | None:
        """Unclamped top-left for the drag image following the raw pointer."""
        session = self._session
        if session is None:
            return None
        return floating_origin(session.pointer.x, session.pointer.y, session.grab_offset)

    def _start(self, session: DragSession) -> None:
        self._session = session
        self._phase = DragPhase.DRAGGING
        logger.debug(
            "drag_started piece=%s kind=%s grab=(%.1f,%.1f)",
            session.piece_id,
            session.kind,
            session.grab_offset.x,
            session.grab_offset.y,
        )

    def _commit(self, session: DragSession, pointer: Point) -> DragOutcome:
        geometry = self._geometry.geometry
        anchor = anchor_from_pointer(geometry, pointer.x, pointer.y, session.pattern, session.grab_offset)
        if not validate(session.pattern, anchor.row, anchor.col, self._store.size):
            logger.debug("drop_rejected piece=%s anchor=(%d,%d)", session.piece_id, anchor.row, anchor.col)
            return DragOutcome(
                handled=True,
                action="rejected",
                piece_id=session.piece_id,
                kind=session.kind,
                status="Shape does not fit there.",
            )
        existed = session.piece_id is not None and self._store.get(session.piece_id) is not None
        piece_id = self._store.place_or_move(
            session.piece_id,
            session.kind,
            session.pattern,
            session.color,
            anchor.row,
            anchor.col,
        )
        return DragOutcome(
            handled=True,
            action="relocated" if existed else "placed",
            piece_id=piece_id,
            kind=session.kind,
            status=f"Placed {session.kind}.",
        )

    def _cancel_outside(self, session: DragSession) -> DragOutcome:
        if session.piece_id is None:
            return DragOutcome(handled=True, action="discarded", kind=session.kind)
        self._store.remove(session.piece_id)
        return DragOutcome(
            handled=True,
            action="removed",
            piece_id=session.piece_id,
            kind=session.kind,
            status=f"Removed {session.kind}.",
        )
