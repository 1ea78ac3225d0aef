"""Render-state projection helpers for the drawing collaborator."""

from __future__ import annotations

from dataclasses import dataclass

from gridkit.ui_runtime.geometry import CellCoord, Point
from polysandbox.app.services.drag_session import DragSessionController, HoverPreview
from polysandbox.core.grid_state import GridStateStore
from polysandbox.core.models import Piece, WallSegment, cell_id, cells_for_piece
from polysandbox.core.pattern import Pattern


@dataclass(frozen=True, slots=True)
class PieceView:
    """Placed piece with resolved absolute cells."""

    id: str
    kind: str
    color: str
    anchor: CellCoord
    rotation_degrees: int
    pattern: Pattern
    cells: tuple[CellCoord, ...]


@dataclass(frozen=True, slots=True)
class DragView:
    """Active drag as seen by cursor and drag-image rendering."""

    source: str
    kind: str
    color: str
    pattern: Pattern
    piece_id: str | None
    image_origin: Point
    hover: HoverPreview | None


@dataclass(frozen=True, slots=True)
class GridSnapshot:
    """Immutable grid state for one frame."""

    size: int
    revision: int
    edit_mode: bool
    pieces: tuple[PieceView, ...]
    walls: tuple[WallSegment, ...]
    marks: tuple[CellCoord, ...]
    drag: DragView | None = None

    def occupant_color(self, row: int, col: int) -> str | None:
        target = CellCoord(row, col)
        for piece in reversed(self.pieces):
            if target in piece.cells:
                return piece.color
        return None


def piece_view(piece: Piece) -> PieceView:
    return PieceView(
        id=piece.id,
        kind=piece.kind,
        color=piece.color,
        anchor=piece.anchor,
        rotation_degrees=piece.rotation_degrees,
        pattern=piece.current_pattern,
        cells=tuple(cells_for_piece(piece)),
    )


def build_drag_view(drag: DragSessionController) -> DragView | None:
    session = drag.session
    image_origin = drag.floating_image_origin()
    if session is None or image_origin is None:
        return None
    return DragView(
        source="palette" if session.from_palette else "grid",
        kind=session.kind,
        color=session.color,
        pattern=session.pattern,
        piece_id=session.piece_id,
        image_origin=image_origin,
        hover=drag.hover_preview(),
    )


def build_snapshot(
    store: GridStateStore,
    *,
    edit_mode: bool = False,
    drag: DragSessionController | None = None,
) -> GridSnapshot:
    """Project store and drag state into a render snapshot."""
    drag_view = build_drag_view(drag) if drag is not None else None
    if edit_mode and drag_view is not None:
        drag_view = None
    return GridSnapshot(
        size=store.size,
        revision=store.revision(),
        edit_mode=edit_mode,
        pieces=tuple(piece_view(piece) for piece in store.pieces()),
        walls=tuple(store.walls()),
        marks=tuple(store.marks()),
        drag=drag_view,
    )


def snapshot_to_payload(snapshot: GridSnapshot) -> dict[str, object]:
    """Convert a snapshot to a JSON-serializable payload."""
    payload: dict[str, object] = {
        "size": snapshot.size,
        "revision": snapshot.revision,
        "edit_mode": snapshot.edit_mode,
        "pieces": [
            {
                "id": piece.id,
                "kind": piece.kind,
                "color": piece.color,
                "anchor": [piece.anchor.row, piece.anchor.col],
                "rotation": piece.rotation_degrees,
                "pattern": [list(row) for row in piece.pattern],
                "cells": [[cell.row, cell.col] for cell in piece.cells],
            }
            for piece in snapshot.pieces
        ],
        "walls": [segment.id for segment in snapshot.walls],
        "marks": [cell_id(cell) for cell in snapshot.marks],
    }
    if snapshot.drag is not None:
        hover = snapshot.drag.hover
        payload["drag"] = {
            "source": snapshot.drag.source,
            "kind": snapshot.drag.kind,
            "piece_id": snapshot.drag.piece_id,
            "image_origin": [snapshot.drag.image_origin.x, snapshot.drag.image_origin.y],
            "hover": None
            if hover is None
            else {
                "anchor": [hover.anchor.row, hover.anchor.col],
                "cells": sorted([cell.row, cell.col] for cell in hover.cells),
                "valid": hover.valid,
            },
        }
    return payload
