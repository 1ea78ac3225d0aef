"""Grid state store: placed pieces, wall segments and cell marks."""

from __future__ import annotations

import itertools
import logging

import numpy as np

from gridkit.runtime.events import EventBus
from gridkit.ui_runtime.geometry import CellCoord
from polysandbox.core.events import ChangeReason, GridStateChanged
from polysandbox.core.models import (
    ROTATION_STEP,
    Piece,
    RotationPolicy,
    WallOrientation,
    WallSegment,
    cells_for_piece,
    parse_cell_id,
)
from polysandbox.core.pattern import Pattern, rotate_clockwise_90
from polysandbox.core.placement import clamp_anchor, validate

logger = logging.getLogger(__name__)


class GridStateStore:
    """Numpy-backed mutable state for one grid instance.

    Piece order is z-order: later pieces draw on top and win occupancy ties.
    """

    def __init__(
        self,
        size: int,
        *,
        event_bus: EventBus | None = None,
        rotation_policy: RotationPolicy = RotationPolicy.ALLOW,
    ) -> None:
        if size < 1:
            raise ValueError(f"grid size must be positive, got {size}")
        self._size = size
        self._events = event_bus if event_bus is not None else EventBus()
        self._rotation_policy = rotation_policy
        self._pieces: list[Piece] = []
        self._h_walls = np.zeros((size + 1, size), dtype=np.bool_)
        self._v_walls = np.zeros((size, size + 1), dtype=np.bool_)
        self._marks = np.zeros((size, size), dtype=np.bool_)
        self._revision = 0
        self._ids = itertools.count(1)

    @property
    def size(self) -> int:
        return self._size

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def rotation_policy(self) -> RotationPolicy:
        return self._rotation_policy

    def revision(self) -> int:
        return self._revision

    def pieces(self) -> tuple[Piece, ...]:
        """Return placed pieces bottom-to-top."""
        return tuple(self._pieces)

    def get(self, piece_id: str) -> Piece | None:
        index = self._index_of(piece_id)
        return None if index is None else self._pieces[index]

    def place_or_move(
        self,
        piece_id: str | None,
        kind: str,
        pattern: Pattern,
        color: str,
        anchor_row: int,
        anchor_col: int,
    ) -> str | None:
        """Create a piece or relocate an existing one in a single transition.

        Returns the piece id, or None when the pattern does not fit at the anchor.
        """
        if not validate(pattern, anchor_row, anchor_col, self._size):
            logger.debug(
                "placement_rejected piece=%s anchor=(%d,%d)", piece_id, anchor_row, anchor_col
            )
            return None
        index = self._index_of(piece_id) if piece_id is not None else None
        if index is not None:
            existing = self._pieces[index]
            self._pieces[index] = Piece(
                id=existing.id,
                kind=kind,
                current_pattern=pattern,
                original_pattern=existing.original_pattern,
                color=color,
                anchor_row=anchor_row,
                anchor_col=anchor_col,
                rotation_degrees=existing.rotation_degrees,
            )
            logger.debug("piece_moved id=%s anchor=(%d,%d)", existing.id, anchor_row, anchor_col)
            self._commit("moved", existing.id)
            return existing.id

        new_id = piece_id if piece_id is not None else self._allocate_id()
        self._pieces.append(
            Piece(
                id=new_id,
                kind=kind,
                current_pattern=pattern,
                original_pattern=pattern,
                color=color,
                anchor_row=anchor_row,
                anchor_col=anchor_col,
            )
        )
        logger.debug("piece_placed id=%s kind=%s anchor=(%d,%d)", new_id, kind, anchor_row, anchor_col)
        self._commit("placed", new_id)
        return new_id

    def remove(self, piece_id: str) -> bool:
        """Delete a piece; unknown ids are a no-op."""
        index = self._index_of(piece_id)
        if index is None:
            return False
        del self._pieces[index]
        logger.debug("piece_removed id=%s", piece_id)
        self._commit("removed", piece_id)
        return True

    def rotate(self, piece_id: str) -> bool:
        """Rotate a piece 90 degrees clockwise about its anchor."""
        index = self._index_of(piece_id)
        if index is None:
            return False
        piece = self._pieces[index]
        degrees = (piece.rotation_degrees + ROTATION_STEP) % 360
        pattern = rotate_clockwise_90(piece.current_pattern)
        anchor_row, anchor_col = piece.anchor_row, piece.anchor_col

        if not validate(pattern, anchor_row, anchor_col, self._size):
            if self._rotation_policy is RotationPolicy.REJECT:
                logger.debug("rotation_rejected id=%s", piece_id)
                return False
            if self._rotation_policy is RotationPolicy.CLAMP:
                anchor_row, anchor_col = clamp_anchor(pattern, anchor_row, anchor_col, self._size)
                if not validate(pattern, anchor_row, anchor_col, self._size):
                    logger.debug("rotation_rejected id=%s reason=oversized", piece_id)
                    return False

        self._pieces[index] = Piece(
            id=piece.id,
            kind=piece.kind,
            current_pattern=pattern,
            original_pattern=piece.original_pattern,
            color=piece.color,
            anchor_row=anchor_row,
            anchor_col=anchor_col,
            rotation_degrees=degrees,
        )
        logger.debug("piece_rotated id=%s degrees=%d", piece_id, degrees)
        self._commit("rotated", piece_id)
        return True

    def toggle_wall(self, segment: WallSegment | str) -> bool:
        """Flip wall membership; malformed or out-of-range ids are a no-op."""
        resolved = self._resolve_segment(segment)
        if resolved is None:
            return False
        walls = self._walls_for(resolved.orientation)
        walls[resolved.row, resolved.col] = not walls[resolved.row, resolved.col]
        self._commit("wall_toggled")
        return True

    def has_wall(self, segment: WallSegment | str) -> bool:
        resolved = self._resolve_segment(segment)
        if resolved is None:
            return False
        return bool(self._walls_for(resolved.orientation)[resolved.row, resolved.col])

    def walls(self) -> list[WallSegment]:
        """Return set wall segments, horizontal first, row-major."""
        result: list[WallSegment] = []
        for orientation in (WallOrientation.HORIZONTAL, WallOrientation.VERTICAL):
            rows, cols = np.nonzero(self._walls_for(orientation))
            result.extend(
                WallSegment(orientation, int(r), int(c)) for r, c in zip(rows, cols, strict=True)
            )
        return result

    def toggle_mark(self, cell: CellCoord | str) -> bool:
        """Flip a cell mark; malformed or out-of-range ids are a no-op."""
        resolved = self._resolve_cell(cell)
        if resolved is None:
            return False
        self._marks[resolved.row, resolved.col] = not self._marks[resolved.row, resolved.col]
        self._commit("mark_toggled")
        return True

    def is_marked(self, cell: CellCoord | str) -> bool:
        resolved = self._resolve_cell(cell)
        if resolved is None:
            return False
        return bool(self._marks[resolved.row, resolved.col])

    def marks(self) -> list[CellCoord]:
        rows, cols = np.nonzero(self._marks)
        return [CellCoord(int(r), int(c)) for r, c in zip(rows, cols, strict=True)]

    def clear_pieces(self) -> None:
        if not self._pieces:
            return
        self._pieces.clear()
        logger.info("grid_cleared size=%d", self._size)
        self._commit("pieces_cleared")

    def clear_walls(self) -> None:
        if not (self._h_walls.any() or self._v_walls.any()):
            return
        self._h_walls[:] = False
        self._v_walls[:] = False
        logger.info("walls_cleared size=%d", self._size)
        self._commit("walls_cleared")

    def occupant(self, row: int, col: int) -> Piece | None:
        """Return the topmost piece covering a cell."""
        target = CellCoord(row, col)
        for piece in reversed(self._pieces):
            if target in cells_for_piece(piece):
                return piece
        return None

    def occupant_color(self, row: int, col: int) -> str | None:
        piece = self.occupant(row, col)
        return None if piece is None else piece.color

    def _commit(self, reason: ChangeReason, piece_id: str | None = None) -> None:
        self._revision += 1
        self._events.publish(GridStateChanged(revision=self._revision, reason=reason, piece_id=piece_id))

    def _allocate_id(self) -> str:
        while True:
            candidate = f"piece-{next(self._ids)}"
            if self._index_of(candidate) is None:
                return candidate

    def _index_of(self, piece_id: str) -> int | None:
        for index, piece in enumerate(self._pieces):
            if piece.id == piece_id:
                return index
        return None

    def _walls_for(self, orientation: WallOrientation) -> np.ndarray:
        return self._h_walls if orientation is WallOrientation.HORIZONTAL else self._v_walls

    def _resolve_segment(self, segment: WallSegment | str) -> WallSegment | None:
        if isinstance(segment, str):
            try:
                segment = WallSegment.parse(segment)
            except ValueError:
                logger.debug("wall_id_ignored id=%r", segment)
                return None
        if not segment.in_range(self._size):
            return None
        return segment

    def _resolve_cell(self, cell: CellCoord | str) -> CellCoord | None:
        if isinstance(cell, str):
            try:
                cell = parse_cell_id(cell)
            except ValueError:
                logger.debug("cell_id_ignored id=%r", cell)
                return None
        if not (0 <= cell.row < self._size and 0 <= cell.col < self._size):
            return None
        return cell
