"""Core domain models for the grid sandbox."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from gridkit.ui_runtime.geometry import CellCoord
from polysandbox.core.pattern import Pattern, occupied_offsets

GRID_SIZES: tuple[int, ...] = (4, 5, 6)
DEFAULT_GRID_SIZE = 5
ROTATION_STEP = 90


class WallOrientation(StrEnum):
    """Cell-edge orientation for a wall segment."""

    HORIZONTAL = "h"
    VERTICAL = "v"


class RotationPolicy(StrEnum):
    """What rotating a placed piece does when the result leaves the grid."""

    ALLOW = "allow"
    CLAMP = "clamp"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class WallSegment:
    """Wall on a cell edge.

    Horizontal edges span rows ``0..size`` and cols ``0..size-1``; vertical edges
    span rows ``0..size-1`` and cols ``0..size``.
    """

    orientation: WallOrientation
    row: int
    col: int

    @property
    def id(self) -> str:
        return f"{self.orientation.value}-{self.row}-{self.col}"

    def in_range(self, size: int) -> bool:
        if self.orientation is WallOrientation.HORIZONTAL:
            return 0 <= self.row <= size and 0 <= self.col < size
        return 0 <= self.row < size and 0 <= self.col <= size

    @classmethod
    def parse(cls, text: str) -> WallSegment:
        """Parse an ``h-R-C`` / ``v-R-C`` identifier."""
        parts = text.strip().lower().split("-")
        if len(parts) != 3:
            raise ValueError(f"malformed wall id: {text!r}")
        try:
            orientation = WallOrientation(parts[0])
            row, col = int(parts[1]), int(parts[2])
        except ValueError as exc:
            raise ValueError(f"malformed wall id: {text!r}") from exc
        return cls(orientation=orientation, row=row, col=col)


def cell_id(cell: CellCoord) -> str:
    return f"{cell.row}-{cell.col}"


def parse_cell_id(text: str) -> CellCoord:
    """Parse an ``R-C`` cell identifier."""
    parts = text.strip().split("-")
    if len(parts) != 2:
        raise ValueError(f"malformed cell id: {text!r}")
    try:
        return CellCoord(row=int(parts[0]), col=int(parts[1]))
    except ValueError as exc:
        raise ValueError(f"malformed cell id: {text!r}") from exc


@dataclass(frozen=True, slots=True)
class PieceTemplate:
    """Palette-supplied shape used to start a fresh drag."""

    kind: str
    pattern: Pattern
    color: str


@dataclass(frozen=True, slots=True)
class Piece:
    """A polyomino placed on the grid."""

    id: str
    kind: str
    current_pattern: Pattern
    original_pattern: Pattern
    color: str
    anchor_row: int
    anchor_col: int
    rotation_degrees: int = 0

    @property
    def anchor(self) -> CellCoord:
        return CellCoord(row=self.anchor_row, col=self.anchor_col)


def cells_for_pattern(pattern: Pattern, anchor_row: int, anchor_col: int) -> list[CellCoord]:
    """Compute absolute cells covered by a pattern at an anchor."""
    return [CellCoord(anchor_row + i, anchor_col + j) for i, j in occupied_offsets(pattern)]


def cells_for_piece(piece: Piece) -> list[CellCoord]:
    """Compute occupied cells for a placed piece."""
    return cells_for_pattern(piece.current_pattern, piece.anchor_row, piece.anchor_col)
