"""Grid pixel geometry, render rectangles and pointer hit-testing."""

from __future__ import annotations

import math
from dataclasses import dataclass

from gridkit.ui_runtime.geometry import CellCoord, Point, Rect
from polysandbox.core.models import DEFAULT_GRID_SIZE, Piece, WallOrientation, WallSegment
from polysandbox.core.pattern import Pattern, dimensions


@dataclass(frozen=True, slots=True)
class GridGeometry:
    """Pixel layout of one grid as reported by the layout collaborator.

    ``cell_size`` is the pitch between cell origins and includes ``cell_gap``.
    """

    origin_x: float = 0.0
    origin_y: float = 0.0
    cell_size: float = 33.0
    padding: float = 8.0
    grid_size: int = DEFAULT_GRID_SIZE
    cell_gap: float = 2.0
    wall_thickness: float = 4.0

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if self.grid_size < 1:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")

    @property
    def origin(self) -> Point:
        return Point(self.origin_x, self.origin_y)

    @property
    def interior_origin(self) -> Point:
        return Point(self.origin_x + self.padding, self.origin_y + self.padding)

    def grid_rect(self) -> Rect:
        """Return the drop surface: all cells plus the interior padding."""
        side = self.grid_size * self.cell_size + 2 * self.padding
        return Rect(self.origin_x, self.origin_y, side, side)

    def contains(self, px: float, py: float) -> bool:
        return self.grid_rect().contains(px, py)

    def cell_rect(self, row: int, col: int) -> Rect:
        """Return pixel rectangle for a grid cell."""
        inner = self.interior_origin
        side = self.cell_size - self.cell_gap
        return Rect(inner.x + col * self.cell_size, inner.y + row * self.cell_size, side, side)

    def pattern_rect(self, pattern: Pattern, anchor_row: int, anchor_col: int) -> Rect:
        """Return the rectangle spanning a pattern's bounding box at an anchor."""
        rows, cols = dimensions(pattern)
        top_left = self.cell_rect(anchor_row, anchor_col)
        return Rect(
            top_left.x,
            top_left.y,
            cols * self.cell_size - self.cell_gap,
            rows * self.cell_size - self.cell_gap,
        )

    def piece_rect(self, piece: Piece) -> Rect:
        return self.pattern_rect(piece.current_pattern, piece.anchor_row, piece.anchor_col)

    def wall_rect(self, segment: WallSegment) -> Rect:
        """Return a thin rectangle centered on the segment's cell edge."""
        inner = self.interior_origin
        half = self.wall_thickness / 2
        length = self.cell_size - 0.5
        if segment.orientation is WallOrientation.HORIZONTAL:
            return Rect(
                inner.x + segment.col * self.cell_size,
                inner.y + segment.row * self.cell_size - half,
                length,
                self.wall_thickness,
            )
        return Rect(
            inner.x + segment.col * self.cell_size - half,
            inner.y + segment.row * self.cell_size,
            self.wall_thickness,
            length,
        )

    def screen_to_cell(self, px: float, py: float) -> CellCoord | None:
        """Convert a screen point to the cell it falls in, or None outside the cells."""
        inner = self.interior_origin
        col = math.floor((px - inner.x) / self.cell_size)
        row = math.floor((py - inner.y) / self.cell_size)
        if not (0 <= row < self.grid_size and 0 <= col < self.grid_size):
            return None
        return CellCoord(row=row, col=col)

    def wall_at_point(self, px: float, py: float, tolerance: float) -> WallSegment | None:
        """Return the cell edge within ``tolerance`` pixels of a point, nearest first."""
        inner = self.interior_origin
        local_x = (px - inner.x) / self.cell_size
        local_y = (py - inner.y) / self.cell_size
        candidates: list[tuple[float, WallSegment]] = []

        h_row = math.floor(local_y + 0.5)
        h_col = math.floor(local_x)
        h_distance = abs(local_y - h_row) * self.cell_size
        horizontal = WallSegment(WallOrientation.HORIZONTAL, h_row, h_col)
        if h_distance <= tolerance and horizontal.in_range(self.grid_size):
            candidates.append((h_distance, horizontal))

        v_row = math.floor(local_y)
        v_col = math.floor(local_x + 0.5)
        v_distance = abs(local_x - v_col) * self.cell_size
        vertical = WallSegment(WallOrientation.VERTICAL, v_row, v_col)
        if v_distance <= tolerance and vertical.in_range(self.grid_size):
            candidates.append((v_distance, vertical))

        if not candidates:
            return None
        candidates.sort(key=lambda item: item[0])
        return candidates[0][1]


class GeometryContext:
    """Read-only geometry cache shared by the mapper and preview projection.

    Only the layout collaborator calls ``update``; state mutations never touch it.
    """

    def __init__(self, geometry: GridGeometry) -> None:
        self._geometry = geometry
        self._version = 0

    @property
    def geometry(self) -> GridGeometry:
        return self._geometry

    @property
    def version(self) -> int:
        return self._version

    def update(self, geometry: GridGeometry) -> bool:
        """Replace cached geometry; returns whether anything changed."""
        if geometry == self._geometry:
            return False
        self._geometry = geometry
        self._version += 1
        return True
