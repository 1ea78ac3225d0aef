"""Pointer-to-cell mapping shared by hover preview, drop commit and drag image."""

from __future__ import annotations

import math

from gridkit.ui_runtime.geometry import CellCoord, Point
from polysandbox.core.pattern import Pattern, dimensions
from polysandbox.core.placement import clamp_anchor
from polysandbox.ui.grid_geometry import GridGeometry

ZERO_OFFSET = Point(0.0, 0.0)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def block_index_from_grab_offset(
    grab_offset: Point | None,
    pattern: Pattern,
    cell_size: float,
) -> CellCoord:
    """Resolve which pattern cell the grab offset falls in, clamped to the pattern."""
    offset = grab_offset if grab_offset is not None else ZERO_OFFSET
    rows, cols = dimensions(pattern)
    block_col = min(max(0, math.floor(offset.x / cell_size)), cols - 1)
    block_row = min(max(0, math.floor(offset.y / cell_size)), rows - 1)
    return CellCoord(row=block_row, col=block_col)


def pointer_cell(geometry: GridGeometry, px: float, py: float) -> CellCoord:
    """Round the pointer's fractional cell position to the nearest cell (may be off-grid)."""
    inner = geometry.interior_origin
    cell_x = (px - inner.x) / geometry.cell_size
    cell_y = (py - inner.y) / geometry.cell_size
    return CellCoord(row=_round_half_up(cell_y), col=_round_half_up(cell_x))


def raw_anchor_from_pointer(
    geometry: GridGeometry,
    px: float,
    py: float,
    pattern: Pattern,
    grab_offset: Point | None,
) -> CellCoord:
    """Anchor that keeps the grabbed block under the pointer, before clamping."""
    block = block_index_from_grab_offset(grab_offset, pattern, geometry.cell_size)
    cell = pointer_cell(geometry, px, py)
    return CellCoord(row=cell.row - block.row, col=cell.col - block.col)


def anchor_from_pointer(
    geometry: GridGeometry,
    px: float,
    py: float,
    pattern: Pattern,
    grab_offset: Point | None,
) -> CellCoord:
    """Candidate anchor, soft-clamped so the pattern's box stays on the grid."""
    raw = raw_anchor_from_pointer(geometry, px, py, pattern, grab_offset)
    row, col = clamp_anchor(pattern, raw.row, raw.col, geometry.grid_size)
    return CellCoord(row=row, col=col)


def grab_offset_from_origin(pointer: Point, source_origin: Point | None) -> Point:
    """Grab offset is the pointer minus the grabbed shape's rendered top-left."""
    if source_origin is None:
        return ZERO_OFFSET
    return pointer.minus(source_origin)


def floating_origin(px: float, py: float, grab_offset: Point | None) -> Point:
    """Top-left of the floating drag image: pixel-exact, never snapped or clamped."""
    offset = grab_offset if grab_offset is not None else ZERO_OFFSET
    return Point(px - offset.x, py - offset.y)
