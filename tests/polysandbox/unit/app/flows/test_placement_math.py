from gridkit.ui_runtime.geometry import CellCoord, Point
from polysandbox.app.flows.placement_math import (
    anchor_from_pointer,
    block_index_from_grab_offset,
    floating_origin,
    grab_offset_from_origin,
    pointer_cell,
    raw_anchor_from_pointer,
)
from polysandbox.core.models import cells_for_pattern
from polysandbox.core.placement import validate
from polysandbox.ui.grid_geometry import GridGeometry

SQUARE = ((1, 1), (1, 1))
L_PATTERN = ((1, 0), (1, 0), (1, 1))


def _geometry() -> GridGeometry:
    return GridGeometry(origin_x=0, origin_y=0, cell_size=33, padding=8, grid_size=5)


def test_block_index_clamps_to_pattern() -> None:
    wide = ((1, 1, 1), (1, 1, 1))
    assert block_index_from_grab_offset(Point(40, 5), wide, 33) == CellCoord(0, 1)
    assert block_index_from_grab_offset(Point(500, 500), SQUARE, 33) == CellCoord(1, 1)
    assert block_index_from_grab_offset(Point(-5, -5), SQUARE, 33) == CellCoord(0, 0)


def test_missing_grab_offset_anchors_top_left() -> None:
    assert block_index_from_grab_offset(None, L_PATTERN, 33) == CellCoord(0, 0)
    geometry = _geometry()
    x, y = 8 + 2 * 33, 8 + 1 * 33
    assert anchor_from_pointer(geometry, x, y, L_PATTERN, None) == CellCoord(1, 2)


def test_pointer_cell_rounds_half_up() -> None:
    geometry = _geometry()
    assert pointer_cell(geometry, 8 + 33 * 1.5, 8) == CellCoord(0, 2)
    assert pointer_cell(geometry, 8 + 33 * 1.49, 8) == CellCoord(0, 1)
    assert pointer_cell(geometry, 0, 0) == CellCoord(0, 0)
    assert pointer_cell(geometry, -100, 8) == CellCoord(0, -3)


def test_drop_near_corner_clamps_square_inside() -> None:
    geometry = _geometry()
    x, y = 8 + 4 * 33, 8 + 4 * 33
    assert raw_anchor_from_pointer(geometry, x, y, SQUARE, Point(0, 0)) == CellCoord(4, 4)
    anchor = anchor_from_pointer(geometry, x, y, SQUARE, Point(0, 0))
    assert anchor == CellCoord(3, 3)
    assert validate(SQUARE, anchor.row, anchor.col, 5)
    assert cells_for_pattern(SQUARE, anchor.row, anchor.col) == [
        CellCoord(3, 3),
        CellCoord(3, 4),
        CellCoord(4, 3),
        CellCoord(4, 4),
    ]


def test_grabbed_block_stays_under_pointer() -> None:
    geometry = _geometry()
    rows, cols = len(L_PATTERN), len(L_PATTERN[0])
    for block_row in range(rows):
        for block_col in range(cols):
            grab = Point(block_col * 33 + 10, block_row * 33 + 20)
            for row in range(block_row, block_row + geometry.grid_size - rows + 1):
                for col in range(block_col, block_col + geometry.grid_size - cols + 1):
                    for jitter in (-12.0, 0.0, 12.0):
                        x = 8 + col * 33 + jitter
                        y = 8 + row * 33 - jitter
                        anchor = anchor_from_pointer(geometry, x, y, L_PATTERN, grab)
                        under = pointer_cell(geometry, x, y)
                        assert under == CellCoord(row, col)
                        assert CellCoord(anchor.row + block_row, anchor.col + block_col) == under


def test_oversized_pattern_clamps_to_origin() -> None:
    geometry = _geometry()
    wide = ((1, 1, 1, 1, 1, 1),)
    anchor = anchor_from_pointer(geometry, 100, 100, wide, Point(0, 0))
    assert anchor.col == 0
    assert not validate(wide, anchor.row, anchor.col, 5)


def test_grab_offset_and_floating_origin() -> None:
    assert grab_offset_from_origin(Point(50, 60), Point(40, 40)) == Point(10, 20)
    assert grab_offset_from_origin(Point(50, 60), None) == Point(0, 0)
    assert floating_origin(100, 80, Point(10, 5)) == Point(90, 75)
    assert floating_origin(100, 80, None) == Point(100, 80)
