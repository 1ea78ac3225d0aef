import pytest

from gridkit.ui_runtime.geometry import CellCoord
from polysandbox.core.models import (
    Piece,
    WallOrientation,
    WallSegment,
    cell_id,
    cells_for_pattern,
    cells_for_piece,
    parse_cell_id,
)


def test_wall_segment_parse_and_id() -> None:
    segment = WallSegment.parse("h-0-2")
    assert segment == WallSegment(WallOrientation.HORIZONTAL, 0, 2)
    assert segment.id == "h-0-2"
    assert WallSegment.parse(" V-3-5 ").id == "v-3-5"


@pytest.mark.parametrize("text", ["x-1-2", "h-1", "h-a-2", "", "h-1-2-3"])
def test_wall_segment_parse_rejects_malformed(text: str) -> None:
    with pytest.raises(ValueError):
        WallSegment.parse(text)


def test_wall_segment_ranges_per_orientation() -> None:
    assert WallSegment(WallOrientation.HORIZONTAL, 5, 4).in_range(5)
    assert not WallSegment(WallOrientation.HORIZONTAL, 5, 5).in_range(5)
    assert WallSegment(WallOrientation.VERTICAL, 4, 5).in_range(5)
    assert not WallSegment(WallOrientation.VERTICAL, 5, 0).in_range(5)
    assert not WallSegment(WallOrientation.VERTICAL, 0, -1).in_range(5)


def test_cell_ids() -> None:
    assert parse_cell_id("1-2") == CellCoord(1, 2)
    assert cell_id(CellCoord(3, 4)) == "3-4"
    with pytest.raises(ValueError):
        parse_cell_id("1")
    with pytest.raises(ValueError):
        parse_cell_id("a-b")


def test_cells_for_piece_uses_anchor_and_set_cells() -> None:
    pattern = ((1, 1, 1), (0, 1, 0))
    piece = Piece("p", "T", pattern, pattern, "#fff", anchor_row=2, anchor_col=1)
    assert cells_for_piece(piece) == [CellCoord(2, 1), CellCoord(2, 2), CellCoord(2, 3), CellCoord(3, 2)]
    assert cells_for_pattern(((1,),), 0, 0) == [CellCoord(0, 0)]
