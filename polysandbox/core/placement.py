"""Placement bounds policy."""

from __future__ import annotations

from polysandbox.core.pattern import Pattern, dimensions, occupied_offsets


def validate(pattern: Pattern, anchor_row: int, anchor_col: int, size: int) -> bool:
    """Return whether every set cell of the pattern lands inside a size x size grid.

    Overlap with other pieces is never a rejection reason.
    """
    for i, j in occupied_offsets(pattern):
        row = anchor_row + i
        col = anchor_col + j
        if not (0 <= row < size and 0 <= col < size):
            return False
    return True


def clamp_anchor(pattern: Pattern, anchor_row: int, anchor_col: int, size: int) -> tuple[int, int]:
    """Clamp an anchor into ``[0, size - pattern_dimension]`` on each axis."""
    rows, cols = dimensions(pattern)
    max_row = max(0, size - rows)
    max_col = max(0, size - cols)
    return min(max(0, anchor_row), max_row), min(max(0, anchor_col), max_col)
