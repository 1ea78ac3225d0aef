"""Pattern math over rectangular 0/1 matrices."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

Pattern = tuple[tuple[int, ...], ...]

FALLBACK_PATTERN: Pattern = ((1,),)


def normalize_pattern(rows: Sequence[Sequence[int | bool]]) -> Pattern:
    """Return an immutable 0/1 pattern from any nested row sequence."""
    return tuple(tuple(1 if cell else 0 for cell in row) for row in rows)


def to_array(pattern: Pattern) -> np.ndarray:
    return np.asarray(pattern, dtype=np.int8)


def from_array(matrix: np.ndarray) -> Pattern:
    return tuple(tuple(int(cell) for cell in row) for row in matrix.tolist())


def dimensions(pattern: Pattern) -> tuple[int, int]:
    """Return ``(rows, cols)`` of a rectangular pattern."""
    return len(pattern), len(pattern[0])


def rotate_clockwise_90(pattern: Pattern) -> Pattern:
    """Rotate an R x C pattern into a C x R pattern, clockwise.

    ``rotated[j][R - 1 - i] == pattern[i][j]`` for every cell.
    """
    return from_array(np.rot90(to_array(pattern), k=-1))


def rotate_quarter_turns(pattern: Pattern, turns: int) -> Pattern:
    """Rotate clockwise by ``turns`` quarter turns (negative turns allowed)."""
    return from_array(np.rot90(to_array(pattern), k=-(turns % 4)))


def cell_count(pattern: Pattern) -> int:
    return int(np.count_nonzero(to_array(pattern)))


def occupied_offsets(pattern: Pattern) -> list[tuple[int, int]]:
    """Return local ``(row, col)`` offsets of set cells in row-major order."""
    rows, cols = np.nonzero(to_array(pattern))
    return [(int(r), int(c)) for r, c in zip(rows, cols, strict=True)]


def bounding_box(pattern: Pattern) -> tuple[int, int, int, int] | None:
    """Return ``(min_row, min_col, max_row, max_col)`` of set cells, or None if empty."""
    offsets = occupied_offsets(pattern)
    if not offsets:
        return None
    row_values = [row for row, _ in offsets]
    col_values = [col for _, col in offsets]
    return min(row_values), min(col_values), max(row_values), max(col_values)


def trim(pattern: Pattern) -> Pattern:
    """Crop a pattern to the bounding box of its set cells.

    An empty pattern trims to the single-cell fallback.
    """
    box = bounding_box(pattern)
    if box is None:
        return FALLBACK_PATTERN
    min_row, min_col, max_row, max_col = box
    return from_array(to_array(pattern)[min_row : max_row + 1, min_col : max_col + 1])
