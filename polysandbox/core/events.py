"""Grid state change notifications."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ChangeReason = Literal[
    "placed",
    "moved",
    "removed",
    "rotated",
    "wall_toggled",
    "mark_toggled",
    "pieces_cleared",
    "walls_cleared",
]


@dataclass(frozen=True, slots=True)
class GridStateChanged:
    """Published once per effective grid mutation."""

    revision: int
    reason: ChangeReason
    piece_id: str | None = None
