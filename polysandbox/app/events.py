"""Pointer event model exchanged with the rendering collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from gridkit.ui_runtime.geometry import Point


class PointerKind(StrEnum):
    """Pointer event phase."""

    DOWN = "down"
    MOVE = "move"
    UP = "up"


class TargetKind(StrEnum):
    """Element families a pointer event can be aimed at."""

    PIECE = "piece"
    PALETTE = "palette"
    WALL = "wall"
    CELL = "cell"
    GRID = "grid"


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Pointer event in page pixel coordinates.

    ``target`` is an element id such as ``piece:piece-3`` or ``palette:T``;
    ``source_origin`` is the rendered top-left of the pressed shape, when known.
    """

    kind: PointerKind
    x: float
    y: float
    target: str | None = None
    source_origin: Point | None = None

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True, slots=True)
class TargetRef:
    """Parsed element id."""

    kind: TargetKind
    value: str = ""


def parse_target(target: str | None) -> TargetRef | None:
    """Parse ``kind:value`` element ids; unknown families resolve to None."""
    if target is None:
        return None
    kind_text, _, value = target.strip().partition(":")
    try:
        kind = TargetKind(kind_text.strip().lower())
    except ValueError:
        return None
    return TargetRef(kind=kind, value=value.strip())
