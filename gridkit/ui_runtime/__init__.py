"""UI-runtime geometry primitives."""

from gridkit.ui_runtime.geometry import CellCoord, Point, Rect

__all__ = ["CellCoord", "Point", "Rect"]
