from __future__ import annotations

import pytest

from polysandbox.app.controller import GridEditorController
from polysandbox.core.grid_state import GridStateStore
from polysandbox.infra.config import SandboxConfig
from polysandbox.ui.grid_geometry import GeometryContext, GridGeometry

T_PATTERN = ((1, 1, 1), (0, 1, 0))
SQUARE = ((1, 1), (1, 1))
I_PATTERN = ((1, 1, 1, 1),)


def cell_point(geometry: GridGeometry, row: int, col: int, inset: float = 15.0) -> tuple[float, float]:
    """Pixel point ``inset`` px inside a cell's top-left corner."""
    rect = geometry.cell_rect(row, col)
    return rect.x + inset, rect.y + inset


@pytest.fixture
def store() -> GridStateStore:
    return GridStateStore(5)


@pytest.fixture
def geometry() -> GridGeometry:
    return GridGeometry(origin_x=0.0, origin_y=0.0, cell_size=33.0, padding=8.0, grid_size=5)


@pytest.fixture
def geometry_context(geometry: GridGeometry) -> GeometryContext:
    return GeometryContext(geometry)


@pytest.fixture
def controller() -> GridEditorController:
    return GridEditorController(
        SandboxConfig(),
        geometry=GridGeometry(origin_x=100.0, origin_y=50.0, cell_size=33.0, padding=8.0, grid_size=5),
    )
