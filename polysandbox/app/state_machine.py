"""Drag session phases."""

from enum import StrEnum


class DragPhase(StrEnum):
    """Drag controller states; Committing and Cancelling are transient."""

    IDLE = "IDLE"
    DRAGGING = "DRAGGING"
    COMMITTING = "COMMITTING"
    CANCELLING = "CANCELLING"
