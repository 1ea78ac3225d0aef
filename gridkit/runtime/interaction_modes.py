"""Interaction mode machine and routing gates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InteractionMode:
    """Named input-gating mode."""

    name: str
    allow_pointer: bool = True
    allow_drag: bool = True
    allow_toggle: bool = False


class InteractionModeMachine:
    """Runtime mode switch for input gating."""

    def __init__(self) -> None:
        self._modes: dict[str, InteractionMode] = {}
        self.register(InteractionMode("default", allow_pointer=True, allow_drag=True, allow_toggle=False))
        self.register(InteractionMode("edit", allow_pointer=True, allow_drag=False, allow_toggle=True))
        self._current = "default"

    @property
    def current_mode(self) -> str:
        return self._current

    def register(self, mode: InteractionMode) -> None:
        """Register or replace a mode definition."""
        normalized = mode.name.strip().lower()
        if not normalized:
            raise ValueError("mode name must not be empty")
        self._modes[normalized] = InteractionMode(
            name=normalized,
            allow_pointer=mode.allow_pointer,
            allow_drag=mode.allow_drag,
            allow_toggle=mode.allow_toggle,
        )

    def set_mode(self, mode_name: str) -> None:
        """Switch to a registered mode."""
        normalized = mode_name.strip().lower()
        if normalized not in self._modes:
            raise KeyError(f"unknown mode: {mode_name}")
        self._current = normalized

    def allows_pointer(self) -> bool:
        return self._active().allow_pointer

    def allows_drag(self) -> bool:
        return self._active().allow_pointer and self._active().allow_drag

    def allows_toggle(self) -> bool:
        return self._active().allow_pointer and self._active().allow_toggle

    def _active(self) -> InteractionMode:
        return self._modes[self._current]
