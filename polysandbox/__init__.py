"""Polyomino grid sandbox: placement, geometry and edit-mode state."""
