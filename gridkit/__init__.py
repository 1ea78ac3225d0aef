"""Reusable grid-editor runtime primitives."""
