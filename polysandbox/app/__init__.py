"""Application layer: pointer routing, drag sessions and render projection."""
