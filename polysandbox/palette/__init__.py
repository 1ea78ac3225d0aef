"""Piece palette: built-in shapes and palette-side rotation."""

from polysandbox.palette.catalog import COLOR_PALETTE, PaletteCatalog, load_piece_config

__all__ = ["COLOR_PALETTE", "PaletteCatalog", "load_piece_config"]
