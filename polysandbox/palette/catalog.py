"""Palette catalog loaded from the piece config."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from gridkit.runtime.json_codec import loads
from polysandbox.core.models import PieceTemplate
from polysandbox.core.pattern import Pattern, normalize_pattern, rotate_clockwise_90, trim

logger = logging.getLogger(__name__)

# Applied in config order, wrapping around.
COLOR_PALETTE: tuple[str, ...] = (
    "#F5BE02",
    "#00f0f0",
    "#a000f0",
    "#00f000",
    "#f00000",
    "#0000f0",
    "#ff69b4",
    "#9370db",
    "#20b2aa",
    "#ff6b9d",
    "#32cd32",
    "#ff4500",
    "#1e90ff",
)


@dataclass(frozen=True, slots=True)
class PieceConfigEntry:
    """One entry of the piece config file."""

    id: str
    pattern: Pattern
    enabled: bool


def load_piece_config(path: Path | None = None) -> list[PieceConfigEntry]:
    """Load piece entries from ``path`` or the bundled ``piece_config.json``."""
    if path is None:
        raw = resources.files("polysandbox.palette").joinpath("piece_config.json").read_bytes()
    else:
        raw = path.read_bytes()
    return parse_piece_config(loads(raw))


def parse_piece_config(payload: object) -> list[PieceConfigEntry]:
    if not isinstance(payload, dict):
        raise ValueError("Piece config must be an object.")
    raw_pieces = payload.get("pieces")
    if not isinstance(raw_pieces, list):
        raise ValueError("Piece config pieces must be a list.")

    entries: list[PieceConfigEntry] = []
    for item in raw_pieces:
        if not isinstance(item, dict):
            raise ValueError("Each piece entry must be an object.")
        try:
            piece_id = str(item["id"]).strip()
            rows = item["pattern"]
        except KeyError as exc:
            raise ValueError("Piece entry requires id and pattern.") from exc
        if not piece_id:
            raise ValueError("Piece id is required.")
        if not isinstance(rows, list) or not rows or not all(isinstance(row, list) and row for row in rows):
            raise ValueError(f"Piece {piece_id!r} pattern must be a non-empty matrix.")
        if len({len(row) for row in rows}) != 1:
            raise ValueError(f"Piece {piece_id!r} pattern rows must have equal length.")
        entries.append(
            PieceConfigEntry(
                id=piece_id,
                pattern=trim(normalize_pattern(rows)),
                enabled=bool(item.get("enabled", True)),
            )
        )
    return entries


class PaletteCatalog:
    """Ordered palette templates with per-template rotation state."""

    def __init__(self, templates: list[PieceTemplate]) -> None:
        self._templates: dict[str, PieceTemplate] = {}
        for template in templates:
            self._templates[template.kind] = template
        self._custom_ids = itertools.count(1)

    @classmethod
    def from_config(cls, entries: list[PieceConfigEntry]) -> PaletteCatalog:
        """Build templates for enabled entries, cycling colors in config order."""
        templates = [
            PieceTemplate(kind=entry.id, pattern=entry.pattern, color=COLOR_PALETTE[index % len(COLOR_PALETTE)])
            for index, entry in enumerate(entries)
            if entry.enabled
        ]
        return cls(templates)

    @classmethod
    def default(cls) -> PaletteCatalog:
        return cls.from_config(load_piece_config())

    def kinds(self) -> list[str]:
        return list(self._templates)

    def template(self, kind: str) -> PieceTemplate:
        try:
            return self._templates[kind]
        except KeyError as exc:
            raise KeyError(f"unknown piece kind: {kind}") from exc

    def get(self, kind: str) -> PieceTemplate | None:
        return self._templates.get(kind)

    def rotate(self, kind: str) -> PieceTemplate:
        """Rotate a palette shape clockwise; later drags carry the rotated pattern."""
        current = self.template(kind)
        rotated = PieceTemplate(kind=current.kind, pattern=rotate_clockwise_90(current.pattern), color=current.color)
        self._templates[kind] = rotated
        logger.debug("palette_rotated kind=%s", kind)
        return rotated

    def add_custom(self, rows: list[list[int]], color: str) -> PieceTemplate:
        """Register an authored shape, cropped to its set cells."""
        kind = f"custom-{next(self._custom_ids)}"
        while kind in self._templates:
            kind = f"custom-{next(self._custom_ids)}"
        template = PieceTemplate(kind=kind, pattern=trim(normalize_pattern(rows)), color=color)
        self._templates[kind] = template
        logger.debug("palette_custom_added kind=%s", kind)
        return template
