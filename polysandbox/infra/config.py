"""Application configuration and env loading."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from polysandbox.core.models import DEFAULT_GRID_SIZE, GRID_SIZES, RotationPolicy

DEFAULT_ENV_FILES: tuple[str, ...] = (
    "appdata/config/.env.app",
    "appdata/config/.env.app.local",
    ".env.app",
    ".env.app.local",
)


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Load KEY=VALUE pairs from an env file into process environment.

    By default, values from the env file overwrite existing environment variables.
    """
    env_path = Path(path)
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue

        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]

        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load env files left-to-right; later files win."""
    for path in tuple(paths) if paths is not None else DEFAULT_ENV_FILES:
        load_env_file(path, override_existing=override_existing)


@dataclass(frozen=True, slots=True)
class SandboxConfig:
    """Immutable editor configuration."""

    grid_size: int = DEFAULT_GRID_SIZE
    cell_size: float = 33.0
    padding: float = 8.0
    cell_gap: float = 2.0
    click_slop: float = 3.0
    wall_hit_tolerance: float = 4.0
    rotation_policy: RotationPolicy = RotationPolicy.ALLOW


def load_sandbox_config() -> SandboxConfig:
    """Build config from ``POLYSANDBOX_*`` environment variables."""
    defaults = SandboxConfig()
    grid_size = _int("POLYSANDBOX_GRID_SIZE", defaults.grid_size)
    if grid_size not in GRID_SIZES:
        grid_size = defaults.grid_size
    return SandboxConfig(
        grid_size=grid_size,
        cell_size=_positive_float("POLYSANDBOX_CELL_SIZE", defaults.cell_size),
        padding=_float("POLYSANDBOX_PADDING", defaults.padding),
        cell_gap=_float("POLYSANDBOX_CELL_GAP", defaults.cell_gap),
        click_slop=_float("POLYSANDBOX_CLICK_SLOP", defaults.click_slop),
        wall_hit_tolerance=_float("POLYSANDBOX_WALL_HIT_TOLERANCE", defaults.wall_hit_tolerance),
        rotation_policy=_rotation_policy("POLYSANDBOX_ROTATION_POLICY", defaults.rotation_policy),
    )


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _positive_float(name: str, default: float) -> float:
    value = _float(name, default)
    return value if value > 0 else default


def _rotation_policy(name: str, default: RotationPolicy) -> RotationPolicy:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return RotationPolicy(raw.strip().lower())
    except ValueError:
        return default
