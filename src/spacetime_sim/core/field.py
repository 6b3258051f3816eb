"""Gravity-well displacement of the fixed "fabric" grid."""
from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from .config import GRID_CFG, GridCfg
from .model import Body


class GridField:
    """Square lattice on the XZ plane with a baseline and current elevation.

    Vertices are stored row-major (one row per Z coordinate) as flat arrays.
    The coordinates and the baseline are read-only after construction.
    """

    def __init__(self, size: float, divisions: int, baseline_elevation: float = 0.0) -> None:
        if divisions < 1:
            raise ValueError("Grid needs at least one division")
        if not size > 0.0:
            raise ValueError("Grid size must be positive")
        self.size = float(size)
        self.divisions = int(divisions)

        coords = np.linspace(-self.size / 2.0, self.size / 2.0, self.divisions + 1)
        xs, zs = np.meshgrid(coords, coords)
        self.x = xs.ravel()
        self.z = zs.ravel()
        self.x.setflags(write=False)
        self.z.setflags(write=False)

        baseline = np.full(self.x.size, float(baseline_elevation), dtype=float)
        baseline.setflags(write=False)
        self.baseline: np.ndarray | None = baseline
        self.elevation = baseline.copy()

    @classmethod
    def from_config(cls, cfg: GridCfg = GRID_CFG) -> "GridField":
        return cls(cfg.size, cfg.divisions, cfg.baseline_elevation)

    @property
    def vertex_count(self) -> int:
        return int(self.x.size)

    def reset(self) -> None:
        if self.baseline is not None:
            self.elevation[:] = self.baseline

    def vertices(self) -> np.ndarray:
        """``(N, 3)`` buffer of ``(x, elevation, z)`` for the renderer."""

        return np.column_stack((self.x, self.elevation, self.z))

    def as_grid(self) -> np.ndarray:
        side = self.divisions + 1
        return self.elevation.reshape(side, side)

    def max_depth(self) -> float:
        if self.baseline is None:
            return 0.0
        return float(np.max(self.baseline - self.elevation, initial=0.0))


def well_displacement(
    x: np.ndarray,
    z: np.ndarray,
    bodies: Iterable[Body],
    cfg: GridCfg = GRID_CFG,
    max_displacement: float | None = None,
) -> np.ndarray:
    """Summed, clamped vertical displacement at the points ``(x, z)``.

    Each mass-bearing body with a finite position digs a Gaussian well under
    its projection onto the plane. Non-finite terms are dropped before
    summing.
    """

    if max_displacement is None:
        max_displacement = cfg.max_displacement
    total = np.zeros(np.shape(x), dtype=float)

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        for body in bodies:
            if not body.is_exerter:
                continue
            dx = x - body.position[0]
            dz = z - body.position[2]
            dist_sq = np.maximum(dx * dx + dz * dz, cfg.min_distance_sq)

            strength = body.mass * cfg.well_strength_per_mass
            falloff = max(body.mass * cfg.falloff_per_mass, cfg.min_falloff)
            displacement = -strength * np.exp(-dist_sq / falloff)
            total += np.where(np.isfinite(displacement), displacement, 0.0)

    return np.clip(total, -max_displacement, max_displacement)


def deform_grid(field: GridField | None, bodies: Iterable[Body], cfg: GridCfg = GRID_CFG) -> None:
    """Recompute every vertex elevation from the current bodies."""

    if field is None or field.baseline is None:
        return
    wells = [body for body in bodies if body.is_exerter]
    if not wells:
        field.reset()
        return
    displacement = well_displacement(
        field.x,
        field.z,
        wells,
        cfg,
        max_displacement=field.size * cfg.max_displacement_fraction,
    )
    field.elevation[:] = field.baseline + displacement


__all__ = ["GridField", "deform_grid", "well_displacement"]
