"""Configuration dataclasses for the spacetime simulation."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsCfg:
    gravitational_constant: float = 1.0
    softening_factor: float = 0.5
    min_distance_sq: float = 1e-6
    min_radius: float = 0.01
    nominal_mass: float = 1.0


@dataclass(frozen=True)
class GridCfg:
    size: float = 20_000.0
    divisions: int = 50
    well_strength_per_mass: float = 0.015
    falloff_per_mass: float = 2.0
    min_falloff: float = 0.1
    min_distance_sq: float = 1e-4
    max_displacement_fraction: float = 0.2
    baseline_elevation: float = 0.0

    @property
    def max_displacement(self) -> float:
        return self.size * self.max_displacement_fraction

    @property
    def vertices_per_side(self) -> int:
        return self.divisions + 1


@dataclass(frozen=True)
class SimulationCfg:
    frame_rate: float = 60.0
    min_speed: float = 0.1
    max_speed: float = 5.0
    default_speed: float = 1.0
    default_trajectory_length: int = 200
    trails_enabled: bool = True
    log_every_ticks: int = 20
    max_recorded_faults: int = 500

    @property
    def frame_seconds(self) -> float:
        return 1.0 / self.frame_rate


PHYSICS_CFG = PhysicsCfg()
GRID_CFG = GridCfg()
SIMULATION_CFG = SimulationCfg()


__all__ = [
    "GRID_CFG",
    "GridCfg",
    "PHYSICS_CFG",
    "PhysicsCfg",
    "SIMULATION_CFG",
    "SimulationCfg",
]
