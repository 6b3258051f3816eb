"""Physics and field simulation core."""

from .config import GRID_CFG, PHYSICS_CFG, SIMULATION_CFG, GridCfg, PhysicsCfg, SimulationCfg
from .field import GridField, deform_grid, well_displacement
from .logging_utils import RunLogger
from .model import Body, BodyKind, RunStatus, SceneObject
from .physics import (
    StabilityFault,
    circular_orbit_speed,
    pairwise_force,
    step_bodies,
    total_energy,
)
from .simulation import RenderSnapshot, Simulation
from .store import BodyStore
from .sync import SnapshotDiff, apply_snapshot, reset_from_snapshot
from .timekeeping import FrameTimer, SimulationClock, clamp_speed, tick_dt
from .trajectory import TrajectoryTracker

__all__ = [
    "Body",
    "BodyKind",
    "BodyStore",
    "FrameTimer",
    "GRID_CFG",
    "GridCfg",
    "GridField",
    "PHYSICS_CFG",
    "PhysicsCfg",
    "RenderSnapshot",
    "RunLogger",
    "RunStatus",
    "SIMULATION_CFG",
    "SceneObject",
    "Simulation",
    "SimulationCfg",
    "SimulationClock",
    "SnapshotDiff",
    "StabilityFault",
    "TrajectoryTracker",
    "apply_snapshot",
    "circular_orbit_speed",
    "clamp_speed",
    "deform_grid",
    "pairwise_force",
    "reset_from_snapshot",
    "step_bodies",
    "tick_dt",
    "total_energy",
    "well_displacement",
]
