"""Frame-driven facade over the body store, trails and grid field."""
from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from .config import GRID_CFG, PHYSICS_CFG, SIMULATION_CFG, GridCfg, PhysicsCfg, SimulationCfg
from .field import GridField, deform_grid
from .logging_utils import RunLogger
from .model import RunStatus, SceneObject
from .physics import StabilityFault, kinetic_energy, potential_energy, step_bodies
from .store import BodyStore
from .sync import SnapshotDiff, apply_snapshot, reset_from_snapshot
from .timekeeping import SimulationClock, clamp_speed, tick_dt
from .trajectory import Point, TrajectoryTracker
from .vector import is_finite_vec, length


@dataclass
class RenderSnapshot:
    """Read-only view handed to the renderer after a tick."""

    positions: dict[str, tuple[float, float, float]] = field(default_factory=dict)
    trails: dict[str, list[Point]] = field(default_factory=dict)
    net_forces: dict[str, float] = field(default_factory=dict)
    grid_vertices: Optional[np.ndarray] = None
    tick: int = 0
    time: float = 0.0


def _coerce_objects(objects: Iterable[SceneObject | Mapping[str, Any]]) -> tuple[SceneObject, ...]:
    return tuple(
        obj if isinstance(obj, SceneObject) else SceneObject.from_dict(obj) for obj in objects
    )


class Simulation:
    """Single-writer owner of the simulation state.

    The driver calls :meth:`tick` once per rendered frame and pushes external
    changes through :meth:`apply_snapshot` and the run-control setters.
    """

    def __init__(
        self,
        physics_cfg: PhysicsCfg = PHYSICS_CFG,
        grid_cfg: Optional[GridCfg] = GRID_CFG,
        sim_cfg: SimulationCfg = SIMULATION_CFG,
        logger: Optional[RunLogger] = None,
    ) -> None:
        self.physics_cfg = physics_cfg
        self.grid_cfg = grid_cfg
        self.sim_cfg = sim_cfg
        self.logger = logger

        self.store = BodyStore()
        self.trajectories = TrajectoryTracker(sim_cfg.default_trajectory_length)
        self.grid = GridField.from_config(grid_cfg) if grid_cfg is not None else None
        self.clock = SimulationClock()
        self.faults: deque[StabilityFault] = deque(maxlen=sim_cfg.max_recorded_faults)
        self.fault_count = 0

        self.status = RunStatus.STOPPED
        self.speed = clamp_speed(sim_cfg.default_speed, sim_cfg)
        self.trails_enabled = sim_cfg.trails_enabled
        self._objects: tuple[SceneObject, ...] = ()

    # --- external entry points -------------------------------------------

    @property
    def objects(self) -> tuple[SceneObject, ...]:
        return self._objects

    def apply_snapshot(self, objects: Iterable[SceneObject | Mapping[str, Any]]) -> SnapshotDiff:
        objects = _coerce_objects(objects)
        diff = apply_snapshot(self.store, self.trajectories, objects, self.status, self.physics_cfg)
        self._objects = objects
        self._log_membership(diff)
        if self.status is not RunStatus.RUNNING:
            self._refresh_field()
        return diff

    def set_status(self, status: RunStatus | str) -> None:
        status = RunStatus.parse(status)
        previous = self.status
        self.status = status
        if status is RunStatus.STOPPED and previous is not RunStatus.STOPPED:
            self.reset()

    def reset(self) -> SnapshotDiff:
        """Snap every body back to the declared object list."""

        diff = reset_from_snapshot(self.store, self.trajectories, self._objects, self.physics_cfg)
        self.clock.reset()
        self._refresh_field()
        if self.logger is not None:
            self.logger.log_event(0, 0.0, "reset", details={"bodies": len(self.store)})
        return diff

    def set_speed(self, speed: float) -> float:
        self.speed = clamp_speed(speed, self.sim_cfg)
        return self.speed

    def set_trails(self, enabled: bool) -> None:
        self.trails_enabled = bool(enabled)
        if not self.trails_enabled:
            self.trajectories.clear_all()

    def set_trail_length(self, length: int) -> None:
        self.trajectories.set_max_length(length)

    # --- per-frame work ----------------------------------------------------

    def tick(self, frame_seconds: Optional[float] = None) -> None:
        if self.status is not RunStatus.RUNNING:
            return
        dt = tick_dt(self.speed, self.sim_cfg, frame_seconds)
        step_bodies(self.store, dt, self.physics_cfg, on_fault=self._record_fault)
        self.trajectories.update(self.store.items(), self.trails_enabled)
        self._refresh_field()
        self.clock.advance(dt)

        every = self.sim_cfg.log_every_ticks
        if self.logger is not None and every > 0 and self.clock.ticks % every == 0:
            self.logger.log_ts(self.sample())

    def snapshot(self) -> RenderSnapshot:
        snap = RenderSnapshot(tick=self.clock.ticks, time=self.clock.time)
        for handle, body in self.store.items():
            snap.positions[body.id] = body.position_tuple()
            snap.net_forces[body.id] = body.net_force
            if is_finite_vec(body.position):
                snap.trails[body.id] = self.trajectories.points(handle)
        if self.grid is not None:
            snap.grid_vertices = self.grid.vertices()
        return snap

    def sample(self) -> list[float]:
        """One timeseries row, matching :attr:`RunLogger.TIMESERIES_HEADER`."""

        bodies = list(self.store)
        kinetic = kinetic_energy(bodies)
        potential = potential_energy(bodies, self.physics_cfg)
        max_speed = max((length(body.velocity) for body in bodies), default=0.0)
        max_depth = self.grid.max_depth() if self.grid is not None else 0.0
        return [
            self.clock.ticks,
            self.clock.time,
            len(bodies),
            kinetic,
            potential,
            kinetic + potential,
            max_speed,
            max_depth,
            self.fault_count,
        ]

    # --- internals ---------------------------------------------------------

    def _refresh_field(self) -> None:
        if self.grid is not None and self.grid_cfg is not None:
            deform_grid(self.grid, self.store, self.grid_cfg)

    def _record_fault(self, fault: StabilityFault) -> None:
        self.faults.append(fault)
        self.fault_count += 1
        if self.logger is not None:
            self.logger.log_event(
                self.clock.ticks,
                self.clock.time,
                f"fault:{fault.stage}",
                fault.body_id,
                {"detail": fault.detail} if fault.detail else None,
            )

    def _log_membership(self, diff: SnapshotDiff) -> None:
        if self.logger is None:
            return
        for handle in diff.added:
            self.logger.log_event(
                self.clock.ticks, self.clock.time, "added", self.store.get(handle).id
            )
        for body_id in diff.removed_ids:
            self.logger.log_event(self.clock.ticks, self.clock.time, "removed", body_id)


__all__ = ["RenderSnapshot", "Simulation"]
