"""Reconcile the externally owned object list with the simulation state."""
from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .model import Body, BodyKind, RunStatus, SceneObject
from .store import BodyStore
from .trajectory import TrajectoryTracker
from .vector import as_vec3, is_finite_vec


@dataclass
class SnapshotDiff:
    """Handles touched by one reconciliation pass.

    ``reset`` lists the bodies whose position, velocity and mass were taken
    from the external list (new bodies included); their trails were cleared.
    """

    added: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    reset: list[int] = field(default_factory=list)
    removed_ids: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.reset)


def sanitize_vector(value: object) -> np.ndarray:
    try:
        vec = as_vec3(value)
    except (KeyError, TypeError, ValueError):
        return np.zeros(3, dtype=float)
    if not is_finite_vec(vec):
        return np.zeros(3, dtype=float)
    return vec


def _as_float(value: object) -> float | None:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def sanitize_mass(value: object) -> float:
    mass = _as_float(value)
    if mass is None:
        return 0.0
    return max(0.0, mass)


def sanitize_radius(value: object, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    radius = _as_float(value)
    if radius is None:
        return cfg.min_radius
    return max(radius, cfg.min_radius)


def body_from_scene_object(obj: SceneObject, cfg: PhysicsCfg = PHYSICS_CFG) -> Body:
    return Body(
        id=obj.id,
        kind=BodyKind.parse(obj.kind),
        name=obj.name,
        mass=sanitize_mass(obj.mass),
        radius=sanitize_radius(obj.radius, cfg),
        color=obj.color,
        position=sanitize_vector(obj.position),
        velocity=sanitize_vector(obj.velocity),
    )


def _validate(objects: list[SceneObject]) -> None:
    seen: set[str] = set()
    for obj in objects:
        BodyKind.parse(obj.kind)
        if obj.id in seen:
            raise ValueError(f"duplicate object id {obj.id!r} in snapshot")
        seen.add(obj.id)


def apply_snapshot(
    store: BodyStore,
    tracker: TrajectoryTracker,
    objects: Iterable[SceneObject],
    status: RunStatus | str,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> SnapshotDiff:
    """Bring *store* and *tracker* in line with the external *objects*.

    Display fields always follow the external record. Physics fields are
    only taken from it while the simulation is not running, or when the
    external mass differs from the stored one; in both cases the body's
    trail is cleared.
    """

    objects = list(objects)
    _validate(objects)
    running = RunStatus.parse(status) is RunStatus.RUNNING
    diff = SnapshotDiff()

    for obj in objects:
        handle = store.handle_of(obj.id)
        if handle is None:
            handle = store.add(body_from_scene_object(obj, cfg))
            tracker.track(handle)
            diff.added.append(handle)
            diff.reset.append(handle)
            continue

        body = store.get(handle)
        body.name = obj.name
        body.kind = BodyKind.parse(obj.kind)
        body.color = obj.color
        body.radius = sanitize_radius(obj.radius, cfg)
        diff.updated.append(handle)

        mass = sanitize_mass(obj.mass)
        if not running or mass != body.mass:
            body.mass = mass
            body.position = sanitize_vector(obj.position)
            body.velocity = sanitize_vector(obj.velocity)
            body.net_force = 0.0
            tracker.clear(handle)
            diff.reset.append(handle)

    wanted = {obj.id for obj in objects}
    for handle, body in store.items():
        if body.id not in wanted:
            store.remove(handle)
            tracker.forget(handle)
            diff.removed.append(handle)
            diff.removed_ids.append(body.id)

    return diff


def reset_from_snapshot(
    store: BodyStore,
    tracker: TrajectoryTracker,
    objects: Iterable[SceneObject],
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> SnapshotDiff:
    """Discard integrated drift: every body snaps to its declared state."""

    diff = apply_snapshot(store, tracker, objects, RunStatus.STOPPED, cfg)
    tracker.clear_all()
    return diff


__all__ = [
    "SnapshotDiff",
    "apply_snapshot",
    "body_from_scene_object",
    "reset_from_snapshot",
    "sanitize_mass",
    "sanitize_radius",
    "sanitize_vector",
]
