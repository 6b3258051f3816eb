"""Softened N-body gravity and the per-tick integration step."""
from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .model import Body
from .vector import is_finite_vec, length, length_sq, normalize


@dataclass(frozen=True)
class StabilityFault:
    """A numerical fault that was contained during a step."""

    body_id: str
    stage: str
    detail: str = ""


FaultHandler = Callable[[StabilityFault], None]


def effective_mass(mass: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Mass used for acceleration; massless bodies count as ``nominal_mass``."""

    return mass if mass > 0.0 else cfg.nominal_mass


def softening_radius(body: Body, other: Body, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return (body.radius + other.radius) * cfg.softening_factor


def pairwise_force(body: Body, exerter: Body, cfg: PhysicsCfg = PHYSICS_CFG) -> np.ndarray | None:
    """Softened gravitational force of *exerter* on *body*.

    Beyond the softening radius this is the plain inverse-square law; inside
    it the distance is held at the softening radius so the magnitude
    plateaus. Returns ``None`` when the term is not finite.
    """

    direction = exerter.position - body.position
    dist_sq = max(length_sq(direction), cfg.min_distance_sq)
    min_distance = softening_radius(body, exerter, cfg)
    dist_sq = max(dist_sq, min_distance * min_distance)

    magnitude = (
        cfg.gravitational_constant
        * exerter.mass
        * effective_mass(body.mass, cfg)
        / dist_sq
    )
    if not math.isfinite(magnitude):
        return None
    force = normalize(direction) * magnitude
    if not is_finite_vec(force):
        return None
    return force


def _report(on_fault: FaultHandler | None, body: Body, stage: str, detail: str) -> None:
    if on_fault is not None:
        on_fault(StabilityFault(body.id, stage, detail))


def step_bodies(
    bodies: Iterable[Body],
    dt: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
    on_fault: FaultHandler | None = None,
) -> None:
    """Advance every body by one semi-implicit Euler step, in place.

    Velocity is updated from the current acceleration, then position from
    the new velocity. Bodies are visited in order and see the already
    updated positions of earlier bodies; the set of exerters is fixed when
    the step starts. Faults are rolled back at the smallest scope and
    reported through *on_fault*; the step itself never raises.
    """

    bodies = list(bodies)
    exerters = [body for body in bodies if body.is_exerter]
    zero = np.zeros(3, dtype=float)

    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        for body in bodies:
            if not (is_finite_vec(body.position) and is_finite_vec(body.velocity)):
                body.net_force = 0.0
                _report(on_fault, body, "state", "non-finite position or velocity")
                continue

            total_force = zero.copy()
            for exerter in exerters:
                if exerter is body:
                    continue
                force = pairwise_force(body, exerter, cfg)
                if force is None:
                    _report(on_fault, body, "force", f"skipped term from {exerter.id}")
                    continue
                total_force += force

            body.net_force = length(total_force)
            acceleration = total_force / effective_mass(body.mass, cfg)
            if not is_finite_vec(acceleration):
                _report(on_fault, body, "acceleration", "reset to zero")
                acceleration = zero.copy()

            velocity = body.velocity + acceleration * dt
            if not is_finite_vec(velocity):
                _report(on_fault, body, "velocity", "body stalled")
                velocity = zero.copy()
            body.velocity = velocity

            position = body.position + body.velocity * dt
            if not is_finite_vec(position):
                _report(on_fault, body, "position", "move reverted, body stalled")
                body.velocity = zero.copy()
                continue
            body.position = position


def softened_potential(
    m1: float, m2: float, distance: float, soft_radius: float, cfg: PhysicsCfg = PHYSICS_CFG
) -> float:
    """Pair potential whose gradient matches :func:`pairwise_force`."""

    g = cfg.gravitational_constant
    if soft_radius <= 0.0 or distance >= soft_radius:
        return -g * m1 * m2 / max(distance, math.sqrt(cfg.min_distance_sq))
    return g * m1 * m2 * (distance - 2.0 * soft_radius) / (soft_radius * soft_radius)


def kinetic_energy(bodies: Iterable[Body]) -> float:
    return sum(0.5 * body.mass * length_sq(body.velocity) for body in bodies if body.mass > 0.0)


def potential_energy(bodies: Iterable[Body], cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    exerters = [body for body in bodies if body.is_exerter]
    total = 0.0
    for i, a in enumerate(exerters):
        for b in exerters[i + 1:]:
            distance = length(b.position - a.position)
            total += softened_potential(a.mass, b.mass, distance, softening_radius(a, b, cfg), cfg)
    return total


def total_energy(bodies: Iterable[Body], cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    bodies = list(bodies)
    return kinetic_energy(bodies) + potential_energy(bodies, cfg)


def circular_orbit_speed(
    central_mass: float, distance: float, cfg: PhysicsCfg = PHYSICS_CFG
) -> float:
    """Speed of a circular orbit: ``v = sqrt(G * M / d)``."""

    if central_mass <= 0.0 or distance <= 0.0:
        return 0.0
    speed = math.sqrt(cfg.gravitational_constant * central_mass / distance)
    return speed if math.isfinite(speed) else 0.0


__all__ = [
    "FaultHandler",
    "PHYSICS_CFG",
    "PhysicsCfg",
    "StabilityFault",
    "circular_orbit_speed",
    "effective_mass",
    "kinetic_energy",
    "pairwise_force",
    "potential_energy",
    "softened_potential",
    "softening_radius",
    "step_bodies",
    "total_energy",
]
