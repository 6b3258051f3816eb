"""Data models for the simulation state and its external input records."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from .vector import to_tuple


class BodyKind(str, Enum):
    """Display grouping only; the force law treats every kind alike."""

    ANCHOR = "anchor"
    ORBITER = "orbiter"

    @classmethod
    def parse(cls, value: "BodyKind | str") -> "BodyKind":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key == "massive":
            return cls.ANCHOR
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown body kind {value!r}") from None


class RunStatus(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"

    @classmethod
    def parse(cls, value: "RunStatus | str") -> "RunStatus":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown run status {value!r}") from None


def _vector_to_dict(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {"x": value["x"], "y": value["y"], "z": value["z"]}
    try:
        x, y, z = value
    except (TypeError, ValueError):
        return value
    return {"x": x, "y": y, "z": z}


@dataclass(frozen=True)
class SceneObject:
    """One record of the externally owned object list.

    Values are kept exactly as supplied; sanitizing happens when the record
    is reconciled into the body store.
    """

    id: str
    kind: BodyKind = BodyKind.ORBITER
    name: str = ""
    mass: Any = 0.0
    radius: Any = 1.0
    color: str = "#FFFFFF"
    position: Any = (0.0, 0.0, 0.0)
    velocity: Any = (0.0, 0.0, 0.0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SceneObject":
        kind = data.get("kind", data.get("type", BodyKind.ORBITER))
        mass = data.get("mass")
        return cls(
            id=str(data["id"]),
            kind=BodyKind.parse(kind),
            name=str(data.get("name", "")),
            mass=0.0 if mass is None else mass,
            radius=data.get("radius", 1.0),
            color=str(data.get("color", "#FFFFFF")),
            position=data.get("position", (0.0, 0.0, 0.0)),
            velocity=data.get("velocity", (0.0, 0.0, 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": BodyKind.parse(self.kind).value,
            "name": self.name,
            "mass": self.mass,
            "radius": self.radius,
            "color": self.color,
            "position": _vector_to_dict(self.position),
            "velocity": _vector_to_dict(self.velocity),
        }


@dataclass
class Body:
    """Mutable state of one simulated point mass."""

    id: str
    kind: BodyKind
    name: str
    mass: float
    radius: float
    color: str
    position: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    net_force: float = 0.0

    @property
    def is_exerter(self) -> bool:
        return self.mass > 0.0 and bool(np.isfinite(self.position).all())

    def position_tuple(self) -> tuple[float, float, float]:
        return to_tuple(self.position)

    def copy(self) -> "Body":
        return Body(
            id=self.id,
            kind=self.kind,
            name=self.name,
            mass=self.mass,
            radius=self.radius,
            color=self.color,
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            net_force=self.net_force,
        )


__all__ = ["Body", "BodyKind", "RunStatus", "SceneObject"]
