"""Built-in demo scenes for the headless runner."""
from __future__ import annotations

from dataclasses import dataclass

from spacetime_sim.core.model import BodyKind, SceneObject
from spacetime_sim.core.physics import circular_orbit_speed


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    description: str
    objects: tuple[SceneObject, ...]

    def object_list(self) -> list[SceneObject]:
        return list(self.objects)


def _circular_orbiter(
    object_id: str,
    name: str,
    central_mass: float,
    distance: float,
    *,
    mass: float = 1.0,
    radius: float = 2.0,
    color: str = "#00BFFF",
) -> SceneObject:
    speed = circular_orbit_speed(central_mass, distance)
    return SceneObject(
        id=object_id,
        kind=BodyKind.ORBITER,
        name=name,
        mass=mass,
        radius=radius,
        color=color,
        position=(distance, 0.0, 0.0),
        velocity=(0.0, 0.0, speed),
    )


SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="two_body",
        name="Two-Body Orbit",
        description="A light orbiter on a circular orbit (d = 300) around a heavy anchor.",
        objects=(
            SceneObject(
                id="anchor",
                kind=BodyKind.ANCHOR,
                name="Sun",
                mass=150_000.0,
                radius=30.0,
                color="#FFD700",
            ),
            _circular_orbiter("orbiter", "Earth", 150_000.0, 300.0),
        ),
    ),
    Scenario(
        key="binary_pair",
        name="Binary Pair",
        description="Two stars orbiting their common center of mass.",
        objects=(
            SceneObject(
                id="star_a",
                kind=BodyKind.ANCHOR,
                name="Star Alpha",
                mass=80_000.0,
                radius=25.0,
                color="#FF8C00",
                position=(-150.0, 0.0, 0.0),
                velocity=(0.0, 0.0, 13.0),
            ),
            SceneObject(
                id="star_b",
                kind=BodyKind.ANCHOR,
                name="Star Beta",
                mass=60_000.0,
                radius=20.0,
                color="#ADD8E6",
                position=(200.0, 0.0, 0.0),
                velocity=(0.0, 0.0, -10.0),
            ),
        ),
    ),
    Scenario(
        key="comet_slingshot",
        name="Comet Slingshot",
        description="A comet swinging past a massive star for a gravity assist.",
        objects=(
            SceneObject(
                id="heavy_star",
                kind=BodyKind.ANCHOR,
                name="Graviton Prime",
                mass=200_000.0,
                radius=40.0,
                color="#DC143C",
            ),
            SceneObject(
                id="comet",
                kind=BodyKind.ORBITER,
                name="Icarus Comet",
                mass=1.0,
                radius=2.0,
                color="#E0FFFF",
                position=(800.0, 0.0, -800.0),
                velocity=(-15.0, 0.0, 5.0),
            ),
        ),
    ),
    Scenario(
        key="black_hole_tracers",
        name="Black Hole Tracers",
        description="Massless tracer particles falling toward a black hole.",
        objects=(
            SceneObject(
                id="black_hole",
                kind=BodyKind.ANCHOR,
                name="Black Hole",
                mass=500_000.0,
                radius=15.0,
                color="#000000",
            ),
            SceneObject(
                id="tracer_1",
                name="Tracer 1",
                mass=0.0,
                radius=1.0,
                position=(600.0, 0.0, 0.0),
                velocity=(0.0, 0.0, 10.0),
            ),
            SceneObject(
                id="tracer_2",
                name="Tracer 2",
                mass=0.0,
                radius=1.0,
                position=(-400.0, 0.0, 400.0),
            ),
        ),
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


__all__ = [
    "DEFAULT_SCENARIO_KEY",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "Scenario",
]
