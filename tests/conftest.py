import numpy as np
import pytest

from spacetime_sim.core.model import Body, BodyKind, SceneObject


def make_body(body_id, mass=1.0, radius=1.0, position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0)):
    return Body(
        id=body_id,
        kind=BodyKind.ANCHOR if mass > 0 else BodyKind.ORBITER,
        name=body_id,
        mass=mass,
        radius=radius,
        color="#FFFFFF",
        position=np.array(position, dtype=float),
        velocity=np.array(velocity, dtype=float),
    )


def make_object(object_id, mass=1.0, radius=1.0, position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0), **kwargs):
    return SceneObject(
        id=object_id,
        kind=kwargs.pop("kind", BodyKind.ANCHOR if mass else BodyKind.ORBITER),
        name=kwargs.pop("name", object_id),
        mass=mass,
        radius=radius,
        position=position,
        velocity=velocity,
        **kwargs,
    )


@pytest.fixture
def body_factory():
    return make_body


@pytest.fixture
def object_factory():
    return make_object
