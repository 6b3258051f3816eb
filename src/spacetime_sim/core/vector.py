"""Small 3D vector helpers built on numpy arrays.

Arithmetic is plain numpy and never raises; finiteness is checked only where
callers ask for it with :func:`is_finite_vec`.
"""
from __future__ import annotations

import math
from collections.abc import Mapping

import numpy as np


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    return np.array([x, y, z], dtype=float)


def as_vec3(value: object) -> np.ndarray:
    """Coerce ``{x, y, z}`` mappings, 3-sequences or arrays to a vector.

    Raises ``TypeError``/``ValueError`` for values that cannot be read as
    three numbers. Non-finite components are passed through untouched.
    """

    if isinstance(value, Mapping):
        return np.array([value["x"], value["y"], value["z"]], dtype=float)
    arr = np.asarray(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected 3 components, got shape {arr.shape}")
    return arr.copy()


def length_sq(v: np.ndarray) -> float:
    return float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def length(v: np.ndarray) -> float:
    return math.sqrt(length_sq(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along *v*; the zero vector maps to itself."""

    mag = length(v)
    if mag == 0.0:
        return np.zeros(3, dtype=float)
    return v / mag


def is_finite_vec(v: np.ndarray) -> bool:
    return bool(np.isfinite(v).all())


def to_tuple(v: np.ndarray) -> tuple[float, float, float]:
    return (float(v[0]), float(v[1]), float(v[2]))


__all__ = [
    "as_vec3",
    "clamp",
    "is_finite_vec",
    "length",
    "length_sq",
    "normalize",
    "to_tuple",
    "vec3",
]
