"""Common geometric helpers shared by the patch, mesh and exporter modules."""

from __future__ import annotations

from numbers import Real
from typing import Any, Sequence, Tuple

import numpy as np

Vec3 = Tuple[float, float, float]
Color = Tuple[float, float, float]

epsilon = 5e-6

ZERO3 = np.zeros(3)
ZERO3.flags.writeable = False


def as_value(value: Any) -> Any:
    """Normalise a control value.

    Plain numbers become ``float``; anything array-like becomes a read-only
    ``float64`` numpy array so that ``+`` and scalar ``*`` act element-wise.
    """

    if isinstance(value, Real):
        return float(value)
    arr = np.array(value, dtype=float)
    arr.flags.writeable = False
    return arr


def as_color(value: Sequence[float]) -> np.ndarray:
    """Return ``value`` as a read-only RGB array."""

    arr = np.array(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"color must have three components, got {value!r}")
    arr.flags.writeable = False
    return arr


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point/vector as a tuple."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def is_vec3(value: Any) -> bool:
    return isinstance(value, np.ndarray) and value.shape == (3,)


def normalize_or_zero(vec: Sequence[float]) -> np.ndarray:
    """Return ``vec`` scaled to unit length.

    Only an exactly zero or non-finite length yields the zero vector.
    """

    arr = np.asarray(vec, dtype=float)
    length = float(np.linalg.norm(arr))
    if length == 0.0 or not np.isfinite(length):
        return np.zeros_like(arr)
    return arr / length


def triangle_normal(v0: Sequence[float], v1: Sequence[float], v2: Sequence[float]) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate.

    The triangle is degenerate when the sine of the angle at ``v0`` is below
    ``epsilon``, so the test does not depend on the triangle's size.
    """

    a = np.subtract(v1, v0, dtype=float)
    b = np.subtract(v2, v0, dtype=float)
    n = np.cross(a, b)
    length = float(np.linalg.norm(n))
    if length <= epsilon * float(np.linalg.norm(a)) * float(np.linalg.norm(b)):
        return None
    return to_vec3(n / length)


__all__ = [
    "Vec3",
    "Color",
    "epsilon",
    "ZERO3",
    "as_value",
    "as_color",
    "to_vec3",
    "is_vec3",
    "normalize_or_zero",
    "triangle_normal",
]
