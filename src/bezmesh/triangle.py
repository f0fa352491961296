"""Flat triangle records produced by flattening patches or read from OFF data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from bezmesh.geometry_utils import Color, Vec3, to_vec3, triangle_normal

Triple = Tuple[Vec3, Vec3, Vec3]


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle with per-vertex colors and normals.

    Normals may be the zero vector where the source geometry does not define
    one.
    """

    points: Triple
    colors: Tuple[Color, Color, Color]
    normals: Triple

    @classmethod
    def create(cls,
               points: Sequence[Sequence[float]],
               colors: Sequence[Sequence[float]],
               normals: Sequence[Sequence[float]]) -> "Triangle":
        """Build a triangle from any three-element sequences of XYZ/RGB values."""

        if len(points) != 3 or len(colors) != 3 or len(normals) != 3:
            raise ValueError("a triangle needs exactly three points, colors and normals")
        return cls(
            points=tuple(to_vec3(p) for p in points),
            colors=tuple(to_vec3(c) for c in colors),
            normals=tuple(to_vec3(n) for n in normals),
        )

    def face_normal(self) -> Vec3 | None:
        """Return the unit normal implied by the winding, ``None`` if degenerate."""

        return triangle_normal(*self.points)


def concat_triangles(groups: Iterable[Iterable[Triangle]]) -> list:
    """Concatenate several triangle sequences into one list."""

    out: list = []
    for group in groups:
        out.extend(group)
    return out


__all__ = ["Triangle", "concat_triangles"]
