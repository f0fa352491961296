"""Assembly of flat triangle lists into renderable vertex buffers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from bezmesh.geometry_utils import Vec3, triangle_normal
from bezmesh.subdivision import DEFAULT_BUDGET, DEFAULT_SPLIT, tessellate
from bezmesh.triangle import Triangle

logger = logging.getLogger(__name__)

TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


@dataclass(frozen=True)
class MeshData:
    """Flat-shaded, non-indexed mesh payload.

    ``positions``, ``normals`` and ``colors`` are ``(3T, 3)`` float32 arrays
    (three vertices per triangle, nothing shared); ``indices`` is the
    ``(T, 3)`` uint32 triangle list into them.
    """

    positions: np.ndarray
    normals: np.ndarray
    colors: np.ndarray
    indices: np.ndarray

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0])

    def interleaved(self) -> np.ndarray:
        """Return a ``(3T, 9)`` float32 buffer laid out as position, normal, color."""

        return np.ascontiguousarray(
            np.hstack([self.positions, self.normals, self.colors]), dtype=np.float32
        )


def triangles_to_mesh(triangles: Sequence[Triangle]) -> MeshData:
    """Pack ``triangles`` into a :class:`MeshData`."""

    count = len(triangles)
    positions = np.asarray([t.points for t in triangles], dtype=np.float32).reshape(count * 3, 3)
    normals = np.asarray([t.normals for t in triangles], dtype=np.float32).reshape(count * 3, 3)
    colors = np.asarray([t.colors for t in triangles], dtype=np.float32).reshape(count * 3, 3)
    indices = np.arange(count * 3, dtype=np.uint32).reshape(count, 3)
    return MeshData(positions=positions, normals=normals, colors=colors, indices=indices)


def mesh_view(triangles: Iterable[Triangle]) -> Iterator[TriTuple]:
    """Yield triangles as ``(normal, v0, v1, v2)``.

    The normal is the unit face normal from the winding.  Degenerate
    triangles (zero area) are skipped silently.
    """

    for tri in triangles:
        v0, v1, v2 = tri.points
        normal = triangle_normal(v0, v1, v2)
        if normal is None:
            continue
        yield normal, v0, v1, v2


def tessellate_scene(scene, *, budget: int = DEFAULT_BUDGET,
                     t: float = DEFAULT_SPLIT) -> List[List[Triangle]]:
    """Return the triangle groups of a :class:`~bezmesh.io.scene.Scene`.

    The first group holds the scene's plain triangles; then there is one
    group per patch degree, each degree group refined in its own set.
    """

    groups = [list(scene.triangles)]
    for degree, patches in scene.patch_groups().items():
        logger.debug("tessellating %d degree %s patch(es)", len(patches), degree)
        groups.append(tessellate(patches, budget=budget, t=t))
    return groups


def build_meshes(scene, *, budget: int = DEFAULT_BUDGET, t: float = DEFAULT_SPLIT) -> List[MeshData]:
    """Turn a scene into one mesh payload per triangle group of :func:`tessellate_scene`."""

    return [triangles_to_mesh(group) for group in tessellate_scene(scene, budget=budget, t=t)]


__all__ = ["MeshData", "triangles_to_mesh", "mesh_view", "tessellate_scene", "build_meshes"]
