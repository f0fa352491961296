"""Rectangular (tensor-product) Bézier patches.

A patch of degree ``n`` in u and ``m`` in v holds ``(n+1)*(m+1)`` control
values in row-major order: control point ``b_ij`` (``i`` along u, ``j`` along
v) lives at ``points[j*(n+1) + i]``.  Four corner colors travel with the
patch and are interpolated when it is split::

    (0,0) -- u -- (1,0)          b_00 b_10 ... b_n0          c0 -- c1
      |             |             b_01          |             |      |
      v             |    maps to   .            |   colors    |      |
      |             |             b_0m b_1m ... b_nm          c2 -- c3
    (0,1) ------- (1,1)

Patches are immutable; :meth:`BezierRectangle.subdivide` returns two new
patches of the same degree whose union is geometrically identical to the
parent.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Sequence, Tuple, Union

import numpy as np

from bezmesh.geometry_utils import ZERO3, as_color, as_value, is_vec3, normalize_or_zero
from bezmesh.interp import compute_triangular_scheme, lerp, scheme_edges
from bezmesh.triangle import Triangle


class Axis(str, Enum):
    """Parametric direction of a rectangular patch."""

    U = "u"
    V = "v"


AxisLike = Union[Axis, str]


class BezierRectangle:
    """Immutable rectangular Bézier patch of degree ``(n, m)``."""

    __slots__ = ("_n", "_m", "_points", "_colors")

    def __init__(self, n: int, m: int, points: Sequence[Any], colors: Sequence[Sequence[float]]):
        if n < 0 or m < 0:
            raise ValueError(f"patch degree must be non-negative, got ({n}, {m})")
        pts = tuple(as_value(p) for p in points)
        expected = (n + 1) * (m + 1)
        if len(pts) != expected:
            raise ValueError(
                f"degree ({n}, {m}) patch needs {expected} control points, got {len(pts)}"
            )
        cols = tuple(as_color(c) for c in colors)
        if len(cols) != 4:
            raise ValueError(f"a patch needs 4 corner colors, got {len(cols)}")
        self._n = n
        self._m = m
        self._points = pts
        self._colors = cols

    @classmethod
    def from_grid(cls, rows: Sequence[Sequence[Any]], colors: Sequence[Sequence[float]]) -> "BezierRectangle":
        """Build a patch from ``rows[j][i]``; every row must have the same length."""

        if not rows or not rows[0]:
            raise ValueError("grid must have at least one row and one column")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("all grid rows must have the same length")
        points = [p for r in rows for p in r]
        return cls(width - 1, len(rows) - 1, points, colors)

    # ------------------------------------------------------------------
    # access

    @property
    def degree(self) -> Tuple[int, int]:
        return self._n, self._m

    @property
    def points(self) -> Tuple[Any, ...]:
        return self._points

    @property
    def colors(self) -> Tuple[np.ndarray, ...]:
        return self._colors

    def index(self, i: int, j: int) -> int:
        return j * (self._n + 1) + i

    def point(self, i: int, j: int) -> Any:
        return self._points[self.index(i, j)]

    def row(self, j: int) -> List[Any]:
        start = j * (self._n + 1)
        return list(self._points[start:start + self._n + 1])

    def column(self, i: int) -> List[Any]:
        return [self.point(i, j) for j in range(self._m + 1)]

    def corners(self) -> Tuple[Any, Any, Any, Any]:
        """Return the corner control points in color order ``(u0v0, unv0, u0vm, unvm)``."""

        n, m = self._n, self._m
        return self.point(0, 0), self.point(n, 0), self.point(0, m), self.point(n, m)

    def transpose(self) -> "BezierRectangle":
        """Return the same surface with the roles of u and v swapped."""

        points = [self.point(i, j) for i in range(self._n + 1) for j in range(self._m + 1)]
        c = self._colors
        return BezierRectangle(self._m, self._n, points, [c[0], c[2], c[1], c[3]])

    # ------------------------------------------------------------------
    # evaluation and subdivision

    def evaluate(self, u: float, v: float) -> Any:
        """Return the surface point at ``(u, v)`` by nested de Casteljau passes."""

        along_u = [compute_triangular_scheme(self.row(j), u)[-1] for j in range(self._m + 1)]
        return compute_triangular_scheme(along_u, v)[-1]

    def subdivide(self, axis: AxisLike, t: float = 0.5) -> Tuple["BezierRectangle", "BezierRectangle"]:
        """Split the patch at parameter ``t`` along ``axis``.

        Along u the result is ``(left, right)``; along v it is
        ``(top, bottom)``.  The shared boundary of the two halves is the same
        set of values, and the outer boundaries equal the parent's.
        """

        axis = Axis(axis)
        if axis is Axis.U:
            return self._subdivide_u(t)
        return self._subdivide_v(t)

    def _subdivide_u(self, t: float) -> Tuple["BezierRectangle", "BezierRectangle"]:
        left: List[Any] = []
        right: List[Any] = []
        for j in range(self._m + 1):
            row_left, row_right = scheme_edges(self.row(j), t)
            left.extend(row_left)
            right.extend(row_right)

        c0, c1, c2, c3 = self._colors
        split_top = lerp(c0, c1, t)
        split_bottom = lerp(c2, c3, t)
        return (
            BezierRectangle(self._n, self._m, left, [c0, split_top, c2, split_bottom]),
            BezierRectangle(self._n, self._m, right, [split_top, c1, split_bottom, c3]),
        )

    def _subdivide_v(self, t: float) -> Tuple["BezierRectangle", "BezierRectangle"]:
        size = (self._n + 1) * (self._m + 1)
        top: List[Any] = [None] * size
        bottom: List[Any] = [None] * size
        for i in range(self._n + 1):
            col_top, col_bottom = scheme_edges(self.column(i), t)
            for j in range(self._m + 1):
                top[self.index(i, j)] = col_top[j]
                bottom[self.index(i, j)] = col_bottom[j]

        c0, c1, c2, c3 = self._colors
        split_left = lerp(c0, c2, t)
        split_right = lerp(c1, c3, t)
        return (
            BezierRectangle(self._n, self._m, top, [c0, c1, split_left, split_right]),
            BezierRectangle(self._n, self._m, bottom, [split_left, split_right, c2, c3]),
        )

    def subdivide_cross(self, t: float = 0.5) -> List["BezierRectangle"]:
        """Quarter the patch: split along u, then each half along v.

        Returns ``[top_left, bottom_left, top_right, bottom_right]``.
        """

        left, right = self._subdivide_u(t)
        top_left, bottom_left = left._subdivide_v(t)
        top_right, bottom_right = right._subdivide_v(t)
        return [top_left, bottom_left, top_right, bottom_right]

    def children(self, t: float = 0.5) -> List["BezierRectangle"]:
        return self.subdivide_cross(t)

    # ------------------------------------------------------------------
    # flattening

    def corner_normals(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Return unit normals at ``(u0v0, u0vm, unv0, unvm)``.

        Each normal is ``du x dv`` of the boundary tangents at the corner,
        both taken in the direction of increasing parameter.  A direction of
        degree zero has no tangent, and a vanishing cross product yields the
        zero vector.
        """

        if not all(is_vec3(p) for p in self.corners()):
            raise ValueError("corner normals need 3D control points")
        n, m = self._n, self._m

        def tangent(a, b):
            # b - a, or zero when the corner has no neighbour in that direction
            if a == b:
                return ZERO3
            return self.point(*b) - self.point(*a)

        def normal(du, dv):
            return normalize_or_zero(np.cross(du, dv))

        n00 = normal(tangent((0, 0), (min(1, n), 0)), tangent((0, 0), (0, min(1, m))))
        nn0 = normal(tangent((max(n - 1, 0), 0), (n, 0)), tangent((n, 0), (n, min(1, m))))
        n0m = normal(tangent((0, m), (min(1, n), m)), tangent((0, max(m - 1, 0)), (0, m)))
        nnm = normal(tangent((max(n - 1, 0), m), (n, m)), tangent((n, max(m - 1, 0)), (n, m)))
        return n00, n0m, nn0, nnm

    def to_triangles(self) -> List[Triangle]:
        """Approximate the patch by two triangles spanning its corners."""

        p00, pn0, p0m, pnm = self.corners()
        c0, c1, c2, c3 = self._colors
        n0, n1, n2, n3 = self.corner_normals()
        return [
            Triangle.create([p00, pn0, p0m], [c0, c1, c2], [n0, n2, n1]),
            Triangle.create([pn0, pnm, p0m], [c1, c3, c2], [n2, n3, n1]),
        ]

    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BezierRectangle):
            return NotImplemented
        return (
            self.degree == other.degree
            and all(np.array_equal(a, b) for a, b in zip(self._points, other._points))
            and all(np.array_equal(a, b) for a, b in zip(self._colors, other._colors))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"BezierRectangle(n={self._n}, m={self._m}, points={len(self._points)})"


__all__ = ["Axis", "BezierRectangle"]
