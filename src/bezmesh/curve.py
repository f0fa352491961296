"""Bézier curves and triangular Bézier patches.

Curves are complete: evaluation and subdivision both come straight from the
de Casteljau scheme in :mod:`bezmesh.interp`.  Triangular patches are plain
control-point containers; they carry no evaluation or subdivision rule.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from bezmesh.geometry_utils import as_color, as_value
from bezmesh.interp import compute_triangular_scheme, scheme_edges, triangular_number


class BezierCurve:
    """Immutable Bézier curve of degree ``n`` (``n+1`` control values)."""

    __slots__ = ("_points",)

    def __init__(self, points: Sequence[Any]):
        pts = tuple(as_value(p) for p in points)
        if not pts:
            raise ValueError("a curve needs at least one control point")
        self._points = pts

    @property
    def degree(self) -> int:
        return len(self._points) - 1

    @property
    def points(self) -> Tuple[Any, ...]:
        return self._points

    def evaluate(self, t: float) -> Any:
        return compute_triangular_scheme(self._points, t)[-1]

    def subdivide(self, t: float = 0.5) -> Tuple["BezierCurve", "BezierCurve"]:
        """Split at ``t`` into the curves over ``[0, t]`` and ``[t, 1]``."""

        left, right = scheme_edges(self._points, t)
        return BezierCurve(left), BezierCurve(right)

    def sample(self, count: int = 16) -> List[Any]:
        """Return ``count`` points evenly spaced in parameter."""

        if count < 2:
            raise ValueError("count must be >= 2")
        return [self.evaluate(k / (count - 1)) for k in range(count)]

    def __repr__(self) -> str:
        return f"BezierCurve(degree={self.degree})"


class BezierTriangle:
    """Immutable triangular Bézier patch of degree ``n``.

    Holds ``triangular_number(n+1)`` control values and three corner colors.
    """

    __slots__ = ("_n", "_points", "_colors")

    def __init__(self, n: int, points: Sequence[Any], colors: Sequence[Sequence[float]]):
        if n < 0:
            raise ValueError(f"degree must be non-negative, got {n}")
        pts = tuple(as_value(p) for p in points)
        expected = triangular_number(n + 1)
        if len(pts) != expected:
            raise ValueError(f"degree {n} triangle needs {expected} control points, got {len(pts)}")
        cols = tuple(as_color(c) for c in colors)
        if len(cols) != 3:
            raise ValueError(f"a triangular patch needs 3 corner colors, got {len(cols)}")
        self._n = n
        self._points = pts
        self._colors = cols

    @property
    def degree(self) -> int:
        return self._n

    @property
    def points(self) -> Tuple[Any, ...]:
        return self._points

    @property
    def colors(self) -> Tuple[Any, ...]:
        return self._colors

    def __repr__(self) -> str:
        return f"BezierTriangle(degree={self._n})"


__all__ = ["BezierCurve", "BezierTriangle"]
