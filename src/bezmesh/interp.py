"""Interpolation kernel shared by curves and patches.

Everything here is generic over the *control value* type: any value that
supports ``+`` and multiplication by a real scalar.  In practice that is a
``float`` or a ``numpy`` array.

The central routine is :func:`compute_triangular_scheme`, one full pass of the
de Casteljau construction.  Its last value is the point on the curve at the
given parameter, while the two edges of the triangle hold the control points
of the two sub-curves, so a single pass serves both evaluation and
subdivision.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple


def lerp(a: Any, b: Any, t: float) -> Any:
    """Return ``a*(1-t) + b*t``.

    ``t`` is not clamped; values outside ``[0, 1]`` extrapolate.
    """

    return a * (1.0 - t) + b * t


def triangular_number(n: int) -> int:
    """Return ``n*(n+1)/2``, the size of a de Casteljau triangle over ``n`` values."""

    return n * (n + 1) // 2


def compute_triangular_scheme(row: Sequence[Any], t: float) -> List[Any]:
    """Run the de Casteljau construction over ``row`` at parameter ``t``.

    The result is the flattened triangle: the ``n`` input values, then the
    ``n-1`` values of the first interpolation level, and so on down to the
    single value of the last level, for ``triangular_number(n)`` entries.

    >>> compute_triangular_scheme([0, 4, 6, 9], 0.5)
    [0, 4, 6, 9, 2.0, 5.0, 7.5, 3.5, 6.25, 4.875]
    """

    scheme: List[Any] = list(row)
    level = list(row)
    while len(level) > 1:
        level = [lerp(level[i], level[i + 1], t) for i in range(len(level) - 1)]
        scheme.extend(level)
    return scheme


def scheme_edges(row: Sequence[Any], t: float) -> Tuple[List[Any], List[Any]]:
    """Split the control polygon ``row`` at ``t``.

    Returns the control points of the sub-curves on ``[0, t]`` and ``[t, 1]``,
    both in forward parameter order.  The last point of the first equals the
    first point of the second.
    """

    n = len(row)
    scheme = compute_triangular_scheme(row, t)
    left: List[Any] = []
    right: List[Any] = []
    offset = 0
    for length in range(n, 0, -1):
        left.append(scheme[offset])
        right.append(scheme[offset + length - 1])
        offset += length
    right.reverse()
    return left, right


__all__ = [
    "lerp",
    "triangular_number",
    "compute_triangular_scheme",
    "scheme_edges",
]
