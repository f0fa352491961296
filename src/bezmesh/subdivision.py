"""Uniform refinement of subdividable elements.

:class:`SubdivisionSet` quarters every element on every pass until the number
of elements reaches a budget.  It does not look at curvature: flat and curved
regions are split alike, and the final pass may overshoot the budget by up to
the branching factor (4 for rectangular patches).
"""

from __future__ import annotations

import logging
from typing import Generic, Iterable, List, Optional, Protocol, Sequence, TypeVar

from bezmesh.triangle import Triangle, concat_triangles

logger = logging.getLogger(__name__)

DEFAULT_BUDGET = 5000
DEFAULT_SPLIT = 0.5


class Subdividable(Protocol):
    """Anything that splits into children of its own kind and flattens to triangles."""

    def children(self, t: float = DEFAULT_SPLIT) -> Sequence["Subdividable"]:
        ...

    def to_triangles(self) -> List[Triangle]:
        ...


S = TypeVar("S", bound=Subdividable)


class SubdivisionSet(Generic[S]):
    """An ordered collection of elements refined together."""

    def __init__(self, elements: Iterable[S] = (), *, budget: int = DEFAULT_BUDGET,
                 t: float = DEFAULT_SPLIT):
        self.elements: List[S] = list(elements)
        self.budget = int(budget)
        self.t = float(t)

    def __len__(self) -> int:
        return len(self.elements)

    def subdivide_once(self) -> None:
        """Replace every element by its children."""

        children: List[S] = []
        for element in self.elements:
            children.extend(element.children(self.t))
        self.elements = children

    def refine(self, budget: Optional[int] = None) -> int:
        """Subdivide until the element count reaches ``budget``.

        Returns the number of passes performed.  An empty set is left as is.
        """

        limit = self.budget if budget is None else int(budget)
        passes = 0
        while self.elements and len(self.elements) < limit:
            self.subdivide_once()
            passes += 1
            logger.debug("refinement pass %d: %d elements", passes, len(self.elements))
        return passes

    def to_triangles(self) -> List[Triangle]:
        """Flatten every element and concatenate the triangles."""

        return concat_triangles(element.to_triangles() for element in self.elements)


def tessellate(elements: Iterable[S], *, budget: int = DEFAULT_BUDGET,
               t: float = DEFAULT_SPLIT) -> List[Triangle]:
    """Refine ``elements`` to ``budget`` and return the flattened triangles."""

    subdiv = SubdivisionSet(elements, budget=budget, t=t)
    start = len(subdiv)
    passes = subdiv.refine()
    triangles = subdiv.to_triangles()
    logger.info("refined %d element(s) to %d in %d pass(es), %d triangles",
                start, len(subdiv), passes, len(triangles))
    return triangles


__all__ = [
    "DEFAULT_BUDGET",
    "DEFAULT_SPLIT",
    "Subdividable",
    "SubdivisionSet",
    "tessellate",
]
