"""Lazy Minkowski sum X ⊕ Y = {x + y : x in X, y in Y}."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from ..errors import UnsupportedOperation, check_dim
from ..geometry.base import Set
from ..geometry.polytope import remove_redundant_vertices
from ..utils.arrays import common_dtype

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class MinkowskiSum(Set):
    """Minkowski sum of two sets of the same dimension.

    Support functions add and support vectors add, so directional queries
    never build the sum.

    Attributes:
        X: First summand.
        Y: Second summand.
    """
    X: Set
    Y: Set

    def __post_init__(self) -> None:
        check_dim(self.X.dim, self.Y.dim, "set")
        common_dtype([self.X, self.Y])

    @property
    def dim(self) -> int:
        return self.X.dim

    @property
    def dtype(self) -> np.dtype:
        return self.X.dtype

    @property
    def is_polyhedral(self) -> bool:
        return self.X.is_polyhedral and self.Y.is_polyhedral

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        rx = self.X.support_function(d)
        ry = self.Y.support_function(d)
        if rx == float('-inf') or ry == float('-inf'):
            return float('-inf')
        return float(rx + ry)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        return self.X.support_vector(d) + self.Y.support_vector(d)

    def contains(self, x: np.ndarray) -> bool:
        """Exact only when one summand is a single point."""
        from ..geometry.singleton import Singleton

        x = self._point(x)
        if isinstance(self.Y, Singleton):
            return self.X.contains(x - self.Y.element)
        if isinstance(self.X, Singleton):
            return self.Y.contains(x - self.X.element)
        raise UnsupportedOperation("membership in a lazy Minkowski sum is not available")

    def is_bounded(self) -> bool:
        if self.is_empty():
            return True
        return self.X.is_bounded() and self.Y.is_bounded()

    def is_empty(self) -> bool:
        return self.X.is_empty() or self.Y.is_empty()

    def an_element(self) -> np.ndarray:
        return self.X.an_element() + self.Y.an_element()

    def center(self) -> np.ndarray:
        return self.X.center() + self.Y.center()

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        """Pairwise sums of the summands' vertices."""
        vx = self.X.vertices_list(prune=prune)
        vy = self.Y.vertices_list(prune=prune)
        vertices = [x + y for x in vx for y in vy]
        logger.debug("summed %d x %d vertices", len(vx), len(vy))
        if prune:
            return remove_redundant_vertices(vertices)
        return vertices

    def constraints_list(self):
        from ..geometry.polytope import hull_constraints

        if not (self.is_polyhedral and self.is_bounded()):
            raise UnsupportedOperation(
                "constraints_list of a Minkowski sum needs bounded polyhedral summands"
            )
        if self.is_empty():
            from ..geometry.emptyset import EmptySet

            return EmptySet(self.dim, self.dtype.type).constraints_list()
        return hull_constraints(self.vertices_list())

    def translate(self, v: np.ndarray) -> MinkowskiSum:
        return MinkowskiSum(self.X.translate(self._point(v)), self.Y)

    def scale(self, alpha: float) -> MinkowskiSum:
        return MinkowskiSum(self.X.scale(alpha), self.Y.scale(alpha))

    def linear_map(self, M: np.ndarray) -> MinkowskiSum:
        """Linear maps distribute over the sum."""
        M = self._map_matrix(M)
        return MinkowskiSum(self.X.linear_map(M), self.Y.linear_map(M))
