"""Lazy linear and affine maps of sets.

The key identity is ``rho(d, M X) = rho(M^T d, X)``: every direction
query is pulled back through the transposed matrix and answered by the
wrapped set. Membership and materialization need more structure (an
invertible or injective matrix, or a polyhedral set).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.optimize import linprog

from ..comparison import isapprox
from ..errors import DimensionMismatch, UnsupportedOperation
from ..geometry.base import Set
from ..geometry.halfspace import HalfSpace
from ..geometry.polytope import hull_constraints, lp_feasible, remove_redundant_vertices
from ..utils.arrays import as_matrix, as_vector, unit_vector

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class LinearMap(Set):
    """The set {M @ x : x in X}, evaluated lazily.

    Attributes:
        M: Matrix of shape (m, n).
        X: Set of dimension n.
    """
    M: np.ndarray
    X: Set

    def __post_init__(self) -> None:
        self.M = as_matrix(self.M, dtype=self.X.dtype)
        if self.M.shape[1] != self.X.dim:
            raise DimensionMismatch(
                f"a linear map of size {self.M.shape} cannot be applied to a "
                f"set of dimension {self.X.dim}"
            )

    @property
    def dim(self) -> int:
        return self.M.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self.X.dtype

    @property
    def is_polyhedral(self) -> bool:
        return self.X.is_polyhedral

    def _rank(self) -> int:
        return int(np.linalg.matrix_rank(self.M))

    def is_invertible(self) -> bool:
        m, n = self.M.shape
        return m == n and self._rank() == n

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        return self.X.support_function(self.M.T @ d)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        return self.M @ self.X.support_vector(self.M.T @ d)

    def contains(self, x: np.ndarray) -> bool:
        """Check whether some y in X satisfies M @ y == x.

        Injective maps are inverted (exactly for square matrices, by least
        squares otherwise). For other maps a polyhedral X is needed, and
        the question becomes an LP feasibility problem.
        """
        x = self._point(x)
        n = self.X.dim
        if self._rank() == n:
            if self.dim == n:
                y = np.linalg.solve(self.M, x)
            else:
                y = np.linalg.lstsq(self.M, x, rcond=None)[0]
                if not isapprox(self.M @ y, x):
                    return False
            return self.X.contains(y)

        if not self.X.is_polyhedral:
            raise UnsupportedOperation(
                f"membership in a non-injective linear map of {type(self.X).__name__} "
                "is not available"
            )
        constraints = self.X.constraints_list()
        A_ub = np.array([h.a for h in constraints]) if constraints else None
        b_ub = np.array([h.b for h in constraints]) if constraints else None
        result = linprog(np.zeros(n), A_ub=A_ub, b_ub=b_ub, A_eq=self.M, b_eq=x,
                         bounds=[(None, None)] * n, method='highs')
        return lp_feasible(result)

    def is_empty(self) -> bool:
        return self.X.is_empty()

    def is_bounded(self) -> bool:
        """Bounded if X is; otherwise test the support function along every axis."""
        if self.X.is_bounded():
            return True
        if self._rank() == self.X.dim:
            return False
        for i in range(self.dim):
            e = unit_vector(i, self.dim, self.dtype)
            if not (np.isfinite(self.support_function(e)) and np.isfinite(self.support_function(-e))):
                return False
        return True

    def is_universal(self, witness: bool = False):
        answer = self._rank() == self.dim and self.X.is_universal()
        if not witness:
            return answer
        if answer:
            return True, np.zeros(0, dtype=self.dtype)
        if self.is_bounded():
            return False, self.box_approximation().upper + 1
        raise UnsupportedOperation("cannot compute a witness for an unbounded linear map")

    def an_element(self) -> np.ndarray:
        return self.M @ self.X.an_element()

    def center(self) -> np.ndarray:
        return self.M @ self.X.center()

    def constraints_list(self) -> list[HalfSpace]:
        """Constraint representation of the image.

        For an invertible M each constraint ``a @ y <= b`` of X becomes
        ``(M^-T a) @ x <= b``. Otherwise the image of X's vertices is
        converted with a convex hull, which needs a bounded X.
        """
        if not self.X.is_polyhedral:
            raise UnsupportedOperation(
                f"constraints_list is not available for a linear map of {type(self.X).__name__}"
            )
        if self.is_invertible():
            return [HalfSpace(np.linalg.solve(self.M.T, h.a), h.b)
                    for h in self.X.constraints_list()]
        if not self.X.is_bounded():
            raise UnsupportedOperation(
                "constraints_list of a non-invertible map needs a bounded set"
            )
        # the untranslated image; AffineMap shifts the constraints itself
        vertices = LinearMap.vertices_list(self)
        if not vertices:
            from ..geometry.emptyset import EmptySet

            return EmptySet(self.dim, self.dtype.type).constraints_list()
        logger.debug("converting %d mapped vertices to constraints", len(vertices))
        return hull_constraints(vertices)

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        """Forward image of X's vertices."""
        vertices = [self.M @ v for v in self.X.vertices_list(prune=prune)]
        if prune:
            return remove_redundant_vertices(vertices)
        return vertices

    def linear_map(self, M: np.ndarray) -> LinearMap:
        """Compose the matrices instead of nesting maps."""
        M = self._map_matrix(M)
        return LinearMap(M @ self.M, self.X)

    def translate(self, v: np.ndarray) -> AffineMap:
        return AffineMap(self.M, self.X, self._point(v))

    def scale(self, alpha: float) -> LinearMap:
        return LinearMap(alpha * self.M, self.X)

    def project(self, indices: Sequence[int]) -> LinearMap:
        return LinearMap(self.M[self._indices(indices)], self.X)


@dataclass(eq=False)
class AffineMap(LinearMap):
    """The set {M @ x + v : x in X}, evaluated lazily.

    Attributes:
        M: Matrix of shape (m, n).
        X: Set of dimension n.
        v: Translation vector of length m.
    """
    v: np.ndarray

    def __post_init__(self) -> None:
        super().__post_init__()
        self.v = as_vector(self.v, dtype=self.M.dtype)
        if len(self.v) != self.M.shape[0]:
            raise DimensionMismatch(
                f"a translation of length {len(self.v)} does not match the "
                f"{self.M.shape[0]} rows of the map"
            )

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        return float(np.dot(d, self.v)) + super().support_function(d)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        return self.v + super().support_vector(d)

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return super().contains(x - self.v)

    def an_element(self) -> np.ndarray:
        return self.v + super().an_element()

    def center(self) -> np.ndarray:
        return self.v + super().center()

    def constraints_list(self) -> list[HalfSpace]:
        """Constraints of the linear part, shifted by ``a @ v``."""
        return [HalfSpace(h.a, h.b + np.dot(h.a, self.v)) for h in super().constraints_list()]

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        return [w + self.v for w in super().vertices_list(prune=prune)]

    def linear_map(self, M: np.ndarray) -> AffineMap:
        M = self._map_matrix(M)
        return AffineMap(M @ self.M, self.X, M @ self.v)

    def translate(self, v: np.ndarray) -> AffineMap:
        return AffineMap(self.M, self.X, self.v + self._point(v))

    def scale(self, alpha: float) -> AffineMap:
        return AffineMap(alpha * self.M, self.X, alpha * self.v)

    def project(self, indices: Sequence[int]) -> AffineMap:
        indices = self._indices(indices)
        return AffineMap(self.M[indices], self.X, self.v[indices])
