"""The empty set of a given dimension."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..errors import UnsupportedOperation
from ..utils.arrays import as_vector, unit_vector
from .base import Set
from .halfspace import HalfSpace


@dataclass(eq=False)
class EmptySet(Set):
    """The empty set in n-dimensional space."""
    n: int
    numeric_type: type = np.float64

    is_polyhedral = True

    @property
    def dim(self) -> int:
        return self.n

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.numeric_type)

    def support_function(self, d: np.ndarray) -> float:
        self._direction(d)
        return float('-inf')

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        raise UnsupportedOperation("the support vector of an empty set does not exist")

    def contains(self, x: np.ndarray) -> bool:
        self._point(x)
        return False

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return True

    def is_universal(self, witness: bool = False):
        if witness:
            return False, np.zeros(self.n, dtype=self.dtype)
        return False

    def an_element(self) -> np.ndarray:
        raise UnsupportedOperation("an empty set does not have any element")

    def constraints_list(self) -> list[HalfSpace]:
        """Two contradicting half-spaces."""
        if self.n == 0:
            raise UnsupportedOperation(
                "a zero-dimensional empty set has no half-space representation"
            )
        e = unit_vector(0, self.n, self.dtype)
        return [HalfSpace(e, -1), HalfSpace(-e, -1)]

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        return []

    def distance(self, x: np.ndarray) -> float:
        """The distance to an empty set is infinite."""
        self._point(x)
        return float('inf')

    def translate(self, v: np.ndarray) -> EmptySet:
        self._point(v)
        return EmptySet(self.n, self.numeric_type)

    def translate_(self, v: np.ndarray) -> EmptySet:
        self._point(v)
        return self

    def scale(self, alpha: float) -> EmptySet:
        return EmptySet(self.n, self.numeric_type)

    def scale_(self, alpha: float) -> EmptySet:
        return self

    def linear_map(self, M: np.ndarray) -> EmptySet:
        M = self._map_matrix(M)
        return EmptySet(M.shape[0], self.numeric_type)

    def project(self, indices) -> EmptySet:
        return EmptySet(len(self._indices(indices)), self.numeric_type)

    def box_approximation(self):
        raise UnsupportedOperation("cannot box-approximate an empty set")

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        return np.empty((0, self.n), dtype=self.dtype)
