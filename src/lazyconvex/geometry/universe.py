"""The whole space of a given dimension."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..comparison import isapproxzero
from ..errors import UnboundedDirection
from .base import Set
from .halfspace import HalfSpace


@dataclass(eq=False)
class Universe(Set):
    """The set R^n."""
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
        d = self._direction(d)
        return 0.0 if isapproxzero(d) else float('inf')

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        if isapproxzero(d):
            return np.zeros(self.n, dtype=self.dtype)
        raise UnboundedDirection("the universe is unbounded in every nonzero direction")

    def contains(self, x: np.ndarray) -> bool:
        self._point(x)
        return True

    def is_bounded(self) -> bool:
        return self.n == 0

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        if witness:
            return True, np.zeros(0, dtype=self.dtype)
        return True

    def an_element(self) -> np.ndarray:
        return np.zeros(self.n, dtype=self.dtype)

    def constraints_list(self) -> list[HalfSpace]:
        return []

    def translate(self, v: np.ndarray) -> Universe:
        self._point(v)
        return Universe(self.n, self.numeric_type)

    def translate_(self, v: np.ndarray) -> Universe:
        self._point(v)
        return self

    def project(self, indices) -> Universe:
        return Universe(len(self._indices(indices)), self.numeric_type)
