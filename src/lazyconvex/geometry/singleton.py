"""Sets with a single point."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..comparison import isapprox
from ..utils.arrays import as_vector, unit_vector
from .base import Set
from .halfspace import HalfSpace


@dataclass(eq=False)
class Singleton(Set):
    """The set {element}."""
    element: np.ndarray

    is_polyhedral = True

    def __post_init__(self) -> None:
        self.element = as_vector(self.element)

    @property
    def dim(self) -> int:
        return len(self.element)

    @property
    def dtype(self) -> np.dtype:
        return self.element.dtype

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        return float(np.dot(d, self.element))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        self._direction(d)
        return self.element.copy()

    def contains(self, x: np.ndarray) -> bool:
        return isapprox(self._point(x), self.element)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        if witness:
            return False, self.element + 1
        return False

    def an_element(self) -> np.ndarray:
        return self.element.copy()

    def center(self) -> np.ndarray:
        return self.element.copy()

    def constraints_list(self) -> list[HalfSpace]:
        """Two opposing half-spaces per coordinate."""
        constraints = []
        for i, xi in enumerate(self.element):
            e = unit_vector(i, self.dim, self.dtype)
            constraints.append(HalfSpace(e, xi))
            constraints.append(HalfSpace(-e, -xi))
        return constraints

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        return [self.element.copy()]

    def distance(self, x: np.ndarray) -> float:
        return float(np.linalg.norm(self._point(x) - self.element))

    def translate(self, v: np.ndarray) -> Singleton:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> Singleton:
        self.element += self._point(v)
        return self

    def scale(self, alpha: float) -> Singleton:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> Singleton:
        self.element *= alpha
        return self

    def linear_map(self, M: np.ndarray) -> Singleton:
        M = self._map_matrix(M)
        return Singleton(M @ self.element)

    def project(self, indices) -> Singleton:
        return Singleton(self.element[self._indices(indices)])

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        return np.tile(self.element, (n, 1))

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> Singleton:
        """Random singleton with a normally distributed element."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        return cls(rng.normal(size=dim).astype(numeric_type))
