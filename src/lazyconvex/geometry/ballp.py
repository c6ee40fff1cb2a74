"""Balls in the p-norm."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product

import numpy as np

from ..comparison import is_le, isapproxzero
from ..errors import InvalidConstruction
from ..utils.arrays import as_vector, sign_cadlag
from .base import Set
from .halfspace import HalfSpace


def dual_exponent(p: float) -> float:
    """The q with 1/p + 1/q = 1."""
    if p == 1:
        return np.inf
    if np.isinf(p):
        return 1.0
    return p / (p - 1)


@dataclass(eq=False)
class Ballp(Set):
    """Ball {x : ||x - c||_p <= radius} for some p >= 1.

    The support function is ``c @ d + radius * ||d||_q`` with q the dual
    exponent of p; the support vector attains Hoelder's inequality.

    Attributes:
        p: Norm exponent, at least 1 (``np.inf`` allowed).
        c: Center, shape (n,).
        radius: Nonnegative radius.
    """
    p: float
    c: np.ndarray
    radius: float

    def __post_init__(self) -> None:
        self.c = as_vector(self.c)
        if not self.p >= 1:
            raise InvalidConstruction(f"the norm exponent must be at least 1, got {self.p}")
        if self.radius < 0:
            raise InvalidConstruction("radius must be non-negative")
        self.p = float(self.p)
        self.radius = self.c.dtype.type(self.radius)

    @property
    def dim(self) -> int:
        return len(self.c)

    @property
    def dtype(self) -> np.dtype:
        return self.c.dtype

    @property
    def is_polyhedral(self) -> bool:
        return self.p == 1 or np.isinf(self.p)

    def center(self) -> np.ndarray:
        return self.c.copy()

    def ball_norm(self) -> float:
        return self.p

    def radius_ball(self) -> float:
        return self.radius

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        q = dual_exponent(self.p)
        return float(np.dot(d, self.c) + self.radius * np.linalg.norm(d, ord=q))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """The zero direction gives the center."""
        d = self._direction(d)
        if isapproxzero(np.linalg.norm(d)):
            return self.c.copy()
        if np.isinf(self.p):
            return self.c + self.radius * sign_cadlag(d)
        if self.p == 1:
            i = int(np.argmax(np.abs(d)))
            x = self.c.copy()
            x[i] += self.radius * sign_cadlag(d[i])
            return x
        q = dual_exponent(self.p)
        w = np.sign(d) * np.abs(d) ** (q - 1)
        return self.c + self.radius * w / np.linalg.norm(d, ord=q) ** (q - 1)

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return is_le(np.linalg.norm(x - self.c, ord=self.p), self.radius)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def an_element(self) -> np.ndarray:
        return self.center()

    def constraints_list(self) -> list[HalfSpace]:
        """Only the 1-norm and infinity-norm balls are polytopes."""
        if np.isinf(self.p):
            return self.box_approximation().constraints_list()
        if self.p == 1:
            n = self.dim
            signs = product((-1.0, 1.0), repeat=n)
            return [HalfSpace(np.array(s, dtype=self.dtype), np.dot(s, self.c) + self.radius)
                    for s in signs]
        return super().constraints_list()

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        if np.isinf(self.p):
            return self.box_approximation().vertices_list()
        if self.p == 1:
            if isapproxzero(self.radius):
                return [self.c.copy()]
            vertices = []
            for i in range(self.dim):
                for s in (1, -1):
                    v = self.c.copy()
                    v[i] += s * self.radius
                    vertices.append(v)
            return vertices
        return super().vertices_list(prune=prune)

    def project(self, indices) -> Ballp:
        """Coordinate projections of a p-ball are p-balls of the same radius."""
        return Ballp(self.p, self.c[self._indices(indices)], self.radius)

    def reflect(self) -> Ballp:
        return Ballp(self.p, -self.c, self.radius)

    def translate(self, v: np.ndarray) -> Ballp:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> Ballp:
        self.c += self._point(v)
        return self

    def scale(self, alpha: float) -> Ballp:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> Ballp:
        self.c *= alpha
        self.radius = self.c.dtype.type(abs(alpha) * self.radius)
        return self

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> Ballp:
        """Norm 1 + |N(0, 1)|, normal center and absolute-normal radius."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        p = 1 + abs(rng.normal())
        center = rng.normal(size=dim).astype(numeric_type)
        return cls(p, center, abs(rng.normal()))
