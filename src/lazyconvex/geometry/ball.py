"""Euclidean balls."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..comparison import isapproxzero, is_le
from ..errors import InvalidConstruction
from ..utils.arrays import as_vector
from .base import Set


@dataclass(eq=False)
class Ball2(Set):
    """Ball (sphere) defined by center and radius.

    The set is {x : ||x - c|| <= radius}.
    """
    c: np.ndarray
    radius: float

    def __post_init__(self) -> None:
        self.c = as_vector(self.c)
        if self.radius < 0:
            raise InvalidConstruction("radius must be non-negative")
        self.radius = self.c.dtype.type(self.radius)

    @property
    def dim(self) -> int:
        return len(self.c)

    @property
    def dtype(self) -> np.dtype:
        return self.c.dtype

    def center(self) -> np.ndarray:
        return self.c.copy()

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        return float(np.dot(d, self.c) + self.radius * np.linalg.norm(d))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """The zero direction gives the center."""
        d = self._direction(d)
        norm = np.linalg.norm(d)
        if isapproxzero(norm):
            return self.c.copy()
        return self.c + self.radius * d / norm

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return is_le(np.linalg.norm(x - self.c), self.radius)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        if witness:
            return False, self.c + self.radius + 1
        return False

    def an_element(self) -> np.ndarray:
        return self.c.copy()

    def distance(self, x: np.ndarray) -> float:
        x = self._point(x)
        dist_to_center = np.linalg.norm(x - self.c)
        return float(max(0, dist_to_center - self.radius))

    def box_approximation(self):
        from .hyperrectangle import HyperRectangle

        return HyperRectangle.from_center_radius(self.c, np.full(self.dim, self.radius))

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        """Sample uniformly from the ball using rejection sampling for low dims."""
        from .sampling import reseed

        rng = reseed(rng, seed)

        if self.dim <= 4:
            # Rejection sampling is efficient for low dimensions
            samples = []
            while len(samples) < n:
                batch_size = 2 * n
                candidates = rng.uniform(-1, 1, size=(batch_size, self.dim))
                norms = np.linalg.norm(candidates, axis=1)
                valid = candidates[norms <= 1]
                samples.extend(valid[:n - len(samples)])
            samples = np.array(samples[:n]).reshape(n, self.dim)
        else:
            # For higher dimensions, use the algorithm:
            # sample direction uniformly, then scale by r^(1/d) * radius
            directions = rng.normal(size=(n, self.dim))
            directions /= np.linalg.norm(directions, axis=1, keepdims=True)
            radii = rng.uniform(0, 1, size=(n, 1)) ** (1 / self.dim)
            samples = directions * radii

        return self.c + self.radius * samples

    def translate(self, v: np.ndarray) -> Ball2:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> Ball2:
        self.c += self._point(v)
        return self

    def scale(self, alpha: float) -> Ball2:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> Ball2:
        self.c *= alpha
        self.radius = self.c.dtype.type(abs(alpha) * self.radius)
        return self

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> Ball2:
        """Normal center and absolute-normal radius."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        center = rng.normal(size=dim).astype(numeric_type)
        return cls(center, abs(rng.normal()))
