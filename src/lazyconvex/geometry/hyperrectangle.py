"""Axis-aligned hyperrectangles."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product

import numpy as np

from ..comparison import isapproxzero, is_le
from ..errors import InvalidConstruction, check_dim
from ..utils.arrays import as_vector, sign_cadlag, unit_vector
from .base import Set
from .halfspace import HalfSpace


@dataclass(eq=False)
class HyperRectangle(Set):
    """Axis-aligned hyperrectangle (box) defined by lower and upper bounds.

    The set is {x : lower[i] <= x[i] <= upper[i] for all i}.
    """
    lower: np.ndarray
    upper: np.ndarray

    is_polyhedral = True

    def __post_init__(self) -> None:
        self.lower = as_vector(self.lower)
        self.upper = as_vector(self.upper, dtype=self.lower.dtype)

        if self.lower.shape != self.upper.shape:
            raise InvalidConstruction(
                f"lower and upper must have same shape: "
                f"{self.lower.shape} vs {self.upper.shape}"
            )

        if np.any(self.lower > self.upper):
            raise InvalidConstruction("lower bounds must be <= upper bounds")

    @property
    def dim(self) -> int:
        return len(self.lower)

    @property
    def dtype(self) -> np.dtype:
        return self.lower.dtype

    def center(self) -> np.ndarray:
        """Center of the rectangle."""
        return (self.lower + self.upper) / 2

    def radius_hyperrectangle(self) -> np.ndarray:
        """Half-width in each dimension."""
        return (self.upper - self.lower) / 2

    @property
    def widths(self) -> np.ndarray:
        """Width in each dimension."""
        return self.upper - self.lower

    @property
    def volume(self) -> float:
        """Volume of the rectangle."""
        return float(np.prod(self.widths))

    def is_flat(self) -> bool:
        """Check whether some side has zero width."""
        return any(isapproxzero(w) for w in self.widths)

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        return float(np.dot(d, self.center()) + np.dot(np.abs(d), self.radius_hyperrectangle()))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """Vertex in direction d; zero entries of d pick the upper bound."""
        d = self._direction(d)
        return np.where(sign_cadlag(d) > 0, self.upper, self.lower)

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return is_le(self.lower, x) and is_le(x, self.upper)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        if witness:
            return False, self.upper + 1
        return False

    def an_element(self) -> np.ndarray:
        return self.center()

    def constraints_list(self) -> list[HalfSpace]:
        """Two half-spaces per coordinate: ``x_i <= upper_i``, ``-x_i <= -lower_i``."""
        constraints = []
        for i in range(self.dim):
            e = unit_vector(i, self.dim, self.dtype)
            constraints.append(HalfSpace(e, self.upper[i]))
            constraints.append(HalfSpace(-e, -self.lower[i]))
        return constraints

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        """All 2^n corners; flat sides only contribute once when pruning."""
        choices = []
        for lo, hi in zip(self.lower, self.upper):
            if prune and isapproxzero(hi - lo):
                choices.append((lo,))
            else:
                choices.append((lo, hi))
        return [np.array(v, dtype=self.dtype) for v in product(*choices)]

    def distance(self, x: np.ndarray) -> float:
        x = self._point(x)
        # Distance to box is distance to nearest point on box surface
        clamped = np.clip(x, self.lower, self.upper)
        return float(np.linalg.norm(x - clamped))

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        from .sampling import reseed

        rng = reseed(rng, seed)
        return rng.uniform(self.lower, self.upper, size=(n, self.dim))

    def box_approximation(self) -> HyperRectangle:
        return self

    def translate(self, v: np.ndarray) -> HyperRectangle:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> HyperRectangle:
        v = self._point(v)
        self.lower += v
        self.upper += v
        return self

    def scale(self, alpha: float) -> HyperRectangle:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> HyperRectangle:
        lower, upper = alpha * self.lower, alpha * self.upper
        self.lower, self.upper = np.minimum(lower, upper), np.maximum(lower, upper)
        return self

    def linear_map(self, M: np.ndarray) -> Set:
        """Concrete image as a zonotope."""
        return self.to_zonotope().linear_map(M)

    def to_zonotope(self):
        from .zonotope import Zonotope

        return Zonotope(self.center(), np.diag(self.radius_hyperrectangle()))

    def project(self, indices) -> HyperRectangle:
        indices = self._indices(indices)
        return HyperRectangle(self.lower[indices], self.upper[indices])

    def intersection(self, other: HyperRectangle) -> Set:
        from .emptyset import EmptySet

        check_dim(self.dim, other.dim, "set")
        lower = np.maximum(self.lower, other.lower)
        upper = np.minimum(self.upper, other.upper)
        if np.any(lower > upper):
            return EmptySet(self.dim, self.dtype.type)
        return HyperRectangle(lower, upper)

    def minkowski_sum(self, other: Set) -> Set:
        if isinstance(other, HyperRectangle):
            check_dim(self.dim, other.dim, "set")
            return HyperRectangle(self.lower + other.lower, self.upper + other.upper)
        return super().minkowski_sum(other)

    def issubset(self, other: HyperRectangle) -> bool:
        return is_le(other.lower, self.lower) and is_le(self.upper, other.upper)

    @classmethod
    def from_center_width(
        cls,
        center: np.ndarray,
        widths: np.ndarray | float
    ) -> HyperRectangle:
        """Create rectangle from center and width."""
        center = as_vector(center)
        if isinstance(widths, (int, float)):
            widths = np.full_like(center, widths)
        widths = np.asarray(widths)
        half_widths = widths / 2
        return cls(lower=center - half_widths, upper=center + half_widths)

    @classmethod
    def from_center_radius(cls, center: np.ndarray, radius: np.ndarray) -> HyperRectangle:
        center, radius = as_vector(center), as_vector(radius)
        return cls(lower=center - radius, upper=center + radius)

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> HyperRectangle:
        """Random box: normal center and absolute-normal radius."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        center = rng.normal(size=dim)
        radius = np.abs(rng.normal(size=dim))
        return cls.from_center_radius(center.astype(numeric_type), radius.astype(numeric_type))
