"""One-dimensional intervals [lo, hi]."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..comparison import isapproxzero, is_le
from ..errors import DimensionMismatch, InvalidConstruction, check_dim
from ..utils.arrays import as_matrix, as_vector
from .base import Set
from .halfspace import HalfSpace


@dataclass(eq=False)
class Interval(Set):
    """Closed interval {x : lo <= x <= hi} on the real line.

    Attributes:
        lo: Lower bound.
        hi: Upper bound.
    """
    lo: float
    hi: float

    is_polyhedral = True

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise InvalidConstruction(
                f"lower bound must be <= upper bound, got [{self.lo}, {self.hi}]"
            )
        dtype = np.result_type(np.asarray(self.lo), np.asarray(self.hi), np.float16)
        if not np.issubdtype(dtype, np.floating) or dtype == np.float16:
            dtype = np.float64
        self.lo = np.dtype(dtype).type(self.lo)
        self.hi = np.dtype(dtype).type(self.hi)

    @classmethod
    def from_bounds(cls, bounds) -> Interval:
        lo, hi = bounds
        return cls(lo, hi)

    @property
    def dim(self) -> int:
        return 1

    @property
    def dtype(self) -> np.dtype:
        return np.asarray(self.lo).dtype

    @property
    def lower(self) -> np.ndarray:
        return np.array([self.lo])

    @property
    def upper(self) -> np.ndarray:
        return np.array([self.hi])

    def low(self) -> float:
        return self.lo

    def high(self) -> float:
        return self.hi

    def center(self) -> np.ndarray:
        return np.array([(self.lo + self.hi) / 2], dtype=self.dtype)

    def radius(self) -> float:
        # in 1D, the radius is the same for any norm
        return float((self.hi - self.lo) / 2)

    def diameter(self) -> float:
        return float(self.hi - self.lo)

    def volume(self) -> float:
        return self.diameter()

    def is_flat(self) -> bool:
        """Check whether the bounds coincide up to the zero tolerance."""
        return isapproxzero(self.hi - self.lo)

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)[0]
        return float(d * self.hi if d >= 0 else d * self.lo)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)[0]
        return np.array([self.hi if d >= 0 else self.lo], dtype=self.dtype)

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)[0]
        return is_le(self.lo, x) and is_le(x, self.hi)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        if witness:
            return False, np.array([self.hi + 1], dtype=self.dtype)
        return False

    def an_element(self) -> np.ndarray:
        return np.array([self.lo], dtype=self.dtype)

    def constraints_list(self) -> list[HalfSpace]:
        """The two half-spaces ``x <= hi`` and ``-x <= -lo``."""
        e1 = np.ones(1, dtype=self.dtype)
        return [HalfSpace(e1, self.hi), HalfSpace(-e1, -self.lo)]

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        if prune and self.is_flat():
            return [np.array([self.lo], dtype=self.dtype)]
        return [np.array([self.lo], dtype=self.dtype), np.array([self.hi], dtype=self.dtype)]

    def extrema(self) -> tuple[float, float]:
        return self.lo, self.hi

    def distance(self, x: np.ndarray) -> float:
        x = self._point(x)[0]
        return float(max(self.lo - x, 0, x - self.hi))

    def norm(self, p: float = np.inf) -> float:
        return float(max(abs(self.lo), abs(self.hi)))

    def translate(self, v: np.ndarray) -> Interval:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> Interval:
        v = self._point(v)[0]
        self.lo = self.dtype.type(self.lo + v)
        self.hi = self.dtype.type(self.hi + v)
        return self

    def scale(self, alpha: float) -> Interval:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> Interval:
        t = self.dtype.type
        lo, hi = alpha * self.lo, alpha * self.hi
        self.lo, self.hi = t(min(lo, hi)), t(max(lo, hi))
        return self

    def reflect(self) -> Interval:
        return Interval(-self.hi, -self.lo)

    def rectify(self) -> Interval:
        """Image under x -> max(x, 0)."""
        return Interval(max(self.lo, 0), max(self.hi, 0))

    def linear_map(self, M: np.ndarray) -> Set:
        """Concrete linear map: an interval for 1x1 matrices, else a zonotope."""
        from .zonotope import Zonotope

        M = as_matrix(M)
        check_dim(1, M.shape[1], "set for a matrix with that many columns")
        if M.shape[0] == 1:
            return self.scale(M[0, 0])
        c = M[:, 0] * self.center()[0]
        return Zonotope(c, M * self.radius())

    def affine_map(self, M: np.ndarray, v: np.ndarray) -> Set:
        return self.linear_map(M).translate(as_vector(v))

    def project(self, indices) -> Interval:
        self._indices(indices)
        return self.copy()

    def split(self, k: int) -> list[Interval]:
        """Partition the interval into k intervals of equal width."""
        if k < 1:
            raise ValueError(f"number of pieces must be positive, got {k}")
        points = np.linspace(self.lo, self.hi, k + 1, dtype=self.dtype)
        return [Interval(points[i], points[i + 1]) for i in range(k)]

    def minkowski_sum(self, other: Set) -> Set:
        if isinstance(other, Interval):
            return Interval(self.lo + other.lo, self.hi + other.hi)
        return super().minkowski_sum(other)

    def minkowski_difference(self, other: Interval) -> Set:
        """The set {x : x + other ⊆ self}; empty if other is wider."""
        from .emptyset import EmptySet

        lo, hi = self.lo - other.lo, self.hi - other.hi
        if lo > hi:
            return EmptySet(1, self.dtype.type)
        return Interval(lo, hi)

    def intersection(self, other: Interval) -> Set:
        from .emptyset import EmptySet

        lo, hi = max(self.lo, other.lo), min(self.hi, other.hi)
        if lo > hi:
            return EmptySet(1, self.dtype.type)
        return Interval(lo, hi)

    def convex_hull(self, other: Interval) -> Interval:
        return Interval(min(self.lo, other.lo), max(self.hi, other.hi))

    def isdisjoint(self, other: Interval) -> bool:
        return self.hi < other.lo or other.hi < self.lo

    def issubset(self, other: Interval) -> bool:
        return is_le(other.lo, self.lo) and is_le(self.hi, other.hi)

    def __sub__(self, other: Interval) -> Interval:
        """Interval-arithmetic difference."""
        return Interval(self.lo - other.hi, self.hi - other.lo)

    def __mul__(self, other: Interval) -> Interval:
        """Interval-arithmetic product."""
        products = [self.lo * other.lo, self.lo * other.hi,
                    self.hi * other.lo, self.hi * other.hi]
        return Interval(min(products), max(products))

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        from .sampling import reseed

        rng = reseed(rng, seed)
        return rng.uniform(self.lo, self.hi, size=(n, 1))

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 1,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> Interval:
        """Random interval; both endpoints are standard normal."""
        from .sampling import reseed

        if dim != 1:
            raise DimensionMismatch(f"an interval is one-dimensional, got dim={dim}")
        rng = reseed(rng, seed)
        x, y = rng.normal(size=2).astype(numeric_type)
        return cls(min(x, y), max(x, y))

    def __repr__(self) -> str:
        return f"Interval({self.lo}, {self.hi})"
