"""Lines {p + lambda * d : lambda in R}."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.linalg import null_space

from ..comparison import isapprox, isapproxzero, ismultiple
from ..errors import InvalidConstruction, UnboundedDirection, check_dim
from ..utils.arrays import as_vector
from .base import Set
from .halfspace import HalfSpace


@dataclass(eq=False, init=False)
class Line(Set):
    """Line through a point ``p`` with direction ``d``.

    The direction is not necessarily normalized. Besides the default
    constructor, ``Line.through`` builds the line through two points and
    ``Line.from_normal`` builds the 2D line ``a @ x == b``.

    Attributes:
        p: Point on the line.
        d: Direction (nonzero).
    """
    p: np.ndarray
    d: np.ndarray

    is_polyhedral = True

    def __init__(self, p, d, *, normalize: bool = False, check_direction: bool = True) -> None:
        self.p = as_vector(p)
        self.d = as_vector(d, dtype=self.p.dtype)
        check_dim(len(self.p), len(self.d), "direction")
        if check_direction and not np.any(self.d):
            raise InvalidConstruction("a line needs a non-zero direction vector")
        if normalize:
            self.normalize_()

    @classmethod
    def through(cls, from_, to, normalize: bool = False) -> Line:
        """Line through two distinct points, with direction ``from_ - to``."""
        from_, to = as_vector(from_), as_vector(to)
        d = from_ - to
        if not np.any(d):
            raise InvalidConstruction(f"points {from_} and {to} should be distinct")
        return cls(from_, d, normalize=normalize)

    @classmethod
    def from_normal(cls, a, b: float, normalize: bool = False) -> Line:
        """The two-dimensional line ``{x : a @ x == b}``."""
        a = as_vector(a)
        if len(a) != 2:
            raise InvalidConstruction(
                f"expected a normal vector of length two, but it is {len(a)}-dimensional"
            )
        horizontal = a[0] == 0
        vertical = a[1] == 0
        if horizontal and vertical:
            raise InvalidConstruction(f"the vector {a} must be non-zero")

        if horizontal:
            alpha = b / a[1]
            p, q = [0.0, alpha], [1.0, alpha]
        elif vertical:
            beta = b / a[0]
            p, q = [beta, 0.0], [beta, 1.0]
        else:
            alpha = b / a[1]
            mu = a[0] / a[1]
            p, q = [0.0, alpha], [1.0, alpha - mu]
        return cls.through(np.array(p, dtype=a.dtype), np.array(q, dtype=a.dtype),
                           normalize=normalize)

    @property
    def dim(self) -> int:
        return len(self.p)

    @property
    def dtype(self) -> np.dtype:
        return self.p.dtype

    @property
    def direction(self) -> np.ndarray:
        """Direction of the line (not necessarily normalized)."""
        return self.d

    def normalize(self, p: float = 2) -> Line:
        """Copy of the line whose direction has unit p-norm."""
        return self.copy().normalize_(p)

    def normalize_(self, p: float = 2) -> Line:
        self.d /= np.linalg.norm(self.d, ord=p)
        return self

    def support_function(self, d: np.ndarray) -> float:
        """Finite only for directions orthogonal to the line."""
        d = self._direction(d)
        if isapproxzero(np.dot(d, self.d)):
            return float(np.dot(d, self.p))
        return float('inf')

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        if isapproxzero(np.dot(d, self.d)):
            return self.p.copy()
        raise UnboundedDirection(
            "the support vector is undefined because the line is unbounded "
            "in the given direction"
        )

    def contains(self, x: np.ndarray) -> bool:
        """x is on the line iff x - p is a multiple of the direction."""
        x = self._point(x)
        if isapprox(x, self.p):
            return True
        return ismultiple(x - self.p, self.d)[0]

    def is_bounded(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return False

    def _orthogonal_basis(self) -> np.ndarray:
        """Columns span the orthogonal complement of the direction."""
        n = self.dim
        K = null_space(self.d.reshape(1, n))
        if K.shape[1] != n - 1:
            raise RuntimeError(f"expected {n - 1} normal directions, got {K.shape[1]}")
        return K.astype(self.dtype)

    def is_universal(self, witness: bool = False):
        """A line is universal only in one dimension."""
        if self.dim == 1:
            return (True, np.zeros(0, dtype=self.dtype)) if witness else True
        if witness:
            return False, self.p + self._orthogonal_basis()[:, 0]
        return False

    def an_element(self) -> np.ndarray:
        return self.p.copy()

    def constraints_list(self) -> list[HalfSpace]:
        """Return 2(n-1) half-spaces whose intersection is the line.

        A basis of the orthogonal complement of the direction is computed
        with an SVD-based null space; each basis vector k contributes the
        pair ``k @ x <= k @ p`` and ``-k @ x <= -k @ p``.
        """
        K = self._orthogonal_basis()
        constraints = []
        for j in range(K.shape[1]):
            k = K[:, j]
            b = np.dot(k, self.p)
            constraints.append(HalfSpace(k, b))
            constraints.append(HalfSpace(-k, -b))
        return constraints

    def distance(self, x: np.ndarray, p: float = 2.0) -> float:
        """Distance from x to its orthogonal projection onto the line."""
        x = self._point(x)
        t = np.dot(x - self.p, self.d) / np.dot(self.d, self.d)
        return float(np.linalg.norm(x - (self.p + t * self.d), ord=p))

    def translate(self, v: np.ndarray) -> Line:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> Line:
        v = self._point(v)
        self.p += v
        return self

    def scale(self, alpha: float) -> Set:
        return self.linear_map(alpha * np.eye(self.dim, dtype=self.dtype))

    def scale_(self, alpha: float) -> Line:
        if alpha == 0:
            raise InvalidConstruction("scaling a line by zero removes its direction")
        self.p *= alpha
        self.d *= alpha
        return self

    def linear_map(self, M: np.ndarray) -> Set:
        """Map point and direction; a vanishing direction gives a Singleton."""
        from .singleton import Singleton

        M = self._map_matrix(M)
        Mp = M @ self.p
        Md = M @ self.d
        if isapproxzero(Md):
            return Singleton(Mp)
        return Line(Mp, Md)

    def affine_map(self, M: np.ndarray, v: np.ndarray) -> Set:
        return self.linear_map(M).translate(v)

    def project(self, indices) -> Set:
        """Project onto ``indices``.

        A projected direction of zero gives a Singleton. A line projected
        onto a single coordinate covers that whole axis, so the result is
        ``Universe(1)`` rather than a one-dimensional line.
        """
        from .singleton import Singleton
        from .universe import Universe

        indices = self._indices(indices)
        d = self.d[indices]
        if isapproxzero(d):
            return Singleton(self.p[indices])
        if len(d) == 1:
            return Universe(1, self.dtype.type)
        return Line(self.p[indices], d)

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> Line:
        """All numbers are normally distributed with mean 0 and std 1."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        d = rng.normal(size=dim)
        while not np.any(d):
            d = rng.normal(size=dim)
        p = rng.normal(size=dim)
        return cls(p.astype(numeric_type), d.astype(numeric_type))

    def __repr__(self) -> str:
        return f"Line(p={self.p}, d={self.d})"
