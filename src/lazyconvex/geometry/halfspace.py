"""Half-spaces {x : a @ x <= b}."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..comparison import isapproxzero, is_le, ismultiple
from ..errors import InvalidConstruction, UnboundedDirection
from ..utils.arrays import as_vector
from .base import Set


def an_element_hyperplane(a: np.ndarray, b: float) -> np.ndarray:
    """Return a point on the hyperplane ``a @ x == b``.

    The point is zero except at the first nonzero entry of ``a``.
    """
    a = np.asarray(a)
    nonzero = np.flatnonzero(a)
    if len(nonzero) == 0:
        raise InvalidConstruction("the normal vector of a hyperplane must be nonzero")
    i = nonzero[0]
    x = np.zeros_like(a)
    x[i] = b / a[i]
    return x


@dataclass(eq=False)
class HalfSpace(Set):
    """Half-space defined by a linear inequality: {x : a @ x <= b}.

    Attributes:
        a: Normal vector (pointing outward from the half-space).
        b: Offset constant.
    """
    a: np.ndarray
    b: float

    is_polyhedral = True

    def __post_init__(self) -> None:
        self.a = as_vector(self.a)
        self.b = self.a.dtype.type(self.b)
        if not np.any(self.a):
            raise InvalidConstruction("Normal vector a cannot be zero")

    @property
    def dim(self) -> int:
        return len(self.a)

    @property
    def dtype(self) -> np.dtype:
        return self.a.dtype

    def support_function(self, d: np.ndarray) -> float:
        """The support function is finite only along the normal direction."""
        d = self._direction(d)
        if isapproxzero(d):
            return 0.0
        is_multiple, factor = ismultiple(d, self.a)
        if is_multiple and factor >= 0:
            return float(factor * self.b)
        return float('inf')

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        if isapproxzero(d):
            return self.an_element()
        is_multiple, factor = ismultiple(d, self.a)
        if is_multiple and factor >= 0:
            return an_element_hyperplane(self.a, self.b)
        raise UnboundedDirection(
            "the support vector is undefined because the half-space is "
            "unbounded in the given direction"
        )

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return is_le(np.dot(self.a, x), self.b)

    def is_bounded(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        """A half-space is never universal.

        The witness is a point on the boundary hyperplane shifted by the
        normal vector, which lies strictly outside.
        """
        if witness:
            return False, an_element_hyperplane(self.a, self.b) + self.a
        return False

    def an_element(self) -> np.ndarray:
        return an_element_hyperplane(self.a, self.b)

    def constraints_list(self) -> list[HalfSpace]:
        return [self]

    def distance(self, x: np.ndarray) -> float:
        x = self._point(x)
        signed_dist = (np.dot(self.a, x) - self.b) / np.linalg.norm(self.a)
        return float(max(0, signed_dist))

    def translate(self, v: np.ndarray) -> HalfSpace:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> HalfSpace:
        v = self._point(v)
        self.b = self.a.dtype.type(self.b + np.dot(self.a, v))
        return self

    def linear_map(self, M: np.ndarray) -> Set:
        """Concrete image under an invertible map, lazy otherwise."""
        M = self._map_matrix(M)
        if M.shape[0] == M.shape[1] and np.linalg.matrix_rank(M) == self.dim:
            return HalfSpace(np.linalg.solve(M.T, self.a), self.b)
        return super().linear_map(M)

    def normalize(self) -> HalfSpace:
        """Equivalent half-space with a unit-norm normal vector."""
        norm = np.linalg.norm(self.a)
        return HalfSpace(self.a / norm, self.b / norm)

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None) -> HalfSpace:
        """Random half-space with normally distributed data."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        a = rng.normal(size=dim)
        while not np.any(a):
            a = rng.normal(size=dim)
        return cls(a.astype(numeric_type), numeric_type(rng.normal()))
