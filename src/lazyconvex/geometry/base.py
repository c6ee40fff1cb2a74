"""Capability contract shared by every set representation."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import fields, is_dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from ..comparison import isapprox
from ..errors import UnsupportedOperation, check_dim
from ..utils.arrays import as_matrix, as_vector, selection_matrix, unit_vector

if TYPE_CHECKING:
    from .halfspace import HalfSpace
    from .hyperrectangle import HyperRectangle


class Set(ABC):
    """Abstract base class for convex set representations.

    A Set supports:
    - Ambient dimension (dim)
    - Support function and support vector in a direction
    - Membership testing (contains, ``x in S``)
    - Emptiness and boundedness checks

    Everything else has a default here that either works through the
    support function or raises UnsupportedOperation. Subclasses override
    whatever they can do in closed form.
    """

    #: Whether ``constraints_list`` gives an exact polyhedral description.
    is_polyhedral: bool = False

    @property
    @abstractmethod
    def dim(self) -> int:
        """Dimension of the ambient space."""
        ...

    @property
    def dtype(self) -> np.dtype:
        """Numeric type of the set's data."""
        return np.dtype(np.float64)

    @abstractmethod
    def support_function(self, d: np.ndarray) -> float:
        """Evaluate ``sup {d @ x : x in S}``.

        Args:
            d: Direction, shape (dim,).

        Returns:
            The supremum; +inf if the set is unbounded in direction d and
            -inf if the set is empty.
        """
        ...

    @abstractmethod
    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """Return a point of the set attaining the support function in d.

        Raises:
            UnboundedDirection: If no maximizer exists.
        """
        ...

    @abstractmethod
    def contains(self, x: np.ndarray) -> bool:
        """Check if point x is in the set (up to the comparison tolerance)."""
        ...

    @abstractmethod
    def is_bounded(self) -> bool:
        ...

    @abstractmethod
    def is_empty(self) -> bool:
        ...

    def __contains__(self, x) -> bool:
        return self.contains(x)

    # -- argument checks ---------------------------------------------------

    def _direction(self, d) -> np.ndarray:
        d = as_vector(d)
        check_dim(self.dim, len(d), "direction")
        return d

    def _point(self, x) -> np.ndarray:
        x = as_vector(x)
        check_dim(self.dim, len(x), "point")
        return x

    def _map_matrix(self, M) -> np.ndarray:
        M = as_matrix(M)
        check_dim(self.dim, M.shape[1], "set for a matrix with that many columns")
        return M

    # -- derived queries ---------------------------------------------------

    def an_element(self) -> np.ndarray:
        """Return some element of the set."""
        return self.support_vector(unit_vector(0, self.dim, self.dtype))

    def center(self) -> np.ndarray:
        raise UnsupportedOperation(f"center is not defined for {type(self).__name__}")

    def constraints_list(self) -> list[HalfSpace]:
        """Return half-spaces whose intersection is the set."""
        raise UnsupportedOperation(
            f"constraints_list is not available for {type(self).__name__}"
        )

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        """Return the vertices of a polytopic set."""
        raise UnsupportedOperation(
            f"vertices_list is not available for {type(self).__name__}"
        )

    def is_universal(self, witness: bool = False):
        """Check whether the set is the whole space.

        With ``witness=True`` a pair ``(answer, point)`` is returned where
        ``point`` is outside the set if the answer is False.
        """
        raise UnsupportedOperation(
            f"is_universal is not available for {type(self).__name__}"
        )

    def distance(self, x: np.ndarray) -> float:
        """Euclidean distance from x to the set."""
        raise UnsupportedOperation(f"distance is not available for {type(self).__name__}")

    def box_approximation(self) -> HyperRectangle:
        """Tightest axis-aligned box containing the set."""
        from .hyperrectangle import HyperRectangle

        n = self.dim
        upper = np.array([self.support_function(unit_vector(i, n)) for i in range(n)])
        lower = np.array([-self.support_function(-unit_vector(i, n)) for i in range(n)])
        if not (np.all(np.isfinite(upper)) and np.all(np.isfinite(lower))):
            raise UnsupportedOperation("cannot box-approximate an unbounded or empty set")
        return HyperRectangle(lower.astype(self.dtype), upper.astype(self.dtype))

    def sample(
        self,
        n: int,
        seed: int | None = None,
        rng: np.random.Generator | None = None
    ) -> np.ndarray:
        """Sample n points from the set by rejection inside its box.

        Args:
            n: Number of points to sample.
            seed: Random seed for reproducibility.
            rng: Generator handle; reseeded if ``seed`` is given.

        Returns:
            Array of sampled points, shape (n, dim).
        """
        from .sampling import reseed

        rng = reseed(rng, seed)
        box = self.box_approximation()
        samples = []
        batch_multiplier = 2
        while len(samples) < n:
            candidates = rng.uniform(box.lower, box.upper, size=(n * batch_multiplier, self.dim))
            for x in candidates:
                if self.contains(x):
                    samples.append(x)
                    if len(samples) >= n:
                        break

            batch_multiplier *= 2
            if batch_multiplier > 64:
                raise RuntimeError(
                    f"Could not generate {n} samples from {type(self).__name__} "
                    "by rejection. The set may be flat relative to its box."
                )
        return np.array(samples[:n])

    # -- transformations (lazy by default) ---------------------------------

    def linear_map(self, M: np.ndarray) -> Set:
        from ..lazy.linear_map import LinearMap

        return LinearMap(M, self)

    def affine_map(self, M: np.ndarray, v: np.ndarray) -> Set:
        from ..lazy.linear_map import AffineMap

        return AffineMap(M, self, v)

    def translate(self, v: np.ndarray) -> Set:
        """Return the set shifted by v (the receiver is unchanged)."""
        from ..lazy.linear_map import AffineMap

        v = self._point(v)
        return AffineMap(np.eye(self.dim, dtype=self.dtype), self, v)

    def translate_(self, v: np.ndarray) -> Set:
        """Shift the set by v in place and return it."""
        raise UnsupportedOperation(f"{type(self).__name__} cannot be translated in place")

    def scale(self, alpha: float) -> Set:
        """Return the set scaled by alpha (the receiver is unchanged)."""
        return self.linear_map(alpha * np.eye(self.dim, dtype=self.dtype))

    def scale_(self, alpha: float) -> Set:
        """Scale the set by alpha in place and return it."""
        raise UnsupportedOperation(f"{type(self).__name__} cannot be scaled in place")

    def project(self, indices: Sequence[int]) -> Set:
        """Project the set onto the coordinates in ``indices``."""
        indices = self._indices(indices)
        return self.linear_map(selection_matrix(indices, self.dim, self.dtype))

    def _indices(self, indices: Sequence[int]) -> list[int]:
        indices = [int(i) for i in indices]
        for i in indices:
            if not 0 <= i < self.dim:
                raise IndexError(f"index {i} out of range for a {self.dim}-dimensional set")
        return indices

    def minkowski_sum(self, other: Set) -> Set:
        from ..lazy.minkowski_sum import MinkowskiSum

        return MinkowskiSum(self, other)

    def cartesian_product(self, other: Set) -> Set:
        from ..lazy.cartesian_product import CartesianProduct

        return CartesianProduct(self, other)

    # -- value semantics ---------------------------------------------------

    def copy(self) -> Set:
        return copy.deepcopy(self)

    def isapprox(self, other: Set) -> bool:
        """Check whether two sets have the same type and matching data."""
        if type(self) is not type(other) or not is_dataclass(self):
            return False
        for f in fields(self):
            if not f.init:
                continue
            a, b = getattr(self, f.name), getattr(other, f.name)
            if isinstance(a, Set):
                if not a.isapprox(b):
                    return False
            elif isinstance(a, (list, tuple)) and a and isinstance(a[0], Set):
                if len(a) != len(b) or not all(x.isapprox(y) for x, y in zip(a, b)):
                    return False
            elif isinstance(a, (list, tuple)) and a and isinstance(a[0], np.ndarray):
                if len(a) != len(b) or not all(isapprox(x, y) for x, y in zip(a, b)):
                    return False
            elif isinstance(a, (np.ndarray, np.number, int, float)):
                if not isapprox(np.asarray(a, dtype=float), np.asarray(b, dtype=float)):
                    return False
            elif a != b:
                return False
        return True
