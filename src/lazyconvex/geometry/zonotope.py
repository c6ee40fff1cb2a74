"""Zonotopes {c + G @ xi : xi in [-1, 1]^p}."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from itertools import product

import numpy as np
from scipy.optimize import linprog

from ..comparison import isapprox, isapproxzero
from ..errors import DimensionMismatch, check_dim
from ..options import VertexOptions, merge
from ..utils.arrays import as_matrix, as_vector, sign_cadlag
from .base import Set
from .halfspace import HalfSpace
from .polytope import hull_constraints, lp_feasible, remove_redundant_vertices


@dataclass(eq=False)
class Zonotope(Set):
    """Zonotope given by a center and a generator matrix.

    Attributes:
        c: Center, shape (n,).
        G: Generator matrix, shape (n, p); one generator per column.
    """
    c: np.ndarray
    G: np.ndarray

    is_polyhedral = True

    def __post_init__(self) -> None:
        self.c = as_vector(self.c)
        G = np.asarray(self.G)
        if G.ndim == 2 and G.shape[1] == 0:
            G = np.zeros((len(self.c), 0))
        self.G = as_matrix(G, dtype=self.c.dtype)
        if self.G.shape[0] != len(self.c):
            raise DimensionMismatch(
                f"generator matrix has {self.G.shape[0]} rows but the "
                f"center has length {len(self.c)}"
            )

    @property
    def dim(self) -> int:
        return len(self.c)

    @property
    def dtype(self) -> np.dtype:
        return self.c.dtype

    def center(self) -> np.ndarray:
        return self.c.copy()

    def ngens(self) -> int:
        return self.G.shape[1]

    def order(self) -> float:
        """Number of generators divided by the dimension."""
        return self.ngens() / self.dim

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        return float(np.dot(d, self.c) + np.sum(np.abs(self.G.T @ d)))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """Generators orthogonal to d contribute with sign +1."""
        d = self._direction(d)
        return self.c + self.G @ sign_cadlag(self.G.T @ d)

    def contains(self, x: np.ndarray) -> bool:
        """Solve G @ xi = x - c with xi in [-1, 1]^p as an LP."""
        x = self._point(x)
        p = self.ngens()
        if p == 0:
            return isapprox(x, self.c)
        result = linprog(
            np.zeros(p), A_eq=self.G, b_eq=x - self.c,
            bounds=[(-1, 1)] * p, method='highs'
        )
        return lp_feasible(result)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def is_universal(self, witness: bool = False):
        if witness:
            return False, self.box_approximation().upper + 1
        return False

    def an_element(self) -> np.ndarray:
        return self.center()

    def remove_zero_generators(self) -> Zonotope:
        keep = [j for j in range(self.ngens()) if not isapproxzero(self.G[:, j])]
        return Zonotope(self.c.copy(), self.G[:, keep])

    def vertices_list(self, prune: bool | None = None, options: VertexOptions | None = None
                      ) -> list[np.ndarray]:
        """Enumerate c + G @ s over all sign vectors s.

        There are 2^p candidates, so a warning is emitted for zonotopes
        with more than ``options.max_generators`` nonzero generators.
        """
        options = merge(options or VertexOptions(), prune=prune)
        Z = self.remove_zero_generators()
        p = Z.ngens()
        if p == 0:
            return [Z.c.copy()]
        if p > options.max_generators:
            warnings.warn(
                f"Enumerating the vertices of a zonotope with {p} generators "
                f"visits {2 ** p} sign vectors."
            )
        candidates = [Z.c + Z.G @ np.array(s)
                      for s in product((-1.0, 1.0), repeat=p)]
        if options.prune:
            return remove_redundant_vertices(candidates)
        return candidates

    def constraints_list(self) -> list[HalfSpace]:
        return hull_constraints(self.vertices_list())

    def box_approximation(self):
        from .hyperrectangle import HyperRectangle

        radius = np.sum(np.abs(self.G), axis=1)
        return HyperRectangle.from_center_radius(self.c, radius)

    def translate(self, v: np.ndarray) -> Zonotope:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> Zonotope:
        self.c += self._point(v)
        return self

    def scale(self, alpha: float) -> Zonotope:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> Zonotope:
        self.c *= alpha
        self.G *= alpha
        return self

    def linear_map(self, M: np.ndarray) -> Zonotope:
        M = self._map_matrix(M)
        return Zonotope(M @ self.c, M @ self.G)

    def affine_map(self, M: np.ndarray, v: np.ndarray) -> Zonotope:
        Z = self.linear_map(M)
        return Z.translate_(as_vector(v, dtype=Z.dtype))

    def project(self, indices) -> Zonotope:
        indices = self._indices(indices)
        return Zonotope(self.c[indices], self.G[indices, :])

    def minkowski_sum(self, other: Set) -> Set:
        if isinstance(other, Zonotope):
            check_dim(self.dim, other.dim, "set")
            return Zonotope(self.c + other.c,
                            np.hstack([self.G, other.G]))
        return super().minkowski_sum(other)

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None, num_generators: int | None = None) -> Zonotope:
        """Random zonotope with standard normal center and generators."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        if num_generators is None:
            num_generators = int(rng.integers(dim, 2 * dim + 1))
        center = rng.normal(size=dim).astype(numeric_type)
        generators = rng.normal(size=(dim, num_generators)).astype(numeric_type)
        return cls(center, generators)
