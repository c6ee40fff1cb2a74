"""Polynomial zonotopes in dense and sparse representation.

Exact support functions of polynomial zonotopes require non-convex
optimization. Here the support function is evaluated on the enclosing
zonotope returned by ``overapproximate``, which gives a sound upper bound.
Support vectors and membership are not available.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from ..errors import DimensionMismatch, InvalidConstruction, UnsupportedOperation
from ..utils.arrays import as_matrix, as_vector
from .base import Set
from .zonotope import Zonotope


def _check_rows(name: str, M: np.ndarray, n: int) -> None:
    if M.shape[0] != n:
        raise DimensionMismatch(f"{name} has {M.shape[0]} rows but the center has length {n}")


@dataclass(eq=False)
class DensePolynomialZonotope(Set):
    """Dense polynomial zonotope.

    The set is {c + sum_i sum_j beta_j^i E[i-1][:, j]
    + sum_k mixed_k F[..][:, k] + G @ gamma}, with all factors
    beta, gamma in [-1, 1] and mixed monomials (products of at least two
    distinct factors) also ranging over [-1, 1].

    Attributes:
        c: Center, shape (n,).
        E: Coefficient matrices of pure powers; ``E[i]`` has shape (n, p)
            and holds the coefficients of ``beta_j^(i+1)``.
        F: Coefficient matrices of mixed monomials, one matrix per degree.
        G: Independent generators, shape (n, q).
    """
    c: np.ndarray
    E: list[np.ndarray] = field(default_factory=list)
    F: list[np.ndarray] = field(default_factory=list)
    G: np.ndarray | None = None

    def __post_init__(self) -> None:
        self.c = as_vector(self.c)
        n = len(self.c)
        self.E = [as_matrix(Ei, dtype=self.c.dtype) for Ei in self.E]
        self.F = [as_matrix(Fi, dtype=self.c.dtype) for Fi in self.F]
        self.G = (np.zeros((n, 0), dtype=self.c.dtype) if self.G is None
                  else as_matrix(self.G, dtype=self.c.dtype))
        for i, Ei in enumerate(self.E):
            _check_rows(f"E[{i}]", Ei, n)
        for i, Fi in enumerate(self.F):
            _check_rows(f"F[{i}]", Fi, n)
        _check_rows("G", self.G, n)
        if len({Ei.shape[1] for Ei in self.E}) > 1:
            raise InvalidConstruction("all matrices in E need one column per dependent factor")

    @property
    def dim(self) -> int:
        return len(self.c)

    @property
    def dtype(self) -> np.dtype:
        return self.c.dtype

    def center(self) -> np.ndarray:
        return self.c.copy()

    def polynomial_order(self) -> int:
        return max(len(self.E), len(self.F) + 1 if self.F else 0)

    def ndependentgens(self) -> int:
        return self.E[0].shape[1] if self.E else 0

    def nindependentgens(self) -> int:
        return self.G.shape[1]

    def overapproximate(self) -> Zonotope:
        """Enclosing zonotope; even powers range over [0, 1], the rest over [-1, 1]."""
        c = self.c.copy()
        generators = []
        for i, Ei in enumerate(self.E):
            if (i + 1) % 2 == 0:
                c += Ei.sum(axis=1) / 2
                generators.append(Ei / 2)
            else:
                generators.append(Ei)
        generators.extend(self.F)
        generators.append(self.G)
        return Zonotope(c, np.hstack(generators))

    def support_function(self, d: np.ndarray) -> float:
        """Upper bound of the support function (exact for the enclosing zonotope)."""
        self._direction(d)
        return self.overapproximate().support_function(d)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        raise UnsupportedOperation("support vectors of polynomial zonotopes are not available")

    def contains(self, x: np.ndarray) -> bool:
        raise UnsupportedOperation("membership in polynomial zonotopes is not available")

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def an_element(self) -> np.ndarray:
        # all factors zero
        return self.c.copy()

    def box_approximation(self):
        return self.overapproximate().box_approximation()

    def scale(self, alpha: float) -> DensePolynomialZonotope:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> DensePolynomialZonotope:
        self.c *= alpha
        for Ei in self.E:
            Ei *= alpha
        for Fi in self.F:
            Fi *= alpha
        self.G *= alpha
        return self

    def translate(self, v: np.ndarray) -> DensePolynomialZonotope:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> DensePolynomialZonotope:
        self.c += self._point(v)
        return self

    def linear_map(self, M: np.ndarray) -> DensePolynomialZonotope:
        M = self._map_matrix(M)
        return DensePolynomialZonotope(M @ self.c, [M @ Ei for Ei in self.E],
                                       [M @ Fi for Fi in self.F], M @ self.G)


@dataclass(eq=False)
class SparsePolynomialZonotope(Set):
    """Sparse polynomial zonotope.

    The set is {c + sum_j (prod_k alpha_k^E[k, j]) G[:, j] + GI @ beta}
    with all factors alpha, beta in [-1, 1].

    Attributes:
        c: Center, shape (n,).
        G: Dependent generators, shape (n, h).
        GI: Independent generators, shape (n, q).
        E: Nonnegative integer exponent matrix, shape (p, h).
        idx: Identifiers of the p dependent factors.
    """
    c: np.ndarray
    G: np.ndarray
    GI: np.ndarray
    E: np.ndarray
    idx: np.ndarray | None = None

    def __post_init__(self) -> None:
        self.c = as_vector(self.c)
        n = len(self.c)
        self.G = as_matrix(self.G, dtype=self.c.dtype)
        self.GI = as_matrix(self.GI, dtype=self.c.dtype)
        self.E = np.asarray(self.E, dtype=int)
        _check_rows("G", self.G, n)
        _check_rows("GI", self.GI, n)
        if self.E.ndim != 2 or self.E.shape[1] != self.G.shape[1]:
            raise DimensionMismatch(
                f"the exponent matrix needs one column per dependent generator, "
                f"got shape {self.E.shape} for {self.G.shape[1]} generators"
            )
        if np.any(self.E < 0):
            raise InvalidConstruction("exponents must be nonnegative")
        if self.idx is None:
            self.idx = np.arange(1, self.E.shape[0] + 1)
        self.idx = np.asarray(self.idx, dtype=int)
        if len(self.idx) != self.E.shape[0]:
            raise DimensionMismatch(
                f"expected {self.E.shape[0]} factor identifiers, got {len(self.idx)}"
            )

    @property
    def dim(self) -> int:
        return len(self.c)

    @property
    def dtype(self) -> np.dtype:
        return self.c.dtype

    def center(self) -> np.ndarray:
        return self.c.copy()

    def ngens_dep(self) -> int:
        return self.G.shape[1]

    def ngens_indep(self) -> int:
        return self.GI.shape[1]

    def nparams(self) -> int:
        return self.E.shape[0]

    def polynomial_order(self) -> int:
        return int(self.E.sum(axis=0).max()) if self.E.size else 0

    def overapproximate(self) -> Zonotope:
        """Enclosing zonotope.

        Constant monomials move into the center, monomials with only even
        exponents range over [0, 1], all others over [-1, 1].
        """
        c = self.c.copy()
        generators = []
        for j in range(self.ngens_dep()):
            exponents = self.E[:, j]
            g = self.G[:, j]
            if not np.any(exponents):
                c += g
            elif np.all(exponents % 2 == 0):
                c += g / 2
                generators.append(g / 2)
            else:
                generators.append(g)
        G = np.column_stack(generators) if generators else np.zeros((self.dim, 0))
        return Zonotope(c, np.hstack([G, self.GI]))

    def support_function(self, d: np.ndarray) -> float:
        """Upper bound of the support function (exact for the enclosing zonotope)."""
        self._direction(d)
        return self.overapproximate().support_function(d)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        raise UnsupportedOperation("support vectors of polynomial zonotopes are not available")

    def contains(self, x: np.ndarray) -> bool:
        raise UnsupportedOperation("membership in polynomial zonotopes is not available")

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return False

    def an_element(self) -> np.ndarray:
        """Point for all factors equal to zero."""
        constant = ~np.any(self.E, axis=0)
        return self.c + self.G[:, constant].sum(axis=1)

    def box_approximation(self):
        return self.overapproximate().box_approximation()

    def scale(self, alpha: float) -> SparsePolynomialZonotope:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> SparsePolynomialZonotope:
        self.c *= alpha
        self.G *= alpha
        self.GI *= alpha
        return self

    def translate(self, v: np.ndarray) -> SparsePolynomialZonotope:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> SparsePolynomialZonotope:
        self.c += self._point(v)
        return self

    def linear_map(self, M: np.ndarray) -> SparsePolynomialZonotope:
        M = self._map_matrix(M)
        return SparsePolynomialZonotope(M @ self.c, M @ self.G, M @ self.GI,
                                        self.E.copy(), self.idx.copy())
