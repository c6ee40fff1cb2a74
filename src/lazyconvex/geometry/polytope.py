"""Polytopes in constraint (H) and vertex (V) representation.

Also hosts the conversion helpers shared by every set that materializes
vertices or constraints: ``remove_redundant_vertices`` and
``hull_constraints``. Both work in the affine hull of the point cloud, so
flat (lower-dimensional) polytopes are handled without Qhull errors.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

import numpy as np
from scipy.optimize import linprog, minimize
from scipy.spatial import ConvexHull, QhullError

from ..comparison import get_tolerance, isapprox, isapproxzero, is_le
from ..errors import (
    DimensionMismatch,
    InvalidConstruction,
    UnboundedDirection,
    UnsupportedOperation,
    check_dim,
)
from ..utils.arrays import as_matrix, as_vector, unit_vector
from .base import Set
from .halfspace import HalfSpace

logger = logging.getLogger(__name__)

# scipy.optimize.linprog status codes
_LP_OPTIMAL = 0
_LP_INFEASIBLE = 2
_LP_UNBOUNDED = 3


def lp_feasible(result) -> bool:
    """Read a feasibility LP result; solver failures raise RuntimeError."""
    if result.status == _LP_OPTIMAL:
        return True
    if result.status == _LP_INFEASIBLE:
        return False
    raise RuntimeError(f"LP failed: {result.message}")


def _unique_points(points: Sequence[np.ndarray]) -> list[np.ndarray]:
    unique: list[np.ndarray] = []
    for p in points:
        if not any(isapprox(p, q) for q in unique):
            unique.append(np.asarray(p))
    return unique


def _affine_hull(P: np.ndarray, dtype) -> tuple[np.ndarray, int, np.ndarray]:
    """Return the centroid, the rank and the orthonormal basis rows (SVD)."""
    c = P.mean(axis=0)
    _, S, Vt = np.linalg.svd(P - c, full_matrices=True)
    scale = max(1.0, float(np.max(np.abs(P))))
    rank = int(np.sum(S > get_tolerance(dtype).ztol * scale))
    return c, rank, Vt


def remove_redundant_vertices(points: Sequence[np.ndarray]) -> list[np.ndarray]:
    """Keep only the extreme points of a finite point cloud.

    Duplicates are removed through the comparison service, then a convex
    hull is computed in the affine hull of the points. In 2D the result is
    in counter-clockwise order.
    """
    unique = _unique_points(points)
    if len(unique) <= 1:
        return unique

    P = np.array(unique)
    c, rank, Vt = _affine_hull(P, P.dtype)
    if rank == 0:
        return [unique[0]]

    coords = (P - c) @ Vt[:rank].T
    if rank == 1:
        t = coords[:, 0]
        return [unique[int(np.argmin(t))], unique[int(np.argmax(t))]]

    if len(unique) <= rank + 1:
        # a simplex: every point is a vertex
        return unique
    try:
        hull = ConvexHull(coords)
    except QhullError as e:
        warnings.warn(f"Convex hull failed ({e}); returning unpruned vertices.")
        return unique
    return [unique[i] for i in hull.vertices]


def hull_constraints(points: Sequence[np.ndarray]) -> list[HalfSpace]:
    """Half-spaces whose intersection is the convex hull of ``points``.

    For flat point clouds the affine hull is described by pairs of
    opposing half-spaces, one pair per orthogonal direction.
    """
    unique = _unique_points(points)
    if not unique:
        raise UnsupportedOperation("the convex hull of no points is empty")

    P = np.array(unique)
    n = P.shape[1]
    c, rank, Vt = _affine_hull(P, P.dtype)

    constraints = []
    for w in Vt[rank:]:
        offset = float(np.dot(w, c))
        constraints.append(HalfSpace(w, offset))
        constraints.append(HalfSpace(-w, -offset))

    if rank == 0:
        return constraints

    V = Vt[:rank]
    coords = (P - c) @ V.T
    if rank == 1:
        v = V[0]
        t = coords[:, 0]
        base = float(np.dot(v, c))
        constraints.append(HalfSpace(v, base + t.max()))
        constraints.append(HalfSpace(-v, -(base + t.min())))
        return constraints

    hull = ConvexHull(coords)
    facets: list[np.ndarray] = []
    for eq in hull.equations:
        # eq = [normal, offset] with normal @ y + offset <= 0 inside
        normal = eq[:-1] @ V
        row = np.append(normal, np.dot(normal, c) - eq[-1])
        if not any(isapprox(row, f) for f in facets):
            facets.append(row)
    logger.debug("hull of %d points in R^%d has %d facets", len(unique), n, len(facets))
    constraints.extend(HalfSpace(f[:-1], f[-1]) for f in facets)
    return constraints


@dataclass(eq=False)
class HPolytope(Set):
    """Polyhedron defined by linear inequalities: {x : Ax <= b}.

    Despite the name the set may be unbounded; ``is_bounded`` tells.

    Attributes:
        A: Matrix of normal vectors, shape (m, n) for m constraints in R^n.
        b: Vector of offsets, shape (m,).
    """
    A: np.ndarray
    b: np.ndarray

    is_polyhedral = True

    def __post_init__(self) -> None:
        self.A = as_matrix(self.A)
        self.b = as_vector(self.b, dtype=self.A.dtype)

        if self.A.shape[0] != len(self.b):
            raise DimensionMismatch(
                f"A and b dimension mismatch: A has {self.A.shape[0]} rows, "
                f"b has {len(self.b)} elements"
            )

    @classmethod
    def from_constraints(cls, constraints: Sequence[HalfSpace], n: int | None = None) -> HPolytope:
        """Stack a list of half-spaces into one polytope."""
        if not constraints:
            if n is None:
                raise InvalidConstruction("an empty constraint list needs the dimension n")
            return cls(np.zeros((0, n)), np.zeros(0))
        A = np.array([h.a for h in constraints])
        b = np.array([h.b for h in constraints])
        return cls(A, b)

    @property
    def dim(self) -> int:
        return self.A.shape[1]

    @property
    def dtype(self) -> np.dtype:
        return self.A.dtype

    @property
    def n_constraints(self) -> int:
        return self.A.shape[0]

    def _lp(self, d: np.ndarray):
        """Maximize d @ x over the polytope with HiGHS."""
        bounds = [(None, None)] * self.dim
        A_ub, b_ub = (self.A, self.b) if self.n_constraints else (None, None)
        result = linprog(-d, A_ub=A_ub, b_ub=b_ub, bounds=bounds, method='highs')
        if result.status not in (_LP_OPTIMAL, _LP_INFEASIBLE, _LP_UNBOUNDED):
            raise RuntimeError(f"LP failed: {result.message}")
        if result.status == _LP_INFEASIBLE and np.any(d):
            # presolve may report "infeasible or unbounded"; a zero
            # objective cannot be unbounded, so it settles the question
            feasibility = linprog(np.zeros(self.dim), A_ub=A_ub, b_ub=b_ub,
                                  bounds=bounds, method='highs')
            if feasibility.status == _LP_OPTIMAL:
                result.status = _LP_UNBOUNDED
        return result

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        result = self._lp(d)
        if result.status == _LP_UNBOUNDED:
            return float('inf')
        if result.status == _LP_INFEASIBLE:
            return float('-inf')
        return float(-result.fun)

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        result = self._lp(d)
        if result.status == _LP_UNBOUNDED:
            raise UnboundedDirection(
                "the support vector is undefined because the polyhedron is "
                "unbounded in the given direction"
            )
        if result.status == _LP_INFEASIBLE:
            raise UnsupportedOperation("the support vector of an empty set does not exist")
        return result.x.astype(self.dtype)

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return is_le(self.A @ x, self.b)

    def is_empty(self) -> bool:
        return self._lp(np.zeros(self.dim)).status == _LP_INFEASIBLE

    def is_bounded(self) -> bool:
        """Check the support function along every signed unit vector."""
        if self.is_empty():
            return True
        for i in range(self.dim):
            e = unit_vector(i, self.dim)
            if self._lp(e).status == _LP_UNBOUNDED or self._lp(-e).status == _LP_UNBOUNDED:
                return False
        return True

    def is_universal(self, witness: bool = False):
        constraints = self.constraints_list()
        if not constraints:
            return (True, np.zeros(0)) if witness else True
        if witness:
            return constraints[0].is_universal(witness=True)
        return False

    def an_element(self) -> np.ndarray:
        return self.support_vector(np.zeros(self.dim))

    def constraints_list(self) -> list[HalfSpace]:
        """One half-space per nonzero row; zero rows are trivial or infeasible."""
        constraints = []
        for a, b in zip(self.A, self.b):
            if isapproxzero(a):
                if b < -get_tolerance(self.dtype).ztol:
                    from .emptyset import EmptySet

                    return EmptySet(self.dim, self.dtype.type).constraints_list()
                continue
            constraints.append(HalfSpace(a, b))
        return constraints

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        """Enumerate vertices by solving every n-subset of constraints.

        Each nonsingular n x n subsystem gives a candidate; feasible
        candidates are the vertices. The polytope must be bounded.
        """
        if self.is_empty():
            return []
        if not self.is_bounded():
            raise UnsupportedOperation("vertices_list requires a bounded polyhedron")

        n = self.dim
        candidates = []
        for rows in combinations(range(self.n_constraints), n):
            sub = self.A[list(rows)]
            if np.linalg.matrix_rank(sub) < n:
                continue
            x = np.linalg.solve(sub, self.b[list(rows)])
            if self.contains(x):
                candidates.append(x.astype(self.dtype))
        logger.debug("%d candidate vertices from %d constraints", len(candidates), self.n_constraints)
        if prune:
            return remove_redundant_vertices(candidates)
        return _unique_points(candidates)

    def remove_redundant_constraints(self) -> HPolytope:
        """Drop constraints implied by the others (one LP per constraint)."""
        keep = list(range(self.n_constraints))
        for i in range(self.n_constraints):
            others = [j for j in keep if j != i]
            A = np.vstack([self.A[others], self.A[i]])
            b = np.append(self.b[others], self.b[i] + 1)
            result = linprog(-self.A[i], A_ub=A, b_ub=b,
                             bounds=[(None, None)] * self.dim, method='highs')
            if result.status not in (_LP_OPTIMAL, _LP_INFEASIBLE, _LP_UNBOUNDED):
                raise RuntimeError(f"LP failed: {result.message}")
            if result.status == _LP_OPTIMAL and is_le(-result.fun, self.b[i]):
                keep = others
        return HPolytope(self.A[keep], self.b[keep])

    def chebyshev_center_radius(self) -> tuple[np.ndarray, float]:
        """Center and radius of the largest inscribed Euclidean ball."""
        norms = np.linalg.norm(self.A, axis=1)
        c = np.zeros(self.dim + 1)
        c[-1] = -1  # maximize r
        A_lp = np.hstack([self.A, norms[:, None]])
        bounds = [(None, None)] * self.dim + [(0, None)]
        result = linprog(c, A_ub=A_lp, b_ub=self.b, bounds=bounds, method='highs')
        if result.status != _LP_OPTIMAL:
            raise RuntimeError(f"Chebyshev center LP failed: {result.message}")
        return result.x[:-1], float(result.x[-1])

    def distance(self, x: np.ndarray) -> float:
        """Compute distance by finding closest point in polytope via QP."""
        x = self._point(x)

        if self.contains(x):
            return 0.0

        # Minimize ||y - x||^2 subject to Ay <= b
        def objective(y):
            return np.sum((y - x) ** 2)

        def grad(y):
            return 2 * (y - x)

        constraints = {'type': 'ineq', 'fun': lambda y: self.b - self.A @ y}

        result = minimize(
            objective, x.copy(), method='SLSQP',
            jac=grad, constraints=constraints
        )

        return float(np.sqrt(result.fun)) if result.success else float('inf')

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        """Sample using hit-and-run MCMC."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        current, radius = self.chebyshev_center_radius()
        if radius <= 1e-12:
            raise RuntimeError("Could not find interior point of polytope")

        samples = [current.copy()]

        # Hit-and-run sampling
        for _ in range(n * 10):  # Oversample for mixing
            direction = rng.normal(size=self.dim)
            direction /= np.linalg.norm(direction)

            # Find range of valid t: A(current + t*direction) <= b
            Ad = self.A @ direction
            slack = self.b - self.A @ current

            t_min, t_max = -np.inf, np.inf
            for i in range(self.n_constraints):
                if Ad[i] > 1e-10:
                    t_max = min(t_max, slack[i] / Ad[i])
                elif Ad[i] < -1e-10:
                    t_min = max(t_min, slack[i] / Ad[i])

            if not (np.isfinite(t_min) and np.isfinite(t_max)):
                raise UnsupportedOperation("cannot sample from an unbounded polyhedron")
            if t_max > t_min:
                t = rng.uniform(t_min, t_max)
                current = current + t * direction
                samples.append(current.copy())

        # Take every k-th sample after burn-in
        samples = np.array(samples)
        burn_in = len(samples) // 4
        samples = samples[burn_in:]
        indices = np.linspace(0, len(samples) - 1, n, dtype=int)
        return samples[indices]

    def intersection(self, other: Set) -> HPolytope:
        """Concrete intersection with any polyhedral set."""
        check_dim(self.dim, other.dim, "set")
        if not other.is_polyhedral:
            raise UnsupportedOperation(
                f"cannot intersect a polytope with {type(other).__name__} exactly"
            )
        other = HPolytope.from_constraints(other.constraints_list(), n=other.dim)
        return HPolytope(np.vstack([self.A, other.A]), np.concatenate([self.b, other.b]))

    def translate(self, v: np.ndarray) -> HPolytope:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> HPolytope:
        v = self._point(v)
        self.b += self.A @ v
        return self

    def linear_map(self, M: np.ndarray) -> Set:
        """Concrete image for invertible maps: {y : A M^-1 y <= b}."""
        M = self._map_matrix(M)
        if M.shape[0] == M.shape[1] and np.linalg.matrix_rank(M) == self.dim:
            return HPolytope(np.linalg.solve(M.T, self.A.T).T, self.b.copy())
        return super().linear_map(M)

    def scale(self, alpha: float) -> Set:
        if alpha == 0:
            return super().scale(alpha)
        return HPolytope(self.A / alpha, self.b.copy())

    def scale_(self, alpha: float) -> HPolytope:
        if alpha == 0:
            raise UnsupportedOperation("cannot scale a polyhedron by zero in place")
        self.A /= alpha
        return self


class HParallelotope(HPolytope):
    """Parallelotope {x : -offset[n:] <= D x <= offset[:n]}.

    Attributes:
        directions: Square matrix D with linearly independent rows.
        offset: Vector of length 2n; upper offsets first, then the
            (negated) lower offsets.
    """

    def __init__(self, directions: np.ndarray, offset: np.ndarray) -> None:
        D = as_matrix(directions)
        c = as_vector(offset, dtype=D.dtype)
        n = D.shape[0]
        if D.shape != (n, n):
            raise DimensionMismatch(f"directions must be square, got shape {D.shape}")
        check_dim(2 * n, len(c), "offset vector")
        if np.linalg.matrix_rank(D) < n:
            raise InvalidConstruction("the directions of a parallelotope must be independent")
        super().__init__(np.vstack([D, -D]), c)

    @property
    def directions(self) -> np.ndarray:
        return self.A[:self.dim]

    @property
    def offset(self) -> np.ndarray:
        return self.b

    def base_vertex(self) -> np.ndarray:
        """Solve ``D x = -offset[n:]``, the vertex where all lower faces meet."""
        n = self.dim
        return np.linalg.solve(self.directions, -self.offset[n:])

    def extremal_vertices(self) -> list[np.ndarray]:
        """Vertices adjacent to the base vertex, one per direction."""
        n = self.dim
        vertices = []
        for i in range(n):
            rhs = -self.offset[n:].copy()
            rhs[i] = self.offset[i]
            vertices.append(np.linalg.solve(self.directions, rhs))
        return vertices

    def center(self) -> np.ndarray:
        n = self.dim
        return np.linalg.solve(self.directions, (self.offset[:n] - self.offset[n:]) / 2)

    def to_zonotope(self):
        from .zonotope import Zonotope

        v0 = self.base_vertex()
        G = np.column_stack([(v - v0) / 2 for v in self.extremal_vertices()])
        return Zonotope(self.center(), G)

    def is_bounded(self) -> bool:
        return True

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        return self.to_zonotope().vertices_list(prune=prune)


@dataclass(eq=False)
class VPolytope(Set):
    """Convex hull of finitely many points.

    Attributes:
        vertices: Array of shape (k, n). An empty polytope needs an
            explicit (0, n) array.
    """
    vertices: np.ndarray

    is_polyhedral = True

    def __post_init__(self) -> None:
        V = self.vertices
        if isinstance(V, (list, tuple)) and V and np.ndim(V[0]) == 1:
            V = np.array([as_vector(v) for v in V])
        V = np.asarray(V)
        if V.ndim != 2:
            raise InvalidConstruction(
                f"vertices must be an array of shape (k, n), got {V.shape}"
            )
        self.vertices = V.astype(V.dtype if np.issubdtype(V.dtype, np.floating) else np.float64)

    @classmethod
    def convert(cls, X: Set, prune: bool = True) -> VPolytope:
        """Vertex representation of any set with a vertex list."""
        vertices = X.vertices_list(prune=prune)
        if not vertices:
            return cls(np.zeros((0, X.dim), dtype=X.dtype))
        return cls(np.array(vertices))

    @property
    def dim(self) -> int:
        return self.vertices.shape[1]

    @property
    def dtype(self) -> np.dtype:
        return self.vertices.dtype

    def support_function(self, d: np.ndarray) -> float:
        d = self._direction(d)
        if self.is_empty():
            return float('-inf')
        return float(np.max(self.vertices @ d))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        """First vertex attaining the maximum."""
        d = self._direction(d)
        if self.is_empty():
            raise UnsupportedOperation("the support vector of an empty set does not exist")
        return self.vertices[int(np.argmax(self.vertices @ d))].copy()

    def contains(self, x: np.ndarray) -> bool:
        """Solve the LP: find lambda >= 0, sum(lambda) = 1, V.T @ lambda = x."""
        x = self._point(x)
        k = len(self.vertices)
        if k == 0:
            return False
        if k == 1:
            return isapprox(self.vertices[0], x)
        A_eq = np.vstack([self.vertices.T, np.ones(k)])
        b_eq = np.append(x, 1)
        result = linprog(np.zeros(k), A_eq=A_eq, b_eq=b_eq,
                         bounds=[(0, None)] * k, method='highs')
        return lp_feasible(result)

    def is_bounded(self) -> bool:
        return True

    def is_empty(self) -> bool:
        return len(self.vertices) == 0

    def is_universal(self, witness: bool = False):
        if witness:
            return False, self.box_approximation().upper + 1
        return False

    def an_element(self) -> np.ndarray:
        if self.is_empty():
            raise UnsupportedOperation("an empty set does not have any element")
        return self.vertices[0].copy()

    def center(self) -> np.ndarray:
        """Centroid of the vertices."""
        return self.vertices.mean(axis=0)

    def constraints_list(self) -> list[HalfSpace]:
        if self.is_empty():
            from .emptyset import EmptySet

            return EmptySet(self.dim, self.dtype.type).constraints_list()
        return hull_constraints(list(self.vertices))

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        vertices = [v.copy() for v in self.vertices]
        return remove_redundant_vertices(vertices) if prune else vertices

    def tohrep(self) -> HPolytope:
        return HPolytope.from_constraints(self.constraints_list(), n=self.dim)

    def linear_map(self, M: np.ndarray) -> VPolytope:
        M = self._map_matrix(M)
        return VPolytope((self.vertices @ M.T).reshape(-1, M.shape[0]))

    def translate(self, v: np.ndarray) -> VPolytope:
        return self.copy().translate_(v)

    def translate_(self, v: np.ndarray) -> VPolytope:
        self.vertices += self._point(v)
        return self

    def scale(self, alpha: float) -> VPolytope:
        return self.copy().scale_(alpha)

    def scale_(self, alpha: float) -> VPolytope:
        self.vertices *= alpha
        return self

    def project(self, indices) -> VPolytope:
        return VPolytope(self.vertices[:, self._indices(indices)])

    def minkowski_sum(self, other: Set) -> Set:
        if isinstance(other, VPolytope):
            check_dim(self.dim, other.dim, "set")
            points = [v + w for v in self.vertices for w in other.vertices]
            return VPolytope(np.array(remove_redundant_vertices(points)))
        return super().minkowski_sum(other)

    @classmethod
    def rand(cls, numeric_type=np.float64, dim: int = 2,
             rng: np.random.Generator | None = None,
             seed: int | None = None, num_vertices: int | None = None) -> VPolytope:
        """Convex hull of normally distributed points."""
        from .sampling import reseed

        rng = reseed(rng, seed)
        if num_vertices is None:
            num_vertices = int(rng.integers(dim + 1, dim + 6))
        points = rng.normal(size=(num_vertices, dim)).astype(numeric_type)
        return cls(np.array(remove_redundant_vertices(list(points))))
