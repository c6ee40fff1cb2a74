"""Tests for lazy linear and affine maps."""

import numpy as np
import pytest
from scipy.optimize import OptimizeResult

from lazyconvex import (
    AffineMap, Ball2, EmptySet, HyperRectangle, Interval, Line, LinearMap, VPolytope, Zonotope,
)
from lazyconvex.comparison import is_le
from lazyconvex.errors import DimensionMismatch, UnsupportedOperation
from lazyconvex.geometry import lp_feasible


def invertible_matrix():
    return np.array([[2.0, 1.0], [-1.0, 3.0]])


class TestConstruction:
    """Tests for the eager dimension checks."""

    def test_column_mismatch(self):
        """Test that M must have one column per coordinate of X."""
        with pytest.raises(DimensionMismatch):
            LinearMap(np.eye(3), Ball2(np.zeros(2), 1.0))

    def test_translation_mismatch(self):
        """Test that v must have one entry per row of M."""
        with pytest.raises(DimensionMismatch):
            AffineMap(np.eye(2), Ball2(np.zeros(2), 1.0), np.zeros(3))

    def test_dimension(self):
        """Test that the image lives in the row space."""
        L = LinearMap(np.ones((3, 2)), Ball2(np.zeros(2), 1.0))
        assert L.dim == 3


class TestLinearMap:
    """Tests for LinearMap."""

    def test_transpose_pullback(self):
        """Test rho(d, M X) == rho(M^T d, X) and sigma(d, M X) == M sigma(M^T d, X)."""
        M = invertible_matrix()
        X = Zonotope.rand(dim=2, seed=4, num_generators=3)
        L = LinearMap(M, X)
        rng = np.random.default_rng(2)

        for _ in range(10):
            d = rng.normal(size=2)
            assert L.support_function(d) == pytest.approx(X.support_function(M.T @ d))
            np.testing.assert_allclose(L.support_vector(d), M @ X.support_vector(M.T @ d))

    def test_constraints_round_trip(self):
        """Test that mapped vertices satisfy the mapped constraints."""
        M = invertible_matrix()
        X = HyperRectangle(np.array([-1.0, 0.0]), np.array([1.0, 2.0]))
        L = LinearMap(M, X)

        constraints = L.constraints_list()

        assert len(constraints) == 4
        for v in X.vertices_list():
            y = M @ v
            assert all(is_le(np.dot(h.a, y), h.b) for h in constraints)
        assert not all(h.contains(M @ np.array([1.5, 1.0])) for h in constraints)

    def test_constraints_non_invertible(self):
        """Test the fallback through mapped vertices for a bounded set."""
        X = HyperRectangle(np.zeros(2), np.ones(2))
        L = LinearMap(np.array([[1.0, 1.0]]), X)

        constraints = L.constraints_list()

        assert all(h.contains(np.array([1.5])) for h in constraints)
        assert not all(h.contains(np.array([2.5])) for h in constraints)

    def test_constraints_need_polyhedral_set(self):
        """Test that non-polyhedral sets are refused."""
        L = LinearMap(invertible_matrix(), Ball2(np.zeros(2), 1.0))

        assert not L.is_polyhedral
        with pytest.raises(UnsupportedOperation):
            L.constraints_list()

    def test_vertices(self):
        """Test the forward image of vertices, with pruning."""
        X = HyperRectangle(np.zeros(2), np.ones(2))

        square = LinearMap(invertible_matrix(), X).vertices_list()
        segment = LinearMap(np.array([[1.0, 1.0], [1.0, 1.0]]), X).vertices_list()

        assert len(square) == 4
        assert len(segment) == 2

    def test_contains_invertible(self):
        """Test membership by solving M y = x."""
        M = invertible_matrix()
        X = Ball2(np.zeros(2), 1.0)
        L = LinearMap(M, X)

        assert L.contains(M @ np.array([0.6, 0.0]))
        assert not L.contains(M @ np.array([0.6, 0.9]))

    def test_contains_injective(self):
        """Test membership for a tall matrix by least squares."""
        M = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        L = LinearMap(M, Ball2(np.zeros(2), 1.0))

        assert L.contains(np.array([0.5, 0.5, 1.0]))
        assert not L.contains(np.array([0.5, 0.5, 0.0]))
        assert not L.contains(np.array([2.0, 0.0, 2.0]))

    def test_contains_projection_of_polytope(self):
        """Test membership by LP feasibility for a wide matrix."""
        X = HyperRectangle(np.zeros(2), np.ones(2))
        L = LinearMap(np.array([[1.0, 1.0]]), X)

        assert L.contains(np.array([1.5]))
        assert not L.contains(np.array([2.5]))

    def test_contains_unsupported(self):
        """Test that a wide map of a ball cannot be decided."""
        L = LinearMap(np.array([[1.0, 1.0]]), Ball2(np.zeros(2), 1.0))

        with pytest.raises(UnsupportedOperation):
            L.contains(np.array([0.5]))

    def test_empty_and_bounded(self):
        """Test emptiness and boundedness queries."""
        assert LinearMap(np.eye(2), EmptySet(2)).is_empty()
        assert LinearMap(np.ones((1, 2)), Ball2(np.zeros(2), 1.0)).is_bounded()

        line = Line(np.zeros(2), np.array([1.0, 0.0]))
        assert not LinearMap(np.eye(2), line).is_bounded()
        # projecting a horizontal line onto the vertical axis leaves a point
        assert LinearMap(np.array([[0.0, 1.0]]), line).is_bounded()

    def test_center(self):
        """Test that the center is mapped."""
        L = LinearMap(invertible_matrix(), Ball2(np.array([1.0, 0.0]), 1.0))
        np.testing.assert_allclose(L.center(), [2.0, -1.0])

    def test_linear_map_composes(self):
        """Test that mapping a map multiplies the matrices."""
        M = invertible_matrix()
        N = np.array([[0.0, 1.0], [1.0, 0.0]])
        L = LinearMap(M, Ball2(np.zeros(2), 1.0)).linear_map(N)

        assert isinstance(L, LinearMap)
        assert isinstance(L.X, Ball2)
        np.testing.assert_allclose(L.M, N @ M)

    def test_translate_gives_affine_map(self):
        """Test that translation of a linear map is an affine map."""
        L = LinearMap(invertible_matrix(), Ball2(np.zeros(2), 1.0))

        A = L.translate(np.array([1.0, 1.0]))

        assert isinstance(A, AffineMap)
        assert A.contains(np.array([1.0, 1.0]))
        assert A.translate(np.array([-1.0, -1.0])).isapprox(
            AffineMap(L.M, L.X, np.zeros(2))
        )

    def test_scale_round_trip(self):
        """Test scaling the matrix and back."""
        L = LinearMap(invertible_matrix(), Ball2(np.zeros(2), 1.0))
        assert L.scale(2.0).scale(0.5).isapprox(L)

    def test_project(self):
        """Test projection keeps the wrapped set."""
        L = LinearMap(invertible_matrix(), Interval(0.0, 1.0).cartesian_product(Interval(0.0, 1.0)))

        P = L.project([1])

        assert P.dim == 1
        assert P.support_function(np.array([1.0])) == pytest.approx(3.0)

    def test_lazy_default_on_leaves(self):
        """Test that leaves without a concrete map return a lazy one."""
        L = Ball2(np.zeros(2), 1.0).linear_map(invertible_matrix())
        assert isinstance(L, LinearMap)


class TestAffineMap:
    """Tests for AffineMap."""

    def affine(self):
        X = HyperRectangle(np.zeros(2), np.ones(2))
        return AffineMap(invertible_matrix(), X, np.array([1.0, -2.0]))

    def test_support_shift(self):
        """Test that the support function shifts by d @ v."""
        A = self.affine()
        L = LinearMap(A.M, A.X)
        d = np.array([0.3, -0.7])

        assert A.support_function(d) == pytest.approx(L.support_function(d) + d @ A.v)
        np.testing.assert_allclose(A.support_vector(d), L.support_vector(d) + A.v)

    def test_contains(self):
        """Test membership of shifted points."""
        A = self.affine()

        assert A.contains(A.M @ np.array([0.5, 0.5]) + A.v)
        assert not A.contains(A.M @ np.array([0.5, 0.5]))

    def test_constraints_shift(self):
        """Test that constraints shift by a @ v."""
        A = self.affine()

        constraints = A.constraints_list()

        for v in A.vertices_list():
            assert all(h.contains(v) for h in constraints)
        assert not all(h.contains(A.M @ np.array([2.0, 2.0]) + A.v) for h in constraints)

    def test_vertices_shift(self):
        """Test that vertices shift by v."""
        A = self.affine()

        vertices = A.vertices_list()

        assert len(vertices) == 4
        assert any(np.allclose(v, A.v) for v in vertices)

    def test_linear_map_composes(self):
        """Test that mapping an affine map maps the translation too."""
        A = self.affine()
        N = 2 * np.eye(2)

        B = A.linear_map(N)

        assert isinstance(B, AffineMap)
        np.testing.assert_allclose(B.v, 2 * A.v)
        assert B.contains(N @ (A.M @ np.array([0.5, 0.5]) + A.v))

    def test_translate_round_trip(self):
        """Test that translating back gives the same affine map."""
        A = self.affine()
        v = np.array([3.0, 0.5])

        assert A.translate(v).translate(-v).isapprox(A)

    def test_project(self):
        """Test projection of matrix rows and translation."""
        A = self.affine()

        P = A.project([0])

        assert P.dim == 1
        np.testing.assert_allclose(P.v, [1.0])
        assert P.support_function(np.array([1.0])) == pytest.approx(3.0 + 1.0)

    def test_base_affine_map(self):
        """Test that a set without a concrete affine map gives AffineMap."""
        A = Ball2(np.zeros(2), 1.0).affine_map(np.eye(2), np.array([5.0, 0.0]))

        assert isinstance(A, AffineMap)
        assert A.contains(np.array([5.5, 0.0]))

    def test_constraints_non_square_with_translation(self):
        """Test that a projecting map with translation is shifted once."""
        X = HyperRectangle(np.zeros(2), np.ones(2))
        A = AffineMap(np.array([[1.0, 1.0]]), X, np.array([10.0]))

        constraints = A.constraints_list()

        for x in (10.0, 11.0, 12.0):
            assert all(h.contains(np.array([x])) for h in constraints)
        for x in (9.5, 12.5, 22.0):
            assert not all(h.contains(np.array([x])) for h in constraints)

    def test_constraints_singular_with_translation(self):
        """Test that every shifted vertex satisfies every constraint."""
        X = HyperRectangle(np.zeros(2), np.ones(2))
        A = AffineMap(np.array([[1.0, 1.0], [1.0, 1.0]]), X, np.array([1.0, -1.0]))

        constraints = A.constraints_list()
        vertices = A.vertices_list()

        assert len(vertices) == 2
        for v in vertices:
            assert all(h.contains(v) for h in constraints)
        assert all(h.contains(np.array([2.0, 0.0])) for h in constraints)
        assert not all(h.contains(np.array([2.0, 1.0])) for h in constraints)

    def test_contains_non_square_with_translation(self):
        """Test LP membership after removing the translation."""
        X = HyperRectangle(np.zeros(2), np.ones(2))
        A = AffineMap(np.array([[1.0, 1.0]]), X, np.array([10.0]))

        assert A.contains(np.array([11.0]))
        assert not A.contains(np.array([13.0]))


class TestSolverFailures:
    """Tests for LP results that are neither optimal nor infeasible."""

    def iteration_limit(self, *args, **kwargs):
        return OptimizeResult(status=1, message="Iteration limit reached.")

    def test_lp_feasible(self):
        """Test the reading of solver status codes."""
        assert lp_feasible(OptimizeResult(status=0, message=""))
        assert not lp_feasible(OptimizeResult(status=2, message=""))
        with pytest.raises(RuntimeError, match="Iteration limit"):
            lp_feasible(self.iteration_limit())

    def test_linear_map_membership_raises(self, monkeypatch):
        """Test that a failed LP is not reported as non-membership."""
        monkeypatch.setattr("lazyconvex.lazy.linear_map.linprog", self.iteration_limit)
        L = LinearMap(np.array([[1.0, 1.0]]), HyperRectangle(np.zeros(2), np.ones(2)))

        with pytest.raises(RuntimeError):
            L.contains(np.array([1.5]))

    def test_zonotope_membership_raises(self, monkeypatch):
        """Test the zonotope membership LP."""
        monkeypatch.setattr("lazyconvex.geometry.zonotope.linprog", self.iteration_limit)

        with pytest.raises(RuntimeError):
            Zonotope(np.zeros(2), np.eye(2)).contains(np.zeros(2))

    def test_vpolytope_membership_raises(self, monkeypatch):
        """Test the V-polytope membership LP."""
        monkeypatch.setattr("lazyconvex.geometry.polytope.linprog", self.iteration_limit)
        P = VPolytope(np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]))

        with pytest.raises(RuntimeError):
            P.contains(np.array([0.2, 0.2]))
