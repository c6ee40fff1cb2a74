"""Tests for leaf set representations."""

import numpy as np
import pytest

from lazyconvex import (
    Ball2, EmptySet, HalfSpace, HyperRectangle, Interval, Singleton, Universe, Zonotope,
)
from lazyconvex.errors import (
    DimensionMismatch, InvalidConstruction, UnboundedDirection, UnsupportedOperation,
)


class TestHyperRectangle:
    """Tests for HyperRectangle."""

    def test_basic_creation(self):
        """Test rectangle creation."""
        rect = HyperRectangle(
            lower=np.array([0, 0]),
            upper=np.array([1, 1])
        )

        assert rect.dim == 2
        assert rect.volume == 1.0
        assert rect.dtype == np.float64
        np.testing.assert_array_equal(rect.center(), [0.5, 0.5])

    def test_invalid_bounds(self):
        """Test that crossed bounds are rejected."""
        with pytest.raises(InvalidConstruction):
            HyperRectangle(np.array([1.0, 0.0]), np.array([0.0, 1.0]))

    def test_keeps_single_precision(self):
        """Test that float32 input stays float32."""
        rect = HyperRectangle(np.zeros(2, dtype=np.float32), np.ones(2, dtype=np.float32))
        assert rect.dtype == np.float32

    def test_contains(self):
        """Test point containment."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 1]))

        assert rect.contains(np.array([0.5, 0.5]))
        assert rect.contains(np.array([0, 0]))  # Boundary
        assert np.array([1, 1]) in rect
        assert not rect.contains(np.array([1.5, 0.5]))
        assert not rect.contains(np.array([-0.1, 0.5]))

    def test_support_function(self):
        """Test support function and vector."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 1]))

        assert rect.support_function(np.array([1.0, 1.0])) == pytest.approx(2.0)
        assert rect.support_function(np.array([-1.0, 0.0])) == pytest.approx(0.0)
        # zero entries pick the upper bound
        np.testing.assert_array_equal(rect.support_vector(np.array([0.0, -1.0])), [1.0, 0.0])

    def test_direction_dimension_checked(self):
        """Test that directions of the wrong length are rejected."""
        rect = HyperRectangle(np.zeros(2), np.ones(2))
        with pytest.raises(DimensionMismatch):
            rect.support_function(np.ones(3))

    def test_distance(self):
        """Test distance computation."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 1]))

        assert rect.distance(np.array([0.5, 0.5])) == 0
        assert abs(rect.distance(np.array([2, 0.5])) - 1.0) < 1e-10
        assert abs(rect.distance(np.array([2, 2])) - np.sqrt(2)) < 1e-10

    def test_sampling(self):
        """Test uniform sampling."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 1]))

        samples = rect.sample(100, seed=42)

        assert samples.shape == (100, 2)
        assert np.all(samples >= 0)
        assert np.all(samples <= 1)
        np.testing.assert_array_equal(samples, rect.sample(100, seed=42))

    def test_from_center_width(self):
        """Test creation from center and width."""
        rect = HyperRectangle.from_center_width(
            center=np.array([0.5, 0.5]),
            widths=np.array([1.0, 2.0])
        )

        np.testing.assert_array_equal(rect.lower, [0, -0.5])
        np.testing.assert_array_equal(rect.upper, [1, 1.5])

    def test_constraints_and_vertices(self):
        """Test both materializations."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 2]))

        constraints = rect.constraints_list()
        vertices = rect.vertices_list()

        assert len(constraints) == 4
        assert len(vertices) == 4
        for v in vertices:
            assert all(h.contains(v) for h in constraints)

    def test_flat_vertices(self):
        """Test that a flat side contributes a single coordinate."""
        rect = HyperRectangle(np.array([0, 1]), np.array([1, 1]))

        assert len(rect.vertices_list()) == 2
        assert len(rect.vertices_list(prune=False)) == 4
        assert rect.is_flat()

    def test_translate_round_trip(self):
        """Test that translating back yields the same set."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 2]))
        v = np.array([0.3, -1.7])

        moved = rect.translate(v)

        assert moved.contains(np.array([1.3, 0.3]))
        assert moved.translate(-v).isapprox(rect)
        np.testing.assert_array_equal(rect.lower, [0, 0])

    def test_translate_in_place(self):
        """Test that translate_ mutates and returns the receiver."""
        rect = HyperRectangle(np.array([0, 0]), np.array([1, 2]))
        out = rect.translate_(np.array([1.0, 1.0]))

        assert out is rect
        np.testing.assert_array_equal(rect.lower, [1, 1])

    def test_scale_round_trip(self):
        """Test scaling by alpha then 1/alpha, including a negative factor."""
        rect = HyperRectangle(np.array([0, 1]), np.array([1, 2]))

        assert rect.scale(-2.0).scale(-0.5).isapprox(rect)
        np.testing.assert_array_equal(rect.scale(-1.0).lower, [-1, -2])

    def test_intersection(self):
        """Test intersection, including the disjoint case."""
        a = HyperRectangle(np.array([0, 0]), np.array([2, 2]))
        b = HyperRectangle(np.array([1, 1]), np.array([3, 3]))
        c = HyperRectangle(np.array([5, 5]), np.array([6, 6]))

        np.testing.assert_array_equal(a.intersection(b).lower, [1, 1])
        assert isinstance(a.intersection(c), EmptySet)

    def test_linear_map_is_zonotope(self):
        """Test that the concrete linear map gives a zonotope."""
        rect = HyperRectangle(np.array([-1, -1]), np.array([1, 1]))
        M = np.array([[1.0, 1.0], [0.0, 1.0]])

        Z = rect.linear_map(M)

        assert isinstance(Z, Zonotope)
        assert Z.support_function(np.array([1.0, 0.0])) == pytest.approx(2.0)


class TestInterval:
    """Tests for Interval."""

    def test_basic_creation(self):
        """Test interval accessors."""
        x = Interval(0, 2)

        assert x.dim == 1
        assert x.low() == 0 and x.high() == 2
        assert x.radius() == 1.0
        assert x.diameter() == 2.0
        np.testing.assert_array_equal(x.center(), [1.0])

    def test_invalid_bounds(self):
        """Test that lo > hi is rejected."""
        with pytest.raises(InvalidConstruction):
            Interval(1, 0)

    def test_support_function(self):
        """Test support function and vector."""
        x = Interval(-1, 3)

        assert x.support_function(np.array([2.0])) == pytest.approx(6.0)
        assert x.support_function(np.array([-1.0])) == pytest.approx(1.0)
        np.testing.assert_array_equal(x.support_vector(np.array([0.0])), [3.0])

    def test_contains(self):
        """Test membership with tolerance at the boundary."""
        x = Interval(0, 1)

        assert x.contains(np.array([0.5]))
        assert x.contains(np.array([1.0 + 1e-12]))
        assert not x.contains(np.array([1.1]))

    def test_vertices(self):
        """Test that a flat interval has one vertex after pruning."""
        assert len(Interval(0, 1).vertices_list()) == 2
        assert len(Interval(1, 1).vertices_list()) == 1
        assert len(Interval(1, 1).vertices_list(prune=False)) == 2

    def test_constraints(self):
        """Test the two half-spaces."""
        constraints = Interval(-1, 2).constraints_list()

        assert len(constraints) == 2
        assert all(h.contains(np.array([0.0])) for h in constraints)
        assert not all(h.contains(np.array([3.0])) for h in constraints)

    def test_scale_negative(self):
        """Test that negative scaling swaps the bounds."""
        x = Interval(0, 2).scale(-1)
        assert x.lo == -2 and x.hi == 0

    def test_linear_map(self):
        """Test 1x1 and taller matrices."""
        x = Interval(0, 2)

        y = x.linear_map(np.array([[3.0]]))
        assert isinstance(y, Interval)
        assert (y.lo, y.hi) == (0, 6)

        Z = x.linear_map(np.array([[1.0], [2.0]]))
        assert isinstance(Z, Zonotope)
        assert Z.support_function(np.array([0.0, 1.0])) == pytest.approx(4.0)

    def test_intersection(self):
        """Test overlapping and disjoint intersections."""
        a = Interval(0, 2)

        b = a.intersection(Interval(1, 3))
        assert (b.lo, b.hi) == (1, 2)
        assert isinstance(a.intersection(Interval(5, 6)), EmptySet)
        assert a.isdisjoint(Interval(5, 6))

    def test_arithmetic(self):
        """Test interval arithmetic."""
        a = Interval(-1, 2)
        b = Interval(3, 4)

        assert ((a * b).lo, (a * b).hi) == (-4, 8)
        assert ((a - b).lo, (a - b).hi) == (-5, -1)

    def test_split(self):
        """Test splitting into equal pieces."""
        pieces = Interval(0, 1).split(4)

        assert len(pieces) == 4
        assert pieces[0].hi == pytest.approx(0.25)
        assert pieces[-1].hi == pytest.approx(1.0)

    def test_precision_kept(self):
        """Test that single-precision intervals stay single precision."""
        X = Interval(np.float32(0), np.float32(1))

        assert X.translate(np.array([1.0])).dtype == np.float32
        assert X.scale(-2.0).dtype == np.float32
        assert all(piece.dtype == np.float32 for piece in X.split(3))

        X.translate_(np.array([0.5]))
        assert isinstance(X.lo, np.float32)
        assert X.hi == pytest.approx(1.5)

    def test_minkowski_difference(self):
        """Test that a wider subtrahend gives the empty set."""
        d = Interval(0, 4).minkowski_difference(Interval(-1, 1))
        assert (d.lo, d.hi) == (1, 3)
        assert isinstance(Interval(0, 1).minkowski_difference(Interval(-1, 1)), EmptySet)


class TestBall2:
    """Tests for Ball2."""

    def test_basic_creation(self):
        """Test ball creation."""
        ball = Ball2(np.array([0, 0]), 1.0)

        assert ball.dim == 2
        np.testing.assert_array_equal(ball.center(), [0, 0])

    def test_negative_radius(self):
        """Test that a negative radius is rejected."""
        with pytest.raises(InvalidConstruction):
            Ball2(np.zeros(2), -1.0)

    def test_contains(self):
        """Test point containment."""
        ball = Ball2(np.array([0, 0]), 1.0)

        assert ball.contains(np.array([0, 0]))
        assert ball.contains(np.array([0.5, 0.5]))
        assert ball.contains(np.array([1, 0]))  # Boundary
        assert not ball.contains(np.array([1, 1]))

    def test_support(self):
        """Test support function and vector."""
        ball = Ball2(np.array([1.0, 0.0]), 2.0)

        assert ball.support_function(np.array([0.0, 3.0])) == pytest.approx(6.0)
        np.testing.assert_allclose(ball.support_vector(np.array([0.0, 3.0])), [1.0, 2.0])
        np.testing.assert_array_equal(ball.support_vector(np.zeros(2)), [1.0, 0.0])

    def test_distance(self):
        """Test distance computation."""
        ball = Ball2(np.array([0, 0]), 1.0)

        assert ball.distance(np.array([0, 0])) == 0
        assert abs(ball.distance(np.array([2, 0])) - 1.0) < 1e-10

    def test_sampling(self):
        """Test uniform sampling in low and high dimensions."""
        for dim in (2, 6):
            ball = Ball2(np.zeros(dim), 1.0)
            samples = ball.sample(100, seed=42)

            assert samples.shape == (100, dim)
            assert np.all(np.linalg.norm(samples, axis=1) <= 1 + 1e-10)

    def test_box_approximation(self):
        """Test the enclosing box."""
        box = Ball2(np.array([1.0, 2.0]), 0.5).box_approximation()

        np.testing.assert_allclose(box.lower, [0.5, 1.5])
        np.testing.assert_allclose(box.upper, [1.5, 2.5])

    def test_scale(self):
        """Test that scaling uses the absolute factor for the radius."""
        ball = Ball2(np.array([1.0, 0.0]), 1.0).scale(-2.0)

        np.testing.assert_array_equal(ball.center(), [-2.0, 0.0])
        assert ball.radius == pytest.approx(2.0)

    def test_not_polyhedral(self):
        """Test that a ball has no constraint representation."""
        ball = Ball2(np.zeros(2), 1.0)
        assert not ball.is_polyhedral
        with pytest.raises(UnsupportedOperation):
            ball.constraints_list()


class TestSingleton:
    """Tests for Singleton."""

    def test_support(self):
        """Test that every direction is attained at the element."""
        s = Singleton(np.array([1.0, 2.0]))

        assert s.support_function(np.array([1.0, 1.0])) == pytest.approx(3.0)
        np.testing.assert_array_equal(s.support_vector(np.array([-1.0, 5.0])), [1.0, 2.0])

    def test_contains(self):
        """Test membership."""
        s = Singleton(np.array([1.0, 2.0]))

        assert s.contains(np.array([1.0, 2.0 + 1e-12]))
        assert not s.contains(np.array([1.0, 2.1]))

    def test_constraints(self):
        """Test the 2n opposing half-spaces."""
        s = Singleton(np.array([1.0, 2.0, 3.0]))
        constraints = s.constraints_list()

        assert len(constraints) == 6
        assert all(h.contains(s.element) for h in constraints)
        assert s.vertices_list()[0] is not s.element

    def test_linear_map(self):
        """Test the concrete linear map."""
        s = Singleton(np.array([1.0, 2.0]))
        image = s.linear_map(np.array([[0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]))

        assert isinstance(image, Singleton)
        np.testing.assert_array_equal(image.element, [2.0, 1.0, 3.0])

    def test_scale_in_place(self):
        """Test in-place scaling."""
        s = Singleton(np.array([1.0, 2.0]))
        assert s.scale_(2.0) is s
        np.testing.assert_array_equal(s.element, [2.0, 4.0])


class TestEmptySet:
    """Tests for EmptySet."""

    def test_queries(self):
        """Test the degenerate answers."""
        E = EmptySet(2)

        assert E.support_function(np.array([1.0, 0.0])) == float('-inf')
        assert not E.contains(np.zeros(2))
        assert E.is_empty()
        assert E.is_bounded()
        assert E.distance(np.zeros(2)) == float('inf')
        assert E.vertices_list() == []

    def test_no_element(self):
        """Test that element queries fail."""
        E = EmptySet(2)
        with pytest.raises(UnsupportedOperation):
            E.support_vector(np.array([1.0, 0.0]))
        with pytest.raises(UnsupportedOperation):
            E.an_element()

    def test_contradictory_constraints(self):
        """Test that no point satisfies all constraints."""
        constraints = EmptySet(3).constraints_list()
        for x in (np.zeros(3), np.ones(3), -np.ones(3)):
            assert not all(h.contains(x) for h in constraints)

    def test_zero_dimensional_constraints(self):
        """Test that a zero-dimensional empty set has no constraint list."""
        with pytest.raises(UnsupportedOperation):
            EmptySet(0).constraints_list()

    def test_linear_map_dimension(self):
        """Test that mapping keeps emptiness and takes the new dimension."""
        image = EmptySet(2).linear_map(np.ones((3, 2)))
        assert isinstance(image, EmptySet)
        assert image.dim == 3

    def test_distance_dimension_checked(self):
        """Test the dimension check before answering infinity."""
        with pytest.raises(DimensionMismatch):
            EmptySet(2).distance(np.zeros(3))


class TestUniverse:
    """Tests for Universe."""

    def test_queries(self):
        """Test support function and membership."""
        U = Universe(2)

        assert U.support_function(np.array([1.0, 0.0])) == float('inf')
        assert U.support_function(np.zeros(2)) == 0.0
        assert U.contains(np.array([1e9, -1e9]))
        assert U.is_universal()
        assert not U.is_bounded()
        assert U.constraints_list() == []

    def test_support_vector_unbounded(self):
        """Test that nonzero directions have no maximizer."""
        with pytest.raises(UnboundedDirection):
            Universe(2).support_vector(np.array([0.0, 1.0]))

    def test_project(self):
        """Test projection onto fewer coordinates."""
        assert Universe(3).project([0, 2]).dim == 2


class TestHalfSpaceAsLeaf:
    """Tests for value semantics shared by leaves."""

    def test_isapprox_type_sensitive(self):
        """Test that isapprox compares type and data."""
        a = HyperRectangle(np.zeros(1), np.ones(1))
        b = Interval(0, 1)

        assert not a.isapprox(b)
        assert b.isapprox(Interval(0, 1 + 1e-12))
        assert not HalfSpace(np.ones(2), 1.0).isapprox(HalfSpace(np.ones(2), 2.0))
