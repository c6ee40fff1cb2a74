"""Tests for sampling strategies."""

import numpy as np
import pytest

from lazyconvex import Ball2, HPolytope, HyperRectangle, SamplingStrategy, Zonotope, sample_set
from lazyconvex.geometry.sampling import reseed


def box():
    return HyperRectangle(np.array([0.0, 0.0]), np.array([1.0, 2.0]))


class TestReseed:
    """Tests for generator handling."""

    def test_seed_wins(self):
        """Test that a seed replaces the handle."""
        rng = np.random.default_rng(0)
        a = reseed(rng, 3).uniform()
        b = np.random.default_rng(3).uniform()

        assert a == b

    def test_handle_kept(self):
        """Test that the handle is used when no seed is given."""
        rng = np.random.default_rng(0)

        assert reseed(rng, None) is rng
        assert isinstance(reseed(None, None), np.random.Generator)


class TestSampleSet:
    """Tests for sample_set."""

    @pytest.mark.parametrize("strategy", [
        SamplingStrategy.UNIFORM,
        SamplingStrategy.LATIN_HYPERCUBE,
        SamplingStrategy.SOBOL,
        SamplingStrategy.HALTON,
    ])
    def test_box_strategies(self, strategy):
        """Test that every random strategy stays inside a box."""
        B = box()

        samples = sample_set(B, 16, strategy=strategy, seed=0)

        assert samples.shape == (16, 2)
        assert all(B.contains(x) for x in samples)

    def test_reproducible(self):
        """Test that a seed fixes the samples."""
        a = sample_set(box(), 10, SamplingStrategy.LATIN_HYPERCUBE, seed=4)
        b = sample_set(box(), 10, SamplingStrategy.LATIN_HYPERCUBE, seed=4)

        np.testing.assert_array_equal(a, b)

    def test_grid_on_box(self):
        """Test that a full grid includes the corners."""
        samples = sample_set(box(), 16, SamplingStrategy.GRID)

        assert samples.shape == (16, 2)
        assert any(np.allclose(x, [1.0, 2.0]) for x in samples)

    def test_grid_on_ball(self):
        """Test that grid points outside the ball are dropped."""
        B = Ball2(np.zeros(2), 1.0)

        samples = sample_set(B, 25, SamplingStrategy.GRID)

        assert len(samples) == 13
        assert all(B.contains(x) for x in samples)

    def test_rejection_for_non_boxes(self):
        """Test that quasi-random samples of a ball are rejected into it."""
        B = Ball2(np.array([1.0, 1.0]), 0.5)

        samples = sample_set(B, 20, SamplingStrategy.HALTON, seed=1)

        assert samples.shape == (20, 2)
        assert all(B.contains(x) for x in samples)

    def test_flat_box_rejected(self):
        """Test that quasi-random sampling needs a full-dimensional box."""
        flat = HyperRectangle(np.zeros(2), np.array([1.0, 0.0]))
        with pytest.raises(ValueError):
            sample_set(flat, 8, SamplingStrategy.SOBOL, seed=0)


class TestSetSamplers:
    """Tests for the samplers of individual set types."""

    def test_zonotope_rejection(self):
        """Test the default rejection sampler on a zonotope."""
        Z = Zonotope(np.zeros(2), np.array([[1.0, 0.0, 1.0], [0.0, 1.0, 1.0]]))

        samples = Z.sample(15, seed=0)

        assert samples.shape == (15, 2)
        assert all(Z.contains(x) for x in samples)

    def test_ball_high_dimension(self):
        """Test direction sampling in higher dimensions."""
        B = Ball2(np.zeros(6), 2.0)

        samples = B.sample(30, seed=0)

        assert samples.shape == (30, 6)
        assert np.all(np.linalg.norm(samples, axis=1) <= 2.0 + 1e-12)

    def test_hpolytope_hit_and_run(self):
        """Test the hit-and-run sampler on a triangle."""
        A = np.array([[-1.0, 0.0], [0.0, -1.0], [1.0, 1.0]])
        P = HPolytope(A, np.array([0.0, 0.0, 1.0]))

        samples = P.sample(20, seed=0)

        assert samples.shape == (20, 2)
        assert all(P.contains(x) for x in samples)
