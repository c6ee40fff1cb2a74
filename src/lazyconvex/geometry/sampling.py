"""Random generator handling and sampling strategies for bounded sets."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np
from scipy.stats import qmc

if TYPE_CHECKING:
    from .base import Set


def reseed(rng: np.random.Generator | None, seed: int | None) -> np.random.Generator:
    """Return the generator to use for one randomized call.

    A given seed always wins and yields a fresh, reproducible generator.
    Without a seed the handle is used as is (or a new one is created).
    """
    if seed is not None:
        return np.random.default_rng(seed)
    if rng is None:
        return np.random.default_rng()
    return rng


class SamplingStrategy(Enum):
    """Available sampling strategies."""
    UNIFORM = auto()       # Set's own sampler
    GRID = auto()          # Regular grid over the bounding box
    LATIN_HYPERCUBE = auto()  # Latin hypercube sampling
    SOBOL = auto()         # Sobol low-discrepancy sequence
    HALTON = auto()        # Halton low-discrepancy sequence


def sample_set(
    s: Set,
    n: int,
    strategy: SamplingStrategy = SamplingStrategy.UNIFORM,
    seed: int | None = None,
    rng: np.random.Generator | None = None
) -> np.ndarray:
    """Sample points from a bounded set using the specified strategy.

    Args:
        s: Set to sample from.
        n: Number of points to sample.
        strategy: Sampling strategy to use.
        seed: Random seed for reproducibility.
        rng: Generator handle used when no seed is given.

    Returns:
        Array of sampled points, shape (n, dim). Grid sampling may return
        fewer points if the grid has fewer points inside the set.
    """
    if strategy == SamplingStrategy.UNIFORM:
        return s.sample(n, seed=seed, rng=rng)

    elif strategy == SamplingStrategy.GRID:
        return _sample_grid(s, n)

    elif strategy == SamplingStrategy.LATIN_HYPERCUBE:
        return _sample_qmc(s, n, 'latin', reseed(rng, seed))

    elif strategy == SamplingStrategy.SOBOL:
        return _sample_qmc(s, n, 'sobol', reseed(rng, seed))

    elif strategy == SamplingStrategy.HALTON:
        return _sample_qmc(s, n, 'halton', reseed(rng, seed))

    else:
        raise ValueError(f"Unknown sampling strategy: {strategy}")


def _is_box(s: Set) -> bool:
    from .hyperrectangle import HyperRectangle
    from .interval import Interval

    return isinstance(s, (HyperRectangle, Interval))


def _sample_grid(s: Set, n: int) -> np.ndarray:
    """Sample on a regular grid, accepting only points in the set."""
    bounds = s.box_approximation()

    # Determine grid resolution per dimension
    n_per_dim = int(np.ceil(n ** (1 / s.dim)))

    grids = [
        np.linspace(bounds.lower[i], bounds.upper[i], n_per_dim)
        for i in range(s.dim)
    ]
    mesh = np.meshgrid(*grids, indexing='ij')
    candidates = np.column_stack([m.ravel() for m in mesh])

    if _is_box(s):
        # All grid points are in the box
        valid = candidates
    else:
        mask = np.array([s.contains(x) for x in candidates])
        valid = candidates[mask]

    if len(valid) > n:
        # Subsample uniformly
        indices = np.linspace(0, len(valid) - 1, n, dtype=int)
        return valid[indices]
    return valid


def _sample_qmc(
    s: Set,
    n: int,
    method: str,
    rng: np.random.Generator
) -> np.ndarray:
    """Sample using quasi-Monte Carlo methods over the bounding box."""
    bounds = s.box_approximation()
    if np.any(bounds.lower >= bounds.upper):
        raise ValueError(f"{method.upper()} sampling requires a full-dimensional box")

    if method == 'latin':
        sampler = qmc.LatinHypercube(d=s.dim, seed=rng)
    elif method == 'sobol':
        sampler = qmc.Sobol(d=s.dim, seed=rng)
    elif method == 'halton':
        sampler = qmc.Halton(d=s.dim, seed=rng)
    else:
        raise ValueError(f"Unknown QMC method: {method}")

    if _is_box(s):
        sample_unit = sampler.random(n=n)
        return qmc.scale(sample_unit, bounds.lower, bounds.upper)

    # Oversample and reject
    samples = []
    batch_multiplier = 2

    while len(samples) < n:
        sample_unit = sampler.random(n=n * batch_multiplier)
        candidates = qmc.scale(sample_unit, bounds.lower, bounds.upper)

        for x in candidates:
            if s.contains(x):
                samples.append(x)
                if len(samples) >= n:
                    break

        batch_multiplier *= 2
        if batch_multiplier > 64:
            raise RuntimeError(
                f"Could not generate {n} samples from set after "
                "extensive rejection sampling. Set may be too small "
                "relative to bounding box."
            )

    return np.array(samples[:n])
