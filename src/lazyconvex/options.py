"""Option records for operations that take optional parameters.

Each record is a frozen dataclass with documented defaults. Operations
accept keyword overrides and merge them with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np


@dataclass(frozen=True)
class VertexOptions:
    """Options for vertex enumeration.

    Attributes:
        prune: Remove points that are not extreme (convex-hull filter).
        max_generators: Largest zonotope generator count for which vertex
            enumeration runs without a warning.
    """
    prune: bool = True
    max_generators: int = 16


@dataclass(frozen=True)
class RandomOptions:
    """Options for random set generation.

    Attributes:
        numeric_type: Floating dtype of the generated data.
        dim: Ambient dimension.
        rng: Random generator handle; a fresh one is created if None.
        seed: If given, ``rng`` is replaced by a generator seeded with it.
    """
    numeric_type: type = np.float64
    dim: int = 2
    rng: np.random.Generator | None = None
    seed: int | None = None


def merge(options, **overrides):
    """Return ``options`` with the non-None ``overrides`` applied."""
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(options, **overrides) if overrides else options
