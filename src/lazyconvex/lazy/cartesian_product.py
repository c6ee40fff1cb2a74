"""Lazy Cartesian products of sets.

Queries are answered factor by factor: a global direction or point is cut
at the block boundaries, each piece goes to its factor, and the results
are summed (support function), concatenated (support vector) or combined
with AND (membership). The product itself is never materialized unless
``constraints_list`` or ``vertices_list`` is called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import product
from typing import Sequence

import numpy as np

from ..errors import DimensionMismatch, UnsupportedOperation
from ..geometry.base import Set
from ..geometry.halfspace import HalfSpace
from ..geometry.polytope import remove_redundant_vertices
from ..utils.arrays import common_dtype
from .blocks import Block, block_structure, group_indices, lift_constraint, split_vector

logger = logging.getLogger(__name__)


class _BlockProduct(Set):
    """Shared implementation for binary and n-ary products."""

    _blocks: tuple[Block, ...]

    @property
    def factors(self) -> tuple[Set, ...]:
        raise NotImplementedError

    def block_structure(self) -> tuple[Block, ...]:
        """Blocks of the factors, computed once at construction."""
        return self._blocks

    @property
    def dim(self) -> int:
        return self._blocks[-1].stop if self._blocks else 0

    @property
    def dtype(self) -> np.dtype:
        return common_dtype(self.factors)

    @property
    def is_polyhedral(self) -> bool:
        return all(X.is_polyhedral for X in self.factors)

    def _split(self, x: np.ndarray) -> list[np.ndarray]:
        return split_vector(x, self._blocks)

    def support_function(self, d: np.ndarray) -> float:
        """Sum of the factors' support functions in the block directions."""
        d = self._direction(d)
        values = [X.support_function(di) for X, di in zip(self.factors, self._split(d))]
        if any(v == float('-inf') for v in values):
            return float('-inf')
        return float(sum(values))

    def support_vector(self, d: np.ndarray) -> np.ndarray:
        d = self._direction(d)
        return np.concatenate([X.support_vector(di) for X, di in zip(self.factors, self._split(d))])

    def contains(self, x: np.ndarray) -> bool:
        x = self._point(x)
        return all(X.contains(xi) for X, xi in zip(self.factors, self._split(x)))

    def is_bounded(self) -> bool:
        return all(X.is_bounded() for X in self.factors)

    def is_empty(self) -> bool:
        return any(X.is_empty() for X in self.factors)

    def is_universal(self, witness: bool = False):
        if not witness:
            return all(X.is_universal() for X in self.factors)
        for X, block in zip(self.factors, self._blocks):
            answer, w = X.is_universal(witness=True)
            if not answer:
                # a point outside one factor is outside the product
                point = np.zeros(self.dim, dtype=self.dtype)
                point[block.slice] = w
                return False, point
        return True, np.zeros(0, dtype=self.dtype)

    def an_element(self) -> np.ndarray:
        return np.concatenate([X.an_element() for X in self.factors])

    def center(self) -> np.ndarray:
        return np.concatenate([X.center() for X in self.factors])

    def constraints_list(self) -> list[HalfSpace]:
        """Lift every factor's constraints into the ambient space."""
        unsupported = [type(X).__name__ for X in self.factors if not X.is_polyhedral]
        if unsupported:
            raise UnsupportedOperation(
                f"constraints_list of a Cartesian product needs polyhedral factors, "
                f"got {', '.join(unsupported)}"
            )
        n = self.dim
        constraints = []
        for X, block in zip(self.factors, self._blocks):
            constraints.extend(lift_constraint(h, block, n) for h in X.constraints_list())
        logger.debug("lifted %d constraints from %d factors", len(constraints), len(self._blocks))
        return constraints

    def vertices_list(self, prune: bool = True) -> list[np.ndarray]:
        """Concatenate one vertex of each factor, for every combination."""
        per_factor = [X.vertices_list(prune=prune) for X in self.factors]
        if any(len(vs) == 0 for vs in per_factor):
            return []
        vertices = [np.concatenate(combo) for combo in product(*per_factor)]
        logger.debug("combined %d vertices from %d factors", len(vertices), len(per_factor))
        if prune:
            return remove_redundant_vertices(vertices)
        return vertices

    def distance(self, x: np.ndarray) -> float:
        """Euclidean distance; factor distances combine as a 2-norm."""
        x = self._point(x)
        parts = [X.distance(xi) for X, xi in zip(self.factors, self._split(x))]
        return float(np.linalg.norm(parts))

    def project(self, indices: Sequence[int]) -> Set:
        """Project factor by factor when the indices are strictly increasing."""
        indices = self._indices(indices)
        if any(b <= a for a, b in zip(indices, indices[1:])):
            return super().project(indices)
        groups = group_indices(indices, self._blocks)
        projected = [self.factors[block.index].project(local) for block, local in groups]
        if len(projected) == 1:
            return projected[0]
        return CartesianProductArray(projected)

    def translate(self, v: np.ndarray) -> Set:
        v = self._point(v)
        return CartesianProductArray(
            [X.translate(vi) for X, vi in zip(self.factors, self._split(v))]
        )

    def scale(self, alpha: float) -> Set:
        return CartesianProductArray([X.scale(alpha) for X in self.factors])

    def sample(self, n: int, seed: int | None = None,
               rng: np.random.Generator | None = None) -> np.ndarray:
        """Sample each factor independently and concatenate."""
        from ..geometry.sampling import reseed

        rng = reseed(rng, seed)
        return np.hstack([X.sample(n, rng=rng) for X in self.factors])

    def array(self) -> CartesianProductArray:
        """Equivalent n-ary product with nested products flattened."""
        sets: list[Set] = []
        for X in self.factors:
            if isinstance(X, _BlockProduct):
                sets.extend(X.array().sets)
            else:
                sets.append(X)
        return CartesianProductArray(sets)


@dataclass(eq=False)
class CartesianProduct(_BlockProduct):
    """Cartesian product X1 × X2 of two sets.

    Attributes:
        X1: First factor, owns coordinates ``0:X1.dim``.
        X2: Second factor, owns the remaining coordinates.
    """
    X1: Set
    X2: Set
    _blocks: tuple[Block, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        common_dtype([self.X1, self.X2])
        self._blocks = block_structure([self.X1, self.X2])

    @property
    def factors(self) -> tuple[Set, ...]:
        return (self.X1, self.X2)

    def translate(self, v: np.ndarray) -> CartesianProduct:
        v = self._point(v)
        v1, v2 = self._split(v)
        return CartesianProduct(self.X1.translate(v1), self.X2.translate(v2))

    def scale(self, alpha: float) -> CartesianProduct:
        return CartesianProduct(self.X1.scale(alpha), self.X2.scale(alpha))


@dataclass(eq=False)
class CartesianProductArray(_BlockProduct):
    """Cartesian product of an ordered sequence of sets.

    The factor sequence is stored as a tuple; the block structure is a
    pure function of it and is computed once here.

    Attributes:
        sets: The factors in order.
    """
    sets: Sequence[Set]
    _blocks: tuple[Block, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.sets = tuple(self.sets)
        common_dtype(self.sets)
        self._blocks = block_structure(self.sets)

    @property
    def factors(self) -> tuple[Set, ...]:
        return self.sets

    def __len__(self) -> int:
        return len(self.sets)

    def __getitem__(self, i: int) -> Set:
        return self.sets[i]

    def dimension_indices(self, block_index: int) -> range:
        """Global coordinates owned by factor ``block_index``."""
        b = self._blocks[block_index]
        return range(b.start, b.stop)

    def flatten(self) -> CartesianProductArray:
        return self.array()


def substitute_blocks(
    target: CartesianProductArray,
    source: CartesianProductArray,
    pairs: Sequence[tuple[int, int]]
) -> CartesianProductArray:
    """Replace factors of ``target`` by factors of ``source``.

    Args:
        target: Product whose factors are replaced.
        source: Product providing the replacements.
        pairs: ``(target_block, source_block)`` index pairs.

    Returns:
        A new product; ``target`` is unchanged.

    Raises:
        DimensionMismatch: If a pair's factors have different dimensions.
    """
    sets = list(target.sets)
    for ti, si in pairs:
        old, new = target.sets[ti], source.sets[si]
        if old.dim != new.dim:
            raise DimensionMismatch(
                f"cannot substitute block {ti} of dimension {old.dim} "
                f"by block {si} of dimension {new.dim}"
            )
        sets[ti] = new
    return CartesianProductArray(sets)
