"""Block bookkeeping for n-ary Cartesian products.

A block structure partitions the ambient coordinates ``[0, n)`` into
contiguous ranges, one per factor, in factor order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np

from ..errors import DimensionMismatch

if TYPE_CHECKING:
    from ..geometry.base import Set
    from ..geometry.halfspace import HalfSpace


@dataclass(frozen=True)
class Block:
    """Coordinates ``start:stop`` (exclusive) owned by factor ``index``."""
    index: int
    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start

    @property
    def slice(self) -> slice:
        return slice(self.start, self.stop)

    def __contains__(self, i: int) -> bool:
        return self.start <= i < self.stop


def block_structure(sets: Sequence[Set]) -> tuple[Block, ...]:
    """Contiguous blocks for the factors ``sets``, in order."""
    blocks = []
    start = 0
    for index, s in enumerate(sets):
        blocks.append(Block(index, start, start + s.dim))
        start += s.dim
    return tuple(blocks)


def split_vector(x: np.ndarray, blocks: Sequence[Block]) -> list[np.ndarray]:
    """Cut a global vector into one local vector per block."""
    total = blocks[-1].stop if blocks else 0
    if len(x) != total:
        raise DimensionMismatch(
            f"expected a vector of length {total} for the block structure, got {len(x)}"
        )
    return [x[b.slice] for b in blocks]


def block_of(i: int, blocks: Sequence[Block]) -> Block:
    """The block containing global coordinate ``i``."""
    for b in blocks:
        if i in b:
            return b
    raise IndexError(f"coordinate {i} is outside the block structure")


def group_indices(indices: Sequence[int], blocks: Sequence[Block]) -> list[tuple[Block, list[int]]]:
    """Group sorted global indices by block, translating them to local ones."""
    groups: list[tuple[Block, list[int]]] = []
    for i in indices:
        b = block_of(i, blocks)
        if groups and groups[-1][0] == b:
            groups[-1][1].append(i - b.start)
        else:
            groups.append((b, [i - b.start]))
    return groups


def lift_constraint(h: HalfSpace, block: Block, n: int) -> HalfSpace:
    """Embed a local half-space into R^n, padding the normal with zeros."""
    from ..geometry.halfspace import HalfSpace

    a = np.zeros(n, dtype=h.a.dtype)
    a[block.slice] = h.a
    return HalfSpace(a, h.b)
