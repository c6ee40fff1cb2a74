"""Lazy operators: Cartesian products, linear and affine maps, Minkowski sums."""

from .blocks import Block, block_structure, split_vector, block_of, lift_constraint
from .cartesian_product import CartesianProduct, CartesianProductArray, substitute_blocks
from .linear_map import LinearMap, AffineMap
from .minkowski_sum import MinkowskiSum

__all__ = [
    "Block",
    "block_structure",
    "split_vector",
    "block_of",
    "lift_constraint",
    "CartesianProduct",
    "CartesianProductArray",
    "substitute_blocks",
    "LinearMap",
    "AffineMap",
    "MinkowskiSum",
]
