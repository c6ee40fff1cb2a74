"""Lazy convex sets.

Sets are described by their support functions; Cartesian products,
linear and affine maps and Minkowski sums are kept as lazy composites
and only materialized to constraints or vertices on request.
"""

from .errors import (
    LazySetError,
    DimensionMismatch,
    UnboundedDirection,
    UnsupportedOperation,
    InvalidConstruction,
    PrecisionMismatch,
)
from .comparison import Tolerance, get_tolerance, set_tolerance, tolerance
from .options import VertexOptions, RandomOptions
from .geometry import (
    Set,
    HalfSpace,
    Singleton,
    EmptySet,
    Universe,
    Interval,
    HyperRectangle,
    Ball2,
    Ballp,
    Line,
    HPolytope,
    HParallelotope,
    VPolytope,
    Zonotope,
    DensePolynomialZonotope,
    SparsePolynomialZonotope,
    sample_set,
    SamplingStrategy,
)
from .lazy import (
    Block,
    CartesianProduct,
    CartesianProductArray,
    substitute_blocks,
    LinearMap,
    AffineMap,
    MinkowskiSum,
)
from .random import rand

__version__ = "0.1.0"

__all__ = [
    "LazySetError",
    "DimensionMismatch",
    "UnboundedDirection",
    "UnsupportedOperation",
    "InvalidConstruction",
    "PrecisionMismatch",
    "Tolerance",
    "get_tolerance",
    "set_tolerance",
    "tolerance",
    "VertexOptions",
    "RandomOptions",
    "Set",
    "HalfSpace",
    "Singleton",
    "EmptySet",
    "Universe",
    "Interval",
    "HyperRectangle",
    "Ball2",
    "Ballp",
    "Line",
    "HPolytope",
    "HParallelotope",
    "VPolytope",
    "Zonotope",
    "DensePolynomialZonotope",
    "SparsePolynomialZonotope",
    "sample_set",
    "SamplingStrategy",
    "Block",
    "CartesianProduct",
    "CartesianProductArray",
    "substitute_blocks",
    "LinearMap",
    "AffineMap",
    "MinkowskiSum",
    "rand",
]
