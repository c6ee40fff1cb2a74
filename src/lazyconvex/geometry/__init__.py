"""Geometry module: the set contract, leaf set representations and sampling."""

from .base import Set
from .halfspace import HalfSpace, an_element_hyperplane
from .singleton import Singleton
from .emptyset import EmptySet
from .universe import Universe
from .interval import Interval
from .hyperrectangle import HyperRectangle
from .ball import Ball2
from .ballp import Ballp
from .line import Line
from .polytope import (
    HPolytope,
    HParallelotope,
    VPolytope,
    hull_constraints,
    lp_feasible,
    remove_redundant_vertices,
)
from .zonotope import Zonotope
from .polynomial_zonotope import DensePolynomialZonotope, SparsePolynomialZonotope
from .sampling import sample_set, SamplingStrategy, reseed

__all__ = [
    "Set",
    "HalfSpace",
    "an_element_hyperplane",
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
    "hull_constraints",
    "lp_feasible",
    "remove_redundant_vertices",
    "Zonotope",
    "DensePolynomialZonotope",
    "SparsePolynomialZonotope",
    "sample_set",
    "SamplingStrategy",
    "reseed",
]
