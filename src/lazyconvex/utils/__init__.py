"""Array helpers shared by the set implementations."""

from .arrays import (
    as_vector,
    as_matrix,
    sign_cadlag,
    unit_vector,
    selection_matrix,
    common_dtype,
)

__all__ = [
    "as_vector",
    "as_matrix",
    "sign_cadlag",
    "unit_vector",
    "selection_matrix",
    "common_dtype",
]
