"""Array coercion and small vector helpers."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from ..errors import InvalidConstruction, PrecisionMismatch


def _float_dtype(x: np.ndarray, dtype=None) -> np.dtype:
    if dtype is not None:
        return np.dtype(dtype)
    if np.issubdtype(x.dtype, np.floating):
        return x.dtype
    return np.dtype(np.float64)


def as_vector(x, dtype=None) -> np.ndarray:
    """Coerce ``x`` to a 1-D floating array.

    Integer input becomes float64; floating input keeps its precision.
    """
    x = np.asarray(x)
    x = np.array(x, dtype=_float_dtype(x, dtype))
    if x.ndim == 0:
        x = x.reshape(1)
    if x.ndim != 1:
        raise InvalidConstruction(f"expected a vector, got an array of shape {x.shape}")
    return x


def as_matrix(M, dtype=None) -> np.ndarray:
    """Coerce ``M`` to a 2-D floating array."""
    M = np.asarray(M)
    M = np.array(M, dtype=_float_dtype(M, dtype))
    if M.ndim != 2:
        raise InvalidConstruction(f"expected a matrix, got an array of shape {M.shape}")
    return M


def sign_cadlag(x) -> np.ndarray:
    """Sign function that maps zero to +1."""
    x = np.asarray(x)
    return np.where(x >= 0, 1.0, -1.0).astype(_float_dtype(x))


def unit_vector(i: int, n: int, dtype=np.float64) -> np.ndarray:
    """Return the ``i``-th canonical basis vector of length ``n``."""
    e = np.zeros(n, dtype=dtype)
    e[i] = 1
    return e


def selection_matrix(indices: Iterable[int], n: int, dtype=np.float64) -> np.ndarray:
    """Matrix whose rows select ``indices`` out of ``n`` coordinates."""
    indices = list(indices)
    M = np.zeros((len(indices), n), dtype=dtype)
    M[np.arange(len(indices)), indices] = 1
    return M


def common_dtype(sets) -> np.dtype:
    """Return the shared dtype of ``sets`` or raise PrecisionMismatch."""
    dtypes = {np.dtype(s.dtype) for s in sets}
    if len(dtypes) > 1:
        names = sorted(d.name for d in dtypes)
        raise PrecisionMismatch(f"cannot combine sets with numeric types {names}")
    return dtypes.pop() if dtypes else np.dtype(np.float64)
