"""Tolerance-aware comparisons.

All geometric equality, emptiness and flatness tests go through this
module instead of comparing floats exactly. Tolerances are kept per
numeric type (see ``Tolerance``).
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Iterator

import numpy as np


@dataclass(frozen=True)
class Tolerance:
    """Tolerances for one numeric type.

    Attributes:
        rtol: Relative tolerance used by ``isapprox``.
        ztol: Absolute tolerance for comparisons against zero (ABSZTOL).
        atol: Absolute tolerance added to ``isapprox``.
    """
    rtol: float
    ztol: float
    atol: float

    @classmethod
    def default(cls, dtype=np.float64) -> Tolerance:
        eps = float(np.finfo(dtype).eps)
        return cls(rtol=10 * np.sqrt(eps), ztol=10 * np.sqrt(eps), atol=np.sqrt(eps))


_TOLERANCES: dict[np.dtype, Tolerance] = {}


def _key(dtype) -> np.dtype:
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        dtype = np.dtype(np.float64)
    return dtype


def get_tolerance(dtype=np.float64) -> Tolerance:
    """Return the active tolerance for ``dtype``."""
    key = _key(dtype)
    if key not in _TOLERANCES:
        _TOLERANCES[key] = Tolerance.default(key)
    return _TOLERANCES[key]


def set_tolerance(dtype=np.float64, **fields) -> Tolerance:
    """Update the tolerance for ``dtype`` and return the new value."""
    new = replace(get_tolerance(dtype), **fields)
    _TOLERANCES[_key(dtype)] = new
    return new


@contextmanager
def tolerance(dtype=np.float64, **fields) -> Iterator[Tolerance]:
    """Temporarily override tolerance fields for ``dtype``."""
    old = get_tolerance(dtype)
    try:
        yield set_tolerance(dtype, **fields)
    finally:
        _TOLERANCES[_key(dtype)] = old


def _dtype_of(*values) -> np.dtype:
    return np.result_type(*[np.asarray(v) for v in values], np.float16)


def isapproxzero(x, ztol: float | None = None) -> bool:
    """Check whether every entry of ``x`` is zero up to ``ztol``."""
    x = np.asarray(x)
    if ztol is None:
        ztol = get_tolerance(_dtype_of(x)).ztol
    return bool(np.all(np.abs(x) <= ztol))


def isapprox(x, y, rtol: float | None = None, ztol: float | None = None,
             atol: float | None = None) -> bool:
    """Check whether ``x`` and ``y`` agree entrywise.

    Entries near zero are compared with ``ztol``; otherwise the relative
    test ``|x - y| <= atol + rtol * max(|x|, |y|)`` is used.
    """
    x = np.asarray(x)
    y = np.asarray(y)
    if x.shape != y.shape:
        return False
    tol = get_tolerance(_dtype_of(x, y))
    rtol = tol.rtol if rtol is None else rtol
    ztol = tol.ztol if ztol is None else ztol
    atol = tol.atol if atol is None else atol

    diff = np.abs(x - y)
    scale = np.maximum(np.abs(x), np.abs(y))
    close = (diff <= ztol) | (diff <= atol + rtol * scale)
    return bool(np.all(close))


def is_le(x, y, ztol: float | None = None) -> bool:
    """Check ``x <= y`` up to the absolute zero tolerance."""
    x = np.asarray(x)
    y = np.asarray(y)
    if ztol is None:
        ztol = get_tolerance(_dtype_of(x, y)).ztol
    return bool(np.all(x <= y + ztol))


def ismultiple(u, v) -> tuple[bool, float]:
    """Check whether ``u`` is a scalar multiple of ``v``.

    Returns:
        Pair ``(answer, factor)`` with ``u ≈ factor * v`` when ``answer``
        is True; the factor is ``nan`` otherwise.
    """
    u = np.asarray(u, dtype=float)
    v = np.asarray(v, dtype=float)
    if u.shape != v.shape:
        return False, float("nan")
    if isapproxzero(v):
        if isapproxzero(u):
            return True, 0.0
        return False, float("nan")

    i = int(np.argmax(np.abs(v)))
    factor = float(u[i] / v[i])
    if isapprox(u, factor * v):
        return True, factor
    return False, float("nan")
