"""Random set generation with reproducible generator handles."""

from __future__ import annotations

from dataclasses import replace

from .geometry.base import Set
from .geometry.interval import Interval
from .options import RandomOptions, merge


def rand(set_type: type[Set], options: RandomOptions | None = None, **overrides) -> Set:
    """Create a random instance of ``set_type``.

    Args:
        set_type: A set class providing a ``rand`` classmethod.
        options: Base options; defaults to ``RandomOptions()``.
        **overrides: ``numeric_type``, ``dim``, ``rng`` or ``seed``;
            anything else is passed to ``set_type.rand`` unchanged.

    Returns:
        The random set.

    Example:
        >>> Z = rand(Zonotope, dim=3, seed=0)
    """
    if not hasattr(set_type, "rand"):
        raise TypeError(f"{set_type.__name__} has no random generator")
    known = {k: overrides.pop(k) for k in ("numeric_type", "dim", "rng", "seed") if k in overrides}
    options = merge(options or RandomOptions(), **known)
    if issubclass(set_type, Interval) and known.get("dim") is None:
        # intervals live in one dimension unless asked otherwise
        options = replace(options, dim=1)
    return set_type.rand(numeric_type=options.numeric_type, dim=options.dim,
                         rng=options.rng, seed=options.seed, **overrides)
