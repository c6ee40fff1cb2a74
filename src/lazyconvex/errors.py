"""Error kinds raised by set constructors and queries."""


class LazySetError(Exception):
    """Base class for all errors raised by lazyconvex."""


class DimensionMismatch(LazySetError, ValueError):
    """Operand dimensions disagree (matrix shape, vector length, blocks)."""


class UnboundedDirection(LazySetError, ValueError):
    """A support vector was requested in a direction of unbounded ascent.

    Use the support function instead, which returns +inf in this case.
    """


class UnsupportedOperation(LazySetError, NotImplementedError):
    """The requested operation has no closed-form algorithm for this set."""


class InvalidConstruction(LazySetError, ValueError):
    """Degenerate input was passed to a set constructor."""


class PrecisionMismatch(LazySetError, TypeError):
    """Sets with different numeric types were combined."""


def check_dim(expected: int, got: int, what: str = "vector") -> None:
    """Raise DimensionMismatch unless ``got == expected``."""
    if got != expected:
        raise DimensionMismatch(
            f"expected a {expected}-dimensional {what}, got {got} dimensions"
        )
