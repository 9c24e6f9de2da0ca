"""
Error Taxonomy for Ellipsoid Coordinate Transforms.

Every error raised by this project derives from `GeodesyError`, so callers
can catch the whole family at once. The concrete classes also derive from
the matching builtin (`ValueError`, `ArithmeticError`, `AssertionError`) so
generic handlers keep working.

Categories
----------
1. Construction errors (invalid shape parameters)
2. Numerical errors (non-convergence, non-finite results)
3. Validation errors (consistency checks in strict mode)
"""

from typing import Optional, Sequence


class GeodesyError(Exception):
    """Base class for all errors raised by the geodesy packages."""


class InvalidRadius(GeodesyError, ValueError):
    """An ellipsoid was requested with a negative or non-finite radius.

    Attributes
    ----------
    radii : tuple of float
        The radii that were rejected.
    """

    def __init__(self, radii: Sequence[float]):
        self.radii = tuple(float(r) for r in radii)
        super().__init__(
            f"Ellipsoid radii must be finite and >= 0, got {self.radii}"
        )


class ConvergenceFailure(GeodesyError, ArithmeticError):
    """The geodetic surface iteration did not reach its tolerance.

    Attributes
    ----------
    point : tuple of float
        The Cartesian point being projected.
    iterations : int
        Number of Newton-Raphson steps taken.
    residual : float
        Implicit-surface residual after the last step.
    """

    def __init__(self, point: Sequence[float], iterations: int, residual: float):
        self.point = tuple(float(c) for c in point)
        self.iterations = iterations
        self.residual = float(residual)
        super().__init__(
            f"Geodetic surface projection of {self.point} did not converge "
            f"after {iterations} iterations (residual={self.residual:.3e})"
        )


class NumericDegeneracy(GeodesyError, ArithmeticError):
    """A transform produced a non-finite value.

    Typical causes are a point at the ellipsoid center or an ellipsoid
    with a zero radius.
    """

    def __init__(self, operation: str, point: Optional[Sequence[float]] = None):
        self.operation = operation
        self.point = tuple(float(c) for c in point) if point is not None else None
        super().__init__(
            f"{operation} produced a non-finite result for point {self.point}"
        )


class ConsistencyViolation(GeodesyError, AssertionError):
    """A transform consistency check failed in strict mode."""
