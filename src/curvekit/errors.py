"""
Error taxonomy shared by the interpolation engine, the tridiagonal solver,
the yield curve and the day-count helpers.

Hierarchy:
- CurveKitError
    - InterpolationError (ValueError)
        - InsufficientPointsError
        - PointOrderError
        - OutOfLowerBoundError
        - OutOfUpperBoundError
    - ComputeError
        - InvalidInputError (ValueError)
        - CastNumberError
        - ZeroDenominatorError (ZeroDivisionError)
    - MatrixShapeError (ValueError)

Every failure is raised to the immediate caller. Nothing here is logged,
retried or defaulted.
"""

from typing import Any


class CurveKitError(Exception):
    """Base class for all library errors."""


class InterpolationError(CurveKitError, ValueError):
    """Fitting or evaluating an interpolation method failed."""


class InsufficientPointsError(InterpolationError):
    """Fewer knots than the method requires."""

    def __init__(self, n_points: int):
        self.n_points = n_points
        super().__init__(
            f"length of inputs: {n_points} is not enough points for construction"
        )


class PointOrderError(InterpolationError):
    """Knot abscissas are not in ascending order."""

    def __init__(self, message: str = "points must be sorted"):
        super().__init__(message)


class OutOfLowerBoundError(InterpolationError):
    """Query lies below the first knot."""

    def __init__(self, x: Any):
        self.x = x
        super().__init__(f"out of lower bound: {x}")


class OutOfUpperBoundError(InterpolationError):
    """Query lies at or beyond the last knot."""

    def __init__(self, x: Any):
        self.x = x
        super().__init__(f"out of upper bound: {x}")


class ComputeError(CurveKitError):
    """Failure outside the interpolation layer."""


class InvalidInputError(ComputeError, ValueError):
    """Inputs are inconsistent (array lengths, date ordering, ...)."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid inputs are passed by: {detail}")


class CastNumberError(ComputeError):
    """A value could not be converted to the requested numeric type."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"{value} cannot cast to a primitive type")


class ZeroDenominatorError(ComputeError, ZeroDivisionError):
    """A convention produced a zero denominator."""

    def __init__(self, message: str = "Zero division occurred"):
        super().__init__(message)


class MatrixShapeError(CurveKitError, ValueError):
    """Diagonal or vector lengths are inconsistent with the matrix size."""


__all__ = [
    "CurveKitError",
    "InterpolationError",
    "InsufficientPointsError",
    "PointOrderError",
    "OutOfLowerBoundError",
    "OutOfUpperBoundError",
    "ComputeError",
    "InvalidInputError",
    "CastNumberError",
    "ZeroDenominatorError",
    "MatrixShapeError",
]
