"""
CurveKit: Interpolation and Term-Structure Engine

A small library for:
- Fitting curves through ordered sample points (linear, natural cubic,
  Hermite and Catmull-Rom splines)
- Solving tridiagonal systems (Thomas algorithm)
- Turning interpolated spot yields into discount factors between dates
- Valuing fixed-coupon bonds against a spot yield curve

Scope: single-curve discounting from known spot yields; no bootstrapping.
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    CurveKitError,
    InterpolationError,
    InsufficientPointsError,
    PointOrderError,
    OutOfLowerBoundError,
    OutOfUpperBoundError,
    ComputeError,
    InvalidInputError,
    CastNumberError,
    ZeroDenominatorError,
    MatrixShapeError,
)

# Conventions and dates
from .conventions import (
    DayCount,
    DayCounter,
    ActualDayCounter,
    BusinessDayConvention,
    Conventions,
    year_fraction,
    adjust_business_day,
)
from .dates import DateUtils, weekend_roll

# Numerics
from .numerics import Value, TridiagonalMatrix

# Curves
from .curves import (
    Point,
    SlopedPoint,
    find_interval,
    Interpolator,
    LinearInterpolator,
    NaturalCubicInterpolator,
    HermiteInterpolator,
    CatmullRomInterpolator,
    create_interpolator,
    YieldCurve,
    create_flat_curve,
)

# Pricers
from .pricers import Bond, BondCashflow, Frequency

__all__ = [
    # Version
    "__version__",
    # Errors
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
    # Conventions
    "DayCount",
    "DayCounter",
    "ActualDayCounter",
    "BusinessDayConvention",
    "Conventions",
    "year_fraction",
    "adjust_business_day",
    # Dates
    "DateUtils",
    "weekend_roll",
    # Numerics
    "Value",
    "TridiagonalMatrix",
    # Curves
    "Point",
    "SlopedPoint",
    "find_interval",
    "Interpolator",
    "LinearInterpolator",
    "NaturalCubicInterpolator",
    "HermiteInterpolator",
    "CatmullRomInterpolator",
    "create_interpolator",
    "YieldCurve",
    "create_flat_curve",
    # Pricers
    "Bond",
    "BondCashflow",
    "Frequency",
]
