"""
Curves package - interpolation engine and spot yield curves.

Provides:
- Interpolator and its four methods (linear, natural cubic, Hermite, Catmull-Rom)
- find_interval: boundary locator shared by every method
- YieldCurve: discount factors between dates from interpolated spot yields
"""

from .interpolation import (
    Point,
    SlopedPoint,
    find_interval,
    Interpolator,
    LinearInterpolator,
    NaturalCubicInterpolator,
    HermiteInterpolator,
    CatmullRomInterpolator,
    create_interpolator,
)
from .yield_curve import YieldCurve, create_flat_curve

__all__ = [
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
]
