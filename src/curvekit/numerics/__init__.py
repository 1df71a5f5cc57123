"""
Numerics package - value capability and banded linear algebra.

Provides:
- Value: numeric capability protocol shared by every fitter
- TridiagonalMatrix: Thomas-algorithm solver used by the natural cubic spline
"""

from .value import Value, from_int, zero, one, to_array, as_real
from .tridiagonal import TridiagonalMatrix

__all__ = [
    "Value",
    "from_int",
    "zero",
    "one",
    "to_array",
    "as_real",
    "TridiagonalMatrix",
]
