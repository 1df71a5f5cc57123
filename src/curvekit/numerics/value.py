"""
Numeric value capability.

The interpolation engine and the tridiagonal solver only rely on ordered
field arithmetic and on building small integers in the caller's own numeric
type. Plain floats, numpy floats of any width, ``fractions.Fraction`` and
``decimal.Decimal`` all qualify.
"""

from numbers import Integral, Real
from typing import Any, Iterable, Protocol, TypeVar, runtime_checkable

import numpy as np

from ..errors import CastNumberError


@runtime_checkable
class Value(Protocol):
    """Ordered field element usable as a knot coordinate."""

    def __add__(self, other: Any) -> Any: ...
    def __sub__(self, other: Any) -> Any: ...
    def __mul__(self, other: Any) -> Any: ...
    def __truediv__(self, other: Any) -> Any: ...
    def __neg__(self) -> Any: ...
    def __lt__(self, other: Any) -> bool: ...
    def __le__(self, other: Any) -> bool: ...


V = TypeVar("V")


def from_int(like: V, n: int) -> V:
    """Build the integer ``n`` in the numeric type of ``like``."""
    kind = type(like)
    if isinstance(like, Integral):
        # Integer knots still need true division downstream
        return float(n)
    try:
        return kind(n)
    except (TypeError, ValueError) as exc:
        raise CastNumberError(n) from exc


def zero(like: V) -> V:
    return from_int(like, 0)


def one(like: V) -> V:
    return from_int(like, 1)


def is_float_like(value: Any) -> bool:
    """True for values that numpy can hold in a float array without loss."""
    return isinstance(value, (float, np.floating, Integral)) and not isinstance(value, bool)


def to_array(values: Iterable[Any]) -> np.ndarray:
    """
    Copy values into a read-only numpy array.

    numpy float scalars keep their common width (float32 stays float32).
    Other float-like values land in ``float64``; any other value type
    (Fraction, Decimal, ...) is kept in an object array so its arithmetic is
    preserved.
    """
    values = list(values)
    if values and all(isinstance(v, np.floating) for v in values):
        arr = np.array(values, dtype=np.result_type(*[v.dtype for v in values]))
    elif all(is_float_like(v) for v in values):
        arr = np.array(values, dtype=np.float64)
    else:
        arr = np.empty(len(values), dtype=object)
        arr[:] = values
    arr.setflags(write=False)
    return arr


def as_real(value: Any) -> float:
    """Convert a value to a Python float (used at the discounting layer)."""
    if isinstance(value, Real) or hasattr(value, "__float__"):
        try:
            return float(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise CastNumberError(value) from exc
    raise CastNumberError(value)


__all__ = [
    "Value",
    "from_int",
    "zero",
    "one",
    "is_float_like",
    "to_array",
    "as_real",
]
