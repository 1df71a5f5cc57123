"""
Interpolation methods for term structures.

Provides:
- LinearInterpolator: Piecewise-linear, flat clamp at and beyond the last knot
- NaturalCubicInterpolator: Natural cubic spline (zero curvature at both ends)
- HermiteInterpolator: Cubic Hermite spline through (x, y, dy/dx) knots
- CatmullRomInterpolator: Cubic spline with tangents taken from neighbours

All interpolators are fitted once and are immutable afterwards: ``fit``
returns a new instance and never touches the one it is called on. Knots must
be sorted ascending in x; equal adjacent abscissas are accepted and form a
zero-width interval that evaluation never selects.

Knot coordinates may be any ordered field value (float, numpy floats,
Fraction, Decimal); see ``curvekit.numerics.value``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from ..errors import (
    InsufficientPointsError,
    InvalidInputError,
    OutOfLowerBoundError,
    OutOfUpperBoundError,
    PointOrderError,
)
from ..numerics.tridiagonal import TridiagonalMatrix
from ..numerics.value import from_int, one, to_array, zero

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    """A knot (x, y)."""
    x: Any
    y: Any


@dataclass(frozen=True)
class SlopedPoint:
    """A knot carrying its derivative dy/dx."""
    x: Any
    y: Any
    dydx: Any


def find_interval(xs: np.ndarray, x: Any) -> int:
    """
    Locate the interval containing ``x``.

    Returns the index ``i`` with ``xs[i] <= x < xs[i + 1]``. A query equal to
    a knot resolves to the interval starting at that knot. A NaN query
    compares false against every knot and sorts past the end, so it raises
    ``OutOfUpperBoundError``.

    Raises:
        InsufficientPointsError: ``xs`` is empty
        OutOfLowerBoundError: ``x < xs[0]``
        OutOfUpperBoundError: ``x >= xs[-1]`` (no right neighbour), or NaN
    """
    n = len(xs)
    if n == 0:
        raise InsufficientPointsError(n)
    if x < xs[0]:
        raise OutOfLowerBoundError(x)
    idx = int(np.searchsorted(xs, x, side="right")) - 1
    if idx >= n - 1:
        raise OutOfUpperBoundError(x)
    return idx


def _matrix(rows: Sequence[Sequence[Any]]) -> np.ndarray:
    """4x4 coefficient matrix in the knots' numeric type."""
    return to_array([v for row in rows for v in row]).reshape(4, 4)


def _monomials(delta: Any) -> np.ndarray:
    """Normalised basis [delta^3, delta^2, delta, 1]."""
    delta2 = delta * delta
    return to_array([delta2 * delta, delta2, delta, one(delta)])


class Interpolator(ABC):
    """
    Abstract base class for fitted interpolation methods.

    A default-constructed instance holds no knots and fails on evaluation.
    Use ``fit`` (on the class or on any instance) to obtain a fitted one.
    """

    #: Name used by ``create_interpolator``
    method: str = ""
    #: Minimum knot count accepted by ``fit``
    min_points: int = 3
    #: Width of an input knot tuple
    point_arity: int = 2

    def __init__(self, points: Optional[Sequence] = None):
        self._points: Tuple = ()
        self._xs: np.ndarray = to_array([])
        if points is not None:
            self._points = self._validate(points)
            self._xs = to_array(p.x for p in self._points)
            self._prepare()
            logger.debug("Fitted %s over %d knots", self.method, len(self._points))

    @classmethod
    def fit(cls, points: Sequence) -> "Interpolator":
        """
        Fit the method to sorted knots.

        Args:
            points: Sequence of (x, y) pairs, or (x, y, dydx) triples for Hermite

        Returns:
            New fitted interpolator

        Raises:
            InsufficientPointsError: fewer than ``min_points`` knots
            PointOrderError: abscissas decrease somewhere
        """
        return cls(points)

    @classmethod
    def from_arrays(cls, times: Sequence, values: Sequence) -> "Interpolator":
        """Fit from parallel arrays of abscissas and ordinates."""
        if len(times) != len(values):
            raise InvalidInputError("times and values are different lengths")
        return cls.fit(list(zip(times, values)))

    def _coerce(self, raw: Any) -> Point:
        if isinstance(raw, Point):
            return raw
        x, y = raw
        return Point(x, y)

    def _validate(self, points: Sequence) -> Tuple:
        knots = tuple(self._coerce(p) for p in points)
        if len(knots) < self.min_points:
            raise InsufficientPointsError(len(knots))
        for prev, cur in zip(knots, knots[1:]):
            if cur.x < prev.x:
                raise PointOrderError(
                    f"points must be sorted: x={cur.x} follows x={prev.x}"
                )
        return knots

    def _prepare(self) -> None:
        """Hook for per-method precomputation after validation."""

    @abstractmethod
    def interpolate(self, x: Any) -> Any:
        """
        Evaluate the fitted function at ``x``.

        Raises:
            InsufficientPointsError: instance was never fitted
            OutOfLowerBoundError / OutOfUpperBoundError: query outside the domain
        """

    def __call__(self, x: Any) -> Any:
        """Convenience method to call interpolate."""
        return self.interpolate(x)

    @property
    def points(self) -> Tuple:
        """Fitted knots, ascending in x."""
        return self._points

    @property
    def knot_times(self) -> np.ndarray:
        return self._xs

    @property
    def is_fitted(self) -> bool:
        return len(self._points) > 0

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        if not self._points:
            return f"{type(self).__name__}(unfitted)"
        return (f"{type(self).__name__}(knots={len(self._points)}, "
                f"domain=[{self._points[0].x}, {self._points[-1].x}])")


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Returns the last knot's ordinate for any query at or beyond the last
    knot. Queries below the first knot fail. NaN is not clamped and fails
    with ``OutOfUpperBoundError`` like the spline methods.
    """

    method = "linear"
    min_points = 2

    def interpolate(self, x: Any) -> Any:
        if not self._points:
            raise InsufficientPointsError(0)

        last = self._points[-1]
        if x >= last.x:
            return last.y

        idx = find_interval(self._xs, x)
        p0, p1 = self._points[idx], self._points[idx + 1]
        return p0.y + (p1.y - p0.y) / (p1.x - p0.x) * (x - p0.x)


class NaturalCubicInterpolator(Interpolator):
    """
    Natural cubic spline interpolation.

    Fitting solves a tridiagonal system for the second derivative at every
    knot, with the first and last rows pinned to identity so the curvature
    vanishes at both ends:

        h_{i-1}/6 M_{i-1} + (h_{i-1}+h_i)/3 M_i + h_i/6 M_{i+1}
            = (y_{i+1}-y_i)/h_i - (y_i-y_{i-1})/h_{i-1}
    """

    method = "natural_cubic"

    def _prepare(self) -> None:
        xs = self._xs
        ys = to_array(p.y for p in self._points)
        n = len(xs)
        h = [xs[i + 1] - xs[i] for i in range(n - 1)]

        like_x, like_y = xs[0], ys[0]
        three, six = from_int(like_x, 3), from_int(like_x, 6)

        lower, diagonal, upper = [], [one(like_x)], [zero(like_x)]
        rhs = [zero(like_y)]
        for i in range(1, n - 1):
            lower.append(h[i - 1] / six)
            diagonal.append((h[i - 1] + h[i]) / three)
            upper.append(h[i] / six)
            rhs.append((ys[i + 1] - ys[i]) / h[i] - (ys[i] - ys[i - 1]) / h[i - 1])
        lower.append(zero(like_x))
        diagonal.append(one(like_x))
        rhs.append(zero(like_y))

        solution = TridiagonalMatrix(lower, diagonal, upper).solve(rhs)
        solution.setflags(write=False)
        self._ys = ys
        self._second_derivatives = solution

    @property
    def second_derivatives(self) -> np.ndarray:
        """Solved second derivative at each knot (zero at both ends)."""
        if not self._points:
            return to_array([])
        return self._second_derivatives

    def interpolate(self, x: Any) -> Any:
        idx = find_interval(self._xs, x)
        if x == self._xs[idx]:
            return self._points[idx].y

        x0, x1 = self._xs[idx], self._xs[idx + 1]
        y0, y1 = self._ys[idx], self._ys[idx + 1]
        m0, m1 = self._second_derivatives[idx], self._second_derivatives[idx + 1]
        h = x1 - x0
        six = from_int(h, 6)
        a = x1 - x
        b = x - x0
        return (a * a * a / six / h * m0
                + b * b * b / six / h * m1
                + a * (y0 / h - h / six * m0)
                + b * (y1 / h - h / six * m1))


class HermiteInterpolator(Interpolator):
    """
    Cubic Hermite spline.

    Knots carry their own slope, so fitting needs no linear solve. Each
    interval is evaluated as

        [d^3, d^2, d, 1] . M . [y_i, y_{i+1}, h dydx_i, h dydx_{i+1}]

    with ``d = (x - x_i) / h`` and M the cubic Hermite basis matrix.
    """

    method = "hermite"
    point_arity = 3

    @classmethod
    def from_arrays(cls, times: Sequence, values: Sequence,
                    slopes: Optional[Sequence] = None) -> "HermiteInterpolator":
        if slopes is None or not (len(times) == len(values) == len(slopes)):
            raise InvalidInputError("times, values and slopes are different lengths")
        return cls.fit(list(zip(times, values, slopes)))

    def _coerce(self, raw: Any) -> SlopedPoint:
        if isinstance(raw, SlopedPoint):
            return raw
        x, y, dydx = raw
        return SlopedPoint(x, y, dydx)

    def _prepare(self) -> None:
        like = self._points[0].y
        self._basis = _matrix([
            [from_int(like, v) for v in row]
            for row in ((2, -2, 1, 1), (-3, 3, -2, -1), (0, 0, 1, 0), (1, 0, 0, 0))
        ])

    def interpolate(self, x: Any) -> Any:
        idx = find_interval(self._xs, x)
        p0, p1 = self._points[idx], self._points[idx + 1]
        h = p1.x - p0.x
        delta = (x - p0.x) / h
        state = to_array([p0.y, p1.y, p0.dydx * h, p1.dydx * h])
        return _monomials(delta) @ self._basis @ state


class CatmullRomInterpolator(Interpolator):
    """
    Catmull-Rom spline on non-uniform knots.

    Tangents are derived from neighbouring knots at evaluation time:

    - interior intervals blend both neighbours with
      ``alpha = h / (h + h_prev)`` and ``beta = h / (h + h_next)``
    - the first interval has no left neighbour and uses the chord slope on
      its left end
    - the last interval mirrors the first on its right end
    """

    method = "catmull_rom"

    def interpolate(self, x: Any) -> Any:
        idx = find_interval(self._xs, x)
        pts = self._points
        p0, p1 = pts[idx], pts[idx + 1]
        h = p1.x - p0.x
        delta = (x - p0.x) / h

        def c(v: int) -> Any:
            return from_int(p0.y, v)

        if idx == 0:
            p2 = pts[idx + 2]
            beta = h / (h + (p2.x - p1.x))
            coeffs = _matrix([
                [c(0), c(1) - beta, c(-1), beta],
                [c(0), c(-1) + beta, c(1), -beta],
                [c(0), c(-1), c(1), c(0)],
                [c(0), c(1), c(0), c(0)],
            ])
            ordinates = to_array([c(0), p0.y, p1.y, p2.y])
        elif idx + 2 == len(pts):
            pm = pts[idx - 1]
            alpha = h / (h + (p0.x - pm.x))
            coeffs = _matrix([
                [-alpha, c(1), alpha - c(1), c(0)],
                [c(2) * alpha, c(-2), c(2) - c(2) * alpha, c(0)],
                [-alpha, c(0), alpha, c(0)],
                [c(0), c(1), c(0), c(0)],
            ])
            ordinates = to_array([pm.y, p0.y, p1.y, c(0)])
        else:
            pm, p2 = pts[idx - 1], pts[idx + 2]
            alpha = h / (h + (p0.x - pm.x))
            beta = h / (h + (p2.x - p1.x))
            coeffs = _matrix([
                [-alpha, c(2) - beta, c(-2) + alpha, beta],
                [c(2) * alpha, beta - c(3), c(3) - c(2) * alpha, -beta],
                [-alpha, c(0), alpha, c(0)],
                [c(0), c(1), c(0), c(0)],
            ])
            ordinates = to_array([pm.y, p0.y, p1.y, p2.y])

        return _monomials(delta) @ (coeffs @ ordinates)


_METHODS = {
    "linear": LinearInterpolator,
    "lin": LinearInterpolator,
    "natural_cubic": NaturalCubicInterpolator,
    "cubic_spline": NaturalCubicInterpolator,
    "cubic": NaturalCubicInterpolator,
    "spline": NaturalCubicInterpolator,
    "hermite": HermiteInterpolator,
    "catmull_rom": CatmullRomInterpolator,
    "catmullrom": CatmullRomInterpolator,
}


def create_interpolator(method: str) -> Interpolator:
    """
    Factory function to create an unfitted interpolator by name.

    Args:
        method: One of "linear", "natural_cubic" ("cubic_spline"),
            "hermite", "catmull_rom"

    Returns:
        Unfitted interpolator instance; call ``fit`` on it
    """
    key = method.lower().replace("-", "_").replace(" ", "_")
    if key not in _METHODS:
        raise ValueError(f"Unknown interpolation method: {method}")
    return _METHODS[key]()


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
]
