"""
Spot yield curve and discount factors.

The YieldCurve class provides:
- Discount factor between two dates, P(d1, d2)
- Interpolated continuously compounded spot yield at a date
- Continuously compounded forward rate between two dates

Internally every maturity is converted to a day-count fraction from the
settlement date, and one interpolation method is fitted over
(fraction, spot yield) pairs. The curve is immutable once built.
"""

from datetime import date
import logging
from typing import Optional, Sequence, Tuple, Type, Union

import numpy as np
import pandas as pd

from ..conventions import Conventions, DayCount, DayCounter
from ..dates import DateUtils
from ..errors import InvalidInputError
from ..numerics.value import as_real
from .interpolation import Interpolator, create_interpolator

logger = logging.getLogger(__name__)

InterpolationSpec = Union[str, Type[Interpolator], Interpolator]

DEFAULT_FLAT_TENORS = ("1M", "3M", "6M", "1Y", "2Y", "5Y", "10Y", "30Y")


def _resolve_interpolator(interpolation: InterpolationSpec) -> Interpolator:
    if isinstance(interpolation, str):
        method = create_interpolator(interpolation)
    elif isinstance(interpolation, type) and issubclass(interpolation, Interpolator):
        method = interpolation()
    elif isinstance(interpolation, Interpolator):
        method = interpolation
    else:
        raise InvalidInputError(f"unsupported interpolation: {interpolation!r}")

    if method.point_arity != 2:
        raise InvalidInputError(
            f"{type(method).__name__} needs slopes and cannot be fitted to spot yields"
        )
    return method


class YieldCurve:
    """
    Spot yield curve over calendar dates.

    Attributes:
        settlement_date: Curve anchor (time 0)
        day_count: Convention used to turn dates into times
        interpolator: Fitted interpolation method over (time, yield)

    Conventions:
        - Spot yields are continuously compounded
        - Times are day-count fractions from the settlement date
    """

    def __init__(
        self,
        settlement_date: date,
        maturities: Sequence[date],
        spot_yields: Sequence[float],
        day_count: DayCounter = DayCount.ACT_365,
        interpolation: InterpolationSpec = "natural_cubic",
    ):
        if len(maturities) != len(spot_yields):
            raise InvalidInputError("maturities and spot_yields are different lengths")

        self._settlement_date = settlement_date
        self._day_count = day_count
        self._maturities: Tuple[date, ...] = tuple(maturities)

        times = [self._time(m) for m in self._maturities]
        method = _resolve_interpolator(interpolation)
        self._interpolator = method.fit(list(zip(times, spot_yields)))

        logger.debug(
            "Built yield curve at %s with %d nodes (%s)",
            settlement_date, len(self._maturities), type(self._interpolator).__name__,
        )

    @classmethod
    def from_tenors(
        cls,
        settlement_date: date,
        tenors: Sequence[str],
        spot_yields: Sequence[float],
        conventions: Optional[Conventions] = None,
    ) -> "YieldCurve":
        """
        Build a curve from tenor strings ("3M", "5Y", ...).

        Day count and interpolation method come from ``conventions``
        (default ``Conventions.default()``).
        """
        conventions = conventions or Conventions.default()
        maturities = [DateUtils.add_tenor(settlement_date, t) for t in tenors]
        return cls(
            settlement_date,
            maturities,
            spot_yields,
            day_count=conventions.day_count,
            interpolation=conventions.interpolation,
        )

    @property
    def settlement_date(self) -> date:
        return self._settlement_date

    @property
    def day_count(self) -> DayCounter:
        return self._day_count

    @property
    def interpolator(self) -> Interpolator:
        return self._interpolator

    @property
    def maturities(self) -> Tuple[date, ...]:
        return self._maturities

    def _time(self, d: date) -> float:
        return self._day_count.fraction(self._settlement_date, d)

    def spot_yield(self, d: date):
        """Interpolated continuously compounded spot yield at ``d``."""
        return self._interpolator.interpolate(self._time(d))

    zero_rate = spot_yield

    def discount_factor(self, d1: date, d2: date) -> float:
        """
        Discount factor from ``d2`` back to ``d1``.

        Args:
            d1: Earlier date, on or after settlement
            d2: Later date

        Returns:
            exp(-t2*y2) when d1 is the settlement date, otherwise
            exp(t1*y1 - t2*y2)

        Raises:
            InvalidInputError: d2 < d1, or either date precedes settlement
            InterpolationError: a time falls outside the fitted domain
        """
        if d2 < d1:
            raise InvalidInputError(f"d1: {d1} must be smaller than d2: {d2}")
        if d1 < self._settlement_date or d2 < self._settlement_date:
            raise InvalidInputError(
                f"Either {d1} or {d2} exceeds settlement date: {self._settlement_date}"
            )

        t2 = as_real(self._time(d2))
        y2 = as_real(self._interpolator.interpolate(t2))
        if d1 == self._settlement_date:
            return float(np.exp(-t2 * y2))

        t1 = as_real(self._time(d1))
        y1 = as_real(self._interpolator.interpolate(t1))
        return float(np.exp(t1 * y1 - t2 * y2))

    def forward_rate(self, d1: date, d2: date) -> float:
        """
        Continuously compounded forward rate between two dates.

        Raises:
            InvalidInputError: d2 is not after d1
        """
        if d2 <= d1:
            raise InvalidInputError(f"d2: {d2} must be later than d1: {d1}")
        df = self.discount_factor(d1, d2)
        tau = as_real(self._time(d2)) - as_real(self._time(d1))
        return float(-np.log(df) / tau)

    def to_frame(self) -> pd.DataFrame:
        """Curve nodes as a table (maturity, time, spot_yield, discount_factor)."""
        times = [as_real(p.x) for p in self._interpolator.points]
        yields = [as_real(p.y) for p in self._interpolator.points]
        return pd.DataFrame({
            "maturity": list(self._maturities),
            "time": times,
            "spot_yield": yields,
            "discount_factor": np.exp(-np.array(times) * np.array(yields)),
        })

    def __repr__(self) -> str:
        return (f"YieldCurve(settlement={self._settlement_date}, "
                f"nodes={len(self._maturities)}, "
                f"method={self._interpolator.method})")


def create_flat_curve(
    settlement_date: date,
    rate: float,
    tenors: Sequence[str] = DEFAULT_FLAT_TENORS,
    day_count: DayCounter = DayCount.ACT_365,
) -> YieldCurve:
    """
    Create a flat yield curve.

    Nodes sit at the settlement date itself and at each tenor, and the
    linear method is used, so any date on or after settlement is priced.

    Args:
        settlement_date: Curve anchor
        rate: Flat continuously compounded yield
        tenors: Node tenors beyond settlement
        day_count: Day count for node times

    Returns:
        Flat YieldCurve
    """
    maturities = [settlement_date] + [DateUtils.add_tenor(settlement_date, t) for t in tenors]
    return YieldCurve(
        settlement_date,
        maturities,
        [rate] * len(maturities),
        day_count=day_count,
        interpolation="linear",
    )


__all__ = [
    "YieldCurve",
    "create_flat_curve",
    "DEFAULT_FLAT_TENORS",
]
