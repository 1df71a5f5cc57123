"""
Day count conventions and business day adjustments.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets)
- ACT/365: Actual days / 365 (fixed)
- ACT/ACT: Actual days / actual days in each calendar year (ISDA)
- 30/360: 30 days per month / 360, both day-of-month values capped at 30

Business Day Conventions:
- Following: Move to next business day
- Modified Following: Following, unless that leaves the month (then Preceding)
- Preceding: Move to previous business day
- Modified Preceding: Preceding, unless that leaves the month (then Following)

The yield curve only needs ``fraction(start, end)`` from a day count, so any
object implementing the ``DayCounter`` protocol can stand in for ``DayCount``.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
import calendar
import logging
from typing import Optional, Protocol, runtime_checkable

from .errors import InvalidInputError, ZeroDenominatorError

logger = logging.getLogger(__name__)

# Upper bound on the day-by-day walk in adjust_business_day
MAX_ROLL_DAYS = 31


@runtime_checkable
class DayCounter(Protocol):
    """Anything that turns two dates into a year fraction."""

    def fraction(self, start: date, end: date) -> float: ...


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "ACT/365F": cls.ACT_365,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")

    def fraction(self, start: date, end: date) -> float:
        """Year fraction from ``start`` to ``end`` under this convention."""
        return year_fraction(start, end, self)


@dataclass(frozen=True)
class ActualDayCounter:
    """
    Actual days over a fixed basis, e.g. ACT/364 or ACT/252.

    Attributes:
        basis: Days per year in the denominator
    """
    basis: int

    def fraction(self, start: date, end: date) -> float:
        return _actual_fraction((end - start).days, self.basis)


def _actual_fraction(days: int, basis: int) -> float:
    if basis == 0:
        raise ZeroDenominatorError()
    return days / basis


def _act_act(start: date, end: date) -> float:
    if start.year == end.year:
        return (end - start).days / (366 if calendar.isleap(start.year) else 365)
    total = (date(start.year + 1, 1, 1) - start).days / (
        366 if calendar.isleap(start.year) else 365)
    total += end.year - start.year - 1
    total += (end - date(end.year, 1, 1)).days / (
        366 if calendar.isleap(end.year) else 365)
    return total


def _thirty_360(start: date, end: date) -> float:
    if start > end:
        raise InvalidInputError(f"date1: {start} must precede date2: {end}")
    d1 = min(start.day, 30)
    d2 = min(end.day, 30)
    days = 360 * (end.year - start.year) + 30 * (end.month - start.month) + d2 - d1
    return _actual_fraction(days, 360)


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Actual-day conventions are signed: a reversed pair gives a negative
    fraction. 30/360 rejects a reversed pair.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float

    Raises:
        InvalidInputError: 30/360 with ``start > end``
    """
    if day_count == DayCount.ACT_360:
        return _actual_fraction((end - start).days, 360)

    elif day_count == DayCount.ACT_365:
        return _actual_fraction((end - start).days, 365)

    elif day_count == DayCount.ACT_ACT:
        if start > end:
            return -_act_act(end, start)
        return _act_act(start, end)

    elif day_count == DayCount.THIRTY_360:
        return _thirty_360(start, end)

    else:
        raise ValueError(f"Unknown day count: {day_count}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    UNADJUSTED = "Unadjusted"
    FOLLOWING = "Following"
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    PRECEDING = "Preceding"
    MODIFIED_PRECEDING = "ModifiedPreceding"


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """
    Check if a date is a business day.

    Uses weekend-only calendar by default (Saturday/Sunday are non-business days).

    Args:
        d: Date to check
        holidays: Optional set of holiday dates

    Returns:
        True if business day, False otherwise
    """
    if d.weekday() >= 5:
        return False
    if holidays and d in holidays:
        return False
    return True


def _roll(d: date, step: int, holidays: Optional[set]) -> date:
    adjusted = d
    for _ in range(MAX_ROLL_DAYS):
        if is_business_day(adjusted, holidays):
            return adjusted
        adjusted += timedelta(days=step)
    raise InvalidInputError(
        f"no business day within {MAX_ROLL_DAYS} days of {d}"
    )


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Adjust a date according to business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date

    Raises:
        InvalidInputError: no business day found within MAX_ROLL_DAYS
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.FOLLOWING:
        adjusted = _roll(d, 1, holidays)
    elif convention == BusinessDayConvention.PRECEDING:
        adjusted = _roll(d, -1, holidays)
    elif convention == BusinessDayConvention.MODIFIED_FOLLOWING:
        adjusted = _roll(d, 1, holidays)
        if adjusted.month != d.month:
            adjusted = _roll(d, -1, holidays)
    elif convention == BusinessDayConvention.MODIFIED_PRECEDING:
        adjusted = _roll(d, -1, holidays)
        if adjusted.month != d.month:
            adjusted = _roll(d, 1, holidays)
    else:
        raise ValueError(f"Unknown business day convention: {convention}")

    logger.debug("Rolled %s to %s (%s)", d, adjusted, convention.value)
    return adjusted


@dataclass
class Conventions:
    """
    Container for curve and instrument conventions.

    Attributes:
        day_count: Day count used to turn dates into curve times
        business_day: Payment date adjustment rule
        interpolation: Interpolation method name for yield curves
        payment_frequency: Coupons per year (1=annual, 2=semi, 4=quarterly)
    """
    day_count: DayCount = DayCount.ACT_365
    business_day: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    interpolation: str = "natural_cubic"
    payment_frequency: int = 2

    @classmethod
    def default(cls) -> "Conventions":
        """ACT/365 natural cubic spot curve, semi-annual coupons."""
        return cls()

    @classmethod
    def usd_treasury(cls) -> "Conventions":
        """Standard USD Treasury conventions."""
        return cls(
            day_count=DayCount.ACT_ACT,
            business_day=BusinessDayConvention.FOLLOWING,
            interpolation="natural_cubic",
            payment_frequency=2,
        )

    @classmethod
    def money_market(cls) -> "Conventions":
        """Short-end money market conventions."""
        return cls(
            day_count=DayCount.ACT_360,
            business_day=BusinessDayConvention.MODIFIED_FOLLOWING,
            interpolation="linear",
            payment_frequency=4,
        )


__all__ = [
    "DayCounter",
    "DayCount",
    "ActualDayCounter",
    "BusinessDayConvention",
    "Conventions",
    "MAX_ROLL_DAYS",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
]
