"""
Date utilities for curve construction and cash-flow schedules.

Provides:
- Tenor parsing ("3M", "10Y") and tenor arithmetic
- Month arithmetic with end-of-month clamping
- Weekend rolling for payment dates
"""

from datetime import date, timedelta
import calendar
import re
from typing import Optional, Tuple

from .conventions import BusinessDayConvention, adjust_business_day, is_business_day


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "1D", "3M", "2Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")

        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def add_months(start: date, months: int) -> date:
        """
        Shift a date by a whole number of months.

        The day of month is clamped to the target month's length, so
        31 Jan + 1M is the last day of February. Negative offsets are allowed.
        """
        total = start.month - 1 + months
        year = start.year + total // 12
        month = total % 12 + 1
        day = min(start.day, calendar.monthrange(year, month)[1])
        return date(year, month, day)

    @staticmethod
    def add_tenor(start: date, tenor: str, holidays: Optional[set] = None) -> date:
        """
        Add a tenor to a date.

        Day tenors count business days; W/M/Y tenors are calendar shifts.

        Args:
            start: Starting date
            tenor: Tenor string (e.g., "1D", "3M", "2Y")
            holidays: Optional holiday calendar

        Returns:
            End date
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            result = start
            days_added = 0
            while days_added < amount:
                result += timedelta(days=1)
                if is_business_day(result, holidays):
                    days_added += 1
            return result
        elif unit == 'W':
            return start + timedelta(weeks=amount)
        elif unit == 'M':
            return DateUtils.add_months(start, amount)
        else:
            return DateUtils.add_months(start, 12 * amount)

    @staticmethod
    def tenor_to_years(tenor: str) -> float:
        """Convert tenor to approximate year fraction."""
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return amount / 365.0
        elif unit == 'W':
            return amount * 7 / 365.0
        elif unit == 'M':
            return amount / 12.0
        return float(amount)

    @staticmethod
    def days_between(start: date, end: date) -> int:
        """Signed calendar days from start to end."""
        return (end - start).days


def weekend_roll(d: date) -> date:
    """Roll a Saturday or Sunday forward to the following Monday."""
    return adjust_business_day(d, BusinessDayConvention.FOLLOWING)


__all__ = [
    "DateUtils",
    "weekend_roll",
]
