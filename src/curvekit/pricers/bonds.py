"""
Fixed-coupon bond cash flows and present value.

Features:
- Regular coupon schedule between the first and penultimate coupon dates
- Short or long first coupon, pro-rated by actual days
- Short or long final coupon, paid with principal at maturity
- Present value against a YieldCurve

Conventions:
- Coupon payment dates are rolled with a business-day convention
  (Following by default); maturity is not rolled
- Cash flows whose due date is on or before settlement are excluded
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
import logging
from typing import List, Optional, Tuple

import pandas as pd

from ..conventions import BusinessDayConvention, Conventions, adjust_business_day
from ..curves.yield_curve import YieldCurve
from ..dates import DateUtils
from ..errors import InvalidInputError

logger = logging.getLogger(__name__)


class Frequency(Enum):
    """Coupon payments per year."""
    ANNUAL = 1
    SEMI_ANNUAL = 2
    QUARTERLY = 4
    MONTHLY = 12

    @property
    def months(self) -> int:
        """Months in one regular coupon period."""
        return 12 // self.value


@dataclass(frozen=True)
class BondCashflow:
    """A single bond cash flow."""
    due_date: date
    payment_date: date
    amount: float


def _stub_fraction(start: date, end: date, period_start: date, period_end: date) -> float:
    """Actual days of [start, end] over actual days of the regular period."""
    return (end - start).days / (period_end - period_start).days


class Bond:
    """
    Fixed-coupon bond with optional irregular first and final coupons.

    Attributes:
        bond_id: Identifier
        cashflows: Tuple of BondCashflow ordered by due date
    """

    def __init__(
        self,
        bond_id: str,
        issue_date: date,
        first_coupon_date: date,
        penultimate_coupon_date: date,
        maturity_date: date,
        frequency: Frequency,
        coupon_rate: float,
        face_value: float = 100.0,
        business_day: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
        holidays: Optional[set] = None,
    ):
        if face_value <= 0:
            raise InvalidInputError(f"face value must be positive, got {face_value}")
        if first_coupon_date <= issue_date:
            raise InvalidInputError("first coupon date must be after issue date")
        if penultimate_coupon_date < first_coupon_date:
            raise InvalidInputError("penultimate coupon date precedes first coupon date")
        if maturity_date <= penultimate_coupon_date:
            raise InvalidInputError("maturity date must be after penultimate coupon date")

        self.bond_id = bond_id
        self.issue_date = issue_date
        self.maturity_date = maturity_date
        self.frequency = frequency
        self.coupon_rate = coupon_rate
        self.face_value = face_value
        self.business_day = business_day
        self.holidays = holidays

        regular = coupon_rate * face_value / frequency.value
        months = frequency.months

        coupons = self._regular_coupons(first_coupon_date, penultimate_coupon_date, months, regular)
        coupons[0] = self._first_coupon(issue_date, first_coupon_date, months, regular, coupons[0])
        coupons.append(self._final_cashflow(penultimate_coupon_date, maturity_date, months, regular))

        self._cashflows: Tuple[BondCashflow, ...] = tuple(coupons)
        logger.debug("Bond %s: %d cash flows", bond_id, len(self._cashflows))

    @classmethod
    def from_conventions(
        cls,
        bond_id: str,
        issue_date: date,
        first_coupon_date: date,
        penultimate_coupon_date: date,
        maturity_date: date,
        coupon_rate: float,
        face_value: float = 100.0,
        conventions: Optional[Conventions] = None,
        holidays: Optional[set] = None,
    ) -> "Bond":
        """
        Build a bond whose coupon frequency and payment roll come from
        ``conventions`` (default ``Conventions.default()``).

        Raises:
            InvalidInputError: ``payment_frequency`` is not 1, 2, 4 or 12
        """
        conventions = conventions or Conventions.default()
        try:
            frequency = Frequency(conventions.payment_frequency)
        except ValueError as exc:
            raise InvalidInputError(
                f"unsupported payment frequency: {conventions.payment_frequency}"
            ) from exc
        return cls(
            bond_id,
            issue_date,
            first_coupon_date,
            penultimate_coupon_date,
            maturity_date,
            frequency,
            coupon_rate,
            face_value=face_value,
            business_day=conventions.business_day,
            holidays=holidays,
        )

    def _regular_coupons(
        self, first: date, penultimate: date, months: int, amount: float
    ) -> List[BondCashflow]:
        flows = []
        k = 0
        due = first
        while due <= penultimate:
            paid = adjust_business_day(due, self.business_day, self.holidays)
            flows.append(BondCashflow(due, paid, amount))
            k += 1
            due = DateUtils.add_months(first, k * months)
        return flows

    @staticmethod
    def _first_coupon(
        issue: date, first: date, months: int, regular: float, flow: BondCashflow
    ) -> BondCashflow:
        first_prior = DateUtils.add_months(first, -months)
        if first_prior < issue:
            # Short first period
            amount = regular * _stub_fraction(issue, first, first_prior, first)
        elif first_prior > issue:
            # Long first period: one full coupon plus the extra stub
            second_prior = DateUtils.add_months(first, -2 * months)
            amount = regular + regular * _stub_fraction(issue, first_prior, second_prior, first_prior)
        else:
            return flow
        return BondCashflow(flow.due_date, flow.payment_date, amount)

    def _final_cashflow(
        self, penultimate: date, maturity: date, months: int, regular: float
    ) -> BondCashflow:
        regular_end = DateUtils.add_months(penultimate, months)
        coupon = regular
        if maturity < regular_end:
            coupon = regular * _stub_fraction(penultimate, maturity, penultimate, regular_end)
        elif maturity > regular_end:
            next_end = DateUtils.add_months(penultimate, 2 * months)
            coupon = regular + regular * _stub_fraction(regular_end, maturity, regular_end, next_end)
        return BondCashflow(maturity, maturity, self.face_value + coupon)

    @property
    def cashflows(self) -> Tuple[BondCashflow, ...]:
        return self._cashflows

    def discounted_value(self, settlement: date, curve: YieldCurve) -> float:
        """
        Present value at ``settlement`` of every cash flow due after it.

        Args:
            settlement: Valuation date
            curve: Spot yield curve used for discounting

        Returns:
            Sum of discount factor times amount

        Raises:
            Any curve error (date ordering, out-of-domain times) unchanged
        """
        pv = 0.0
        for cf in self._cashflows:
            if settlement < cf.due_date:
                pv += curve.discount_factor(settlement, cf.payment_date) * cf.amount
        return pv

    def to_frame(self) -> pd.DataFrame:
        """Cash flow table."""
        return pd.DataFrame(
            [(cf.due_date, cf.payment_date, cf.amount) for cf in self._cashflows],
            columns=["due_date", "payment_date", "amount"],
        )

    def __repr__(self) -> str:
        return (f"Bond(id={self.bond_id}, maturity={self.maturity_date}, "
                f"coupon={self.coupon_rate}, flows={len(self._cashflows)})")


__all__ = [
    "Frequency",
    "BondCashflow",
    "Bond",
]
