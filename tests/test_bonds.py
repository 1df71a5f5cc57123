"""
Unit tests for bond cash flows and present value.
"""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from curvekit.conventions import BusinessDayConvention, Conventions
from curvekit.curves import YieldCurve, create_flat_curve
from curvekit.errors import InvalidInputError, OutOfUpperBoundError
from curvekit.pricers import Bond, Frequency


SETTLE = date(2023, 10, 10)

MATURITIES = [
    date(2023, 10, 11), date(2024, 1, 10), date(2024, 4, 10), date(2024, 10, 10),
    date(2025, 10, 10), date(2026, 10, 12), date(2028, 10, 10), date(2030, 10, 10),
    date(2033, 10, 10), date(2038, 10, 11), date(2043, 10, 12), date(2053, 10, 10),
]

SPOT_YIELDS = [
    0.02, 0.0219, 0.0237, 0.0267, 0.0312, 0.0343,
    0.0378, 0.0393, 0.04, 0.0401, 0.0401, 0.04,
]


@pytest.fixture
def twenty_year_bond():
    """Semi-annual 6.2% bond with a short first coupon."""
    return Bond(
        "20 yr bond",
        issue_date=date(2023, 5, 8),
        first_coupon_date=date(2023, 11, 7),
        penultimate_coupon_date=date(2042, 5, 7),
        maturity_date=date(2042, 11, 7),
        frequency=Frequency.SEMI_ANNUAL,
        coupon_rate=0.062,
        face_value=1000.0,
    )


@pytest.fixture
def spline_curve():
    return YieldCurve(SETTLE, MATURITIES, SPOT_YIELDS)


class TestFrequency:

    @pytest.mark.parametrize("freq,months", [
        (Frequency.ANNUAL, 12),
        (Frequency.SEMI_ANNUAL, 6),
        (Frequency.QUARTERLY, 3),
        (Frequency.MONTHLY, 1),
    ])
    def test_months(self, freq, months):
        assert freq.months == months


class TestSchedule:
    """Tests for cash flow generation."""

    def test_cashflow_count(self, twenty_year_bond):
        # 38 regular coupons plus the final coupon with principal
        assert len(twenty_year_bond.cashflows) == 39

    def test_short_first_coupon(self, twenty_year_bond):
        first = twenty_year_bond.cashflows[0]
        assert first.due_date == date(2023, 11, 7)
        assert first.amount == pytest.approx(31.0 * 183 / 184)

    def test_regular_coupon(self, twenty_year_bond):
        assert twenty_year_bond.cashflows[1].amount == pytest.approx(31.0)
        assert twenty_year_bond.cashflows[1].due_date == date(2024, 5, 7)

    def test_final_cashflow(self, twenty_year_bond):
        last = twenty_year_bond.cashflows[-1]
        assert last.due_date == date(2042, 11, 7)
        assert last.payment_date == date(2042, 11, 7)
        assert last.amount == pytest.approx(1031.0)

    def test_due_dates_ordered(self, twenty_year_bond):
        dues = [cf.due_date for cf in twenty_year_bond.cashflows]
        assert dues == sorted(dues)
        assert len(set(dues)) == len(dues)

    def test_payment_dates_are_weekdays(self, twenty_year_bond):
        for cf in twenty_year_bond.cashflows[:-1]:
            assert cf.payment_date.weekday() < 5
            assert 0 <= (cf.payment_date - cf.due_date).days <= 2

    def test_end_of_month_schedule_does_not_drift(self):
        bond = Bond(
            "eom",
            issue_date=date(2024, 1, 31),
            first_coupon_date=date(2024, 7, 31),
            penultimate_coupon_date=date(2026, 7, 31),
            maturity_date=date(2027, 1, 31),
            frequency=Frequency.QUARTERLY,
            coupon_rate=0.04,
        )
        dues = [cf.due_date for cf in bond.cashflows]
        assert date(2024, 10, 31) in dues
        assert date(2025, 7, 31) in dues

    def test_long_first_coupon(self):
        bond = Bond(
            "long first",
            issue_date=date(2023, 1, 15),
            first_coupon_date=date(2023, 11, 7),
            penultimate_coupon_date=date(2025, 5, 7),
            maturity_date=date(2025, 11, 7),
            frequency=Frequency.SEMI_ANNUAL,
            coupon_rate=0.05,
        )
        first = bond.cashflows[0].amount
        assert first == pytest.approx(2.5 + 2.5 * 112 / 181)
        assert 2.5 < first < 5.0

    def test_short_final_coupon(self):
        bond = Bond(
            "short final",
            issue_date=date(2023, 5, 7),
            first_coupon_date=date(2023, 11, 7),
            penultimate_coupon_date=date(2025, 5, 7),
            maturity_date=date(2025, 8, 7),
            frequency=Frequency.SEMI_ANNUAL,
            coupon_rate=0.05,
        )
        assert bond.cashflows[0].amount == pytest.approx(2.5)
        last = bond.cashflows[-1].amount
        assert 100.0 < last < 102.5

    def test_long_final_coupon(self):
        bond = Bond(
            "long final",
            issue_date=date(2023, 5, 7),
            first_coupon_date=date(2023, 11, 7),
            penultimate_coupon_date=date(2025, 5, 7),
            maturity_date=date(2026, 2, 7),
            frequency=Frequency.SEMI_ANNUAL,
            coupon_rate=0.05,
        )
        last = bond.cashflows[-1].amount
        assert 102.5 < last < 105.0

    @pytest.mark.parametrize("kwargs", [
        {"face_value": 0.0},
        {"first_coupon_date": date(2023, 5, 8)},
        {"penultimate_coupon_date": date(2023, 5, 7)},
        {"maturity_date": date(2042, 5, 7)},
    ])
    def test_invalid_inputs(self, kwargs):
        params = dict(
            issue_date=date(2023, 5, 8),
            first_coupon_date=date(2023, 11, 7),
            penultimate_coupon_date=date(2042, 5, 7),
            maturity_date=date(2042, 11, 7),
            frequency=Frequency.SEMI_ANNUAL,
            coupon_rate=0.062,
            face_value=1000.0,
        )
        params.update(kwargs)
        with pytest.raises(InvalidInputError):
            Bond("bad", **params)


def month_end_bond(**kwargs):
    """Quarterly month-end bond whose first coupon falls on Saturday 2024-08-31."""
    return Bond.from_conventions(
        "month end",
        issue_date=date(2024, 5, 31),
        first_coupon_date=date(2024, 8, 31),
        penultimate_coupon_date=date(2025, 5, 31),
        maturity_date=date(2025, 8, 31),
        coupon_rate=0.04,
        **kwargs,
    )


class TestConventions:
    """Tests for schedules driven by a Conventions object."""

    def test_default_conventions(self):
        bond = month_end_bond()
        assert bond.frequency == Frequency.SEMI_ANNUAL
        assert bond.business_day == BusinessDayConvention.FOLLOWING

    def test_money_market_frequency_and_roll(self):
        bond = month_end_bond(conventions=Conventions.money_market())
        assert bond.frequency == Frequency.QUARTERLY
        assert bond.cashflows[1].amount == pytest.approx(1.0)

        paid = {cf.due_date: cf.payment_date for cf in bond.cashflows}
        # Modified following stays inside the month
        assert paid[date(2024, 8, 31)] == date(2024, 8, 30)
        assert paid[date(2024, 11, 30)] == date(2024, 11, 29)
        assert paid[date(2025, 2, 28)] == date(2025, 2, 28)

    def test_following_rolls_into_next_month(self):
        conv = Conventions(payment_frequency=4)
        bond = month_end_bond(conventions=conv)
        assert bond.cashflows[0].payment_date == date(2024, 9, 2)

    def test_holidays_respected(self):
        conv = Conventions(payment_frequency=4)
        bond = month_end_bond(conventions=conv, holidays={date(2024, 9, 2)})
        assert bond.cashflows[0].payment_date == date(2024, 9, 3)

    def test_unadjusted(self):
        bond = Bond(
            "unadjusted",
            issue_date=date(2024, 5, 31),
            first_coupon_date=date(2024, 8, 31),
            penultimate_coupon_date=date(2025, 5, 31),
            maturity_date=date(2025, 8, 31),
            frequency=Frequency.QUARTERLY,
            coupon_rate=0.04,
            business_day=BusinessDayConvention.UNADJUSTED,
        )
        assert all(cf.payment_date == cf.due_date for cf in bond.cashflows)

    def test_unsupported_frequency(self):
        with pytest.raises(InvalidInputError):
            month_end_bond(conventions=Conventions(payment_frequency=3))


class TestDiscountedValue:
    """Tests for present value."""

    def test_flat_curve_matches_manual_sum(self, twenty_year_bond):
        curve = create_flat_curve(SETTLE, 0.03)
        pv = twenty_year_bond.discounted_value(SETTLE, curve)

        expected = sum(
            np.exp(-0.03 * (cf.payment_date - SETTLE).days / 365) * cf.amount
            for cf in twenty_year_bond.cashflows
        )
        assert pv == pytest.approx(expected, rel=1e-12)

    def test_premium_bond_on_spline_curve(self, twenty_year_bond, spline_curve):
        pv = twenty_year_bond.discounted_value(SETTLE, spline_curve)
        assert pv == pytest.approx(1314.56, rel=1e-2)
        assert pv > twenty_year_bond.face_value

    def test_paid_coupons_excluded(self, twenty_year_bond):
        curve = create_flat_curve(SETTLE, 0.03)
        later = date(2024, 6, 1)
        pv = twenty_year_bond.discounted_value(later, curve)

        remaining = [cf for cf in twenty_year_bond.cashflows if cf.due_date > later]
        assert len(remaining) == 37
        expected = sum(
            np.exp(-0.03 * (cf.payment_date - later).days / 365) * cf.amount
            for cf in remaining
        )
        assert pv == pytest.approx(expected, rel=1e-10)

    def test_nothing_due_after_maturity(self, twenty_year_bond):
        curve = create_flat_curve(SETTLE, 0.03)
        assert twenty_year_bond.discounted_value(date(2042, 11, 7), curve) == 0.0

    def test_curve_errors_propagate(self, twenty_year_bond):
        short_curve = YieldCurve(SETTLE, MATURITIES[:6], SPOT_YIELDS[:6])
        with pytest.raises(OutOfUpperBoundError):
            twenty_year_bond.discounted_value(SETTLE, short_curve)

    def test_settlement_before_curve(self, twenty_year_bond):
        curve = create_flat_curve(SETTLE, 0.03)
        with pytest.raises(InvalidInputError):
            twenty_year_bond.discounted_value(date(2023, 6, 1), curve)


class TestExport:

    def test_to_frame(self, twenty_year_bond):
        df = twenty_year_bond.to_frame()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["due_date", "payment_date", "amount"]
        assert len(df) == 39
        assert df["amount"].iloc[-1] == pytest.approx(1031.0)

    def test_repr(self, twenty_year_bond):
        assert "20 yr bond" in repr(twenty_year_bond)
