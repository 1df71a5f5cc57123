"""
Pricers package - instrument valuation against a yield curve.

Provides:
- Bond: fixed-coupon bond with irregular first/final coupons
"""

from .bonds import Frequency, BondCashflow, Bond

__all__ = [
    "Frequency",
    "BondCashflow",
    "Bond",
]
