"""Monetary arithmetic shared by every pricing stage.

Amounts travel as floats (two decimal places) but every sum, product and
percentage is computed on Decimals and rounded half-up to the cent before it
is handed to the next stage, so drafts never accumulate float drift.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(repr(float(value)))


def round_money(value) -> float:
    """Round half-up to two decimal places."""
    return float(to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def line_total(unit_price: float, quantity: int) -> float:
    return round_money(to_decimal(unit_price) * quantity)


def sum_money(values: Iterable) -> float:
    return round_money(sum((to_decimal(v) for v in values), Decimal(0)))


def percent_of(amount: float, rate: float) -> float:
    """``amount * rate / 100``, rounded to the cent."""
    return round_money(to_decimal(amount) * to_decimal(rate) / _HUNDRED)
