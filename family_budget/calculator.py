"""Currency calculator helpers.

Money arithmetic for the calculator panel: allocations, loan payments,
savings goals, interest, tax and period conversions.  Amounts go through
:func:`~family_budget.parsing.parse_amount`, intermediate math runs on
``Decimal`` and every result is rounded half away from zero to cents.
Bad input yields ``0.0`` rather than an exception.

Example:
    >>> monthly_payment(10000, 0, 1)
    833.33
    >>> allocate_by_percentage(4000, {'needs': 50, 'wants': 30, 'savings': 20})
    {'needs': 2000.0, 'wants': 1200.0, 'savings': 800.0}
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Iterable, List

import numpy as np

from .constants import MONTHS_PER_YEAR
from .parsing import parse_amount

logger = logging.getLogger(__name__)

PRECISION = 2
WORKING_DIGITS = 64
WEEKS_PER_YEAR = 52
DAYS_PER_YEAR = Decimal('365.25')


def _dec(value: Any) -> Decimal:
    return Decimal(str(parse_amount(value)))


def _round(value: Decimal, precision: int = PRECISION) -> float:
    try:
        return float(value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        logger.debug("Cannot round %r", value)
        return 0.0


def add(*amounts: Any) -> float:
    return _round(sum((_dec(a) for a in amounts), Decimal(0)))


def subtract(amount: Any, other: Any) -> float:
    return _round(_dec(amount) - _dec(other))


def multiply(amount: Any, multiplier: Any) -> float:
    return _round(_dec(amount) * _dec(multiplier))


def divide(amount: Any, divisor: Any) -> float:
    """``amount / divisor``; division by zero gives ``0.0``."""
    denominator = _dec(divisor)
    if denominator == 0:
        return 0.0
    return _round(_dec(amount) / denominator)


def percentage(amount: Any, percent: Any) -> float:
    return _round(_dec(amount) * _dec(percent) / 100)


def percentage_of(part: Any, whole: Any) -> float:
    total = _dec(whole)
    if total == 0:
        return 0.0
    return _round(_dec(part) / total * 100)


def compound_interest(principal: Any, rate: Any, years: Any, periods_per_year: int = MONTHS_PER_YEAR) -> float:
    """Balance after compounding: ``P * (1 + r/n) ** (n * t)``.

    Args:
        principal: Starting balance.
        rate: Annual rate in percent.
        years: Duration in years (fractions allowed).
        periods_per_year: Compounding periods per year.
    """
    if periods_per_year <= 0:
        return 0.0
    with localcontext() as ctx:
        ctx.prec = WORKING_DIGITS
        n = Decimal(periods_per_year)
        growth = (1 + _dec(rate) / 100 / n) ** (n * _dec(years))
        return _round(_dec(principal) * growth)


def simple_interest(principal: Any, rate: Any, years: Any) -> float:
    """Interest only (not the balance): ``P * r * t``."""
    return _round(_dec(principal) * _dec(rate) / 100 * _dec(years))


def monthly_payment(principal: Any, annual_rate: Any, years: Any) -> float:
    """Level monthly payment of an amortizing loan.

    Uses ``M = P * r(1+r)^n / ((1+r)^n - 1)`` with the monthly rate ``r``
    and ``n`` monthly payments; a zero rate divides the principal evenly.
    """
    payments = _dec(years) * MONTHS_PER_YEAR
    if payments <= 0:
        return 0.0
    rate = _dec(annual_rate)
    if rate == 0:
        return divide(principal, payments)
    with localcontext() as ctx:
        ctx.prec = WORKING_DIGITS
        monthly_rate = rate / 100 / MONTHS_PER_YEAR
        powered = (1 + monthly_rate) ** payments
        return _round(_dec(principal) * monthly_rate * powered / (powered - 1))


def allocate_by_percentage(total: Any, percentages: Dict[str, Any]) -> Dict[str, float]:
    """Split ``total`` by a percentage per category."""
    base = _dec(total)
    return {category: _round(base * _dec(pct) / 100) for category, pct in percentages.items()}


def savings_goal(target: Any, current_savings: Any, months: Any) -> float:
    """Monthly amount needed to reach ``target`` in ``months`` months."""
    remaining_months = _dec(months)
    if remaining_months <= 0:
        return 0.0
    return _round((_dec(target) - _dec(current_savings)) / remaining_months)


def convert_currency(amount: Any, exchange_rate: Any) -> float:
    return multiply(amount, exchange_rate)


def calculate_tax(amount: Any, tax_rate: Any) -> float:
    return percentage(amount, tax_rate)


def after_tax(amount: Any, tax_rate: Any) -> float:
    return subtract(amount, calculate_tax(amount, tax_rate))


def annual_to_monthly(amount: Any) -> float:
    return divide(amount, MONTHS_PER_YEAR)


def monthly_to_annual(amount: Any) -> float:
    return multiply(amount, MONTHS_PER_YEAR)


def weekly_to_monthly(amount: Any) -> float:
    return _round(_dec(amount) * WEEKS_PER_YEAR / MONTHS_PER_YEAR)


def daily_to_monthly(amount: Any) -> float:
    return _round(_dec(amount) * DAYS_PER_YEAR / MONTHS_PER_YEAR)


def average(amounts: Iterable[Any]) -> float:
    values: List[Any] = list(amounts)
    if not values:
        return 0.0
    return divide(add(*values), len(values))


def median(amounts: Iterable[Any]) -> float:
    values = np.sort(np.array([parse_amount(a) for a in amounts], dtype=float))
    if values.size == 0:
        return 0.0
    middle = values.size // 2
    if values.size % 2:
        return float(values[middle])
    return divide(add(values[middle - 1], values[middle]), 2)


def is_equal(amount: Any, other: Any, precision: int = PRECISION) -> bool:
    """Equal to within one unit of the last rounded digit."""
    return abs(parse_amount(amount) - parse_amount(other)) < 10 ** -precision
