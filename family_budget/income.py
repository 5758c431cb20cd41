"""Weekly income projection.

Turns income sources of any pay frequency into the five-slot weekly
income vector of a budget month.  Per source the first matching rule
wins:

1. explicit pay dates with at least one per-date actual: each in-month
   date contributes its own actual, or the projected amount when that
   date has none;
2. ``actualMode == 'monthly-total'`` with a positive actual: the actual
   is a month total, split evenly over the pay-date weeks (or over the
   first four weeks when there are no dates);
3. a positive actual: the actual is a per-paycheck figure placed like a
   projection would be;
4. otherwise the projected amount, placed by pay date, by a legacy
   ``weeks`` list, or by the frequency pattern of its monthly total.

Malformed dates never raise; they simply contribute nothing.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, List, Optional, Tuple

from .constants import MONTHLY_MULTIPLIERS, WEEKS_IN_PLANNER
from .models import BudgetMonth, IncomeSource
from .parsing import parse_date, week_index_for_day

logger = logging.getLogger(__name__)

# Weeks that receive an even share when income is spread over "a month".
_EVEN_WEEKS = 4


def monthly_multiplier(frequency: Optional[str]) -> float:
    """Number of pay periods per month for ``frequency`` (unknown -> 1)."""
    return MONTHLY_MULTIPLIERS.get(frequency or '', 1.0)


def monthly_equivalent(frequency: Optional[str], amount: float) -> float:
    return amount * monthly_multiplier(frequency)


def coerce_sources(sources: Optional[Iterable[Any]]) -> List[IncomeSource]:
    """Accept stored dicts or ready-made :class:`IncomeSource` objects."""
    result: List[IncomeSource] = []
    for item in sources or []:
        if isinstance(item, IncomeSource):
            result.append(item)
        elif isinstance(item, dict):
            result.append(IncomeSource.from_dict(item))
    return result


def _dated_weeks(source: IncomeSource, month: BudgetMonth) -> List[Tuple[int, int]]:
    """``(pay-date index, week index)`` for every valid date inside ``month``."""
    placed: List[Tuple[int, int]] = []
    for index, raw in enumerate(source.pay_dates):
        if not str(raw).strip():
            continue
        parsed = parse_date(raw)
        if parsed is None:
            logger.debug("Income '%s': skipping unreadable pay date %r", source.name, raw)
            continue
        if not month.contains(parsed):
            continue
        placed.append((index, week_index_for_day(parsed.day)))
    return placed


def _spread_even(weeks: List[float], total: float, count: int = _EVEN_WEEKS) -> None:
    share = total / count
    for week in range(count):
        weeks[week] += share


def _spread_per_paycheck(weeks: List[float], frequency: str, per_check: float) -> None:
    """Place a per-paycheck figure the way the frequency usually falls."""
    if frequency == 'weekly':
        for week in range(_EVEN_WEEKS):
            weeks[week] += per_check
    elif frequency == 'bi-weekly':
        weeks[0] += per_check
        weeks[2] += per_check
    elif frequency == 'monthly':
        weeks[0] += per_check
    else:
        _spread_even(weeks, monthly_equivalent(frequency, per_check))


def _spread_monthly_total(weeks: List[float], frequency: str, per_check: float) -> None:
    total = monthly_equivalent(frequency, per_check)
    if frequency == 'bi-weekly':
        weeks[0] += per_check
        weeks[2] += per_check
        # A third paycheck lands in some months; its monthly share goes last.
        weeks[4] += total - 2 * per_check
    elif frequency == 'monthly':
        weeks[0] += total
    else:
        _spread_even(weeks, total)


def project_source(source: IncomeSource, month: BudgetMonth) -> List[float]:
    """Weekly contribution of a single income source to ``month``."""
    weeks = [0.0] * WEEKS_IN_PLANNER
    dated = _dated_weeks(source, month)
    has_dates = source.has_pay_dates
    actual = source.actual_amount or 0.0

    if has_dates and source.has_pay_actuals():
        for index, week in dated:
            per_date = source.pay_actual_at(index)
            weeks[week] += per_date if per_date is not None else source.projected_amount
        return weeks

    if source.uses_monthly_total and actual > 0:
        if has_dates:
            for _, week in dated:
                weeks[week] += actual / len(dated)
        else:
            _spread_even(weeks, actual)
        return weeks

    if actual > 0:
        if has_dates:
            for _, week in dated:
                weeks[week] += actual
        else:
            _spread_per_paycheck(weeks, source.frequency, actual)
        return weeks

    if has_dates:
        for _, week in dated:
            weeks[week] += source.projected_amount
        return weeks

    if source.weeks is not None and any(source.weeks):
        return list(source.weeks)

    _spread_monthly_total(weeks, source.frequency, source.projected_amount)
    return weeks


def project_weekly_income(sources: Optional[Iterable[Any]], month: BudgetMonth) -> List[float]:
    """Sum every source's weekly contribution into one 5-week vector.

    Args:
        sources: Income sources, either as :class:`IncomeSource` or as the
            stored dictionaries.
        month: The budget month the weeks belong to.

    Returns:
        List of five floats, income for weeks 1-5.

    Example:
        >>> src = {'frequency': 'monthly', 'projectedAmount': 3000}
        >>> project_weekly_income([src], BudgetMonth(2025, 5))
        [3000.0, 0.0, 0.0, 0.0, 0.0]
    """
    totals = [0.0] * WEEKS_IN_PLANNER
    for source in coerce_sources(sources):
        for week, amount in enumerate(project_source(source, month)):
            totals[week] += amount
    return totals


def infer_budget_month(sources: Optional[Iterable[Any]], today: Optional[date] = None) -> BudgetMonth:
    """Month of the first readable pay date, falling back to ``today``."""
    for source in coerce_sources(sources):
        for raw in source.pay_dates:
            parsed = parse_date(raw)
            if parsed is not None:
                return BudgetMonth.from_date(parsed)
    return BudgetMonth.from_date(today or date.today())


def month_aware_monthly_amount(source: IncomeSource, which: str = 'projected') -> float:
    """Monthly income of a source, counting explicit pay dates when present."""
    if which == 'actual' and source.has_pay_actuals():
        return float(sum(v for v in source.pay_actuals if v is not None))

    per_check = (source.actual_amount or 0.0) if which == 'actual' else source.projected_amount
    date_count = sum(1 for d in source.pay_dates if str(d).strip())
    if source.frequency in ('weekly', 'bi-weekly') and date_count:
        return per_check * date_count
    return monthly_equivalent(source.frequency, per_check)


def total_projected_income(sources: Optional[Iterable[Any]]) -> float:
    return float(sum(month_aware_monthly_amount(s, 'projected') for s in coerce_sources(sources)))


def total_actual_income(sources: Optional[Iterable[Any]]) -> float:
    return float(sum(month_aware_monthly_amount(s, 'actual') for s in coerce_sources(sources)))


def income_variance(sources: Optional[Iterable[Any]]) -> Tuple[float, float]:
    """Actual minus projected monthly income, and that gap as a percentage."""
    projected = total_projected_income(sources)
    variance = total_actual_income(sources) - projected
    percent = (variance / projected * 100.0) if projected > 0 else 0.0
    return variance, percent
