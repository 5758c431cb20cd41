"""Expense normalization and expense-side totals.

Monthly and annual categories are flattened into
:class:`~family_budget.models.NormalizedExpense` items that the weekly
planner can place.  Annual amounts are amortized to a monthly figure
(annual / 12); the original annual figure is kept for display.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .constants import (
    MONTHS_PER_YEAR,
    TRANSFER_MULTIPLIERS,
    UNFUNDED_ACCOUNTS,
    UPCOMING_WINDOW_DAYS,
    category_display_name,
)
from .models import Expense, NormalizedExpense
from .parsing import parse_date

logger = logging.getLogger(__name__)

ExpenseCollection = Mapping[str, Iterable[Any]]


def coerce_expense(item: Any) -> Expense:
    if isinstance(item, Expense):
        return item
    if isinstance(item, dict):
        return Expense.from_dict(item)
    return Expense(name='')


def iter_expenses(collection: Optional[ExpenseCollection]) -> Iterator[Tuple[str, Expense]]:
    """Yield ``(category_key, expense)`` in category then list order."""
    for category_key, items in (collection or {}).items():
        for item in items or []:
            yield category_key, coerce_expense(item)


def expense_monthly_amount(expense: Expense, is_annual: bool = False) -> float:
    amount = expense.realized_amount
    return amount / MONTHS_PER_YEAR if is_annual else amount


def normalize_expenses(
    monthly: Optional[ExpenseCollection],
    annual: Optional[ExpenseCollection],
    category_names: Optional[Dict[str, str]] = None,
) -> List[NormalizedExpense]:
    """Flatten both expense collections into plannable items.

    Args:
        monthly: Mapping of category key to its monthly expenses.
        annual: Mapping of category key to its annual expenses.
        category_names: Optional display names keyed by category.  Keys
            without an entry fall back to the built-in catalogue, then to
            the capitalised key.

    Returns:
        Monthly items first, then annual items, each in category order and
        list order within the category.  Items with blank names are left
        out.
    """
    normalized: List[NormalizedExpense] = []
    for is_annual, collection in ((False, monthly), (True, annual)):
        for category_key, expense in iter_expenses(collection):
            if not expense.name.strip():
                continue
            normalized.append(
                NormalizedExpense(
                    name=expense.name,
                    category_key=category_key,
                    category_name=category_display_name(category_key, category_names),
                    monthly_amount=expense_monthly_amount(expense, is_annual),
                    is_annual=is_annual,
                    original_annual_amount=expense.realized_amount if is_annual else None,
                    date=expense.date,
                    expense_id=expense.id,
                )
            )
    return normalized


def total_monthly_expenses(monthly: Optional[ExpenseCollection]) -> float:
    return float(sum(e.realized_amount for _, e in iter_expenses(monthly)))


def total_annual_expenses(annual: Optional[ExpenseCollection]) -> float:
    return float(sum(e.realized_amount for _, e in iter_expenses(annual)))


def monthly_annual_impact(annual: Optional[ExpenseCollection]) -> float:
    return total_annual_expenses(annual) / MONTHS_PER_YEAR


def category_totals(
    monthly: Optional[ExpenseCollection],
    annual: Optional[ExpenseCollection],
) -> Dict[str, Dict[str, float]]:
    """Realized totals per category, annual categories as yearly figures."""
    totals: Dict[str, Dict[str, float]] = {'monthly': {}, 'annual': {}}
    for bucket, collection in (('monthly', monthly), ('annual', annual)):
        for category_key, items in (collection or {}).items():
            totals[bucket][category_key] = float(
                sum(coerce_expense(item).realized_amount for item in items or [])
            )
    return totals


def account_allocations(
    monthly: Optional[ExpenseCollection],
    annual: Optional[ExpenseCollection],
) -> Dict[str, float]:
    """Monthly outflow per paying account; unassigned items are grouped."""
    allocations: Dict[str, float] = {}
    for is_annual, collection in ((False, monthly), (True, annual)):
        for _, expense in iter_expenses(collection):
            account = expense.account or 'Unassigned'
            allocations[account] = allocations.get(account, 0.0) + expense_monthly_amount(expense, is_annual)
    return allocations


def funds_to_set_aside(
    monthly: Optional[ExpenseCollection],
    annual: Optional[ExpenseCollection],
) -> Dict[str, float]:
    """Monthly amount each account has to hold for unpaid expenses.

    The transfer status decides which fraction of the budgeted
    (``projected``) amount must already sit in the account: ``quarter``,
    ``half`` and ``full`` take that share, ``actual`` holds the entered
    ``actual`` figure instead (the legacy ``amount`` alias is not used).
    Paid items and the placeholder accounts ``None``, ``Split`` and
    ``TBD`` are skipped.  Annual items count one twelfth.
    """
    totals: Dict[str, float] = {}
    for is_annual, collection in ((False, monthly), (True, annual)):
        for _, expense in iter_expenses(collection):
            if expense.paid:
                continue
            account = expense.account
            if not account or account in UNFUNDED_ACCOUNTS:
                continue
            base = (expense.actual or 0.0) if expense.transfer_status == 'actual' else expense.projected
            if base <= 0:
                continue
            amount = base * TRANSFER_MULTIPLIERS.get(expense.transfer_status, 0.0)
            if is_annual:
                amount /= MONTHS_PER_YEAR
            if amount > 0:
                totals[account] = totals.get(account, 0.0) + amount
    return totals


def upcoming_expenses(
    monthly: Optional[ExpenseCollection],
    annual: Optional[ExpenseCollection],
    today: Optional[date] = None,
    window_days: int = UPCOMING_WINDOW_DAYS,
) -> List[Dict[str, Any]]:
    """Unpaid expenses due within ``window_days``, overdue ones included.

    Returns:
        Rows with ``name``, ``category``, ``type`` (``monthly``/``annual``),
        ``due``, ``days_until`` and ``amount``, soonest first.
    """
    reference = today or date.today()
    upcoming: List[Dict[str, Any]] = []
    for kind, collection in (('monthly', monthly), ('annual', annual)):
        for category_key, expense in iter_expenses(collection):
            if expense.paid or not expense.date:
                continue
            due = parse_date(expense.date)
            if due is None:
                continue
            days_until = (due - reference).days
            if days_until <= window_days:
                upcoming.append({
                    'name': expense.name,
                    'category': category_key,
                    'type': kind,
                    'due': due,
                    'days_until': days_until,
                    'amount': expense.realized_amount,
                })
    upcoming.sort(key=lambda row: row['days_until'])
    return upcoming
