"""Budget state and the pure reducers that update it.

All budget data travels as one :class:`BudgetState` value.  Reducers take
a state plus the change and return a new state; the input is never
modified, so callers can keep the previous value for undo or diffing.
Persistence lives in :mod:`family_budget.storage`; nothing here does I/O.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from .constants import ANNUAL_CATEGORIES, MONTHLY_CATEGORIES, STATUS_KINDS
from .expenses import coerce_expense, expense_monthly_amount, normalize_expenses
from .income import coerce_sources, infer_budget_month, project_weekly_income
from .models import BudgetMonth, Expense, IncomeSource
from .planner import PlannerReconciler, migrate_planner_state, validate_week_index

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _empty_collection(catalogue: List[Dict[str, str]]) -> Dict[str, List[Expense]]:
    return {c['key']: [] for c in catalogue}


@dataclass
class BudgetState:
    income: List[IncomeSource] = field(default_factory=list)
    monthly: Dict[str, List[Expense]] = field(default_factory=lambda: _empty_collection(MONTHLY_CATEGORIES))
    annual: Dict[str, List[Expense]] = field(default_factory=lambda: _empty_collection(ANNUAL_CATEGORIES))
    accounts: List[Dict[str, Any]] = field(default_factory=list)
    planner: Dict[str, Any] = field(default_factory=dict)
    category_names: Dict[str, str] = field(default_factory=dict)
    notes: str = ''
    last_updated: Optional[str] = None

    def collection(self, kind: str) -> Dict[str, List[Expense]]:
        if kind == 'monthly':
            return self.monthly
        if kind == 'annual':
            return self.annual
        raise ValueError(f"Expense collection must be 'monthly' or 'annual', got '{kind}'")


@dataclass
class CashFlowView:
    month: BudgetMonth
    weekly_income: List[float]
    weekly_expenses: List[float]
    cash_flow: List[float]
    cumulative: List[float]
    monthly_cash_flow: float


def _touch(state: BudgetState, **changes: Any) -> BudgetState:
    return replace(state, last_updated=_timestamp(), **changes)


def load_state(data: Optional[Dict[str, Any]]) -> BudgetState:
    """Build a state from a plain budget document, normalising every record."""
    data = data or {}

    def _collection(raw: Any, catalogue: List[Dict[str, str]]) -> Dict[str, List[Expense]]:
        if not isinstance(raw, dict) or not raw:
            return _empty_collection(catalogue)
        return {
            str(key): [coerce_expense(item) for item in (items or []) if isinstance(item, (dict, Expense))]
            for key, items in raw.items()
        }

    accounts = data.get('accounts') or []
    if isinstance(accounts, dict):
        accounts = list(accounts.values())
    planner = data.get('plannerState') or data.get('planner') or {}
    return BudgetState(
        income=coerce_sources(data.get('income') if isinstance(data.get('income'), list) else []),
        monthly=_collection(data.get('monthly'), MONTHLY_CATEGORIES),
        annual=_collection(data.get('annual'), ANNUAL_CATEGORIES),
        accounts=[dict(a) for a in accounts if isinstance(a, dict)],
        planner=migrate_planner_state(planner if isinstance(planner, dict) else {}, data.get('weeklyStatus')),
        category_names=dict(data.get('categoryNames') or {}),
        notes=str(data.get('notes') or ''),
        last_updated=data.get('lastUpdated'),
    )


def reset_state() -> BudgetState:
    return BudgetState(last_updated=_timestamp())


def update_income(state: BudgetState, income: List[Any]) -> BudgetState:
    return _touch(state, income=coerce_sources(income))


def upsert_expense(state: BudgetState, kind: str, category: str, expense: Any, index: Optional[int] = None) -> BudgetState:
    """Append an expense to a category, or replace the one at ``index``."""
    collection = copy.deepcopy(state.collection(kind))
    items = collection.setdefault(category, [])
    record = coerce_expense(expense)
    if index is None:
        items.append(record)
    elif 0 <= index < len(items):
        items[index] = record
    else:
        raise IndexError(f"No {kind} expense at index {index} in '{category}'")
    return _touch(state, **{kind: collection})


def remove_expense(state: BudgetState, kind: str, category: str, index: int) -> BudgetState:
    """Drop one expense.  Its planner entry is left in place."""
    collection = copy.deepcopy(state.collection(kind))
    if category in collection:
        collection[category] = [e for i, e in enumerate(collection[category]) if i != index]
    return _touch(state, **{kind: collection})


def add_category(state: BudgetState, kind: str, category: str, display_name: Optional[str] = None) -> BudgetState:
    collection = copy.deepcopy(state.collection(kind))
    collection.setdefault(category, [])
    names = dict(state.category_names)
    if display_name:
        names[category] = display_name
    return _touch(state, **{kind: collection, 'category_names': names})


def remove_category(state: BudgetState, kind: str, category: str) -> BudgetState:
    collection = copy.deepcopy(state.collection(kind))
    collection.pop(category, None)
    return _touch(state, **{kind: collection})


def add_account(state: BudgetState, account: Dict[str, Any]) -> BudgetState:
    return _touch(state, accounts=[dict(a) for a in state.accounts] + [dict(account)])


def update_account(state: BudgetState, account: Dict[str, Any]) -> BudgetState:
    accounts = [
        {**a, **account} if a.get('id') == account.get('id') else dict(a)
        for a in state.accounts
    ]
    return _touch(state, accounts=accounts)


def remove_account(state: BudgetState, account_id: Any) -> BudgetState:
    return _touch(state, accounts=[dict(a) for a in state.accounts if a.get('id') != account_id])


def _find_expense(collection: Dict[str, List[Expense]], name: Optional[str], expense_id: Optional[str]) -> Optional[Expense]:
    for items in collection.values():
        for expense in items:
            if expense.matches(name, expense_id):
                return expense
    return None


def _ensure_planned(reconciler: PlannerReconciler, state: BudgetState, name: str, expense_id: Optional[str] = None) -> None:
    """Create the entry for ``name``, placed like auto-populate, if it has none."""
    if name in reconciler:
        return
    match = _find_expense(state.monthly, name, expense_id)
    is_annual = False
    if match is None:
        match = _find_expense(state.annual, name, expense_id)
        is_annual = match is not None
    monthly_amount = expense_monthly_amount(match, is_annual) if match is not None else 0.0
    reconciler.ensure_entry(name, monthly_amount, match.date if match is not None else None)


def set_week_amount(state: BudgetState, name: str, week_index: int, amount: Any) -> BudgetState:
    """Replace one week of an expense's allocation.

    An expense without a stored entry first gets the placement the
    planner view showed for it, so the other weeks survive the edit.
    """
    validate_week_index(week_index)
    reconciler = PlannerReconciler(state.planner)
    _ensure_planned(reconciler, state, name)
    reconciler.set_week_amount(name, week_index, amount)
    return _touch(state, planner=reconciler.to_dict())


def auto_populate_planner(state: BudgetState) -> BudgetState:
    reconciler = PlannerReconciler(state.planner)
    created = reconciler.auto_populate(normalize_expenses(state.monthly, state.annual, state.category_names))
    if not created:
        return state
    return _touch(state, planner=reconciler.to_dict())


def update_expense_status(
    state: BudgetState,
    expense_name: str,
    week_index: Optional[int],
    status_type: str,
    checked: bool,
    expense_id: Optional[str] = None,
    source: str = 'weekly',
) -> BudgetState:
    """Toggle a paid/transferred flag and sync it across the budget.

    The planner week flag is set first (creating the entry, placed like
    auto-populate, if the expense has none).  The expense-level flag on
    every monthly and annual expense matching the name or id then follows:
    from the weekly planner it is set only once all five weeks carry the
    flag, from the expense pages it takes ``checked`` directly.
    """
    if status_type not in STATUS_KINDS:
        raise ValueError(f"Unknown status kind '{status_type}'")

    reconciler = PlannerReconciler(state.planner)
    _ensure_planned(reconciler, state, expense_name, expense_id)

    if week_index is not None:
        reconciler.set_status(expense_name, week_index, status_type, checked)

    overall = bool(checked)
    if source == 'weekly':
        overall = all(reconciler.get_planner_entry(expense_name).flags(status_type))

    def _sync(collection: Dict[str, List[Expense]]) -> Dict[str, List[Expense]]:
        return {
            key: [
                replace(e, **{status_type: overall}) if e.matches(expense_name, expense_id) else e
                for e in items
            ]
            for key, items in collection.items()
        }

    return _touch(
        state,
        monthly=_sync(state.monthly),
        annual=_sync(state.annual),
        planner=reconciler.to_dict(),
    )


def budget_month_for(state: BudgetState, today: Optional[date] = None) -> BudgetMonth:
    return infer_budget_month(state.income, today)


def build_reconciler(state: BudgetState, month: Optional[BudgetMonth] = None) -> PlannerReconciler:
    """Reconciler over a copy of the planner, with income and missing entries filled in."""
    month = month or budget_month_for(state)
    reconciler = PlannerReconciler(state.planner, project_weekly_income(state.income, month))
    reconciler.auto_populate(normalize_expenses(state.monthly, state.annual, state.category_names))
    return reconciler


def build_cash_flow_view(state: BudgetState, month: Optional[BudgetMonth] = None, today: Optional[date] = None) -> CashFlowView:
    """Run the whole pipeline for one month without touching ``state``."""
    month = month or budget_month_for(state, today)
    reconciler = build_reconciler(state, month)
    return CashFlowView(
        month=month,
        weekly_income=list(reconciler.weekly_income),
        weekly_expenses=reconciler.weekly_expense_totals(),
        cash_flow=reconciler.cash_flow(),
        cumulative=reconciler.cumulative_cash_flow(),
        monthly_cash_flow=reconciler.monthly_cash_flow(),
    )
