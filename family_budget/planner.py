"""Weekly planner reconciliation.

The planner keeps one :class:`~family_budget.models.PlannerEntry` per
expense name: five weekly allocations plus independent ``paid`` and
``transferred`` flags per week.  :class:`PlannerReconciler` owns that map;
every write goes through its setters and every total is recomputed from
the full map on each call.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from .constants import QUICK_ACTIONS, STATUS_KINDS, SYSTEM_PLANNER_KEYS, WEEKS_IN_PLANNER
from .models import NormalizedExpense, PlannerEntry
from .parsing import pad_amounts, parse_amount, week_index_for_date

logger = logging.getLogger(__name__)


class InvalidWeekIndex(ValueError):
    """Raised when a caller addresses a week outside 0-4."""


def validate_week_index(week_index: Any) -> int:
    if isinstance(week_index, bool) or not isinstance(week_index, (int, np.integer)):
        raise InvalidWeekIndex(f"Week index must be an integer, got {week_index!r}")
    if not 0 <= week_index < WEEKS_IN_PLANNER:
        raise InvalidWeekIndex(
            f"Week index must be between 0 and {WEEKS_IN_PLANNER - 1}, got {week_index}"
        )
    return int(week_index)


def initial_allocation(monthly_amount: float, due_date: Optional[str] = None) -> List[float]:
    """First-time placement of an expense across the five weeks.

    A readable due date puts the whole amount into that date's week band;
    otherwise the amount is split evenly over all five weeks.
    """
    weeks = [0.0] * WEEKS_IN_PLANNER
    if monthly_amount <= 0:
        return weeks
    target = week_index_for_date(due_date) if due_date else None
    if target is None:
        return [monthly_amount / WEEKS_IN_PLANNER] * WEEKS_IN_PLANNER
    weeks[target] = monthly_amount
    return weeks


def migrate_planner_state(
    planner: Optional[Mapping[str, Any]],
    weekly_status: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Dict[str, List[Any]]]:
    """Merge older planner layouts into canonical entries.

    Older documents stored either a bare list of week amounts per expense
    or kept the paid/transferred flags in a separate status map.  Flags in
    ``weekly_status`` take precedence over flags found on the entry.
    """
    planner = planner or {}
    weekly_status = weekly_status or {}
    merged: Dict[str, Dict[str, List[Any]]] = {}
    for name in list(planner.keys()) + [k for k in weekly_status.keys() if k not in planner]:
        if name in SYSTEM_PLANNER_KEYS:
            continue
        entry = PlannerEntry.from_raw(planner.get(name))
        status = weekly_status.get(name)
        if isinstance(status, Mapping):
            if isinstance(status.get('paid'), (list, tuple)):
                entry = PlannerEntry(entry.weeks, list(status['paid']), entry.transferred)
            if isinstance(status.get('transferred'), (list, tuple)):
                entry = PlannerEntry(entry.weeks, entry.paid, list(status['transferred']))
        merged[name] = entry.to_dict()
    return merged


class PlannerReconciler:
    """Weekly allocations, status flags and the cash flow derived from them."""

    def __init__(
        self,
        planner_state: Optional[Mapping[str, Any]] = None,
        weekly_income: Optional[Iterable[Any]] = None,
    ):
        """Initialize the reconciler.

        Args:
            planner_state: Stored planner map keyed by expense name.  Short
                or malformed entries are padded; legacy system keys are kept
                aside and never counted as expenses.
            weekly_income: Five-week income vector from the income projector.
        """
        self._entries: Dict[str, PlannerEntry] = {}
        self._system: Dict[str, Any] = {}
        for name, raw in (planner_state or {}).items():
            if name in SYSTEM_PLANNER_KEYS:
                self._system[name] = raw
                continue
            self._entries[name] = PlannerEntry.from_raw(raw)
        self.weekly_income: List[float] = pad_amounts(list(weekly_income or []))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def names(self) -> List[str]:
        return list(self._entries.keys())

    def get_planner_entry(self, name: str) -> PlannerEntry:
        """Return a well-formed copy of the entry, all zeros when missing."""
        entry = self._entries.get(name)
        return entry.copy() if entry is not None else PlannerEntry()

    def _entry_for_write(self, name: str) -> PlannerEntry:
        entry = self._entries.get(name)
        if entry is None:
            entry = PlannerEntry()
            self._entries[name] = entry
        return entry

    def ensure_entry(self, name: str, monthly_amount: float = 0.0, due_date: Optional[str] = None) -> bool:
        """Create an entry placed like auto-populate would, unless one exists."""
        if name in self._entries:
            return False
        self._entries[name] = PlannerEntry(weeks=initial_allocation(parse_amount(monthly_amount), due_date))
        return True

    def set_week_amount(self, name: str, week_index: int, amount: Any) -> None:
        week = validate_week_index(week_index)
        self._entry_for_write(name).weeks[week] = parse_amount(amount)
        logger.debug("Planner '%s' week %d set to %s", name, week + 1, amount)

    def set_status(self, name: str, week_index: int, kind: str, value: bool) -> None:
        """Set the ``paid`` or ``transferred`` flag of one week.

        The two flags are independent; setting one never touches the other.
        """
        week = validate_week_index(week_index)
        if kind not in STATUS_KINDS:
            raise ValueError(f"Unknown status kind '{kind}'; expected one of {STATUS_KINDS}")
        self._entry_for_write(name).flags(kind)[week] = bool(value)

    def auto_populate(self, expenses: Iterable[NormalizedExpense]) -> List[str]:
        """Create entries for expenses that have a positive amount and none yet.

        Existing entries are never overwritten, so calling this repeatedly
        is safe.

        Returns:
            Names of the entries that were created.
        """
        created: List[str] = []
        for expense in expenses:
            if expense.monthly_amount <= 0 or expense.name in self._entries:
                continue
            self._entries[expense.name] = PlannerEntry(
                weeks=initial_allocation(expense.monthly_amount, expense.date)
            )
            created.append(expense.name)
        if created:
            logger.info("Auto-populated %d planner entries", len(created))
        return created

    def weekly_expense_totals(self) -> List[float]:
        totals = [0.0] * WEEKS_IN_PLANNER
        for name, entry in self._entries.items():
            if name in SYSTEM_PLANNER_KEYS:
                continue
            for week, amount in enumerate(entry.weeks):
                totals[week] += parse_amount(amount)
        return totals

    def remaining_balance(self, expense: NormalizedExpense, entry: Any = None) -> float:
        """Monthly amount not yet allocated to any week (negative when over)."""
        if entry is None:
            entry = self._entries.get(expense.name)
        allocated = PlannerEntry.from_raw(entry).allocated
        return parse_amount(expense.monthly_amount) - allocated

    def cash_flow(self) -> List[float]:
        expenses = self.weekly_expense_totals()
        return [self.weekly_income[week] - expenses[week] for week in range(WEEKS_IN_PLANNER)]

    def weekly_cash_flow(self, week_index: int) -> float:
        week = validate_week_index(week_index)
        return self.weekly_income[week] - self.weekly_expense_totals()[week]

    def monthly_cash_flow(self) -> float:
        return sum(self.weekly_income) - sum(self.weekly_expense_totals())

    def cumulative_cash_flow(self) -> List[float]:
        return [float(v) for v in np.cumsum(self.cash_flow())]

    def apply_quick_action(self, name: str, week_index: int, action: str, monthly_amount: float) -> float:
        """Fill one week with a share of the monthly amount.

        ``full``, ``half`` and ``quarter`` take that share of
        ``monthly_amount``; ``reset`` clears the week.

        Returns:
            The amount written into the week.
        """
        if action not in QUICK_ACTIONS:
            raise ValueError(f"Unknown planner action '{action}'")
        amount = parse_amount(monthly_amount) * QUICK_ACTIONS[action]
        self.set_week_amount(name, week_index, amount)
        return amount

    def reset_week(self, week_index: int) -> None:
        week = validate_week_index(week_index)
        for entry in self._entries.values():
            entry.weeks[week] = 0.0
        logger.info("Reset planner week %d", week + 1)

    def reset_all_weeks(self) -> None:
        for entry in self._entries.values():
            entry.weeks = [0.0] * WEEKS_IN_PLANNER
        logger.info("Reset all planner weeks")

    def status_summary(self, name: str) -> Dict[str, bool]:
        entry = self.get_planner_entry(name)
        return {
            'has_paid': any(entry.paid),
            'has_transferred': any(entry.transferred),
            'all_paid': all(entry.paid),
            'all_transferred': all(entry.transferred),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Planner map in its stored shape, legacy system keys included."""
        state: Dict[str, Any] = {name: entry.to_dict() for name, entry in self._entries.items()}
        state.update(self._system)
        return state

    def planner_frame(self, expenses: Iterable[NormalizedExpense]) -> pd.DataFrame:
        """One row per expense: monthly amount, weekly allocations and remainder."""
        rows = []
        for expense in expenses:
            entry = self.get_planner_entry(expense.name)
            row: Dict[str, Any] = {
                'Category': expense.category_name,
                'Expense': expense.name,
                'Monthly Amount': expense.monthly_amount,
            }
            for week, amount in enumerate(entry.weeks):
                row[f'Week {week + 1}'] = amount
            row['Remaining'] = self.remaining_balance(expense, entry)
            rows.append(row)
        columns = ['Category', 'Expense', 'Monthly Amount'] + [
            f'Week {w + 1}' for w in range(WEEKS_IN_PLANNER)
        ] + ['Remaining']
        return pd.DataFrame(rows, columns=columns)

    def cash_flow_frame(self) -> pd.DataFrame:
        """Income, expenses, net flow and running balance for each week."""
        expenses = self.weekly_expense_totals()
        frame = pd.DataFrame({
            'Week': [f'Week {w + 1}' for w in range(WEEKS_IN_PLANNER)],
            'Income': self.weekly_income,
            'Expenses': expenses,
        })
        frame['Net Flow'] = frame['Income'] - frame['Expenses']
        frame['Cumulative'] = frame['Net Flow'].cumsum()
        frame['Status'] = np.where(frame['Net Flow'] >= 0, 'Surplus', 'Deficit')
        return frame
