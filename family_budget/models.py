"""Canonical record types for the budget engine.

Budget documents carry several generations of field names (``amount``
versus ``actual``, a ``weeks`` list versus ``payDates``/``payActuals``).
The ``from_dict`` constructors below fold all of them into one shape at
ingestion so the engine never has to look at legacy keys again.
"""

from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .constants import (
    ACTUAL_MODE_MONTHLY_TOTAL,
    DAYS_PER_WEEK_BAND,
    MAX_PAY_DATES,
    STATUS_KINDS,
    TRANSFER_STATUSES,
    WEEKS_IN_PLANNER,
)
from .parsing import pad_amounts, pad_flags, parse_amount, parse_optional_amount


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass
class IncomeSource:
    name: str
    frequency: str = 'monthly'
    projected_amount: float = 0.0
    actual_amount: Optional[float] = None
    pay_dates: List[str] = field(default_factory=list)
    pay_actuals: List[Optional[float]] = field(default_factory=list)
    actual_mode: Optional[str] = None
    weeks: Optional[List[float]] = None
    account: str = ''
    notes: str = ''
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IncomeSource':
        """Build a source from a stored record, resolving legacy fields."""
        data = data or {}
        frequency = str(data.get('frequency') or 'monthly')

        legacy_weeks = data.get('weeks')
        weeks = pad_amounts(legacy_weeks) if isinstance(legacy_weeks, (list, tuple)) else None

        projected = _first_present(data, 'projectedAmount', 'projected_amount', 'amount')
        if projected is not None:
            projected_amount = parse_amount(projected)
        else:
            projected_amount = sum(weeks) if weeks else 0.0

        raw_dates = _first_present(data, 'payDates', 'pay_dates') or []
        raw_actuals = _first_present(data, 'payActuals', 'pay_actuals') or []
        limit = MAX_PAY_DATES.get(frequency, 0)
        pay_dates = (
            [str(d) if d is not None else '' for d in list(raw_dates)[:limit]]
            if isinstance(raw_dates, (list, tuple))
            else []
        )
        pay_actuals = (
            [parse_optional_amount(v) for v in list(raw_actuals)[:limit]]
            if isinstance(raw_actuals, (list, tuple))
            else []
        )

        mode = _first_present(data, 'actualMode', 'actual_mode')
        return cls(
            name=str(_first_present(data, 'name', 'source') or ''),
            frequency=frequency,
            projected_amount=projected_amount,
            actual_amount=parse_optional_amount(_first_present(data, 'actualAmount', 'actual_amount')),
            pay_dates=pay_dates,
            pay_actuals=pay_actuals,
            actual_mode=str(mode) if mode else None,
            weeks=weeks,
            account=str(data.get('account') or ''),
            notes=str(data.get('notes') or ''),
            id=str(data['id']) if data.get('id') is not None else None,
        )

    @property
    def uses_monthly_total(self) -> bool:
        return self.actual_mode == ACTUAL_MODE_MONTHLY_TOTAL

    def pay_actual_at(self, index: int) -> Optional[float]:
        if 0 <= index < len(self.pay_actuals):
            return self.pay_actuals[index]
        return None

    @property
    def has_pay_dates(self) -> bool:
        return any(str(d).strip() for d in self.pay_dates)

    def has_pay_actuals(self) -> bool:
        return any(v is not None for v in self.pay_actuals)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'name': self.name,
            'frequency': self.frequency,
            'projectedAmount': self.projected_amount,
            'actualAmount': self.actual_amount,
            'payDates': list(self.pay_dates),
            'payActuals': list(self.pay_actuals),
            'account': self.account,
            'notes': self.notes,
        }
        if self.actual_mode:
            payload['actualMode'] = self.actual_mode
        if self.weeks is not None:
            payload['weeks'] = list(self.weeks)
        if self.id is not None:
            payload['id'] = self.id
        return payload


@dataclass
class Expense:
    name: str
    amount: Optional[float] = None
    projected: float = 0.0
    actual: Optional[float] = None
    date: Optional[str] = None
    account_id: Optional[str] = None
    account: str = ''
    paid: bool = False
    transferred: bool = False
    transfer_status: str = 'none'
    frequency: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Expense':
        data = data or {}
        status = str(_first_present(data, 'transferStatus', 'transfer_status') or 'none')
        if status not in TRANSFER_STATUSES:
            status = 'none'
        due = data.get('date')
        account_id = _first_present(data, 'accountId', 'account_id')
        return cls(
            name=str(data.get('name') or ''),
            amount=parse_optional_amount(data.get('amount')),
            projected=parse_amount(data.get('projected')),
            actual=parse_optional_amount(data.get('actual')),
            date=str(due) if due else None,
            account_id=str(account_id) if account_id is not None else None,
            account=str(data.get('account') or ''),
            paid=bool(data.get('paid', False)),
            transferred=bool(data.get('transferred', False)),
            transfer_status=status,
            frequency=data.get('frequency'),
            id=str(data['id']) if data.get('id') is not None else None,
        )

    @property
    def realized_amount(self) -> float:
        """``actual`` when entered, else the legacy ``amount`` alias, else zero."""
        if self.actual is not None:
            return self.actual
        if self.amount is not None:
            return self.amount
        return 0.0

    def matches(self, name: Optional[str] = None, expense_id: Optional[str] = None) -> bool:
        if expense_id is not None and self.id is not None and self.id == expense_id:
            return True
        return bool(name) and self.name == name

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'name': self.name,
            'projected': self.projected,
            'actual': self.actual,
            'date': self.date,
            'account': self.account,
            'paid': self.paid,
            'transferred': self.transferred,
            'transferStatus': self.transfer_status,
        }
        if self.amount is not None:
            payload['amount'] = self.amount
        if self.account_id is not None:
            payload['accountId'] = self.account_id
        if self.frequency is not None:
            payload['frequency'] = self.frequency
        if self.id is not None:
            payload['id'] = self.id
        return payload


@dataclass
class PlannerEntry:
    """Per-expense weekly allocation with independent paid/transferred flags."""

    weeks: List[float] = field(default_factory=lambda: [0.0] * WEEKS_IN_PLANNER)
    paid: List[bool] = field(default_factory=lambda: [False] * WEEKS_IN_PLANNER)
    transferred: List[bool] = field(default_factory=lambda: [False] * WEEKS_IN_PLANNER)

    def __post_init__(self) -> None:
        self.weeks = pad_amounts(self.weeks)
        self.paid = pad_flags(self.paid)
        self.transferred = pad_flags(self.transferred)

    @classmethod
    def from_raw(cls, raw: Any) -> 'PlannerEntry':
        """Accept a stored entry, a bare list of week amounts, or nothing."""
        if isinstance(raw, PlannerEntry):
            return cls(list(raw.weeks), list(raw.paid), list(raw.transferred))
        if isinstance(raw, (list, tuple)):
            return cls(weeks=list(raw))
        if isinstance(raw, dict):
            return cls(
                weeks=raw.get('weeks') or [],
                paid=raw.get('paid') or [],
                transferred=raw.get('transferred') or [],
            )
        return cls()

    def flags(self, kind: str) -> List[bool]:
        if kind not in STATUS_KINDS:
            raise ValueError(f"Unknown status kind '{kind}'")
        return self.paid if kind == 'paid' else self.transferred

    @property
    def allocated(self) -> float:
        return float(sum(self.weeks))

    def copy(self) -> 'PlannerEntry':
        return PlannerEntry.from_raw(self)

    def to_dict(self) -> Dict[str, List[Any]]:
        return asdict(self)


@dataclass(frozen=True)
class BudgetMonth:
    """Year and zero-based month (0 = January) that anchors the weekly grid."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 0 <= self.month <= 11:
            raise ValueError(f"Month must be between 0 and 11, got {self.month}")

    @classmethod
    def from_date(cls, value: date) -> 'BudgetMonth':
        return cls(value.year, value.month - 1)

    @classmethod
    def parse(cls, value: Any) -> Optional['BudgetMonth']:
        """Read ``"2025-06"`` or ``"June 2025"``; ``None`` when unreadable."""
        if isinstance(value, BudgetMonth):
            return value
        if not isinstance(value, str) or not value.strip():
            return None
        text = value.strip()
        try:
            if '-' in text:
                year_text, month_text = text.split('-')[:2]
                year, month = int(year_text), int(month_text)
            else:
                month_name, year_text = text.split()
                names = [calendar.month_name[i].lower() for i in range(1, 13)]
                month = names.index(month_name.lower()) + 1
                year = int(year_text)
        except ValueError:
            return None
        if not 1 <= month <= 12:
            return None
        return cls(year, month - 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month + 1)[1]

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month + 1]} {self.year}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month + 1, 1)

    def contains(self, value: Optional[date]) -> bool:
        return value is not None and value.year == self.year and value.month == self.month + 1

    def week_ranges(self) -> List[Optional[Tuple[date, date]]]:
        """Start and end date of each week band, ``None`` for an empty week 5."""
        ranges: List[Optional[Tuple[date, date]]] = []
        last = self.days_in_month
        for week in range(WEEKS_IN_PLANNER):
            start_day = 1 + week * DAYS_PER_WEEK_BAND
            if start_day > last:
                ranges.append(None)
                continue
            end_day = last if week == WEEKS_IN_PLANNER - 1 else min(start_day + DAYS_PER_WEEK_BAND - 1, last)
            ranges.append((date(self.year, self.month + 1, start_day), date(self.year, self.month + 1, end_day)))
        return ranges

    def shift(self, months: int) -> 'BudgetMonth':
        index = self.year * 12 + self.month + months
        return BudgetMonth(index // 12, index % 12)


@dataclass
class NormalizedExpense:
    name: str
    category_key: str
    category_name: str
    monthly_amount: float
    is_annual: bool = False
    original_annual_amount: Optional[float] = None
    date: Optional[str] = None
    expense_id: Optional[str] = None
