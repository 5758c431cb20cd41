"""Shared constants for the budget engine.

Frequency multipliers, pay-date limits, category catalogues and the
transfer-status fractions used by the funds summary.
"""

from __future__ import annotations

from typing import Dict, List

WEEKS_IN_PLANNER = 5
DAYS_PER_WEEK_BAND = 7
MONTHS_PER_YEAR = 12

FREQUENCIES = (
    'weekly',
    'bi-weekly',
    'monthly',
    'quarterly',
    'semi-annual',
    'annual',
    'one-time',
)

# Monthly total of one pay period for each frequency.
MONTHLY_MULTIPLIERS: Dict[str, float] = {
    'weekly': 52 / 12,
    'bi-weekly': 26 / 12,
    'monthly': 1.0,
    'quarterly': 1 / 3,
    'semi-annual': 1 / 6,
    'annual': 1 / 12,
    'one-time': 0.0,
}

# How many explicit pay dates a source may carry within one month.
MAX_PAY_DATES: Dict[str, int] = {
    'weekly': 5,
    'bi-weekly': 3,
    'monthly': 1,
    'one-time': 1,
}

ACTUAL_MODE_MONTHLY_TOTAL = 'monthly-total'

STATUS_KINDS = ('paid', 'transferred')

QUICK_ACTIONS: Dict[str, float] = {
    'reset': 0.0,
    'quarter': 0.25,
    'half': 0.5,
    'full': 1.0,
}

TRANSFER_STATUSES = ('none', 'quarter', 'half', 'full', 'actual')
TRANSFER_MULTIPLIERS: Dict[str, float] = {
    'none': 0.0,
    'quarter': 0.25,
    'half': 0.5,
    'full': 1.0,
    'actual': 1.0,
}
# Accounts that never receive a set-aside transfer.
UNFUNDED_ACCOUNTS = {'None', 'Split', 'TBD'}

# Keys written into planner storage by older versions of the weekly page.
SYSTEM_PLANNER_KEYS = frozenset({'weeklyIncome', 'weeklyExpenses', 'monthlyTargets'})

UPCOMING_WINDOW_DAYS = 30
DUE_SOON_DAYS = 7
SIGNIFICANT_VARIANCE = 100.0

MONTHLY_CATEGORIES: List[Dict[str, str]] = [
    {'key': 'housing', 'name': 'Housing'},
    {'key': 'taxes', 'name': 'Taxes'},
    {'key': 'utilities', 'name': 'Utilities'},
    {'key': 'insurance', 'name': 'Insurance'},
    {'key': 'banking', 'name': 'Banking'},
    {'key': 'loans', 'name': 'Loans'},
    {'key': 'credit', 'name': 'Credit'},
    {'key': 'subscriptions', 'name': 'Subscriptions'},
    {'key': 'food', 'name': 'Food'},
    {'key': 'transportation', 'name': 'Transportation'},
    {'key': 'medical', 'name': 'Medical'},
    {'key': 'personal', 'name': 'Personal'},
    {'key': 'shopping', 'name': 'Shopping'},
    {'key': 'dog', 'name': 'Pet Care'},
    {'key': 'maintenance', 'name': 'Maintenance'},
    {'key': 'gifts', 'name': 'Gifts'},
]

ANNUAL_CATEGORIES: List[Dict[str, str]] = [
    {'key': 'yearly-subs', 'name': 'Annual Subscriptions'},
    {'key': 'yearly-car', 'name': 'Annual Car Expenses'},
    {'key': 'yearly-bank', 'name': 'Annual Banking'},
    {'key': 'yearly-insurance', 'name': 'Annual Insurance'},
    {'key': 'yearly-taxes', 'name': 'Annual Taxes'},
    {'key': 'yearly-travel', 'name': 'Travel & Vacation'},
    {'key': 'yearly-education', 'name': 'Education'},
    {'key': 'yearly-professional', 'name': 'Professional Development'},
]

DEFAULT_ACCOUNTS = [
    'Main Checking',
    'Savings Account',
    'Emergency Fund',
    'Credit Card',
    'Cash',
    'Investment Account',
]


def default_category_names() -> Dict[str, str]:
    """Display names for every built-in category key."""
    return {c['key']: c['name'] for c in MONTHLY_CATEGORIES + ANNUAL_CATEGORIES}


def category_display_name(key: str, names: Dict[str, str] | None = None) -> str:
    lookup = {**default_category_names(), **(names or {})}
    if key in lookup:
        return lookup[key]
    return key[:1].upper() + key[1:]
