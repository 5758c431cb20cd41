#!/usr/bin/env python3
"""Print the five-week cash flow for a saved budget document."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from family_budget.config import configure_logging
from family_budget.expenses import normalize_expenses
from family_budget.models import BudgetMonth
from family_budget.state import build_reconciler, budget_month_for
from family_budget.storage import BudgetStorage


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Show the weekly cash flow of a budget file.')
    parser.add_argument('--file', type=Path, default=None, help='Budget JSON file (defaults to the configured one)')
    parser.add_argument('--month', default=None, help='Budget month, e.g. 2025-06 (inferred from pay dates otherwise)')
    parser.add_argument('--allocations', action='store_true', help='Also print the per-expense weekly grid')
    args = parser.parse_args(argv)

    configure_logging()
    storage = BudgetStorage(args.file)
    if not storage.exists():
        print(f"Budget file not found: {storage.path}")
        return 1

    state = storage.load()
    month = BudgetMonth.parse(args.month) if args.month else budget_month_for(state)
    if month is None:
        print(f"Invalid month: {args.month}")
        return 2

    reconciler = build_reconciler(state, month)
    print(f"Cash flow for {month.label}:")
    print(reconciler.cash_flow_frame().to_string(index=False))
    print(f"\nMonth net: {reconciler.monthly_cash_flow():,.2f}")

    if args.allocations:
        expenses = normalize_expenses(state.monthly, state.annual, state.category_names)
        print("\nAllocations:")
        print(reconciler.planner_frame(expenses).to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
