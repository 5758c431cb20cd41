"""Budget-level summary statistics.

Monthly totals, health ratios, twelve-month projections and the planner
variance checks shown next to the weekly grid.  Figures are monthly:
income uses each source's month-aware amount and annual expenses count
one twelfth.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from .constants import MONTHS_PER_YEAR, SIGNIFICANT_VARIANCE
from .expenses import (
    category_totals,
    monthly_annual_impact,
    total_monthly_expenses,
    upcoming_expenses,
)
from .income import total_projected_income
from .models import BudgetMonth
from .planner import PlannerReconciler
from .state import BudgetState


def total_monthly_outflow(state: BudgetState) -> float:
    return total_monthly_expenses(state.monthly) + monthly_annual_impact(state.annual)


def net_monthly_income(state: BudgetState) -> float:
    return total_projected_income(state.income) - total_monthly_outflow(state)


def savings_rate(state: BudgetState) -> float:
    """Net monthly income as a percentage of income (0 without income)."""
    income = total_projected_income(state.income)
    if income <= 0:
        return 0.0
    return net_monthly_income(state) / income * 100.0


def budget_health(state: BudgetState, today: Optional[date] = None) -> Dict[str, Any]:
    """Headline ratios for the budget overview.

    Returns:
        Dictionary with ``income_to_expense_ratio``, ``budget_utilization``
        (outflow as % of income), ``savings_rate``,
        ``emergency_fund_weeks``, ``upcoming_expenses_count``,
        ``overdue_expenses_count`` and ``cash_flow_status``.
    """
    income = total_projected_income(state.income)
    outflow = total_monthly_outflow(state)
    net = income - outflow
    upcoming = upcoming_expenses(state.monthly, state.annual, today)
    return {
        'income_to_expense_ratio': (income / outflow) if income > 0 and outflow > 0 else 0.0,
        'budget_utilization': (outflow / income * 100.0) if income > 0 else 0.0,
        'savings_rate': savings_rate(state),
        'emergency_fund_weeks': (net * 4 / outflow) if net > 0 and outflow > 0 else 0.0,
        'upcoming_expenses_count': len(upcoming),
        'overdue_expenses_count': sum(1 for row in upcoming if row['days_until'] < 0),
        'cash_flow_status': 'positive' if net >= 0 else 'negative',
    }


def monthly_projections(state: BudgetState, start: BudgetMonth, months: int = MONTHS_PER_YEAR) -> pd.DataFrame:
    """Flat month-by-month projection with a running cumulative balance.

    Returns:
        DataFrame with columns: Month, Income, Expenses, Net Flow, Cumulative
    """
    income = total_projected_income(state.income)
    expenses = total_monthly_outflow(state)
    frame = pd.DataFrame({
        'Month': [start.shift(i).label for i in range(months)],
        'Income': [income] * months,
        'Expenses': [expenses] * months,
    })
    frame['Net Flow'] = frame['Income'] - frame['Expenses']
    frame['Cumulative'] = frame['Net Flow'].cumsum()
    return frame


def top_expense_categories(state: BudgetState, limit: int = 5) -> List[Dict[str, Any]]:
    """Largest categories by monthly cost, annual categories amortized."""
    totals = category_totals(state.monthly, state.annual)
    rows = [
        {'key': key, 'total': total, 'type': 'monthly'}
        for key, total in totals['monthly'].items()
    ] + [
        {'key': key, 'total': total / MONTHS_PER_YEAR, 'type': 'annual'}
        for key, total in totals['annual'].items()
    ]
    rows.sort(key=lambda row: row['total'], reverse=True)
    return rows[:limit]


def variance_analysis(state: BudgetState, reconciler: PlannerReconciler) -> Dict[str, float]:
    """Compare what the weekly plan holds against the monthly budget."""
    planned_income = sum(reconciler.weekly_income)
    planned_expenses = sum(reconciler.weekly_expense_totals())
    budget_income = total_projected_income(state.income)
    budget_expenses = total_monthly_outflow(state)
    return {
        'planned_income': planned_income,
        'planned_expenses': planned_expenses,
        'income_variance': planned_income - budget_income,
        'expense_variance': planned_expenses - budget_expenses,
        'net_variance': (planned_income - planned_expenses) - (budget_income - budget_expenses),
    }


def planning_insights(state: BudgetState, reconciler: PlannerReconciler) -> List[Dict[str, str]]:
    """Short warnings and confirmations about the current weekly plan."""
    insights: List[Dict[str, str]] = []
    flows = reconciler.cash_flow()
    net = reconciler.monthly_cash_flow()
    negative_weeks = sum(1 for flow in flows if flow < 0)

    if net < 0:
        insights.append({'level': 'warning', 'message': f"Weekly planning shows a deficit of ${abs(net):,.2f}"})
    if negative_weeks:
        insights.append({'level': 'warning', 'message': f"{negative_weeks} week(s) show negative cash flow"})
    if abs(variance_analysis(state, reconciler)['income_variance']) > SIGNIFICANT_VARIANCE:
        insights.append({
            'level': 'info',
            'message': 'Significant variance from monthly budget - review planning assumptions',
        })
    if net >= 0 and not negative_weeks:
        insights.append({'level': 'success', 'message': 'All weeks show positive cash flow'})
    return insights
