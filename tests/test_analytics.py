from datetime import date

import pytest

from family_budget.analytics import (
    budget_health,
    monthly_projections,
    net_monthly_income,
    planning_insights,
    savings_rate,
    top_expense_categories,
    total_monthly_outflow,
    variance_analysis,
)
from family_budget.models import BudgetMonth
from family_budget.state import build_reconciler, load_state

JUNE_2025 = BudgetMonth(2025, 5)


def _state(income=4000):
    return load_state({
        'income': [{'name': 'Salary', 'frequency': 'monthly', 'projectedAmount': income}],
        'monthly': {
            'housing': [{'name': 'Rent', 'actual': 1500, 'date': '2025-06-20'}],
            'food': [{'name': 'Groceries', 'actual': 500}],
        },
        'annual': {
            'yearly-insurance': [{'name': 'Car Insurance', 'actual': 1200}],
        },
    })


def test_monthly_summary():
    state = _state()
    assert total_monthly_outflow(state) == pytest.approx(2100)
    assert net_monthly_income(state) == pytest.approx(1900)
    assert savings_rate(state) == pytest.approx(47.5)
    assert savings_rate(_state(income=0)) == 0.0


def test_budget_health():
    health = budget_health(_state(), today=date(2025, 6, 1))

    assert health['budget_utilization'] == pytest.approx(52.5)
    assert health['income_to_expense_ratio'] == pytest.approx(4000 / 2100)
    assert health['emergency_fund_weeks'] == pytest.approx(1900 * 4 / 2100)
    assert health['upcoming_expenses_count'] == 1
    assert health['overdue_expenses_count'] == 0
    assert health['cash_flow_status'] == 'positive'


def test_monthly_projections_roll_over_year_end():
    frame = monthly_projections(_state(), BudgetMonth(2025, 10), months=3)

    assert list(frame['Month']) == ['November 2025', 'December 2025', 'January 2026']
    assert list(frame['Cumulative']) == pytest.approx([1900, 3800, 5700])


def test_top_expense_categories_amortize_annual():
    top = top_expense_categories(_state(), limit=3)

    assert [row['key'] for row in top] == ['housing', 'food', 'yearly-insurance']
    assert top[2]['total'] == pytest.approx(100)


def test_variance_analysis_matches_budget_when_fully_planned():
    state = _state()
    variance = variance_analysis(state, build_reconciler(state, JUNE_2025))

    assert variance['planned_income'] == pytest.approx(4000)
    assert variance['planned_expenses'] == pytest.approx(2100)
    assert variance['income_variance'] == pytest.approx(0)
    assert variance['net_variance'] == pytest.approx(0)


def test_planning_insights_positive_plan():
    state = load_state({
        'income': [{'name': 'Salary', 'frequency': 'monthly', 'projectedAmount': 4000}],
        'monthly': {'housing': [{'name': 'Rent', 'actual': 1500, 'date': '2025-06-02'}]},
    })
    insights = planning_insights(state, build_reconciler(state, JUNE_2025))

    assert [i['level'] for i in insights] == ['success']


def test_planning_insights_flag_deficits():
    state = load_state({
        'income': [{'name': 'Salary', 'frequency': 'monthly', 'projectedAmount': 1000}],
        'monthly': {'housing': [{'name': 'Rent', 'actual': 1500}]},
    })
    insights = planning_insights(state, build_reconciler(state, JUNE_2025))

    assert [i['level'] for i in insights] == ['warning', 'warning']
    assert '$500.00' in insights[0]['message']
    assert insights[1]['message'].startswith('4 week(s)')
