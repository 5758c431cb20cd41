from datetime import date

import pytest

from family_budget.models import BudgetMonth, Expense, IncomeSource, PlannerEntry


def test_income_source_resolves_legacy_fields():
    source = IncomeSource.from_dict({
        'source': 'Paycheck',
        'weeks': [500, 0, 500],
        'payDates': ['2025-06-06', None, '2025-06-20', '2025-07-04'],
        'payActuals': ['', '510'],
        'frequency': 'bi-weekly',
    })

    assert source.name == 'Paycheck'
    assert source.projected_amount == 1000
    assert source.weeks == [500, 0, 500, 0, 0]
    assert source.pay_dates == ['2025-06-06', '', '2025-06-20']
    assert source.pay_actuals == [None, 510.0]
    assert source.pay_actual_at(1) == 510.0
    assert source.pay_actual_at(7) is None
    assert source.has_pay_dates
    assert not IncomeSource(name='x', pay_dates=['', ' ']).has_pay_dates


def test_income_source_defaults():
    source = IncomeSource.from_dict({})
    assert source.frequency == 'monthly'
    assert source.projected_amount == 0
    assert source.actual_amount is None
    assert not source.uses_monthly_total


def test_expense_accepts_snake_and_camel_case():
    camel = Expense.from_dict({'name': 'Car', 'accountId': 7, 'transferStatus': 'half', 'actual': '$250'})
    snake = Expense.from_dict({'name': 'Car', 'account_id': 7, 'transfer_status': 'half', 'actual': 250})

    assert camel == snake
    assert camel.account_id == '7'
    assert Expense.from_dict({'name': 'X', 'transferStatus': 'most'}).transfer_status == 'none'


def test_expense_realized_amount_and_matching():
    assert Expense(name='A', amount=40).realized_amount == 40
    assert Expense(name='A', amount=40, actual=0).realized_amount == 0
    assert Expense(name='A').realized_amount == 0

    expense = Expense(name='Rent', id='e1')
    assert expense.matches('Rent')
    assert expense.matches('Renamed', 'e1')
    assert not expense.matches('', None)


def test_planner_entry_is_always_five_slots():
    entry = PlannerEntry(weeks=[1, 2, 3, 4, 5, 6], paid=[True])
    assert entry.weeks == [1, 2, 3, 4, 5]
    assert entry.paid == [True, False, False, False, False]
    assert entry.allocated == 15

    with pytest.raises(ValueError):
        entry.flags('cleared')


def test_budget_month_week_ranges():
    february = BudgetMonth(2025, 1).week_ranges()
    assert february[3] == (date(2025, 2, 22), date(2025, 2, 28))
    assert february[4] is None

    june = BudgetMonth(2025, 5).week_ranges()
    assert june[0] == (date(2025, 6, 1), date(2025, 6, 7))
    assert june[4] == (date(2025, 6, 29), date(2025, 6, 30))


def test_budget_month_helpers():
    assert BudgetMonth.from_date(date(2025, 6, 17)) == BudgetMonth(2025, 5)
    assert BudgetMonth(2025, 0).shift(-1) == BudgetMonth(2024, 11)
    assert BudgetMonth(2025, 5).label == 'June 2025'
    assert BudgetMonth(2025, 5).contains(date(2025, 6, 30))
    assert not BudgetMonth(2025, 5).contains(None)

    assert BudgetMonth.parse('June 2025') == BudgetMonth(2025, 5)
    assert BudgetMonth.parse('2025-06') == BudgetMonth(2025, 5)
    assert BudgetMonth.parse('2025-13') is None
    assert BudgetMonth.parse('') is None

    with pytest.raises(ValueError):
        BudgetMonth(2025, 12)
