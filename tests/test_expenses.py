from datetime import date

import pytest

from family_budget.expenses import (
    account_allocations,
    category_totals,
    funds_to_set_aside,
    monthly_annual_impact,
    normalize_expenses,
    total_monthly_expenses,
    upcoming_expenses,
)


def _monthly():
    return {
        'housing': [
            {'name': 'Rent', 'actual': 1500, 'date': '2025-06-05', 'account': 'Main Checking'},
            {'name': '   ', 'actual': 10},
        ],
        'utilities': [
            {'name': 'Water', 'amount': 60},
        ],
    }


def _annual():
    return {'yearly-insurance': [{'name': 'Car Insurance', 'actual': 1200}]}


def test_normalize_flattens_and_amortizes():
    items = normalize_expenses(_monthly(), _annual())

    assert [e.name for e in items] == ['Rent', 'Water', 'Car Insurance']
    rent, water, car = items
    assert rent.monthly_amount == 1500
    assert rent.date == '2025-06-05'
    assert rent.category_name == 'Housing'
    assert water.monthly_amount == 60
    assert car.is_annual
    assert car.monthly_amount == pytest.approx(100)
    assert car.original_annual_amount == 1200
    assert car.category_name == 'Annual Insurance'


def test_actual_wins_over_amount_even_when_zero():
    items = normalize_expenses({'misc': [{'name': 'Gym', 'actual': 0, 'amount': 50}]}, {})
    assert items[0].monthly_amount == 0


def test_custom_category_names():
    monthly = {'pets': [{'name': 'Vet', 'actual': 40}]}
    assert normalize_expenses(monthly, {})[0].category_name == 'Pets'
    assert normalize_expenses(monthly, {}, {'pets': 'Pet Costs'})[0].category_name == 'Pet Costs'
    assert normalize_expenses({'dog': [{'name': 'Food', 'actual': 60}]}, {}, {})[0].category_name == 'Pet Care'


def test_totals():
    assert total_monthly_expenses(_monthly()) == 1570
    assert monthly_annual_impact(_annual()) == pytest.approx(100)
    totals = category_totals(_monthly(), _annual())
    assert totals['monthly'] == {'housing': 1510, 'utilities': 60}
    assert totals['annual'] == {'yearly-insurance': 1200}


def test_account_allocations_group_unassigned():
    allocations = account_allocations(_monthly(), _annual())
    assert allocations['Main Checking'] == 1500
    assert allocations['Unassigned'] == pytest.approx(10 + 60 + 100)


def test_funds_to_set_aside_uses_transfer_status():
    monthly = {
        'housing': [
            {'name': 'Rent', 'projected': 1600, 'actual': 1500,
             'account': 'Main Checking', 'transferStatus': 'half'},
            {'name': 'Gym', 'projected': 40, 'account': 'TBD', 'transferStatus': 'full'},
            {'name': 'Phone', 'projected': 80, 'account': 'Main Checking',
             'transferStatus': 'full', 'paid': True},
            {'name': 'Cable', 'projected': 90, 'account': 'Main Checking', 'transferStatus': 'none'},
        ],
    }
    annual = {
        'yearly-subs': [
            {'name': 'Prime', 'projected': 120, 'actual': 139,
             'account': 'Savings Account', 'transferStatus': 'actual'},
        ],
    }
    funds = funds_to_set_aside(monthly, annual)
    assert funds == {'Main Checking': 800, 'Savings Account': pytest.approx(139 / 12)}


def test_upcoming_expenses_window_and_order():
    monthly = {
        'housing': [
            {'name': 'Rent', 'actual': 1500, 'date': '2025-06-10'},
            {'name': 'Late Fee', 'actual': 25, 'date': '2025-05-28'},
            {'name': 'Paid Bill', 'actual': 60, 'date': '2025-06-03', 'paid': True},
            {'name': 'Broken', 'actual': 5, 'date': 'someday'},
        ],
    }
    annual = {'yearly-car': [{'name': 'Registration', 'actual': 180, 'date': '2025-08-01'}]}

    rows = upcoming_expenses(monthly, annual, today=date(2025, 6, 1))

    assert [row['name'] for row in rows] == ['Late Fee', 'Rent']
    assert rows[0]['days_until'] == -4
    assert rows[1]['days_until'] == 9
    assert rows[1]['type'] == 'monthly'


def test_actual_transfer_status_ignores_legacy_amount():
    monthly = {
        'utilities': [
            {'name': 'Power', 'amount': 120, 'account': 'Main Checking', 'transferStatus': 'actual'},
            {'name': 'Water', 'amount': 60, 'actual': 45, 'account': 'Main Checking', 'transferStatus': 'actual'},
        ],
    }
    assert funds_to_set_aside(monthly, {}) == {'Main Checking': 45}
