import types

from family_budget import dashboard
from family_budget.expenses import normalize_expenses
from family_budget.state import build_reconciler, load_state
from family_budget.storage import BudgetStorage


def _document():
    return {
        'income': [{'name': 'Salary', 'frequency': 'monthly', 'projectedAmount': 3000, 'payDates': ['2025-06-01']}],
        'monthly': {'housing': [{'name': 'Rent', 'actual': 1500}]},
    }


def test_ensure_state_loads_from_storage_once(monkeypatch, tmp_path):
    storage = BudgetStorage(tmp_path / 'budget.json')
    storage.save(load_state(_document()))
    session = {}
    monkeypatch.setattr(dashboard, 'st', types.SimpleNamespace(session_state=session))

    state = dashboard._ensure_state(storage)
    assert state.income[0].name == 'Salary'

    storage.delete()
    assert dashboard._ensure_state(storage) is state


def test_apply_week_edit_updates_session_and_disk(monkeypatch, tmp_path):
    storage = BudgetStorage(tmp_path / 'budget.json')
    session = {dashboard.STATE_KEY: load_state(_document())}
    monkeypatch.setattr(dashboard, 'st', types.SimpleNamespace(session_state=session))

    dashboard.apply_week_edit(storage, 'Rent', 1, 1500)

    assert session[dashboard.STATE_KEY].planner['Rent']['weeks'] == [300, 1500, 300, 300, 300]
    assert storage.load().planner['Rent']['weeks'] == [300, 1500, 300, 300, 300]


def test_balance_cards():
    cards = dashboard.balance_cards([250.0, -40.0, 0.0, 0.0, 0.0])
    assert cards[0] == {'label': 'Week 1 Balance', 'text': '$250.00', 'colour': 'green'}
    assert cards[1]['colour'] == 'red'
    assert len(cards) == 5


def test_allocation_table_shows_remaining_as_text():
    state = load_state(_document())
    reconciler = build_reconciler(state)
    reconciler.set_week_amount('Rent', 0, 0)
    table = dashboard.allocation_table(reconciler, normalize_expenses(state.monthly, state.annual))

    assert table.loc[0, 'Remaining'] == '-$300.00'


def test_handle_import_swaps_session_state(monkeypatch, tmp_path):
    storage = BudgetStorage(tmp_path / 'budget.json')
    session = {dashboard.STATE_KEY: load_state(None)}
    monkeypatch.setattr(dashboard, 'st', types.SimpleNamespace(session_state=session))
    exported = {'version': '1.0', 'data': {**_document(), 'annual': {}, 'accounts': []}}

    assert dashboard.handle_import(storage, exported) == 'Imported 1 expenses'
    assert session[dashboard.STATE_KEY].income[0].name == 'Salary'

    message = dashboard.handle_import(storage, {'income': []})
    assert message.startswith('Import failed')
    assert session[dashboard.STATE_KEY].income[0].name == 'Salary'
