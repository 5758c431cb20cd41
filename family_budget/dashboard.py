"""Streamlit page for the weekly budget planner.

Loads the budget document, shows the five-week grid with its cash flow
and lets the user edit one allocation at a time.  All numbers come from
the engine; this module only lays them out.

To run the page from the command line::

    streamlit run family_budget/dashboard.py
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

if __package__:
    from . import analytics
    from . import calculator
    from . import visualization as viz
    from .config import configure_logging, ensure_data_directories
    from .constants import MONTHS_PER_YEAR, WEEKS_IN_PLANNER, category_display_name
    from .expenses import category_totals, funds_to_set_aside, normalize_expenses
    from .formatting import escape_dollar_for_markdown, format_balance, format_currency, format_remaining
    from .state import BudgetState, build_reconciler, budget_month_for, set_week_amount
    from .storage import BudgetStorage
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from family_budget import analytics  # type: ignore
    from family_budget import calculator  # type: ignore
    from family_budget import visualization as viz  # type: ignore
    from family_budget.config import configure_logging, ensure_data_directories  # type: ignore
    from family_budget.constants import MONTHS_PER_YEAR, WEEKS_IN_PLANNER, category_display_name  # type: ignore
    from family_budget.expenses import category_totals, funds_to_set_aside, normalize_expenses  # type: ignore
    from family_budget.formatting import escape_dollar_for_markdown, format_balance, format_currency, format_remaining  # type: ignore
    from family_budget.state import BudgetState, build_reconciler, budget_month_for, set_week_amount  # type: ignore
    from family_budget.storage import BudgetStorage  # type: ignore

STATE_KEY = 'budget_state'


def _ensure_state(storage: BudgetStorage) -> BudgetState:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = storage.load()
    return st.session_state[STATE_KEY]


def apply_week_edit(storage: BudgetStorage, name: str, week_index: int, amount: float) -> BudgetState:
    """Store one edited allocation in the session and on disk."""
    state = set_week_amount(st.session_state[STATE_KEY], name, week_index, amount)
    st.session_state[STATE_KEY] = state
    storage.save(state)
    return state


def handle_import(storage: BudgetStorage, data: Any) -> str:
    """Import an uploaded document into the session; returns a status line."""
    try:
        state, stats = storage.import_data(data)
    except ValueError as e:
        return f"Import failed: {e}"
    st.session_state[STATE_KEY] = state
    return f"Imported {stats['total_expenses']} expenses"


def balance_cards(cash_flow: List[float]) -> List[Dict[str, Any]]:
    cards = []
    for week, amount in enumerate(cash_flow):
        text, colour = format_balance(amount)
        cards.append({'label': f"Week {week + 1} Balance", 'text': text, 'colour': colour})
    return cards


def allocation_table(reconciler, expenses) -> pd.DataFrame:
    table = reconciler.planner_frame(expenses)
    table['Remaining'] = table['Remaining'].map(format_remaining)
    return table


def _monthly_breakdown(state: BudgetState) -> Dict[str, float]:
    totals = category_totals(state.monthly, state.annual)
    combined: Dict[str, float] = {}
    for bucket, divisor in (('monthly', 1), ('annual', MONTHS_PER_YEAR)):
        for key, value in totals[bucket].items():
            label = category_display_name(key, state.category_names)
            combined[label] = combined.get(label, 0.0) + value / divisor
    return combined


def render_calculator() -> None:
    with st.expander("Calculator"):
        loan_col, goal_col = st.columns(2)
        principal = loan_col.number_input("Loan amount", min_value=0.0, step=100.0)
        rate = loan_col.number_input("Annual rate (%)", min_value=0.0, step=0.1)
        years = loan_col.number_input("Years", min_value=0.0, step=1.0, value=5.0)
        loan_col.metric("Monthly payment", format_currency(calculator.monthly_payment(principal, rate, years)))

        target = goal_col.number_input("Savings target", min_value=0.0, step=100.0)
        saved = goal_col.number_input("Saved so far", min_value=0.0, step=100.0)
        months = goal_col.number_input("Months to goal", min_value=0, step=1, value=12)
        goal_col.metric("Monthly saving", format_currency(calculator.savings_goal(target, saved, months)))


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    ensure_data_directories()
    st.set_page_config(page_title="Weekly Budget Planner", layout="wide")
    st.title("Weekly Budget Planner")

    storage = BudgetStorage()
    uploaded = st.sidebar.file_uploader("Import budget JSON", type="json")
    if uploaded is not None and st.sidebar.button("Replace budget"):
        try:
            message = handle_import(storage, json.load(uploaded))
        except json.JSONDecodeError as e:
            message = f"Import failed: {e}"
        st.sidebar.info(message)
    state = _ensure_state(storage)
    month = budget_month_for(state)
    reconciler = build_reconciler(state, month)
    expenses = normalize_expenses(state.monthly, state.annual, state.category_names)

    st.caption(f"Planning month: {month.label}")

    cols = st.columns(WEEKS_IN_PLANNER)
    for col, card in zip(cols, balance_cards(reconciler.cash_flow())):
        col.metric(card['label'], card['text'])

    st.subheader("Weekly Allocations")
    st.dataframe(allocation_table(reconciler, expenses), use_container_width=True)

    with st.form('week_edit'):
        names = [e.name for e in expenses]
        name = st.selectbox("Expense", names) if names else None
        week = st.selectbox("Week", list(range(1, WEEKS_IN_PLANNER + 1)))
        amount = st.number_input("Amount", min_value=0.0, step=0.01)
        if st.form_submit_button("Save") and name:
            apply_week_edit(storage, name, week - 1, amount)
            st.rerun()

    cash_flow = reconciler.cash_flow_frame()
    st.subheader("Weekly Cash Flow")
    st.plotly_chart(viz.create_cash_flow_chart(cash_flow), use_container_width=True)
    st.markdown(f"**Month net:** {escape_dollar_for_markdown(reconciler.monthly_cash_flow())}")

    for insight in analytics.planning_insights(state, reconciler):
        getattr(st, insight['level'], st.info)(insight['message'].replace('$', '\\$'))

    left, right = st.columns(2)
    left.plotly_chart(viz.create_expense_breakdown_chart(_monthly_breakdown(state)), use_container_width=True)
    funds = funds_to_set_aside(state.monthly, state.annual)
    right.subheader("Funds to Set Aside")
    right.dataframe(
        pd.DataFrame(sorted(funds.items()), columns=['Account', 'Amount']),
        use_container_width=True,
    )

    render_calculator()


if __name__ == "__main__":
    main()
