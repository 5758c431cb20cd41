"""Plotly charts for the weekly planner.

Each function takes a frame produced by the planner or the expense
helpers and returns a ``plotly.graph_objects.Figure`` that Streamlit can
render via ``st.plotly_chart``.
"""

from __future__ import annotations

from typing import Dict

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

INCOME_COLOR = '#2ecc71'
EXPENSE_COLOR = '#e74c3c'
BALANCE_COLOR = '#3498db'


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_cash_flow_chart(cash_flow: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped income/expense bars per week with the running balance as a line.

    Parameters
    ----------
    cash_flow : pandas.DataFrame
        Output of :meth:`PlannerReconciler.cash_flow_frame` (columns
        ``Week``, ``Income``, ``Expenses`` and ``Cumulative``).
    title : str, optional
        Chart title.
    """
    if cash_flow.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(x=cash_flow['Week'], y=cash_flow['Income'], name='Income', marker_color=INCOME_COLOR))
    fig.add_trace(go.Bar(x=cash_flow['Week'], y=cash_flow['Expenses'], name='Expenses', marker_color=EXPENSE_COLOR))
    fig.add_trace(
        go.Scatter(
            x=cash_flow['Week'],
            y=cash_flow['Cumulative'],
            name='Running Balance',
            mode='lines+markers',
            line=dict(color=BALANCE_COLOR),
        )
    )
    fig.update_layout(
        title=title or "Weekly Cash Flow",
        barmode='group',
        xaxis_title="Week",
        yaxis_title="Amount",
    )
    return fig


def create_expense_breakdown_chart(totals: Dict[str, float], title: str | None = None) -> go.Figure:
    """Donut chart of monthly cost per category (zero categories dropped)."""
    data = pd.DataFrame(
        [(name, value) for name, value in totals.items() if value > 0],
        columns=['Category', 'Amount'],
    )
    if data.empty:
        return _empty_figure()
    fig = px.pie(data, names='Category', values='Amount', hole=0.4)
    fig.update_layout(title=title or "Monthly Expense Breakdown")
    return fig
