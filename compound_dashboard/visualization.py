"""Plotly visualisation helpers for the compound dashboard.

Each function takes one of the DataFrames produced by
:mod:`compound_dashboard.projection` or :mod:`compound_dashboard.ledger`
and returns a `plotly.graph_objects.Figure` that Streamlit renders via
``st.plotly_chart``.  Empty input gives an empty figure titled
"No data to display".
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_balance_chart(schedule: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Closing balance per day as a filled line.

    Parameters
    ----------
    schedule : pandas.DataFrame
        Output of :func:`compound_dashboard.projection.schedule_frame`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Line chart of the balance over the horizon.
    """
    if schedule.empty:
        return _empty_figure()
    fig = px.area(schedule, x="Day", y="Closing Balance")
    fig.update_traces(line_shape="spline")
    fig.update_layout(
        title=title or "Balance over time",
        xaxis_title="Day",
        yaxis_title="Closing balance",
    )
    return fig


def create_interest_chart(schedule: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Interest accrued each day as bars."""
    if schedule.empty:
        return _empty_figure()
    fig = px.bar(schedule, x="Day", y="Interest")
    fig.update_layout(
        title=title or "Interest per day",
        xaxis_title="Day",
        yaxis_title="Interest",
    )
    return fig


def create_category_chart(breakdown: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Pie chart of spending per category.

    Parameters
    ----------
    breakdown : pandas.DataFrame
        Output of :func:`compound_dashboard.ledger.category_breakdown`
        with ``Category`` and ``Total`` columns.
    title : str, optional
        Chart title.
    """
    if breakdown.empty:
        return _empty_figure()
    fig = px.pie(breakdown, names="Category", values="Total")
    fig.update_layout(title=title or "Spending by category")
    return fig


def create_monthly_spending_chart(
    summary: pd.DataFrame,
    income: float | None = None,
    title: str | None = None,
) -> go.Figure:
    """Monthly spending bars with an optional income reference line."""
    if summary.empty:
        return _empty_figure()
    df = summary.copy()
    df["Month"] = df["Month"].astype(str)
    fig = px.bar(df, x="Month", y="Total")
    if income is not None and income > 0:
        fig.add_hline(y=income, line_dash="dash", annotation_text="Income")
    fig.update_layout(
        title=title or "Spending per month",
        xaxis_title="Month",
        yaxis_title="Total",
    )
    return fig
