"""Streamlit page for compound interest scenarios.

Run the whole app with::

    streamlit run compound_dashboard/Home.py

The page edits the active scenario in widgets, projects it live, and
only writes to storage on explicit actions (save, new, delete, select,
ticking days off).  The ``with_*`` helpers below hold the state changes
so they can be exercised without a Streamlit session.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, Optional, Tuple

import streamlit as st

from .config import CURRENCY_SYMBOL
from .file_operations import safe_filename
from .formatting import format_currency, format_percent
from .goal_solver import RATE_CEILING, SolverResult, is_unreachable, solve_required_daily_rate
from .logging_config import setup_logging
from .models import Scenario, ScenarioParameters, UserData
from .projection import Projection, project_scenario, schedule_frame
from .scenarios import (
    completed_days,
    completion_progress,
    delete_scenario,
    find_scenario,
    new_scenario,
    prune_markers,
    resolve_current,
    set_completed_days,
    update_scenario,
)
from .shared_sidebar import persist_user_data, render_shared_sidebar
from .user_storage import UserDataStore
from .visualization import create_balance_chart, create_interest_chart

FIELD_LABELS: Dict[str, str] = {
    'principal': f"Initial amount ({CURRENCY_SYMBOL})",
    'daily_rate_percent': "Daily rate (%)",
    'days': "Days",
    'daily_contribution': "Daily contribution (optional)",
}


def with_new_scenario(data: UserData) -> UserData:
    scenario = new_scenario(data.scenarios)
    return dataclasses.replace(
        data,
        scenarios=[*data.scenarios, scenario],
        current_scenario_id=scenario.id,
    )


def with_scenario_removed(data: UserData, scenario_id: str) -> UserData:
    remaining, next_id = delete_scenario(data.scenarios, scenario_id)
    return dataclasses.replace(
        data,
        scenarios=remaining,
        current_scenario_id=next_id,
        completed=prune_markers(data.completed, remaining),
    )


def with_current_scenario(data: UserData, scenario_id: str) -> UserData:
    return dataclasses.replace(data, current_scenario_id=resolve_current(data.scenarios, scenario_id))


def with_scenario_edits(data: UserData, scenario_id: str, **changes: str) -> UserData:
    return dataclasses.replace(data, scenarios=update_scenario(data.scenarios, scenario_id, **changes))


def with_done_days(data: UserData, scenario_id: str, days: Iterable[int]) -> UserData:
    return dataclasses.replace(data, completed=set_completed_days(data.completed, scenario_id, days))


def describe_goal_result(result: SolverResult) -> Tuple[str, str]:
    """Streamlit message level and text for a goal solver outcome."""
    if result is None:
        return 'info', "Set a horizon of at least one day to solve for a rate."
    if is_unreachable(result):
        return 'warning', f"Goal not reachable at any rate up to {format_percent(RATE_CEILING)} a day."
    if result == 0.0:
        return 'success', "The initial amount already meets this goal; no growth needed."
    return 'success', f"Required daily rate: {format_percent(result)}"


def main() -> None:
    setup_logging()
    st.set_page_config(page_title="Compound Planner", page_icon="📈", layout="wide")
    sidebar = render_shared_sidebar()
    store: UserDataStore = sidebar['store']
    data: UserData = sidebar['data']

    st.header("📈 Compound Interest Scenarios")
    data, active = _render_scenario_bar(data, store)
    if active is None:
        st.info("No scenarios yet. Create one to start projecting.")
        return

    draft = _render_parameter_form(active)
    params = draft.parameters()
    projection = project_scenario(draft)

    if st.button("💾 Save scenario", type="primary"):
        edits = {field: getattr(draft, field) for field in ('name', *FIELD_LABELS)}
        saved = with_scenario_edits(data, active.id, **edits)
        if persist_user_data(saved, store):
            data = saved
            st.success("Scenario saved!")

    _render_summary(params, projection)
    _render_charts(projection)
    _render_schedule(data, active, params, projection, store)
    _render_goal_solver(active, params)


def _render_scenario_bar(data: UserData, store: UserDataStore) -> Tuple[UserData, Optional[Scenario]]:
    col_select, col_new, col_delete = st.columns([4, 1, 1])

    if col_new.button("➕ New", use_container_width=True):
        if persist_user_data(with_new_scenario(data), store):
            st.rerun()

    if not data.scenarios:
        return data, None

    current_id = resolve_current(data.scenarios, data.current_scenario_id)
    ids = [scenario.id for scenario in data.scenarios]
    names = {scenario.id: scenario.name or "Untitled" for scenario in data.scenarios}
    selected = col_select.selectbox(
        "Scenario",
        options=ids,
        index=ids.index(current_id),
        format_func=lambda scenario_id: names[scenario_id],
    )
    if selected != data.current_scenario_id:
        data = with_current_scenario(data, selected)
        persist_user_data(data, store)

    if col_delete.button("🗑️ Delete", use_container_width=True):
        if persist_user_data(with_scenario_removed(data, selected), store):
            st.rerun()

    return data, find_scenario(data.scenarios, selected)


def _render_parameter_form(active: Scenario) -> Scenario:
    """Widgets for the active scenario; returns the unsaved draft."""
    st.subheader("Scenario parameters")
    values = {'name': st.text_input("Name", value=active.name, key=f"name_{active.id}")}
    col_left, col_right = st.columns(2)
    for index, (field, label) in enumerate(FIELD_LABELS.items()):
        column = col_left if index % 2 == 0 else col_right
        values[field] = column.text_input(label, value=getattr(active, field), key=f"{field}_{active.id}")
    return dataclasses.replace(active, **values)


def _render_summary(params: ScenarioParameters, projection: Projection) -> None:
    totals = projection.totals
    st.subheader("Summary")
    row_one = st.columns(3)
    row_one[0].metric("Initial amount", format_currency(params.principal))
    row_one[1].metric("Daily rate", format_percent(params.daily_rate))
    row_one[2].metric("Days", params.days)
    row_two = st.columns(3)
    row_two[0].metric("Total contributions", format_currency(totals.contributed))
    row_two[1].metric("Total interest", format_currency(totals.interest_earned))
    row_two[2].metric("Final balance", format_currency(totals.final_balance))


def _render_charts(projection: Projection) -> None:
    frame = schedule_frame(projection)
    col_balance, col_interest = st.columns(2)
    col_balance.plotly_chart(create_balance_chart(frame), use_container_width=True)
    col_interest.plotly_chart(create_interest_chart(frame), use_container_width=True)


def _render_schedule(
    data: UserData,
    active: Scenario,
    params: ScenarioParameters,
    projection: Projection,
    store: UserDataStore,
) -> None:
    st.subheader("Schedule")
    if not projection.schedule:
        st.info("Adjust the parameters to see the schedule.")
        return

    done = completed_days(data.completed, active.id)
    progress = completion_progress(data.completed, active.id, params.days)
    st.progress(progress.ratio, text=f"{progress.done} of {progress.total} days done")

    frame = schedule_frame(projection, done)
    money = f"{CURRENCY_SYMBOL} %.2f"
    edited = st.data_editor(
        frame,
        hide_index=True,
        use_container_width=True,
        disabled=[column for column in frame.columns if column != 'Done'],
        column_config={
            'Opening Balance': st.column_config.NumberColumn(format=money),
            'Contribution': st.column_config.NumberColumn(format=money),
            'Interest': st.column_config.NumberColumn(format=money),
            'Closing Balance': st.column_config.NumberColumn(format=money),
            'Done': st.column_config.CheckboxColumn(help="Tick off days you have completed"),
        },
        key=f"schedule_{active.id}",
    )
    # Ticks past the current horizon are kept so shrinking the horizon is reversible
    ticked = {int(day) for day in edited.loc[edited['Done'], 'Day']}
    beyond = {day for day in done if day > params.days}
    if ticked | beyond != set(done):
        persist_user_data(with_done_days(data, active.id, ticked | beyond), store)

    st.download_button(
        "⬇️ Export schedule (CSV)",
        data=frame.to_csv(index=False).encode('utf-8'),
        file_name=f"{safe_filename(active.name, default='scenario')}-schedule.csv",
        mime='text/csv',
    )


def _render_goal_solver(active: Scenario, params: ScenarioParameters) -> None:
    with st.expander("🎯 Required daily rate for a goal"):
        st.caption("Finds the constant daily rate that turns the initial amount and contributions into the target.")
        goal_text = st.text_input(f"Target final balance ({CURRENCY_SYMBOL})", key=f"goal_{active.id}")
        if not goal_text.strip():
            return
        result = solve_required_daily_rate(goal_text, params.principal, params.daily_contribution, params.days)
        level, message = describe_goal_result(result)
        getattr(st, level)(message)
        if params.daily_contribution < 0:
            st.caption("With daily withdrawals the balance may not grow steadily with the rate, so treat this as an estimate.")


if __name__ == '__main__':
    main()
