"""Unit tests for compound_dashboard.projection."""

from __future__ import annotations

import pytest

from compound_dashboard.models import Scenario
from compound_dashboard.projection import (
    SCHEDULE_COLUMNS,
    final_balance,
    project,
    project_scenario,
    schedule_frame,
)


def test_concrete_three_day_schedule():
    result = project(principal=10, daily_rate=0.10, days=3, daily_contribution=0)

    opens = [entry.opening_balance for entry in result.schedule]
    interest = [entry.interest for entry in result.schedule]
    closes = [entry.closing_balance for entry in result.schedule]
    assert [entry.day for entry in result.schedule] == [1, 2, 3]
    assert opens == pytest.approx([10, 11, 12.1])
    assert interest == pytest.approx([1, 1.1, 1.21])
    assert closes == pytest.approx([11, 12.1, 13.31])
    assert result.totals.contributed == 0
    assert result.totals.interest_earned == pytest.approx(3.31)
    assert result.totals.final_balance == pytest.approx(13.31)


def test_recurrence_and_continuity_hold_every_day():
    rate = 0.013
    contribution = 2.5
    result = project(250, rate, 40, contribution)

    for entry in result.schedule:
        base = entry.opening_balance + contribution
        assert entry.contribution == contribution
        assert entry.interest == pytest.approx(base * rate)
        assert entry.closing_balance == pytest.approx(base + base * rate)
    for today, tomorrow in zip(result.schedule, result.schedule[1:]):
        assert tomorrow.opening_balance == today.closing_balance


def test_totals_sum_the_schedule():
    result = project(100, 0.02, 12, 5)

    assert result.totals.contributed == pytest.approx(12 * 5)
    assert result.totals.interest_earned == pytest.approx(sum(e.interest for e in result.schedule))
    assert result.totals.final_balance == result.schedule[-1].closing_balance


def test_zero_days_gives_empty_schedule_and_principal():
    result = project(42, 0.5, 0, 3)

    assert result.schedule == ()
    assert result.totals.final_balance == 42
    assert result.totals.contributed == 0
    assert result.totals.interest_earned == 0


def test_days_are_floored_and_clamped():
    assert len(project(1, 0.1, 2.9).schedule) == 2
    assert project(5, 0.1, -3).schedule == ()
    assert project(5, 0.1, -3).totals.final_balance == 5


def test_withdrawals_reduce_the_balance():
    result = project(100, 0.0, 4, -10)

    assert [entry.closing_balance for entry in result.schedule] == [90, 80, 70, 60]
    assert result.totals.contributed == -40


def test_unparseable_inputs_count_as_zero():
    result = project('abc', 'nan', '2', None)

    assert len(result.schedule) == 2
    assert result.totals.final_balance == 0
    assert project(float('inf'), 0.1, 1).totals.final_balance == 0


def test_text_inputs_are_parsed():
    result = project('R$ 10,00', '0,1', '3', '0')

    assert result.totals.final_balance == pytest.approx(13.31)


def test_final_balance_matches_project():
    args = (320.0, 0.004, 90, 12.5)
    assert final_balance(*args) == project(*args).totals.final_balance
    assert final_balance(10, 0.1, 0) == 10


def test_project_scenario_reads_percent_text():
    scenario = Scenario(id='s1', name='Test', principal='10', daily_rate_percent='10', days='3', daily_contribution='0')

    result = project_scenario(scenario)

    assert result.totals.final_balance == pytest.approx(13.31)


def test_schedule_frame_marks_done_days():
    frame = schedule_frame(project(10, 0.1, 3), completed=[2, 9])

    assert list(frame.columns) == SCHEDULE_COLUMNS
    assert frame['Day'].tolist() == [1, 2, 3]
    assert frame['Done'].tolist() == [False, True, False]
    assert frame['Closing Balance'].iloc[-1] == pytest.approx(13.31)


def test_schedule_frame_empty_projection():
    frame = schedule_frame(project(10, 0.1, 0))

    assert frame.empty
    assert list(frame.columns) == SCHEDULE_COLUMNS
