"""Unit tests for compound_dashboard.goal_solver."""

from __future__ import annotations

import logging

import pytest

from compound_dashboard.goal_solver import (
    RATE_CEILING,
    UNREACHABLE,
    is_unreachable,
    solve_required_daily_rate,
)
from compound_dashboard.projection import final_balance, project


def test_round_trip_recovers_the_rate():
    goal = project(100, 0.05, 10, 0).totals.final_balance

    rate = solve_required_daily_rate(goal, 100, 0, 10)

    assert abs(rate - 0.05) < 1e-6


def test_round_trip_with_contributions():
    goal = project(50, 0.012, 30, 4).totals.final_balance

    rate = solve_required_daily_rate(goal, 50, 4, 30)

    assert rate == pytest.approx(0.012, abs=1e-8)
    assert final_balance(50, rate, 30, 4) == pytest.approx(goal)


@pytest.mark.parametrize('goal', [100, 50, 0, -10])
def test_goal_already_met_returns_zero(goal):
    assert solve_required_daily_rate(goal, 100, 5, 10) == 0.0


def test_no_days_has_no_rate():
    assert solve_required_daily_rate(1000, 100, 0, 0) is None
    assert solve_required_daily_rate(1000, 100, 0, -5) is None
    assert solve_required_daily_rate(50, 100, 0, 0) is None


def test_unreachable_goal_is_signalled():
    result = solve_required_daily_rate(1e12, 1, 0, 1)

    assert result == UNREACHABLE
    assert is_unreachable(result)
    assert final_balance(1, RATE_CEILING, 1, 0) < 1e12


def test_goal_just_within_the_ceiling_is_reachable():
    goal = final_balance(1, RATE_CEILING, 1, 0)

    result = solve_required_daily_rate(goal, 1, 0, 1)

    assert not is_unreachable(result)
    assert result == pytest.approx(RATE_CEILING, rel=1e-9)


def test_contributions_alone_can_require_a_negative_rate():
    # 10 a day for 10 days already overshoots 50 without any interest
    rate = solve_required_daily_rate(50, 0, 10, 10)

    assert rate < 0
    assert final_balance(0, rate, 10, 10) == pytest.approx(50, rel=1e-6)


def test_text_inputs_are_parsed():
    rate = solve_required_daily_rate('13,31', 'R$ 10', '0', '3')

    assert rate == pytest.approx(0.1, abs=1e-9)


def test_negative_contribution_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger='compound_dashboard.goal_solver'):
        solve_required_daily_rate(200, 100, -1, 10)

    assert any('negative daily contribution' in message for message in caplog.messages)


def test_is_unreachable_only_for_the_sentinel():
    assert not is_unreachable(0.0)
    assert not is_unreachable(None)
    assert not is_unreachable(0.05)
