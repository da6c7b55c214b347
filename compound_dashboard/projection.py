"""Day-by-day compound interest projection.

Each day the contribution is added first and interest accrues on the
result::

    base    = opening + contribution
    interest = base * rate
    closing = base + interest

The opening balance of day 1 is the principal and every later day opens
with the previous day's closing balance.  Arithmetic is plain float with
no intermediate rounding; rounding is left to the display helpers in
:mod:`compound_dashboard.formatting`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Tuple

import pandas as pd

from .models import Scenario
from .parsing import parse_days, parse_number

SCHEDULE_COLUMNS = ['Day', 'Opening Balance', 'Contribution', 'Interest', 'Closing Balance', 'Done']


@dataclass(frozen=True)
class DayEntry:
    day: int
    opening_balance: float
    contribution: float
    interest: float
    closing_balance: float


@dataclass(frozen=True)
class ProjectionTotals:
    contributed: float
    interest_earned: float
    final_balance: float


@dataclass(frozen=True)
class Projection:
    schedule: Tuple[DayEntry, ...]
    totals: ProjectionTotals


def _step(balance: float, rate: float, contribution: float) -> Tuple[float, float]:
    base = balance + contribution
    interest = base * rate
    return interest, base + interest


def project(principal: Any, daily_rate: Any, days: Any, daily_contribution: Any = 0.0) -> Projection:
    """Project a balance forward ``days`` days at a constant daily rate.

    ``daily_rate`` is a decimal (0.10 for 10 % a day).  Inputs are coerced
    the permissive way: anything unparseable counts as zero and ``days``
    is floored and clamped at zero.

    Example:
        >>> result = project(10, 0.10, 3)
        >>> [round(entry.closing_balance, 2) for entry in result.schedule]
        [11.0, 12.1, 13.31]
    """
    principal = parse_number(principal)
    rate = parse_number(daily_rate)
    contribution = parse_number(daily_contribution)
    day_count = parse_days(days)

    schedule = []
    balance = principal
    contributed = 0.0
    interest_earned = 0.0
    for day in range(1, day_count + 1):
        interest, closing = _step(balance, rate, contribution)
        schedule.append(DayEntry(
            day=day,
            opening_balance=balance,
            contribution=contribution,
            interest=interest,
            closing_balance=closing,
        ))
        contributed += contribution
        interest_earned += interest
        balance = closing

    totals = ProjectionTotals(
        contributed=contributed,
        interest_earned=interest_earned,
        final_balance=schedule[-1].closing_balance if schedule else principal,
    )
    return Projection(schedule=tuple(schedule), totals=totals)


def final_balance(principal: float, daily_rate: float, days: int, daily_contribution: float = 0.0) -> float:
    """Closing balance after ``days`` days without building the schedule.

    Runs the same recurrence as :func:`project`; the goal solver calls it
    a few dozen times per search.
    """
    balance = parse_number(principal)
    rate = parse_number(daily_rate)
    contribution = parse_number(daily_contribution)
    for _ in range(parse_days(days)):
        _, balance = _step(balance, rate, contribution)
    return balance


def project_scenario(scenario: Scenario) -> Projection:
    params = scenario.parameters()
    return project(params.principal, params.daily_rate, params.days, params.daily_contribution)


def schedule_frame(projection: Projection, completed: Iterable[int] = ()) -> pd.DataFrame:
    """Tabulate a projection for tables, charts and CSV export.

    ``completed`` holds the day indices the user ticked off; they only
    fill the ``Done`` column.
    """
    if not projection.schedule:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    done = set(completed)
    rows = [
        {
            'Day': entry.day,
            'Opening Balance': entry.opening_balance,
            'Contribution': entry.contribution,
            'Interest': entry.interest,
            'Closing Balance': entry.closing_balance,
            'Done': entry.day in done,
        }
        for entry in projection.schedule
    ]
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)
