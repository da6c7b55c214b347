"""Find the constant daily rate that grows a balance to a goal.

The search is a plain bisection over ``[RATE_FLOOR, RATE_CEILING]``
using :func:`compound_dashboard.projection.final_balance` as the
evaluation function.

Bisection needs the final balance to be non-decreasing in the rate.
That holds whenever the daily contribution is zero or positive.  A
strongly negative contribution (withdrawals) can make the balance dip
below zero and reverse the ordering; in that case the answer may be
wrong, which is logged but not corrected.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from .parsing import parse_days, parse_number
from .projection import final_balance

logger = logging.getLogger(__name__)

# -1 would wipe out the whole balance every day
RATE_FLOOR = -0.9999
# 1000 % a day
RATE_CEILING = 10.0
ITERATIONS = 80

UNREACHABLE = 'unreachable'

SolverResult = Optional[Union[float, str]]


def solve_required_daily_rate(
    goal: Any,
    principal: Any,
    daily_contribution: Any,
    days: Any,
    *,
    low: float = RATE_FLOOR,
    high: float = RATE_CEILING,
    iterations: int = ITERATIONS,
) -> SolverResult:
    """Return the decimal daily rate that reaches ``goal`` after ``days`` days.

    Returns:
        ``None`` when ``days`` is not positive, ``0.0`` when the principal
        already meets the goal, :data:`UNREACHABLE` when even the ceiling
        rate falls short, otherwise the midpoint of the final bracket.

    Example:
        >>> rate = solve_required_daily_rate(13.31, 10, 0, 3)
        >>> round(rate, 6)
        0.1
    """
    goal = parse_number(goal)
    principal = parse_number(principal)
    contribution = parse_number(daily_contribution)
    day_count = parse_days(days)

    if day_count <= 0:
        return None
    if goal <= principal:
        return 0.0
    if contribution < 0:
        logger.warning(
            "Solving with a negative daily contribution (%s); the balance may not grow "
            "monotonically with the rate and the result can be off",
            contribution,
        )

    if final_balance(principal, high, day_count, contribution) < goal:
        logger.debug("Goal %s unreachable in %s days even at rate %s", goal, day_count, high)
        return UNREACHABLE

    for _ in range(iterations):
        mid = (low + high) / 2
        if final_balance(principal, mid, day_count, contribution) < goal:
            low = mid
        else:
            high = mid

    rate = (low + high) / 2
    logger.debug("Required daily rate for goal %s over %s days: %s", goal, day_count, rate)
    return rate


def is_unreachable(result: SolverResult) -> bool:
    return isinstance(result, str) and result == UNREACHABLE
