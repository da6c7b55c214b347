"""Household expense ledger: entry helpers, totals and budget warnings.

The ledger is a snapshot (:class:`~compound_dashboard.models.ExpenseLedger`);
helpers here return new lists or records instead of mutating it.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

import pandas as pd

from .config import BUDGET_WARNING_THRESHOLD
from .formatting import format_currency
from .models import Expense, ExpenseLedger, RecurringTemplate, new_id, parse_date, utc_now_iso
from .parsing import parse_number

UNCATEGORIZED = 'Uncategorized'
EXPENSE_COLUMNS = ['Id', 'Name', 'Amount', 'Category', 'Date', 'Recurring', 'Month']

# Warning levels map onto st.error / st.warning / st.info
LEVEL_ERROR = 'error'
LEVEL_WARNING = 'warning'
LEVEL_INFO = 'info'


@dataclass(frozen=True)
class LedgerTotals:
    income: float
    total_expenses: float
    balance: float


@dataclass(frozen=True)
class BudgetWarning:
    code: str
    level: str
    message: str


def create_expense(
    name: Any,
    amount: Any,
    category: Any = None,
    when: Any = None,
    *,
    id_factory=new_id,
) -> Optional[Expense]:
    """Build a manual expense, or ``None`` when the name is blank or the amount not positive."""
    clean_name = str(name or '').strip()
    value = parse_number(amount)
    if not clean_name or value <= 0:
        return None
    occurred = parse_date(when) if when is not None else None
    stamp = occurred.isoformat() if occurred else utc_now_iso()
    clean_category = str(category or '').strip() or None
    return Expense(id=id_factory(), name=clean_name, amount=value, date=stamp, category=clean_category)


def template_from_expense(
    expense: Expense,
    preferred_day: Optional[int] = None,
    *,
    id_factory=new_id,
) -> Tuple[RecurringTemplate, Expense]:
    """Turn a freshly entered expense into a monthly template.

    Returns the template and the expense linked to it through
    ``recurring_id``.  Without ``preferred_day`` the expense's own day of
    month is used.
    """
    if preferred_day is None:
        occurred = expense.occurred_on
        preferred_day = occurred.day if occurred else 1
    template = RecurringTemplate(
        id=id_factory(),
        name=expense.name,
        amount=expense.amount,
        category=expense.category,
        preferred_day=min(31, max(1, int(preferred_day))),
    )
    return template, dataclasses.replace(expense, recurring_id=template.id)


def remove_expense(expenses: Sequence[Expense], expense_id: str) -> List[Expense]:
    return [expense for expense in expenses if expense.id != expense_id]


def remove_template(templates: Sequence[RecurringTemplate], template_id: str) -> List[RecurringTemplate]:
    """Drop a template; expenses it already produced stay in the ledger."""
    return [template for template in templates if template.id != template_id]


def expenses_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    """Tabulate expenses with a parsed ``Date`` and a monthly ``Month`` period."""
    if not expenses:
        return pd.DataFrame(columns=EXPENSE_COLUMNS)
    df = pd.DataFrame([
        {
            'Id': expense.id,
            'Name': expense.name,
            'Amount': expense.amount,
            'Category': expense.category or UNCATEGORIZED,
            'Date': expense.occurred_on,
            'Recurring': bool(expense.recurring_id),
        }
        for expense in expenses
    ])
    df['Date'] = pd.to_datetime(df['Date'], errors='coerce')
    df['Amount'] = pd.to_numeric(df['Amount'], errors='coerce').fillna(0.0)
    df['Month'] = df['Date'].dt.to_period('M')
    return df[EXPENSE_COLUMNS]


def ledger_totals(ledger: ExpenseLedger, month: Any = None) -> LedgerTotals:
    """Income, spending and what is left, optionally for a single month.

    ``month`` accepts ``'YYYY-MM'``, a date or a pandas Period; expenses
    with unreadable dates are left out of a monthly total.
    """
    df = expenses_frame(ledger.expenses)
    period = _month_period(month)
    if period is not None and not df.empty:
        df = df[df['Month'] == period]
    total = float(df['Amount'].sum()) if not df.empty else 0.0
    return LedgerTotals(income=ledger.income, total_expenses=total, balance=ledger.income - total)


def monthly_summary(expenses: Sequence[Expense]) -> pd.DataFrame:
    df = expenses_frame(expenses).dropna(subset=['Date'])
    if df.empty:
        return pd.DataFrame(columns=['Month', 'Total', 'Count'])
    summary = df.groupby('Month')['Amount'].agg(Total='sum', Count='count').reset_index()
    return summary.sort_values('Month').reset_index(drop=True)


def category_breakdown(expenses: Sequence[Expense], month: Any = None) -> pd.DataFrame:
    """Spending per category, largest first."""
    df = expenses_frame(expenses)
    period = _month_period(month)
    if period is not None and not df.empty:
        df = df[df['Month'] == period]
    if df.empty:
        return pd.DataFrame(columns=['Category', 'Total'])
    grouped = df.groupby('Category')['Amount'].sum().reset_index(name='Total')
    return grouped.sort_values('Total', ascending=False).reset_index(drop=True)


def budget_warnings(
    ledger: ExpenseLedger,
    reference_date: Any = None,
    threshold: float = BUDGET_WARNING_THRESHOLD,
) -> List[BudgetWarning]:
    """Warnings about the reference month's spending against income and savings goal."""
    reference = parse_date(reference_date) or date.today()
    totals = ledger_totals(ledger, reference)
    spent = totals.total_expenses
    income = totals.income
    goal = max(0.0, ledger.savings_goal)
    warnings: List[BudgetWarning] = []

    if spent <= 0:
        return warnings
    if income <= 0:
        warnings.append(BudgetWarning(
            'no_income', LEVEL_WARNING,
            f"{format_currency(spent)} spent this month but no income is set.",
        ))
        return warnings

    if spent > income:
        warnings.append(BudgetWarning(
            'over_income', LEVEL_ERROR,
            f"Spending {format_currency(spent)} exceeds income by {format_currency(spent - income)}.",
        ))
        return warnings

    if goal > 0 and totals.balance < goal:
        warnings.append(BudgetWarning(
            'savings_goal_at_risk', LEVEL_WARNING,
            f"Only {format_currency(totals.balance)} left; savings goal is {format_currency(goal)}.",
        ))
        return warnings

    spendable = income - goal
    if spendable > 0 and spent >= threshold * spendable:
        warnings.append(BudgetWarning(
            'approaching_limit', LEVEL_INFO,
            f"{spent / spendable:.0%} of this month's spendable {format_currency(spendable)} is used.",
        ))
    return warnings


def _month_period(month: Any) -> Optional[pd.Period]:
    if isinstance(month, pd.Period):
        return month.asfreq('M')
    if month is None or month == '':
        return None
    parsed = parse_date(month)
    if parsed is None:
        return None
    return pd.Period(parsed, freq='M')
