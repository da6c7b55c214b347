"""Domain records for scenarios, the expense ledger and the per-user document.

Records are plain dataclasses.  ``from_dict`` constructors are tolerant
in the same way the storage layer is: unknown keys are ignored, missing
or malformed values fall back to defaults, and numeric text goes through
:func:`compound_dashboard.parsing.parse_number`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .config import LEGACY_SCENARIO_NAME, SCENARIO_DEFAULTS
from .parsing import parse_days, parse_number, parse_percent

MONTHLY = 'monthly'
SUPPORTED_CADENCES = {MONTHLY}
LEGACY_SCENARIO_FIELDS = ('principal', 'daily_rate_percent', 'days', 'daily_contribution')


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO date/datetime (or anything pandas understands) to a date.

    Returns ``None`` for blanks and anything unparseable.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        ts = pd.to_datetime(value, errors='coerce')
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.date()


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ScenarioParameters:
    principal: float
    daily_rate: float
    days: int
    daily_contribution: float


@dataclass(frozen=True)
class Scenario:
    """A named projection configuration, stored as the user typed it."""

    id: str
    name: str
    principal: str = SCENARIO_DEFAULTS['principal']
    daily_rate_percent: str = SCENARIO_DEFAULTS['daily_rate_percent']
    days: str = SCENARIO_DEFAULTS['days']
    daily_contribution: str = SCENARIO_DEFAULTS['daily_contribution']
    updated_at: Optional[str] = None

    def parameters(self) -> ScenarioParameters:
        return ScenarioParameters(
            principal=parse_number(self.principal),
            daily_rate=parse_percent(self.daily_rate_percent),
            days=parse_days(self.days),
            daily_contribution=parse_number(self.daily_contribution),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional['Scenario']:
        scenario_id = _optional_text(data.get('id'))
        if scenario_id is None:
            return None
        values = {
            key: str(data[key]) if data.get(key) is not None else default
            for key, default in SCENARIO_DEFAULTS.items()
        }
        return cls(
            id=scenario_id,
            name=str(data.get('name') or ''),
            updated_at=_optional_text(data.get('updated_at')),
            **values,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'principal': self.principal,
            'daily_rate_percent': self.daily_rate_percent,
            'days': self.days,
            'daily_contribution': self.daily_contribution,
            'updated_at': self.updated_at,
        }


@dataclass(frozen=True)
class Expense:
    id: str
    name: str
    amount: float
    date: str
    category: Optional[str] = None
    recurring_id: Optional[str] = None

    @property
    def occurred_on(self) -> Optional[date]:
        return parse_date(self.date)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional['Expense']:
        expense_id = _optional_text(data.get('id'))
        if expense_id is None:
            return None
        return cls(
            id=expense_id,
            name=str(data.get('name') or '').strip(),
            amount=parse_number(data.get('amount')),
            date=str(data.get('date') or ''),
            category=_optional_text(data.get('category')),
            recurring_id=_optional_text(data.get('recurring_id')),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'date': self.date,
        }
        if self.category:
            payload['category'] = self.category
        if self.recurring_id:
            payload['recurring_id'] = self.recurring_id
        return payload


@dataclass(frozen=True)
class RecurringTemplate:
    id: str
    name: str
    amount: float
    preferred_day: int = 1
    category: Optional[str] = None
    cadence: str = MONTHLY

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional['RecurringTemplate']:
        template_id = _optional_text(data.get('id'))
        if template_id is None:
            return None
        return cls(
            id=template_id,
            name=str(data.get('name') or '').strip(),
            amount=parse_number(data.get('amount')),
            preferred_day=min(31, max(1, parse_days(data.get('preferred_day', 1)))),
            category=_optional_text(data.get('category')),
            cadence=str(data.get('cadence') or MONTHLY).lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'amount': self.amount,
            'cadence': self.cadence,
            'preferred_day': self.preferred_day,
        }
        if self.category:
            payload['category'] = self.category
        return payload


@dataclass
class ExpenseLedger:
    income: float = 0.0
    savings_goal: float = 0.0
    expenses: List[Expense] = field(default_factory=list)
    recurring: List[RecurringTemplate] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> 'ExpenseLedger':
        if not isinstance(data, Mapping):
            return cls()
        expenses = [
            expense for expense in (
                Expense.from_dict(item) for item in _as_list(data.get('expenses'))
            )
            if expense is not None
        ]
        recurring = [
            template for template in (
                RecurringTemplate.from_dict(item) for item in _as_list(data.get('recurring'))
            )
            if template is not None
        ]
        return cls(
            income=parse_number(data.get('income')),
            savings_goal=parse_number(data.get('savings_goal')),
            expenses=expenses,
            recurring=recurring,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'income': self.income,
            'savings_goal': self.savings_goal,
            'expenses': [expense.to_dict() for expense in self.expenses],
            'recurring': [template.to_dict() for template in self.recurring],
        }


@dataclass
class UserData:
    """Everything stored for one user: scenarios, progress and the ledger."""

    scenarios: List[Scenario] = field(default_factory=list)
    current_scenario_id: Optional[str] = None
    completed: Dict[str, List[int]] = field(default_factory=dict)
    ledger: ExpenseLedger = field(default_factory=ExpenseLedger)

    @classmethod
    def from_dict(cls, data: Any) -> 'UserData':
        if not isinstance(data, Mapping):
            return cls()
        if 'scenarios' not in data and any(key in data for key in LEGACY_SCENARIO_FIELDS):
            legacy = _legacy_scenario(data)
            scenarios = [legacy]
            current_id: Optional[str] = legacy.id
        else:
            scenarios = [
                scenario for scenario in (
                    Scenario.from_dict(item) for item in _as_list(data.get('scenarios'))
                )
                if scenario is not None
            ]
            current_id = _optional_text(data.get('current_scenario_id'))
            known = {scenario.id for scenario in scenarios}
            if current_id not in known:
                current_id = scenarios[0].id if scenarios else None

        return cls(
            scenarios=scenarios,
            current_scenario_id=current_id,
            completed=_completed_from_dict(data.get('completed')),
            ledger=ExpenseLedger.from_dict(data.get('ledger')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scenarios': [scenario.to_dict() for scenario in self.scenarios],
            'current_scenario_id': self.current_scenario_id,
            'completed': {key: sorted(set(days)) for key, days in self.completed.items() if days},
            'ledger': self.ledger.to_dict(),
        }


def _as_list(value: Any) -> List[Any]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _completed_from_dict(value: Any) -> Dict[str, List[int]]:
    if not isinstance(value, Mapping):
        return {}
    completed: Dict[str, List[int]] = {}
    for key, days in value.items():
        if not isinstance(days, list):
            continue
        cleaned = sorted({parse_days(day) for day in days} - {0})
        if cleaned:
            completed[str(key)] = cleaned
    return completed


def _legacy_scenario(data: Mapping[str, Any]) -> Scenario:
    """Build the single scenario a pre-scenario document described."""
    values = {
        key: str(data[key]) if data.get(key) is not None else SCENARIO_DEFAULTS[key]
        for key in LEGACY_SCENARIO_FIELDS
    }
    return Scenario(id=new_id(), name=LEGACY_SCENARIO_NAME, updated_at=utc_now_iso(), **values)
