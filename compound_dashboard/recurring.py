"""Helpers for materializing recurring expense templates into the ledger."""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta
from typing import Any, Callable, Iterable, List, Optional, Sequence, Set

import pandas as pd

from .models import Expense, RecurringTemplate, SUPPORTED_CADENCES, new_id, parse_date

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

LINKED_MATCH = 'linked'
LEGACY_MATCH = 'name+amount'

TEMPLATE_STATUS_COLUMNS = ['Template', 'Name', 'Amount', 'Category', 'Day', 'Next Occurrence', 'Status']


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamped_date(year: int, month: int, day: int) -> date:
    """Date for ``day`` in the given month, pulled into ``1..days_in_month``."""
    return date(year, month, min(max(1, day), days_in_month(year, month)))


def occurrence_date(template: RecurringTemplate, reference_date: Any = None) -> date:
    """Next occurrence of ``template`` on or after ``reference_date``.

    The preferred day is clamped into the reference month (31 becomes 30
    in June, 28 or 29 in February).  When that day has already passed the
    occurrence moves to the following month, clamped the same way.
    """
    reference = _reference(reference_date)
    current = clamped_date(reference.year, reference.month, template.preferred_day)
    if current >= reference:
        return current
    following = reference.replace(day=1) + timedelta(days=days_in_month(reference.year, reference.month))
    return clamped_date(following.year, following.month, template.preferred_day)


def match_kind(template: RecurringTemplate, expense: Expense, occurrence: date) -> Optional[str]:
    """How ``expense`` already covers ``template`` for the occurrence month.

    Expenses linked through ``recurring_id`` match on the template id.
    Unlinked expenses (created before templates were linked) match on
    name and amount to the cent, which can mistake two unrelated
    same-priced expenses for one another.  Dates that cannot be parsed
    never match.
    """
    occurred = expense.occurred_on
    if occurred is None or (occurred.year, occurred.month) != (occurrence.year, occurrence.month):
        return None
    if expense.recurring_id:
        return LINKED_MATCH if expense.recurring_id == template.id else None
    if expense.name == template.name and _cents(expense.amount) == _cents(template.amount):
        return LEGACY_MATCH
    return None


def find_existing_occurrence(
    template: RecurringTemplate,
    expenses: Iterable[Expense],
    occurrence: date,
) -> Optional[Expense]:
    for expense in expenses:
        if match_kind(template, expense, occurrence):
            return expense
    return None


def apply_template(
    template: RecurringTemplate,
    existing_expenses: Sequence[Expense] = (),
    reference_date: Any = None,
    *,
    id_factory: IdFactory = new_id,
) -> Optional[Expense]:
    """Create the next occurrence of ``template`` right away ("apply now").

    No duplicate check happens here: the user asked for it explicitly.
    ``existing_expenses`` is only used to keep the new id unique.  Returns
    ``None`` for a template that cannot produce a valid expense.
    """
    if not _is_usable(template):
        return None
    taken = {expense.id for expense in existing_expenses}
    occurrence = occurrence_date(template, reference_date)
    return _materialize(template, occurrence, taken, id_factory)


def apply_all_templates(
    templates: Iterable[RecurringTemplate],
    existing_expenses: Sequence[Expense],
    reference_date: Any = None,
    *,
    id_factory: IdFactory = new_id,
) -> List[Expense]:
    """Materialize every template whose next occurrence is not in the ledger yet.

    Each template is checked against the same ``existing_expenses``
    snapshot, so the call is idempotent: feeding its output back in as
    existing expenses yields nothing new for the same reference date.
    """
    reference = _reference(reference_date)
    taken = {expense.id for expense in existing_expenses}
    seen: Set[str] = set()
    created: List[Expense] = []

    for template in templates:
        if template.id in seen:
            continue
        seen.add(template.id)
        if not _is_usable(template):
            continue
        occurrence = occurrence_date(template, reference)
        existing = find_existing_occurrence(template, existing_expenses, occurrence)
        if existing is not None:
            logger.debug(
                "Template %s already covered for %s by expense %s",
                template.id, occurrence.strftime('%Y-%m'), existing.id,
            )
            continue
        expense = _materialize(template, occurrence, taken, id_factory)
        taken.add(expense.id)
        created.append(expense)

    if created:
        logger.info("Materialized %d recurring expense(s) for %s", len(created), reference.isoformat())
    return created


def template_status(
    templates: Iterable[RecurringTemplate],
    existing_expenses: Sequence[Expense],
    reference_date: Any = None,
) -> pd.DataFrame:
    """One row per template with its next occurrence and whether it is booked."""
    reference = _reference(reference_date)
    rows = []
    for template in templates:
        occurrence = occurrence_date(template, reference)
        existing = find_existing_occurrence(template, existing_expenses, occurrence)
        if template.cadence not in SUPPORTED_CADENCES:
            status = 'Unsupported cadence'
        elif existing is not None:
            status = 'Applied'
        else:
            status = 'Pending'
        rows.append({
            'Template': template.id,
            'Name': template.name,
            'Amount': template.amount,
            'Category': template.category or '',
            'Day': template.preferred_day,
            'Next Occurrence': occurrence,
            'Status': status,
        })
    return pd.DataFrame(rows, columns=TEMPLATE_STATUS_COLUMNS)


def _materialize(
    template: RecurringTemplate,
    occurrence: date,
    taken: Set[str],
    id_factory: IdFactory,
) -> Expense:
    expense = Expense(
        id=_unique_id(taken, id_factory),
        name=template.name,
        amount=template.amount,
        date=occurrence.isoformat(),
        category=template.category,
        recurring_id=template.id,
    )
    logger.debug("Template %s -> expense %s on %s", template.id, expense.id, expense.date)
    return expense


def _is_usable(template: RecurringTemplate) -> bool:
    if template.cadence not in SUPPORTED_CADENCES:
        logger.warning("Skipping template %s with unsupported cadence %r", template.id, template.cadence)
        return False
    if not template.name or template.amount <= 0:
        logger.warning("Skipping template %s without a name or a positive amount", template.id)
        return False
    return True


def _unique_id(taken: Set[str], id_factory: IdFactory) -> str:
    candidate = id_factory()
    suffix = 1
    unique = candidate
    while unique in taken:
        suffix += 1
        unique = f"{candidate}-{suffix}"
    return unique


def _cents(amount: float) -> int:
    return int(round(amount * 100))


def _reference(value: Any) -> date:
    parsed = parse_date(value)
    return parsed if parsed is not None else date.today()
