"""Tests for materializing recurring expense templates."""

from __future__ import annotations

from datetime import date
import itertools
import logging

from compound_dashboard.models import Expense, RecurringTemplate
from compound_dashboard.recurring import (
    LEGACY_MATCH,
    LINKED_MATCH,
    TEMPLATE_STATUS_COLUMNS,
    apply_all_templates,
    apply_template,
    match_kind,
    occurrence_date,
    template_status,
)


def _ids(prefix='exp'):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def _template(template_id='rent', name='Rent', amount=1200.0, day=5, **extra):
    return RecurringTemplate(id=template_id, name=name, amount=amount, preferred_day=day, **extra)


def test_occurrence_in_reference_month_when_day_not_passed():
    assert occurrence_date(_template(day=15), date(2024, 6, 10)) == date(2024, 6, 15)
    assert occurrence_date(_template(day=10), date(2024, 6, 10)) == date(2024, 6, 10)


def test_occurrence_rolls_to_next_month_when_day_passed():
    assert occurrence_date(_template(day=5), date(2024, 6, 10)) == date(2024, 7, 5)
    assert occurrence_date(_template(day=5), date(2024, 12, 20)) == date(2025, 1, 5)


def test_preferred_day_is_clamped_to_month_length():
    assert occurrence_date(_template(day=31), date(2024, 6, 1)) == date(2024, 6, 30)
    assert occurrence_date(_template(day=31), date(2024, 2, 1)) == date(2024, 2, 29)
    assert occurrence_date(_template(day=31), date(2023, 2, 1)) == date(2023, 2, 28)
    # rolled-over occurrences are clamped too
    assert occurrence_date(_template(day=30), date(2024, 1, 31)) == date(2024, 2, 29)


def test_occurrence_accepts_text_reference():
    assert occurrence_date(_template(day=31), '2024-06-01') == date(2024, 6, 30)


def test_materialized_expense_links_back_to_template():
    template = _template(category='Housing')

    created = apply_all_templates([template], [], date(2024, 6, 1), id_factory=_ids())

    assert created == [
        Expense(id='exp1', name='Rent', amount=1200.0, date='2024-06-05', category='Housing', recurring_id='rent')
    ]


def test_apply_all_is_idempotent():
    templates = [_template(), _template('gym', 'Gym', 89.9, day=31)]
    reference = date(2024, 6, 10)

    first = apply_all_templates(templates, [], reference, id_factory=_ids())
    second = apply_all_templates(templates, first, reference, id_factory=_ids('other'))

    assert [expense.date for expense in first] == ['2024-07-05', '2024-06-30']
    assert second == []


def test_linked_expense_in_same_month_blocks_materialization():
    existing = [Expense(id='e1', name='Renamed rent', amount=999.0, date='2024-06-02', recurring_id='rent')]

    assert apply_all_templates([_template()], existing, date(2024, 6, 1)) == []


def test_linked_expense_in_other_month_does_not_block():
    existing = [Expense(id='e1', name='Rent', amount=1200.0, date='2024-05-05', recurring_id='rent')]

    created = apply_all_templates([_template()], existing, date(2024, 6, 1), id_factory=_ids())

    assert [expense.date for expense in created] == ['2024-06-05']


def test_unlinked_expense_with_same_name_and_amount_blocks():
    existing = [Expense(id='e1', name='Rent', amount=1200.004, date='2024-06-20T08:30:00+00:00')]

    assert apply_all_templates([_template()], existing, date(2024, 6, 1)) == []
    assert match_kind(_template(), existing[0], date(2024, 6, 5)) == LEGACY_MATCH


def test_unlinked_expense_with_different_amount_or_name_does_not_block():
    existing = [
        Expense(id='e1', name='Rent', amount=1200.01, date='2024-06-20'),
        Expense(id='e2', name='rent', amount=1200.0, date='2024-06-20'),
    ]

    created = apply_all_templates([_template()], existing, date(2024, 6, 1), id_factory=_ids())

    assert len(created) == 1


def test_expense_linked_to_another_template_does_not_block():
    existing = [Expense(id='e1', name='Rent', amount=1200.0, date='2024-06-05', recurring_id='old-rent')]

    assert match_kind(_template(), existing[0], date(2024, 6, 5)) is None
    assert len(apply_all_templates([_template()], existing, date(2024, 6, 1))) == 1


def test_unparseable_expense_date_never_matches():
    existing = [Expense(id='e1', name='Rent', amount=1200.0, date='not a date', recurring_id='rent')]

    assert match_kind(_template(), existing[0], date(2024, 6, 5)) is None
    assert len(apply_all_templates([_template()], existing, date(2024, 6, 1))) == 1


def test_match_kind_prefers_link():
    linked = Expense(id='e1', name='Rent', amount=1200.0, date='2024-06-05', recurring_id='rent')

    assert match_kind(_template(), linked, date(2024, 6, 5)) == LINKED_MATCH


def test_duplicate_template_ids_materialize_once():
    templates = [_template(), _template(name='Rent copy')]

    created = apply_all_templates(templates, [], date(2024, 6, 1), id_factory=_ids())

    assert [expense.name for expense in created] == ['Rent']


def test_new_ids_never_collide():
    existing = [Expense(id='same', name='Coffee', amount=5.0, date='2024-01-01')]
    templates = [_template(), _template('gym', 'Gym', 89.9)]

    created = apply_all_templates(templates, existing, date(2024, 6, 1), id_factory=lambda: 'same')

    assert [expense.id for expense in created] == ['same-2', 'same-3']


def test_unusable_templates_are_skipped(caplog):
    templates = [
        _template('weekly', cadence='weekly'),
        _template('free', amount=0.0),
        _template('blank', name=''),
    ]

    with caplog.at_level(logging.WARNING, logger='compound_dashboard.recurring'):
        created = apply_all_templates(templates, [], date(2024, 6, 1))

    assert created == []
    assert len(caplog.records) == 3


def test_apply_template_skips_duplicate_check():
    existing = [Expense(id='exp1', name='Rent', amount=1200.0, date='2024-06-05', recurring_id='rent')]

    expense = apply_template(_template(), existing, date(2024, 6, 1), id_factory=lambda: 'exp1')

    assert expense is not None
    assert expense.id == 'exp1-2'
    assert expense.date == '2024-06-05'
    assert expense.recurring_id == 'rent'


def test_apply_template_rejects_unusable_template():
    assert apply_template(_template(amount=-3.0), [], date(2024, 6, 1)) is None
    assert apply_template(_template(cadence='yearly'), [], date(2024, 6, 1)) is None


def test_template_status_reports_applied_and_pending():
    templates = [_template(), _template('gym', 'Gym', 89.9, day=20), _template('club', cadence='weekly')]
    existing = [Expense(id='e1', name='Rent', amount=1200.0, date='2024-06-05', recurring_id='rent')]

    status = template_status(templates, existing, date(2024, 6, 1))

    assert list(status.columns) == TEMPLATE_STATUS_COLUMNS
    assert status['Status'].tolist() == ['Applied', 'Pending', 'Unsupported cadence']
    assert status.loc[1, 'Next Occurrence'] == date(2024, 6, 20)


def test_template_status_empty():
    status = template_status([], [], date(2024, 6, 1))

    assert status.empty
    assert list(status.columns) == TEMPLATE_STATUS_COLUMNS
