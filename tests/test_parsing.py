"""Unit tests for compound_dashboard.parsing."""

from __future__ import annotations

import numpy as np
import pytest

from compound_dashboard.parsing import parse_days, parse_number, parse_percent


@pytest.mark.parametrize(
    'text, expected',
    [
        ('10', 10.0),
        ('2,5', 2.5),
        ('2.5', 2.5),
        ('1.234,56', 1234.56),
        ('1,234.56', 1234.56),
        ('1,000,000', 1_000_000.0),
        ('1.000.000', 1_000_000.0),
        ('1 000', 1000.0),
        ("1'250.75", 1250.75),
        ('R$ 1.234,50', 1234.5),
        ('US$ 99.90', 99.9),
        ('$-5', -5.0),
        ('-R$ 7,25', -7.25),
        ('  +3  ', 3.0),
        ('.5', 0.5),
    ],
)
def test_parse_number_accepts_common_money_formats(text, expected):
    assert parse_number(text) == pytest.approx(expected)


@pytest.mark.parametrize('text', ['', '   ', 'abc', '12abc', '-', 'R$', '--5', '1.2.3,4,5', '10%', ','])
def test_parse_number_falls_back_to_zero(text):
    assert parse_number(text) == 0.0


def test_parse_number_rejects_non_finite_and_missing_values():
    assert parse_number(None) == 0.0
    assert parse_number(float('nan')) == 0.0
    assert parse_number(float('inf')) == 0.0
    assert parse_number('9' * 400) == 0.0
    assert parse_number(True) == 0.0


def test_parse_number_passes_numbers_through():
    assert parse_number(7) == 7.0
    assert parse_number(np.float64(1.5)) == 1.5
    assert parse_number(np.int64(3)) == 3.0


def test_parse_number_custom_default():
    assert parse_number('n/a', default=-1.0) == -1.0


def test_parse_percent_converts_to_decimal():
    assert parse_percent('10') == pytest.approx(0.10)
    assert parse_percent('2,5%') == pytest.approx(0.025)
    assert parse_percent('junk') == 0.0


def test_parse_days_floors_and_clamps():
    assert parse_days('7') == 7
    assert parse_days('7,9') == 7
    assert parse_days(3.99) == 3
    assert parse_days('-4') == 0
    assert parse_days('') == 0
    assert isinstance(parse_days(float('nan')), int)
