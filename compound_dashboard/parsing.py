"""Permissive parsing of free-text numeric fields.

Every money, rate and day-count field in the dashboard is typed by hand,
so parsing never raises: anything that does not fit the grammar below
becomes the ``default`` (``0.0`` unless told otherwise).

Grammar::

    number   := sign? currency? sign? body
    currency := "R$" | "US$" | "$" | "€" | "£" | "¥"
    body     := digits mixed with "." "," " " "'" (at least one digit)

Separator rules:

* ``.`` and ``,`` both present: the right-most one is the decimal
  separator, the other one groups thousands (``1.234,56`` and
  ``1,234.56`` are both 1234.56).
* Only ``,``: decimal separator when it appears once (``2,5`` is 2.5),
  grouping when repeated (``1,000,000``).
* Only ``.``: decimal when it appears once, grouping when repeated.
* Spaces and apostrophes inside the body always group (``1 000``).
"""

from __future__ import annotations

import math
from typing import Any, Optional, Tuple

import numpy as np

# Longest first so "US$" is not read as "US" followed by "$"
CURRENCY_SYMBOLS = ('US$', 'R$', '$', '€', '£', '¥')
SIGNS = {'-': -1.0, '+': 1.0}
GROUPING_ONLY = {' ', "'"}
SEPARATORS = {'.', ','}


def parse_number(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite float, falling back to ``default``.

    Example:
        >>> parse_number('R$ 1.234,50')
        1234.5
        >>> parse_number('abc')
        0.0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float, np.number)):
        number = float(value)
        return number if math.isfinite(number) else default
    text = str(value).strip()
    if not text:
        return default

    split = _split_prefix(text)
    if split is None:
        return default
    sign, body = split

    normalized = _normalize_body(body)
    if normalized is None:
        return default
    try:
        number = float(normalized)
    except ValueError:
        return default
    if not math.isfinite(number):
        return default
    return sign * number


def parse_percent(value: Any, default: float = 0.0) -> float:
    """Parse a percentage field (``"10"`` or ``"10%"``) into a decimal rate."""
    if isinstance(value, str):
        value = value.strip().rstrip('%')
    return parse_number(value, default * 100.0) / 100.0


def parse_days(value: Any) -> int:
    """Parse a day count: floored and clamped at zero."""
    return max(0, math.floor(parse_number(value)))


def _split_prefix(text: str) -> Optional[Tuple[float, str]]:
    sign: Optional[float] = None
    rest = text
    if rest[:1] in SIGNS:
        sign = SIGNS[rest[0]]
        rest = rest[1:].lstrip()
    for symbol in CURRENCY_SYMBOLS:
        if rest.startswith(symbol):
            rest = rest[len(symbol):].lstrip()
            break
    if rest[:1] in SIGNS:
        if sign is not None:
            return None
        sign = SIGNS[rest[0]]
        rest = rest[1:].lstrip()
    return (sign if sign is not None else 1.0), rest


def _normalize_body(body: str) -> Optional[str]:
    if not body or not any(ch.isdigit() for ch in body):
        return None
    for ch in body:
        if not (ch.isdigit() or ch in SEPARATORS or ch in GROUPING_ONLY):
            return None
    body = ''.join(ch for ch in body if ch not in GROUPING_ONLY)

    dots = body.count('.')
    commas = body.count(',')
    if dots and commas:
        decimal = '.' if body.rfind('.') > body.rfind(',') else ','
        grouping = ',' if decimal == '.' else '.'
        if body.count(decimal) > 1:
            return None
    elif commas:
        decimal, grouping = (',', '') if commas == 1 else ('', ',')
    elif dots:
        decimal, grouping = ('.', '') if dots == 1 else ('', '.')
    else:
        return body

    if grouping:
        body = body.replace(grouping, '')
    if decimal:
        body = body.replace(decimal, '.')
    return body
