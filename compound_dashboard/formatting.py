"""Display formatting for money, rates and day counts.

Values are rounded here and nowhere else.
"""

from __future__ import annotations

from typing import Union

from .config import CURRENCY_SYMBOL

Number = Union[float, int]


def format_currency(amount: Number, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount with two decimals and the currency symbol.

    Example:
        >>> format_currency(1234.5)
        'R$ 1,234.50'
        >>> format_currency(-3, symbol='$')
        '-$3.00'
    """
    sign = '-' if amount < 0 else ''
    spacer = '' if symbol == '$' else ' '
    return f"{sign}{symbol}{spacer}{abs(amount):,.2f}"


def escape_currency_for_markdown(amount: Number, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount and escape ``$`` so Streamlit markdown does not read LaTeX."""
    return format_currency(amount, symbol).replace("$", "\\$")


def format_percent(rate: float, max_decimals: int = 6) -> str:
    """Render a decimal rate as a percentage without trailing zeros.

    Example:
        >>> format_percent(0.1)
        '10%'
        >>> format_percent(0.0123456789)
        '1.234568%'
    """
    text = f"{rate * 100:.{max_decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text == '-0':
        text = '0'
    return f"{text}%"
