"""Formatting utilities for currency amounts and summary messages."""

from __future__ import annotations

from typing import Dict, Union

from .config import DEFAULT_CURRENCY

CURRENCY_SYMBOLS: Dict[str, str] = {
    'USD': '$',
    'CAD': 'CA$',
    'AUD': 'A$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'INR': '₹',
}


def format_currency(amount: Union[float, int], currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount in whole currency units.

    Fractions are rounded away for display only; stored amounts keep their
    precision.  Codes without a known symbol are used as a prefix.

    Args:
        amount: The amount to format
        currency: ISO currency code

    Returns:
        Formatted currency string

    Example:
        >>> format_currency(1234.56)
        '$1,235'
        >>> format_currency(-50, 'EUR')
        '-€50'
        >>> format_currency(10, 'CHF')
        'CHF 10'
    """
    code = (currency or DEFAULT_CURRENCY).upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    rounded = round(float(amount))
    sign = '-' if rounded < 0 else ''
    return f"{sign}{symbol}{abs(rounded):,}"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not read them as LaTeX.

    Example:
        >>> escape_dollar_for_markdown('$1,200')
        '\\\\$1,200'
    """
    return text.replace("$", "\\$")


def leftover_status(leftover: float) -> str:
    """Classify leftover as ``'negative'``, ``'zero'`` or ``'positive'``."""
    if leftover < 0:
        return 'negative'
    if leftover == 0:
        return 'zero'
    return 'positive'


def leftover_message(leftover: float, currency: str = DEFAULT_CURRENCY) -> str:
    """Return the qualitative summary line for a leftover amount."""
    status = leftover_status(leftover)
    if status == 'negative':
        return (
            f"You are over budget by **{format_currency(abs(leftover), currency)}**. "
            "Consider reducing expenses or increasing income."
        )
    if status == 'zero':
        return "You are breaking even. You might want to set aside some savings."
    return f"Nice! You have **{format_currency(leftover, currency)}** remaining this month."


_MARKDOWN_SPECIALS = "\\`*_{}[]()#+!|~$"


def escape_markdown(text: str) -> str:
    """Backslash-escape characters Streamlit markdown would interpret.

    Example:
        >>> escape_markdown('*Rent* $900')
        '\\\\*Rent\\\\* \\\\$900'
    """
    return ''.join(f"\\{ch}" if ch in _MARKDOWN_SPECIALS else ch for ch in text)
