"""Unit tests for budget_planner.formatting."""

from __future__ import annotations

import pytest

from budget_planner.formatting import (
    escape_dollar_for_markdown,
    format_currency,
    leftover_message,
    leftover_status,
)


@pytest.mark.parametrize(
    "amount, currency, expected",
    [
        (1500, 'USD', '$1,500'),
        (1234.4, 'USD', '$1,234'),
        (-1200, 'USD', '-$1,200'),
        (-0.2, 'USD', '$0'),
        (50, 'eur', '€50'),
        (10, 'CHF', 'CHF 10'),
    ],
)
def test_format_currency_whole_units(amount, currency, expected) -> None:
    assert format_currency(amount, currency) == expected


def test_escape_dollar_for_markdown() -> None:
    assert escape_dollar_for_markdown('$1,200') == '\\$1,200'


def test_leftover_status() -> None:
    assert leftover_status(-1) == 'negative'
    assert leftover_status(0) == 'zero'
    assert leftover_status(0.5) == 'positive'


def test_leftover_messages() -> None:
    assert leftover_message(-250) == (
        "You are over budget by **$250**. Consider reducing expenses or increasing income."
    )
    assert leftover_message(0) == "You are breaking even. You might want to set aside some savings."
    assert leftover_message(1500) == "Nice! You have **$1,500** remaining this month."
