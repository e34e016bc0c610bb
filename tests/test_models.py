"""Unit tests for budget_planner.models."""

from __future__ import annotations

import math

import pytest

from budget_planner.config import DEFAULT_EXPENSE_NAMES
from budget_planner.models import (
    BudgetState,
    LineItem,
    check_kind,
    coerce_amount,
    default_state,
    normalize_currency,
    parse_amount,
)


def test_parse_amount_keeps_numbers_and_raw_text() -> None:
    assert parse_amount("12.50") == 12.5
    assert parse_amount(" 7 ") == 7.0
    assert parse_amount(3) == 3.0
    assert parse_amount("abc") == "abc"
    assert parse_amount("") == ""
    assert parse_amount(None) == 0.0


def test_parse_amount_rejects_non_finite_text() -> None:
    assert parse_amount("nan") == "nan"
    assert parse_amount("inf") == "inf"
    assert parse_amount(math.inf) == "inf"


@pytest.mark.parametrize("raw", ["abc", "", "-20", -1, None, True, "nan"])
def test_coerce_amount_counts_bad_input_as_zero(raw) -> None:
    assert coerce_amount(raw) == 0.0


def test_line_item_value_uses_coerced_amount() -> None:
    assert LineItem(id="a", name="Rent", amount="1200").value == 1200.0
    assert LineItem(id="b", name="Typo", amount="12x").value == 0.0


def test_default_state_has_starter_categories(id_factory) -> None:
    state = default_state(id_factory)
    assert [item.name for item in state.incomes] == ["Primary Paycheck"]
    assert [item.name for item in state.expenses] == DEFAULT_EXPENSE_NAMES
    assert all(item.amount == 0 for item in state.incomes + state.expenses)
    assert state.note == ""
    assert state.currency == "USD"
    ids = [item.id for item in state.incomes + state.expenses]
    assert len(ids) == len(set(ids))


def test_from_dict_reassigns_missing_and_duplicate_ids(id_factory) -> None:
    payload = {
        'incomes': [{'name': 'Pay', 'amount': 10}],
        'expenses': [
            {'id': 'x', 'name': 'Rent', 'amount': 5},
            {'id': 'x', 'name': 'Food', 'amount': 2},
        ],
    }
    state = BudgetState.from_dict(payload, id_factory)
    assert state.incomes[0].id == 'id-1'
    assert [item.id for item in state.expenses] == ['x', 'id-2']
    assert state.currency == 'USD'
    assert state.note == ''


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {'incomes': 'nope'},
        {'expenses': [1, 2]},
        {'version': 99, 'incomes': [], 'expenses': []},
    ],
)
def test_from_dict_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ValueError):
        BudgetState.from_dict(payload)


def test_to_dict_is_versioned() -> None:
    state = BudgetState(incomes=(LineItem('a', 'Pay', 1.0),), note='hi', currency='EUR')
    assert state.to_dict() == {
        'version': 1,
        'incomes': [{'id': 'a', 'name': 'Pay', 'amount': 1.0}],
        'expenses': [],
        'note': 'hi',
        'currency': 'EUR',
    }


def test_check_kind_rejects_unknown_collection() -> None:
    assert check_kind('incomes') == 'incomes'
    with pytest.raises(ValueError):
        check_kind('savings')


def test_parse_amount_keeps_oversized_integers_as_text() -> None:
    huge = 10 ** 400
    assert parse_amount(huge) == str(huge)
    assert coerce_amount(huge) == 0.0


@pytest.mark.parametrize("code, expected", [("usd", "USD"), (" eur ", "EUR")])
def test_normalize_currency(code, expected) -> None:
    assert normalize_currency(code) == expected


@pytest.mark.parametrize("code", ["", "dollars", "U$D", None, 12])
def test_normalize_currency_rejects_non_iso_codes(code) -> None:
    with pytest.raises(ValueError):
        normalize_currency(code)
