"""Data classes describing a monthly budget.

A budget is two ordered collections of :class:`LineItem` (incomes and
expenses) plus a free-text note and a currency code.  Everything here is
immutable; :mod:`budget_planner.budget_model` produces new states instead of
mutating existing ones.
"""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .config import (
    DEFAULT_CURRENCY,
    DEFAULT_EXPENSE_NAMES,
    DEFAULT_INCOME_NAMES,
    SCHEMA_VERSION,
)

INCOMES = "incomes"
EXPENSES = "expenses"
KINDS: Tuple[str, str] = (INCOMES, EXPENSES)

Amount = Union[float, str]
IdFactory = Callable[[], str]

_CURRENCY_CODE = re.compile(r'^[A-Z]{3}$')


def new_item_id() -> str:
    """Return a fresh opaque identifier for a line item."""
    return uuid.uuid4().hex


def check_kind(kind: str) -> str:
    if kind not in KINDS:
        raise ValueError(f"Unknown line item collection: {kind!r} (expected one of {KINDS})")
    return kind


def normalize_currency(code: Any) -> str:
    """Upper-case a three-letter ISO currency code.

    Raises:
        ValueError: If ``code`` is not three letters.
    """
    normalized = code.strip().upper() if isinstance(code, str) else ''
    if not _CURRENCY_CODE.match(normalized):
        raise ValueError(f"Currency must be a three-letter ISO code, got {code!r}")
    return normalized


def parse_amount(value: Any) -> Amount:
    """Normalise user input for an amount field.

    Numbers and numeric-looking text become floats.  Anything else is kept
    verbatim so the input widget can redisplay exactly what was typed.

    Example:
        >>> parse_amount("12.50")
        12.5
        >>> parse_amount("abc")
        'abc'
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # integers too large for a float; very long ones cannot even be printed
            try:
                return str(value)
            except ValueError:
                return ''
        return number if math.isfinite(number) else str(value)
    text = str(value)
    try:
        number = float(text.strip())
    except ValueError:
        return text
    # "nan" and "inf" parse as floats but are not amounts
    return number if math.isfinite(number) else text


def coerce_amount(value: Any) -> float:
    """Return the numeric contribution of an amount to the totals.

    Non-numeric, non-finite and negative values all count as ``0``.

    Example:
        >>> coerce_amount("300")
        300.0
        >>> coerce_amount("-5")
        0.0
        >>> coerce_amount("n/a")
        0.0
    """
    parsed = parse_amount(value)
    if isinstance(parsed, str):
        return 0.0
    if math.isnan(parsed) or math.isinf(parsed) or parsed < 0:
        return 0.0
    return parsed


@dataclass(frozen=True)
class LineItem:
    id: str
    name: str
    amount: Amount = 0.0

    @property
    def value(self) -> float:
        """Amount as counted towards totals."""
        return coerce_amount(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'amount': self.amount}

    @classmethod
    def from_dict(cls, data: Any, id_factory: IdFactory = new_item_id) -> "LineItem":
        """Build an item from its stored form.

        Raises:
            ValueError: If ``data`` is not a mapping.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Line item must be an object, got {type(data).__name__}")
        item_id = data.get('id')
        if not isinstance(item_id, str) or not item_id:
            item_id = id_factory()
        name = data.get('name')
        return cls(
            id=item_id,
            name='' if name is None else str(name),
            amount=parse_amount(data.get('amount')),
        )


@dataclass(frozen=True)
class DerivedTotals:
    total_income: float
    total_expenses: float

    @property
    def leftover(self) -> float:
        return self.total_income - self.total_expenses


@dataclass(frozen=True)
class BudgetState:
    incomes: Tuple[LineItem, ...] = field(default_factory=tuple)
    expenses: Tuple[LineItem, ...] = field(default_factory=tuple)
    note: str = ''
    currency: str = DEFAULT_CURRENCY

    def items(self, kind: str) -> Tuple[LineItem, ...]:
        return getattr(self, check_kind(kind))

    def to_dict(self) -> Dict[str, Any]:
        """Return the canonical (versioned) storage representation."""
        return {
            'version': SCHEMA_VERSION,
            INCOMES: [item.to_dict() for item in self.incomes],
            EXPENSES: [item.to_dict() for item in self.expenses],
            'note': self.note,
            'currency': self.currency,
        }

    @classmethod
    def from_dict(cls, data: Any, id_factory: IdFactory = new_item_id) -> "BudgetState":
        """Build a state from its canonical storage representation.

        Items missing an id, or repeating one already seen in the same
        collection, receive a fresh id so identities stay unique.

        Raises:
            ValueError: If the payload is not a version this code understands
                or its collections are not lists of objects.
        """
        if not isinstance(data, dict):
            raise ValueError("Budget snapshot must be an object")
        version = data.get('version', SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise ValueError(f"Unsupported budget snapshot version: {version!r}")

        collections: Dict[str, Tuple[LineItem, ...]] = {}
        for kind in KINDS:
            raw_items = data.get(kind)
            if raw_items is None:
                raw_items = []
            if not isinstance(raw_items, list):
                raise ValueError(f"'{kind}' must be a list")
            collections[kind] = _unique_items(
                (LineItem.from_dict(row, id_factory) for row in raw_items),
                id_factory,
            )

        note = data.get('note')
        try:
            currency = normalize_currency(data.get('currency'))
        except ValueError:
            currency = DEFAULT_CURRENCY
        return cls(
            incomes=collections[INCOMES],
            expenses=collections[EXPENSES],
            note=note if isinstance(note, str) else '',
            currency=currency,
        )


def _unique_items(items: Iterable[LineItem], id_factory: IdFactory) -> Tuple[LineItem, ...]:
    seen = set()
    result: List[LineItem] = []
    for item in items:
        if item.id in seen:
            fresh = id_factory()
            while fresh in seen:
                fresh = id_factory()
            item = LineItem(id=fresh, name=item.name, amount=item.amount)
        seen.add(item.id)
        result.append(item)
    return tuple(result)


def default_state(id_factory: Optional[IdFactory] = None) -> BudgetState:
    """Return the starter budget: one paycheck and common expense categories at zero."""
    make_id = id_factory or new_item_id
    return BudgetState(
        incomes=tuple(LineItem(id=make_id(), name=name, amount=0.0) for name in DEFAULT_INCOME_NAMES),
        expenses=tuple(LineItem(id=make_id(), name=name, amount=0.0) for name in DEFAULT_EXPENSE_NAMES),
        note='',
        currency=DEFAULT_CURRENCY,
    )
