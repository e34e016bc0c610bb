"""Budget state transitions, derived totals and change notification.

The module is split in two layers:

* pure functions (``add_line_item``, ``update_line_item`` ...) that take a
  :class:`~budget_planner.models.BudgetState` and return a new one, and
* :class:`BudgetModel`, which owns the current state for one UI session and
  notifies subscribers (storage, chart) after every effective change.

Nothing here knows about Streamlit, Plotly or the filesystem; adapters are
attached through :meth:`BudgetModel.subscribe`.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import NEW_ITEM_NAME, PLACEHOLDER_NAME, PLACEHOLDER_VALUE, RESET_PROMPT
from .logging_utils import get_logger
from .models import (
    BudgetState,
    DerivedTotals,
    IdFactory,
    LineItem,
    check_kind,
    default_state,
    new_item_id,
    normalize_currency,
    parse_amount,
)

logger = get_logger(__name__)

Listener = Callable[[BudgetState], None]
Confirm = Callable[[str], bool]


# ---------------------------------------------------------------------------
# Pure state transitions
# ---------------------------------------------------------------------------


def _fresh_id(existing: Tuple[LineItem, ...], id_factory: IdFactory) -> str:
    taken = {item.id for item in existing}
    item_id = id_factory()
    while item_id in taken:
        item_id = id_factory()
    return item_id


def add_line_item(
    state: BudgetState,
    kind: str,
    id_factory: IdFactory = new_item_id,
) -> Tuple[BudgetState, LineItem]:
    """Append a zero-amount item named ``"New Item"`` to ``kind``."""
    items = state.items(kind)
    item = LineItem(id=_fresh_id(items, id_factory), name=NEW_ITEM_NAME, amount=0.0)
    return replace(state, **{kind: items + (item,)}), item


def update_line_item(
    state: BudgetState,
    kind: str,
    item_id: str,
    patch: Mapping[str, Any],
) -> BudgetState:
    """Apply ``patch`` (``name`` and/or ``amount``) to the item with ``item_id``.

    Returns ``state`` itself when no item matches, so callers can detect the
    no-op with an identity check.
    """
    items = state.items(kind)
    changes: Dict[str, Any] = {}
    if 'name' in patch:
        name = patch['name']
        changes['name'] = '' if name is None else str(name)
    if 'amount' in patch:
        changes['amount'] = parse_amount(patch['amount'])

    updated: List[LineItem] = []
    found = False
    for item in items:
        if item.id == item_id:
            found = True
            item = replace(item, **changes)
        updated.append(item)
    if not found:
        return state
    return replace(state, **{kind: tuple(updated)})


def remove_line_item(state: BudgetState, kind: str, item_id: str) -> BudgetState:
    """Drop the item with ``item_id``; returns ``state`` unchanged when absent."""
    items = state.items(kind)
    remaining = tuple(item for item in items if item.id != item_id)
    if len(remaining) == len(items):
        return state
    return replace(state, **{kind: remaining})


def set_note(state: BudgetState, text: str) -> BudgetState:
    return replace(state, note=text)


def set_currency(state: BudgetState, code: str) -> BudgetState:
    return replace(state, currency=normalize_currency(code))


def compute_totals(state: BudgetState) -> DerivedTotals:
    """Sum the numeric value of every income and expense item."""
    return DerivedTotals(
        total_income=sum((item.value for item in state.incomes), 0.0),
        total_expenses=sum((item.value for item in state.expenses), 0.0),
    )


def compute_expense_breakdown(state: BudgetState) -> List[Dict[str, Any]]:
    """Return ``{name, value}`` rows for every expense with a positive value.

    A single placeholder row is returned when there is nothing to chart, so a
    pie chart always has at least one segment.

    Example:
        >>> compute_expense_breakdown(BudgetState())
        [{'name': 'No expenses', 'value': 1}]
    """
    rows = [
        {'name': item.name, 'value': item.value}
        for item in state.expenses
        if item.value > 0
    ]
    if not rows:
        return [{'name': PLACEHOLDER_NAME, 'value': PLACEHOLDER_VALUE}]
    return rows


def has_expenses(state: BudgetState) -> bool:
    """True when at least one expense contributes a positive amount.

    When False, ``compute_expense_breakdown`` returns the placeholder row.
    """
    return any(item.value > 0 for item in state.expenses)


# ---------------------------------------------------------------------------
# Session-owned model
# ---------------------------------------------------------------------------


class BudgetModel:
    """Holds the current budget for one session and broadcasts changes."""

    def __init__(
        self,
        state: Optional[BudgetState] = None,
        *,
        id_factory: IdFactory = new_item_id,
    ):
        """Initialize the model.

        Args:
            state: Starting state, typically restored from storage.
                Defaults to the starter budget.
            id_factory: Callable producing fresh line item ids.
        """
        self._id_factory = id_factory
        self._state = state if state is not None else default_state(id_factory)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> BudgetState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state changes and return an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, new_state: BudgetState) -> bool:
        if new_state is self._state:
            return False
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return True

    # Mutations -------------------------------------------------------------

    def add_line_item(self, kind: str) -> LineItem:
        new_state, item = add_line_item(self._state, kind, self._id_factory)
        self._commit(new_state)
        logger.debug("Added %s item %s", kind, item.id)
        return item

    def update_line_item(self, kind: str, item_id: str, patch: Mapping[str, Any]) -> bool:
        """Patch an item in place; returns False when ``item_id`` is unknown."""
        changed = self._commit(update_line_item(self._state, kind, item_id, patch))
        if not changed:
            logger.debug("Ignored update for unknown %s item %s", kind, item_id)
        return changed

    def remove_line_item(self, kind: str, item_id: str) -> bool:
        return self._commit(remove_line_item(self._state, kind, item_id))

    def set_note(self, text: str) -> None:
        self._commit(set_note(self._state, text))

    def set_currency(self, code: str) -> None:
        self._commit(set_currency(self._state, code))

    def reset(self, confirm: Confirm) -> bool:
        """Replace everything with the starter budget once ``confirm`` agrees.

        Args:
            confirm: Synchronous confirmation prompt; receives the question
                text and returns True to proceed.

        Returns:
            True if the state was reset, False if the user declined.
        """
        if not confirm(RESET_PROMPT):
            logger.info("Reset declined")
            return False
        self._commit(default_state(self._id_factory))
        logger.info("Budget reset to defaults")
        return True

    # Derived views ---------------------------------------------------------

    def compute_totals(self) -> DerivedTotals:
        return compute_totals(self._state)

    def compute_expense_breakdown(self) -> List[Dict[str, Any]]:
        return compute_expense_breakdown(self._state)

    def items(self, kind: str) -> Tuple[LineItem, ...]:
        return self._state.items(check_kind(kind))
