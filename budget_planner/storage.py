"""Local persistence for the budget.

:class:`LocalStorage` is a tiny string-keyed store kept in one JSON file on
the local machine, in the spirit of a browser's ``localStorage``.
:class:`BudgetStorage` reads and writes the budget snapshot under a fixed key
on top of it.

Persistence is best effort: a missing or unreadable snapshot loads as
``None`` and a failed write is logged and dropped.  Neither ever interrupts
the user.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import (
    LEGACY_EXPENSES_KEY,
    LEGACY_INCOMES_KEY,
    STORAGE_KEY,
    STORAGE_PATH,
    UNNAMED_ITEM_NAME,
)
from .logging_utils import get_logger
from .models import (
    BudgetState,
    IdFactory,
    LineItem,
    new_item_id,
    parse_amount,
)

logger = get_logger(__name__)


class LocalStorage:
    """String key/value store persisted as a single JSON object on disk."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize local storage.

        Args:
            path: Optional custom file for the store.
                  Defaults to STORAGE_PATH from config.
        """
        self.path = Path(path) if path is not None else STORAGE_PATH

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError, RecursionError) as exc:
            logger.warning("Ignoring unreadable local storage at %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as handle:
            json.dump(data, handle, indent=2, sort_keys=True)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``.

        Raises:
            OSError: If the store cannot be written.
        """
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def clear(self) -> None:
        self._write({})

    def keys(self) -> List[str]:
        return sorted(self._read())


class BudgetStorage:
    """Loads and saves the budget snapshot under a fixed storage key."""

    def __init__(
        self,
        local_storage: Optional[LocalStorage] = None,
        key: str = STORAGE_KEY,
        *,
        id_factory: IdFactory = new_item_id,
    ):
        self.local_storage = local_storage or LocalStorage()
        self.key = key
        self._id_factory = id_factory

    def load(self) -> Optional[BudgetState]:
        """Return the stored budget, or ``None`` if absent or unparseable.

        When the canonical key is missing but the older two-key layout
        (separate ``incomes``/``expenses`` lists without ids) is present, the
        older data is upgraded into a :class:`BudgetState`.
        """
        raw = self.local_storage.get_item(self.key)
        if raw is None:
            return self._load_legacy()
        try:
            state = BudgetState.from_dict(json.loads(raw), self._id_factory)
        except (json.JSONDecodeError, ValueError, TypeError, OverflowError, RecursionError) as exc:
            logger.warning("Discarding unreadable budget snapshot %r: %s", self.key, exc)
            return None
        logger.info(
            "Restored budget with %d incomes and %d expenses",
            len(state.incomes),
            len(state.expenses),
        )
        return state

    def save(self, state: BudgetState) -> None:
        """Write the full state; failures are logged and swallowed."""
        try:
            payload = json.dumps(state.to_dict())
            self.local_storage.set_item(self.key, payload)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save budget snapshot %r: %s", self.key, exc)

    def clear(self) -> None:
        try:
            self.local_storage.remove_item(self.key)
        except OSError as exc:
            logger.warning("Could not clear budget snapshot %r: %s", self.key, exc)

    # Legacy layout ---------------------------------------------------------

    def _load_legacy(self) -> Optional[BudgetState]:
        raw_incomes = self.local_storage.get_item(LEGACY_INCOMES_KEY)
        raw_expenses = self.local_storage.get_item(LEGACY_EXPENSES_KEY)
        if raw_incomes is None and raw_expenses is None:
            return None
        try:
            incomes = self._upgrade_rows(raw_incomes)
            expenses = self._upgrade_rows(raw_expenses)
        except (json.JSONDecodeError, ValueError, TypeError, OverflowError, RecursionError) as exc:
            logger.warning("Discarding unreadable legacy budget data: %s", exc)
            return None
        logger.info("Upgraded legacy budget data (%d incomes, %d expenses)", len(incomes), len(expenses))
        return BudgetState(incomes=incomes, expenses=expenses)

    def _upgrade_rows(self, raw: Optional[str]) -> tuple:
        if raw is None:
            return ()
        rows: Any = json.loads(raw)
        if rows is None:
            return ()
        if not isinstance(rows, list):
            raise ValueError("legacy collection must be a list")
        items = []
        for row in rows:
            if not isinstance(row, dict):
                raise ValueError("legacy line item must be an object")
            name = str(row.get('name') or '').strip() or UNNAMED_ITEM_NAME
            items.append(
                LineItem(id=self._id_factory(), name=name, amount=parse_amount(row.get('amount')))
            )
        return tuple(items)


def attach_storage(model, storage: BudgetStorage):
    """Persist every change of ``model`` through ``storage``.

    Returns the unsubscribe callable from :meth:`BudgetModel.subscribe`.
    """
    return model.subscribe(storage.save)

