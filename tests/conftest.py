from __future__ import annotations

import itertools

import pytest

from budget_planner.storage import BudgetStorage, LocalStorage


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def local_storage(tmp_path):
    return LocalStorage(tmp_path / 'local_storage.json')


@pytest.fixture
def budget_storage(local_storage):
    return BudgetStorage(local_storage)
