from __future__ import annotations

import pytest

from finance_core.services import FinanceStore
from finance_core.storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> FinanceStore:
    """A store that starts with no categories and no transactions."""
    return FinanceStore(storage, seed_defaults=False)


@pytest.fixture
def seeded_store(storage: MemoryStorage) -> FinanceStore:
    return FinanceStore(storage)


@pytest.fixture
def salary(store: FinanceStore):
    return store.add_category({"name": "工资", "type": "income", "icon": "💰"})


@pytest.fixture
def food(store: FinanceStore):
    return store.add_category({"name": "餐饮", "type": "expense", "icon": "🍔"})
