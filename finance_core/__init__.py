"""Core business logic package for the finance tracker."""

from .models import EXPENSE, INCOME, Category, State, Stats, Transaction
from .services import STORAGE_KEY, FinanceStore
from .storage import JSONStorage, MemoryStorage
from .exceptions import CategoryInUseError, PersistenceError, RecordNotFoundError, ValidationError

__all__ = [
    "INCOME",
    "EXPENSE",
    "Category",
    "Transaction",
    "Stats",
    "State",
    "FinanceStore",
    "STORAGE_KEY",
    "JSONStorage",
    "MemoryStorage",
    "CategoryInUseError",
    "PersistenceError",
    "RecordNotFoundError",
    "ValidationError",
]
