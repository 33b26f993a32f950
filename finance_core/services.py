"""Framework-agnostic finance store: categories, transactions and totals."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .exceptions import CategoryInUseError, PersistenceError, RecordNotFoundError, ValidationError
from .models import (
    EXPENSE,
    INCOME,
    TRANSACTION_TYPES,
    Category,
    State,
    Stats,
    Transaction,
    default_categories,
)
from .validators import (
    DESCRIPTION_MAX_LENGTH,
    ICON_MAX_LENGTH,
    NAME_MAX_LENGTH,
    parse_amount,
    validate_date,
    validate_optional_str,
    validate_optional_type,
    validate_required_str,
    validate_text,
    validate_type,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "finance-storage"


class FinanceStore:
    """Owns the category and transaction collections and mediates persistence.

    Transactions are kept newest-first, categories in insertion order. Every
    public method runs under a single re-entrant lock, and each mutation is
    written to storage after it has been applied in memory.
    """

    def __init__(self, storage: Any, key: str = STORAGE_KEY, *, seed_defaults: bool = True) -> None:
        self._storage = storage
        self._key = key
        self._seed_defaults = seed_defaults
        self._lock = threading.RLock()
        self._transactions: List[Transaction] = []
        self._categories: List[Category] = []
        self.reload()  # Hydrate in-memory state from persistence on construction.

    # Transactions ---------------------------------------------------------
    def add_transaction(self, payload: Dict[str, object]) -> Transaction:
        with self._lock:
            data = self._validate_transaction(payload)
            transaction = Transaction(**data)
            self._transactions.insert(0, transaction)
            logger.info("Added %s transaction %s", transaction.type, transaction.id)
            self._persist()
            return transaction

    def edit_transaction(self, transaction_id: str, changes: Dict[str, object]) -> Transaction:
        with self._lock:
            index = self._transaction_index(transaction_id)
            existing = self._transactions[index]
            # Merge existing serialised data with incoming changes to support partial updates.
            merged_payload = {**_normalize_keys(existing.to_dict()), **_normalize_keys(changes)}
            if "type" not in changes:
                # Follow the (possibly new) category.
                merged_payload.pop("type", None)
            data = self._validate_transaction(merged_payload, current=existing)
            updated = Transaction(**data)
            self._transactions[index] = updated
            logger.info("Edited transaction %s", transaction_id)
            self._persist()
            return updated

    def delete_transaction(self, transaction_id: str) -> None:
        with self._lock:
            index = self._transaction_index(transaction_id)
            del self._transactions[index]
            logger.info("Deleted transaction %s", transaction_id)
            self._persist()

    def get_transaction(self, transaction_id: str) -> Transaction:
        with self._lock:
            return self._transactions[self._transaction_index(transaction_id)]

    def list_transactions(self, type: Optional[str] = None) -> List[Transaction]:
        kind = validate_optional_type(type)
        with self._lock:
            return [t for t in self._transactions if kind is None or t.type == kind]

    # Categories -----------------------------------------------------------
    def add_category(self, payload: Dict[str, object]) -> Category:
        with self._lock:
            data = self._validate_category(payload)
            category = Category(**data)
            self._categories.append(category)
            logger.info("Added %s category %s (%s)", category.type, category.id, category.name)
            self._persist()
            return category

    def edit_category(self, category_id: str, changes: Dict[str, object]) -> Category:
        with self._lock:
            index = self._category_index(category_id)
            existing = self._categories[index]
            merged_payload = {**existing.to_dict(), **changes}
            data = self._validate_category(merged_payload, current=existing)
            if data["type"] != existing.type:
                usage = self._usage(category_id)
                if usage:
                    raise CategoryInUseError(category_id, usage)
            updated = Category(**data)
            self._categories[index] = updated
            logger.info("Edited category %s", category_id)
            self._persist()
            return updated

    def delete_category(self, category_id: str) -> None:
        """Remove a category, refusing while any transaction still references it."""
        with self._lock:
            index = self._category_index(category_id)
            usage = self._usage(category_id)
            if usage:
                logger.warning(
                    "Refusing to delete category %s: referenced by %d transaction(s)",
                    category_id,
                    usage,
                )
                raise CategoryInUseError(category_id, usage)
            del self._categories[index]
            logger.info("Deleted category %s", category_id)
            self._persist()

    def get_category(self, category_id: str) -> Category:
        with self._lock:
            return self._categories[self._category_index(category_id)]

    def list_categories(self, type: Optional[str] = None) -> List[Category]:
        kind = validate_optional_type(type)
        with self._lock:
            return [c for c in self._categories if kind is None or c.type == kind]

    def is_category_in_use(self, category_id: str) -> bool:
        with self._lock:
            return self._usage(category_id) > 0

    def reassign_transactions(self, from_category_id: str, to_category_id: str) -> int:
        """Point every transaction of one category at another; returns how many moved."""
        with self._lock:
            source = self._categories[self._category_index(from_category_id)]
            target = self._categories[self._category_index(to_category_id)]
            if source.type != target.type:
                raise ValidationError(
                    f"Cannot move {source.type} transactions to {target.type} category {target.id}"
                )
            if source.id == target.id:
                return 0

            moved = 0
            for index, transaction in enumerate(self._transactions):
                if transaction.category_id == source.id:
                    self._transactions[index] = replace(transaction, category_id=target.id)
                    moved += 1

            if moved:
                logger.info(
                    "Reassigned %d transaction(s) from category %s to %s",
                    moved,
                    source.id,
                    target.id,
                )
                self._persist()
            return moved

    # Aggregates -----------------------------------------------------------
    def get_stats(self) -> Stats:
        """Fold over transactions summing amounts per type."""
        totals = {INCOME: Decimal("0.00"), EXPENSE: Decimal("0.00")}
        with self._lock:
            for transaction in self._transactions:
                totals[transaction.type] += transaction.amount
        return Stats(
            total_income=totals[INCOME],
            total_expense=totals[EXPENSE],
            balance=totals[INCOME] - totals[EXPENSE],
        )

    # Persistence ----------------------------------------------------------
    def snapshot(self) -> State:
        """Return a copy of the current state, as it would be persisted."""
        with self._lock:
            return State(transactions=list(self._transactions), categories=list(self._categories))

    def reload(self) -> None:
        """Load state from persistence, seeding defaults when nothing was saved."""
        with self._lock:
            raw = self._storage.load(self._key)
            if raw is None:
                state = State(categories=default_categories() if self._seed_defaults else [])
                logger.info(
                    "No saved state under %r; starting with %d categories",
                    self._key,
                    len(state.categories),
                )
            else:
                try:
                    state = State.from_dict(raw)
                except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
                    raise PersistenceError(f"Malformed state under {self._key!r}") from exc
                kinds = {t.type for t in state.transactions} | {c.type for c in state.categories}
                if not kinds <= set(TRANSACTION_TYPES):
                    raise PersistenceError(f"Unknown transaction type in state under {self._key!r}")
            self._transactions = state.transactions
            self._categories = state.categories

    # Internal helpers -----------------------------------------------------
    def _persist(self) -> None:
        try:
            self._storage.save(self._key, self.snapshot().to_dict())
        except PersistenceError:
            raise
        except Exception as exc:  # pragma: no cover
            raise PersistenceError("Unexpected error while saving finance state") from exc

    def _usage(self, category_id: str) -> int:
        return sum(1 for t in self._transactions if t.category_id == category_id)

    def _transaction_index(self, transaction_id: str) -> int:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        raise RecordNotFoundError(f"Transaction {transaction_id} not found")

    def _category_index(self, category_id: str) -> int:
        for index, category in enumerate(self._categories):
            if category.id == category_id:
                return index
        raise RecordNotFoundError(f"Category {category_id} not found")

    def _validate_category(
        self, payload: Dict[str, object], *, current: Optional[Category] = None
    ) -> Dict[str, object]:
        return {
            "id": current.id if current else str(uuid4()),
            "name": validate_required_str(payload.get("name"), "name", NAME_MAX_LENGTH),
            "type": validate_type(payload.get("type")),
            "icon": validate_optional_str(payload.get("icon") or None, "icon", ICON_MAX_LENGTH),
        }

    def _validate_transaction(
        self, payload: Dict[str, object], *, current: Optional[Transaction] = None
    ) -> Dict[str, object]:
        payload = _normalize_keys(payload)
        category_id = payload.get("category_id")
        if not isinstance(category_id, str) or not category_id.strip():
            raise ValidationError("categoryId is required")
        try:
            category = self._categories[self._category_index(category_id.strip())]
        except RecordNotFoundError as exc:
            raise ValidationError(f"Unknown category {category_id}") from exc

        raw_type = payload.get("type")
        kind = category.type if raw_type is None else validate_type(raw_type)
        if kind != category.type:
            raise ValidationError(
                f"type '{kind}' does not match {category.type} category {category.id}"
            )

        return {
            "id": current.id if current else str(uuid4()),
            "amount": parse_amount(payload.get("amount"), "amount"),
            "description": validate_text(
                payload.get("description"), "description", DESCRIPTION_MAX_LENGTH
            ),
            "date": validate_date(payload.get("date"), "date"),
            "category_id": category.id,
            "type": kind,
        }


def _normalize_keys(payload: Dict[str, object]) -> Dict[str, object]:
    """Accept both the persisted camelCase key and the snake_case attribute name."""
    if "categoryId" not in payload:
        return dict(payload)
    normalized = {k: v for k, v in payload.items() if k != "categoryId"}
    normalized["category_id"] = payload["categoryId"]
    return normalized

