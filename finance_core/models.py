"""Data models for the finance tracker domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4

__all__ = [
    "INCOME",
    "EXPENSE",
    "TRANSACTION_TYPES",
    "Category",
    "Transaction",
    "Stats",
    "State",
    "default_categories",
]

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

# (name, type, icon) for the categories seeded on first run.
DEFAULT_CATEGORIES = (
    ("工资", INCOME, "💰"),
    ("奖金", INCOME, "🎁"),
    ("投资", INCOME, "📈"),
    ("其他收入", INCOME, "💵"),
    ("餐饮", EXPENSE, "🍔"),
    ("购物", EXPENSE, "🛒"),
    ("交通", EXPENSE, "🚗"),
    ("住房", EXPENSE, "🏠"),
    ("娱乐", EXPENSE, "🎬"),
    ("医疗", EXPENSE, "💊"),
    ("教育", EXPENSE, "📚"),
    ("其他支出", EXPENSE, "📝"),
)


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    type: str
    icon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "name": self.name, "type": self.type}
        if self.icon is not None:
            data["icon"] = self.icon
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=data["id"],
            name=data["name"],
            type=data["type"],
            icon=data.get("icon"),
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Decimal
    description: str
    date: date
    category_id: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to JSON-friendly natives."""
        return {
            "id": self.id,
            "amount": f"{self.amount:.2f}",
            "description": self.description,
            "date": self.date.isoformat(),
            "categoryId": self.category_id,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Hydrate a Transaction from JSON-native data."""
        return cls(
            id=data["id"],
            amount=Decimal(str(data["amount"])),
            description=data.get("description") or "",
            date=date.fromisoformat(data["date"]),
            category_id=data["categoryId"],
            type=data["type"],
        )


@dataclass(frozen=True)
class Stats:
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal

    def to_dict(self) -> Dict[str, str]:
        return {
            "totalIncome": f"{self.total_income:.2f}",
            "totalExpense": f"{self.total_expense:.2f}",
            "balance": f"{self.balance:.2f}",
        }


@dataclass
class State:
    """Full persisted snapshot: transactions newest-first, categories in insertion order."""

    transactions: List[Transaction] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "transactions": [transaction.to_dict() for transaction in self.transactions],
            "categories": [category.to_dict() for category in self.categories],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "State":
        return cls(
            transactions=[Transaction.from_dict(item) for item in data.get("transactions", [])],
            categories=[Category.from_dict(item) for item in data.get("categories", [])],
        )


def default_categories() -> List[Category]:
    """Build the twelve first-run categories, each with a fresh id."""
    return [
        Category(id=str(uuid4()), name=name, type=kind, icon=icon)
        for name, kind, icon in DEFAULT_CATEGORIES
    ]
