"""Console interface for the finance tracker."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

from finance_core.exceptions import (
    CategoryInUseError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from finance_core.models import TRANSACTION_TYPES
from finance_core.services import FinanceStore
from finance_core.storage import JSONStorage


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be a positive finite number")
    return value


def _load_store(data_dir: Path) -> FinanceStore:
    return FinanceStore(JSONStorage(data_dir))


def _format_category(category: Dict[str, Any]) -> str:
    icon = category.get("icon") or " "
    return f"{icon} [{category['id']}] {category['name']} ({category['type']})"


def _format_transaction(transaction: Dict[str, Any], names: Dict[str, str]) -> str:
    sign = "+" if transaction["type"] == "income" else "-"
    category = names.get(transaction["categoryId"], transaction["categoryId"])
    return (
        f"[{transaction['id']}] {transaction['date']} {sign}{transaction['amount']}\n"
        f"  Category: {category} | Type: {transaction['type']}\n"
        f"  Description: {transaction.get('description') or '-'}\n"
    )


def handle_category(args: argparse.Namespace, store: FinanceStore) -> None:
    if args.command == "list":
        categories = store.list_categories(args.type)
        if not categories:
            print("No categories found.")
            return
        for category in categories:
            print(_format_category(category.to_dict()))
    elif args.command == "add":
        category = store.add_category({"name": args.name, "type": args.type, "icon": args.icon})
        print("Category added: " + _format_category(category.to_dict()))
    elif args.command == "edit":
        changes = {"name": args.name, "type": args.type, "icon": args.icon}
        cleaned = {k: v for k, v in changes.items() if v is not None}
        category = store.edit_category(args.id, cleaned)
        print("Category updated: " + _format_category(category.to_dict()))
    elif args.command == "delete":
        store.delete_category(args.id)
        print(f"Category {args.id} deleted.")
    elif args.command == "reassign":
        moved = store.reassign_transactions(args.id, args.target)
        print(f"Moved {moved} transaction(s) to category {args.target}.")


def handle_transaction(args: argparse.Namespace, store: FinanceStore) -> None:
    names = {category.id: category.name for category in store.list_categories()}
    if args.command == "list":
        transactions = store.list_transactions(args.type)
        if not transactions:
            print("No transactions found.")
            return
        print(f"Found {len(transactions)} transactions:")
        for transaction in transactions:
            print(_format_transaction(transaction.to_dict(), names))
    elif args.command == "add":
        payload = {
            "amount": args.amount,
            "categoryId": args.category_id,
            "date": args.date,
            "type": args.type,
            "description": args.description,
        }
        transaction = store.add_transaction(payload)
        print("Transaction added:\n" + _format_transaction(transaction.to_dict(), names))
    elif args.command == "edit":
        changes = {
            "amount": args.amount,
            "categoryId": args.category_id,
            "date": args.date,
            "type": args.type,
            "description": args.description,
        }
        cleaned = {k: v for k, v in changes.items() if v is not None}
        transaction = store.edit_transaction(args.id, cleaned)
        print("Transaction updated:\n" + _format_transaction(transaction.to_dict(), names))
    elif args.command == "delete":
        store.delete_transaction(args.id)
        print(f"Transaction {args.id} deleted.")


def handle_stats(args: argparse.Namespace, store: FinanceStore) -> None:
    stats = store.get_stats()
    print(f"Total income:  {stats.total_income:.2f}")
    print(f"Total expense: {stats.total_expense:.2f}")
    print(f"Balance:       {stats.balance:.2f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal Finance Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=Path(os.getenv("FINANCE_TRACKER_DATA_DIR", "data")),
        type=Path,
        help="Directory to store JSON data (default: $FINANCE_TRACKER_DATA_DIR or ./data)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    category_parser = subparsers.add_parser("category", help="Manage categories")
    category_sub = category_parser.add_subparsers(dest="command", required=True)

    category_list = category_sub.add_parser("list", help="List categories")
    category_list.add_argument("--type", choices=TRANSACTION_TYPES)

    category_add = category_sub.add_parser("add", help="Add a new category")
    category_add.add_argument("name")
    category_add.add_argument("type", choices=TRANSACTION_TYPES)
    category_add.add_argument("--icon")

    category_edit = category_sub.add_parser("edit", help="Edit an existing category")
    category_edit.add_argument("id")
    category_edit.add_argument("--name")
    category_edit.add_argument("--type", choices=TRANSACTION_TYPES)
    category_edit.add_argument("--icon")

    category_delete = category_sub.add_parser("delete", help="Delete an unused category")
    category_delete.add_argument("id")

    category_reassign = category_sub.add_parser(
        "reassign", help="Move all transactions of a category to another one"
    )
    category_reassign.add_argument("id")
    category_reassign.add_argument("target")

    transaction_parser = subparsers.add_parser("transaction", help="Manage transactions")
    transaction_sub = transaction_parser.add_subparsers(dest="command", required=True)

    transaction_list = transaction_sub.add_parser("list", help="List transactions, newest first")
    transaction_list.add_argument("--type", choices=TRANSACTION_TYPES)

    transaction_add = transaction_sub.add_parser("add", help="Add a new transaction")
    transaction_add.add_argument("amount", type=_parse_amount)
    transaction_add.add_argument("category_id")
    transaction_add.add_argument("date", type=_parse_date)
    transaction_add.add_argument("--type", choices=TRANSACTION_TYPES)
    transaction_add.add_argument("--description", default="")

    transaction_edit = transaction_sub.add_parser("edit", help="Edit an existing transaction")
    transaction_edit.add_argument("id")
    transaction_edit.add_argument("--amount", type=_parse_amount)
    transaction_edit.add_argument("--category-id")
    transaction_edit.add_argument("--date", type=_parse_date)
    transaction_edit.add_argument("--type", choices=TRANSACTION_TYPES)
    transaction_edit.add_argument("--description")

    transaction_delete = transaction_sub.add_parser("delete", help="Delete a transaction")
    transaction_delete.add_argument("id")

    subparsers.add_parser("stats", help="Show income, expense and balance totals")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        store = _load_store(args.data_dir)
        if args.entity == "category":
            handle_category(args, store)
        elif args.entity == "transaction":
            handle_transaction(args, store)
        elif args.entity == "stats":
            handle_stats(args, store)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except CategoryInUseError as exc:
        print(f"Category in use: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
