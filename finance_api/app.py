"""Flask REST API exposing the finance store."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from finance_core.exceptions import (
    CategoryInUseError,
    PersistenceError,
    RecordNotFoundError,
    ValidationError,
)
from finance_core.services import FinanceStore
from finance_core.storage import JSONStorage


def create_app(data_dir: Optional[Path] = None, store: Optional[FinanceStore] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("FINANCE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("FINANCE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    if store is None:
        base = data_dir or os.getenv("FINANCE_TRACKER_DATA_DIR") or "data"
        store = FinanceStore(JSONStorage(Path(base)))
    app.extensions["finance_store"] = store

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(CategoryInUseError)
    def handle_category_in_use(exc: CategoryInUseError):
        return _handle_error(exc, 409, "Category in use")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    @app.get("/categories")
    def list_categories():
        categories = store.list_categories(request.args.get("type"))
        return _success({"items": [category.to_dict() for category in categories]})

    @app.post("/categories")
    def create_category():
        payload = _json_body()
        category = store.add_category(payload)
        return _success(category.to_dict(), 201)

    @app.get("/categories/<category_id>")
    def get_category(category_id: str):
        return _success(store.get_category(category_id).to_dict())

    @app.put("/categories/<category_id>")
    def update_category(category_id: str):
        payload = _json_body()
        category = store.edit_category(category_id, payload)
        return _success(category.to_dict())

    @app.delete("/categories/<category_id>")
    def delete_category(category_id: str):
        store.delete_category(category_id)
        return _success({}, 204)

    @app.post("/categories/<category_id>/reassign")
    def reassign_category(category_id: str):
        target = _json_body().get("target")
        if not isinstance(target, str) or not target:
            raise ValidationError("target must be a category id")
        moved = store.reassign_transactions(category_id, target)
        return _success({"moved": moved})

    @app.get("/transactions")
    def list_transactions():
        transactions = store.list_transactions(request.args.get("type"))
        return _success({"items": [transaction.to_dict() for transaction in transactions]})

    @app.post("/transactions")
    def create_transaction():
        payload = _json_body()
        transaction = store.add_transaction(payload)
        return _success(transaction.to_dict(), 201)

    @app.get("/transactions/<transaction_id>")
    def get_transaction(transaction_id: str):
        return _success(store.get_transaction(transaction_id).to_dict())

    @app.put("/transactions/<transaction_id>")
    def update_transaction(transaction_id: str):
        payload = _json_body()
        transaction = store.edit_transaction(transaction_id, payload)
        return _success(transaction.to_dict())

    @app.delete("/transactions/<transaction_id>")
    def delete_transaction(transaction_id: str):
        store.delete_transaction(transaction_id)
        return _success({}, 204)

    @app.get("/stats")
    def stats():
        return _success(store.get_stats().to_dict())

    return app
