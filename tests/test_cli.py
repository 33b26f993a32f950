"""Tests for the console client."""

import json

import pytest

from finance_tracker.cli import main


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def _run(data_dir, *argv):
    return main(["--data-dir", str(data_dir), *argv])


def _state(data_dir):
    return json.loads((data_dir / "finance-storage.json").read_text(encoding="utf-8"))


def _category_id(data_dir, name):
    return next(c["id"] for c in _state(data_dir)["categories"] if c["name"] == name)


def test_category_list_seeds_defaults(data_dir, capsys):
    assert _run(data_dir, "category", "list", "--type", "income") == 0
    out = capsys.readouterr().out
    assert "工资" in out
    assert "餐饮" not in out


def test_add_transaction_and_stats(data_dir, capsys):
    _run(data_dir, "category", "add", "Consulting", "income", "--icon", "💼")
    category_id = _category_id(data_dir, "Consulting")

    assert _run(data_dir, "transaction", "add", "100", category_id, "2024-01-01") == 0
    assert _run(data_dir, "stats") == 0
    out = capsys.readouterr().out
    assert "Total income:  100.00" in out
    assert "Balance:       100.00" in out


def test_delete_category_in_use_fails(data_dir, capsys):
    _run(data_dir, "category", "list")
    category_id = _category_id(data_dir, "餐饮")
    _run(data_dir, "transaction", "add", "50", category_id, "2024-01-01", "--description", "dinner")
    transaction_id = _state(data_dir)["transactions"][0]["id"]

    assert _run(data_dir, "category", "delete", category_id) == 1
    assert "Category in use" in capsys.readouterr().err

    assert _run(data_dir, "transaction", "delete", transaction_id) == 0
    assert _run(data_dir, "category", "delete", category_id) == 0
    assert all(c["id"] != category_id for c in _state(data_dir)["categories"])


def test_edit_transaction(data_dir, capsys):
    _run(data_dir, "category", "list")
    category_id = _category_id(data_dir, "交通")
    _run(data_dir, "transaction", "add", "3", category_id, "2024-01-01")
    transaction_id = _state(data_dir)["transactions"][0]["id"]

    assert _run(data_dir, "transaction", "edit", transaction_id, "--amount", "4.5") == 0
    assert _state(data_dir)["transactions"][0]["amount"] == "4.50"
    assert "Category: 交通" in capsys.readouterr().out


def test_type_mismatch_reports_validation_error(data_dir, capsys):
    _run(data_dir, "category", "list")
    category_id = _category_id(data_dir, "工资")
    assert _run(data_dir, "transaction", "add", "3", category_id, "2024-01-01", "--type", "expense") == 1
    assert "Validation error" in capsys.readouterr().err


def test_unknown_transaction_reports_not_found(data_dir, capsys):
    assert _run(data_dir, "transaction", "delete", "missing") == 1
    assert "not found" in capsys.readouterr().err


def test_rejects_bad_amount_at_parse_time(data_dir):
    with pytest.raises(SystemExit):
        _run(data_dir, "transaction", "add", "-1", "whatever", "2024-01-01")


@pytest.mark.parametrize("amount", ["NaN", "sNaN", "Infinity"])
def test_rejects_non_finite_amount_at_parse_time(data_dir, amount):
    with pytest.raises(SystemExit):
        _run(data_dir, "transaction", "add", amount, "whatever", "2024-01-01")
