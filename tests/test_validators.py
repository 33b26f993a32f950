"""Tests for the shared validation helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_core.exceptions import ValidationError
from finance_core.validators import (
    parse_amount,
    validate_date,
    validate_optional_type,
    validate_required_str,
    validate_text,
    validate_type,
)


class TestParseAmount:
    @pytest.mark.parametrize("raw, expected", [
        ("10", Decimal("10.00")),
        (12.345, Decimal("12.35")),
        ("0.005", Decimal("0.01")),
    ])
    def test_quantizes_to_two_places(self, raw, expected):
        assert parse_amount(raw, "amount") == expected

    @pytest.mark.parametrize("raw", [0, "-5", "0.004", "abc", None, True, "NaN", "Infinity"])
    def test_rejects_non_positive_or_non_numeric(self, raw):
        with pytest.raises(ValidationError):
            parse_amount(raw, "amount")


def test_required_str_trims_and_rejects_blank():
    assert validate_required_str("  Rent ", "name", 50) == "Rent"
    with pytest.raises(ValidationError, match="cannot be empty"):
        validate_required_str("   ", "name", 50)
    with pytest.raises(ValidationError, match="at most 3"):
        validate_required_str("abcd", "name", 3)


def test_text_allows_empty():
    assert validate_text(None, "description", 200) == ""
    assert validate_text("  ", "description", 200) == ""
    with pytest.raises(ValidationError):
        validate_text(5, "description", 200)


class TestValidateDate:
    def test_accepts_iso_string_and_date(self):
        assert validate_date("2024-01-01", "date") == date(2024, 1, 1)
        assert validate_date(date(2024, 1, 1), "date") == date(2024, 1, 1)

    def test_drops_time_from_datetime(self):
        assert validate_date(datetime(2024, 1, 1, 15, 30), "date") == date(2024, 1, 1)

    @pytest.mark.parametrize("raw", ["2024-13-01", "yesterday", 20240101, None])
    def test_rejects_invalid(self, raw):
        with pytest.raises(ValidationError):
            validate_date(raw, "date")


def test_type_is_case_insensitive():
    assert validate_type(" Income ") == "income"
    with pytest.raises(ValidationError, match="income, expense"):
        validate_type("transfer")


def test_optional_type_treats_blank_as_no_filter():
    assert validate_optional_type(None) is None
    assert validate_optional_type("") is None
    assert validate_optional_type("expense") == "expense"
