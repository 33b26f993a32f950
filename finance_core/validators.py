"""Validation helpers shared by the finance store."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .exceptions import ValidationError
from .models import TRANSACTION_TYPES

NAME_MAX_LENGTH = 50
ICON_MAX_LENGTH = 16
DESCRIPTION_MAX_LENGTH = 200


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str) -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    amount = _quantize_two_decimals(amount)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return amount


def validate_required_str(value: object, field: str, max_length: int) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{field} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_optional_str(value: object, field: str, max_length: int) -> Optional[str]:
    if value is None:
        return None
    return validate_required_str(value, field, max_length)


def validate_text(value: object, field: str, max_length: int) -> str:
    """Like validate_required_str, but an absent or blank value becomes ''."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    trimmed = value.strip()
    if len(trimmed) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return trimmed


def validate_date(value: object, field: str) -> date:
    """Accept a date or an ISO 8601 calendar date string (no time component)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO 8601 date (YYYY-MM-DD)") from exc
    raise ValidationError(f"{field} must be a date or ISO 8601 string")


def validate_type(value: object, field: str = "type") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    canonical = value.strip().lower()
    if canonical not in TRANSACTION_TYPES:
        raise ValidationError(f"{field} must be one of: {', '.join(TRANSACTION_TYPES)}")
    return canonical


def validate_optional_type(value: object, field: str = "type") -> Optional[str]:
    """Validate a type filter; None and '' mean no filter."""
    if value is None or value == "":
        return None
    return validate_type(value, field)
