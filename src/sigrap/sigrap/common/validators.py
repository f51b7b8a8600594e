from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from ..core.constants import MAX_MONEY_AMOUNT, MAX_QUANTITY
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} cannot be empty")
    return str(value).strip()


def require_optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_int(value: Any, field_name: str) -> int:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def require_positive_int(value: Any, field_name: str) -> int:
    number = require_int(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    if number > MAX_QUANTITY:
        raise ValidationError(f"{field_name} must be at most {MAX_QUANTITY}")
    return number


def require_money_in_range(amount: Decimal, field_name: str) -> Decimal:
    if amount > MAX_MONEY_AMOUNT:
        raise ValidationError(f"{field_name} must be at most {MAX_MONEY_AMOUNT}")
    return amount


def require_non_negative_decimal(value: Any, field_name: str) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} is required")
    try:
        # str() first so floats from JSON keep their printed value
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} must be zero or positive")
    return require_money_in_range(number, field_name)


def require_non_empty_list(value: Any, field_name: str) -> Sequence[Any]:
    if not isinstance(value, list) or not value:
        raise ValidationError(f"{field_name} must contain at least one entry")
    return value
