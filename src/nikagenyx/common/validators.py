from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.constants import MAX_MONEY
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_pin(value: Optional[str], length: int = 4) -> str:
    pin = (value or "").strip()
    if len(pin) != length or not pin.isdigit():
        raise ValidationError(f"PIN must be {length} digits")
    return pin


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Invalid {field_name}: {value!r} (expected one of {allowed})")


def parse_amount(
    value: Any,
    field_name: str = "Amount",
    *,
    default: Optional[Decimal] = None,
    limit: Decimal = MAX_MONEY,
) -> Decimal:
    """Parse a money value into a Decimal rounded to cents.

    Values whose magnitude exceeds `limit` (the column size) are rejected.
    """
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field_name} is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} is not a valid number")
    if not amount.is_finite():
        raise ValidationError(f"{field_name} is not a valid number")
    if abs(amount) > limit:
        raise ValidationError(f"{field_name} must not exceed {limit}")
    return amount.quantize(Decimal("0.01"))


def parse_date_field(value: Any, field_name: str, *, default: Optional[date] = None) -> date:
    if value is None or value == "":
        if default is not None:
            return default
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("Start date must not be after end date")
