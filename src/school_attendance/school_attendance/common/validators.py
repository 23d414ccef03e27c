from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_date(value: Optional[str], field_name: str) -> Optional[date]:
    if not value:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")


def require_date(value: Optional[str], field_name: str) -> date:
    parsed = optional_date(value, field_name)
    if parsed is None:
        raise ValidationError(f"{field_name} is required")
    return parsed


def int_in_range(value, field_name: str, *, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    if value is None or value == "":
        return default
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if n < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum}")
    if maximum is not None and n > maximum:
        raise ValidationError(f"{field_name} must be <= {maximum}")
    return n


def require_date_order(start: Optional[date], end: Optional[date]) -> None:
    if start and end and start > end:
        raise ValidationError("startDate must not be after endDate")
