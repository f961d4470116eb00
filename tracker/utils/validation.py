"""
Request payload validation for EVC Track.

Every write is checked here before any persistence call. Validators return a
cleaned dict containing only the fields that were supplied (so PATCH payloads
stay partial) and raise ValidationError on the first bad field.
"""

import math
from typing import Any, Dict, Optional

from calculations.constants import (
    CHARGE_TYPES,
    EXPENSE_CATEGORIES,
    MAX_PERCENT,
    MIN_PERCENT,
    SESSION_STATUSES,
    SUPPORTED_CURRENCIES,
)
from exceptions import ValidationError
from utils.error_codes import ErrorCode
from utils.time_utils import format_datetime_iso, parse_datetime


def _to_number(field: str, value: Any) -> float:
    # NaN and infinity are rejected; they slip past range checks and break JSON
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field, value=value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    if isinstance(value, str) and value.strip():
        try:
            number = float(value)
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return int(number) if number.is_integer() else number
    raise ValidationError(f"{field} must be a number", field=field, value=str(value))


def optional_number(
    data: Dict[str, Any],
    field: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> Optional[float]:
    """Read a nullable numeric field, enforcing inclusive bounds when present."""
    value = data.get(field)
    if value is None or value == "":
        return None

    number = _to_number(field, value)

    if (minimum is not None and number < minimum) or (maximum is not None and number > maximum):
        if minimum is not None and maximum is not None:
            message = f"{field} must be between {minimum} and {maximum}"
        elif minimum is not None:
            message = f"{field} must be at least {minimum}"
        else:
            message = f"{field} must be at most {maximum}"
        raise ValidationError(
            message,
            field=field,
            value=number,
            expected_range=(minimum, maximum),
            error_code=ErrorCode.E004_OUT_OF_RANGE,
        )
    return number


def percent(data: Dict[str, Any], field: str) -> Optional[int]:
    """Read a battery percentage: a whole number in [0, 100]."""
    value = optional_number(data, field, MIN_PERCENT, MAX_PERCENT)
    if value is None:
        return None
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be a whole number", field=field, value=value)
        value = int(value)
    return value


def require(data: Dict[str, Any], field: str) -> None:
    if data.get(field) is None or data.get(field) == "":
        raise ValidationError(
            f"{field} is required",
            field=field,
            error_code=ErrorCode.E002_MISSING_REQUIRED_FIELD,
        )


def choice(data: Dict[str, Any], field: str, choices) -> Optional[str]:
    value = data.get(field)
    if value is None or value == "":
        return None
    if value not in choices:
        raise ValidationError(
            f"{field} must be one of: {', '.join(choices)}",
            field=field,
            value=value,
            error_code=ErrorCode.E005_INVALID_CHOICE,
        )
    return value


def timestamp(data: Dict[str, Any], field: str) -> Optional[str]:
    """Read a timestamp field and normalize it to the stored ISO format."""
    value = data.get(field)
    if value is None or value == "":
        return None
    dt = parse_datetime(value)
    if dt is None:
        raise ValidationError(
            f"Invalid datetime format for {field}",
            field=field,
            value=value,
            error_code=ErrorCode.E006_INVALID_TIMESTAMP,
        )
    return format_datetime_iso(dt)


def ensure_payload(data) -> Dict[str, Any]:
    if not data or not isinstance(data, dict):
        raise ValidationError("No data provided", error_code=ErrorCode.E001_NO_DATA)
    return data


def validate_session(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Validate a charging session payload.

    ``start_percent`` is required unless ``partial`` (PATCH). The returned
    dict never includes keys the caller did not send.
    """
    data = ensure_payload(data)
    if not partial:
        require(data, "start_percent")

    readers = {
        "cost": lambda: optional_number(data, "cost", minimum=0),
        "start_percent": lambda: percent(data, "start_percent"),
        "end_percent": lambda: percent(data, "end_percent"),
        "charged_at": lambda: timestamp(data, "charged_at"),
        "kwh": lambda: optional_number(data, "kwh", minimum=0),
        "charge_type": lambda: choice(data, "charge_type", CHARGE_TYPES),
        "odometer": lambda: optional_number(data, "odometer", minimum=0),
        "currency": lambda: choice(data, "currency", SUPPORTED_CURRENCIES),
        "status": lambda: choice(data, "status", SESSION_STATUSES),
    }

    cleaned = {field: read() for field, read in readers.items() if field in data}

    if partial and "start_percent" in cleaned and cleaned["start_percent"] is None:
        raise ValidationError(
            "start_percent is required",
            field="start_percent",
            error_code=ErrorCode.E002_MISSING_REQUIRED_FIELD,
        )
    check_percent_order(cleaned.get("start_percent"), cleaned.get("end_percent"))
    return cleaned


def check_percent_order(start: Optional[int], end: Optional[int]) -> None:
    """A session never ends below the level it started at."""
    if start is not None and end is not None and end < start:
        raise ValidationError(
            "end_percent must not be lower than start_percent",
            field="end_percent",
            value=end,
            expected_range=(start, MAX_PERCENT),
            error_code=ErrorCode.E004_OUT_OF_RANGE,
        )


def validate_expense(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Validate a vehicle expense payload; title and amount are required on create."""
    data = ensure_payload(data)
    if not partial:
        require(data, "title")
        require(data, "amount")

    cleaned: Dict[str, Any] = {}
    if "title" in data:
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError(
                "title is required",
                field="title",
                error_code=ErrorCode.E002_MISSING_REQUIRED_FIELD,
            )
        cleaned["title"] = title.strip()
    if "amount" in data:
        amount = optional_number(data, "amount", minimum=0)
        if amount is None:
            raise ValidationError(
                "amount is required",
                field="amount",
                error_code=ErrorCode.E002_MISSING_REQUIRED_FIELD,
            )
        cleaned["amount"] = amount
    if "expense_date" in data:
        cleaned["expense_date"] = timestamp(data, "expense_date")
    if "category" in data:
        cleaned["category"] = choice(data, "category", EXPENSE_CATEGORIES)
    if "odometer" in data:
        cleaned["odometer"] = optional_number(data, "odometer", minimum=0)
    if "currency" in data:
        cleaned["currency"] = choice(data, "currency", SUPPORTED_CURRENCIES)
    for text_field in ("description", "location"):
        if text_field in data:
            cleaned[text_field] = data.get(text_field) or None
    return cleaned


def validate_profile(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a settings payload. Empty values clear the setting."""
    data = ensure_payload(data)
    cleaned: Dict[str, Any] = {}
    if "battery_capacity" in data:
        capacity = optional_number(data, "battery_capacity", minimum=0)
        if capacity == 0:
            raise ValidationError(
                "battery_capacity must be greater than 0",
                field="battery_capacity",
                value=capacity,
                error_code=ErrorCode.E004_OUT_OF_RANGE,
            )
        cleaned["battery_capacity"] = capacity
    if "home_rate" in data:
        cleaned["home_rate"] = optional_number(data, "home_rate", minimum=0)
    if "currency" in data:
        cleaned["currency"] = choice(data, "currency", SUPPORTED_CURRENCIES)
    return cleaned


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "true", "yes", "on")
