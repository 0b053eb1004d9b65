"""
Validation utilities for core domain models.

This is the boundary where loosely typed input (strings from forms, floats
from JSON) is converted or rejected before it reaches ledger logic.
"""

import math
import re
from datetime import UTC, datetime
from typing import Any

from papertrade.core.constants import MAX_SYMBOL_LENGTH
from papertrade.core.exceptions.simulation import ValidationError

_SYMBOL_PATTERN = re.compile(rf"^[A-Z]{{1,{MAX_SYMBOL_LENGTH}}}$")


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate and normalize a ticker symbol.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The upper-cased symbol

    Raises:
        ValidationError: If symbol is not 1-5 letters
    """
    if not isinstance(symbol, str):
        raise ValidationError(f"{param_name} must be a string, got {type(symbol).__name__}")
    normalized = symbol.strip().upper()
    if not _SYMBOL_PATTERN.match(normalized):
        raise ValidationError(
            f"{param_name} must be 1-{MAX_SYMBOL_LENGTH} letters, got {symbol!r}"
        )
    return normalized


def validate_quantity(
    value: Any, param_name: str = "quantity", max_quantity: int | None = None
) -> int:
    """Validate that a share quantity is a positive integer.

    Integral strings ("5") and integral floats (5.0) are accepted and
    converted; anything else is rejected.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages
        max_quantity: Optional inclusive upper bound

    Returns:
        The quantity as int

    Raises:
        ValidationError: If value is not a positive integer within bounds
    """
    if isinstance(value, bool):
        raise ValidationError(f"{param_name} must be a positive integer, got {value!r}")

    quantity: int
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValidationError(f"{param_name} must be a positive integer, got {value!r}")
        quantity = int(value)
    elif isinstance(value, str):
        try:
            quantity = int(value.strip())
        except ValueError as e:
            raise ValidationError(f"{param_name} must be a positive integer, got {value!r}") from e
    else:
        raise ValidationError(f"{param_name} must be a positive integer, got {value!r}")

    if quantity <= 0:
        raise ValidationError(f"{param_name} must be a positive integer, got {quantity}")
    if max_quantity is not None and quantity > max_quantity:
        raise ValidationError(f"{param_name} must not exceed {max_quantity}, got {quantity}")
    return quantity


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_price(value: Any, param_name: str = "price") -> float:
    """Validate that a price is a finite positive number."""
    if isinstance(value, bool):
        raise ValidationError(f"{param_name} must be a positive number, got {value!r}")
    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{param_name} must be a positive number, got {value!r}") from e
    if not math.isfinite(price):
        raise ValidationError(f"{param_name} must be finite, got {value!r}")
    return validate_positive(price, param_name)


def validate_probability(value: float, param_name: str = "probability") -> float:
    """Validate that a value lies in [0, 1].

    Raises:
        ValidationError: If value is outside the unit interval
    """
    if value < 0 or value > 1:
        raise ValidationError(f"{param_name} must be between 0 and 1, got {value}")
    return value


def validate_timestamp(value: Any, param_name: str = "timestamp") -> datetime:
    """Parse a datetime or ISO-8601 string into an aware UTC datetime.

    Raises:
        ValidationError: If value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as e:
            raise ValidationError(f"{param_name} is not a valid ISO timestamp: {value!r}") from e
    else:
        raise ValidationError(f"{param_name} must be a datetime, got {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
