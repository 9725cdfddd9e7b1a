"""
Field rules shared by request schemas.

Each rule raises PydanticCustomError with a client-facing message; the
validation handler reports the first message per field.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import validate_email
from pydantic_core import PydanticCustomError

PRICE_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")
# Largest value a NUMERIC(10, 2) column holds
MAX_PRICE = Decimal("99999999.99")


def _fail(kind: str, message: str) -> PydanticCustomError:
    return PydanticCustomError(kind, message)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def required(value: Any, message: str) -> Any:
    if is_blank(value):
        raise _fail("required", message)
    return value


def string(value: Any, message: str, max_length: int | None = None, too_long: str = "") -> str:
    if not isinstance(value, str):
        raise _fail("string", message)
    if max_length is not None and len(value) > max_length:
        raise _fail("max", too_long)
    return value


def min_length(value: str, length: int, message: str) -> str:
    if len(value) < length:
        raise _fail("min", message)
    return value


def email(value: Any, message: str) -> str:
    if not isinstance(value, str):
        raise _fail("email", message)
    value = value.strip()
    try:
        validate_email(value)
    except PydanticCustomError:
        raise _fail("email", message) from None
    return value


def price(value: Any) -> Decimal:
    """Non-negative number up to MAX_PRICE with at most two fractional digits."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise _fail("numeric", "Price must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise _fail("numeric", "Price must be a number") from None
    if not number.is_finite():
        raise _fail("numeric", "Price must be a number")
    if number < 0:
        raise _fail("min", "Price cannot be negative")
    number = abs(number)
    if number > MAX_PRICE:
        raise _fail("max", f"Price cannot exceed {MAX_PRICE}")
    if not PRICE_PATTERN.match(format(number, "f")):
        raise _fail("decimal_places", "Price must have maximum 2 decimal places")
    return number
