"""Conversion between displayed quotes and stored per-unit rates.

Rates are always stored as local currency per ONE unit of foreign currency.
JPY is quoted to people per 100 yen, so a stored 0.0075 is shown as 0.75.
Each direction is applied exactly once: inputs go through from_display_rate
before they reach the store, and read models call to_display_rate on the
stored value.
"""

from decimal import Context, Decimal, InvalidOperation

from fxledger.engine.errors import ValidationError
from fxledger.utils.constants import DISPLAY_UNITS, SUPPORTED_CURRENCIES

# Bounds on every amount and rate a person enters
MAX_INTEGER_DIGITS = 14
MAX_FRACTION_DIGITS = 10

# Wide enough that products and differences of bounded inputs stay exact
MONEY_CONTEXT = Context(prec=60)


def normalize_currency(currency: str | None) -> str:
    """Uppercase and validate a currency code."""
    if currency is None or not str(currency).strip():
        raise ValidationError("currency is required")
    code = str(currency).strip().upper()
    if code not in SUPPORTED_CURRENCIES:
        allowed = ", ".join(SUPPORTED_CURRENCIES)
        raise ValidationError(f"currency must be one of: {allowed}")
    return code


def _fraction_places(number: Decimal) -> int:
    """Digits after the point, ignoring trailing zeros."""
    _, digits, exponent = number.as_tuple()
    places = -exponent
    for digit in reversed(digits):
        if places <= 0 or digit != 0:
            break
        places -= 1
    return max(places, 0)


def to_decimal(value, field: str) -> Decimal:
    """Coerce user input to a finite, strictly positive Decimal."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        # str() keeps floats like 0.1 from dragging in binary noise
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if number <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    if number.adjusted() + 1 > MAX_INTEGER_DIGITS:
        raise ValidationError(f"{field} must have at most {MAX_INTEGER_DIGITS} integer digits")
    if _fraction_places(number) > MAX_FRACTION_DIGITS:
        raise ValidationError(f"{field} must have at most {MAX_FRACTION_DIGITS} decimal places")
    return number


def display_unit(currency: str) -> Decimal:
    return Decimal(DISPLAY_UNITS[normalize_currency(currency)])


def to_display_rate(currency: str, stored_rate: Decimal | None) -> Decimal | None:
    """Stored per-unit rate -> human-facing quote."""
    if stored_rate is None:
        return None
    return MONEY_CONTEXT.multiply(stored_rate, display_unit(currency))


def from_display_rate(currency: str, display_rate: Decimal) -> Decimal:
    """Human-facing quote -> stored per-unit rate."""
    return MONEY_CONTEXT.divide(display_rate, display_unit(currency))


def format_decimal(value: Decimal | None) -> str:
    """Plain fixed-point text without exponent or trailing zeros."""
    if value is None:
        return ""
    text = format(value.normalize(MONEY_CONTEXT), "f")
    return "0" if text in ("-0", "0") else text
