"""Column types shared by the models."""

from decimal import Decimal

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class DecimalText(TypeDecorator):
    """Decimal stored as its exact text form.

    SQLite keeps NUMERIC values as binary floats, so money goes through as
    text on every backend and reads back digit for digit.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return format(Decimal(value), "f")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        # Legacy NUMERIC columns hand back Decimal or float, text columns str
        return Decimal(str(value))
