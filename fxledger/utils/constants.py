"""Supported currencies and their quoting conventions."""

from enum import Enum


class Currency(str, Enum):
    USD = "USD"
    JPY = "JPY"
    EUR = "EUR"


SUPPORTED_CURRENCIES = [c.value for c in Currency]

# Units of foreign currency per displayed quote. JPY is quoted per 100 yen.
DISPLAY_UNITS: dict[str, int] = {
    "USD": 1,
    "JPY": 100,
    "EUR": 1,
}

# Upstream ticker names -> currency code
RATE_TICKERS: dict[str, str] = {
    "USDKRW=X": "USD",
    "JPYKRW=X": "JPY",
    "EURKRW=X": "EUR",
}
