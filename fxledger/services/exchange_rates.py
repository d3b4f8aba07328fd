"""Live exchange rates from the upstream KRW rate API.

No caching: every call goes upstream. Failures surface as UpstreamError
with the upstream message untouched.
"""

import logging
from decimal import Decimal

import httpx

from fxledger.engine.errors import UpstreamError
from fxledger.utils.constants import RATE_TICKERS

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    """Fetches per-unit KRW rates for the supported currencies."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch_rates(self) -> dict[str, Decimal]:
        """Return {currency: local units per 1 foreign unit}."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
        except httpx.HTTPError as e:
            logger.error(f"Exchange rate request failed: {e}")
            raise UpstreamError(str(e)) from e

        if not response.is_success:
            logger.error(f"Exchange rate API returned {response.status_code}")
            raise UpstreamError("exchange rate API call failed")

        try:
            return _parse_rates(response.json())
        except ValueError as e:
            logger.error(f"Unreadable exchange rate payload: {e}")
            raise UpstreamError(str(e)) from e


def _parse_rates(payload) -> dict[str, Decimal]:
    """Map [{"name": "USDKRW=X", "rate": 1300.5}, ...] to {"USD": Decimal(...)}."""
    if not isinstance(payload, list):
        raise ValueError("expected a list of rates")
    rates: dict[str, Decimal] = {}
    for item in payload:
        if not isinstance(item, dict):
            continue
        code = RATE_TICKERS.get(item.get("name"))
        if code is None or item.get("rate") is None:
            continue
        rates[code] = Decimal(str(item["rate"]))
    return rates
