"""Exchange API — live rates proxied from the upstream rate service."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from fxledger.api.deps import get_rate_client
from fxledger.engine.quotes import to_display_rate
from fxledger.schemas.trade import RatesRead
from fxledger.services.exchange_rates import ExchangeRateClient

router = APIRouter(prefix="/api/exchange", tags=["exchange"])


@router.get("/rates", response_model=RatesRead)
async def live_rates(client: ExchangeRateClient = Depends(get_rate_client)):
    """Per-unit rates plus the quotes people read (JPY per 100 yen)."""
    rates = await client.fetch_rates()
    return RatesRead(
        rates=rates,
        display_rates={code: to_display_rate(code, rate) for code, rate in rates.items()},
        timestamp=datetime.now(timezone.utc),
    )
