"""Shared API dependencies."""

from fastapi import Request

from fxledger.engine.lifecycle import TradeEngine
from fxledger.services.exchange_rates import ExchangeRateClient


def get_engine(request: Request) -> TradeEngine:
    """The trade engine built in the app lifespan."""
    return request.app.state.engine


def get_rate_client(request: Request) -> ExchangeRateClient:
    return request.app.state.rate_client
