"""Shared fixtures: in-memory ledger store, engine with a fixed clock, API client."""

from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from fxledger.config import Settings
from fxledger.database import create_ledger_engine
from fxledger.engine.lifecycle import TradeEngine
from fxledger.main import create_app
from fxledger.services.exchange_rates import ExchangeRateClient
from fxledger.services.ledger_store import LedgerStore

TODAY = date(2024, 5, 1)
RATES_URL = "https://rates.test/exchange/rate/KRW/USD,JPY,EUR.json"

UPSTREAM_PAYLOAD = [
    {"date": "2024-05-01 09:00:00", "name": "USDKRW=X", "rate": 1372.5, "timestamp": 1714521600},
    {"date": "2024-05-01 09:00:00", "name": "JPYKRW=X", "rate": 8.7512, "timestamp": 1714521600},
    {"date": "2024-05-01 09:00:00", "name": "EURKRW=X", "rate": 1468.1, "timestamp": 1714521600},
]


@pytest.fixture
def store():
    store = LedgerStore(create_ledger_engine("sqlite://"))
    store.create_tables()
    yield store
    store.close()


@pytest.fixture
def engine(store):
    return TradeEngine(store, today=lambda: TODAY)


def mock_rate_client(handler) -> ExchangeRateClient:
    return ExchangeRateClient(RATES_URL, timeout=1.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def client():
    app = create_app(Settings(database_url="sqlite://", log_level="WARNING"))
    with TestClient(app) as c:
        app.state.engine = TradeEngine(app.state.store, today=lambda: TODAY)
        app.state.rate_client = mock_rate_client(
            lambda request: httpx.Response(200, json=UPSTREAM_PAYLOAD)
        )
        yield c
