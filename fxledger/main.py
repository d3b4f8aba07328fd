"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from fxledger.config import Settings, settings as default_settings
from fxledger.database import create_ledger_engine
from fxledger.engine.errors import LedgerError
from fxledger.engine.lifecycle import TradeEngine
from fxledger.services.exchange_rates import ExchangeRateClient
from fxledger.services.ledger_store import LedgerStore
from fxledger.utils.logging import setup_logging
from fxledger.api import exchange, system, transactions

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the ledger store on startup and close it on shutdown."""
        setup_logging(settings.log_level)
        store = LedgerStore(create_ledger_engine(settings.database_url))
        store.create_tables()
        app.state.store = store
        app.state.engine = TradeEngine(store)
        app.state.rate_client = ExchangeRateClient(settings.rates_url, settings.rates_timeout)
        logger.info("Ledger store ready")

        yield

        store.close()

    app = FastAPI(
        title="FX Ledger",
        description="Foreign currency purchase/sale ledger with realized profit tracking",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    # Mount routers
    app.include_router(transactions.router)
    app.include_router(exchange.router)
    app.include_router(system.router)

    return app


app = create_app()
