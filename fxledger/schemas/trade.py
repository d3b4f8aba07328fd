"""Pydantic schemas for the transactions API."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field, PlainSerializer

from fxledger.engine.quotes import format_decimal, to_display_rate
from fxledger.models.trade import Trade, TradeStatus

# Decimals go over the wire as plain strings ("130000", "0.0095")
Money = Annotated[Decimal, PlainSerializer(format_decimal, return_type=str, when_used="json")]

RateBasis = Literal["unit", "display"]


class TradeCreate(BaseModel):
    # Presence and sign are checked by the engine so every input error reads the same
    currency: str | None = None
    buy_amount: Decimal | None = None
    buy_rate: Decimal | None = None
    memo: str | None = Field(default=None, max_length=1000)
    rate_basis: RateBasis = "unit"


class SellRequest(BaseModel):
    sell_rate: Decimal | None = None
    rate_basis: RateBasis = "unit"


class TradeRead(BaseModel):
    id: int
    currency: str
    status: TradeStatus
    buy_date: date
    buy_amount: Money
    buy_rate: Money
    buy_local: Money
    sell_date: date | None
    sell_rate: Money | None
    sell_local: Money | None
    profit: Money | None
    memo: str
    created_at: datetime
    display_buy_rate: Money
    display_sell_rate: Money | None

    @classmethod
    def from_trade(cls, trade: Trade) -> "TradeRead":
        return cls(
            id=trade.id,
            currency=trade.currency,
            status=trade.status,
            buy_date=trade.buy_date,
            buy_amount=trade.buy_amount,
            buy_rate=trade.buy_rate,
            buy_local=trade.buy_local,
            sell_date=trade.sell_date,
            sell_rate=trade.sell_rate,
            sell_local=trade.sell_local,
            profit=trade.profit,
            memo=trade.memo or "",
            created_at=trade.created_at,
            display_buy_rate=to_display_rate(trade.currency, trade.buy_rate),
            display_sell_rate=to_display_rate(trade.currency, trade.sell_rate),
        )


class TradeCreated(BaseModel):
    id: int
    message: str


class SellResult(BaseModel):
    message: str
    profit: Money


class MessageResponse(BaseModel):
    message: str


class SummaryRead(BaseModel):
    currency: str | None
    open_count: int
    closed_count: int
    open_amount: Money
    open_cost: Money
    realized_profit: Money

    model_config = {"from_attributes": True}


class RatesRead(BaseModel):
    success: bool = True
    rates: dict[str, Money]
    display_rates: dict[str, Money]
    timestamp: datetime
