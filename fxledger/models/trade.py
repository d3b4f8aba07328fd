"""Trade model — one purchase lot of foreign currency, closed at most once."""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum

from sqlmodel import SQLModel, Field, Column

from fxledger.models.types import DecimalText


class TradeStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


def _money(nullable: bool = False):
    return Column(DecimalText, nullable=nullable)


class Trade(SQLModel, table=True):
    __tablename__ = "transactions"

    id: int | None = Field(default=None, primary_key=True)
    currency: str = Field(max_length=10, index=True)
    buy_date: date
    buy_amount: Decimal = Field(sa_column=_money())
    buy_rate: Decimal = Field(sa_column=_money())  # local units per 1 foreign unit
    buy_local: Decimal = Field(sa_column=_money())

    # Sell leg: all four are written together by a single UPDATE
    sell_date: date | None = None
    sell_rate: Decimal | None = Field(default=None, sa_column=_money(nullable=True))
    sell_local: Decimal | None = Field(default=None, sa_column=_money(nullable=True))
    profit: Decimal | None = Field(default=None, sa_column=_money(nullable=True))

    memo: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def status(self) -> TradeStatus:
        return TradeStatus.OPEN if self.sell_date is None else TradeStatus.CLOSED
