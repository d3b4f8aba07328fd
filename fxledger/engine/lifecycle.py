"""Trade lifecycle engine: open a lot, close it once, compute profit.

All money math is done in Decimal. A lot moves from open to closed exactly
once, and the close is a single conditional UPDATE so two concurrent sells
of the same lot cannot both win.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, localcontext
from typing import Callable

from fxledger.engine.errors import AlreadyClosedError, NotFoundError
from fxledger.engine.quotes import (
    MONEY_CONTEXT,
    from_display_rate,
    normalize_currency,
    to_decimal,
)
from fxledger.models.trade import Trade, TradeStatus
from fxledger.services.ledger_store import LedgerStore
from fxledger.utils.constants import SUPPORTED_CURRENCIES

logger = logging.getLogger(__name__)


@dataclass
class LedgerSummary:
    currency: str | None
    open_count: int
    closed_count: int
    open_amount: Decimal  # foreign units still held
    open_cost: Decimal  # local cost of lots still held
    realized_profit: Decimal


class TradeEngine:
    """Validates input and drives trades through open -> closed."""

    def __init__(self, store: LedgerStore, today: Callable[[], date] = date.today):
        self.store = store
        self._today = today

    def open_trade(
        self,
        currency: str | None,
        amount,
        rate,
        memo: str | None = None,
        *,
        display: bool = False,
    ) -> Trade:
        """Record a purchase. With display=True, rate is a displayed quote."""
        code = normalize_currency(currency)
        buy_amount = to_decimal(amount, "buy_amount")
        buy_rate = to_decimal(rate, "buy_rate")
        if display:
            buy_rate = from_display_rate(code, buy_rate)

        trade = Trade(
            currency=code,
            buy_date=self._today(),
            buy_amount=buy_amount,
            buy_rate=buy_rate,
            buy_local=MONEY_CONTEXT.multiply(buy_amount, buy_rate),
            memo=memo or "",
        )
        self.store.insert(trade)
        logger.info(
            f"Opened trade {trade.id}: {code} {buy_amount} @ {buy_rate} = {trade.buy_local}"
        )
        return trade

    def get_trade(self, trade_id: int) -> Trade:
        trade = self.store.get(trade_id)
        if trade is None:
            raise NotFoundError(f"Trade {trade_id} not found")
        return trade

    def close_trade(self, trade_id: int, sell_rate, *, display: bool = False) -> Decimal:
        """Sell a whole lot and return the realized profit in local currency."""
        rate = to_decimal(sell_rate, "sell_rate")
        trade = self.get_trade(trade_id)
        if trade.status is TradeStatus.CLOSED:
            raise AlreadyClosedError(f"Trade {trade_id} is already closed")

        if display:
            rate = from_display_rate(trade.currency, rate)

        sell_local = MONEY_CONTEXT.multiply(trade.buy_amount, rate)
        profit = MONEY_CONTEXT.subtract(sell_local, trade.buy_local)
        rows = self.store.update(
            trade_id,
            {
                "sell_date": self._today(),
                "sell_rate": rate,
                "sell_local": sell_local,
                "profit": profit,
            },
            only_open=True,
        )
        if rows == 0:
            # Lost the race to another close, or the row vanished in between
            if self.store.get(trade_id) is None:
                raise NotFoundError(f"Trade {trade_id} not found")
            raise AlreadyClosedError(f"Trade {trade_id} is already closed")

        logger.info(f"Closed trade {trade_id} @ {rate}: profit {profit}")
        return profit

    def delete_trade(self, trade_id: int) -> None:
        if self.store.delete(trade_id) == 0:
            raise NotFoundError(f"Trade {trade_id} not found")
        logger.info(f"Deleted trade {trade_id}")

    def list_trades(self, currency: str | None = None) -> list[Trade]:
        """Newest first. Unknown currencies or ones with no trades give an empty list."""
        if currency is None or not currency.strip():
            return self.store.list()
        code = currency.strip().upper()
        if code not in SUPPORTED_CURRENCIES:
            return []
        return self.store.list(code)

    def summarize(self, currency: str | None = None) -> LedgerSummary:
        trades = self.list_trades(currency)
        open_trades = [t for t in trades if t.status is TradeStatus.OPEN]
        closed_trades = [t for t in trades if t.status is TradeStatus.CLOSED]
        code = currency.strip().upper() if currency and currency.strip() else None
        with localcontext(MONEY_CONTEXT):
            return LedgerSummary(
                currency=code,
                open_count=len(open_trades),
                closed_count=len(closed_trades),
                open_amount=sum((t.buy_amount for t in open_trades), Decimal("0")),
                open_cost=sum((t.buy_local for t in open_trades), Decimal("0")),
                realized_profit=sum((t.profit for t in closed_trades), Decimal("0")),
            )
