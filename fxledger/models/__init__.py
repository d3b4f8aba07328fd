"""Database models."""

from fxledger.models.trade import Trade, TradeStatus

__all__ = [
    "Trade",
    "TradeStatus",
]
