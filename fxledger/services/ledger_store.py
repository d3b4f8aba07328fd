"""Ledger store: persistence of trade records keyed by id."""

import logging
from typing import Any

from sqlalchemy import delete, update
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from fxledger.database import create_db_and_tables
from fxledger.models.trade import Trade

logger = logging.getLogger(__name__)

# Plain table for the single-statement UPDATE and DELETE
transactions = Trade.__table__


class LedgerStore:
    """Thin id-keyed store over a SQLAlchemy engine.

    The store owns the engine: open it at process start, close() it at
    shutdown. Every call runs in its own session.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def create_tables(self):
        create_db_and_tables(self.engine)

    def close(self):
        self.engine.dispose()
        logger.info("Ledger store closed")

    def insert(self, trade: Trade) -> int:
        with Session(self.engine) as session:
            session.add(trade)
            session.commit()
            session.refresh(trade)
            return trade.id

    def get(self, trade_id: int) -> Trade | None:
        with Session(self.engine) as session:
            return session.get(Trade, trade_id)

    def update(self, trade_id: int, fields: dict[str, Any], *, only_open: bool = False) -> int:
        """Apply fields to one row and return the number of rows affected.

        With only_open=True the row is only touched while sell_date is null,
        so the state check and the write are one statement.
        """
        stmt = update(transactions).where(transactions.c.id == trade_id)
        if only_open:
            stmt = stmt.where(transactions.c.sell_date.is_(None))
        stmt = stmt.values(**fields)
        with Session(self.engine) as session:
            result = session.connection().execute(stmt)
            session.commit()
            return result.rowcount

    def delete(self, trade_id: int) -> int:
        with Session(self.engine) as session:
            result = session.connection().execute(
                delete(transactions).where(transactions.c.id == trade_id)
            )
            session.commit()
            return result.rowcount

    def list(self, currency: str | None = None) -> list[Trade]:
        """All trades, newest first, optionally for one currency."""
        stmt = select(Trade).order_by(Trade.created_at.desc(), Trade.id.desc())
        if currency is not None:
            stmt = stmt.where(Trade.currency == currency)
        with Session(self.engine) as session:
            return list(session.exec(stmt).all())
