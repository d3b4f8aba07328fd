"""SQLModel engine construction and lightweight schema migrations."""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

logger = logging.getLogger(__name__)

# Columns renamed since the first schema, which was KRW-specific
_COLUMN_RENAMES = {
    "buy_krw": "buy_local",
    "sell_krw": "sell_local",
}


def create_ledger_engine(database_url: str, echo: bool = False) -> Engine:
    """Build an engine for the given URL."""
    # SQLite needs check_same_thread=False; PostgreSQL does not
    connect_args = {}
    kwargs = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        # In-memory databases vanish when their only connection closes
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    elif database_url.startswith("postgres://"):
        # Hosting providers still hand out the legacy scheme
        database_url = "postgresql://" + database_url[len("postgres://"):]

    return create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)


def _run_migrations(engine: Engine):
    """Rename legacy KRW-specific columns on tables created by older versions."""
    inspector = inspect(engine)

    if "transactions" not in inspector.get_table_names():
        return

    columns = {col["name"] for col in inspector.get_columns("transactions")}
    with engine.connect() as conn:
        for old, new in _COLUMN_RENAMES.items():
            if old in columns and new not in columns:
                logger.info(f"Migrating: renaming {old} -> {new}")
                conn.execute(text(f"ALTER TABLE transactions RENAME COLUMN {old} TO {new}"))
        conn.commit()


def create_db_and_tables(engine: Engine):
    """Create all tables. Called on startup."""
    # Import models so they register with the metadata
    import fxledger.models  # noqa: F401

    _run_migrations(engine)
    SQLModel.metadata.create_all(engine)
