"""CLI tool for ledger operations.

Usage:
    python -m fxledger.cli init-db
    python -m fxledger.cli list [CURRENCY]
    python -m fxledger.cli buy CURRENCY AMOUNT RATE [MEMO]
    python -m fxledger.cli sell ID RATE
    python -m fxledger.cli delete ID
    python -m fxledger.cli export [CURRENCY]
    python -m fxledger.cli serve

Rates given to buy and sell are quotes as people read them (JPY per 100 yen).
"""

import sys

from fxledger.config import settings
from fxledger.database import create_ledger_engine
from fxledger.engine.errors import LedgerError
from fxledger.engine.lifecycle import TradeEngine
from fxledger.engine.quotes import format_decimal, to_display_rate
from fxledger.services.csv_export import render_csv
from fxledger.services.ledger_store import LedgerStore
from fxledger.utils.logging import setup_logging

COMMANDS = ["init-db", "list", "buy", "sell", "delete", "export", "serve"]


def _parse_id(value: str) -> int:
    if not value.isdigit():
        print(f"Invalid trade id: {value}")
        sys.exit(1)
    return int(value)


def _usage(message: str):
    print(message)
    sys.exit(1)


def format_trade(trade) -> str:
    rate = format_decimal(to_display_rate(trade.currency, trade.buy_rate))
    line = (
        f"#{trade.id:<5} {trade.currency} {trade.buy_date.isoformat()} "
        f"{format_decimal(trade.buy_amount)} @ {rate} = {format_decimal(trade.buy_local)}"
    )
    if trade.sell_date is not None:
        sell_rate = format_decimal(to_display_rate(trade.currency, trade.sell_rate))
        line += (
            f" | sold {trade.sell_date.isoformat()} @ {sell_rate}"
            f" profit {format_decimal(trade.profit)}"
        )
    else:
        line += " | open"
    if trade.memo:
        line += f" ({trade.memo})"
    return line


def run_command(engine: TradeEngine, command: str, args: list[str]):
    """Execute one ledger command against an engine."""
    if command == "list":
        trades = engine.list_trades(args[0] if args else None)
        if not trades:
            print("No trades.")
        for trade in trades:
            print(format_trade(trade))
    elif command == "buy":
        if len(args) < 3:
            _usage("Usage: buy CURRENCY AMOUNT RATE [MEMO]")
        memo = " ".join(args[3:]) or None
        trade = engine.open_trade(args[0], args[1], args[2], memo, display=True)
        print(f"Recorded trade #{trade.id}: {format_trade(trade)}")
    elif command == "sell":
        if len(args) != 2:
            _usage("Usage: sell ID RATE")
        profit = engine.close_trade(_parse_id(args[0]), args[1], display=True)
        print(f"Sold trade #{args[0]}. Profit: {format_decimal(profit)}")
    elif command == "delete":
        if len(args) != 1:
            _usage("Usage: delete ID")
        engine.delete_trade(_parse_id(args[0]))
        print(f"Deleted trade #{args[0]}.")
    elif command == "export":
        sys.stdout.write(render_csv(engine.list_trades(args[0] if args else None)))
    else:
        _usage(f"Unknown command: {command}")


def serve():
    import uvicorn

    uvicorn.run("fxledger.main:app", host=settings.host, port=settings.port)


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m fxledger.cli <command> [args]")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)

    command, args = sys.argv[1], sys.argv[2:]
    if command not in COMMANDS:
        print(f"Unknown command: {command}")
        sys.exit(1)
    if command == "serve":
        serve()
        return

    setup_logging("WARNING")
    store = LedgerStore(create_ledger_engine(settings.database_url))
    try:
        store.create_tables()
        if command == "init-db":
            print("Database ready.")
            return
        run_command(TradeEngine(store), command, args)
    except LedgerError as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        store.close()


if __name__ == "__main__":
    main()
