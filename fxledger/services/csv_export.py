"""CSV export of the ledger, shaped for spreadsheet apps."""

import csv
from datetime import datetime
from io import StringIO
from typing import Iterable

from fxledger.engine.quotes import format_decimal
from fxledger.models.trade import Trade

# Byte-order mark so spreadsheet apps pick UTF-8 for the Korean header
BOM = "\ufeff"

# Order of columns is part of the export format.
CSV_HEADER = [
    "ID",
    "통화",  # currency
    "매수일",  # buy date
    "매수외화",  # buy amount
    "매수환율",  # buy rate
    "매수원화",  # buy local
    "매도일",  # sell date
    "매도환율",  # sell rate
    "매도원화",  # sell local
    "수익",  # profit
    "메모",  # memo
]


def _row(trade: Trade) -> list[str]:
    return [
        str(trade.id),
        trade.currency,
        trade.buy_date.isoformat(),
        format_decimal(trade.buy_amount),
        format_decimal(trade.buy_rate),
        format_decimal(trade.buy_local),
        trade.sell_date.isoformat() if trade.sell_date else "",
        format_decimal(trade.sell_rate),
        format_decimal(trade.sell_local),
        format_decimal(trade.profit),
        (trade.memo or "").replace(",", " "),
    ]


def render_csv(trades: Iterable[Trade]) -> str:
    out = StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for trade in trades:
        writer.writerow(_row(trade))
    return BOM + out.getvalue()


def export_filename(currency: str | None, now: datetime) -> str:
    return f"exchange_{currency or 'all'}_{now.strftime('%Y%m%d_%H%M%S')}.csv"
