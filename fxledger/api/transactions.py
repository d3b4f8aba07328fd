"""Transactions API — buy, sell, delete, list and export trades."""

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from fxledger.api.deps import get_engine
from fxledger.engine.lifecycle import TradeEngine
from fxledger.schemas.trade import (
    MessageResponse,
    SellRequest,
    SellResult,
    SummaryRead,
    TradeCreate,
    TradeCreated,
    TradeRead,
)
from fxledger.services.csv_export import export_filename, render_csv

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


# Fixed paths are declared before /{trade_id} so they are not read as ids
@router.get("/export")
def export_trades(currency: str | None = None, engine: TradeEngine = Depends(get_engine)):
    trades = engine.list_trades(currency)
    filename = export_filename(currency.upper() if currency else None, datetime.now())
    return Response(
        content=render_csv(trades),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/summary", response_model=SummaryRead)
def trade_summary(currency: str | None = None, engine: TradeEngine = Depends(get_engine)):
    return SummaryRead.model_validate(engine.summarize(currency))


@router.get("", response_model=list[TradeRead])
def list_trades(currency: str | None = None, engine: TradeEngine = Depends(get_engine)):
    return [TradeRead.from_trade(t) for t in engine.list_trades(currency)]


@router.post("", response_model=TradeCreated)
def buy(data: TradeCreate, engine: TradeEngine = Depends(get_engine)):
    trade = engine.open_trade(
        data.currency,
        data.buy_amount,
        data.buy_rate,
        data.memo,
        display=data.rate_basis == "display",
    )
    return TradeCreated(id=trade.id, message="Purchase recorded.")


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade_id: int, engine: TradeEngine = Depends(get_engine)):
    return TradeRead.from_trade(engine.get_trade(trade_id))


@router.put("/{trade_id}/sell", response_model=SellResult)
def sell(trade_id: int, data: SellRequest, engine: TradeEngine = Depends(get_engine)):
    profit = engine.close_trade(
        trade_id,
        data.sell_rate,
        display=data.rate_basis == "display",
    )
    return SellResult(message="Sale recorded.", profit=profit)


@router.delete("/{trade_id}", response_model=MessageResponse)
def delete_trade(trade_id: int, engine: TradeEngine = Depends(get_engine)):
    engine.delete_trade(trade_id)
    return MessageResponse(message="Trade deleted.")
