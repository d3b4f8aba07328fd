"""Tests for the trade lifecycle engine: open, close once, delete, list."""

from decimal import Decimal

import pytest

from fxledger.engine.errors import AlreadyClosedError, NotFoundError, ValidationError
from fxledger.models.trade import TradeStatus
from tests.conftest import TODAY


# ---------------------------------------------------------------------------
# 1. Opening trades
# ---------------------------------------------------------------------------

class TestOpenTrade:
    def test_usd_buy_local_is_amount_times_rate(self, engine):
        trade = engine.open_trade("USD", 100, 1300)
        assert trade.id is not None
        assert trade.buy_local == Decimal("130000")
        assert trade.buy_date == TODAY
        assert trade.status is TradeStatus.OPEN
        assert trade.sell_date is None and trade.profit is None

    def test_buy_local_is_persisted(self, engine, store):
        trade = engine.open_trade("EUR", "250.50", "1450.25")
        saved = store.get(trade.id)
        assert saved.buy_local == Decimal("250.50") * Decimal("1450.25")

    def test_float_inputs_do_not_drift(self, engine):
        trade = engine.open_trade("USD", 3, 0.1)
        assert trade.buy_rate == Decimal("0.1")
        assert trade.buy_local == Decimal("0.3")

    def test_currency_is_case_insensitive(self, engine):
        trade = engine.open_trade(" usd ", 1, 1300)
        assert trade.currency == "USD"

    def test_jpy_display_rate_is_stored_per_yen(self, engine):
        trade = engine.open_trade("JPY", 10000, "0.95", display=True)
        assert trade.buy_rate == Decimal("0.0095")
        assert trade.buy_local == Decimal("95")

    def test_jpy_unit_rate_is_stored_as_given(self, engine):
        trade = engine.open_trade("JPY", 10000, "0.0095")
        assert trade.buy_rate == Decimal("0.0095")
        assert trade.buy_local == Decimal("95")

    def test_usd_display_rate_is_not_scaled(self, engine):
        trade = engine.open_trade("USD", 100, "1300", display=True)
        assert trade.buy_rate == Decimal("1300")

    def test_memo_defaults_to_empty(self, engine):
        assert engine.open_trade("USD", 1, 1).memo == ""
        assert engine.open_trade("USD", 1, 1, "travel money").memo == "travel money"

    @pytest.mark.parametrize("currency", [None, "", "   ", "GBP", "KRW"])
    def test_invalid_currency_rejected(self, engine, currency):
        with pytest.raises(ValidationError):
            engine.open_trade(currency, 100, 1300)

    @pytest.mark.parametrize("amount", [None, "", 0, "0", -5, "abc", "NaN", "Infinity", True])
    def test_invalid_amount_rejected(self, engine, amount):
        with pytest.raises(ValidationError):
            engine.open_trade("USD", amount, 1300)

    @pytest.mark.parametrize("rate", [None, 0, Decimal("-1300"), "1,300", float("inf")])
    def test_invalid_rate_rejected(self, engine, rate):
        with pytest.raises(ValidationError):
            engine.open_trade("USD", 100, rate)

    def test_many_digit_buy_local_is_exact(self, engine, store):
        trade = engine.open_trade("USD", "123456789.123", "1371.55")
        assert trade.buy_local == Decimal("169327159121.65065")
        assert store.get(trade.id).buy_local == Decimal("169327159121.65065")

    def test_largest_accepted_inputs_round_trip(self, engine, store):
        amount = Decimal("99999999999999.9999999999")
        rate = Decimal("12345678901234.0123456789")
        trade = engine.open_trade("EUR", amount, rate)
        saved = store.get(trade.id)
        assert saved.buy_amount == amount
        assert saved.buy_rate == rate
        assert saved.buy_local == trade.buy_local
        # An exact product of two 10-place numbers keeps all 20 places
        assert saved.buy_local.as_tuple().exponent == -20

    @pytest.mark.parametrize(
        "amount", ["1e400", "1E+14", "123456789012345", "0.12345678901", 1e-11]
    )
    def test_out_of_range_amount_rejected(self, engine, store, amount):
        with pytest.raises(ValidationError):
            engine.open_trade("USD", amount, 1300)
        assert store.list() == []

    def test_rate_with_too_many_decimals_rejected(self, engine):
        with pytest.raises(ValidationError, match="decimal places"):
            engine.open_trade("JPY", 10000, "0.123456789012")

    def test_trailing_zeros_do_not_count_as_decimals(self, engine):
        trade = engine.open_trade("USD", "100.000000000000", "1300.5000000000000")
        assert trade.buy_local == Decimal("130050")

    def test_ten_decimal_jpy_display_rate_is_stored_exactly(self, engine, store):
        trade = engine.open_trade("JPY", 10000, "0.9512345678", display=True)
        saved = store.get(trade.id)
        assert saved.buy_rate == Decimal("0.009512345678")
        assert saved.buy_local == Decimal("95.12345678")

    def test_rejected_open_persists_nothing(self, engine, store):
        with pytest.raises(ValidationError):
            engine.open_trade("USD", 100, 0)
        assert store.list() == []


# ---------------------------------------------------------------------------
# 2. Closing trades
# ---------------------------------------------------------------------------

class TestCloseTrade:
    def test_usd_profit(self, engine, store):
        trade = engine.open_trade("USD", 100, 1300)
        profit = engine.close_trade(trade.id, 1350)
        assert profit == Decimal("5000")

        closed = store.get(trade.id)
        assert closed.status is TradeStatus.CLOSED
        assert closed.sell_date == TODAY
        assert closed.sell_rate == Decimal("1350")
        assert closed.sell_local == Decimal("135000")
        assert closed.profit == Decimal("5000")

    def test_jpy_profit_from_display_rate(self, engine, store):
        trade = engine.open_trade("JPY", 10000, "0.0095")
        profit = engine.close_trade(trade.id, "1.00", display=True)
        assert profit == Decimal("5")

        closed = store.get(trade.id)
        assert closed.sell_rate == Decimal("0.01")
        assert closed.sell_local == Decimal("100")

    def test_many_digit_profit_is_exact(self, engine, store):
        trade = engine.open_trade("USD", "25000.37", "1371.53")
        profit = engine.close_trade(trade.id, "1388.17")
        assert profit == Decimal("416006.1568")

        closed = store.get(trade.id)
        assert closed.sell_local == Decimal("25000.37") * Decimal("1388.17")
        assert closed.profit == Decimal("416006.1568")

    def test_sell_rate_out_of_range_leaves_trade_open(self, engine, store):
        trade = engine.open_trade("USD", 100, 1300)
        with pytest.raises(ValidationError):
            engine.close_trade(trade.id, "1e400")
        assert store.get(trade.id).status is TradeStatus.OPEN

    def test_loss_is_negative(self, engine):
        trade = engine.open_trade("EUR", 200, 1500)
        assert engine.close_trade(trade.id, 1450) == Decimal("-10000")

    def test_break_even_is_zero(self, engine):
        trade = engine.open_trade("USD", 10, 1300)
        assert engine.close_trade(trade.id, "1300.00") == 0

    def test_second_close_rejected_and_profit_kept(self, engine, store):
        trade = engine.open_trade("USD", 100, 1300)
        engine.close_trade(trade.id, 1350)

        with pytest.raises(AlreadyClosedError):
            engine.close_trade(trade.id, 1500)

        closed = store.get(trade.id)
        assert closed.profit == Decimal("5000")
        assert closed.sell_rate == Decimal("1350")

    def test_close_missing_trade(self, engine):
        with pytest.raises(NotFoundError):
            engine.close_trade(999, 1350)

    @pytest.mark.parametrize("rate", [None, "", 0, -1, "x"])
    def test_invalid_sell_rate_leaves_trade_open(self, engine, store, rate):
        trade = engine.open_trade("USD", 100, 1300)
        with pytest.raises(ValidationError):
            engine.close_trade(trade.id, rate)
        assert store.get(trade.id).status is TradeStatus.OPEN

    def test_close_that_loses_the_race_is_rejected(self, engine, store, monkeypatch):
        trade = engine.open_trade("USD", 100, 1300)
        stale = store.get(trade.id)
        engine.close_trade(trade.id, 1350)

        # Another caller read the row while it was still open
        monkeypatch.setattr(store, "get", lambda trade_id: stale)
        with pytest.raises(AlreadyClosedError):
            engine.close_trade(trade.id, 1500)

        monkeypatch.undo()
        assert store.get(trade.id).profit == Decimal("5000")


# ---------------------------------------------------------------------------
# 3. Deleting trades
# ---------------------------------------------------------------------------

class TestDeleteTrade:
    def test_delete_open_and_closed(self, engine, store):
        open_trade = engine.open_trade("USD", 1, 1300)
        closed_trade = engine.open_trade("USD", 1, 1300)
        engine.close_trade(closed_trade.id, 1310)

        engine.delete_trade(open_trade.id)
        engine.delete_trade(closed_trade.id)
        assert store.list() == []

    def test_delete_missing(self, engine):
        with pytest.raises(NotFoundError):
            engine.delete_trade(42)

    def test_delete_twice(self, engine):
        trade = engine.open_trade("EUR", 1, 1450)
        engine.delete_trade(trade.id)
        with pytest.raises(NotFoundError):
            engine.delete_trade(trade.id)

    def test_get_after_delete(self, engine):
        trade = engine.open_trade("EUR", 1, 1450)
        engine.delete_trade(trade.id)
        with pytest.raises(NotFoundError):
            engine.get_trade(trade.id)


# ---------------------------------------------------------------------------
# 4. Listing and summaries
# ---------------------------------------------------------------------------

class TestListTrades:
    def test_newest_first(self, engine):
        ids = [engine.open_trade(c, 1, 10).id for c in ("USD", "JPY", "EUR")]
        assert [t.id for t in engine.list_trades()] == list(reversed(ids))

    def test_filter_is_case_insensitive(self, engine):
        engine.open_trade("USD", 1, 1300)
        jpy = engine.open_trade("JPY", 1000, "0.0095")
        assert [t.id for t in engine.list_trades("jpy")] == [jpy.id]

    def test_blank_filter_lists_everything(self, engine):
        engine.open_trade("USD", 1, 1300)
        engine.open_trade("EUR", 1, 1450)
        assert len(engine.list_trades("")) == 2

    def test_currency_without_trades_is_empty(self, engine):
        engine.open_trade("USD", 1, 1300)
        assert engine.list_trades("EUR") == []

    def test_unsupported_currency_is_empty(self, engine):
        engine.open_trade("USD", 1, 1300)
        assert engine.list_trades("GBP") == []


def test_summarize(engine):
    first = engine.open_trade("USD", 100, 1300)
    engine.open_trade("USD", 50, 1320)
    engine.open_trade("EUR", 10, 1450)
    engine.close_trade(first.id, 1350)

    summary = engine.summarize("usd")
    assert summary.currency == "USD"
    assert summary.open_count == 1
    assert summary.closed_count == 1
    assert summary.open_amount == Decimal("50")
    assert summary.open_cost == Decimal("66000")
    assert summary.realized_profit == Decimal("5000")


def test_summarize_empty_ledger(engine):
    summary = engine.summarize()
    assert summary.currency is None
    assert summary.open_count == summary.closed_count == 0
    assert summary.realized_profit == 0
