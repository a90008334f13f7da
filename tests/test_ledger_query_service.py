"""Tests for read-side ledger projections over positions, PnL, and trades."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from app.db import InMemoryLedgerStore
from app.ledger import FifoLedgerEngine, LedgerQueryService, TradeRecordRequest
from app.pricing import InMemoryMarketPriceService


_BASE_TIMESTAMP = datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)


class _StaticPriceOracle:
    """Price oracle stub returning fixed prices."""

    def __init__(self, prices: dict[str, str]) -> None:
        self._prices = {symbol: Decimal(price) for symbol, price in prices.items()}

    def pricing_get_price(self, symbol: str) -> Decimal | None:
        return self._prices.get(symbol)


def _build_services(prices: dict[str, str]) -> tuple[FifoLedgerEngine, LedgerQueryService]:
    store = InMemoryLedgerStore()
    return FifoLedgerEngine(store=store), LedgerQueryService(store=store, price_oracle=_StaticPriceOracle(prices))


def _record(engine: FifoLedgerEngine, external_id: str, side: str, quantity: str, price: str, symbol: str) -> None:
    engine.ledger_record_trade(
        TradeRecordRequest(
            external_trade_id=external_id,
            order_id=f"order-{external_id}",
            symbol=symbol,
            side=side,
            price=price,
            quantity=quantity,
            execution_timestamp_utc=_BASE_TIMESTAMP,
        )
    )


def test_query_positions_values_open_positions_at_market_price() -> None:
    """Value open positions at oracle prices with 2-place portfolio totals.

    Returns:
        None: Assertions validate valuation math and rounding.

    Raises:
        AssertionError: Raised when valuation deviates.
    """

    engine, query_service = _build_services({"BTC": "44000", "ETH": "2500"})
    _record(engine, "b1", "BUY", "1", "40000", "BTC")
    _record(engine, "b2", "BUY", "1", "42000", "BTC")
    _record(engine, "b3", "BUY", "2", "2400", "ETH")

    snapshot = query_service.query_positions()

    positions = {position.symbol: position for position in snapshot.positions}
    assert positions["BTC"].total_quantity == Decimal("2")
    assert positions["BTC"].average_entry_price == Decimal("41000")
    assert positions["BTC"].current_value == Decimal("88000")
    assert positions["BTC"].unrealized_pnl == Decimal("6000")
    assert positions["ETH"].unrealized_pnl == Decimal("200")
    assert str(positions["BTC"].current_price) == "44000.00000000"
    assert snapshot.total_value == Decimal("93000")
    assert str(snapshot.total_unrealized_pnl) == "6200.00"


def test_query_positions_falls_back_to_average_entry_price_without_market_price() -> None:
    """Report zero unrealized PnL for symbols the oracle does not track.

    Returns:
        None: Assertions validate price fallback.

    Raises:
        AssertionError: Raised when missing prices fail or skew PnL.
    """

    engine, query_service = _build_services({})
    _record(engine, "b1", "BUY", "3", "12.5", "DOGE")

    snapshot = query_service.query_positions()

    assert len(snapshot.positions) == 1
    assert snapshot.positions[0].current_price == Decimal("12.5")
    assert snapshot.positions[0].unrealized_pnl == Decimal("0")
    assert snapshot.total_value == Decimal("37.50")
    assert snapshot.total_unrealized_pnl == Decimal("0")


def test_query_positions_filters_symbols_and_hides_closed_positions() -> None:
    """Apply the symbol filter and never return fully closed positions.

    Returns:
        None: Assertions validate filtering.

    Raises:
        AssertionError: Raised when filtering deviates.
    """

    engine, query_service = _build_services({"BTC": "44000", "ETH": "2500", "SOL": "100"})
    _record(engine, "b1", "BUY", "1", "40000", "BTC")
    _record(engine, "b2", "BUY", "1", "2000", "ETH")
    _record(engine, "b3", "BUY", "1", "90", "SOL")
    _record(engine, "s3", "SELL", "1", "95", "SOL")

    filtered_snapshot = query_service.query_positions({"ETH", "SOL"})
    unfiltered_snapshot = query_service.query_positions(set())

    assert [position.symbol for position in filtered_snapshot.positions] == ["ETH"]
    assert sorted(position.symbol for position in unfiltered_snapshot.positions) == ["BTC", "ETH"]


def test_query_pnl_combines_cached_realized_and_unrealized_pnl() -> None:
    """Report realized entries from the aggregate cache and unrealized for open positions.

    Returns:
        None: Assertions validate the PnL breakdown.

    Raises:
        AssertionError: Raised when the breakdown deviates.
    """

    engine, query_service = _build_services({"BTC": "44000", "ETH": "2500"})
    _record(engine, "b1", "BUY", "0.5", "2000", "ETH")
    _record(engine, "b2", "BUY", "1.75", "2400", "ETH")
    _record(engine, "s1", "SELL", "0.8", "2600", "ETH")
    _record(engine, "b3", "BUY", "1", "40000", "BTC")
    _record(engine, "s3", "SELL", "1", "43000", "BTC")

    breakdown = query_service.query_pnl()

    realized = {entry.symbol: entry for entry in breakdown.realized_pnl}
    assert realized["ETH"].realized_pnl == Decimal("360")
    assert realized["ETH"].closed_quantity == Decimal("0.8")
    assert realized["BTC"].realized_pnl == Decimal("3000")
    assert [entry.symbol for entry in breakdown.unrealized_pnl] == ["ETH"]
    assert breakdown.unrealized_pnl[0].current_quantity == Decimal("1.45")
    assert breakdown.unrealized_pnl[0].unrealized_pnl == Decimal("145")
    assert breakdown.total_realized_pnl == Decimal("3360.00")
    assert breakdown.total_unrealized_pnl == Decimal("145.00")
    assert breakdown.net_pnl == Decimal("3505.00")


def test_query_pnl_net_sums_independently_rounded_totals() -> None:
    """Round realized and unrealized totals before adding them into net PnL.

    Returns:
        None: Assertions validate the rounding order.

    Raises:
        AssertionError: Raised when net PnL is rounded after summing.
    """

    engine, query_service = _build_services({"ETH": "100.005"})
    _record(engine, "b1", "BUY", "1", "100", "BTC")
    _record(engine, "s1", "SELL", "1", "100.005", "BTC")
    _record(engine, "b2", "BUY", "1", "100", "ETH")

    breakdown = query_service.query_pnl()

    assert breakdown.total_realized_pnl == Decimal("0.01")
    assert breakdown.total_unrealized_pnl == Decimal("0.01")
    assert breakdown.net_pnl == Decimal("0.02")


def test_query_pnl_filters_realized_and_unrealized_entries() -> None:
    """Apply the symbol filter to both realized and unrealized lists.

    Returns:
        None: Assertions validate filtering.

    Raises:
        AssertionError: Raised when filtered symbols leak into results.
    """

    engine, query_service = _build_services({"BTC": "44000", "ETH": "2500"})
    _record(engine, "b1", "BUY", "2", "40000", "BTC")
    _record(engine, "s1", "SELL", "1", "41000", "BTC")
    _record(engine, "b2", "BUY", "1", "2000", "ETH")
    _record(engine, "s2", "SELL", "0.5", "2100", "ETH")

    breakdown = query_service.query_pnl({"ETH"})

    assert [entry.symbol for entry in breakdown.realized_pnl] == ["ETH"]
    assert [entry.symbol for entry in breakdown.unrealized_pnl] == ["ETH"]
    assert breakdown.total_realized_pnl == Decimal("50.00")
    assert breakdown.total_unrealized_pnl == Decimal("250.00")


def test_query_pnl_is_empty_for_a_fresh_ledger() -> None:
    """Return zero totals and empty lists when nothing has been recorded.

    Returns:
        None: Assertions validate empty-state output.

    Raises:
        AssertionError: Raised when empty state is not zero.
    """

    _engine, query_service = _build_services({})

    breakdown = query_service.query_pnl()

    assert breakdown.realized_pnl == ()
    assert breakdown.unrealized_pnl == ()
    assert str(breakdown.net_pnl) == "0.00"


def test_query_trades_filters_by_symbol_and_looks_up_by_external_id() -> None:
    """Pass trade history reads through to the store.

    Returns:
        None: Assertions validate trade history reads.

    Raises:
        AssertionError: Raised when trade reads deviate.
    """

    engine, query_service = _build_services({})
    _record(engine, "b1", "BUY", "1", "40000", "BTC")
    _record(engine, "b2", "BUY", "1", "2000", "ETH")
    _record(engine, "s1", "SELL", "1", "41000", "BTC")

    assert [trade.external_trade_id for trade in query_service.query_trades()] == ["b1", "b2", "s1"]
    assert [trade.external_trade_id for trade in query_service.query_trades("BTC")] == ["b1", "s1"]
    assert query_service.query_trade_by_external_id("b2") is not None
    assert query_service.query_trade_by_external_id("missing") is None
    assert [record.pnl for record in query_service.query_realized_pnl_records("BTC")] == [Decimal("1000")]


def test_query_positions_reads_prices_from_the_market_price_service() -> None:
    """Reflect manual price updates in the next valuation.

    Returns:
        None: Assertions validate oracle integration.

    Raises:
        AssertionError: Raised when updated prices are ignored.
    """

    store = InMemoryLedgerStore()
    price_service = InMemoryMarketPriceService()
    engine = FifoLedgerEngine(store=store)
    query_service = LedgerQueryService(store=store, price_oracle=price_service)
    _record(engine, "b1", "BUY", "1", "40000", "BTC")

    assert query_service.query_positions().total_unrealized_pnl == Decimal("4000.00")

    price_service.pricing_update_price("BTC", "39000")

    assert query_service.query_positions().total_unrealized_pnl == Decimal("-1000.00")
