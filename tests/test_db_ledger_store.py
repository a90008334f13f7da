"""Tests for the in-memory ledger store primitives."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from app.db import InMemoryLedgerStore, InMemoryLedgerStoreHealthService
from app.domain import FifoLot, Position, RealizedPnlRecord, Trade, TradeSide


_EXECUTED_AT = datetime(2026, 1, 5, 10, 0, tzinfo=timezone.utc)


def _build_trade(external_trade_id: str, symbol: str = "BTC") -> Trade:
    return Trade(
        trade_id=f"internal-{external_trade_id}",
        external_trade_id=external_trade_id,
        order_id="order-1",
        symbol=symbol,
        side=TradeSide.BUY,
        price=Decimal("40000"),
        quantity=Decimal("1"),
        execution_timestamp_utc=_EXECUTED_AT,
        created_at_utc=_EXECUTED_AT,
    )


def _build_record(pnl: str, quantity: str, symbol: str = "BTC") -> RealizedPnlRecord:
    return RealizedPnlRecord(
        symbol=symbol,
        quantity=Decimal(quantity),
        buy_price=Decimal("100"),
        sell_price=Decimal("110"),
        pnl=Decimal(pnl),
        timestamp_utc=_EXECUTED_AT,
    )


def test_db_trade_append_indexes_by_external_id_and_lists_copies() -> None:
    """Index appended trades and return log copies that cannot mutate the store.

    Returns:
        None: Assertions validate trade log behavior.

    Raises:
        AssertionError: Raised when the log or index is inconsistent.
    """

    store = InMemoryLedgerStore()
    first_trade = store.db_trade_append(_build_trade("t1"))
    store.db_trade_append(_build_trade("t2", symbol="ETH"))

    listed_trades = store.db_trade_list()
    listed_trades.clear()

    assert store.db_trade_get_by_external_id("t1") is first_trade
    assert store.db_trade_get_by_external_id("missing") is None
    assert store.db_trade_count() == 2
    assert [trade.external_trade_id for trade in store.db_trade_list()] == ["t1", "t2"]


def test_db_position_set_get_remove_round_trip() -> None:
    """Store, replace, list, and remove positions by symbol.

    Returns:
        None: Assertions validate position primitives.

    Raises:
        AssertionError: Raised when position primitives misbehave.
    """

    store = InMemoryLedgerStore()
    position = Position(
        symbol="BTC",
        lots=[FifoLot(quantity=Decimal("1"), price=Decimal("40000"), origin_trade_id="a")],
        total_quantity=Decimal("1"),
        average_entry_price=Decimal("40000"),
    )

    store.db_position_set(position)
    assert store.db_position_get("BTC") is position
    assert store.db_position_list() == [position]

    store.db_position_remove("BTC")
    store.db_position_remove("BTC")
    assert store.db_position_get("BTC") is None
    assert store.db_position_list() == []


def test_db_realized_pnl_record_append_keeps_aggregate_equal_to_record_sums() -> None:
    """Fold every appended record into the per-symbol aggregate.

    Returns:
        None: Assertions validate record/aggregate pairing.

    Raises:
        AssertionError: Raised when aggregate and records diverge.
    """

    store = InMemoryLedgerStore()
    store.db_realized_pnl_record_append(_build_record("10000", "2"))
    store.db_realized_pnl_record_append(_build_record("-250.5", "0.5"))
    store.db_realized_pnl_record_append(_build_record("60", "0.3", symbol="ETH"))

    aggregates = store.db_realized_pnl_aggregates()
    btc_records = store.db_realized_pnl_records("BTC")

    assert aggregates["BTC"].total_pnl == sum(record.pnl for record in btc_records)
    assert aggregates["BTC"].total_pnl == Decimal("9749.5")
    assert aggregates["BTC"].total_quantity == Decimal("2.5")
    assert aggregates["ETH"].total_pnl == Decimal("60")
    assert len(store.db_realized_pnl_records_all()) == 3
    assert store.db_realized_pnl_records("SOL") == []


def test_db_clear_all_wipes_every_collection() -> None:
    """Remove trades, positions, records, and aggregates on clear.

    Returns:
        None: Assertions validate reset behavior.

    Raises:
        AssertionError: Raised when any collection survives a clear.
    """

    store = InMemoryLedgerStore()
    store.db_trade_append(_build_trade("t1"))
    store.db_position_set(Position(symbol="BTC", total_quantity=Decimal("1"), average_entry_price=Decimal("1")))
    store.db_realized_pnl_record_append(_build_record("1", "1"))

    store.db_clear_all()

    assert store.db_trade_count() == 0
    assert store.db_trade_get_by_external_id("t1") is None
    assert store.db_position_list() == []
    assert store.db_realized_pnl_aggregates() == {}
    assert store.db_realized_pnl_records_all() == []


def test_db_transaction_is_reentrant_for_nested_store_calls() -> None:
    """Allow store primitives to run inside an open transaction block.

    Returns:
        None: Assertions validate lock re-entrancy.

    Raises:
        AssertionError: Raised when nested calls deadlock or fail.
    """

    store = InMemoryLedgerStore()
    with store.db_transaction():
        with store.db_transaction():
            store.db_trade_append(_build_trade("t1"))

    assert store.db_trade_count() == 1


def test_db_store_health_reports_counters() -> None:
    """Report store availability with trade and position counters.

    Returns:
        None: Assertions validate health payload.

    Raises:
        AssertionError: Raised when health payload differs.
    """

    store = InMemoryLedgerStore()
    store.db_trade_append(_build_trade("t1"))
    store.db_realized_pnl_record_append(_build_record("5", "1"))
    health_service = InMemoryLedgerStoreHealthService(store=store)

    health = health_service.db_check_health()

    assert health.status == "ok"
    assert "trades=1" in health.detail
    assert "open_positions=0" in health.detail
    assert "realized_records=1" in health.detail
    assert health_service.db_connection_label() == "memory://ledger"
