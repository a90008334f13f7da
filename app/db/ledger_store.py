"""In-memory ledger store for trades, positions, and realized PnL.

The store keeps an append-only trade log with an external-id index, the
open position map, and per-symbol realized PnL records together with their
aggregates. Realized records and aggregates are only written through one
method so the two can never drift apart.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from app.domain import Position, RealizedPnlAggregate, RealizedPnlRecord, Trade, decimal_add

from .interfaces import LedgerStorePort


logger = logging.getLogger(__name__)


class InMemoryLedgerStore(LedgerStorePort):
    """Process-local ledger store guarded by one re-entrant lock."""

    def __init__(self) -> None:
        """Initialize empty store collections.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This initializer does not raise runtime errors.
        """

        self._lock = threading.RLock()
        self._trades: list[Trade] = []
        self._trade_index: dict[str, Trade] = {}
        self._positions: dict[str, Position] = {}
        self._pnl_records: dict[str, list[RealizedPnlRecord]] = {}
        self._pnl_aggregates: dict[str, RealizedPnlAggregate] = {}

    @contextmanager
    def db_transaction(self) -> Iterator[None]:
        """Hold the store lock for the duration of the block."""

        with self._lock:
            yield

    def db_trade_append(self, trade: Trade) -> Trade:
        with self._lock:
            self._trades.append(trade)
            self._trade_index[trade.external_trade_id] = trade
        return trade

    def db_trade_get_by_external_id(self, external_trade_id: str) -> Trade | None:
        with self._lock:
            return self._trade_index.get(external_trade_id)

    def db_trade_list(self) -> list[Trade]:
        with self._lock:
            return list(self._trades)

    def db_trade_count(self) -> int:
        with self._lock:
            return len(self._trades)

    def db_position_get(self, symbol: str) -> Position | None:
        with self._lock:
            return self._positions.get(symbol)

    def db_position_set(self, position: Position) -> None:
        with self._lock:
            self._positions[position.symbol] = position

    def db_position_remove(self, symbol: str) -> None:
        with self._lock:
            self._positions.pop(symbol, None)

    def db_position_list(self) -> list[Position]:
        with self._lock:
            return list(self._positions.values())

    def db_realized_pnl_record_append(self, record: RealizedPnlRecord) -> None:
        """Append one record and replace the symbol aggregate in the same locked step.

        Args:
            record: Realized PnL record produced by a SELL match.

        Returns:
            None: Record log and aggregate are updated as side effect.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        with self._lock:
            previous_aggregate = self._pnl_aggregates.get(record.symbol, RealizedPnlAggregate())
            self._pnl_records.setdefault(record.symbol, []).append(record)
            self._pnl_aggregates[record.symbol] = RealizedPnlAggregate(
                total_pnl=decimal_add(previous_aggregate.total_pnl, record.pnl),
                total_quantity=decimal_add(previous_aggregate.total_quantity, record.quantity),
            )

    def db_realized_pnl_aggregates(self) -> dict[str, RealizedPnlAggregate]:
        with self._lock:
            return dict(self._pnl_aggregates)

    def db_realized_pnl_records(self, symbol: str) -> list[RealizedPnlRecord]:
        with self._lock:
            return list(self._pnl_records.get(symbol, []))

    def db_realized_pnl_records_all(self) -> list[RealizedPnlRecord]:
        with self._lock:
            return [record for records in self._pnl_records.values() for record in records]

    def db_clear_all(self) -> None:
        with self._lock:
            self._trades.clear()
            self._trade_index.clear()
            self._positions.clear()
            self._pnl_records.clear()
            self._pnl_aggregates.clear()
        logger.info("Ledger store cleared")


__all__ = ["InMemoryLedgerStore"]
