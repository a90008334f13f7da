"""Typed interfaces for ledger-store services.

All mutable ledger state must remain in the db package and its submodules.
"""

from contextlib import AbstractContextManager
from typing import Protocol

from app.domain import HealthStatus, Position, RealizedPnlAggregate, RealizedPnlRecord, Trade


class LedgerStoreHealthPort(Protocol):
    """Port definition for ledger-store health verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active store target.

        Returns:
            str: Store target label for diagnostics.

        Raises:
            RuntimeError: Raised when store metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check store availability and return deterministic health payload.

        Returns:
            HealthStatus: Store health status payload.

        Raises:
            ConnectionError: Raised when the store cannot be used.
        """


class LedgerStorePort(Protocol):
    """Port definition for ledger state primitives.

    Implementations hold state only and perform no derived computation. The
    FIFO engine is the only writer.
    """

    def db_transaction(self) -> AbstractContextManager[None]:
        """Return a context manager that serializes access to all store state.

        Returns:
            AbstractContextManager[None]: Re-entrant exclusive section.

        Raises:
            RuntimeError: Raised when the lock cannot be acquired.
        """

    def db_trade_append(self, trade: Trade) -> Trade:
        """Append a trade to the log and index it by external trade id.

        Args:
            trade: Accepted trade.

        Returns:
            Trade: The stored trade.

        Raises:
            RuntimeError: Raised when the trade cannot be stored.
        """

    def db_trade_get_by_external_id(self, external_trade_id: str) -> Trade | None:
        """Return the trade stored under an external id, if any.

        Args:
            external_trade_id: Caller idempotency key.

        Returns:
            Trade | None: Stored trade or None.

        Raises:
            RuntimeError: Raised when lookup fails.
        """

    def db_trade_list(self) -> list[Trade]:
        """Return a copy of the trade log in ingestion order.

        Returns:
            list[Trade]: Trade log copy.

        Raises:
            RuntimeError: Raised when listing fails.
        """

    def db_trade_count(self) -> int:
        """Return the number of stored trades.

        Returns:
            int: Trade count.

        Raises:
            RuntimeError: Raised when counting fails.
        """

    def db_position_get(self, symbol: str) -> Position | None:
        """Return the open position for a symbol, if any.

        Args:
            symbol: Position symbol.

        Returns:
            Position | None: Open position or None.

        Raises:
            RuntimeError: Raised when lookup fails.
        """

    def db_position_set(self, position: Position) -> None:
        """Store a position under its symbol, replacing any previous one.

        Args:
            position: Position to store.

        Returns:
            None: Position is stored as side effect.

        Raises:
            RuntimeError: Raised when the position cannot be stored.
        """

    def db_position_remove(self, symbol: str) -> None:
        """Remove the position for a symbol; no-op when absent.

        Args:
            symbol: Position symbol.

        Returns:
            None: Position is removed as side effect.

        Raises:
            RuntimeError: Raised when removal fails.
        """

    def db_position_list(self) -> list[Position]:
        """Return all stored positions.

        Returns:
            list[Position]: Stored positions.

        Raises:
            RuntimeError: Raised when listing fails.
        """

    def db_realized_pnl_record_append(self, record: RealizedPnlRecord) -> None:
        """Append a realized PnL record and fold it into the symbol aggregate.

        Args:
            record: Realized PnL record.

        Returns:
            None: Record log and aggregate are updated together.

        Raises:
            RuntimeError: Raised when the record cannot be stored.
        """

    def db_realized_pnl_aggregates(self) -> dict[str, RealizedPnlAggregate]:
        """Return realized PnL aggregates keyed by symbol.

        Returns:
            dict[str, RealizedPnlAggregate]: Aggregate map copy.

        Raises:
            RuntimeError: Raised when reading fails.
        """

    def db_realized_pnl_records(self, symbol: str) -> list[RealizedPnlRecord]:
        """Return the realized PnL audit trail for one symbol.

        Args:
            symbol: Position symbol.

        Returns:
            list[RealizedPnlRecord]: Records in creation order.

        Raises:
            RuntimeError: Raised when reading fails.
        """

    def db_realized_pnl_records_all(self) -> list[RealizedPnlRecord]:
        """Return realized PnL records across all symbols.

        Returns:
            list[RealizedPnlRecord]: Flattened records.

        Raises:
            RuntimeError: Raised when reading fails.
        """

    def db_clear_all(self) -> None:
        """Wipe every collection held by the store.

        Returns:
            None: Store is emptied as side effect.

        Raises:
            RuntimeError: Raised when clearing fails.
        """
