"""Ledger store health service implementations for availability checks."""

from app.domain import HealthStatus

from .interfaces import LedgerStoreHealthPort, LedgerStorePort


class InMemoryLedgerStoreHealthService(LedgerStoreHealthPort):
    """Health service backed by a lightweight read of the in-memory store."""

    def __init__(self, store: LedgerStorePort):
        """Initialize store health service.

        Args:
            store: Ledger store read by health checks.

        Raises:
            ValueError: Raised when store is None.
        """

        if store is None:
            raise ValueError("store must not be None")
        self._store = store

    def db_connection_label(self) -> str:
        """Return the store target label for diagnostics.

        Returns:
            str: Store label.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return "memory://ledger"

    def db_check_health(self) -> HealthStatus:
        """Verify the store answers a read under its lock.

        Returns:
            HealthStatus: Health payload with status and store counters.

        Raises:
            ConnectionError: Raised when the store read fails.
        """

        try:
            with self._store.db_transaction():
                trade_count = self._store.db_trade_count()
                open_position_count = len(self._store.db_position_list())
                realized_record_count = len(self._store.db_realized_pnl_records_all())
        except RuntimeError as error:
            raise ConnectionError("ledger store health check failed") from error
        return HealthStatus(
            status="ok",
            detail=(
                f"ledger store available: trades={trade_count} open_positions={open_position_count} "
                f"realized_records={realized_record_count}"
            ),
        )
