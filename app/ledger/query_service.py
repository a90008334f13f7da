"""Read-side ledger projections: holdings valuation, PnL breakdown, trade history."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

from decimal import Decimal

from app.db import LedgerStorePort
from app.domain import (
    Position,
    RealizedPnlRecord,
    Trade,
    decimal_add,
    decimal_multiply,
    decimal_subtract,
    decimal_to_display,
    decimal_to_storage,
)
from app.pricing import MarketPriceOraclePort

from .interfaces import (
    LedgerQueryPort,
    PnlBreakdown,
    PortfolioSnapshot,
    PositionValuation,
    RealizedPnlEntry,
    UnrealizedPnlEntry,
)


class LedgerQueryService(LedgerQueryPort):
    """Compute read-only views over the ledger store and market prices."""

    def __init__(self, store: LedgerStorePort, price_oracle: MarketPriceOraclePort):
        """Initialize query service dependencies.

        Args:
            store: Ledger store read under its transaction lock.
            price_oracle: Current market price source.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if store is None:
            raise ValueError("store must not be None")
        if price_oracle is None:
            raise ValueError("price_oracle must not be None")
        self._store = store
        self._price_oracle = price_oracle

    def query_positions(self, symbols: set[str] | None = None) -> PortfolioSnapshot:
        """Value every open position at the current market price.

        Untracked symbols are valued at their average entry price, which
        yields zero unrealized PnL for them.

        Args:
            symbols: Optional symbol filter; None or empty means all.

        Returns:
            PortfolioSnapshot: Valued positions and 2-place totals.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        with self._store.db_transaction():
            positions = self._open_positions(symbols)

        valuations: list[PositionValuation] = []
        exact_values: list[Decimal] = []
        exact_unrealized: list[Decimal] = []
        for position in positions:
            current_price = self._current_price(position)
            current_value = decimal_multiply(current_price, position.total_quantity)
            unrealized_pnl = self._unrealized_pnl(position, current_price)
            exact_values.append(current_value)
            exact_unrealized.append(unrealized_pnl)
            valuations.append(
                PositionValuation(
                    symbol=position.symbol,
                    total_quantity=decimal_to_storage(position.total_quantity),
                    average_entry_price=decimal_to_storage(position.average_entry_price),
                    current_price=decimal_to_storage(current_price),
                    current_value=decimal_to_storage(current_value),
                    unrealized_pnl=decimal_to_storage(unrealized_pnl),
                )
            )

        return PortfolioSnapshot(
            positions=tuple(valuations),
            total_value=decimal_to_display(decimal_add(*exact_values)),
            total_unrealized_pnl=decimal_to_display(decimal_add(*exact_unrealized)),
        )

    def query_pnl(self, symbols: set[str] | None = None) -> PnlBreakdown:
        """Combine cached realized PnL with unrealized PnL of open positions.

        Each total is rounded to 2 places on its own; the net figure is the
        sum of the two rounded totals.

        Args:
            symbols: Optional symbol filter; None or empty means all.

        Returns:
            PnlBreakdown: Realized/unrealized entries and totals.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        with self._store.db_transaction():
            aggregates = self._store.db_realized_pnl_aggregates()
            positions = self._open_positions(symbols)

        realized_entries: list[RealizedPnlEntry] = []
        exact_realized: list[Decimal] = []
        for symbol, aggregate in aggregates.items():
            if symbols and symbol not in symbols:
                continue
            exact_realized.append(aggregate.total_pnl)
            realized_entries.append(
                RealizedPnlEntry(
                    symbol=symbol,
                    realized_pnl=decimal_to_storage(aggregate.total_pnl),
                    closed_quantity=decimal_to_storage(aggregate.total_quantity),
                )
            )

        unrealized_entries: list[UnrealizedPnlEntry] = []
        exact_unrealized: list[Decimal] = []
        for position in positions:
            current_price = self._current_price(position)
            unrealized_pnl = self._unrealized_pnl(position, current_price)
            exact_unrealized.append(unrealized_pnl)
            unrealized_entries.append(
                UnrealizedPnlEntry(
                    symbol=position.symbol,
                    unrealized_pnl=decimal_to_storage(unrealized_pnl),
                    current_quantity=decimal_to_storage(position.total_quantity),
                    average_entry_price=decimal_to_storage(position.average_entry_price),
                    current_price=decimal_to_storage(current_price),
                )
            )

        total_realized_pnl = decimal_to_display(decimal_add(*exact_realized))
        total_unrealized_pnl = decimal_to_display(decimal_add(*exact_unrealized))
        return PnlBreakdown(
            realized_pnl=tuple(realized_entries),
            unrealized_pnl=tuple(unrealized_entries),
            total_realized_pnl=total_realized_pnl,
            total_unrealized_pnl=total_unrealized_pnl,
            net_pnl=decimal_add(total_realized_pnl, total_unrealized_pnl),
        )

    def query_trades(self, symbol: str | None = None) -> list[Trade]:
        trades = self._store.db_trade_list()
        if symbol:
            return [trade for trade in trades if trade.symbol == symbol]
        return trades

    def query_trade_by_external_id(self, external_trade_id: str) -> Trade | None:
        return self._store.db_trade_get_by_external_id(external_trade_id)

    def query_realized_pnl_records(self, symbol: str) -> list[RealizedPnlRecord]:
        return self._store.db_realized_pnl_records(symbol)

    def _open_positions(self, symbols: set[str] | None) -> list[Position]:
        """Return clones of open positions matching the optional filter.

        Args:
            symbols: Optional symbol filter; None or empty means all.

        Returns:
            list[Position]: Detached copies safe to read outside the store lock.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return [
            position.position_clone()
            for position in self._store.db_position_list()
            if position.total_quantity > 0 and (not symbols or position.symbol in symbols)
        ]

    def _current_price(self, position: Position) -> Decimal:
        market_price = self._price_oracle.pricing_get_price(position.symbol)
        return position.average_entry_price if market_price is None else market_price

    def _unrealized_pnl(self, position: Position, current_price: Decimal) -> Decimal:
        return decimal_multiply(decimal_subtract(current_price, position.average_entry_price), position.total_quantity)


__all__ = ["LedgerQueryService"]
