"""Typed result contracts and ports for ledger read-side queries."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from app.domain import RealizedPnlRecord, Trade


@dataclass(frozen=True)
class PositionValuation:
    """Valued open position.

    Attributes:
        symbol: Position symbol.
        total_quantity: Open quantity (8 decimal places).
        average_entry_price: Weighted average lot price (8 decimal places).
        current_price: Market price, or average entry price when untracked.
        current_value: `current_price * total_quantity` (8 decimal places).
        unrealized_pnl: `(current_price - average_entry_price) * total_quantity` (8 decimal places).
    """

    symbol: str
    total_quantity: Decimal
    average_entry_price: Decimal
    current_price: Decimal
    current_value: Decimal
    unrealized_pnl: Decimal


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Open positions with portfolio-level totals.

    Attributes:
        positions: Valued open positions.
        total_value: Sum of current values (2 decimal places).
        total_unrealized_pnl: Sum of unrealized PnL (2 decimal places).
    """

    positions: tuple[PositionValuation, ...]
    total_value: Decimal
    total_unrealized_pnl: Decimal


@dataclass(frozen=True)
class RealizedPnlEntry:
    """Realized PnL rollup for one symbol.

    Attributes:
        symbol: Position symbol.
        realized_pnl: Total realized PnL (8 decimal places).
        closed_quantity: Total quantity closed (8 decimal places).
    """

    symbol: str
    realized_pnl: Decimal
    closed_quantity: Decimal


@dataclass(frozen=True)
class UnrealizedPnlEntry:
    """Unrealized PnL for one open position.

    Attributes:
        symbol: Position symbol.
        unrealized_pnl: Paper PnL (8 decimal places).
        current_quantity: Open quantity (8 decimal places).
        average_entry_price: Weighted average lot price (8 decimal places).
        current_price: Market price or average entry fallback (8 decimal places).
    """

    symbol: str
    unrealized_pnl: Decimal
    current_quantity: Decimal
    average_entry_price: Decimal
    current_price: Decimal


@dataclass(frozen=True)
class PnlBreakdown:
    """Realized and unrealized PnL with totals.

    Attributes:
        realized_pnl: Per-symbol realized entries.
        unrealized_pnl: Per-symbol unrealized entries for open positions.
        total_realized_pnl: Total realized PnL (2 decimal places).
        total_unrealized_pnl: Total unrealized PnL (2 decimal places).
        net_pnl: Sum of the two rounded totals.
    """

    realized_pnl: tuple[RealizedPnlEntry, ...]
    unrealized_pnl: tuple[UnrealizedPnlEntry, ...]
    total_realized_pnl: Decimal
    total_unrealized_pnl: Decimal
    net_pnl: Decimal


class LedgerQueryPort(Protocol):
    """Port definition for read-only ledger projections."""

    def query_positions(self, symbols: set[str] | None = None) -> PortfolioSnapshot:
        """Return valued open positions, optionally filtered by symbol.

        Args:
            symbols: Optional symbol filter; None or empty means all.

        Returns:
            PortfolioSnapshot: Positions and totals.

        Raises:
            RuntimeError: Raised when state cannot be read.
        """

    def query_pnl(self, symbols: set[str] | None = None) -> PnlBreakdown:
        """Return realized and unrealized PnL, optionally filtered by symbol.

        Args:
            symbols: Optional symbol filter; None or empty means all.

        Returns:
            PnlBreakdown: PnL entries and totals.

        Raises:
            RuntimeError: Raised when state cannot be read.
        """

    def query_trades(self, symbol: str | None = None) -> list[Trade]:
        """Return recorded trades in ingestion order, optionally for one symbol."""

    def query_trade_by_external_id(self, external_trade_id: str) -> Trade | None:
        """Return the trade recorded under an external id, if any."""

    def query_realized_pnl_records(self, symbol: str) -> list[RealizedPnlRecord]:
        """Return the realized PnL audit trail for one symbol."""
