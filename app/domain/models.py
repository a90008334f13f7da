"""Typed domain models shared across runtime layers.

This module provides the trade, lot, position, and realized PnL contracts
used by the ledger store, FIFO engine, query service, and API layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from .decimal_math import DECIMAL_ZERO


@dataclass(frozen=True)
class AppMetadata:
    """Static application metadata for runtime identification.

    Attributes:
        application_name: Human-readable app name.
        environment_name: Runtime environment label.
        started_at_utc: Process start timestamp used for uptime reporting.
    """

    application_name: str
    environment_name: str
    started_at_utc: datetime


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


class TradeSide(str, Enum):
    """Trade execution side."""

    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def parse(cls, value: "TradeSide | str") -> "TradeSide":
        """Parse a side value case-insensitively.

        Args:
            value: Side enum member or text (`buy`, `SELL`, ...).

        Returns:
            TradeSide: Matching side.

        Raises:
            ValueError: Raised when value is not a supported side.
        """

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"unsupported trade side={value}")
        normalized_value = value.strip().upper()
        try:
            return cls(normalized_value)
        except ValueError as error:
            raise ValueError(f"unsupported trade side={value}") from error


@dataclass(frozen=True)
class Trade:
    """Immutable record of one accepted trade execution.

    Attributes:
        trade_id: Internal system-generated identifier.
        external_trade_id: Caller-supplied idempotency key.
        order_id: Caller order reference, not used in matching.
        symbol: Case-sensitive asset identifier.
        side: Execution side.
        price: Execution price, always positive.
        quantity: Executed quantity, always positive.
        execution_timestamp_utc: Caller-supplied execution instant.
        created_at_utc: Ingestion instant assigned by the ledger.
    """

    trade_id: str
    external_trade_id: str
    order_id: str
    symbol: str
    side: TradeSide
    price: Decimal
    quantity: Decimal
    execution_timestamp_utc: datetime
    created_at_utc: datetime


@dataclass
class FifoLot:
    """One open slice of a position tracing back to a single BUY.

    Attributes:
        quantity: Remaining lot quantity; decremented by partial sells.
        price: Acquisition price of the lot.
        origin_trade_id: Internal id of the BUY trade that opened the lot.
    """

    quantity: Decimal
    price: Decimal
    origin_trade_id: str


@dataclass
class Position:
    """Current holdings for one symbol with the FIFO lot queue.

    Attributes:
        symbol: Position symbol.
        lots: Open lots, oldest first.
        total_quantity: Cached sum of lot quantities.
        average_entry_price: Cached quantity-weighted average lot price.
    """

    symbol: str
    lots: list[FifoLot] = field(default_factory=list)
    total_quantity: Decimal = DECIMAL_ZERO
    average_entry_price: Decimal = DECIMAL_ZERO

    def position_clone(self) -> "Position":
        """Return a copy whose lot queue can be mutated independently."""

        return Position(
            symbol=self.symbol,
            lots=[FifoLot(quantity=lot.quantity, price=lot.price, origin_trade_id=lot.origin_trade_id) for lot in self.lots],
            total_quantity=self.total_quantity,
            average_entry_price=self.average_entry_price,
        )


@dataclass(frozen=True)
class RealizedPnlRecord:
    """Audit entry for one lot, or part of a lot, closed by a SELL.

    Attributes:
        symbol: Position symbol.
        quantity: Quantity closed against the lot.
        buy_price: Acquisition price of the consumed lot.
        sell_price: Price of the triggering SELL.
        pnl: `(sell_price - buy_price) * quantity`.
        timestamp_utc: Execution timestamp of the triggering SELL.
    """

    symbol: str
    quantity: Decimal
    buy_price: Decimal
    sell_price: Decimal
    pnl: Decimal
    timestamp_utc: datetime


@dataclass(frozen=True)
class RealizedPnlAggregate:
    """Per-symbol realized PnL rollup maintained alongside the record log.

    Attributes:
        total_pnl: Sum of record PnL values.
        total_quantity: Sum of record quantities.
    """

    total_pnl: Decimal = DECIMAL_ZERO
    total_quantity: Decimal = DECIMAL_ZERO
