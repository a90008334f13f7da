"""Project-native typed exceptions for ledger engine failures."""

from __future__ import annotations

from decimal import Decimal


class LedgerError(Exception):
    """Base exception for ledger-level failures.

    Attributes:
        error_code: Stable machine-readable error code.
    """

    error_code = "LEDGER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)


class TradeValidationError(LedgerError, ValueError):
    """Malformed trade input rejected before any state is read or written."""

    error_code = "INVALID_TRADE"


class InsufficientBalanceError(LedgerError):
    """SELL quantity exceeds the open quantity for the symbol.

    Attributes:
        symbol: Position symbol.
        available_quantity: Open quantity at the time of the request.
        requested_quantity: SELL quantity requested.
    """

    error_code = "INSUFFICIENT_BALANCE"

    def __init__(self, symbol: str, available_quantity: Decimal, requested_quantity: Decimal):
        super().__init__(
            f"Insufficient quantity for {symbol}. Available: {available_quantity:f}, Requested: {requested_quantity:f}"
        )
        self.symbol = symbol
        self.available_quantity = available_quantity
        self.requested_quantity = requested_quantity
