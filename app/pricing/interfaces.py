"""Typed interfaces for market price lookups."""

from decimal import Decimal
from typing import Protocol


class MarketPriceOraclePort(Protocol):
    """Port definition for current market price lookups used by valuations."""

    def pricing_get_price(self, symbol: str) -> Decimal | None:
        """Return the current price for a symbol.

        Args:
            symbol: Case-sensitive asset identifier.

        Returns:
            Decimal | None: Current price, or None when the symbol is not tracked.

        Raises:
            RuntimeError: Raised when the price source is unavailable.
        """
