"""Manually maintained market price table used for unrealized PnL valuation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from decimal import Decimal

from app.domain import DECIMAL_ZERO, decimal_parse

from .interfaces import MarketPriceOraclePort


logger = logging.getLogger(__name__)

DEFAULT_MARKET_PRICE_SEED: dict[str, str] = {
    "BTC": "44000",
    "ETH": "2500",
    "SOL": "100",
    "LINK": "14",
    "UNI": "5",
}


class InMemoryMarketPriceService(MarketPriceOraclePort):
    """Symbol-to-price map seeded with defaults and updated through the API.

    There is no live feed; prices change only through explicit updates.
    """

    def __init__(
        self,
        seed_prices: Mapping[str, Decimal | int | float | str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the price table from seed prices.

        Args:
            seed_prices: Optional symbol-to-price seed; defaults to the built-in seed.
            clock: Optional UTC clock used for last-update timestamps.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when a seed price is invalid or non-positive.
        """

        self._lock = threading.Lock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._seed_prices = _pricing_validate_prices(DEFAULT_MARKET_PRICE_SEED if seed_prices is None else seed_prices)
        self._prices: dict[str, Decimal] = dict(self._seed_prices)
        self._last_updated_at_utc = self._clock()

    def pricing_get_price(self, symbol: str) -> Decimal | None:
        with self._lock:
            return self._prices.get(symbol)

    def pricing_get_prices(self, symbols: Iterable[str]) -> dict[str, Decimal]:
        """Return prices for the requested symbols, omitting untracked ones."""

        with self._lock:
            return {symbol: self._prices[symbol] for symbol in symbols if symbol in self._prices}

    def pricing_get_all_prices(self) -> dict[str, Decimal]:
        with self._lock:
            return dict(self._prices)

    def pricing_has_price(self, symbol: str) -> bool:
        with self._lock:
            return symbol in self._prices

    def pricing_last_updated_at(self) -> datetime:
        with self._lock:
            return self._last_updated_at_utc

    def pricing_update_price(self, symbol: str, price: Decimal | int | float | str) -> Decimal:
        """Set the current price for one symbol.

        Args:
            symbol: Asset identifier.
            price: New positive price.

        Returns:
            Decimal: Stored price.

        Raises:
            ValueError: Raised when symbol is blank or price is invalid or non-positive.
        """

        return self.pricing_update_prices({symbol: price})[symbol.strip()]

    def pricing_update_prices(self, prices: Mapping[str, Decimal | int | float | str]) -> dict[str, Decimal]:
        """Set current prices for many symbols at once.

        Every price is validated before any is applied.

        Args:
            prices: Symbol-to-price mapping.

        Returns:
            dict[str, Decimal]: Applied prices keyed by symbol.

        Raises:
            ValueError: Raised when any symbol is blank or any price is invalid or non-positive.
        """

        validated_prices = _pricing_validate_prices(prices)
        with self._lock:
            self._prices.update(validated_prices)
            self._last_updated_at_utc = self._clock()
        logger.info("Market prices updated symbols=%s", ",".join(sorted(validated_prices)))
        return validated_prices

    def pricing_reset(self) -> None:
        """Restore the seed prices; test and operations use only."""

        with self._lock:
            self._prices = dict(self._seed_prices)
            self._last_updated_at_utc = self._clock()


def _pricing_validate_prices(prices: Mapping[str, Decimal | int | float | str]) -> dict[str, Decimal]:
    validated_prices: dict[str, Decimal] = {}
    for symbol, raw_price in prices.items():
        if not isinstance(symbol, str) or not symbol.strip():
            raise ValueError("price symbol must be a non-empty string")
        price = decimal_parse(raw_price)
        if price <= DECIMAL_ZERO:
            raise ValueError(f"Price must be positive, got {raw_price} for {symbol}")
        validated_prices[symbol.strip()] = price
    return validated_prices


__all__ = ["DEFAULT_MARKET_PRICE_SEED", "InMemoryMarketPriceService"]
