"""Pricing layer package for market price lookups and manual updates."""

from .interfaces import MarketPriceOraclePort
from .market_price_service import DEFAULT_MARKET_PRICE_SEED, InMemoryMarketPriceService

__all__ = ["DEFAULT_MARKET_PRICE_SEED", "InMemoryMarketPriceService", "MarketPriceOraclePort"]
