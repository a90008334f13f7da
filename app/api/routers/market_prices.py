"""Market price API router composition for manual price reads and updates."""

from __future__ import annotations

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from app.api.schemas import BulkUpdatePricesBody, UpdatePriceBody
from app.pricing import InMemoryMarketPriceService

from .portfolio import api_format_decimal


def api_create_market_price_router(price_service: InMemoryMarketPriceService) -> APIRouter:
    """Create market price router with list and update endpoints.

    Args:
        price_service: Market price table.

    Returns:
        APIRouter: Router exposing `/portfolio/market-prices` endpoints.

    Raises:
        ValueError: Raised when price_service is invalid.
    """

    if price_service is None:
        raise ValueError("price_service must not be None")

    router = APIRouter(prefix="/portfolio/market-prices", tags=["market-prices"])

    @router.get("")
    def api_market_price_list(symbol: str | None = Query(default=None)) -> JSONResponse:
        """Return tracked prices with the last update timestamp.

        Args:
            symbol: Optional single-symbol filter.

        Returns:
            JSONResponse: Price map payload, or 404 when the filtered symbol is untracked.

        Raises:
            RuntimeError: Raised when price read fails.
        """

        if symbol is not None and symbol.strip():
            requested_symbol = symbol.strip()
            if not price_service.pricing_has_price(requested_symbol):
                payload = {
                    "status": "error",
                    "code": "PRICE_NOT_FOUND",
                    "message": f"No market price tracked for {requested_symbol}",
                }
                return JSONResponse(content=payload, status_code=status.HTTP_404_NOT_FOUND)
            prices = price_service.pricing_get_prices([requested_symbol])
        else:
            prices = price_service.pricing_get_all_prices()
        payload = {
            "prices": {price_symbol: api_format_decimal(price) for price_symbol, price in prices.items()},
            "last_updated": price_service.pricing_last_updated_at().isoformat(),
            "source": "manual",
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/update")
    def api_market_price_update(body: UpdatePriceBody) -> JSONResponse:
        """Update one symbol price.

        Args:
            body: Validated price update body.

        Returns:
            JSONResponse: Applied price payload or 400 on invalid input.

        Raises:
            RuntimeError: Raised when update fails unexpectedly.
        """

        try:
            applied_price = price_service.pricing_update_price(body.symbol, body.price)
        except ValueError as error:
            payload = {"status": "error", "code": "INVALID_PRICE", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        symbol = body.symbol.strip()
        payload = {
            "message": f"Price updated for {symbol}",
            "symbol": symbol,
            "price": api_format_decimal(applied_price),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/bulk")
    def api_market_price_bulk_update(body: BulkUpdatePricesBody) -> JSONResponse:
        """Update many symbol prices; nothing is applied when any price is invalid.

        Args:
            body: Validated bulk update body.

        Returns:
            JSONResponse: Applied prices payload or 400 on invalid input.

        Raises:
            RuntimeError: Raised when update fails unexpectedly.
        """

        try:
            applied_prices = price_service.pricing_update_prices(body.prices)
        except ValueError as error:
            payload = {"status": "error", "code": "INVALID_PRICE", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        payload = {
            "message": "Market prices updated",
            "updated_symbols": list(applied_prices),
            "prices": {symbol: api_format_decimal(price) for symbol, price in applied_prices.items()},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


__all__ = ["api_create_market_price_router"]
