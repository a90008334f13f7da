"""FastAPI application factory for the ledger service.

This module defines API application composition used by the runtime.
"""

from datetime import datetime, timezone

from fastapi import FastAPI

from app.config import AppSettings
from app.db import LedgerStoreHealthPort
from app.domain import AppMetadata
from app.ledger import FifoLedgerEngine, LedgerQueryPort
from app.pricing import InMemoryMarketPriceService

from .routers import api_create_health_router, api_create_market_price_router, api_create_portfolio_router

_SERVICE_VERSION = "1.0.0"


def create_api_application(
    settings: AppSettings,
    store_health_service: LedgerStoreHealthPort,
    ledger_engine: FifoLedgerEngine,
    query_service: LedgerQueryPort,
    price_service: InMemoryMarketPriceService,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        store_health_service: Ledger store health service used by health endpoints.
        ledger_engine: FIFO engine used for trade ingestion.
        query_service: Read-side ledger query service.
        price_service: Market price table used for valuations and manual updates.

    Returns:
        FastAPI: Framework application instance with all routers mounted.

    Raises:
        ValueError: Raised when a router dependency is invalid.
    """
    metadata = AppMetadata(
        application_name=settings.service_name,
        environment_name=settings.environment_name,
        started_at_utc=datetime.now(timezone.utc),
    )
    application = FastAPI(title="FIFO PnL Ledger", version=_SERVICE_VERSION)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, object]:
        """Return service info and the main endpoint map.

        Returns:
            dict[str, object]: Service metadata and endpoint paths.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": metadata.application_name,
            "version": _SERVICE_VERSION,
            "environment": metadata.environment_name,
            "endpoints": {
                "health": "/health",
                "trades": "/portfolio/trades",
                "positions": "/portfolio/positions",
                "pnl": "/portfolio/pnl",
                "market_prices": "/portfolio/market-prices",
            },
        }

    application.include_router(api_create_health_router(store_health_service=store_health_service, metadata=metadata))
    application.include_router(
        api_create_portfolio_router(
            settings=settings,
            ledger_engine=ledger_engine,
            query_service=query_service,
            price_service=price_service,
        )
    )
    application.include_router(api_create_market_price_router(price_service=price_service))

    return application
