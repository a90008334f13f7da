"""Application bootstrap wiring for startup validation and dependency assembly."""

from dataclasses import dataclass

from fastapi import FastAPI

from app.api import create_api_application
from app.config import AppSettings, config_load_settings
from app.db import InMemoryLedgerStore, InMemoryLedgerStoreHealthService
from app.ledger import FifoLedgerEngine, LedgerQueryService
from app.pricing import InMemoryMarketPriceService


@dataclass(frozen=True)
class LedgerServices:
    """Wired ledger collaborators shared by the API and CLI surfaces.

    Attributes:
        store: In-memory ledger store.
        price_service: Market price table.
        ledger_engine: FIFO trade ingestion engine.
        query_service: Read-side query service.
    """

    store: InMemoryLedgerStore
    price_service: InMemoryMarketPriceService
    ledger_engine: FifoLedgerEngine
    query_service: LedgerQueryService


def bootstrap_create_ledger_services(settings: AppSettings) -> LedgerServices:
    """Build the store, price table, engine, and query service.

    Args:
        settings: Validated runtime settings.

    Returns:
        LedgerServices: Wired collaborators.

    Raises:
        ValueError: Raised when configured seed prices are invalid.
    """

    store = InMemoryLedgerStore()
    price_service = InMemoryMarketPriceService(seed_prices=settings.market_price_seed)
    return LedgerServices(
        store=store,
        price_service=price_service,
        ledger_engine=FifoLedgerEngine(store=store),
        query_service=LedgerQueryService(store=store, price_oracle=price_service),
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    services = bootstrap_create_ledger_services(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        store_health_service=InMemoryLedgerStoreHealthService(store=services.store),
        ledger_engine=services.ledger_engine,
        query_service=services.query_service,
        price_service=services.price_service,
    )
