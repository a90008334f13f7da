"""Portfolio API router composition for trade ingestion and PnL reads."""
# pylint: disable=duplicate-code

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from app.api.schemas import CreateTradeBody
from app.config import AppSettings
from app.domain import RealizedPnlRecord, Trade
from app.ledger import (
    FifoLedgerEngine,
    InsufficientBalanceError,
    LedgerQueryPort,
    PnlBreakdown,
    PortfolioSnapshot,
    TradeRecordRequest,
    TradeValidationError,
)
from app.pricing import InMemoryMarketPriceService


def api_create_portfolio_router(
    settings: AppSettings,
    ledger_engine: FifoLedgerEngine,
    query_service: LedgerQueryPort,
    price_service: InMemoryMarketPriceService,
) -> APIRouter:
    """Create portfolio router exposing trade, position, and PnL endpoints.

    Args:
        settings: Runtime settings used for list limits.
        ledger_engine: FIFO engine used for trade ingestion and reset.
        query_service: Read-side ledger query service.
        price_service: Market price table reset together with the ledger.

    Returns:
        APIRouter: Router exposing portfolio APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if ledger_engine is None:
        raise ValueError("ledger_engine must not be None")
    if query_service is None:
        raise ValueError("query_service must not be None")
    if price_service is None:
        raise ValueError("price_service must not be None")

    router = APIRouter(prefix="/portfolio", tags=["portfolio"])

    @router.post("/trades")
    def api_portfolio_trade_record(body: CreateTradeBody) -> JSONResponse:
        """Record one executed trade; duplicates return the original trade.

        Args:
            body: Validated trade request body.

        Returns:
            JSONResponse: 201 with trade payload and duplicate marker, or an error payload.

        Raises:
            RuntimeError: Raised when ingestion fails unexpectedly.
        """

        try:
            outcome = ledger_engine.ledger_record_trade_outcome(
                TradeRecordRequest(
                    external_trade_id=body.trade_id,
                    order_id=body.order_id,
                    symbol=body.symbol,
                    side=body.side,
                    price=body.price,
                    quantity=body.quantity,
                    execution_timestamp_utc=body.execution_timestamp,
                )
            )
        except InsufficientBalanceError as error:
            payload = {
                "status": "error",
                "code": error.error_code,
                "message": str(error),
                "symbol": error.symbol,
                "available_quantity": api_format_decimal(error.available_quantity),
                "requested_quantity": api_format_decimal(error.requested_quantity),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)
        except TradeValidationError as error:
            payload = {
                "status": "error",
                "code": error.error_code,
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)

        payload = api_serialize_trade(outcome.trade)
        payload["duplicate"] = outcome.duplicate
        payload["message"] = "Trade already recorded (idempotent)" if outcome.duplicate else "Trade recorded successfully"
        return JSONResponse(content=payload, status_code=status.HTTP_201_CREATED)

    @router.get("/trades")
    def api_portfolio_trade_list(
        symbol: str | None = Query(default=None),
        limit: int = Query(default=settings.api_trade_list_max_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """List recorded trades in ingestion order.

        Args:
            symbol: Optional symbol filter.
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            JSONResponse: Trade list envelope payload.

        Raises:
            RuntimeError: Raised when store read fails.
        """

        normalized_symbol = symbol.strip() if symbol is not None and symbol.strip() else None
        applied_limit = min(limit, settings.api_trade_list_max_limit)
        trades = query_service.query_trades(symbol=normalized_symbol)
        page_trades = trades[offset : offset + applied_limit]
        payload = {
            "items": [api_serialize_trade(trade) for trade in page_trades],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(page_trades),
                "total": len(trades),
            },
            "filters": {"symbol": normalized_symbol},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/trades/{external_trade_id}")
    def api_portfolio_trade_detail(external_trade_id: str) -> JSONResponse:
        """Return one trade by external trade id.

        Args:
            external_trade_id: Caller idempotency key.

        Returns:
            JSONResponse: Trade payload or 404 when absent.

        Raises:
            RuntimeError: Raised when store read fails.
        """

        trade = query_service.query_trade_by_external_id(external_trade_id)
        if trade is None:
            payload = {
                "status": "error",
                "code": "TRADE_NOT_FOUND",
                "message": "trade not found",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse(content=api_serialize_trade(trade), status_code=status.HTTP_200_OK)

    @router.get("/positions")
    def api_portfolio_positions(symbols: str | None = Query(default=None)) -> JSONResponse:
        """Return open positions valued at current market prices.

        Args:
            symbols: Optional comma-separated symbol filter.

        Returns:
            JSONResponse: Portfolio snapshot payload.

        Raises:
            RuntimeError: Raised when store read fails.
        """

        snapshot = query_service.query_positions(api_parse_symbols(symbols))
        return JSONResponse(content=api_serialize_portfolio_snapshot(snapshot), status_code=status.HTTP_200_OK)

    @router.get("/pnl")
    def api_portfolio_pnl(symbols: str | None = Query(default=None)) -> JSONResponse:
        """Return realized and unrealized PnL breakdown.

        Args:
            symbols: Optional comma-separated symbol filter.

        Returns:
            JSONResponse: PnL breakdown payload.

        Raises:
            RuntimeError: Raised when store read fails.
        """

        breakdown = query_service.query_pnl(api_parse_symbols(symbols))
        return JSONResponse(content=api_serialize_pnl_breakdown(breakdown), status_code=status.HTTP_200_OK)

    @router.get("/pnl/records/{symbol}")
    def api_portfolio_realized_pnl_records(symbol: str) -> JSONResponse:
        """Return the realized PnL audit trail for one symbol.

        Args:
            symbol: Position symbol.

        Returns:
            JSONResponse: Realized PnL records payload.

        Raises:
            RuntimeError: Raised when store read fails.
        """

        records = query_service.query_realized_pnl_records(symbol)
        payload = {
            "symbol": symbol,
            "items": [api_serialize_realized_pnl_record(record) for record in records],
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/reset")
    def api_portfolio_reset() -> JSONResponse:
        """Clear ledger state and restore seed prices; test harness only.

        Returns:
            JSONResponse: Reset confirmation payload.

        Raises:
            RuntimeError: Raised when reset fails.
        """

        ledger_engine.ledger_reset()
        price_service.pricing_reset()
        return JSONResponse(content={"message": "Portfolio reset successfully"}, status_code=status.HTTP_200_OK)

    return router


def api_parse_symbols(symbols: str | None) -> set[str] | None:
    """Parse a comma-separated symbol filter.

    Args:
        symbols: Raw query value.

    Returns:
        set[str] | None: Non-blank symbols, or None when no filter applies.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if symbols is None:
        return None
    parsed_symbols = {symbol.strip() for symbol in symbols.split(",") if symbol.strip()}
    return parsed_symbols or None


def api_format_decimal(value: Decimal) -> str:
    """Render a decimal in fixed-point notation, never scientific.

    Args:
        value: Decimal to render.

    Returns:
        str: Fixed-point text keeping the value's exponent, e.g. `0.00000000`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return format(value, "f")


def api_serialize_trade(trade: Trade) -> dict[str, object]:
    """Serialize one stored trade to JSON payload.

    Args:
        trade: Stored trade.

    Returns:
        dict[str, object]: JSON-serializable trade payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "id": trade.trade_id,
        "trade_id": trade.external_trade_id,
        "order_id": trade.order_id,
        "symbol": trade.symbol,
        "side": trade.side.value,
        "price": api_format_decimal(trade.price),
        "quantity": api_format_decimal(trade.quantity),
        "execution_timestamp": trade.execution_timestamp_utc.isoformat(),
        "created_at": trade.created_at_utc.isoformat(),
    }


def api_serialize_portfolio_snapshot(snapshot: PortfolioSnapshot) -> dict[str, object]:
    """Serialize a portfolio snapshot to JSON payload."""

    return {
        "positions": [
            {
                "symbol": position.symbol,
                "total_quantity": api_format_decimal(position.total_quantity),
                "average_entry_price": api_format_decimal(position.average_entry_price),
                "current_price": api_format_decimal(position.current_price),
                "current_value": api_format_decimal(position.current_value),
                "unrealized_pnl": api_format_decimal(position.unrealized_pnl),
            }
            for position in snapshot.positions
        ],
        "total_value": api_format_decimal(snapshot.total_value),
        "total_unrealized_pnl": api_format_decimal(snapshot.total_unrealized_pnl),
    }


def api_serialize_pnl_breakdown(breakdown: PnlBreakdown) -> dict[str, object]:
    """Serialize a PnL breakdown to JSON payload."""

    return {
        "realized_pnl": [
            {
                "symbol": entry.symbol,
                "realized_pnl": api_format_decimal(entry.realized_pnl),
                "closed_quantity": api_format_decimal(entry.closed_quantity),
            }
            for entry in breakdown.realized_pnl
        ],
        "unrealized_pnl": [
            {
                "symbol": entry.symbol,
                "unrealized_pnl": api_format_decimal(entry.unrealized_pnl),
                "current_quantity": api_format_decimal(entry.current_quantity),
                "average_entry_price": api_format_decimal(entry.average_entry_price),
                "current_price": api_format_decimal(entry.current_price),
            }
            for entry in breakdown.unrealized_pnl
        ],
        "total_realized_pnl": api_format_decimal(breakdown.total_realized_pnl),
        "total_unrealized_pnl": api_format_decimal(breakdown.total_unrealized_pnl),
        "net_pnl": api_format_decimal(breakdown.net_pnl),
    }


def api_serialize_realized_pnl_record(record: RealizedPnlRecord) -> dict[str, object]:
    """Serialize one realized PnL audit record to JSON payload."""

    return {
        "symbol": record.symbol,
        "quantity": api_format_decimal(record.quantity),
        "buy_price": api_format_decimal(record.buy_price),
        "sell_price": api_format_decimal(record.sell_price),
        "pnl": api_format_decimal(record.pnl),
        "timestamp": record.timestamp_utc.isoformat(),
    }


__all__ = [
    "api_create_portfolio_router",
    "api_format_decimal",
    "api_parse_symbols",
    "api_serialize_pnl_breakdown",
    "api_serialize_portfolio_snapshot",
    "api_serialize_realized_pnl_record",
    "api_serialize_trade",
]
