"""Request body models for portfolio API endpoints."""

from __future__ import annotations

from decimal import Decimal

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from app.domain import TradeSide


class CreateTradeBody(BaseModel):
    """Request body for recording one executed trade.

    Attributes:
        trade_id: External trade identifier used as idempotency key.
        order_id: Order that generated the trade.
        symbol: Case-sensitive asset identifier.
        side: `buy` or `sell` (case-insensitive).
        price: Positive execution price.
        quantity: Positive executed quantity.
        execution_timestamp: Offset-aware ISO-8601 execution instant.
    """

    trade_id: str = Field(min_length=1)
    order_id: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    side: TradeSide
    price: Decimal = Field(gt=0, allow_inf_nan=False)
    quantity: Decimal = Field(gt=0, allow_inf_nan=False)
    execution_timestamp: AwareDatetime

    @field_validator("order_id")
    @classmethod
    def _validate_non_blank(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("trade_id", "symbol")
    @classmethod
    def _validate_exact_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be blank")
        if value != value.strip():
            raise ValueError("value must not have surrounding whitespace")
        return value

    @field_validator("side", mode="before")
    @classmethod
    def _parse_side(cls, value: object) -> TradeSide:
        if isinstance(value, (str, TradeSide)):
            return TradeSide.parse(value)
        raise ValueError(f"unsupported trade side={value}")


class UpdatePriceBody(BaseModel):
    """Request body for updating one market price."""

    symbol: str = Field(min_length=1)
    price: Decimal = Field(gt=0, allow_inf_nan=False)


class BulkUpdatePricesBody(BaseModel):
    """Request body for updating many market prices at once."""

    prices: dict[str, Decimal]
