"""FIFO ledger engine: trade ingestion, lot matching, and realized PnL capture."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from app.db import LedgerStorePort
from app.domain import (
    DECIMAL_ZERO,
    FifoLot,
    Position,
    RealizedPnlRecord,
    Trade,
    TradeSide,
    decimal_add,
    decimal_divide,
    decimal_multiply,
    decimal_parse,
    decimal_subtract,
)

from .errors import InsufficientBalanceError, TradeValidationError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TradeRecordRequest:
    """Trade input contract for FIFO ledger ingestion.

    Attributes:
        external_trade_id: Caller idempotency key, globally unique.
        order_id: Caller order reference.
        symbol: Case-sensitive asset identifier.
        side: Trade side (`BUY` or `SELL`, case-insensitive text accepted).
        price: Positive execution price.
        quantity: Positive executed quantity.
        execution_timestamp_utc: Offset-aware execution instant or ISO-8601 text.
    """

    external_trade_id: str
    order_id: str
    symbol: str
    side: TradeSide | str
    price: Decimal | int | float | str
    quantity: Decimal | int | float | str
    execution_timestamp_utc: datetime | str


@dataclass(frozen=True)
class TradeRecordOutcome:
    """Result of one ingestion call.

    Attributes:
        trade: Stored trade, either newly created or the original duplicate.
        duplicate: True when the external trade id was already recorded.
    """

    trade: Trade
    duplicate: bool


class FifoLedgerEngine:
    """Record trades and keep positions and realized PnL consistent under FIFO."""

    def __init__(
        self,
        store: LedgerStorePort,
        clock: Callable[[], datetime] | None = None,
        trade_id_factory: Callable[[], str] | None = None,
    ):
        """Initialize engine dependencies.

        Args:
            store: Ledger store holding all mutable state.
            clock: Optional UTC clock used for ingestion timestamps.
            trade_id_factory: Optional internal trade id generator.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when store is invalid.
        """

        if store is None:
            raise ValueError("store must not be None")
        self._store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._trade_id_factory = trade_id_factory or (lambda: str(uuid4()))

    def ledger_record_trade(self, request: TradeRecordRequest) -> Trade:
        """Record one trade execution and return the stored trade.

        Duplicate external trade ids return the original trade unchanged.

        Args:
            request: Trade input.

        Returns:
            Trade: Stored trade.

        Raises:
            TradeValidationError: Raised when request fields are malformed.
            InsufficientBalanceError: Raised when a SELL exceeds the open quantity.
        """

        return self.ledger_record_trade_outcome(request).trade

    def ledger_record_trade_outcome(self, request: TradeRecordRequest) -> TradeRecordOutcome:
        """Record one trade execution and report whether it was a duplicate.

        A rejected SELL leaves the store exactly as it was before the call.

        Args:
            request: Trade input.

        Returns:
            TradeRecordOutcome: Stored trade and duplicate marker.

        Raises:
            TradeValidationError: Raised when request fields are malformed.
            InsufficientBalanceError: Raised when a SELL exceeds the open quantity.
        """

        if request is None:
            raise TradeValidationError("request must not be None")
        external_trade_id = _fifo_require_key(request.external_trade_id, "external_trade_id")
        order_id = _fifo_require_text(request.order_id, "order_id")
        symbol = _fifo_require_key(request.symbol, "symbol")
        side = _fifo_parse_side(request.side)
        price = _fifo_parse_positive_decimal(request.price, "price")
        quantity = _fifo_parse_positive_decimal(request.quantity, "quantity")
        execution_timestamp_utc = _fifo_parse_timestamp_utc(request.execution_timestamp_utc)

        with self._store.db_transaction():
            existing_trade = self._store.db_trade_get_by_external_id(external_trade_id)
            if existing_trade is not None:
                logger.debug("Duplicate trade submission external_trade_id=%s", external_trade_id)
                return TradeRecordOutcome(trade=existing_trade, duplicate=True)

            trade = Trade(
                trade_id=self._trade_id_factory(),
                external_trade_id=external_trade_id,
                order_id=order_id,
                symbol=symbol,
                side=side,
                price=price,
                quantity=quantity,
                execution_timestamp_utc=execution_timestamp_utc,
                created_at_utc=self._clock(),
            )

            stored_position = self._store.db_position_get(symbol)
            position = stored_position.position_clone() if stored_position is not None else Position(symbol=symbol)

            if side is TradeSide.BUY:
                realized_records: list[RealizedPnlRecord] = []
                fifo_apply_buy(position, trade)
            else:
                try:
                    realized_records = fifo_apply_sell(position, trade)
                except InsufficientBalanceError as error:
                    logger.warning(
                        "Rejected SELL external_trade_id=%s symbol=%s available=%s requested=%s",
                        external_trade_id,
                        symbol,
                        error.available_quantity,
                        error.requested_quantity,
                    )
                    raise

            self._store.db_trade_append(trade)
            for realized_record in realized_records:
                self._store.db_realized_pnl_record_append(realized_record)

            if position.total_quantity == DECIMAL_ZERO:
                self._store.db_position_remove(symbol)
                logger.info("Position closed symbol=%s", symbol)
            else:
                self._store.db_position_set(position)

        logger.info(
            "Recorded trade external_trade_id=%s symbol=%s side=%s quantity=%s price=%s",
            external_trade_id,
            symbol,
            side.value,
            quantity,
            price,
        )
        return TradeRecordOutcome(trade=trade, duplicate=False)

    def ledger_reset(self) -> None:
        """Clear all ledger state; test and operations use only."""

        self._store.db_clear_all()


def fifo_apply_buy(position: Position, trade: Trade) -> None:
    """Append a new lot for a BUY and refresh cached totals.

    Args:
        position: Position to mutate.
        trade: BUY trade.

    Returns:
        None: Position is mutated in place.

    Raises:
        ValueError: Raised when trade side or symbol does not match.
    """

    if trade.side is not TradeSide.BUY:
        raise ValueError(f"expected BUY trade, got side={trade.side.value}")
    if trade.symbol != position.symbol:
        raise ValueError(f"trade symbol={trade.symbol} does not match position symbol={position.symbol}")

    position.lots.append(FifoLot(quantity=trade.quantity, price=trade.price, origin_trade_id=trade.trade_id))
    position.total_quantity = decimal_add(position.total_quantity, trade.quantity)
    position.average_entry_price = fifo_average_entry_price(position.lots, position.total_quantity)


def fifo_apply_sell(position: Position, trade: Trade) -> list[RealizedPnlRecord]:
    """Consume lots oldest-first for a SELL and build realized PnL records.

    One record is produced per lot touched. Lots are matched strictly in queue
    order regardless of price. The balance check runs before any lot is
    touched, so a rejected SELL leaves the position unchanged.

    Args:
        position: Position to mutate.
        trade: SELL trade.

    Returns:
        list[RealizedPnlRecord]: Records in lot-consumption order.

    Raises:
        InsufficientBalanceError: Raised when trade quantity exceeds open quantity.
        ValueError: Raised when trade side or symbol does not match.
    """

    if trade.side is not TradeSide.SELL:
        raise ValueError(f"expected SELL trade, got side={trade.side.value}")
    if trade.symbol != position.symbol:
        raise ValueError(f"trade symbol={trade.symbol} does not match position symbol={position.symbol}")
    if trade.quantity > position.total_quantity:
        raise InsufficientBalanceError(
            symbol=trade.symbol,
            available_quantity=position.total_quantity,
            requested_quantity=trade.quantity,
        )

    realized_records: list[RealizedPnlRecord] = []
    remaining_quantity = trade.quantity

    while remaining_quantity > DECIMAL_ZERO and position.lots:
        head_lot = position.lots[0]
        close_quantity = head_lot.quantity if head_lot.quantity <= remaining_quantity else remaining_quantity
        realized_records.append(
            RealizedPnlRecord(
                symbol=trade.symbol,
                quantity=close_quantity,
                buy_price=head_lot.price,
                sell_price=trade.price,
                pnl=decimal_multiply(decimal_subtract(trade.price, head_lot.price), close_quantity),
                timestamp_utc=trade.execution_timestamp_utc,
            )
        )
        remaining_quantity = decimal_subtract(remaining_quantity, close_quantity)

        if close_quantity == head_lot.quantity:
            position.lots.pop(0)
        else:
            head_lot.quantity = decimal_subtract(head_lot.quantity, close_quantity)

    position.total_quantity = decimal_subtract(position.total_quantity, trade.quantity)
    position.average_entry_price = fifo_average_entry_price(position.lots, position.total_quantity)
    return realized_records


def fifo_average_entry_price(lots: list[FifoLot], total_quantity: Decimal) -> Decimal:
    """Compute the quantity-weighted average lot price.

    Args:
        lots: Open lots.
        total_quantity: Sum of lot quantities.

    Returns:
        Decimal: Weighted average price, or zero when there is no open quantity.

    Raises:
        LedgerArithmeticError: Raised when total_quantity is zero but lots remain.
    """

    if not lots:
        return DECIMAL_ZERO
    total_cost = decimal_add(*(decimal_multiply(lot.quantity, lot.price) for lot in lots))
    return decimal_divide(total_cost, total_quantity)


def _fifo_require_text(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TradeValidationError(f"{field_name} must be a non-empty string")
    return value.strip()


def _fifo_require_key(value: str, field_name: str) -> str:
    """Validate an exact-match key such as the external trade id or symbol.

    Keys are compared byte for byte, so surrounding whitespace is rejected
    rather than stripped.

    Args:
        value: Raw key value.
        field_name: Field name used in error messages.

    Returns:
        str: The unchanged key.

    Raises:
        TradeValidationError: Raised when the key is blank or padded with whitespace.
    """

    required_value = _fifo_require_text(value, field_name)
    if required_value != value:
        raise TradeValidationError(f"{field_name} must not have surrounding whitespace")
    return value


def _fifo_parse_side(value: TradeSide | str) -> TradeSide:
    try:
        return TradeSide.parse(value)
    except ValueError as error:
        raise TradeValidationError(str(error)) from error


def _fifo_parse_positive_decimal(value: Decimal | int | float | str, field_name: str) -> Decimal:
    try:
        parsed_value = decimal_parse(value)
    except ValueError as error:
        raise TradeValidationError(f"{field_name}: {error}") from error
    if parsed_value <= DECIMAL_ZERO:
        raise TradeValidationError(f"{field_name} must be positive, got {value}")
    return parsed_value


def _fifo_parse_timestamp_utc(timestamp_value: datetime | str) -> datetime:
    """Parse an execution timestamp into an offset-aware UTC datetime.

    Args:
        timestamp_value: Offset-aware datetime or ISO-8601 string.

    Returns:
        datetime: Parsed UTC timestamp.

    Raises:
        TradeValidationError: Raised when timestamp is blank, invalid, or offset-naive.
    """

    if isinstance(timestamp_value, datetime):
        parsed_timestamp = timestamp_value
    else:
        if not isinstance(timestamp_value, str) or not timestamp_value.strip():
            raise TradeValidationError("execution_timestamp_utc must be a non-empty string")
        try:
            parsed_timestamp = datetime.fromisoformat(timestamp_value.strip().replace("Z", "+00:00"))
        except ValueError as error:
            raise TradeValidationError(f"invalid execution_timestamp_utc={timestamp_value}") from error

    if parsed_timestamp.tzinfo is None or parsed_timestamp.utcoffset() is None:
        raise TradeValidationError("execution_timestamp_utc must be offset-aware")

    return parsed_timestamp.astimezone(timezone.utc)


__all__ = [
    "FifoLedgerEngine",
    "TradeRecordOutcome",
    "TradeRecordRequest",
    "fifo_apply_buy",
    "fifo_apply_sell",
    "fifo_average_entry_price",
]
