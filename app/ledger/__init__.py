"""Ledger layer package for FIFO trade ingestion and PnL query boundaries."""

from .errors import InsufficientBalanceError, LedgerError, TradeValidationError
from .fifo_engine import (
	FifoLedgerEngine,
	TradeRecordOutcome,
	TradeRecordRequest,
	fifo_apply_buy,
	fifo_apply_sell,
	fifo_average_entry_price,
)
from .interfaces import (
	LedgerQueryPort,
	PnlBreakdown,
	PortfolioSnapshot,
	PositionValuation,
	RealizedPnlEntry,
	UnrealizedPnlEntry,
)
from .query_service import LedgerQueryService

__all__ = [
	"FifoLedgerEngine",
	"InsufficientBalanceError",
	"LedgerError",
	"LedgerQueryPort",
	"LedgerQueryService",
	"PnlBreakdown",
	"PortfolioSnapshot",
	"PositionValuation",
	"RealizedPnlEntry",
	"TradeRecordOutcome",
	"TradeRecordRequest",
	"TradeValidationError",
	"UnrealizedPnlEntry",
	"fifo_apply_buy",
	"fifo_apply_sell",
	"fifo_average_entry_price",
]
