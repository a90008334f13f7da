"""Domain models used across application layer boundaries."""

from .decimal_math import (
    DECIMAL_ZERO,
    LedgerArithmeticError,
    decimal_add,
    decimal_divide,
    decimal_multiply,
    decimal_parse,
    decimal_subtract,
    decimal_to_display,
    decimal_to_storage,
)
from .models import (
    AppMetadata,
    FifoLot,
    HealthStatus,
    Position,
    RealizedPnlAggregate,
    RealizedPnlRecord,
    Trade,
    TradeSide,
)

__all__ = [
    "AppMetadata",
    "DECIMAL_ZERO",
    "FifoLot",
    "HealthStatus",
    "LedgerArithmeticError",
    "Position",
    "RealizedPnlAggregate",
    "RealizedPnlRecord",
    "Trade",
    "TradeSide",
    "decimal_add",
    "decimal_divide",
    "decimal_multiply",
    "decimal_parse",
    "decimal_subtract",
    "decimal_to_display",
    "decimal_to_storage",
]
