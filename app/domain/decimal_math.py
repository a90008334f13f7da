"""Exact decimal arithmetic helpers for ledger quantities and money values.

All ledger computations run on `decimal.Decimal` under a dedicated context
(20 significant digits, half-up rounding). Rounding to fixed places happens
only when values leave the ledger through query results.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation


LEDGER_DECIMAL_CONTEXT = Context(prec=20, rounding=ROUND_HALF_UP)
DECIMAL_ZERO = Decimal("0")

_DISPLAY_QUANTUM = Decimal("0.01")
_STORAGE_QUANTUM = Decimal("0.00000001")


class LedgerArithmeticError(ArithmeticError):
    """Raised when a ledger arithmetic operation is undefined."""


def decimal_parse(value: Decimal | int | float | str) -> Decimal:
    """Convert a number-like value to a finite ledger decimal.

    Floats are converted through their shortest string form, so `0.1` becomes
    `Decimal("0.1")` rather than its binary expansion.

    Args:
        value: Decimal, integer, float, or numeric string.

    Returns:
        Decimal: Parsed finite decimal value.

    Raises:
        ValueError: Raised when value is blank, non-numeric, or not finite.
    """

    if isinstance(value, bool):
        raise ValueError("boolean values are not valid decimals")

    if isinstance(value, Decimal):
        parsed_value = value
    elif isinstance(value, int):
        parsed_value = Decimal(value)
    elif isinstance(value, float):
        parsed_value = Decimal(repr(value))
    elif isinstance(value, str):
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("decimal value must not be blank")
        try:
            parsed_value = Decimal(stripped_value)
        except InvalidOperation as error:
            raise ValueError(f"invalid decimal value={value}") from error
    else:
        raise ValueError(f"unsupported decimal value type={type(value).__name__}")

    if not parsed_value.is_finite():
        raise ValueError(f"decimal value must be finite, got {value}")
    return parsed_value


def decimal_add(*values: Decimal) -> Decimal:
    """Return the exact sum of the given decimals (zero when empty)."""

    total = DECIMAL_ZERO
    for value in values:
        total = LEDGER_DECIMAL_CONTEXT.add(total, value)
    return total


def decimal_subtract(minuend: Decimal, subtrahend: Decimal) -> Decimal:
    """Return `minuend - subtrahend`."""

    return LEDGER_DECIMAL_CONTEXT.subtract(minuend, subtrahend)


def decimal_multiply(left: Decimal, right: Decimal) -> Decimal:
    """Return `left * right`."""

    return LEDGER_DECIMAL_CONTEXT.multiply(left, right)


def decimal_divide(dividend: Decimal, divisor: Decimal) -> Decimal:
    """Divide two decimals under the ledger context.

    Args:
        dividend: Numerator.
        divisor: Denominator.

    Returns:
        Decimal: Quotient rounded to the context precision.

    Raises:
        LedgerArithmeticError: Raised when divisor is zero.
    """

    if divisor.is_zero():
        raise LedgerArithmeticError("division by zero")
    return LEDGER_DECIMAL_CONTEXT.divide(dividend, divisor)


def decimal_to_display(value: Decimal) -> Decimal:
    """Round a value to 2 decimal places for currency summaries."""

    return value.quantize(_DISPLAY_QUANTUM, rounding=ROUND_HALF_UP)


def decimal_to_storage(value: Decimal) -> Decimal:
    """Round a value to 8 decimal places, the working output precision."""

    return value.quantize(_STORAGE_QUANTUM, rounding=ROUND_HALF_UP)


__all__ = [
    "DECIMAL_ZERO",
    "LEDGER_DECIMAL_CONTEXT",
    "LedgerArithmeticError",
    "decimal_add",
    "decimal_divide",
    "decimal_multiply",
    "decimal_parse",
    "decimal_subtract",
    "decimal_to_display",
    "decimal_to_storage",
]
