"""Formatting utilities for amounts and currency display."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

try:  # Allow both package and script execution contexts
    from .config import CURRENCY_SYMBOL
except ImportError:  # pragma: no cover - fallback for direct execution
    from config import CURRENCY_SYMBOL

Number = Union[float, int]


def round_half_up(value: Number) -> int:
    """Round to the nearest whole number, halves away from zero.

    Example:
        >>> round_half_up(84.5)
        85
        >>> round_half_up(2.5)
        3
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_amount(amount: Number) -> str:
    """Plain number text: whole amounts without a decimal part, others unrounded.

    Example:
        >>> format_amount(150.0)
        '150'
        >>> format_amount(12.5)
        '12.5'
        >>> format_amount(12.345)
        '12.345'
    """
    value = float(amount)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_currency(amount: Number, decimals: int = 0, include_sign: bool = True) -> str:
    """Format an amount with the configured currency symbol.

    Args:
        amount: The amount to format
        decimals: Number of decimal places; ``0`` rounds half up to whole units
        include_sign: Whether to prefix the currency symbol

    Example:
        >>> format_currency(1234.56, decimals=2)
        '₹1234.56'
        >>> format_currency(299.5)
        '₹300'
    """
    if decimals == 0:
        formatted = str(round_half_up(amount))
    else:
        formatted = f"{amount:.{decimals}f}"
    return f"{CURRENCY_SYMBOL}{formatted}" if include_sign else formatted
