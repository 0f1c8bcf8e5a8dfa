"""French-Canadian number formatting (``1 234,56 $``)."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

NARROW_NBSP = "\u202f"
NBSP = "\u00a0"


def _group(value: Decimal, decimals: int) -> str:
    quantum = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        quantized = value.quantize(quantum, rounding=ROUND_HALF_UP)
    text = f"{quantized:,.{decimals}f}"
    return text.replace(",", NARROW_NBSP).replace(".", ",")


def format_currency(amount: Decimal | float | int, decimals: int = 2) -> str:
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return f"{_group(amount, decimals)}{NBSP}$"


def format_percentage(value: Decimal | float | int, decimals: int = 1) -> str:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return f"{_group(value, decimals)}{NBSP}%"


__all__ = ["format_currency", "format_percentage"]
