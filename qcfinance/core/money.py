from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

D = Decimal

ZERO = D("0")
HUNDRED = D("100")
_CENT = D("0.01")
# Ceiling for any single amount; keeps products far from the Decimal exponent limit.
MAX_MONEY = D("1e30")

MoneyLike = Union[Decimal, float, int, str, None]


def to_money(value: MoneyLike) -> D:
    """Coerce ``value`` to a non-negative finite Decimal.

    Negative, NaN, infinite and unparseable inputs collapse to zero; a
    financial display must always have a number to show.
    Amounts above ``MAX_MONEY`` are held at that ceiling.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = D(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite() or amount < ZERO:
        return ZERO
    return min(amount, MAX_MONEY)


def round_cents(value: D) -> D:
    """Round to the cent at whatever precision the integer part needs.

    The default 28-digit context cannot hold a cent-quantized amount of
    1e26 or more; quantize would raise instead of rounding.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(_CENT, rounding=ROUND_HALF_UP)


# Percentages are reported to two decimals, same as cents.
round_rate = round_cents


def percent_of(numerator: D, denominator: D) -> D:
    if denominator <= ZERO:
        return ZERO
    return numerator / denominator * HUNDRED


__all__ = [
    "D",
    "HUNDRED",
    "MAX_MONEY",
    "MoneyLike",
    "ZERO",
    "percent_of",
    "round_cents",
    "round_rate",
    "to_money",
]
