from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from qcfinance.core.money import ZERO, MoneyLike, round_cents, to_money
from qcfinance.core.parameters import JurisdictionTaxSchedule

D = Decimal


@dataclass(frozen=True)
class BracketTaxResult:
    taxable_income: D
    tax: D
    marginal_rate: D


def calculate_progressive_tax(income: MoneyLike, schedule: JurisdictionTaxSchedule) -> BracketTaxResult:
    """Marginal tax on ``income`` after the schedule's basic personal amount.

    ``marginal_rate`` is the rate of the highest bracket entered, i.e. the
    rate on the next dollar. Below the basic personal amount no bracket is
    entered and the rate is 0.
    """
    gross = to_money(income)
    taxable = max(ZERO, gross - schedule.basic_personal_amount)
    tax = ZERO
    marginal_rate = ZERO
    for bracket in schedule.brackets:
        if taxable <= bracket.lower:
            break
        span = taxable - bracket.lower
        if bracket.upper is not None:
            span = min(span, bracket.upper - bracket.lower)
        tax += span * bracket.rate
        marginal_rate = bracket.rate
    return BracketTaxResult(
        taxable_income=round_cents(taxable),
        tax=round_cents(tax),
        marginal_rate=marginal_rate,
    )


__all__ = ["BracketTaxResult", "calculate_progressive_tax"]
