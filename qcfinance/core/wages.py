from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from qcfinance.core.enums import PayFrequency, WageFrequency
from qcfinance.core.money import ZERO, MoneyLike, round_cents, to_money

D = Decimal

WEEKS_PER_YEAR = D("52")

_PERIODS_PER_YEAR = {
    PayFrequency.ANNUAL: D("1"),
    PayFrequency.MONTHLY: D("12"),
    PayFrequency.BIWEEKLY: D("26"),
    PayFrequency.WEEKLY: D("52"),
}


def convert_to_annual(amount: MoneyLike, frequency: PayFrequency | str) -> D:
    return round_cents(to_money(amount) * _PERIODS_PER_YEAR[PayFrequency(frequency)])


@dataclass(frozen=True)
class WageConversion:
    input_amount: D
    input_frequency: WageFrequency
    hours_per_week: D
    vacation_weeks: D
    working_weeks: D
    hourly_rate: D
    weekly_pay: D
    biweekly_pay: D
    monthly_pay: D
    annual_salary: D


def convert_wage(
    amount: MoneyLike,
    frequency: WageFrequency | str,
    hours_per_week: MoneyLike = 40,
    vacation_weeks: MoneyLike = 2,
) -> WageConversion:
    """Express a pay rate as hourly, weekly, biweekly, monthly and annual amounts.

    Annual and monthly figures only count working weeks (52 minus vacation).
    """
    frequency = WageFrequency(frequency)
    value = to_money(amount)
    hours = to_money(hours_per_week)
    vacation = min(to_money(vacation_weeks), WEEKS_PER_YEAR)
    working_weeks = WEEKS_PER_YEAR - vacation

    if frequency is WageFrequency.HOURLY:
        hourly = value
    elif frequency is WageFrequency.WEEKLY:
        hourly = value / hours if hours > ZERO else ZERO
    else:
        yearly_hours = hours * working_weeks
        hourly = value / yearly_hours if yearly_hours > ZERO else ZERO

    weekly = hourly * hours
    annual = weekly * working_weeks
    return WageConversion(
        input_amount=value,
        input_frequency=frequency,
        hours_per_week=hours,
        vacation_weeks=vacation,
        working_weeks=working_weeks,
        hourly_rate=round_cents(hourly),
        weekly_pay=round_cents(weekly),
        biweekly_pay=round_cents(weekly * 2),
        monthly_pay=round_cents(annual / D("12")),
        annual_salary=round_cents(annual),
    )


__all__ = ["WageConversion", "convert_to_annual", "convert_wage"]
