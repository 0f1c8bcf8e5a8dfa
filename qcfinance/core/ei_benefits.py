from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from qcfinance.core.money import MoneyLike, round_cents, to_money
from qcfinance.core.parameters import TaxParameters

D = Decimal

WEEKS_PER_YEAR = D("52")


@dataclass(frozen=True)
class EIBenefitEstimate:
    annual_gross_salary: D
    insurable_earnings: D
    weekly_benefit_before_tax: D
    estimated_tax_withholding: D
    weekly_benefit_after_tax: D
    monthly_benefit_before_tax: D
    monthly_benefit_after_tax: D
    is_at_maximum: bool


def estimate_ei_benefits(annual_gross_salary: MoneyLike, parameters: TaxParameters | None = None) -> EIBenefitEstimate:
    """Regular employment-insurance benefit: 55 % of average weekly insurable earnings, capped."""
    if parameters is None:
        from qcfinance.tax_years import default_parameters

        parameters = default_parameters()
    rules = parameters.employment_insurance_benefits
    gross = to_money(annual_gross_salary)
    insurable = min(gross, parameters.contributions.ei.max_earnings)

    weekly = insurable / WEEKS_PER_YEAR * rules.benefit_rate
    at_maximum = weekly >= rules.max_weekly_benefit
    weekly = min(weekly, rules.max_weekly_benefit)
    withholding = weekly * rules.estimated_withholding_rate
    after_tax = weekly - withholding

    return EIBenefitEstimate(
        annual_gross_salary=gross,
        insurable_earnings=insurable,
        weekly_benefit_before_tax=round_cents(weekly),
        estimated_tax_withholding=round_cents(withholding),
        weekly_benefit_after_tax=round_cents(after_tax),
        monthly_benefit_before_tax=round_cents(weekly * rules.weeks_per_month),
        monthly_benefit_after_tax=round_cents(after_tax * rules.weeks_per_month),
        is_at_maximum=at_maximum,
    )


__all__ = ["EIBenefitEstimate", "estimate_ei_benefits"]
