from __future__ import annotations

from decimal import Decimal

from qcfinance.core.brackets import calculate_progressive_tax
from qcfinance.core.contributions import calculate_contribution
from qcfinance.core.models import HouseholdIncome, TaxCalculationResult
from qcfinance.core.money import HUNDRED, MoneyLike, percent_of, round_cents, round_rate, to_money
from qcfinance.core.parameters import TaxParameters

D = Decimal

MONTHS_PER_YEAR = D("12")
# Biweekly pay, not semi-monthly.
PAY_PERIODS_BIWEEKLY = D("26")


class QuebecTaxEngine:
    """Net income for a Quebec salaried employee.

    Federal and provincial tax are computed independently on the same gross
    income, each after its own basic personal amount, and the QPP, QPIP and
    EI payroll contributions are taken on top. Marginal rates of the two
    jurisdictions therefore add up.
    """

    def __init__(self, parameters: TaxParameters) -> None:
        self.parameters = parameters

    def compute(self, gross_annual_salary: MoneyLike) -> TaxCalculationResult:
        params = self.parameters
        gross = round_cents(to_money(gross_annual_salary))

        federal = calculate_progressive_tax(gross, params.federal)
        provincial = calculate_progressive_tax(gross, params.provincial)

        programs = params.contributions
        qpp = calculate_contribution(gross, programs.qpp)
        qpip = calculate_contribution(gross, programs.qpip)
        ei = calculate_contribution(gross, programs.ei)

        total_tax = federal.tax + provincial.tax
        total_deductions = qpp + qpip + ei
        net_annual = gross - total_tax - total_deductions

        return TaxCalculationResult(
            tax_year=params.tax_year,
            gross_annual=gross,
            federal_taxable_income=federal.taxable_income,
            federal_bpa=params.federal.basic_personal_amount,
            federal_tax=federal.tax,
            provincial_taxable_income=provincial.taxable_income,
            provincial_bpa=params.provincial.basic_personal_amount,
            provincial_tax=provincial.tax,
            qpp_contribution=qpp,
            qpip_contribution=qpip,
            ei_contribution=ei,
            total_tax=round_cents(total_tax),
            total_deductions=round_cents(total_deductions),
            net_annual=round_cents(net_annual),
            net_monthly=round_cents(net_annual / MONTHS_PER_YEAR),
            net_bi_weekly=round_cents(net_annual / PAY_PERIODS_BIWEEKLY),
            effective_tax_rate=round_rate(percent_of(total_tax + total_deductions, gross)),
            marginal_tax_rate=round_rate((federal.marginal_rate + provincial.marginal_rate) * HUNDRED),
            take_home_percentage=round_rate(percent_of(net_annual, gross)),
        )


def combine_household(
    primary: TaxCalculationResult, partner: TaxCalculationResult | None = None
) -> HouseholdIncome:
    """Household totals for one or two earners; rates are over combined gross."""
    earners = [primary] if partner is None else [primary, partner]
    gross = sum((r.gross_annual for r in earners), D("0"))
    total_tax = sum((r.total_tax for r in earners), D("0"))
    total_deductions = sum((r.total_deductions for r in earners), D("0"))
    net_annual = sum((r.net_annual for r in earners), D("0"))
    return HouseholdIncome(
        gross_annual=gross,
        total_tax=total_tax,
        total_deductions=total_deductions,
        net_annual=net_annual,
        net_monthly=round_cents(net_annual / MONTHS_PER_YEAR),
        effective_tax_rate=round_rate(percent_of(total_tax + total_deductions, gross)),
    )


def compute_net_income(
    gross_annual_salary: MoneyLike, parameters: TaxParameters | None = None
) -> TaxCalculationResult:
    if parameters is None:
        from qcfinance.tax_years import default_parameters

        parameters = default_parameters()
    return QuebecTaxEngine(parameters).compute(gross_annual_salary)


__all__ = [
    "MONTHS_PER_YEAR",
    "PAY_PERIODS_BIWEEKLY",
    "QuebecTaxEngine",
    "combine_household",
    "compute_net_income",
]
