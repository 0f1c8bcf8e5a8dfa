from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from qcfinance.core.enums import ChildAgeGroup, Custody, FinancialHealth

D = Decimal
_ZERO = D("0.00")


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


class TaxCalculationResult(_Result):
    tax_year: int
    gross_annual: D
    federal_taxable_income: D
    federal_bpa: D
    federal_tax: D
    provincial_taxable_income: D
    provincial_bpa: D
    provincial_tax: D
    qpp_contribution: D
    qpip_contribution: D
    ei_contribution: D
    total_tax: D
    total_deductions: D
    net_annual: D
    net_monthly: D
    net_bi_weekly: D
    effective_tax_rate: D
    marginal_tax_rate: D
    take_home_percentage: D


class HouseholdIncome(_Result):
    gross_annual: D
    total_tax: D
    total_deductions: D
    net_annual: D
    net_monthly: D
    effective_tax_rate: D


class FamilyBenefitsBreakdown(_Result):
    federal_under_6: D
    federal_6_to_17: D
    quebec_total: D


class FamilyBenefitsResult(_Result):
    federal_monthly: D
    quebec_monthly: D
    total_monthly: D
    total_yearly: D
    breakdown: FamilyBenefitsBreakdown


class ChildCostBreakdown(_Result):
    base_monthly: D = _ZERO
    daycare_monthly: D = _ZERO
    total_monthly: D = _ZERO
    federal_benefits: D = _ZERO
    provincial_benefits: D = _ZERO
    total_benefits: D = _ZERO
    net_monthly_cost: D = _ZERO


class QuebecCity(_Result):
    id: str
    name: str
    name_en: str
    avg_rent: D
    monthly_grocery: D
    utilities: D
    transportation: D
    population: int
    region: str


class ExpenseOverrides(_Result):
    rent: D | None = Field(default=None, ge=0)
    groceries: D | None = Field(default=None, ge=0)
    utilities: D | None = Field(default=None, ge=0)
    transport: D | None = Field(default=None, ge=0)


class SimulationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    gross_salary: D
    city_id: str
    has_partner: bool = False
    has_car: bool = False
    children_count: int = Field(default=0, ge=0)
    children_ages: list[ChildAgeGroup] = Field(default_factory=list)
    has_subsidy: bool = False
    custody: Custody = Custody.FULL
    overrides: ExpenseOverrides = Field(default_factory=ExpenseOverrides)


class MonthlyExpenses(_Result):
    rent: D
    additional_housing: D
    groceries: D
    utilities: D
    transportation: D
    children: D
    total: D


class AnnualBreakdown(_Result):
    federal_tax: D
    provincial_tax: D
    qpp: D
    qpip: D
    ei: D
    rent: D
    groceries: D
    utilities: D
    transportation: D
    children_cost: D
    children_benefits: D
    disposable: D


class SimulatorResult(_Result):
    tax: TaxCalculationResult
    city: QuebecCity
    children_costs: ChildCostBreakdown
    expenses: MonthlyExpenses
    monthly_expenses: D
    disposable_income: D
    annual_disposable_income: D
    savings_rate: D
    financial_health: FinancialHealth
    rent_to_income_ratio: D
    is_rent_affordable: bool
    breakdown: AnnualBreakdown


__all__ = [
    "AnnualBreakdown",
    "ChildCostBreakdown",
    "ExpenseOverrides",
    "FamilyBenefitsBreakdown",
    "FamilyBenefitsResult",
    "HouseholdIncome",
    "MonthlyExpenses",
    "QuebecCity",
    "SimulationRequest",
    "SimulatorResult",
    "TaxCalculationResult",
]
