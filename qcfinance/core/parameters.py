from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

D = Decimal


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TaxBracket(_Frozen):
    lower: D
    upper: D | None
    rate: D


class JurisdictionTaxSchedule(_Frozen):
    basic_personal_amount: D = Field(ge=0)
    brackets: tuple[TaxBracket, ...]

    @model_validator(mode="after")
    def _check_progressive(self) -> "JurisdictionTaxSchedule":
        if not self.brackets:
            raise ValueError("a tax schedule needs at least one bracket")
        if self.brackets[0].lower != 0:
            raise ValueError("the first bracket must start at 0")
        if self.brackets[-1].upper is not None:
            raise ValueError("the last bracket must be unbounded")
        for previous, current in zip(self.brackets, self.brackets[1:]):
            if previous.upper != current.lower:
                raise ValueError(
                    f"brackets are not contiguous at {previous.upper} / {current.lower}"
                )
            if current.rate < previous.rate:
                raise ValueError(f"bracket rate decreases at {current.lower}")
        return self


class ContributionProgram(_Frozen):
    rate: D = Field(ge=0)
    exemption: D = Field(default=D("0"), ge=0)
    max_earnings: D = Field(gt=0)
    max_contribution: D = Field(ge=0)

    @model_validator(mode="after")
    def _check_ceiling(self) -> "ContributionProgram":
        if self.max_earnings < self.exemption:
            raise ValueError("max_earnings must be at least the exemption")
        return self


class ContributionPrograms(_Frozen):
    qpp: ContributionProgram
    qpip: ContributionProgram
    ei: ContributionProgram


class FederalBenefitProgram(_Frozen):
    """Canada Child Benefit: annual maximum per child by age band."""

    max_annual_under_6: D = Field(ge=0)
    max_annual_6_to_17: D = Field(ge=0)
    income_threshold: D = Field(ge=0)
    reduction_rate: D = Field(ge=0)


class ProvincialBenefitProgram(_Frozen):
    """Quebec family allowance: annual maximum keyed by number of children."""

    max_annual_by_children: tuple[D, ...]
    income_threshold: D = Field(ge=0)
    reduction_rate: D = Field(ge=0)

    @field_validator("max_annual_by_children")
    @classmethod
    def _non_empty(cls, value: tuple[D, ...]) -> tuple[D, ...]:
        if not value:
            raise ValueError("max_annual_by_children must list at least one amount")
        return value

    def max_for(self, children: int) -> D:
        if children <= 0:
            return D("0")
        table = self.max_annual_by_children
        return table[min(children, len(table)) - 1]


class BenefitPrograms(_Frozen):
    federal: FederalBenefitProgram
    provincial: ProvincialBenefitProgram


class PreschoolCosts(_Frozen):
    base_monthly: D
    subsidized_daycare_monthly: D
    private_daycare_monthly: D


class PrimaryCosts(_Frozen):
    base_monthly: D
    after_school_monthly: D


class SecondaryCosts(_Frozen):
    base_monthly: D


class ChildCostTable(_Frozen):
    age_0_5: PreschoolCosts
    age_6_12: PrimaryCosts
    age_13_17: SecondaryCosts
    # Factor applied to the summed base cost, indexed by child count - 1.
    scale_economy: tuple[D, ...]

    def discount_for(self, children: int) -> D:
        if children <= 0:
            return D("1")
        table = self.scale_economy
        return table[min(children, len(table)) - 1]


class HouseholdAdjustments(_Frozen):
    partner_rent_share: D
    partner_utilities_share: D
    partner_grocery_factor: D
    car_monthly_cost: D
    # Extra rent for a larger unit, indexed by child count - 1.
    housing_surcharge_by_children: tuple[D, ...]
    affordable_rent_ratio: D

    def housing_surcharge_for(self, children: int) -> D:
        if children <= 0:
            return D("0")
        table = self.housing_surcharge_by_children
        return table[min(children, len(table)) - 1]


class EmploymentInsuranceBenefits(_Frozen):
    benefit_rate: D
    max_weekly_benefit: D
    estimated_withholding_rate: D
    weeks_per_month: D


class TaxParameters(_Frozen):
    tax_year: int
    federal: JurisdictionTaxSchedule
    provincial: JurisdictionTaxSchedule
    contributions: ContributionPrograms
    benefits: BenefitPrograms
    child_costs: ChildCostTable
    household: HouseholdAdjustments
    employment_insurance_benefits: EmploymentInsuranceBenefits


__all__ = [
    "BenefitPrograms",
    "ChildCostTable",
    "ContributionProgram",
    "ContributionPrograms",
    "EmploymentInsuranceBenefits",
    "FederalBenefitProgram",
    "HouseholdAdjustments",
    "JurisdictionTaxSchedule",
    "ProvincialBenefitProgram",
    "TaxBracket",
    "TaxParameters",
]
