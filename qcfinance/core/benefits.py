from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from qcfinance.core.enums import AgeBand, Custody
from qcfinance.core.models import FamilyBenefitsBreakdown, FamilyBenefitsResult
from qcfinance.core.money import ZERO, MoneyLike, round_cents, to_money
from qcfinance.core.parameters import BenefitPrograms, FederalBenefitProgram, ProvincialBenefitProgram

D = Decimal

_PER_THOUSAND = D("1000")
_MONTHS = D("12")


@dataclass(frozen=True)
class AnnualBenefits:
    federal_under_6: D
    federal_6_to_17: D
    provincial: D

    @property
    def federal(self) -> D:
        return self.federal_under_6 + self.federal_6_to_17

    @property
    def total(self) -> D:
        return self.federal + self.provincial

    def scaled(self, factor: D) -> "AnnualBenefits":
        return AnnualBenefits(
            federal_under_6=self.federal_under_6 * factor,
            federal_6_to_17=self.federal_6_to_17 * factor,
            provincial=self.provincial * factor,
        )


def _phase_out(maximum: D, income: D, threshold: D, rate: D) -> D:
    """Reduction owed on ``maximum``: ``rate`` of it per $1000 above ``threshold``."""
    if income <= threshold:
        return ZERO
    return (income - threshold) / _PER_THOUSAND * rate * maximum


def federal_child_benefit(
    program: FederalBenefitProgram, family_income: D, counts: dict[AgeBand, int]
) -> dict[AgeBand, D]:
    """Canada Child Benefit per age band, annual, before custody sharing.

    The reduction is computed on the aggregate maximum and apportioned to
    each band by its share of the children.
    """
    maxima = {
        AgeBand.UNDER_6: program.max_annual_under_6 * counts.get(AgeBand.UNDER_6, 0),
        AgeBand.FROM_6_TO_17: program.max_annual_6_to_17 * counts.get(AgeBand.FROM_6_TO_17, 0),
    }
    reduction = _phase_out(
        sum(maxima.values(), ZERO), family_income, program.income_threshold, program.reduction_rate
    )
    children = sum(counts.values()) or 1
    return {
        band: max(ZERO, maximum - reduction * D(counts.get(band, 0)) / D(children))
        for band, maximum in maxima.items()
    }


def provincial_family_allowance(program: ProvincialBenefitProgram, family_income: D, children: int) -> D:
    maximum = program.max_for(children)
    reduction = _phase_out(maximum, family_income, program.income_threshold, program.reduction_rate)
    return max(ZERO, maximum - reduction)


class BenefitPhaseOutCalculator:
    def __init__(self, programs: BenefitPrograms) -> None:
        self.programs = programs

    def annual(
        self,
        family_income: MoneyLike,
        children_under_6: int,
        children_6_to_17: int,
        custody: Custody | str = Custody.FULL,
    ) -> AnnualBenefits:
        income = to_money(family_income)
        under_6 = max(0, int(children_under_6))
        older = max(0, int(children_6_to_17))
        federal = federal_child_benefit(
            self.programs.federal,
            income,
            {AgeBand.UNDER_6: under_6, AgeBand.FROM_6_TO_17: older},
        )
        provincial = provincial_family_allowance(self.programs.provincial, income, under_6 + older)
        entitlement = AnnualBenefits(
            federal_under_6=federal[AgeBand.UNDER_6],
            federal_6_to_17=federal[AgeBand.FROM_6_TO_17],
            provincial=provincial,
        )
        # Shared custody halves the actual entitlement, after the phase-out.
        return entitlement.scaled(Custody(custody).multiplier)

    def monthly(
        self,
        family_income: MoneyLike,
        custody: Custody | str,
        children_under_6: int,
        children_6_to_17: int,
    ) -> FamilyBenefitsResult:
        annual = self.annual(family_income, children_under_6, children_6_to_17, custody)
        federal_monthly = annual.federal / _MONTHS
        quebec_monthly = annual.provincial / _MONTHS
        total_monthly = federal_monthly + quebec_monthly
        return FamilyBenefitsResult(
            federal_monthly=round_cents(federal_monthly),
            quebec_monthly=round_cents(quebec_monthly),
            total_monthly=round_cents(total_monthly),
            total_yearly=round_cents(total_monthly * _MONTHS),
            breakdown=FamilyBenefitsBreakdown(
                federal_under_6=round_cents(annual.federal_under_6 / _MONTHS),
                federal_6_to_17=round_cents(annual.federal_6_to_17 / _MONTHS),
                quebec_total=round_cents(quebec_monthly),
            ),
        )


def compute_family_benefits(
    family_income: MoneyLike,
    custody: Custody | str,
    children_under_6: int,
    children_6_to_17: int,
    programs: BenefitPrograms | None = None,
) -> FamilyBenefitsResult | None:
    try:
        custody = Custody(custody)
    except ValueError:
        return None
    if programs is None:
        from qcfinance.tax_years import default_parameters

        programs = default_parameters().benefits
    return BenefitPhaseOutCalculator(programs).monthly(
        family_income, custody, children_under_6, children_6_to_17
    )


__all__ = [
    "AnnualBenefits",
    "BenefitPhaseOutCalculator",
    "compute_family_benefits",
    "federal_child_benefit",
    "provincial_family_allowance",
]
