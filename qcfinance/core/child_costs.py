from __future__ import annotations

import logging
from collections import Counter
from decimal import Decimal
from typing import Iterable, Sequence

from qcfinance.core.benefits import BenefitPhaseOutCalculator
from qcfinance.core.enums import AgeBand, ChildAgeGroup, Custody
from qcfinance.core.errors import UnknownReferenceError
from qcfinance.core.models import ChildCostBreakdown
from qcfinance.core.money import ZERO, MoneyLike, round_cents
from qcfinance.core.parameters import BenefitPrograms, ChildCostTable

D = Decimal

logger = logging.getLogger("qcfinance").getChild("child_costs")


def parse_age_groups(ages: Iterable[ChildAgeGroup | str]) -> list[ChildAgeGroup]:
    groups: list[ChildAgeGroup] = []
    for age in ages:
        try:
            groups.append(ChildAgeGroup(age))
        except ValueError as exc:
            raise UnknownReferenceError(f"Unknown child age group '{age}'") from exc
    return groups


class ChildCostModel:
    """Monthly cost of raising children, net of federal and Quebec benefits.

    Base costs cover clothing, healthcare, activities and supplies; food is
    counted with the household groceries instead.
    """

    def __init__(self, costs: ChildCostTable, benefits: BenefitPrograms) -> None:
        self.costs = costs
        self.benefits = BenefitPhaseOutCalculator(benefits)

    def _base_monthly(self, group: ChildAgeGroup) -> D:
        if group is ChildAgeGroup.PRESCHOOL:
            return self.costs.age_0_5.base_monthly
        if group is ChildAgeGroup.PRIMARY:
            return self.costs.age_6_12.base_monthly
        return self.costs.age_13_17.base_monthly

    def _daycare_monthly(self, group: ChildAgeGroup, has_subsidy: bool) -> D:
        if group is ChildAgeGroup.PRESCHOOL:
            preschool = self.costs.age_0_5
            return preschool.subsidized_daycare_monthly if has_subsidy else preschool.private_daycare_monthly
        if group is ChildAgeGroup.PRIMARY:
            return self.costs.age_6_12.after_school_monthly
        return ZERO

    def compute(
        self,
        ages: Sequence[ChildAgeGroup],
        has_subsidy: bool,
        family_income: MoneyLike,
        custody: Custody = Custody.FULL,
    ) -> ChildCostBreakdown:
        if not ages:
            return ChildCostBreakdown()

        base = sum((self._base_monthly(group) for group in ages), ZERO)
        daycare = sum((self._daycare_monthly(group, has_subsidy) for group in ages), ZERO)
        base_after_discount = base * self.costs.discount_for(len(ages))
        total_monthly = base_after_discount + daycare

        bands = Counter(group.benefit_band for group in ages)
        benefits = self.benefits.annual(
            family_income, bands[AgeBand.UNDER_6], bands[AgeBand.FROM_6_TO_17], custody
        )
        federal = round_cents(benefits.federal)
        provincial = round_cents(benefits.provincial)
        total_benefits = federal + provincial

        return ChildCostBreakdown(
            base_monthly=round_cents(base_after_discount),
            daycare_monthly=round_cents(daycare),
            total_monthly=round_cents(total_monthly),
            federal_benefits=federal,
            provincial_benefits=provincial,
            total_benefits=total_benefits,
            # Negative when benefits exceed the raw cost.
            net_monthly_cost=round_cents(total_monthly - total_benefits / D("12")),
        )


def compute_child_costs(
    children_count: int,
    ages: Sequence[ChildAgeGroup | str],
    has_subsidy: bool,
    family_income: MoneyLike,
    costs: ChildCostTable | None = None,
    benefits: BenefitPrograms | None = None,
    custody: Custody = Custody.FULL,
) -> ChildCostBreakdown | None:
    """Child-cost breakdown, or ``None`` when the ages do not describe the children.

    ``ages`` must list one recognised age group per child.
    """
    if children_count <= 0:
        return ChildCostBreakdown()
    try:
        groups = parse_age_groups(ages)
    except UnknownReferenceError as exc:
        logger.debug("Rejected child costs: %s", exc)
        return None
    if len(groups) != children_count:
        logger.debug("Rejected child costs: %s children but %s ages", children_count, len(groups))
        return None
    if costs is None or benefits is None:
        from qcfinance.tax_years import default_parameters

        parameters = default_parameters()
        costs = costs or parameters.child_costs
        benefits = benefits or parameters.benefits
    return ChildCostModel(costs, benefits).compute(groups, has_subsidy, family_income, custody)


__all__ = ["ChildCostModel", "compute_child_costs", "parse_age_groups"]
