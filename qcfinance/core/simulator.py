from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Sequence

from qcfinance.core.child_costs import ChildCostModel, parse_age_groups
from qcfinance.core.enums import ChildAgeGroup, Custody, FinancialHealth
from qcfinance.core.errors import UnknownReferenceError
from qcfinance.core.models import (
    AnnualBreakdown,
    ChildCostBreakdown,
    ExpenseOverrides,
    MonthlyExpenses,
    SimulationRequest,
    SimulatorResult,
)
from qcfinance.core.money import ZERO, MoneyLike, percent_of, round_cents, round_rate, to_money
from qcfinance.core.net_income import MONTHS_PER_YEAR, QuebecTaxEngine
from qcfinance.core.parameters import TaxParameters
from qcfinance.reference.cities import CityCatalog, household_city_costs, is_rent_affordable

D = Decimal

logger = logging.getLogger("qcfinance").getChild("simulator")

TIGHT_SAVINGS_RATE = D("10")
EXCELLENT_SAVINGS_RATE = D("30")


def classify_financial_health(savings_rate: D, net_monthly: D) -> FinancialHealth:
    """Each band includes its lower bound: 10 % is good, 30 % is excellent."""
    if net_monthly <= ZERO or savings_rate < ZERO:
        return FinancialHealth.DEFICIT
    if savings_rate < TIGHT_SAVINGS_RATE:
        return FinancialHealth.TIGHT
    if savings_rate < EXCELLENT_SAVINGS_RATE:
        return FinancialHealth.GOOD
    return FinancialHealth.EXCELLENT


def _override(value: D | None, computed: D) -> D:
    return computed if value is None else value


class LifeSimulator:
    """Monthly budget of a Quebec household for a salary, a city and a family.

    Net income comes from :class:`QuebecTaxEngine`; children's costs and
    benefits from :class:`ChildCostModel` using the net annual income as
    the family income. City costs are adjusted for the household: a partner
    halves rent and utilities and brings groceries to 1.5x, a car replaces
    the transit pass, and each child pushes the rent towards a bigger unit.
    """

    def __init__(self, parameters: TaxParameters, catalog: CityCatalog) -> None:
        self.parameters = parameters
        self.catalog = catalog
        self.tax_engine = QuebecTaxEngine(parameters)
        self.child_costs = ChildCostModel(parameters.child_costs, parameters.benefits)

    def simulate(self, request: SimulationRequest) -> SimulatorResult | None:
        gross = to_money(request.gross_salary)
        if gross <= ZERO:
            logger.debug("Rejected simulation: non-positive gross salary")
            return None
        city = self.catalog.find(request.city_id)
        if city is None:
            logger.debug("Rejected simulation: unknown city %r", request.city_id)
            return None
        ages = list(request.children_ages)
        if len(ages) != request.children_count:
            logger.debug(
                "Rejected simulation: %s children but %s ages", request.children_count, len(ages)
            )
            return None

        tax = self.tax_engine.compute(gross)
        if ages:
            children = self.child_costs.compute(ages, request.has_subsidy, tax.net_annual, request.custody)
        else:
            children = ChildCostBreakdown()

        household = self.parameters.household
        overrides = request.overrides
        costs = household_city_costs(city, household, request.has_partner, request.has_car)
        additional_housing = city.avg_rent * household.housing_surcharge_for(len(ages))
        rent = round_cents(_override(overrides.rent, costs.rent + additional_housing))
        groceries = round_cents(_override(overrides.groceries, costs.groceries))
        utilities = round_cents(_override(overrides.utilities, costs.utilities))
        transportation = round_cents(_override(overrides.transport, costs.transportation))

        total_expenses = rent + groceries + utilities + transportation + children.net_monthly_cost
        net_monthly = tax.net_monthly
        disposable = net_monthly - total_expenses
        # Health is judged on the unrounded rate; only the reported rate is rounded.
        raw_savings_rate = percent_of(disposable, net_monthly)
        rent_to_income = round_rate(percent_of(city.avg_rent, net_monthly))

        return SimulatorResult(
            tax=tax,
            city=city,
            children_costs=children,
            expenses=MonthlyExpenses(
                rent=rent,
                additional_housing=round_cents(additional_housing),
                groceries=groceries,
                utilities=utilities,
                transportation=transportation,
                children=children.net_monthly_cost,
                total=total_expenses,
            ),
            monthly_expenses=total_expenses,
            disposable_income=disposable,
            annual_disposable_income=disposable * MONTHS_PER_YEAR,
            savings_rate=round_rate(raw_savings_rate),
            financial_health=classify_financial_health(raw_savings_rate, net_monthly),
            rent_to_income_ratio=rent_to_income,
            is_rent_affordable=is_rent_affordable(city.avg_rent, net_monthly, household),
            breakdown=AnnualBreakdown(
                federal_tax=tax.federal_tax,
                provincial_tax=tax.provincial_tax,
                qpp=tax.qpp_contribution,
                qpip=tax.qpip_contribution,
                ei=tax.ei_contribution,
                rent=rent * MONTHS_PER_YEAR,
                groceries=groceries * MONTHS_PER_YEAR,
                utilities=utilities * MONTHS_PER_YEAR,
                transportation=transportation * MONTHS_PER_YEAR,
                children_cost=children.total_monthly * MONTHS_PER_YEAR,
                children_benefits=children.total_benefits,
                disposable=max(ZERO, disposable * MONTHS_PER_YEAR),
            ),
        )

    def compare_cities(
        self,
        gross_salary: MoneyLike,
        city_ids: Iterable[str],
        has_partner: bool = False,
        has_car: bool = False,
    ) -> list[SimulatorResult | None]:
        """The same salary and household, without children, across cities."""
        gross = to_money(gross_salary)
        return [
            self.simulate(
                SimulationRequest(
                    gross_salary=gross,
                    city_id=city_id,
                    has_partner=has_partner,
                    has_car=has_car,
                )
            )
            for city_id in city_ids
        ]


def default_simulator() -> LifeSimulator:
    from qcfinance.reference.cities import default_catalog
    from qcfinance.tax_years import default_parameters

    return LifeSimulator(default_parameters(), default_catalog())


def simulate_life(
    gross_salary: MoneyLike,
    city_id: str,
    has_partner: bool = False,
    has_car: bool = False,
    children_count: int = 0,
    ages: Sequence[ChildAgeGroup | str] = (),
    has_subsidy: bool = False,
    custody: Custody | str = Custody.FULL,
    overrides: ExpenseOverrides | None = None,
    simulator: LifeSimulator | None = None,
) -> SimulatorResult | None:
    try:
        groups = parse_age_groups(ages)
        custody = Custody(custody)
    except (UnknownReferenceError, ValueError) as exc:
        logger.debug("Rejected simulation: %s", exc)
        return None
    request = SimulationRequest(
        gross_salary=to_money(gross_salary),
        city_id=city_id,
        has_partner=has_partner,
        has_car=has_car,
        children_count=max(0, int(children_count)),
        children_ages=groups,
        has_subsidy=has_subsidy,
        custody=custody,
        overrides=overrides or ExpenseOverrides(),
    )
    return (simulator or default_simulator()).simulate(request)


__all__ = [
    "EXCELLENT_SAVINGS_RATE",
    "LifeSimulator",
    "TIGHT_SAVINGS_RATE",
    "classify_financial_health",
    "default_simulator",
    "simulate_life",
]
