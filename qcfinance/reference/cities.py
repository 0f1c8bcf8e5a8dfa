"""Cost-of-living reference table for ten Quebec cities."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from qcfinance.core.errors import UnknownReferenceError
from qcfinance.core.models import QuebecCity
from qcfinance.core.money import ZERO, percent_of
from qcfinance.core.parameters import HouseholdAdjustments

D = Decimal

logger = logging.getLogger("qcfinance").getChild("cities")

_CITY_LIST = TypeAdapter(tuple[QuebecCity, ...])


class CityCatalog(BaseModel):
    cities: tuple[QuebecCity, ...]

    model_config = ConfigDict(frozen=True)

    def get(self, city_id: str) -> QuebecCity:
        for city in self.cities:
            if city.id == city_id:
                return city
        raise UnknownReferenceError(f"Unknown city '{city_id}'")

    def find(self, city_id: str) -> QuebecCity | None:
        try:
            return self.get(city_id)
        except UnknownReferenceError:
            return None

    def ids(self) -> list[str]:
        return [city.id for city in self.cities]


def _bundled_path() -> Path:
    return Path(__file__).resolve().parent / "data" / "cities.json"


def catalog_from_path(path: str | Path) -> CityCatalog:
    from qcfinance.tax_years import ParameterLoadError

    source = Path(path)
    try:
        cities = _CITY_LIST.validate_json(source.read_bytes())
    except OSError as exc:
        raise ParameterLoadError(f"Cannot read city table from {source}: {exc}") from exc
    except ValidationError as exc:
        raise ParameterLoadError(f"Invalid city table in {source}: {exc}") from exc
    ids = [city.id for city in cities]
    if len(set(ids)) != len(ids):
        raise ParameterLoadError(f"Duplicate city ids in {source}")
    logger.info("Loaded city table: cities=%s source=%s", len(cities), source)
    return CityCatalog(cities=cities)


@lru_cache(maxsize=1)
def default_catalog() -> CityCatalog:
    from qcfinance.config import get_settings

    settings = get_settings()
    return catalog_from_path(settings.cities_path or _bundled_path())


@dataclass(frozen=True)
class CityCosts:
    rent: D
    groceries: D
    utilities: D
    transportation: D

    @property
    def total(self) -> D:
        return self.rent + self.groceries + self.utilities + self.transportation


def household_city_costs(
    city: QuebecCity,
    household: HouseholdAdjustments,
    has_partner: bool = False,
    has_car: bool = False,
) -> CityCosts:
    """City cost lines adjusted for a partner and a car, before any children."""
    rent = city.avg_rent
    utilities = city.utilities
    groceries = city.monthly_grocery
    transportation = city.transportation
    if has_partner:
        rent *= household.partner_rent_share
        utilities *= household.partner_utilities_share
        groceries *= household.partner_grocery_factor
    if has_car:
        transportation = household.car_monthly_cost
    return CityCosts(rent=rent, groceries=groceries, utilities=utilities, transportation=transportation)


def monthly_city_expenses(
    city: QuebecCity,
    household: HouseholdAdjustments,
    has_partner: bool = False,
    has_car: bool = False,
) -> D:
    return household_city_costs(city, household, has_partner, has_car).total


def is_rent_affordable(rent: D, net_monthly: D, household: HouseholdAdjustments) -> bool:
    if net_monthly <= ZERO:
        return False
    return percent_of(rent, net_monthly) < household.affordable_rent_ratio


def cities_by_cost(catalog: CityCatalog, household: HouseholdAdjustments) -> list[QuebecCity]:
    return sorted(catalog.cities, key=lambda city: monthly_city_expenses(city, household))


def cities_by_population(catalog: CityCatalog) -> list[QuebecCity]:
    return sorted(catalog.cities, key=lambda city: city.population, reverse=True)


def recommended_cities(
    catalog: CityCatalog, household: HouseholdAdjustments, net_monthly: D
) -> list[QuebecCity]:
    """Cities where a single person keeps money left over and rent stays affordable."""
    return [
        city
        for city in catalog.cities
        if net_monthly - monthly_city_expenses(city, household) > ZERO
        and is_rent_affordable(city.avg_rent, net_monthly, household)
    ]


def recommended_bedrooms(children_count: int) -> int:
    if children_count <= 0:
        return 1
    return min(children_count, 3) + 1


__all__ = [
    "CityCatalog",
    "CityCosts",
    "catalog_from_path",
    "cities_by_cost",
    "cities_by_population",
    "default_catalog",
    "household_city_costs",
    "is_rent_affordable",
    "monthly_city_expenses",
    "recommended_bedrooms",
    "recommended_cities",
]
