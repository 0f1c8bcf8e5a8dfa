from __future__ import annotations

from decimal import Decimal
from enum import Enum


class ContributionProgramId(str, Enum):
    QPP = "qpp"
    QPIP = "qpip"
    EI = "ei"


class AgeBand(str, Enum):
    """Age bands used by the child benefit programs."""

    UNDER_6 = "under_6"
    FROM_6_TO_17 = "6_to_17"


class ChildAgeGroup(str, Enum):
    """Age groups used for child-rearing costs."""

    PRESCHOOL = "0-5"
    PRIMARY = "6-12"
    SECONDARY = "13-17"

    @property
    def benefit_band(self) -> AgeBand:
        if self is ChildAgeGroup.PRESCHOOL:
            return AgeBand.UNDER_6
        return AgeBand.FROM_6_TO_17


class Custody(str, Enum):
    SHARED = "shared"
    FULL = "full"

    @property
    def multiplier(self) -> Decimal:
        return Decimal("0.5") if self is Custody.SHARED else Decimal("1")


class FinancialHealth(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    TIGHT = "tight"
    DEFICIT = "deficit"


class PayFrequency(str, Enum):
    ANNUAL = "annual"
    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"


class WageFrequency(str, Enum):
    HOURLY = "hourly"
    WEEKLY = "weekly"
    ANNUAL = "annual"


__all__ = [
    "AgeBand",
    "ChildAgeGroup",
    "ContributionProgramId",
    "Custody",
    "FinancialHealth",
    "PayFrequency",
    "WageFrequency",
]
