"""French-language advice derived from a simulation result."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from qcfinance.core.enums import FinancialHealth
from qcfinance.core.models import SimulatorResult
from qcfinance.core.money import ZERO, round_cents
from qcfinance.formatting import format_currency, format_percentage

D = Decimal

InsightType = Literal["success", "warning", "info", "danger"]

RRSP_SAMPLE_CONTRIBUTION = D("5000")


@dataclass(frozen=True)
class HealthLabel:
    label: str
    color: str
    description: str


HEALTH_LABELS: dict[FinancialHealth, HealthLabel] = {
    FinancialHealth.DEFICIT: HealthLabel(
        "Budget déficitaire",
        "red",
        "Vos dépenses dépassent vos revenus. Considérez une ville moins chère ou augmentez vos revenus.",
    ),
    FinancialHealth.TIGHT: HealthLabel(
        "Budget serré",
        "orange",
        "Vous avez peu de marge de manœuvre. Essayez d'économiser au moins 10 % de vos revenus.",
    ),
    FinancialHealth.GOOD: HealthLabel(
        "Bonne santé financière",
        "blue",
        "Vous gérez bien votre budget. Continuez à épargner pour atteindre 30 %.",
    ),
    FinancialHealth.EXCELLENT: HealthLabel(
        "Excellente santé financière",
        "green",
        "Félicitations! Vous épargnez plus de 30 % de vos revenus.",
    ),
}


@dataclass(frozen=True)
class Insight:
    title: str
    description: str
    type: InsightType


def generate_insights(result: SimulatorResult | None) -> list[Insight]:
    if result is None:
        return []

    tax = result.tax
    insights: list[Insight] = []

    if tax.effective_tax_rate > 30:
        savings = round_cents(RRSP_SAMPLE_CONTRIBUTION * tax.effective_tax_rate / D("100"))
        insights.append(
            Insight(
                "Optimisation REER",
                f"Votre taux d'imposition effectif est de {format_percentage(tax.effective_tax_rate)}. "
                f"Cotiser {format_currency(RRSP_SAMPLE_CONTRIBUTION, 0)} à un REER pourrait vous faire "
                f"économiser environ {format_currency(savings, 0)} en impôts.",
                "info",
            )
        )

    if result.financial_health is FinancialHealth.TIGHT:
        insights.append(
            Insight(
                "Économies faibles",
                f"Vous n'économisez que {format_percentage(result.savings_rate)} de votre revenu net. "
                "Visez au moins 10 % pour une meilleure sécurité financière.",
                "warning",
            )
        )

    if result.disposable_income < ZERO:
        insights.append(
            Insight(
                "Budget déficitaire",
                f"Vos dépenses dépassent vos revenus de {format_currency(-result.disposable_income, 0)} "
                "par mois. Considérez une ville moins chère ou cherchez à augmenter vos revenus.",
                "danger",
            )
        )

    if result.rent_to_income_ratio > 35:
        insights.append(
            Insight(
                "Loyer trop élevé",
                f"Votre loyer représente {format_percentage(result.rent_to_income_ratio, 0)} de votre revenu. "
                "La recommandation est de rester sous 30 %.",
                "warning",
            )
        )

    if result.financial_health is FinancialHealth.EXCELLENT:
        insights.append(
            Insight(
                "Excellente gestion",
                f"Félicitations! Vous économisez {format_percentage(result.savings_rate, 0)} de votre revenu net.",
                "success",
            )
        )

    if tax.marginal_tax_rate > 40:
        insights.append(
            Insight(
                "Taux marginal élevé",
                f"Votre taux marginal d'imposition est de {format_percentage(tax.marginal_tax_rate)}. "
                "Chaque dollar supplémentaire gagné sera imposé à ce taux.",
                "info",
            )
        )

    return insights


__all__ = ["HEALTH_LABELS", "HealthLabel", "Insight", "InsightType", "generate_insights"]
