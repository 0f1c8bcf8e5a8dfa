from __future__ import annotations

import io
from datetime import date
from decimal import Decimal
from typing import Protocol

from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from qcfinance.core.insights import HEALTH_LABELS, generate_insights
from qcfinance.core.models import SimulationRequest, SimulatorResult
from qcfinance.formatting import NARROW_NBSP, NBSP, format_currency, format_percentage

PAGE_WIDTH, PAGE_HEIGHT = LETTER
LEFT_MARGIN = 54
RIGHT_MARGIN = PAGE_WIDTH - LEFT_MARGIN
LINE_HEIGHT = 16

HEADER_FONT = "Helvetica-Bold"
BODY_FONT = "Helvetica"
SMALL_FONT = "Helvetica"

INCOME_ROWS = (
    ("gross_annual", "Salaire brut annuel"),
    ("federal_tax", "Impôt fédéral"),
    ("provincial_tax", "Impôt du Québec"),
    ("qpp_contribution", "RRQ"),
    ("qpip_contribution", "RQAP"),
    ("ei_contribution", "Assurance-emploi"),
    ("net_annual", "Revenu net annuel"),
    ("net_monthly", "Revenu net mensuel"),
)

EXPENSE_ROWS = (
    ("rent", "Loyer"),
    ("groceries", "Épicerie"),
    ("utilities", "Services publics"),
    ("transportation", "Transport"),
    ("children", "Enfants (net des allocations)"),
    ("total", "Total des dépenses"),
)


class ReportRenderer(Protocol):
    def render(self, result: SimulatorResult, request: SimulationRequest) -> bytes: ...


def _money(value: Decimal) -> str:
    # Helvetica has no glyph for the narrow no-break space.
    return format_currency(value).replace(NARROW_NBSP, " ").replace(NBSP, " ")


def _percent(value: Decimal) -> str:
    return format_percentage(value).replace(NARROW_NBSP, " ").replace(NBSP, " ")


def report_title(result: SimulatorResult) -> str:
    return f"Simulation de vie - {result.city.name} - {result.tax.tax_year}"


class PdfReportRenderer:
    """One-page French summary of a simulation, drawn with ReportLab."""

    def __init__(self, today: date | None = None) -> None:
        self.today = today

    def render(self, result: SimulatorResult, request: SimulationRequest) -> bytes:
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=LETTER)
        pdf.setTitle(report_title(result))
        pdf.setSubject("Simulateur de vie au Québec")
        pdf.setCreator("qcfinance")

        y = self._draw_header(pdf, result)
        y = self._draw_inputs(pdf, request, result, y)
        y = self._draw_rows(pdf, "Revenu net", INCOME_ROWS, result.tax.model_dump(), y)
        y = self._draw_rows(pdf, "Dépenses mensuelles", EXPENSE_ROWS, result.expenses.model_dump(), y)
        y = self._draw_summary(pdf, result, y)
        self._draw_insights(pdf, result, y)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _draw_header(self, pdf: canvas.Canvas, result: SimulatorResult) -> float:
        pdf.setFont(HEADER_FONT, 16)
        pdf.drawString(LEFT_MARGIN, PAGE_HEIGHT - 72, "Simulateur de vie au Québec")
        pdf.setFont(SMALL_FONT, 9)
        generated = (self.today or date.today()).isoformat()
        pdf.drawString(
            LEFT_MARGIN,
            PAGE_HEIGHT - 88,
            f"Rapport généré le {generated} - paramètres fiscaux {result.tax.tax_year}",
        )
        return PAGE_HEIGHT - 120

    def _draw_inputs(
        self, pdf: canvas.Canvas, request: SimulationRequest, result: SimulatorResult, y: float
    ) -> float:
        pdf.setFont(HEADER_FONT, 11)
        pdf.drawString(LEFT_MARGIN, y, "Vos informations")
        y -= LINE_HEIGHT
        pdf.setFont(BODY_FONT, 10)
        lines = [
            f"Ville : {result.city.name} ({result.city.region})",
            f"Situation : {'En couple' if request.has_partner else 'Seul(e)'}",
            f"Transport : {'Voiture' if request.has_car else 'Transport en commun'}",
            f"Enfants : {request.children_count}",
        ]
        for line in lines:
            pdf.drawString(LEFT_MARGIN, y, line)
            y -= LINE_HEIGHT
        return y - LINE_HEIGHT / 2

    def _draw_rows(
        self,
        pdf: canvas.Canvas,
        heading: str,
        rows: tuple[tuple[str, str], ...],
        values: dict,
        y: float,
    ) -> float:
        pdf.setFont(HEADER_FONT, 11)
        pdf.drawString(LEFT_MARGIN, y, heading)
        y -= LINE_HEIGHT
        pdf.setFont(BODY_FONT, 10)
        for key, label in rows:
            amount = values.get(key)
            if amount is None:
                continue
            pdf.drawString(LEFT_MARGIN, y, label)
            pdf.drawRightString(RIGHT_MARGIN, y, _money(amount))
            y -= LINE_HEIGHT
        return y - LINE_HEIGHT / 2

    def _draw_summary(self, pdf: canvas.Canvas, result: SimulatorResult, y: float) -> float:
        health = HEALTH_LABELS[result.financial_health]
        pdf.setFont(HEADER_FONT, 11)
        pdf.drawString(LEFT_MARGIN, y, f"Bilan : {health.label}")
        y -= LINE_HEIGHT
        pdf.setFont(BODY_FONT, 10)
        rows = (
            ("Revenu disponible mensuel", _money(result.disposable_income)),
            ("Taux d'épargne", _percent(result.savings_rate)),
            ("Taux d'imposition effectif", _percent(result.tax.effective_tax_rate)),
            ("Taux marginal", _percent(result.tax.marginal_tax_rate)),
            ("Loyer / revenu net", _percent(result.rent_to_income_ratio)),
        )
        for label, value in rows:
            pdf.drawString(LEFT_MARGIN, y, label)
            pdf.drawRightString(RIGHT_MARGIN, y, value)
            y -= LINE_HEIGHT
        return y - LINE_HEIGHT / 2

    def _draw_insights(self, pdf: canvas.Canvas, result: SimulatorResult, y: float) -> None:
        insights = generate_insights(result)
        if not insights:
            return
        pdf.setFont(HEADER_FONT, 11)
        pdf.drawString(LEFT_MARGIN, y, "Conseils")
        y -= LINE_HEIGHT
        pdf.setFont(SMALL_FONT, 9)
        for insight in insights:
            pdf.drawString(LEFT_MARGIN, y, f"- {insight.title}")
            y -= LINE_HEIGHT


__all__ = ["PdfReportRenderer", "ReportRenderer", "report_title"]
