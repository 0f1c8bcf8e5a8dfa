import logging
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, FastAPI, HTTPException, Query, Response
from pydantic import BaseModel, Field

from qcfinance.config import DEFAULT_TAX_YEAR, get_settings
from qcfinance.core.benefits import BenefitPhaseOutCalculator
from qcfinance.core.child_costs import compute_child_costs
from qcfinance.core.contributions import compute_contribution
from qcfinance.core.ei_benefits import EIBenefitEstimate, estimate_ei_benefits
from qcfinance.core.enums import Custody, WageFrequency
from qcfinance.core.insights import HEALTH_LABELS, Insight, generate_insights
from qcfinance.core.models import (
    ChildCostBreakdown,
    FamilyBenefitsResult,
    QuebecCity,
    SimulationRequest,
    SimulatorResult,
    TaxCalculationResult,
)
from qcfinance.core.net_income import QuebecTaxEngine
from qcfinance.core.parameters import TaxParameters
from qcfinance.core.simulator import LifeSimulator
from qcfinance.core.wages import WageConversion, convert_wage
from qcfinance.lifespan import build_application_lifespan
from qcfinance.printout.report_render import PdfReportRenderer, ReportRenderer
from qcfinance.reference.cities import (
    CityCatalog,
    cities_by_cost,
    cities_by_population,
    default_catalog,
)
from qcfinance.storage.scenarios import (
    JsonScenarioStore,
    SavedScenario,
    ScenarioDraft,
    ScenarioNotFoundError,
    ScenarioStore,
)
from qcfinance.tax_years import default_parameters

logger = logging.getLogger("qcfinance").getChild("http")


async def _announce_parameters(app: FastAPI) -> None:
    settings = app.state.settings
    logger.info(
        "Life simulator ready; tax_year=%s scenario_root=%s",
        app.state.parameters.tax_year,
        settings.scenario_root,
    )


app = FastAPI(
    title="Quebec Life Simulator",
    description="Net income, family benefits, child costs and monthly budget by Quebec city.",
    lifespan=build_application_lifespan("api", startup_hook=_announce_parameters),
)
router = APIRouter()


class FamilyBenefitsRequest(BaseModel):
    family_income: Decimal = Field(ge=0)
    custody: Custody = Custody.FULL
    children_under_6: int = Field(default=0, ge=0)
    children_6_to_17: int = Field(default=0, ge=0)


class ChildCostsRequest(BaseModel):
    children_count: int = Field(ge=0)
    ages: list[str] = Field(default_factory=list)
    has_subsidy: bool = False
    family_income: Decimal = Field(ge=0)
    custody: Custody = Custody.FULL


class CompareCitiesRequest(BaseModel):
    gross_salary: Decimal = Field(gt=0)
    city_ids: list[str] | None = None
    has_partner: bool = False
    has_car: bool = False


class SaveScenarioRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    simulation: SimulationRequest


class InsightsResponse(BaseModel):
    financial_health: str
    label: str
    description: str
    insights: list[Insight]


def _parameters() -> TaxParameters:
    return getattr(app.state, "parameters", None) or default_parameters()


def _catalog() -> CityCatalog:
    return getattr(app.state, "catalog", None) or default_catalog()


def _simulator() -> LifeSimulator:
    simulator = getattr(app.state, "simulator", None)
    if simulator is None:
        simulator = LifeSimulator(_parameters(), _catalog())
    return simulator


def _scenario_store() -> ScenarioStore:
    store = getattr(app.state, "scenario_store", None)
    if store is None:
        settings = get_settings()
        store = JsonScenarioStore(settings.scenario_root, max_scenarios=settings.max_saved_scenarios)
    return store


def _report_renderer() -> ReportRenderer:
    return getattr(app.state, "report_renderer", None) or PdfReportRenderer()


def _simulate_or_raise(request: SimulationRequest) -> SimulatorResult:
    if _catalog().find(request.city_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown city '{request.city_id}'")
    result = _simulator().simulate(request)
    if result is None:
        raise HTTPException(
            status_code=422,
            detail="Simulation requires a positive gross salary and one age group per child",
        )
    return result


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", get_settings())
    parameters = _parameters()
    return {
        "status": "ok",
        "default_tax_year": DEFAULT_TAX_YEAR,
        "tax_year": parameters.tax_year,
        "cities": len(_catalog().cities),
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
        },
    }


@router.get("/net-income")
def net_income(gross: Decimal = Query(...)) -> TaxCalculationResult:
    return QuebecTaxEngine(_parameters()).compute(gross)


@router.get("/contributions/{program}")
def contribution(program: str, gross: Decimal = Query(...)):
    amount = compute_contribution(gross, program, _parameters().contributions)
    if amount is None:
        raise HTTPException(status_code=404, detail=f"Unknown contribution program '{program}'")
    return {"program": program, "gross": gross, "contribution": amount}


@router.post("/family-benefits")
def family_benefits(req: FamilyBenefitsRequest) -> FamilyBenefitsResult:
    calculator = BenefitPhaseOutCalculator(_parameters().benefits)
    return calculator.monthly(req.family_income, req.custody, req.children_under_6, req.children_6_to_17)


@router.post("/child-costs")
def child_costs(req: ChildCostsRequest) -> ChildCostBreakdown:
    parameters = _parameters()
    breakdown = compute_child_costs(
        req.children_count,
        req.ages,
        req.has_subsidy,
        req.family_income,
        costs=parameters.child_costs,
        benefits=parameters.benefits,
        custody=req.custody,
    )
    if breakdown is None:
        raise HTTPException(status_code=422, detail="Provide one known age group per child")
    return breakdown


@router.post("/simulate")
def simulate(req: SimulationRequest) -> SimulatorResult:
    return _simulate_or_raise(req)


@router.post("/compare-cities")
def compare_cities(req: CompareCitiesRequest) -> list[SimulatorResult]:
    catalog = _catalog()
    city_ids = req.city_ids if req.city_ids is not None else catalog.ids()
    unknown = [city_id for city_id in city_ids if catalog.find(city_id) is None]
    if unknown:
        raise HTTPException(status_code=404, detail=f"Unknown cities: {', '.join(unknown)}")
    results = _simulator().compare_cities(req.gross_salary, city_ids, req.has_partner, req.has_car)
    return [result for result in results if result is not None]


@router.get("/cities")
def cities(sort: Literal["catalog", "cost", "population"] = "catalog") -> list[QuebecCity]:
    catalog = _catalog()
    if sort == "cost":
        return cities_by_cost(catalog, _parameters().household)
    if sort == "population":
        return cities_by_population(catalog)
    return list(catalog.cities)


@router.post("/insights")
def insights(req: SimulationRequest) -> InsightsResponse:
    result = _simulate_or_raise(req)
    health = HEALTH_LABELS[result.financial_health]
    return InsightsResponse(
        financial_health=result.financial_health.value,
        label=health.label,
        description=health.description,
        insights=generate_insights(result),
    )


@router.post("/report")
def report(req: SimulationRequest) -> Response:
    result = _simulate_or_raise(req)
    pdf = _report_renderer().render(result, req)
    filename = f"simulation_{result.city.id}_{result.tax.tax_year}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/wages")
def wages(
    amount: Decimal = Query(...),
    frequency: WageFrequency = WageFrequency.ANNUAL,
    hours_per_week: Decimal = Query(default=Decimal("40"), ge=0),
    vacation_weeks: Decimal = Query(default=Decimal("2"), ge=0, le=52),
) -> WageConversion:
    return convert_wage(amount, frequency, hours_per_week, vacation_weeks)


@router.get("/ei-benefits")
def ei_benefits(gross: Decimal = Query(...)) -> EIBenefitEstimate:
    return estimate_ei_benefits(gross, _parameters())


@router.get("/scenarios")
def list_scenarios() -> list[SavedScenario]:
    return _scenario_store().list()


@router.post("/scenarios", status_code=201)
def save_scenario(req: SaveScenarioRequest) -> SavedScenario:
    result = _simulate_or_raise(req.simulation)
    draft = ScenarioDraft.from_simulation(req.name, req.simulation, result)
    return _scenario_store().save(draft)


@router.get("/scenarios/{scenario_id}")
def get_scenario(scenario_id: str) -> SavedScenario:
    try:
        return _scenario_store().get(scenario_id)
    except ScenarioNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown scenario '{scenario_id}'") from exc


@router.delete("/scenarios/{scenario_id}")
def delete_scenario(scenario_id: str):
    return {"deleted": _scenario_store().delete(scenario_id)}


@router.delete("/scenarios")
def clear_scenarios():
    _scenario_store().clear()
    return {"cleared": True}


app.include_router(router)
