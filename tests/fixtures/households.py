from decimal import Decimal

from qcfinance.core.models import SimulationRequest
from qcfinance.reference.cities import default_catalog
from qcfinance.tax_years import load_parameters

PARAMS_2025 = load_parameters(2025)
CATALOG = default_catalog()


def make_request(**overrides) -> SimulationRequest:
    """Single earner in Montreal at $55,000, no car, no children."""
    payload = {
        "gross_salary": Decimal("55000"),
        "city_id": "montreal",
        "has_partner": False,
        "has_car": False,
        "children_count": 0,
        "children_ages": [],
        "has_subsidy": False,
    }
    payload.update(overrides)
    return SimulationRequest(**payload)
