import pathlib
import sys

import pytest

p = str(pathlib.Path(__file__).resolve().parents[1])
sys.path.insert(0, p) if p not in sys.path else None

from qcfinance.config import get_settings  # noqa: E402
from qcfinance.reference.cities import default_catalog  # noqa: E402
from qcfinance.tax_years import default_parameters  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    default_parameters.cache_clear()
    default_catalog.cache_clear()
    yield
    get_settings.cache_clear()
    default_parameters.cache_clear()
    default_catalog.cache_clear()
