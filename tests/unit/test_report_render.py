from datetime import date

from qcfinance.core.simulator import LifeSimulator
from qcfinance.printout.report_render import PdfReportRenderer, report_title
from tests.fixtures.households import CATALOG, PARAMS_2025, make_request

SIM = LifeSimulator(PARAMS_2025, CATALOG)


def test_renders_a_pdf_document():
    request = make_request(gross_salary="100000", city_id="sherbrooke")
    result = SIM.simulate(request)
    pdf = PdfReportRenderer(today=date(2025, 3, 1)).render(result, request)
    assert pdf.startswith(b"%PDF")
    assert pdf.rstrip().endswith(b"%%EOF")
    assert b"Simulation de vie - Sherbrooke - 2025" in pdf


def test_report_title():
    result = SIM.simulate(make_request(city_id="quebec"))
    assert report_title(result) == "Simulation de vie - Québec - 2025"


def test_renders_deficit_with_children():
    request = make_request(
        gross_salary="20000", children_count=2, children_ages=["0-5", "13-17"], has_subsidy=True
    )
    result = SIM.simulate(request)
    pdf = PdfReportRenderer().render(result, request)
    assert pdf.startswith(b"%PDF")
