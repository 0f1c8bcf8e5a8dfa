from decimal import Decimal as D

import pytest
from fastapi.testclient import TestClient

from qcfinance.api.http import app as api_app
from qcfinance.config import get_settings


def _money(value) -> D:
    return D(str(value))


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setenv("QCFIN_SCENARIO_ROOT", str(tmp_path / "scenarios"))
    monkeypatch.setenv("QCFIN_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("BUILD_VERSION", "9.9.9")
    monkeypatch.setenv("BUILD_SHA", "deadbeef")
    get_settings.cache_clear()
    with TestClient(api_app) as test_client:
        yield test_client
    get_settings.cache_clear()


def test_health_includes_build_meta(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["tax_year"] == 2025
    assert body["cities"] == 10
    assert body["build"] == {"version": "9.9.9", "sha": "deadbeef"}


def test_net_income(client):
    resp = client.get("/net-income", params={"gross": "55000"})
    assert resp.status_code == 200
    body = resp.json()
    assert _money(body["net_annual"]) == D("39667.39")
    assert _money(body["federal_tax"]) == D("5894.25")


def test_net_income_requires_a_number(client):
    assert client.get("/net-income", params={"gross": "lots"}).status_code == 422


def test_net_income_for_a_huge_salary(client):
    resp = client.get("/net-income", params={"gross": "1e26"})
    assert resp.status_code == 200
    assert _money(resp.json()["gross_annual"]) == D("1e26")


def test_contribution_by_program(client):
    resp = client.get("/contributions/qpip", params={"gross": "300000"})
    assert resp.status_code == 200
    assert _money(resp.json()["contribution"]) == D("464.36")
    assert client.get("/contributions/cpp", params={"gross": "1"}).status_code == 404


def test_family_benefits(client):
    resp = client.post(
        "/family-benefits",
        json={"family_income": "37487", "custody": "full", "children_under_6": 1},
    )
    assert resp.status_code == 200
    assert _money(resp.json()["federal_monthly"]) == D("666.42")
    bad = client.post("/family-benefits", json={"family_income": "1", "custody": "weekends"})
    assert bad.status_code == 422


def test_child_costs(client):
    resp = client.post(
        "/child-costs",
        json={"children_count": 2, "ages": ["0-5", "6-12"], "has_subsidy": True, "family_income": "70000"},
    )
    assert resp.status_code == 200
    assert _money(resp.json()["net_monthly_cost"]) == D("1027.00")
    mismatch = client.post(
        "/child-costs", json={"children_count": 2, "ages": ["0-5"], "family_income": "70000"}
    )
    assert mismatch.status_code == 422


def test_simulate(client):
    resp = client.post("/simulate", json={"gross_salary": "55000", "city_id": "montreal"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["financial_health"] == "good"
    assert _money(body["disposable_income"]) == D("888.62")
    assert body["city"]["name"] == "Montréal"


def test_simulate_errors(client):
    unknown = client.post("/simulate", json={"gross_salary": "55000", "city_id": "atlantis"})
    assert unknown.status_code == 404
    no_salary = client.post("/simulate", json={"gross_salary": "0", "city_id": "montreal"})
    assert no_salary.status_code == 422
    bad_age = client.post(
        "/simulate",
        json={"gross_salary": "55000", "city_id": "montreal", "children_count": 1, "children_ages": ["adult"]},
    )
    assert bad_age.status_code == 422


def test_compare_cities(client):
    resp = client.post(
        "/compare-cities", json={"gross_salary": "55000", "city_ids": ["montreal", "saguenay"]}
    )
    assert resp.status_code == 200
    assert [r["city"]["id"] for r in resp.json()] == ["montreal", "saguenay"]

    every_city = client.post("/compare-cities", json={"gross_salary": "55000"})
    assert len(every_city.json()) == 10

    unknown = client.post("/compare-cities", json={"gross_salary": "55000", "city_ids": ["atlantis"]})
    assert unknown.status_code == 404


def test_cities_sorting(client):
    assert client.get("/cities").json()[0]["id"] == "montreal"
    assert client.get("/cities", params={"sort": "cost"}).json()[0]["id"] == "saguenay"
    assert client.get("/cities", params={"sort": "population"}).json()[-1]["id"] == "terrebonne"
    assert client.get("/cities", params={"sort": "rent"}).status_code == 422


def test_insights(client):
    resp = client.post("/insights", json={"gross_salary": "20000", "city_id": "montreal"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["financial_health"] == "deficit"
    assert body["label"] == "Budget déficitaire"
    assert [i["type"] for i in body["insights"]] == ["danger", "warning"]


def test_report_returns_pdf(client):
    resp = client.post("/report", json={"gross_salary": "100000", "city_id": "sherbrooke"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert "simulation_sherbrooke_2025.pdf" in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")


def test_wages_and_ei_benefits(client):
    wages = client.get("/wages", params={"amount": "25", "frequency": "hourly"}).json()
    assert _money(wages["annual_salary"]) == D("50000.00")
    ei = client.get("/ei-benefits", params={"gross": "100000"}).json()
    assert ei["is_at_maximum"] is True


def test_scenario_lifecycle(client):
    assert client.get("/scenarios").json() == []
    created = client.post(
        "/scenarios",
        json={"name": "Plan A", "simulation": {"gross_salary": "55000", "city_id": "laval"}},
    )
    assert created.status_code == 201
    scenario = created.json()
    assert scenario["id"].startswith("scenario_")
    assert scenario["city_name"] == "Laval"

    assert client.get(f"/scenarios/{scenario['id']}").json()["name"] == "Plan A"
    assert [s["id"] for s in client.get("/scenarios").json()] == [scenario["id"]]

    assert client.delete(f"/scenarios/{scenario['id']}").json() == {"deleted": True}
    assert client.delete(f"/scenarios/{scenario['id']}").json() == {"deleted": False}
    assert client.get(f"/scenarios/{scenario['id']}").status_code == 404

    client.post(
        "/scenarios",
        json={"name": "Plan B", "simulation": {"gross_salary": "55000", "city_id": "levis"}},
    )
    assert client.delete("/scenarios").json() == {"cleared": True}
    assert client.get("/scenarios").json() == []


def test_scenario_requires_valid_simulation(client):
    resp = client.post(
        "/scenarios",
        json={"name": "Nowhere", "simulation": {"gross_salary": "55000", "city_id": "atlantis"}},
    )
    assert resp.status_code == 404
