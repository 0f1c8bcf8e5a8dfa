from decimal import Decimal as D

import pytest

from qcfinance.core.brackets import calculate_progressive_tax
from qcfinance.core.parameters import JurisdictionTaxSchedule
from tests.fixtures.households import PARAMS_2025

FEDERAL = PARAMS_2025.federal
QUEBEC = PARAMS_2025.provincial


def test_federal_first_bracket_after_basic_personal_amount():
    r = calculate_progressive_tax(D("55000"), FEDERAL)
    assert r.taxable_income == D("39295.00")
    assert r.tax == D("5894.25")
    assert r.marginal_rate == D("0.15")


def test_quebec_first_bracket_after_basic_personal_amount():
    r = calculate_progressive_tax(D("55000"), QUEBEC)
    assert r.taxable_income == D("36944.00")
    assert r.tax == D("5172.16")
    assert r.marginal_rate == D("0.14")


def test_below_basic_personal_amount_enters_no_bracket():
    r = calculate_progressive_tax(D("15705"), FEDERAL)
    assert r.taxable_income == D("0.00")
    assert r.tax == D("0.00")
    assert r.marginal_rate == D("0")


def test_second_federal_bracket():
    # 84295 taxable: 55867 at 15 % plus 28428 at 20.5 %
    r = calculate_progressive_tax(D("100000"), FEDERAL)
    assert r.tax == D("14207.79")
    assert r.marginal_rate == D("0.205")


def test_top_brackets_reached():
    assert calculate_progressive_tax(D("300000"), FEDERAL).marginal_rate == D("0.33")
    assert calculate_progressive_tax(D("300000"), QUEBEC).marginal_rate == D("0.2575")


@pytest.mark.parametrize("schedule", [FEDERAL, QUEBEC], ids=["federal", "quebec"])
def test_bracket_edges_are_continuous(schedule):
    bpa = schedule.basic_personal_amount
    for lower_bracket, upper_bracket in zip(schedule.brackets, schedule.brackets[1:]):
        edge = bpa + lower_bracket.upper
        below = calculate_progressive_tax(edge - D("1"), schedule).tax
        at = calculate_progressive_tax(edge, schedule).tax
        above = calculate_progressive_tax(edge + D("1"), schedule).tax
        assert abs((at - below) - lower_bracket.rate) <= D("0.01")
        assert abs((above - at) - upper_bracket.rate) <= D("0.01")


def test_negative_income_is_clamped():
    r = calculate_progressive_tax(D("-5000"), FEDERAL)
    assert r.tax == D("0.00")
    assert r.taxable_income == D("0.00")


def test_schedule_rejects_gap_between_brackets():
    with pytest.raises(ValueError):
        JurisdictionTaxSchedule.model_validate(
            {
                "basic_personal_amount": "1000",
                "brackets": [
                    {"lower": "0", "upper": "10000", "rate": "0.10"},
                    {"lower": "12000", "upper": None, "rate": "0.20"},
                ],
            }
        )


def test_schedule_requires_unbounded_top_bracket():
    with pytest.raises(ValueError):
        JurisdictionTaxSchedule.model_validate(
            {
                "basic_personal_amount": "1000",
                "brackets": [{"lower": "0", "upper": "10000", "rate": "0.10"}],
            }
        )
