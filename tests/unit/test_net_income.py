from decimal import Decimal as D

import hypothesis.strategies as st
from hypothesis import given

from qcfinance.core.money import MAX_MONEY, to_money
from qcfinance.core.net_income import QuebecTaxEngine, combine_household, compute_net_income
from tests.fixtures.households import PARAMS_2025

ENGINE = QuebecTaxEngine(PARAMS_2025)

salaries = st.decimals(
    min_value=D("0"), max_value=D("1000000"), places=2, allow_nan=False, allow_infinity=False
)


def test_net_income_at_55000():
    r = ENGINE.compute(D("55000"))
    assert r.tax_year == 2025
    assert r.federal_tax == D("5894.25")
    assert r.provincial_tax == D("5172.16")
    assert r.qpp_contribution == D("3296.00")
    assert r.qpip_contribution == D("271.70")
    assert r.ei_contribution == D("698.50")
    assert r.total_tax == D("11066.41")
    assert r.total_deductions == D("4266.20")
    assert r.net_annual == D("39667.39")
    assert r.net_monthly == D("3305.62")
    assert r.net_bi_weekly == D("1525.67")
    assert r.effective_tax_rate == D("27.88")
    assert r.marginal_tax_rate == D("29.00")
    assert r.take_home_percentage == D("72.12")


def test_zero_salary_is_all_zero():
    r = ENGINE.compute(D("0"))
    assert r.gross_annual == D("0.00")
    assert r.total_tax == D("0.00")
    assert r.total_deductions == D("0.00")
    assert r.net_annual == D("0.00")
    assert r.net_monthly == D("0.00")
    assert r.effective_tax_rate == D("0")
    assert r.take_home_percentage == D("0")
    assert r.marginal_tax_rate == D("0.00")


def test_high_salary_hits_top_rates_and_every_ceiling():
    r = ENGINE.compute(D("300000"))
    assert r.marginal_tax_rate == D("58.75")
    assert r.qpp_contribution == D("4160.00")
    assert r.qpip_contribution == D("464.36")
    assert r.ei_contribution == D("802.64")


def test_negative_salary_behaves_like_zero():
    assert ENGINE.compute(D("-42000")) == ENGINE.compute(D("0"))


@given(salaries)
def test_net_income_conservation(gross):
    r = ENGINE.compute(gross)
    assert r.net_annual + r.total_tax + r.total_deductions == r.gross_annual


@given(salaries, salaries)
def test_tax_is_progressive(a, b):
    low, high = sorted((a, b))
    r_low, r_high = ENGINE.compute(low), ENGINE.compute(high)
    assert r_low.federal_tax <= r_high.federal_tax
    assert r_low.provincial_tax <= r_high.provincial_tax


@given(salaries)
def test_compute_is_idempotent(gross):
    assert ENGINE.compute(gross) == ENGINE.compute(gross)


@given(salaries)
def test_net_income_is_never_negative(gross):
    assert ENGINE.compute(gross).net_annual >= D("0")


def test_combine_household_sums_two_earners():
    primary = ENGINE.compute(D("55000"))
    partner = ENGINE.compute(D("0"))
    household = combine_household(primary, partner)
    assert household.gross_annual == D("55000.00")
    assert household.net_annual == D("39667.39")
    assert household.effective_tax_rate == primary.effective_tax_rate


def test_combine_household_single_earner():
    primary = ENGINE.compute(D("100000"))
    household = combine_household(primary)
    assert household.net_annual == primary.net_annual
    assert household.net_monthly == primary.net_monthly


def test_compute_net_income_uses_bundled_year():
    assert compute_net_income(D("55000")).net_annual == D("39667.39")


def test_huge_salary_is_computed_without_error():
    r = ENGINE.compute(D("1e26"))
    assert r.gross_annual == D("1e26")
    assert r.marginal_tax_rate == D("58.75")
    assert r.qpp_contribution == D("4160.00")
    assert r.net_annual > 0
    assert abs(r.net_annual + r.total_tax + r.total_deductions - r.gross_annual) <= D("1")


def test_amounts_above_the_ceiling_are_held_there():
    assert to_money(D("1e40")) == MAX_MONEY
    assert ENGINE.compute(D("1e40")) == ENGINE.compute(MAX_MONEY)
