from decimal import Decimal as D

import pytest

from qcfinance.core.enums import PayFrequency, WageFrequency
from qcfinance.core.wages import convert_to_annual, convert_wage


@pytest.mark.parametrize(
    "amount,frequency,expected",
    [
        (D("55000"), PayFrequency.ANNUAL, D("55000.00")),
        (D("4000"), PayFrequency.MONTHLY, D("48000.00")),
        (D("2000"), "biweekly", D("52000.00")),
        (D("1000"), "weekly", D("52000.00")),
    ],
)
def test_convert_to_annual(amount, frequency, expected):
    assert convert_to_annual(amount, frequency) == expected


def test_unknown_pay_frequency():
    with pytest.raises(ValueError):
        convert_to_annual(D("100"), "daily")


def test_hourly_wage_counts_vacation_weeks():
    r = convert_wage(D("25"), WageFrequency.HOURLY)
    assert r.working_weeks == D("50")
    assert r.weekly_pay == D("1000.00")
    assert r.biweekly_pay == D("2000.00")
    assert r.annual_salary == D("50000.00")
    assert r.monthly_pay == D("4166.67")


def test_annual_salary_to_hourly():
    r = convert_wage(D("52000"), "annual", hours_per_week=D("40"), vacation_weeks=D("2"))
    assert r.hourly_rate == D("26.00")
    assert r.annual_salary == D("52000.00")


def test_weekly_wage():
    r = convert_wage(D("750"), "weekly", hours_per_week=D("37.5"))
    assert r.hourly_rate == D("20.00")


def test_zero_hours_does_not_divide_by_zero():
    r = convert_wage(D("52000"), "annual", hours_per_week=D("0"))
    assert r.hourly_rate == D("0.00")
    assert r.annual_salary == D("0.00")
    full_vacation = convert_wage(D("52000"), "annual", vacation_weeks=D("60"))
    assert full_vacation.working_weeks == D("0")
    assert full_vacation.hourly_rate == D("0.00")
