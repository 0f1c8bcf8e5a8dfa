from decimal import Decimal as D

import pytest

from qcfinance.core.child_costs import ChildCostModel, compute_child_costs, parse_age_groups
from qcfinance.core.enums import ChildAgeGroup, Custody
from qcfinance.core.errors import UnknownReferenceError
from qcfinance.core.models import ChildCostBreakdown
from tests.fixtures.households import PARAMS_2025

MODEL = ChildCostModel(PARAMS_2025.child_costs, PARAMS_2025.benefits)


def _compute(children_count, ages, has_subsidy, income, **kwargs):
    return compute_child_costs(
        children_count,
        ages,
        has_subsidy,
        income,
        costs=PARAMS_2025.child_costs,
        benefits=PARAMS_2025.benefits,
        **kwargs,
    )


def test_two_children_with_sibling_discount():
    r = _compute(2, ["0-5", "6-12"], True, D("70000"))
    assert r.base_monthly == D("935.00")
    assert r.daycare_monthly == D("400.00")
    assert r.total_monthly == D("1335.00")
    assert r.federal_benefits == D("0.00")
    assert r.provincial_benefits == D("3696.00")
    assert r.total_benefits == D("3696.00")
    assert r.net_monthly_cost == D("1027.00")


def test_private_daycare_for_a_toddler():
    r = _compute(1, ["0-5"], False, D("37487"))
    assert r.daycare_monthly == D("1100.00")
    assert r.total_monthly == D("1650.00")
    assert r.federal_benefits == D("7997.00")
    assert r.provincial_benefits == D("2980.00")
    assert r.net_monthly_cost == D("735.25")


def test_teenager_has_no_childcare():
    r = _compute(1, ["13-17"], False, D("60000"))
    assert r.base_monthly == D("650.00")
    assert r.daycare_monthly == D("0.00")


def test_discount_is_capped_for_large_families():
    r = _compute(5, ["13-17"] * 5, False, D("500000"))
    assert r.base_monthly == (D("650") * 5 * D("0.70")).quantize(D("0.01"))


def test_net_cost_goes_negative_when_benefits_exceed_costs():
    r = _compute(1, ["13-17"], False, D("0"))
    assert r.net_monthly_cost < 0


def test_no_children_is_an_empty_breakdown():
    assert _compute(0, [], False, D("50000")) == ChildCostBreakdown()
    assert MODEL.compute([], False, D("50000")) == ChildCostBreakdown()


def test_mismatched_ages_are_rejected():
    assert _compute(2, ["0-5"], False, D("50000")) is None
    assert _compute(1, ["0-5", "6-12"], False, D("50000")) is None


def test_unknown_age_group_is_rejected():
    assert _compute(1, ["18-25"], False, D("50000")) is None
    with pytest.raises(UnknownReferenceError):
        parse_age_groups(["toddler"])


def test_parse_age_groups_accepts_enum_members():
    assert parse_age_groups([ChildAgeGroup.PRIMARY, "13-17"]) == [
        ChildAgeGroup.PRIMARY,
        ChildAgeGroup.SECONDARY,
    ]


def test_shared_custody_halves_benefits_not_costs():
    full = _compute(2, ["0-5", "6-12"], True, D("70000"))
    shared = _compute(2, ["0-5", "6-12"], True, D("70000"), custody=Custody.SHARED)
    assert shared.total_monthly == full.total_monthly
    assert shared.provincial_benefits == D("1848.00")
    assert shared.net_monthly_cost == D("1181.00")


def test_defaults_to_bundled_parameters():
    r = compute_child_costs(1, ["6-12"], False, D("50000"))
    assert r is not None
    assert r.total_monthly == D("750.00")
