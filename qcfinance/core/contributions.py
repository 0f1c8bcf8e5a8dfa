from __future__ import annotations

import logging
from decimal import Decimal

from qcfinance.core.enums import ContributionProgramId
from qcfinance.core.errors import UnknownReferenceError
from qcfinance.core.money import ZERO, MoneyLike, round_cents, to_money
from qcfinance.core.parameters import ContributionProgram, ContributionPrograms

D = Decimal

logger = logging.getLogger("qcfinance").getChild("contributions")


def calculate_contribution(gross_salary: MoneyLike, program: ContributionProgram) -> D:
    """Payroll contribution for one program.

    Two ceilings apply independently: the earnings base stops at
    ``max_earnings`` and the dollar amount stops at ``max_contribution``.
    When they disagree by a few cents the dollar cap wins.
    """
    gross = to_money(gross_salary)
    base = min(max(ZERO, gross - program.exemption), program.max_earnings - program.exemption)
    return round_cents(min(base * program.rate, program.max_contribution))


def program_for(programs: ContributionPrograms, program_id: ContributionProgramId | str) -> ContributionProgram:
    try:
        key = ContributionProgramId(program_id)
    except ValueError as exc:
        raise UnknownReferenceError(f"Unknown contribution program '{program_id}'") from exc
    return getattr(programs, key.value)


def compute_contribution(
    gross_salary: MoneyLike,
    program_id: ContributionProgramId | str,
    programs: ContributionPrograms | None = None,
) -> D | None:
    if programs is None:
        from qcfinance.tax_years import default_parameters

        programs = default_parameters().contributions
    try:
        program = program_for(programs, program_id)
    except UnknownReferenceError:
        logger.debug("Rejected contribution lookup for unknown program %r", program_id)
        return None
    return calculate_contribution(gross_salary, program)


__all__ = ["calculate_contribution", "compute_contribution", "program_for"]
