"""
Adjustments to income: Schedule 1, Part II and Schedule 1-A.

Every item follows the same path: the entered amount counts only when its
flag is set, is capped at the statutory maximum, and is then phased out on
modified AGI. MAGI here is total income before any adjustment.
"""

import logging
from typing import Optional

from taxguide.calculator.decimal_math import to_money
from taxguide.calculator.phaseout import PhaseoutRange
from taxguide.calculator.tax_year_config import TaxYearConfig
from taxguide.models.adjustments import AdjustmentInputs
from taxguide.models.tax_result import AdjustmentsBreakdown
from taxguide.models.taxpayer import FilingProfile

logger = logging.getLogger(__name__)


def _limited(
    claimed: bool,
    amount: float,
    cap: float,
    phaseout: Optional[PhaseoutRange],
    magi: float,
) -> float:
    if not claimed:
        return 0.0
    allowed = min(max(0.0, amount), cap)
    if phaseout is not None:
        allowed = phaseout.apply(allowed, magi)
    return allowed


def compute_adjustments(
    adjustments: AdjustmentInputs,
    profile: FilingProfile,
    magi: float,
    config: TaxYearConfig,
) -> AdjustmentsBreakdown:
    """
    Compute each adjustment and the Schedule 1-A / Schedule 1 Part II totals.

    Args:
        adjustments: Entered adjustment amounts and their flags
        profile: Filing status and age facts
        magi: Preliminary modified AGI (total income)
        config: Tax year constants
    """
    status = profile.filing_status.value

    student_loan = _limited(
        adjustments.has_student_loan_interest,
        adjustments.student_loan_interest,
        config.student_loan_interest_max,
        config.student_loan_phaseout[status],
        magi,
    )

    ira_limit = (
        config.ira_contribution_limit_50_plus
        if profile.age_50_or_older
        else config.ira_contribution_limit
    )
    ira = _limited(
        adjustments.has_ira_contribution,
        adjustments.ira_contribution,
        ira_limit,
        config.ira_phaseout_covered[status] if adjustments.ira_covered_by_workplace_plan else None,
        magi,
    )

    hsa_limit = config.hsa_family_limit if adjustments.hsa_family_coverage else config.hsa_individual_limit
    hsa = _limited(adjustments.has_hsa_contribution, adjustments.hsa_contribution, hsa_limit, None, magi)

    tips = _limited(
        adjustments.has_qualified_tips,
        adjustments.qualified_tips,
        config.qualified_tips_max,
        config.qualified_tips_phaseout[status],
        magi,
    )
    overtime = _limited(
        adjustments.has_qualified_overtime,
        adjustments.qualified_overtime,
        config.qualified_overtime_max,
        config.qualified_overtime_phaseout[status],
        magi,
    )
    vehicle = _limited(
        adjustments.has_vehicle_loan_interest,
        adjustments.vehicle_loan_interest,
        config.vehicle_loan_interest_max,
        config.vehicle_loan_interest_phaseout[status],
        magi,
    )

    # Senior deduction is a fixed amount, not an entered one.
    is_senior = adjustments.is_senior or profile.is_senior
    senior = _limited(
        is_senior,
        config.senior_deduction_amount,
        config.senior_deduction_amount,
        config.senior_deduction_phaseout[status],
        magi,
    )

    student_loan, ira, hsa = to_money(student_loan), to_money(ira), to_money(hsa)
    tips, overtime = to_money(tips), to_money(overtime)
    vehicle, senior = to_money(vehicle), to_money(senior)

    schedule_1a = to_money(tips + overtime + vehicle + senior)
    part2 = to_money(student_loan + ira + hsa)

    logger.debug(f"Adjustments at MAGI {magi:.2f}: Schedule 1 part II={part2}, Schedule 1-A={schedule_1a}")

    return AdjustmentsBreakdown(
        student_loan_interest=student_loan,
        ira_contribution=to_money(adjustments.ira_contribution if adjustments.has_ira_contribution else 0.0),
        ira_deduction=ira,
        hsa_deduction=hsa,
        tips_deduction=tips,
        overtime_deduction=overtime,
        vehicle_loan_interest_deduction=vehicle,
        senior_deduction=senior,
        schedule_1a_total=schedule_1a,
        schedule_1_part2_total=part2,
        total=to_money(schedule_1a + part2),
    )
