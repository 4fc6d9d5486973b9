from pydantic import Field

from taxguide.models._numeric import InputModel


class AdjustmentInputs(InputModel):
    """
    Adjustments to income (Schedule 1, Part II) and Schedule 1-A deductions.

    Each amount counts only when its ``has_*`` flag is set, so an amount left
    behind after the taxpayer answers "no" is ignored.
    """
    has_student_loan_interest: bool = False
    student_loan_interest: float = Field(default=0.0, description="1098-E interest paid")

    has_ira_contribution: bool = False
    ira_contribution: float = Field(default=0.0, description="Traditional IRA contributions for the year")
    ira_covered_by_workplace_plan: bool = Field(
        default=True,
        description="Covered by a retirement plan at work (W-2 box 13); enables the IRA phase-out"
    )

    has_hsa_contribution: bool = False
    hsa_contribution: float = Field(default=0.0, description="Personal HSA contributions (not through payroll)")
    hsa_family_coverage: bool = False

    has_qualified_tips: bool = False
    qualified_tips: float = 0.0

    has_qualified_overtime: bool = False
    qualified_overtime: float = Field(default=0.0, description="Premium portion of FLSA overtime pay")

    has_vehicle_loan_interest: bool = False
    vehicle_loan_interest: float = Field(default=0.0, description="Interest on a loan for a new U.S.-assembled vehicle")

    is_senior: bool = Field(default=False, description="Claim the enhanced senior deduction")
