from typing import Optional

from pydantic import Field

from taxguide.models._numeric import InputModel


class MarketplaceCoverage(InputModel):
    """
    Form 1095-A totals for Health Insurance Marketplace coverage.

    All premiums are annual amounts (column totals on line 33).
    """
    family_size: float = Field(default=1.0, description="Tax family size; rounded to a whole person")
    enrollment_premium: float = Field(default=0.0, description="1095-A column A")
    benchmark_premium: float = Field(default=0.0, description="1095-A column B (SLCSP)")
    advance_payments: float = Field(default=0.0, description="1095-A column C, advance premium tax credit")


class CreditInputs(InputModel):
    """Credits the engine computes: dependent care, education, premium tax credit."""
    has_dependent_care: bool = False
    dependent_care_expenses: float = Field(default=0.0, description="Form 2441 qualified expenses")

    has_education_expenses: bool = False
    education_expenses: float = Field(default=0.0, description="Form 8863 qualified tuition and fees")

    marketplace: Optional[MarketplaceCoverage] = None
