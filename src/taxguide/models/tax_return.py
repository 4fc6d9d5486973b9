from pydantic import Field

from taxguide.models._numeric import InputModel
from taxguide.models.adjustments import AdjustmentInputs
from taxguide.models.credits import CreditInputs
from taxguide.models.deductions import DeductionInputs
from taxguide.models.income import IncomeInputs
from taxguide.models.payments import PaymentInputs
from taxguide.models.state import StateInputs
from taxguide.models.taxpayer import FilingProfile


class TaxReturnInputs(InputModel):
    """
    Everything the engine needs for one return.

    Every section defaults to an empty record, so ``TaxReturnInputs()`` is a
    valid all-zero single return and partially answered interviews can be
    computed at any point.
    """
    tax_year: int = Field(default=2025, description="Tax year being filed")
    profile: FilingProfile = Field(default_factory=FilingProfile)
    income: IncomeInputs = Field(default_factory=IncomeInputs)
    adjustments: AdjustmentInputs = Field(default_factory=AdjustmentInputs)
    deductions: DeductionInputs = Field(default_factory=DeductionInputs)
    credits: CreditInputs = Field(default_factory=CreditInputs)
    payments: PaymentInputs = Field(default_factory=PaymentInputs)
    state: StateInputs = Field(default_factory=StateInputs)

    @property
    def filing_status(self) -> str:
        return self.profile.filing_status.value

    @property
    def is_senior(self) -> bool:
        return self.profile.is_senior or self.adjustments.is_senior
