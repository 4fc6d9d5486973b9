from pydantic import Field

from taxguide.models._numeric import InputModel


class DeductionInputs(InputModel):
    """Schedule A itemized deduction amounts, before floors and caps."""
    medical_expenses: float = Field(default=0.0, description="Unreimbursed medical and dental expenses")
    state_local_tax: float = Field(default=0.0, description="State and local income and property taxes paid")
    charitable_cash: float = 0.0
    charitable_noncash: float = 0.0

    def get_total_charitable(self) -> float:
        return self.charitable_cash + self.charitable_noncash
