from pydantic import Field

from taxguide.models._numeric import InputModel


class StateInputs(InputModel):
    """Colorado return (DR 0104) additions, subtractions and payments."""
    withholding: float = Field(default=0.0, description="W-2 box 17")
    estimated_payments: float = 0.0
    additions: float = Field(default=0.0, description="DR 0104AD additions")
    us_government_interest_subtraction: float = Field(
        default=0.0,
        description="Interest on U.S. obligations, exempt from state tax"
    )
    pension_subtraction: float = Field(default=0.0, description="Pension and annuity subtraction")
    other_subtractions: float = 0.0
    other_credits: float = Field(default=0.0, description="Refundable state credits")

    def get_total_subtractions(self) -> float:
        return self.us_government_interest_subtraction + self.pension_subtraction + self.other_subtractions
