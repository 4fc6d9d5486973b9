from pydantic import Field

from taxguide.models._numeric import InputModel


class PaymentInputs(InputModel):
    """Federal tax already paid during the year."""
    federal_withholding: float = Field(default=0.0, description="W-2 box 2 plus 1099 withholding")
    estimated_payments: float = Field(default=0.0, description="Form 1040-ES payments")
    social_security_withheld: float = Field(default=0.0, description="W-2 box 4")
    medicare_withheld: float = Field(default=0.0, description="W-2 box 6 (informational)")
