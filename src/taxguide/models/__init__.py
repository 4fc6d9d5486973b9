from taxguide.models.adjustments import AdjustmentInputs
from taxguide.models.credits import CreditInputs, MarketplaceCoverage
from taxguide.models.deductions import DeductionInputs
from taxguide.models.income import EntityReturn, IncomeInputs
from taxguide.models.payments import PaymentInputs
from taxguide.models.state import StateInputs
from taxguide.models.tax_result import (
    AdjustmentsBreakdown,
    CreditsBreakdown,
    DeductionsBreakdown,
    EntityIncomeBreakdown,
    IncomeBreakdown,
    PaymentsBreakdown,
    StateTaxResult,
    SubsidyReconciliation,
    TaxResult,
)
from taxguide.models.tax_return import TaxReturnInputs
from taxguide.models.taxpayer import FilingProfile, FilingStatus

__all__ = [
    "AdjustmentInputs",
    "AdjustmentsBreakdown",
    "CreditInputs",
    "CreditsBreakdown",
    "DeductionInputs",
    "DeductionsBreakdown",
    "EntityIncomeBreakdown",
    "EntityReturn",
    "FilingProfile",
    "FilingStatus",
    "IncomeBreakdown",
    "IncomeInputs",
    "MarketplaceCoverage",
    "PaymentInputs",
    "PaymentsBreakdown",
    "StateInputs",
    "StateTaxResult",
    "SubsidyReconciliation",
    "TaxResult",
    "TaxReturnInputs",
]
