"""
Computation results.

Every record is a frozen dataclass built fresh by the calculators; amounts
are already rounded to cents.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class EntityIncomeBreakdown:
    """S corporation ordinary business income and the owner's share (Schedule E, Part II)."""
    total_income: float
    total_deductions: float
    ordinary_income: float
    ownership_percent: float
    allocated_income: float


@dataclass(frozen=True)
class SubsidyReconciliation:
    """Form 8962 premium tax credit reconciliation."""
    family_size: int
    poverty_line: float
    poverty_line_percent: float
    applicable_contribution_percent: float
    annual_contribution: float
    max_credit: float
    allowed_credit: float
    advance_paid: float
    net_credit: float

    @property
    def credit(self) -> float:
        """Net premium tax credit (Form 8962 line 26)."""
        return max(0.0, self.net_credit)

    @property
    def repayment(self) -> float:
        """Excess advance premium tax credit repayment (Form 8962 line 29)."""
        return max(0.0, -self.net_credit)


@dataclass(frozen=True)
class IncomeBreakdown:
    wages: float = 0.0
    entity: Optional[EntityIncomeBreakdown] = None
    entity_income: float = 0.0
    taxable_interest: float = 0.0
    us_government_interest: float = 0.0
    ordinary_dividends: float = 0.0
    qualified_dividends: float = 0.0
    short_term_capital_gain: float = 0.0
    long_term_capital_gain: float = 0.0
    net_capital_gain: float = 0.0
    capital_gain_for_return: float = 0.0
    capital_loss_carryover: float = 0.0
    unemployment_compensation: float = 0.0
    taxable_state_refund: float = 0.0
    other_income: float = 0.0
    additional_income: float = 0.0
    total_income: float = 0.0


@dataclass(frozen=True)
class AdjustmentsBreakdown:
    student_loan_interest: float = 0.0
    ira_contribution: float = 0.0
    ira_deduction: float = 0.0
    hsa_deduction: float = 0.0
    tips_deduction: float = 0.0
    overtime_deduction: float = 0.0
    vehicle_loan_interest_deduction: float = 0.0
    senior_deduction: float = 0.0
    schedule_1a_total: float = 0.0
    schedule_1_part2_total: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class DeductionsBreakdown:
    medical_expenses: float = 0.0
    medical_floor: float = 0.0
    medical_deduction: float = 0.0
    salt_paid: float = 0.0
    salt_deduction: float = 0.0
    charitable_cash: float = 0.0
    charitable_noncash: float = 0.0
    itemized_total: float = 0.0
    standard_deduction: float = 0.0
    deduction_amount: float = 0.0
    uses_itemized: bool = False


@dataclass(frozen=True)
class CreditsBreakdown:
    dependent_care_expenses: float = 0.0
    dependent_care_rate: float = 0.0
    dependent_care_credit: float = 0.0
    education_credit: float = 0.0
    subsidy: Optional[SubsidyReconciliation] = None
    premium_tax_credit: float = 0.0
    excess_advance_repayment: float = 0.0
    nonrefundable_total: float = 0.0


@dataclass(frozen=True)
class PaymentsBreakdown:
    federal_withholding: float = 0.0
    estimated_payments: float = 0.0
    expected_social_security: float = 0.0
    excess_social_security: float = 0.0
    refundable_credits: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class StateTaxResult:
    state_code: str
    state_name: str
    federal_taxable_income: float = 0.0
    additions: float = 0.0
    subtractions: float = 0.0
    taxable_income: float = 0.0
    rate: float = 0.0
    tax: float = 0.0
    withholding: float = 0.0
    estimated_payments: float = 0.0
    credits: float = 0.0
    total_payments: float = 0.0
    balance: float = 0.0
    refund: float = 0.0
    amount_owed: float = 0.0

    @property
    def is_refund(self) -> bool:
        return self.refund > 0


@dataclass(frozen=True)
class TaxResult:
    """
    Complete federal and state picture for one return.

    ``balance`` is payments minus total tax; exactly one of ``refund`` and
    ``amount_owed`` can be nonzero.
    """
    tax_year: int
    filing_status: str

    income: IncomeBreakdown
    adjustments: AdjustmentsBreakdown
    agi: float
    deductions: DeductionsBreakdown
    taxable_income: float
    ordinary_taxable_income: float
    preferential_income: float

    ordinary_tax: float
    preferential_tax: float
    base_tax: float
    net_investment_income: float
    niit: float
    additional_medicare_tax: float

    credits: CreditsBreakdown
    tax_after_credits: float
    total_tax: float

    payments: PaymentsBreakdown
    balance: float
    refund: float
    amount_owed: float

    effective_tax_rate: float = 0.0
    marginal_rate: float = 0.0

    state: Optional[StateTaxResult] = None

    @property
    def is_refund(self) -> bool:
        return self.refund > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dict for JSON serialization."""
        return asdict(self)
