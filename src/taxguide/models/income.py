from typing import ClassVar, FrozenSet, Optional

from pydantic import Field

from taxguide.models._numeric import InputModel


class EntityReturn(InputModel):
    """
    S corporation return (Form 1120-S, page 1) for a business the taxpayer owns.

    Only ordinary business income flows to the individual return; the
    taxpayer's share is ``ownership_percent`` of it.
    """
    SIGNED_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"other_income", "ownership_percent"})

    name: str = Field(default="", description="Entity name (informational)")
    ein: Optional[str] = Field(default=None, description="Employer identification number (informational)")

    # Income (lines 1a-5)
    gross_receipts: float = Field(default=0.0, description="Line 1a gross receipts or sales")
    returns_and_allowances: float = Field(default=0.0, description="Line 1b")
    cost_of_goods_sold: float = Field(default=0.0, description="Line 2")
    other_income: float = Field(default=0.0, description="Lines 4-5, may be a loss")

    # Deductions (lines 7-19)
    officer_compensation: float = 0.0
    salaries_and_wages: float = 0.0
    repairs: float = 0.0
    rents: float = 0.0
    taxes_and_licenses: float = 0.0
    interest: float = 0.0
    depreciation: float = 0.0
    advertising: float = 0.0
    employee_benefits: float = 0.0
    other_deductions: float = 0.0

    ownership_percent: float = Field(default=100.0, description="Shareholder's percentage of stock owned")
    materially_participates: bool = Field(default=True, description="Informational; income is treated as nonpassive")

    def get_total_deductions(self) -> float:
        return (
            self.officer_compensation + self.salaries_and_wages + self.repairs
            + self.rents + self.taxes_and_licenses + self.interest
            + self.depreciation + self.advertising + self.employee_benefits
            + self.other_deductions
        )


class IncomeInputs(InputModel):
    """Income reported on Form 1040 and Schedule 1, Part I."""
    SIGNED_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"short_term_capital_gain", "long_term_capital_gain"}
    )

    wages: float = Field(default=0.0, description="W-2 box 1 wages, salaries, tips")
    entity_return: Optional[EntityReturn] = Field(default=None, description="S corporation owned by the taxpayer")

    taxable_interest: float = Field(default=0.0, description="1099-INT box 1")
    us_government_interest: float = Field(
        default=0.0,
        description="1099-INT box 3; federally taxable, subtracted on the state return"
    )
    ordinary_dividends: float = Field(default=0.0, description="1099-DIV box 1a")
    qualified_dividends: float = Field(default=0.0, description="1099-DIV box 1b")
    short_term_capital_gain: float = Field(default=0.0, description="Net short-term gain or loss")
    long_term_capital_gain: float = Field(default=0.0, description="Net long-term gain or loss")

    unemployment_compensation: float = Field(default=0.0, description="1099-G box 1")
    taxable_state_refund: float = Field(default=0.0, description="1099-G box 2, taxable portion")
    other_income: float = 0.0

    def get_total_interest(self) -> float:
        return self.taxable_interest + self.us_government_interest
