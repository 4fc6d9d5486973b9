from __future__ import annotations

import logging
from typing import Optional, Tuple

from taxguide.calculator.adjustments import compute_adjustments
from taxguide.calculator.brackets import bracket_tax, marginal_rate, stacked_rate_tax
from taxguide.calculator.decimal_math import to_money, to_rate
from taxguide.calculator.entity_income import compute_entity_income
from taxguide.calculator.premium_tax_credit import reconcile_subsidy
from taxguide.calculator.tax_year_config import TaxYearConfig
from taxguide.models.credits import CreditInputs
from taxguide.models.deductions import DeductionInputs
from taxguide.models.income import IncomeInputs
from taxguide.models.payments import PaymentInputs
from taxguide.models.tax_result import (
    CreditsBreakdown,
    DeductionsBreakdown,
    IncomeBreakdown,
    PaymentsBreakdown,
    TaxResult,
)
from taxguide.models.tax_return import TaxReturnInputs

logger = logging.getLogger(__name__)


class FederalTaxEngine:
    """
    Federal income tax calculation for single and head of household filers.

    Follows the Form 1040 order:
    - Total income, including S corporation pass-through income
    - Schedule 1 Part II and Schedule 1-A adjustments, phased out on MAGI
    - Standard or itemized deduction (Schedule A)
    - Ordinary tax by the Tax Computation Worksheet, preferential tax on
      qualified dividends and long-term gains stacked above ordinary income
    - Net Investment Income Tax and Additional Medicare Tax
    - Dependent care, education and premium tax credits
    - Payments, refund or amount owed

    The engine never mutates its inputs and holds only immutable config.
    """

    def __init__(self, config: Optional[TaxYearConfig] = None):
        self.config = config or TaxYearConfig.for_2025()

    def calculate(self, inputs: TaxReturnInputs) -> TaxResult:
        """Execute full federal tax calculation."""
        cfg = self.config
        filing_status = inputs.filing_status

        income = self._compute_income(inputs.income)

        # Preliminary MAGI for every phase-out is total income.
        adjustments = compute_adjustments(inputs.adjustments, inputs.profile, income.total_income, cfg)
        agi = to_money(income.total_income - adjustments.total)

        deductions = self._compute_deductions(inputs.deductions, agi, filing_status)
        taxable_income = to_money(max(0.0, agi - deductions.deduction_amount))

        ordinary_income, preferential_income = self._split_taxable_income(inputs.income, taxable_income)
        ordinary_tax = to_money(bracket_tax(ordinary_income, cfg.brackets_for(filing_status)))
        preferential_tax = to_money(
            stacked_rate_tax(preferential_income, ordinary_income, cfg.preferential_brackets_for(filing_status))
        )
        base_tax = to_money(max(0.0, ordinary_tax + preferential_tax))

        net_investment_income, niit = self._calculate_niit(income, agi, filing_status)
        additional_medicare = self._calculate_additional_medicare_tax(income.wages, filing_status)

        credits = self._calculate_credits(inputs.credits, agi)

        # Line 22 plus Schedule 2 additions, floored at zero by nonrefundable credits.
        tax_after_credits = to_money(max(
            0.0,
            base_tax + niit + credits.excess_advance_repayment - credits.nonrefundable_total,
        ))
        total_tax = to_money(tax_after_credits + additional_medicare)

        payments = self._calculate_total_payments(inputs.payments, income.wages, credits)
        balance = to_money(payments.total - total_tax)

        effective_rate = to_rate(total_tax / agi) if agi > 0 else 0.0

        logger.debug(
            f"Federal {cfg.tax_year} {filing_status}: AGI={agi:.2f} taxable={taxable_income:.2f} "
            f"total_tax={total_tax:.2f} payments={payments.total:.2f} balance={balance:.2f}"
        )

        return TaxResult(
            tax_year=cfg.tax_year,
            filing_status=filing_status,
            income=income,
            adjustments=adjustments,
            agi=agi,
            deductions=deductions,
            taxable_income=taxable_income,
            ordinary_taxable_income=ordinary_income,
            preferential_income=preferential_income,
            ordinary_tax=ordinary_tax,
            preferential_tax=preferential_tax,
            base_tax=base_tax,
            net_investment_income=net_investment_income,
            niit=niit,
            additional_medicare_tax=additional_medicare,
            credits=credits,
            tax_after_credits=tax_after_credits,
            total_tax=total_tax,
            payments=payments,
            balance=balance,
            refund=to_money(max(0.0, balance)),
            amount_owed=to_money(max(0.0, -balance)),
            effective_tax_rate=effective_rate,
            marginal_rate=marginal_rate(ordinary_income, cfg.brackets_for(filing_status)),
        )

    def _compute_income(self, inc: IncomeInputs) -> IncomeBreakdown:
        """Form 1040 lines 1 through 9."""
        entity = compute_entity_income(inc.entity_return) if inc.entity_return is not None else None
        entity_income = entity.allocated_income if entity else 0.0

        net_capital_gain = to_money(inc.short_term_capital_gain + inc.long_term_capital_gain)
        limit = self.config.capital_loss_limit
        capital_gain_for_return = max(-limit, net_capital_gain)
        carryover = max(0.0, -net_capital_gain - limit)

        interest = to_money(inc.get_total_interest())
        additional_income = to_money(
            entity_income
            + inc.unemployment_compensation
            + inc.taxable_state_refund
            + inc.other_income
        )
        total_income = to_money(
            inc.wages
            + interest
            + inc.ordinary_dividends
            + capital_gain_for_return
            + additional_income
        )

        return IncomeBreakdown(
            wages=to_money(inc.wages),
            entity=entity,
            entity_income=to_money(entity_income),
            taxable_interest=interest,
            us_government_interest=to_money(inc.us_government_interest),
            ordinary_dividends=to_money(inc.ordinary_dividends),
            qualified_dividends=to_money(inc.qualified_dividends),
            short_term_capital_gain=to_money(inc.short_term_capital_gain),
            long_term_capital_gain=to_money(inc.long_term_capital_gain),
            net_capital_gain=net_capital_gain,
            capital_gain_for_return=to_money(capital_gain_for_return),
            capital_loss_carryover=to_money(carryover),
            unemployment_compensation=to_money(inc.unemployment_compensation),
            taxable_state_refund=to_money(inc.taxable_state_refund),
            other_income=to_money(inc.other_income),
            additional_income=additional_income,
            total_income=total_income,
        )

    def _compute_deductions(self, ded: DeductionInputs, agi: float, filing_status: str) -> DeductionsBreakdown:
        """Schedule A total compared with the standard deduction."""
        cfg = self.config

        medical_floor = to_money(max(0.0, agi) * cfg.medical_expense_floor_pct)
        medical_deduction = to_money(max(0.0, ded.medical_expenses - medical_floor))
        salt_deduction = to_money(min(ded.state_local_tax, cfg.salt_cap))
        itemized = to_money(medical_deduction + salt_deduction + ded.get_total_charitable())

        standard = cfg.standard_deduction[filing_status]
        uses_itemized = itemized > standard

        return DeductionsBreakdown(
            medical_expenses=to_money(ded.medical_expenses),
            medical_floor=medical_floor,
            medical_deduction=medical_deduction,
            salt_paid=to_money(ded.state_local_tax),
            salt_deduction=salt_deduction,
            charitable_cash=to_money(ded.charitable_cash),
            charitable_noncash=to_money(ded.charitable_noncash),
            itemized_total=itemized,
            standard_deduction=to_money(standard),
            deduction_amount=itemized if uses_itemized else to_money(standard),
            uses_itemized=uses_itemized,
        )

    def _split_taxable_income(self, inc: IncomeInputs, taxable_income: float) -> Tuple[float, float]:
        """
        Split taxable income into ordinary and preferential portions.

        Preferential income is qualified dividends plus long-term gains (losses
        count as zero), limited to taxable income. Short-term results stay in
        ordinary income through the netted capital gain line.
        """
        pref = max(0.0, inc.qualified_dividends + max(0.0, inc.long_term_capital_gain))
        pref = min(pref, taxable_income)
        ordinary = max(0.0, taxable_income - pref)
        return to_money(ordinary), to_money(pref)

    def _calculate_niit(self, income: IncomeBreakdown, agi: float, filing_status: str) -> Tuple[float, float]:
        """
        Net Investment Income Tax (Form 8960).

        3.8% of the lesser of net investment income or MAGI over the threshold,
        with AGI standing in for MAGI.
        """
        nii = max(0.0, income.taxable_interest + income.ordinary_dividends + income.capital_gain_for_return)
        threshold = self.config.niit_threshold[filing_status]
        excess = max(0.0, agi - threshold)
        return to_money(nii), to_money(min(nii, excess) * self.config.niit_rate)

    def _calculate_additional_medicare_tax(self, wages: float, filing_status: str) -> float:
        """Additional Medicare Tax (Form 8959) on wages over the threshold."""
        threshold = self.config.additional_medicare_threshold[filing_status]
        return to_money(max(0.0, wages - threshold) * self.config.additional_medicare_tax_rate)

    def _dependent_care_rate(self, agi: float) -> float:
        tiers = self.config.dependent_care_rate_tiers
        for floor, rate in tiers:
            if agi > floor:
                return rate
        return tiers[-1][1]

    def _calculate_credits(self, cred: CreditInputs, agi: float) -> CreditsBreakdown:
        cfg = self.config

        care_expenses = 0.0
        care_rate = 0.0
        care_credit = 0.0
        if cred.has_dependent_care:
            care_expenses = min(cred.dependent_care_expenses, cfg.dependent_care_expense_limit)
            care_rate = self._dependent_care_rate(agi)
            care_credit = care_expenses * care_rate

        education_credit = 0.0
        if cred.has_education_expenses:
            education_credit = min(cred.education_expenses * cfg.education_credit_rate, cfg.education_credit_max)

        subsidy = None
        if cred.marketplace is not None:
            coverage = cred.marketplace
            subsidy = reconcile_subsidy(
                household_income=agi,
                family_size=coverage.family_size,
                enrollment_premium=coverage.enrollment_premium,
                benchmark_premium=coverage.benchmark_premium,
                advance_paid=coverage.advance_payments,
                config=cfg,
            )

        care_credit = to_money(care_credit)
        education_credit = to_money(education_credit)

        return CreditsBreakdown(
            dependent_care_expenses=to_money(care_expenses),
            dependent_care_rate=care_rate,
            dependent_care_credit=care_credit,
            education_credit=education_credit,
            subsidy=subsidy,
            premium_tax_credit=subsidy.credit if subsidy else 0.0,
            excess_advance_repayment=subsidy.repayment if subsidy else 0.0,
            nonrefundable_total=to_money(care_credit + education_credit),
        )

    def _calculate_total_payments(
        self,
        pay: PaymentInputs,
        wages: float,
        credits: CreditsBreakdown,
    ) -> PaymentsBreakdown:
        """
        Calculate total tax payments and refundable credits.

        Includes:
        - W-2 federal tax withheld
        - Estimated tax payments
        - Excess Social Security withholding (expected tax on wages up to the wage base)
        - Net premium tax credit
        """
        cfg = self.config
        expected_ss = to_money(min(wages, cfg.ss_wage_base) * cfg.ss_employee_rate)
        excess_ss = to_money(max(0.0, pay.social_security_withheld - expected_ss))
        refundable = credits.premium_tax_credit

        total = to_money(pay.federal_withholding + pay.estimated_payments + excess_ss + refundable)
        return PaymentsBreakdown(
            federal_withholding=to_money(pay.federal_withholding),
            estimated_payments=to_money(pay.estimated_payments),
            expected_social_security=expected_ss,
            excess_social_security=excess_ss,
            refundable_credits=refundable,
            total=total,
        )
