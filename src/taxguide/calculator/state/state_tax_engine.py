"""State tax engine for flat-rate states that start from federal taxable income."""

from __future__ import annotations

import logging

from taxguide.calculator.decimal_math import to_money
from taxguide.calculator.state.state_tax_config import StateTaxConfig
from taxguide.models.state import StateInputs
from taxguide.models.tax_result import StateTaxResult

logger = logging.getLogger(__name__)


class StateTaxEngine:
    """
    Computes the state return (Colorado DR 0104 for 2025).

    State taxable income is federal taxable income plus additions less
    subtractions, never below zero; one flat rate applies to all of it.
    """

    def __init__(self, config: StateTaxConfig):
        self.config = config

    def calculate(self, inputs: StateInputs, federal_taxable_income: float) -> StateTaxResult:
        """
        Calculate state tax, payments and refund or amount owed.

        Args:
            inputs: State additions, subtractions and payments
            federal_taxable_income: Form 1040 line 15

        Returns:
            StateTaxResult with amounts rounded to cents
        """
        cfg = self.config

        additions = inputs.additions
        subtractions = inputs.get_total_subtractions()
        taxable = max(0.0, federal_taxable_income + additions - subtractions)
        tax = to_money(taxable * cfg.flat_rate)

        total_payments = to_money(inputs.withholding + inputs.estimated_payments + inputs.other_credits)
        balance = to_money(total_payments - tax)

        logger.debug(
            f"{cfg.state_code} {cfg.tax_year}: taxable={taxable:.2f} tax={tax:.2f} balance={balance:.2f}"
        )

        return StateTaxResult(
            state_code=cfg.state_code,
            state_name=cfg.state_name,
            federal_taxable_income=to_money(federal_taxable_income),
            additions=to_money(additions),
            subtractions=to_money(subtractions),
            taxable_income=to_money(taxable),
            rate=cfg.flat_rate,
            tax=tax,
            withholding=to_money(inputs.withholding),
            estimated_payments=to_money(inputs.estimated_payments),
            credits=to_money(inputs.other_credits),
            total_payments=total_payments,
            balance=balance,
            refund=to_money(max(0.0, balance)),
            amount_owed=to_money(max(0.0, -balance)),
        )
