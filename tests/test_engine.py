"""
Tests for the federal engine and the compute() entry point.

Tests cover:
- Wage-only returns (single and head of household)
- Capital loss limitation and carryover
- Preferential rates on qualified dividends
- Itemized deductions (medical floor, SALT cap)
- NIIT and Additional Medicare Tax
- Credits and premium tax credit reconciliation
- Payments, excess Social Security withholding, refund/owed
- Input sanitation and determinism
"""

import pytest

import taxguide
from taxguide.calculator.engine import FederalTaxEngine
from taxguide.config.tax_config_loader import TaxConfigError
from taxguide.models._numeric import MAX_AMOUNT
from taxguide.models.tax_return import TaxReturnInputs


class TestWageOnlyReturns:

    def test_single_100k_wages(self, calculator):
        result = calculator.compute({"income": {"wages": 100_000}})

        assert result.agi == 100_000.0
        assert result.deductions.deduction_amount == 15_750.0
        assert result.deductions.uses_itemized is False
        assert result.taxable_income == 84_250.0
        assert result.ordinary_tax == 13_449.0
        assert result.base_tax == 13_449.0
        assert result.total_tax == 13_449.0
        assert result.marginal_rate == 0.22
        assert result.effective_tax_rate == pytest.approx(0.13449)

    def test_refund_with_withholding(self, calculator):
        result = calculator.compute({
            "income": {"wages": 100_000},
            "payments": {"federal_withholding": 15_000},
        })
        assert result.refund == 1_551.0
        assert result.amount_owed == 0.0
        assert result.is_refund

    def test_amount_owed_without_withholding(self, calculator):
        result = calculator.compute({"income": {"wages": 100_000}})
        assert result.amount_owed == 13_449.0
        assert result.refund == 0.0
        assert result.balance == -13_449.0

    def test_head_of_household(self, calculator):
        result = calculator.compute({
            "profile": {"filing_status": "Head of Household"},
            "income": {"wages": 100_000},
        })
        assert result.filing_status == "head_of_household"
        assert result.taxable_income == 76_375.0
        assert result.base_tax == pytest.approx(76_375 * 0.22 - 6_825)

    def test_empty_return(self, calculator):
        result = calculator.compute(TaxReturnInputs())
        assert result.total_tax == 0.0
        assert result.refund == 0.0
        assert result.amount_owed == 0.0
        assert result.effective_tax_rate == 0.0
        assert result.marginal_rate == 0.0


class TestCapitalGains:

    def test_capital_loss_limited_to_3000(self, calculator):
        result = calculator.compute({
            "income": {"wages": 50_000, "short_term_capital_gain": -10_000},
        })
        assert result.income.net_capital_gain == -10_000.0
        assert result.income.capital_gain_for_return == -3_000.0
        assert result.income.capital_loss_carryover == 7_000.0
        assert result.income.total_income == 47_000.0

    def test_small_loss_fully_deductible(self, calculator):
        result = calculator.compute({"income": {"wages": 50_000, "long_term_capital_gain": -1_200}})
        assert result.income.capital_gain_for_return == -1_200.0
        assert result.income.capital_loss_carryover == 0.0
        assert result.preferential_income == 0.0

    def test_qualified_dividends_stack_on_ordinary_income(self, calculator):
        result = calculator.compute({
            "income": {"wages": 60_000, "ordinary_dividends": 5_000, "qualified_dividends": 5_000},
        })
        assert result.taxable_income == 49_250.0
        assert result.preferential_income == 5_000.0
        assert result.ordinary_taxable_income == 44_250.0
        assert result.ordinary_tax == pytest.approx(5_071.5)
        # 4,100 fits in the 0% bracket, 900 at 15%
        assert result.preferential_tax == pytest.approx(135.0)
        assert result.base_tax == pytest.approx(5_206.5)

    def test_preferential_income_limited_to_taxable_income(self, calculator):
        result = calculator.compute({"income": {"long_term_capital_gain": 10_000}})
        assert result.taxable_income == 0.0
        assert result.preferential_income == 0.0
        assert result.base_tax == 0.0

    def test_short_term_gain_taxed_as_ordinary(self, calculator):
        result = calculator.compute({"income": {"wages": 60_000, "short_term_capital_gain": 5_000}})
        assert result.preferential_income == 0.0
        assert result.ordinary_taxable_income == 49_250.0


class TestDeductions:

    def test_salt_cap_and_itemizing(self, calculator):
        result = calculator.compute({
            "income": {"wages": 200_000},
            "deductions": {"state_local_tax": 50_000},
        })
        assert result.deductions.salt_deduction == 40_000.0
        assert result.deductions.uses_itemized is True
        assert result.deductions.deduction_amount == 40_000.0
        assert result.taxable_income == 160_000.0

    def test_medical_floor(self, calculator):
        result = calculator.compute({
            "income": {"wages": 100_000},
            "deductions": {"medical_expenses": 10_000},
        })
        assert result.deductions.medical_floor == 7_500.0
        assert result.deductions.medical_deduction == 2_500.0
        assert result.deductions.uses_itemized is False

    def test_itemized_equal_to_standard_uses_standard(self, calculator):
        result = calculator.compute({
            "income": {"wages": 100_000},
            "deductions": {"charitable_cash": 15_750},
        })
        assert result.deductions.itemized_total == 15_750.0
        assert result.deductions.uses_itemized is False


class TestAdjustmentsReduceAGI:

    def test_student_loan_interest_uses_total_income_as_magi(self, calculator):
        result = calculator.compute({
            "income": {"wages": 90_000},
            "adjustments": {"has_student_loan_interest": "yes", "student_loan_interest": 2500},
        })
        assert result.adjustments.student_loan_interest == pytest.approx(1666.67)
        assert result.agi == pytest.approx(88_333.33)

    def test_schedule_1a_reduces_agi(self, calculator):
        result = calculator.compute({
            "income": {"wages": 60_000},
            "adjustments": {"has_qualified_tips": True, "qualified_tips": 8_000},
        })
        assert result.adjustments.schedule_1a_total == 8_000.0
        assert result.agi == 52_000.0


class TestSurtaxes:

    def test_niit_and_additional_medicare(self, calculator):
        result = calculator.compute({"income": {"wages": 250_000, "taxable_interest": 10_000}})

        assert result.net_investment_income == 10_000.0
        assert result.niit == pytest.approx(380.0)
        assert result.additional_medicare_tax == pytest.approx(450.0)
        assert result.total_tax == pytest.approx(result.base_tax + 380.0 + 450.0)

    def test_niit_limited_by_agi_excess(self, calculator):
        result = calculator.compute({"income": {"wages": 190_000, "ordinary_dividends": 20_000}})
        assert result.niit == pytest.approx(10_000 * 0.038)

    def test_no_surtaxes_below_thresholds(self, calculator):
        result = calculator.compute({"income": {"wages": 150_000, "taxable_interest": 10_000}})
        assert result.niit == 0.0
        assert result.additional_medicare_tax == 0.0


class TestCredits:

    @pytest.mark.parametrize("wages,expected", [
        (20_000, 1_050.0),
        (30_000, 900.0),
        (40_000, 750.0),
        (50_000, 600.0),
    ])
    def test_dependent_care_tiers(self, calculator, wages, expected):
        result = calculator.compute({
            "income": {"wages": wages},
            "credits": {"has_dependent_care": True, "dependent_care_expenses": 5_000},
        })
        assert result.credits.dependent_care_credit == pytest.approx(expected)

    def test_education_credit_cap(self, calculator):
        low = calculator.compute({
            "income": {"wages": 60_000},
            "credits": {"has_education_expenses": True, "education_expenses": 5_000},
        })
        high = calculator.compute({
            "income": {"wages": 60_000},
            "credits": {"has_education_expenses": True, "education_expenses": 20_000},
        })
        assert low.credits.education_credit == 1_000.0
        assert high.credits.education_credit == 2_000.0

    def test_nonrefundable_credits_cannot_go_below_zero(self, calculator):
        result = calculator.compute({
            "income": {"wages": 20_000},
            "credits": {"has_education_expenses": True, "education_expenses": 20_000},
        })
        assert result.tax_after_credits == 0.0

    def test_premium_tax_credit_is_refundable(self, calculator):
        result = calculator.compute({
            "income": {"wages": 40_000},
            "credits": {"marketplace": {
                "family_size": 1,
                "enrollment_premium": 9_000,
                "benchmark_premium": 9_500,
                "advance_payments": 7_000,
            }},
        })
        assert result.credits.premium_tax_credit == pytest.approx(810.54)
        assert result.payments.refundable_credits == pytest.approx(810.54)
        assert result.tax_after_credits == pytest.approx(24_250 * 0.12 - 238.5)

    def test_excess_advance_credit_increases_tax(self, calculator):
        result = calculator.compute({
            "income": {"wages": 40_000},
            "credits": {"marketplace": {
                "family_size": 1,
                "enrollment_premium": 9_000,
                "benchmark_premium": 9_500,
                "advance_payments": 9_000,
            }},
        })
        assert result.credits.excess_advance_repayment == pytest.approx(1_189.46)
        assert result.tax_after_credits == pytest.approx(2_671.5 + 1_189.46)

    def test_no_marketplace_coverage(self, calculator):
        result = calculator.compute({"income": {"wages": 40_000}})
        assert result.credits.subsidy is None


class TestPayments:

    def test_excess_social_security_single_employer_wages(self, calculator):
        result = calculator.compute({
            "income": {"wages": 100_000},
            "payments": {"social_security_withheld": 7_000},
        })
        assert result.payments.expected_social_security == 6_200.0
        assert result.payments.excess_social_security == 800.0

    def test_expected_social_security_capped_at_wage_base(self, calculator):
        result = calculator.compute({
            "income": {"wages": 200_000},
            "payments": {"social_security_withheld": 12_000},
        })
        assert result.payments.expected_social_security == pytest.approx(10_918.2)
        assert result.payments.excess_social_security == pytest.approx(1_081.8)

    def test_total_payments(self, calculator):
        result = calculator.compute({
            "income": {"wages": 100_000},
            "payments": {"federal_withholding": 10_000, "estimated_payments": 2_000},
        })
        assert result.payments.total == 12_000.0


class TestEntityIncomeOnReturn:

    def test_allocated_income_flows_to_schedule_1(self, calculator):
        result = calculator.compute({
            "income": {
                "wages": 50_000,
                "entity_return": {
                    "gross_receipts": 500_000,
                    "cost_of_goods_sold": 200_000,
                    "officer_compensation": 80_000,
                    "salaries_and_wages": 50_000,
                    "other_deductions": 20_000,
                    "ownership_percent": 50,
                },
            },
        })
        assert result.income.entity.allocated_income == 75_000.0
        assert result.income.additional_income == 75_000.0
        assert result.income.total_income == 125_000.0


class TestInvariants:

    SCENARIOS = [
        {},
        {"income": {"wages": 100_000}},
        {"income": {"wages": 100_000}, "payments": {"federal_withholding": 13_449}},
        {"income": {"wages": 40_000}, "payments": {"federal_withholding": 9_000}},
        {"income": {"wages": 30_000, "short_term_capital_gain": -50_000}},
        {"income": {"wages": 700_000, "qualified_dividends": 50_000, "long_term_capital_gain": 100_000}},
    ]

    @pytest.mark.parametrize("data", SCENARIOS)
    def test_refund_xor_owed(self, calculator, data):
        result = calculator.compute(data)
        assert result.refund >= 0 and result.amount_owed >= 0
        assert not (result.refund > 0 and result.amount_owed > 0)
        assert result.refund - result.amount_owed == pytest.approx(result.balance)

    @pytest.mark.parametrize("data", SCENARIOS)
    def test_idempotent(self, calculator, data):
        assert calculator.compute(data) == calculator.compute(data)

    def test_inputs_not_mutated(self, calculator, make_inputs):
        inputs = make_inputs(income={"wages": 100_000}, deductions={"state_local_tax": 90_000})
        before = inputs.model_dump()
        calculator.compute(inputs)
        assert inputs.model_dump() == before


class TestSanitation:

    def test_currency_text_and_blanks(self, calculator):
        messy = calculator.compute({
            "income": {"wages": " $100,000 ", "taxable_interest": ""},
            "payments": {"federal_withholding": None, "estimated_payments": "n/a"},
        })
        clean = calculator.compute({"income": {"wages": 100_000}})
        assert messy == clean

    def test_negative_and_non_finite_values(self, calculator):
        result = calculator.compute({
            "income": {"wages": -5_000, "taxable_interest": float("nan"), "other_income": float("inf")},
        })
        assert result.income.total_income == 0.0

    @pytest.mark.parametrize("status", ["hoh", "HOH", "Head of Household", "head-of-household"])
    def test_filing_status_spellings(self, calculator, status):
        result = calculator.compute({"profile": {"filing_status": status}})
        assert result.filing_status == "head_of_household"

    def test_unknown_filing_status_defaults_to_single(self, calculator):
        result = calculator.compute({"profile": {"filing_status": "married_joint"}})
        assert result.filing_status == "single"

    def test_missing_sections(self, calculator):
        result = calculator.compute({"income": None, "payments": "bad"})
        assert result.total_tax == 0.0

    @pytest.mark.parametrize("wages", [1e27, "1e30", "$1,000,000,000,000,000,000,000,000,000", 10**400])
    def test_huge_amounts_are_clamped(self, calculator, wages):
        result = calculator.compute({"income": {"wages": wages}})
        assert result.income.wages == MAX_AMOUNT
        assert result.taxable_income == MAX_AMOUNT - 15_750
        assert result.refund == 0.0
        assert result.amount_owed == result.total_tax

    def test_huge_negative_capital_loss(self, calculator):
        result = calculator.compute({"income": {"wages": 50_000, "short_term_capital_gain": -(10**400)}})
        assert result.income.capital_gain_for_return == -3_000.0
        assert result.income.capital_loss_carryover == MAX_AMOUNT - 3_000

    def test_huge_family_size(self, calculator):
        result = calculator.compute({
            "income": {"wages": 40_000},
            "credits": {"marketplace": {
                "family_size": 1e30,
                "enrollment_premium": 9_000,
                "benchmark_premium": 9_500,
                "advance_payments": 7_000,
            }},
        })
        subsidy = result.credits.subsidy
        assert subsidy.family_size == int(MAX_AMOUNT)
        assert subsidy.applicable_contribution_percent == 0.0
        assert subsidy.allowed_credit == 9_000.0

    def test_huge_values_everywhere(self, calculator):
        huge = 10**400
        result = calculator.compute({
            "tax_year": 2025,
            "income": {"wages": huge, "taxable_interest": huge, "entity_return": {"gross_receipts": huge}},
            "adjustments": {"has_qualified_tips": True, "qualified_tips": huge},
            "deductions": {"state_local_tax": huge, "medical_expenses": huge},
            "payments": {"federal_withholding": huge, "social_security_withheld": huge},
            "state": {"withholding": huge, "pension_subtraction": huge},
        })
        assert result.refund == 0.0 or result.amount_owed == 0.0
        assert result.state.taxable_income >= 0.0


class TestComputeEntryPoint:

    def test_module_level_compute(self):
        result = taxguide.compute({"income": {"wages": 100_000}})
        assert result.base_tax == 13_449.0
        assert result.state is not None

    def test_compute_with_explicit_config(self, config):
        result = taxguide.compute(TaxReturnInputs(), config=config)
        assert result.tax_year == 2025

    def test_unsupported_year(self):
        with pytest.raises(TaxConfigError):
            taxguide.compute({"tax_year": 1999})

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            taxguide.compute(["wages", 100_000])

    def test_federal_engine_has_no_state(self, config):
        result = FederalTaxEngine(config).calculate(TaxReturnInputs())
        assert result.state is None
