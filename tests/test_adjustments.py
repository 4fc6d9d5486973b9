"""Tests for Schedule 1 Part II and Schedule 1-A adjustments."""

import pytest

from taxguide.calculator.adjustments import compute_adjustments
from taxguide.models.adjustments import AdjustmentInputs
from taxguide.models.taxpayer import FilingProfile, FilingStatus


@pytest.fixture
def single():
    return FilingProfile()


class TestStudentLoanInterest:

    def test_partially_phased_out(self, config, single):
        adj = AdjustmentInputs(has_student_loan_interest=True, student_loan_interest=2500)
        result = compute_adjustments(adj, single, 90_000, config)
        assert result.student_loan_interest == pytest.approx(1666.67, abs=0.01)

    def test_capped_at_2500(self, config, single):
        adj = AdjustmentInputs(has_student_loan_interest=True, student_loan_interest=4000)
        assert compute_adjustments(adj, single, 50_000, config).student_loan_interest == 2500.0

    def test_amount_ignored_without_flag(self, config, single):
        adj = AdjustmentInputs(has_student_loan_interest=False, student_loan_interest=2500)
        assert compute_adjustments(adj, single, 50_000, config).student_loan_interest == 0.0

    def test_fully_phased_out(self, config, single):
        adj = AdjustmentInputs(has_student_loan_interest=True, student_loan_interest=2500)
        assert compute_adjustments(adj, single, 100_000, config).student_loan_interest == 0.0


class TestIRA:

    def test_limit_under_50(self, config, single):
        adj = AdjustmentInputs(has_ira_contribution=True, ira_contribution=9000)
        result = compute_adjustments(adj, single, 50_000, config)
        assert result.ira_deduction == 7000.0
        assert result.ira_contribution == 9000.0

    def test_catch_up_at_50(self, config):
        profile = FilingProfile(age_50_or_older=True)
        adj = AdjustmentInputs(has_ira_contribution=True, ira_contribution=9000)
        assert compute_adjustments(adj, profile, 50_000, config).ira_deduction == 8000.0

    def test_phase_out_when_covered_by_workplace_plan(self, config, single):
        adj = AdjustmentInputs(has_ira_contribution=True, ira_contribution=7000)
        assert compute_adjustments(adj, single, 84_000, config).ira_deduction == pytest.approx(3500.0)

    def test_no_phase_out_without_workplace_plan(self, config, single):
        adj = AdjustmentInputs(
            has_ira_contribution=True, ira_contribution=7000, ira_covered_by_workplace_plan=False,
        )
        assert compute_adjustments(adj, single, 300_000, config).ira_deduction == 7000.0


class TestHSA:

    def test_self_only_limit(self, config, single):
        adj = AdjustmentInputs(has_hsa_contribution=True, hsa_contribution=6000)
        assert compute_adjustments(adj, single, 500_000, config).hsa_deduction == 4300.0

    def test_family_limit(self, config, single):
        adj = AdjustmentInputs(has_hsa_contribution=True, hsa_contribution=10_000, hsa_family_coverage="yes")
        assert compute_adjustments(adj, single, 500_000, config).hsa_deduction == 8550.0


class TestScheduleOneA:

    def test_tips_capped_then_phased(self, config, single):
        adj = AdjustmentInputs(has_qualified_tips=True, qualified_tips=30_000)
        assert compute_adjustments(adj, single, 100_000, config).tips_deduction == 25_000.0
        assert compute_adjustments(adj, single, 162_500, config).tips_deduction == pytest.approx(12_500.0)

    def test_overtime_cap(self, config, single):
        adj = AdjustmentInputs(has_qualified_overtime=True, qualified_overtime=20_000)
        assert compute_adjustments(adj, single, 80_000, config).overtime_deduction == 12_500.0

    def test_vehicle_loan_interest(self, config, single):
        adj = AdjustmentInputs(has_vehicle_loan_interest=True, vehicle_loan_interest=12_000)
        assert compute_adjustments(adj, single, 125_000, config).vehicle_loan_interest_deduction == pytest.approx(5000.0)

    def test_senior_deduction_from_profile(self, config):
        profile = FilingProfile(is_senior=True)
        result = compute_adjustments(AdjustmentInputs(), profile, 125_000, config)
        assert result.senior_deduction == pytest.approx(3000.0)

    def test_senior_deduction_from_adjustments(self, config, single):
        result = compute_adjustments(AdjustmentInputs(is_senior=True), single, 50_000, config)
        assert result.senior_deduction == 6000.0

    def test_no_senior_deduction_by_default(self, config, single):
        assert compute_adjustments(AdjustmentInputs(), single, 50_000, config).senior_deduction == 0.0


class TestTotals:

    def test_subtotals_and_total(self, config):
        profile = FilingProfile(filing_status=FilingStatus.HEAD_OF_HOUSEHOLD, is_senior=True)
        adj = AdjustmentInputs(
            has_student_loan_interest=True, student_loan_interest=1000,
            has_ira_contribution=True, ira_contribution=2000,
            has_hsa_contribution=True, hsa_contribution=3000,
            has_qualified_tips=True, qualified_tips=4000,
            has_qualified_overtime=True, qualified_overtime=5000,
            has_vehicle_loan_interest=True, vehicle_loan_interest=600,
        )
        result = compute_adjustments(adj, profile, 60_000, config)

        assert result.schedule_1_part2_total == 6000.0
        assert result.schedule_1a_total == 4000 + 5000 + 600 + 6000
        assert result.total == 6000.0 + 15_600.0

    def test_nothing_claimed(self, config, single):
        result = compute_adjustments(AdjustmentInputs(), single, 0, config)
        assert result.total == 0.0
