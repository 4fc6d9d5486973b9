"""Tests for S corporation pass-through income."""

import pytest

from taxguide.calculator.entity_income import clamp_ownership, compute_entity_income
from taxguide.models.income import EntityReturn


def _entity(**overrides) -> EntityReturn:
    values = dict(
        name="Acme Widgets, Inc.",
        gross_receipts=500_000,
        cost_of_goods_sold=200_000,
        officer_compensation=80_000,
        salaries_and_wages=50_000,
        other_deductions=20_000,
        ownership_percent=100,
    )
    values.update(overrides)
    return EntityReturn(**values)


class TestComputeEntityIncome:

    def test_profitable_entity_full_ownership(self):
        result = compute_entity_income(_entity())

        assert result.total_income == 300_000.0
        assert result.total_deductions == 150_000.0
        assert result.ordinary_income == 150_000.0
        assert result.allocated_income == 150_000.0
        assert result.ownership_percent == 100.0

    def test_partial_ownership(self):
        result = compute_entity_income(_entity(ownership_percent=40))
        assert result.allocated_income == 60_000.0

    def test_returns_and_other_income(self):
        result = compute_entity_income(_entity(returns_and_allowances=10_000, other_income=-5_000))
        assert result.total_income == 285_000.0
        assert result.ordinary_income == 135_000.0

    def test_loss_flows_through(self):
        entity = EntityReturn(gross_receipts=10_000, rents=30_000)
        result = compute_entity_income(entity)
        assert result.ordinary_income == -20_000.0
        assert result.allocated_income == -20_000.0

    def test_all_ten_deduction_categories_count(self):
        entity = EntityReturn(
            gross_receipts=100_000,
            officer_compensation=1, salaries_and_wages=2, repairs=3, rents=4,
            taxes_and_licenses=5, interest=6, depreciation=7, advertising=8,
            employee_benefits=9, other_deductions=10,
        )
        assert compute_entity_income(entity).total_deductions == 55.0

    def test_entered_as_text(self):
        entity = EntityReturn(gross_receipts="$500,000", cost_of_goods_sold="200,000", ownership_percent="")
        result = compute_entity_income(entity)
        assert result.total_income == 300_000.0
        assert result.ownership_percent == 100.0


class TestOwnershipClamp:

    @pytest.mark.parametrize("entered,expected", [
        (100, 100.0),
        (50, 50.0),
        (150, 100.0),
        (0, 0.01),
        (-5, 0.01),
        (0.01, 0.01),
    ])
    def test_clamped_into_range(self, entered, expected):
        assert clamp_ownership(entered) == expected

    def test_zero_ownership_allocates_minimum_share(self):
        result = compute_entity_income(_entity(ownership_percent=0))
        assert result.ownership_percent == 0.01
        assert result.allocated_income == 15.0
