"""S corporation pass-through income (Form 1120-S page 1 to Schedule E, Part II)."""

import logging

from taxguide.calculator.decimal_math import to_money
from taxguide.models.income import EntityReturn
from taxguide.models.tax_result import EntityIncomeBreakdown

logger = logging.getLogger(__name__)

MIN_OWNERSHIP_PERCENT = 0.01
MAX_OWNERSHIP_PERCENT = 100.0


def clamp_ownership(percent: float) -> float:
    """Keep ownership within [0.01, 100]; zero or negative entries become the minimum."""
    return min(MAX_OWNERSHIP_PERCENT, max(MIN_OWNERSHIP_PERCENT, percent))


def compute_entity_income(entity: EntityReturn) -> EntityIncomeBreakdown:
    """
    Compute ordinary business income and the shareholder's allocated share.

    Total income is gross receipts less returns and cost of goods sold plus
    other income (line 6); ordinary income is line 6 less total deductions
    (line 21) and may be a loss.
    """
    total_income = (
        entity.gross_receipts
        - entity.returns_and_allowances
        - entity.cost_of_goods_sold
        + entity.other_income
    )
    total_deductions = entity.get_total_deductions()
    ordinary_income = total_income - total_deductions

    ownership = clamp_ownership(entity.ownership_percent)
    if ownership != entity.ownership_percent:
        logger.debug(f"Ownership {entity.ownership_percent}% clamped to {ownership}%")
    allocated = ordinary_income * ownership / 100

    return EntityIncomeBreakdown(
        total_income=to_money(total_income),
        total_deductions=to_money(total_deductions),
        ordinary_income=to_money(ordinary_income),
        ownership_percent=ownership,
        allocated_income=to_money(allocated),
    )
