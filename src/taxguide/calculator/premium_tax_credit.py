"""
Premium Tax Credit reconciliation (Form 8962).

The credit is the benchmark (second-lowest-cost silver plan) premium less the
household's expected contribution, limited to the premium actually paid.
Advance payments received during the year are then reconciled against it.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from taxguide.calculator.decimal_math import to_money, to_rate
from taxguide.calculator.tax_year_config import ApplicablePercentageBand, TaxYearConfig
from taxguide.models._numeric import coerce_amount
from taxguide.models.tax_result import SubsidyReconciliation

logger = logging.getLogger(__name__)


def normalize_family_size(family_size: float) -> int:
    """Round to the nearest whole person (halves round up); at least 1."""
    size = coerce_amount(family_size, default=1.0)
    rounded = int(Decimal(str(size)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(1, rounded)


def poverty_line(family_size: int, config: TaxYearConfig) -> float:
    """Federal poverty guideline for the family size, extended past the table."""
    guidelines = config.poverty_guidelines
    largest = max(guidelines)
    if family_size <= largest:
        return guidelines[family_size]
    extra = family_size - largest
    return guidelines[largest] + extra * config.poverty_guideline_additional_person


def applicable_percentage(percent_of_poverty: float, bands: Sequence[ApplicablePercentageBand]) -> float:
    """
    Share of household income the household is expected to pay.

    Zero below the first band; interpolated within each band; the last band
    is unbounded and flat.
    """
    if not bands or percent_of_poverty < bands[0].lower_pct:
        return 0.0
    for band in bands:
        if percent_of_poverty < band.upper_pct:
            return band.rate_at(percent_of_poverty)
    return bands[-1].end_rate


def reconcile_subsidy(
    household_income: float,
    family_size: float,
    enrollment_premium: float,
    benchmark_premium: float,
    advance_paid: float,
    config: TaxYearConfig,
) -> SubsidyReconciliation:
    """
    Reconcile advance premium tax credit payments.

    A positive ``net_credit`` is additional credit (line 26); a negative one
    is excess advance credit to repay (line 29). Repayment is not capped.
    """
    size = normalize_family_size(family_size)
    line = poverty_line(size, config)
    percent = household_income / line * 100 if line > 0 else 0.0
    rate = applicable_percentage(percent, config.applicable_percentage_bands)

    contribution = household_income * rate if household_income > 0 else 0.0
    max_credit = max(0.0, benchmark_premium - contribution)
    allowed = min(enrollment_premium, max_credit)
    net = allowed - advance_paid

    logger.debug(
        f"Form 8962: size={size} FPL={line} pct={percent:.2f} rate={rate:.6f} "
        f"allowed={allowed:.2f} advance={advance_paid:.2f} net={net:.2f}"
    )

    return SubsidyReconciliation(
        family_size=size,
        poverty_line=to_money(line),
        poverty_line_percent=to_money(percent),
        applicable_contribution_percent=to_rate(rate),
        annual_contribution=to_money(contribution),
        max_credit=to_money(max_credit),
        allowed_credit=to_money(allowed),
        advance_paid=to_money(advance_paid),
        net_credit=to_money(net),
    )
