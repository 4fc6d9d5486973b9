from taxguide.calculator.brackets import (
    PreferentialBracket,
    TaxBracket,
    bracket_tax,
    marginal_rate,
    stacked_rate_tax,
)
from taxguide.calculator.phaseout import PhaseoutRange, phase_out
from taxguide.calculator.tax_year_config import ApplicablePercentageBand, TaxYearConfig
from taxguide.calculator.entity_income import compute_entity_income
from taxguide.calculator.premium_tax_credit import reconcile_subsidy
from taxguide.calculator.adjustments import compute_adjustments
from taxguide.calculator.engine import FederalTaxEngine
from taxguide.calculator.state import StateTaxConfig, StateTaxEngine
from taxguide.calculator.tax_calculator import TaxCalculator, compute

__all__ = [
    "ApplicablePercentageBand",
    "FederalTaxEngine",
    "PhaseoutRange",
    "PreferentialBracket",
    "StateTaxConfig",
    "StateTaxEngine",
    "TaxBracket",
    "TaxCalculator",
    "TaxYearConfig",
    "bracket_tax",
    "compute",
    "compute_adjustments",
    "compute_entity_income",
    "marginal_rate",
    "phase_out",
    "reconcile_subsidy",
    "stacked_rate_tax",
]
