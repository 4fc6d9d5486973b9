"""
taxguide: 2025 federal and Colorado income tax estimates with form-by-form
filing guidance.

    >>> import taxguide
    >>> result = taxguide.compute({"income": {"wages": 100000}})
    >>> result.taxable_income, result.base_tax
    (84250.0, 13449.0)
"""

from taxguide.calculator import TaxCalculator, TaxYearConfig, compute
from taxguide.config import TaxConfigError, get_settings
from taxguide.export import ComputationStatement
from taxguide.models import FilingStatus, TaxResult, TaxReturnInputs

__version__ = "2025.2.0"

__all__ = [
    "ComputationStatement",
    "FilingStatus",
    "TaxCalculator",
    "TaxConfigError",
    "TaxResult",
    "TaxReturnInputs",
    "TaxYearConfig",
    "compute",
    "get_settings",
]
