"""
Federal and State Tax Calculator for the 2025 Tax Year.

Runs the federal engine, then the flat-rate state return that starts from
federal taxable income, and returns one immutable ``TaxResult``.
"""

import logging
from dataclasses import replace
from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from taxguide.calculator.engine import FederalTaxEngine
from taxguide.calculator.state import StateTaxEngine
from taxguide.calculator.tax_year_config import TaxYearConfig
from taxguide.config.settings import get_settings
from taxguide.models.tax_result import TaxResult
from taxguide.models.tax_return import TaxReturnInputs

logger = logging.getLogger(__name__)

ReturnInputs = Union[TaxReturnInputs, Mapping[str, Any]]


def as_inputs(inputs: ReturnInputs) -> TaxReturnInputs:
    """Validate a plain mapping into ``TaxReturnInputs``; models pass through."""
    if isinstance(inputs, TaxReturnInputs):
        return inputs
    if isinstance(inputs, Mapping):
        return TaxReturnInputs.model_validate(dict(inputs))
    raise TypeError(f"Expected TaxReturnInputs or a mapping, got {type(inputs).__name__}")


class TaxCalculator:
    """Calculate federal and state income tax for one return at a time"""

    def __init__(
        self,
        config: Optional[TaxYearConfig] = None,
        include_state: bool = True
    ):
        """
        Initialize the tax calculator.

        Args:
            config: Tax year configuration. Defaults to the year named by
                ``EngineSettings.tax_year`` (2025 unless TAXGUIDE_TAX_YEAR is set).
            include_state: Whether to calculate the state return. Defaults to True.
        """
        self._config = config or get_year_config(get_settings().tax_year)
        self._federal_engine = FederalTaxEngine(config=self._config)
        self._state_engine = StateTaxEngine(self._config.state) if include_state else None

    @property
    def config(self) -> TaxYearConfig:
        return self._config

    def compute(self, inputs: ReturnInputs) -> TaxResult:
        """
        Perform the complete calculation.

        Args:
            inputs: ``TaxReturnInputs`` or a mapping of the same shape

        Returns:
            TaxResult with federal figures and, when enabled, the state return
        """
        inputs = as_inputs(inputs)
        if inputs.tax_year != self._config.tax_year:
            logger.warning(
                f"Return is for {inputs.tax_year} but calculator is configured for "
                f"{self._config.tax_year}; using {self._config.tax_year} parameters"
            )

        result = self._federal_engine.calculate(inputs)
        if self._state_engine is None:
            return result

        state = self._state_engine.calculate(inputs.state, result.taxable_income)
        return replace(result, state=state)


@lru_cache(maxsize=8)
def get_year_config(tax_year: int) -> TaxYearConfig:
    """Validated configuration for ``tax_year``, built once per process."""
    return TaxYearConfig.for_year(tax_year)


def compute(inputs: ReturnInputs, config: Optional[TaxYearConfig] = None) -> TaxResult:
    """
    Compute a return.

    Args:
        inputs: ``TaxReturnInputs`` or a mapping of the same shape
        config: Tax year configuration; defaults to the one for the
            return's ``tax_year``

    Raises:
        TaxConfigError: If no parameters exist for the return's tax year.
    """
    inputs = as_inputs(inputs)
    config = config or get_year_config(inputs.tax_year)
    return TaxCalculator(config=config).compute(inputs)
