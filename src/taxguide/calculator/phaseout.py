"""Linear phase-out of income-limited deductions and credits."""

from __future__ import annotations

from dataclasses import dataclass

from taxguide.config.tax_config_loader import TaxConfigError


def phase_out(amount: float, income_measure: float, start: float, end: float) -> float:
    """
    Reduce ``amount`` linearly to zero as ``income_measure`` rises from
    ``start`` to ``end``.

    - income at or below ``start``: full amount
    - income at or above ``end``: zero
    - in between: ``amount * (1 - (income - start) / (end - start))``

    ``end > start`` is guaranteed by ``PhaseoutRange``; callers passing raw
    thresholds are responsible for it.
    """
    if income_measure <= start:
        return amount
    if income_measure >= end:
        return 0.0
    ratio = (income_measure - start) / (end - start)
    return amount * (1 - ratio)


@dataclass(frozen=True)
class PhaseoutRange:
    """Income band over which a benefit phases out."""

    start: float
    end: float

    def __post_init__(self):
        if self.end <= self.start:
            raise TaxConfigError(
                f"Phase-out end ({self.end}) must be greater than start ({self.start})"
            )

    def apply(self, amount: float, income_measure: float) -> float:
        return phase_out(amount, income_measure, self.start, self.end)
