"""State tax configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class StateTaxConfig:
    """
    Configuration for a flat-rate state and tax year.

    The state return starts from federal taxable income (Form 1040, line 15),
    adds state additions, removes state subtractions and applies one rate.
    """

    state_code: str
    state_name: str
    tax_year: int
    flat_rate: float
    starts_from: str = "federal_taxable_income"

    @classmethod
    def from_parameters(cls, data: Dict[str, Any], tax_year: int) -> "StateTaxConfig":
        return cls(
            state_code=str(data["state_code"]).upper(),
            state_name=str(data.get("state_name", data["state_code"])),
            tax_year=tax_year,
            flat_rate=float(data["flat_rate"]),
            starts_from=str(data.get("starts_from", "federal_taxable_income")),
        )
