from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from taxguide.calculator.brackets import (
    INFINITY,
    PreferentialBracket,
    TaxBracket,
    cumulative_tax,
    derive_subtractions,
)
from taxguide.calculator.phaseout import PhaseoutRange
from taxguide.calculator.state.state_tax_config import StateTaxConfig
from taxguide.config.tax_config_loader import TaxConfigError, TaxConfigLoader, get_config_loader

logger = logging.getLogger(__name__)

BracketTable = Dict[str, Tuple[TaxBracket, ...]]
PreferentialTable = Dict[str, Tuple[PreferentialBracket, ...]]
PhaseoutTable = Dict[str, PhaseoutRange]

# Tolerance for published subtraction constants (one cent).
SUBTRACTION_TOLERANCE = 0.01

# Per-status tables every filing status must appear in.
STATUS_TABLES = (
    "student_loan_phaseout",
    "ira_phaseout_covered",
    "qualified_tips_phaseout",
    "qualified_overtime_phaseout",
    "vehicle_loan_interest_phaseout",
    "senior_deduction_phaseout",
    "niit_threshold",
    "additional_medicare_threshold",
)


@dataclass(frozen=True)
class ApplicablePercentageBand:
    """
    Form 8962 applicable figure band.

    Household income between ``lower_pct`` and ``upper_pct`` of the poverty
    line pays a share of income that rises linearly from ``start_rate`` to
    ``end_rate``.
    """

    lower_pct: float
    upper_pct: float
    start_rate: float
    end_rate: float

    def rate_at(self, percent: float) -> float:
        if math.isinf(self.upper_pct) or self.end_rate == self.start_rate:
            return self.start_rate
        position = (percent - self.lower_pct) / (self.upper_pct - self.lower_pct)
        return self.start_rate + position * (self.end_rate - self.start_rate)


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Centralized constants for a given tax year.

    Built from ``config/tax_parameters/tax_year_<YEAR>.yaml``; values should be
    reviewed annually against IRS published figures. Dict-valued fields are
    keyed by filing status value (``"single"``, ``"head_of_household"``).
    """

    tax_year: int
    standard_deduction: Dict[str, float]
    ordinary_income_brackets: BracketTable
    preferential_brackets: PreferentialTable
    capital_loss_limit: float

    # Schedule 1, Part II
    student_loan_interest_max: float
    student_loan_phaseout: PhaseoutTable
    ira_contribution_limit: float
    ira_contribution_limit_50_plus: float
    ira_phaseout_covered: PhaseoutTable
    hsa_individual_limit: float
    hsa_family_limit: float

    # Schedule 1-A
    qualified_tips_max: float
    qualified_tips_phaseout: PhaseoutTable
    qualified_overtime_max: float
    qualified_overtime_phaseout: PhaseoutTable
    vehicle_loan_interest_max: float
    vehicle_loan_interest_phaseout: PhaseoutTable
    senior_deduction_amount: float
    senior_deduction_phaseout: PhaseoutTable

    # Schedule A
    salt_cap: float
    medical_expense_floor_pct: float

    # Surtaxes and FICA
    niit_rate: float
    niit_threshold: Dict[str, float]
    additional_medicare_tax_rate: float
    additional_medicare_threshold: Dict[str, float]
    ss_wage_base: float
    ss_employee_rate: float

    # Credits
    dependent_care_expense_limit: float
    dependent_care_rate_tiers: Tuple[Tuple[float, float], ...]
    education_credit_rate: float
    education_credit_max: float

    # Form 8962
    poverty_guidelines: Dict[int, float]
    poverty_guideline_additional_person: float
    applicable_percentage_bands: Tuple[ApplicablePercentageBand, ...]

    state: StateTaxConfig

    @property
    def filing_statuses(self) -> Tuple[str, ...]:
        return tuple(self.standard_deduction)

    def brackets_for(self, filing_status: str) -> Tuple[TaxBracket, ...]:
        return self.ordinary_income_brackets[filing_status]

    def preferential_brackets_for(self, filing_status: str) -> Tuple[PreferentialBracket, ...]:
        return self.preferential_brackets[filing_status]

    def validate(self) -> None:
        """
        Check the internal consistency of the tables.

        Raises:
            TaxConfigError: On the first inconsistency found.
        """
        for status in self.filing_statuses:
            if status not in self.ordinary_income_brackets:
                raise TaxConfigError(f"{self.tax_year}: no ordinary brackets for '{status}'")
            if status not in self.preferential_brackets:
                raise TaxConfigError(f"{self.tax_year}: no capital gains brackets for '{status}'")
            self._validate_brackets(status, self.ordinary_income_brackets[status])
            self._validate_preferential(status, self.preferential_brackets[status])
            for name in STATUS_TABLES:
                if status not in getattr(self, name):
                    raise TaxConfigError(f"{self.tax_year}: {name} has no entry for '{status}'")

        self._validate_bands()

        sizes = sorted(self.poverty_guidelines)
        if not sizes or sizes != list(range(1, len(sizes) + 1)):
            raise TaxConfigError(
                f"{self.tax_year}: poverty guidelines must cover family sizes 1..N, got {sizes}"
            )

        thresholds = [floor for floor, _ in self.dependent_care_rate_tiers]
        if not thresholds or thresholds != sorted(thresholds, reverse=True) or thresholds[-1] != 0:
            raise TaxConfigError(
                f"{self.tax_year}: dependent care tiers must descend and end at 0, got {thresholds}"
            )

    def _validate_brackets(self, status: str, brackets: Tuple[TaxBracket, ...]) -> None:
        label = f"{self.tax_year} {status} brackets"
        if not brackets:
            raise TaxConfigError(f"{label}: table is empty")
        if brackets[0].lower != 0:
            raise TaxConfigError(f"{label}: first bracket must start at 0")
        if not math.isinf(brackets[-1].upper):
            raise TaxConfigError(f"{label}: last bracket must be unbounded")

        for i, bracket in enumerate(brackets):
            if bracket.upper <= bracket.lower:
                raise TaxConfigError(f"{label}: bracket {i} upper must exceed lower")
            if not 0 <= bracket.rate <= 1:
                raise TaxConfigError(f"{label}: bracket {i} rate {bracket.rate} out of range")
            if i + 1 < len(brackets) and brackets[i + 1].lower != bracket.upper:
                raise TaxConfigError(
                    f"{label}: gap between {bracket.upper} and {brackets[i + 1].lower}"
                )
            expected = bracket.rate * bracket.lower - cumulative_tax(bracket.lower, brackets[:i])
            if abs(expected - bracket.subtraction) > SUBTRACTION_TOLERANCE:
                raise TaxConfigError(
                    f"{label}: subtraction for bracket {i} is {bracket.subtraction}, "
                    f"expected {expected:.2f}"
                )

    def _validate_preferential(self, status: str, brackets: Tuple[PreferentialBracket, ...]) -> None:
        label = f"{self.tax_year} {status} capital gains brackets"
        if not brackets or not math.isinf(brackets[-1].upper):
            raise TaxConfigError(f"{label}: last bracket must be unbounded")
        uppers = [b.upper for b in brackets]
        if any(b <= a for a, b in zip(uppers, uppers[1:])):
            raise TaxConfigError(f"{label}: thresholds must be strictly ascending")

    def _validate_bands(self) -> None:
        bands = self.applicable_percentage_bands
        if not bands or not math.isinf(bands[-1].upper_pct):
            raise TaxConfigError(f"{self.tax_year}: last applicable percentage band must be unbounded")
        for i, band in enumerate(bands):
            if band.upper_pct <= band.lower_pct:
                raise TaxConfigError(f"{self.tax_year}: applicable percentage band {i} is empty")
            if i + 1 < len(bands) and bands[i + 1].lower_pct != band.upper_pct:
                raise TaxConfigError(
                    f"{self.tax_year}: applicable percentage bands are not contiguous at {band.upper_pct}"
                )

    @classmethod
    def from_parameters(cls, data: Mapping[str, Any], tax_year: int) -> "TaxYearConfig":
        """
        Build a config from a loaded parameter mapping.

        Raises:
            TaxConfigError: If a parameter is missing or malformed.
        """
        try:
            return cls._build(data, tax_year)
        except TaxConfigError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            logger.error(f"Malformed tax parameters for {tax_year}: {exc!r}")
            raise TaxConfigError(f"Malformed tax parameters for {tax_year}: {exc!r}") from exc

    @classmethod
    def _build(cls, data: Mapping[str, Any], tax_year: int) -> "TaxYearConfig":
        def amount(value) -> float:
            return INFINITY if value is None else float(value)

        def by_status(raw) -> Dict[str, float]:
            return {status: float(v) for status, v in raw.items()}

        def phaseouts(raw) -> PhaseoutTable:
            return {
                status: PhaseoutRange(float(r["start"]), float(r["end"]))
                for status, r in raw.items()
            }

        def ordinary(rows) -> Tuple[TaxBracket, ...]:
            if all(len(row) == 4 for row in rows):
                return tuple(
                    TaxBracket(float(lo), amount(hi), float(rate), float(sub))
                    for lo, hi, rate, sub in rows
                )
            # Subtraction constants omitted: derive them from the rates.
            return tuple(
                derive_subtractions([(float(r[0]), amount(r[1]), float(r[2])) for r in rows])
            )

        if not data["standard_deduction"]:
            raise TaxConfigError(f"{tax_year}: standard_deduction lists no filing statuses")
        return cls(
            tax_year=tax_year,
            standard_deduction=by_status(data["standard_deduction"]),
            ordinary_income_brackets={
                status: ordinary(rows) for status, rows in data["ordinary_income_brackets"].items()
            },
            preferential_brackets={
                status: tuple(PreferentialBracket(amount(hi), float(rate)) for hi, rate in rows)
                for status, rows in data["capital_gains_brackets"].items()
            },
            capital_loss_limit=float(data.get("capital_loss_limit", 3000)),
            student_loan_interest_max=float(data["student_loan_interest_max"]),
            student_loan_phaseout=phaseouts(data["student_loan_phaseout"]),
            ira_contribution_limit=float(data["ira_contribution_limit"]),
            ira_contribution_limit_50_plus=float(data["ira_contribution_limit_50_plus"]),
            ira_phaseout_covered=phaseouts(data["ira_phaseout_covered"]),
            hsa_individual_limit=float(data["hsa_individual_limit"]),
            hsa_family_limit=float(data["hsa_family_limit"]),
            qualified_tips_max=float(data["qualified_tips_max"]),
            qualified_tips_phaseout=phaseouts(data["qualified_tips_phaseout"]),
            qualified_overtime_max=float(data["qualified_overtime_max"]),
            qualified_overtime_phaseout=phaseouts(data["qualified_overtime_phaseout"]),
            vehicle_loan_interest_max=float(data["vehicle_loan_interest_max"]),
            vehicle_loan_interest_phaseout=phaseouts(data["vehicle_loan_interest_phaseout"]),
            senior_deduction_amount=float(data["senior_deduction_amount"]),
            senior_deduction_phaseout=phaseouts(data["senior_deduction_phaseout"]),
            salt_cap=float(data["salt_cap"]),
            medical_expense_floor_pct=float(data["medical_expense_floor_pct"]),
            niit_rate=float(data["niit_rate"]),
            niit_threshold=by_status(data["niit_threshold"]),
            additional_medicare_tax_rate=float(data["additional_medicare_tax_rate"]),
            additional_medicare_threshold=by_status(data["additional_medicare_threshold"]),
            ss_wage_base=float(data["ss_wage_base"]),
            ss_employee_rate=float(data["ss_employee_rate"]),
            dependent_care_expense_limit=float(data["dependent_care_expense_limit"]),
            dependent_care_rate_tiers=tuple(
                (float(floor), float(rate)) for floor, rate in data["dependent_care_rate_tiers"]
            ),
            education_credit_rate=float(data["education_credit_rate"]),
            education_credit_max=float(data["education_credit_max"]),
            poverty_guidelines={int(size): float(v) for size, v in data["poverty_guidelines"].items()},
            poverty_guideline_additional_person=float(data["poverty_guideline_additional_person"]),
            applicable_percentage_bands=tuple(
                ApplicablePercentageBand(float(lo), amount(hi), float(start), float(end))
                for lo, hi, start, end in data["applicable_percentage_bands"]
            ),
            state=StateTaxConfig.from_parameters(data["state"], tax_year),
        )

    @staticmethod
    def for_year(tax_year: int, loader: Optional[TaxConfigLoader] = None) -> "TaxYearConfig":
        """
        Load and validate the configuration for ``tax_year``.

        Args:
            tax_year: The tax year to load.
            loader: Loader to read parameters from; defaults to the global
                loader (which honours ``TAXGUIDE_PARAMETERS_DIR``).

        Raises:
            TaxConfigError: If the year is unsupported or its tables are
                inconsistent.
        """
        loader = loader or get_config_loader()
        config = TaxYearConfig.from_parameters(loader.load_config(tax_year), tax_year)
        try:
            config.validate()
        except TaxConfigError as exc:
            logger.error(f"Invalid tax parameters: {exc}")
            raise
        metadata = loader.get_metadata(tax_year)
        if metadata is not None:
            logger.info(f"Tax year {tax_year} parameters v{metadata.version} ({metadata.source})")
        return config

    @staticmethod
    def for_2025() -> "TaxYearConfig":
        return TaxYearConfig.for_year(2025)
