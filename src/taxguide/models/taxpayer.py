import logging
from collections.abc import Mapping
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from taxguide.models._numeric import InputModel, coerce_answer

logger = logging.getLogger(__name__)


class FilingStatus(str, Enum):
    """IRS filing status options supported by the engine"""
    SINGLE = "single"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title().replace(" Of ", " of ")


_STATUS_ALIASES = {
    "hoh": FilingStatus.HEAD_OF_HOUSEHOLD,
    "head_household": FilingStatus.HEAD_OF_HOUSEHOLD,
    "s": FilingStatus.SINGLE,
}


class FilingProfile(InputModel):
    """Filing status and the age facts that gate limits and deductions."""
    filing_status: FilingStatus = Field(default=FilingStatus.SINGLE)
    age_50_or_older: bool = Field(
        default=False,
        description="Taxpayer is age 50 or older (eligible for IRA catch-up contribution)"
    )
    is_senior: bool = Field(
        default=False,
        description="Taxpayer is 65 or older (Schedule 1-A enhanced senior deduction)"
    )

    # Head of household qualification; derives filing_status when no status is given.
    lived_with_qualifying_person_over_half_year: Optional[bool] = Field(
        default=None,
        description="A qualifying child lived in the home more than half the year (nights test)"
    )
    paid_over_half_home_cost: Optional[bool] = Field(
        default=None,
        description="Taxpayer paid more than half the cost of keeping up the home"
    )

    @model_validator(mode="before")
    @classmethod
    def derive_filing_status(cls, data):
        """Head of household when both qualification answers are yes, otherwise single."""
        if not isinstance(data, Mapping):
            return data
        explicit = data.get("filing_status")
        if explicit is not None and str(explicit).strip():
            return data
        answers = [
            coerce_answer(data.get("lived_with_qualifying_person_over_half_year")),
            coerce_answer(data.get("paid_over_half_home_cost")),
        ]
        if all(answer is None for answer in answers):
            return data
        qualifies = all(answer is True for answer in answers)
        status = FilingStatus.HEAD_OF_HOUSEHOLD if qualifies else FilingStatus.SINGLE
        logger.debug(f"Filing status from qualification answers {answers}: {status.value}")
        return {**data, "filing_status": status}

    @field_validator('filing_status', mode='before')
    def validate_filing_status(cls, v):
        if isinstance(v, FilingStatus):
            return v
        if v is None:
            return FilingStatus.SINGLE
        key = str(v).strip().lower().replace(' ', '_').replace('-', '_')
        if key in _STATUS_ALIASES:
            return _STATUS_ALIASES[key]
        try:
            return FilingStatus(key)
        except ValueError:
            logger.warning(f"Unsupported filing status {v!r}; using single")
            return FilingStatus.SINGLE
