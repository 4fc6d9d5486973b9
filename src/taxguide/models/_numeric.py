"""
Lenient coercion for user-entered figures.

Input comes from free-form fields: blanks, ``None``, ``"$1,200"`` and stray
text all have to produce a number rather than an error. Every input model
derives from ``InputModel``, whose catch-all ``mode='before'`` validator
applies these rules by field type.
"""

import logging
import math
import typing
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic_core import PydanticUndefined

logger = logging.getLogger(__name__)

_NOISE = str.maketrans("", "", ",$ \t")
_TRUE_WORDS = frozenset({"yes", "y", "true", "t", "1", "on", "x", "checked"})
_FALSE_WORDS = frozenset({"no", "n", "false", "f", "0", "off", ""})

# Entered amounts are clamped to this magnitude; larger figures are typos.
MAX_AMOUNT = 1e15


def _is_finite(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def coerce_amount(value: Any, default: float = 0.0) -> float:
    """
    Convert an entered value to a finite float within +/- ``MAX_AMOUNT``.

    Examples:
        >>> coerce_amount(" $1,250.50 ")
        1250.5
        >>> coerce_amount("n/a")
        0.0
        >>> coerce_amount(None, default=100.0)
        100.0
        >>> coerce_amount("1e30")
        1000000000000000.0
    """
    if value is None:
        return default
    if isinstance(value, str):
        text = value.translate(_NOISE)
        if not text:
            return default
        try:
            value = Decimal(text)
        except InvalidOperation:
            logger.debug(f"Non-numeric amount {value!r} treated as {default}")
            return default
    elif not isinstance(value, (bool, int, float, Decimal)):
        return default

    # Compared before conversion so ints beyond the float range clamp too.
    if not _is_finite(value):
        return default
    if value > MAX_AMOUNT:
        return MAX_AMOUNT
    if value < -MAX_AMOUNT:
        return -MAX_AMOUNT
    return float(value)


def coerce_flag(value: Any, default: Optional[bool] = False) -> Optional[bool]:
    """Interpret yes/no style answers; anything unrecognised keeps the default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, (float, Decimal)):
        return _is_finite(value) and value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return default


def coerce_answer(value: Any) -> Optional[bool]:
    """A yes/no answer that may be left unanswered; blank or unrecognised is None."""
    if isinstance(value, str) and not value.strip():
        return None
    return coerce_flag(value, default=None)


def _model_type(annotation: Any):
    """The BaseModel subclass in ``annotation`` (plain or Optional), else None."""
    candidates = typing.get_args(annotation) or (annotation,)
    for candidate in candidates:
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


class InputModel(BaseModel):
    """
    Base for all input records.

    Float fields are floored at zero unless listed in ``SIGNED_FIELDS``.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    SIGNED_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    @field_validator("*", mode="before")
    def sanitize_input(cls, v, info: ValidationInfo):
        field = cls.model_fields[info.field_name]
        annotation = field.annotation
        default = field.default if field.default is not PydanticUndefined else None

        if annotation is bool:
            return coerce_flag(v, bool(default))
        if annotation is int:
            fallback = default if isinstance(default, (int, float)) else 0
            return int(round(coerce_amount(v, float(fallback))))
        if annotation is float:
            fallback = default if isinstance(default, (int, float)) else 0.0
            amount = coerce_amount(v, float(fallback))
            if info.field_name not in cls.SIGNED_FIELDS:
                amount = max(0.0, amount)
            return amount
        if annotation is str:
            return (default or "") if v is None else str(v)
        if annotation == Optional[str]:
            return None if v is None else str(v)
        if annotation == Optional[bool]:
            return coerce_answer(v)

        model_type = _model_type(annotation)
        if model_type is not None and not isinstance(v, (Mapping, BaseModel)):
            if field.default_factory is not None:
                return field.default_factory()
            return default
        return v
