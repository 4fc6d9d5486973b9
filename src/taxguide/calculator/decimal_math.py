"""
Decimal Math Utilities for Tax Calculations.

Reported figures are rounded to pennies with ROUND_HALF_UP before they are
stored on a result, so the same inputs always produce the same cents.

Why Decimal?
- Float: 0.1 + 0.2 = 0.30000000000000004
- Decimal: 0.1 + 0.2 = 0.3
"""

from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Union

# Type alias for values that can be converted to Decimal
Numeric = Union[int, float, str, Decimal]

MONEY_PLACES = Decimal("0.01")  # Round to pennies
RATE_PLACES = Decimal("0.000001")

# Wide enough to quantize any finite float (about 1.8e308) to the penny.
_CONTEXT = Context(prec=340, rounding=ROUND_HALF_UP)


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Examples:
        >>> to_decimal(100)
        Decimal('100')
        >>> to_decimal(100.50)
        Decimal('100.5')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Convert float to string first to preserve representation
        return Decimal(str(value))
    return Decimal(value)


def money(value: Numeric) -> Decimal:
    """
    Convert value to money (rounded to pennies).

    Examples:
        >>> money(100.999)
        Decimal('101.00')
        >>> money(100.994)
        Decimal('100.99')
    """
    return to_decimal(value).quantize(MONEY_PLACES, context=_CONTEXT)


def to_money(value: Numeric) -> float:
    """Round to pennies and return a float; negative zero is normalised to 0.0."""
    rounded = float(money(value))
    return rounded + 0.0


def to_rate(value: Numeric) -> float:
    """Round a rate to six decimal places."""
    return float(to_decimal(value).quantize(RATE_PLACES, context=_CONTEXT)) + 0.0


def format_money(value: Numeric) -> str:
    """
    Format value as money string, negatives in parentheses.

    Examples:
        >>> format_money(1234567.891)
        '$1,234,567.89'
        >>> format_money(-3000)
        '($3,000.00)'
    """
    m = money(value)
    if m < 0:
        return f"(${-m:,.2f})"
    return f"${m:,.2f}"


def format_line_amount(value: Numeric) -> str:
    """
    Format value the way it is entered on a form line (no currency sign).

    Examples:
        >>> format_line_amount(84250)
        '84,250.00'
        >>> format_line_amount(-3000)
        '-3,000.00'
    """
    return f"{money(value):,.2f}"


def format_percentage(value: Numeric, decimal_places: int = 2) -> str:
    """
    Format value as percentage string.

    Examples:
        >>> format_percentage(0.2245)
        '22.45%'
    """
    pct = to_decimal(value) * 100
    return f"{pct:.{decimal_places}f}%"
