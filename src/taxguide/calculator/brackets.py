"""
Rate schedules: ordinary income brackets (quick-calc method) and the
preferential schedule for qualified dividends and long-term capital gains.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

INFINITY = math.inf


@dataclass(frozen=True)
class TaxBracket:
    """
    One row of the Tax Computation Worksheet.

    ``subtraction`` equals the cumulative tax through the previous bracket
    minus ``rate * lower``, so ``taxable * rate - subtraction`` is the exact
    progressive tax for any income inside this bracket.
    """

    lower: float
    upper: float
    rate: float
    subtraction: float


@dataclass(frozen=True)
class PreferentialBracket:
    """Qualified dividend / LTCG rate that applies up to ``upper`` of total taxable income."""

    upper: float
    rate: float


def bracket_tax(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """
    Progressive tax using the subtraction-constant (quick-calc) method.

    Brackets are searched from the top down; the first bracket whose lower
    bound is below ``taxable_income`` determines the rate and subtraction.
    """
    if taxable_income <= 0:
        return 0.0
    for bracket in reversed(brackets):
        if taxable_income > bracket.lower:
            return taxable_income * bracket.rate - bracket.subtraction
    return 0.0


def marginal_rate(taxable_income: float, brackets: Sequence[TaxBracket]) -> float:
    """Rate of the bracket ``taxable_income`` falls in (0.0 when there is no income)."""
    if taxable_income <= 0:
        return 0.0
    for bracket in reversed(brackets):
        if taxable_income > bracket.lower:
            return bracket.rate
    return 0.0


def cumulative_tax(income: float, brackets: Sequence[TaxBracket]) -> float:
    """
    Progressive tax computed bracket by bracket, without subtraction constants.

    Used to derive and check subtraction constants when a rate schedule is
    built.
    """
    tax = 0.0
    for bracket in brackets:
        if income <= bracket.lower:
            break
        amount = min(income, bracket.upper) - bracket.lower
        tax += amount * bracket.rate
    return tax


def derive_subtractions(rows: Sequence[tuple]) -> List[TaxBracket]:
    """
    Build brackets from ``(lower, upper, rate)`` rows, computing each
    subtraction constant from the cumulative tax below it.
    """
    brackets: List[TaxBracket] = []
    for lower, upper, rate in rows:
        below = cumulative_tax(lower, brackets)
        brackets.append(TaxBracket(lower, upper, rate, round(rate * lower - below, 2)))
    return brackets


def stacked_rate_tax(
    preferential_amount: float,
    ordinary_taxable_income: float,
    pref_brackets: Sequence[PreferentialBracket],
) -> float:
    """
    Tax preferential income as if it sits on top of ordinary taxable income.

    A cursor starts at ``ordinary_taxable_income``; each bracket taxes the
    part of the remaining preferential income that fits between the cursor
    and the bracket's upper bound. Brackets already filled by ordinary income
    have no room and contribute nothing. The final bracket is unbounded.
    """
    if preferential_amount <= 0:
        return 0.0

    cursor = max(0.0, ordinary_taxable_income)
    remaining = preferential_amount
    tax = 0.0
    for bracket in pref_brackets:
        if remaining <= 0:
            break
        room = max(0.0, bracket.upper - cursor)
        portion = min(remaining, room)
        tax += portion * bracket.rate
        cursor += portion
        remaining -= portion
    return tax
