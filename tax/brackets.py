"""
Progressive bracket tax.

Only the slice of income falling inside each bracket is taxed at that
bracket's rate. The marginal rate is the rate of the last bracket the income
reaches.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .tables import TaxBracket


@dataclass(frozen=True)
class BracketDetail:
    bracket_start: float
    bracket_end: Optional[float]
    rate: float
    taxable_amount: float
    tax: float


@dataclass(frozen=True)
class BracketTaxResult:
    total_tax: float
    effective_rate: float
    marginal_rate: float
    breakdown: Tuple[BracketDetail, ...] = ()


def _sorted(brackets: Iterable[TaxBracket]) -> Sequence[TaxBracket]:
    return sorted(brackets, key=lambda b: b.bracket_start)


def bracket_tax(taxable_income: float, brackets: Iterable[TaxBracket]) -> BracketTaxResult:
    """
    Tax taxable_income against an ascending bracket list.

    The last bracket may have bracket_end=None (unbounded). Zero-width
    brackets are skipped. Income of zero or less yields zero tax, zero rates
    and an empty breakdown.
    """
    income = float(taxable_income)
    if income <= 0:
        return BracketTaxResult(total_tax=0.0, effective_rate=0.0, marginal_rate=0.0)

    total = 0.0
    marginal = 0.0
    details = []
    for b in _sorted(brackets):
        if income <= b.bracket_start:
            break
        if b.bracket_end is not None and b.bracket_end <= b.bracket_start:
            continue
        upper = income if b.bracket_end is None else min(income, b.bracket_end)
        portion = upper - b.bracket_start
        tax = portion * b.rate
        total += tax
        marginal = b.rate
        details.append(BracketDetail(b.bracket_start, b.bracket_end, b.rate, portion, tax))

    return BracketTaxResult(
        total_tax=total,
        effective_rate=total / income,
        marginal_rate=marginal,
        breakdown=tuple(details),
    )


def marginal_rate(taxable_income: float, brackets: Iterable[TaxBracket]) -> float:
    return bracket_tax(taxable_income, brackets).marginal_rate


def index_brackets(brackets: Iterable[TaxBracket], factor: float) -> Tuple[TaxBracket, ...]:
    """Scale every threshold by factor (e.g. cumulative inflation); rates unchanged."""
    if factor == 1.0:
        return tuple(brackets)
    return tuple(
        TaxBracket(
            bracket_start=b.bracket_start * factor,
            bracket_end=None if b.bracket_end is None else b.bracket_end * factor,
            rate=b.rate,
        )
        for b in brackets
    )
