"""
Capital gains tax with the Net Investment Income surtax.

Short-term gains are ordinary income and pay the ordinary marginal rate.
Long-term gains are stacked on top of ordinary income and short-term gains,
then sliced through the 0% / 15% / 20% break points for the filing status.
NIIT (3.8%) applies to the lesser of investment income and the amount by
which total income exceeds the filing-status threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from core.schema import FilingStatus

from .brackets import marginal_rate
from .tables import (
    LTCG_BREAKPOINTS_2024,
    LTCG_RATES,
    NIIT_RATE,
    NIIT_THRESHOLDS,
    TaxBracket,
    federal_brackets,
)


@dataclass(frozen=True)
class CapitalGainsResult:
    short_term_tax: float
    long_term_tax: float
    federal_tax: float
    state_tax: float
    niit_applies: bool
    niit_amount: float
    total_tax: float
    effective_rate: float
    strategies: Tuple[str, ...] = ()


def _overlap(lo: float, hi: float, band_lo: float, band_hi: float) -> float:
    return max(0.0, min(hi, band_hi) - max(lo, band_lo))


def _ltcg_bands(filing_status: FilingStatus, index_factor: float):
    bp = LTCG_BREAKPOINTS_2024[FilingStatus(filing_status)]
    zero_max = bp.zero_pct_max * index_factor
    fifteen_max = bp.fifteen_pct_max * index_factor
    return (
        (0.0, zero_max, LTCG_RATES[0]),
        (zero_max, fifteen_max, LTCG_RATES[1]),
        (fifteen_max, float("inf"), LTCG_RATES[2]),
    )


def long_term_marginal_rate(
    taxable_income: float,
    filing_status: FilingStatus = FilingStatus.SINGLE,
    *,
    index_factor: float = 1.0,
) -> float:
    """Rate the next dollar of long-term gain pays at this level of taxable income."""
    for _, hi, rate in _ltcg_bands(filing_status, index_factor):
        if taxable_income < hi:
            return rate
    return LTCG_RATES[-1]


def capital_gains_tax(
    short_term: float,
    long_term: float,
    ordinary_income: float,
    filing_status: FilingStatus = FilingStatus.SINGLE,
    *,
    state_rate: float = 0.0,
    brackets: Optional[Iterable[TaxBracket]] = None,
    index_factor: float = 1.0,
) -> CapitalGainsResult:
    """
    Tax a year's realized gains given the household's taxable ordinary income.

    Negative gain inputs are treated as zero (losses belong to
    tax.planning.analyze_tax_loss_harvesting).
    """
    status = FilingStatus(filing_status)
    st = max(float(short_term), 0.0)
    lt = max(float(long_term), 0.0)
    ordinary = max(float(ordinary_income), 0.0)
    ordinary_brackets = tuple(brackets) if brackets is not None else federal_brackets(status)

    short_term_tax = st * marginal_rate(ordinary + st, ordinary_brackets) if st > 0 else 0.0

    base = ordinary + st
    top = base + lt
    long_term_tax = sum(
        _overlap(base, top, lo, hi) * rate for lo, hi, rate in _ltcg_bands(status, index_factor)
    )

    gains = st + lt
    threshold = NIIT_THRESHOLDS[status]
    niit_applies = top > threshold and gains > 0
    niit_amount = NIIT_RATE * min(gains, top - threshold) if niit_applies else 0.0

    federal_tax = short_term_tax + long_term_tax
    state_tax = gains * state_rate
    total = federal_tax + state_tax + niit_amount

    strategies = []
    if lt > 0:
        strategies.append("Hold investments more than one year to keep gains in the long-term rates.")
    if niit_applies:
        strategies.append("Defer gains or accelerate deductions to bring income under the NIIT threshold.")
    if st > 0:
        strategies.append("Offset short-term gains with harvested losses.")
    zero_max = _ltcg_bands(status, index_factor)[0][1]
    if top < zero_max:
        strategies.append(
            f"Income is below the 0% long-term threshold (${zero_max:,.0f}); "
            f"additional gains could be realized tax-free."
        )

    return CapitalGainsResult(
        short_term_tax=short_term_tax,
        long_term_tax=long_term_tax,
        federal_tax=federal_tax,
        state_tax=state_tax,
        niit_applies=niit_applies,
        niit_amount=niit_amount,
        total_tax=total,
        effective_rate=total / gains if gains > 0 else 0.0,
        strategies=tuple(strategies),
    )
