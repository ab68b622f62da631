"""
2024 US tax tables: federal ordinary brackets, standard deductions, payroll
(FICA) constants, long-term capital gains break points, NIIT thresholds and a
flat approximation of state income tax.

Only the 2024 tables are carried. Later years are approximated by indexing
these thresholds (see tax.brackets.index_brackets).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from core.schema import FilingStatus

logger = logging.getLogger(__name__)

BASE_TAX_YEAR = 2024


@dataclass(frozen=True)
class TaxBracket:
    bracket_start: float
    bracket_end: Optional[float]  # None for the unbounded top bracket
    rate: float


def _brackets(breaks: Tuple[float, ...], rates: Tuple[float, ...]) -> Tuple[TaxBracket, ...]:
    ends = breaks[1:] + (None,)
    return tuple(TaxBracket(s, e, r) for s, e, r in zip(breaks, ends, rates))


_ORDINARY_RATES = (0.10, 0.12, 0.22, 0.24, 0.32, 0.35, 0.37)

FEDERAL_BRACKETS_2024: Dict[FilingStatus, Tuple[TaxBracket, ...]] = {
    FilingStatus.SINGLE: _brackets(
        (0.0, 11_600.0, 47_150.0, 100_525.0, 191_950.0, 243_725.0, 609_350.0), _ORDINARY_RATES
    ),
    FilingStatus.MFJ: _brackets(
        (0.0, 23_200.0, 94_300.0, 201_050.0, 383_900.0, 487_450.0, 731_200.0), _ORDINARY_RATES
    ),
    FilingStatus.HOH: _brackets(
        (0.0, 16_550.0, 63_100.0, 100_500.0, 191_950.0, 243_700.0, 609_350.0), _ORDINARY_RATES
    ),
}

STANDARD_DEDUCTIONS_2024: Dict[FilingStatus, float] = {
    FilingStatus.SINGLE: 14_600.0,
    FilingStatus.MFJ: 29_200.0,
    FilingStatus.HOH: 21_900.0,
}

# ----- Payroll (FICA) -----
SOCIAL_SECURITY_RATE = 0.062
SOCIAL_SECURITY_WAGE_BASE = 168_600.0
MEDICARE_RATE = 0.0145
ADDITIONAL_MEDICARE_RATE = 0.009

ADDITIONAL_MEDICARE_THRESHOLDS: Dict[FilingStatus, float] = {
    FilingStatus.SINGLE: 200_000.0,
    FilingStatus.MFJ: 250_000.0,
    FilingStatus.HOH: 200_000.0,
}

# ----- Capital gains -----


@dataclass(frozen=True)
class CapitalGainsBreakpoints:
    """Top of the 0% band and top of the 15% band; 20% above."""

    zero_pct_max: float
    fifteen_pct_max: float


LTCG_BREAKPOINTS_2024: Dict[FilingStatus, CapitalGainsBreakpoints] = {
    FilingStatus.SINGLE: CapitalGainsBreakpoints(47_025.0, 518_900.0),
    FilingStatus.MFJ: CapitalGainsBreakpoints(94_050.0, 583_750.0),
    FilingStatus.HOH: CapitalGainsBreakpoints(63_000.0, 551_350.0),
}

LTCG_RATES = (0.0, 0.15, 0.20)

NIIT_RATE = 0.038
NIIT_THRESHOLDS: Dict[FilingStatus, float] = {
    FilingStatus.SINGLE: 200_000.0,
    FilingStatus.MFJ: 250_000.0,
    FilingStatus.HOH: 200_000.0,
}

# ----- State income tax (flat or effective-rate approximation) -----
DEFAULT_STATE_RATE = 0.05

STATE_TAX_RATES: Dict[str, float] = {
    # no wage income tax
    "AK": 0.0, "FL": 0.0, "NV": 0.0, "SD": 0.0, "TN": 0.0,
    "TX": 0.0, "WA": 0.0, "WY": 0.0, "NH": 0.0,
    # flat
    "AZ": 0.025, "CO": 0.044, "ID": 0.058, "IL": 0.0495, "IN": 0.0305,
    "KY": 0.04, "MA": 0.05, "MI": 0.0405, "NC": 0.0525, "ND": 0.0195,
    "PA": 0.0307, "UT": 0.0465,
    # progressive, approximated by an effective rate
    "AL": 0.05, "AR": 0.047, "CA": 0.093, "CT": 0.0699, "DE": 0.066,
    "GA": 0.055, "HI": 0.0825, "IA": 0.06, "KS": 0.057, "LA": 0.0425,
    "ME": 0.0715, "MD": 0.0575, "MN": 0.0985, "MO": 0.048, "MS": 0.05,
    "MT": 0.059, "NE": 0.0664, "NJ": 0.0637, "NM": 0.059, "NY": 0.0685,
    "OH": 0.0399, "OK": 0.0475, "OR": 0.099, "RI": 0.0599, "SC": 0.064,
    "VT": 0.0875, "VA": 0.0575, "WV": 0.055, "WI": 0.0765, "DC": 0.105,
}


def federal_brackets(filing_status: FilingStatus) -> Tuple[TaxBracket, ...]:
    return FEDERAL_BRACKETS_2024[FilingStatus(filing_status)]


def standard_deduction(filing_status: FilingStatus) -> float:
    return STANDARD_DEDUCTIONS_2024[FilingStatus(filing_status)]


def state_tax_rate(state_code: str) -> float:
    """Flat rate for a state code; unknown or blank codes get DEFAULT_STATE_RATE."""
    code = (state_code or "").strip().upper()
    if code not in STATE_TAX_RATES:
        logger.debug("No state rate for %r; using default %.4f", state_code, DEFAULT_STATE_RATE)
        return DEFAULT_STATE_RATE
    return STATE_TAX_RATES[code]
