"""
Frequency normalization.

Every component that needs a recurring rate goes through these helpers so the
multipliers stay identical across the engine, the goal planner and the tax
code. ONE_TIME amounts have no recurring rate and always normalize to zero.
"""

from __future__ import annotations

from typing import Dict

from .schema import Frequency

FREQUENCY_MULTIPLIERS: Dict[Frequency, int] = {
    Frequency.ANNUAL: 1,
    Frequency.MONTHLY: 12,
    Frequency.BIWEEKLY: 26,
    Frequency.WEEKLY: 52,
    Frequency.ONE_TIME: 0,
}


def periods_per_year(frequency: Frequency) -> int:
    return FREQUENCY_MULTIPLIERS[Frequency(frequency)]


def to_annual(amount: float, frequency: Frequency) -> float:
    return float(amount) * periods_per_year(frequency)


def to_monthly(amount: float, frequency: Frequency) -> float:
    return to_annual(amount, frequency) / 12.0


def from_annual(annual_amount: float, frequency: Frequency) -> float:
    """Per-period amount that adds up to annual_amount over a year."""
    n = periods_per_year(frequency)
    if n == 0:
        raise ValueError("ONE_TIME amounts have no recurring per-period equivalent")
    return float(annual_amount) / n
