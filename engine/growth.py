"""
Growth rules and inflation indexing.

Amounts are stated in dollars of the projection's first month. Growth
compounds monthly from that month: TRACK_INFLATION at the scenario inflation
rate, CUSTOM_PERCENT at the item's own rate, NONE not at all.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from core.schema import GrowthRule


def monthly_growth_factors(annual_rate: float, n_months: int) -> np.ndarray:
    """(1 + r/12) ** k for k = 0..n_months-1."""
    return np.power(1.0 + annual_rate / 12.0, np.arange(n_months, dtype=float))


def growth_rate_for(rule: GrowthRule, item_rate: Optional[float], inflation_rate: float) -> float:
    rule = GrowthRule(rule)
    if rule is GrowthRule.NONE:
        return 0.0
    if rule is GrowthRule.TRACK_INFLATION:
        return inflation_rate
    if rule is GrowthRule.CUSTOM_PERCENT:
        return item_rate or 0.0
    raise ValueError(f"Unhandled growth rule {rule!r}")


def inflation_index(n_months: int, inflation_rate: float) -> np.ndarray:
    """Cumulative price level per month relative to the first month (index[0] == 1)."""
    return monthly_growth_factors(inflation_rate, n_months)


def to_real(nominal: np.ndarray, index: np.ndarray) -> np.ndarray:
    """Deflate nominal values to first-month dollars."""
    return np.asarray(nominal, dtype=float) / index


def to_nominal(real: np.ndarray, index: np.ndarray) -> np.ndarray:
    return np.asarray(real, dtype=float) * index
