"""
Named volatility presets for Monte Carlo runs.

Callers usually know "moderate portfolio" rather than a standard deviation.
These presets map portfolio styles to long-run annual volatility of a
diversified mix at that risk level.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

DEFAULT_VOLATILITY_PCT = 15.0


@dataclass(frozen=True)
class VolatilityPreset:
    name: str
    volatility_pct: float
    description: str


VOLATILITY_PRESETS: Dict[str, VolatilityPreset] = {
    "cash_heavy": VolatilityPreset("cash_heavy", 3.0, "Mostly cash and short-term bonds"),
    "conservative": VolatilityPreset("conservative", 8.0, "30/50/20 stocks/bonds/cash"),
    "moderate": VolatilityPreset("moderate", 12.0, "60/30/10 stocks/bonds/cash"),
    "balanced": VolatilityPreset("balanced", DEFAULT_VOLATILITY_PCT, "Broad equity-tilted default"),
    "aggressive": VolatilityPreset("aggressive", 18.0, "80/15/5 stocks/bonds/cash"),
    "all_equity": VolatilityPreset("all_equity", 20.0, "100% equities"),
}


def get_volatility_preset(name: str) -> VolatilityPreset:
    """
    Parameters
    ----------
    name : str
        One of: "cash_heavy", "conservative", "moderate", "balanced",
        "aggressive", "all_equity"
    """
    key = name.lower()
    if key not in VOLATILITY_PRESETS:
        raise KeyError(
            f"Unknown volatility preset '{name}'. "
            f"Available: {list(VOLATILITY_PRESETS.keys())}"
        )
    return VOLATILITY_PRESETS[key]
