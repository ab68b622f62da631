"""
Run configuration for the projection, Monte Carlo and goal planner entry points.
Return distribution parameters live in distributions/sampler.py (ReturnDistributionParams).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

MAX_SEARCH_MONTHS = 600

MIN_TRIALS = 50
MAX_TRIALS = 2000
MIN_VOLATILITY_PCT = 1.0
MAX_VOLATILITY_PCT = 50.0


@dataclass(frozen=True)
class ProjectionConfig:
    include_taxes: bool = True
    # scale bracket thresholds and deductions by cumulative inflation
    index_tax_brackets: bool = True
    deficit_warnings: bool = True
    # annual taxes / income above this share raises HIGH_TAX_DRAG
    high_tax_drag_threshold: float = 0.40


@dataclass(frozen=True)
class MonteCarloConfig:
    trials: int = 500
    volatility_pct: float = 15.0
    seed: int = 42
    # pairwise correlation of monthly returns between accounts
    account_correlation: float = 0.0

    def clamped(self) -> "MonteCarloConfig":
        """Copy with trials and volatility forced into their supported ranges."""
        trials = min(max(int(self.trials), MIN_TRIALS), MAX_TRIALS)
        vol = min(max(float(self.volatility_pct), MIN_VOLATILITY_PCT), MAX_VOLATILITY_PCT)
        if trials != self.trials:
            logger.warning(
                "Monte Carlo trials %s outside [%d, %d]; using %d",
                self.trials, MIN_TRIALS, MAX_TRIALS, trials,
            )
        if vol != self.volatility_pct:
            logger.warning(
                "Monte Carlo volatility %s%% outside [%.0f, %.0f]; using %.1f%%",
                self.volatility_pct, MIN_VOLATILITY_PCT, MAX_VOLATILITY_PCT, vol,
            )
        return replace(self, trials=trials, volatility_pct=vol)


@dataclass(frozen=True)
class GoalPlannerConfig:
    annual_growth_rate: float = 0.06
    max_search_months: int = MAX_SEARCH_MONTHS

    @property
    def monthly_rate(self) -> float:
        return self.annual_growth_rate / 12.0
