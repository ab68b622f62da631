"""
Distributions package — parameterize and sample account return distributions.

  1. benchmarks.py   — named volatility presets
  2. correlation.py  — correlation structure between accounts
  3. sampler.py      — draw per-trial, per-month account returns
"""

from .benchmarks import DEFAULT_VOLATILITY_PCT, get_volatility_preset
from .correlation import account_correlation_matrix
from .sampler import ReturnDistributionParams, ReturnSampler, SampledReturns

__all__ = [
    "DEFAULT_VOLATILITY_PCT",
    "get_volatility_preset",
    "account_correlation_matrix",
    "ReturnDistributionParams",
    "ReturnSampler",
    "SampledReturns",
]
