"""
Monte Carlo outputs — trial runs, per-trial metrics and distribution summaries.
"""

from .aggregator import percentile_bands, summarize_trials
from .metrics import compute_trial_metrics, goal_success_rates
from .runner import TrialRun, run_trials, sample_returns, simulate

__all__ = [
    "percentile_bands",
    "summarize_trials",
    "compute_trial_metrics",
    "goal_success_rates",
    "TrialRun",
    "run_trials",
    "sample_returns",
    "simulate",
]
