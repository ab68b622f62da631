"""
Monte Carlo runner — many return paths through the projection's account roll.

Flow:
  1. Clamp trials and volatility to supported ranges
  2. prepare(): the deterministic part (incomes, expenses, loans, wage taxes)
     is built once and shared by every trial
  3. Sample monthly account returns for all trials from one seeded generator
  4. Roll every trial at once (vectorized across trials; each trial is
     independent, so this matches running them one by one)
  5. Percentile bands, success rate, goal success rates, final net worth stats

A trial can be replayed alone with
engine.project(scenario, return_model=SampledReturnModel(samples, trial=k)).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from core.config import MonteCarloConfig, ProjectionConfig
from core.results import MonteCarloResult
from core.schema import AccountItem, ScenarioInput
from distributions.sampler import ReturnDistributionParams, ReturnSampler, SampledReturns
from engine.accounts import AccountPaths, roll_accounts
from engine.runner import PreparedRun, prepare

from .aggregator import final_net_worth_stats, percentile_bands
from .metrics import compute_trial_metrics, goal_success_rates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialRun:
    """Raw output of a Monte Carlo run, before aggregation."""
    prepared: PreparedRun
    config: MonteCarloConfig
    samples: SampledReturns
    paths: AccountPaths

    @property
    def net_worth(self) -> np.ndarray:
        """(n_trials, n_months)"""
        return self.paths.assets - self.prepared.schedule.liabilities[np.newaxis, :]

    def trial_metrics(self) -> pd.DataFrame:
        return compute_trial_metrics(
            self.net_worth, self.prepared.scenario.goals, self.prepared.schedule
        )


def sample_returns(
    accounts: Sequence[AccountItem],
    dates: pd.DatetimeIndex,
    config: MonteCarloConfig,
) -> SampledReturns:
    """Sampled monthly returns for every trial; config is used as given (not clamped)."""
    params = ReturnDistributionParams.from_pct(config.volatility_pct, config.account_correlation)
    sampler = ReturnSampler(params, n_trials=config.trials, seed=config.seed)
    return sampler.sample([a.expected_return for a in accounts], len(dates))


def run_trials(
    scenario: ScenarioInput,
    config: Optional[MonteCarloConfig] = None,
    projection_config: Optional[ProjectionConfig] = None,
) -> TrialRun:
    config = (config or MonteCarloConfig()).clamped()
    prepared = prepare(scenario, projection_config)
    accounts = prepared.scenario.accounts

    samples = sample_returns(accounts, prepared.dates, config)
    paths = roll_accounts(accounts, prepared.schedule, samples.monthly, prepared.scenario.assumptions)
    logger.info(
        "Simulated %d trials over %d months (volatility %.1f%%, seed %d)",
        config.trials, len(prepared.dates), config.volatility_pct, config.seed,
    )
    return TrialRun(prepared=prepared, config=config, samples=samples, paths=paths)


def simulate(
    scenario: ScenarioInput,
    config: Optional[MonteCarloConfig] = None,
    projection_config: Optional[ProjectionConfig] = None,
) -> MonteCarloResult:
    """
    Parameters
    ----------
    scenario : ScenarioInput
    config : MonteCarloConfig, optional
        Trials, volatility and seed; out-of-range values are clamped, not rejected.
    projection_config : ProjectionConfig, optional
        Passed to the deterministic part of every trial.

    Returns
    -------
    MonteCarloResult with monthly p10/p25/p50/p75/p90 net worth bands, the
    share of trials ending with non-negative net worth, per-goal success
    rates and final net worth percentiles.
    """
    run = run_trials(scenario, config, projection_config)
    net_worth = run.net_worth
    n_months = net_worth.shape[1]

    final = net_worth[:, -1] if n_months else np.zeros(run.config.trials)
    stats = final_net_worth_stats(final)
    goals = goal_success_rates(net_worth, run.prepared.scenario.goals, run.prepared.schedule)

    return MonteCarloResult(
        bands=percentile_bands(net_worth, run.prepared.dates),
        success_rate=float(np.mean(final >= 0)),
        goal_success_rates=MappingProxyType(goals),
        median_final_net_worth=stats["median"],
        p10_final_net_worth=stats["p10"],
        p90_final_net_worth=stats["p90"],
        trials=run.config.trials,
        volatility_pct=run.config.volatility_pct,
        seed=run.config.seed,
        exclusions=run.prepared.exclusions,
    )
