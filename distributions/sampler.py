"""
Return sampler — draws monthly account returns for every Monte Carlo trial.

Input:  each account's expected annual return + an annual volatility
Output: (n_trials × n_accounts × n_months) array of monthly simple returns

Method:
  1. Monthly mean = expected annual return / 12 (the same rate the
     deterministic projection uses); monthly std = volatility / √12
  2. Draw standard normals per trial and month, correlated across accounts
     when a pairwise correlation is set
  3. Scale and shift; floor at -100% (an account cannot lose more than it holds)

Everything derives from one numpy Generator seeded once, so a given seed,
trial count and horizon always reproduce the same draws.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .correlation import account_correlation_matrix


@dataclass(frozen=True)
class ReturnDistributionParams:
    """
    volatility : annual standard deviation as a decimal (0.15 == 15%)
    correlation : pairwise correlation between accounts' monthly returns
    """
    volatility: float = 0.15
    correlation: float = 0.0

    @classmethod
    def from_pct(cls, volatility_pct: float, correlation: float = 0.0) -> "ReturnDistributionParams":
        return cls(volatility=volatility_pct / 100.0, correlation=correlation)

    @property
    def monthly_std(self) -> float:
        return self.volatility / np.sqrt(12.0)

    def summary(self, expected_returns: Sequence[float], labels: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """Return a summary table of the per-account distributions."""
        labels = list(labels) if labels is not None else [f"account_{i}" for i in range(len(expected_returns))]
        return pd.DataFrame([
            {"Account": label, "Annual Mean": mu, "Annual StdDev": self.volatility,
             "Monthly Mean": mu / 12.0, "Monthly StdDev": self.monthly_std}
            for label, mu in zip(labels, expected_returns)
        ])


@dataclass(frozen=True)
class SampledReturns:
    """Monthly returns for every trial: shape (n_trials, n_accounts, n_months)."""
    monthly: np.ndarray

    @property
    def n_trials(self) -> int:
        return self.monthly.shape[0]

    @property
    def n_accounts(self) -> int:
        return self.monthly.shape[1]

    @property
    def n_months(self) -> int:
        return self.monthly.shape[2]

    def get_trial(self, trial: int) -> np.ndarray:
        """Returns for one trial as (n_accounts, n_months)."""
        return self.monthly[trial]

    def annualized(self) -> np.ndarray:
        """Geometric annualized return per trial and account: (n_trials, n_accounts)."""
        if self.n_months == 0:
            return np.zeros(self.monthly.shape[:2])
        growth = np.prod(1.0 + self.monthly, axis=2)
        return np.power(growth, 12.0 / self.n_months) - 1.0

    def to_dataframe(self) -> pd.DataFrame:
        ann = self.annualized()
        return pd.DataFrame({
            "trial_id": np.repeat(np.arange(self.n_trials), self.n_accounts),
            "account_idx": np.tile(np.arange(self.n_accounts), self.n_trials),
            "annualized_return": ann.reshape(-1),
        })

    def summary(self) -> pd.DataFrame:
        """Percentile summary of annualized returns per account."""
        pcts = [0.05, 0.25, 0.50, 0.75, 0.95]
        ann = self.annualized()
        rows = []
        for j in range(self.n_accounts):
            arr = ann[:, j]
            row = {"account_idx": j, "Mean": float(np.mean(arr)), "Std": float(np.std(arr))}
            for p in pcts:
                row[f"P{int(p*100):02d}"] = float(np.percentile(arr, p * 100))
            rows.append(row)
        return pd.DataFrame(rows)


class ReturnSampler:
    """
    Usage:
        params = ReturnDistributionParams.from_pct(15.0)
        sampler = ReturnSampler(params, n_trials=500, seed=42)
        returns = sampler.sample([0.07, 0.04], n_months=360)
        # returns.monthly.shape == (500, 2, 360)
    """

    def __init__(
        self,
        params: ReturnDistributionParams,
        n_trials: int = 500,
        seed: int = 42,
    ):
        self.params = params
        self.n_trials = n_trials
        self.rng = np.random.default_rng(seed)

    def sample(self, expected_returns: Sequence[float], n_months: int) -> SampledReturns:
        p = self.params
        mu = np.asarray(expected_returns, dtype=float) / 12.0
        n_accounts = len(mu)
        if n_accounts == 0 or n_months <= 0:
            return SampledReturns(monthly=np.zeros((self.n_trials, n_accounts, max(n_months, 0))))

        # (n_trials, n_months, n_accounts) standard normals
        if n_accounts > 1 and p.correlation != 0.0:
            z = self.rng.multivariate_normal(
                mean=np.zeros(n_accounts),
                cov=account_correlation_matrix(n_accounts, p.correlation),
                size=(self.n_trials, n_months),
            )
        else:
            z = self.rng.standard_normal((self.n_trials, n_months, n_accounts))

        monthly = mu[np.newaxis, np.newaxis, :] + p.monthly_std * z
        monthly = np.maximum(monthly, -1.0)
        return SampledReturns(monthly=np.ascontiguousarray(monthly.transpose(0, 2, 1)))
