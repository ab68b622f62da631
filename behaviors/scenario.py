"""
SampledReturnModel — replays one Monte Carlo trial's sampled returns.

The Monte Carlo runner rolls every trial at once from SampledReturns; this
model lets a single trial be re-run through engine.project() on its own, for
inspection or to check that one trial matches the batched result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import pandas as pd

from core.schema import AccountItem
from distributions.sampler import SampledReturns

from .base import ReturnForecast, ReturnModel


@dataclass(frozen=True)
class SampledReturnModel(ReturnModel):
    samples: SampledReturns
    trial: int = 0

    def forecast(self, accounts: Sequence[AccountItem], dates: pd.DatetimeIndex) -> ReturnForecast:
        path = self.samples.get_trial(self.trial)
        if path.shape != (len(accounts), len(dates)):
            raise ValueError(
                f"Sampled returns have shape {path.shape}; expected "
                f"({len(accounts)}, {len(dates)}) for these accounts and dates."
            )
        return ReturnForecast(monthly_returns=path)
