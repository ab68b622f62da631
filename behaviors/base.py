"""
Base classes for account return models.
A return model turns accounts and a month timeline into monthly returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd

from core.schema import AccountItem


@dataclass(frozen=True)
class ReturnForecast:
    """
    Monthly simple returns for each account for each projection month.

    Shape (n_accounts, n_months); 0.005 means +0.5% that month.
    """

    monthly_returns: np.ndarray

    @property
    def n_accounts(self) -> int:
        return self.monthly_returns.shape[0]

    @property
    def n_months(self) -> int:
        return self.monthly_returns.shape[1]


class ReturnModel:
    """Interface for generating monthly account returns (deterministic or sampled)."""

    def forecast(
        self,
        accounts: Sequence[AccountItem],
        dates: pd.DatetimeIndex,
    ) -> ReturnForecast:
        raise NotImplementedError
