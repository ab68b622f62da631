"""
ExpectedReturnModel — every account earns its expected annual return / 12,
every month. This is what a plain deterministic projection uses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from core.schema import AccountItem

from .base import ReturnForecast, ReturnModel


@dataclass(frozen=True)
class ExpectedReturnModel(ReturnModel):
    """
    override_annual_return replaces every account's own expected return,
    useful for "what if everything earned 4%" comparisons.
    """

    override_annual_return: Optional[float] = None

    def forecast(self, accounts: Sequence[AccountItem], dates: pd.DatetimeIndex) -> ReturnForecast:
        annual = np.array(
            [
                a.expected_return if self.override_annual_return is None else self.override_annual_return
                for a in accounts
            ],
            dtype=float,
        )
        monthly = np.repeat((annual / 12.0)[:, np.newaxis], len(dates), axis=1)
        return ReturnForecast(monthly_returns=monthly.reshape(len(accounts), len(dates)))
