"""
Output types shared by the projection engine and the Monte Carlo runner.

All result objects are frozen; a run builds them once and hands them back.
The `*_frame()` helpers give pandas views for analysis and are not used by the
engine itself.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import pandas as pd


class WarningCode(str, Enum):
    DEFICIT_MONTH = "DEFICIT_MONTH"
    GOAL_SHORTFALL = "GOAL_SHORTFALL"
    HIGH_TAX_DRAG = "HIGH_TAX_DRAG"


@dataclass(frozen=True)
class SeriesPoint:
    timestamp: pd.Timestamp
    value: float


@dataclass(frozen=True)
class AnnualSummaryRow:
    year: int
    total_income: float
    total_expenses: float
    loan_payments: float
    taxes: float
    net_savings: float
    investment_returns: float
    start_net_worth: float
    end_net_worth: float


@dataclass(frozen=True)
class MonthlyRow:
    date: pd.Timestamp
    income: float
    expenses: float
    loan_payments: float
    taxes: float
    investment_returns: float
    cash_flow: float
    assets: float
    liabilities: float
    net_worth: float


@dataclass(frozen=True)
class ProjectionSeries:
    net_worth: Tuple[SeriesPoint, ...]
    cash_flow: Tuple[SeriesPoint, ...]
    assets: Tuple[SeriesPoint, ...]
    liabilities: Tuple[SeriesPoint, ...]
    income: Tuple[SeriesPoint, ...]
    expenses: Tuple[SeriesPoint, ...]
    taxes: Tuple[SeriesPoint, ...]
    account_balances: Mapping[str, Tuple[SeriesPoint, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )


@dataclass(frozen=True)
class Exclusion:
    """An input item left out of a run, and why."""

    kind: str
    item_id: str
    reason: str


@dataclass(frozen=True)
class ProjectionWarning:
    code: WarningCode
    message: str
    timestamp: Optional[pd.Timestamp] = None


@dataclass(frozen=True)
class ProjectionResult:
    annual: Tuple[AnnualSummaryRow, ...]
    monthly: Tuple[MonthlyRow, ...]
    series: ProjectionSeries
    warnings: Tuple[ProjectionWarning, ...] = ()
    exclusions: Tuple[Exclusion, ...] = ()
    input_hash: str = ""

    def annual_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(r) for r in self.annual])

    def monthly_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(r) for r in self.monthly])


@dataclass(frozen=True)
class PercentileBands:
    timestamp: pd.Timestamp
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float


@dataclass(frozen=True)
class MonteCarloResult:
    bands: Tuple[PercentileBands, ...]
    success_rate: float
    goal_success_rates: Mapping[str, float]
    median_final_net_worth: float
    p10_final_net_worth: float
    p90_final_net_worth: float
    trials: int
    volatility_pct: float
    seed: int
    exclusions: Tuple[Exclusion, ...] = ()

    def bands_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(b) for b in self.bands])
