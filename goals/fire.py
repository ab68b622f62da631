"""
Financial independence (FIRE) projection.

FI number = retirement spending / withdrawal rate, in today's dollars. The
portfolio grows monthly at the expected return plus level savings while the
FI target inflates; the first month the portfolio covers the target is the
FI date. The search stops at 720 months.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional, Tuple

import pandas as pd

from core.utils import add_months, safe_div

MAX_FIRE_MONTHS = 720
# months simulated past the FI crossover so the projection shows the tail
POST_FI_MONTHS = 60


@dataclass(frozen=True)
class FireProjectionPoint:
    month: int
    date: date
    net_worth: float
    fi_target: float


@dataclass(frozen=True)
class FireResult:
    fi_number: float
    coast_fire_number: float
    current_progress: float
    savings_rate: float
    months_to_fi: Optional[int]
    fi_date: Optional[date]
    projection: Tuple[FireProjectionPoint, ...]

    @property
    def years_to_fi(self) -> Optional[float]:
        return None if self.months_to_fi is None else self.months_to_fi / 12.0

    def projection_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(p) for p in self.projection])


def calculate_fire(
    current_net_worth: float,
    annual_income: float,
    annual_savings: float,
    retirement_annual_expenses: float,
    as_of: date,
    *,
    expected_return: float = 0.07,
    withdrawal_rate: float = 0.04,
    inflation_rate: float = 0.025,
    record_every: int = 3,
) -> FireResult:
    """
    Parameters
    ----------
    current_net_worth : float
        Invested assets today.
    annual_income, annual_savings : float
        Used for the savings rate; annual_savings / 12 is added every month.
    retirement_annual_expenses : float
        Spending to cover in retirement, today's dollars.
    as_of : date
        Month 0 of the projection.
    record_every : int
        Keep every n-th month in the projection (quarterly by default).
    """
    fi_number = safe_div(retirement_annual_expenses, withdrawal_rate) if withdrawal_rate > 0 else 0.0
    savings_rate = safe_div(annual_savings, annual_income) if annual_income > 0 else 0.0

    r = expected_return / 12.0
    i = inflation_rate / 12.0
    deposit = annual_savings / 12.0

    balance = current_net_worth
    target = fi_number
    reached: Optional[int] = None
    points = [FireProjectionPoint(0, as_of, balance, target)]

    for month in range(1, MAX_FIRE_MONTHS + 1):
        balance = balance * (1.0 + r) + deposit
        target = target * (1.0 + i)
        if month % record_every == 0:
            points.append(FireProjectionPoint(month, add_months(as_of, month), balance, target))
        if reached is None and balance >= target:
            reached = month
        if reached is not None and month >= reached + POST_FI_MONTHS:
            break

    coast = 0.0
    if reached is not None:
        coast = fi_number / (1.0 + expected_return) ** (reached / 12.0)

    return FireResult(
        fi_number=fi_number,
        coast_fire_number=coast,
        current_progress=min(safe_div(current_net_worth, fi_number), 1.0) if fi_number > 0 else 0.0,
        savings_rate=savings_rate,
        months_to_fi=reached,
        fi_date=add_months(as_of, reached) if reached is not None else None,
        projection=tuple(points),
    )
