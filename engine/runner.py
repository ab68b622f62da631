"""
Projection runner — turns a scenario into a month-by-month projection.

Pipeline:
  1. partition_scenario(): drop items the engine cannot use (reported as exclusions)
  2. Month timeline from the household start month through its end month
  3. build_cashflow_schedule(): incomes, expenses, loans and wage taxes
  4. Return model → monthly account returns
  5. roll_accounts(): growth, investment tax, contributions and the cash sweep
  6. Monthly rows, calendar-year rollups, series and warnings

prepare() covers steps 1–3 and is shared with the Monte Carlo runner, which
swaps step 4 for sampled returns and rolls every trial at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from behaviors.base import ReturnModel
from behaviors.constant import ExpectedReturnModel
from core.config import ProjectionConfig
from core.results import (
    AnnualSummaryRow,
    Exclusion,
    MonthlyRow,
    ProjectionResult,
    ProjectionSeries,
    ProjectionWarning,
    SeriesPoint,
    WarningCode,
)
from core.schema import GoalItem, ScenarioInput
from core.utils import month_floor, month_starts, months_spanned, round_cents, stable_hash
from data_prep.validators import partition_scenario, require_horizon
from tax.tables import BASE_TAX_YEAR

from .accounts import AccountPaths, roll_accounts
from .cashflow import CashflowSchedule, build_cashflow_schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRun:
    """Everything about a run that does not depend on market returns."""
    scenario: ScenarioInput
    exclusions: Tuple[Exclusion, ...]
    schedule: CashflowSchedule
    input_hash: str

    @property
    def dates(self) -> pd.DatetimeIndex:
        return self.schedule.dates

    @property
    def opening_net_worth(self) -> float:
        assets = sum(a.balance for a in self.scenario.accounts)
        return assets - self.schedule.opening_liabilities


def prepare(scenario: ScenarioInput, config: Optional[ProjectionConfig] = None) -> PreparedRun:
    """
    Raises
    ------
    ScenarioError
        When the household horizon is missing or inverted.
    """
    config = config or ProjectionConfig()
    require_horizon(scenario.household)

    if scenario.tax_profile.tax_year != BASE_TAX_YEAR:
        logger.warning(
            "Tax year %d requested; using %d tables indexed by inflation",
            scenario.tax_profile.tax_year, BASE_TAX_YEAR,
        )

    cleaned, exclusions = partition_scenario(scenario)
    hh = cleaned.household
    dates = month_starts(hh.start_date, months_spanned(hh.start_date, hh.end_date))
    schedule = build_cashflow_schedule(cleaned, dates, config, accounts=cleaned.accounts)
    return PreparedRun(
        scenario=cleaned,
        exclusions=exclusions,
        schedule=schedule,
        input_hash=stable_hash(scenario),
    )


def goal_month_index(goal: GoalItem, dates: pd.DatetimeIndex) -> Optional[int]:
    """Position of the goal's target month on the timeline, clipped to the horizon."""
    if goal.target_date is None or len(dates) == 0:
        return None
    pos = int(dates.searchsorted(month_floor(goal.target_date), side="left"))
    return min(pos, len(dates) - 1)


def inflated_goal_target(goal: GoalItem, schedule: CashflowSchedule, idx: int) -> float:
    return goal.target_amount * float(schedule.inflation[idx])


def _series(dates: pd.DatetimeIndex, values: np.ndarray) -> Tuple[SeriesPoint, ...]:
    return tuple(SeriesPoint(timestamp=d, value=float(v)) for d, v in zip(dates, round_cents(values)))


def _monthly_frame(run: PreparedRun, paths: AccountPaths) -> pd.DataFrame:
    s = run.schedule
    assets = paths.assets[0]
    return pd.DataFrame(
        {
            "date": s.dates,
            "income": s.income,
            "expenses": s.expenses,
            "loan_payments": s.loan_payments,
            "taxes": s.wage_taxes + paths.investment_tax[0],
            "investment_returns": paths.investment_returns[0],
            "cash_flow": paths.cash_flow[0],
            "assets": assets,
            "liabilities": s.liabilities,
            "net_worth": assets - s.liabilities,
        }
    )


def _annual_rows(frame: pd.DataFrame, opening_net_worth: float) -> Tuple[AnnualSummaryRow, ...]:
    grouped = frame.groupby(frame["date"].dt.year, sort=True).agg(
        total_income=("income", "sum"),
        total_expenses=("expenses", "sum"),
        loan_payments=("loan_payments", "sum"),
        taxes=("taxes", "sum"),
        net_savings=("cash_flow", "sum"),
        investment_returns=("investment_returns", "sum"),
        end_net_worth=("net_worth", "last"),
    )
    grouped["start_net_worth"] = grouped["end_net_worth"].shift(1).fillna(opening_net_worth)

    rows = []
    for year, r in grouped.iterrows():
        rows.append(
            AnnualSummaryRow(
                year=int(year),
                total_income=round_cents(r["total_income"]),
                total_expenses=round_cents(r["total_expenses"]),
                loan_payments=round_cents(r["loan_payments"]),
                taxes=round_cents(r["taxes"]),
                net_savings=round_cents(r["net_savings"]),
                investment_returns=round_cents(r["investment_returns"]),
                start_net_worth=round_cents(r["start_net_worth"]),
                end_net_worth=round_cents(r["end_net_worth"]),
            )
        )
    return tuple(rows)


def _warnings(
    run: PreparedRun,
    frame: pd.DataFrame,
    annual: Sequence[AnnualSummaryRow],
    config: ProjectionConfig,
) -> Tuple[ProjectionWarning, ...]:
    out: List[ProjectionWarning] = []

    if config.deficit_warnings:
        for d, cf in zip(frame["date"], frame["cash_flow"]):
            if cf < 0:
                out.append(ProjectionWarning(
                    WarningCode.DEFICIT_MONTH,
                    f"Cash flow of {round_cents(cf):,.2f} in {d:%Y-%m}",
                    d,
                ))

    net_worth = frame["net_worth"].to_numpy()
    for goal in run.scenario.goals:
        idx = goal_month_index(goal, run.dates)
        if idx is None:
            continue
        target = inflated_goal_target(goal, run.schedule, idx)
        if net_worth[idx] < target:
            out.append(ProjectionWarning(
                WarningCode.GOAL_SHORTFALL,
                f"Goal {goal.id} short by {round_cents(target - net_worth[idx]):,.2f} "
                f"at {run.dates[idx]:%Y-%m}",
                run.dates[idx],
            ))

    for row in annual:
        if row.total_income > 0 and row.taxes / row.total_income > config.high_tax_drag_threshold:
            out.append(ProjectionWarning(
                WarningCode.HIGH_TAX_DRAG,
                f"Taxes take {row.taxes / row.total_income:.0%} of income in {row.year}",
                pd.Timestamp(year=row.year, month=1, day=1),
            ))
    return tuple(out)


def build_result(run: PreparedRun, paths: AccountPaths, config: ProjectionConfig) -> ProjectionResult:
    """Package path 0 of a roll as a ProjectionResult."""
    frame = _monthly_frame(run, paths)
    annual = _annual_rows(frame, run.opening_net_worth)

    monthly = tuple(
        MonthlyRow(
            date=r.date,
            income=round_cents(r.income),
            expenses=round_cents(r.expenses),
            loan_payments=round_cents(r.loan_payments),
            taxes=round_cents(r.taxes),
            investment_returns=round_cents(r.investment_returns),
            cash_flow=round_cents(r.cash_flow),
            assets=round_cents(r.assets),
            liabilities=round_cents(r.liabilities),
            net_worth=round_cents(r.net_worth),
        )
        for r in frame.itertuples(index=False)
    )

    dates = run.dates
    series = ProjectionSeries(
        net_worth=_series(dates, frame["net_worth"].to_numpy()),
        cash_flow=_series(dates, frame["cash_flow"].to_numpy()),
        assets=_series(dates, frame["assets"].to_numpy()),
        liabilities=_series(dates, frame["liabilities"].to_numpy()),
        income=_series(dates, frame["income"].to_numpy()),
        expenses=_series(dates, frame["expenses"].to_numpy()),
        taxes=_series(dates, frame["taxes"].to_numpy()),
        account_balances=MappingProxyType({
            a.id: _series(dates, paths.balances[0, i, :])
            for i, a in enumerate(run.scenario.accounts)
        }),
    )

    return ProjectionResult(
        annual=annual,
        monthly=monthly,
        series=series,
        warnings=_warnings(run, frame, annual, config),
        exclusions=run.exclusions,
        input_hash=run.input_hash,
    )


def project(
    scenario: ScenarioInput,
    config: Optional[ProjectionConfig] = None,
    *,
    return_model: Optional[ReturnModel] = None,
) -> ProjectionResult:
    """
    Run a deterministic projection.

    Parameters
    ----------
    scenario : ScenarioInput
    config : ProjectionConfig, optional
        Defaults to ProjectionConfig()
    return_model : ReturnModel, optional
        Supplies monthly account returns; ExpectedReturnModel() when omitted.
        Pass a SampledReturnModel to replay one Monte Carlo trial.

    Returns
    -------
    ProjectionResult with monthly rows, calendar-year rows, series, warnings,
    exclusions and the input hash.
    """
    config = config or ProjectionConfig()
    run = prepare(scenario, config)

    model = return_model or ExpectedReturnModel()
    forecast = model.forecast(run.scenario.accounts, run.dates)
    paths = roll_accounts(run.scenario.accounts, run.schedule, forecast.monthly_returns, run.scenario.assumptions)

    result = build_result(run, paths, config)
    logger.info(
        "Projected %d months (%d excluded items, %d warnings)",
        len(run.dates), len(result.exclusions), len(result.warnings),
    )
    return result
