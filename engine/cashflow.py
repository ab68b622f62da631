"""
Deterministic monthly cash flow — the part of a projection that does not
depend on market returns.

Key rules:
  1. Recurring items contribute to_monthly(amount) × growth in every month
     from their start month through their end date
  2. ONE_TIME items contribute their full amount in their start month only
  3. Loan payments and balances come from loans.amortize(); payment k falls
     k months after the loan start; a loan not yet started is not a liability
  4. Wage tax annualizes the month's recurring income (×12), taxes the year,
     and charges one twelfth; one-time income pays the incremental tax it
     adds on top of that year
  5. Investment-income tax rates (ordinary and long-term) are marginal rates
     at the month's income level, applied later to taxable balances
  6. A loan whose payment never covers its interest stops paying when its term
     ends; the unpaid balance then stays on the timeline unchanged (no further
     interest accrues) and a warning is logged
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

import numpy as np
import pandas as pd

from core.config import ProjectionConfig
from core.frequency import to_monthly
from core.schema import AccountItem, ContributionRule, Frequency, LoanItem, ScenarioInput
from core.utils import month_floor
from loans.amortization import amortize, level_payment
from tax.capital_gains import long_term_marginal_rate
from tax.liability import annual_taxes
from tax.tables import NIIT_RATE, NIIT_THRESHOLDS

from .growth import growth_rate_for, inflation_index, monthly_growth_factors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CashflowSchedule:
    """Per-month arrays, all of shape (n_months,) unless noted."""
    dates: pd.DatetimeIndex
    recurring_income: np.ndarray
    one_time_income: np.ndarray
    expenses: np.ndarray
    loan_payments: np.ndarray
    liabilities: np.ndarray            # end-of-month loan balances
    opening_liabilities: float
    loan_balances: Dict[str, np.ndarray]
    wage_taxes: np.ndarray
    ordinary_investment_rate: np.ndarray
    long_term_gain_rate: np.ndarray
    contributions: np.ndarray          # (n_accounts, n_months)
    inflation: np.ndarray

    @property
    def n_months(self) -> int:
        return len(self.dates)

    @property
    def income(self) -> np.ndarray:
        return self.recurring_income + self.one_time_income

    @property
    def net_before_investment_tax(self) -> np.ndarray:
        return self.income - self.expenses - self.loan_payments - self.wage_taxes


def _active_mask(dates: pd.DatetimeIndex, start, end) -> np.ndarray:
    mask = dates >= month_floor(start)
    if end is not None:
        mask &= dates <= pd.Timestamp(end)
    return np.asarray(mask)


def item_monthly_amounts(item, dates: pd.DatetimeIndex, inflation_rate: float) -> np.ndarray:
    """Amount an income or expense item contributes in each month."""
    n = len(dates)
    growth = monthly_growth_factors(growth_rate_for(item.growth_rule, item.growth_rate, inflation_rate), n)
    out = np.zeros(n, dtype=float)
    if Frequency(item.frequency) is Frequency.ONE_TIME:
        pos = dates.get_indexer([month_floor(item.start_date)])[0]
        if pos >= 0:
            out[pos] = item.amount * growth[pos]
        return out
    mask = _active_mask(dates, item.start_date, item.end_date)
    out[mask] = to_monthly(item.amount, item.frequency) * growth[mask]
    return out


def loan_monthly_payment(loan: LoanItem) -> float:
    base = loan.payment_override
    if base is None:
        base = level_payment(loan.principal, loan.apr / 12.0, loan.term_months)
    return base + loan.extra_payment


def loan_arrays(loan: LoanItem, dates: pd.DatetimeIndex) -> Tuple[np.ndarray, np.ndarray, float]:
    """(payments, end-of-month balances, balance just before dates[0]) for one loan."""
    rows = amortize(
        loan.principal,
        loan.apr * 100.0,
        loan.term_months,
        monthly_payment=loan_monthly_payment(loan),
        start_date=loan.start_date,
    )
    if rows and rows[-1].balance > 0:
        logger.warning(
            "Loan %s is not repaid within its %d-month term; %.2f remains outstanding",
            loan.id, loan.term_months, rows[-1].balance,
        )

    payments = np.zeros(len(dates), dtype=float)
    row_dates = pd.DatetimeIndex([r.date for r in rows])
    pos = dates.get_indexer(row_dates)
    hit = pos >= 0
    payments[pos[hit]] = np.array([r.payment for r in rows])[hit]

    start_m = month_floor(loan.start_date)
    history = pd.Series(
        [loan.principal] + [r.balance for r in rows],
        index=pd.DatetimeIndex([start_m]).append(row_dates),
    )
    prior = dates[0] - pd.DateOffset(months=1)
    timeline = history.index.union(dates).union(pd.DatetimeIndex([prior]))
    filled = history.reindex(timeline).ffill().fillna(0.0)
    return payments, filled.reindex(dates).to_numpy(dtype=float), float(filled.loc[prior])


def contribution_amounts(rule: ContributionRule, dates: pd.DatetimeIndex) -> np.ndarray:
    """Monthly deposits for one rule; escalation steps up once per year of the rule."""
    mask = _active_mask(dates, rule.start_date, rule.end_date)
    start_m = month_floor(rule.start_date)
    elapsed = (dates.year - start_m.year) * 12 + (dates.month - start_m.month)
    years = np.maximum(np.asarray(elapsed) // 12, 0)
    amounts = rule.amount_monthly * np.power(1.0 + rule.escalation_rate, years)
    return np.where(mask, amounts, 0.0)


def _tax_arrays(
    scenario: ScenarioInput,
    recurring: np.ndarray,
    one_time: np.ndarray,
    index: np.ndarray,
    config: ProjectionConfig,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    n = len(recurring)
    wage_tax = np.zeros(n)
    ordinary_rate = np.zeros(n)
    lt_rate = np.zeros(n)
    if not config.include_taxes:
        return wage_tax, ordinary_rate, lt_rate

    profile = scenario.tax_profile
    status = profile.filing_status
    niit_threshold = NIIT_THRESHOLDS[status]
    cache: Dict[Tuple[float, float], object] = {}

    def taxes_for(annual_income: float, factor: float):
        key = (round(annual_income, 6), factor)
        if key not in cache:
            cache[key] = annual_taxes(annual_income, profile, index_factor=factor)
        return cache[key]

    for t in range(n):
        factor = float(index[t]) if config.index_tax_brackets else 1.0
        base = taxes_for(recurring[t] * 12.0, factor)
        wage_tax[t] = base.total / 12.0
        if one_time[t] > 0:
            bumped = taxes_for(recurring[t] * 12.0 + one_time[t], factor)
            wage_tax[t] += bumped.total - base.total

        niit = NIIT_RATE if base.gross_income > niit_threshold else 0.0
        ordinary_rate[t] = base.combined_marginal_rate + niit
        lt_rate[t] = (
            long_term_marginal_rate(base.taxable_income, status, index_factor=factor)
            + base.state_rate
            + niit
        )
    return wage_tax, ordinary_rate, lt_rate


def build_cashflow_schedule(
    scenario: ScenarioInput,
    dates: pd.DatetimeIndex,
    config: ProjectionConfig,
    accounts: Sequence[AccountItem] = (),
) -> CashflowSchedule:
    """
    Expects a scenario already restricted to eligible items
    (data_prep.validators.partition_scenario).
    """
    n = len(dates)
    infl = scenario.assumptions.inflation_rate
    index = inflation_index(n, infl)

    recurring = np.zeros(n)
    one_time = np.zeros(n)
    for inc in scenario.incomes:
        amounts = item_monthly_amounts(inc, dates, infl)
        if Frequency(inc.frequency) is Frequency.ONE_TIME:
            one_time += amounts
        else:
            recurring += amounts

    expenses = np.zeros(n)
    for exp in scenario.expenses:
        expenses += item_monthly_amounts(exp, dates, infl)

    loan_payments = np.zeros(n)
    liabilities = np.zeros(n)
    opening = 0.0
    loan_balances: Dict[str, np.ndarray] = {}
    for loan in scenario.loans:
        pay, bal, before = loan_arrays(loan, dates)
        loan_payments += pay
        liabilities += bal
        opening += before
        loan_balances[loan.id] = bal

    account_pos = {a.id: i for i, a in enumerate(accounts)}
    contributions = np.zeros((len(accounts), n))
    for rule in scenario.contributions:
        if rule.account_id in account_pos:
            contributions[account_pos[rule.account_id]] += contribution_amounts(rule, dates)

    wage_tax, ordinary_rate, lt_rate = _tax_arrays(scenario, recurring, one_time, index, config)

    return CashflowSchedule(
        dates=dates,
        recurring_income=recurring,
        one_time_income=one_time,
        expenses=expenses,
        loan_payments=loan_payments,
        liabilities=liabilities,
        opening_liabilities=opening,
        loan_balances=loan_balances,
        wage_taxes=wage_tax,
        ordinary_investment_rate=ordinary_rate,
        long_term_gain_rate=lt_rate,
        contributions=contributions,
        inflation=index,
    )
