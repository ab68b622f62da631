"""
Account roll — month-by-month account balances for one or many return paths.

All paths are rolled at once: balances are (n_paths, n_accounts). The
deterministic projection is the n_paths == 1 case; the Monte Carlo runner
passes every trial. Each month, in order:
  1. Investment-income tax on taxable-account balances held at month start
  2. Growth at the month's return
  3. Net cash flow (schedule net − investment tax) is deposited: directed
     contributions first, the remainder swept across cash accounts (all
     accounts when none is cash), weighted by positive balance
  4. With no accounts the remainder accumulates as unallocated cash
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from core.schema import AccountItem, AccountType, Assumptions

from .cashflow import CashflowSchedule


@dataclass(frozen=True)
class AccountPaths:
    balances: np.ndarray            # (n_paths, n_accounts, n_months), end of month
    unallocated: np.ndarray         # (n_paths, n_months)
    investment_returns: np.ndarray  # (n_paths, n_months)
    investment_tax: np.ndarray      # (n_paths, n_months)
    cash_flow: np.ndarray           # (n_paths, n_months)

    @property
    def n_paths(self) -> int:
        return self.cash_flow.shape[0]

    @property
    def assets(self) -> np.ndarray:
        """Total assets per path and month: (n_paths, n_months)."""
        return self.balances.sum(axis=1) + self.unallocated


def sweep_weights(balances: np.ndarray, eligible: np.ndarray) -> np.ndarray:
    """
    Share of a cash deposit each account receives, per path.

    balances : (n_paths, n_accounts); eligible : boolean (n_accounts,)
    Proportional to positive balances of eligible accounts; equal split
    across eligible accounts when none is positive.
    """
    n_paths, n_accounts = balances.shape
    weights = np.zeros((n_paths, n_accounts))
    k = int(eligible.sum())
    if k == 0:
        return weights
    pos = np.where(eligible[np.newaxis, :], np.maximum(balances, 0.0), 0.0)
    total = pos.sum(axis=1, keepdims=True)
    equal = np.where(eligible, 1.0 / k, 0.0)[np.newaxis, :]
    return np.where(total > 0, pos / np.where(total > 0, total, 1.0), equal)


def roll_accounts(
    accounts: Sequence[AccountItem],
    schedule: CashflowSchedule,
    monthly_returns: np.ndarray,
    assumptions: Assumptions,
) -> AccountPaths:
    """
    Parameters
    ----------
    monthly_returns : (n_paths, n_accounts, n_months) or (n_accounts, n_months)
    """
    r = np.asarray(monthly_returns, dtype=float)
    if r.ndim == 2:
        r = r[np.newaxis, :, :]
    n_paths, n_accounts, n_months = r.shape
    if n_accounts != len(accounts) or n_months != schedule.n_months:
        raise ValueError(
            f"Returns shape {r.shape} does not match {len(accounts)} accounts "
            f"and {schedule.n_months} months."
        )

    taxable = np.array([AccountType(a.type) is AccountType.TAXABLE for a in accounts], dtype=bool)
    is_cash = np.array([a.is_cash for a in accounts], dtype=bool)
    sweep_to = is_cash if is_cash.any() else np.ones(n_accounts, dtype=bool)

    ordinary_yield = (
        assumptions.taxable_interest_yield
        + assumptions.taxable_dividend_yield
        + assumptions.realized_st_gain_rate
    ) / 12.0
    lt_yield = assumptions.realized_lt_gain_rate / 12.0

    net = schedule.net_before_investment_tax
    contrib = schedule.contributions

    bal = np.tile(np.array([a.balance for a in accounts], dtype=float), (n_paths, 1))
    loose = np.zeros(n_paths)

    balances = np.zeros((n_paths, n_accounts, n_months))
    unallocated = np.zeros((n_paths, n_months))
    inv_returns = np.zeros((n_paths, n_months))
    inv_tax = np.zeros((n_paths, n_months))
    cash_flow = np.zeros((n_paths, n_months))

    for t in range(n_months):
        taxable_base = np.where(taxable, np.maximum(bal, 0.0), 0.0).sum(axis=1)
        tax_t = taxable_base * (
            ordinary_yield * schedule.ordinary_investment_rate[t]
            + lt_yield * schedule.long_term_gain_rate[t]
        )

        growth = bal * r[:, :, t]
        bal = bal + growth

        cf = net[t] - tax_t
        if n_accounts:
            bal = bal + contrib[:, t][np.newaxis, :]
            remainder = cf - contrib[:, t].sum()
            bal = bal + sweep_weights(bal, sweep_to) * remainder[:, np.newaxis]
        else:
            loose = loose + cf

        balances[:, :, t] = bal
        unallocated[:, t] = loose
        inv_returns[:, t] = growth.sum(axis=1)
        inv_tax[:, t] = tax_t
        cash_flow[:, t] = cf

    return AccountPaths(
        balances=balances,
        unallocated=unallocated,
        investment_returns=inv_returns,
        investment_tax=inv_tax,
        cash_flow=cash_flow,
    )
