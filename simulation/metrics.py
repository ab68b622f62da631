"""
Per-trial Monte Carlo metrics.

Computes final, minimum and deficit-month statistics for EACH trial, plus
whether each goal was reached. The aggregator turns these into distribution
summaries and success rates.
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np
import pandas as pd

from core.schema import GoalItem
from engine.cashflow import CashflowSchedule
from engine.runner import goal_month_index, inflated_goal_target


def goal_reached(
    net_worth: np.ndarray,
    goals: Sequence[GoalItem],
    schedule: CashflowSchedule,
) -> Dict[str, np.ndarray]:
    """
    Boolean per trial for each dated goal: net worth at the goal's target
    month is at least its inflation-adjusted target.

    net_worth : (n_trials, n_months)
    """
    out: Dict[str, np.ndarray] = {}
    for goal in goals:
        idx = goal_month_index(goal, schedule.dates)
        if idx is None:
            continue
        out[goal.id] = net_worth[:, idx] >= inflated_goal_target(goal, schedule, idx)
    return out


def goal_success_rates(
    net_worth: np.ndarray,
    goals: Sequence[GoalItem],
    schedule: CashflowSchedule,
) -> Dict[str, float]:
    """Fraction of trials reaching each dated goal."""
    return {gid: float(np.mean(hit)) for gid, hit in goal_reached(net_worth, goals, schedule).items()}


def compute_trial_metrics(
    net_worth: np.ndarray,
    goals: Sequence[GoalItem],
    schedule: CashflowSchedule,
) -> pd.DataFrame:
    """
    Parameters
    ----------
    net_worth : np.ndarray
        Net worth per trial and month, shape (n_trials, n_months)

    Returns
    -------
    DataFrame with one row per trial:
        trial_id, final_net_worth, min_net_worth, months_underwater, solvent,
        and one goal_<id> boolean column per dated goal
    """
    n_trials, n_months = net_worth.shape
    if n_months == 0:
        final = np.zeros(n_trials)
        lowest = np.zeros(n_trials)
    else:
        final = net_worth[:, -1]
        lowest = net_worth.min(axis=1)

    frame = pd.DataFrame({
        "trial_id": np.arange(n_trials),
        "final_net_worth": final,
        "min_net_worth": lowest,
        "months_underwater": (net_worth < 0).sum(axis=1),
        "solvent": final >= 0,
    })
    for gid, hit in goal_reached(net_worth, goals, schedule).items():
        frame[f"goal_{gid}"] = hit
    return frame
