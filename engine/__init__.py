"""
Projection engine — deterministic monthly cash flow, account roll and rollups.
"""

from .accounts import AccountPaths, roll_accounts
from .cashflow import CashflowSchedule, build_cashflow_schedule
from .growth import inflation_index, to_nominal, to_real
from .runner import PreparedRun, goal_month_index, prepare, project

__all__ = [
    "AccountPaths",
    "roll_accounts",
    "CashflowSchedule",
    "build_cashflow_schedule",
    "inflation_index",
    "to_nominal",
    "to_real",
    "PreparedRun",
    "goal_month_index",
    "prepare",
    "project",
]
