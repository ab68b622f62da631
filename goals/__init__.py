"""
Goals package — priority-weighted goal funding and FI projections.

  1. planner.py — savings allocation, required contributions, completion estimates
  2. fire.py    — financial independence number and date
"""

from .fire import FireResult, calculate_fire
from .planner import (
    GoalFunding,
    GoalPlan,
    allocate_savings,
    months_to_target,
    plan_goals,
    plan_goals_for_scenario,
    priority_weight,
    required_contribution,
)

__all__ = [
    "FireResult",
    "calculate_fire",
    "GoalFunding",
    "GoalPlan",
    "allocate_savings",
    "months_to_target",
    "plan_goals",
    "plan_goals_for_scenario",
    "priority_weight",
    "required_contribution",
]
