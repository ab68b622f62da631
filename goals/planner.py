"""
Goal funding planner.

Given current savings, the savings a household can set aside each month and
a list of prioritized goals:
  1. Split current savings across goals by priority weight (1 → 3, 2 → 2, else 1)
  2. Grow each goal's share to its target date at the planner growth rate
  3. Solve the remaining gap for a level monthly contribution
     (future value of an annuity, inverted)
  4. Compare that contribution with the goal's weighted share of monthly savings
  5. Estimate how long the goal takes at that share, capped at 600 months

Everything here is a pure function of its arguments; running the planner
twice on the same inputs gives the same plan.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional, Sequence, Tuple

import pandas as pd

from core.config import GoalPlannerConfig
from core.frequency import to_annual
from core.schema import GoalItem, ScenarioInput
from core.utils import months_until, round_cents
from data_prep.validators import partition_scenario
from engine.cashflow import loan_monthly_payment
from tax.liability import annual_taxes

logger = logging.getLogger(__name__)


def priority_weight(rank: int) -> int:
    if rank == 1:
        return 3
    if rank == 2:
        return 2
    return 1


def allocate_savings(goals: Sequence[GoalItem], current_savings: float) -> Tuple[float, ...]:
    """Current savings split across goals in proportion to priority weight."""
    weights = [priority_weight(g.priority) for g in goals]
    total = sum(weights)
    if total == 0:
        return tuple(0.0 for _ in goals)
    return tuple(current_savings * w / total for w in weights)


def required_contribution(gap: float, monthly_rate: float, months: int) -> float:
    """Level monthly deposit that grows to `gap` after `months` months."""
    if gap <= 0:
        return 0.0
    if months <= 0:
        return gap
    if monthly_rate == 0:
        return gap / months
    return gap / (((1.0 + monthly_rate) ** months - 1.0) / monthly_rate)


def months_to_target(
    balance: float,
    contribution: float,
    target: float,
    monthly_rate: float,
    cap: int = 600,
) -> Optional[int]:
    """Months of compounding plus deposits until balance >= target; None at the cap."""
    months = 0
    while balance < target:
        if months >= cap:
            return None
        balance = balance * (1.0 + monthly_rate) + contribution
        months += 1
    return months


@dataclass(frozen=True)
class GoalFunding:
    goal_id: str
    weight: int
    allocated_savings: float
    months_remaining: Optional[int]
    projected_savings: Optional[float]
    remaining_gap: Optional[float]
    required_monthly: Optional[float]
    monthly_budget: float
    on_track: bool
    months_to_complete: Optional[int]


@dataclass(frozen=True)
class GoalPlan:
    goals: Tuple[GoalFunding, ...]
    total_monthly_needed: float
    monthly_savings_available: float
    funding_gap: float
    total_target_amount: float
    total_allocated_savings: float

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(g) for g in self.goals])


def _fund_goal(
    goal: GoalItem,
    weight: int,
    total_weight: int,
    allocated: float,
    monthly_savings: float,
    as_of: date,
    config: GoalPlannerConfig,
) -> GoalFunding:
    r = config.monthly_rate
    budget = monthly_savings * weight / total_weight if total_weight else 0.0

    if goal.target_date is None:
        return GoalFunding(
            goal_id=goal.id,
            weight=weight,
            allocated_savings=round_cents(allocated),
            months_remaining=None,
            projected_savings=None,
            remaining_gap=None,
            required_monthly=None,
            monthly_budget=round_cents(budget),
            on_track=False,
            months_to_complete=None,
        )

    n = months_until(as_of, goal.target_date)
    projected = allocated * (1.0 + r) ** n
    gap = max(goal.target_amount - projected, 0.0)
    required = required_contribution(gap, r, n)

    return GoalFunding(
        goal_id=goal.id,
        weight=weight,
        allocated_savings=round_cents(allocated),
        months_remaining=n,
        projected_savings=round_cents(projected),
        remaining_gap=round_cents(gap),
        required_monthly=round_cents(required),
        monthly_budget=round_cents(budget),
        on_track=required <= budget,
        months_to_complete=months_to_target(
            allocated, budget, goal.target_amount, r, cap=config.max_search_months
        ),
    )


def plan_goals(
    goals: Sequence[GoalItem],
    current_savings: float,
    monthly_savings_available: float,
    as_of: date,
    config: Optional[GoalPlannerConfig] = None,
) -> GoalPlan:
    """
    Parameters
    ----------
    goals : sequence of GoalItem
        Goals without a target date get an allocation but no contribution
        solve and are never on track.
    current_savings : float
        Savings available to split across goals today.
    monthly_savings_available : float
        Monthly amount the household can direct to goals; negative values
        are treated as zero.
    as_of : date
        Date months remaining are counted from.
    """
    config = config or GoalPlannerConfig()
    monthly_savings = max(monthly_savings_available, 0.0)
    weights = [priority_weight(g.priority) for g in goals]
    total_weight = sum(weights)
    shares = allocate_savings(goals, current_savings)

    funded = tuple(
        _fund_goal(g, w, total_weight, share, monthly_savings, as_of, config)
        for g, w, share in zip(goals, weights, shares)
    )

    total_needed = sum(f.required_monthly or 0.0 for f in funded)
    return GoalPlan(
        goals=funded,
        total_monthly_needed=round_cents(total_needed),
        monthly_savings_available=round_cents(monthly_savings),
        funding_gap=round_cents(total_needed - monthly_savings),
        total_target_amount=round_cents(sum(g.target_amount for g in goals)),
        total_allocated_savings=round_cents(sum(shares)),
    )


def scenario_monthly_savings(scenario: ScenarioInput) -> float:
    """
    Recurring income less recurring expenses, level loan payments and
    estimated income taxes, per month. One-time items do not count.
    """
    income = sum(to_annual(i.amount, i.frequency) for i in scenario.incomes)
    expenses = sum(to_annual(e.amount, e.frequency) for e in scenario.expenses)
    loans = sum(loan_monthly_payment(loan) * 12.0 for loan in scenario.loans)
    taxes = annual_taxes(income, scenario.tax_profile).total if income > 0 else 0.0
    return (income - expenses - loans - taxes) / 12.0


def plan_goals_for_scenario(
    scenario: ScenarioInput,
    as_of: Optional[date] = None,
    config: Optional[GoalPlannerConfig] = None,
) -> GoalPlan:
    """Plan a scenario's goals from its account balances and recurring cash flow."""
    cleaned, _ = partition_scenario(scenario)
    if as_of is None:
        as_of = cleaned.household.anchor_date or cleaned.household.start_date
    if as_of is None:
        as_of = pd.Timestamp.today().date()
        logger.warning("Scenario has no anchor or start date; planning goals as of %s", as_of)

    goals = sorted(cleaned.goals, key=lambda g: g.priority)
    current = sum(a.balance for a in cleaned.accounts)
    return plan_goals(goals, current, scenario_monthly_savings(cleaned), as_of, config)
