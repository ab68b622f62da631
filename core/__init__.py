"""
Core package — scenario schema, result types, configuration, frequency
normalization and shared utilities. No projection logic lives here.
"""

from .schema import (
    AccountItem,
    AccountType,
    Assumptions,
    ContributionRule,
    ExpenseItem,
    FilingStatus,
    Frequency,
    GoalItem,
    GoalType,
    GrowthRule,
    Holding,
    Household,
    IncomeItem,
    LoanItem,
    LoanType,
    ScenarioInput,
    TaxProfile,
)
from .config import GoalPlannerConfig, MonteCarloConfig, ProjectionConfig
from .errors import ScenarioError
from .frequency import FREQUENCY_MULTIPLIERS, from_annual, to_annual, to_monthly
from .utils import month_starts

__all__ = [
    "AccountItem",
    "AccountType",
    "Assumptions",
    "ContributionRule",
    "ExpenseItem",
    "FilingStatus",
    "Frequency",
    "GoalItem",
    "GoalType",
    "GrowthRule",
    "Holding",
    "Household",
    "IncomeItem",
    "LoanItem",
    "LoanType",
    "ScenarioInput",
    "TaxProfile",
    "GoalPlannerConfig",
    "MonteCarloConfig",
    "ProjectionConfig",
    "ScenarioError",
    "FREQUENCY_MULTIPLIERS",
    "from_annual",
    "to_annual",
    "to_monthly",
    "month_starts",
]
