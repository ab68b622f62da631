"""
Loan amortization — schedules, payoff acceleration and multi-debt strategies.
"""

from .amortization import (
    AmortizationRow,
    PayoffAcceleration,
    amortize,
    level_payment,
    payoff_acceleration,
    schedule_to_dataframe,
    schedule_totals,
)
from .strategies import Debt, PayoffStrategy, compare_payoff_strategies, simulate_payoff

__all__ = [
    "AmortizationRow",
    "PayoffAcceleration",
    "amortize",
    "level_payment",
    "payoff_acceleration",
    "schedule_to_dataframe",
    "schedule_totals",
    "Debt",
    "PayoffStrategy",
    "compare_payoff_strategies",
    "simulate_payoff",
]
