"""
Multi-debt payoff ordering: avalanche (highest APR first) versus snowball
(smallest balance first).

Each month every open debt accrues interest and receives its minimum
payment; the extra budget goes to the first open debt in strategy order.
When a debt is cleared its minimum rolls into the extra budget.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from core.config import MAX_SEARCH_MONTHS

logger = logging.getLogger(__name__)

CLEARED = 0.01


class PayoffStrategy(str, Enum):
    AVALANCHE = "AVALANCHE"
    SNOWBALL = "SNOWBALL"


@dataclass(frozen=True)
class Debt:
    id: str
    name: str
    balance: float
    apr: float  # decimal
    minimum_payment: float


@dataclass(frozen=True)
class PayoffPlan:
    strategy: PayoffStrategy
    total_months: Optional[int]  # None when the cap was reached
    total_interest: float
    total_paid: float
    payoff_order: Tuple[str, ...]
    payoff_month: Mapping[str, Optional[int]]
    interest_by_debt: Mapping[str, float]


@dataclass(frozen=True)
class StrategyComparison:
    avalanche: PayoffPlan
    snowball: PayoffPlan
    interest_savings: float  # avalanche interest advantage
    months_difference: Optional[int]


def _ordered(debts: List[Debt], strategy: PayoffStrategy) -> List[Debt]:
    if strategy is PayoffStrategy.AVALANCHE:
        return sorted(debts, key=lambda d: -d.apr)
    return sorted(debts, key=lambda d: d.balance)


def simulate_payoff(
    debts: Iterable[Debt],
    extra_monthly: float,
    strategy: PayoffStrategy,
    *,
    max_months: int = MAX_SEARCH_MONTHS,
) -> PayoffPlan:
    strategy = PayoffStrategy(strategy)
    ordered = _ordered([d for d in debts if d.balance > 0], strategy)
    balances: Dict[str, float] = {d.id: float(d.balance) for d in ordered}
    interest: Dict[str, float] = {d.id: 0.0 for d in ordered}
    cleared_at: Dict[str, Optional[int]] = {d.id: None for d in ordered}
    order: List[str] = []
    total_paid = 0.0

    month = 0
    while any(b > CLEARED for b in balances.values()):
        if month >= max_months:
            logger.warning("%s payoff did not finish within %d months", strategy.value, max_months)
            break
        month += 1
        active = [d for d in ordered if balances[d.id] > CLEARED]

        for d in active:
            charge = balances[d.id] * d.apr / 12.0
            balances[d.id] += charge
            interest[d.id] += charge

        budget = max(float(extra_monthly), 0.0)
        for d in active:
            pay = min(d.minimum_payment, balances[d.id])
            balances[d.id] -= pay
            total_paid += pay
            if balances[d.id] <= CLEARED:
                budget += d.minimum_payment - pay
                balances[d.id] = 0.0

        for d in ordered:
            if budget <= 0:
                break
            if balances[d.id] <= CLEARED:
                continue
            pay = min(budget, balances[d.id])
            balances[d.id] -= pay
            total_paid += pay
            budget -= pay
            if balances[d.id] <= CLEARED:
                balances[d.id] = 0.0
                budget += d.minimum_payment

        for d in ordered:
            if balances[d.id] <= CLEARED and cleared_at[d.id] is None:
                cleared_at[d.id] = month
                order.append(d.id)

    finished = all(b <= CLEARED for b in balances.values())
    return PayoffPlan(
        strategy=strategy,
        total_months=month if finished else None,
        total_interest=sum(interest.values()),
        total_paid=total_paid,
        payoff_order=tuple(order),
        payoff_month=MappingProxyType(cleared_at),
        interest_by_debt=MappingProxyType(interest),
    )


def compare_payoff_strategies(
    debts: Iterable[Debt],
    extra_monthly: float,
    *,
    max_months: int = MAX_SEARCH_MONTHS,
) -> StrategyComparison:
    debts = list(debts)
    avalanche = simulate_payoff(debts, extra_monthly, PayoffStrategy.AVALANCHE, max_months=max_months)
    snowball = simulate_payoff(debts, extra_monthly, PayoffStrategy.SNOWBALL, max_months=max_months)
    months_diff = None
    if avalanche.total_months is not None and snowball.total_months is not None:
        months_diff = snowball.total_months - avalanche.total_months
    return StrategyComparison(
        avalanche=avalanche,
        snowball=snowball,
        interest_savings=snowball.total_interest - avalanche.total_interest,
        months_difference=months_diff,
    )
