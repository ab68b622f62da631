"""
Portfolio drift against a target risk profile.

Accounts are grouped into asset classes by account type only: SAVINGS and
CHECKING are Cash, every other account counts as Stocks. Bonds are never
populated until holdings carry their own asset class, so a bond target always
shows as a BUY.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, Iterable, Tuple, Union

import pandas as pd

from core.schema import AccountType, ScenarioInput


class AssetClass(str, Enum):
    STOCKS = "Stocks"
    BONDS = "Bonds"
    CASH = "Cash"


class RebalanceAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class RiskProfile:
    """Target weights in percent (0-100)."""
    stocks: float
    bonds: float
    cash: float

    def target_pct(self, asset_class: AssetClass) -> float:
        return {
            AssetClass.STOCKS: self.stocks,
            AssetClass.BONDS: self.bonds,
            AssetClass.CASH: self.cash,
        }[asset_class]


RISK_PROFILES: Dict[str, RiskProfile] = {
    "conservative": RiskProfile(stocks=30, bonds=50, cash=20),
    "moderate": RiskProfile(stocks=60, bonds=30, cash=10),
    "aggressive": RiskProfile(stocks=80, bonds=15, cash=5),
}

ACCOUNT_ASSET_CLASS: Dict[AccountType, AssetClass] = {
    AccountType.SAVINGS: AssetClass.CASH,
    AccountType.CHECKING: AssetClass.CASH,
    AccountType.TAXABLE: AssetClass.STOCKS,
    AccountType.TRADITIONAL: AssetClass.STOCKS,
    AccountType.ROTH: AssetClass.STOCKS,
}


@dataclass(frozen=True)
class AllocationLine:
    asset_class: AssetClass
    current_value: float
    current_pct: float
    target_pct: float
    difference_pct: float
    action: RebalanceAction
    adjust_amount: float


@dataclass(frozen=True)
class RebalanceResult:
    allocations: Tuple[AllocationLine, ...]
    total_value: float
    drift_score: float

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(a) for a in self.allocations])


def classify_account(account_type: Union[AccountType, str]) -> AssetClass:
    return ACCOUNT_ASSET_CLASS[AccountType(account_type)]


def get_risk_profile(name: str) -> RiskProfile:
    key = name.lower()
    if key not in RISK_PROFILES:
        raise KeyError(f"Unknown risk profile '{name}'. Available: {list(RISK_PROFILES.keys())}")
    return RISK_PROFILES[key]


def _action(difference: float, tolerance: float) -> RebalanceAction:
    if difference > tolerance:
        return RebalanceAction.SELL
    if difference < -tolerance:
        return RebalanceAction.BUY
    return RebalanceAction.HOLD


def calculate_allocations(
    balances: Iterable[Tuple[Union[AccountType, str], float]],
    profile: Union[RiskProfile, str],
    tolerance_pct: float = 2.0,
) -> RebalanceResult:
    """
    Parameters
    ----------
    balances : iterable of (account type, balance)
    profile : RiskProfile or one of "conservative", "moderate", "aggressive"
    tolerance_pct : float
        Percentage-point band around the target inside which a class is HOLD.
    """
    if isinstance(profile, str):
        profile = get_risk_profile(profile)

    values = {ac: 0.0 for ac in AssetClass}
    for account_type, balance in balances:
        values[classify_account(account_type)] += balance
    total = sum(values.values())

    lines = []
    for ac in AssetClass:
        current_pct = values[ac] / total * 100.0 if total > 0 else 0.0
        target = profile.target_pct(ac)
        diff = current_pct - target
        lines.append(AllocationLine(
            asset_class=ac,
            current_value=values[ac],
            current_pct=current_pct,
            target_pct=target,
            difference_pct=diff,
            action=_action(diff, tolerance_pct),
            adjust_amount=abs(diff) / 100.0 * total,
        ))

    return RebalanceResult(
        allocations=tuple(lines),
        total_value=total,
        drift_score=sum(abs(line.difference_pct) for line in lines),
    )


def rebalance_scenario(
    scenario: ScenarioInput,
    profile: Union[RiskProfile, str] = "moderate",
    tolerance_pct: float = 2.0,
) -> RebalanceResult:
    return calculate_allocations(
        ((a.type, a.balance) for a in scenario.accounts), profile, tolerance_pct
    )
