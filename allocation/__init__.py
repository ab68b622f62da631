"""
Allocation package — asset-class drift and rebalancing actions.
"""

from .rebalancing import (
    RISK_PROFILES,
    AllocationLine,
    AssetClass,
    RebalanceAction,
    RebalanceResult,
    RiskProfile,
    calculate_allocations,
    classify_account,
    get_risk_profile,
    rebalance_scenario,
)

__all__ = [
    "RISK_PROFILES",
    "AllocationLine",
    "AssetClass",
    "RebalanceAction",
    "RebalanceResult",
    "RiskProfile",
    "calculate_allocations",
    "classify_account",
    "get_risk_profile",
    "rebalance_scenario",
]
