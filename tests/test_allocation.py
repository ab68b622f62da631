import pytest

from allocation import (
    AssetClass,
    RebalanceAction,
    calculate_allocations,
    classify_account,
    rebalance_scenario,
)
from core.schema import AccountType


def _line(result, asset_class):
    return next(a for a in result.allocations if a.asset_class is asset_class)


@pytest.mark.parametrize(
    "account_type, asset_class",
    [
        (AccountType.SAVINGS, AssetClass.CASH),
        (AccountType.CHECKING, AssetClass.CASH),
        (AccountType.TAXABLE, AssetClass.STOCKS),
        (AccountType.TRADITIONAL, AssetClass.STOCKS),
        ("ROTH", AssetClass.STOCKS),
    ],
)
def test_classify_account(account_type, asset_class):
    assert classify_account(account_type) is asset_class


def test_moderate_profile_actions():
    result = calculate_allocations(
        [(AccountType.SAVINGS, 20_000), (AccountType.TAXABLE, 80_000)], "moderate"
    )
    assert result.total_value == 100_000

    stocks = _line(result, AssetClass.STOCKS)
    assert stocks.current_pct == 80.0
    assert stocks.difference_pct == 20.0
    assert stocks.action is RebalanceAction.SELL
    assert stocks.adjust_amount == pytest.approx(20_000)

    bonds = _line(result, AssetClass.BONDS)
    assert bonds.current_value == 0.0
    assert bonds.action is RebalanceAction.BUY
    assert bonds.adjust_amount == pytest.approx(30_000)

    cash = _line(result, AssetClass.CASH)
    assert cash.action is RebalanceAction.SELL
    assert result.drift_score == pytest.approx(60.0)


def test_small_drift_holds():
    result = calculate_allocations([(AccountType.CHECKING, 11), (AccountType.ROTH, 89)], "moderate")
    assert _line(result, AssetClass.CASH).action is RebalanceAction.HOLD


def test_empty_portfolio():
    result = calculate_allocations([], "conservative")
    assert result.total_value == 0
    assert all(a.current_pct == 0.0 for a in result.allocations)
    assert all(a.adjust_amount == 0.0 for a in result.allocations)
    assert result.drift_score == pytest.approx(100.0)


def test_unknown_profile_raises():
    with pytest.raises(KeyError):
        calculate_allocations([(AccountType.SAVINGS, 1)], "yolo")


def test_rebalance_scenario(sample_scenario):
    result = rebalance_scenario(sample_scenario, "aggressive")
    assert result.total_value == pytest.approx(82_000)
    assert _line(result, AssetClass.CASH).current_value == pytest.approx(12_000)
    assert len(result.to_dataframe()) == 3
