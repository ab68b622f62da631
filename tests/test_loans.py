from datetime import date

import pandas as pd
import pytest

from loans import (
    Debt,
    PayoffStrategy,
    amortize,
    compare_payoff_strategies,
    level_payment,
    payoff_acceleration,
    schedule_totals,
    simulate_payoff,
)
from loans.amortization import schedule_to_dataframe


def test_mortgage_first_month_interest():
    rows = amortize(300_000, 6.0, 360)
    assert round(rows[0].interest, 2) == 1500.00
    assert round(rows[0].payment, 2) == 1798.65


def test_full_amortization_repays_principal():
    rows = amortize(300_000, 6.0, 360)
    totals = schedule_totals(rows)
    assert len(rows) == 360
    assert rows[-1].balance == 0.0
    assert totals["total_principal"] == pytest.approx(300_000, abs=0.01)
    assert rows[-1].cumulative_principal == pytest.approx(300_000, abs=0.01)


def test_zero_rate_is_straight_division():
    assert level_payment(12_000, 0.0, 12) == 1000.0
    rows = amortize(12_000, 0.0, 12)
    assert len(rows) == 12
    assert all(r.interest == 0.0 for r in rows)
    assert rows[-1].balance == 0.0


def test_schedule_is_dated_from_the_month_after_start():
    rows = amortize(10_000, 5.0, 24, start_date=date(2025, 1, 15))
    assert rows[0].date == pd.Timestamp("2025-02-01")
    assert rows[11].date == pd.Timestamp("2026-01-01")


def test_extra_payment_ends_schedule_early():
    base = level_payment(20_000, 0.06 / 12, 60)
    rows = amortize(20_000, 6.0, 60, monthly_payment=base + 200)
    assert len(rows) < 60
    assert rows[-1].balance == 0.0


def test_non_positive_principal_has_no_schedule():
    assert amortize(0, 5.0, 60) == []
    assert schedule_to_dataframe([]).empty


def test_payoff_acceleration_saves_time_and_interest():
    result = payoff_acceleration(300_000, 6.0, 360, extra_monthly=200)
    assert result.original_months == 360
    assert result.accelerated_months < 360
    assert result.months_saved == result.original_months - result.accelerated_months
    assert result.interest_saved > 0


def test_payment_below_interest_is_not_achievable():
    result = payoff_acceleration(100_000, 12.0, 360, extra_monthly=0, monthly_payment=500)
    assert result.original_months is None
    assert result.accelerated_months is None
    assert result.months_saved is None
    assert result.interest_saved is None


def _cards():
    return [
        Debt(id="visa", name="Visa", balance=5_000, apr=0.22, minimum_payment=150),
        Debt(id="store", name="Store card", balance=1_000, apr=0.10, minimum_payment=50),
    ]


def test_avalanche_targets_highest_rate_and_snowball_smallest_balance():
    comparison = compare_payoff_strategies(_cards(), extra_monthly=200)
    assert comparison.avalanche.payoff_order == ("visa", "store")
    assert comparison.snowball.payoff_order == ("store", "visa")
    assert comparison.interest_savings >= 0
    assert comparison.avalanche.total_months is not None
    assert comparison.snowball.total_months is not None


def test_payoff_strategy_accepts_string():
    plan = simulate_payoff(_cards(), 200, "SNOWBALL")
    assert plan.strategy is PayoffStrategy.SNOWBALL


def test_payoff_cap_reports_unfinished():
    debts = [Debt(id="d", name="d", balance=10_000, apr=0.24, minimum_payment=100)]
    plan = simulate_payoff(debts, 0, PayoffStrategy.AVALANCHE, max_months=600)
    assert plan.total_months is None
    assert plan.payoff_month["d"] is None
