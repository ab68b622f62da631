import logging
from dataclasses import replace
from datetime import date

import numpy as np
import pandas as pd
import pytest

from core.config import ProjectionConfig
from core.errors import ScenarioError
from core.results import WarningCode
from core.schema import (
    AccountType,
    Assumptions,
    ContributionRule,
    Frequency,
    GoalItem,
    GoalType,
    GrowthRule,
    Household,
    LoanItem,
    LoanType,
)
from engine import inflation_index, project, to_nominal, to_real
from tests.helpers import account, expense, income, loan, make_scenario

NO_TAX = ProjectionConfig(include_taxes=False)


def _loan(principal=12_000, apr=0.0, term=12, start=date(2024, 12, 1), **kwargs):
    return LoanItem(
        id="loan", name="loan", type=LoanType.AUTO, principal=principal,
        apr=apr, term_months=term, start_date=start, **kwargs,
    )


def test_monthly_surplus_accumulates_in_savings():
    scenario = make_scenario(
        incomes=(income("pay", 5_000),),
        expenses=(expense("rent", 3_000),),
        accounts=(account("savings", 10_000),),
    )
    result = project(scenario, NO_TAX)

    assert len(result.monthly) == 12
    assert all(m.cash_flow == 2_000.00 for m in result.monthly)
    assert result.monthly[-1].net_worth == 34_000.00

    (year,) = result.annual
    assert year.year == 2025
    assert year.total_income == 60_000.00
    assert year.total_expenses == 36_000.00
    assert year.net_savings == 24_000.00
    assert year.start_net_worth == 10_000.00
    assert year.end_net_worth == 34_000.00


def test_one_time_income_lands_in_its_start_month_only():
    scenario = make_scenario(
        incomes=(income("gift", 1_000, Frequency.ONE_TIME, start=date(2025, 3, 20)),),
    )
    result = project(scenario, NO_TAX)
    incomes = [m.income for m in result.monthly]
    assert incomes[2] == 1_000.00
    assert sum(incomes) == 1_000.00


def test_items_respect_start_and_end_dates():
    scenario = make_scenario(
        incomes=(income("job", 1_000, start=date(2025, 3, 15)),),
        expenses=(expense("gym", 100, end_date=date(2025, 6, 15)),),
    )
    result = project(scenario, NO_TAX)
    assert [m.income for m in result.monthly[:3]] == [0.0, 0.0, 1_000.00]
    assert result.monthly[5].expenses == 100.00
    assert result.monthly[6].expenses == 0.0


def test_track_inflation_compounds_monthly():
    scenario = make_scenario(
        inflation=0.12,
        expenses=(expense("food", 1_000, growth_rule=GrowthRule.TRACK_INFLATION),),
    )
    result = project(scenario, NO_TAX)
    assert result.monthly[0].expenses == 1_000.00
    assert result.monthly[11].expenses == round(1_000 * 1.01 ** 11, 2)


def test_custom_growth_uses_item_rate():
    scenario = make_scenario(
        inflation=0.12,
        incomes=(income("pay", 1_000, growth_rule=GrowthRule.CUSTOM_PERCENT, growth_rate=0.24),),
    )
    result = project(scenario, NO_TAX)
    assert result.monthly[1].income == 1_020.00


def test_loan_payments_and_liabilities():
    scenario = make_scenario(
        loans=(_loan(),),
        accounts=(account("savings", 20_000),),
    )
    result = project(scenario, NO_TAX)

    assert all(m.loan_payments == 1_000.00 for m in result.monthly)
    assert result.monthly[0].liabilities == 11_000.00
    assert result.monthly[-1].liabilities == 0.0
    assert result.monthly[-1].net_worth == 8_000.00
    assert result.annual[0].start_net_worth == 8_000.00

    deficits = [w for w in result.warnings if w.code is WarningCode.DEFICIT_MONTH]
    assert len(deficits) == 12


def test_loan_not_started_carries_no_liability():
    scenario = make_scenario(loans=(_loan(start=date(2025, 6, 1)),))
    result = project(scenario, NO_TAX)
    assert result.monthly[4].liabilities == 0.0
    assert result.monthly[5].liabilities == 12_000.00
    assert result.monthly[5].loan_payments == 0.0
    assert result.monthly[6].loan_payments == 1_000.00


def test_account_growth_at_expected_return():
    scenario = make_scenario(accounts=(account("savings", 12_000, expected_return=0.12),))
    result = project(scenario, NO_TAX)
    assert result.monthly[0].investment_returns == 120.00
    assert result.monthly[-1].assets == round(12_000 * 1.01 ** 12, 2)


def test_surplus_goes_to_cash_accounts_and_contributions_first():
    scenario = make_scenario(
        incomes=(income("pay", 1_000),),
        accounts=(
            account("savings", 1_000),
            account("roth", 1_000, type=AccountType.ROTH),
        ),
        contributions=(ContributionRule("roth", 200, date(2025, 1, 1)),),
    )
    result = project(scenario, NO_TAX)
    balances = result.series.account_balances
    assert balances["roth"][-1].value == 1_000 + 12 * 200
    assert balances["savings"][-1].value == 1_000 + 12 * 800


def test_contribution_escalates_each_year():
    scenario = make_scenario(
        end=date(2026, 12, 31),
        incomes=(income("pay", 2_000),),
        accounts=(account("savings", 0), account("ira", 0, type=AccountType.TRADITIONAL)),
        contributions=(ContributionRule("ira", 100, date(2025, 1, 1), escalation_rate=0.10),),
    )
    result = project(scenario, NO_TAX)
    ira = result.series.account_balances["ira"]
    assert ira[11].value == 1_200.00
    assert ira[12].value == 1_310.00


def test_surplus_without_accounts_is_unallocated_cash():
    scenario = make_scenario(incomes=(income("pay", 1_000),))
    result = project(scenario, NO_TAX)
    assert result.monthly[-1].assets == 12_000.00
    assert len(result.series.account_balances) == 0


def test_income_tax_is_charged_monthly():
    scenario = make_scenario(incomes=(income("pay", 5_000),))
    result = project(scenario)
    assert result.monthly[0].taxes == 434.67
    assert result.annual[0].taxes == 5_216.00


def test_one_time_income_pays_incremental_tax():
    scenario = make_scenario(
        incomes=(income("sale", 60_000, Frequency.ONE_TIME, start=date(2025, 3, 1)),),
    )
    result = project(scenario)
    assert result.monthly[2].taxes == 5_216.00
    assert result.monthly[3].taxes == 0.0


def test_taxable_account_investment_income_is_taxed():
    scenario = make_scenario(
        incomes=(income("pay", 5_000),),
        accounts=(
            account("savings", 0),
            account("brokerage", 120_000, type=AccountType.TAXABLE),
        ),
    )
    scenario = replace(scenario, assumptions=Assumptions(inflation_rate=0.0, taxable_interest_yield=0.12))
    result = project(scenario)
    # 120,000 × 1% monthly yield × 12% marginal rate = 144 on top of wage tax
    assert result.monthly[0].taxes == 578.67
    assert result.monthly[-1].taxes == 578.67


def test_high_tax_drag_warning():
    scenario = make_scenario(incomes=(income("pay", 5_000),))
    result = project(scenario, ProjectionConfig(high_tax_drag_threshold=0.05))
    drags = [w for w in result.warnings if w.code is WarningCode.HIGH_TAX_DRAG]
    assert len(drags) == 1
    assert drags[0].timestamp == pd.Timestamp("2025-01-01")


def test_goal_shortfall_warning_only_for_missed_goals():
    goals = (
        GoalItem("big", "big", GoalType.HOME_PURCHASE, 100_000, date(2025, 6, 1), 1),
        GoalItem("small", "small", GoalType.EMERGENCY_FUND, 5_000, date(2025, 6, 1), 2),
    )
    scenario = make_scenario(
        incomes=(income("pay", 1_000),),
        accounts=(account("savings", 5_000),),
        goals=goals,
    )
    result = project(scenario, NO_TAX)
    shortfalls = [w for w in result.warnings if w.code is WarningCode.GOAL_SHORTFALL]
    assert len(shortfalls) == 1
    assert "big" in shortfalls[0].message
    assert shortfalls[0].timestamp == pd.Timestamp("2025-06-01")


def test_missing_horizon_raises():
    scenario = make_scenario(end=None)
    with pytest.raises(ScenarioError):
        project(scenario)


def test_inverted_horizon_raises():
    scenario = make_scenario(start=date(2026, 1, 1), end=date(2025, 1, 1))
    with pytest.raises(ScenarioError):
        project(scenario)


def test_sample_scenario_projection(sample_scenario):
    result = project(sample_scenario)

    assert len(result.monthly) == 120
    assert [r.year for r in result.annual] == list(range(2025, 2035))
    assert [e.item_id for e in result.exclusions] == ["side-gig"]

    # the auto loan started 2024-07 for 48 months; last payment 2028-07
    by_date = {m.date: m for m in result.monthly}
    assert 0 < result.monthly[0].liabilities < 24_000
    assert by_date[pd.Timestamp("2028-06-01")].liabilities > 0
    assert by_date[pd.Timestamp("2028-07-01")].liabilities == 0.0
    assert by_date[pd.Timestamp("2028-08-01")].loan_payments == 0.0

    # bonus lands in March 2026 only
    march = by_date[pd.Timestamp("2026-03-01")]
    feb = by_date[pd.Timestamp("2026-02-01")]
    assert 5_000 < march.income - feb.income < 5_100

    for prev, row in zip(result.annual, result.annual[1:]):
        assert row.start_net_worth == prev.end_net_worth


def test_projection_is_deterministic(sample_scenario):
    first = project(sample_scenario)
    second = project(sample_scenario)
    assert first.input_hash == second.input_hash
    assert len(first.input_hash) == 64
    assert first.monthly == second.monthly
    assert first.annual == second.annual


def test_input_hash_changes_with_input(sample_scenario):
    other = replace(sample_scenario, household=Household(date(2025, 1, 1), date(2030, 12, 31)))
    assert project(other).input_hash != project(sample_scenario).input_hash


def test_real_and_nominal_round_trip_through_index():
    index = inflation_index(13, 0.12)
    assert index[0] == 1.0
    assert index[12] == pytest.approx(1.01 ** 12)
    nominal = np.full(13, 100.0)
    assert to_nominal(to_real(nominal, index), index) == pytest.approx(nominal)


def test_result_frames(sample_scenario):
    result = project(sample_scenario)
    monthly = result.monthly_frame()
    annual = result.annual_frame()
    assert len(monthly) == 120
    assert "net_worth" in monthly.columns
    assert list(annual["year"]) == list(range(2025, 2035))


def test_loan_paid_off_mid_year_reports_partial_year_totals():
    scenario = make_scenario(loans=(loan("car", 6_000, term=6),), accounts=(account("savings", 10_000),))
    result = project(scenario, NO_TAX)
    assert [m.loan_payments for m in result.monthly[:7]] == [1_000.00] * 6 + [0.0]
    assert result.monthly[5].liabilities == 0.0
    assert result.annual[0].loan_payments == 6_000.00
    assert result.annual[0].end_net_worth == 4_000.00


def test_sample_loan_payoff_year_totals(sample_scenario):
    result = project(sample_scenario)
    payoff_year = next(r for r in result.annual if r.year == 2028)
    months = [m for m in result.monthly if m.date.year == 2028]
    paying = [m.loan_payments for m in months if m.loan_payments > 0]
    assert len(paying) == 7
    assert payoff_year.loan_payments == pytest.approx(sum(m.loan_payments for m in months), abs=0.05)


def test_underpaying_loan_keeps_its_balance_after_the_term(caplog):
    scenario = make_scenario(
        end=date(2026, 6, 30),
        loans=(loan("stuck", 10_000, apr=0.12, payment_override=50),),
    )
    with caplog.at_level(logging.WARNING, logger="engine.cashflow"):
        result = project(scenario, NO_TAX)
    assert "not repaid" in caplog.text

    end_of_term = result.monthly[11]
    assert end_of_term.loan_payments == 50.00
    assert end_of_term.liabilities > 10_000
    assert result.monthly[12].loan_payments == 0.0
    assert result.monthly[-1].liabilities == end_of_term.liabilities
