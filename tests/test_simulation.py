from datetime import date

import numpy as np
import pandas as pd
import pytest

from behaviors import ExpectedReturnModel, SampledReturnModel
from core.config import MonteCarloConfig
from core.schema import AccountType
from distributions import (
    ReturnDistributionParams,
    ReturnSampler,
    account_correlation_matrix,
    get_volatility_preset,
)
from engine import prepare, project
from simulation import compute_trial_metrics, percentile_bands, run_trials, simulate, summarize_trials
from tests.helpers import account, income, make_scenario

SMALL = MonteCarloConfig(trials=100, seed=11)


def test_bands_are_ordered_every_month(sample_scenario):
    result = simulate(sample_scenario, SMALL)
    assert len(result.bands) == 120
    for b in result.bands:
        assert b.p10 <= b.p25 <= b.p50 <= b.p75 <= b.p90
    assert result.p10_final_net_worth <= result.median_final_net_worth <= result.p90_final_net_worth
    assert 0.0 <= result.success_rate <= 1.0
    assert result.bands_frame().shape == (120, 6)


def test_same_seed_same_result(sample_scenario):
    first = simulate(sample_scenario, SMALL)
    second = simulate(sample_scenario, SMALL)
    assert first.bands == second.bands
    assert first.success_rate == second.success_rate
    assert dict(first.goal_success_rates) == dict(second.goal_success_rates)

    other = simulate(sample_scenario, MonteCarloConfig(trials=100, seed=12))
    assert other.bands != first.bands


def test_out_of_range_config_is_clamped(sample_scenario):
    config = MonteCarloConfig(trials=10, volatility_pct=80).clamped()
    assert config.trials == 50
    assert config.volatility_pct == 50.0

    result = simulate(sample_scenario, MonteCarloConfig(trials=5_000, volatility_pct=0.1))
    assert result.trials == 2_000
    assert result.volatility_pct == 1.0


def test_single_trial_replays_through_projection(sample_scenario):
    run = run_trials(sample_scenario, MonteCarloConfig(trials=60, seed=7))
    replay = project(sample_scenario, return_model=SampledReturnModel(run.samples, trial=3))
    assert replay.monthly[-1].net_worth == pytest.approx(run.net_worth[3, -1], abs=0.01)


def test_success_rate_for_always_solvent_household():
    scenario = make_scenario(
        incomes=(income("pay", 1_000),),
        accounts=(account("savings", 10_000),),
    )
    result = simulate(scenario, MonteCarloConfig(trials=50, volatility_pct=1.0))
    assert result.success_rate == 1.0


def test_goal_success_rates(sample_scenario):
    result = simulate(sample_scenario, SMALL)
    assert set(result.goal_success_rates) == {"house", "emergency"}
    assert all(0.0 <= r <= 1.0 for r in result.goal_success_rates.values())


def test_trial_metrics_table(sample_scenario):
    run = run_trials(sample_scenario, SMALL)
    metrics = run.trial_metrics()
    assert len(metrics) == 100
    assert {"final_net_worth", "min_net_worth", "months_underwater", "goal_house"} <= set(metrics.columns)
    assert (metrics["min_net_worth"] <= metrics["final_net_worth"]).all()

    summary = summarize_trials(metrics)
    assert list(summary["Metric"]) == ["Final Net Worth", "Minimum Net Worth", "Months Underwater"]


def test_compute_trial_metrics_without_goals():
    net_worth = np.array([[100.0, -50.0, 20.0], [10.0, 20.0, 30.0]])
    scenario = make_scenario(end=date(2025, 3, 31))
    schedule = prepare(scenario).schedule
    metrics = compute_trial_metrics(net_worth, (), schedule)
    assert list(metrics["months_underwater"]) == [1, 0]
    assert list(metrics["min_net_worth"]) == [-50.0, 10.0]


def test_percentile_bands_use_linear_interpolation():
    net_worth = np.arange(11, dtype=float).reshape(11, 1)
    (band,) = percentile_bands(net_worth, pd.DatetimeIndex(["2025-01-01"]))
    assert (band.p10, band.p25, band.p50, band.p75, band.p90) == (1.0, 2.5, 5.0, 7.5, 9.0)


def test_sampler_shape_and_reproducibility():
    params = ReturnDistributionParams.from_pct(15.0)
    a = ReturnSampler(params, n_trials=20, seed=3).sample([0.07, 0.04], n_months=24)
    b = ReturnSampler(params, n_trials=20, seed=3).sample([0.07, 0.04], n_months=24)
    assert a.monthly.shape == (20, 2, 24)
    np.testing.assert_array_equal(a.monthly, b.monthly)
    assert a.monthly.min() >= -1.0


def test_sampler_correlates_accounts():
    params = ReturnDistributionParams.from_pct(15.0, correlation=0.9)
    samples = ReturnSampler(params, n_trials=200, seed=1).sample([0.07, 0.07], n_months=60)
    first = samples.monthly[:, 0, :].reshape(-1)
    second = samples.monthly[:, 1, :].reshape(-1)
    assert np.corrcoef(first, second)[0, 1] > 0.8


def test_volatility_presets():
    assert get_volatility_preset("Moderate").volatility_pct == 12.0
    with pytest.raises(KeyError):
        get_volatility_preset("reckless")


def test_expected_return_model_is_flat():
    dates = pd.date_range("2025-01-01", periods=12, freq="MS")
    accounts = (account("a", 0, expected_return=0.06), account("b", 0, expected_return=0.12))
    forecast = ExpectedReturnModel().forecast(accounts, dates)
    assert forecast.monthly_returns.shape == (2, 12)
    assert forecast.monthly_returns[0] == pytest.approx(np.full(12, 0.005))
    assert forecast.monthly_returns[1, -1] == pytest.approx(0.01)

    override = ExpectedReturnModel(override_annual_return=0.0).forecast(accounts, dates)
    assert not override.monthly_returns.any()


def test_sampled_return_summaries():
    params = ReturnDistributionParams.from_pct(12.0)
    table = params.summary([0.06, 0.03], labels=["stocks", "bonds"])
    assert list(table["Account"]) == ["stocks", "bonds"]
    assert table["Monthly Mean"].iloc[0] == pytest.approx(0.005)

    samples = ReturnSampler(params, n_trials=30, seed=5).sample([0.06, 0.03], n_months=36)
    assert samples.annualized().shape == (30, 2)
    assert len(samples.to_dataframe()) == 60
    summary = samples.summary()
    assert list(summary["account_idx"]) == [0, 1]
    assert (summary["P05"] <= summary["P95"]).all()


def test_invalid_negative_correlation_is_repaired():
    matrix = account_correlation_matrix(4, -0.9)
    assert np.allclose(np.diag(matrix), 1.0)
    assert np.linalg.eigvalsh(matrix).min() > -1e-10


def test_more_trials_narrow_sampling_noise():
    scenario = make_scenario(
        end=date(2034, 12, 31),
        accounts=(account("brokerage", 100_000, type=AccountType.TAXABLE, expected_return=0.07),),
    )

    def spread(trials):
        medians = [
            simulate(scenario, MonteCarloConfig(trials=trials, seed=seed)).median_final_net_worth
            for seed in range(6)
        ]
        return np.std(medians)

    assert spread(2_000) < spread(50) / 2
