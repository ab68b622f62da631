import json
import logging
from dataclasses import replace
from datetime import date

import pytest

from core.errors import ScenarioError
from core.schema import AccountType, Frequency, GrowthRule
from data_prep import load_scenario, partition_scenario, validate_scenario
from engine import project
from tests.helpers import clone_scenario, expense, income, loan, make_scenario, write_scenario


def test_load_converts_percents_and_balances(sample_scenario):
    s = sample_scenario
    assert s.assumptions.inflation_rate == pytest.approx(0.025)
    assert s.assumptions.realized_lt_gain_rate == pytest.approx(0.02)
    assert s.loans[0].apr == pytest.approx(0.06)
    assert s.contributions[0].escalation_rate == pytest.approx(0.03)

    brokerage = next(a for a in s.accounts if a.id == "brokerage")
    assert brokerage.type is AccountType.TAXABLE
    assert brokerage.expected_return == pytest.approx(0.07)
    assert brokerage.balance == pytest.approx(1_000 + 100 * 250 + 50 * 80)

    groceries = next(e for e in s.expenses if e.id == "groceries")
    assert groceries.frequency is Frequency.BIWEEKLY
    assert groceries.growth_rule is GrowthRule.CUSTOM_PERCENT
    assert groceries.growth_rate == pytest.approx(0.03)


def test_load_from_path_and_json_string(tmp_path, sample_scenario_dict, sample_scenario):
    path = write_scenario(tmp_path, sample_scenario_dict)
    assert load_scenario(path) == sample_scenario
    assert load_scenario(str(path)) == sample_scenario
    assert load_scenario(json.dumps(sample_scenario_dict)) == sample_scenario


def test_malformed_json_raises():
    with pytest.raises(ScenarioError):
        load_scenario('{"household": ')


def test_invalid_required_section_raises(sample_scenario_dict):
    data = clone_scenario(sample_scenario_dict)
    data["taxProfile"]["filingStatus"] = "MARRIED_SEPARATELY"
    with pytest.raises(ScenarioError) as exc:
        load_scenario(data)
    assert "taxProfile" in exc.value.reason


def test_invalid_item_is_dropped_unless_strict(sample_scenario_dict):
    data = clone_scenario(sample_scenario_dict)
    data["incomes"].append({"id": "odd", "amount": 100, "frequency": "QUARTERLY"})

    lenient = load_scenario(data)
    assert "odd" not in [i.id for i in lenient.incomes]

    with pytest.raises(ScenarioError):
        load_scenario(data, strict=True)


def test_unparseable_date_becomes_missing(sample_scenario_dict):
    data = clone_scenario(sample_scenario_dict)
    data["incomes"][0]["startDate"] = "not-a-date"
    scenario = load_scenario(data)
    assert scenario.incomes[0].start_date is None


def test_partition_excludes_undated_income(sample_scenario):
    cleaned, exclusions = partition_scenario(sample_scenario)
    assert [i.id for i in cleaned.incomes] == ["salary", "bonus"]
    assert len(exclusions) == 1
    assert exclusions[0].kind == "income"
    assert exclusions[0].item_id == "side-gig"
    assert exclusions[0].reason == "missing start date"


def test_partition_excludes_contribution_to_unknown_account(sample_scenario_dict):
    data = clone_scenario(sample_scenario_dict)
    data["contributions"].append({"accountId": "nope", "amountMonthly": 100, "startDate": "2025-01-01"})
    _, exclusions = partition_scenario(load_scenario(data))
    assert any(e.kind == "contribution" and e.item_id == "nope" for e in exclusions)


def test_validate_reports_missing_horizon(sample_scenario_dict):
    data = clone_scenario(sample_scenario_dict)
    data["household"]["endDate"] = None
    result = validate_scenario(load_scenario(data))
    assert not result.is_valid
    assert "ERRORS (1)" in result.summary()


def test_validate_flags_exclusions_as_warnings(sample_scenario):
    result = validate_scenario(sample_scenario)
    assert result.is_valid
    assert any("side-gig" in w for w in result.warnings)


@pytest.mark.parametrize(
    "field, item, kind, reason",
    [
        ("incomes", income("zero", 0), "income", "non-positive amount"),
        ("expenses", expense("backwards", 100, start=date(2025, 6, 1), end_date=date(2025, 1, 1)),
         "expense", "end date precedes start date"),
        ("loans", loan("free", 0), "loan", "non-positive principal"),
        ("loans", loan("instant", 1_000, term=0), "loan", "non-positive term"),
        ("loans", loan("odd", 1_000, apr=-0.01), "loan", "negative APR"),
    ],
)
def test_partition_exclusion_reasons(field, item, kind, reason):
    scenario = make_scenario(**{field: (item,)})
    cleaned, exclusions = partition_scenario(scenario)
    assert getattr(cleaned, field) == ()
    (ex,) = exclusions
    assert (ex.kind, ex.item_id, ex.reason) == (kind, item.id, reason)

    result = project(scenario)
    assert len(result.monthly) == 12
    assert result.exclusions == exclusions


def test_custom_growth_without_rate_warns_for_string_rule():
    scenario = make_scenario(incomes=(income("pay", 100, growth_rule="CUSTOM_PERCENT"),))
    result = validate_scenario(scenario)
    assert any("CUSTOM_PERCENT" in w for w in result.warnings)


def test_unsupported_tax_year_is_reported(sample_scenario, caplog):
    scenario = replace(sample_scenario, tax_profile=replace(sample_scenario.tax_profile, tax_year=2026))
    result = validate_scenario(scenario)
    assert result.is_valid
    assert any("Tax year 2026" in w for w in result.warnings)
    assert not any("Tax year" in w for w in validate_scenario(sample_scenario).warnings)

    with caplog.at_level(logging.WARNING, logger="engine.runner"):
        project(scenario)
    assert "Tax year 2026" in caplog.text
