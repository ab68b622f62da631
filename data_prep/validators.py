"""
Data quality checks for scenarios before they enter the engine.

Two layers:
- partition_scenario(): the silent-skip policy. Items the engine cannot use
  (missing start date, non-positive amount/principal/term, ...) are removed
  and reported as Exclusion records; nothing is raised.
- validate_scenario(): a full report with blocking errors (no usable
  horizon) and informational warnings (suspicious units, duplicates, ...).
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Tuple

from core.errors import ScenarioError
from core.results import Exclusion
from core.schema import (
    ContributionRule,
    GrowthRule,
    Household,
    LoanItem,
    ScenarioInput,
)
from tax.tables import BASE_TAX_YEAR

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a scenario."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def horizon_problem(household: Household) -> Optional[str]:
    if household.start_date is None:
        return "household start date is missing"
    if household.end_date is None:
        return "household end date is missing"
    if household.end_date < household.start_date:
        return "household end date precedes its start date"
    return None


def require_horizon(household: Household) -> None:
    problem = horizon_problem(household)
    if problem is not None:
        raise ScenarioError(problem)


def _cashflow_reason(item) -> Optional[str]:
    if item.start_date is None:
        return "missing start date"
    if item.amount <= 0:
        return "non-positive amount"
    if item.end_date is not None and item.end_date < item.start_date:
        return "end date precedes start date"
    return None


def _loan_reason(loan: LoanItem) -> Optional[str]:
    if loan.start_date is None:
        return "missing start date"
    if loan.principal <= 0:
        return "non-positive principal"
    if loan.term_months <= 0:
        return "non-positive term"
    if loan.apr < 0:
        return "negative APR"
    return None


def _contribution_reason(rule: ContributionRule, account_ids: set) -> Optional[str]:
    if rule.start_date is None:
        return "missing start date"
    if rule.amount_monthly <= 0:
        return "non-positive amount"
    if rule.account_id not in account_ids:
        return f"unknown account {rule.account_id!r}"
    return None


def _keep(kind: str, items: Iterable, reason_of, excluded: List[Exclusion], id_of=lambda x: x.id) -> tuple:
    kept = []
    for item in items:
        reason = reason_of(item)
        if reason is None:
            kept.append(item)
            continue
        ex = Exclusion(kind=kind, item_id=str(id_of(item)), reason=reason)
        logger.warning("Excluding %s %s: %s", ex.kind, ex.item_id, ex.reason)
        excluded.append(ex)
    return tuple(kept)


def partition_scenario(scenario: ScenarioInput) -> Tuple[ScenarioInput, Tuple[Exclusion, ...]]:
    """Return (scenario restricted to usable items, exclusions)."""
    excluded: List[Exclusion] = []
    account_ids = {a.id for a in scenario.accounts}

    incomes = _keep("income", scenario.incomes, _cashflow_reason, excluded)
    expenses = _keep("expense", scenario.expenses, _cashflow_reason, excluded)
    loans = _keep("loan", scenario.loans, _loan_reason, excluded)
    goals = _keep(
        "goal",
        scenario.goals,
        lambda g: "non-positive target amount" if g.target_amount <= 0 else None,
        excluded,
    )
    contributions = _keep(
        "contribution",
        scenario.contributions,
        lambda c: _contribution_reason(c, account_ids),
        excluded,
        id_of=lambda c: c.account_id,
    )

    cleaned = replace(
        scenario,
        incomes=incomes,
        expenses=expenses,
        loans=loans,
        goals=goals,
        contributions=contributions,
    )
    return cleaned, tuple(excluded)


def _duplicates(ids: Iterable[str]) -> List[str]:
    return sorted(k for k, n in Counter(ids).items() if n > 1)


def validate_scenario(scenario: ScenarioInput) -> ValidationResult:
    """
    Run all validation checks on a scenario.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = ValidationResult()

    problem = horizon_problem(scenario.household)
    if problem is not None:
        result.errors.append(problem.capitalize() + ".")

    _, exclusions = partition_scenario(scenario)
    for ex in exclusions:
        result.warnings.append(f"{ex.kind} {ex.item_id} will be excluded: {ex.reason}.")

    for kind, items in (
        ("income", scenario.incomes),
        ("expense", scenario.expenses),
        ("account", scenario.accounts),
        ("loan", scenario.loans),
        ("goal", scenario.goals),
    ):
        dups = _duplicates(i.id for i in items)
        if dups:
            result.warnings.append(f"Duplicate {kind} ids: {dups}")

    # --- Growth rules ---
    flows: Tuple = scenario.incomes + scenario.expenses
    for item in flows:
        if GrowthRule(item.growth_rule) is GrowthRule.CUSTOM_PERCENT and item.growth_rate is None:
            result.warnings.append(f"{item.id} uses CUSTOM_PERCENT growth without a rate; 0% assumed.")

    # --- Rates should be decimals (0.07 not 7.0) ---
    for acct in scenario.accounts:
        if abs(acct.expected_return) > 0.5:
            result.warnings.append(
                f"Account {acct.id} expects a {acct.expected_return:.2f} return — check percent vs "
                f"decimal form."
            )
    if abs(scenario.assumptions.inflation_rate) > 0.2:
        result.warnings.append("Inflation rate above 20% — check percent vs decimal form.")

    # --- Loans ---
    for loan in scenario.loans:
        if loan.payment_override is not None and loan.principal > 0:
            first_interest = loan.principal * loan.apr / 12.0
            if loan.payment_override <= first_interest:
                result.warnings.append(
                    f"Loan {loan.id} payment override does not cover first-month interest; "
                    f"the balance will not amortize."
                )

    if scenario.tax_profile.tax_year != BASE_TAX_YEAR:
        result.warnings.append(
            f"Tax year {scenario.tax_profile.tax_year} requested; {BASE_TAX_YEAR} tables are used, "
            f"indexed by inflation."
        )

    undated = [g.id for g in scenario.goals if g.target_date is None]
    if undated:
        result.warnings.append(f"Goals without a target date are not scored: {undated}")

    return result

