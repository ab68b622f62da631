"""
Multi-year tax planning helpers.

  analyze_roth_conversion      — spread a traditional balance into Roth over N
                                 years and weigh the tax paid now against the
                                 tax avoided in retirement
  project_multi_year_tax       — year-by-year liability across a working and
                                 retired horizon, with optional conversions
  analyze_tax_loss_harvesting  — which losing positions to realize this year
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional, Tuple

from core.schema import TaxProfile
from core.utils import round_cents

from .liability import annual_taxes

ROTH_GROWTH_RATE = 0.07
RETIREMENT_YEARS = 30
RETIREMENT_WITHDRAWAL_RATE = 0.04
CAPITAL_LOSS_DEDUCTION_LIMIT = 3_000.0


# ----- Roth conversion -----


@dataclass(frozen=True)
class RothConversionYear:
    age: int
    conversion_amount: float
    tax_cost: float
    traditional_balance: float
    roth_balance: float


@dataclass(frozen=True)
class RothConversionResult:
    year_by_year: Tuple[RothConversionYear, ...]
    total_tax_paid: float
    tax_saved_in_retirement: float
    net_benefit: float
    break_even_age: Optional[int]
    recommendation: str


def analyze_roth_conversion(
    traditional_balance: float,
    current_age: int,
    retirement_age: int,
    current_marginal_rate: float,
    retirement_marginal_rate: float,
    years_to_convert: int,
    *,
    annual_conversion_limit: Optional[float] = None,
    growth_rate: float = ROTH_GROWTH_RATE,
    retirement_years: int = RETIREMENT_YEARS,
    withdrawal_rate: float = RETIREMENT_WITHDRAWAL_RATE,
) -> RothConversionResult:
    """
    Convert balance / years_to_convert per year (capped by
    annual_conversion_limit), paying tax at current_marginal_rate on each
    conversion. Both balances grow at growth_rate after every year and keep
    growing until retirement_age.

    Retirement savings assume withdrawals of withdrawal_rate of the combined
    balance for retirement_years, with the Roth share escaping
    retirement_marginal_rate. break_even_age is None when the conversions
    never produce annual savings.
    """
    traditional = float(traditional_balance)
    roth = 0.0
    total_tax = 0.0
    rows = []

    if years_to_convert > 0:
        per_year = traditional / years_to_convert
        if annual_conversion_limit is not None:
            per_year = min(per_year, annual_conversion_limit)

        for i in range(years_to_convert):
            amount = min(per_year, traditional)
            tax_cost = amount * current_marginal_rate
            traditional -= amount
            roth += amount
            total_tax += tax_cost

            traditional *= 1 + growth_rate
            roth *= 1 + growth_rate
            rows.append(RothConversionYear(current_age + i, amount, tax_cost, traditional, roth))

            if traditional < 1:
                traditional = 0.0
                break

    last_age = rows[-1].age if rows else current_age - 1
    for age in range(last_age + 1, retirement_age + 1):
        traditional *= 1 + growth_rate
        roth *= 1 + growth_rate
        rows.append(RothConversionYear(age, 0.0, 0.0, traditional, roth))

    combined = roth + traditional
    if combined > 0:
        annual_withdrawal = combined * withdrawal_rate
        tax_saved = (roth / combined) * annual_withdrawal * retirement_marginal_rate * retirement_years
    else:
        tax_saved = 0.0
    net_benefit = tax_saved - total_tax

    annual_savings = roth * withdrawal_rate * retirement_marginal_rate
    break_even_age = None
    if annual_savings > 0:
        break_even_age = int(round_cents(retirement_age + total_tax / annual_savings, 0))

    if current_marginal_rate >= retirement_marginal_rate:
        recommendation = (
            "Not recommended: the current rate is equal to or higher than the expected "
            "retirement rate. Keep the traditional balance."
        )
    elif net_benefit > 0:
        recommendation = (
            f"Recommended: converting over {years_to_convert} years saves "
            f"${net_benefit:,.0f} in lifetime taxes."
        )
        if break_even_age is not None:
            recommendation += f" Break-even at age {break_even_age}."
    else:
        recommendation = "Not recommended: conversion costs exceed retirement tax savings."

    return RothConversionResult(
        year_by_year=tuple(rows),
        total_tax_paid=total_tax,
        tax_saved_in_retirement=tax_saved,
        net_benefit=net_benefit,
        break_even_age=break_even_age,
        recommendation=recommendation,
    )


# ----- Multi-year projection -----


@dataclass(frozen=True)
class TaxYear:
    age: int
    gross_income: float
    federal_tax: float
    state_tax: float
    payroll_tax: float
    total_tax: float
    effective_rate: float
    marginal_rate: float


@dataclass(frozen=True)
class MultiYearTaxResult:
    year_by_year: Tuple[TaxYear, ...]
    total_lifetime_tax: float
    average_effective_rate: float


def project_multi_year_tax(
    current_income: float,
    income_growth_rate: float,
    current_age: int,
    retirement_age: int,
    projection_years: int,
    expected_retirement_income: float,
    profile: TaxProfile,
    *,
    roth_conversions: Optional[Mapping[int, float]] = None,
) -> MultiYearTaxResult:
    """
    Wages grow at income_growth_rate until retirement_age, after which
    expected_retirement_income replaces them. roth_conversions maps an age to
    an amount added to that year's ordinary income. Payroll tax applies to
    wages only, so it stops at retirement.
    """
    conversions = dict(roth_conversions or {})
    rows = []
    for i in range(max(projection_years, 0)):
        age = current_age + i
        retired = age >= retirement_age
        wages = 0.0 if retired else current_income * (1 + income_growth_rate) ** i
        gross = (expected_retirement_income if retired else wages) + conversions.get(age, 0.0)

        t = annual_taxes(gross, profile, wages=wages)
        rows.append(
            TaxYear(
                age=age,
                gross_income=gross,
                federal_tax=t.federal,
                state_tax=t.state,
                payroll_tax=t.payroll,
                total_tax=t.total,
                effective_rate=t.effective_rate,
                marginal_rate=t.marginal_rate,
            )
        )

    lifetime = sum(r.total_tax for r in rows)
    lifetime_income = sum(r.gross_income for r in rows)
    return MultiYearTaxResult(
        year_by_year=tuple(rows),
        total_lifetime_tax=lifetime,
        average_effective_rate=lifetime / lifetime_income if lifetime_income > 0 else 0.0,
    )


# ----- Tax-loss harvesting -----


class HoldingPeriod(str, Enum):
    SHORT = "SHORT"
    LONG = "LONG"


@dataclass(frozen=True)
class TaxLot:
    symbol: str
    cost_basis: float
    current_value: float
    holding_period: HoldingPeriod = HoldingPeriod.LONG


@dataclass(frozen=True)
class HarvestCandidate:
    symbol: str
    unrealized_loss: float
    tax_savings: float
    holding_period: HoldingPeriod


@dataclass(frozen=True)
class TaxLossHarvestResult:
    candidates: Tuple[HarvestCandidate, ...]
    total_harvestable_losses: float
    estimated_tax_savings: float
    remaining_carryforward: float


def analyze_tax_loss_harvesting(
    lots: Iterable[TaxLot],
    realized_gains: float,
    marginal_rate: float,
    *,
    deduction_limit: float = CAPITAL_LOSS_DEDUCTION_LIMIT,
) -> TaxLossHarvestResult:
    """
    Losses first offset realized_gains, then up to deduction_limit of
    ordinary income; the rest carries forward. Savings use marginal_rate
    throughout.
    """
    candidates = []
    for lot in lots:
        loss = lot.cost_basis - lot.current_value
        if loss <= 0:
            continue
        candidates.append(HarvestCandidate(lot.symbol, loss, loss * marginal_rate, lot.holding_period))
    candidates.sort(key=lambda c: c.tax_savings, reverse=True)

    total_losses = sum(c.unrealized_loss for c in candidates)
    against_gains = min(total_losses, max(realized_gains, 0.0))
    remaining = total_losses - against_gains
    against_income = min(remaining, deduction_limit)

    return TaxLossHarvestResult(
        candidates=tuple(candidates),
        total_harvestable_losses=total_losses,
        estimated_tax_savings=(against_gains + against_income) * marginal_rate,
        remaining_carryforward=max(remaining - deduction_limit, 0.0),
    )
