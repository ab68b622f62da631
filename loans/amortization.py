"""
Loan amortization — level payment, month-by-month schedules and payoff
acceleration under extra payments.

Conventions:
  1. annual_rate_pct is a percent (6.0 == 6%); monthly rate = annual / 100 / 12
  2. Full precision per row; rounding is left to whoever displays the schedule
  3. Payment row k falls on the month start k months after the loan start
  4. Balance never goes below zero; a sub-cent residual is folded into the
     last principal payment so a full schedule ends at exactly 0
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from core.config import MAX_SEARCH_MONTHS
from core.utils import month_starts

SETTLE_TOLERANCE = 0.005


@dataclass(frozen=True)
class AmortizationRow:
    month: int
    date: Optional[pd.Timestamp]
    payment: float
    principal: float
    interest: float
    balance: float
    cumulative_interest: float
    cumulative_principal: float


@dataclass(frozen=True)
class PayoffAcceleration:
    """months are None when the balance does not reach zero within the search cap."""

    original_months: Optional[int]
    accelerated_months: Optional[int]
    months_saved: Optional[int]
    original_interest: float
    accelerated_interest: float
    interest_saved: Optional[float]


def monthly_rate_from_pct(annual_rate_pct: float) -> float:
    return float(annual_rate_pct) / 100.0 / 12.0


def level_payment(principal: float, monthly_rate: float, n_months: int) -> float:
    """Standard fully-amortizing level payment (PMT) with zero-rate guard."""
    if n_months <= 0:
        return float(principal)
    if abs(monthly_rate) < 1e-12:
        return float(principal) / n_months
    growth = (1 + monthly_rate) ** n_months
    return float(principal) * (monthly_rate * growth) / (growth - 1)


def _step(balance: float, monthly_rate: float, payment: float) -> Tuple[float, float, float]:
    """One month: (interest, principal_paid, new_balance)."""
    interest = balance * monthly_rate
    principal_paid = min(payment - interest, balance)
    new_balance = max(balance - principal_paid, 0.0)
    if 0.0 < new_balance < SETTLE_TOLERANCE:
        principal_paid += new_balance
        new_balance = 0.0
    return interest, principal_paid, new_balance


def amortize(
    principal: float,
    annual_rate_pct: float,
    term_months: int,
    monthly_payment: Optional[float] = None,
    start_date: Optional[date] = None,
) -> List[AmortizationRow]:
    """
    Build the schedule until the balance reaches zero or the term runs out.

    monthly_payment defaults to the level payment for the term; pass a larger
    payment (base + extra) to model prepayment. A payment below the interest
    due grows the balance and the schedule simply ends at term_months.
    """
    if principal <= 0 or term_months <= 0:
        return []

    r = monthly_rate_from_pct(annual_rate_pct)
    payment = level_payment(principal, r, term_months) if monthly_payment is None else float(monthly_payment)
    dates = month_starts(start_date, term_months + 1)[1:] if start_date is not None else None

    rows = []
    balance = float(principal)
    cum_interest = 0.0
    cum_principal = 0.0
    for k in range(term_months):
        interest, principal_paid, balance = _step(balance, r, payment)
        cum_interest += interest
        cum_principal += principal_paid
        rows.append(
            AmortizationRow(
                month=k + 1,
                date=dates[k] if dates is not None else None,
                payment=interest + principal_paid,
                principal=principal_paid,
                interest=interest,
                balance=balance,
                cumulative_interest=cum_interest,
                cumulative_principal=cum_principal,
            )
        )
        if balance == 0.0:
            break
    return rows


def schedule_totals(rows: Sequence[AmortizationRow]) -> dict:
    return {
        "months": len(rows),
        "total_paid": sum(r.payment for r in rows),
        "total_principal": sum(r.principal for r in rows),
        "total_interest": sum(r.interest for r in rows),
        "final_balance": rows[-1].balance if rows else 0.0,
    }


def schedule_to_dataframe(rows: Sequence[AmortizationRow]) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in rows])


def months_to_payoff(
    principal: float,
    monthly_rate: float,
    payment: float,
    *,
    max_months: int = MAX_SEARCH_MONTHS,
) -> Tuple[Optional[int], float]:
    """
    (months until the balance is zero, interest paid along the way).
    months is None if the cap is reached first; interest then covers the
    capped horizon.
    """
    balance = float(principal)
    total_interest = 0.0
    if balance <= 0:
        return 0, 0.0
    for month in range(1, max_months + 1):
        interest, _, balance = _step(balance, monthly_rate, payment)
        total_interest += interest
        if balance == 0.0:
            return month, total_interest
    return None, total_interest


def payoff_acceleration(
    principal: float,
    annual_rate_pct: float,
    term_months: int,
    extra_monthly: float,
    monthly_payment: Optional[float] = None,
    *,
    max_months: int = MAX_SEARCH_MONTHS,
) -> PayoffAcceleration:
    """Compare the base schedule with the same loan paying extra_monthly on top."""
    r = monthly_rate_from_pct(annual_rate_pct)
    base = level_payment(principal, r, term_months) if monthly_payment is None else float(monthly_payment)

    orig_months, orig_interest = months_to_payoff(principal, r, base, max_months=max_months)
    acc_months, acc_interest = months_to_payoff(
        principal, r, base + max(float(extra_monthly), 0.0), max_months=max_months
    )

    both = orig_months is not None and acc_months is not None
    return PayoffAcceleration(
        original_months=orig_months,
        accelerated_months=acc_months,
        months_saved=orig_months - acc_months if both else None,
        original_interest=orig_interest,
        accelerated_interest=acc_interest,
        interest_saved=orig_interest - acc_interest if both else None,
    )
