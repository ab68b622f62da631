"""
Pydantic models for serialized scenario records.

Records arrive camelCase with percent-valued rates (aprPct, expectedReturnPct,
inflationRatePct, growthPct). This is the only place percents are converted to
decimals; every `to_domain()` returns the frozen types from core.schema.

Dates are parsed leniently: an unparseable date becomes None so the item is
excluded later by the silent-skip policy rather than failing the whole load.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, Any, List, Optional

import pandas as pd
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from core.schema import (
    AccountItem,
    AccountType,
    Assumptions,
    ContributionRule,
    ExpenseItem,
    FilingStatus,
    Frequency,
    GoalItem,
    GoalType,
    GrowthRule,
    Holding,
    Household,
    IncomeItem,
    LoanItem,
    LoanType,
    TaxProfile,
)

logger = logging.getLogger(__name__)


def _coerce_date(value: Any) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        logger.warning("Unparseable date %r treated as missing", value)
        return None
    return ts.date()


LenientDate = Annotated[Optional[date], BeforeValidator(_coerce_date)]


def _pct(value: Optional[float]) -> Optional[float]:
    return None if value is None else value / 100.0


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class HouseholdRecord(_Record):
    currency: str = "USD"
    anchor_date: LenientDate = Field(None, alias="anchorDate")
    start_date: LenientDate = Field(None, alias="startDate")
    end_date: LenientDate = Field(None, alias="endDate")

    def to_domain(self) -> Household:
        return Household(
            start_date=self.start_date,
            end_date=self.end_date,
            anchor_date=self.anchor_date,
            currency=self.currency,
        )


class AssumptionsRecord(_Record):
    inflation_rate_pct: float = Field(2.5, alias="inflationRatePct", ge=-50, le=100)
    taxable_interest_yield_pct: float = Field(0.0, alias="taxableInterestYieldPct")
    taxable_dividend_yield_pct: float = Field(0.0, alias="taxableDividendYieldPct")
    realized_st_gain_pct: float = Field(0.0, alias="realizedStGainPct")
    realized_lt_gain_pct: float = Field(0.0, alias="realizedLtGainPct")

    def to_domain(self) -> Assumptions:
        return Assumptions(
            inflation_rate=_pct(self.inflation_rate_pct),
            taxable_interest_yield=_pct(self.taxable_interest_yield_pct),
            taxable_dividend_yield=_pct(self.taxable_dividend_yield_pct),
            realized_st_gain_rate=_pct(self.realized_st_gain_pct),
            realized_lt_gain_rate=_pct(self.realized_lt_gain_pct),
        )


class TaxProfileRecord(_Record):
    filing_status: FilingStatus = Field(FilingStatus.SINGLE, alias="filingStatus")
    state_code: str = Field("", alias="stateCode")
    tax_year: int = Field(2024, alias="taxYear")
    include_payroll_taxes: bool = Field(True, alias="includePayrollTaxes")

    def to_domain(self) -> TaxProfile:
        return TaxProfile(
            filing_status=self.filing_status,
            state_code=self.state_code,
            tax_year=self.tax_year,
            include_payroll_taxes=self.include_payroll_taxes,
        )


class IncomeRecord(_Record):
    id: str
    name: str = ""
    amount: float
    frequency: Frequency
    start_date: LenientDate = Field(None, alias="startDate")
    end_date: LenientDate = Field(None, alias="endDate")
    growth_rule: GrowthRule = Field(GrowthRule.NONE, alias="growthRule")
    growth_pct: Optional[float] = Field(None, alias="growthPct")
    member_name: Optional[str] = Field(None, alias="memberName")

    def to_domain(self) -> IncomeItem:
        return IncomeItem(
            id=self.id,
            name=self.name or self.id,
            amount=self.amount,
            frequency=self.frequency,
            start_date=self.start_date,
            end_date=self.end_date,
            growth_rule=self.growth_rule,
            growth_rate=_pct(self.growth_pct),
            member=self.member_name,
        )


class ExpenseRecord(_Record):
    id: str
    category: str = "Other"
    name: Optional[str] = None
    amount: float
    frequency: Frequency
    start_date: LenientDate = Field(None, alias="startDate")
    end_date: LenientDate = Field(None, alias="endDate")
    growth_rule: GrowthRule = Field(GrowthRule.NONE, alias="growthRule")
    growth_pct: Optional[float] = Field(None, alias="growthPct")
    is_essential: bool = Field(True, alias="isEssential")

    def to_domain(self) -> ExpenseItem:
        return ExpenseItem(
            id=self.id,
            name=self.name or self.category,
            amount=self.amount,
            frequency=self.frequency,
            start_date=self.start_date,
            end_date=self.end_date,
            growth_rule=self.growth_rule,
            growth_rate=_pct(self.growth_pct),
            category=self.category,
            is_essential=self.is_essential,
        )


class HoldingRecord(_Record):
    ticker: str
    shares: float = Field(..., ge=0)
    avg_price: float = Field(..., alias="avgPrice", ge=0)
    last_price: Optional[float] = Field(None, alias="lastPrice", ge=0)

    def to_domain(self) -> Holding:
        return Holding(self.ticker, self.shares, self.avg_price, self.last_price)


class AccountRecord(_Record):
    id: str
    name: str = ""
    type: AccountType
    expected_return_pct: float = Field(0.0, alias="expectedReturnPct")
    holdings: List[HoldingRecord] = Field(default_factory=list)
    cash_balance: float = Field(0.0, alias="cashBalance")

    def to_domain(self) -> AccountItem:
        return AccountItem(
            id=self.id,
            name=self.name or self.id,
            type=self.type,
            expected_return=_pct(self.expected_return_pct),
            holdings=tuple(h.to_domain() for h in self.holdings),
            cash_balance=self.cash_balance,
        )


class LoanRecord(_Record):
    id: str
    type: LoanType = LoanType.OTHER
    name: str = ""
    principal: float
    apr_pct: float = Field(..., alias="aprPct", ge=0)
    term_months: int = Field(..., alias="termMonths")
    start_date: LenientDate = Field(None, alias="startDate")
    payment_override_monthly: Optional[float] = Field(None, alias="paymentOverrideMonthly")
    extra_payment_monthly: float = Field(0.0, alias="extraPaymentMonthly", ge=0)

    def to_domain(self) -> LoanItem:
        return LoanItem(
            id=self.id,
            name=self.name or self.id,
            type=self.type,
            principal=self.principal,
            apr=_pct(self.apr_pct),
            term_months=self.term_months,
            start_date=self.start_date,
            payment_override=self.payment_override_monthly,
            extra_payment=self.extra_payment_monthly,
        )


class GoalRecord(_Record):
    id: str
    type: GoalType = GoalType.OTHER
    name: str = ""
    target_amount_real: float = Field(..., alias="targetAmountReal")
    target_date: LenientDate = Field(None, alias="targetDate")
    priority: int = Field(3, ge=1)

    def to_domain(self) -> GoalItem:
        return GoalItem(
            id=self.id,
            name=self.name or self.id,
            type=self.type,
            target_amount=self.target_amount_real,
            target_date=self.target_date,
            priority=self.priority,
        )


class ContributionRecord(_Record):
    account_id: str = Field(..., alias="accountId")
    amount_monthly: float = Field(..., alias="amountMonthly")
    start_date: LenientDate = Field(None, alias="startDate")
    end_date: LenientDate = Field(None, alias="endDate")
    escalation_pct: Optional[float] = Field(None, alias="escalationPct")

    def to_domain(self) -> ContributionRule:
        return ContributionRule(
            account_id=self.account_id,
            amount_monthly=self.amount_monthly,
            start_date=self.start_date,
            end_date=self.end_date,
            escalation_rate=_pct(self.escalation_pct) or 0.0,
        )
