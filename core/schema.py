"""
Scenario input types.

Everything the engine consumes is an immutable dataclass built from these
definitions. Rates are decimals (0.07 == 7%); the percent form only exists in
the serialized records handled by data_prep.records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class Frequency(str, Enum):
    MONTHLY = "MONTHLY"
    BIWEEKLY = "BIWEEKLY"
    WEEKLY = "WEEKLY"
    ANNUAL = "ANNUAL"
    ONE_TIME = "ONE_TIME"


class GrowthRule(str, Enum):
    NONE = "NONE"
    TRACK_INFLATION = "TRACK_INFLATION"
    CUSTOM_PERCENT = "CUSTOM_PERCENT"


class FilingStatus(str, Enum):
    SINGLE = "SINGLE"
    MFJ = "MFJ"
    HOH = "HOH"


class AccountType(str, Enum):
    TAXABLE = "TAXABLE"
    TRADITIONAL = "TRADITIONAL"
    ROTH = "ROTH"
    SAVINGS = "SAVINGS"
    CHECKING = "CHECKING"


class LoanType(str, Enum):
    MORTGAGE = "MORTGAGE"
    AUTO = "AUTO"
    STUDENT = "STUDENT"
    PERSONAL = "PERSONAL"
    OTHER = "OTHER"


class GoalType(str, Enum):
    COLLEGE = "COLLEGE"
    HOME_PURCHASE = "HOME_PURCHASE"
    RETIREMENT = "RETIREMENT"
    EMERGENCY_FUND = "EMERGENCY_FUND"
    OTHER = "OTHER"


CASH_ACCOUNT_TYPES: Tuple[AccountType, ...] = (AccountType.SAVINGS, AccountType.CHECKING)


@dataclass(frozen=True)
class Household:
    start_date: Optional[date]
    end_date: Optional[date]
    anchor_date: Optional[date] = None
    currency: str = "USD"


@dataclass(frozen=True)
class Assumptions:
    inflation_rate: float = 0.025
    taxable_interest_yield: float = 0.0
    taxable_dividend_yield: float = 0.0
    realized_st_gain_rate: float = 0.0
    realized_lt_gain_rate: float = 0.0


@dataclass(frozen=True)
class TaxProfile:
    filing_status: FilingStatus = FilingStatus.SINGLE
    state_code: str = ""
    # tables are always the 2024 ones, indexed by inflation; other years only warn
    tax_year: int = 2024
    include_payroll_taxes: bool = True


@dataclass(frozen=True)
class IncomeItem:
    id: str
    name: str
    amount: float
    frequency: Frequency
    start_date: Optional[date]
    end_date: Optional[date] = None
    growth_rule: GrowthRule = GrowthRule.NONE
    growth_rate: Optional[float] = None
    member: Optional[str] = None


@dataclass(frozen=True)
class ExpenseItem:
    id: str
    name: str
    amount: float
    frequency: Frequency
    start_date: Optional[date]
    end_date: Optional[date] = None
    growth_rule: GrowthRule = GrowthRule.NONE
    growth_rate: Optional[float] = None
    category: str = "Other"
    is_essential: bool = True


@dataclass(frozen=True)
class Holding:
    ticker: str
    shares: float
    avg_cost: float
    last_price: Optional[float] = None

    @property
    def market_value(self) -> float:
        price = self.last_price if self.last_price is not None else self.avg_cost
        return self.shares * price


@dataclass(frozen=True)
class AccountItem:
    id: str
    name: str
    type: AccountType
    expected_return: float
    holdings: Tuple[Holding, ...] = ()
    cash_balance: float = 0.0

    @property
    def balance(self) -> float:
        return self.cash_balance + sum(h.market_value for h in self.holdings)

    @property
    def is_cash(self) -> bool:
        return self.type in CASH_ACCOUNT_TYPES


@dataclass(frozen=True)
class LoanItem:
    id: str
    name: str
    type: LoanType
    principal: float
    apr: float
    term_months: int
    start_date: Optional[date]
    payment_override: Optional[float] = None
    extra_payment: float = 0.0


@dataclass(frozen=True)
class GoalItem:
    id: str
    name: str
    type: GoalType
    target_amount: float
    target_date: Optional[date]
    priority: int = 3


@dataclass(frozen=True)
class ContributionRule:
    """Fixed monthly deposit routed to one account ahead of the general sweep."""

    account_id: str
    amount_monthly: float
    start_date: Optional[date]
    end_date: Optional[date] = None
    escalation_rate: float = 0.0


@dataclass(frozen=True)
class ScenarioInput:
    household: Household
    assumptions: Assumptions = field(default_factory=Assumptions)
    tax_profile: TaxProfile = field(default_factory=TaxProfile)
    incomes: Tuple[IncomeItem, ...] = ()
    expenses: Tuple[ExpenseItem, ...] = ()
    accounts: Tuple[AccountItem, ...] = ()
    loans: Tuple[LoanItem, ...] = ()
    goals: Tuple[GoalItem, ...] = ()
    contributions: Tuple[ContributionRule, ...] = ()
