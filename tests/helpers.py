import copy
import json
from datetime import date
from pathlib import Path

from core.schema import (
    AccountItem,
    AccountType,
    Assumptions,
    ExpenseItem,
    Frequency,
    Household,
    IncomeItem,
    LoanItem,
    LoanType,
    ScenarioInput,
    TaxProfile,
)


def write_scenario(tmp_path: Path, data: dict, filename: str = "scenario.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_scenario(data: dict) -> dict:
    return copy.deepcopy(data)


def income(id, amount, frequency=Frequency.MONTHLY, start=date(2025, 1, 1), **kwargs) -> IncomeItem:
    return IncomeItem(id=id, name=id, amount=amount, frequency=frequency, start_date=start, **kwargs)


def expense(id, amount, frequency=Frequency.MONTHLY, start=date(2025, 1, 1), **kwargs) -> ExpenseItem:
    return ExpenseItem(id=id, name=id, amount=amount, frequency=frequency, start_date=start, **kwargs)


def account(id, balance, type=AccountType.SAVINGS, expected_return=0.0) -> AccountItem:
    return AccountItem(id=id, name=id, type=type, expected_return=expected_return, cash_balance=balance)


def loan(id, principal, apr=0.0, term=12, start=date(2024, 12, 1), **kwargs) -> LoanItem:
    return LoanItem(id=id, name=id, type=LoanType.AUTO, principal=principal, apr=apr,
                    term_months=term, start_date=start, **kwargs)


def make_scenario(
    start=date(2025, 1, 1),
    end=date(2025, 12, 31),
    *,
    inflation=0.0,
    **items,
) -> ScenarioInput:
    """Scenario in a state without income tax, payroll tax off."""
    return ScenarioInput(
        household=Household(start_date=start, end_date=end),
        assumptions=Assumptions(inflation_rate=inflation),
        tax_profile=TaxProfile(state_code="TX", include_payroll_taxes=False),
        **items,
    )
