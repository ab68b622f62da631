"""
Household income tax liability for a year (and its monthly share), combining
federal brackets after the standard deduction, a flat state rate and optional
payroll tax. This is what the projection engine charges against cash flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.schema import TaxProfile

from .brackets import bracket_tax, index_brackets
from .payroll import payroll_tax
from .tables import federal_brackets, standard_deduction, state_tax_rate


@dataclass(frozen=True)
class AnnualTaxes:
    gross_income: float
    taxable_income: float
    federal: float
    state: float
    payroll: float
    marginal_rate: float
    state_rate: float

    @property
    def total(self) -> float:
        return self.federal + self.state + self.payroll

    @property
    def effective_rate(self) -> float:
        return self.total / self.gross_income if self.gross_income > 0 else 0.0

    @property
    def combined_marginal_rate(self) -> float:
        """Federal marginal plus state rate; what one more dollar of ordinary income pays."""
        return self.marginal_rate + self.state_rate


def annual_taxes(
    gross_income: float,
    profile: TaxProfile,
    *,
    wages: Optional[float] = None,
    index_factor: float = 1.0,
) -> AnnualTaxes:
    """
    Parameters
    ----------
    gross_income : float
        Annual gross ordinary income.
    profile : TaxProfile
        Filing status, state and payroll inclusion flag.
    wages : float, optional
        Payroll-taxable wages; defaults to gross_income.
    index_factor : float
        Multiplier applied to bracket thresholds and the standard deduction.
    """
    gross = max(float(gross_income), 0.0)
    deduction = standard_deduction(profile.filing_status) * index_factor
    taxable = max(gross - deduction, 0.0)

    brackets = index_brackets(federal_brackets(profile.filing_status), index_factor)
    federal = bracket_tax(taxable, brackets)

    rate = state_tax_rate(profile.state_code)
    payroll = 0.0
    if profile.include_payroll_taxes:
        payroll = payroll_tax(gross if wages is None else wages, profile.filing_status).total

    return AnnualTaxes(
        gross_income=gross,
        taxable_income=taxable,
        federal=federal.total_tax,
        state=taxable * rate,
        payroll=payroll,
        marginal_rate=federal.marginal_rate,
        state_rate=rate,
    )


def monthly_taxes(monthly_gross: float, profile: TaxProfile, *, index_factor: float = 1.0) -> float:
    """Annualize one month of gross income, tax the year, return one twelfth."""
    if monthly_gross <= 0:
        return 0.0
    return annual_taxes(monthly_gross * 12.0, profile, index_factor=index_factor).total / 12.0
