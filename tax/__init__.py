"""
Tax module — bracket, payroll and capital gains tax, household liability,
and multi-year planning (Roth conversions, tax-loss harvesting).
"""

from .tables import TaxBracket, federal_brackets, standard_deduction, state_tax_rate
from .brackets import BracketTaxResult, bracket_tax, index_brackets, marginal_rate
from .payroll import PayrollTax, payroll_tax
from .capital_gains import CapitalGainsResult, capital_gains_tax, long_term_marginal_rate
from .liability import AnnualTaxes, annual_taxes, monthly_taxes
from .planning import (
    analyze_roth_conversion,
    analyze_tax_loss_harvesting,
    project_multi_year_tax,
)

__all__ = [
    "TaxBracket",
    "federal_brackets",
    "standard_deduction",
    "state_tax_rate",
    "BracketTaxResult",
    "bracket_tax",
    "index_brackets",
    "marginal_rate",
    "PayrollTax",
    "payroll_tax",
    "CapitalGainsResult",
    "capital_gains_tax",
    "long_term_marginal_rate",
    "AnnualTaxes",
    "annual_taxes",
    "monthly_taxes",
    "analyze_roth_conversion",
    "analyze_tax_loss_harvesting",
    "project_multi_year_tax",
]
