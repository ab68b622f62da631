from __future__ import annotations

from dataclasses import dataclass

from core.schema import FilingStatus

from .tables import (
    ADDITIONAL_MEDICARE_RATE,
    ADDITIONAL_MEDICARE_THRESHOLDS,
    MEDICARE_RATE,
    SOCIAL_SECURITY_RATE,
    SOCIAL_SECURITY_WAGE_BASE,
)


@dataclass(frozen=True)
class PayrollTax:
    social_security: float
    medicare: float
    additional_medicare: float

    @property
    def total(self) -> float:
        return self.social_security + self.medicare + self.additional_medicare


def payroll_tax(
    wages: float,
    filing_status: FilingStatus = FilingStatus.SINGLE,
    *,
    wage_base: float = SOCIAL_SECURITY_WAGE_BASE,
) -> PayrollTax:
    """
    Employee-side FICA on annual wages.

    Social Security stops at the wage base; Medicare has no cap and adds the
    surtax on wages above the filing-status threshold.
    """
    wages = max(float(wages), 0.0)
    threshold = ADDITIONAL_MEDICARE_THRESHOLDS[FilingStatus(filing_status)]
    return PayrollTax(
        social_security=min(wages, wage_base) * SOCIAL_SECURITY_RATE,
        medicare=wages * MEDICARE_RATE,
        additional_medicare=max(wages - threshold, 0.0) * ADDITIONAL_MEDICARE_RATE,
    )
