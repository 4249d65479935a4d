"""
Valuation module for pension lump sums.

[T1] Segmented discounting, monthly UDD survival, annuity factors for the
three supported benefit forms, and the case-level lump-sum valuation.
"""

from .dates import age_at, month_key, parse_iso_date, years_between
from .discount import (
    SegmentRates,
    discount_factor,
    discount_factors,
    integral_discount,
)
from .survival import monthly_survival
from .forms import (
    BenefitForm,
    UnknownBenefitForm,
    UnsupportedPaymentFrequency,
    ValuationError,
    certain_and_life_due_monthly,
    certain_continuous,
    life_due_monthly,
    present_value_per_dollar,
)
from .engine import CaseInputs, CaseResult, PresentValueFactors, compute_case

__all__ = [
    # Dates
    "years_between",
    "age_at",
    "parse_iso_date",
    "month_key",
    # Discounting
    "SegmentRates",
    "discount_factor",
    "discount_factors",
    "integral_discount",
    # Survival
    "monthly_survival",
    # Annuity factors
    "BenefitForm",
    "present_value_per_dollar",
    "life_due_monthly",
    "certain_continuous",
    "certain_and_life_due_monthly",
    # Errors
    "ValuationError",
    "UnsupportedPaymentFrequency",
    "UnknownBenefitForm",
    # Case valuation
    "CaseInputs",
    "CaseResult",
    "PresentValueFactors",
    "compute_case",
]
