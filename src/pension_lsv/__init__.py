"""
pension-lsv: §417(e)-style lump-sum valuation of pension annuities.

Quick Start
-----------
>>> from datetime import date
>>> from pension_lsv import (
...     BenefitForm, CaseInputs, MortalityLoader, SegmentRates, compute_case,
... )
>>> mortality = MortalityLoader().from_json("mortality.json")  # doctest: +SKIP
>>> inputs = CaseInputs(  # doctest: +SKIP
...     date_of_birth=date(1959, 12, 5),
...     termination_of_employment=date(2024, 5, 31),
...     benefit_freeze_date=date(2020, 7, 31),
...     normal_retirement_date=date(2025, 1, 1),
...     requested_retirement_date=date(2026, 4, 1),
...     plan_termination_date=date(2024, 6, 30),
...     benefit_at_nrd=73.79,
...     form=BenefitForm.CERTAIN_N_AND_LIFE_DUE_MONTHLY,
...     certain_years=3,
...     rates=SegmentRates(0.0512, 0.0531, 0.0546),
...     mortality=mortality,
... )
>>> compute_case(inputs).lump_sum  # doctest: +SKIP

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Configuration
# =============================================================================
from pension_lsv.config.settings import SETTINGS

# =============================================================================
# Valuation Engine - Primary API
# =============================================================================
from pension_lsv.valuation import (
    BenefitForm,
    CaseInputs,
    CaseResult,
    PresentValueFactors,
    SegmentRates,
    UnknownBenefitForm,
    UnsupportedPaymentFrequency,
    ValuationError,
    compute_case,
    discount_factor,
    integral_discount,
    monthly_survival,
    present_value_per_dollar,
)

# =============================================================================
# Loaders
# =============================================================================
from pension_lsv.loaders import (
    DataLoadError,
    MissingSegmentRatesError,
    MortalityLoader,
    MortalityTable,
    SegmentRateLoader,
    SegmentRateTable,
)

# =============================================================================
# Request Validation
# =============================================================================
from pension_lsv.validation import (
    CaseRequest,
    InputError,
    InputErrorKind,
    Outcome,
    value_case,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "SETTINGS",
    # Engine
    "BenefitForm",
    "CaseInputs",
    "CaseResult",
    "PresentValueFactors",
    "SegmentRates",
    "compute_case",
    "present_value_per_dollar",
    "discount_factor",
    "integral_discount",
    "monthly_survival",
    # Errors
    "ValuationError",
    "UnsupportedPaymentFrequency",
    "UnknownBenefitForm",
    "DataLoadError",
    "MissingSegmentRatesError",
    # Loaders
    "MortalityLoader",
    "MortalityTable",
    "SegmentRateLoader",
    "SegmentRateTable",
    # Validation
    "CaseRequest",
    "InputError",
    "InputErrorKind",
    "Outcome",
    "value_case",
]
