"""
Lump-sum valuation of a deferred or immediate pension benefit.

Combines ages, annuity factors, the late-retirement adjustment, the lump
sum and the de-minimis test for a single participant.

Conventions
-----------
- Factors are valued at the annuity start date (ASD) and discounted to the
  plan termination date (DOPT) with the segment rates only. No mortality
  is applied between DOPT and ASD: values are conditional on survival to
  the annuity start date.
- The lump sum is benefit × factor; factors already aggregate all monthly
  payments, so there is no further ×12.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pension_lsv.config.settings import SETTINGS
from pension_lsv.loaders.mortality import MortalityTable
from pension_lsv.valuation.dates import age_at, years_between
from pension_lsv.valuation.discount import SegmentRates, discount_factor
from pension_lsv.valuation.forms import BenefitForm, present_value_per_dollar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaseInputs:
    """
    Validated inputs for a single lump-sum valuation.

    Attributes
    ----------
    date_of_birth : date
        Participant's birth date
    termination_of_employment : date
        Date of termination of employment (DOTE)
    benefit_freeze_date : date or None
        Date accruals were frozen
    normal_retirement_date : date
        Normal retirement date (NRD)
    requested_retirement_date : date
        Requested retirement date / annuity start date (DOR)
    plan_termination_date : date
        Plan termination date (DOPT), the valuation date
    benefit_at_nrd : float
        Monthly benefit payable at NRD
    form : BenefitForm
        Normal form of benefit
    certain_years : float
        Certain period n in years; 0 for forms without one
    rates : SegmentRates
        Segment rates for the DOPT month
    mortality : MortalityTable
        Integer-age mortality rates
    apply_late_retirement_adjustment : bool
        Scale the benefit to stay actuarially equivalent at DOPT
    de_minimis_threshold : float
        Lump sums strictly below this are eligible
    """

    date_of_birth: date
    termination_of_employment: date
    benefit_freeze_date: date | None
    normal_retirement_date: date
    requested_retirement_date: date
    plan_termination_date: date
    benefit_at_nrd: float
    form: BenefitForm
    rates: SegmentRates
    mortality: MortalityTable = field(repr=False)
    certain_years: float = 0.0
    apply_late_retirement_adjustment: bool = True
    de_minimis_threshold: float = SETTINGS.valuation.de_minimis_threshold


@dataclass(frozen=True)
class PresentValueFactors:
    """
    PV per $1 of monthly benefit.

    Attributes
    ----------
    at_asd_nrd : float
        Valued at the ASD, benefit commencing at NRD
    at_asd_dor : float
        Valued at the ASD, benefit commencing at DOR
    at_dopt_nrd : float
        NRD commencement, discounted to DOPT
    at_dopt_dor : float
        DOR commencement, discounted to DOPT
    """

    at_asd_nrd: float
    at_asd_dor: float
    at_dopt_nrd: float
    at_dopt_dor: float


@dataclass(frozen=True)
class CaseResult:
    """
    Complete lump-sum valuation result.

    Attributes
    ----------
    age_at_nrd : float
        Fractional age at NRD
    age_at_dor : float
        Fractional age at DOR
    pv_per_dollar : PresentValueFactors
        The four PV-per-$1 factors
    benefit_at_nrd : float
        Monthly benefit at NRD (as supplied)
    benefit_at_dor : float
        Monthly benefit at DOR after any late-retirement adjustment
    lump_sum : float
        Lump-sum value at DOPT
    threshold : float
        De-minimis threshold applied
    eligible : bool
        lump_sum < threshold
    inputs : CaseInputs
        Inputs used, for traceability
    """

    age_at_nrd: float
    age_at_dor: float
    pv_per_dollar: PresentValueFactors
    benefit_at_nrd: float
    benefit_at_dor: float
    lump_sum: float
    threshold: float
    eligible: bool
    inputs: CaseInputs = field(repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary."""
        inputs = self.inputs
        freeze = inputs.benefit_freeze_date
        return {
            "ages": {"nrd": self.age_at_nrd, "dor": self.age_at_dor},
            "pv_per_dollar": {
                "at_asd_nrd": self.pv_per_dollar.at_asd_nrd,
                "at_asd_dor": self.pv_per_dollar.at_asd_dor,
                "at_dopt_nrd": self.pv_per_dollar.at_dopt_nrd,
                "at_dopt_dor": self.pv_per_dollar.at_dopt_dor,
            },
            "benefit": {"nrd": self.benefit_at_nrd, "dor": self.benefit_at_dor},
            "lump_sum": self.lump_sum,
            "threshold": self.threshold,
            "eligible": self.eligible,
            "meta": {
                "form": inputs.form.value,
                "certain_years": inputs.certain_years,
                "apply_late_retirement_adjustment": inputs.apply_late_retirement_adjustment,
                "rates": inputs.rates.to_dict(),
                "mortality_basis": inputs.mortality.basis_id,
                "date_of_birth": inputs.date_of_birth.isoformat(),
                "termination_of_employment": inputs.termination_of_employment.isoformat(),
                "benefit_freeze_date": freeze.isoformat() if freeze else None,
                "normal_retirement_date": inputs.normal_retirement_date.isoformat(),
                "requested_retirement_date": inputs.requested_retirement_date.isoformat(),
                "plan_termination_date": inputs.plan_termination_date.isoformat(),
            },
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def compute_case(inputs: CaseInputs) -> CaseResult:
    """
    Value a single case at the plan termination date.

    Steps
    -----
    1. Ages at NRD and DOR (actual days / 365.25)
    2. PV per $1 at each annuity start date for the configured form
    3. Discount each to DOPT with v(deferral); deferral may be negative
    4. Late-retirement adjustment: B_dor = B_nrd × PV_dopt(NRD) / PV_dopt(DOR)
    5. Lump sum = B_dor × PV_dopt(DOR)
    6. Eligible when lump sum < threshold

    Parameters
    ----------
    inputs : CaseInputs
        Validated case inputs

    Returns
    -------
    CaseResult
        Fresh result for this case

    Raises
    ------
    UnsupportedPaymentFrequency, UnknownBenefitForm
        Propagated unchanged from the annuity factor calculation
    """
    rates = inputs.rates
    nrd = inputs.normal_retirement_date
    dor = inputs.requested_retirement_date
    dopt = inputs.plan_termination_date

    age_nrd = age_at(inputs.date_of_birth, nrd)
    age_dor = age_at(inputs.date_of_birth, dor)

    pv_asd_nrd = present_value_per_dollar(
        inputs.form,
        rates=rates,
        mortality=inputs.mortality,
        age_at_start=age_nrd,
        certain_years=inputs.certain_years,
    )
    pv_asd_dor = present_value_per_dollar(
        inputs.form,
        rates=rates,
        mortality=inputs.mortality,
        age_at_start=age_dor,
        certain_years=inputs.certain_years,
    )

    deferral_nrd = years_between(dopt, nrd)
    deferral_dor = years_between(dopt, dor)
    pv_dopt_nrd = discount_factor(deferral_nrd, rates) * pv_asd_nrd
    pv_dopt_dor = discount_factor(deferral_dor, rates) * pv_asd_dor

    benefit_at_dor = inputs.benefit_at_nrd
    # A zero DOR factor (n = 0 certain-only) has no value to equate
    if inputs.apply_late_retirement_adjustment and pv_dopt_dor != 0:
        benefit_at_dor = inputs.benefit_at_nrd * (pv_dopt_nrd / pv_dopt_dor)

    lump_sum = benefit_at_dor * pv_dopt_dor
    threshold = inputs.de_minimis_threshold
    eligible = lump_sum < threshold

    logger.debug(
        f"{inputs.form.name}: age NRD {age_nrd:.6f}, age DOR {age_dor:.6f}, "
        f"PV@ASD {pv_asd_nrd:.6f}/{pv_asd_dor:.6f}, "
        f"PV@DOPT {pv_dopt_nrd:.6f}/{pv_dopt_dor:.6f}"
    )
    logger.debug(
        f"Benefit DOR {benefit_at_dor:.6f}, lump sum {lump_sum:.2f}, "
        f"threshold {threshold:.2f}, eligible={eligible}"
    )

    return CaseResult(
        age_at_nrd=age_nrd,
        age_at_dor=age_dor,
        pv_per_dollar=PresentValueFactors(
            at_asd_nrd=pv_asd_nrd,
            at_asd_dor=pv_asd_dor,
            at_dopt_nrd=pv_dopt_nrd,
            at_dopt_dor=pv_dopt_dor,
        ),
        benefit_at_nrd=inputs.benefit_at_nrd,
        benefit_at_dor=benefit_at_dor,
        lump_sum=lump_sum,
        threshold=threshold,
        eligible=eligible,
        inputs=inputs,
    )
