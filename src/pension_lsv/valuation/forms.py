"""
Present value per $1 of monthly benefit for the supported annuity forms.

Theory
------
[T1] Life annuity-due, monthly:  ä_x^(12) = Σ_{k=0..M} kp_x v(k/12)
[T1] n-year certain, continuous: ā_n = ∫₀ⁿ v(t) dt  (×12 for $1/month)
[T1] n-year certain and life:    ä_n^(12) + E_n · ä_{x+n}^(12)
[T1] Pure endowment:             E_n = np_x · v(n)

Factors are per $1 of monthly benefit; the annual payment rate is 12.
"""

import math
from enum import Enum

import numpy as np

from pension_lsv.config.settings import SETTINGS
from pension_lsv.loaders.mortality import MortalityTable
from pension_lsv.valuation.discount import (
    SegmentRates,
    discount_factor,
    discount_factors,
    integral_discount,
)
from pension_lsv.valuation.survival import monthly_survival


class ValuationError(ValueError):
    """Base class for errors raised by the valuation engine."""

    pass


class UnsupportedPaymentFrequency(ValuationError):
    """Raised when a payment frequency other than monthly is requested."""

    def __init__(self, payments_per_year: int):
        self.payments_per_year = payments_per_year
        super().__init__(
            f"Only monthly payments (12 per year) are supported, got {payments_per_year}"
        )


class UnknownBenefitForm(ValuationError):
    """Raised when a benefit form tag is not one of the supported forms."""

    def __init__(self, form: object):
        self.form = form
        super().__init__(f"Unknown benefit form: {form!r}")


class BenefitForm(Enum):
    """Normal form of benefit."""

    LIFE_DUE_MONTHLY = "LIFE_DUE_MTHLY"
    CERTAIN_N_CONTINUOUS = "CERTAIN_N_CONTINUOUS"
    CERTAIN_N_AND_LIFE_DUE_MONTHLY = "CERTAIN_N_AND_LIFE_DUE_MTHLY"

    @classmethod
    def from_tag(cls, tag: "str | BenefitForm") -> "BenefitForm":
        """
        Resolve an external tag (value or member name) to a form.

        Raises
        ------
        UnknownBenefitForm
            If tag names no supported form
        """
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            text = tag.strip()
            for form in cls:
                if text == form.value or text.upper() == form.name:
                    return form
        raise UnknownBenefitForm(tag)

    @property
    def uses_certain_period(self) -> bool:
        """Whether the form needs a certain period n."""
        return self is not BenefitForm.LIFE_DUE_MONTHLY


def _months_in(years: float) -> int:
    # Half-up rounding of fractional certain periods to whole months
    return int(math.floor(12 * years + 0.5))


def life_due_monthly(
    rates: SegmentRates,
    mortality: MortalityTable,
    age_at_start: float,
    max_age: int | None = None,
) -> float:
    """
    Monthly life annuity-due, per $1 per month.

    [T1] ä_x^(12) = Σ_{k=0..M} kp_x v(k/12), M = 12 (ω + 1 - ⌊x⌋)
    """
    if max_age is None:
        max_age = SETTINGS.valuation.max_age

    months = max(0, math.ceil(12 * ((max_age + 1) - math.floor(age_at_start))))
    surv = monthly_survival(mortality, age_at_start, months, max_age=max_age)
    times = np.arange(months + 1) / 12.0
    return float(np.sum(surv * discount_factors(times, rates)))


def certain_continuous(certain_years: float, rates: SegmentRates) -> float:
    """
    Continuously payable n-year certain annuity, per $1 per month.

    [T1] 12 · ∫₀ⁿ v(t) dt; 0.0 for n <= 0
    """
    if not certain_years > 0:
        return 0.0
    return 12 * integral_discount(certain_years, rates)


def certain_and_life_due_monthly(
    certain_years: float,
    rates: SegmentRates,
    mortality: MortalityTable,
    age_at_start: float,
    max_age: int | None = None,
) -> float:
    """
    Monthly n-year certain and life annuity-due, per $1 per month.

    [T1] ä_n^(12) + E_n · ä_{x+n}^(12)

    With n <= 0 this is exactly the life annuity-due at the same age.
    """
    if not certain_years > 0:
        return life_due_monthly(rates, mortality, age_at_start, max_age=max_age)

    n_months = _months_in(certain_years)

    # Term-certain due, k = 0 .. 12n - 1, no mortality
    times = np.arange(n_months) / 12.0
    certain_part = float(np.sum(discount_factors(times, rates)))

    surv = monthly_survival(mortality, age_at_start, n_months, max_age=max_age)
    pure_endowment = float(surv[n_months]) * discount_factor(certain_years, rates)

    deferred_life = life_due_monthly(
        rates, mortality, age_at_start + certain_years, max_age=max_age
    )
    return certain_part + pure_endowment * deferred_life


def present_value_per_dollar(
    form: BenefitForm,
    *,
    rates: SegmentRates,
    mortality: MortalityTable,
    age_at_start: float,
    certain_years: float = 0.0,
    payments_per_year: int | None = None,
    max_age: int | None = None,
) -> float:
    """
    Present value at the annuity start date per $1 of monthly benefit.

    Parameters
    ----------
    form : BenefitForm
        Normal form of benefit
    rates : SegmentRates
        Segment rates
    mortality : MortalityTable
        Integer-age mortality rates
    age_at_start : float
        Fractional age at the annuity start date
    certain_years : float, default 0.0
        Certain period n; ignored by LIFE_DUE_MONTHLY
    payments_per_year : int, optional
        Must be 12. Defaults to settings.
    max_age : int, optional
        Terminal table age. Defaults to settings.

    Returns
    -------
    float
        PV factor per $1 per month

    Raises
    ------
    UnsupportedPaymentFrequency
        If payments_per_year is not 12
    UnknownBenefitForm
        If form is not a BenefitForm
    """
    if payments_per_year is None:
        payments_per_year = SETTINGS.valuation.payments_per_year
    if payments_per_year != 12:
        raise UnsupportedPaymentFrequency(payments_per_year)

    if form is BenefitForm.LIFE_DUE_MONTHLY:
        return life_due_monthly(rates, mortality, age_at_start, max_age=max_age)
    if form is BenefitForm.CERTAIN_N_CONTINUOUS:
        return certain_continuous(certain_years, rates)
    if form is BenefitForm.CERTAIN_N_AND_LIFE_DUE_MONTHLY:
        return certain_and_life_due_monthly(
            certain_years, rates, mortality, age_at_start, max_age=max_age
        )
    raise UnknownBenefitForm(form)
