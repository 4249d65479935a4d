"""
Caller-side input validation for lump-sum valuation.

Turns raw request values (ISO date strings, numbers, form tags) into
validated CaseInputs. Failures are returned as explicit Outcome values
carrying an error kind and message; nothing here raises for bad input.
A missing or unusable de-minimis threshold takes the configured default.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pension_lsv.config.settings import SETTINGS
from pension_lsv.loaders.mortality import MortalityTable
from pension_lsv.loaders.segment_rates import MissingSegmentRatesError, SegmentRateTable
from pension_lsv.valuation.dates import parse_iso_date
from pension_lsv.valuation.discount import SegmentRates
from pension_lsv.valuation.engine import CaseInputs, CaseResult, compute_case
from pension_lsv.valuation.forms import (
    BenefitForm,
    UnknownBenefitForm,
    UnsupportedPaymentFrequency,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InputErrorKind(Enum):
    """Why a request was rejected."""

    INVALID_DATE_INPUT = "invalid_date_input"
    MISSING_RATE_TABLE_FOR_MONTH = "missing_rate_table_for_month"
    INVALID_BENEFIT_AMOUNT = "invalid_benefit_amount"
    INVALID_CERTAIN_PERIOD = "invalid_certain_period"
    INVALID_SEGMENT_RATES = "invalid_segment_rates"
    UNKNOWN_BENEFIT_FORM = "unknown_benefit_form"
    UNSUPPORTED_PAYMENT_FREQUENCY = "unsupported_payment_frequency"
    INVALID_ADJUSTMENT_FLAG = "invalid_adjustment_flag"


@dataclass(frozen=True)
class InputError:
    """
    A rejected request.

    Attributes
    ----------
    kind : InputErrorKind
        Error category
    message : str
        Human-readable explanation
    """

    kind: InputErrorKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Either a value or an InputError, never both.

    Examples
    --------
    >>> Outcome.success(1).ok
    True
    >>> Outcome.failure(InputErrorKind.INVALID_DATE_INPUT, "bad").ok
    False
    """

    value: T | None = None
    error: InputError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: InputErrorKind, message: str) -> "Outcome[T]":
        return cls(error=InputError(kind=kind, message=message))

    def unwrap(self) -> T:
        """Return the value; ValueError if this is a failure."""
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]


@dataclass(frozen=True)
class CaseRequest:
    """
    Raw, unvalidated request values.

    Dates are ISO ``YYYY-MM-DD`` strings; numbers may arrive as strings.
    The segment-rate month is taken from the plan termination date.
    """

    date_of_birth: str
    termination_of_employment: str
    benefit_freeze_date: str | None
    normal_retirement_date: str
    requested_retirement_date: str
    plan_termination_date: str
    benefit_at_nrd: Any
    form: str | BenefitForm = BenefitForm.CERTAIN_N_AND_LIFE_DUE_MONTHLY
    certain_years: Any = 0
    apply_late_retirement_adjustment: Any = True
    de_minimis_threshold: Any = None


def _to_number(value: Any) -> float:
    """Parse a finite float; NaN for anything unusable."""
    if isinstance(value, bool) or value is None:
        return math.nan
    try:
        number = float(value)
    except (TypeError, ValueError):
        return math.nan
    return number if math.isfinite(number) else math.nan


_TRUE_FLAGS = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_FLAGS = frozenset({"false", "f", "no", "n", "0"})


def _to_flag(value: Any) -> bool | None:
    """Parse a bool, 0/1, or a true/false spelling; None for anything else."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_FLAGS:
            return True
        if text in _FALSE_FLAGS:
            return False
    return None


def check_segment_rates(rates: SegmentRates) -> InputError | None:
    """
    Reject rates for which v(t) is undefined.

    Each rate must be finite and greater than -1.
    """
    for name, rate in zip(("i1", "i2", "i3"), rates.as_tuple()):
        if not math.isfinite(rate) or rate <= -1:
            return InputError(
                kind=InputErrorKind.INVALID_SEGMENT_RATES,
                message=f"Segment rate {name} must be finite and > -1, got {rate}",
            )
    return None


def build_case_inputs(
    request: CaseRequest,
    rate_table: SegmentRateTable,
    mortality: MortalityTable,
) -> Outcome[CaseInputs]:
    """
    Validate a raw request into CaseInputs.

    Parameters
    ----------
    request : CaseRequest
        Raw request values
    rate_table : SegmentRateTable
        Segment rates by month; the DOPT month must be present
    mortality : MortalityTable
        Mortality table to value with

    Returns
    -------
    Outcome[CaseInputs]
        Validated inputs, or the first validation failure
    """
    dates = {
        name: parse_iso_date(getattr(request, name))
        for name in (
            "date_of_birth",
            "termination_of_employment",
            "normal_retirement_date",
            "requested_retirement_date",
            "plan_termination_date",
        )
    }
    invalid = [name for name, value in dates.items() if value is None]
    freeze = parse_iso_date(request.benefit_freeze_date)
    if request.benefit_freeze_date and freeze is None:
        invalid.append("benefit_freeze_date")
    if invalid:
        return _reject(
            InputErrorKind.INVALID_DATE_INPUT,
            f"Invalid date input(s): {', '.join(invalid)}",
        )

    dopt = dates["plan_termination_date"]
    try:
        rates = rate_table.rates_for(dopt)
    except MissingSegmentRatesError as e:
        return _reject(InputErrorKind.MISSING_RATE_TABLE_FOR_MONTH, str(e))

    rate_error = check_segment_rates(rates)
    if rate_error is not None:
        return _reject(rate_error.kind, rate_error.message)

    benefit = _to_number(request.benefit_at_nrd)
    if math.isnan(benefit) or benefit < 0:
        return _reject(
            InputErrorKind.INVALID_BENEFIT_AMOUNT,
            f"Benefit at NRD must be a nonnegative number, got {request.benefit_at_nrd!r}",
        )

    try:
        form = BenefitForm.from_tag(request.form)
    except UnknownBenefitForm as e:
        return _reject(InputErrorKind.UNKNOWN_BENEFIT_FORM, str(e))

    certain_years = 0.0
    if form.uses_certain_period:
        certain_years = _to_number(request.certain_years)
        if math.isnan(certain_years) or certain_years < 0:
            return _reject(
                InputErrorKind.INVALID_CERTAIN_PERIOD,
                f"n must be >= 0 for this form, got {request.certain_years!r}",
            )

    adjust = _to_flag(request.apply_late_retirement_adjustment)
    if adjust is None:
        return _reject(
            InputErrorKind.INVALID_ADJUSTMENT_FLAG,
            "Late-retirement adjustment flag must be true or false, "
            f"got {request.apply_late_retirement_adjustment!r}",
        )

    threshold = SETTINGS.valuation.de_minimis_threshold
    if request.de_minimis_threshold is not None:
        parsed = _to_number(request.de_minimis_threshold)
        if not math.isnan(parsed):
            threshold = parsed

    return Outcome.success(
        CaseInputs(
            date_of_birth=dates["date_of_birth"],
            termination_of_employment=dates["termination_of_employment"],
            benefit_freeze_date=freeze,
            normal_retirement_date=dates["normal_retirement_date"],
            requested_retirement_date=dates["requested_retirement_date"],
            plan_termination_date=dopt,
            benefit_at_nrd=benefit,
            form=form,
            certain_years=certain_years,
            rates=rates,
            mortality=mortality,
            apply_late_retirement_adjustment=adjust,
            de_minimis_threshold=threshold,
        )
    )


def value_case(
    request: CaseRequest,
    rate_table: SegmentRateTable,
    mortality: MortalityTable,
) -> Outcome[CaseResult]:
    """
    Validate a request and value it.

    Engine errors are converted to InputError here, at the outer boundary;
    no partial result is ever returned.
    """
    prepared = build_case_inputs(request, rate_table, mortality)
    if not prepared.ok:
        return Outcome(error=prepared.error)

    try:
        result = compute_case(prepared.unwrap())
    except UnsupportedPaymentFrequency as e:
        return _reject(InputErrorKind.UNSUPPORTED_PAYMENT_FREQUENCY, str(e))
    except UnknownBenefitForm as e:
        return _reject(InputErrorKind.UNKNOWN_BENEFIT_FORM, str(e))

    return Outcome.success(result)


def _reject(kind: InputErrorKind, message: str) -> Outcome[Any]:
    logger.warning(f"Rejected valuation request ({kind.value}): {message}")
    return Outcome.failure(kind, message)
