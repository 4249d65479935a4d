"""
Validation of raw valuation requests.

Failures are returned as Outcome values with an InputErrorKind, not raised.
"""

from .inputs import (
    CaseRequest,
    InputError,
    InputErrorKind,
    Outcome,
    build_case_inputs,
    check_segment_rates,
    value_case,
)

__all__ = [
    "CaseRequest",
    "InputError",
    "InputErrorKind",
    "Outcome",
    "build_case_inputs",
    "check_segment_rates",
    "value_case",
]
