"""
Segmented discounting over three interest-rate regimes.

Theory
------
[T1] v(t) = (1+i1)^(-t)                                   t <= 5
[T1] v(t) = (1+i1)^(-5) (1+i2)^(-(t-5))                   5 < t <= 20
[T1] v(t) = (1+i1)^(-5) (1+i2)^(-15) (1+i3)^(-(t-20))     t > 20
[T1] ∫ₐᵇ (1+i)^(-t) dt = [(1+i)^(-a) - (1+i)^(-b)] / ln(1+i)

Rates are annual effective and used as supplied. Rates <= -1 leave the
formulas undefined and produce NaN; range checks belong to the caller.
"""

import math
from dataclasses import dataclass

import numpy as np

from pension_lsv.config.settings import SETTINGS


@dataclass(frozen=True)
class SegmentRates:
    """
    Three annual effective segment rates.

    Attributes
    ----------
    i1 : float
        Rate for years [0, 5]
    i2 : float
        Rate for years (5, 20]
    i3 : float
        Rate for years beyond 20
    """

    i1: float
    i2: float
    i3: float

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.i1, self.i2, self.i3)

    def to_dict(self) -> dict[str, float]:
        return {"i1": self.i1, "i2": self.i2, "i3": self.i3}


def _breakpoints() -> tuple[float, float]:
    return SETTINGS.valuation.segment_breakpoints


def discount_factor(t: float, rates: SegmentRates) -> float:
    """
    Segmented discount factor v(t).

    Parameters
    ----------
    t : float
        Time in years. Negative values use the first segment, which
        accumulates instead of discounting.
    rates : SegmentRates
        Segment rates

    Returns
    -------
    float
        Discount factor, 1.0 at t = 0

    Examples
    --------
    >>> discount_factor(1.0, SegmentRates(0.05, 0.05, 0.05))
    0.9523809523809523
    """
    b1, b2 = _breakpoints()
    if t <= b1:
        return (1 + rates.i1) ** (-t)
    if t <= b2:
        return (1 + rates.i1) ** (-b1) * (1 + rates.i2) ** (-(t - b1))
    return (
        (1 + rates.i1) ** (-b1)
        * (1 + rates.i2) ** (-(b2 - b1))
        * (1 + rates.i3) ** (-(t - b2))
    )


def discount_factors(times: np.ndarray, rates: SegmentRates) -> np.ndarray:
    """
    Vectorised v(t) over an array of times.

    Each element matches discount_factor(t, rates).
    """
    b1, b2 = _breakpoints()
    t = np.asarray(times, dtype=float)
    base1 = 1 + rates.i1
    base2 = 1 + rates.i2
    base3 = 1 + rates.i3

    v1 = np.power(base1, -t)
    v2 = base1 ** (-b1) * np.power(base2, -(t - b1))
    v3 = base1 ** (-b1) * base2 ** (-(b2 - b1)) * np.power(base3, -(t - b2))

    return np.where(t <= b1, v1, np.where(t <= b2, v2, v3))


def _integral_single_rate(length: float, i: float) -> float:
    """∫₀ᴸ (1+i)^(-t) dt for a single flat rate."""
    delta = math.log1p(i)
    if delta == 0.0:
        return length
    # expm1 keeps small rates accurate: (1 - e^(-Lδ)) / δ
    return -math.expm1(-length * delta) / delta


def integral_discount(n: float, rates: SegmentRates) -> float:
    """
    Definite integral of v(t) over [0, n].

    [T1] Sum of closed-form segment integrals, each scaled by the
    discount accumulated through the earlier segments.

    Parameters
    ----------
    n : float
        Upper limit in years
    rates : SegmentRates
        Segment rates

    Returns
    -------
    float
        ∫₀ⁿ v(t) dt; 0.0 for n <= 0

    Examples
    --------
    >>> round(integral_discount(1.0, SegmentRates(0.0, 0.0, 0.0)), 12)
    1.0
    """
    if not n > 0:
        return 0.0

    b1, b2 = _breakpoints()

    total = _integral_single_rate(min(n, b1), rates.i1)
    if n <= b1:
        return total

    carried = (1 + rates.i1) ** (-b1)
    total += carried * _integral_single_rate(min(n, b2) - b1, rates.i2)
    if n <= b2:
        return total

    carried *= (1 + rates.i2) ** (-(b2 - b1))
    total += carried * _integral_single_rate(n - b2, rates.i3)
    return total
