"""
Segment integral and annuity factors vs numerical quadrature.

[T1] ∫₀ⁿ v(t) dt in closed form must agree with adaptive quadrature of
the piecewise discount function, and 12·ā_n with its integral.

See: scipy.integrate.quad
"""

import numpy as np
import pytest
from scipy import integrate

from pension_lsv.config.tolerances import QUADRATURE_TOLERANCE
from pension_lsv.valuation.discount import SegmentRates, discount_factor, discount_factors, integral_discount
from pension_lsv.valuation.forms import certain_continuous

RATE_SETS = [
    SegmentRates(0.0512, 0.0531, 0.0546),
    SegmentRates(0.01, 0.03, 0.06),
    SegmentRates(0.08, 0.05, 0.02),
    SegmentRates(-0.005, 0.0, 0.01),
]


def _quad_integral(n: float, rates: SegmentRates) -> float:
    # v(t) has kinks at the segment breakpoints
    points = [b for b in (5.0, 20.0) if 0 < b < n]
    value, _ = integrate.quad(
        lambda t: discount_factor(t, rates),
        0.0,
        n,
        points=points or None,
        epsabs=1e-12,
        epsrel=1e-12,
        limit=200,
    )
    return value


@pytest.mark.validation
class TestIntegralVsQuadrature:
    @pytest.mark.parametrize("rates", RATE_SETS)
    @pytest.mark.parametrize("n", [0.25, 3.0, 5.0, 7.5, 20.0, 25.0, 60.0])
    def test_closed_form_matches_quad(self, rates: SegmentRates, n: float) -> None:
        closed = integral_discount(n, rates)
        numeric = _quad_integral(n, rates)
        assert closed == pytest.approx(numeric, abs=QUADRATURE_TOLERANCE * max(1.0, n))

    @pytest.mark.parametrize("rates", RATE_SETS)
    def test_certain_continuous_is_twelve_integrals(self, rates: SegmentRates) -> None:
        assert certain_continuous(15.0, rates) == pytest.approx(
            12 * _quad_integral(15.0, rates), rel=QUADRATURE_TOLERANCE
        )


@pytest.mark.validation
class TestIntegralVsTrapezoid:
    """A fine trapezoid grid converges on the same value."""

    def test_trapezoid_convergence(self) -> None:
        rates = SegmentRates(0.0512, 0.0531, 0.0546)
        grid = np.linspace(0.0, 30.0, 300_001)
        values = discount_factors(grid, rates)
        trapezoid = float(np.sum((values[1:] + values[:-1]) * np.diff(grid)) / 2)
        assert integral_discount(30.0, rates) == pytest.approx(trapezoid, rel=1e-9)
