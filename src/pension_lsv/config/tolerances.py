"""
Centralized tolerance framework for valuation tests and checks.

Tolerance Tiers:
    Tier 1 (Analytical): closed-form identities, machine precision
    Tier 2 (Quadrature): comparisons against numerical integration
    Tier 3 (Golden): regression against stored reference outputs
"""

from typing import Final

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: Identities that hold by construction (v(0) = 1, form collapse at n = 0)
ANALYTICAL_TOLERANCE: Final[float] = 1e-12

#: Continuity of v(t) at the 5- and 20-year breakpoints
BREAKPOINT_CONTINUITY_TOLERANCE: Final[float] = 1e-12

#: Survival probabilities are products of at most ~1500 factors
SURVIVAL_TOLERANCE: Final[float] = 1e-12


# =============================================================================
# Tier 2: Quadrature Tolerances
# =============================================================================

#: Closed-form segment integral vs adaptive quadrature of v(t)
QUADRATURE_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 3: Golden Tolerances
# =============================================================================

#: Relative tolerance for golden-file regression (6 significant digits)
GOLDEN_RELATIVE_TOLERANCE: Final[float] = 1e-6

#: Absolute tolerance for money amounts in end-to-end tests
MONEY_TOLERANCE: Final[float] = 1e-6


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "analytical": ANALYTICAL_TOLERANCE,
    "breakpoint_continuity": BREAKPOINT_CONTINUITY_TOLERANCE,
    "survival": SURVIVAL_TOLERANCE,
    "quadrature": QUADRATURE_TOLERANCE,
    "golden_relative": GOLDEN_RELATIVE_TOLERANCE,
    "money": MONEY_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
