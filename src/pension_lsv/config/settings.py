"""
Frozen configuration settings for lump-sum valuation.

All configuration is immutable (frozen dataclasses) so that a case computed
twice with the same inputs always produces the same result.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# Data Configuration
# =============================================================================


def _resolve_data_dir() -> Path | None:
    """
    Resolve the directory holding rate and mortality resources.

    Priority:
    1. PENSION_LSV_DATA_DIR environment variable (if set)
    2. None: loaders then require explicit paths

    Returns
    -------
    Path or None
        Resolved data directory
    """
    env_path = os.environ.get("PENSION_LSV_DATA_DIR")
    if env_path:
        return Path(env_path)
    return None


@dataclass(frozen=True)
class DataConfig:
    """
    Immutable data configuration.

    Attributes
    ----------
    data_dir : Path or None
        Base directory for relative resource names. Override with the
        PENSION_LSV_DATA_DIR environment variable.
    rates_filename : str
        Default segment-rate resource name inside data_dir
    mortality_filename : str
        Default mortality resource name inside data_dir
    """

    data_dir: Path | None = None
    rates_filename: str = "segment_rates.json"
    mortality_filename: str = "mortality.json"

    def __post_init__(self) -> None:
        """Initialize data_dir using resolver function."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.data_dir is None:
            object.__setattr__(self, "data_dir", _resolve_data_dir())


# =============================================================================
# Valuation Configuration
# =============================================================================


@dataclass(frozen=True)
class ValuationConfig:
    """
    Immutable valuation conventions. [T1: §417(e) methodology]

    Attributes
    ----------
    payments_per_year : int
        Payment frequency; the engine supports monthly payments only
    max_age : int
        Terminal age of the mortality table (omega - 1)
    days_per_year : float
        Year length for actual-day date arithmetic
    segment_breakpoints : tuple[float, float]
        End of the first and second rate segments, in years
    de_minimis_threshold : float
        Default lump-sum threshold for the de-minimis test
    """

    payments_per_year: int = 12
    max_age: int = 120
    days_per_year: float = 365.25
    segment_breakpoints: tuple[float, float] = (5.0, 20.0)
    de_minimis_threshold: float = 5000.0


# =============================================================================
# Master Configuration
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from pension_lsv.config.settings import SETTINGS
    >>> SETTINGS.valuation.max_age
    120
    """

    data: DataConfig = DataConfig()
    valuation: ValuationConfig = ValuationConfig()


# Singleton instance - import this
SETTINGS = Settings()
