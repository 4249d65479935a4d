"""Frozen settings and numerical tolerances."""

from .settings import SETTINGS, DataConfig, Settings, ValuationConfig
from .tolerances import get_tolerance

__all__ = [
    "SETTINGS",
    "Settings",
    "DataConfig",
    "ValuationConfig",
    "get_tolerance",
]
