"""
Data Loaders.

Immutable resources supplied to the valuation engine:
- Segment rates by plan-termination month
- Integer-age mortality tables
"""

from .mortality import MortalityLoader, MortalityTable
from .resources import DataLoadError, resolve_resource
from .segment_rates import (
    MissingSegmentRatesError,
    SegmentRateLoader,
    SegmentRateTable,
)

__all__ = [
    # Errors
    "DataLoadError",
    "MissingSegmentRatesError",
    # Segment rates
    "SegmentRateTable",
    "SegmentRateLoader",
    # Mortality
    "MortalityTable",
    "MortalityLoader",
    # Paths
    "resolve_resource",
]
