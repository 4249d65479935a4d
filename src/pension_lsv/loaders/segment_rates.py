"""
Segment Rate Loader.

Monthly §417(e) segment rates keyed by ``YYYY-MM``. A valuation selects
the rates published for the plan-termination month.

Supported JSON layout::

    {"2024-06": {"i1": 0.0512, "i2": 0.0531, "i3": 0.0546}, ...}

CSV files need ``month``, ``i1``, ``i2`` and ``i3`` columns.
"""

import json
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from types import MappingProxyType

import pandas as pd

from pension_lsv.config.settings import SETTINGS
from pension_lsv.loaders.resources import DataLoadError, resolve_resource
from pension_lsv.valuation.dates import month_key
from pension_lsv.valuation.discount import SegmentRates

logger = logging.getLogger(__name__)

_RATE_COLUMNS = ("i1", "i2", "i3")
_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})(-\d{2})?$")


class MissingSegmentRatesError(KeyError):
    """Raised when no segment rates exist for the requested month."""

    def __init__(self, month: str):
        super().__init__(month)
        self.month = month

    def __str__(self) -> str:
        return f"No segment rates found for month {self.month}"


def _normalize_month(key: str | date) -> str:
    if isinstance(key, date):
        return month_key(key)
    text = str(key).strip()
    # Accept full ISO dates as well as YYYY-MM keys
    return text[:7]


def _checked_month(key: str | date) -> str:
    """
    Normalise a table key, rejecting anything that is not a calendar month.

    Raises
    ------
    ValueError
        If key is not ``YYYY-MM`` (or an ISO date) with a month of 01-12
    """
    if isinstance(key, date):
        return month_key(key)
    match = _MONTH_PATTERN.match(str(key).strip())
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise ValueError(f"Invalid segment-rate month key {key!r}; expected YYYY-MM")
    return f"{match.group(1)}-{match.group(2)}"


@dataclass(frozen=True)
class SegmentRateTable:
    """
    Immutable month -> SegmentRates lookup.

    Attributes
    ----------
    rates : Mapping[str, SegmentRates]
        Rates keyed by ``YYYY-MM`` (read-only view)
    source : str
        Where the table came from; informational only
    """

    rates: Mapping[str, SegmentRates]
    source: str = "custom"

    def __post_init__(self) -> None:
        frozen = {_checked_month(k): v for k, v in self.rates.items()}
        object.__setattr__(self, "rates", MappingProxyType(frozen))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, date)):
            return False
        return _normalize_month(key) in self.rates

    def __len__(self) -> int:
        return len(self.rates)

    def __iter__(self) -> Iterator[str]:
        return iter(self.months)

    @property
    def months(self) -> list[str]:
        """Available months in ascending order."""
        return sorted(self.rates)

    def get(self, key: str | date) -> SegmentRates | None:
        """Rates for the month of key, or None when absent."""
        return self.rates.get(_normalize_month(key))

    def rates_for(self, key: str | date) -> SegmentRates:
        """
        Rates for the month of key.

        Parameters
        ----------
        key : str or date
            ``YYYY-MM`` key, ISO date string, or date

        Raises
        ------
        MissingSegmentRatesError
            If the month is not in the table

        Examples
        --------
        >>> table = SegmentRateTable({"2024-06": SegmentRates(0.05, 0.052, 0.054)})
        >>> table.rates_for(date(2024, 6, 30)).i2
        0.052
        """
        month = _normalize_month(key)
        try:
            return self.rates[month]
        except KeyError:
            raise MissingSegmentRatesError(month) from None


class SegmentRateLoader:
    """
    Loads segment-rate tables from dictionaries, JSON, or CSV.

    Examples
    --------
    >>> loader = SegmentRateLoader()
    >>> table = loader.from_dict({"2024-06": {"i1": 0.05, "i2": 0.052, "i3": 0.054}})
    >>> table.months
    ['2024-06']
    """

    def from_dict(
        self,
        rates_by_month: Mapping[str, Mapping[str, float] | SegmentRates],
        source: str = "custom",
    ) -> SegmentRateTable:
        """Create table from a month -> {i1, i2, i3} mapping."""
        rates: dict[str, SegmentRates] = {}
        for key, entry in rates_by_month.items():
            try:
                month = _checked_month(key)
            except ValueError as e:
                raise DataLoadError(str(e)) from e
            if month in rates:
                raise DataLoadError(f"Duplicate segment rates for month {month} (key {key!r})")
            if isinstance(entry, SegmentRates):
                rates[month] = entry
                continue
            missing = [c for c in _RATE_COLUMNS if c not in entry]
            if missing:
                raise DataLoadError(f"Segment rates for {month} missing {missing}")
            rates[month] = SegmentRates(*(float(entry[c]) for c in _RATE_COLUMNS))
        return SegmentRateTable(rates=rates, source=source)

    def from_json(self, path: str | Path | None = None) -> SegmentRateTable:
        """
        Load table from a JSON document.

        Parameters
        ----------
        path : str or Path, optional
            File to read. Defaults to the configured rates resource inside
            PENSION_LSV_DATA_DIR.

        Raises
        ------
        DataLoadError
            If the file is missing or malformed
        """
        filepath = resolve_resource(path, SETTINGS.data.rates_filename)
        try:
            with open(filepath) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DataLoadError(f"Cannot read segment rates {filepath}: {e}") from e

        if not isinstance(document, dict):
            raise DataLoadError(f"Segment rates {filepath} must be a JSON object")

        try:
            table = self.from_dict(document, source=str(filepath))
        except (TypeError, ValueError) as e:
            raise DataLoadError(f"Segment rates {filepath} are malformed: {e}") from e

        logger.info(f"Loaded segment rates for {len(table)} months from {filepath}")
        return table

    def from_csv(self, path: str | Path) -> SegmentRateTable:
        """
        Load table from a CSV file with month, i1, i2, i3 columns.

        Raises
        ------
        DataLoadError
            If the file is missing or lacks the required columns
        """
        filepath = Path(path)
        try:
            df = pd.read_csv(filepath, dtype={"month": str})
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise DataLoadError(f"Cannot read segment rates {filepath}: {e}") from e

        missing = {"month", *_RATE_COLUMNS} - set(df.columns)
        if missing:
            raise DataLoadError(
                f"Segment rates {filepath} missing columns: {sorted(missing)}"
            )

        df = df.dropna(subset=["month", *_RATE_COLUMNS])
        records = {
            row.month: {c: getattr(row, c) for c in _RATE_COLUMNS}
            for row in df.itertuples(index=False)
        }
        try:
            table = self.from_dict(records, source=str(filepath))
        except (TypeError, ValueError) as e:
            raise DataLoadError(f"Segment rates {filepath} are malformed: {e}") from e
        logger.info(f"Loaded segment rates for {len(table)} months from {filepath}")
        return table
