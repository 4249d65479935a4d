"""
Mortality Table Loader.

Builds immutable integer-age mortality tables for the §417(e) valuation
from dictionaries, sequences, JSON documents, or CSV files.

Theory
------
[T1] qx = probability of death between age x and x+1
[T1] px = 1 - qx = probability of surviving the year

The table is trusted as supplied: qx values are not range-checked here,
the survival model clamps them into [0, 1] before use.
"""

import json
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import pandas as pd

from pension_lsv.config.settings import SETTINGS
from pension_lsv.loaders.resources import DataLoadError, resolve_resource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MortalityTable:
    """
    Immutable age -> qx mapping.

    [T1] qx = probability of death between age x and x+1

    Attributes
    ----------
    qx : Mapping[int, float]
        Mortality rates keyed by integer age (read-only view)
    basis_id : str
        Identifier of the mortality basis; informational only
    """

    qx: Mapping[int, float]
    basis_id: str = "custom"
    _ages: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Freeze the mapping and validate keys."""
        frozen: dict[int, float] = {}
        for age, rate in self.qx.items():
            if int(age) != age:
                raise ValueError(f"CRITICAL: mortality age must be an integer, got {age!r}")
            frozen[int(age)] = float(rate)
        if not frozen:
            raise ValueError("CRITICAL: mortality table has no ages")
        # Frozen dataclass workaround: use object.__setattr__
        object.__setattr__(self, "qx", MappingProxyType(frozen))
        object.__setattr__(self, "_ages", tuple(sorted(frozen)))

    @property
    def min_age(self) -> int:
        return self._ages[0]

    @property
    def max_age(self) -> int:
        return self._ages[-1]

    def __contains__(self, age: object) -> bool:
        return age in self.qx

    def __len__(self) -> int:
        return len(self.qx)

    def get_qx(self, age: int, default: float = 1.0) -> float:
        """
        Get mortality rate at age.

        Parameters
        ----------
        age : int
            Age to look up
        default : float, default 1.0
            Rate returned for ages absent from the table (certain death)

        Returns
        -------
        float
            Mortality rate qx as stored

        Examples
        --------
        >>> table = MortalityTable({65: 0.0168, 66: 0.0187})
        >>> table.get_qx(65)
        0.0168
        >>> table.get_qx(121)
        1.0
        """
        return self.qx.get(age, default)

    def get_px(self, age: int) -> float:
        """[T1] px = 1 - qx"""
        return 1.0 - self.get_qx(age)


class MortalityLoader:
    """
    Loads mortality tables from various sources.

    Supported JSON layout::

        {"basisId": "417(e) 2024 unisex", "qx": [0.00066, 0.00044, ...]}

    where ``qx`` is either a list indexed by age or an ``{"age": qx}`` object.
    CSV files need ``age`` and ``qx`` columns.

    Examples
    --------
    >>> loader = MortalityLoader()
    >>> table = loader.from_dict({65: 0.02, 66: 0.022}, basis_id="Custom")
    >>> table.max_age
    66
    """

    def from_dict(
        self,
        qx_by_age: Mapping[int, float],
        basis_id: str = "custom",
    ) -> MortalityTable:
        """Create table from an age -> qx mapping."""
        return MortalityTable(qx=dict(qx_by_age), basis_id=basis_id)

    def from_sequence(
        self,
        qx_values: Sequence[float],
        basis_id: str = "custom",
        start_age: int = 0,
    ) -> MortalityTable:
        """Create table from rates listed by consecutive age."""
        qx = {start_age + offset: rate for offset, rate in enumerate(qx_values)}
        return MortalityTable(qx=qx, basis_id=basis_id)

    def from_json(self, path: str | Path | None = None) -> MortalityTable:
        """
        Load table from a JSON document.

        Parameters
        ----------
        path : str or Path, optional
            File to read. Defaults to the configured mortality resource
            inside PENSION_LSV_DATA_DIR.

        Raises
        ------
        DataLoadError
            If the file is missing or malformed
        """
        filepath = resolve_resource(path, SETTINGS.data.mortality_filename)
        try:
            with open(filepath) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DataLoadError(f"Cannot read mortality table {filepath}: {e}") from e

        if not isinstance(document, dict) or "qx" not in document:
            raise DataLoadError(f"Mortality table {filepath} has no 'qx' entry")

        basis_id = str(document.get("basisId", filepath.stem))
        raw = document["qx"]
        try:
            if isinstance(raw, list):
                table = self.from_sequence(
                    [_as_rate(v) for v in raw],
                    basis_id=basis_id,
                    start_age=int(document.get("minAge", 0)),
                )
            elif isinstance(raw, dict):
                table = self.from_dict(
                    {int(age): _as_rate(v) for age, v in raw.items()},
                    basis_id=basis_id,
                )
            else:
                raise DataLoadError(f"Mortality table {filepath}: 'qx' must be a list or object")
        except (TypeError, ValueError) as e:
            raise DataLoadError(f"Mortality table {filepath} is malformed: {e}") from e

        logger.info(
            f"Loaded mortality basis '{table.basis_id}' "
            f"(ages {table.min_age}-{table.max_age}) from {filepath}"
        )
        return table

    def from_csv(
        self,
        path: str | Path,
        basis_id: str | None = None,
    ) -> MortalityTable:
        """
        Load table from a CSV file with ``age`` and ``qx`` columns.

        Raises
        ------
        DataLoadError
            If the file is missing or lacks the required columns
        """
        filepath = Path(path)
        try:
            df = pd.read_csv(filepath)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise DataLoadError(f"Cannot read mortality table {filepath}: {e}") from e

        missing = {"age", "qx"} - set(df.columns)
        if missing:
            raise DataLoadError(
                f"Mortality table {filepath} missing columns: {sorted(missing)}"
            )

        df = df.dropna(subset=["age", "qx"])
        qx = {int(age): float(rate) for age, rate in zip(df["age"], df["qx"])}
        if not qx:
            raise DataLoadError(f"Mortality table {filepath} has no rows")

        table = self.from_dict(qx, basis_id=basis_id or filepath.stem)
        logger.info(f"Loaded mortality basis '{table.basis_id}' from {filepath}")
        return table


def _as_rate(value: object) -> float:
    rate = float(value)  # type: ignore[arg-type]
    if math.isnan(rate):
        raise ValueError("qx must not be NaN")
    return rate

