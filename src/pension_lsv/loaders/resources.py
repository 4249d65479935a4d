"""
Shared resource resolution for rate and mortality loaders.

NEVER fails silently: a missing or unreadable resource raises
DataLoadError, it is never replaced by a default table.
"""

from pathlib import Path

from pension_lsv.config.settings import SETTINGS


class DataLoadError(Exception):
    """Raised when a rate or mortality resource cannot be loaded."""

    pass


def resolve_resource(path: str | Path | None, default_name: str) -> Path:
    """
    Resolve a resource path against the configured data directory.

    Absolute paths and paths that exist as given are returned unchanged;
    other relative names are looked up inside PENSION_LSV_DATA_DIR.

    Parameters
    ----------
    path : str or Path, optional
        Requested resource
    default_name : str
        File name used inside the data directory when path is None

    Raises
    ------
    DataLoadError
        If no path is given and no data directory is configured
    """
    data_dir = SETTINGS.data.data_dir
    if path is None:
        if data_dir is None:
            raise DataLoadError(
                "No resource path given and PENSION_LSV_DATA_DIR is not set"
            )
        return data_dir / default_name

    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists() or data_dir is None:
        return candidate
    return data_dir / candidate
