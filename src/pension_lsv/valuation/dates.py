"""
Date arithmetic for age and deferral calculations.

[T1] Ages and intervals use actual elapsed days over a 365.25-day year.
"""

from datetime import date

from pension_lsv.config.settings import SETTINGS


def years_between(start: date, end: date) -> float:
    """
    Fractional years from start to end (actual days / 365.25).

    Negative when end precedes start.

    Examples
    --------
    >>> round(years_between(date(2024, 1, 1), date(2025, 1, 1)), 6)
    1.002053
    """
    return (end - start).days / SETTINGS.valuation.days_per_year


def age_at(birth: date, as_of: date) -> float:
    """Fractional age on as_of for someone born on birth."""
    return years_between(birth, as_of)


def parse_iso_date(text: str | None) -> date | None:
    """
    Parse a ``YYYY-MM-DD`` string.

    Returns
    -------
    date or None
        None when the text is missing or not a valid calendar date
    """
    if not text:
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


def month_key(d: date) -> str:
    """Year-month key (``YYYY-MM``) used to select segment rates."""
    return f"{d.year:04d}-{d.month:02d}"
