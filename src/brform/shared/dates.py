"""Strict date parsing for masked date fields."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from brform.constants import DEFAULT_DATE_PATTERN, TWO_DIGIT_YEAR_PIVOT


def parse_date(text: Optional[str], pattern: str = DEFAULT_DATE_PATTERN) -> Optional[date]:
    """Parse ``text`` with ``pattern``; impossible dates return ``None``.

    ``strptime`` never rolls over, so ``31/02/2024`` fails instead of
    becoming a day in March.
    """
    value = (text or "").strip()
    if not value:
        return None
    try:
        return datetime.strptime(value, pattern).date()
    except ValueError:
        return None


def parse_date_flexible(text: Optional[str], pattern: str = DEFAULT_DATE_PATTERN) -> Optional[date]:
    """Parse what a user types into a date picker.

    Tries ``pattern`` first, then ``d/m/y`` with ``-`` or ``.`` as
    separators and two-digit years (``24`` -> 2024, ``87`` -> 1987).
    """
    parsed = parse_date(text, pattern)
    if parsed is not None:
        return parsed

    value = (text or "").strip().replace("-", "/").replace(".", "/")
    parts = value.split("/")
    if len(parts) != 3:
        return None

    try:
        day, month, year = (int(part) for part in parts)
        if year < 100:
            year += 2000 if year < TWO_DIGIT_YEAR_PIVOT else 1900
        return date(year, month, day)
    except ValueError:
        return None


def format_date(value: Optional[date], pattern: str = DEFAULT_DATE_PATTERN) -> str:
    """Render ``value`` with ``pattern`` (empty string for ``None``)."""
    return value.strftime(pattern) if value is not None else ""
