"""
models/night.py
---------------
Parsing of ``yyyy-mm-dd`` night strings and the boundaries used to
filter nights by month or by date range.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sleeplog.exceptions import InvalidNightError


@dataclass(frozen=True)
class Night:
    """
    A night split into its numeric components.

    Attributes:
        day: Day of month (1-31).
        month: Month (1-12).
        year: Four digit year.
        date: The ``yyyy-mm-dd`` string it was parsed from.
    """
    day: int
    month: int
    year: int
    date: str

    @classmethod
    def from_string(cls, night: str) -> "Night":
        """
        Parse a ``yyyy-mm-dd`` string.

        Raises:
            InvalidNightError: If the value is not a zero-padded
                ``yyyy-mm-dd`` calendar date.
        """
        parts = night.split("-") if isinstance(night, str) else []
        if [len(p) for p in parts] != [4, 2, 2] or not all(p.isascii() and p.isdigit() for p in parts):
            raise InvalidNightError(f"night {night!r} is not in yyyy-mm-dd format")
        year, month, day = (int(p) for p in parts)
        try:
            date(year, month, day)
        except ValueError as e:
            raise InvalidNightError(f"night {night!r} is not a valid date: {e}") from e
        return cls(day=day, month=month, year=year, date=night)


def month_prefix(month: int, year: int) -> str:
    """
    Prefix shared by every night in the given month, e.g. ``2022-01-``.

    The month is zero-padded and the trailing dash kept so month 1 never
    matches months 10-12.
    """
    return f"{year:04d}-{month:02d}-"


@dataclass(frozen=True)
class NightBoundary:
    """
    One inclusive endpoint of a date range.

    Leaving ``day`` out matches every day of the boundary month.
    """
    year: int
    month: int
    day: Optional[int] = None


def night_in_range(night: Night, start: NightBoundary, end: NightBoundary) -> bool:
    """
    Whether ``night`` falls between ``start`` and ``end`` inclusive.

    Year is compared first, then month; days are compared only when both
    endpoints specify one.
    """
    if start.day is not None and end.day is not None:
        key = (night.year, night.month, night.day)
        return (start.year, start.month, start.day) <= key <= (end.year, end.month, end.day)
    key = (night.year, night.month)
    return (start.year, start.month) <= key <= (end.year, end.month)
