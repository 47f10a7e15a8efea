"""Calendar month value type.

A CalendarMonth is an immutable (year, month) pair used as the unit of
capacity planning. Capacity overrides are keyed by month, and the capacity
cursor walks forward one month at a time.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date
from typing import Optional

_MONTH_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})")


class CalendarMonthError(ValueError):
    """Base class for calendar month errors."""


class FormatError(CalendarMonthError):
    """A string is not in "YYYY-MM" form."""


class MonthRangeError(CalendarMonthError):
    """A year or month is outside its valid range."""


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, order=True)
class CalendarMonth:
    """A specific month of a specific year.

    Ordering is by (year, month). All arithmetic returns new instances.

    Attributes:
        year: Gregorian year (1-9999).
        month: Month of year (1-12).
    """

    year: int
    month: int

    def __post_init__(self):
        if not _is_int(self.year):
            raise MonthRangeError(f"Year must be an integer, got: {self.year!r}")
        if not _is_int(self.month):
            raise MonthRangeError(f"Month must be an integer, got: {self.month!r}")
        if not MINYEAR <= self.year <= MAXYEAR:
            raise MonthRangeError(
                f"Year must be between {MINYEAR} and {MAXYEAR}, got: {self.year}"
            )
        if not 1 <= self.month <= 12:
            raise MonthRangeError(f"Month must be between 1-12, got: {self.month}")

    @classmethod
    def parse(cls, value: str) -> "CalendarMonth":
        """Parse a "YYYY-MM" string.

        Raises:
            FormatError: If the string is not exactly four year digits, a dash
                and two month digits.
            MonthRangeError: If the month is not 01-12.
        """
        match = _MONTH_PATTERN.fullmatch(value) if isinstance(value, str) else None
        if match is None:
            raise FormatError(f'Invalid month format: "{value}". Expected "YYYY-MM".')
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def try_parse(cls, value: str) -> Optional["CalendarMonth"]:
        """Parse a "YYYY-MM" string, returning None if it is invalid."""
        try:
            return cls.parse(value)
        except CalendarMonthError:
            return None

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return cls.try_parse(value) is not None

    @classmethod
    def from_date(cls, value: date) -> "CalendarMonth":
        """Truncate a date to the month containing it."""
        return cls(value.year, value.month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def to_date(self) -> date:
        """First day of the month."""
        return date(self.year, self.month, 1)

    def format(self) -> str:
        """Human-readable form, e.g. "Jan 2025"."""
        return f"{calendar.month_abbr[self.month]} {self.year}"

    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def day(self, day: int) -> date:
        """Date of the given day within this month."""
        return date(self.year, self.month, day)

    def add_months(self, n: int) -> "CalendarMonth":
        """Return the month ``n`` months after this one (``n`` may be negative).

        Raises:
            MonthRangeError: If the result falls outside the supported years.
        """
        if not _is_int(n):
            raise MonthRangeError(f"Month offset must be an integer, got: {n!r}")
        year, month_index = divmod(self.year * 12 + (self.month - 1) + n, 12)
        return CalendarMonth(year, month_index + 1)

    def next(self, count: int) -> list["CalendarMonth"]:
        """The ``count`` consecutive months starting with this one."""
        return [self.add_months(i) for i in range(count)]

    def range_to(self, end: "CalendarMonth") -> list["CalendarMonth"]:
        """All months from this one to ``end``, inclusive."""
        span = months_between(self, end)
        return self.next(span) if span > 0 else []

    def compare_to(self, other: "CalendarMonth") -> int:
        """Negative, zero or positive as this month is before, equal to or after other."""
        if self.year != other.year:
            return self.year - other.year
        return self.month - other.month


def months_between(start: CalendarMonth, end: CalendarMonth) -> int:
    """Inclusive number of months from start to end.

    January to March is 3. The result is zero or negative when end precedes
    start.
    """
    return (end.year - start.year) * 12 + (end.month - start.month) + 1
