"""
Date utilities.

Centralizes calendar arithmetic shared by adapters, interval generation
and the pipeline driver. Run timestamps are produced in UTC with pytz.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

import pytz


DateLike = Union[date, datetime, str]


class DateUtils:
    """Utilities for calendar date handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_date(value: DateLike) -> date:
        """
        Parse a calendar date.

        Accepts ``date``/``datetime`` objects and ISO strings (``YYYY-MM-DD``),
        compact strings (``YYYYMMDD``) and US-style strings (``MM/DD/YYYY``).

        Raises:
            ValueError: If the value cannot be parsed
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        text = str(value).strip()
        for fmt in ("%Y-%m-%d", "%Y%m%d", "%m/%d/%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        raise ValueError(f"Invalid date: {value!r}")

    @staticmethod
    def year_span(range_start: date, range_end: date) -> Tuple[date, date]:
        """
        Expand a date range to whole calendar years.

        Example:
            (2018-04-01, 2019-02-10) -> (2018-01-01, 2019-12-31)
        """
        return date(range_start.year, 1, 1), date(range_end.year, 12, 31)

    @staticmethod
    def years_between(range_start: date, range_end: date) -> List[int]:
        """List every calendar year touched by the range."""
        return list(range(range_start.year, range_end.year + 1))

    @staticmethod
    def from_year_day(year: int, day_of_year: int) -> date:
        """Build a date from a year and a 1-based day of year."""
        return date(year, 1, 1) + timedelta(days=int(day_of_year) - 1)

    @staticmethod
    def day_of_year(day: date) -> int:
        """Return the 1-based day of year."""
        return day.timetuple().tm_yday

    @staticmethod
    def utc_now() -> datetime:
        """Current time as a timezone-aware UTC datetime."""
        return datetime.now(pytz.UTC)

    @staticmethod
    def to_iso_with_timezone(dt: datetime) -> str:
        """
        Convert datetime to ISO format string with timezone.

        Raises:
            ValueError: If datetime is not timezone-aware
        """
        if dt.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware")

        return dt.isoformat()
