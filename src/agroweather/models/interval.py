"""
Interval data models.
"""

import datetime
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Interval:
    """Named half-open window ``[start, end)`` for a site."""

    site_id: str
    label: str
    start: datetime.date
    end: datetime.date  # exclusive
    name: Optional[str] = None

    @property
    def days(self) -> int:
        """Calendar length; zero or negative for an empty window."""
        return (self.end - self.start).days

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    @property
    def last_day(self) -> datetime.date:
        """Inclusive last day (only meaningful for non-empty windows)."""
        return self.end - datetime.timedelta(days=1)

    def contains(self, day: datetime.date) -> bool:
        return self.start <= day < self.end
