"""
Site data models.

Contains the immutable description of a monitored location.
"""

import datetime
from dataclasses import dataclass, field
from typing import Tuple

from ..core.exceptions import DataValidityError


@dataclass(frozen=True)
class Site:
    """Monitored location with its season bounds and milestones."""

    id: str
    crop: str
    name: str
    latitude: float
    longitude: float
    start: datetime.date
    end: datetime.date
    milestones: Tuple[datetime.date, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise DataValidityError(
                f"Invalid latitude {self.latitude} (must be -90..90)", site_id=self.id
            )
        if not -180 <= self.longitude <= 180:
            raise DataValidityError(
                f"Invalid longitude {self.longitude} (must be -180..180)", site_id=self.id
            )
        if self.end < self.start:
            raise DataValidityError(
                f"Season end {self.end} precedes start {self.start}", site_id=self.id
            )

        # Milestones may be passed as a list; store a tuple so the site stays hashable
        milestones = tuple(self.milestones)
        object.__setattr__(self, "milestones", milestones)

        previous = self.start
        for milestone in milestones:
            if milestone < previous:
                raise DataValidityError(
                    f"Milestone {milestone} precedes {previous}", site_id=self.id
                )
            previous = milestone
        if milestones and milestones[-1] > self.end:
            raise DataValidityError(
                f"Milestone {milestones[-1]} is after season end {self.end}", site_id=self.id
            )

    def lookback_start(self, days_prior: int) -> datetime.date:
        """First date of the lookback window before the season start."""
        return self.start - datetime.timedelta(days=days_prior)
