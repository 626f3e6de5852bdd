"""
Interval generation module.

Builds named windows over a site's timeline. Every interval uses the
half-open convention ``[start, end)``: a window whose last included day is
``D`` ends at ``D + 1``. Empty windows (``end <= start``) are valid and are
passed on to the aggregator unchanged.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from ..core import constants
from ..models import DailyRecord, Interval, Site

ONE_DAY = timedelta(days=1)
LOOKBACK_NAME = "lookback"


class StrategyKind(Enum):
    """Available interval strategies."""

    FULL_SEASON = "full_season"
    EVEN = "even"
    MILESTONE = "milestone"
    YEAR = "year"
    YEAR_MONTH = "year_month"


@dataclass(frozen=True)
class IntervalStrategy:
    """Selected strategy and its parameters."""

    kind: StrategyKind
    n_intervals: int = constants.DEFAULT_N_INTERVALS
    days_prior: int = constants.DEFAULT_DAYS_PRIOR_PLANTING

    def __post_init__(self):
        if self.n_intervals < 1:
            raise ValueError(f"n_intervals must be >= 1, got {self.n_intervals}")
        if self.days_prior < 0:
            raise ValueError(f"days_prior must be >= 0, got {self.days_prior}")

    @classmethod
    def from_name(
        cls,
        name: str,
        n_intervals: int = constants.DEFAULT_N_INTERVALS,
        days_prior: int = constants.DEFAULT_DAYS_PRIOR_PLANTING
    ) -> "IntervalStrategy":
        """
        Build a strategy from its configuration name.

        Raises:
            ValueError: If the name is unknown
        """
        try:
            kind = StrategyKind(name.lower())
        except ValueError:
            valid = ", ".join(k.value for k in StrategyKind)
            raise ValueError(f"Unknown interval strategy '{name}' (expected one of: {valid})")
        return cls(kind=kind, n_intervals=n_intervals, days_prior=days_prior)

    @property
    def needs_records(self) -> bool:
        """Calendar strategies are built from observed dates."""
        return self.kind in (StrategyKind.YEAR, StrategyKind.YEAR_MONTH)


def ordinal_label(index: int) -> str:
    """
    Sequential letter label: 0 -> A, 25 -> Z, 26 -> AA.
    """
    label = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        label = chr(ord("A") + remainder) + label
    return label


class IntervalGenerator:
    """Produce the interval set for a site under a selected strategy."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize interval generator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self._builders: Dict[StrategyKind, Callable[..., List[Interval]]] = {
            StrategyKind.FULL_SEASON: self._full_season,
            StrategyKind.EVEN: self._even,
            StrategyKind.MILESTONE: self._milestone,
            StrategyKind.YEAR: self._calendar_year,
            StrategyKind.YEAR_MONTH: self._calendar_year_month,
        }

    def generate(
        self,
        site: Site,
        strategy: IntervalStrategy,
        records: Optional[Sequence[DailyRecord]] = None
    ) -> List[Interval]:
        """
        Generate intervals for a site.

        Args:
            site: Site whose timeline is partitioned
            strategy: Selected strategy
            records: Daily records (required by calendar strategies only)

        Returns:
            Intervals ordered by start date

        Raises:
            ValueError: If a calendar strategy is selected without records
        """
        if strategy.needs_records and records is None:
            raise ValueError(f"Strategy '{strategy.kind.value}' requires daily records")

        intervals = self._builders[strategy.kind](site, strategy, records)
        self.logger.debug(
            f"Generated {len(intervals)} '{strategy.kind.value}' intervals for {site.id}"
        )
        return intervals

    @staticmethod
    def _lookback(site: Site, days_prior: int) -> Interval:
        return Interval(
            site_id=site.id,
            label=ordinal_label(0),
            name=LOOKBACK_NAME,
            start=site.lookback_start(days_prior),
            end=site.start,
        )

    def _full_season(self, site: Site, strategy: IntervalStrategy, records) -> List[Interval]:
        return [Interval(
            site_id=site.id,
            label="season",
            name=site.name,
            start=site.start,
            end=site.end + ONE_DAY,
        )]

    def _even(self, site: Site, strategy: IntervalStrategy, records) -> List[Interval]:
        """
        Lookback window plus ``n`` contiguous partitions of [start, end].

        Breakpoints are linearly interpolated between start and end and
        floored to whole days; the last partition ends at ``end + 1`` so the
        season end is included.
        """
        n = strategy.n_intervals
        span = (site.end - site.start).days
        breakpoints = [site.start + timedelta(days=(i * span) // n) for i in range(n)]
        breakpoints.append(site.end + ONE_DAY)

        intervals = [self._lookback(site, strategy.days_prior)]
        for i in range(n):
            intervals.append(Interval(
                site_id=site.id,
                label=ordinal_label(i + 1),
                name=f"part_{i + 1}",
                start=breakpoints[i],
                end=breakpoints[i + 1],
            ))
        return intervals

    def _milestone(self, site: Site, strategy: IntervalStrategy, records) -> List[Interval]:
        """
        Lookback window plus one window per stage delimited by milestones.

        Each stage ends the day before the next milestone; the last one
        includes the season end.
        """
        bounds = [site.start, *site.milestones, site.end + ONE_DAY]

        intervals = [self._lookback(site, strategy.days_prior)]
        for i, (start, end) in enumerate(zip(bounds, bounds[1:])):
            intervals.append(Interval(
                site_id=site.id,
                label=ordinal_label(i + 1),
                name=f"stage_{i + 1}",
                start=start,
                end=end,
            ))
        return intervals

    def _calendar_year(self, site: Site, strategy: IntervalStrategy, records) -> List[Interval]:
        return self._calendar_buckets(site, records, lambda d: f"{d.year:04d}")

    def _calendar_year_month(
        self, site: Site, strategy: IntervalStrategy, records
    ) -> List[Interval]:
        return self._calendar_buckets(site, records, lambda d: f"{d.year:04d}-{d.month:02d}")

    @staticmethod
    def _calendar_buckets(
        site: Site,
        records: Sequence[DailyRecord],
        bucket_of: Callable[[date], str]
    ) -> List[Interval]:
        """One interval per bucket bounded by the observed min/max dates."""
        bounds: Dict[str, List[date]] = {}
        for record in records:
            if record.site_id != site.id:
                continue
            key = bucket_of(record.date)
            if key not in bounds:
                bounds[key] = [record.date, record.date]
            else:
                bounds[key][0] = min(bounds[key][0], record.date)
                bounds[key][1] = max(bounds[key][1], record.date)

        return [
            Interval(site_id=site.id, label=key, start=first, end=last + ONE_DAY)
            for key, (first, last) in sorted(bounds.items())
        ]
