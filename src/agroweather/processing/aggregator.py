"""
Interval aggregation module.

Reduces enriched daily records to one summary row per interval.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Collection, Dict, List, Optional, Sequence

from ..core.exceptions import DataValidityError
from ..models import DailyRecord, FailureRecord, Interval, SummaryRow

# Summed daily fields and the summary column each one feeds
SUMMED_FIELDS = {
    "precipitation": "precipitation",
    "radiation": "radiation",
    "vpd": "vpd",
    "et0": "et0",
    "extreme_precipitation": "extreme_precipitation",
    "extreme_temperature": "extreme_temperature",
    "chu": "chu",
    "gdu": "gdd",
}

REDUCED_SUMMED_FIELDS = ("precipitation", "extreme_precipitation")

# A provider lacking any of these gets the precipitation-only summary
FULL_SUMMARY_FIELDS = ("t_max", "t_min", "t_mean", "radiation")


@dataclass
class AggregationResult:
    """Summary rows plus the intervals whose evenness index is undefined."""

    rows: List[SummaryRow] = field(default_factory=list)
    failures: List[FailureRecord] = field(default_factory=list)


class IntervalAggregator:
    """Join intervals to daily records and reduce each interval."""

    def __init__(
        self,
        available_fields: Optional[Collection[str]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize interval aggregator.

        Args:
            available_fields: Canonical fields the provider supplies. None means all.
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.available_fields = set(available_fields) if available_fields is not None else None

    @property
    def reduced(self) -> bool:
        """Whether only the precipitation summary can be computed."""
        if self.available_fields is None:
            return False
        return not all(name in self.available_fields for name in FULL_SUMMARY_FIELDS)

    @staticmethod
    def select_records(interval: Interval, records: Sequence[DailyRecord]) -> List[DailyRecord]:
        """
        Records of the interval's site with ``start <= date < end``, date-sorted.
        """
        selected = [
            record for record in records
            if record.site_id == interval.site_id and interval.contains(record.date)
        ]
        selected.sort(key=lambda record: record.date)
        return selected

    def reduce(self, records: Sequence[DailyRecord]) -> Dict[str, Any]:
        """
        Compute count, sums and mean temperature over records.

        An empty selection yields a count and sums of 0 and no mean. A field
        absent on any record makes its reduction absent.

        Args:
            records: Records of one interval

        Returns:
            Dictionary keyed by summary column
        """
        totals: Dict[str, Any] = {"duration": len(records)}

        fields = REDUCED_SUMMED_FIELDS if self.reduced else tuple(SUMMED_FIELDS)
        for name in fields:
            totals[SUMMED_FIELDS[name]] = self._sum(records, name)

        if not self.reduced:
            totals["t_mean"] = self._mean(records, "t_mean")

        return totals

    def _sum(self, records: Sequence[DailyRecord], name: str):
        values = [getattr(record, name) for record in records]
        if any(value is None for value in values):
            missing = sum(1 for value in values if value is None)
            self.logger.debug(f"{missing}/{len(values)} records lack {name}; sum is absent")
            return None
        return sum(values)

    def _mean(self, records: Sequence[DailyRecord], name: str) -> Optional[float]:
        if not records:
            return None
        total = self._sum(records, name)
        if total is None:
            return None
        return total / len(records)

    @staticmethod
    def shannon_index(values: Sequence[float]) -> float:
        """
        Shannon entropy of a distribution given as non-negative amounts.

        H = −Σ pᵢ·ln(pᵢ) with pᵢ = xᵢ / Σx over positive xᵢ; 0 when Σx is 0.
        """
        total = sum(values)
        if total <= 0:
            return 0.0

        entropy = 0.0
        for value in values:
            if value > 0:
                p = value / total
                entropy -= p * math.log(p)
        return entropy

    @classmethod
    def evenness_index(
        cls,
        values: Sequence[float],
        n: int,
        site_id: Optional[str] = None,
        key: Optional[str] = None
    ) -> float:
        """
        Precipitation evenness SDI = H / ln(n).

        Args:
            values: Daily precipitation of the interval
            n: Interval duration (day count)

        Raises:
            DataValidityError: If n <= 1, where ln(n) is 0 or undefined
        """
        if n <= 1:
            raise DataValidityError(
                f"Evenness index undefined for a {n}-day interval", site_id=site_id, key=key
            )
        return cls.shannon_index(values) / math.log(n)

    @staticmethod
    def _ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
        """Ratio, or None when either side is absent or the denominator is 0."""
        if numerator is None or denominator is None or denominator == 0:
            return None
        return numerator / denominator

    def _evenness(
        self,
        interval: Interval,
        selected: Sequence[DailyRecord],
        totals: Dict[str, Any]
    ) -> float:
        if totals["precipitation"] is None:
            raise DataValidityError(
                "Precipitation absent on some days; evenness index undefined",
                site_id=interval.site_id, key=interval.label
            )
        return self.evenness_index(
            [record.precipitation for record in selected],
            totals["duration"],
            site_id=interval.site_id,
            key=interval.label
        )

    def summarize(
        self,
        interval: Interval,
        records: Sequence[DailyRecord],
        failures: Optional[List[FailureRecord]] = None
    ) -> SummaryRow:
        """
        Build the summary row of one interval.

        When SDI is undefined the row is still built, with SDI and AWDR
        absent, and the error is appended to ``failures``.

        Args:
            interval: Interval to summarize
            records: Enriched daily records (any site; filtered here)
            failures: Collects undefined-SDI errors; if None they are raised

        Returns:
            Summary row

        Raises:
            DataValidityError: If SDI/AWDR cannot be computed and ``failures`` is None
        """
        selected = self.select_records(interval, records)
        totals = self.reduce(selected)

        row: Dict[str, Any] = dict(totals, sdi=None, awdr=None)
        try:
            sdi = self._evenness(interval, selected, totals)
        except DataValidityError as e:
            if failures is None:
                raise
            self.logger.warning(
                f"Interval {interval.label} of {interval.site_id} has no evenness index: {e}"
            )
            failures.append(FailureRecord(
                site_id=interval.site_id,
                stage="aggregation",
                key=interval.label,
                reason=str(e)
            ))
        else:
            row["sdi"] = sdi
            row["awdr"] = totals["precipitation"] * sdi

        if not self.reduced:
            row["q_chu"] = self._ratio(totals["radiation"], totals["chu"])
            row["q_gdd"] = self._ratio(totals["radiation"], totals["gdd"])

        return SummaryRow(
            site_id=interval.site_id,
            label=interval.label,
            name=interval.name,
            start=interval.start,
            end=interval.end,
            **row
        )

    def aggregate(
        self,
        intervals: Sequence[Interval],
        records: Sequence[DailyRecord],
        strict: bool = False
    ) -> AggregationResult:
        """
        Summarize every interval, collecting per-interval failures.

        Every interval gets a row; an interval whose SDI is undefined also
        gets an ``aggregation`` failure.

        Args:
            intervals: Intervals to summarize
            records: Enriched daily records
            strict: Re-raise the first failure instead of collecting it

        Returns:
            AggregationResult with rows in interval order
        """
        result = AggregationResult()
        ordered = sorted(records, key=lambda record: (record.site_id, record.date))
        failures = None if strict else result.failures

        for interval in intervals:
            result.rows.append(self.summarize(interval, ordered, failures))

        self.logger.info(
            f"Aggregated {len(intervals)} intervals, {len(result.failures)} without SDI"
            + (" (precipitation only)" if self.reduced else "")
        )
        return result
