"""
Provider adapter base.

An adapter turns one provider's native payload into canonical daily
records. Each concrete adapter declares an explicit field mapping table
(provider field -> canonical field, conversion) and a few hooks; the
query window, filtering, ordering and de-duplication are shared here.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import (
    Any, Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple, TYPE_CHECKING
)

import requests  # type: ignore

from ..core import DateUtils
from ..core.exceptions import DataValidityError, ProviderFetchError
from ..core.logger import LoggerContext
from ..models import DailyRecord, Site

if TYPE_CHECKING:
    from ..api import APIClient


# Converts one native value, given the whole native row, to canonical units.
# Returning None marks the canonical field absent.
Converter = Callable[[float, Mapping[str, Any]], Optional[float]]


def identity(value: float, row: Mapping[str, Any]) -> Optional[float]:
    return float(value)


@dataclass(frozen=True)
class FieldMapping:
    """One row of a provider's mapping table."""

    source: str
    target: str
    convert: Converter = identity


class ProviderAdapter:
    """Base class for provider adapters."""

    name = "provider"

    # Provider field -> canonical field table
    mapping: Tuple[FieldMapping, ...] = ()

    # Canonical fields computed by ``_complete``/``_finalize`` rather than mapped
    computed_fields: Tuple[str, ...] = ()

    # Native values meaning "no data"
    fill_values: Tuple[float, ...] = ()

    def __init__(self, api_client: "APIClient", logger: Optional[logging.Logger] = None):
        """
        Initialize adapter.

        Args:
            api_client: Provider HTTP client
            logger: Logger instance
        """
        self.api_client = api_client
        self.logger = logger or logging.getLogger(__name__)

    @property
    def available_fields(self) -> FrozenSet[str]:
        """Canonical fields this provider can supply."""
        return frozenset(m.target for m in self.mapping) | frozenset(self.computed_fields)

    def raw_fetch(
        self,
        site_id: str,
        latitude: float,
        longitude: float,
        start_date: date,
        end_date: date
    ) -> Any:
        """Return the provider-native payload for a point and inclusive date range."""
        raise NotImplementedError

    def iter_rows(self, payload: Any) -> Iterator[Tuple[date, Dict[str, Any]]]:
        """
        Yield ``(date, native row)`` pairs from a payload.

        Raises:
            SchemaMismatchError: If the payload lacks its date structure
        """
        raise NotImplementedError

    def query_window(self, range_start: date, range_end: date) -> Tuple[date, date]:
        """Dates sent to the provider; whole calendar years by default."""
        return DateUtils.year_span(range_start, range_end)

    def _complete(self, values: Dict[str, Optional[float]], day: date, site: Site) -> None:
        """Fill computed fields of one day in place."""

    def _finalize(self, records: List[DailyRecord]) -> List[DailyRecord]:
        """Series-level pass over the sorted, unfiltered records."""
        return records

    def _is_missing(self, value: Any) -> bool:
        if value is None or value == "":
            return True
        try:
            return float(value) in self.fill_values
        except (TypeError, ValueError):
            return True

    def map_row(self, row: Mapping[str, Any]) -> Dict[str, Optional[float]]:
        """
        Apply the mapping table to one native row.

        Missing columns and fill values leave the canonical field absent.
        """
        values: Dict[str, Optional[float]] = {}
        for entry in self.mapping:
            raw = row.get(entry.source)
            if self._is_missing(raw):
                values[entry.target] = None
                continue
            values[entry.target] = entry.convert(float(raw), row)
        return values

    def fetch(self, site: Site, start_date: date, end_date: date) -> Any:
        """
        Call ``raw_fetch``, surfacing transport problems as ProviderFetchError.
        """
        try:
            return self.raw_fetch(site.id, site.latitude, site.longitude, start_date, end_date)
        except ProviderFetchError:
            raise
        except (requests.exceptions.RequestException, TimeoutError, RuntimeError, ValueError) as e:
            raise ProviderFetchError(site.id, f"{self.name}: {e}") from e

    def fetch_and_normalize(
        self,
        site: Site,
        range_start: Any,
        range_end: Any
    ) -> List[DailyRecord]:
        """
        Fetch a site's weather and return canonical records for the range.

        Args:
            site: Site to fetch
            range_start: First date (inclusive)
            range_end: Last date (inclusive)

        Returns:
            Date-sorted records, one per date, within [range_start, range_end]

        Raises:
            DataValidityError: If range_start > range_end
            ProviderFetchError: On network or provider failure
            SchemaMismatchError: If the payload lacks its date structure
        """
        range_start = DateUtils.parse_date(range_start)
        range_end = DateUtils.parse_date(range_end)
        if range_start > range_end:
            raise DataValidityError(
                f"range_start {range_start} is after range_end {range_end}",
                site_id=site.id
            )

        query_start, query_end = self.query_window(range_start, range_end)

        with LoggerContext(self.logger, f"{self.name} fetch for site {site.id}", logging.DEBUG):
            payload = self.fetch(site, query_start, query_end)

        by_date: Dict[date, DailyRecord] = {}
        duplicates = 0
        for day, row in self.iter_rows(payload):
            if day in by_date:
                duplicates += 1
                continue
            values = self.map_row(row)
            self._complete(values, day, site)
            by_date[day] = DailyRecord(site_id=site.id, date=day, **values)

        if duplicates:
            self.logger.warning(f"{self.name}: dropped {duplicates} duplicate days for site {site.id}")

        records = self._finalize([by_date[day] for day in sorted(by_date)])
        records = [r for r in records if range_start <= r.date <= range_end]

        expected = (range_end - range_start).days + 1
        if len(records) < expected:
            self.logger.warning(
                f"{self.name}: site {site.id} has {len(records)} of {expected} days "
                f"in {range_start}..{range_end}"
            )
        else:
            self.logger.debug(f"{self.name}: site {site.id} normalized {len(records)} days")

        return records
