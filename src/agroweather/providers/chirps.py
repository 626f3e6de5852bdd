"""
CHIRPS adapter (via ClimateSERV).

CHIRPS is a satellite-derived precipitation-only product. Besides daily
precipitation the adapter derives day length from solar geometry and a
trailing 30-day precipitation total, for which it requests 29 days of
history before the range.
"""

from dataclasses import replace
from datetime import date, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .base import FieldMapping, ProviderAdapter, identity
from ..algorithms.solar import SolarGeometry
from ..core import DateUtils, constants
from ..core.exceptions import SchemaMismatchError
from ..models import DailyRecord, Site


CLIMATESERV_FILL_VALUE = -9999.0


class ChirpsAdapter(ProviderAdapter):
    """Satellite precipitation (CHIRPS daily, point average)."""

    name = "chirps"

    mapping = (
        FieldMapping("avg", "precipitation", identity),
    )

    computed_fields = ("day_length", "precipitation_30d")

    fill_values = (CLIMATESERV_FILL_VALUE,)

    window_days = constants.PRECIPITATION_INDEX_WINDOW_DAYS

    def query_window(self, range_start: date, range_end: date) -> Tuple[date, date]:
        history_start = range_start - timedelta(days=self.window_days - 1)
        return DateUtils.year_span(history_start, range_end)

    def raw_fetch(self, site_id, latitude, longitude, start_date, end_date):
        self.logger.debug(f"ClimateSERV CHIRPS job for site {site_id}: {start_date}..{end_date}")
        return self.api_client.get_daily_precipitation(latitude, longitude, start_date, end_date)

    def iter_rows(self, payload: Any) -> Iterator[Tuple[date, Dict[str, Any]]]:
        rows = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(rows, list):
            raise SchemaMismatchError(self.name, "data")

        for entry in rows:
            if "date" not in entry:
                raise SchemaMismatchError(self.name, "data[].date")
            value = entry.get("value") or {}
            yield DateUtils.parse_date(entry["date"]), {"avg": value.get("avg")}

    def _complete(self, values: Dict[str, Optional[float]], day: date, site: Site) -> None:
        solar = SolarGeometry.compute(site.latitude, DateUtils.day_of_year(day))
        values["day_length"] = solar.daylight_hours

    def _finalize(self, records: List[DailyRecord]) -> List[DailyRecord]:
        """
        Attach the trailing precipitation total over the window ending on each day.

        The total is absent unless every day of the window is present.
        """
        precipitation = {r.date: r.precipitation for r in records}
        window = [timedelta(days=offset) for offset in range(self.window_days)]

        result = []
        for record in records:
            values = [precipitation.get(record.date - offset) for offset in window]
            total = None if any(v is None for v in values) else sum(values)
            result.append(replace(record, precipitation_30d=total))
        return result
