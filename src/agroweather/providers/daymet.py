"""
Daymet adapter.

Daymet payloads are column-oriented: ``data`` maps each column name
(with its unit suffix) to a list of values, one per day, keyed by the
``year`` and ``yday`` columns. Daymet uses a 365-day calendar, so
December 31 of leap years is not reported.
"""

from datetime import date
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .base import FieldMapping, ProviderAdapter, identity
from ..core import DateUtils
from ..core.exceptions import SchemaMismatchError
from ..models import Site
from ..processing.converter import UnitConverter


DAYMET_FILL_VALUE = -9999.0


def _value(row: Mapping[str, Any], column: str) -> Optional[float]:
    value = row.get(column)
    if value is None or float(value) == DAYMET_FILL_VALUE:
        return None
    return float(value)


def _day_length_hours(value: float, row: Mapping[str, Any]) -> Optional[float]:
    return UnitConverter.seconds_to_hours(value)


def _daily_radiation(value: float, row: Mapping[str, Any]) -> Optional[float]:
    day_length = _value(row, "dayl (s)")
    if day_length is None:
        return None
    return UnitConverter.radiation_to_daily_energy(value, day_length)


def _vpd_from_vapor_pressure(value: float, row: Mapping[str, Any]) -> Optional[float]:
    t_max = _value(row, "tmax (deg c)")
    t_min = _value(row, "tmin (deg c)")
    if t_max is None or t_min is None:
        return None
    t_mean = (t_max + t_min) / 2
    ea = UnitConverter.convert_pressure(value, "Pa", "kPa")
    return UnitConverter.vpd_from_vapor_pressure(t_mean, ea)


class DaymetAdapter(ProviderAdapter):
    """Grid-interpolated daily surface weather (Daymet)."""

    name = "daymet"

    mapping = (
        FieldMapping("dayl (s)", "day_length", _day_length_hours),
        FieldMapping("prcp (mm/day)", "precipitation", identity),
        FieldMapping("srad (W/m^2)", "radiation", _daily_radiation),
        FieldMapping("swe (kg/m^2)", "swe", identity),
        FieldMapping("tmax (deg c)", "t_max", identity),
        FieldMapping("tmin (deg c)", "t_min", identity),
        FieldMapping("vp (Pa)", "vpd", _vpd_from_vapor_pressure),
    )

    computed_fields = ("t_mean",)

    fill_values = (DAYMET_FILL_VALUE,)

    def raw_fetch(self, site_id, latitude, longitude, start_date, end_date):
        years = DateUtils.years_between(start_date, end_date)
        self.logger.debug(f"Daymet query for site {site_id}: years {years}")
        return self.api_client.get_daily(latitude, longitude, years)

    def iter_rows(self, payload: Any) -> Iterator[Tuple[date, Dict[str, Any]]]:
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise SchemaMismatchError(self.name, "data")
        for column in ("year", "yday"):
            if column not in data:
                raise SchemaMismatchError(self.name, column)

        columns = list(data.keys())
        n_rows = len(data["year"])
        for column in columns:
            if len(data[column]) != n_rows:
                self.logger.warning(
                    f"Daymet column '{column}' has {len(data[column])} values, expected {n_rows}"
                )

        for i in range(n_rows):
            row = {
                column: data[column][i] if i < len(data[column]) else None
                for column in columns
            }
            day = DateUtils.from_year_day(int(row["year"]), int(row["yday"]))
            yield day, row

    def _complete(self, values: Dict[str, Optional[float]], day: date, site: Site) -> None:
        t_max, t_min = values.get("t_max"), values.get("t_min")
        if t_max is not None and t_min is not None:
            values["t_mean"] = (t_max + t_min) / 2
        else:
            values["t_mean"] = None
