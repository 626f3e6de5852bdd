"""
NASA POWER adapter.

POWER payloads are GeoJSON features whose ``properties.parameter`` maps
each parameter name to a ``{"YYYYMMDD": value}`` series. The
agroclimatology community already reports radiation in MJ/m²/day.
"""

from datetime import date
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .base import FieldMapping, ProviderAdapter, identity
from ..algorithms.solar import SolarGeometry
from ..core import DateUtils
from ..core.exceptions import SchemaMismatchError
from ..models import Site
from ..processing.converter import UnitConverter


POWER_FILL_VALUE = -999.0


def _vpd_from_humidity(value: float, row: Mapping[str, Any]) -> Optional[float]:
    t_mean = row.get("T2M")
    if t_mean is None or float(t_mean) == POWER_FILL_VALUE:
        return None
    return UnitConverter.vpd_from_humidity(float(t_mean), value)


class PowerAdapter(ProviderAdapter):
    """Reanalysis-based daily point weather (NASA POWER)."""

    name = "power"

    mapping = (
        FieldMapping("T2M_MAX", "t_max", identity),
        FieldMapping("T2M_MIN", "t_min", identity),
        FieldMapping("T2M", "t_mean", identity),
        FieldMapping("PRECTOTCORR", "precipitation", identity),
        FieldMapping("ALLSKY_SFC_SW_DWN", "radiation", identity),
        FieldMapping("RH2M", "rh", identity),
        FieldMapping("RH2M", "vpd", _vpd_from_humidity),
    )

    computed_fields = ("day_length",)

    fill_values = (POWER_FILL_VALUE,)

    def raw_fetch(self, site_id, latitude, longitude, start_date, end_date):
        self.logger.debug(f"POWER query for site {site_id}: {start_date}..{end_date}")
        return self.api_client.get_daily_point(latitude, longitude, start_date, end_date)

    def iter_rows(self, payload: Any) -> Iterator[Tuple[date, Dict[str, Any]]]:
        properties = payload.get("properties") if isinstance(payload, dict) else None
        parameters = properties.get("parameter") if isinstance(properties, dict) else None
        if not isinstance(parameters, dict):
            raise SchemaMismatchError(self.name, "properties.parameter")

        missing = [m.source for m in self.mapping if m.source not in parameters]
        if missing:
            self.logger.warning(f"POWER payload lacks parameters: {', '.join(sorted(set(missing)))}")

        keys = set()
        for series in parameters.values():
            keys.update(series.keys())

        for key in sorted(keys):
            row = {name: series.get(key) for name, series in parameters.items()}
            yield DateUtils.parse_date(key), row

    def _complete(self, values: Dict[str, Optional[float]], day: date, site: Site) -> None:
        solar = SolarGeometry.compute(site.latitude, DateUtils.day_of_year(day))
        values["day_length"] = solar.daylight_hours
