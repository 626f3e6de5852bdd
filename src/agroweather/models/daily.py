"""
Daily record models.

A DailyRecord holds one site-day of weather in canonical units. Fields a
provider cannot supply are ``None`` (absent), never zero.
"""

import datetime
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple


# Canonical weather fields a provider adapter may fill
CANONICAL_FIELDS: Tuple[str, ...] = (
    "day_length",  # hours
    "precipitation",  # mm
    "radiation",  # MJ m⁻² day⁻¹
    "t_max",  # °C
    "t_min",  # °C
    "t_mean",  # °C
    "vpd",  # kPa
    "rh",  # %
    "swe",  # kg m⁻²
    "precipitation_30d",  # mm, trailing 30-day total
)

# Fields added by the derived-variable engine
DERIVED_FIELDS: Tuple[str, ...] = (
    "et0",  # mm/day
    "extreme_precipitation",  # 0/1
    "extreme_temperature",  # 0/1
    "chu",
    "gdu",
)


@dataclass(frozen=True)
class DailyRecord:
    """One day of canonical weather for a site."""

    site_id: str
    date: datetime.date

    day_length: Optional[float] = None
    precipitation: Optional[float] = None
    radiation: Optional[float] = None
    t_max: Optional[float] = None
    t_min: Optional[float] = None
    t_mean: Optional[float] = None
    vpd: Optional[float] = None
    rh: Optional[float] = None
    swe: Optional[float] = None
    precipitation_30d: Optional[float] = None

    et0: Optional[float] = None
    extreme_precipitation: Optional[int] = None
    extreme_temperature: Optional[int] = None
    chu: Optional[float] = None
    gdu: Optional[float] = None

    @property
    def day_of_year(self) -> int:
        return self.date.timetuple().tm_yday

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def day(self) -> int:
        return self.date.day

    def has(self, name: str) -> bool:
        """Whether a field is present (not absent)."""
        return getattr(self, name) is not None

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping including calendar fields, used for export."""
        row: Dict[str, Any] = {
            "site_id": self.site_id,
            "date": self.date.isoformat(),
            "doy": self.day_of_year,
            "year": self.year,
            "month": self.month,
            "day": self.day,
        }
        for f in fields(self):
            if f.name in ("site_id", "date"):
                continue
            row[f.name] = getattr(self, f.name)
        return row


DAILY_COLUMNS: Tuple[str, ...] = (
    ("site_id", "date", "doy", "year", "month", "day")
    + CANONICAL_FIELDS
    + DERIVED_FIELDS
)
