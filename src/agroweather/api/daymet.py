"""
Daymet single-pixel API.

Daymet serves grid-interpolated daily surface weather for North America
at year granularity.
"""

from typing import Any, Dict, Iterable, Sequence

from .client import APIClient


DAYMET_VARIABLES = ("dayl", "prcp", "srad", "swe", "tmax", "tmin", "vp")


class DaymetAPI(APIClient):
    """Daymet single-pixel extraction operations."""

    def get_daily(
        self,
        latitude: float,
        longitude: float,
        years: Iterable[int],
        variables: Sequence[str] = DAYMET_VARIABLES
    ) -> Dict[str, Any]:
        """
        Get daily values for whole calendar years at a point.

        Args:
            latitude: Latitude (degrees)
            longitude: Longitude (degrees)
            years: Calendar years to extract
            variables: Daymet variable short names

        Returns:
            Payload with a ``data`` mapping of column name to value list
        """
        years = list(years)
        self.logger.debug(f"Fetching Daymet {years} at ({latitude}, {longitude})")
        params = {
            "lat": latitude,
            "lon": longitude,
            "vars": ",".join(variables),
            "years": ",".join(str(year) for year in years),
            "format": "json",
        }
        return self.get("/data", params=params)
